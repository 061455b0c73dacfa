"""Ways-to-win evaluation (left to right, any row)."""

import logging
from decimal import Decimal

from slotmath.money import to_cents
from slotmath.schemas.round_result import Position, WinKind, WinningCombination

from .grid import Grid
from .paytable import MIN_RUN, Paytable, base_pay, ways_default_pay

logger = logging.getLogger(__name__)


def start_symbols(grid: Grid, wilds: frozenset[str], scatters: frozenset[str]) -> list[str]:
    """Distinct symbols that can open a way, in row order.

    A wild on the first reel also lets every symbol of the second reel open.
    """
    rows = len(grid)
    candidates: list[str] = []

    def add_column(col: int) -> None:
        for row in range(rows):
            value = grid[row][col]
            if value in wilds or value in scatters or value in candidates:
                continue
            candidates.append(value)

    add_column(0)
    has_wild = any(grid[row][0] in wilds for row in range(rows))
    if has_wild and len(grid[0]) > 1:
        add_column(1)
    return candidates


def evaluate_ways(
    grid: Grid,
    bet: Decimal,
    paytable: Paytable,
    wilds: frozenset[str] = frozenset(),
    scatters: frozenset[str] = frozenset(),
    bet_divisor: int = 20,
) -> list[WinningCombination]:
    """Evaluate ways wins for each start symbol.

    ways = product of matching cells per reel over the contiguous reels
    from reel 0; the run stops at the first reel without a match.
    """
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    if cols < MIN_RUN:
        return []

    wins: list[WinningCombination] = []
    for symbol in start_symbols(grid, wilds, scatters):
        ways = 1
        reels = 0
        positions: list[Position] = []

        for col in range(cols):
            matches = [
                (row, col)
                for row in range(rows)
                if grid[row][col] == symbol or grid[row][col] in wilds
            ]
            if not matches:
                break
            reels += 1
            ways *= len(matches)
            positions.extend(matches)

        if reels < MIN_RUN:
            continue

        pay = base_pay(paytable, symbol, reels, ways_default_pay)
        payout_cents = to_cents(pay * ways * bet / bet_divisor)
        if payout_cents <= 0:
            continue

        wins.append(
            WinningCombination(
                kind=WinKind.WAY,
                symbol=symbol,
                count=reels,
                payout_cents=payout_cents,
                positions=positions,
                ways=ways,
            )
        )
        logger.debug(
            "Ways win: symbol=%s, reels=%d, ways=%d, payout_cents=%d",
            symbol,
            reels,
            ways,
            payout_cents,
        )

    return wins
