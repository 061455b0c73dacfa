"""Fixed-payline evaluation."""

import logging
from decimal import Decimal

from slotmath.money import to_cents
from slotmath.schemas.round_result import WinKind, WinningCombination

from .grid import Grid
from .paytable import MIN_RUN, Paytable, base_pay, lines_default_pay

logger = logging.getLogger(__name__)


def line_fits(line: list[int], rows: int, cols: int) -> bool:
    """A line fits when it has one in-range row for each of its columns."""
    if not line or len(line) > cols:
        return False
    return all(0 <= row < rows for row in line)


def left_run(
    values: list[str], wilds: frozenset[str], scatters: frozenset[str]
) -> tuple[str | None, int]:
    """Longest left-anchored run, wild-inclusive.

    The run symbol is the first non-wild symbol; a run made only of wilds
    pays as the leading wild. Scatters end a run.
    """
    target: str | None = None
    count = 0
    for value in values:
        if value in scatters:
            break
        if value in wilds:
            count += 1
            continue
        if target is None:
            target = value
        elif value != target:
            break
        count += 1

    if target is None and count:
        target = values[0]
    return target, count


def evaluate_lines(
    grid: Grid,
    lines: list[list[int]],
    bet_per_line: Decimal,
    paytable: Paytable,
    wilds: frozenset[str] = frozenset(),
    scatters: frozenset[str] = frozenset(),
) -> list[WinningCombination]:
    """Evaluate every payline left to right.

    Lines that do not fit the grid are skipped. At most one win per line:
    the longest run of three or more starting at column 0.
    """
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    wins: list[WinningCombination] = []

    for line_index, line in enumerate(lines, start=1):
        if not line_fits(line, rows, cols):
            logger.debug("Skipping line %d (%s) on %dx%d grid", line_index, line, rows, cols)
            continue

        values = [grid[row][col] for col, row in enumerate(line)]
        symbol, count = left_run(values, wilds, scatters)
        if symbol is None or count < MIN_RUN:
            continue

        payout_cents = to_cents(base_pay(paytable, symbol, count, lines_default_pay) * bet_per_line)
        if payout_cents <= 0:
            continue

        wins.append(
            WinningCombination(
                kind=WinKind.LINE,
                symbol=symbol,
                count=count,
                payout_cents=payout_cents,
                positions=[(line[col], col) for col in range(count)],
                line_index=line_index,
            )
        )
        logger.debug(
            "Line %d win: symbol=%s, count=%d, payout_cents=%d",
            line_index,
            symbol,
            count,
            payout_cents,
        )

    return wins
