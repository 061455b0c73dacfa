"""Cluster-pays evaluation."""

import logging
from collections import deque
from decimal import Decimal

from slotmath.money import to_cents
from slotmath.schemas.round_result import Position, WinKind, WinningCombination

from .grid import Grid
from .paytable import Paytable, base_pay, cluster_default_pay

logger = logging.getLogger(__name__)

# 4-directional adjacency
_NEIGHBOURS = ((-1, 0), (1, 0), (0, -1), (0, 1))


def find_clusters(grid: Grid) -> list[list[Position]]:
    """Label every 4-connected component of identical symbols.

    Seeds are taken in row-major order and each cell is visited once, so
    the output order is stable for a given grid.
    """
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    visited = [[False] * cols for _ in range(rows)]
    components: list[list[Position]] = []

    for r in range(rows):
        for c in range(cols):
            if visited[r][c]:
                continue

            symbol = grid[r][c]
            visited[r][c] = True
            component: list[Position] = []
            queue = deque([(r, c)])

            while queue:
                cur_r, cur_c = queue.popleft()
                component.append((cur_r, cur_c))
                for dr, dc in _NEIGHBOURS:
                    nr, nc = cur_r + dr, cur_c + dc
                    if 0 <= nr < rows and 0 <= nc < cols:
                        if not visited[nr][nc] and grid[nr][nc] == symbol:
                            visited[nr][nc] = True
                            queue.append((nr, nc))

            components.append(sorted(component))

    return components


def evaluate_clusters(
    grid: Grid,
    min_size: int,
    bet: Decimal,
    paytable: Paytable,
    scatters: frozenset[str] = frozenset(),
    bet_divisor: int = 10,
) -> list[WinningCombination]:
    """Report every component of at least ``min_size`` cells.

    Wilds are matched only against themselves here, so each cluster is a
    component of identical values. Scatter components never pay.
    """
    wins: list[WinningCombination] = []

    for component in find_clusters(grid):
        size = len(component)
        if size < min_size:
            continue

        first_r, first_c = component[0]
        symbol = grid[first_r][first_c]
        if symbol in scatters:
            continue

        pay = base_pay(paytable, symbol, size, cluster_default_pay)
        payout_cents = to_cents(pay * bet / bet_divisor)
        if payout_cents <= 0:
            continue

        wins.append(
            WinningCombination(
                kind=WinKind.CLUSTER,
                symbol=symbol,
                count=size,
                payout_cents=payout_cents,
                positions=component,
            )
        )
        logger.debug(
            "Cluster win: symbol=%s, size=%d, payout_cents=%d", symbol, size, payout_cents
        )

    return wins
