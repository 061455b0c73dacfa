"""Cascade (tumble) engine.

Loop: evaluate -> remove every winning cell at once -> gravity -> refill ->
evaluate again, until a grid produces no wins or the iteration cap is hit.
"""

import logging
from dataclasses import dataclass, field

from slotmath.schemas.round_result import CascadeStep, Position, WinningCombination

from .evaluators import Evaluate
from .grid import Alphabet, Grid
from .prng import SeededRNG

logger = logging.getLogger(__name__)

# Grid with holes left by removed cells
SparseGrid = list[list[str | None]]


@dataclass
class CascadeOutcome:
    """Result of running the cascade loop on one grid."""

    grid: Grid
    combinations: list[WinningCombination] = field(default_factory=list)
    iterations: int = 0
    steps: list[CascadeStep] = field(default_factory=list)
    limit_reached: bool = False

    @property
    def total_win_cents(self) -> int:
        return sum(c.payout_cents for c in self.combinations)


def winning_positions(combinations: list[WinningCombination]) -> list[Position]:
    """Union of all winning cells, row-major."""
    return sorted({pos for combo in combinations for pos in combo.positions})


def remove_cells(grid: Grid, positions: list[Position]) -> SparseGrid:
    """Copy of ``grid`` with ``positions`` emptied."""
    sparse: SparseGrid = [list(row) for row in grid]
    for row, col in positions:
        sparse[row][col] = None
    return sparse


def apply_gravity(grid: SparseGrid) -> SparseGrid:
    """Drop the remaining symbols of each column to the bottom.

    Relative order within a column is kept; holes end up on top.
    """
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    settled: SparseGrid = [[None] * cols for _ in range(rows)]

    for col in range(cols):
        remaining = [grid[row][col] for row in range(rows) if grid[row][col] is not None]
        offset = rows - len(remaining)
        for i, symbol in enumerate(remaining):
            settled[offset + i][col] = symbol

    return settled


def refill_grid(grid: SparseGrid, alphabet: Alphabet, rng: SeededRNG) -> Grid:
    """Fill holes column by column, top to bottom, one draw per hole."""
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    filled = [list(row) for row in grid]

    for col in range(cols):
        for row in range(rows):
            if filled[row][col] is None:
                filled[row][col] = alphabet.draw(rng)

    return filled  # type: ignore[return-value]


def run_cascade(
    initial_grid: Grid,
    evaluate: Evaluate,
    alphabet: Alphabet,
    rng: SeededRNG,
    max_iterations: int,
) -> CascadeOutcome:
    """Run the cascade loop starting from ``initial_grid``.

    At most ``max_iterations`` refills happen. The grid left after the last
    refill is still evaluated and its wins awarded; if it wins,
    ``limit_reached`` is set instead of cascading further. Never raises.

    Args:
        initial_grid: Grid as generated; not modified.
        evaluate: Bound evaluator for the round's mechanism.
        alphabet: Symbols used for refills.
        rng: The round's RNG, continued from grid generation.
        max_iterations: Cascade cap.

    Returns:
        CascadeOutcome with every win tagged by its cascade index.
    """
    grid: Grid = [list(row) for row in initial_grid]
    outcome = CascadeOutcome(grid=grid)

    while True:
        wins = evaluate(grid)
        if not wins:
            break

        outcome.combinations.extend(
            combo.model_copy(update={"cascade_index": outcome.iterations}) for combo in wins
        )

        if outcome.iterations >= max_iterations:
            outcome.limit_reached = True
            logger.debug(
                "Cascade limit reached: max_iterations=%d, pending_wins=%d",
                max_iterations,
                len(wins),
            )
            break

        removed = winning_positions(wins)
        grid = refill_grid(apply_gravity(remove_cells(grid, removed)), alphabet, rng)
        outcome.iterations += 1
        outcome.steps.append(
            CascadeStep(index=outcome.iterations, removed=removed, grid=[list(row) for row in grid])
        )
        logger.debug(
            "Cascade %d: removed=%d cells, wins=%d",
            outcome.iterations,
            len(removed),
            len(wins),
        )

    outcome.grid = grid
    return outcome
