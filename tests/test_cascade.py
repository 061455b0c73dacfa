"""Tests for the cascade engine.

Critical scenarios tested:
- Removal, gravity and refill order
- Loop stops on the first grid without wins
- Iteration cap: final evaluation, limit flag, bounded evaluations
"""

import logging

from slotmath.schemas.round_result import WinKind, WinningCombination
from slotmath.services.engine import (
    Alphabet,
    SeededRNG,
    apply_gravity,
    refill_grid,
    remove_cells,
    run_cascade,
    winning_positions,
)

from .conftest import create_alphabet


def wins_on(symbol: str):
    """Evaluator stub paying 1.00 for every cell showing ``symbol``."""

    def evaluate(grid):
        positions = [
            (r, c) for r, row in enumerate(grid) for c, value in enumerate(row) if value == symbol
        ]
        if not positions:
            return []
        return [
            WinningCombination(
                kind=WinKind.CLUSTER,
                symbol=symbol,
                count=len(positions),
                payout_cents=100,
                positions=positions,
            )
        ]

    return evaluate


def always_wins(calls: list[int]):
    """Evaluator stub that wins on (0, 0) every time and counts its calls."""

    def evaluate(grid):
        calls.append(1)
        return [
            WinningCombination(
                kind=WinKind.CLUSTER,
                symbol=grid[0][0],
                count=1,
                payout_cents=50,
                positions=[(0, 0)],
            )
        ]

    return evaluate


class TestGridOperations:
    """remove / gravity / refill."""

    def test_remove_cells_copies(self):
        grid = [["A", "B"], ["C", "D"]]
        sparse = remove_cells(grid, [(0, 1), (1, 0)])
        assert sparse == [["A", None], [None, "D"]]
        assert grid == [["A", "B"], ["C", "D"]]

    def test_gravity_drops_symbols_keeping_order(self):
        sparse = [["A", None], [None, "B"], ["C", None]]
        assert apply_gravity(sparse) == [[None, None], ["A", None], ["C", "B"]]

    def test_refill_is_column_major_top_to_bottom(self):
        sparse = [[None, None], [None, "B"]]
        filled = refill_grid(sparse, Alphabet.from_symbols([]), SeededRNG("abc123"))
        # draws 1, 2, 3 of "abc123" on the default alphabet: H2, H3, H1
        assert filled == [["H2", "H1"], ["H3", "B"]]

    def test_refill_draws_once_per_hole(self):
        rng = SeededRNG("holes")
        refill_grid([[None, "A", None], [None, None, "B"]], Alphabet.from_symbols([]), rng)
        assert rng.draws == 4

    def test_winning_positions_union(self):
        combos = [
            WinningCombination(kind=WinKind.LINE, symbol="A", count=3, payout_cents=1, positions=[(1, 0), (1, 1), (1, 2)]),
            WinningCombination(kind=WinKind.LINE, symbol="A", count=3, payout_cents=1, positions=[(0, 0), (1, 1), (2, 2)]),
        ]
        assert winning_positions(combos) == [(0, 0), (1, 0), (1, 1), (1, 2), (2, 2)]


class TestCascadeLoop:
    """run_cascade behaviour."""

    def test_no_initial_win_no_cascade(self):
        grid = [["B", "C"], ["C", "B"]]
        outcome = run_cascade(grid, wins_on("A"), create_alphabet("X"), SeededRNG("s"), 10)
        assert outcome.iterations == 0
        assert outcome.combinations == []
        assert outcome.grid == grid
        assert not outcome.limit_reached

    def test_single_cascade_then_stop(self):
        grid = [["A", "B"], ["A", "C"]]
        outcome = run_cascade(grid, wins_on("A"), create_alphabet("X"), SeededRNG("s"), 10)
        assert outcome.iterations == 1
        assert outcome.grid == [["X", "B"], ["X", "C"]]
        assert len(outcome.steps) == 1
        assert outcome.steps[0].index == 1
        assert outcome.steps[0].removed == [(0, 0), (1, 0)]
        assert outcome.total_win_cents == 100

    def test_gravity_applied_before_refill(self):
        grid = [["B"], ["A"], ["C"]]
        outcome = run_cascade(grid, wins_on("A"), create_alphabet("X"), SeededRNG("s"), 10)
        assert outcome.grid == [["X"], ["B"], ["C"]]

    def test_initial_grid_not_mutated(self):
        grid = [["A", "B"], ["A", "C"]]
        run_cascade(grid, wins_on("A"), create_alphabet("X"), SeededRNG("s"), 10)
        assert grid == [["A", "B"], ["A", "C"]]

    def test_cascade_index_tags_each_evaluation(self):
        calls: list[int] = []
        outcome = run_cascade([["A"]], always_wins(calls), create_alphabet("X"), SeededRNG("s"), 3)
        assert [c.cascade_index for c in outcome.combinations] == [0, 1, 2, 3]


class TestCascadeLimit:
    """Iteration cap."""

    def test_limit_bounds_evaluations(self):
        calls: list[int] = []
        outcome = run_cascade([["A"]], always_wins(calls), create_alphabet("X"), SeededRNG("s"), 3)
        assert len(calls) == 4
        assert outcome.iterations == 3
        assert outcome.limit_reached

    def test_final_evaluation_awarded(self):
        calls: list[int] = []
        outcome = run_cascade([["A"]], always_wins(calls), create_alphabet("X"), SeededRNG("s"), 2)
        assert outcome.total_win_cents == 3 * 50

    def test_zero_cap_evaluates_once(self):
        calls: list[int] = []
        outcome = run_cascade([["A"]], always_wins(calls), create_alphabet("X"), SeededRNG("s"), 0)
        assert len(calls) == 1
        assert outcome.iterations == 0
        assert outcome.limit_reached

    def test_limit_not_set_when_final_grid_is_dead(self):
        grid = [["A"], ["A"]]
        outcome = run_cascade(grid, wins_on("A"), create_alphabet("X"), SeededRNG("s"), 1)
        assert outcome.iterations == 1
        assert not outcome.limit_reached

    def test_limit_is_not_a_warning(self, caplog):
        """Batches report limited rounds in aggregate, not per round."""
        calls: list[int] = []
        with caplog.at_level(logging.DEBUG, logger="slotmath.services.engine"):
            run_cascade([["A"]], always_wins(calls), create_alphabet("X"), SeededRNG("s"), 2)
        assert any("Cascade limit reached" in r.getMessage() for r in caplog.records)
        assert all(r.levelno < logging.WARNING for r in caplog.records)
