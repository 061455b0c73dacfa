"""Tests for the alphabet and grid generation."""

from slotmath.schemas.game_config import DEFAULT_ALPHABET, SymbolDef
from slotmath.services.engine import Alphabet, SeededRNG, count_symbols, generate_grid

from .conftest import ABC123_GRID, create_symbols


class TestAlphabet:
    """Building the drawable alphabet from config symbols."""

    def test_empty_symbols_use_default(self):
        alphabet = Alphabet.from_symbols([])
        assert alphabet.is_default
        assert alphabet.symbols == DEFAULT_ALPHABET

    def test_all_zero_weights_use_default(self):
        alphabet = Alphabet.from_symbols(
            [SymbolDef(id="A", weight=0), SymbolDef(id="B", weight=0)]
        )
        assert alphabet.is_default

    def test_zero_weight_symbol_not_drawable(self):
        alphabet = Alphabet.from_symbols(
            [SymbolDef(id="A", weight=2), SymbolDef(id="B", weight=0)]
        )
        assert alphabet.symbols == ("A",)

    def test_duplicate_ids_keep_first(self):
        alphabet = Alphabet.from_symbols(
            [SymbolDef(id="A", weight=1), SymbolDef(id="A", weight=5), SymbolDef(id="B")]
        )
        assert alphabet.symbols == ("A", "B")
        assert alphabet.weights == (1, 1)

    def test_wild_and_scatter_flags(self):
        alphabet = Alphabet.from_symbols(create_symbols("A", wild="W", scatter="S"))
        assert alphabet.wilds == frozenset({"W"})
        assert alphabet.scatters == frozenset({"S"})
        assert not alphabet.is_default


class TestDraw:
    """Single-symbol draws."""

    def test_uniform_draw_uses_floor(self):
        alphabet = Alphabet.from_symbols([])
        rng = SeededRNG("abc123")
        assert alphabet.draw(rng) == "H2"

    def test_weighted_draw_walks_cumulative_weights(self):
        alphabet = Alphabet.from_symbols(
            [SymbolDef(id="A", weight=1), SymbolDef(id="B", weight=3)]
        )
        rng = SeededRNG("abc123")
        assert [alphabet.draw(rng) for _ in range(5)] == ["A", "B", "A", "A", "B"]

    def test_each_draw_consumes_one_value(self):
        alphabet = Alphabet.from_symbols(
            [SymbolDef(id="A", weight=1), SymbolDef(id="B", weight=3)]
        )
        rng = SeededRNG("draws")
        for _ in range(9):
            alphabet.draw(rng)
        assert rng.draws == 9

    def test_weights_shape_frequencies(self):
        alphabet = Alphabet.from_symbols(
            [SymbolDef(id="A", weight=1), SymbolDef(id="B", weight=9)]
        )
        rng = SeededRNG("freq")
        draws = [alphabet.draw(rng) for _ in range(20_000)]
        share = draws.count("B") / len(draws)
        assert abs(share - 0.9) < 0.01


class TestGenerateGrid:
    """Grid generation."""

    def test_abc123_default_grid(self):
        grid = generate_grid(3, 5, Alphabet.from_symbols([]), SeededRNG("abc123"))
        assert grid == ABC123_GRID

    def test_shape_and_draw_count(self):
        rng = SeededRNG("shape")
        grid = generate_grid(4, 6, Alphabet.from_symbols([]), rng)
        assert len(grid) == 4
        assert all(len(row) == 6 for row in grid)
        assert rng.draws == 24

    def test_count_symbols(self):
        grid = [["S", "A"], ["A", "S"], ["S", "B"]]
        assert count_symbols(grid, frozenset({"S"})) == 3
        assert count_symbols(grid, frozenset()) == 0
