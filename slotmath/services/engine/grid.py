"""Symbol alphabet and grid generation."""

import logging
from dataclasses import dataclass

from slotmath.schemas.game_config import DEFAULT_ALPHABET, SymbolDef

from .prng import SeededRNG

logger = logging.getLogger(__name__)

Grid = list[list[str]]


@dataclass(frozen=True)
class Alphabet:
    """Drawable symbols with their weights and evaluation flags."""

    symbols: tuple[str, ...]
    weights: tuple[int, ...]
    wilds: frozenset[str] = frozenset()
    scatters: frozenset[str] = frozenset()
    is_default: bool = False

    @classmethod
    def from_symbols(cls, symbol_defs: list[SymbolDef]) -> "Alphabet":
        """Build the alphabet from config symbols.

        Duplicate ids keep their first definition. When nothing is drawable
        (no symbols, or every weight is 0) the built-in alphabet is used.
        """
        seen: set[str] = set()
        unique: list[SymbolDef] = []
        for symbol in symbol_defs:
            if symbol.id in seen:
                continue
            seen.add(symbol.id)
            unique.append(symbol)

        wilds = frozenset(s.id for s in unique if s.is_wild)
        scatters = frozenset(s.id for s in unique if s.is_scatter)
        drawable = [s for s in unique if s.weight > 0]

        if not drawable:
            logger.debug(
                "No drawable symbols in config (%d defined); using default alphabet",
                len(symbol_defs),
            )
            return cls(
                symbols=DEFAULT_ALPHABET,
                weights=tuple(1 for _ in DEFAULT_ALPHABET),
                is_default=True,
            )

        return cls(
            symbols=tuple(s.id for s in drawable),
            weights=tuple(s.weight for s in drawable),
            wilds=wilds,
            scatters=scatters,
        )

    @property
    def total_weight(self) -> int:
        return sum(self.weights)

    @property
    def is_uniform(self) -> bool:
        return len(set(self.weights)) <= 1

    def draw(self, rng: SeededRNG) -> str:
        """Draw one symbol; always consumes exactly one RNG value."""
        roll = rng.next()
        if self.is_uniform:
            return self.symbols[int(roll * len(self.symbols))]

        target = roll * self.total_weight
        cumulative = 0
        for symbol, weight in zip(self.symbols, self.weights):
            cumulative += weight
            if target < cumulative:
                return symbol
        return self.symbols[-1]


def generate_grid(rows: int, cols: int, alphabet: Alphabet, rng: SeededRNG) -> Grid:
    """Fill a rows x cols grid, one draw per cell in row-major order.

    The draw order is part of the replay contract.
    """
    grid = [[alphabet.draw(rng) for _ in range(cols)] for _ in range(rows)]
    logger.debug("Generated %dx%d grid: %s", rows, cols, grid)
    return grid


def count_symbols(grid: Grid, symbols: frozenset[str]) -> int:
    return sum(1 for row in grid for cell in row if cell in symbols)
