"""Seeded pseudo-random stream.

Every round owns one ``SeededRNG`` instance and passes it explicitly to each
component that draws. The sequence is fixed by the seed alone, bit for bit:

- string seeds are folded into 32 bits with a multiplicative hash over their
  UTF-16 code units, starting from ``0xdeadbeef``
- integer seeds are masked to 32 bits and folded through the same hash as
  their decimal string, so ``42`` and ``"42"`` give the same stream
- ``next()`` mixes the state with two xor-shift/multiply rounds and returns
  ``state / 2**32``
"""

import logging
from collections.abc import Sequence
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_SEED_BASIS = 0xDEADBEEF
_SEED_PRIME = 2654435761
_MIX_A = 2246822507
_MIX_B = 3266489909
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK32


def hash_seed(seed: str) -> int:
    """Fold a string seed into the initial 32-bit state."""
    h = _SEED_BASIS
    data = seed.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        h = _imul(h ^ code_unit, _SEED_PRIME)
    return h


class SeededRNG:
    """Deterministic float stream in [0, 1)."""

    __slots__ = ("_state", "draws")

    def __init__(self, seed: str | int):
        if isinstance(seed, int):
            seed = str(seed & _MASK32)
        self._state = hash_seed(str(seed))
        self.draws = 0
        logger.debug("RNG seeded: seed=%r, state=%#010x", seed, self._state)

    @property
    def state(self) -> int:
        return self._state

    def next(self) -> float:
        h = self._state
        h = _imul(h ^ (h >> 16), _MIX_A)
        h = _imul(h ^ (h >> 13), _MIX_B)
        self._state = h
        self.draws += 1
        return h / _TWO_POW_32

    def range(self, min_value: int, max_value: int) -> int:
        """Integer in [min_value, max_value], both inclusive."""
        if max_value < min_value:
            min_value, max_value = max_value, min_value
        return min_value + int(self.next() * (max_value - min_value + 1))

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise IndexError("Cannot pick from an empty sequence")
        return items[self.range(0, len(items) - 1)]

    def pick_unique(self, items: Sequence[T], count: int) -> list[T]:
        """Up to ``count`` distinct elements, in draw order."""
        pool = list(items)
        picked: list[T] = []
        for _ in range(count):
            if not pool:
                break
            picked.append(pool.pop(self.range(0, len(pool) - 1)))
        return picked
