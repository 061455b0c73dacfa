"""Paytable lookups shared by the evaluators."""

from collections.abc import Callable
from decimal import Decimal

Paytable = dict[str, dict[int, Decimal]]
PayFormula = Callable[[int], Decimal]

# Shortest run that can pay on lines and ways
MIN_RUN = 3

_HALF = Decimal("0.5")


def lines_default_pay(count: int) -> Decimal:
    return Decimal((count - 2) * 5)


def ways_default_pay(count: int) -> Decimal:
    return Decimal((count - 2) * 2)


def cluster_default_pay(count: int) -> Decimal:
    return Decimal(count) * _HALF


def base_pay(paytable: Paytable, symbol: str, count: int, default: PayFormula) -> Decimal:
    """Bet multiplier for ``count`` of ``symbol``.

    An empty paytable uses ``default`` for every symbol. Otherwise the entry
    with the highest count not above ``count`` applies, and symbols without
    entries pay nothing.
    """
    if not paytable:
        return default(count)

    pays = paytable.get(symbol)
    if not pays:
        return Decimal(0)

    eligible = [n for n in pays if n <= count]
    if not eligible:
        return Decimal(0)
    return pays[max(eligible)]


def is_monotonic(pays: dict[int, Decimal]) -> bool:
    """True when pays never decrease as the count grows."""
    ordered = [pays[n] for n in sorted(pays)]
    return all(a <= b for a, b in zip(ordered, ordered[1:]))
