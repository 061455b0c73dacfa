"""Fixed-point money helpers.

Payouts are accumulated as integer cents so that long cascades and batch
totals never drift; ``Decimal`` values appear only at the model boundary.
"""

from decimal import ROUND_HALF_EVEN, Decimal

CENTS_PER_UNIT = 100

_ONE = Decimal(1)
_CENT = Decimal("0.01")
_MULTIPLIER_QUANTUM = Decimal("0.0001")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # repr keeps the shortest round-tripping form (0.1 -> "0.1")
        return Decimal(repr(value))
    return Decimal(value)


def to_cents(value: Decimal | int | float | str) -> int:
    """Convert a currency amount to whole cents, rounding half to even."""
    cents = (to_decimal(value) * CENTS_PER_UNIT).quantize(_ONE, rounding=ROUND_HALF_EVEN)
    return int(cents)


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / CENTS_PER_UNIT).quantize(_CENT)


def win_multiplier(win_cents: int, bet_cents: int) -> Decimal:
    """Win expressed in bets, to four decimal places."""
    if bet_cents <= 0:
        return Decimal("0.0000")
    return (Decimal(win_cents) / Decimal(bet_cents)).quantize(
        _MULTIPLIER_QUANTUM, rounding=ROUND_HALF_EVEN
    )
