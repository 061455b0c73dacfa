"""Weighted prize-tier selection for the ticket family."""

import logging
from decimal import Decimal

from slotmath.schemas.game_config import PrizeTier, TierMode

from .prng import SeededRNG

logger = logging.getLogger(__name__)

# Returned when a ticket has no prize table at all
LOSING_TIER = PrizeTier(id="default_lose", payout_value=Decimal("0"), is_win=False)


def tier_mass(tier: PrizeTier, mode: TierMode) -> float:
    """Raw selection mass of a tier; negative values count as 0."""
    if mode == TierMode.POOL:
        raw = tier.weight
    else:
        raw = tier.probability if tier.probability is not None else tier.weight
    if raw is None:
        return 0.0
    return max(0.0, float(raw))


def normalized_probabilities(tiers: list[PrizeTier], mode: TierMode) -> list[float]:
    """Masses scaled to sum to 1. All zeros when the table has no mass."""
    masses = [tier_mass(tier, mode) for tier in tiers]
    total = sum(masses)
    if total <= 0:
        return [0.0] * len(masses)
    return [mass / total for mass in masses]


def select_tier(
    tiers: list[PrizeTier],
    rng: SeededRNG,
    mode: TierMode = TierMode.PROBABILITY,
) -> PrizeTier:
    """Pick one tier with a single draw walked against cumulative mass.

    Never fails: an empty table yields ``LOSING_TIER``, a table without mass
    yields its last tier (no draw consumed), and rounding shortfall on the
    walk also falls back to the last tier.
    """
    if not tiers:
        logger.debug("Empty prize table; using %s", LOSING_TIER.id)
        return LOSING_TIER

    probabilities = normalized_probabilities(tiers, mode)
    if sum(probabilities) <= 0:
        logger.debug("Prize table has no mass; falling back to last tier %s", tiers[-1].id)
        return tiers[-1]

    roll = rng.next()
    cumulative = 0.0
    for tier, probability in zip(tiers, probabilities):
        cumulative += probability
        if roll < cumulative:
            return tier

    return tiers[-1]
