"""Main entry point for round resolution.

This module provides the primary interface of the engine:
- resolve(): Resolves one round of any game family
- resolve_round(): Reel family (grid, evaluation, cascades, scatters)
- resolve_ticket(): Ticket family (tier selection, multiplier, reveal map)

Every function here is pure: the outcome depends only on the config and the
seed, and one RNG instance is threaded through every step in a fixed order.
"""

import logging

from slotmath.money import to_cents
from slotmath.schemas.game_config import GameConfig, PrizeTier, TicketConfig
from slotmath.schemas.round_result import Diagnostic, RoundResult, TicketResult

from .cascade import CascadeOutcome, run_cascade
from .evaluators import build_evaluator
from .grid import Alphabet, count_symbols, generate_grid
from .prng import SeededRNG
from .scratch import reveal, roll_multiplier
from .tiers import select_tier

logger = logging.getLogger(__name__)

# Range of the presentation seed handed to the rendering layer
PRESENTATION_SEED_RANGE = 1_000_000


def free_spins_for(award: dict[int, int], scatter_count: int) -> int:
    """Free spins for ``scatter_count`` scatters; highest key not above it."""
    eligible = [n for n in award if n <= scatter_count]
    if not eligible:
        return 0
    return award[max(eligible)]


def resolve(config: GameConfig | TicketConfig, seed: str | int) -> RoundResult | TicketResult:
    """Resolve one round and return its result.

    Dispatches on the config family. The same config and seed always give
    the same result.

    Example:
        >>> result = resolve(GameConfig(), "abc123")
        >>> payload = result.model_dump(mode="json")
    """
    if isinstance(config, GameConfig):
        return resolve_round(config, seed)

    if isinstance(config, TicketConfig):
        return resolve_ticket(config, seed)

    logger.error("Unknown config type received: %s", type(config).__name__)
    raise TypeError(f"Unknown config type: {type(config).__name__}")


def resolve_round(config: GameConfig, seed: str | int) -> RoundResult:
    """Resolve one reel round.

    Steps:
    1. Generate the grid (rows x cols draws, row-major)
    2. Evaluate with the mechanism's evaluator
    3. Cascade when enabled, continuing the same RNG for refills
    4. Count scatters on the initial grid and award free spins

    Never raises for a structurally valid config: anomalies such as an empty
    alphabet or unusable lines are recovered locally and listed in
    ``diagnostics``.
    """
    logger.info(
        "Resolving round: game=%s, seed=%s, mechanism=%s, grid=%dx%d",
        config.game_id,
        seed,
        config.mechanism.kind,
        config.rows,
        config.cols,
    )
    diagnostics: list[str] = []
    rng = SeededRNG(seed)

    alphabet = Alphabet.from_symbols(config.symbols)
    if alphabet.is_default:
        diagnostics.append(Diagnostic.DEFAULT_ALPHABET.value)

    evaluate = build_evaluator(config, alphabet, diagnostics)
    initial_grid = generate_grid(config.rows, config.cols, alphabet, rng)

    if config.cascade_enabled:
        outcome = run_cascade(initial_grid, evaluate, alphabet, rng, config.max_cascades)
    else:
        outcome = CascadeOutcome(
            grid=[list(row) for row in initial_grid],
            combinations=evaluate(initial_grid),
        )

    if outcome.limit_reached:
        diagnostics.append(Diagnostic.CASCADE_LIMIT_REACHED.value)

    features: list[str] = []
    if outcome.iterations > 0:
        features.append("cascade")

    scatter_count = count_symbols(initial_grid, alphabet.scatters)
    free_spins = free_spins_for(config.scatter.free_spins_award, scatter_count)
    if free_spins > 0:
        features.append("free_spins")

    result = RoundResult(
        game_id=config.game_id,
        seed=str(seed),
        initial_grid=initial_grid,
        grid=outcome.grid,
        combinations=outcome.combinations,
        total_win_cents=outcome.total_win_cents,
        bet=config.bet,
        cascade_count=outcome.iterations,
        cascade_limit_reached=outcome.limit_reached,
        cascades=outcome.steps,
        features_triggered=features,
        diagnostics=diagnostics,
        scatter_count=scatter_count,
        free_spins_awarded=free_spins,
    )

    logger.info(
        "Round resolved: game=%s, seed=%s, win_cents=%d, combinations=%d, cascades=%d",
        config.game_id,
        seed,
        result.total_win_cents,
        len(result.combinations),
        result.cascade_count,
    )
    return result


def _find_tier(tiers: list[PrizeTier], tier_id: str) -> PrizeTier | None:
    for tier in tiers:
        if tier.id == tier_id:
            return tier
    return None


def resolve_ticket(
    config: TicketConfig,
    seed: str | int,
    forced_tier_id: str | None = None,
) -> TicketResult:
    """Resolve one scratch ticket.

    Steps:
    1. Draw the presentation seed
    2. Use the forced tier, or select one from the prize table
    3. Lay out the card with the category's reveal strategy
    4. Roll the multiplier for the final tier (winning tiers only), so a
       second-chance upgrade can carry one

    Args:
        config: Ticket configuration.
        seed: Round seed.
        forced_tier_id: Tier to award without a selection draw, as when the
            caller deals from a finite deck. An unknown id falls back to
            normal selection.

    Returns:
        TicketResult with prizes in integer cents of the ticket currency.
    """
    logger.info(
        "Resolving ticket: game=%s, seed=%s, category=%s",
        config.game_id,
        seed,
        config.category.value,
    )
    diagnostics: list[str] = []
    rng = SeededRNG(seed)

    presentation_seed = int(rng.next() * PRESENTATION_SEED_RANGE)

    tier = None
    if forced_tier_id is not None:
        tier = _find_tier(config.tiers, forced_tier_id)
        if tier is None:
            logger.warning(
                "Forced tier not found: game=%s, tier=%s; selecting normally",
                config.game_id,
                forced_tier_id,
            )
            diagnostics.append(Diagnostic.FORCED_TIER_NOT_FOUND.value)

    if tier is None:
        if not config.tiers:
            diagnostics.append(Diagnostic.EMPTY_PRIZE_TABLE.value)
        tier = select_tier(config.tiers, rng, config.tier_mode)

    outcome = reveal(config, tier, rng)
    tier = outcome.tier
    multiplier = roll_multiplier(config.features.multipliers, tier, rng)

    features = list(outcome.features)
    if multiplier > 1:
        features.append("multiplier")

    base_prize_cents = to_cents(tier.payout_value * config.ticket_price) if tier.is_win else 0

    result = TicketResult(
        game_id=config.game_id,
        seed=str(seed),
        tier_id=tier.id,
        is_win=tier.is_win,
        base_prize_cents=base_prize_cents,
        multiplier=multiplier,
        final_prize_cents=base_prize_cents * multiplier,
        reveal_map=outcome.reveal_map,
        winning_numbers=outcome.winning_numbers,
        target_symbol=outcome.target_symbol,
        near_miss=outcome.near_miss,
        features_triggered=features,
        diagnostics=diagnostics,
        presentation_seed=presentation_seed,
    )

    logger.info(
        "Ticket resolved: game=%s, seed=%s, tier=%s, prize_cents=%d",
        config.game_id,
        seed,
        result.tier_id,
        result.final_prize_cents,
    )
    return result
