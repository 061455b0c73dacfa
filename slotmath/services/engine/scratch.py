"""Scratch-card reveal strategies.

A strategy turns the already selected prize tier into the card the player
scratches. Strategies never change whether a card wins, with one exception:
MATCH second chance may upgrade a loss to the lowest winning tier.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from slotmath.schemas.game_config import (
    MultiplierFeature,
    PrizeTier,
    TicketCategory,
    TicketConfig,
    WinLogic,
)

from .prng import SeededRNG

logger = logging.getLogger(__name__)

DEFAULT_WIN_SYMBOLS = ("WIN",)
DEFAULT_LOSE_SYMBOLS = ("LOSE1", "LOSE2", "LOSE3")
# Safe BONUS filler when every pool number is a winning number
BONUS_FALLBACK_SYMBOL = "LOSE"


@dataclass
class SymbolPools:
    win: list[str]
    lose: list[str]


@dataclass
class RevealOutcome:
    """Card layout produced by a reveal strategy."""

    reveal_map: list[str]
    tier: PrizeTier
    winning_numbers: list[str] | None = None
    target_symbol: str | None = None
    near_miss: bool = False
    features: list[str] = field(default_factory=list)


# Type alias for strategy functions
RevealStrategy = Callable[[TicketConfig, PrizeTier, SeededRNG], RevealOutcome]

# Strategy registry: maps card category to strategy
_strategies: dict[TicketCategory, RevealStrategy] = {}


def reveal_strategy(category: TicketCategory) -> Callable[[RevealStrategy], RevealStrategy]:
    """Decorator to register the reveal strategy for a card category."""

    def decorator(func: RevealStrategy) -> RevealStrategy:
        if category in _strategies:
            logger.warning("Overwriting existing reveal strategy for %s", category)
        _strategies[category] = func
        logger.debug("Registered reveal strategy for %s: %s", category, func.__name__)
        return func

    return decorator


def reveal(config: TicketConfig, tier: PrizeTier, rng: SeededRNG) -> RevealOutcome:
    """Build the card for ``tier`` with the strategy of ``config.category``.

    Raises:
        KeyError: If no strategy is registered for the category.
    """
    strategy = _strategies.get(config.category)
    if strategy is None:
        raise KeyError(f"No reveal strategy registered for category: {config.category}")
    return strategy(config, tier, rng)


def _unique(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


def symbol_pools(config: TicketConfig) -> SymbolPools:
    """Win and lose symbol pools for a card.

    Win symbols come from the config, else from the winning tiers. Lose
    symbols come from the config, else a built-in set.
    """
    win = _unique(config.win_symbols)
    if not win:
        win = _unique([tier.prize_symbol for tier in config.tiers if tier.is_win])
    if not win:
        win = list(DEFAULT_WIN_SYMBOLS)

    lose = _unique(config.lose_symbols) or list(DEFAULT_LOSE_SYMBOLS)
    return SymbolPools(win=win, lose=lose)


def random_positions(cell_count: int, count: int, rng: SeededRNG) -> list[int]:
    """Up to ``count`` distinct cell indices, one draw each."""
    indices = list(range(cell_count))
    positions: list[int] = []
    for _ in range(min(count, cell_count)):
        positions.append(indices.pop(int(rng.next() * len(indices))))
    return positions


def lowest_winning_tier(tiers: list[PrizeTier]) -> PrizeTier | None:
    """Winning tier with the smallest payout; the first one on ties."""
    winners = [tier for tier in tiers if tier.is_win]
    if not winners:
        return None
    return min(winners, key=lambda tier: tier.payout_value)


def roll_multiplier(feature: MultiplierFeature, tier: PrizeTier, rng: SeededRNG) -> int:
    """Prize multiplier for a ticket; losing tiers never roll."""
    if not feature.enabled or not tier.is_win or not feature.values:
        return 1
    if rng.next() < feature.chance:
        return rng.pick(feature.values)
    return 1


def _fill(cells: list[str | None], pool: list[str], rng: SeededRNG) -> list[str]:
    return [cell if cell is not None else rng.pick(pool) for cell in cells]


# MATCH


def _winning_match_card(
    config: TicketConfig, prize_symbol: str, pools: SymbolPools, rng: SeededRNG
) -> list[str]:
    n = config.cell_count
    cells: list[str | None] = [None] * n
    for pos in random_positions(n, config.match_count, rng):
        cells[pos] = prize_symbol

    counts: dict[str, int] = {prize_symbol: config.match_count}
    allowed = pools.lose if config.win_logic == WinLogic.SINGLE_WIN else _unique(pools.lose + pools.win)
    lose_cap = config.match_count - 1

    for i in range(n):
        if cells[i] is not None:
            continue
        candidates = [
            symbol
            for symbol in allowed
            if symbol != prize_symbol
            and not (symbol in pools.lose and counts.get(symbol, 0) >= lose_cap)
        ]
        value = rng.pick(candidates) if candidates else pools.lose[0]
        cells[i] = value
        counts[value] = counts.get(value, 0) + 1

    return cells  # type: ignore[return-value]


def _break_matches(cells: list[str], lose: list[str], match_count: int, protected: set[int]) -> None:
    """Replace cells until no symbol appears ``match_count`` times.

    Walks the card in order and swaps extras for the least used other lose
    symbol. Protected cells (near-miss teases) are left alone.
    """
    counts: dict[str, int] = {}
    for cell in cells:
        counts[cell] = counts.get(cell, 0) + 1

    for i, cell in enumerate(cells):
        if i in protected or counts[cell] < match_count:
            continue
        others = [symbol for symbol in lose if symbol != cell]
        if not others:
            continue
        replacement = min(others, key=lambda symbol: counts.get(symbol, 0))
        cells[i] = replacement
        counts[cell] -= 1
        counts[replacement] = counts.get(replacement, 0) + 1


def _losing_match_card(
    config: TicketConfig,
    pools: SymbolPools,
    rng: SeededRNG,
    tease_symbol: str | None = None,
) -> list[str]:
    n = config.cell_count
    cells: list[str | None] = [None] * n
    protected: set[int] = set()

    if tease_symbol is not None:
        for pos in random_positions(n, config.match_count - 1, rng):
            cells[pos] = tease_symbol
            protected.add(pos)

    card = _fill(cells, pools.lose, rng)
    _break_matches(card, pools.lose, config.match_count, protected)
    return card


@reveal_strategy(TicketCategory.MATCH)
def reveal_match(config: TicketConfig, tier: PrizeTier, rng: SeededRNG) -> RevealOutcome:
    """Classic match-N card."""
    pools = symbol_pools(config)
    features = config.features
    triggered: list[str] = []

    # Second chance
    if not tier.is_win and features.second_chance.enabled:
        upgrade = lowest_winning_tier(config.tiers)
        if upgrade is not None and rng.next() < features.second_chance.chance:
            logger.debug("Second chance: %s -> %s", tier.id, upgrade.id)
            tier = upgrade
            triggered.append("second_chance")

    if tier.is_win:
        card = _winning_match_card(config, tier.prize_symbol, pools, rng)
        return RevealOutcome(reveal_map=card, tier=tier, features=triggered)

    near_miss = (
        features.near_miss.enabled
        and config.match_count > 1
        and rng.next() < features.near_miss.chance
    )
    tease_symbol = rng.pick(pools.win) if near_miss else None
    if near_miss:
        triggered.append("near_miss")

    card = _losing_match_card(config, pools, rng, tease_symbol)
    return RevealOutcome(
        reveal_map=card,
        tier=tier,
        target_symbol=tease_symbol,
        near_miss=near_miss,
        features=triggered,
    )


# GRID


@reveal_strategy(TicketCategory.GRID)
def reveal_grid(config: TicketConfig, tier: PrizeTier, rng: SeededRNG) -> RevealOutcome:
    """Find-the-symbol card: ``required_hits`` targets win."""
    pools = symbol_pools(config)
    n = config.cell_count
    cells: list[str | None] = [None] * n

    if tier.is_win:
        target = tier.prize_symbol
        for pos in random_positions(n, config.required_hits, rng):
            cells[pos] = target
        return RevealOutcome(
            reveal_map=_fill(cells, pools.lose, rng), tier=tier, target_symbol=target
        )

    tease_count = config.required_hits - 1 if rng.next() < 0.5 else 0
    target = pools.win[0]
    if tease_count > 0:
        target = rng.pick(pools.win)
        for pos in random_positions(n, tease_count, rng):
            cells[pos] = target

    near_miss = tease_count > 0
    return RevealOutcome(
        reveal_map=_fill(cells, pools.lose, rng),
        tier=tier,
        target_symbol=target,
        near_miss=near_miss,
        features=["near_miss"] if near_miss else [],
    )


# BONUS


@reveal_strategy(TicketCategory.BONUS)
def reveal_bonus(config: TicketConfig, tier: PrizeTier, rng: SeededRNG) -> RevealOutcome:
    """Lucky-numbers card: a win shows exactly one winning number."""
    numbers = [str(n) for n in range(1, config.number_pool_size + 1)]
    winning = rng.pick_unique(numbers, config.winning_number_count)
    safe = [number for number in numbers if number not in winning] or [BONUS_FALLBACK_SYMBOL]

    n = config.cell_count
    cells: list[str | None] = [None] * n
    target: str | None = None

    if tier.is_win:
        target = rng.pick(winning)
        for pos in random_positions(n, 1, rng):
            cells[pos] = target

    return RevealOutcome(
        reveal_map=_fill(cells, safe, rng),
        tier=tier,
        winning_numbers=winning,
        target_symbol=target,
    )
