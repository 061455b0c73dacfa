"""Shared fixtures and builders for engine tests."""

from decimal import Decimal

import pytest

from slotmath.schemas.game_config import (
    ClusterMechanism,
    GameConfig,
    LinesMechanism,
    PrizeTier,
    SymbolDef,
    TicketCategory,
    TicketConfig,
    WaysMechanism,
)
from slotmath.services.engine import Alphabet

# Seeds with known outcomes on the default 5x3 lines config
SEED_ABC123 = "abc123"
ABC123_GRID = [
    ["H2", "H3", "H1", "H2", "L1"],
    ["H3", "H1", "L1", "H3", "H2"],
    ["L2", "L2", "H1", "H2", "L1"],
]
SEED_LINE_WIN = "line:0"
LINE_WIN_GRID = [
    ["L2", "L2", "L3", "L3", "H2"],
    ["L1", "H1", "L2", "H2", "H3"],
    ["H1", "L1", "H3", "H1", "L3"],
]

# First five draws of SeededRNG("abc123")
ABC123_DRAWS = [
    0.17292318399995565,
    0.44494329928420484,
    0.1288958815857768,
    0.23858220386318862,
    0.5677097754087299,
]


def create_symbols(
    *ids: str,
    wild: str | None = None,
    scatter: str | None = None,
    weights: dict[str, int] | None = None,
) -> list[SymbolDef]:
    """Helper to create symbol definitions; wild/scatter are appended when given."""
    weights = weights or {}
    symbols = [SymbolDef(id=symbol_id, weight=weights.get(symbol_id, 1)) for symbol_id in ids]
    if wild is not None:
        symbols.append(SymbolDef(id=wild, weight=weights.get(wild, 1), is_wild=True))
    if scatter is not None:
        symbols.append(SymbolDef(id=scatter, weight=weights.get(scatter, 1), is_scatter=True))
    return symbols


def create_alphabet(*ids: str, wild: str | None = None, scatter: str | None = None) -> Alphabet:
    return Alphabet.from_symbols(create_symbols(*ids, wild=wild, scatter=scatter))


def create_paytable(table: dict[str, dict[int, str]]) -> dict[str, dict[int, Decimal]]:
    """Helper to build a paytable from string amounts."""
    return {
        symbol: {count: Decimal(amount) for count, amount in pays.items()}
        for symbol, pays in table.items()
    }


def create_lines_config(**overrides) -> GameConfig:
    """5x3 lines game with default lines and the built-in alphabet."""
    data = {"game_id": "lines-test", "mechanism": LinesMechanism()}
    data.update(overrides)
    return GameConfig(**data)


def create_ways_config(**overrides) -> GameConfig:
    data = {
        "game_id": "ways-test",
        "mechanism": WaysMechanism(),
        "symbols": create_symbols("A", "B", "C", "D", wild="W"),
    }
    data.update(overrides)
    return GameConfig(**data)


def create_cluster_config(**overrides) -> GameConfig:
    """6x6 cluster game on a small alphabet so clusters and cascades are common."""
    data = {
        "game_id": "cluster-test",
        "rows": 6,
        "cols": 6,
        "mechanism": ClusterMechanism(min_size=5),
        "symbols": create_symbols("A", "B", "C"),
    }
    data.update(overrides)
    return GameConfig(**data)


def create_tier(
    tier_id: str,
    payout: str = "0",
    probability: float | None = None,
    weight: int | None = None,
    symbol: str | None = None,
) -> PrizeTier:
    return PrizeTier(
        id=tier_id,
        payout_value=Decimal(payout),
        probability=probability,
        weight=weight,
        symbol=symbol,
    )


def create_standard_tiers() -> list[PrizeTier]:
    """Four-tier probability table summing to 1."""
    return [
        create_tier("jackpot", "100", probability=0.01, symbol="GOLD"),
        create_tier("big", "10", probability=0.09, symbol="SILVER"),
        create_tier("small", "2", probability=0.2, symbol="BRONZE"),
        create_tier("lose", "0", probability=0.7),
    ]


def create_ticket_config(category: TicketCategory = TicketCategory.MATCH, **overrides) -> TicketConfig:
    data = {
        "game_id": "ticket-test",
        "category": category,
        "tiers": create_standard_tiers(),
        "lose_symbols": ["CHERRY", "LEMON", "PLUM", "BELL", "STAR"],
    }
    data.update(overrides)
    return TicketConfig(**data)


def create_winning_ticket(category: TicketCategory = TicketCategory.MATCH, **overrides) -> TicketConfig:
    """Ticket whose table can only select the winning 'small' tier."""
    return create_ticket_config(
        category,
        tiers=[
            create_tier("small", "2", probability=1.0, symbol="BRONZE"),
            create_tier("lose", "0", probability=0.0),
        ],
        **overrides,
    )


def create_losing_ticket(category: TicketCategory = TicketCategory.MATCH, **overrides) -> TicketConfig:
    """Ticket whose table can only select the losing tier."""
    return create_ticket_config(
        category,
        tiers=[
            create_tier("small", "2", probability=0.0, symbol="BRONZE"),
            create_tier("lose", "0", probability=1.0),
        ],
        **overrides,
    )


@pytest.fixture
def lines_config() -> GameConfig:
    """Default 5x3 lines config."""
    return create_lines_config()


@pytest.fixture
def ways_config() -> GameConfig:
    return create_ways_config()


@pytest.fixture
def cluster_config() -> GameConfig:
    """Cluster config; cascades are on by default for cluster games."""
    return create_cluster_config()


@pytest.fixture
def ticket_config() -> TicketConfig:
    return create_ticket_config()
