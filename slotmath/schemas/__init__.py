"""Pydantic models for engine inputs and outputs."""

from .game_config import (
    DEFAULT_ALPHABET,
    AnyGameConfig,
    ChanceFeature,
    ClusterMechanism,
    GameConfig,
    LinesMechanism,
    MultiplierFeature,
    PayMechanism,
    PrizeTier,
    ScatterFeature,
    SymbolDef,
    TicketCategory,
    TicketConfig,
    TicketFeatures,
    TierMode,
    WaysMechanism,
    WinLogic,
)
from .round_result import (
    CascadeStep,
    Diagnostic,
    Position,
    RoundResult,
    TicketResult,
    WinKind,
    WinningCombination,
)

__all__ = [
    # Inputs
    "DEFAULT_ALPHABET",
    "AnyGameConfig",
    "GameConfig",
    "SymbolDef",
    "PayMechanism",
    "LinesMechanism",
    "WaysMechanism",
    "ClusterMechanism",
    "ScatterFeature",
    "TicketConfig",
    "TicketCategory",
    "TicketFeatures",
    "TierMode",
    "WinLogic",
    "PrizeTier",
    "MultiplierFeature",
    "ChanceFeature",
    # Outputs
    "Position",
    "WinKind",
    "Diagnostic",
    "WinningCombination",
    "CascadeStep",
    "RoundResult",
    "TicketResult",
]
