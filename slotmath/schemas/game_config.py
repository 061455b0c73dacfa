from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Used when a config carries no drawable symbols
DEFAULT_ALPHABET = ("H1", "H2", "H3", "L1", "L2", "L3")


# Ticket card categories
class TicketCategory(str, Enum):
    MATCH = "MATCH"
    GRID = "GRID"
    BONUS = "BONUS"


# How prize-tier masses are read
class TierMode(str, Enum):
    PROBABILITY = "probability"
    POOL = "pool"


class WinLogic(str, Enum):
    SINGLE_WIN = "SINGLE_WIN"
    MULTI_WIN = "MULTI_WIN"


# Reel family
class SymbolDef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    weight: int = Field(1, ge=0, description="Relative draw weight; 0 never lands")
    is_wild: bool = False
    is_scatter: bool = False


class LinesMechanism(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["lines"] = "lines"
    lines: list[list[int]] = Field(
        default_factory=list,
        description="One row index per column; empty uses the built-in table",
    )


class WaysMechanism(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["ways"] = "ways"
    bet_divisor: int = Field(20, ge=1, description="Bet units per way credit")


class ClusterMechanism(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["cluster"] = "cluster"
    min_size: int = Field(5, ge=1)
    bet_divisor: int = Field(10, ge=1, description="Bet units per cluster credit")


PayMechanism = Annotated[
    LinesMechanism | WaysMechanism | ClusterMechanism,
    Field(discriminator="kind"),
]


class ScatterFeature(BaseModel):
    model_config = ConfigDict(frozen=True)

    # scatter count -> free spins; the highest key <= count applies
    free_spins_award: dict[int, int] = Field(
        default_factory=lambda: {3: 8, 4: 12, 5: 20}
    )


class GameConfig(BaseModel):
    """Immutable input of one reel round.

    Owned by the caller; the engine reads it and never mutates it.
    """

    model_config = ConfigDict(frozen=True)

    family: Literal["reels"] = "reels"
    game_id: str = "preview"
    rows: int = Field(3, ge=1)
    cols: int = Field(5, ge=1)
    symbols: list[SymbolDef] = Field(default_factory=list)
    mechanism: PayMechanism = Field(default_factory=LinesMechanism)
    # symbol -> count -> bet multiplier
    paytable: dict[str, dict[int, Decimal]] = Field(default_factory=dict)
    bet: Decimal = Field(Decimal("10"), gt=0, description="Total bet in currency units")
    cascading: bool | None = Field(
        None, description="None cascades cluster games only"
    )
    max_cascades: int = Field(10, ge=0)
    scatter: ScatterFeature = Field(default_factory=ScatterFeature)

    @property
    def cascade_enabled(self) -> bool:
        if self.cascading is not None:
            return self.cascading
        return self.mechanism.kind == "cluster"


# Ticket family
class PrizeTier(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    payout_value: Decimal = Field(
        Decimal("0"), ge=0, description="Prize as a multiple of the ticket price"
    )
    weight: int | None = None
    probability: float | None = None
    is_win: bool = False
    symbol: str | None = Field(None, description="Symbol revealed for this prize")

    @model_validator(mode="before")
    @classmethod
    def default_is_win(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("is_win") is None:
            data = dict(data)
            try:
                data["is_win"] = Decimal(str(data.get("payout_value", 0) or 0)) > 0
            except (InvalidOperation, TypeError):
                # payout_value validation reports the bad value
                data.pop("is_win", None)
        return data

    @property
    def prize_symbol(self) -> str:
        return self.symbol or self.id


class MultiplierFeature(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    chance: float = Field(0.25, ge=0, le=1)
    values: list[int] = Field(default_factory=lambda: [2, 5, 10])


class ChanceFeature(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    chance: float = Field(..., ge=0, le=1)


class TicketFeatures(BaseModel):
    model_config = ConfigDict(frozen=True)

    multipliers: MultiplierFeature = Field(default_factory=MultiplierFeature)
    second_chance: ChanceFeature = Field(
        default_factory=lambda: ChanceFeature(chance=0.15)
    )
    near_miss: ChanceFeature = Field(default_factory=lambda: ChanceFeature(chance=0.4))


class TicketConfig(BaseModel):
    """Immutable input of one scratch-ticket round."""

    model_config = ConfigDict(frozen=True)

    family: Literal["ticket"] = "ticket"
    game_id: str = "ticket-preview"
    category: TicketCategory = TicketCategory.MATCH
    rows: int = Field(3, ge=1)
    cols: int = Field(3, ge=1)
    tiers: list[PrizeTier] = Field(default_factory=list)
    tier_mode: TierMode = TierMode.PROBABILITY
    ticket_price: Decimal = Field(Decimal("1"), gt=0)
    win_symbols: list[str] = Field(default_factory=list)
    lose_symbols: list[str] = Field(default_factory=list)
    match_count: int = Field(3, ge=1)
    win_logic: WinLogic = WinLogic.SINGLE_WIN
    required_hits: int = Field(3, ge=1, description="Targets to find on GRID cards")
    winning_number_count: int = Field(5, ge=1, description="Lucky numbers on BONUS cards")
    number_pool_size: int = Field(20, ge=1)
    features: TicketFeatures = Field(default_factory=TicketFeatures)

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols


AnyGameConfig = Annotated[GameConfig | TicketConfig, Field(discriminator="family")]
