from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, computed_field, field_validator

from slotmath.money import from_cents, to_cents, win_multiplier

Position = tuple[int, int]


class WinKind(str, Enum):
    LINE = "line"
    WAY = "way"
    CLUSTER = "cluster"


# Diagnostic codes attached to results when the engine recovers locally
class Diagnostic(str, Enum):
    DEFAULT_ALPHABET = "DEFAULT_ALPHABET"
    DEFAULT_LINES = "DEFAULT_LINES"
    LINE_SKIPPED = "LINE_SKIPPED"
    CASCADE_LIMIT_REACHED = "CASCADE_LIMIT_REACHED"
    FORCED_TIER_NOT_FOUND = "FORCED_TIER_NOT_FOUND"
    EMPTY_PRIZE_TABLE = "EMPTY_PRIZE_TABLE"


class WinningCombination(BaseModel):
    kind: WinKind
    symbol: str
    count: int = Field(..., description="Run length, reels involved or cluster size")
    payout_cents: int = Field(..., ge=0)
    positions: list[Position]
    line_index: int | None = Field(None, description="1-based payline number")
    ways: int | None = Field(None, description="Product of per-reel match counts")
    cascade_index: int = Field(0, description="0 for the initial grid")

    @field_validator("positions")
    @classmethod
    def validate_unique_positions(cls, v: list[Position]) -> list[Position]:
        if len(set(v)) != len(v):
            raise ValueError("positions must be unique within a combination")
        return v

    @computed_field
    @property
    def payout(self) -> Decimal:
        return from_cents(self.payout_cents)


class CascadeStep(BaseModel):
    """Grid state after one removal/gravity/refill pass."""

    index: int
    removed: list[Position]
    grid: list[list[str]]


class RoundResult(BaseModel):
    game_id: str
    seed: str
    initial_grid: list[list[str]]
    grid: list[list[str]] = Field(..., description="Final grid after cascades")
    combinations: list[WinningCombination] = []
    total_win_cents: int = 0
    bet: Decimal
    cascade_count: int = 0
    cascade_limit_reached: bool = False
    cascades: list[CascadeStep] = []
    features_triggered: list[str] = []
    diagnostics: list[str] = []
    scatter_count: int = 0
    free_spins_awarded: int = 0

    @computed_field
    @property
    def total_win(self) -> Decimal:
        return from_cents(self.total_win_cents)

    @computed_field
    @property
    def bet_normalized_multiplier(self) -> Decimal:
        return win_multiplier(self.total_win_cents, to_cents(self.bet))

    @property
    def is_win(self) -> bool:
        return self.total_win_cents > 0


class TicketResult(BaseModel):
    game_id: str
    seed: str
    tier_id: str
    is_win: bool
    base_prize_cents: int = 0
    multiplier: int = 1
    final_prize_cents: int = 0
    reveal_map: list[str] = Field(..., description="Row-major card cells")
    winning_numbers: list[str] | None = None
    target_symbol: str | None = None
    near_miss: bool = False
    features_triggered: list[str] = []
    diagnostics: list[str] = []
    presentation_seed: int = 0

    @computed_field
    @property
    def base_prize(self) -> Decimal:
        return from_cents(self.base_prize_cents)

    @computed_field
    @property
    def final_prize(self) -> Decimal:
        return from_cents(self.final_prize_cents)
