"""Batch RTP simulation.

Runs the pure resolver over many seeds and aggregates real statistics. Round
``i`` of a batch uses the seed ``f"{base_seed}:{i}"``, so any round can be
replayed on its own with ``resolve(config, seed)``.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from decimal import Decimal

from slotmath.config import get_settings
from slotmath.money import from_cents, to_cents, win_multiplier
from slotmath.schemas.game_config import GameConfig, TicketConfig
from slotmath.schemas.round_result import RoundResult, TicketResult

from .engine.resolve import resolve

logger = logging.getLogger(__name__)

# Upper bounds of the multiplier distribution buckets, in bets
_BUCKETS: tuple[tuple[Decimal, str], ...] = (
    (Decimal(2), "1-2x"),
    (Decimal(5), "2-5x"),
    (Decimal(10), "5-10x"),
    (Decimal(50), "10-50x"),
    (Decimal(100), "50-100x"),
)


def bucket_for(multiplier: Decimal) -> str:
    if multiplier <= 0:
        return "0x"
    for upper, label in _BUCKETS:
        if multiplier < upper:
            return label
    return "100x+"


def round_seed(base_seed: str, index: int) -> str:
    return f"{base_seed}:{index}"


@dataclass
class _Tally:
    """Exact integer-cent counters for a slice of a batch."""

    rounds: int = 0
    bet_cents: int = 0
    win_cents: int = 0
    wins: int = 0
    max_multiplier: Decimal = Decimal("0")
    cascade_rounds: int = 0
    cascade_limit_hits: int = 0
    features: dict[str, int] = field(default_factory=dict)
    buckets: dict[str, int] = field(default_factory=dict)

    def add(self, result: RoundResult | TicketResult, bet_cents: int) -> None:
        if isinstance(result, RoundResult):
            win_cents = result.total_win_cents
            self.cascade_rounds += result.cascade_count > 0
            self.cascade_limit_hits += result.cascade_limit_reached
        else:
            win_cents = result.final_prize_cents

        multiplier = win_multiplier(win_cents, bet_cents)
        self.rounds += 1
        self.bet_cents += bet_cents
        self.win_cents += win_cents
        self.wins += win_cents > 0
        self.max_multiplier = max(self.max_multiplier, multiplier)
        for feature in result.features_triggered:
            self.features[feature] = self.features.get(feature, 0) + 1
        bucket = bucket_for(multiplier)
        self.buckets[bucket] = self.buckets.get(bucket, 0) + 1

    def merge(self, other: "_Tally") -> None:
        self.rounds += other.rounds
        self.bet_cents += other.bet_cents
        self.win_cents += other.win_cents
        self.wins += other.wins
        self.max_multiplier = max(self.max_multiplier, other.max_multiplier)
        self.cascade_rounds += other.cascade_rounds
        self.cascade_limit_hits += other.cascade_limit_hits
        for name, count in other.features.items():
            self.features[name] = self.features.get(name, 0) + count
        for name, count in other.buckets.items():
            self.buckets[name] = self.buckets.get(name, 0) + count


@dataclass
class SimulationReport:
    """Aggregated results of a batch."""

    game_id: str
    family: str
    rounds: int
    base_seed: str
    total_bet: Decimal
    total_win: Decimal
    rtp: float
    hit_rate: float  # share of rounds that returned > 0
    avg_multiplier: float
    max_multiplier: float
    cascade_rate: float
    cascade_limit_hits: int
    feature_counts: dict[str, int] = field(default_factory=dict)
    distribution: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "game_id": self.game_id,
            "family": self.family,
            "rounds": self.rounds,
            "base_seed": self.base_seed,
            "total_bet": str(self.total_bet),
            "total_win": str(self.total_win),
            "rtp": round(self.rtp, 4),
            "hit_rate": round(self.hit_rate, 4),
            "avg_multiplier": round(self.avg_multiplier, 4),
            "max_multiplier": round(self.max_multiplier, 2),
            "cascade_rate": round(self.cascade_rate, 4),
            "cascade_limit_hits": self.cascade_limit_hits,
            "feature_counts": dict(sorted(self.feature_counts.items())),
            "distribution": self.distribution,
        }


def _bet_cents(config: GameConfig | TicketConfig) -> int:
    if isinstance(config, TicketConfig):
        return to_cents(config.ticket_price)
    return to_cents(config.bet)


def _simulate_chunk(
    config: GameConfig | TicketConfig, base_seed: str, start: int, stop: int
) -> _Tally:
    """Resolve rounds ``start..stop-1``; runs in worker processes."""
    tally = _Tally()
    bet_cents = _bet_cents(config)
    for i in range(start, stop):
        tally.add(resolve(config, round_seed(base_seed, i)), bet_cents)
    return tally


def _chunks(rounds: int, chunk_size: int) -> list[tuple[int, int]]:
    return [(start, min(start + chunk_size, rounds)) for start in range(0, rounds, chunk_size)]


def _build_report(config: GameConfig | TicketConfig, base_seed: str, tally: _Tally) -> SimulationReport:
    rounds = tally.rounds
    rtp = tally.win_cents / tally.bet_cents if tally.bet_cents > 0 else 0.0
    return SimulationReport(
        game_id=config.game_id,
        family=config.family,
        rounds=rounds,
        base_seed=base_seed,
        total_bet=from_cents(tally.bet_cents),
        total_win=from_cents(tally.win_cents),
        rtp=rtp,
        hit_rate=tally.wins / rounds if rounds else 0.0,
        avg_multiplier=rtp,
        max_multiplier=float(tally.max_multiplier),
        cascade_rate=tally.cascade_rounds / rounds if rounds else 0.0,
        cascade_limit_hits=tally.cascade_limit_hits,
        feature_counts=dict(tally.features),
        distribution={k: round(v / rounds, 4) for k, v in sorted(tally.buckets.items())},
    )


def simulate(
    config: GameConfig | TicketConfig,
    rounds: int | None = None,
    base_seed: str | None = None,
    workers: int | None = None,
    chunk_size: int | None = None,
) -> SimulationReport:
    """Resolve ``rounds`` rounds and aggregate them.

    Unset arguments default to the ``SLOTMATH_SIM_*`` settings. With more
    than one worker the chunks run on a process pool; the report is the same
    either way.
    """
    if None in (rounds, base_seed, workers, chunk_size):
        settings = get_settings()
        rounds = settings.SIM_DEFAULT_ROUNDS if rounds is None else rounds
        base_seed = settings.SIM_BASE_SEED if base_seed is None else base_seed
        workers = settings.SIM_WORKERS if workers is None else workers
        chunk_size = settings.SIM_CHUNK_SIZE if chunk_size is None else chunk_size

    if rounds < 0:
        raise ValueError("rounds cannot be negative")
    if workers < 1 or chunk_size < 1:
        raise ValueError("workers and chunk_size must be at least 1")

    logger.info(
        "Starting simulation: game=%s, family=%s, rounds=%d, workers=%d, chunk_size=%d",
        config.game_id,
        config.family,
        rounds,
        workers,
        chunk_size,
    )

    chunks = _chunks(rounds, chunk_size)
    total = _Tally()

    if workers > 1 and len(chunks) > 1:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(_simulate_chunk, config, base_seed, start, stop)
                for start, stop in chunks
            ]
            for (start, stop), future in zip(chunks, futures):
                total.merge(future.result())
                logger.debug("Chunk merged: rounds %d-%d", start, stop - 1)
    else:
        for start, stop in chunks:
            total.merge(_simulate_chunk(config, base_seed, start, stop))
            logger.debug("Chunk done: rounds %d-%d", start, stop - 1)

    report = _build_report(config, base_seed, total)
    logger.info(
        "Simulation finished: game=%s, rounds=%d, rtp=%.4f, hit_rate=%.4f, max_multiplier=%.2f",
        report.game_id,
        report.rounds,
        report.rtp,
        report.hit_rate,
        report.max_multiplier,
    )
    if report.cascade_limit_hits:
        logger.warning(
            "Cascade limit reached in %d of %d rounds: game=%s",
            report.cascade_limit_hits,
            report.rounds,
            report.game_id,
        )
    return report


def simulate_rounds(
    config: GameConfig,
    rounds: int | None = None,
    base_seed: str | None = None,
    workers: int | None = None,
    chunk_size: int | None = None,
) -> SimulationReport:
    """Batch-simulate a reel game."""
    if not isinstance(config, GameConfig):
        raise TypeError("simulate_rounds expects a GameConfig")
    return simulate(config, rounds, base_seed, workers, chunk_size)


def simulate_tickets(
    config: TicketConfig,
    rounds: int | None = None,
    base_seed: str | None = None,
    workers: int | None = None,
    chunk_size: int | None = None,
) -> SimulationReport:
    """Batch-simulate a ticket game."""
    if not isinstance(config, TicketConfig):
        raise TypeError("simulate_tickets expects a TicketConfig")
    return simulate(config, rounds, base_seed, workers, chunk_size)
