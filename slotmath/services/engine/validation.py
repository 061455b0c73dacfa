"""Load-time validation of game configs.

The resolver recovers from bad configs on its own; these checks let the
caller reject them up front instead:
- validate_game_config() checks a reel config
- validate_ticket_config() checks a ticket config
Both stop at the first problem and report it as an error code.
"""

import logging
import math
from dataclasses import dataclass

from slotmath.schemas.game_config import (
    GameConfig,
    TicketCategory,
    TicketConfig,
    TierMode,
)

from .paytable import is_monotonic
from .scratch import symbol_pools

logger = logging.getLogger(__name__)

# Allowed distance of a probability table's sum from 1
PROBABILITY_TOLERANCE = 1e-6


@dataclass
class ValidationResult:
    """Result of validating a config before use."""

    is_valid: bool = True
    error_code: str | None = None
    error_message: str | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        """Create a successful validation result."""
        return cls(is_valid=True)

    @classmethod
    def error(cls, code: str, message: str) -> "ValidationResult":
        """Create a validation failure with error details."""
        return cls(
            is_valid=False,
            error_code=code,
            error_message=message,
        )


def validate_game_config(config: GameConfig) -> ValidationResult:
    """Validate a reel config.

    Checks:
    - Symbol ids are unique and no symbol is both wild and scatter
    - Every configured line has one in-range row per column
    - Cluster minimum size fits on the grid
    - Paytable entries name known symbols, use positive counts and never
      pay less for a longer run

    Args:
        config: The config to validate.

    Returns:
        ValidationResult indicating success or failure with error details.
    """
    logger.debug(
        "Validating game config: game=%s, mechanism=%s",
        config.game_id,
        config.mechanism.kind,
    )

    seen: set[str] = set()
    for symbol in config.symbols:
        if symbol.id in seen:
            logger.warning("Validation failed: DUPLICATE_SYMBOL, symbol=%s", symbol.id)
            return ValidationResult.error(
                "DUPLICATE_SYMBOL",
                f"Symbol '{symbol.id}' is defined more than once",
            )
        seen.add(symbol.id)

        if symbol.is_wild and symbol.is_scatter:
            logger.warning("Validation failed: WILD_AND_SCATTER, symbol=%s", symbol.id)
            return ValidationResult.error(
                "WILD_AND_SCATTER",
                f"Symbol '{symbol.id}' cannot be both wild and scatter",
            )

    if config.mechanism.kind == "lines":
        for index, line in enumerate(config.mechanism.lines, start=1):
            if len(line) != config.cols:
                logger.warning(
                    "Validation failed: LINE_LENGTH_MISMATCH, line=%d, length=%d, cols=%d",
                    index,
                    len(line),
                    config.cols,
                )
                return ValidationResult.error(
                    "LINE_LENGTH_MISMATCH",
                    f"Line {index} has {len(line)} positions for {config.cols} columns",
                )
            if any(row < 0 or row >= config.rows for row in line):
                logger.warning(
                    "Validation failed: LINE_ROW_OUT_OF_RANGE, line=%d, rows=%d",
                    index,
                    config.rows,
                )
                return ValidationResult.error(
                    "LINE_ROW_OUT_OF_RANGE",
                    f"Line {index} uses a row outside 0..{config.rows - 1}",
                )

    if config.mechanism.kind == "cluster":
        if config.mechanism.min_size > config.rows * config.cols:
            logger.warning(
                "Validation failed: CLUSTER_MIN_SIZE_TOO_LARGE, min_size=%d",
                config.mechanism.min_size,
            )
            return ValidationResult.error(
                "CLUSTER_MIN_SIZE_TOO_LARGE",
                "Cluster minimum size exceeds the number of grid cells",
            )

    for symbol_id, pays in config.paytable.items():
        if config.symbols and symbol_id not in seen:
            logger.warning("Validation failed: PAYTABLE_UNKNOWN_SYMBOL, symbol=%s", symbol_id)
            return ValidationResult.error(
                "PAYTABLE_UNKNOWN_SYMBOL",
                f"Paytable references unknown symbol '{symbol_id}'",
            )
        if any(count < 1 for count in pays):
            logger.warning("Validation failed: PAYTABLE_COUNT_INVALID, symbol=%s", symbol_id)
            return ValidationResult.error(
                "PAYTABLE_COUNT_INVALID",
                f"Paytable counts for '{symbol_id}' must be at least 1",
            )
        if any(pay < 0 for pay in pays.values()):
            logger.warning("Validation failed: PAYTABLE_NEGATIVE, symbol=%s", symbol_id)
            return ValidationResult.error(
                "PAYTABLE_NEGATIVE",
                f"Paytable for '{symbol_id}' has a negative pay",
            )
        if not is_monotonic(pays):
            logger.warning("Validation failed: PAYTABLE_NOT_MONOTONIC, symbol=%s", symbol_id)
            return ValidationResult.error(
                "PAYTABLE_NOT_MONOTONIC",
                f"Paytable for '{symbol_id}' pays less for a longer run",
            )

    logger.debug("Game config validated successfully: game=%s", config.game_id)
    return ValidationResult.ok()


def _validate_tiers(config: TicketConfig) -> ValidationResult:
    if not config.tiers:
        logger.warning("Validation failed: EMPTY_PRIZE_TABLE")
        return ValidationResult.error("EMPTY_PRIZE_TABLE", "Ticket has no prize tiers")

    tier_ids: set[str] = set()
    for tier in config.tiers:
        if tier.id in tier_ids:
            logger.warning("Validation failed: DUPLICATE_TIER, tier=%s", tier.id)
            return ValidationResult.error(
                "DUPLICATE_TIER",
                f"Tier '{tier.id}' is defined more than once",
            )
        tier_ids.add(tier.id)

    if config.tier_mode == TierMode.POOL:
        for tier in config.tiers:
            if tier.weight is None or tier.weight < 0:
                logger.warning(
                    "Validation failed: POOL_WEIGHT_INVALID, tier=%s, weight=%s",
                    tier.id,
                    tier.weight,
                )
                return ValidationResult.error(
                    "POOL_WEIGHT_INVALID",
                    f"Tier '{tier.id}' needs a non-negative integer weight",
                )
        if sum(tier.weight or 0 for tier in config.tiers) == 0:
            logger.warning("Validation failed: POOL_EMPTY")
            return ValidationResult.error("POOL_EMPTY", "Pool weights sum to zero")
        return ValidationResult.ok()

    for tier in config.tiers:
        if tier.probability is None:
            logger.warning("Validation failed: PROBABILITY_MISSING, tier=%s", tier.id)
            return ValidationResult.error(
                "PROBABILITY_MISSING",
                f"Tier '{tier.id}' has no probability",
            )
        if tier.probability < 0:
            logger.warning(
                "Validation failed: NEGATIVE_WEIGHT, tier=%s, probability=%s",
                tier.id,
                tier.probability,
            )
            return ValidationResult.error(
                "NEGATIVE_WEIGHT",
                f"Tier '{tier.id}' has a negative probability",
            )

    total = math.fsum(tier.probability or 0.0 for tier in config.tiers)
    if abs(total - 1.0) > PROBABILITY_TOLERANCE:
        logger.warning("Validation failed: PROBABILITY_SUM, total=%s", total)
        return ValidationResult.error(
            "PROBABILITY_SUM",
            f"Tier probabilities sum to {total}, expected 1",
        )

    return ValidationResult.ok()


def validate_ticket_config(config: TicketConfig) -> ValidationResult:
    """Validate a ticket config.

    Checks the prize table (unique ids, probabilities summing to 1 or valid
    pool weights), then that the card category can actually be laid out on
    ``rows x cols`` cells.
    """
    logger.debug(
        "Validating ticket config: game=%s, category=%s",
        config.game_id,
        config.category.value,
    )

    result = _validate_tiers(config)
    if not result.is_valid:
        return result

    cells = config.cell_count

    if config.category == TicketCategory.MATCH:
        if config.match_count > cells:
            logger.warning(
                "Validation failed: MATCH_COUNT_TOO_LARGE, match_count=%d, cells=%d",
                config.match_count,
                cells,
            )
            return ValidationResult.error(
                "MATCH_COUNT_TOO_LARGE",
                f"Cannot place {config.match_count} matches on {cells} cells",
            )
        # A losing card must fit without any lose symbol reaching match_count
        lose = symbol_pools(config).lose
        if len(lose) * (config.match_count - 1) < cells:
            logger.warning(
                "Validation failed: LOSE_POOL_TOO_SMALL, lose_symbols=%d, cells=%d",
                len(lose),
                cells,
            )
            return ValidationResult.error(
                "LOSE_POOL_TOO_SMALL",
                "Not enough lose symbols to fill a losing card without a match",
            )

    elif config.category == TicketCategory.GRID:
        if config.required_hits > cells:
            logger.warning(
                "Validation failed: REQUIRED_HITS_TOO_LARGE, required_hits=%d, cells=%d",
                config.required_hits,
                cells,
            )
            return ValidationResult.error(
                "REQUIRED_HITS_TOO_LARGE",
                f"Cannot place {config.required_hits} targets on {cells} cells",
            )

    elif config.category == TicketCategory.BONUS:
        if config.winning_number_count >= config.number_pool_size:
            logger.warning(
                "Validation failed: WINNING_NUMBERS_TOO_MANY, count=%d, pool=%d",
                config.winning_number_count,
                config.number_pool_size,
            )
            return ValidationResult.error(
                "WINNING_NUMBERS_TOO_MANY",
                "Winning numbers must leave at least one losing number in the pool",
            )

    multipliers = config.features.multipliers
    if multipliers.enabled and (not multipliers.values or min(multipliers.values) < 1):
        logger.warning("Validation failed: MULTIPLIER_VALUES_INVALID, values=%s", multipliers.values)
        return ValidationResult.error(
            "MULTIPLIER_VALUES_INVALID",
            "Multiplier values must be a non-empty list of integers >= 1",
        )

    logger.debug("Ticket config validated successfully: game=%s", config.game_id)
    return ValidationResult.ok()
