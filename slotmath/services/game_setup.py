"""Caller-side config loading.

Builds the immutable config models from raw payloads (JSON/dicts from the
configuration wizard) and rejects anything the engine would have to recover
from. Raises ``ValueError`` on any failure.
"""

import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from slotmath.schemas.game_config import AnyGameConfig, GameConfig, TicketConfig

from .engine.validation import ValidationResult, validate_game_config, validate_ticket_config

logger = logging.getLogger(__name__)

_any_config = TypeAdapter(AnyGameConfig)


def _raise_for(result: ValidationResult, game_id: str) -> None:
    if not result.is_valid:
        raise ValueError(f"Invalid config '{game_id}': {result.error_code}: {result.error_message}")


def _format_errors(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or 'config'}: {error['msg']}"
        for error in exc.errors()
    )


def load_game_config(payload: dict[str, Any]) -> GameConfig:
    """Build and validate a reel config."""
    try:
        config = GameConfig.model_validate(payload)
    except ValidationError as e:
        logger.warning("Rejected game config: errors=%d", e.error_count())
        raise ValueError(f"Malformed game config: {_format_errors(e)}") from e

    _raise_for(validate_game_config(config), config.game_id)
    logger.info("Loaded game config: game=%s, mechanism=%s", config.game_id, config.mechanism.kind)
    return config


def load_ticket_config(payload: dict[str, Any]) -> TicketConfig:
    """Build and validate a ticket config."""
    try:
        config = TicketConfig.model_validate(payload)
    except ValidationError as e:
        logger.warning("Rejected ticket config: errors=%d", e.error_count())
        raise ValueError(f"Malformed ticket config: {_format_errors(e)}") from e

    _raise_for(validate_ticket_config(config), config.game_id)
    logger.info("Loaded ticket config: game=%s, category=%s", config.game_id, config.category.value)
    return config


def load_config(payload: dict[str, Any]) -> GameConfig | TicketConfig:
    """Load either family, chosen by the payload's ``family`` field.

    A payload without ``family`` is read as a reel config.
    """
    data = dict(payload)
    data.setdefault("family", "reels")
    try:
        config = _any_config.validate_python(data)
    except ValidationError as e:
        logger.warning("Rejected config: errors=%d", e.error_count())
        raise ValueError(f"Malformed config: {_format_errors(e)}") from e

    if isinstance(config, TicketConfig):
        _raise_for(validate_ticket_config(config), config.game_id)
    else:
        _raise_for(validate_game_config(config), config.game_id)
    logger.info("Loaded config: game=%s, family=%s", config.game_id, config.family)
    return config
