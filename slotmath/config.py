import logging
import sys
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Process-level settings for the batch driver and logging.

    The resolver never reads these; a round depends only on its config and seed.
    """

    model_config = SettingsConfigDict(
        env_prefix="SLOTMATH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DEBUG: bool = False

    # Batch simulation
    SIM_WORKERS: int = 1
    SIM_CHUNK_SIZE: int = 10_000
    SIM_DEFAULT_ROUNDS: int = 100_000
    SIM_BASE_SEED: str = "sim"

    @field_validator("SIM_WORKERS", "SIM_CHUNK_SIZE", "SIM_DEFAULT_ROUNDS")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("simulation sizes must be at least 1")
        return v

    @field_validator("SIM_BASE_SEED")
    @classmethod
    def validate_base_seed(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("SIM_BASE_SEED cannot be empty")
        return v


def configure_logging(debug: bool = False) -> None:
    """Configure logging for the application.

    Call once at process startup, e.g. ``configure_logging(get_settings().DEBUG)``;
    library calls never touch the root logger.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Per-round engine tracing is only useful when debugging a single seed
    if not debug:
        logging.getLogger("slotmath.services.engine").setLevel(logging.WARNING)


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    logger.info("Settings loaded successfully")
    logger.debug(
        "Simulation defaults: workers=%d, chunk_size=%d, rounds=%d",
        settings.SIM_WORKERS,
        settings.SIM_CHUNK_SIZE,
        settings.SIM_DEFAULT_ROUNDS,
    )
    return settings
