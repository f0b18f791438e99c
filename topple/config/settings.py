"""
Topple - Application Settings

Loads configuration from environment variables (prefixed TOPPLE_) or a
.env file using Pydantic Settings.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Game defaults
    default_victory_points: int = Field(default=100, gt=0)

    # Storage
    snapshot_path: Path = Path(".topple/game-state.json")
    config_path: Path = Path(".topple/game-config.json")
    history_limit: int = Field(default=50, ge=1)

    # Application
    debug: bool = False
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "TOPPLE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging from settings (DEBUG when debug is on)."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("topple").setLevel(level)
