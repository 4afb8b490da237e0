"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support.

Usage:
    from fixtory.config import FactorySettings, get_settings

    # Load from environment variables (FIXTORY_*)
    settings = get_settings()

    # Or override with explicit values
    settings = FactorySettings(cycle_sequences=True)
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field

try:
    from pydantic_settings import BaseSettings, SettingsConfigDict
except ImportError as e:
    raise ImportError(
        "pydantic-settings is required for the config module. "
        "Install with: pip install pydantic-settings"
    ) from e


class FactorySettings(BaseSettings):  # type: ignore[misc]
    """Configuration for fixture generation.

    Attributes:
        cycle_sequences: Plain lists cycle (record i gets element i mod len)
            instead of failing when the batch outgrows them.
        sequence_seed: First counter value of unique sequence providers.
        token_length: Default length of unique fixed-length tokens.
        admin_identity: Name of the elevated identity used by admin creates.
        defaults_path: YAML file of default tables loaded at startup.

    Environment Variables:
        FIXTORY_CYCLE_SEQUENCES
        FIXTORY_SEQUENCE_SEED
        FIXTORY_TOKEN_LENGTH
        FIXTORY_ADMIN_IDENTITY
        FIXTORY_DEFAULTS_PATH
    """

    model_config = SettingsConfigDict(
        env_prefix="FIXTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    cycle_sequences: bool = False
    sequence_seed: int = Field(default=0, ge=0)
    token_length: int = Field(default=12, ge=1)
    admin_identity: str = "fixture-admin"
    defaults_path: str | None = None


@lru_cache(maxsize=1)
def get_settings() -> FactorySettings:
    """Process-wide settings, read from the environment once."""
    return FactorySettings()
