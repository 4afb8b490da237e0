"""Configuration module using Pydantic Settings.

Usage:
    from fixtory.config import FactorySettings

    settings = FactorySettings(token_length=8)
"""

from fixtory.config.settings import FactorySettings, get_settings

__all__ = [
    "FactorySettings",
    "get_settings",
]
