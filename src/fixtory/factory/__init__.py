"""Factory: turns resolved records into in-memory or persisted entities."""

from fixtory.factory.factory import Factory, ReadOnlyFieldError

__all__ = [
    "Factory",
    "ReadOnlyFieldError",
]
