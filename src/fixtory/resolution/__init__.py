"""Resolution engine: merges defaults with overrides and expands them per record."""

from fixtory.resolution.engine import normalize_overrides, resolve

__all__ = [
    "resolve",
    "normalize_overrides",
]
