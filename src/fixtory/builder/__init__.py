"""Fluent batch specifications."""

from fixtory.builder.builder import Builder

__all__ = [
    "Builder",
]
