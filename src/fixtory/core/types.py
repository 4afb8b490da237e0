"""Core type definitions for fixtory."""

from typing import Any

type Copy[T] = T
"""Type alias indicating a value is a copy of shared state.

When you see `Copy[T]` in a return type, the returned value is a copy.
Mutating it does NOT affect the default tables or the store it came from.
"""

type EntityType = type
"""A registered entity class, used as the key for schema and defaults."""

type Record = dict[Any, Any]
"""One resolved record: FieldId -> concrete value."""
