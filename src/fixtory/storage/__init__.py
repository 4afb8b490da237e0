"""Persistence backends and the execution identity context."""

from fixtory.storage.allocator import IdAllocator
from fixtory.storage.identity import IdentityContext
from fixtory.storage.local import LocalStore, ValidationRule
from fixtory.storage.protocol import CreatedBatch, FieldFailure, Persistence, PersistenceError

__all__ = [
    "Persistence",
    "PersistenceError",
    "FieldFailure",
    "CreatedBatch",
    "LocalStore",
    "ValidationRule",
    "IdAllocator",
    "IdentityContext",
]
