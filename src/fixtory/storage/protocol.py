"""Persistence protocol for swappable backends.

The persistence layer is a black box to the factory: it receives a batch of
constructed entities and either persists all of them or raises
PersistenceError describing what it rejected.

Usage:
    store = LocalStore()
    factory = Factory(store=store)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from fixtory.core.provider import FactoryState


@dataclass(frozen=True, slots=True)
class FieldFailure:
    """One rejected entity in a batch.

    Attributes:
        position: Index of the entity within the batch.
        type_name: Entity type name.
        fields: Offending field names (empty for entity-level rules).
        message: Human readable reason.
    """

    position: int
    type_name: str
    fields: tuple[str, ...]
    message: str

    def __str__(self) -> str:
        where = f" [{', '.join(self.fields)}]" if self.fields else ""
        return f"#{self.position} {self.type_name}{where}: {self.message}"


class PersistenceError(Exception):
    """Raised when the persistence layer rejects a batch.

    Attributes:
        failures: Every rejected entity with its offending fields.
        factory_state: Batch the entities were generated for, set by the
            factory before the error propagates.
    """

    def __init__(self, failures: Sequence[FieldFailure]):
        self.failures = list(failures)
        self.factory_state: FactoryState | None = None
        super().__init__(
            f"{len(self.failures)} entit{'y' if len(self.failures) == 1 else 'ies'} "
            f"rejected: " + "; ".join(str(f) for f in self.failures)
        )

    @property
    def fields(self) -> frozenset[str]:
        """All offending field names across failures."""
        return frozenset(name for failure in self.failures for name in failure.fields)


@runtime_checkable
class Persistence(Protocol):
    """Abstract persistence interface."""

    def create(self, entities: Sequence[Any]) -> list[Any]:
        """Persist a batch, all or nothing. Returns the persisted entities."""
        ...


@dataclass(slots=True)
class CreatedBatch:
    """Bookkeeping for one accepted create call."""

    type_names: tuple[str, ...]
    identity: str
    ids: list[Any] = field(default_factory=list)
