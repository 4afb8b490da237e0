"""Local in-memory persistence implementation.

Simple dict-based store suitable for single-process use and testing. It
enforces what a real persistence layer would: required fields, per-type
validation rules, and identity assignment.

Usage:
    store = LocalStore()
    store.add_rule(Account, lambda account, identity: None if account.name else "name is blank")
    factory = Factory(store=store)
"""

from __future__ import annotations

import copy as cp
import logging
from collections.abc import Callable, Iterator, Sequence
from typing import Any, TypeVar

from fixtory.core.identity import EntityId, Identity
from fixtory.core.schema import SchemaRegistry, force_set, get_registry
from fixtory.core.types import Copy
from fixtory.storage.allocator import IdAllocator
from fixtory.storage.identity import IdentityContext
from fixtory.storage.protocol import CreatedBatch, FieldFailure, PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ValidationRule = Callable[[Any, Identity], str | None]
"""rule(entity, identity) -> rejection message, or None to accept."""


class LocalStore:
    """In-memory store keyed by EntityId.

    Structure:
        _records[entity_id] = deep copy of the entity as persisted

    Args:
        schema: Schema registry describing stored types (default: global).
        identity: Identity context creates run under (default: a fresh one).
    """

    def __init__(
        self,
        schema: SchemaRegistry | None = None,
        identity: IdentityContext | None = None,
    ):
        self._schema = schema or get_registry()
        self._identity = identity or IdentityContext()
        self._allocator = IdAllocator()
        self._records: dict[EntityId, Any] = {}
        self._created_by: dict[EntityId, Identity] = {}
        self._rules: dict[type, list[ValidationRule]] = {}
        self.batches: list[CreatedBatch] = []
        """History of accepted create calls, oldest first."""

    @property
    def identity(self) -> IdentityContext:
        return self._identity

    def add_rule(self, entity_type: type, rule: ValidationRule) -> None:
        """Register a validation rule checked for every created entity of a type.

        Args:
            entity_type: Registered entity type the rule applies to.
            rule: Callable returning a rejection message or None.
        """
        self._schema.describe(entity_type)
        self._rules.setdefault(entity_type, []).append(rule)

    def _validate(self, position: int, entity: Any, identity: Identity) -> list[FieldFailure]:
        meta = self._schema.describe(type(entity))
        failures: list[FieldFailure] = []

        if meta.identity_field and getattr(entity, meta.identity_field, None) is not None:
            failures.append(
                FieldFailure(position, meta.type_name, (meta.identity_field,), "already persisted")
            )

        missing = tuple(
            name
            for name, f in meta.fields.items()
            if f.required and not f.read_only and getattr(entity, name, None) is None
        )
        if missing:
            failures.append(
                FieldFailure(position, meta.type_name, missing, "required field(s) missing")
            )

        for rule in self._rules.get(type(entity), ()):
            message = rule(entity, identity)
            if message:
                failures.append(FieldFailure(position, meta.type_name, (), message))
        return failures

    def create(self, entities: Sequence[Any]) -> list[Any]:
        """Persist a batch of entities, all or nothing.

        Every entity is validated before any is stored. Accepted entities get
        their identity field set in place.

        Args:
            entities: Constructed entities of registered types.

        Returns:
            The same entities, now carrying their ids.

        Raises:
            PersistenceError: If any entity is rejected. Nothing is stored.
        """
        identity = self._identity.current
        failures = [
            failure
            for position, entity in enumerate(entities)
            for failure in self._validate(position, entity, identity)
        ]
        if failures:
            raise PersistenceError(failures)

        batch = CreatedBatch(
            type_names=tuple(sorted({self._schema.describe(type(e)).type_name for e in entities})),
            identity=identity.name,
        )
        for entity in entities:
            meta = self._schema.describe(type(entity))
            entity_id = self._allocator.allocate(meta.type_name)
            if meta.identity_field:
                force_set(entity, meta.identity_field, entity_id)
            self._records[entity_id] = cp.deepcopy(entity)
            self._created_by[entity_id] = identity
            batch.ids.append(entity_id)

        if entities:
            self.batches.append(batch)
            logger.info(
                "Created %d %s as %s", len(entities), "/".join(batch.type_names), identity.name
            )
        return list(entities)

    def get(self, entity_id: EntityId) -> Copy[Any] | None:
        """Get a copy of a persisted entity.

        Args:
            entity_id: Id assigned on creation.

        Returns:
            Deep copy of the entity, or None if unknown.
        """
        record = self._records.get(entity_id)
        return cp.deepcopy(record) if record is not None else None

    def exists(self, entity_id: EntityId) -> bool:
        """Check if an entity id was persisted by this store."""
        return entity_id in self._records and self._allocator.is_allocated(entity_id)

    def all(self, entity_type: type[T]) -> Iterator[Copy[T]]:
        """Iterate copies of all persisted entities of a type, in creation order.

        Yields:
            Deep copy of each entity.
        """
        for record in self._records.values():
            if type(record) is entity_type:
                yield cp.deepcopy(record)

    def count(self, entity_type: type | None = None) -> int:
        """Number of persisted entities, optionally of one type."""
        if entity_type is None:
            return len(self._records)
        return sum(1 for record in self._records.values() if type(record) is entity_type)

    def created_by(self, entity_id: EntityId) -> Identity | None:
        """Identity an entity was created under."""
        return self._created_by.get(entity_id)
