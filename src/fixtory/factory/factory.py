"""Factory: central coordinator turning resolved records into entities.

Usage:
    factory = Factory()

    # Fluent batches
    accounts = factory.builder(Account).set_count(3).create()

    # In-memory only, read-only fields allowed (never persisted)
    snapshot = factory.builder(Account).put("id", EntityId("Account", 7)).build_structural()

    # Persisted under the elevated identity
    factory.builder(Account).create_as_admin()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from fixtory.builder.builder import Builder
from fixtory.config import FactorySettings, get_settings
from fixtory.core.identity import Identity
from fixtory.core.provider import FactoryState
from fixtory.core.schema import FieldId, SchemaRegistry, force_set, get_registry
from fixtory.defaults import DefaultCache, get_default_cache
from fixtory.resolution import resolve
from fixtory.storage.identity import IdentityContext
from fixtory.storage.local import LocalStore
from fixtory.storage.protocol import Persistence, PersistenceError

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")


class ReadOnlyFieldError(Exception):
    """Raised when a constrained build is asked to set read-only fields."""

    def __init__(self, type_name: str, fields: Sequence[str]):
        super().__init__(
            f"{type_name} field(s) {', '.join(fields)} are read-only; "
            f"use build_structural() for records that are never persisted"
        )
        self.type_name = type_name
        self.fields = tuple(fields)


class Factory:
    """Builds and persists entities from resolved records.

    Owns the collaborators a batch needs: schema, default tables, store and
    identity context. Builders hold a reference to the factory that made
    them and call back into it for their terminal operations.

    Args:
        schema: Schema registry (default: global).
        defaults: Default tables (default: global cache).
        store: Persistence backend (default: a new LocalStore).
        identity: Identity context (default: the store's, or a new one whose
            admin identity is named by settings.admin_identity).
        settings: Factory settings (default: from the environment).
    """

    def __init__(
        self,
        schema: SchemaRegistry | None = None,
        defaults: DefaultCache | None = None,
        store: Persistence | None = None,
        identity: IdentityContext | None = None,
        settings: FactorySettings | None = None,
    ):
        self._settings = settings or get_settings()
        self._schema = schema or get_registry()
        self._defaults = defaults if defaults is not None else get_default_cache()
        if identity is None:
            identity = getattr(store, "identity", None) or IdentityContext(
                admin=Identity(name=self._settings.admin_identity, elevated=True)
            )
        self._identity = identity
        self._store = store if store is not None else LocalStore(self._schema, identity)

    @property
    def schema(self) -> SchemaRegistry:
        return self._schema

    @property
    def defaults(self) -> DefaultCache:
        return self._defaults

    @property
    def store(self) -> Persistence:
        return self._store

    @property
    def identity(self) -> IdentityContext:
        return self._identity

    @property
    def settings(self) -> FactorySettings:
        return self._settings

    def builder(self, entity_type: type[EntityT]) -> Builder[EntityT]:
        """Start a batch specification for an entity type.

        Raises:
            UnregisteredEntityError: If the type is not registered.
        """
        return Builder(entity_type, self)

    def resolve(
        self,
        entity_type: type,
        template: str | None,
        count: int,
        overrides: Mapping[str | FieldId, Any],
    ) -> list[dict[FieldId, Any]]:
        """Resolve a batch with this factory's collaborators."""
        return resolve(
            entity_type,
            template,
            count,
            overrides,
            cache=self._defaults,
            schema=self._schema,
            factory=self,
            cycle=self._settings.cycle_sequences,
        )

    def _construct(self, entity_type: type, record: Mapping[FieldId, Any], structural: bool) -> Any:
        meta = self._schema.describe(entity_type)
        values = {field.name: value for field, value in record.items()}

        if not structural:
            read_only = sorted(name for name in values if meta.field(name).read_only)
            if read_only:
                raise ReadOnlyFieldError(meta.type_name, read_only)
            return entity_type(**values)

        if meta.pydantic:
            return entity_type.model_construct(**values)  # type: ignore[attr-defined]
        init_args = {name: v for name, v in values.items() if meta.field(name).init}
        entity = entity_type(**init_args)
        for name, value in values.items():
            if name not in init_args:
                force_set(entity, name, value)
        return entity

    def build(self, state: FactoryState, records: Sequence[Mapping[FieldId, Any]]) -> list[Any]:
        """Construct entities through normal, validated construction.

        Raises:
            ReadOnlyFieldError: If a record sets a read-only field.
        """
        return [self._construct(state.entity_type, record, structural=False) for record in records]

    def build_structural(
        self, state: FactoryState, records: Sequence[Mapping[FieldId, Any]]
    ) -> list[Any]:
        """Construct entities with read-only and computed fields set.

        Pydantic models skip validation (`model_construct`). The result is
        for inspection only and is never persisted.
        """
        return [self._construct(state.entity_type, record, structural=True) for record in records]

    def create(self, state: FactoryState, records: Sequence[Mapping[FieldId, Any]]) -> list[Any]:
        """Construct entities and persist them as one batch.

        Raises:
            ReadOnlyFieldError: If a record sets a read-only field.
            PersistenceError: If the store rejects the batch. The error is
                re-raised unchanged, with `factory_state` set and a note
                naming the batch.
        """
        entities = self.build(state, records)
        try:
            created = self._store.create(entities)
        except PersistenceError as e:
            e.factory_state = state
            e.add_note(f"while creating {state} as {self._identity.current.name}")
            raise
        logger.info("Created %s as %s", state, self._identity.current.name)
        return created

    def create_as_admin(
        self, state: FactoryState, records: Sequence[Mapping[FieldId, Any]]
    ) -> list[Any]:
        """Like `create`, executed as the elevated identity."""
        with self._identity.elevated():
            return self.create(state, records)
