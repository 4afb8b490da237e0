"""Schema registry, entity decorator, and field markers.

Usage:
    @entity_type
    @dataclass
    class Account:
        name: str | None = required()
        industry: str | None = None
        id: EntityId | None = read_only()

    # With record kinds and a custom name:
    @entity_type(name="Opportunity", record_kinds=("Sales", "Renewal"))
    @dataclass
    class Deal:
        account_id: EntityId | None = required()
        id: EntityId | None = read_only()

    # Pydantic models mark fields through json_schema_extra:
    @entity_type
    class Contact(BaseModel):
        last_name: str | None = Field(default=None, json_schema_extra={"required": True})
        id: EntityId | None = None
"""

from __future__ import annotations

import dataclasses
import hashlib
from collections.abc import Callable, Iterable
from dataclasses import is_dataclass
from types import MappingProxyType
from typing import Any, overload

from fixtory.core.identity import EntityId
from fixtory.core.schema.models import (
    EntityMeta,
    FieldId,
    FieldMeta,
    UnknownFieldError,
    UnknownRecordKindError,
    UnregisteredEntityError,
)


def _stable_id(text: str) -> int:
    """Generate deterministic ID from a name.

    Uses SHA256 so the same code produces the same ids across processes.

    Args:
        text: Fully qualified name to hash.

    Returns:
        Deterministic integer ID derived from the name hash.
    """
    return int(hashlib.sha256(text.encode()).hexdigest()[:16], 16)


def required(**kwargs: Any) -> Any:
    """Dataclass field the persistence layer requires, defaulting to None."""
    metadata = {**kwargs.pop("metadata", {}), "required": True}
    return dataclasses.field(default=None, metadata=metadata, **kwargs)


def read_only(**kwargs: Any) -> Any:
    """Dataclass field only settable by structural builds and the store."""
    metadata = {**kwargs.pop("metadata", {}), "read_only": True}
    return dataclasses.field(default=None, metadata=metadata, **kwargs)


def force_set(entity: Any, name: str, value: Any) -> None:
    """Set an attribute, bypassing frozen dataclasses and pydantic validation."""
    object.__setattr__(entity, name, value)


def _is_pydantic(cls: type) -> bool:
    """Check if class is a Pydantic model without importing pydantic.

    Args:
        cls: Class to check.

    Returns:
        True if class inherits from pydantic.BaseModel, False otherwise.
    """
    for base in cls.__mro__:
        if base.__module__.startswith("pydantic") and base.__name__ == "BaseModel":
            return True
    return False


def _dataclass_fields(cls: type, identity_field: str | None) -> dict[str, FieldMeta]:
    result: dict[str, FieldMeta] = {}
    for f in dataclasses.fields(cls):
        has_default = (
            f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
        )
        result[f.name] = FieldMeta(
            field_id=FieldId(cls, f.name),
            required=not has_default or bool(f.metadata.get("required", False)),
            read_only=bool(f.metadata.get("read_only", False)) or f.name == identity_field,
            has_default=has_default,
            init=f.init,
        )
    return result


def _pydantic_fields(cls: type, identity_field: str | None) -> dict[str, FieldMeta]:
    result: dict[str, FieldMeta] = {}
    for name, info in cls.model_fields.items():  # type: ignore[attr-defined]
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        has_default = not info.is_required()
        result[name] = FieldMeta(
            field_id=FieldId(cls, name),
            required=not has_default or bool(extra.get("required", False)),
            read_only=bool(extra.get("read_only", False)) or name == identity_field,
            has_default=has_default,
        )
    return result


class SchemaRegistry:
    """Process-local registry describing entity types.

    Maps entity classes to their metadata and type names back to classes.
    This is the schema collaborator the default cache, builders and the
    store consult to validate field identifiers.
    """

    def __init__(self) -> None:
        """Initialize empty schema registry."""
        self._by_type: dict[type, EntityMeta] = {}
        self._by_name: dict[str, type] = {}

    def register(
        self,
        cls: type,
        name: str | None = None,
        identity_field: str | None = "id",
        record_kinds: Iterable[str] = (),
    ) -> EntityMeta:
        """Register an entity type and return its metadata.

        Args:
            cls: Entity class to register.
            name: Type name used in diagnostics and defaults files.
                Defaults to the class name.
            identity_field: Field the store writes the EntityId into. Ignored
                (set to None) when the class has no such field.
            record_kinds: Names of record kinds entities of this type may have.

        Returns:
            Entity metadata.

        Raises:
            TypeError: If the class is neither a dataclass nor a Pydantic model.
            RuntimeError: If the type name is already taken by another class.
        """
        if cls in self._by_type:
            return self._by_type[cls]

        pydantic = _is_pydantic(cls)
        if not (is_dataclass(cls) or pydantic):
            raise TypeError(
                f"Entity type {cls.__name__} must be a dataclass or Pydantic model. "
                f"Did you forget @dataclass decorator?"
            )

        type_name = name or cls.__name__
        if type_name in self._by_name:
            existing = self._by_name[type_name]
            raise RuntimeError(f"Entity type name collision: {cls} and {existing} use {type_name!r}")

        if pydantic:
            fields = _pydantic_fields(cls, identity_field)
        else:
            fields = _dataclass_fields(cls, identity_field)
        if identity_field not in fields:
            identity_field = None

        kinds = {
            kind: f"rk{_stable_id(f'{type_name}.{kind}'):x}"[:15] for kind in record_kinds
        }
        meta = EntityMeta(
            entity_type=cls,
            type_id=_stable_id(f"{cls.__module__}.{cls.__qualname__}"),
            type_name=type_name,
            identity_field=identity_field,
            fields=MappingProxyType(fields),
            record_kinds=MappingProxyType(kinds),
            pydantic=pydantic,
        )
        self._by_type[cls] = meta
        self._by_name[type_name] = cls
        return meta

    def is_registered(self, cls: type) -> bool:
        """Check if a type is registered as an entity type."""
        return cls in self._by_type

    def describe(self, cls: type) -> EntityMeta:
        """Get metadata for a registered entity type.

        Raises:
            UnregisteredEntityError: If the class is not registered.
        """
        try:
            return self._by_type[cls]
        except KeyError:
            raise UnregisteredEntityError(
                f"{getattr(cls, '__name__', cls)!r} is not a registered entity type"
            ) from None

    def get_by_name(self, type_name: str) -> type:
        """Get an entity class by its registered type name.

        Raises:
            UnregisteredEntityError: If no type is registered under that name.
        """
        try:
            return self._by_name[type_name]
        except KeyError:
            raise UnregisteredEntityError(
                f"{type_name!r} is not a registered entity type"
            ) from None

    def field(self, cls: type, key: str | FieldId) -> FieldId:
        """Normalize a field name or FieldId to a FieldId of `cls`.

        Raises:
            UnknownFieldError: If the field does not exist on `cls`, or the
                FieldId belongs to another type.
        """
        meta = self.describe(cls)
        if isinstance(key, FieldId):
            if key.entity_type is not cls:
                raise UnknownFieldError(meta.type_name, f"{key.entity_type.__name__}.{key.name}")
            key = key.name
        return meta.field(key).field_id

    def fields(self, cls: type) -> dict[str, FieldId]:
        """All fields of `cls`, by name."""
        return {name: f.field_id for name, f in self.describe(cls).fields.items()}

    def populated_fields(self, entity: Any) -> frozenset[FieldId]:
        """Fields holding a non-None value on `entity`."""
        meta = self.describe(type(entity))
        return frozenset(
            f.field_id
            for name, f in meta.fields.items()
            if getattr(entity, name, None) is not None
        )

    def identity_of(self, entity: Any) -> EntityId | None:
        """Identity of an entity, or None if it has not been persisted.

        An EntityId is its own identity.
        """
        if isinstance(entity, EntityId):
            return entity
        meta = self.describe(type(entity))
        if meta.identity_field is None:
            return None
        return getattr(entity, meta.identity_field, None)

    def record_kind_id(self, cls: type, kind: str) -> str:
        """Resolve a record kind name to its identifier.

        Raises:
            UnknownRecordKindError: If `kind` is not declared on `cls`.
        """
        meta = self.describe(cls)
        try:
            return meta.record_kinds[kind]
        except KeyError:
            raise UnknownRecordKindError(meta.type_name, kind) from None


# Module-level registry instance
_registry = SchemaRegistry()


def get_registry() -> SchemaRegistry:
    """Access the global schema registry.

    Returns:
        The process-local SchemaRegistry instance.
    """
    return _registry


@overload
def entity_type(cls: type) -> type: ...


@overload
def entity_type(
    cls: None = None,
    *,
    name: str | None = None,
    identity_field: str | None = "id",
    record_kinds: Iterable[str] = (),
) -> Callable[[type], type]: ...


def entity_type(
    cls: type | None = None,
    *,
    name: str | None = None,
    identity_field: str | None = "id",
    record_kinds: Iterable[str] = (),
) -> type | Callable[[type], type]:
    """Register a dataclass or Pydantic model as an entity type.

    Supports three forms:
        @entity_type                         # bare decorator
        @entity_type()                       # parenthesized, no args
        @entity_type(record_kinds=("A",))    # factory with args

    Args:
        cls: The class to register, or None if called with arguments.
        name: Registered type name (defaults to the class name).
        identity_field: Field receiving the EntityId on persistence.
        record_kinds: Record kind names resolvable via `record_kind_id`.

    Returns:
        Decorated class or decorator function.

    Raises:
        TypeError: If class is neither a dataclass nor Pydantic model.

    Note:
        Apply @entity_type AFTER @dataclass.
    """

    def decorator(c: type) -> type:
        meta = _registry.register(
            c, name=name, identity_field=identity_field, record_kinds=tuple(record_kinds)
        )
        c.__entity_meta__ = meta  # type: ignore
        return c

    if cls is None:
        return decorator
    else:
        return decorator(cls)
