"""Schema models: field identifiers and entity metadata.

Field metadata is derived once, when an entity type is registered, and is
immutable afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


class UnregisteredEntityError(TypeError):
    """Raised when a class (or type name) is not a registered entity type."""

    pass


class UnknownFieldError(KeyError):
    """Raised when a field does not belong to the entity type it is used with."""

    def __init__(self, type_name: str, field_name: str):
        super().__init__(f"{type_name} has no field {field_name!r}")
        self.type_name = type_name
        self.field_name = field_name

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownRecordKindError(KeyError):
    """Raised when a record kind name is not declared on the entity type."""

    def __init__(self, type_name: str, kind: str):
        super().__init__(f"{type_name} has no record kind {kind!r}")
        self.type_name = type_name
        self.kind = kind

    def __str__(self) -> str:
        return str(self.args[0])


@dataclass(frozen=True, slots=True)
class FieldId:
    """Opaque field identifier, scoped to its owning entity type."""

    entity_type: type
    name: str

    def __repr__(self) -> str:
        return f"FieldId({self.entity_type.__name__}.{self.name})"


@dataclass(frozen=True, slots=True)
class FieldMeta:
    """Metadata for one field of a registered entity type.

    Attributes:
        field_id: The field's identifier.
        required: The persistence layer rejects records without a value.
        read_only: Only settable in structural builds (ids, computed fields).
        has_default: The constructor supplies a value when none is given.
        init: The constructor accepts the field as an argument.
    """

    field_id: FieldId
    required: bool = False
    read_only: bool = False
    has_default: bool = True
    init: bool = True

    @property
    def name(self) -> str:
        return self.field_id.name


@dataclass(frozen=True, slots=True)
class EntityMeta:
    """Metadata for registered entity types."""

    entity_type: type
    type_id: int
    type_name: str
    identity_field: str | None
    fields: MappingProxyType[str, FieldMeta]
    record_kinds: MappingProxyType[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    pydantic: bool = False

    def field(self, name: str) -> FieldMeta:
        """Get metadata for a field by name.

        Raises:
            UnknownFieldError: If the type has no such field.
        """
        try:
            return self.fields[name]
        except KeyError:
            raise UnknownFieldError(self.type_name, name) from None

    @property
    def required_fields(self) -> frozenset[FieldId]:
        return frozenset(f.field_id for f in self.fields.values() if f.required)

    @property
    def read_only_fields(self) -> frozenset[FieldId]:
        return frozenset(f.field_id for f in self.fields.values() if f.read_only)

    def values_of(self, entity: Any) -> dict[str, Any]:
        """Current attribute values of an entity, by field name."""
        return {name: getattr(entity, name, None) for name in self.fields}
