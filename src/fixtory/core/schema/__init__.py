"""Schema functionality: entity metadata, registry, decorator and field markers."""

from fixtory.core.schema.core import (
    SchemaRegistry,
    entity_type,
    force_set,
    get_registry,
    read_only,
    required,
)
from fixtory.core.schema.models import (
    EntityMeta,
    FieldId,
    FieldMeta,
    UnknownFieldError,
    UnknownRecordKindError,
    UnregisteredEntityError,
)

__all__ = [
    # Models
    "EntityMeta",
    "FieldId",
    "FieldMeta",
    "UnknownFieldError",
    "UnknownRecordKindError",
    "UnregisteredEntityError",
    # Core
    "entity_type",
    "force_set",
    "get_registry",
    "read_only",
    "required",
    "SchemaRegistry",
]
