"""Core functionalities: stateless protocols and primitives.

Architecture Note:
    core/ contains pure building blocks: identities, schema metadata, field
    specifications and the provider contract. Stateful services (the default
    cache, providers, the store, the factory) live outside core/.
"""

from fixtory.core.identity import EntityId, Identity, SystemIdentity
from fixtory.core.provider import (
    FactoryState,
    FieldProvider,
    ProviderError,
    ProviderExhaustedError,
    ResolutionContext,
)
from fixtory.core.schema import (
    EntityMeta,
    FieldId,
    FieldMeta,
    SchemaRegistry,
    UnknownFieldError,
    UnknownRecordKindError,
    UnregisteredEntityError,
    entity_type,
    get_registry,
    read_only,
    required,
)
from fixtory.core.spec import (
    FieldRangeError,
    FieldSpec,
    Provided,
    Reference,
    Scalar,
    Sequence,
    UnsavedReferenceError,
    coerce,
)
from fixtory.core.types import Copy

__all__ = [
    # Types
    "Copy",
    # Identity
    "EntityId",
    "Identity",
    "SystemIdentity",
    # Schema
    "entity_type",
    "get_registry",
    "read_only",
    "required",
    "SchemaRegistry",
    "EntityMeta",
    "FieldId",
    "FieldMeta",
    "UnknownFieldError",
    "UnknownRecordKindError",
    "UnregisteredEntityError",
    # Field specs
    "FieldSpec",
    "Scalar",
    "Sequence",
    "Reference",
    "Provided",
    "coerce",
    "FieldRangeError",
    "UnsavedReferenceError",
    # Provider contract
    "FieldProvider",
    "ResolutionContext",
    "FactoryState",
    "ProviderError",
    "ProviderExhaustedError",
]
