"""fixtory: test-fixture generation for schema-described entities.

Usage:
    from dataclasses import dataclass

    from fixtory import EntityId, Factory, UniqueSequence, entity_type, read_only
    from fixtory import register_defaults, required

    @entity_type
    @dataclass
    class Account:
        name: str | None = required()
        industry: str | None = None
        id: EntityId | None = read_only()

    register_defaults(
        Account,
        {"name": UniqueSequence("Account ")},
        templates={"Products": {"industry": "Manufacturing"}},
    )

    factory = Factory()
    accounts = factory.builder(Account).set_count(3).set_template("Products").create()
"""

__version__ = "0.1.0"

# Core primitives
from fixtory.core import (
    Copy,
    EntityId,
    FactoryState,
    FieldId,
    FieldProvider,
    FieldRangeError,
    FieldSpec,
    Identity,
    Provided,
    ProviderError,
    ProviderExhaustedError,
    Reference,
    ResolutionContext,
    Scalar,
    SchemaRegistry,
    Sequence,
    SystemIdentity,
    UnknownFieldError,
    UnknownRecordKindError,
    UnregisteredEntityError,
    UnsavedReferenceError,
    entity_type,
    get_registry,
    read_only,
    required,
)

# Configuration
from fixtory.config import FactorySettings, get_settings

# Defaults
from fixtory.defaults import (
    ConfigurationError,
    DefaultCache,
    DefaultTable,
    MissingTemplateError,
    UnregisteredDefaultsError,
    get_default_cache,
    load_default_cache,
    load_defaults,
    register_defaults,
)

# Builder and factory
from fixtory.builder import Builder
from fixtory.factory import Factory, ReadOnlyFieldError

# Providers
from fixtory.providers import (
    Lookup,
    Pluck,
    RecordKind,
    SharedParent,
    UniqueParent,
    UniqueSequence,
    UniqueToken,
)

# Resolution
from fixtory.resolution import resolve

# Storage
from fixtory.storage import (
    FieldFailure,
    IdentityContext,
    LocalStore,
    Persistence,
    PersistenceError,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Copy",
    "EntityId",
    "Identity",
    "SystemIdentity",
    "entity_type",
    "get_registry",
    "read_only",
    "required",
    "SchemaRegistry",
    "FieldId",
    "FieldSpec",
    "Scalar",
    "Sequence",
    "Reference",
    "Provided",
    "FieldProvider",
    "ResolutionContext",
    "FactoryState",
    # Errors
    "ConfigurationError",
    "MissingTemplateError",
    "UnregisteredDefaultsError",
    "UnregisteredEntityError",
    "UnknownFieldError",
    "UnknownRecordKindError",
    "FieldRangeError",
    "UnsavedReferenceError",
    "ProviderError",
    "ProviderExhaustedError",
    "ReadOnlyFieldError",
    "PersistenceError",
    "FieldFailure",
    # Config
    "FactorySettings",
    "get_settings",
    # Defaults
    "DefaultCache",
    "DefaultTable",
    "get_default_cache",
    "register_defaults",
    "load_defaults",
    "load_default_cache",
    # Building
    "Builder",
    "Factory",
    "resolve",
    # Providers
    "UniqueSequence",
    "UniqueToken",
    "SharedParent",
    "UniqueParent",
    "Pluck",
    "Lookup",
    "RecordKind",
    # Storage
    "Persistence",
    "LocalStore",
    "IdentityContext",
]
