"""Default tables: base and template defaults per entity type."""

from fixtory.defaults.cache import (
    ConfigurationError,
    DefaultCache,
    DefaultTable,
    MissingTemplateError,
    UnregisteredDefaultsError,
    get_default_cache,
    register_defaults,
)
from fixtory.defaults.loader import (
    DefaultsDocument,
    TableDocument,
    load_default_cache,
    load_defaults,
    parse_defaults,
)

__all__ = [
    "DefaultCache",
    "DefaultTable",
    "get_default_cache",
    "register_defaults",
    "ConfigurationError",
    "MissingTemplateError",
    "UnregisteredDefaultsError",
    "DefaultsDocument",
    "TableDocument",
    "parse_defaults",
    "load_defaults",
    "load_default_cache",
]
