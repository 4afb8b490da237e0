"""Load default tables from a YAML document.

Document shape (one entry per registered type name):

    Account:
      base:
        name: Some account
      templates:
        Products:
          industry: Manufacturing

Values are plain YAML scalars and lists; lists become per-index sequences.
Providers cannot be expressed in YAML and are registered in code.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, RootModel, ValidationError

from fixtory.config import FactorySettings, get_settings
from fixtory.core.schema import SchemaRegistry, get_registry
from fixtory.defaults.cache import ConfigurationError, DefaultCache, DefaultTable, get_default_cache

logger = logging.getLogger(__name__)


class TableDocument(BaseModel):
    """Defaults of one entity type as written in the file."""

    base: dict[str, Any] = Field(default_factory=dict)
    templates: dict[str, dict[str, Any]] = Field(default_factory=dict)


class DefaultsDocument(RootModel[dict[str, TableDocument]]):
    """Whole defaults file: type name -> table."""

    pass


def parse_defaults(text: str) -> DefaultsDocument:
    """Parse and validate a YAML defaults document.

    Raises:
        ConfigurationError: If the YAML is malformed or has the wrong shape.
    """
    try:
        data = yaml.safe_load(text) or {}
        return DefaultsDocument.model_validate(data)
    except (yaml.YAMLError, ValidationError) as e:
        raise ConfigurationError(f"Invalid defaults document: {e}") from e


def load_defaults(
    path: str | Path,
    schema: SchemaRegistry | None = None,
    cache: DefaultCache | None = None,
    cycle: bool = False,
) -> DefaultCache:
    """Register every table of a YAML defaults file.

    Args:
        path: File to read.
        schema: Registry resolving type names (default: global).
        cache: Cache to register into (default: global).
        cycle: Whether lists become cycling sequences.

    Returns:
        The cache the tables were registered into.

    Raises:
        ConfigurationError: If the document is invalid or a type is already
            registered in the cache.
        UnregisteredEntityError: If a type name is unknown to the schema.
        UnknownFieldError: If a field is unknown to its type.
    """
    schema = schema or get_registry()
    cache = cache if cache is not None else get_default_cache()
    document = parse_defaults(Path(path).read_text(encoding="utf-8"))

    for type_name, table in document.root.items():
        entity_type = schema.get_by_name(type_name)
        cache.register(
            DefaultTable.of(
                entity_type, table.base, table.templates, schema=schema, cycle=cycle
            )
        )
    logger.info("Loaded defaults for %d type(s) from %s", len(document.root), path)
    return cache


def load_default_cache(
    settings: FactorySettings | None = None,
    schema: SchemaRegistry | None = None,
) -> DefaultCache:
    """Build a cache from the file named in settings.

    Returns an empty cache when `defaults_path` is not set.
    """
    settings = settings or get_settings()
    cache = DefaultCache()
    if settings.defaults_path:
        load_defaults(
            settings.defaults_path, schema=schema, cache=cache, cycle=settings.cycle_sequences
        )
    return cache
