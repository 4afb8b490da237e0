"""Default value tables per entity type and template.

Usage:
    cache = DefaultCache()
    cache.register(
        DefaultTable.of(
            Account,
            {"name": "Some account"},
            templates={"Products": {"industry": "Manufacturing"}},
        )
    )

    cache.get(Account)               # {Account.name: Scalar("Some account")}
    cache.get(Account, "Products")   # base overlaid with the template
    cache.get(Account, "Services")   # MissingTemplateError

Tables are configuration: registered once at process start, never changed
afterwards. `get` always hands out a fresh copy.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from fixtory.config import get_settings
from fixtory.core.schema import FieldId, SchemaRegistry, get_registry
from fixtory.core.spec import FieldSpec, coerce
from fixtory.core.types import Copy

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when default tables are missing or inconsistent."""

    pass


class MissingTemplateError(ConfigurationError):
    """Raised when a template is requested that the type does not define."""

    def __init__(self, template: str, type_name: str):
        super().__init__(f"Template {template!r} is not defined for {type_name}")
        self.template = template
        self.type_name = type_name


class UnregisteredDefaultsError(ConfigurationError):
    """Raised when defaults are requested for a type without a table."""

    def __init__(self, type_name: str):
        super().__init__(f"No default table registered for {type_name}")
        self.type_name = type_name


type FieldValues = Mapping[str | FieldId, Any]


def _normalize(
    entity_type: type, values: FieldValues, schema: SchemaRegistry, cycle: bool
) -> MappingProxyType[FieldId, FieldSpec]:
    return MappingProxyType(
        {
            schema.field(entity_type, key): coerce(value, schema=schema, cycle=cycle)
            for key, value in values.items()
        }
    )


@dataclass(frozen=True, slots=True)
class DefaultTable:
    """Base and template defaults for one entity type.

    Build with `DefaultTable.of`, which validates field names against the
    schema and coerces values to FieldSpecs.
    """

    entity_type: type
    base: Mapping[FieldId, FieldSpec]
    templates: Mapping[str, Mapping[FieldId, FieldSpec]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def of(
        cls,
        entity_type: type,
        base: FieldValues,
        templates: Mapping[str, FieldValues] | None = None,
        schema: SchemaRegistry | None = None,
        cycle: bool = False,
    ) -> DefaultTable:
        """Create a table from plain field values.

        Args:
            entity_type: Registered entity type.
            base: Field name (or FieldId) -> default value or FieldSpec.
            templates: Template name -> field overrides layered on `base`.
            schema: Registry used to validate field names (default: global).
            cycle: Whether plain lists become cycling sequences.

        Raises:
            UnregisteredEntityError: If `entity_type` is not registered.
            UnknownFieldError: If a key is not a field of `entity_type`.
        """
        schema = schema or get_registry()
        schema.describe(entity_type)
        return cls(
            entity_type=entity_type,
            base=_normalize(entity_type, base, schema, cycle),
            templates=MappingProxyType(
                {
                    name: _normalize(entity_type, values, schema, cycle)
                    for name, values in (templates or {}).items()
                }
            ),
        )


class DefaultCache:
    """Registry of default tables, keyed by entity type.

    Append-only: a type is registered once. Reads never observe or cause
    mutation of the stored tables.
    """

    def __init__(self) -> None:
        self._tables: dict[type, DefaultTable] = {}

    def register(self, table: DefaultTable) -> DefaultTable:
        """Register the default table of one entity type.

        Raises:
            ConfigurationError: If the type already has a table.
        """
        if table.entity_type in self._tables:
            raise ConfigurationError(
                f"Defaults for {table.entity_type.__name__} are already registered"
            )
        self._tables[table.entity_type] = table
        logger.debug(
            "Registered defaults for %s (%d field(s), templates: %s)",
            table.entity_type.__name__,
            len(table.base),
            ", ".join(table.templates) or "none",
        )
        return table

    def is_registered(self, entity_type: type) -> bool:
        return entity_type in self._tables

    def entity_types(self) -> list[type]:
        """Entity types with a registered table, in registration order."""
        return list(self._tables)

    def templates(self, entity_type: type) -> list[str]:
        """Template names defined for an entity type.

        Raises:
            UnregisteredDefaultsError: If the type has no table.
        """
        return list(self._table(entity_type).templates)

    def _table(self, entity_type: type) -> DefaultTable:
        try:
            return self._tables[entity_type]
        except KeyError:
            raise UnregisteredDefaultsError(entity_type.__name__) from None

    def get(self, entity_type: type, template: str | None = None) -> Copy[dict[FieldId, FieldSpec]]:
        """Defaults for one batch: base values overlaid with a template's.

        Args:
            entity_type: Registered entity type.
            template: Optional template name; its values win on collision.

        Returns:
            A fresh dict; mutating it does not affect later calls.

        Raises:
            UnregisteredDefaultsError: If the type has no table.
            MissingTemplateError: If the template is not defined for the type.
        """
        table = self._table(entity_type)
        values = dict(table.base)
        if template is not None:
            overlay = table.templates.get(template)
            if overlay is None:
                raise MissingTemplateError(template, entity_type.__name__)
            values.update(overlay)
        return values

    def missing_required(
        self, schema: SchemaRegistry | None = None
    ) -> dict[tuple[str, str | None], list[str]]:
        """Required fields no default supplies, per (type name, template).

        Read-only fields are skipped: the store sets them. Only combinations
        with at least one missing field are reported.
        """
        schema = schema or get_registry()
        report: dict[tuple[str, str | None], list[str]] = {}
        for entity_type, table in self._tables.items():
            meta = schema.describe(entity_type)
            needed = {f.field_id for f in meta.fields.values() if f.required and not f.read_only}
            for template in (None, *table.templates):
                supplied = set(self.get(entity_type, template))
                missing = sorted(f.name for f in needed - supplied)
                if missing:
                    report[(meta.type_name, template)] = missing
        return report

    def validate(self, schema: SchemaRegistry | None = None) -> None:
        """Check every table supplies all fields the store requires.

        Raises:
            ConfigurationError: Listing each incomplete (type, template).
        """
        report = self.missing_required(schema)
        if report:
            lines = [
                f"{type_name}{f'[{template}]' if template else ''}: {', '.join(fields)}"
                for (type_name, template), fields in report.items()
            ]
            raise ConfigurationError("Defaults miss required fields: " + "; ".join(lines))


# Module-level cache instance
_default_cache = DefaultCache()


def get_default_cache() -> DefaultCache:
    """Access the global default cache.

    Returns:
        The process-local DefaultCache instance.
    """
    return _default_cache


def register_defaults(
    entity_type: type,
    base: FieldValues,
    templates: Mapping[str, FieldValues] | None = None,
) -> DefaultTable:
    """Register defaults for a type in the global cache.

    Meant to be called at import time, next to the entity definition.
    """
    table = DefaultTable.of(entity_type, base, templates, cycle=get_settings().cycle_sequences)
    return _default_cache.register(table)
