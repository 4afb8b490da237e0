"""Resolution engine: expand defaults and overrides into concrete records.

Usage:
    records = resolve(Account, None, 2, {"name": ["A", "B"]}, cache=cache)
    # [{FieldId(Account.name): "A"}, {FieldId(Account.name): "B"}]

Precedence per field is override > template default > type default.
Overrides apply to the whole batch; per-record variation comes from the
FieldSpec itself (a Sequence or a provider).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from fixtory.core.provider import FactoryState, ResolutionContext
from fixtory.core.schema import FieldId, SchemaRegistry, get_registry
from fixtory.core.spec import FieldSpec, coerce

if TYPE_CHECKING:
    from fixtory.defaults import DefaultCache
    from fixtory.factory.factory import Factory

logger = logging.getLogger(__name__)


def normalize_overrides(
    entity_type: type,
    overrides: Mapping[str | FieldId, Any],
    schema: SchemaRegistry,
    cycle: bool = False,
) -> dict[FieldId, FieldSpec]:
    """Validate override keys against the schema and coerce values to FieldSpecs.

    Raises:
        UnknownFieldError: If a key is not a field of `entity_type`.
    """
    return {
        schema.field(entity_type, key): coerce(value, schema=schema, cycle=cycle)
        for key, value in overrides.items()
    }


def resolve(
    entity_type: type,
    template: str | None,
    count: int,
    overrides: Mapping[str | FieldId, Any],
    *,
    cache: DefaultCache,
    schema: SchemaRegistry | None = None,
    factory: Factory | None = None,
    cycle: bool = False,
) -> list[dict[FieldId, Any]]:
    """Resolve one batch into `count` field -> value maps.

    Steps:
    1. Take the defaults for (entity_type, template) from the cache
    2. Apply overrides on top, field by field
    3. For each record index in ascending order, resolve every field's spec

    Providers therefore see indices 0..count-1 in order, once each. The
    order fields are resolved in within one record is unspecified.

    Args:
        entity_type: Registered entity type.
        template: Template name, or None for the base defaults.
        count: Number of records.
        overrides: Field name (or FieldId) -> value or FieldSpec.
        cache: Default tables.
        schema: Schema registry (default: global).
        factory: Factory handed to providers that create entities.
        cycle: Whether plain-list overrides cycle.

    Returns:
        One dict per record. No partial batch is ever returned.

    Raises:
        ValueError: If count is negative.
        ConfigurationError: If the type or template has no defaults.
        FieldRangeError: If a sequence or pluck source is too short.
        Exception: Whatever a provider raises, unchanged.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    schema = schema or get_registry()
    state = FactoryState(count=count, entity_type=entity_type, template=template)

    merged = cache.get(entity_type, template)
    merged.update(normalize_overrides(entity_type, overrides, schema, cycle))

    contexts = {
        field: ResolutionContext(field=field, state=state, schema=schema, factory=factory)
        for field in merged
    }
    records = [
        {field: spec.value_at(index, contexts[field]) for field, spec in merged.items()}
        for index in range(count)
    ]
    logger.debug("Resolved %s: %d field(s) per record", state, len(merged))
    return records
