"""Fluent, reusable batch specifications.

Usage:
    builder = factory.builder(Account).set_count(2).put("name", ["A", "B"])
    products = builder.set_template("Products").create()
    services = builder.set_template("Services").create()   # fresh batch, same spec

Terminal operations read the builder's state when they run and never clear
it, so one builder can produce any number of independent batches.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from fixtory.core.provider import FactoryState
from fixtory.core.schema import FieldId
from fixtory.core.spec import FieldSpec
from fixtory.providers.pluck import Pluck
from fixtory.resolution import normalize_overrides

if TYPE_CHECKING:
    from fixtory.factory.factory import Factory


class Builder[EntityT]:
    """Accumulates entity type, template, count and field overrides.

    Overrides have overwrite semantics: the last value put for a field wins.
    Values are coerced to FieldSpecs when they are put.

    Args:
        entity_type: Registered entity type to build.
        factory: Factory running the terminal operations.
    """

    def __init__(self, entity_type: type[EntityT], factory: Factory):
        factory.schema.describe(entity_type)
        self._entity_type = entity_type
        self._factory = factory
        self._template: str | None = None
        self._count = 1
        self._overrides: dict[FieldId, FieldSpec] = {}

    @property
    def entity_type(self) -> type[EntityT]:
        return self._entity_type

    @property
    def template(self) -> str | None:
        return self._template

    @property
    def count(self) -> int:
        return self._count

    @property
    def overrides(self) -> dict[FieldId, FieldSpec]:
        """Copy of the current overrides."""
        return dict(self._overrides)

    @property
    def state(self) -> FactoryState:
        """Snapshot of the batch this builder currently describes."""
        return FactoryState(count=self._count, entity_type=self._entity_type, template=self._template)

    def set_count(self, count: int) -> Builder[EntityT]:
        """Set the number of entities per batch.

        Raises:
            ValueError: If count is negative.
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        self._count = count
        return self

    def set_template(self, template: str | None) -> Builder[EntityT]:
        """Select a template (None for the base defaults).

        An unknown template is reported by the terminal operation.
        """
        self._template = template
        return self

    def put(self, field: str | FieldId, value: Any) -> Builder[EntityT]:
        """Bind a field to a value, list, entity, provider or FieldSpec.

        Raises:
            UnknownFieldError: If the field does not belong to the entity type.
        """
        return self.put_all({field: value})

    def put_all(self, values: Mapping[str | FieldId, Any]) -> Builder[EntityT]:
        """Bind several fields at once, with the same semantics as `put`."""
        self._overrides.update(
            normalize_overrides(
                self._entity_type,
                values,
                self._factory.schema,
                cycle=self._factory.settings.cycle_sequences,
            )
        )
        return self

    def __setitem__(self, field: str | FieldId, value: Any) -> None:
        """Bind a field: builder["name"] = "Acme"."""
        self.put(field, value)

    def clone_fields_from(self, sources: Sequence[Any]) -> Builder[EntityT]:
        """Copy populated fields, record by record, from existing entities.

        The populated fields of `sources[0]` decide which fields are copied;
        all sources are assumed to populate the same fields. The identity
        field is never copied. Record i takes its values from `sources[i]`.

        Raises:
            ValueError: If `sources` is empty.
        """
        if not sources:
            raise ValueError("clone_fields_from() needs at least one source entity")
        schema = self._factory.schema
        identity_field = schema.describe(type(sources[0])).identity_field
        sources = list(sources)
        return self.put_all(
            {
                field.name: Pluck(field, sources)
                for field in schema.populated_fields(sources[0])
                if field.name != identity_field
            }
        )

    def resolve(self) -> list[dict[FieldId, Any]]:
        """Resolve the current spec into one field -> value map per record."""
        return self._factory.resolve(
            self._entity_type, self._template, self._count, dict(self._overrides)
        )

    def build(self) -> list[EntityT]:
        """Construct a batch in memory through normal construction."""
        state = self.state
        return self._factory.build(state, self.resolve())

    def build_structural(self) -> list[EntityT]:
        """Construct a batch in memory with read-only fields set. Never persisted."""
        state = self.state
        return self._factory.build_structural(state, self.resolve())

    def create(self) -> list[EntityT]:
        """Construct and persist a batch."""
        state = self.state
        return self._factory.create(state, self.resolve())

    def create_one(self) -> EntityT:
        """Construct and persist a single entity, whatever the count is set to."""
        state = FactoryState(count=1, entity_type=self._entity_type, template=self._template)
        records = self._factory.resolve(
            self._entity_type, self._template, 1, dict(self._overrides)
        )
        (entity,) = self._factory.create(state, records)
        return entity

    def create_as_admin(self) -> list[EntityT]:
        """Construct and persist a batch as the elevated identity.

        Resolution runs elevated too, so parents created by providers are
        created as the admin. The prior identity is restored on every exit.
        """
        with self._factory.identity.elevated():
            return self.create()

    def __repr__(self) -> str:
        fields = ", ".join(sorted(field.name for field in self._overrides))
        return f"Builder({self.state}; overrides: {fields or 'none'})"
