"""Copy a field, record by record, from already-built entities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from fixtory.core.provider import ResolutionContext
from fixtory.core.schema import FieldId
from fixtory.core.spec import FieldRangeError


class Pluck:
    """Returns `sources[index].<field>`.

    Args:
        field: Field name, or FieldId whose name is read from the sources.
        sources: Entities to read from, one per record index.
    """

    def __init__(self, field: str | FieldId, sources: Sequence[Any]):
        self._name = field.name if isinstance(field, FieldId) else field
        self._sources = list(sources)

    @property
    def name(self) -> str:
        return self._name

    def next(self, index: int, context: ResolutionContext) -> Any:
        if index >= len(self._sources):
            raise FieldRangeError(context.field, index, len(self._sources))
        return getattr(self._sources[index], self._name)
