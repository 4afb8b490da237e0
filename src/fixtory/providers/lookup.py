"""Providers resolving one value once and repeating it for every record."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fixtory.core.provider import ResolutionContext

_UNSET = object()


class Lookup:
    """Calls `resolve(context)` on first use and memoizes the result.

    Args:
        resolve: Callable producing the value from the resolution context.
    """

    def __init__(self, resolve: Callable[[ResolutionContext], Any]):
        self._resolve = resolve
        self._value: Any = _UNSET

    @property
    def resolved(self) -> bool:
        return self._value is not _UNSET

    def next(self, index: int, context: ResolutionContext) -> Any:
        if self._value is _UNSET:
            self._value = self._resolve(context)
        return self._value


class RecordKind(Lookup):
    """Resolves a record kind name to its identifier through the schema.

    Usage:
        builder.put("kind_id", RecordKind(Deal, "Renewal"))

    Raises:
        UnknownRecordKindError: On first use, if the kind is not declared.
    """

    def __init__(self, entity_type: type, name: str):
        super().__init__(lambda context: context.schema.record_kind_id(entity_type, name))
        self.entity_type = entity_type
        self.name = name
