"""Field provider protocol and the state it is invoked with.

A provider produces one value per record index. The same instance is used
for a whole batch, so it can keep counters or caches between calls:

    class Doubling:
        def next(self, index: int, context: ResolutionContext) -> int:
            return index * 2

Providers are invoked in ascending index order, once per index, never
concurrently. Cross-field order within one record is unspecified.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from fixtory.core.schema import FieldId, SchemaRegistry
    from fixtory.factory.factory import Factory


class ProviderError(RuntimeError):
    """Raised when a provider cannot produce a value."""

    pass


class ProviderExhaustedError(ProviderError):
    """Raised when a provider has run out of distinct values."""

    pass


@dataclass(frozen=True, slots=True)
class FactoryState:
    """Snapshot of one batch request, for diagnostics only."""

    count: int
    entity_type: type
    template: str | None = None

    def __str__(self) -> str:
        template = f", template={self.template!r}" if self.template else ""
        return f"{self.count} x {self.entity_type.__name__}{template}"


@dataclass(frozen=True, slots=True)
class ResolutionContext:
    """What a provider sees when asked for a value.

    Attributes:
        field: Field the value is produced for.
        state: The batch being resolved.
        schema: Schema registry used for the batch.
        factory: Factory driving the batch, or None when resolving values
            without one. Providers that create entities need it.
    """

    field: FieldId
    state: FactoryState
    schema: SchemaRegistry
    factory: Factory | None = None

    def require_factory(self) -> Factory:
        """Get the factory, failing if the batch is resolved without one.

        Raises:
            ProviderError: If no factory is available.
        """
        if self.factory is None:
            raise ProviderError(
                f"Provider for {self.field!r} needs a factory to create entities, "
                f"but {self.state} is resolved without one"
            )
        return self.factory


@runtime_checkable
class FieldProvider(Protocol):
    """Produces one value per record index."""

    def next(self, index: int, context: ResolutionContext) -> Any: ...
