"""Field provider contract: protocol, invocation context and errors."""

from fixtory.core.provider.models import (
    FactoryState,
    FieldProvider,
    ProviderError,
    ProviderExhaustedError,
    ResolutionContext,
)

__all__ = [
    "FactoryState",
    "FieldProvider",
    "ProviderError",
    "ProviderExhaustedError",
    "ResolutionContext",
]
