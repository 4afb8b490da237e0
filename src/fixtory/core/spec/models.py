"""Field specifications: what a field is bound to for a whole batch.

A FieldSpec is one of four closed variants, each expanding to a value per
record index:

    Scalar("Some account")        # same value for every record
    Sequence(["A", "B"])          # record i gets element i
    Reference(account)            # the referenced entity's identity
    Provided(UniqueSequence())    # provider invoked once per index

Plain values are turned into specs once, by `coerce`, when they enter a
default table or a builder.
"""

from __future__ import annotations

import copy as cp
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from fixtory.core.identity import EntityId
from fixtory.core.provider.models import FieldProvider, ResolutionContext

if TYPE_CHECKING:
    from fixtory.core.schema import FieldId, SchemaRegistry


class FieldRangeError(IndexError):
    """Raised when a per-index value source has no value for an index."""

    def __init__(self, field: FieldId, index: int, length: int):
        super().__init__(
            f"{field!r} has {length} value(s), no value for record index {index}"
        )
        self.field = field
        self.index = index
        self.length = length


class UnsavedReferenceError(ValueError):
    """Raised when a referenced entity has no identity yet."""

    pass


class FieldSpec:
    """Base class for field specifications."""

    __slots__ = ()

    def value_at(self, index: int, context: ResolutionContext) -> Any:
        """Concrete value for record `index`."""
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class Scalar(FieldSpec):
    """Same value for every record. Each record gets its own copy."""

    value: Any

    def value_at(self, index: int, context: ResolutionContext) -> Any:
        return cp.deepcopy(self.value)


@dataclass(frozen=True, slots=True, init=False)
class Sequence(FieldSpec):
    """Ordered values, one per record index.

    Strict by default: a batch larger than the sequence fails. With
    `cycle=True` record i gets element `i mod len(values)`. Elements that
    are registered entities resolve to their identities, like a Reference.
    """

    values: tuple[Any, ...]
    cycle: bool

    def __init__(self, values: Iterable[Any], cycle: bool = False):
        object.__setattr__(self, "values", tuple(values))
        object.__setattr__(self, "cycle", cycle)

    def value_at(self, index: int, context: ResolutionContext) -> Any:
        length = len(self.values)
        if self.cycle and length:
            value = self.values[index % length]
        elif index >= length:
            raise FieldRangeError(context.field, index, length)
        else:
            value = self.values[index]
        if context.schema.is_registered(type(value)):
            return Reference(value).value_at(index, context)
        return cp.deepcopy(value)


@dataclass(frozen=True, slots=True)
class Reference(FieldSpec):
    """Identity of another entity (or an EntityId used as-is)."""

    target: Any

    def value_at(self, index: int, context: ResolutionContext) -> EntityId:
        identity = context.schema.identity_of(self.target)
        if identity is None:
            raise UnsavedReferenceError(
                f"{context.field!r} references an unsaved "
                f"{type(self.target).__name__}; create it first"
            )
        return identity


@dataclass(frozen=True, slots=True)
class Provided(FieldSpec):
    """A provider, invoked once per record index."""

    provider: FieldProvider

    def value_at(self, index: int, context: ResolutionContext) -> Any:
        return self.provider.next(index, context)


def coerce(value: Any, schema: SchemaRegistry | None = None, cycle: bool = False) -> FieldSpec:
    """Turn a plain value into a FieldSpec.

    Args:
        value: A FieldSpec (kept), a FieldProvider, a list (a Sequence), an
            EntityId or registered entity instance (a Reference), or any
            other value (a Scalar).
        schema: Registry used to recognize entity instances.
        cycle: Whether lists become cycling sequences.

    Returns:
        The FieldSpec for `value`.
    """
    if isinstance(value, FieldSpec):
        return value
    if isinstance(value, FieldProvider):
        return Provided(value)
    if isinstance(value, list):
        return Sequence(value, cycle=cycle)
    if isinstance(value, EntityId):
        return Reference(value)
    if schema is not None and schema.is_registered(type(value)):
        return Reference(value)
    return Scalar(value)
