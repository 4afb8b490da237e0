"""Field specifications: the closed set of value sources a field can be bound to."""

from fixtory.core.spec.models import (
    FieldRangeError,
    FieldSpec,
    Provided,
    Reference,
    Scalar,
    Sequence,
    UnsavedReferenceError,
    coerce,
)

__all__ = [
    "FieldSpec",
    "Scalar",
    "Sequence",
    "Reference",
    "Provided",
    "coerce",
    "FieldRangeError",
    "UnsavedReferenceError",
]
