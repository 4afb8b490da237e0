"""Field providers: stateful generators invoked once per record index."""

from fixtory.providers.lookup import Lookup, RecordKind
from fixtory.providers.parent import SharedParent, UniqueParent
from fixtory.providers.pluck import Pluck
from fixtory.providers.unique import UniqueSequence, UniqueToken

__all__ = [
    "UniqueSequence",
    "UniqueToken",
    "SharedParent",
    "UniqueParent",
    "Pluck",
    "Lookup",
    "RecordKind",
]
