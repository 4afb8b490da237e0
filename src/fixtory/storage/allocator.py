"""Entity id allocation service.

IdAllocator is a stateful service handing out entity ids per entity type.
"""

from __future__ import annotations

from fixtory.core.identity import EntityId, SystemIdentity


class IdAllocator:
    """Allocates entity ids, one monotonically increasing index per type name.

    Indices start after the reserved range so fixture ids never collide with
    hand-written well-known ids. Ids are never reused.
    """

    def __init__(self) -> None:
        self._next_index: dict[str, int] = {}

    def allocate(self, type_name: str) -> EntityId:
        """Allocate a new entity id for `type_name`.

        Returns:
            Newly allocated EntityId.
        """
        index = self._next_index.get(type_name, SystemIdentity._RESERVED_INDICES)
        self._next_index[type_name] = index + 1
        return EntityId(type_name=type_name, index=index)

    def is_allocated(self, entity: EntityId) -> bool:
        """Check if an id was handed out by this allocator.

        Args:
            entity: Entity id to check.

        Returns:
            True if the id's index was allocated for its type, False otherwise.
        """
        next_index = self._next_index.get(entity.type_name, SystemIdentity._RESERVED_INDICES)
        return SystemIdentity._RESERVED_INDICES <= entity.index < next_index
