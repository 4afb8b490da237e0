"""Entity and execution identity models.

Usage:
    entity = EntityId(type_name="Account", index=1001)
    admin = SystemIdentity.ADMIN
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EntityId:
    """Identity assigned to an entity by the persistence layer.

    The type name is part of the identity so ids of different entity types
    never compare equal, even when their indices collide.
    """

    type_name: str
    index: int = 0

    def __str__(self) -> str:
        return f"{self.type_name}:{self.index}"


@dataclass(frozen=True, slots=True)
class Identity:
    """An execution identity entities are created under."""

    name: str
    elevated: bool = False


class SystemIdentity:
    """Well-known execution identities."""

    USER = Identity(name="fixture-user")
    ADMIN = Identity(name="fixture-admin", elevated=True)

    _RESERVED_INDICES = 1000  # First 1000 indices per type are never allocated
