"""Identity functionality: entity ids and execution identities."""

from fixtory.core.identity.models import EntityId, Identity, SystemIdentity

__all__ = [
    "EntityId",
    "Identity",
    "SystemIdentity",
]
