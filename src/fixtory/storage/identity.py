"""Execution identity context.

Persistence runs "as" an identity. Administrative creates switch to an
elevated identity for the duration of one operation:

    context = IdentityContext()
    with context.elevated():
        store.create(entities)      # runs as the admin identity
    context.current                 # back to the prior identity
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager

from fixtory.core.identity import Identity, SystemIdentity

logger = logging.getLogger(__name__)


class IdentityContext:
    """Tracks the identity operations currently execute as.

    Args:
        default: Identity in effect outside any `run_as` block.
        admin: Identity `elevated()` switches to.
    """

    def __init__(
        self,
        default: Identity = SystemIdentity.USER,
        admin: Identity = SystemIdentity.ADMIN,
    ):
        self._current = default
        self._admin = admin

    @property
    def current(self) -> Identity:
        """Identity in effect right now."""
        return self._current

    @property
    def admin(self) -> Identity:
        return self._admin

    @contextmanager
    def run_as(self, identity: Identity) -> Iterator[Identity]:
        """Execute the enclosed block as `identity`.

        The prior identity is restored on every exit path, including errors
        raised inside the block.
        """
        prior = self._current
        self._current = identity
        logger.debug("Switched identity %s -> %s", prior.name, identity.name)
        try:
            yield identity
        finally:
            self._current = prior
            logger.debug("Restored identity %s", prior.name)

    def elevated(self) -> AbstractContextManager[Identity]:
        """Execute the enclosed block as the admin identity."""
        return self.run_as(self._admin)
