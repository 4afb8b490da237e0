"""Providers that create parent entities and return their identities.

Usage:
    # Many-to-one: every contact points at the same account.
    accounts = SharedParent(Account)
    factory.builder(Contact).set_count(5).put("account_id", accounts).create()

    # One-to-one: every contact gets an account of its own.
    factory.builder(Contact).set_count(5).put("account_id", UniqueParent(Account)).create()

Parents are created through the factory driving the batch, with the parent
type's defaults, so creating them is a real side effect: a rejected parent
aborts the child batch.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fixtory.core.identity import EntityId
from fixtory.core.provider import ProviderError, ResolutionContext

logger = logging.getLogger(__name__)


class _ParentProvider:
    def __init__(
        self,
        parent_type: type,
        template: str | None = None,
        overrides: Mapping[str, Any] | None = None,
    ):
        self._parent_type = parent_type
        self._template = template
        self._overrides = dict(overrides or {})

    @property
    def parent_type(self) -> type:
        return self._parent_type

    def _create(self, count: int, context: ResolutionContext) -> list[Any]:
        factory = context.require_factory()
        logger.debug(
            "Creating %d %s parent(s) for %r", count, self._parent_type.__name__, context.field
        )
        return (
            factory.builder(self._parent_type)
            .set_template(self._template)
            .put_all(self._overrides)
            .set_count(count)
            .create()
        )

    def _identity(self, parent: Any, context: ResolutionContext) -> EntityId:
        identity = context.schema.identity_of(parent)
        if identity is None:
            raise ProviderError(
                f"{self._parent_type.__name__} has no identity field to reference"
            )
        return identity


class SharedParent(_ParentProvider):
    """Creates one parent on first use and returns its identity for every record.

    The parent is cached on the provider: reuse the instance to reuse the
    parent across batches.
    """

    def __init__(
        self,
        parent_type: type,
        template: str | None = None,
        overrides: Mapping[str, Any] | None = None,
    ):
        super().__init__(parent_type, template, overrides)
        self._parent: Any | None = None

    @property
    def parent(self) -> Any | None:
        """The cached parent, or None before first use."""
        return self._parent

    def next(self, index: int, context: ResolutionContext) -> EntityId:
        if self._parent is None:
            (self._parent,) = self._create(1, context)
        return self._identity(self._parent, context)


class UniqueParent(_ParentProvider):
    """Gives every record a freshly created parent of its own.

    All parents of a batch are created in one persistence call when the
    provider is asked for record 0.
    """

    def __init__(
        self,
        parent_type: type,
        template: str | None = None,
        overrides: Mapping[str, Any] | None = None,
    ):
        super().__init__(parent_type, template, overrides)
        self._batch: list[Any] = []
        self.parents: list[Any] = []
        """Every parent created by this provider, across batches."""

    def next(self, index: int, context: ResolutionContext) -> EntityId:
        if index == 0:
            self._batch = self._create(context.state.count, context)
            self.parents.extend(self._batch)
        if index >= len(self._batch):
            raise ProviderError(
                f"{context.field!r}: no parent created for record {index}; "
                f"parents are created when record 0 is resolved"
            )
        return self._identity(self._batch[index], context)
