"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from fixture_models import Account, Contact, Deal, Ledger, Product

from fixtory import (
    DefaultCache,
    DefaultTable,
    Factory,
    FactorySettings,
    LocalStore,
    RecordKind,
    SharedParent,
    UniqueSequence,
    UniqueToken,
)


@pytest.fixture
def settings():
    """Settings with library defaults, ignoring the environment."""
    return FactorySettings(_env_file=None)


@pytest.fixture
def defaults():
    """Fresh default tables for the shared entity types."""
    cache = DefaultCache()
    cache.register(
        DefaultTable.of(
            Account,
            {"name": "Some account"},
            templates={
                "Products": {"industry": "Manufacturing"},
                "Services": {"industry": "Consulting", "rating": "Hot"},
            },
        )
    )
    cache.register(
        DefaultTable.of(
            Contact,
            {"last_name": UniqueSequence("Contact "), "account_id": SharedParent(Account)},
        )
    )
    cache.register(
        DefaultTable.of(Deal, {"title": "Deal", "kind_id": RecordKind(Deal, "Sales")})
    )
    cache.register(DefaultTable.of(Ledger, {"code": UniqueToken("LG", length=6)}))
    cache.register(DefaultTable.of(Product, {"sku": UniqueToken("SKU", length=8), "price": 100}))
    return cache


@pytest.fixture
def store():
    """Fresh in-memory store."""
    return LocalStore()


@pytest.fixture
def factory(defaults, store, settings):
    """Factory wired to the fresh defaults and store."""
    return Factory(defaults=defaults, store=store, settings=settings)
