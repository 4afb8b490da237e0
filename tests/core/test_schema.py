"""Tests for the schema registry.

Critical Invariants:
- Field ids are scoped to their type
- Required/read-only metadata drives persistence and constrained builds
- Type ids are deterministic across registries
"""

from dataclasses import dataclass

import pytest
from fixture_models import Account, Contact, Deal, Ledger, Product

from fixtory import (
    EntityId,
    FieldId,
    SchemaRegistry,
    UnknownFieldError,
    UnknownRecordKindError,
    UnregisteredEntityError,
    get_registry,
)


@pytest.fixture
def schema():
    return get_registry()


def test_dataclass_field_metadata(schema):
    """required() and read_only() markers end up in field metadata."""
    meta = schema.describe(Account)

    assert meta.type_name == "Account"
    assert meta.identity_field == "id"
    assert meta.field("name").required
    assert not meta.field("industry").required
    assert meta.field("id").read_only
    assert meta.required_fields == frozenset({FieldId(Account, "name")})


def test_init_false_field_is_read_only_and_not_init(schema):
    meta = schema.describe(Ledger)

    assert meta.field("audited").read_only
    assert not meta.field("audited").init
    assert meta.field("code").init


def test_pydantic_field_metadata(schema):
    """Pydantic models mark fields through json_schema_extra."""
    meta = schema.describe(Product)

    assert meta.pydantic
    assert meta.field("sku").required
    assert meta.field("created_at").read_only
    assert meta.field("id").read_only, "identity field is always read-only"
    assert not meta.field("price").required


def test_register_rejects_plain_class():
    class Plain:
        pass

    with pytest.raises(TypeError, match="must be a dataclass or Pydantic model"):
        SchemaRegistry().register(Plain)


def test_type_name_collision_is_rejected():
    @dataclass
    class First:
        value: int = 0

    @dataclass
    class Second:
        value: int = 0

    registry = SchemaRegistry()
    registry.register(First, name="Thing")

    with pytest.raises(RuntimeError, match="name collision"):
        registry.register(Second, name="Thing")


def test_type_ids_are_deterministic(schema):
    """Same class, different registry, same type id."""
    assert SchemaRegistry().register(Account).type_id == schema.describe(Account).type_id


def test_field_normalizes_names(schema):
    assert schema.field(Account, "name") == FieldId(Account, "name")
    assert schema.field(Account, FieldId(Account, "name")) == FieldId(Account, "name")


def test_field_rejects_unknown_name(schema):
    with pytest.raises(UnknownFieldError, match="Account has no field 'nickname'"):
        schema.field(Account, "nickname")


def test_field_rejects_other_types_field_id(schema):
    """A FieldId of Contact is never valid for Account, even with a shared name."""
    with pytest.raises(UnknownFieldError):
        schema.field(Account, FieldId(Contact, "id"))


def test_describe_unregistered_type(schema):
    @dataclass
    class Stranger:
        value: int = 0

    with pytest.raises(UnregisteredEntityError):
        schema.describe(Stranger)
    with pytest.raises(UnregisteredEntityError):
        schema.get_by_name("Stranger")


def test_get_by_name(schema):
    assert schema.get_by_name("Deal") is Deal


def test_populated_fields(schema):
    account = Account(name="Acme", industry=None, rating="Warm")

    assert schema.populated_fields(account) == frozenset(
        {FieldId(Account, "name"), FieldId(Account, "rating")}
    )


def test_identity_of(schema):
    account = Account(name="Acme")
    assert schema.identity_of(account) is None

    entity_id = EntityId("Account", 1001)
    account.id = entity_id
    assert schema.identity_of(account) == entity_id
    assert schema.identity_of(entity_id) is entity_id


def test_record_kind_ids(schema):
    sales = schema.record_kind_id(Deal, "Sales")
    renewal = schema.record_kind_id(Deal, "Renewal")

    assert sales != renewal
    assert sales == SchemaRegistry().register(Deal, record_kinds=("Sales",)).record_kinds["Sales"]

    with pytest.raises(UnknownRecordKindError, match="Deal has no record kind 'Upsell'"):
        schema.record_kind_id(Deal, "Upsell")
