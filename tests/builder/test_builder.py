"""Tests for the fluent builder.

Critical Invariants:
- Last put for a field wins
- Terminal operations snapshot the builder and never clear it
- clone_fields_from copies record i from source i
"""

import pytest
from fixture_models import Account, Contact

from fixtory import (
    EntityId,
    FactoryState,
    FieldId,
    MissingTemplateError,
    Pluck,
    Provided,
    Scalar,
    Sequence,
    UniqueSequence,
    UnknownFieldError,
    UnregisteredEntityError,
)

NAME = FieldId(Account, "name")
INDUSTRY = FieldId(Account, "industry")
RATING = FieldId(Account, "rating")


def test_defaults(factory):
    builder = factory.builder(Account)

    assert builder.entity_type is Account
    assert builder.count == 1
    assert builder.template is None
    assert builder.overrides == {}
    assert builder.state == FactoryState(count=1, entity_type=Account)


def test_fluent_calls_return_builder(factory):
    builder = factory.builder(Account)

    assert builder.set_count(2) is builder
    assert builder.set_template("Products") is builder
    assert builder.put("name", "x") is builder
    assert builder.put_all({"rating": "Hot"}) is builder
    assert builder.clone_fields_from([Account(name="A")]) is builder


def test_put_overwrites(factory):
    builder = factory.builder(Account).put("name", "first").put("name", ["second"])

    assert builder.overrides == {NAME: Sequence(["second"])}


def test_put_all_overwrites_per_key(factory):
    builder = factory.builder(Account).put_all({"name": "A", "industry": "Retail"})
    builder.put_all({"name": "B"})

    assert builder.overrides == {NAME: Scalar("B"), INDUSTRY: Scalar("Retail")}


def test_put_coerces_providers(factory):
    provider = UniqueSequence()

    assert factory.builder(Account).put(NAME, provider).overrides[NAME] == Provided(provider)


def test_setitem(factory):
    builder = factory.builder(Account)
    builder["rating"] = "Warm"

    assert builder.overrides == {RATING: Scalar("Warm")}


def test_overrides_property_is_a_copy(factory):
    builder = factory.builder(Account).put("name", "A")
    builder.overrides[NAME] = Scalar("B")

    assert builder.overrides[NAME] == Scalar("A")


def test_unknown_field(factory):
    with pytest.raises(UnknownFieldError):
        factory.builder(Account).put("nickname", "x")
    with pytest.raises(UnknownFieldError):
        factory.builder(Account).put(FieldId(Contact, "email"), "x")


def test_unregistered_entity_type(factory):
    class NotAnEntity:
        pass

    with pytest.raises(UnregisteredEntityError):
        factory.builder(NotAnEntity)


def test_negative_count(factory):
    with pytest.raises(ValueError):
        factory.builder(Account).set_count(-1)


def test_unknown_template_is_reported_by_terminal_operation(factory):
    builder = factory.builder(Account).set_template("Nope")

    with pytest.raises(MissingTemplateError, match="Nope"):
        builder.build()


def test_resolve_returns_records(factory):
    records = factory.builder(Account).set_count(2).put("name", ["A", "B"]).resolve()

    assert records == [{NAME: "A"}, {NAME: "B"}]


def test_reuse_with_template_change(factory):
    """CRITICAL: a second terminal call is an independent batch.

    Why: Products and Services batches come from one builder.
    """
    builder = factory.builder(Account).set_count(2).put("name", UniqueSequence("Account "))

    products = builder.set_template("Products").create()
    services = builder.set_template("Services").create()

    assert [a.industry for a in products] == ["Manufacturing"] * 2
    assert [a.rating for a in products] == [None, None]
    assert [a.industry for a in services] == ["Consulting"] * 2
    assert [a.rating for a in services] == ["Hot", "Hot"]
    assert len({a.name for a in products + services}) == 4
    assert len({a.id for a in products + services}) == 4
    assert builder.template == "Services"
    assert NAME in builder.overrides


def test_mutation_after_terminal_call_does_not_touch_results(factory):
    builder = factory.builder(Account).put("name", "Before")
    accounts = builder.build()

    builder.put("name", "After").set_count(3)

    assert [a.name for a in accounts] == ["Before"]
    assert [a.name for a in builder.build()] == ["After"] * 3


def test_clone_fields_from(factory):
    sources = [
        Account(name="A", industry="Retail", id=EntityId("Account", 1)),
        Account(name="B", industry="Banking", id=EntityId("Account", 2)),
    ]

    builder = factory.builder(Account).set_count(2).clone_fields_from(sources)

    assert set(builder.overrides) == {NAME, INDUSTRY}, "identity field is not cloned"
    assert all(isinstance(spec, Provided) for spec in builder.overrides.values())
    assert all(isinstance(spec.provider, Pluck) for spec in builder.overrides.values())

    records = builder.resolve()
    assert records == [
        {NAME: "A", INDUSTRY: "Retail"},
        {NAME: "B", INDUSTRY: "Banking"},
    ]


def test_clone_uses_first_source_fields_only(factory):
    sources = [Account(name="A"), Account(name="B", rating="Hot")]

    builder = factory.builder(Account).set_count(2).clone_fields_from(sources)

    assert set(builder.overrides) == {NAME}


def test_clone_then_create_persists_copies(factory, store):
    originals = factory.builder(Account).set_count(2).put("name", ["A", "B"]).create()

    clones = factory.builder(Account).set_count(2).clone_fields_from(originals).create()

    assert [c.name for c in clones] == ["A", "B"]
    assert {c.id for c in clones}.isdisjoint({o.id for o in originals})
    assert store.count(Account) == 4


def test_clone_more_records_than_sources(factory):
    builder = factory.builder(Account).set_count(3).clone_fields_from([Account(name="A")])

    with pytest.raises(IndexError):
        builder.build()


def test_clone_from_nothing(factory):
    with pytest.raises(ValueError, match="at least one source"):
        factory.builder(Account).clone_fields_from([])


def test_create_one_ignores_count(factory):
    account = factory.builder(Account).set_count(5).create_one()

    assert isinstance(account, Account)
    assert account.id is not None


def test_repr(factory):
    builder = factory.builder(Account).set_count(2).set_template("Products").put("name", "x")

    assert repr(builder) == "Builder(2 x Account, template='Products'; overrides: name)"
