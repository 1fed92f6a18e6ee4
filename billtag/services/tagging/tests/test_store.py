import uuid

import pytest

from billtag.services.tagging.controls import ControlTagType
from billtag.services.tagging.objects import ACCOUNT, INVOICE, ObjectType
from billtag.services.tagging.store import TagStore
from billtag.services.tagging.tags import Tag, control_tag, descriptive_tag, \
    make_tag

ACCOUNT_ID = uuid.UUID("6c7b1e52-3c47-4a26-9a2c-3b6f1f0f6f01")


@pytest.fixture
def store():
    return TagStore(ACCOUNT_ID, ACCOUNT)


def test_tag_variants():
    tag = descriptive_tag("vip")
    assert not tag.is_control
    assert tag.control_type is None
    assert tag.effects == {}
    assert not tag.is_bound

    tag = control_tag(ControlTagType.AUTO_PAY_OFF)
    assert tag.is_control
    assert tag.tag_definition_name == "AUTO_PAY_OFF"
    assert tag.effects == {"process_payment": False}

    tag = control_tag("auto_invoicing_off")
    assert tag.control_type is ControlTagType.AUTO_INVOICING_OFF
    assert str(tag) == "AUTO_INVOICING_OFF"


def test_reserved_names_are_control_tags():
    with pytest.raises(ValueError):
        descriptive_tag("AUTO_PAY_OFF")

    tag = make_tag("manual_pay")
    assert tag.control_type is ControlTagType.MANUAL_PAY
    assert tag.tag_definition_name == "MANUAL_PAY"

    tag = Tag("WRITTEN_OFF")
    assert tag.control_type is ControlTagType.WRITTEN_OFF

    with pytest.raises(ValueError):
        Tag("vip", control_type=ControlTagType.TEST)

    with pytest.raises(ValueError):
        control_tag("vip")


def test_tag_ids():
    tag_id = uuid.uuid4()
    tag = descriptive_tag("vip", id=tag_id)
    assert tag.id == tag_id
    assert descriptive_tag("vip").id != descriptive_tag("vip").id

    with pytest.raises(TypeError):
        descriptive_tag("vip", object_id=str(ACCOUNT_ID))


def test_descriptive_only(store):
    store.add(descriptive_tag("tag1"))
    assert store.names() == ["tag1"]
    assert store.generate_invoice()
    assert store.process_payment()
    assert store.enforce_overdue()


def test_control_suppression(store):
    store.add(control_tag(ControlTagType.AUTO_INVOICING_OFF))
    assert not store.generate_invoice()
    assert store.process_payment()

    store.add(control_tag(ControlTagType.AUTO_PAY_OFF))
    assert not store.generate_invoice()
    assert not store.process_payment()
    assert store.enforce_overdue()

    store.remove_by_name("AUTO_INVOICING_OFF")
    assert store.generate_invoice()
    assert not store.process_payment()


def test_predicates_compose(store):
    store.add(control_tag(ControlTagType.WRITTEN_OFF))
    store.add(control_tag(ControlTagType.OVERDUE_ENFORCEMENT_OFF))
    assert not store.enforce_overdue()

    store.remove_by_name(ControlTagType.WRITTEN_OFF)
    assert not store.enforce_overdue()

    store.remove_by_name("overdue_enforcement_off")
    assert store.enforce_overdue()

    store.add(control_tag(ControlTagType.TEST))
    assert store.generate_invoice()
    assert store.process_payment()
    assert store.enforce_overdue()

    with pytest.raises(ValueError):
        store.allows("ship_goods")


def test_add_is_keyed_by_name(store):
    first = descriptive_tag("vip")
    store.add(first)
    store.add(descriptive_tag("vip"))
    assert len(store) == 1
    assert store.get("vip") is first


def test_add_binds_tag(store):
    tag = descriptive_tag("vip")
    store.add(tag)
    assert tag.object_id == ACCOUNT_ID
    assert tag.object_type is ACCOUNT

    other = descriptive_tag("late", object_id=uuid.uuid4(), object_type=INVOICE)
    with pytest.raises(ValueError):
        store.add(other)
    assert "late" not in store


def test_remove_is_idempotent(store):
    tag = descriptive_tag("vip")
    store.add(tag)
    store.remove(tag)
    store.remove(tag)
    store.remove_by_name("unknown")
    assert len(store) == 0
    assert tag not in store


def test_members_are_sorted(store):
    for name in ["zeta", "alpha", "AUTO_PAY_OFF", "beta"]:
        store.add(make_tag(name))

    assert [t.tag_definition_name for t in store.members()] == [
        "AUTO_PAY_OFF",
        "alpha",
        "beta",
        "zeta",
    ]
    assert list(store) == store.members()
    assert "AUTO_PAY_OFF" in store
    assert ControlTagType.AUTO_PAY_OFF in store

    store.clear()
    assert len(store) == 0


def test_from_tags():
    tags = {"vip": descriptive_tag("vip"), "TEST": control_tag("TEST")}
    store = TagStore.from_tags(ACCOUNT_ID, "account", tags)
    assert store.object_type is ObjectType("ACCOUNT")
    assert store.names() == ["TEST", "vip"]

    store = TagStore.from_tags(ACCOUNT_ID, ACCOUNT, list(tags.values()))
    assert len(store) == 2


def test_lookup_by_tag(store):
    tag = control_tag("TEST")
    store.add(tag)
    assert store.get(control_tag("TEST")) is tag

    store.remove_by_name(tag)
    assert len(store) == 0


def test_object_type_vocabulary():
    assert ObjectType("ACCOUNT") is ACCOUNT
    assert str(ACCOUNT) == "account"
    with pytest.raises(ValueError):
        ObjectType("foo")
    with pytest.raises(ValueError):
        TagStore(ACCOUNT_ID, "foo")
    with pytest.raises(ValueError):
        descriptive_tag("vip").bind(ACCOUNT_ID, "foo")
