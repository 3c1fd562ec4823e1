import pytest

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.person import Person


def test_insert_get_and_list(store, make_person):
    store.insert(make_person("a", "Ann"))
    store.insert(make_person("b", "Ben", parent_id="a"))

    assert store.get("a").name == "Ann"
    assert store.get("missing") is None
    assert store.get(None) is None
    assert [p.id for p in store.list()] == ["a", "b"]


def test_duplicate_id_is_a_conflict(store, make_person):
    store.insert(make_person("a"))
    with pytest.raises(ConflictError):
        store.insert(make_person("a"))


def test_update_fields(store, make_person):
    store.insert(make_person("a", "Ann"))
    store.update_fields("a", {"name": "Anna", "location": "Paris"})

    store.db.expire_all()
    person = store.get("a")
    assert person.name == "Anna"
    assert person.location == "Paris"


def test_update_unknown_id_or_field(store, make_person):
    with pytest.raises(NotFoundError):
        store.update_fields("missing", {"name": "x"})

    store.insert(make_person("a"))
    with pytest.raises(ValidationError):
        store.update_fields("a", {"favourite_colour": "red"})


def test_delete(store, make_person):
    store.insert(make_person("a"))
    store.delete("a")
    assert store.get("a") is None

    with pytest.raises(NotFoundError):
        store.delete("a")


def test_orphan_children(store, make_person):
    store.insert(make_person("p"))
    store.insert(make_person("k1", parent_id="p"))
    store.insert(make_person("k2", parent_id="p"))

    assert store.orphan_children("p") == 2

    store.db.expire_all()
    for kid in ("k1", "k2"):
        person = store.get(kid)
        assert person.parent_id is None
        assert person.placement == "ROOT"


def test_transaction_rolls_back_every_write(store, make_person):
    store.insert(make_person("a"))

    with pytest.raises(RuntimeError):
        with store.transaction():
            store.insert(make_person("b"))
            store.update_fields("a", {"name": "changed"})
            raise RuntimeError("boom")

    store.db.expire_all()
    assert store.get("b") is None
    assert store.get("a").name == "A"
    assert store.db.query(Person).count() == 1
