from app.core.record_store import PersonStore
from app.core.tree_builder import build_tree
from app.models.user import User
from app.seed import seed_database, seed_family, seed_users


def test_seed_builds_a_couple(db):
    seed_database(db)

    tree = build_tree(PersonStore(db).list())
    assert tree["id"] == "1"
    assert tree["spouse"]["id"] == "s1"
    assert tree["children"] == []

    roles = sorted(u.role for u in db.query(User).all())
    assert roles == ["CONTRIBUTOR", "OWNER"]


def test_seed_only_fills_empty_tables(db):
    seed_database(db)
    assert seed_users(db) == 0
    assert seed_family(db) == 0
