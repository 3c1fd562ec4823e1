import os
import shutil
import tempfile

import pytest

_ft_test_data_dir = None


def pytest_configure(config):
    """Point the app at a throwaway SQLite file before anything imports it.

    Seeding and the Gemini client are switched off so every test starts from
    an empty, offline database.
    """
    global _ft_test_data_dir
    td = tempfile.mkdtemp(prefix="ft_test_data_")
    _ft_test_data_dir = td
    os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(td, 'test.db')}"
    os.environ["SEED_DATABASE"] = "false"
    os.environ["GEMINI_API_KEY"] = ""
    os.environ["API_KEY"] = ""
    os.environ.setdefault("SIBLING_WITHOUT_PARENT", "allow")


def pytest_unconfigure(config):
    global _ft_test_data_dir
    td = _ft_test_data_dir
    _ft_test_data_dir = None
    if td and os.path.exists(td):
        shutil.rmtree(td, ignore_errors=True)


# ============================================================
# DATABASE
# ============================================================

@pytest.fixture
def db():
    from app.main import app  # noqa: F401  (registers every table)
    from app.database import Base, SessionLocal, engine

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    from app.core.record_store import PersonStore

    return PersonStore(db)


@pytest.fixture
def make_person():
    """Factory for unsaved Person rows with sensible descriptive defaults."""
    from app.models.person import Person, Placement

    def _make(person_id, name=None, parent_id=None, spouse_id=None, placement=None, **extra):
        if placement is None:
            placement = Placement.CHILD.value if parent_id else Placement.ROOT.value
        return Person(
            id=person_id,
            name=name or person_id.upper(),
            gender=extra.pop("gender", "OTHER"),
            birth_date=extra.pop("birth_date", "1900-01-01"),
            parent_id=parent_id,
            spouse_id=spouse_id,
            placement=placement,
            **extra,
        )

    return _make


@pytest.fixture
def family(store, make_person):
    """
    g  (root)  == gs (spouse-only)
    |
    p
    |-- c1
    |-- c2

    u  (unrelated root, no links)
    """
    store.insert(make_person("g", "Grandpa", gender="MALE"))
    store.insert(make_person("gs", "Grandma", spouse_id="g", placement="SPOUSE", gender="FEMALE"))
    store.update_fields("g", {"spouse_id": "gs"})
    store.insert(make_person("p", "Parent", parent_id="g"))
    store.insert(make_person("c1", "Child One", parent_id="p"))
    store.insert(make_person("c2", "Child Two", parent_id="p"))
    store.insert(make_person("u", "Unrelated"))
    return store


# ============================================================
# HTTP
# ============================================================

@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient
    from app.main import app

    with TestClient(app) as c:
        yield c


def _make_user(db, user_id, name, role, password):
    from app.auth import hash_password
    from app.models.user import User

    user = User(id=user_id, name=name, role=role, hashed_password=hash_password(password))
    db.add(user)
    db.commit()
    return user


def _headers(user_id):
    from app.auth import create_access_token

    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture
def owner(db):
    return _make_user(db, "owner-1", "Owner", "OWNER", "owner-pass")


@pytest.fixture
def contributor(db):
    return _make_user(db, "contrib-1", "Helper", "CONTRIBUTOR", "helper-pass")


@pytest.fixture
def observer(db):
    return _make_user(db, "observer-1", "Viewer", "OBSERVER", "viewer-pass")


@pytest.fixture
def owner_headers(owner):
    return _headers(owner.id)


@pytest.fixture
def contributor_headers(contributor):
    return _headers(contributor.id)


@pytest.fixture
def observer_headers(observer):
    return _headers(observer.id)
