from app.auth import hash_password, verify_password
from app.core.activity_log import log_activity
from app.models.activity_log import ActivityLog
from app.models.user import User


def test_password_hashing_round_trip():
    hashed = hash_password("secret")
    assert hashed != "secret"
    assert verify_password("secret", hashed)
    assert not verify_password("wrong", hashed)


# ============================================================
# LOGIN
# ============================================================

def test_login_success_returns_token(client, db, owner):
    r = client.post("/api/login", json={"password": "owner-pass"})
    assert r.status_code == 200
    body = r.json()
    assert body["tokenType"] == "bearer"
    assert body["user"] == {"id": "owner-1", "name": "Owner", "role": "OWNER"}

    me = client.get("/api/me", headers={"Authorization": f"Bearer {body['accessToken']}"})
    assert me.status_code == 200
    assert me.json()["role"] == "OWNER"

    db.expire_all()
    entry = db.query(ActivityLog).filter(ActivityLog.action == "LOGIN_SUCCESS").one()
    assert entry.user_id == "owner-1"


def test_login_failure(client, db, owner):
    r = client.post("/api/login", json={"password": "nope"})
    assert r.status_code == 401

    db.expire_all()
    assert db.query(ActivityLog).filter(ActivityLog.action == "LOGIN_FAILURE").count() == 1


def test_bad_token_is_rejected(client):
    r = client.get("/api/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401
    assert client.get("/api/me").status_code == 401


# ============================================================
# CONTRIBUTORS (owner only)
# ============================================================

def test_contributor_management(client, db, owner_headers):
    r = client.post("/api/contributors", json={"name": "Cousin", "password": "pw-1234"}, headers=owner_headers)
    assert r.status_code == 201
    created = r.json()
    assert created["role"] == "CONTRIBUTOR"

    listed = client.get("/api/contributors", headers=owner_headers).json()
    assert [c["name"] for c in listed] == ["Cousin"]
    assert client.post("/api/contributors/list", headers=owner_headers).json() == listed

    r = client.put(f"/api/contributors/{created['id']}", json={"name": "Cousin Sam"}, headers=owner_headers)
    assert r.status_code == 200
    assert r.json()["name"] == "Cousin Sam"

    # old password still works after a name-only update
    assert client.post("/api/login", json={"password": "pw-1234"}).status_code == 200

    r = client.delete(f"/api/contributors/{created['id']}", headers=owner_headers)
    assert r.status_code == 200
    assert client.get("/api/contributors", headers=owner_headers).json() == []

    db.expire_all()
    actions = {row.action for row in db.query(ActivityLog).all()}
    assert {"ADD_CONTRIBUTOR", "UPDATE_CONTRIBUTOR", "DELETE_CONTRIBUTOR"} <= actions


def test_contributor_routes_need_owner(client, contributor_headers, owner):
    assert client.get("/api/contributors", headers=contributor_headers).status_code == 403
    assert client.delete(f"/api/contributors/{owner.id}", headers=contributor_headers).status_code == 403


def test_owner_cannot_be_deleted_as_contributor(client, owner, owner_headers):
    assert client.delete(f"/api/contributors/{owner.id}", headers=owner_headers).status_code == 404


def test_contributor_validation(client, owner_headers):
    r = client.post("/api/contributors", json={"name": " ", "password": "x"}, headers=owner_headers)
    assert r.status_code == 400
    r = client.put("/api/contributors/missing", json={"name": "x"}, headers=owner_headers)
    assert r.status_code == 404


# ============================================================
# LOGS
# ============================================================

def test_logs_are_owner_only_and_newest_first(client, db, owner_headers, contributor_headers):
    log_activity(db, "1.2.3.4", "FIRST")
    log_activity(db, "1.2.3.4", "SECOND")

    assert client.get("/api/logs", headers=contributor_headers).status_code == 403

    r = client.get("/api/logs", headers=owner_headers)
    assert r.status_code == 200
    actions = [e["action"] for e in r.json()]
    assert actions.index("SECOND") < actions.index("FIRST")
    assert "ipAddress" in r.json()[0]


def test_page_visits_are_counted(client):
    assert client.get("/api/visitors/count").json() == {"count": 0}

    client.get("/", headers={"user-agent": "pytest-browser"})

    assert client.get("/api/visitors/count").json() == {"count": 1}


def test_visit_records_city_and_browser(client, db):
    client.get("/", headers={"user-agent": "pytest-browser"})

    db.expire_all()
    visit = db.query(ActivityLog).filter(ActivityLog.action == "VISIT").one()
    assert visit.browser == "pytest-browser"
    assert visit.city == "Localhost"


def test_failed_log_write_is_swallowed(db):
    user = User(id="u-1", name="Nobody", role="OBSERVER")

    class BrokenSession:
        def add(self, obj):
            raise RuntimeError("database went away")

        def rollback(self):
            pass

    assert log_activity(BrokenSession(), "1.1.1.1", "ANYTHING", user=user) is False
    assert log_activity(db, "1.1.1.1", "ANYTHING", user=user) is True
