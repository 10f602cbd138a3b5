import asyncio

import pytest

import auth
from conftest import TestingSessionLocal, auth_headers
from crud import users as crud_users
from database import get_db
from main import app


@pytest.fixture
def staff_account(db_session):
    return crud_users.create_user(db_session, "Staff@Example.com", "correct horse", ["staff"], "Farm Hand")


def login(client, email="staff@example.com", password="correct horse"):
    return client.post("/auth/login", json={"email": email, "password": password})


def test_login_sets_session_cookie(client, staff_account):
    response = login(client)

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {"uid": staff_account.id, "email": "staff@example.com"}}
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("__session=")
    assert "HttpOnly" in cookie
    assert "samesite=lax" in cookie.lower()
    assert "Max-Age=432000" in cookie


def test_login_records_last_login(client, staff_account):
    login(client)
    db = TestingSessionLocal()
    try:
        assert crud_users.get_user_by_email(db, "staff@example.com").last_login is not None
    finally:
        db.close()


def test_session_from_login_reaches_services(client, staff_account):
    login(client)
    assert client.get("/inventory").status_code == 200
    assert client.get("/auth/me").json()["data"] == {
        "uid": staff_account.id,
        "email": "staff@example.com",
        "roles": ["staff"],
    }


@pytest.mark.parametrize("email, password", [("staff@example.com", "wrong"), ("nobody@example.com", "correct horse")])
def test_bad_credentials(client, staff_account, email, password):
    response = login(client, email, password)
    assert response.status_code == 401
    assert response.json()["error"] == {"code": "INVALID_CREDENTIALS", "message": "Invalid email or password."}
    assert "set-cookie" not in response.headers


def test_disabled_account(client, db_session, staff_account):
    staff_account.is_active = False
    db_session.commit()

    response = login(client)

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "ACCOUNT_DISABLED"


def test_disabled_account_session_is_rejected(client, db_session, staff_account):
    headers = auth_headers("staff", uid=staff_account.id, email=staff_account.email)
    staff_account.is_active = False
    db_session.commit()

    assert client.get("/inventory", headers=headers).status_code == 401


def test_roles_merge_token_and_account(client, db_session):
    account = crud_users.create_user(db_session, "owner@example.com", "pw", ["admin"])
    headers = auth_headers("staff", uid=account.id, email=account.email)

    me = client.get("/auth/me", headers=headers).json()["data"]

    assert me["roles"] == ["staff", "admin"]


def test_me_without_session(client):
    response = client.get("/auth/me")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHENTICATED"


def test_logout_clears_cookie(client, staff_account):
    login(client)

    response = client.post("/auth/logout")

    assert response.json() == {"success": True, "data": {"loggedOut": True}}
    assert response.headers["set-cookie"].startswith('__session=""')


def test_missing_secret_is_misconfiguration(client, staff_account, monkeypatch):
    monkeypatch.delenv("SESSION_SECRET")

    response = login(client)

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "SERVER_MISCONFIGURED"


def test_slow_login_times_out(client, staff_account, monkeypatch):
    async def stalled(func, *args):
        await asyncio.sleep(5)

    monkeypatch.setattr(auth, "LOGIN_TIMEOUT_SECONDS", 0.05)
    monkeypatch.setattr(auth, "run_in_threadpool", stalled)

    response = login(client)

    assert response.status_code == 408
    assert response.json()["error"]["code"] == "TIMEOUT"


def test_credential_check_runs_in_its_own_session(client, staff_account, monkeypatch):
    checked_with = []
    authenticate = crud_users.authenticate_user

    def recording_authenticate(db, email, password):
        checked_with.append(db)
        return authenticate(db, email, password)

    request_sessions = []

    def tracked_get_db():
        db = TestingSessionLocal()
        request_sessions.append(db)
        try:
            yield db
        finally:
            db.close()

    monkeypatch.setattr(crud_users, "authenticate_user", recording_authenticate)
    monkeypatch.setitem(app.dependency_overrides, get_db, tracked_get_db)

    assert login(client).status_code == 200
    assert len(checked_with) == 1
    assert checked_with[0] not in request_sessions
    assert len(checked_with[0].identity_map) == 0


def test_blank_credentials_are_invalid(client):
    response = client.post("/auth/login", json={"email": "", "password": ""})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"
