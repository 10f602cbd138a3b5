import pytest

from conftest import TestingSessionLocal
from crud import users as crud_users
from scripts import create_user


@pytest.fixture(autouse=True)
def use_test_database(monkeypatch):
    monkeypatch.setattr(create_user, "SessionLocal", TestingSessionLocal)
    monkeypatch.setattr(create_user, "init_db", lambda: None)


def stored_user(email):
    db = TestingSessionLocal()
    try:
        return crud_users.get_user_by_email(db, email)
    finally:
        db.close()


def test_creates_user_with_roles():
    exit_code = create_user.main(["Owner@Example.com", "--role", "admin", "--role", "staff", "--name", "Owner", "--password", "s3cret"])

    assert exit_code == 0
    user = stored_user("owner@example.com")
    assert user.roles == ["admin", "staff"]
    assert user.display_name == "Owner"
    assert crud_users.bcrypt_context.verify("s3cret", user.hashed_password)


def test_defaults_to_viewer():
    create_user.main(["guest@example.com", "--password", "pw"])
    assert stored_user("guest@example.com").roles == ["viewer"]


def test_duplicate_email_fails():
    create_user.main(["guest@example.com", "--password", "pw"])
    assert create_user.main(["GUEST@example.com", "--password", "pw"]) == 1


def test_unknown_role_is_rejected_by_the_parser():
    with pytest.raises(SystemExit):
        create_user.main(["guest@example.com", "--role", "owner", "--password", "pw"])


def test_blank_password_prompt_fails(monkeypatch):
    monkeypatch.setattr(create_user.getpass, "getpass", lambda prompt: "")
    assert create_user.main(["guest@example.com"]) == 1
