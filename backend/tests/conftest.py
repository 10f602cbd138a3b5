import os
import tempfile

# Configure before any application module reads its environment
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="roostery-logs-"))
os.environ["TRANSACTION_RETRY_BASE_DELAY"] = "0"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db, init_db
from main import app
from utils.auth_utils import SessionUser, create_session_token
from utils.s3_upload import get_s3_client

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeS3Client:
    def __init__(self):
        self.uploads = []

    def put_object(self, **kwargs):
        self.uploads.append(kwargs)
        return {"ETag": '"fake"'}


@pytest.fixture(autouse=True)
def fresh_schema():
    init_db(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def fake_s3():
    return FakeS3Client()


@pytest.fixture
def client(fake_s3):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_s3_client] = lambda: fake_s3
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(*roles, uid="user-1", email="user@example.com"):
    return SessionUser(uid=uid, email=email, roles=list(roles))


def auth_headers(*roles, uid="user-1", email="user@example.com"):
    token = create_session_token(uid, email, list(roles))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin():
    return make_user("admin", uid="admin-1", email="admin@example.com")


@pytest.fixture
def staff():
    return make_user("staff", uid="staff-1", email="staff@example.com")


@pytest.fixture
def viewer():
    return make_user("viewer", uid="viewer-1", email="viewer@example.com")


@pytest.fixture
def admin_headers():
    return auth_headers("admin", uid="admin-1", email="admin@example.com")


@pytest.fixture
def staff_headers():
    return auth_headers("staff", uid="staff-1", email="staff@example.com")


@pytest.fixture
def viewer_headers():
    return auth_headers("viewer", uid="viewer-1", email="viewer@example.com")
