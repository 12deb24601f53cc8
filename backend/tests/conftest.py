import os
import tempfile
from pathlib import Path

import pytest

# Point the app at throwaway storage before it is imported.
_TMP = Path(tempfile.mkdtemp(prefix="grampanchayat-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'test.db'}"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["LOCAL_STORAGE_DIR"] = str(_TMP / "uploads")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ADMIN_EMAIL"] = "admin@test.local"
os.environ["ADMIN_PASSWORD"] = "admin123"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from grampanchayat import services  # noqa: E402
from grampanchayat.database import create_db_and_tables, engine  # noqa: E402
from grampanchayat.main import app  # noqa: E402
from grampanchayat.storage import get_storage  # noqa: E402

ADMIN_EMAIL = "admin@test.local"
ADMIN_PASSWORD = "admin123"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture(autouse=True)
def reset_db():
    """Give every test an empty schema with only the default admin."""
    SQLModel.metadata.drop_all(engine)
    create_db_and_tables()
    with Session(engine) as session:
        services.ensure_default_admin(session)
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def storage():
    return get_storage()


def login(client, email, password):
    r = client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture
def admin_headers(client):
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def make_user(client, admin_headers):
    """Create a user through the API and return auth headers for it."""
    def _make(email, role="editor", permissions=None, password="secret123"):
        r = client.post(
            "/api/users",
            json={"email": email, "password": password, "role": role, "permissions": permissions or []},
            headers=admin_headers,
        )
        assert r.status_code == 201, r.text
        return login(client, email, password)

    return _make


def png_upload(name="photo.png", field="image"):
    return {field: (name, PNG_BYTES, "image/png")}
