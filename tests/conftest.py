"""
Shared pytest fixtures.

Environment is configured before any application module is imported so the
engine and settings singletons pick up a throw-away SQLite database.
"""

import os
import sys
import tempfile
import uuid
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

_DB_DIR = tempfile.mkdtemp(prefix="consultorio-tests-")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ["JWT_KEY"] = "test-signing-key-that-is-long-enough-for-hs256"
os.environ["JWT_ISSUER"] = "consultorio-tests"
os.environ["JWT_AUDIENCE"] = "consultorio-tests-client"
os.environ["JWT_EXPIRES_MINUTES"] = "60"
os.environ["SEED_ADMIN_CORREO"] = "admin@consultorio.local"
os.environ["SEED_ADMIN_PASSWORD"] = "admin-password-2024"
os.environ["SEED_ADMIN_NOMBRE"] = "Administración"

ADMIN_CORREO = os.environ["SEED_ADMIN_CORREO"]
ADMIN_PASSWORD = os.environ["SEED_ADMIN_PASSWORD"]


@pytest.fixture(scope="session")
def app():
    from main import create_app

    return create_app()


@pytest.fixture(scope="session")
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as tc:
        yield tc


@pytest.fixture(scope="session")
def admin_token(client) -> str:
    resp = client.post(
        "/api/v1/auth/login",
        json={"correo": ADMIN_CORREO, "password": ADMIN_PASSWORD},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


@pytest.fixture
def auth_headers(admin_token) -> dict:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def unique() -> str:
    """Short random suffix for values that must be unique per test."""
    return uuid.uuid4().hex[:8]
