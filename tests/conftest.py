import os
import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

# Cheap hashing for tests; read once when authsvc.auth.passwords is imported.
os.environ.setdefault("AUTHSVC_ARGON2_TIME_COST", "1")
os.environ.setdefault("AUTHSVC_ARGON2_MEMORY_COST", "8")
os.environ.setdefault("AUTHSVC_ARGON2_PARALLELISM", "1")

import pytest
from fastapi.testclient import TestClient

from authsvc.app import create_app
from authsvc.auth.session import SessionStore
from authsvc.auth.users import UserStore
from authsvc.services.auth_service import AuthService


@pytest.fixture(autouse=True)
def secret_key(monkeypatch):
    monkeypatch.delenv("AUTHSVC_SECRET_KEY", raising=False)
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")
    monkeypatch.delenv("AUTHSVC_COOKIE_SECURE", raising=False)
    return "test-secret-key"


@pytest.fixture()
def service() -> AuthService:
    return AuthService(users=UserStore(), sessions=SessionStore())


@pytest.fixture()
def client() -> TestClient:
    return TestClient(create_app())


@pytest.fixture()
def alice(client):
    """Client with a registered (not logged in) user ``alice``."""
    r = client.post("/api/register", json={"username": "alice", "email": "a@x.com", "password": "secret1"})
    assert r.status_code == 201
    return client
