import os
import tempfile

_tmp = tempfile.mkdtemp(prefix="social-tests-")
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_tmp, 'test.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(_tmp, "uploads")
os.environ["REDIS_URL"] = "redis://127.0.0.1:1/0"

import pytest
from fastapi.testclient import TestClient

from app.core.database import drop_db
from app.main import app


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
        c.portal.call(drop_db)


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client: TestClient, name: str, email: str = None, password: str = "secret123") -> dict:
    """Register a user; returns {"id", "token", "headers", "user"}."""
    email = email or f"{name.lower().replace(' ', '.')}@example.com"
    r = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert r.status_code == 201, r.text
    data = r.json()["data"]
    # Requests authenticate with the bearer header only
    client.cookies.clear()
    return {"id": data["user"]["id"], "token": data["token"], "headers": auth(data["token"]), "user": data["user"]}


def befriend(client: TestClient, a: dict, b: dict):
    r = client.post(f"/api/friends/request/{b['id']}", headers=a["headers"])
    assert r.status_code == 201, r.text
    r = client.post(f"/api/friends/accept/{r.json()['data']['id']}", headers=b["headers"])
    assert r.status_code == 200, r.text
