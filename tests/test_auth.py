from conftest import auth, register


def test_register_and_me(client):
    alice = register(client, "Alice")
    assert alice["user"]["email"] == "alice@example.com"
    assert alice["user"]["privacy"]["profileVisibility"] == "public"

    r = client.get("/api/auth/me", headers=alice["headers"])
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["data"]["id"] == alice["id"]
    assert body["data"]["friendsCount"] == 0


def test_register_duplicate_email(client):
    register(client, "Alice")
    r = client.post(
        "/api/auth/register",
        json={"name": "Other", "email": "ALICE@example.com", "password": "secret123"},
    )
    assert r.status_code == 409
    assert r.json() == {"success": False, "message": "An account with this email already exists"}


def test_register_validation_error(client):
    r = client.post("/api/auth/register", json={"name": "A", "email": "not-an-email", "password": "x"})
    assert r.status_code == 422
    body = r.json()
    assert body["success"] is False
    assert body["errors"]


def test_login(client):
    register(client, "Alice", password="secret123")
    r = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"})
    assert r.status_code == 401

    r = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    assert r.status_code == 200
    assert r.json()["data"]["token"]
    assert "auth_token" in r.cookies


def test_requires_authentication(client):
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json()["success"] is False

    r = client.get("/api/auth/me", headers=auth("garbage"))
    assert r.status_code == 401


def test_change_password(client):
    alice = register(client, "Alice", password="secret123")
    r = client.post(
        "/api/auth/change-password",
        json={"oldPassword": "nope123", "newPassword": "another123"},
        headers=alice["headers"],
    )
    assert r.status_code == 400

    r = client.post(
        "/api/auth/change-password",
        json={"oldPassword": "secret123", "newPassword": "another123"},
        headers=alice["headers"],
    )
    assert r.status_code == 200
    r = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "another123"})
    assert r.status_code == 200
