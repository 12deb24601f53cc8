import uuid

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, login


def test_login_returns_token_and_user(client):
    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL.upper(), "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["token"]
    assert body["user"]["email"] == ADMIN_EMAIL
    assert body["user"]["role"] == "admin"
    assert body["user"]["permissions"] == ["*"]
    assert body["user"]["last_login"] is not None
    assert "password_hash" not in body["user"]


def test_login_rejects_bad_credentials(client):
    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "wrong"})
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Invalid credentials"}

    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL})
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_me_requires_token(client, admin_headers):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer nonsense"}).status_code == 401

    r = client.get("/api/auth/me", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["data"]["email"] == ADMIN_EMAIL


def test_change_password(client, admin_headers):
    r = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "nope", "newPassword": "newpass1"},
        headers=admin_headers,
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Current password is incorrect"

    # too short
    r = client.post(
        "/api/auth/change-password",
        json={"currentPassword": ADMIN_PASSWORD, "newPassword": "123"},
        headers=admin_headers,
    )
    assert r.status_code == 400

    r = client.post(
        "/api/auth/change-password",
        json={"currentPassword": ADMIN_PASSWORD, "newPassword": "newpass1"},
        headers=admin_headers,
    )
    assert r.status_code == 200
    login(client, ADMIN_EMAIL, "newpass1")


def test_create_and_list_users(client, admin_headers):
    r = client.post(
        "/api/users",
        json={"email": "Editor@Test.local", "password": "secret123", "permissions": ["task1", "task1", "task3"]},
        headers=admin_headers,
    )
    assert r.status_code == 201
    created = r.json()["data"]
    assert created["email"] == "editor@test.local"
    assert created["role"] == "editor"
    assert created["permissions"] == ["task1", "task3"]

    r = client.post("/api/users", json={"email": "editor@test.local", "password": "secret123"}, headers=admin_headers)
    assert r.status_code == 400
    assert "already exists" in r.json()["message"]

    r = client.get("/api/users", headers=admin_headers)
    assert [u["email"] for u in r.json()["data"]] == ["editor@test.local", ADMIN_EMAIL]


def test_create_user_validation(client, admin_headers):
    r = client.post("/api/users", json={"email": "x@test.local"}, headers=admin_headers)
    assert r.status_code == 400
    r = client.post(
        "/api/users",
        json={"email": "x@test.local", "password": "secret123", "permissions": ["task42"]},
        headers=admin_headers,
    )
    assert r.status_code == 400
    r = client.post(
        "/api/users",
        json={"email": "x@test.local", "password": "secret123", "role": "owner"},
        headers=admin_headers,
    )
    assert r.status_code == 400


def test_new_admin_gets_wildcard(client, admin_headers):
    r = client.post(
        "/api/users",
        json={"email": "second@test.local", "password": "secret123", "role": "admin"},
        headers=admin_headers,
    )
    assert r.json()["data"]["permissions"] == ["*"]


def test_user_management_is_admin_only(client, make_user):
    headers = make_user("editor@test.local", permissions=["*"])
    assert client.get("/api/users", headers=headers).status_code == 403
    r = client.get("/api/users/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["email"] == "editor@test.local"


def test_update_and_deactivate_user(client, admin_headers):
    r = client.post("/api/users", json={"email": "e@test.local", "password": "secret123"}, headers=admin_headers)
    user_id = r.json()["data"]["id"]
    headers = login(client, "e@test.local", "secret123")

    r = client.put(f"/api/users/{user_id}", json={"permissions": ["task2"]}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["data"]["permissions"] == ["task2"]

    r = client.put(f"/api/users/{user_id}", json={"is_active": False}, headers=admin_headers)
    assert r.json()["data"]["is_active"] is False

    # existing tokens stop working and login is refused
    assert client.get("/api/auth/me", headers=headers).status_code == 401
    r = client.post("/api/auth/login", json={"email": "e@test.local", "password": "secret123"})
    assert r.status_code == 403

    assert client.put(f"/api/users/{uuid.uuid4()}", json={"role": "viewer"}, headers=admin_headers).status_code == 404


def test_delete_user(client, admin_headers):
    me = client.get("/api/auth/me", headers=admin_headers).json()["data"]
    r = client.delete(f"/api/users/{me['id']}", headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Cannot delete your own account"

    r = client.post("/api/users", json={"email": "gone@test.local", "password": "secret123"}, headers=admin_headers)
    user_id = r.json()["data"]["id"]
    assert client.delete(f"/api/users/{user_id}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/users/{user_id}", headers=admin_headers).status_code == 404
