"""Registration, login and profile endpoints."""

from httpx import AsyncClient

from tests.conftest import PASSWORD, register_user


async def test_health_check(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_register_returns_user_without_password(client: AsyncClient):
    user = await register_user(client, "alice", firstName="Alice")

    assert user["username"] == "alice"
    assert user["email"] == "alice@example.com"
    assert user["first_name"] == "Alice"
    assert "password" not in user
    assert "password_hash" not in user


async def test_register_duplicate_email_or_username(client: AsyncClient):
    await register_user(client, "alice")

    response = await client.post(
        "/users/register",
        json={"email": "other@example.com", "username": "alice", "password": PASSWORD},
    )
    assert response.status_code == 409
    assert response.json() == {
        "status": "fail",
        "message": "User with this email or username already exists",
    }

    response = await client.post(
        "/users/register",
        json={"email": "ALICE@example.com", "username": "alice2", "password": PASSWORD},
    )
    assert response.status_code == 409


async def test_register_validation_error_uses_envelope(client: AsyncClient):
    response = await client.post(
        "/users/register",
        json={"email": "not-an-email", "username": "al", "password": "short"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["status"] == "fail"
    assert "email" in body["message"]


async def test_login_with_email_or_username(client: AsyncClient):
    await register_user(client, "alice")

    for identifier in ("alice", "alice@example.com"):
        response = await client.post(
            "/users/login", json={"identifier": identifier, "password": PASSWORD}
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["token_type"] == "bearer"
        assert data["user"]["username"] == "alice"
        assert "access_token" in response.cookies
        client.cookies.clear()


async def test_login_token_authenticates_requests(client: AsyncClient):
    await register_user(client, "alice")
    response = await client.post("/users/login", json={"email": "alice@example.com", "password": PASSWORD})
    token = response.json()["data"]["access_token"]
    client.cookies.clear()

    response = await client.get("/users/profile", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["data"]["username"] == "alice"


async def test_login_cookie_authenticates_requests(client: AsyncClient):
    await register_user(client, "alice")
    await client.post("/users/login", json={"username": "alice", "password": PASSWORD})

    response = await client.get("/users/profile")
    assert response.status_code == 200

    await client.post("/users/logout")
    client.cookies.clear()
    response = await client.get("/users/profile")
    assert response.status_code == 401


async def test_login_wrong_password(client: AsyncClient):
    await register_user(client, "alice")

    response = await client.post("/users/login", json={"identifier": "alice", "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json() == {"status": "fail", "message": "Invalid credentials"}

    response = await client.post("/users/login", json={"identifier": "nobody", "password": PASSWORD})
    assert response.status_code == 401


async def test_protected_endpoints_require_token(client: AsyncClient):
    response = await client.get("/projects")
    assert response.status_code == 401
    assert response.json()["status"] == "fail"

    response = await client.get("/projects", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


async def test_update_profile(client: AsyncClient):
    alice = await register_user(client, "alice")
    await register_user(client, "bob")

    response = await client.put(
        "/users/profile", json={"firstName": "Alicia", "username": "alicia"}, headers=alice["headers"]
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["first_name"] == "Alicia"
    assert data["username"] == "alicia"

    response = await client.put("/users/profile", json={"username": "bob"}, headers=alice["headers"])
    assert response.status_code == 409


async def test_change_password(client: AsyncClient):
    alice = await register_user(client, "alice")

    response = await client.put(
        "/users/password",
        json={"currentPassword": "wrong-password", "newPassword": "new-password-1"},
        headers=alice["headers"],
    )
    assert response.status_code == 401

    response = await client.put(
        "/users/password",
        json={"currentPassword": PASSWORD, "newPassword": "new-password-1"},
        headers=alice["headers"],
    )
    assert response.status_code == 200

    response = await client.post("/users/login", json={"identifier": "alice", "password": "new-password-1"})
    assert response.status_code == 200
