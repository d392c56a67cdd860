"""Tests for registration, login, logout and the current-user endpoint."""

from httpx import AsyncClient

from conftest import DEFAULT_PASSWORD


def _register_body(email: str = "new@example.com", **overrides) -> dict:
    body = {
        "email": email,
        "password": DEFAULT_PASSWORD,
        "firstName": "New",
        "lastName": "Person",
        "role": "student",
    }
    body.update(overrides)
    return body


async def test_register_returns_user_without_password(client: AsyncClient):
    response = await client.post("/api/register", json=_register_body())
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "User created successfully"
    user = body["user"]
    assert user["email"] == "new@example.com"
    assert user["firstName"] == "New"
    assert user["role"] == "student"
    assert "password" not in user
    assert "passwordHash" not in user
    assert "passwordSalt" not in user


async def test_signup_answers_created(client: AsyncClient):
    response = await client.post("/api/signup", json=_register_body("signup@example.com"))
    assert response.status_code == 201
    assert response.json()["user"]["email"] == "signup@example.com"


async def test_duplicate_email_conflicts(client: AsyncClient):
    await client.post("/api/register", json=_register_body())
    response = await client.post("/api/register", json=_register_body("NEW@example.com"))
    assert response.status_code == 409
    assert response.json()["message"] == "User with this email already exists"


async def test_register_validation_errors(client: AsyncClient):
    response = await client.post(
        "/api/register",
        json=_register_body(email="not-an-email", password="short", role="wizard"),
    )
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    fields = {error["field"] for error in body["errors"]}
    assert {"email", "password", "role"} <= fields


async def test_login_and_fetch_current_user(client: AsyncClient, alice):
    response = await client.get("/api/auth/user", headers=alice.headers)
    assert response.status_code == 200
    body = response.json()
    assert body["id"] == alice.id
    assert body["firstName"] == "Alice"
    assert body["lastName"] == "Smith"


async def test_login_is_case_insensitive_on_email(client: AsyncClient, alice):
    response = await client.post(
        "/api/login", json={"email": "ALICE@example.com", "password": DEFAULT_PASSWORD}
    )
    assert response.status_code == 200
    assert response.json()["user"]["id"] == alice.id


async def test_wrong_password_and_unknown_email_look_the_same(client: AsyncClient, alice):
    wrong = await client.post("/api/login", json={"email": alice.email, "password": "wrong-password"})
    unknown = await client.post(
        "/api/login", json={"email": "nobody@example.com", "password": DEFAULT_PASSWORD}
    )
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"message": "Invalid credentials"}


async def test_each_login_issues_a_new_token(client: AsyncClient, alice):
    response = await client.post("/api/login", json={"email": alice.email, "password": DEFAULT_PASSWORD})
    assert response.json()["token"] != alice.token


async def test_missing_or_bad_token_is_unauthorized(client: AsyncClient):
    response = await client.get("/api/auth/user")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"

    response = await client.get("/api/auth/user", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.json()["message"] == "Could not validate credentials"

    response = await client.get("/api/auth/user", headers={"Authorization": "Token abc"})
    assert response.status_code == 401


async def test_logout_revokes_token(client: AsyncClient, alice):
    response = await client.post("/api/logout", headers=alice.headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}

    response = await client.get("/api/auth/user", headers=alice.headers)
    assert response.status_code == 401


async def test_logout_leaves_other_tokens_alive(client: AsyncClient, alice):
    second = await client.post("/api/login", json={"email": alice.email, "password": DEFAULT_PASSWORD})
    other_headers = {"Authorization": f"Bearer {second.json()['token']}"}

    await client.post("/api/logout", headers=alice.headers)

    response = await client.get("/api/auth/user", headers=other_headers)
    assert response.status_code == 200


async def test_unknown_route_uses_message_body(client: AsyncClient):
    response = await client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert "message" in response.json()
