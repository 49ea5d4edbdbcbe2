"""Unit tests for auth API endpoints.

Tests /api/login, /api/refresh and /api/revoke using FastAPI TestClient
against stores in a temporary directory.
"""

from unittest.mock import patch

import jwt

from chirpy.services.auth_service import JWT_ALGORITHM

JWT_SECRET = "test-secret-key-for-jwt-unit-tests-0123456789"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _register(client, email="alice@example.com", password="password-123"):
    response = client.post("/api/users", json={"email": email, "password": password})
    assert response.status_code == 201
    return response.json()


def _login(client, email="alice@example.com", password="password-123", **extra):
    return client.post(
        "/api/login", json={"email": email, "password": password, **extra}
    )


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# POST /api/login
# ---------------------------------------------------------------------------

class TestLogin:
    """Tests for POST /api/login."""

    def test_login_valid_credentials(self, client):
        user = _register(client)

        response = _login(client)

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == user["id"]
        assert body["email"] == "alice@example.com"
        assert body["token"]
        assert body["refresh_token"]
        assert "password" not in body
        assert "password_hash" not in body

    def test_login_issues_one_token_of_each_kind(self, client):
        _register(client)

        body = _login(client).json()

        access = jwt.decode(body["token"], JWT_SECRET, algorithms=[JWT_ALGORITHM])
        refresh = jwt.decode(body["refresh_token"], JWT_SECRET, algorithms=[JWT_ALGORITHM])
        assert access["iss"] == "chirpy-access"
        assert refresh["iss"] == "chirpy-refresh"
        assert access["sub"] == refresh["sub"] == str(body["id"])

    def test_login_expires_in_seconds_shortens_access_token(self, client):
        _register(client)

        body = _login(client, expires_in_seconds=60).json()

        access = jwt.decode(body["token"], JWT_SECRET, algorithms=[JWT_ALGORITHM])
        assert access["exp"] - access["iat"] == 60

    def test_login_huge_expires_in_seconds_is_clamped(self, client):
        _register(client)

        response = _login(client, expires_in_seconds=10**15)

        assert response.status_code == 200
        access = jwt.decode(response.json()["token"], JWT_SECRET, algorithms=[JWT_ALGORITHM])
        assert access["exp"] - access["iat"] == 3600

    def test_login_wrong_password(self, client):
        _register(client)

        response = _login(client, password="wrong-password")

        assert response.status_code == 401
        assert "incorrect" in response.json()["detail"].lower()
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_login_unknown_user(self, client):
        response = _login(client, email="ghost@example.com")

        assert response.status_code == 401
        assert "incorrect" in response.json()["detail"].lower()

    def test_login_uses_user_service(self, client):
        with patch("chirpy.api.auth.UserService") as MockUserService:
            MockUserService.return_value.verify_password.return_value = (False, None)

            response = _login(client)

        assert response.status_code == 401
        MockUserService.return_value.verify_password.assert_called_once_with(
            "alice@example.com", "password-123"
        )

    def test_login_invalid_body(self, client):
        response = client.post("/api/login", json={"email": "alice@example.com"})

        assert response.status_code == 400
        assert response.json()["error"] == "Validation error"


# ---------------------------------------------------------------------------
# POST /api/refresh
# ---------------------------------------------------------------------------

class TestRefresh:
    """Tests for POST /api/refresh."""

    def test_refresh_valid_token(self, client):
        _register(client)
        tokens = _login(client).json()

        response = client.post("/api/refresh", headers=_bearer(tokens["refresh_token"]))

        assert response.status_code == 200
        new_access = response.json()["token"]
        payload = jwt.decode(new_access, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        assert payload["iss"] == "chirpy-access"
        assert payload["sub"] == str(tokens["id"])

    def test_refresh_with_access_token_is_rejected(self, client):
        _register(client)
        tokens = _login(client).json()

        response = client.post("/api/refresh", headers=_bearer(tokens["token"]))

        assert response.status_code == 401
        assert response.json()["detail"] == "Expected refresh token, got access token"

    def test_refresh_without_header(self, client):
        response = client.post("/api/refresh")

        assert response.status_code == 401

    def test_refresh_with_garbage_token(self, client):
        response = client.post("/api/refresh", headers=_bearer("not-a-token"))

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_refresh_for_missing_user(self, client):
        token = jwt.encode(
            {"iss": "chirpy-refresh", "sub": "99", "iat": 1, "exp": 4_000_000_000},
            JWT_SECRET,
            algorithm=JWT_ALGORITHM,
        )

        response = client.post("/api/refresh", headers=_bearer(token))

        assert response.status_code == 401


# ---------------------------------------------------------------------------
# POST /api/revoke
# ---------------------------------------------------------------------------

class TestRevoke:
    """Tests for POST /api/revoke."""

    def test_revoke_then_refresh_fails(self, client):
        _register(client)
        refresh_token = _login(client).json()["refresh_token"]

        revoke = client.post("/api/revoke", headers=_bearer(refresh_token))
        assert revoke.status_code == 204
        assert revoke.content == b""

        response = client.post("/api/refresh", headers=_bearer(refresh_token))
        assert response.status_code == 401
        assert "revoked" in response.json()["detail"].lower()

    def test_revoke_with_access_token_is_rejected(self, client):
        _register(client)
        access_token = _login(client).json()["token"]

        response = client.post("/api/revoke", headers=_bearer(access_token))

        assert response.status_code == 401

    def test_revoke_leaves_other_sessions_alive(self, client):
        _register(client)
        first = _login(client).json()["refresh_token"]
        second = _login(client).json()["refresh_token"]

        client.post("/api/revoke", headers=_bearer(first))

        assert client.post("/api/refresh", headers=_bearer(second)).status_code == 200
