"""Tests for registration, login, token refresh and the current-user endpoint."""

import pytest

from conftest import data

REGISTRATION = {
    "emailAddress": "Grace@Example.com",
    "firstName": "Grace",
    "lastName": "Hopper",
    "password": "compilers-4-all",
}


@pytest.fixture
def tokens(client):
    return data(client.post("/api/auth/register", json=REGISTRATION))


class TestRegister:
    def test_register_returns_tokens(self, client):
        response = client.post("/api/auth/register", json=REGISTRATION)
        assert response.status_code == 201
        body = response.json()["data"]
        assert body["tokenType"] == "Bearer"
        assert body["expiresIn"] == 3600
        assert body["user"]["emailAddress"] == "grace@example.com"
        assert body["user"]["role"] == "customer"
        assert "password" not in body["user"]

    def test_duplicate_email(self, client, tokens):
        response = client.post("/api/auth/register", json={**REGISTRATION, "emailAddress": "grace@example.com"})
        assert response.status_code == 409
        assert response.json()["message"] == "User already exists with email: 'grace@example.com'"


class TestLogin:
    def test_login(self, client, tokens):
        body = data(client.post("/api/auth/login", json={
            "email": "grace@example.com", "password": "compilers-4-all",
        }))
        assert body["user"]["id"] == tokens["user"]["id"]
        assert body["accessToken"]

    @pytest.mark.parametrize("email,password", [
        ("grace@example.com", "wrong-password"),
        ("nobody@example.com", "compilers-4-all"),
    ])
    def test_bad_credentials(self, client, tokens, email, password):
        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    def test_inactive_user(self, client, tokens):
        client.patch(f"/api/users/{tokens['user']['id']}/deactivate")
        response = client.post("/api/auth/login", json={
            "email": "grace@example.com", "password": "compilers-4-all",
        })
        assert response.status_code == 401
        assert response.json()["message"] == "User account is inactive"


class TestTokens:
    def test_me(self, client, tokens):
        headers = {"Authorization": f"Bearer {tokens['accessToken']}"}
        assert data(client.get("/api/auth/me", headers=headers))["id"] == tokens["user"]["id"]

    def test_me_requires_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "Authentication required"

    def test_refresh_token_is_not_an_access_token(self, client, tokens):
        headers = {"Authorization": f"Bearer {tokens['refreshToken']}"}
        assert client.get("/api/auth/me", headers=headers).status_code == 401

    def test_refresh(self, client, tokens):
        body = data(client.post("/api/auth/refresh", json={"refreshToken": tokens["refreshToken"]}))
        assert body["user"]["id"] == tokens["user"]["id"]

    def test_refresh_with_garbage(self, client):
        response = client.post("/api/auth/refresh", json={"refreshToken": "not-a-token"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"
