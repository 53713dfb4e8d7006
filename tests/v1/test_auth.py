# tests/v1/test_auth.py
"""Tests for signup, login, refresh and logout endpoints."""

from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi import status

from bitslow_market.api.v1.dependencies import get_session_authority_dep
from bitslow_market.core.security import AUTH_HEADER
from bitslow_market.core.settings import settings
from bitslow_market.db.time import utcnow
from bitslow_market.services.session_authority import SessionAuthority, get_session_authority
from tests.conftest import TEST_PASSWORD


def _signup_payload(**overrides):
    payload = {
        "name": "Dana",
        "email": "dana@example.com",
        "password": "s3cret",
        "phoneNumber": "555-0199",
        "address": "2 Mint Street",
    }
    payload.update(overrides)
    return payload


class TestSignup:
    def test_signup_creates_client_and_session(self, client) -> None:
        response = client.post("/api/signup", json=_signup_payload())

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["message"] == "registerSuccess"
        assert data["email"] == "dana@example.com"
        assert data["phone"] == "555-0199"
        assert "password" not in data
        assert response.headers[AUTH_HEADER] == data["accessToken"]
        assert get_session_authority().verify(data["accessToken"]) == "dana@example.com"
        assert get_session_authority().verify(data["refreshToken"]) == "dana@example.com"

    def test_duplicate_email_is_404(self, client, alice) -> None:
        response = client.post("/api/signup", json=_signup_payload(email=alice.email))
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Email already exists in db"

    def test_missing_fields_are_rejected(self, client) -> None:
        response = client.post("/api/signup", json={"email": "x@example.com"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        fields = {item["field"] for item in response.json()["error"]["details"]}
        assert "body.name" in fields

    def test_malformed_email_is_rejected(self, client) -> None:
        response = client.post("/api/signup", json=_signup_payload(email="not-an-email"))
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestLogin:
    def test_login_success(self, client, alice) -> None:
        response = client.post(
            "/api/login", json={"email": alice.email, "password": TEST_PASSWORD}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "loginSuccess"
        assert data["id"] == alice.id
        assert response.headers[AUTH_HEADER]
        assert data["refreshToken"]

    def test_unknown_email_is_404(self, client) -> None:
        response = client.post(
            "/api/login", json={"email": "ghost@example.com", "password": "x"}
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["code"] == "CLIENT_NOT_FOUND"

    def test_wrong_password_is_401(self, client, alice) -> None:
        response = client.post("/api/login", json={"email": alice.email, "password": "nope"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


class TestProtected:
    def test_returns_profile(self, client, alice, alice_headers) -> None:
        response = client.get("/api/protected", headers=alice_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "Welcome to the protected route!"
        assert data["user"]["email"] == alice.email
        assert "password" not in data["user"]

    def test_without_token(self, client) -> None:
        response = client.get("/api/protected")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_authorization_header_is_not_accepted(self, client, alice) -> None:
        token = get_session_authority().issue_access(alice.email)
        response = client.get("/api/protected", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_expired_token(self, client, alice) -> None:
        stale = SessionAuthority(settings.secret_key, clock=lambda: utcnow() - timedelta(days=1))
        response = client.get(
            "/api/protected", headers={AUTH_HEADER: stale.issue_access(alice.email)}
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["code"] == "TOKEN_EXPIRED"


class TestTokenKinds:
    @pytest.fixture()
    def enforcing_authority(self, app):
        authority = SessionAuthority(settings.secret_key, enforce_kind=True)
        app.dependency_overrides[get_session_authority_dep] = lambda: authority
        try:
            yield authority
        finally:
            app.dependency_overrides.pop(get_session_authority_dep, None)

    def test_refresh_token_rejected_as_access_when_enforced(
        self, client, alice, enforcing_authority
    ) -> None:
        token = enforcing_authority.issue_refresh(alice.email)

        assert client.get("/api/protected", headers={AUTH_HEADER: token}).status_code == (
            status.HTTP_401_UNAUTHORIZED
        )
        response = client.post("/api/buy/1", headers={AUTH_HEADER: token})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_access_token_accepted_when_enforced(self, client, alice, enforcing_authority) -> None:
        token = enforcing_authority.issue_access(alice.email)
        response = client.get("/api/protected", headers={AUTH_HEADER: token})
        assert response.status_code == status.HTTP_200_OK

    def test_refresh_token_accepted_as_access_by_default(self, client, alice) -> None:
        token = get_session_authority().issue_refresh(alice.email)
        response = client.get("/api/protected", headers={AUTH_HEADER: token})
        assert response.status_code == status.HTTP_200_OK


class TestRefresh:
    def test_refresh_returns_new_access_token(self, client, alice) -> None:
        authority = get_session_authority()
        response = client.get(
            "/api/refresh", headers={AUTH_HEADER: authority.issue_refresh(alice.email)}
        )

        assert response.status_code == status.HTTP_200_OK
        token = response.json()["accessToken"]
        assert response.headers[AUTH_HEADER] == token
        assert authority.verify(token) == alice.email

    def test_refresh_without_token(self, client) -> None:
        response = client.get("/api/refresh")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["message"] == "Refresh token missing"

    def test_refresh_with_invalid_token(self, client) -> None:
        response = client.get("/api/refresh", headers={AUTH_HEADER: "not.a.jwt"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert AUTH_HEADER not in response.headers


def test_logout(client) -> None:
    response = client.post("/api/logout")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "Logout successful"}
