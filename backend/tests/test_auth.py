from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from jose import jwt

import genie.auth as auth_module
from genie.config import settings
from genie.main import create_app

TEST_SECRET = "test-shared-secret"


def _configure_auth() -> None:
    settings.auth_enabled = True
    settings.jwt_secret = TEST_SECRET
    settings.jwt_audience = "authenticated"
    settings.jwt_issuer = ""


def _token(claims: dict[str, object], secret: str = TEST_SECRET) -> str:
    return jwt.encode(claims, secret, algorithm="HS256")


def test_protected_routes_require_bearer_token_when_auth_enabled() -> None:
    _configure_auth()
    app = create_app()
    with TestClient(app) as client:
        for path in ("/forms", "/api/forms"):
            response = client.get(path)
            assert response.status_code == 401
            assert response.json()["detail"] == "Missing bearer token."


def test_system_routes_stay_public_when_auth_enabled() -> None:
    _configure_auth()
    app = create_app()
    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        assert client.get("/api/ready").status_code == 200


def test_protected_routes_accept_valid_bearer_token() -> None:
    _configure_auth()
    token = _token({"sub": "user-123", "email": "user@example.com", "aud": "authenticated"})

    app = create_app()
    with TestClient(app) as client:
        for path in ("/forms", "/api/forms"):
            response = client.get(path, headers={"Authorization": f"Bearer {token}"})
            assert response.status_code == 200
            assert "forms" in response.json()


def test_protected_routes_reject_token_signed_with_other_secret() -> None:
    _configure_auth()
    token = _token({"sub": "user-123", "aud": "authenticated"}, secret="someone-else")

    app = create_app()
    with TestClient(app) as client:
        response = client.get("/forms", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["detail"].startswith("Invalid or expired token")


def test_protected_routes_reject_token_without_subject() -> None:
    _configure_auth()
    token = _token({"email": "user@example.com", "aud": "authenticated"})

    app = create_app()
    with TestClient(app) as client:
        response = client.get("/forms", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


def test_auth_enabled_without_secret_returns_service_unavailable() -> None:
    _configure_auth()
    settings.jwt_secret = ""

    app = create_app()
    with TestClient(app) as client:
        response = client.get("/forms", headers={"Authorization": "Bearer anything"})
        assert response.status_code == 503


def test_decoded_claims_become_authenticated_user(monkeypatch: pytest.MonkeyPatch) -> None:
    _configure_auth()
    monkeypatch.setattr(
        auth_module,
        "decode_and_validate_token",
        lambda token: {"sub": "user-456", "email": "someone@example.com", "role": "authenticated"},
    )

    app = create_app()
    with TestClient(app) as client:
        response = client.get("/api/forms", headers={"Authorization": "Bearer test-token"})
        assert response.status_code == 200


def test_user_from_claims_drops_blank_email() -> None:
    user = auth_module.user_from_claims({"sub": "abc", "email": "  "})
    assert user.id == "abc"
    assert user.email is None
    assert user.role is None
