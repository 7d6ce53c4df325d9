"""Registration, rate limiting and HTTP Basic authentication."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from tests.web.conftest import PASSWORD, register


class TestRegister:
    def test_success(self, client):
        resp = register(client)
        assert resp.status_code == 201
        assert resp.json() == {"success": True}
        assert resp.headers["X-RateLimit-Limit"] == "5"
        assert resp.headers["X-RateLimit-Remaining"] == "4"
        assert resp.headers["X-RateLimit-Reset"].endswith("Z")

    def test_duplicate_email_is_conflict(self, client):
        register(client)
        resp = register(client, name="Alice Again", email="ALICE@example.com")
        assert resp.status_code == 409
        assert resp.json() == {"error": "An account with this email already exists"}

    @pytest.mark.parametrize(
        "password, message",
        [
            ("Sh0rt!", "Password must be at least 12 characters"),
            ("ALLUPPERCASE-123", "Password must contain at least one lowercase letter"),
            ("alllowercase-123", "Password must contain at least one uppercase letter"),
            ("No-Digits-Here!", "Password must contain at least one number"),
            ("NoSpecials1234", "Password must contain at least one special character"),
        ],
    )
    def test_weak_password_rejected(self, client, password, message):
        resp = register(client, password=password)
        assert resp.status_code == 400
        assert resp.json() == {"error": message}

    def test_invalid_email_rejected(self, client):
        resp = register(client, email="not-an-email")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid email"}

    def test_missing_field_rejected(self, client):
        resp = client.post(
            "/api/auth/register", json={"email": "a@example.com", "password": PASSWORD}
        )
        assert resp.status_code == 400
        assert "error" in resp.json()

    def test_service_gets_configured_bcrypt_rounds(self, client):
        with patch("tech_radar.web.app.RadarService") as service_cls:
            resp = register(client)
        assert resp.status_code == 201
        assert service_cls.call_args.kwargs["bcrypt_rounds"] == 4
        service_cls.return_value.register.assert_called_once()

    def test_rate_limited_after_five_attempts(self, client):
        for i in range(5):
            assert register(client, email=f"user{i}@example.com").status_code == 201
        resp = register(client, email="user5@example.com")
        assert resp.status_code == 429
        assert "Too many registration attempts" in resp.json()["error"]
        assert resp.headers["X-RateLimit-Remaining"] == "0"

    def test_failed_attempts_count_towards_limit(self, client):
        for _ in range(5):
            register(client, password="weak")
        assert register(client).status_code == 429

    def test_limit_is_per_client_address(self, client):
        for i in range(5):
            register(client, email=f"user{i}@example.com", headers={"X-Forwarded-For": "10.0.0.1"})
        resp = register(client, headers={"X-Forwarded-For": "10.0.0.2, 172.16.0.1"})
        assert resp.status_code == 201


class TestBasicAuth:
    def test_me_returns_user(self, client, auth):
        resp = client.get("/api/me", auth=auth)
        assert resp.status_code == 200
        body = resp.json()
        assert body["name"] == "Alice"
        assert body["email"] == "alice@example.com"
        assert "password_hash" not in body

    def test_email_is_case_insensitive(self, client, auth):
        resp = client.get("/api/me", auth=("Alice@Example.com", PASSWORD))
        assert resp.status_code == 200

    def test_wrong_password(self, client, auth):
        resp = client.get("/api/me", auth=("alice@example.com", "Wrong-Password-1"))
        assert resp.status_code == 401
        assert resp.headers["WWW-Authenticate"].startswith("Basic")

    def test_unknown_user(self, client):
        resp = client.get("/api/me", auth=("ghost@example.com", PASSWORD))
        assert resp.status_code == 401

    def test_missing_credentials(self, client):
        resp = client.get("/api/radars")
        assert resp.status_code == 401
        assert resp.headers["WWW-Authenticate"].startswith("Basic")
