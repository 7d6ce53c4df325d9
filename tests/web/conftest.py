"""Shared fixtures for web tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from tech_radar.web.app import app, register_limiter

PASSWORD = "Correct-Horse-9"


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Point the app at a fresh SQLite file with cheap bcrypt hashing."""
    path = str(tmp_path / "radar.db")
    monkeypatch.setenv("TECH_RADAR_DB", path)
    monkeypatch.setenv("TECH_RADAR_BCRYPT_ROUNDS", "4")
    return path


@pytest.fixture
def client(db_path):
    """FastAPI test client."""
    register_limiter.reset()
    with TestClient(app) as c:
        yield c
    register_limiter.reset()


def register(client, name: str = "Alice", email: str = "alice@example.com",
             password: str = PASSWORD, **kwargs):
    return client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
        **kwargs,
    )


@pytest.fixture
def auth(client):
    """Register Alice and return her Basic credentials."""
    assert register(client).status_code == 201
    return ("alice@example.com", PASSWORD)


@pytest.fixture
def other_auth(client):
    """Register Bob, who owns nothing of Alice's."""
    assert register(client, "Bob", "bob@example.com").status_code == 201
    return ("bob@example.com", PASSWORD)


def make_radar(client, auth, name: str = "Platform team", description: str | None = None) -> dict:
    resp = client.post("/api/radars", json={"name": name, "description": description}, auth=auth)
    assert resp.status_code == 201
    return resp.json()


def make_blip(client, auth, radar: dict, name: str = "Vite", quadrant: int = 2, ring: int = 0,
              **fields) -> dict:
    body = {
        "name": name,
        "quadrant_id": radar["quadrants"][quadrant]["id"],
        "ring_id": radar["rings"][ring]["id"],
        **fields,
    }
    resp = client.post(f"/api/radars/{radar['id']}/blips", json=body, auth=auth)
    assert resp.status_code == 201
    return resp.json()
