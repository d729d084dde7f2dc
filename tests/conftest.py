"""
Shared fixtures for the portal test suite.

Every test gets its own SQLite file under ``tmp_path``; ``settings``
is patched before any connection is opened so services and the API
both see the temporary database.
"""

import os
from typing import Dict

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing the app.
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("SECRET_KEY", "test-secret")

from dj_agency_api.app.core.config import settings  # noqa: E402
from dj_agency_api.app.core.db import init_db  # noqa: E402
from dj_agency_api.app.main import app  # noqa: E402


ADMIN_CONTEXT = {"sub": "admin@agency.com", "user_id": 1, "role": "admin", "producer_id": None}


def pytest_configure(config):
    config.addinivalue_line("markers", "api: API endpoint tests")


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = tmp_path / "portal.db"
    monkeypatch.setattr(settings, "database_url", str(path))
    monkeypatch.setattr(settings, "super_admin_static_token", "")
    monkeypatch.setattr(settings, "commission_rate", 20.0)
    init_db()
    return path


@pytest.fixture
def admin_context() -> Dict[str, object]:
    return dict(ADMIN_CONTEXT)


@pytest.fixture
def client(db_path):
    return TestClient(app)


def auth_headers(client: TestClient, email: str, password: str = "secret123") -> Dict[str, str]:
    """Sign up (ignoring an existing account) and log in, returning bearer headers."""
    client.post("/api/v1/users/signup", json={"email": email, "password": password})
    response = client.post("/api/v1/users/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client) -> Dict[str, str]:
    # The first account to sign up becomes the administrator.
    return auth_headers(client, "admin@agency.com")


@pytest.fixture
def producer(client, admin_headers) -> dict:
    response = client.post(
        "/api/v1/producers/",
        json={"name": "Festa Company", "email": "contato@festacompany.com", "city": "São Paulo"},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def producer_headers(client, admin_headers, producer) -> Dict[str, str]:
    """A ``produtor`` account linked to ``producer`` through an access code."""
    headers = auth_headers(client, "joao@festacompany.com")
    code = client.post(
        f"/api/v1/producers/{producer['id']}/access-code", headers=admin_headers
    ).json()["access_code"]
    response = client.post(
        "/api/v1/users/me/access-code", json={"access_code": code}, headers=headers
    )
    assert response.status_code == 200, response.text
    return headers


def create_dj(client: TestClient, headers: Dict[str, str], **overrides) -> dict:
    payload = {"name": "DJ Alok", "genres": ["House"], "booking_price": 50000.0}
    payload.update(overrides)
    response = client.post("/api/v1/djs/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def create_event(client: TestClient, headers: Dict[str, str], **overrides) -> dict:
    payload = {
        "title": "Festival de Verão",
        "event_date": "2025-01-15T22:00:00",
        "venue": "Arena Anhembi",
        "city": "São Paulo",
        "state": "SP",
        "booking_fee": 30000.0,
    }
    payload.update(overrides)
    response = client.post("/api/v1/events/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
