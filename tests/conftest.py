from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from main import create_app


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def client():
    app = create_app(database_url="memory://")
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def create_user(client):
    def _create(username: str) -> dict:
        resp = client.post("/api/users", json={"username": username})
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create


@pytest.fixture
def alice(create_user) -> dict:
    return create_user("alice")


@pytest.fixture
def log_exercise(client):
    def _log(user_id: str, **fields) -> dict:
        resp = client.post(f"/api/users/{user_id}/exercises", json=fields)
        assert resp.status_code == 200, resp.text
        return resp.json()

    return _log
