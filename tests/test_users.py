from __future__ import annotations

import uuid


def test_register_returns_username_and_generated_id(client):
    resp = client.post("/api/users", json={"username": "alice"})

    assert resp.status_code == 201
    body = resp.json()
    assert body["username"] == "alice"
    assert str(uuid.UUID(body["id"])) == body["id"]


def test_register_issues_distinct_ids(create_user):
    ids = {create_user(name)["id"] for name in ("alice", "bob", "carol")}
    assert len(ids) == 3


def test_register_accepts_form_post(client):
    resp = client.post("/api/users", data={"username": "dana"})

    assert resp.status_code == 201
    assert resp.json()["username"] == "dana"


def test_register_trims_username(client):
    resp = client.post("/api/users", json={"username": "  erin  "})

    assert resp.status_code == 201
    assert resp.json()["username"] == "erin"


def test_register_requires_username(client):
    for body in ({}, {"username": ""}, {"username": "   "}):
        resp = client.post("/api/users", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Username must be filled!"}


def test_register_with_empty_body_is_400(client):
    resp = client.post("/api/users")

    assert resp.status_code == 400
    assert "error" in resp.json()


def test_register_rejects_duplicate_username(client, alice):
    resp = client.post("/api/users", json={"username": "alice"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Username already taken!"}


def test_register_rejects_malformed_json(client):
    resp = client.post(
        "/api/users",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert resp.status_code == 400
    assert resp.json()["error"] == "Request body must be valid JSON."


def test_register_rejects_non_object_json(client):
    resp = client.post("/api/users", json=["alice"])

    assert resp.status_code == 400
    assert resp.json()["error"] == "Request body must be a JSON object."


def test_register_rejects_non_string_username(client):
    resp = client.post("/api/users", json={"username": 42})

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Invalid request body."
    assert body["details"][0]["loc"] == ["username"]


def test_list_users_projects_username_and_id(client, create_user):
    alice = create_user("alice")
    bob = create_user("bob")

    resp = client.get("/api/users")

    assert resp.status_code == 200
    assert resp.json() == [
        {"username": "alice", "id": alice["id"]},
        {"username": "bob", "id": bob["id"]},
    ]


def test_list_users_empty(client):
    resp = client.get("/api/users")

    assert resp.status_code == 200
    assert resp.json() == []
