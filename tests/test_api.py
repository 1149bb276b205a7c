"""
HTTP surface tests; auth and the store are replaced through dependency overrides.
"""
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_current_user_id, get_document_store
from app.database.supabase_client import get_supabase
from app.main import app


@pytest.fixture
def client(store):
    actor = {"id": "u1"}
    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_current_user_id] = lambda: {"id": actor["id"], "email": "", "display_name": ""}
    with TestClient(app) as test_client:
        test_client.actor = actor
        yield test_client
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_missing_token_is_401(store):
    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_supabase] = lambda: MagicMock()
    try:
        with TestClient(app) as test_client:
            response = test_client.post("/api/v1/groups", json={"name": "Club"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 401
    assert response.json()["detail"] == "Missing authenticated user context."


def test_group_flow_over_http(client, store, settings):
    created = client.post("/api/v1/groups", json={"name": "Club", "display_name": "Alice"})
    assert created.status_code == 201
    body = created.json()
    group_id = body["group"]["id"]

    client.actor["id"] = "u2"
    joined = client.post("/api/v1/groups/join", json={"code": body["invite"]["code"], "display_name": "Bob"})
    assert joined.status_code == 200
    assert joined.json()["created"] is True

    # Members can't sync
    assert client.post(f"/api/v1/permissions/groups/{group_id}/sync").status_code == 403

    client.actor["id"] = "u1"
    members = client.get(f"/api/v1/groups/{group_id}/members").json()
    assert [m["display_name"] for m in members] == ["Alice", "Bob"]

    synced = client.post(f"/api/v1/permissions/groups/{group_id}/sync")
    assert synced.status_code == 200
    assert synced.json()["updated"] == 0


def test_unknown_invite_code_is_404(client):
    response = client.get("/api/v1/invites/code/ZZZZZZZZ")
    assert response.status_code == 404
    assert response.json()["detail"] == "Invite code is invalid."


def test_actions_endpoint(client):
    response = client.post("/api/v1/actions", json={
        "action": "createGroupWithOwner", "payload": {"name": "Club", "displayName": "Alice"}
    })
    assert response.status_code == 200
    assert response.json()["ok"] is True
    assert response.json()["data"]["group"]["name"] == "Club"


def test_unknown_action_is_400(client):
    response = client.post("/api/v1/actions", json={"action": "nope", "payload": {}})
    assert response.status_code == 400


def test_permission_matrix(client):
    rows = client.get("/api/v1/permissions/matrix").json()
    assert (rows[-3]["kind"], rows[-3]["action"]) == ("invites", "read")
    assert rows[-3]["audiences"] == ["any_user"]
