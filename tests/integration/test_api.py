"""REST API tests against the in-memory backend."""
from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient

from portal_messaging.app import create_app
from portal_messaging.config import Settings
from portal_messaging.infrastructure.memory.repositories import InMemoryStore
from portal_messaging.infrastructure.memory.uow import in_memory_uow_factory
from tests.conftest import make_ctx


def _as(user_id: str) -> dict[str, str]:
    return {"X-User-Id": user_id}


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def ctx(store):
    return make_ctx(store)


@pytest.fixture
def client(store, ctx):
    app = create_app(
        Settings(STORAGE_BACKEND="memory", SEED_DEMO_DATA=False, REDIS_URL=None),
        uow_factory=in_memory_uow_factory(store),
        ctx=ctx,
    )
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


def _drain(client: TestClient, ctx) -> None:
    client.portal.call(ctx.dispatcher.drain)


def _direct(client: TestClient, admin: str = "1", other: str = "3") -> dict:
    resp = client.post("/api/v1/conversations", headers=_as(admin), json={"user_id": other})
    assert resp.status_code == 200
    return resp.json()


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.headers["Server-Timing"].startswith("app;dur=")


def test_missing_user_header_is_unauthorized(client):
    resp = client.get("/api/v1/conversations")
    assert resp.status_code == 401


def test_unknown_user_is_unauthorized(client):
    resp = client.get("/api/v1/conversations", headers=_as("404"))
    assert resp.status_code == 401


def test_request_id_is_echoed(client):
    resp = client.get("/healthz", headers={"X-Request-ID": "abc123"})
    assert resp.headers["X-Request-ID"] == "abc123"


def test_create_direct_is_idempotent(client):
    first = _direct(client, "1", "3")
    second = _direct(client, "3", "1")

    assert first["id"] == second["id"]
    assert first["type"] == "direct"
    assert sorted(first["participants"]) == ["1", "3"]


def test_send_and_list_messages(client):
    conv = _direct(client)

    resp = client.post(
        f"/api/v1/conversations/{conv['id']}/messages",
        headers=_as("3"),
        json={"content": "Hi Alex"},
    )
    assert resp.status_code == 201
    assert resp.json()["read"] is True

    resp = client.get(f"/api/v1/conversations/{conv['id']}/messages", headers=_as("1"))
    assert resp.status_code == 200
    assert [m["content"] for m in resp.json()] == ["Hi Alex"]


def test_blank_message_rejected(client):
    conv = _direct(client)
    resp = client.post(
        f"/api/v1/conversations/{conv['id']}/messages",
        headers=_as("1"),
        json={"content": "   "},
    )
    assert resp.status_code == 422


def test_send_to_unknown_conversation(client):
    resp = client.post(
        f"/api/v1/conversations/{uuid.uuid4()}/messages",
        headers=_as("1"),
        json={"content": "hello"},
    )
    assert resp.status_code == 404


def test_outsider_cannot_read_messages(client):
    conv = _direct(client)
    resp = client.get(f"/api/v1/conversations/{conv['id']}/messages", headers=_as("5"))
    assert resp.status_code == 403


def test_conversation_list_is_filtered_and_summarised(client):
    _direct(client, "1", "3")
    resp = client.post(
        "/api/v1/conversations/groups",
        headers=_as("1"),
        json={"name": "Team GKM", "member_ids": ["2", "4"]},
    )
    assert resp.status_code == 201

    client_view = client.get("/api/v1/conversations", headers=_as("3")).json()
    admin_view = client.get("/api/v1/conversations", headers=_as("1")).json()

    assert [s["title"] for s in client_view] == ["Alex van der Berg"]
    assert client_view[0]["other_participant"]["role"] == "admin"
    assert {s["title"] for s in admin_view} == {"Mike Visser", "Team GKM"}


def test_client_cannot_create_group(client):
    resp = client.post(
        "/api/v1/conversations/groups",
        headers=_as("3"),
        json={"name": "Clients", "member_ids": ["5"]},
    )
    assert resp.status_code == 403


def test_notifications_flow(client, ctx):
    conv = _direct(client)
    client.post(
        f"/api/v1/conversations/{conv['id']}/messages",
        headers=_as("1"),
        json={"content": "Your ads are live"},
    )
    _drain(client, ctx)

    items = client.get("/api/v1/notifications", headers=_as("3")).json()
    assert len(items) == 1
    assert items[0]["title"] == "New Message"
    assert items[0]["action_data"] == {"conversation_id": conv["id"]}
    assert client.get("/api/v1/notifications", headers=_as("1")).json() == []

    count = client.get("/api/v1/notifications/unread-count", headers=_as("3")).json()
    assert count == {"count": 1}

    resp = client.post(f"/api/v1/notifications/{items[0]['id']}/read", headers=_as("5"))
    assert resp.status_code == 403

    resp = client.post(f"/api/v1/notifications/{items[0]['id']}/read", headers=_as("3"))
    assert resp.status_code == 204
    count = client.get("/api/v1/notifications/unread-count", headers=_as("3")).json()
    assert count == {"count": 0}

    resp = client.delete("/api/v1/notifications", headers=_as("3"))
    assert resp.json() == {"count": 1}


def test_mark_conversation_read(client):
    conv = _direct(client)
    client.post(
        f"/api/v1/conversations/{conv['id']}/messages",
        headers=_as("3"),
        json={"content": "question"},
    )

    before = client.get(f"/api/v1/conversations/{conv['id']}", headers=_as("1")).json()
    resp = client.post(f"/api/v1/conversations/{conv['id']}/read", headers=_as("1"))
    after = client.get(f"/api/v1/conversations/{conv['id']}", headers=_as("1")).json()

    assert resp.status_code == 200
    assert before["unread_counts"]["1"] == 1
    assert after["unread_counts"]["1"] == 0


def test_upload_and_download_files(client):
    conv = _direct(client)

    resp = client.post(
        f"/api/v1/conversations/{conv['id']}/files",
        headers=_as("1"),
        files=[
            ("files", ("design-mockup.png", b"\x89PNGdata", "image/png")),
            ("files", ("brief.pdf", b"%PDF-1.4", "application/pdf")),
        ],
    )
    assert resp.status_code == 200
    results = resp.json()
    assert [r["ok"] for r in results] == [True, True]
    image = results[0]["message"]
    assert image["type"] == "file"
    assert image["is_previewable"] is True
    assert image["file_size_label"] == "8 Bytes"
    assert results[1]["message"]["is_previewable"] is False

    resp = client.get(f"/api/v1/attachments/{image['file_url']}", headers=_as("3"))
    assert resp.status_code == 200
    assert resp.content == b"\x89PNGdata"


def test_download_unknown_attachment(client):
    resp = client.get("/api/v1/attachments/sha256:" + "0" * 64, headers=_as("1"))
    assert resp.status_code == 404


def test_delete_message_keeps_last_message(client):
    conv = _direct(client)
    sent = client.post(
        f"/api/v1/conversations/{conv['id']}/messages",
        headers=_as("1"),
        json={"content": "oops"},
    ).json()

    resp = client.delete(f"/api/v1/messages/{sent['id']}", headers=_as("1"))
    assert resp.status_code == 204

    detail = client.get(f"/api/v1/conversations/{conv['id']}", headers=_as("1")).json()
    assert detail["last_message"]["id"] == sent["id"]
    messages = client.get(f"/api/v1/conversations/{conv['id']}/messages", headers=_as("1"))
    assert messages.json() == []


def test_delete_conversation(client):
    conv = _direct(client)

    assert client.delete(f"/api/v1/conversations/{conv['id']}", headers=_as("3")).status_code == 403
    assert client.delete(f"/api/v1/conversations/{conv['id']}", headers=_as("1")).status_code == 204
    assert client.get(f"/api/v1/conversations/{conv['id']}", headers=_as("1")).status_code == 404


def test_contacts(client):
    _direct(client, "1", "3")
    resp = client.get("/api/v1/contacts", headers=_as("5"))
    assert {u["id"] for u in resp.json()} == {"1", "2", "4"}


def test_healthz_reports_counters(client, ctx):
    conv = _direct(client)
    client.post(
        f"/api/v1/conversations/{conv['id']}/messages",
        headers=_as("1"),
        json={"content": "ping"},
    )
    client.get("/api/v1/conversations", headers={})
    _drain(client, ctx)

    body = client.get("/healthz").json()

    assert body["notifications"] == {"in_flight": 0, "delivered": 1, "failed": 0}
    assert body["requests"]["2xx"] == 2
    assert body["requests"]["4xx"] == 1
