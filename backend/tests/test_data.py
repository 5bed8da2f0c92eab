"""Tests for health, whole-document fetch, batch sync, backup and restore."""

from httpx import AsyncClient

from dashboard.db.store import DocumentStore
from dashboard.services.documents import new_document, today_iso


async def test_health_check(client: AsyncClient):
    response = await client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["timestamp"].endswith("Z")


async def test_get_data_returns_default_document(client: AsyncClient, user_id: str):
    response = await client.get("/api/data")

    assert response.status_code == 200
    data = response.json()
    assert data["userId"] == user_id
    assert data["tasks"] == {}
    assert data["journal"] == []
    assert data["studyTopics"] == []
    assert data["streaks"] == {}
    assert data["studySessions"] == []
    assert data["settings"] == {}
    assert data["aiChat"] == []


async def test_sync_merges_batch_and_stamps_last_sync(client: AsyncClient):
    await client.post("/api/tasks", json={"read": True, "gym": False})
    await client.post("/api/journal", json={"text": "online entry"})
    await client.post("/api/streaks", json={"type": "reading", "date": "2026-02-01"})

    response = await client.post(
        "/api/sync",
        json={
            "tasks": {"gym": True},
            "journal": [{"id": "2", "text": "offline b", "date": "d2"}, {"id": "1", "text": "offline a", "date": "d1"}],
            "streaks": {"water": {"current": 4, "history": {"2026-02-01": True}}},
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert body["lastSync"] == data["lastSync"]
    assert data["tasks"] == {"read": True, "gym": True}
    assert [e["text"] for e in data["journal"]] == ["offline b", "offline a", "online entry"]
    assert set(data["streaks"]) == {"reading", "water"}
    assert data["streaks"]["water"]["current"] == 4

    assert (await client.get("/api/data")).json() == data


async def test_sync_caps_journal(client: AsyncClient, store: DocumentStore, user_id: str):
    document = new_document(user_id)
    document["journal"] = [{"id": str(i), "text": f"old {i}", "date": "d"} for i in range(99)]
    store.save(user_id, document)

    incoming = [{"id": f"n{i}", "text": f"new {i}", "date": "d"} for i in range(5)]
    data = (await client.post("/api/sync", json={"journal": incoming})).json()["data"]

    assert len(data["journal"]) == 100
    assert data["journal"][:5] == incoming
    assert data["journal"][-1]["text"] == "old 94"


async def test_backup_is_dated_attachment_of_document(client: AsyncClient):
    await client.post("/api/tasks", json={"read": True})

    response = await client.get("/api/backup")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert (
        response.headers["content-disposition"]
        == f'attachment; filename="dashboard-backup-{today_iso()}.json"'
    )
    assert response.json() == (await client.get("/api/data")).json()


async def test_restore_exported_backup(client: AsyncClient):
    await client.post("/api/tasks", json={"read": True})
    await client.post("/api/journal", json={"text": "keep me"})
    backup = (await client.get("/api/backup")).json()

    # Diverge after the backup was taken
    await client.post("/api/journal", json={"text": "discard me"})
    await client.post("/api/tasks", json={"read": False, "extra": True})

    response = await client.post("/api/restore", json=backup)
    assert response.status_code == 200
    assert response.json() == {"success": True}

    restored = (await client.get("/api/data")).json()
    restored_at = restored.pop("restoredAt")
    assert restored_at.endswith("Z")
    assert restored == backup


async def test_restore_rejects_unparseable_body(client: AsyncClient):
    response = await client.post(
        "/api/restore",
        content=b"{definitely not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid backup data"


async def test_restore_rejects_non_object(client: AsyncClient):
    response = await client.post("/api/restore", json=[1, 2, 3])

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid backup data"
