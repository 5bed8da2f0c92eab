"""Tests for study topics, study sessions and streaks."""

from httpx import AsyncClient

from dashboard.services.documents import today_iso


async def test_create_study_topic_mints_id_and_keeps_fields(client: AsyncClient):
    response = await client.post(
        "/api/study-topics",
        json={"name": "Subnetting", "nextReview": "2026-01-02T00:00:00.000Z", "ease": 2.5},
    )

    assert response.status_code == 200
    topic = response.json()["topic"]
    assert topic["id"].startswith("sr-")
    assert topic["name"] == "Subnetting"
    assert topic["nextReview"] == "2026-01-02T00:00:00.000Z"
    assert topic["ease"] == 2.5
    assert topic["createdAt"].endswith("Z")

    topics = (await client.get("/api/data")).json()["studyTopics"]
    assert topics == [topic]


async def test_create_study_topic_keeps_client_id(client: AsyncClient):
    response = await client.post("/api/study-topics", json={"id": "sr-42", "name": "OSPF"})

    assert response.json()["topic"]["id"] == "sr-42"


async def test_update_study_topic_merges_fields(client: AsyncClient):
    created = (await client.post("/api/study-topics", json={"name": "BGP", "interval": 1})).json()["topic"]

    response = await client.put(
        f"/api/study-topics/{created['id']}",
        json={"interval": 6, "nextReview": 1767225600000, "id": "hijacked"},
    )

    assert response.status_code == 200
    topic = response.json()["topic"]
    assert topic["id"] == created["id"]
    assert topic["name"] == "BGP"
    assert topic["interval"] == 6
    assert topic["nextReview"] == 1767225600000
    assert topic["createdAt"] == created["createdAt"]


async def test_update_missing_topic_is_not_found_and_leaves_document(client: AsyncClient):
    await client.post("/api/study-topics", json={"name": "VLANs"})
    before = (await client.get("/api/data")).json()

    response = await client.put("/api/study-topics/sr-does-not-exist", json={"interval": 3})

    assert response.status_code == 404
    assert response.json()["detail"] == "Topic not found"
    assert (await client.get("/api/data")).json() == before


async def test_log_study_session(client: AsyncClient):
    response = await client.post("/api/study-sessions", json={"topic": "sr-1", "hours": 1.5})

    assert response.status_code == 200
    session = response.json()["session"]
    assert session["topic"] == "sr-1"
    assert session["hours"] == 1.5
    assert session["timestamp"].endswith("Z")

    await client.post("/api/study-sessions", json={"hours": 2})
    sessions = (await client.get("/api/data")).json()["studySessions"]
    assert [s["hours"] for s in sessions] == [1.5, 2]


async def test_streak_history_grows_and_current_is_untouched(client: AsyncClient):
    await client.post("/api/streaks", json={"type": "workout", "date": "2026-03-01"})
    response = await client.post("/api/streaks", json={"type": "workout", "date": "2026-03-02"})

    assert response.status_code == 200
    assert response.json()["streaks"] == {
        "workout": {"current": 0, "history": {"2026-03-01": True, "2026-03-02": True}},
    }


async def test_streak_defaults_to_today(client: AsyncClient):
    response = await client.post("/api/streaks", json={"type": "reading"})

    assert response.json()["streaks"]["reading"]["history"] == {today_iso(): True}


async def test_streak_requires_type(client: AsyncClient):
    response = await client.post("/api/streaks", json={"date": "2026-03-01"})

    assert response.status_code == 422
