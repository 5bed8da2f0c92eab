"""Tests for the keyword assistant and its chat history."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from dashboard.config import get_settings
from dashboard.services import assistant
from dashboard.services.documents import isoformat, new_document, today_iso, utc_now


@pytest.fixture
def document() -> dict:
    return new_document("junior")


def test_streak_reply_lists_current_counts(document):
    document["streaks"] = {
        "reading": {"current": 3, "history": {}},
        "water": {"history": {}},
    }

    reply = assistant.respond("How are my STREAKS?", document)

    assert reply.text == "Current streaks: reading: 3 days, water: 0 days"
    assert reply.suggest_task is False


def test_streak_reply_tolerates_non_dict_buckets(document):
    document["streaks"] = {"water": 5, "reading": None, "walk": {"current": 2}}

    reply = assistant.respond("streak?", document)

    assert reply.text == "Current streaks: water: 0 days, reading: 0 days, walk: 2 days"


def test_streak_reply_without_streaks(document):
    assert assistant.respond("streak?", document).text == "No active streaks yet. Start logging!"


def test_study_reply_counts_due_topics(document):
    now = utc_now()
    document["studyTopics"] = [
        {"id": "sr-1", "nextReview": isoformat(now - timedelta(days=1))},
        {"id": "sr-2", "nextReview": isoformat(now + timedelta(days=3))},
        {"id": "sr-3"},
        {"id": "sr-4", "nextReview": int((now - timedelta(hours=1)).timestamp() * 1000)},
    ]

    reply = assistant.respond("what should I study", document)

    assert reply.text == "You have 4 study topics, 2 due for review."


def test_network_keyword_uses_study_branch(document):
    assert assistant.respond("network review", document).text.startswith("You have 0 study topics")


def test_journal_reply(document):
    document["journal"] = [{"id": "1", "text": "a", "date": "d"}]

    assert assistant.respond("new entry please", document).text == "You have 1 journal entries."


@pytest.mark.parametrize(
    "hours, expected",
    [
        ([1.5, 2, None], "Study progress: 3 sessions, 3.5 total hours."),
        ([1, 2], "Study progress: 2 sessions, 3 total hours."),
        ([0.25, 0.33], "Study progress: 2 sessions, 0.6 total hours."),
        ([0.25], "Study progress: 1 sessions, 0.3 total hours."),
        ([1.25], "Study progress: 1 sessions, 1.3 total hours."),
    ],
)
def test_progress_reply_sums_hours(document, hours, expected):
    document["studySessions"] = [
        {"id": str(i), "hours": h} if h is not None else {"id": str(i)}
        for i, h in enumerate(hours)
    ]

    assert assistant.respond("progress report", document).text == expected


def test_task_reply_suggests_task(document):
    reply = assistant.respond("Add something", document)

    assert reply.suggest_task is True
    assert "What topic would you like to add?" in reply.text


def test_greeting_uses_display_name(document):
    reply = assistant.respond("hello there", document)

    assert reply.text == f"Hey {get_settings().user_display_name}. What do you need?"


def test_fallback_counts_completed_tasks(document):
    document["tasks"] = {"a": True, "b": False, "c": True}

    reply = assistant.respond("what now?", document)

    assert reply.text == "You've completed 2 tasks today. Keep it up!"


def test_health_reply_counts_habits_logged_today(document):
    document["streaks"] = {
        "workout": {"current": 1, "history": {today_iso(): True}},
        "sleep": {"current": 0, "history": {"2020-01-01": True}},
    }

    reply = assistant.respond("How is my health?", document)

    assert reply.text == "Health check: 1 of 2 habits logged today."


@pytest.mark.parametrize(
    "message, rule",
    [
        ("health streak", "health"),
        ("streak and study", "streak"),
        ("study journal", "study"),
        ("journal progress", "journal"),
        ("progress on task", "progress"),
        ("task hello", "task"),
    ],
)
def test_rules_are_checked_in_priority_order(message, rule):
    matched = next(r for r in assistant.RULES if r.matches(message))

    assert matched.name == rule


# =============================================================================
# API
# =============================================================================


async def test_ask_assistant_records_exchange(client: AsyncClient):
    response = await client.post("/api/ai", json={"message": "hello"})

    assert response.status_code == 200
    assert response.json() == {"text": f"Hey {get_settings().user_display_name}. What do you need?"}

    chat = (await client.get("/api/data")).json()["aiChat"]
    assert [(m["role"], m["content"]) for m in chat] == [
        ("user", "hello"),
        ("assistant", response.json()["text"]),
    ]


async def test_ask_assistant_flags_task_suggestion(client: AsyncClient):
    response = await client.post("/api/ai", json={"message": "add a task", "context": {"page": "home"}})

    assert response.json()["suggestTask"] is True


async def test_chat_history_is_capped(client: AsyncClient):
    for i in range(30):
        await client.post("/api/ai", json={"message": f"message {i}"})

    chat = (await client.get("/api/data")).json()["aiChat"]
    assert len(chat) == 50
    assert chat[-2]["content"] == "message 29"
    assert chat[0]["content"] == "message 5"

    recent = (await client.get("/api/ai/chat")).json()["messages"]
    assert len(recent) == 20
    assert recent == chat[-20:]


async def test_streak_question_after_syncing_plain_counts(client: AsyncClient):
    synced = await client.post("/api/sync", json={"streaks": {"water": 5}})
    assert synced.status_code == 200

    response = await client.post("/api/ai", json={"message": "streak?"})

    assert response.status_code == 200
    assert response.json() == {"text": "Current streaks: water: 0 days"}


async def test_empty_message_gets_fallback_reply(client: AsyncClient):
    response = await client.post("/api/ai", json={"message": ""})

    assert response.status_code == 200
    assert response.json() == {"text": "You've completed 0 tasks today. Keep it up!"}
