"""Read-modify-write operations on the per-user dashboard document.

The document is a plain JSON-compatible dict with camelCase keys. These
helpers mutate it in place and return the piece of state the caller needs
to echo back; persisting is left to the caller.
"""

import time
from datetime import datetime, timezone
from typing import Any

# Collections every document carries, with the factory for an empty value.
COLLECTION_DEFAULTS: dict[str, type] = {
    "tasks": dict,
    "journal": list,
    "studyTopics": list,
    "streaks": dict,
    "studySessions": list,
    "settings": dict,
    "aiChat": list,
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(moment: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_iso() -> str:
    return isoformat(utc_now())


def today_iso() -> str:
    return utc_now().date().isoformat()


def now_millis() -> int:
    return int(time.time() * 1000)


def new_document(user_id: str) -> dict[str, Any]:
    """Build an empty document for a user that has never been persisted."""
    document: dict[str, Any] = {"userId": user_id, "createdAt": now_iso()}
    document.update({key: factory() for key, factory in COLLECTION_DEFAULTS.items()})
    return document


def ensure_collections(document: dict[str, Any]) -> dict[str, Any]:
    """Backfill any missing top-level collection (e.g. after a partial restore)."""
    for key, factory in COLLECTION_DEFAULTS.items():
        if not isinstance(document.get(key), factory):
            document[key] = factory()
    return document


def touch(document: dict[str, Any]) -> None:
    document["updatedAt"] = now_iso()


# =============================================================================
# TASKS & JOURNAL
# =============================================================================


def merge_tasks(document: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    """Shallow key union; incoming values overwrite existing ones."""
    document["tasks"] = {**document["tasks"], **updates}
    return document["tasks"]


def add_journal_entry(document: dict[str, Any], text: str) -> dict[str, Any]:
    """Prepend a journal entry so the list stays newest-first."""
    entry = {"id": str(now_millis()), "text": text, "date": now_iso()}
    document["journal"].insert(0, entry)
    return entry


# =============================================================================
# STUDY
# =============================================================================


def add_study_topic(document: dict[str, Any], fields: dict[str, Any]) -> dict[str, Any]:
    """Append a study topic.

    A caller-supplied ``id`` wins over the minted one so offline clients can
    replay topics they created locally; ``createdAt`` is always server time.
    """
    topic = {"id": f"sr-{now_millis()}", **fields, "createdAt": now_iso()}
    document["studyTopics"].append(topic)
    return topic


def update_study_topic(
    document: dict[str, Any],
    topic_id: str,
    changes: dict[str, Any],
) -> dict[str, Any] | None:
    """Partially merge ``changes`` into the topic with ``topic_id``.

    Returns None (leaving the document untouched) when no topic matches.
    """
    for index, topic in enumerate(document["studyTopics"]):
        if topic.get("id") == topic_id:
            updated = {**topic, **changes, "id": topic_id}
            document["studyTopics"][index] = updated
            return updated
    return None


def add_study_session(document: dict[str, Any], fields: dict[str, Any]) -> dict[str, Any]:
    session = {"id": str(now_millis()), **fields, "timestamp": now_iso()}
    document["studySessions"].append(session)
    return session


# =============================================================================
# STREAKS
# =============================================================================


def log_streak(document: dict[str, Any], habit_type: str, day: str | None = None) -> dict[str, Any]:
    """Mark ``day`` (default: today, UTC) as completed for ``habit_type``.

    ``current`` is left as stored; deriving it from ``history`` is up to the client.
    """
    streaks = document["streaks"]
    record = streaks.get(habit_type)
    if not isinstance(record, dict):
        record = {"current": 0, "history": {}}
        streaks[habit_type] = record
    record.setdefault("history", {})[day or today_iso()] = True
    return streaks


# =============================================================================
# CHAT
# =============================================================================


def append_chat_exchange(
    document: dict[str, Any],
    message: str,
    reply: str,
    *,
    limit: int,
) -> list[dict[str, Any]]:
    """Record a user message and the assistant reply, keeping the last ``limit``."""
    chat = document["aiChat"]
    chat.append({"role": "user", "content": message, "timestamp": now_iso()})
    chat.append({"role": "assistant", "content": reply, "timestamp": now_iso()})
    if len(chat) > limit:
        document["aiChat"] = chat[-limit:]
    return document["aiChat"]


def recent_chat(document: dict[str, Any], limit: int) -> list[dict[str, Any]]:
    return document["aiChat"][-limit:] if limit > 0 else []


# =============================================================================
# BATCH SYNC
# =============================================================================


def apply_sync(
    document: dict[str, Any],
    *,
    tasks: dict[str, Any] | None = None,
    journal: list[dict[str, Any]] | None = None,
    streaks: dict[str, Any] | None = None,
    journal_limit: int,
) -> str:
    """Merge a batch of offline updates and stamp ``lastSync``.

    Incoming journal entries go in front of the stored ones and the list is
    capped at ``journal_limit``. Streak buckets are replaced per habit type.
    """
    if tasks is not None:
        document["tasks"] = {**document["tasks"], **tasks}
    if journal is not None:
        document["journal"] = [*journal, *document["journal"]][:journal_limit]
    if streaks is not None:
        document["streaks"] = {**document["streaks"], **streaks}
    document["lastSync"] = now_iso()
    return document["lastSync"]
