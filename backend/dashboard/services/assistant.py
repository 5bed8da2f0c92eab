"""Keyword-driven assistant replies built from the user's own dashboard data."""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from dashboard.config import get_settings
from dashboard.services.documents import today_iso, utc_now

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass(frozen=True)
class AssistantReply:
    """Reply text plus an optional hint for the client UI."""

    text: str
    suggest_task: bool = False


ReplyBuilder = Callable[[dict[str, Any]], AssistantReply]


@dataclass(frozen=True)
class KeywordRule:
    """A branch of the assistant: fires when any keyword occurs in the message."""

    name: str
    keywords: tuple[str, ...]
    build: ReplyBuilder

    def matches(self, message: str) -> bool:
        return any(keyword in message for keyword in self.keywords)


# =============================================================================
# HELPERS
# =============================================================================


def _format_number(value: float) -> str:
    """Round half up to one decimal, dropping a trailing ``.0``."""
    rounded = math.floor(value * 10 + 0.5) / 10
    if rounded == int(rounded):
        return str(int(rounded))
    return str(rounded)


def _parse_review_time(value: Any) -> datetime | None:
    """Accept an ISO string or epoch milliseconds; anything else is not schedulable."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    return None


def count_due_topics(topics: list[dict[str, Any]], now: datetime | None = None) -> int:
    """Count topics whose ``nextReview`` is not in the future."""
    now = now or utc_now()
    due = 0
    for topic in topics:
        review_at = _parse_review_time(topic.get("nextReview"))
        if review_at is not None and review_at <= now:
            due += 1
    return due


# =============================================================================
# REPLY BUILDERS
# =============================================================================


def _health_reply(document: dict[str, Any]) -> AssistantReply:
    streaks = document["streaks"]
    if not streaks:
        return AssistantReply("No habits tracked yet. Log one to start a streak.")
    today = today_iso()
    logged = sum(
        1
        for record in streaks.values()
        if isinstance(record, dict) and (record.get("history") or {}).get(today)
    )
    return AssistantReply(f"Health check: {logged} of {len(streaks)} habits logged today.")


def _streak_reply(document: dict[str, Any]) -> AssistantReply:
    parts = [
        f"{habit}: {(record.get('current') or 0) if isinstance(record, dict) else 0} days"
        for habit, record in document["streaks"].items()
    ]
    if not parts:
        return AssistantReply("No active streaks yet. Start logging!")
    return AssistantReply(f"Current streaks: {', '.join(parts)}")


def _study_reply(document: dict[str, Any]) -> AssistantReply:
    topics = document["studyTopics"]
    return AssistantReply(
        f"You have {len(topics)} study topics, {count_due_topics(topics)} due for review."
    )


def _journal_reply(document: dict[str, Any]) -> AssistantReply:
    return AssistantReply(f"You have {len(document['journal'])} journal entries.")


def _progress_reply(document: dict[str, Any]) -> AssistantReply:
    sessions = document["studySessions"]
    hours = 0.0
    for session in sessions:
        value = session.get("hours")
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            hours += value
    return AssistantReply(
        f"Study progress: {len(sessions)} sessions, {_format_number(hours)} total hours."
    )


def _task_reply(document: dict[str, Any]) -> AssistantReply:
    return AssistantReply(
        "I can add tasks to your study queue. What topic would you like to add?",
        suggest_task=True,
    )


def _greeting_reply(document: dict[str, Any]) -> AssistantReply:
    return AssistantReply(f"Hey {settings.user_display_name}. What do you need?")


def _fallback_reply(document: dict[str, Any]) -> AssistantReply:
    completed = sum(1 for done in document["tasks"].values() if done)
    return AssistantReply(f"You've completed {completed} tasks today. Keep it up!")


# Evaluated in order; the first rule whose keyword occurs in the message wins.
RULES: tuple[KeywordRule, ...] = (
    KeywordRule("health", ("health", "workout", "exercise", "sleep"), _health_reply),
    KeywordRule("streak", ("streak",), _streak_reply),
    KeywordRule("study", ("study", "network"), _study_reply),
    KeywordRule("journal", ("journal", "entry"), _journal_reply),
    KeywordRule("progress", ("progress",), _progress_reply),
    KeywordRule("task", ("task", "add"), _task_reply),
    KeywordRule("greeting", ("hello", "hi"), _greeting_reply),
)


def respond(message: str, document: dict[str, Any]) -> AssistantReply:
    """Pick the first matching rule for ``message`` and build its reply."""
    lowered = message.lower()
    for rule in RULES:
        if rule.matches(lowered):
            logger.debug("Assistant rule %s matched", rule.name)
            return rule.build(document)
    return _fallback_reply(document)
