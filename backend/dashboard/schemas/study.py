"""Study topic, study session and streak schemas."""

from typing import Any

from pydantic import Field

from dashboard.schemas.base import BaseSchema, FreeFormSchema, SuccessResponse


class StudyTopicCreate(FreeFormSchema):
    """Schema for adding a study topic.

    Topics are free-form; ``nextReview`` is computed by the client's
    spaced-repetition scheduler and stored as given.
    """

    id: str | None = None
    name: str | None = None
    next_review: str | int | float | None = None


class StudyTopicUpdate(FreeFormSchema):
    """Partial update for a study topic. Any field may be sent."""

    next_review: str | int | float | None = None


class StudyTopicResponse(SuccessResponse):
    topic: dict[str, Any]


class StudySessionCreate(FreeFormSchema):
    """Schema for logging a study session."""

    topic: str | None = None
    hours: float | None = Field(None, ge=0)


class StudySessionResponse(SuccessResponse):
    session: dict[str, Any]


class StreakLog(BaseSchema):
    """Mark a habit as done on ``date`` (defaults to today, UTC)."""

    type: str = Field(..., min_length=1)
    date: str | None = None


class StreaksResponse(SuccessResponse):
    streaks: dict[str, Any]
