"""Journal and task schemas."""

from typing import Any

from dashboard.schemas.base import BaseSchema, SuccessResponse


class JournalEntryCreate(BaseSchema):
    """Schema for adding a journal entry. Text is stored verbatim."""

    text: str


class JournalEntryRead(BaseSchema):
    """A stored journal entry."""

    id: str
    text: str
    date: str


class JournalEntryResponse(SuccessResponse):
    entry: JournalEntryRead


class TasksResponse(SuccessResponse):
    tasks: dict[str, Any]
