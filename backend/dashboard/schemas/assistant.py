"""Pydantic schemas for the assistant chat."""

from typing import Any

from pydantic import Field

from dashboard.schemas.base import BaseSchema


class AssistantRequest(BaseSchema):
    """Message sent to the assistant."""

    message: str = Field(..., max_length=10000)
    context: Any = None


class AssistantResponse(BaseSchema):
    """Assistant reply. ``suggestTask`` is only present when set."""

    text: str
    suggest_task: bool | None = None


class ChatMessageRead(BaseSchema):
    """A stored chat message."""

    role: str
    content: str
    timestamp: str


class ChatHistoryResponse(BaseSchema):
    messages: list[ChatMessageRead]
