"""Messages exchanged between clients and the offline worker."""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class SyncItem(BaseModel):
    """A mutation buffered while offline, replayed against the REST API."""

    url: str = Field(..., min_length=1)
    method: str = "POST"
    data: Any = None

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return (value or "POST").upper()


class QueueSyncMessage(BaseModel):
    """``QUEUE_SYNC``: replaces the worker's queue wholesale."""

    type: Literal["QUEUE_SYNC"]
    queue: list[SyncItem] = Field(default_factory=list)
    online: bool = True


class ScheduledNotification(BaseModel):
    """A reminder to show at ``timestamp`` (epoch milliseconds)."""

    id: str
    title: str
    body: str = ""
    timestamp: float
    tag: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ScheduleNotificationMessage(BaseModel):
    """``SCHEDULE_NOTIFICATION``: arm (or re-arm) a reminder timer."""

    type: Literal["SCHEDULE_NOTIFICATION"]
    notification: ScheduledNotification


class NotificationAction(BaseModel):
    action: str
    title: str


class NotificationRead(BaseModel):
    """A notification currently on display."""

    id: str
    title: str
    body: str = ""
    tag: str | None = None
    icon: str | None = None
    badge: str | None = None
    require_interaction: bool = False
    actions: list[NotificationAction] = Field(default_factory=list)
    shown_at: float


class NotificationClick(BaseModel):
    """Click on a notification; no action means the body was clicked."""

    action: str | None = None


class SyncResult(BaseModel):
    failed: int
