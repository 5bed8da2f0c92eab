"""Pydantic schemas for API request/response validation."""

from dashboard.schemas.base import SuccessResponse
from dashboard.schemas.journal import (
    JournalEntryCreate,
    JournalEntryRead,
    JournalEntryResponse,
    TasksResponse,
)
from dashboard.schemas.study import (
    StreakLog,
    StreaksResponse,
    StudySessionCreate,
    StudySessionResponse,
    StudyTopicCreate,
    StudyTopicResponse,
    StudyTopicUpdate,
)
from dashboard.schemas.assistant import (
    AssistantRequest,
    AssistantResponse,
    ChatHistoryResponse,
    ChatMessageRead,
)
from dashboard.schemas.sync import HealthResponse, SyncRequest, SyncResponse
from dashboard.schemas.worker import (
    NotificationClick,
    NotificationRead,
    QueueSyncMessage,
    ScheduledNotification,
    ScheduleNotificationMessage,
    SyncItem,
    SyncResult,
)

__all__ = [
    "SuccessResponse",
    # Journal & tasks
    "JournalEntryCreate",
    "JournalEntryRead",
    "JournalEntryResponse",
    "TasksResponse",
    # Study & streaks
    "StreakLog",
    "StreaksResponse",
    "StudySessionCreate",
    "StudySessionResponse",
    "StudyTopicCreate",
    "StudyTopicResponse",
    "StudyTopicUpdate",
    # Assistant
    "AssistantRequest",
    "AssistantResponse",
    "ChatHistoryResponse",
    "ChatMessageRead",
    # Sync & health
    "HealthResponse",
    "SyncRequest",
    "SyncResponse",
    # Worker
    "NotificationClick",
    "NotificationRead",
    "QueueSyncMessage",
    "ScheduledNotification",
    "ScheduleNotificationMessage",
    "SyncItem",
    "SyncResult",
]
