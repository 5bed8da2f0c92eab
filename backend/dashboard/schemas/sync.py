"""Schemas for batch sync, backup and health."""

from typing import Any

from dashboard.schemas.base import BaseSchema, SuccessResponse


class SyncRequest(BaseSchema):
    """Batch of offline updates. Omitted sections are left alone."""

    tasks: dict[str, Any] | None = None
    journal: list[dict[str, Any]] | None = None
    streaks: dict[str, Any] | None = None


class SyncResponse(SuccessResponse):
    last_sync: str
    data: dict[str, Any]


class HealthResponse(BaseSchema):
    status: str
    timestamp: str
