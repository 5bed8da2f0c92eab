"""Whole-document routes: fetch, batch sync, backup and restore."""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse

from dashboard.api.deps import CurrentUserId, Store
from dashboard.config import get_settings
from dashboard.schemas.base import SuccessResponse
from dashboard.schemas.sync import SyncRequest, SyncResponse
from dashboard.services import documents

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/api", tags=["data"])


@router.get("/data")
async def get_data(user_id: CurrentUserId, store: Store) -> dict[str, Any]:
    """Return the full document (a default one if nothing is stored yet)."""
    return store.load(user_id)


@router.post("/sync", response_model=SyncResponse)
async def sync_data(
    updates: SyncRequest,
    user_id: CurrentUserId,
    store: Store,
) -> SyncResponse:
    """
    Merge a batch of offline changes.

    - tasks: key union, incoming values win
    - journal: incoming entries first, capped at ``sync_journal_limit``
    - streaks: habit-type union, incoming buckets win
    """
    document = store.load(user_id)
    documents.touch(document)
    last_sync = documents.apply_sync(
        document,
        tasks=updates.tasks,
        journal=updates.journal,
        streaks=updates.streaks,
        journal_limit=settings.sync_journal_limit,
    )
    store.save(user_id, document)
    logger.info(
        "Synced batch for %s (tasks=%d, journal=%d, streaks=%d)",
        user_id,
        len(updates.tasks or {}),
        len(updates.journal or []),
        len(updates.streaks or {}),
    )
    return SyncResponse(last_sync=last_sync, data=document)


@router.get("/backup")
async def download_backup(user_id: CurrentUserId, store: Store) -> JSONResponse:
    """Download the full document as a dated JSON attachment."""
    document = store.load(user_id)
    filename = f"dashboard-backup-{documents.today_iso()}.json"
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/restore", response_model=SuccessResponse)
async def restore_backup(
    request: Request,
    user_id: CurrentUserId,
    store: Store,
) -> SuccessResponse:
    """
    Replace the stored document with an uploaded backup.

    The body only has to be a JSON object; it is stored as-is plus a
    ``restoredAt`` timestamp.
    """
    try:
        backup = await request.json()
    except ValueError:
        backup = None

    if not isinstance(backup, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid backup data",
        )

    backup["restoredAt"] = documents.now_iso()
    store.save(user_id, backup)
    logger.info("Restored backup for %s (%d keys)", user_id, len(backup))
    return SuccessResponse()
