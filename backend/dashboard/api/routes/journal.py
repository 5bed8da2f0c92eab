"""Daily task and journal routes."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body

from dashboard.api.deps import CurrentUserId, Store
from dashboard.schemas.journal import JournalEntryCreate, JournalEntryResponse, TasksResponse
from dashboard.services import documents

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["journal"])


@router.post("/tasks", response_model=TasksResponse)
async def update_tasks(
    updates: Annotated[dict[str, Any], Body()],
    user_id: CurrentUserId,
    store: Store,
) -> TasksResponse:
    """Merge task completion flags into the stored tasks. New values win."""
    document = store.load(user_id)
    tasks = documents.merge_tasks(document, updates)
    documents.touch(document)
    store.save(user_id, document)
    return TasksResponse(tasks=tasks)


@router.post("/journal", response_model=JournalEntryResponse)
async def add_journal_entry(
    data: JournalEntryCreate,
    user_id: CurrentUserId,
    store: Store,
) -> JournalEntryResponse:
    """Add a journal entry at the front of the journal (newest first)."""
    document = store.load(user_id)
    entry = documents.add_journal_entry(document, data.text)
    documents.touch(document)
    store.save(user_id, document)
    logger.info("Journal entry %s added (%d total)", entry["id"], len(document["journal"]))
    return JournalEntryResponse(entry=entry)
