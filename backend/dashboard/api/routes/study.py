"""Study topic, study session and streak routes."""

from fastapi import APIRouter, HTTPException, status

from dashboard.api.deps import CurrentUserId, Store
from dashboard.schemas.study import (
    StreakLog,
    StreaksResponse,
    StudySessionCreate,
    StudySessionResponse,
    StudyTopicCreate,
    StudyTopicResponse,
    StudyTopicUpdate,
)
from dashboard.services import documents

router = APIRouter(prefix="/api", tags=["study"])


@router.post("/study-topics", response_model=StudyTopicResponse)
async def create_study_topic(
    data: StudyTopicCreate,
    user_id: CurrentUserId,
    store: Store,
) -> StudyTopicResponse:
    """Add a study topic.

    The id defaults to ``sr-<epoch ms>``; review scheduling fields such as
    ``nextReview`` are stored exactly as the client sends them.
    """
    document = store.load(user_id)
    topic = documents.add_study_topic(document, data.to_document())
    documents.touch(document)
    store.save(user_id, document)
    return StudyTopicResponse(topic=topic)


@router.put("/study-topics/{topic_id}", response_model=StudyTopicResponse)
async def update_study_topic(
    topic_id: str,
    data: StudyTopicUpdate,
    user_id: CurrentUserId,
    store: Store,
) -> StudyTopicResponse:
    """Merge the given fields into a study topic (used after each review)."""
    document = store.load(user_id)
    topic = documents.update_study_topic(document, topic_id, data.to_document())
    if topic is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Topic not found",
        )
    documents.touch(document)
    store.save(user_id, document)
    return StudyTopicResponse(topic=topic)


@router.post("/study-sessions", response_model=StudySessionResponse)
async def log_study_session(
    data: StudySessionCreate,
    user_id: CurrentUserId,
    store: Store,
) -> StudySessionResponse:
    """Append a study session record."""
    document = store.load(user_id)
    session = documents.add_study_session(document, data.to_document())
    documents.touch(document)
    store.save(user_id, document)
    return StudySessionResponse(session=session)


@router.post("/streaks", response_model=StreaksResponse)
async def log_streak(
    data: StreakLog,
    user_id: CurrentUserId,
    store: Store,
) -> StreaksResponse:
    """Mark a habit as completed for a day.

    Only ``history`` is updated; ``current`` is whatever the client last synced.
    """
    document = store.load(user_id)
    streaks = documents.log_streak(document, data.type, data.date)
    documents.touch(document)
    store.save(user_id, document)
    return StreaksResponse(streaks=streaks)
