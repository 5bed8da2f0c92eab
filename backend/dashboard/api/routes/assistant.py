"""Assistant chat routes."""

from fastapi import APIRouter

from dashboard.api.deps import CurrentUserId, Store
from dashboard.config import get_settings
from dashboard.schemas.assistant import AssistantRequest, AssistantResponse, ChatHistoryResponse
from dashboard.services import assistant, documents

settings = get_settings()

router = APIRouter(prefix="/api/ai", tags=["assistant"])


@router.post("", response_model=AssistantResponse, response_model_exclude_none=True)
async def ask_assistant(
    request: AssistantRequest,
    user_id: CurrentUserId,
    store: Store,
) -> AssistantResponse:
    """
    Answer a chat message from the user's own dashboard data.

    Both the message and the reply are appended to the chat history, which
    is trimmed to the most recent ``chat_history_limit`` messages.
    """
    document = store.load(user_id)
    reply = assistant.respond(request.message, document)

    documents.append_chat_exchange(
        document,
        request.message,
        reply.text,
        limit=settings.chat_history_limit,
    )
    documents.touch(document)
    store.save(user_id, document)

    return AssistantResponse(
        text=reply.text,
        suggest_task=True if reply.suggest_task else None,
    )


@router.get("/chat", response_model=ChatHistoryResponse)
async def get_chat_history(
    user_id: CurrentUserId,
    store: Store,
) -> ChatHistoryResponse:
    """Most recent chat messages, oldest first."""
    document = store.load(user_id)
    return ChatHistoryResponse(messages=documents.recent_chat(document, settings.chat_recent_limit))
