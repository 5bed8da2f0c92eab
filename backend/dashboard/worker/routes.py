"""Worker control routes and the proxy catch-all."""

import json
import logging
from typing import Annotated, Any

import httpx
from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sse_starlette.sse import EventSourceResponse

from dashboard.config import sanitize_error
from dashboard.schemas.worker import NotificationClick, NotificationRead, SyncItem, SyncResult
from dashboard.worker.cache_manager import FetchRequest
from dashboard.worker.service_worker import ServiceWorker
from dashboard.worker.sync_queue import SYNC_TAG

logger = logging.getLogger(__name__)

WORKER_PREFIX = "/__worker"

# Hop-by-hop and encoding headers that must not be copied between legs.
_REQUEST_SKIP = {"host", "content-length", "connection", "accept-encoding"}
_RESPONSE_SKIP = {"content-encoding", "content-length", "transfer-encoding", "connection"}


def get_worker(request: Request) -> ServiceWorker:
    """FastAPI dependency for the app's service worker."""
    return request.app.state.worker


Worker = Annotated[ServiceWorker, Depends(get_worker)]

router = APIRouter(prefix=WORKER_PREFIX, tags=["worker"])
proxy_router = APIRouter(tags=["proxy"])


# =============================================================================
# HELPERS
# =============================================================================


def _forward_headers(request: Request) -> dict[str, str]:
    return {k: v for k, v in request.headers.items() if k.lower() not in _REQUEST_SKIP}


def _to_response(upstream: httpx.Response) -> Response:
    headers = {
        k: v for k, v in upstream.headers.items() if k.lower() not in _RESPONSE_SKIP
    }
    return Response(content=upstream.content, status_code=upstream.status_code, headers=headers)


def fetch_request_from(request: Request) -> FetchRequest:
    """Describe a proxied request the way a browser fetch event would."""
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"

    mode = request.headers.get("sec-fetch-mode", "")
    if not mode and "text/html" in request.headers.get("accept", ""):
        # Clients without fetch metadata: treat HTML requests as navigations
        mode = "navigate"

    return FetchRequest(
        url=url,
        method=request.method,
        mode=mode,
        destination=request.headers.get("sec-fetch-dest", ""),
        headers=_forward_headers(request),
    )


# =============================================================================
# CLIENT MESSAGES & EVENTS
# =============================================================================


@router.post("/message", status_code=status.HTTP_202_ACCEPTED)
async def post_message(
    message: Annotated[dict[str, Any], Body()],
    worker: Worker,
) -> dict[str, Any]:
    """Deliver a client message (``QUEUE_SYNC`` or ``SCHEDULE_NOTIFICATION``)."""
    try:
        await worker.handle_message(message)
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e
    return {"accepted": True, "type": message.get("type")}


@router.get("/events")
async def client_events(request: Request, worker: Worker, url: str = "./"):
    """
    Stream worker messages to this client using Server-Sent Events (SSE).

    Each event is named after the message type (``SYNC_COMPLETE``,
    ``NOTIFICATION_SHOWN``, ``FOCUS``) and carries the message as JSON.
    """
    client = worker.clients.connect(url=url)

    async def event_generator():
        try:
            while True:
                message = await client.messages.get()
                yield {"event": message.get("type", "message"), "data": json.dumps(message)}
        finally:
            worker.clients.disconnect(client.id)

    return EventSourceResponse(event_generator())


# =============================================================================
# NOTIFICATIONS
# =============================================================================


@router.get("/notifications", response_model=list[NotificationRead])
async def list_notifications(worker: Worker) -> list[NotificationRead]:
    """Notifications currently on display."""
    return [n.to_read() for n in worker.notifications.displayed()]


@router.post("/notifications/{notification_id}/click")
async def click_notification(
    notification_id: str,
    click: NotificationClick,
    worker: Worker,
) -> dict[str, Any]:
    """Handle a click on a notification or one of its actions."""
    if worker.notifications.get(notification_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        )
    client = worker.handle_notification_click(notification_id, click.action)
    return {"closed": True, "clientId": client.id if client else None}


# =============================================================================
# SYNC QUEUE
# =============================================================================


@router.get("/queue", response_model=list[SyncItem])
async def get_queue(worker: Worker) -> list[SyncItem]:
    """Mutations still waiting to be delivered."""
    return worker.sync_queue.items


@router.post("/sync", response_model=SyncResult)
async def trigger_sync(worker: Worker) -> SyncResult:
    """Replay the queue now instead of waiting for background sync."""
    failed = await worker.handle_sync(SYNC_TAG)
    return SyncResult(failed=failed or 0)


# =============================================================================
# PROXY
# =============================================================================


@proxy_router.api_route(
    "/{full_path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def proxy(full_path: str, request: Request, worker: Worker) -> Response:
    """
    Route browser traffic through the worker.

    GET requests go through the cache strategies; everything else (and any
    GET the worker does not handle) is forwarded upstream unchanged.
    """
    fetch_request = fetch_request_from(request)

    if request.method == "GET" and worker.is_active and worker.cache_manager.handles(fetch_request):
        response = await worker.handle_fetch(fetch_request)
        if response is None:
            raise HTTPException(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                detail="Offline and no cached copy available",
            )
        return _to_response(response)

    try:
        upstream = await worker.http.request(
            request.method,
            fetch_request.url,
            content=await request.body(),
            headers=fetch_request.headers,
        )
    except httpx.TransportError as e:
        logger.warning("Upstream request %s %s failed: %s", request.method, fetch_request.url, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=sanitize_error(e, generic_message="Upstream unavailable."),
        )
    return _to_response(upstream)
