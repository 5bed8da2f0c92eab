"""Offline worker lifecycle and event dispatch.

A single ``ServiceWorker`` instance owns all worker state: caches, the sync
queue, notification timers and connected clients. That state lives in process
memory and starts empty whenever the worker is (re)created.
"""

import asyncio
import logging
from typing import Any

import httpx

from dashboard.config import Settings
from dashboard.schemas.worker import QueueSyncMessage, ScheduleNotificationMessage
from dashboard.worker.cache import CacheStorage
from dashboard.worker.cache_manager import CacheManager, FetchRequest
from dashboard.worker.clients import ClientRegistry, WorkerClient
from dashboard.worker.notifications import (
    DAILY_CHECK_TAG,
    Notification,
    NotificationCenter,
    NotificationScheduler,
)
from dashboard.worker.sync_queue import SYNC_TAG, SyncQueue

logger = logging.getLogger(__name__)


class BackgroundSyncUnavailable(Exception):
    """Raised when a background sync registration cannot be made."""


class BackgroundSync:
    """Deferred ``sync`` events: a registered tag fires once on the event loop."""

    def __init__(self, worker: "ServiceWorker", *, enabled: bool = True):
        self.worker = worker
        self.enabled = enabled
        self._tasks: set[asyncio.Task] = set()

    def register(self, tag: str) -> asyncio.Task:
        if not self.enabled:
            raise BackgroundSyncUnavailable("Background sync is disabled")
        try:
            task = asyncio.get_running_loop().create_task(self.worker.handle_sync(tag))
        except RuntimeError as e:
            raise BackgroundSyncUnavailable(str(e)) from e
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class ServiceWorker:
    """The worker: install/activate lifecycle plus fetch, message and sync events."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings
        self.scope = str(httpx.URL(settings.worker_upstream_url).join("./"))
        self.state = "parsed"

        self.http = httpx.AsyncClient(
            base_url=self.scope,
            transport=transport,
            timeout=settings.worker_request_timeout,
        )
        self.caches = CacheStorage(self.scope)
        self.clients = ClientRegistry()
        self.cache_manager = CacheManager(
            self.caches,
            self.http,
            cache_name=settings.worker_cache_name,
            precache_urls=settings.worker_precache_urls,
            main_page=settings.worker_main_page,
        )
        self.sync_queue = SyncQueue(self.http, self.clients)
        self.notifications = NotificationCenter()
        self.scheduler = NotificationScheduler(
            self.notifications,
            self.clients,
            icon=settings.worker_notification_icon,
            badge=settings.worker_notification_badge,
            main_page=settings.worker_main_page,
        )
        self.background_sync = BackgroundSync(self, enabled=settings.worker_background_sync)

    @property
    def is_active(self) -> bool:
        return self.state == "activated"

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def install(self) -> None:
        self.state = "installing"
        try:
            await self.cache_manager.install()
        except Exception:
            self.state = "redundant"
            raise
        self.state = "installed"

    async def activate(self) -> None:
        self.state = "activating"
        stale = await self.cache_manager.activate()
        if stale:
            logger.info("Removed stale caches: %s", ", ".join(stale))
        self.clients.claim()
        self.state = "activated"

    async def start(self) -> None:
        """Install then activate immediately (no waiting for old clients)."""
        await self.install()
        await self.activate()

    async def close(self) -> None:
        self.scheduler.shutdown()
        await self.background_sync.drain()
        await self.cache_manager.drain()
        await self.http.aclose()

    # =========================================================================
    # EVENTS
    # =========================================================================

    async def handle_fetch(self, request: FetchRequest) -> httpx.Response | None:
        if not self.is_active:
            return None
        return await self.cache_manager.handle_fetch(request)

    async def handle_message(self, message: dict[str, Any]) -> None:
        """
        Dispatch a client message.

        Raises pydantic.ValidationError for a malformed message of a known
        type; unknown types are ignored.
        """
        message_type = message.get("type")

        if message_type == "QUEUE_SYNC":
            queued = QueueSyncMessage.model_validate(message)
            self.sync_queue.replace(queued.queue)
            if queued.online:
                try:
                    self.background_sync.register(SYNC_TAG)
                except BackgroundSyncUnavailable as e:
                    logger.info("Background sync unavailable (%s), syncing now", e)
                    await self.sync_queue.process()

        elif message_type == "SCHEDULE_NOTIFICATION":
            scheduled = ScheduleNotificationMessage.model_validate(message)
            self.scheduler.schedule(scheduled.notification)

        else:
            logger.debug("Ignoring message of type %r", message_type)

    async def handle_sync(self, tag: str) -> int | None:
        if tag != SYNC_TAG:
            return None
        return await self.sync_queue.process()

    async def handle_periodic_sync(self, tag: str) -> Notification | None:
        if tag != DAILY_CHECK_TAG:
            return None
        return self.scheduler.send_daily_reminder()

    def handle_notification_click(
        self,
        notification_id: str,
        action: str | None = None,
    ) -> WorkerClient | None:
        return self.scheduler.handle_click(notification_id, action)

