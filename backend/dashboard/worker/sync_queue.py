"""Offline mutation queue replayed against the REST API."""

import logging

import httpx

from dashboard.schemas.worker import SyncItem
from dashboard.worker.clients import ClientRegistry

logger = logging.getLogger(__name__)

SYNC_TAG = "sync-data"


class SyncQueue:
    """
    Pending mutations held in worker memory.

    The client owns the queue contents: every ``QUEUE_SYNC`` message replaces
    them. Processing gives at-least-once delivery; items that fail stay queued
    (in their original order) until the next trigger.
    """

    def __init__(self, client: httpx.AsyncClient, clients: ClientRegistry):
        self.client = client
        self.clients = clients
        self.items: list[SyncItem] = []

    def __len__(self) -> int:
        return len(self.items)

    def replace(self, items: list[SyncItem]) -> None:
        self.items = list(items)
        logger.info("Sync queue replaced (%d items)", len(self.items))

    async def _send(self, item: SyncItem) -> bool:
        try:
            response = await self.client.request(
                item.method,
                item.url,
                json=item.data,
                headers={"Content-Type": "application/json"},
            )
        except httpx.TransportError as e:
            logger.warning("Sync of %s %s failed: %s", item.method, item.url, e)
            return False
        if not response.is_success:
            logger.warning(
                "Sync of %s %s rejected with status %d",
                item.method,
                item.url,
                response.status_code,
            )
            return False
        return True

    async def process(self) -> int:
        """Replay every queued item; keep only the failures. Returns the failure count."""
        failed: list[SyncItem] = []
        for item in list(self.items):
            if not await self._send(item):
                failed.append(item)

        self.items = failed
        notified = self.clients.broadcast({"type": "SYNC_COMPLETE", "failed": len(failed)})
        logger.info("Sync queue processed: %d failed, %d clients notified", len(failed), notified)
        return len(failed)
