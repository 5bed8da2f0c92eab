"""Clients (open dashboard windows) controlled by the worker."""

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

_client_ids = itertools.count(1)


@dataclass
class WorkerClient:
    """A connected window. Messages posted to it are queued for its event stream."""

    url: str = "./"
    type: str = "window"
    id: str = field(default_factory=lambda: f"client-{next(_client_ids)}")
    focused: bool = False
    messages: asyncio.Queue = field(default_factory=asyncio.Queue)

    def post_message(self, message: dict[str, Any]) -> None:
        self.messages.put_nowait(message)

    def focus(self) -> None:
        self.focused = True
        self.post_message({"type": "FOCUS"})


class ClientRegistry:
    """Tracks connected clients and fans out worker messages."""

    def __init__(self):
        self._clients: dict[str, WorkerClient] = {}
        self.claimed = False
        self.opened_windows: list[str] = []

    def connect(self, url: str = "./", type: str = "window") -> WorkerClient:
        client = WorkerClient(url=url, type=type)
        self._clients[client.id] = client
        logger.debug("Client %s connected (%s)", client.id, url)
        return client

    def disconnect(self, client_id: str) -> None:
        self._clients.pop(client_id, None)
        logger.debug("Client %s disconnected", client_id)

    def get(self, client_id: str) -> WorkerClient | None:
        return self._clients.get(client_id)

    def match_all(self, type: str | None = None) -> list[WorkerClient]:
        return [c for c in self._clients.values() if type is None or c.type == type]

    def claim(self) -> None:
        """Take control of already-open clients without a reload."""
        self.claimed = True

    def broadcast(self, message: dict[str, Any]) -> int:
        clients = self.match_all()
        for client in clients:
            client.post_message(message)
        return len(clients)

    def open_window(self, url: str) -> WorkerClient:
        """
        Record a request to open a new window on ``url``.

        The returned client is not registered: the window joins the registry
        when its page connects to the event stream.
        """
        self.opened_windows.append(url)
        logger.info("Opening window %s", url)
        return WorkerClient(url=url)
