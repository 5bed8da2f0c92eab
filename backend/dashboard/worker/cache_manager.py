"""Fetch strategies: network-first for pages, cache-first for assets."""

import asyncio
import logging
from dataclasses import dataclass, field

import httpx

from dashboard.worker.cache import CacheStorage, resolve_url

logger = logging.getLogger(__name__)


@dataclass
class FetchRequest:
    """The parts of a browser request the fetch strategies look at."""

    url: str
    method: str = "GET"
    mode: str = "no-cors"
    destination: str = ""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def is_navigation(self) -> bool:
        return self.mode == "navigate" or self.destination == "document"

    @property
    def is_document(self) -> bool:
        return self.destination == "document"


def _origin(url: httpx.URL) -> tuple[str, str, int | None]:
    default_port = {"http": 80, "https": 443}.get(url.scheme)
    return url.scheme, url.host, url.port or default_port


class CacheManager:
    """
    Owns the versioned cache and answers GET requests from it.

    Pages (navigations) are fetched network-first so users see fresh content
    when online, falling back to the cached copy and finally the main page.
    Assets are served cache-first and refreshed in the background.
    """

    def __init__(
        self,
        caches: CacheStorage,
        client: httpx.AsyncClient,
        *,
        cache_name: str,
        precache_urls: list[str],
        main_page: str,
    ):
        self.caches = caches
        self.client = client
        self.cache_name = cache_name
        self.precache_urls = list(precache_urls)
        self.main_page = main_page
        self._background: set[asyncio.Task] = set()

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def install(self) -> None:
        """Precache the app shell. Raises if any URL cannot be fetched."""
        cache = self.caches.open(self.cache_name)
        await cache.add_all(self.precache_urls, self.client)
        logger.info("Precached %d URLs into %s", len(self.precache_urls), self.cache_name)

    async def activate(self) -> list[str]:
        """Delete caches left over from previous versions."""
        stale = [name for name in self.caches.keys() if name != self.cache_name]
        for name in stale:
            self.caches.delete(name)
        return stale

    async def drain(self) -> None:
        """Wait for pending background refreshes."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # =========================================================================
    # FETCH
    # =========================================================================

    def handles(self, request: FetchRequest) -> bool:
        if request.method.upper() != "GET":
            return False
        return httpx.URL(self.url_for(request)).scheme in ("http", "https")

    def url_for(self, request: FetchRequest) -> str:
        return resolve_url(self.caches.scope, request.url)

    def response_type(self, response: httpx.Response) -> str:
        """``basic`` for same-origin responses, ``cors`` otherwise."""
        if _origin(response.request.url) == _origin(httpx.URL(self.caches.scope)):
            return "basic"
        return "cors"

    async def handle_fetch(self, request: FetchRequest) -> httpx.Response | None:
        """
        Answer a request, or return None.

        None means either the request is not ours to handle (non-GET,
        non-http) or that nothing could be served.
        """
        if not self.handles(request):
            return None
        if request.is_navigation:
            return await self._network_first(request)
        return await self._cache_first(request)

    async def _fetch(self, request: FetchRequest) -> httpx.Response:
        return await self.client.get(self.url_for(request), headers=request.headers)

    async def _network_first(self, request: FetchRequest) -> httpx.Response | None:
        url = self.url_for(request)
        try:
            response = await self._fetch(request)
        except httpx.TransportError as e:
            logger.info("Network unavailable for %s (%s), serving from cache", url, e)
            cached = self.caches.match(url)
            if cached is not None:
                return cached
            return self.caches.match(self.main_page)

        self.caches.open(self.cache_name).put(url, response)
        return response

    async def _cache_first(self, request: FetchRequest) -> httpx.Response | None:
        url = self.url_for(request)
        cached = self.caches.match(url)
        if cached is not None:
            self._schedule_refresh(request)
            return cached

        try:
            response = await self._fetch(request)
        except httpx.TransportError as e:
            logger.info("Network unavailable for %s (%s)", url, e)
            if request.is_document:
                return self.caches.match(self.main_page)
            return None

        if response.is_success and self.response_type(response) == "basic":
            self.caches.open(self.cache_name).put(url, response)
        return response

    def _schedule_refresh(self, request: FetchRequest) -> None:
        task = asyncio.create_task(self._refresh(request))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _refresh(self, request: FetchRequest) -> None:
        url = self.url_for(request)
        try:
            response = await self._fetch(request)
        except httpx.HTTPError as e:
            logger.debug("Background refresh of %s failed: %s", url, e)
            return
        if response.is_success:
            self.caches.open(self.cache_name).put(url, response)
