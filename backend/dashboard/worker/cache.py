"""In-memory named response caches, keyed by absolute URL."""

import logging
from dataclasses import dataclass, field

import httpx

logger = logging.getLogger(__name__)

# Headers that describe the wire encoding rather than the cached body.
_DROPPED_HEADERS = {"content-encoding", "content-length", "transfer-encoding", "connection"}


@dataclass
class CachedResponse:
    """A stored copy of a response body and metadata."""

    url: str
    status_code: int
    headers: list[tuple[str, str]]
    content: bytes

    @classmethod
    def from_response(cls, url: str, response: httpx.Response) -> "CachedResponse":
        headers = [
            (name, value)
            for name, value in response.headers.multi_items()
            if name.lower() not in _DROPPED_HEADERS
        ]
        return cls(url=url, status_code=response.status_code, headers=headers, content=response.content)

    def to_response(self) -> httpx.Response:
        return httpx.Response(
            self.status_code,
            headers=self.headers,
            content=self.content,
            request=httpx.Request("GET", self.url),
        )


def resolve_url(scope: str, url: str | httpx.URL) -> str:
    """Resolve ``url`` against the worker scope and drop any fragment."""
    resolved = httpx.URL(scope).join(str(url))
    return str(resolved).split("#", 1)[0]


@dataclass
class Cache:
    """A single named cache."""

    name: str
    scope: str
    entries: dict[str, CachedResponse] = field(default_factory=dict)

    def key(self, url: str | httpx.URL) -> str:
        return resolve_url(self.scope, url)

    def put(self, url: str | httpx.URL, response: httpx.Response) -> None:
        key = self.key(url)
        self.entries[key] = CachedResponse.from_response(key, response)

    def match(self, url: str | httpx.URL) -> httpx.Response | None:
        cached = self.entries.get(self.key(url))
        return cached.to_response() if cached is not None else None

    def delete(self, url: str | httpx.URL) -> bool:
        return self.entries.pop(self.key(url), None) is not None

    def keys(self) -> list[str]:
        return list(self.entries)

    async def add_all(self, urls: list[str], client: httpx.AsyncClient) -> None:
        """
        Fetch every URL and store the responses.

        All-or-nothing: if any fetch fails or answers with a non-2xx status,
        nothing is stored and the error propagates.
        """
        fetched: list[tuple[str, httpx.Response]] = []
        for url in urls:
            key = self.key(url)
            response = await client.get(key)
            if not response.is_success:
                raise httpx.HTTPStatusError(
                    f"Precache request for {key} failed with status {response.status_code}",
                    request=response.request,
                    response=response,
                )
            fetched.append((key, response))
        for key, response in fetched:
            self.put(key, response)


class CacheStorage:
    """All caches owned by the worker, in creation order."""

    def __init__(self, scope: str):
        self.scope = scope
        self._caches: dict[str, Cache] = {}

    def open(self, name: str) -> Cache:
        if name not in self._caches:
            self._caches[name] = Cache(name=name, scope=self.scope)
        return self._caches[name]

    def has(self, name: str) -> bool:
        return name in self._caches

    def keys(self) -> list[str]:
        return list(self._caches)

    def delete(self, name: str) -> bool:
        removed = self._caches.pop(name, None) is not None
        if removed:
            logger.info("Deleted cache %s", name)
        return removed

    def match(self, url: str | httpx.URL) -> httpx.Response | None:
        """First cached response for ``url`` across all caches."""
        for cache in self._caches.values():
            response = cache.match(url)
            if response is not None:
                return response
        return None
