"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from dashboard.api.deps import get_static_dir
from dashboard.config import Settings, get_settings
from dashboard.db.store import DocumentStore, get_store
from dashboard.main import app
from dashboard.worker.service_worker import ServiceWorker

UPSTREAM = "http://dashboard.test"


@pytest.fixture
def user_id() -> str:
    return get_settings().default_user


@pytest.fixture
def store(tmp_path: Path) -> DocumentStore:
    """Document store writing into a per-test directory."""
    return DocumentStore(tmp_path / "data")


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    site = tmp_path / "static"
    site.mkdir()
    (site / "index.html").write_text("<html>main page</html>", encoding="utf-8")
    (site / "app.js").write_text("console.log('dashboard');", encoding="utf-8")
    return site


@pytest.fixture
def api_app(store: DocumentStore, static_dir: Path):
    """The REST app wired to the per-test store and static directory."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_static_dir] = lambda: static_dir
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(api_app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=api_app),
        base_url="http://test",
    ) as ac:
        yield ac


# =============================================================================
# WORKER
# =============================================================================


class FakeUpstream:
    """Stand-in for the dashboard server behind the worker."""

    def __init__(self):
        self.pages: dict[str, bytes] = {
            "/": b"<html>home</html>",
            "/index.html": b"<html>main page</html>",
            "/stats.html": b"<html>stats v1</html>",
            "/app.css": b"body { color: black; }",
        }
        self.offline = False
        self.down_paths: set[str] = set()
        self.failing_paths: set[str] = set()
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if self.offline or path in self.down_paths:
            raise httpx.ConnectError("network unreachable", request=request)
        if path in self.failing_paths:
            return httpx.Response(500, json={"error": "boom"})
        if path.startswith("/api/"):
            return httpx.Response(200, json={"success": True})
        body = self.pages.get(path)
        if body is None:
            return httpx.Response(404, text="not found")
        content_type = "text/css" if path.endswith(".css") else "text/html"
        return httpx.Response(200, content=body, headers={"content-type": content_type})

    def requests_for(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def worker_settings() -> Settings:
    return Settings(
        worker_upstream_url=UPSTREAM,
        worker_precache_urls=["./", "./index.html", "./app.css"],
        worker_cache_name="dashboard-test-v2",
    )


@pytest.fixture
async def worker(worker_settings: Settings, upstream: FakeUpstream) -> AsyncGenerator[ServiceWorker, None]:
    """An installed and activated worker talking to the fake upstream."""
    sw = ServiceWorker(worker_settings, transport=httpx.MockTransport(upstream.handler))
    await sw.start()
    yield sw
    await sw.close()
