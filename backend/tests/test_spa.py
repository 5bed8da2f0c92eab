"""Tests for static file serving and the client-side routing fallback."""

from pathlib import Path

from httpx import AsyncClient

from dashboard.api.deps import get_static_dir


async def test_unknown_path_serves_main_page(client: AsyncClient):
    response = await client.get("/habits/today")

    assert response.status_code == 200
    assert response.text == "<html>main page</html>"
    assert response.headers["content-type"].startswith("text/html")


async def test_existing_static_file_is_served(client: AsyncClient):
    response = await client.get("/app.js")

    assert response.status_code == 200
    assert response.text == "console.log('dashboard');"


async def test_api_routes_take_precedence(client: AsyncClient):
    response = await client.get("/api/health")

    assert response.json()["status"] == "ok"


async def test_missing_main_page_is_not_found(client: AsyncClient, api_app, tmp_path: Path):
    empty = tmp_path / "empty"
    empty.mkdir()
    api_app.dependency_overrides[get_static_dir] = lambda: empty

    response = await client.get("/anything")

    assert response.status_code == 404
