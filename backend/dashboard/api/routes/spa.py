"""Static files and the single-page-app fallback."""

from pathlib import Path

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse

from dashboard.api.deps import StaticDir
from dashboard.config import get_settings

settings = get_settings()

router = APIRouter(tags=["spa"])


def _resolve_static(static_dir: Path, path: str) -> Path | None:
    """Return the file under ``static_dir`` for ``path``, refusing escapes."""
    if not path:
        return None
    root = static_dir.resolve()
    candidate = (root / path).resolve()
    if not candidate.is_relative_to(root) or not candidate.is_file():
        return None
    return candidate


@router.get("/{full_path:path}", include_in_schema=False)
async def serve_client(full_path: str, static_dir: StaticDir) -> FileResponse:
    """
    Serve a client file, or the main page for any other path.

    Registered last so every API route takes precedence; unknown paths get
    the main page so client-side routing can handle them.
    """
    static_file = _resolve_static(static_dir, full_path)
    if static_file is not None:
        return FileResponse(static_file)

    main_page = static_dir / settings.main_page
    if not main_page.is_file():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Main page not found",
        )
    return FileResponse(main_page, media_type="text/html")
