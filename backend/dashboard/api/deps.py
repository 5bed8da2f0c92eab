"""
FastAPI dependencies shared by the route modules.

The service is single-user: every request acts on the configured default
user, and no authentication is performed.
"""

from pathlib import Path
from typing import Annotated

from fastapi import Depends

from dashboard.config import get_settings
from dashboard.db.store import DocumentStore, get_store


def get_current_user_id() -> str:
    """Return the id of the single configured user."""
    return get_settings().default_user


def get_static_dir() -> Path:
    """Directory holding the client pages served by the SPA fallback."""
    return get_settings().static_dir


# Type aliases for dependency injection
CurrentUserId = Annotated[str, Depends(get_current_user_id)]
Store = Annotated[DocumentStore, Depends(get_store)]
StaticDir = Annotated[Path, Depends(get_static_dir)]
