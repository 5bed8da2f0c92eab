"""API routes package."""

from dashboard.api.routes import (
    assistant,
    data,
    journal,
    spa,
    study,
)

__all__ = [
    "assistant",
    "data",
    "journal",
    "spa",
    "study",
]
