"""Domain services operating on the user document."""

from dashboard.services import assistant, documents

__all__ = ["assistant", "documents"]
