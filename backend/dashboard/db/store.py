"""JSON file storage: one pretty-printed document per user."""

import json
import logging
from pathlib import Path
from typing import Any

from dashboard.config import get_settings
from dashboard.services.documents import ensure_collections, new_document

logger = logging.getLogger(__name__)
settings = get_settings()


class DocumentStore:
    """
    Persist user documents as ``<data_dir>/<user_id>.json``.

    Every save rewrites the whole file. There is no locking and no atomic
    rename, so concurrent writers for the same user are last-write-wins.
    OSError and JSON decode errors are left to propagate to the caller.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)

    def ensure_data_dir(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, user_id: str) -> Path:
        return self.data_dir / f"{user_id}.json"

    def exists(self, user_id: str) -> bool:
        return self.path_for(user_id).exists()

    def load(self, user_id: str) -> dict[str, Any]:
        """Return the stored document, or a fresh default one if none exists."""
        path = self.path_for(user_id)
        if not path.exists():
            return new_document(user_id)
        with path.open("r", encoding="utf-8") as fh:
            document = json.load(fh)
        return ensure_collections(document)

    def save(self, user_id: str, document: dict[str, Any]) -> None:
        """Serialize the full document, replacing any previous version."""
        self.ensure_data_dir()
        path = self.path_for(user_id)
        with path.open("w", encoding="utf-8") as fh:
            json.dump(document, fh, indent=2, ensure_ascii=False)
        logger.debug("Saved document for %s to %s", user_id, path)


# Module-level instance used by the API dependency
document_store = DocumentStore(settings.data_dir)


def get_store() -> DocumentStore:
    """FastAPI dependency for the document store."""
    return document_store
