"""The note store capability and construction of the configured store."""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from src.api.config import Settings
from src.api.db import SQLiteNoteStore
from src.api.memory import InMemoryNoteStore
from src.api.models import Category, Note, NoteDraft
from src.api.mongo import MongoNoteStore

logger = logging.getLogger(__name__)


class NoteStore(Protocol):
    """Key-based persistence for notes.

    Implementations make each single-note write atomic, raise StorageError
    when the backend fails, and treat unknown or malformed ids as absent.
    """

    def insert(self, draft: NoteDraft) -> Note:
        """Persist a draft and return it with its assigned id."""
        ...

    def get(self, note_id: str) -> Optional[Note]:
        ...

    def find(self, category: Optional[str] = None) -> List[Note]:
        """Return notes, optionally of one category, newest createdAt first."""
        ...

    def replace(
        self,
        note_id: str,
        title: str,
        content: str,
        summary: str,
        category: Category,
    ) -> Optional[Note]:
        """Overwrite the mutable fields of a note; None when it does not exist."""
        ...

    def delete(self, note_id: str) -> bool:
        """Remove a note; False when there was nothing to remove."""
        ...

    def close(self) -> None:
        ...


# PUBLIC_INTERFACE
def build_store(settings: Settings) -> NoteStore:
    """Create the store selected by ``settings.NOTES_STORE``."""
    if settings.NOTES_STORE == "mongo":
        return MongoNoteStore.from_uri(settings.MONGO_URI, settings.MONGO_DB, settings.MONGO_COLLECTION)
    if settings.NOTES_STORE == "memory":
        logger.warning("Using in-memory note store; notes will not survive a restart")
        return InMemoryNoteStore()
    store = SQLiteNoteStore(settings.SQLITE_DB)
    logger.info("Using SQLite note store at %s", store.db_path)
    return store
