"""
Note service: CRUD semantics over an injected note store.

The service owns the note lifecycle rules:
- title and content are required on every write
- summary and category are re-derived from content on every write
- id and createdAt are assigned once, at creation
- deleting an absent note is not an error
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from src.api.derivation import DeterministicSummarizer, Summarizer, categorize
from src.api.errors import NotFoundError, ValidationError
from src.api.models import Category, Note, NoteDraft
from src.api.store import NoteStore

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current UTC time at millisecond precision, which every store can hold exactly."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _require_fields(title: Optional[str], content: Optional[str]) -> None:
    if not title or not content:
        raise ValidationError("Title and content are required")


class NoteService:
    """Create, read, update and delete notes."""

    def __init__(
        self,
        store: NoteStore,
        summarizer: Optional[Summarizer] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.summarizer = summarizer or DeterministicSummarizer()
        self._clock = clock

    def _derive(self, content: str) -> Tuple[str, Category]:
        return self.summarizer.summarize(content), categorize(content)

    # PUBLIC_INTERFACE
    def list_notes(self, category: Optional[str] = None) -> List[Note]:
        """Return notes, newest first, optionally only those in ``category``."""
        return self.store.find(category or None)

    # PUBLIC_INTERFACE
    def get_note(self, note_id: str) -> Note:
        note = self.store.get(note_id)
        if note is None:
            raise NotFoundError(note_id)
        return note

    # PUBLIC_INTERFACE
    def create_note(self, title: Optional[str], content: Optional[str]) -> Note:
        """Derive summary and category, then persist a new note."""
        _require_fields(title, content)

        summary, category = self._derive(content)
        draft = NoteDraft(
            title=title,
            content=content,
            summary=summary,
            category=category,
            created_at=self._clock(),
        )
        note = self.store.insert(draft)
        logger.info("Created note %s (category=%s)", note.id, note.category.value)
        return note

    # PUBLIC_INTERFACE
    def update_note(self, note_id: str, title: Optional[str], content: Optional[str]) -> Note:
        """Replace title and content, re-deriving summary and category."""
        _require_fields(title, content)

        summary, category = self._derive(content)
        note = self.store.replace(note_id, title, content, summary, category)
        if note is None:
            raise NotFoundError(note_id)
        logger.info("Updated note %s (category=%s)", note.id, note.category.value)
        return note

    # PUBLIC_INTERFACE
    def delete_note(self, note_id: str) -> None:
        """Delete a note; deleting an unknown id succeeds."""
        if self.store.delete(note_id):
            logger.info("Deleted note %s", note_id)
        else:
            logger.debug("Delete of absent note %s ignored", note_id)
