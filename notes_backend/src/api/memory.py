"""In-process note store, used for tests and NOTES_STORE=memory."""

from __future__ import annotations

import threading
import uuid
from itertools import count
from typing import Dict, List, Optional, Tuple

from src.api.models import Category, Note, NoteDraft


class InMemoryNoteStore:
    """Dict-backed note store. Contents are lost when the process exits."""

    def __init__(self) -> None:
        self._notes: Dict[str, Tuple[int, Note]] = {}
        self._sequence = count()
        self._lock = threading.Lock()

    def insert(self, draft: NoteDraft) -> Note:
        note = Note.from_draft(uuid.uuid4().hex, draft)
        with self._lock:
            self._notes[note.id] = (next(self._sequence), note)
        return note

    def get(self, note_id: str) -> Optional[Note]:
        with self._lock:
            entry = self._notes.get(note_id)
        return entry[1] if entry else None

    def find(self, category: Optional[str] = None) -> List[Note]:
        with self._lock:
            entries = list(self._notes.values())
        if category:
            entries = [e for e in entries if e[1].category == category]
        # Insertion order breaks createdAt ties.
        entries.sort(key=lambda e: (e[1].created_at, e[0]), reverse=True)
        return [note for _, note in entries]

    def replace(
        self,
        note_id: str,
        title: str,
        content: str,
        summary: str,
        category: Category,
    ) -> Optional[Note]:
        with self._lock:
            entry = self._notes.get(note_id)
            if entry is None:
                return None
            seq, existing = entry
            updated = existing.model_copy(
                update={"title": title, "content": content, "summary": summary, "category": category}
            )
            self._notes[note_id] = (seq, updated)
        return updated

    def delete(self, note_id: str) -> bool:
        with self._lock:
            return self._notes.pop(note_id, None) is not None

    def close(self) -> None:
        with self._lock:
            self._notes.clear()
