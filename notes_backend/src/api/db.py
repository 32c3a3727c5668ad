"""
SQLite note store for the Notes backend.

This module centralizes:
- Default database path resolution
- Connection creation
- Schema initialization (ensure notes table + category index exist)
- The SQLiteNoteStore used by the note service

Every store operation opens its own short-lived connection and commits or
rolls back as a unit, so a single note write is atomic. sqlite3 errors are
surfaced as StorageError.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional

from src.api.errors import StorageError
from src.api.models import Category, Note, NoteDraft

logger = logging.getLogger(__name__)


def _default_db_path() -> str:
    """
    Compute the default SQLite DB path.

    Default is 'database/notes.db' inside the backend root (notes_backend/).
    We compute it from this file location to avoid relying on the current
    working directory.
    """
    # notes_backend/src/api/db.py -> notes_backend/
    backend_root = Path(__file__).resolve().parents[2]
    return str(backend_root / "database" / "notes.db")


def get_connection(db_path: str) -> sqlite3.Connection:
    """Create a SQLite connection with Row factory enabled."""
    # Ensure parent directory exists when using the default path.
    # A configured path elsewhere does not get arbitrary directories created.
    if db_path == _default_db_path():
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def _parse_created_at(value: str) -> datetime:
    created_at = datetime.fromisoformat(value)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at


def row_to_note(row: sqlite3.Row) -> Note:
    """Convert a SQLite Row to a Note."""
    return Note(
        id=str(row["id"]),
        title=row["title"],
        content=row["content"],
        summary=row["summary"],
        category=Category(row["category"]),
        created_at=_parse_created_at(row["created_at"]),
    )


# Largest value an SQLite INTEGER can hold.
MAX_ROW_ID = 2**63 - 1


def _parse_id(note_id: str) -> Optional[int]:
    """Map an id to its row id; None when no row can have that id.

    Only the canonical form ("42", never "042" or non-ASCII digits) matches,
    so every row has exactly one id.
    """
    if not (note_id.isascii() and note_id.isdecimal()):
        return None
    row_id = int(note_id)
    if str(row_id) != note_id or row_id > MAX_ROW_ID:
        return None
    return row_id


_SELECT_COLUMNS = "SELECT id, title, content, summary, category, created_at FROM notes"


class SQLiteNoteStore:
    """Note store backed by a single SQLite database file."""

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path or _default_db_path()
        self.init_db()

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection; commit on success, roll back and wrap sqlite3 errors."""
        try:
            conn = get_connection(self.db_path)
        except sqlite3.Error as e:
            raise StorageError(f"Could not open database {self.db_path}: {e}") from e

        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(f"SQLite operation failed: {e}") from e
        finally:
            conn.close()

    # PUBLIC_INTERFACE
    def init_db(self) -> None:
        """Ensure the notes schema exists (idempotent)."""
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS notes (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    content TEXT NOT NULL,
                    summary TEXT NOT NULL,
                    category TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_notes_category_created
                ON notes (category, created_at DESC)
                """
            )
        logger.debug("SQLite schema ready at %s", self.db_path)

    def _fetch_one(self, conn: sqlite3.Connection, row_id: int) -> Optional[Note]:
        cur = conn.cursor()
        cur.execute(f"{_SELECT_COLUMNS} WHERE id = ?", (row_id,))
        row = cur.fetchone()
        return row_to_note(row) if row else None

    def insert(self, draft: NoteDraft) -> Note:
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO notes (title, content, summary, category, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    draft.title,
                    draft.content,
                    draft.summary,
                    draft.category.value,
                    draft.created_at.isoformat(timespec="microseconds"),
                ),
            )
            note_id = cur.lastrowid
        return Note.from_draft(str(note_id), draft)

    def get(self, note_id: str) -> Optional[Note]:
        row_id = _parse_id(note_id)
        if row_id is None:
            return None
        with self._connection() as conn:
            return self._fetch_one(conn, row_id)

    def find(self, category: Optional[str] = None) -> List[Note]:
        query = _SELECT_COLUMNS
        params: tuple = ()
        if category:
            query += " WHERE category = ?"
            params = (category,)
        query += " ORDER BY created_at DESC, id DESC"

        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute(query, params)
            return [row_to_note(r) for r in cur.fetchall()]

    def replace(
        self,
        note_id: str,
        title: str,
        content: str,
        summary: str,
        category: Category,
    ) -> Optional[Note]:
        row_id = _parse_id(note_id)
        if row_id is None:
            return None
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute(
                "UPDATE notes SET title = ?, content = ?, summary = ?, category = ? WHERE id = ?",
                (title, content, summary, category.value, row_id),
            )
            if cur.rowcount == 0:
                return None
            return self._fetch_one(conn, row_id)

    def delete(self, note_id: str) -> bool:
        row_id = _parse_id(note_id)
        if row_id is None:
            return False
        with self._connection() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM notes WHERE id = ?", (row_id,))
            return cur.rowcount > 0

    def close(self) -> None:
        """Nothing to release; connections are per-operation."""
