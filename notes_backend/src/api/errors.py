"""Error taxonomy for the notes service.

Every error carries the HTTP status it is surfaced with, so the API layer can
translate them without knowing about individual failure modes.
"""

from __future__ import annotations


class NotesError(Exception):
    """Base class for all errors raised by the notes service."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(NotesError):
    """Required input is missing or empty."""

    status_code = 400


class NotFoundError(NotesError):
    """The referenced note does not exist."""

    status_code = 404

    def __init__(self, note_id: str) -> None:
        super().__init__(f"Note {note_id} not found")
        self.note_id = note_id


class StorageError(NotesError):
    """The underlying persistence operation failed."""

    status_code = 500
