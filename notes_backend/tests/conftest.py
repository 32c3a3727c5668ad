"""Shared fixtures for the notes backend tests."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from src.api.config import Settings
from src.api.errors import StorageError
from src.api.main import create_app
from src.api.memory import InMemoryNoteStore
from src.api.models import Category, Note, NoteDraft
from src.api.service import NoteService


class TickingClock:
    """Clock that advances one second per reading."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


class FailingStore:
    """Store whose every operation fails like an unreachable database."""

    def insert(self, draft: NoteDraft) -> Note:
        raise StorageError("database unavailable")

    def get(self, note_id: str) -> Optional[Note]:
        raise StorageError("database unavailable")

    def find(self, category: Optional[str] = None) -> List[Note]:
        raise StorageError("database unavailable")

    def replace(self, note_id, title, content, summary, category: Category) -> Optional[Note]:
        raise StorageError("database unavailable")

    def delete(self, note_id: str) -> bool:
        raise StorageError("database unavailable")

    def close(self) -> None:
        pass


def build_draft(content: str, created_at: datetime, title: str = "Title") -> NoteDraft:
    """Build a draft with placeholder derived fields for store tests."""
    return NoteDraft(
        title=title,
        content=content,
        summary=content[:10],
        category=Category.NOTE,
        created_at=created_at,
    )


@pytest.fixture
def make_draft():
    return build_draft


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, NOTES_STORE="memory", SUMMARIZER="deterministic")


@pytest.fixture
def store() -> InMemoryNoteStore:
    return InMemoryNoteStore()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def service(store: InMemoryNoteStore, clock: TickingClock) -> NoteService:
    return NoteService(store, clock=clock)


@pytest.fixture
def client(settings: Settings, store: InMemoryNoteStore) -> TestClient:
    app = create_app(settings=settings, store=store)
    return TestClient(app)
