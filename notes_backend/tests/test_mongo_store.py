"""Contract tests for the MongoDB note store, backed by mongomock."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from mongomock import MongoClient
from pymongo.errors import PyMongoError

from src.api.errors import StorageError
from src.api.models import Category, NoteDraft
from src.api.mongo import MongoNoteStore

T0 = datetime(2024, 3, 1, 12, 0, 0, 250000, tzinfo=timezone.utc)


@pytest.fixture
def collection():
    """Create a mock MongoDB collection for testing."""
    return MongoClient()["smartnotes_test"]["notes"]


@pytest.fixture
def mongo_store(collection) -> MongoNoteStore:
    return MongoNoteStore(collection)


class TestMongoNoteStore:
    def test_insert_and_get(self, mongo_store: MongoNoteStore) -> None:
        draft = NoteDraft(
            title="Sync",
            content="Meeting notes. More.",
            summary="Meeting notes.",
            category=Category.MEETING,
            created_at=T0,
        )
        created = mongo_store.insert(draft)

        assert len(created.id) == 24
        fetched = mongo_store.get(created.id)
        assert fetched == created
        assert fetched.created_at == T0

    def test_stored_document_layout(self, mongo_store: MongoNoteStore, make_draft, collection) -> None:
        created = mongo_store.insert(make_draft("layout", T0))
        doc = collection.find_one()

        assert str(doc["_id"]) == created.id
        assert set(doc) == {"_id", "title", "content", "summary", "category", "createdAt"}
        assert doc["category"] == "Note"

    def test_get_unknown_ids(self, mongo_store: MongoNoteStore) -> None:
        assert mongo_store.get("65a1f0c2e4b0a1b2c3d4e5f6") is None
        assert mongo_store.get("not-an-object-id") is None

    def test_find_newest_first_and_filtered(self, mongo_store: MongoNoteStore, make_draft) -> None:
        older = mongo_store.insert(make_draft("older", T0))
        newer = mongo_store.insert(make_draft("newer", T0 + timedelta(minutes=5)))
        task = mongo_store.insert(
            NoteDraft(
                title="t",
                content="task",
                summary="task",
                category=Category.TASK,
                created_at=T0 + timedelta(minutes=1),
            )
        )

        assert [n.id for n in mongo_store.find()] == [newer.id, task.id, older.id]
        assert [n.id for n in mongo_store.find("Task")] == [task.id]
        assert mongo_store.find("Research") == []

    def test_reads_existing_documents(self, mongo_store: MongoNoteStore, collection) -> None:
        """Documents written by another client are served as notes."""
        collection.insert_one(
            {
                "title": "Legacy",
                "content": "An idea from before.",
                "summary": "An idea from before.",
                "category": "Idea",
                "createdAt": datetime(2023, 5, 1, 8, 30),
            }
        )

        notes = mongo_store.find("Idea")
        assert len(notes) == 1
        assert notes[0].title == "Legacy"
        assert notes[0].created_at == datetime(2023, 5, 1, 8, 30, tzinfo=timezone.utc)

    def test_replace(self, mongo_store: MongoNoteStore, make_draft) -> None:
        created = mongo_store.insert(make_draft("before", T0))
        updated = mongo_store.replace(created.id, "New", "after", "after", Category.SCHEDULE)

        assert updated is not None
        assert updated.id == created.id
        assert updated.created_at == created.created_at
        assert (updated.title, updated.content, updated.category) == ("New", "after", Category.SCHEDULE)

    def test_replace_missing(self, mongo_store: MongoNoteStore) -> None:
        assert mongo_store.replace("65a1f0c2e4b0a1b2c3d4e5f6", "t", "c", "c", Category.NOTE) is None
        assert mongo_store.replace("bogus", "t", "c", "c", Category.NOTE) is None

    def test_delete(self, mongo_store: MongoNoteStore, make_draft) -> None:
        created = mongo_store.insert(make_draft("gone soon", T0))
        assert mongo_store.delete(created.id) is True
        assert mongo_store.delete(created.id) is False
        assert mongo_store.delete("bogus") is False

    def test_driver_errors_become_storage_errors(self, mongo_store: MongoNoteStore, make_draft, collection) -> None:
        with patch.object(collection, "insert_one", side_effect=PyMongoError("connection lost")):
            with pytest.raises(StorageError, match="connection lost"):
                mongo_store.insert(make_draft("lost", T0))

    def test_index_failure_does_not_prevent_use(self, collection) -> None:
        with patch.object(collection, "create_index", side_effect=PyMongoError("not allowed")):
            store = MongoNoteStore(collection)
        assert store.find() == []
