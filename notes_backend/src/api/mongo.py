"""MongoDB note store.

Notes live in a single collection using the same document layout as the
original Express/Mongoose service (``title``, ``content``, ``summary``,
``category``, ``createdAt``), so an existing collection can be served as-is.
"""

from __future__ import annotations

import logging
from datetime import timezone
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, TypeVar

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from src.api.errors import StorageError
from src.api.models import Category, Note, NoteDraft

logger = logging.getLogger(__name__)

T = TypeVar("T")


def translate_errors(func: Callable[..., T]) -> Callable[..., T]:
    """Re-raise pymongo failures as StorageError."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return func(*args, **kwargs)
        except PyMongoError as e:
            logger.error("MongoDB %s failed: %s", func.__name__, e)
            raise StorageError(f"MongoDB operation failed: {e}") from e

    return wrapper


def _object_id(note_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(note_id)
    except (InvalidId, TypeError):
        return None


def document_to_note(doc: Dict[str, Any]) -> Note:
    """Create a Note from a MongoDB document."""
    created_at = doc["createdAt"]
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)

    return Note(
        id=str(doc["_id"]),
        title=doc["title"],
        content=doc["content"],
        summary=doc["summary"],
        category=Category(doc.get("category") or Category.NOTE.value),
        created_at=created_at,
    )


class MongoNoteStore:
    """Note store backed by a MongoDB collection."""

    def __init__(self, collection: Collection, client: Optional[MongoClient] = None) -> None:
        """Initialize the store with a MongoDB collection.

        Args:
            collection: Collection holding note documents.
            client: Owning client, closed by close() when given.
        """
        self._collection = collection
        self._client = client
        self._ensure_indexes()

    @classmethod
    def from_uri(cls, uri: str, database: str, collection: str) -> "MongoNoteStore":
        """Connect to ``uri`` and use ``database.collection`` for notes."""
        client: MongoClient = MongoClient(uri, serverSelectionTimeoutMS=5000)
        logger.info("Using MongoDB note store %s.%s", database, collection)
        return cls(client[database][collection], client=client)

    def _ensure_indexes(self) -> None:
        """Create indexes for category filtering and newest-first listing."""
        try:
            self._collection.create_index([("createdAt", DESCENDING)])
            self._collection.create_index([("category", ASCENDING), ("createdAt", DESCENDING)])
        except PyMongoError as e:
            # Indexes only affect performance; the store still works without them.
            logger.warning("Could not create note indexes: %s", e)

    @translate_errors
    def insert(self, draft: NoteDraft) -> Note:
        doc = {
            "title": draft.title,
            "content": draft.content,
            "summary": draft.summary,
            "category": draft.category.value,
            "createdAt": draft.created_at,
        }
        result = self._collection.insert_one(doc)
        return Note.from_draft(str(result.inserted_id), draft)

    @translate_errors
    def get(self, note_id: str) -> Optional[Note]:
        oid = _object_id(note_id)
        if oid is None:
            return None
        doc = self._collection.find_one({"_id": oid})
        return document_to_note(doc) if doc else None

    @translate_errors
    def find(self, category: Optional[str] = None) -> List[Note]:
        query: Dict[str, Any] = {"category": category} if category else {}
        cursor = self._collection.find(query).sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
        return [document_to_note(doc) for doc in cursor]

    @translate_errors
    def replace(
        self,
        note_id: str,
        title: str,
        content: str,
        summary: str,
        category: Category,
    ) -> Optional[Note]:
        oid = _object_id(note_id)
        if oid is None:
            return None
        doc = self._collection.find_one_and_update(
            {"_id": oid},
            {"$set": {"title": title, "content": content, "summary": summary, "category": category.value}},
            return_document=ReturnDocument.AFTER,
        )
        return document_to_note(doc) if doc else None

    @translate_errors
    def delete(self, note_id: str) -> bool:
        oid = _object_id(note_id)
        if oid is None:
            return False
        return self._collection.delete_one({"_id": oid}).deleted_count > 0

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
