"""Pydantic models for the Smart Notes API."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Category(str, Enum):
    """Fixed, closed set of labels a note can be filed under."""

    MEETING = "Meeting"
    IDEA = "Idea"
    REMINDER = "Reminder"
    TASK = "Task"
    SCHEDULE = "Schedule"
    GOAL = "Goal"
    RESEARCH = "Research"
    NOTE = "Note"


class NoteWrite(BaseModel):
    """Request body for creating or replacing a note.

    Both fields are optional at the schema level so that a missing field is
    reported by the service as a validation failure (HTTP 400) instead of a
    schema error.
    """

    title: Optional[str] = Field(None, description="Note title")
    content: Optional[str] = Field(None, description="Note content/body")


class NoteDraft(BaseModel):
    """A fully derived note that has not been assigned an id yet."""

    title: str
    content: str
    summary: str
    category: Category
    created_at: datetime = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True}


class Note(BaseModel):
    """Response model representing a persisted note."""

    id: str = Field(..., description="Opaque note id assigned by the store")
    title: str = Field(..., description="Note title")
    content: str = Field(..., description="Note content/body")
    summary: str = Field(..., description="Summary derived from content")
    category: Category = Field(..., description="Category derived from content")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp (UTC)")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_draft(cls, note_id: str, draft: NoteDraft) -> "Note":
        """Attach a store-assigned id to a draft."""
        return cls(id=note_id, **draft.model_dump())


class DeleteResult(BaseModel):
    """Response body for a delete request."""

    success: bool = True
