"""Pydantic models for documents and editing sessions."""

from datetime import date
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class Category(str, Enum):
    """Top-level classification of a document, each rooted at its own subtree."""

    SHORT_FORM = "short-form"
    LONG_FORM = "long-form"


class Document(BaseModel):
    """A document as it currently exists on disk.

    Identity is the storage path; everything else is derived from it or read
    from the file.
    """

    path: Path = Field(description="Absolute path of the document file")
    category: Category | None = Field(
        default=None,
        description="Category subtree the path falls under, if any"
    )
    authored_on: date = Field(description="Date derived from the dated folders")
    base_name: str = Field(description="File name without the document suffix")

    model_config = {"frozen": True}


class SessionState(str, Enum):
    """Lifecycle states of an editing session."""

    CLOSED = "closed"
    LOADING = "loading"
    CLEAN = "clean"
    DIRTY = "dirty"
    SAVING = "saving"
    REVERTING = "reverting"


class DirtyState(BaseModel):
    """Three independently computed divergences from disk."""

    content_changed: bool = False
    name_changed: bool = False
    date_changed: bool = False

    model_config = {"frozen": True}

    @property
    def dirty(self) -> bool:
        return self.content_changed or self.name_changed or self.date_changed
