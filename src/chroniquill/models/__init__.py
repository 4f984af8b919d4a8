"""Pydantic models for ChroniQuill."""

from .document import Category, DirtyState, Document, SessionState
from .index import FolderIndex, FolderNode
from .ledger import EventType, LedgerEvent

__all__ = [
    "Category",
    "Document",
    "DirtyState",
    "SessionState",
    # Index
    "FolderNode",
    "FolderIndex",
    # Ledger
    "EventType",
    "LedgerEvent",
]
