"""Pydantic models for ledger events."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

EventType = Literal[
    "HOME_INITIALIZED",
    "DOCUMENT_CREATED",
    "DOCUMENT_OPENED",
    "DOCUMENT_CLOSED",
    "DOCUMENT_SAVED",
    "SAVE_FAILED",
    "DOCUMENT_REVERTED",
]


class LedgerEvent(BaseModel):
    """Append-only ledger event record.

    Written as JSONL to <home>/.chroniquill/ledger.jsonl.
    Never mutate or delete; only append.
    """

    event_id: str = Field(description="Unique event identifier (uuid4)")
    run_id: str = Field(description="Run/session identifier (uuid4)")
    ts: datetime = Field(description="Event timestamp (ISO8601 UTC)")
    event_type: EventType = Field(description="Event type")
    document: str | None = Field(default=None, description="Document path relative to home")
    payload: dict = Field(default_factory=dict, description="Event-specific data")

    model_config = {"frozen": True}
