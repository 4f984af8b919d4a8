"""Append-only activity ledger for ChroniQuill."""

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console

from .models.ledger import EventType, LedgerEvent

console = Console(stderr=True)


class LedgerWriter:
    """Append-only ledger writer.

    Writes events to <home>/.chroniquill/ledger.jsonl.
    Never truncates or rewrites; only appends.
    """

    def __init__(self, ledger_path: Path, home_root: Path | None = None, run_id: str | None = None):
        """Initialize ledger writer.

        Args:
            ledger_path: Path to ledger.jsonl file
            home_root: Home directory; document paths are recorded relative to it
            run_id: Optional run ID; if None, generates a new uuid4
        """
        self.ledger_path = ledger_path
        self.home_root = home_root
        self.run_id = run_id or str(uuid.uuid4())

    def _document_ref(self, document: Path | None) -> str | None:
        if document is None:
            return None
        if self.home_root is not None:
            try:
                return document.relative_to(self.home_root).as_posix()
            except ValueError:
                pass
        return str(document)

    def append_event(
        self,
        event_type: EventType,
        payload: dict,
        document: Path | None = None,
    ) -> LedgerEvent:
        """Append an event to the ledger.

        Args:
            event_type: Type of event
            payload: Event-specific data
            document: Optional document the event concerns

        Returns:
            The created LedgerEvent
        """
        self.ledger_path.parent.mkdir(parents=True, exist_ok=True)

        event = LedgerEvent(
            event_id=str(uuid.uuid4()),
            run_id=self.run_id,
            ts=datetime.now(timezone.utc),
            event_type=event_type,
            document=self._document_ref(document),
            payload=payload,
        )

        # JSONL: one JSON object per line
        with open(self.ledger_path, "a", encoding="utf-8") as f:
            json_str = json.dumps(event.model_dump(mode="json"))
            f.write(json_str + "\n")

        return event


def read_ledger_tail(ledger_path: Path, n: int = 20) -> list[LedgerEvent]:
    """Read the last N events from the ledger.

    Robust parsing: skips malformed lines with a warning.

    Args:
        ledger_path: Path to ledger.jsonl file
        n: Number of events to read from the end

    Returns:
        List of LedgerEvent objects (last N events)
    """
    if not ledger_path.exists():
        return []

    events: list[LedgerEvent] = []
    malformed_count = 0

    with open(ledger_path, "r", encoding="utf-8") as f:
        lines = f.readlines()

    for line in lines[-n:] if len(lines) > n else lines:
        line = line.strip()
        if not line:
            continue

        try:
            data = json.loads(line)
            events.append(LedgerEvent(**data))
        except (json.JSONDecodeError, ValueError) as e:
            malformed_count += 1
            console.print(f"[yellow]Warning: Skipping malformed line: {e}[/yellow]")

    if malformed_count > 0:
        console.print(f"[yellow]Skipped {malformed_count} malformed line(s)[/yellow]")

    return events
