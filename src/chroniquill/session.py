"""Editing session for the single open document.

A session owns the working copy of one document: its text buffer, a pending
name, a pending date, and three dirty flags that are recomputed
independently on every edit. Saving hands the session to a
:class:`~chroniquill.save.SaveTransaction`.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from threading import RLock
from typing import Callable, Iterator, Optional

from .backup import BackupStore
from .config import ChroniQuillConfig
from .errors import BackupMissing, DatePathUnparseable, SaveStepFailed, SessionStateError
from .index import build_index
from .ledger import LedgerWriter
from .models.document import DirtyState, Document, SessionState
from .models.index import FolderIndex
from .paths import HomePaths, parse_date, sanitize_name
from .save import SaveResult, SaveTransaction
from .settings import form_type

logger = logging.getLogger(__name__)


class DocumentSession:
    """The one active editing session.

    Every public operation holds the session lock, so reads, edits, saves
    and reverts never interleave even when issued from several threads.
    """

    def __init__(
        self,
        config: ChroniQuillConfig,
        backups: Optional[BackupStore] = None,
        ledger_writer: Optional[LedgerWriter] = None,
        today: Callable[[], date] = date.today,
    ):
        """Initialize a closed session.

        Args:
            config: Configuration naming the home directory
            backups: Backup store; one bound to `config` is created when None
            ledger_writer: Optional activity ledger
            today: Clock used when a document path carries no date
        """
        self.config = config
        self.paths = HomePaths.from_config(config)
        self.backups = backups or BackupStore(config)
        self.ledger_writer = ledger_writer
        self.today = today

        self._lock = RLock()
        self._suppressed = 0
        self._phase = SessionState.CLOSED

        self.document: Optional[Document] = None
        self.buffer = ""
        self.pending_name: Optional[str] = None
        self.pending_date: Optional[date] = None
        self.flags = DirtyState()
        self.backup_available = False
        self.warnings: list[str] = []
        self.index: FolderIndex = FolderIndex()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        if self._phase == SessionState.CLEAN:
            return SessionState.DIRTY if self.flags.dirty else SessionState.CLEAN
        return self._phase

    @property
    def is_open(self) -> bool:
        return self.document is not None

    @property
    def dirty(self) -> bool:
        return self.flags.dirty

    @property
    def path(self) -> Optional[Path]:
        return self.document.path if self.document else None

    @property
    def effective_name(self) -> str:
        """Base name the document will have after saving."""
        self._require_open()
        if self.pending_name is None:
            return self.document.base_name
        return sanitize_name(self.pending_name)

    @property
    def effective_date(self) -> date:
        """Date the document will be filed under after saving."""
        self._require_open()
        return self.pending_date if self.pending_date is not None else self.document.authored_on

    def _require_open(self) -> None:
        if self.document is None:
            raise SessionStateError("No document is open")

    @contextmanager
    def suppress_recompute(self) -> Iterator[None]:
        """Disable edit-triggered dirty recomputation inside the block.

        Used around programmatic field assignments (loading, reverting,
        finishing a save). The scope ends when the block exits; callers
        recompute explicitly afterwards. The session lock is held for the
        whole block.
        """
        with self._lock:
            self._suppressed += 1
            try:
                yield
            finally:
                self._suppressed -= 1

    def _edited(self) -> None:
        if not self._suppressed:
            self.recompute()

    def recompute(self) -> DirtyState:
        """Recompute the three dirty flags against the file on disk."""
        with self._lock:
            if self.document is None:
                self.flags = DirtyState()
                return self.flags

            try:
                on_disk = self.document.path.read_bytes()
                content_changed = self.buffer.encode("utf-8") != on_disk
            except OSError as e:
                logger.warning(f"Cannot read {self.document.path} for comparison: {e}")
                content_changed = True

            self.flags = DirtyState(
                content_changed=content_changed,
                name_changed=self.effective_name != self.document.base_name,
                date_changed=self.pending_date is not None,
            )
            return self.flags

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self, path: Path) -> Document:
        """Load a document into the session.

        A different document that is still open is closed first, which
        deletes its backup. A backup of the new document is created if
        none exists yet.

        Raises:
            FileNotFoundError: If `path` is not an existing file
        """
        path = Path(path)
        with self._lock:
            if not path.is_file():
                raise FileNotFoundError(f"Document not found: {path}")

            if self.document is not None and self.document.path != path:
                self._teardown()

            self._phase = SessionState.LOADING
            self.warnings = []
            try:
                text = path.read_bytes().decode("utf-8")
            except (OSError, UnicodeDecodeError):
                # A failed reload of the open document ends its session too
                if self.document is not None:
                    self._teardown()
                else:
                    self._reset()
                raise

            if self.backups.exists(path):
                self.backup_available = True
            else:
                self.backup_available = self.backups.create(path)

            authored_on = parse_date(path)
            if authored_on is None:
                warning = DatePathUnparseable(path)
                logger.warning(str(warning))
                self.warnings.append(str(warning))
                authored_on = self.today()

            document = Document(
                path=path,
                category=form_type(self.paths, path),
                authored_on=authored_on,
                base_name=path.stem,
            )

            with self.suppress_recompute():
                self.document = document
                self.pending_name = None
                self.pending_date = None
                self.edit_content(text)

            self._phase = SessionState.CLEAN
            self.recompute()
            self._record("DOCUMENT_OPENED", path, {"backup": self.backup_available})
            logger.info(f"Opened {path.name}")
            return document

    def close(self) -> None:
        """Close the open document and delete its backup."""
        with self._lock:
            if self.document is not None:
                self._teardown()

    def _teardown(self) -> None:
        path = self.document.path
        self.backups.delete(path)
        self._record("DOCUMENT_CLOSED", path, {"discarded_edits": self.flags.dirty})
        logger.info(f"Closed {path.name}")
        self._reset()

    def _reset(self) -> None:
        with self.suppress_recompute():
            self.document = None
            self.buffer = ""
            self.pending_name = None
            self.pending_date = None
        self.flags = DirtyState()
        self.backup_available = False
        self._phase = SessionState.CLOSED

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def edit_content(self, text: str) -> None:
        with self._lock:
            self._require_open()
            self.buffer = text
            self._edited()

    def edit_name(self, text: Optional[str]) -> None:
        """Set the pending name; it is sanitized when compared and saved."""
        with self._lock:
            self._require_open()
            self.pending_name = text
            self._edited()

    def edit_date(self, new_date: Optional[date]) -> None:
        """Set the pending date. Any explicit date counts as a change until saved."""
        with self._lock:
            self._require_open()
            self.pending_date = new_date
            self._edited()

    def revert(self) -> DirtyState:
        """Restore the buffer from the backup and drop pending name and date.

        The file on disk is left alone; saving afterwards persists the
        reverted text.

        Raises:
            BackupMissing: If the open document has no backup
        """
        with self._lock:
            self._require_open()
            path = self.document.path
            if not self.backups.exists(path):
                raise BackupMissing(path)

            self._phase = SessionState.REVERTING
            try:
                restored = self.backups.read(path).decode("utf-8")
            except (BackupMissing, OSError, UnicodeDecodeError):
                self._phase = SessionState.CLEAN
                raise

            with self.suppress_recompute():
                self.edit_content(restored)
                self.pending_name = None
                self.pending_date = None

            self._phase = SessionState.CLEAN
            flags = self.recompute()
            self._record("DOCUMENT_REVERTED", path, {})
            logger.info(f"Reverted {path.name} to its backup")
            return flags

    def save(self) -> SaveResult:
        """Commit the working copy to disk.

        Raises:
            SessionStateError: If nothing is open or nothing changed
            CategoryUnresolved: If the document lies outside both categories
            InvalidDocumentName: If the pending name sanitizes to nothing
            SaveStepFailed: If the move, rename or write failed
        """
        with self._lock:
            self._require_open()
            if not self.recompute().dirty:
                raise SessionStateError(f"{self.document.path.name} has no changes to save")
            return SaveTransaction(self).run()

    # ------------------------------------------------------------------
    # Hooks used by SaveTransaction
    # ------------------------------------------------------------------

    def _begin_save(self) -> None:
        self._phase = SessionState.SAVING

    def _finish_save(self, result: SaveResult) -> None:
        document = Document(
            path=result.final_path,
            category=result.category,
            authored_on=result.authored_on,
            base_name=result.final_path.stem,
        )
        with self.suppress_recompute():
            self.document = document
            self.pending_name = None
            self.pending_date = None
        self.backup_available = result.backup_created
        self._phase = SessionState.CLEAN
        self.recompute()
        self.rebuild_index()
        self._record(
            "DOCUMENT_SAVED",
            result.final_path,
            {
                "original_path": str(result.original_path),
                "moved": result.moved,
                "renamed": result.renamed,
                "backup": result.backup_created,
            },
        )

    def _abort_save(self, current_path: Path, failure: SaveStepFailed) -> None:
        """Keep edits and pending values; follow the file if it already moved."""
        if current_path != self.document.path:
            with self.suppress_recompute():
                self.document = Document(
                    path=current_path,
                    category=self.document.category,
                    authored_on=parse_date(current_path) or self.document.authored_on,
                    base_name=current_path.stem,
                )
            self.rebuild_index()
        self._phase = SessionState.CLEAN
        self.recompute()
        self._record(
            "SAVE_FAILED",
            current_path,
            {"step": failure.step.value, "error": str(failure.cause)},
        )

    # ------------------------------------------------------------------
    # Index and ledger
    # ------------------------------------------------------------------

    def rebuild_index(self) -> FolderIndex:
        """Replace the index snapshot with a fresh scan."""
        with self._lock:
            self.index = build_index(self.config)
            return self.index

    def _record(self, event_type, document: Path, payload: dict) -> None:
        if self.ledger_writer is None:
            return
        try:
            self.ledger_writer.append_event(event_type=event_type, payload=payload, document=document)
        except OSError as e:
            logger.warning(f"Failed to write ledger event {event_type}: {e}")


class SessionRunner:
    """Runs blocking session work on a single background thread.

    Work is executed strictly in submission order, so callers on an
    interactive thread can hand off indexing, saves and reverts without
    them overlapping.
    """

    def __init__(self, session: DocumentSession):
        self.session = session
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="chroniquill-session")

    def submit(self, fn: Callable, *args, **kwargs) -> Future:
        return self._executor.submit(fn, *args, **kwargs)

    def open(self, path: Path) -> Future:
        return self.submit(self.session.open, path)

    def save(self) -> Future:
        return self.submit(self.session.save)

    def revert(self) -> Future:
        return self.submit(self.session.revert)

    def close(self) -> Future:
        return self.submit(self.session.close)

    def rebuild_index(self) -> Future:
        return self.submit(self.session.rebuild_index)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "SessionRunner":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()
