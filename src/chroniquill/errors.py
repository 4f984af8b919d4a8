"""Exceptions raised by the ChroniQuill core."""

from enum import Enum
from pathlib import Path


class ChroniQuillError(Exception):
    """Base class for every ChroniQuill failure."""


class IndexScanPartial(ChroniQuillError):
    """A directory could not be listed while building the folder index."""

    def __init__(self, directory: Path, cause: OSError):
        super().__init__(f"Could not scan {directory}: {cause}")
        self.directory = directory
        self.cause = cause


class BackupMissing(ChroniQuillError):
    """Revert or backup read attempted with no backup present."""

    def __init__(self, document_path: Path):
        super().__init__(f"No backup exists for {document_path.name}")
        self.document_path = document_path


class BackupWriteFailed(ChroniQuillError):
    """A backup copy could not be written; undo is unavailable."""

    def __init__(self, document_path: Path, cause: OSError):
        super().__init__(f"Failed to create backup for {document_path.name}: {cause}")
        self.document_path = document_path
        self.cause = cause


class DatePathUnparseable(ChroniQuillError):
    """A document path carries no readable date; the current date is used."""

    def __init__(self, document_path: Path):
        super().__init__(f"Could not read a date from {document_path}; using today")
        self.document_path = document_path


class SaveStep(str, Enum):
    """Mutating steps of a save transaction, in execution order."""

    MOVE = "move"
    RENAME = "rename"
    WRITE = "write"


class SaveStepFailed(ChroniQuillError):
    """A save transaction halted at `step`; later steps were not applied."""

    def __init__(self, step: SaveStep, path: Path, cause: OSError):
        super().__init__(f"Save failed during {step.value} of {path}: {cause}")
        self.step = step
        self.path = path
        self.cause = cause


class CategoryUnresolved(ChroniQuillError):
    """The document lies outside both category subtrees; nothing was saved."""

    def __init__(self, document_path: Path):
        super().__init__(f"Cannot determine the category of {document_path}")
        self.document_path = document_path


class CategoryDisabled(ChroniQuillError):
    """New documents of this category are switched off in settings."""

    def __init__(self, category: str):
        super().__init__(f"{category} documents are disabled in settings")
        self.category = category


class InvalidDocumentName(ChroniQuillError):
    """A name that sanitizes to nothing."""

    def __init__(self, raw_name: str):
        super().__init__(f"{raw_name!r} does not contain any usable characters")
        self.raw_name = raw_name


class SessionStateError(ChroniQuillError):
    """An operation was attempted in a session state that does not allow it."""
