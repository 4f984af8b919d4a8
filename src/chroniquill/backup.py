"""Single-generation backup copies of open documents."""

import logging
import shutil
from pathlib import Path

from .config import ChroniQuillConfig
from .errors import BackupMissing, BackupWriteFailed

logger = logging.getLogger(__name__)


class BackupStore:
    """Keeps at most one shadow copy per document, beside the document.

    ``essay.md`` is backed up to ``essay._old.md``. The backup location is
    derived only from the document path, so moving or renaming a document
    orphans its backup until the caller deletes it.
    """

    def __init__(self, config: ChroniQuillConfig):
        self.config = config

    def backup_path(self, document_path: Path) -> Path:
        return document_path.with_name(f"{document_path.stem}.{self.config.backup_suffix}")

    def exists(self, document_path: Path) -> bool:
        return self.backup_path(document_path).is_file()

    def create(self, document_path: Path) -> bool:
        """Copy the document's current bytes to its backup location.

        Failures are logged, not raised: editing continues without undo.

        Returns:
            True if the backup was written
        """
        backup = self.backup_path(document_path)
        try:
            shutil.copyfile(document_path, backup)
        except OSError as e:
            logger.warning(str(BackupWriteFailed(document_path, e)))
            return False
        logger.debug(f"Backup created for {document_path.name}")
        return True

    def read(self, document_path: Path) -> bytes:
        """Return the backup bytes.

        Raises:
            BackupMissing: If no backup exists for the document
        """
        backup = self.backup_path(document_path)
        try:
            return backup.read_bytes()
        except FileNotFoundError:
            raise BackupMissing(document_path) from None

    def delete(self, document_path: Path) -> None:
        """Remove the backup if present. Absent backups are not an error."""
        backup = self.backup_path(document_path)
        try:
            backup.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to delete backup {backup.name}: {e}")
            return
        logger.debug(f"Deleted backup {backup.name}")
