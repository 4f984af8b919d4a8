"""Save transaction: move, rename, write, then rotate the backup."""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import CategoryUnresolved, InvalidDocumentName, SaveStep, SaveStepFailed
from .models.document import Category
from .settings import form_type

if TYPE_CHECKING:
    from .session import DocumentSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveResult:
    original_path: Path
    final_path: Path
    category: Category
    authored_on: date
    moved: bool
    renamed: bool
    backup_created: bool


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write `data` to `path` through a sibling temp file and a replace."""
    temp_file = path.with_name(f".{path.name}.tmp")
    try:
        temp_file.write_bytes(data)
        temp_file.replace(path)
    except OSError:
        temp_file.unlink(missing_ok=True)
        raise


class SaveTransaction:
    """Commits one session's working copy.

    Steps run in order and each must succeed before the next starts:

    1. move the file into the folder for the effective date
    2. rename it to the sanitized pending name
    3. write the buffer atomically
    4. delete the backup orphaned by a move or rename
    5. create a fresh backup from the written bytes
    6. point the session at the final path and rebuild the index

    A failure in steps 1-3 raises :class:`SaveStepFailed`; nothing after the
    failing step is applied and the session keeps its edits. A move that
    succeeded before a later failure is not rolled back.
    """

    def __init__(self, session: "DocumentSession"):
        self.session = session
        self.config = session.config
        self.paths = session.paths
        self.backups = session.backups

    def run(self) -> SaveResult:
        session = self.session
        document = session.document
        original = document.path

        # Validation happens before anything touches the disk
        category = form_type(self.paths, original)
        if category is None:
            raise CategoryUnresolved(original)
        name = session.effective_name
        if not name:
            raise InvalidDocumentName(session.pending_name or "")
        effective_date = session.effective_date
        data = session.buffer.encode("utf-8")

        target_dir = self.paths.dated_folder(category, effective_date)
        target_name = f"{name}{self.config.document_suffix}"

        current = original
        moved = renamed = False
        session._begin_save()
        try:
            # Step 1: move into the dated folder
            if target_dir.resolve() != current.parent.resolve():
                destination = target_dir / current.name
                try:
                    target_dir.mkdir(parents=True, exist_ok=True)
                    current.replace(destination)
                except OSError as e:
                    raise SaveStepFailed(SaveStep.MOVE, current, e) from e
                logger.info(f"Moved {current.name} to {target_dir.relative_to(self.paths.root)}")
                current = destination
                moved = True

            # Step 2: rename
            if current.name != target_name:
                destination = current.with_name(target_name)
                try:
                    current.replace(destination)
                except OSError as e:
                    raise SaveStepFailed(SaveStep.RENAME, current, e) from e
                logger.info(f"Renamed {current.name} to {target_name}")
                current = destination
                renamed = True

            # Step 3: write
            try:
                atomic_write_bytes(current, data)
            except OSError as e:
                raise SaveStepFailed(SaveStep.WRITE, current, e) from e

        except SaveStepFailed as failure:
            logger.error(str(failure))
            session._abort_save(current, failure)
            raise

        # Step 4: the old backup is superseded, and orphaned if the file moved
        self.backups.delete(original)
        if current != original:
            self.backups.delete(current)

        # Step 5
        backup_created = self.backups.create(current)

        # Step 6
        result = SaveResult(
            original_path=original,
            final_path=current,
            category=category,
            authored_on=effective_date,
            moved=moved,
            renamed=renamed,
            backup_created=backup_created,
        )
        session._finish_save(result)
        logger.info(f"Saved {current.name} ({len(data)} bytes)")
        return result
