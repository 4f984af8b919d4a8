"""Creation of new documents in the dated archive."""

import logging
from datetime import date
from pathlib import Path
from typing import Optional

from .config import ChroniQuillConfig
from .errors import CategoryDisabled, InvalidDocumentName
from .ledger import LedgerWriter
from .models.document import Category
from .paths import HomePaths, sanitize_name
from .save import atomic_write_bytes
from .settings import ChroniQuillSettings

logger = logging.getLogger(__name__)


def generate_unique_filename(directory: Path, base_name: str, extension: str) -> Path:
    """Generate a unique filename by adding a suffix if a collision occurs.

    Args:
        directory: Target directory
        base_name: Base filename (without extension)
        extension: File extension (including dot, e.g., '.md')

    Returns:
        Path object with unique filename
    """
    candidate = directory / f"{base_name}{extension}"
    if not candidate.exists():
        return candidate

    # Hyphenated suffixes keep the name inside [a-z0-9-]
    counter = 1
    while True:
        candidate = directory / f"{base_name}-{counter}{extension}"
        if not candidate.exists():
            return candidate
        counter += 1


def create_document(
    config: ChroniQuillConfig,
    settings: ChroniQuillSettings,
    category: Category,
    title: str,
    on_date: Optional[date] = None,
    text: str = "",
    ledger_writer: Optional[LedgerWriter] = None,
) -> Path:
    """Create a new document of `category` filed under `on_date`.

    Args:
        config: Configuration naming the home directory
        settings: User settings; the category must be enabled
        category: Short-form or long-form
        title: Free-text title, sanitized into the file name
        on_date: Date folder to file under (default: today)
        text: Initial content
        ledger_writer: Optional activity ledger

    Returns:
        Path to the created document. Callers rebuild the folder index.

    Raises:
        CategoryDisabled: If the category is switched off in settings
        InvalidDocumentName: If the title has no usable characters
    """
    if not settings.is_enabled(category):
        raise CategoryDisabled(category.value)

    base_name = sanitize_name(title)
    if not base_name:
        raise InvalidDocumentName(title)

    on_date = on_date or date.today()
    paths = HomePaths.from_config(config)
    folder = paths.dated_folder(category, on_date)
    folder.mkdir(parents=True, exist_ok=True)

    document_path = generate_unique_filename(folder, base_name, config.document_suffix)
    atomic_write_bytes(document_path, text.encode("utf-8"))
    logger.info(f"Created {document_path.relative_to(paths.root)}")

    if ledger_writer is not None:
        ledger_writer.append_event(
            event_type="DOCUMENT_CREATED",
            payload={"category": category.value, "date": on_date.isoformat()},
            document=document_path,
        )

    return document_path
