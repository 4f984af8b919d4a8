"""Folder index: a navigable snapshot of both category trees."""

import logging
from pathlib import Path

from .config import ChroniQuillConfig
from .errors import IndexScanPartial
from .models.document import Category
from .models.index import FolderIndex, FolderNode
from .paths import HomePaths

logger = logging.getLogger(__name__)


def is_document_file(path: Path, config: ChroniQuillConfig) -> bool:
    """A document has the document suffix and is not a backup copy."""
    return path.suffix == config.document_suffix and not path.name.endswith(config.backup_suffix)


def _build_node(directory: Path, config: ChroniQuillConfig, unreadable: list[Path]) -> FolderNode:
    children: list[FolderNode] = []
    documents: list[Path] = []

    try:
        entries = list(directory.iterdir())
    except OSError as e:
        problem = IndexScanPartial(directory, e)
        logger.warning(str(problem))
        unreadable.append(directory)
        return FolderNode(path=directory)

    # Enumeration order is kept as-is; consumers must not rely on sorting
    for entry in entries:
        try:
            if entry.is_dir():
                # Symlinked folders are not followed
                if entry.is_symlink():
                    logger.debug(f"Skipping symlinked directory {entry}")
                    continue
                children.append(_build_node(entry, config, unreadable))
            elif entry.is_file() and is_document_file(entry, config):
                documents.append(entry)
        except OSError as e:
            logger.warning(f"Skipping unreadable entry {entry}: {e}")

    return FolderNode(path=directory, children=tuple(children), documents=tuple(documents))


def build_index(config: ChroniQuillConfig) -> FolderIndex:
    """Scan the home directory into a fresh FolderIndex.

    Categories whose root directory is missing are left out entirely.
    Unreadable subdirectories become empty nodes and are listed in
    ``FolderIndex.unreadable``; the scan never aborts because of them.
    """
    paths = HomePaths.from_config(config)
    roots: list[FolderNode] = []
    categories: list[Category] = []
    unreadable: list[Path] = []

    for category in (Category.SHORT_FORM, Category.LONG_FORM):
        category_root = paths.category_root(category)
        if not category_root.is_dir():
            continue
        roots.append(_build_node(category_root, config, unreadable))
        categories.append(category)

    index = FolderIndex(
        roots=tuple(roots),
        categories=tuple(categories),
        unreadable=tuple(unreadable),
    )
    logger.debug(
        f"Indexed {len(index.all_documents())} document(s) under {paths.archive}"
        f" ({len(unreadable)} unreadable director(ies))"
    )
    return index
