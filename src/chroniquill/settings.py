"""User settings and home directory initialization."""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from .config import ChroniQuillConfig
from .ledger import LedgerWriter
from .models.document import Category
from .paths import HomePaths

logger = logging.getLogger(__name__)


class ChroniQuillSettings(BaseModel):
    """Settings persisted as <home>/settings.json.

    Keys are written in camelCase, the format existing homes already use.
    """

    home_directory: str = Field(default="", alias="homeDirectory")
    site_url: str = Field(default="", alias="siteURL")
    short_form_enabled: bool = Field(default=True, alias="shortFormEnabled")
    long_form_enabled: bool = Field(default=True, alias="longFormEnabled")

    model_config = {"populate_by_name": True}

    @classmethod
    def load(cls, settings_file: Path) -> "ChroniQuillSettings":
        """Load settings from JSON file, falling back to defaults."""
        if not settings_file.exists():
            logger.info(f"Settings file {settings_file} does not exist, using defaults")
            return cls()

        try:
            with open(settings_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            return cls.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Failed to load settings {settings_file}: {e}, using defaults")
            return cls()

    def save(self, settings_file: Path) -> None:
        """Save settings to JSON file atomically."""
        settings_file.parent.mkdir(parents=True, exist_ok=True)

        temp_file = settings_file.with_suffix(".tmp")
        try:
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump(self.model_dump(by_alias=True), f, indent=2, ensure_ascii=False)

            temp_file.replace(settings_file)
            logger.debug(f"Saved settings to {settings_file}")

        except OSError as e:
            logger.error(f"Failed to save settings to {settings_file}: {e}")
            temp_file.unlink(missing_ok=True)
            raise

    def is_enabled(self, category: Category) -> bool:
        """Whether new documents of `category` may be created."""
        if category == Category.SHORT_FORM:
            return self.short_form_enabled
        return self.long_form_enabled

    def set_enabled(self, category: Category, enabled: bool) -> None:
        if category == Category.SHORT_FORM:
            self.short_form_enabled = enabled
        else:
            self.long_form_enabled = enabled


def form_type(paths: HomePaths, document_path: Path) -> Optional[Category]:
    """Category whose subtree contains `document_path`, or None."""
    resolved = document_path.resolve()
    for category in Category:
        if resolved.is_relative_to(paths.category_root(category).resolve()):
            return category
    return None


def init_home(
    config: ChroniQuillConfig,
    settings: Optional[ChroniQuillSettings] = None,
    ledger_writer: Optional[LedgerWriter] = None,
) -> list[Path]:
    """Write settings.json and create the fixed home directories.

    Idempotent: existing directories and settings values are kept.

    Args:
        config: Configuration naming the home directory
        settings: Settings to write; loaded from disk (or defaults) when None
        ledger_writer: Optional ledger to record the initialization

    Returns:
        Directories created by this call
    """
    paths = HomePaths.from_config(config)
    paths.root.mkdir(parents=True, exist_ok=True)

    if settings is None:
        settings = ChroniQuillSettings.load(paths.settings_file)
    settings.home_directory = str(paths.root.resolve())
    settings.save(paths.settings_file)

    created: list[Path] = []
    for directory in paths.get_all_directories():
        if directory.exists():
            continue
        try:
            directory.mkdir(parents=True, exist_ok=True)
            created.append(directory)
            logger.debug(f"Created directory at {directory}")
        except OSError as e:
            logger.warning(f"Failed to create directory {directory}: {e}")

    if ledger_writer is not None:
        ledger_writer.append_event(
            event_type="HOME_INITIALIZED",
            payload={
                "home": settings.home_directory,
                "directories_created": [str(d.relative_to(paths.root)) for d in created],
            },
        )

    return created
