"""Path management and home directory structure for ChroniQuill."""

import re
from datetime import date
from pathlib import Path
from typing import Optional

from .config import SETTINGS_FILENAME, ChroniQuillConfig
from .models.document import Category

# Fixed English names so dated folders are identical on every machine,
# whatever the process locale.
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
WEEKDAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

_LEADING_NUMBER = re.compile(r"^(\d{1,2})(?:\s|$)")
_NAME_DISALLOWED = re.compile(r"[^a-z0-9-]")


class HomePaths:
    """Manages paths within a ChroniQuill home directory."""

    def __init__(self, home_root: Path):
        """Initialize home paths from root directory.

        Args:
            home_root: Root directory chosen by the user
        """
        self.root = home_root

        # Document archive
        self.archive = home_root / "archive"
        self.short_form = self.archive / Category.SHORT_FORM.value
        self.long_form = self.archive / Category.LONG_FORM.value

        # Fixed working directories
        self.input = home_root / "input"
        self.reusable_images = home_root / "reusable-images"
        self.lost_files = home_root / "lost-files"
        self.generated_static_html = home_root / "generated-static-html"
        self.plug_ins = home_root / "plug-ins"

        # System files
        self.system = home_root / ".chroniquill"
        self.settings_file = home_root / SETTINGS_FILENAME
        self.ledger_file = self.system / "ledger.jsonl"

    @classmethod
    def from_config(cls, config: ChroniQuillConfig) -> "HomePaths":
        """Create HomePaths from a ChroniQuillConfig."""
        return cls(config.home_path)

    def get_all_directories(self) -> list[Path]:
        """Get list of all directories that home initialization creates."""
        return [
            self.input,
            self.long_form,
            self.short_form,
            self.reusable_images,
            self.lost_files,
            self.generated_static_html,
            self.plug_ins,
        ]

    def category_root(self, category: Category) -> Path:
        """Get the root directory of a category subtree."""
        if category == Category.SHORT_FORM:
            return self.short_form
        return self.long_form

    def dated_folder(self, category: Category, on_date: date) -> Path:
        """Get the absolute folder holding documents of `category` for `on_date`."""
        return self.root / resolve_path(category, on_date)


def resolve_path(category: Category, on_date: date) -> Path:
    """Map a category and date to the storage folder, relative to home.

    Example: ``archive/long-form/2024/03 March/05 Tuesday``
    """
    return (
        Path("archive")
        / category.value
        / f"{on_date.year:04d}"
        / f"{on_date.month:02d} {MONTH_NAMES[on_date.month - 1]}"
        / f"{on_date.day:02d} {WEEKDAY_NAMES[on_date.weekday()]}"
    )


def _leading_number(segment: str) -> Optional[int]:
    match = _LEADING_NUMBER.match(segment)
    return int(match.group(1)) if match else None


def parse_date(path: Path) -> Optional[date]:
    """Read the date encoded in the three folders above a document.

    Returns None when the path is too short or the folders do not name a
    real calendar date. Never raises.
    """
    parts = Path(path).parts
    if len(parts) < 4:
        return None

    year_segment, month_segment, day_segment = parts[-4], parts[-3], parts[-2]
    if not year_segment.isdigit():
        return None
    month = _leading_number(month_segment)
    day = _leading_number(day_segment)
    if month is None or day is None:
        return None

    try:
        return date(int(year_segment), month, day)
    except ValueError:
        return None


def sanitize_name(text: str) -> str:
    """Turn free text into a document base name matching ``[a-z0-9-]*``."""
    return _NAME_DISALLOWED.sub("", text.lower().replace(" ", "-"))
