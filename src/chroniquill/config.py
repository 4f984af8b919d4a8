"""Configuration management for ChroniQuill."""

import os
import tomllib
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

SETTINGS_FILENAME = "settings.json"
USER_CONFIG_FILE = Path("~/.config/chroniquill/config.toml")


def _load_user_config_data(config_file: Path) -> Optional[dict]:
    """Load the user config file if it exists."""
    config_file = config_file.expanduser()

    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        # A malformed user config is ignored, not fatal
        return None


def _load_user_config_home(config_file: Path) -> Optional[Path]:
    """Read `home` from the user config file."""
    data = _load_user_config_data(config_file)
    if not data:
        return None
    home_str = data.get("home")
    if isinstance(home_str, str) and home_str:
        return Path(home_str).expanduser().resolve()
    return None


def _has_home_markers(home_path: Path) -> bool:
    """Check if a directory looks like a ChroniQuill home."""
    return (home_path / SETTINGS_FILENAME).exists()


def resolve_home_root(
    mode: Literal["use_existing", "create_ok"],
    cli_home: Optional[str] = None,
    user_config_file: Optional[Path] = None,
) -> Path:
    """Resolve the home directory with the following precedence:

    1. CLI --home option (if provided)
    2. CHRONIQUILL_HOME environment variable
    3. User config file (~/.config/chroniquill/config.toml, key `home`)
    4. Auto-discovery by walking up from cwd looking for settings.json

    Args:
        mode: "use_existing" requires home markers to exist, "create_ok" allows new homes
        cli_home: Home path from CLI --home option
        user_config_file: Location of the user config file (default: ~/.config/chroniquill/config.toml)

    Returns:
        Absolute path to home directory

    Raises:
        FileNotFoundError: If home cannot be found and mode is "use_existing"
    """
    # 1. CLI option takes highest precedence
    if cli_home:
        home_path = Path(cli_home).expanduser().resolve()
        if mode == "use_existing" and not _has_home_markers(home_path):
            raise FileNotFoundError(f"Specified path is not a ChroniQuill home: {home_path}")
        return home_path

    # 2. Environment variable
    env_home = os.environ.get("CHRONIQUILL_HOME")
    if env_home:
        home_path = Path(env_home).expanduser().resolve()
        if mode == "use_existing" and not _has_home_markers(home_path):
            raise FileNotFoundError(f"CHRONIQUILL_HOME is not a ChroniQuill home: {home_path}")
        return home_path

    # 3. User config file
    user_config_file = user_config_file or USER_CONFIG_FILE
    config_home = _load_user_config_home(user_config_file)
    if config_home:
        if mode == "use_existing" and not _has_home_markers(config_home):
            raise FileNotFoundError(
                f"Home from {user_config_file} is not a ChroniQuill home: {config_home}"
            )
        return config_home

    # 4. Auto-discovery by walking up from cwd
    current_dir = Path.cwd()
    while True:
        if _has_home_markers(current_dir):
            return current_dir

        parent_dir = current_dir.parent
        if parent_dir == current_dir:
            break
        current_dir = parent_dir

    if mode == "use_existing":
        raise FileNotFoundError(
            "ChroniQuill home not found. Searched for:\n"
            "  - --home option\n"
            "  - CHRONIQUILL_HOME environment variable\n"
            f"  - `home` in {user_config_file}\n"
            f"  - {SETTINGS_FILENAME} upward from {Path.cwd()}\n"
            "Try one of:\n"
            "  • chroniquill init --home \"/path/to/home\"\n"
            "  • export CHRONIQUILL_HOME=\"/path/to/home\""
        )
    return Path.cwd() / "chroniquill_home"


class ChroniQuillConfig(BaseModel):
    """Configuration for a ChroniQuill home directory and its documents."""

    home_path: Path = Field(
        default_factory=lambda: Path(os.environ.get("CHRONIQUILL_HOME", "./chroniquill_home"))
    )
    document_suffix: str = Field(default=".md", description="Extension of every document file")
    backup_marker: str = Field(default="_old", description="Marker carried by backup file names")

    model_config = {"frozen": True}

    @classmethod
    def from_env(
        cls,
        cli_home: Optional[str] = None,
        mode: Literal["use_existing", "create_ok"] = "use_existing",
    ) -> "ChroniQuillConfig":
        """Load configuration from the environment or defaults.

        Args:
            cli_home: Home path from CLI --home option (highest precedence)
            mode: "use_existing" requires an initialized home, "create_ok" allows new ones
        """
        home_path = resolve_home_root(mode, cli_home)
        return cls(home_path=home_path)

    @property
    def backup_suffix(self) -> str:
        """File-name ending shared by every backup, e.g. `_old.md`."""
        return f"{self.backup_marker}{self.document_suffix}"
