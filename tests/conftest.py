"""Pytest fixtures for ChroniQuill tests."""

from datetime import date
from pathlib import Path

import pytest

from chroniquill.config import ChroniQuillConfig
from chroniquill.ledger import LedgerWriter
from chroniquill.paths import HomePaths
from chroniquill.session import DocumentSession
from chroniquill.settings import ChroniQuillSettings, init_home

ESSAY_RELATIVE = Path("archive/long-form/2024/03 March/05 Tuesday/essay.md")
ESSAY_TEXT = "# Essay\n\nFirst draft.\n"


@pytest.fixture
def temp_home(tmp_path):
    """Create a temporary home directory for testing.

    Args:
        tmp_path: pytest's built-in temporary directory fixture

    Returns:
        Path to temporary home root
    """
    home_root = tmp_path / "test_home"
    home_root.mkdir()
    return home_root


@pytest.fixture
def home_config(temp_home):
    """Create ChroniQuillConfig pointing to the temporary home."""
    return ChroniQuillConfig(home_path=temp_home)


@pytest.fixture
def home_paths(home_config):
    """Initialize the temporary home and return its HomePaths."""
    init_home(home_config, ChroniQuillSettings())
    return HomePaths.from_config(home_config)


@pytest.fixture
def home_settings(home_paths):
    return ChroniQuillSettings.load(home_paths.settings_file)


@pytest.fixture
def ledger_writer(home_paths):
    return LedgerWriter(home_paths.ledger_file, home_root=home_paths.root)


@pytest.fixture
def essay(home_paths):
    """Seed archive/long-form/2024/03 March/05 Tuesday/essay.md."""
    path = home_paths.root / ESSAY_RELATIVE
    path.parent.mkdir(parents=True)
    path.write_bytes(ESSAY_TEXT.encode("utf-8"))
    return path


@pytest.fixture
def fixed_today():
    return date(2025, 1, 15)


@pytest.fixture
def session(home_config, home_paths, ledger_writer, fixed_today):
    """A closed DocumentSession bound to the temporary home."""
    return DocumentSession(home_config, ledger_writer=ledger_writer, today=lambda: fixed_today)
