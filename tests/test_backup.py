"""Tests for the single-generation backup store."""

import pytest

from chroniquill.backup import BackupStore
from chroniquill.errors import BackupMissing


@pytest.fixture
def backups(home_config):
    return BackupStore(home_config)


def test_backup_path_is_marked_sibling(backups, essay):
    assert backups.backup_path(essay) == essay.parent / "essay._old.md"


def test_create_copies_current_bytes(backups, essay):
    assert backups.create(essay) is True

    assert backups.exists(essay)
    assert backups.read(essay) == essay.read_bytes()


def test_create_overwrites_previous_generation(backups, essay):
    backups.create(essay)
    essay.write_text("second version")

    backups.create(essay)

    assert backups.read(essay) == b"second version"


def test_create_failure_is_reported_not_raised(backups, home_paths):
    missing = home_paths.long_form / "nowhere" / "ghost.md"

    assert backups.create(missing) is False
    assert not backups.exists(missing)


def test_read_missing_backup_raises(backups, essay):
    with pytest.raises(BackupMissing):
        backups.read(essay)


def test_delete_is_idempotent(backups, essay):
    backups.create(essay)

    backups.delete(essay)
    backups.delete(essay)

    assert not backups.exists(essay)
    assert essay.exists()
