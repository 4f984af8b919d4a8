"""Tests for settings persistence and home initialization."""

import json

from chroniquill.config import ChroniQuillConfig
from chroniquill.ledger import LedgerWriter
from chroniquill.models.document import Category
from chroniquill.paths import HomePaths
from chroniquill.settings import ChroniQuillSettings, form_type, init_home


def test_init_home_creates_fixed_directories(home_config, temp_home):
    created = init_home(home_config)

    paths = HomePaths(temp_home)
    for directory in paths.get_all_directories():
        assert directory.is_dir()
    assert set(created) == set(paths.get_all_directories())
    assert paths.settings_file.exists()


def test_init_home_is_idempotent(home_config, temp_home):
    init_home(home_config)
    marker = temp_home / "input" / "keep.txt"
    marker.write_text("keep")

    created = init_home(home_config)

    assert created == []
    assert marker.read_text() == "keep"


def test_init_home_records_ledger_event(home_config, temp_home):
    paths = HomePaths(temp_home)
    writer = LedgerWriter(paths.ledger_file, home_root=temp_home)

    init_home(home_config, ledger_writer=writer)

    event = json.loads(paths.ledger_file.read_text().strip())
    assert event["event_type"] == "HOME_INITIALIZED"
    assert "archive/long-form" in event["payload"]["directories_created"]


def test_settings_written_in_camel_case(home_paths):
    data = json.loads(home_paths.settings_file.read_text())

    assert data == {
        "homeDirectory": str(home_paths.root.resolve()),
        "siteURL": "",
        "shortFormEnabled": True,
        "longFormEnabled": True,
    }


def test_settings_round_trip(home_paths):
    settings = ChroniQuillSettings.load(home_paths.settings_file)
    settings.site_url = "https://example.net/chroniquill"
    settings.set_enabled(Category.SHORT_FORM, False)
    settings.save(home_paths.settings_file)

    reloaded = ChroniQuillSettings.load(home_paths.settings_file)

    assert reloaded.site_url == "https://example.net/chroniquill"
    assert not reloaded.is_enabled(Category.SHORT_FORM)
    assert reloaded.is_enabled(Category.LONG_FORM)
    assert not home_paths.settings_file.with_suffix(".tmp").exists()


def test_malformed_settings_fall_back_to_defaults(temp_home):
    settings_file = temp_home / "settings.json"
    settings_file.write_text("{not json")

    settings = ChroniQuillSettings.load(settings_file)

    assert settings == ChroniQuillSettings()


def test_missing_settings_use_defaults(temp_home):
    settings = ChroniQuillSettings.load(temp_home / "settings.json")

    assert settings.short_form_enabled and settings.long_form_enabled


class TestFormType:
    def test_long_form_document(self, home_paths, essay):
        assert form_type(home_paths, essay) == Category.LONG_FORM

    def test_short_form_document(self, home_paths):
        post = home_paths.short_form / "2024" / "post.md"
        assert form_type(home_paths, post) == Category.SHORT_FORM

    def test_outside_archive_is_none(self, home_paths):
        assert form_type(home_paths, home_paths.input / "draft.md") is None

    def test_archive_root_is_not_a_category(self, home_paths):
        assert form_type(home_paths, home_paths.archive / "loose.md") is None
