"""Tests for dated path resolution and name sanitizing."""

from datetime import date
from pathlib import Path

import pytest

from chroniquill.models.document import Category
from chroniquill.paths import HomePaths, parse_date, resolve_path, sanitize_name


class TestResolvePath:
    def test_three_level_calendar_hierarchy(self):
        assert resolve_path(Category.LONG_FORM, date(2024, 3, 5)) == Path(
            "archive/long-form/2024/03 March/05 Tuesday"
        )

    def test_short_form_category_root(self):
        assert resolve_path(Category.SHORT_FORM, date(2024, 4, 10)) == Path(
            "archive/short-form/2024/04 April/10 Wednesday"
        )

    def test_single_digit_values_are_zero_padded(self):
        path = resolve_path(Category.LONG_FORM, date(2023, 1, 1))
        assert path.parts[-2:] == ("01 January", "01 Sunday")


class TestParseDate:
    def test_reads_folders_above_file(self):
        path = Path("home/archive/long-form/2024/03 March/05 Tuesday/essay.md")
        assert parse_date(path) == date(2024, 3, 5)

    def test_inverse_of_resolve_path(self):
        on_date = date(2026, 10, 19)
        folder = resolve_path(Category.SHORT_FORM, on_date)
        assert parse_date(folder / "post.md") == on_date

    @pytest.mark.parametrize(
        "path",
        [
            "essay.md",
            "05 Tuesday/essay.md",
            "03 March/05 Tuesday/essay.md",
        ],
    )
    def test_fewer_than_four_segments_returns_none(self, path):
        assert parse_date(Path(path)) is None

    @pytest.mark.parametrize(
        "path",
        [
            "archive/long-form/drafts/misc/essay.md",
            "archive/long-form/2024/March/05 Tuesday/essay.md",
            "archive/long-form/2024/02 February/30 Friday/essay.md",
            "archive/long-form/2024/13 Smarch/01 Monday/essay.md",
        ],
    )
    def test_unparseable_segments_return_none(self, path):
        assert parse_date(Path(path)) is None


class TestSanitizeName:
    def test_lowercases_and_hyphenates_spaces(self):
        assert sanitize_name("My First Essay") == "my-first-essay"

    def test_strips_other_characters(self):
        assert sanitize_name("Hello, World! (v2)") == "hello-world-v2"

    def test_keeps_existing_hyphens_and_digits(self):
        assert sanitize_name("2024-recap") == "2024-recap"

    def test_nothing_usable_gives_empty_string(self):
        assert sanitize_name("!!!") == ""


def test_home_paths_layout(temp_home):
    paths = HomePaths(temp_home)

    assert paths.long_form == temp_home / "archive" / "long-form"
    assert paths.short_form == temp_home / "archive" / "short-form"
    assert paths.category_root(Category.SHORT_FORM) == paths.short_form
    assert paths.settings_file == temp_home / "settings.json"
    names = {d.relative_to(temp_home).as_posix() for d in paths.get_all_directories()}
    assert names == {
        "input",
        "archive/long-form",
        "archive/short-form",
        "reusable-images",
        "lost-files",
        "generated-static-html",
        "plug-ins",
    }


def test_dated_folder_is_absolute(temp_home):
    paths = HomePaths(temp_home)
    assert paths.dated_folder(Category.LONG_FORM, date(2024, 3, 5)) == (
        temp_home / "archive/long-form/2024/03 March/05 Tuesday"
    )
