"""Tests for configuration and home resolution."""

from pathlib import Path

import pytest

from chroniquill.config import ChroniQuillConfig, resolve_home_root


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    monkeypatch.delenv("CHRONIQUILL_HOME", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def initialized_home(tmp_path):
    home = tmp_path / "home"
    home.mkdir()
    (home / "settings.json").write_text("{}")
    return home


def test_cli_option_takes_precedence(initialized_home, monkeypatch, tmp_path):
    monkeypatch.setenv("CHRONIQUILL_HOME", str(tmp_path / "elsewhere"))

    resolved = resolve_home_root("use_existing", str(initialized_home))

    assert resolved == initialized_home.resolve()


def test_environment_variable(initialized_home, monkeypatch):
    monkeypatch.setenv("CHRONIQUILL_HOME", str(initialized_home))

    assert resolve_home_root("use_existing") == initialized_home.resolve()


def test_user_config_file(initialized_home, tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text(f'home = "{initialized_home.as_posix()}"\n')

    resolved = resolve_home_root("use_existing", user_config_file=config_file)

    assert resolved == initialized_home.resolve()


def test_malformed_user_config_is_ignored(initialized_home, tmp_path, monkeypatch):
    config_file = tmp_path / "config.toml"
    config_file.write_text("home = [unterminated")
    monkeypatch.chdir(initialized_home)

    resolved = resolve_home_root("use_existing", user_config_file=config_file)

    assert resolved.resolve() == initialized_home.resolve()


def test_auto_discovery_walks_upward(initialized_home, monkeypatch, tmp_path):
    nested = initialized_home / "archive" / "long-form"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)

    resolved = resolve_home_root("use_existing", user_config_file=tmp_path / "none.toml")

    assert resolved.resolve() == initialized_home.resolve()


def test_use_existing_requires_settings(tmp_path):
    bare = tmp_path / "bare"
    bare.mkdir()

    with pytest.raises(FileNotFoundError):
        resolve_home_root("use_existing", str(bare))


def test_nothing_found_raises_with_guidance(tmp_path):
    with pytest.raises(FileNotFoundError, match="chroniquill init"):
        resolve_home_root("use_existing", user_config_file=tmp_path / "none.toml")


def test_create_ok_accepts_new_path(tmp_path):
    target = tmp_path / "new_home"

    assert resolve_home_root("create_ok", str(target)) == target.resolve()


def test_from_env_builds_config(initialized_home):
    config = ChroniQuillConfig.from_env(cli_home=str(initialized_home))

    assert config.home_path == initialized_home.resolve()
    assert config.backup_suffix == "_old.md"
    assert config.document_suffix == ".md"
