"""Tests for settings.json handling."""

import pytest

from supportcalc.sdk import (
    ConfigError,
    clear_setting,
    get_config_dir,
    get_default_guideline,
    get_setting,
    get_settings_path,
    get_user_guidelines_dir,
    load_settings,
    set_setting,
)


def test_env_override(isolated_config):
    assert get_config_dir() == isolated_config
    assert get_settings_path() == isolated_config / "settings.json"


def test_xdg_fallback(tmp_path, monkeypatch):
    monkeypatch.delenv("SUPPORT_CALC_CONFIG_PATH")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    assert get_config_dir() == tmp_path / "xdg" / "support-calc"


def test_missing_file_is_empty():
    assert load_settings() == {}
    assert get_setting("guideline", "fallback") == "fallback"


def test_set_get_clear():
    path = set_setting("guideline", "tiny")
    assert path.exists()
    assert get_setting("guideline") == "tiny"
    assert get_default_guideline() == "tiny"

    assert clear_setting("guideline") is True
    assert clear_setting("guideline") is False
    assert get_default_guideline() == "florida-61.30"


def test_invalid_json(isolated_config):
    (isolated_config / "settings.json").write_text("{not json")
    with pytest.raises(ConfigError, match="Invalid JSON"):
        load_settings()


def test_non_object_json(isolated_config):
    (isolated_config / "settings.json").write_text("[1, 2]")
    with pytest.raises(ConfigError, match="JSON object"):
        load_settings()


def test_user_guidelines_dir(tmp_path):
    assert get_user_guidelines_dir() is None
    set_setting("guidelines_dir", str(tmp_path))
    assert get_user_guidelines_dir() == tmp_path
