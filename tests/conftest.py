"""Shared fixtures: every test runs against an empty, isolated config dir."""

import pytest

from supportcalc.sdk.guidelines import _load_cached


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point SUPPORT_CALC_CONFIG_PATH at a fresh directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("SUPPORT_CALC_CONFIG_PATH", str(config_dir))
    _load_cached.cache_clear()
    yield config_dir
    _load_cached.cache_clear()
