"""Configuration management for Support Calc.

Configuration lives in a single settings.json file:
   - guideline: default guideline schedule name (e.g., "florida-61.30")
   - guidelines_dir: extra directory searched for guideline YAML files
     before the bundled supportcalc/guidelines/

Config directory resolution:
1. SUPPORT_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/support-calc/ (XDG_CONFIG_HOME fallback)
"""

import json
import os
from pathlib import Path
from typing import Any, Optional


APP_NAME = "support-calc"
SETTINGS_FILENAME = "settings.json"
DEFAULT_GUIDELINE = "florida-61.30"


class ConfigError(Exception):
    """Raised when settings.json cannot be read."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. SUPPORT_CALC_CONFIG_PATH environment variable
    2. ~/.config/support-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("SUPPORT_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)

    Raises:
        ConfigError: If the file exists but is not a JSON object
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    try:
        with open(settings_file, "r") as f:
            settings = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {settings_file}: {e}")

    if not isinstance(settings, dict):
        raise ConfigError(f"Expected a JSON object in {settings_file}")
    return settings


def save_settings(settings: dict) -> Path:
    """Save settings to settings.json.

    Args:
        settings: Settings dictionary to save

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json.

    Args:
        key: Setting key (e.g., "guideline", "guidelines_dir")
        default: Default value if key not found
    """
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def clear_setting(key: str) -> bool:
    """Remove a setting. Returns True if it was present."""
    settings = load_settings()
    if key not in settings:
        return False
    del settings[key]
    save_settings(settings)
    return True


def get_default_guideline() -> str:
    """Guideline name used when none is given explicitly."""
    return get_setting("guideline") or DEFAULT_GUIDELINE


def get_user_guidelines_dir() -> Optional[Path]:
    """User guidelines directory from settings, if configured."""
    value = get_setting("guidelines_dir")
    if not value:
        return None
    return Path(value).expanduser()
