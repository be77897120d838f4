"""Configuration management for Payroll Calc.

Configuration lives in a single settings.json file holding machine-specific
settings for the remote calculation service and tax table location:

- remote_base_url: base URL of the batch calculation service (optional;
  without it every pay run is computed locally)
- remote_api_token: bearer token sent to the remote service (optional)
- remote_timeout_seconds: timeout for the remote call (default 30)
- batch_threshold: minimum employee count before the remote service is used
  (default 50)
- availability_check_interval_seconds: how long a failed remote service is
  skipped before retrying (default 60)
- tax_tables_dir: directory with custom tax table YAML files (optional)

Config directory resolution:
1. PAYROLL_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/payroll-calc/ (XDG_CONFIG_HOME fallback)

Environment overrides (take precedence over settings.json):
- PAYROLL_CALC_REMOTE_URL -> remote_base_url
- PAYROLL_CALC_REMOTE_TOKEN -> remote_api_token
- PAYROLL_CALC_TAX_TABLES -> tax_tables_dir
"""

import json
import os
from pathlib import Path
from typing import Any, Optional


APP_NAME = "payroll-calc"
SETTINGS_FILENAME = "settings.json"

DEFAULT_SETTINGS = {
    "remote_base_url": None,
    "remote_api_token": None,
    "remote_timeout_seconds": 30,
    "batch_threshold": 50,
    "availability_check_interval_seconds": 60,
    "tax_tables_dir": None,
}

ENV_OVERRIDES = {
    "remote_base_url": "PAYROLL_CALC_REMOTE_URL",
    "remote_api_token": "PAYROLL_CALC_REMOTE_TOKEN",
    "tax_tables_dir": "PAYROLL_CALC_TAX_TABLES",
}

_NUMERIC_SETTINGS = {
    "remote_timeout_seconds": float,
    "batch_threshold": int,
    "availability_check_interval_seconds": float,
}


class SettingsError(Exception):
    """Raised when a setting is unknown or has an invalid value."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. PAYROLL_CALC_CONFIG_PATH environment variable
    2. ~/.config/payroll-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("PAYROLL_CALC_CONFIG_PATH")
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
        SettingsError: If the file is not a JSON object
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        try:
            settings = json.load(f)
        except json.JSONDecodeError as e:
            raise SettingsError(f"Invalid settings file {settings_file}: {e}")
    if not isinstance(settings, dict):
        raise SettingsError(f"Invalid settings file {settings_file}: expected a JSON object")
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


def _coerce(key: str, value: Any) -> Any:
    """Convert a raw setting value to the type its key expects."""
    if value is None:
        return None
    converter = _NUMERIC_SETTINGS.get(key)
    if converter is None:
        return value
    try:
        converted = converter(value)
    except (TypeError, ValueError):
        raise SettingsError(f"Setting '{key}' must be a number, got {value!r}")
    if converted <= 0:
        raise SettingsError(f"Setting '{key}' must be positive, got {value!r}")
    return converted


def get_setting(key: str, default: Any = None) -> Any:
    """Get an effective setting value.

    Resolution order: environment override, settings.json, built-in default,
    then the ``default`` argument.

    Args:
        key: Setting key (e.g., "remote_base_url", "batch_threshold")
        default: Value returned if the key has no value anywhere

    Returns:
        Setting value (numeric settings converted to int/float)
    """
    env_var = ENV_OVERRIDES.get(key)
    if env_var and os.environ.get(env_var):
        return _coerce(key, os.environ[env_var])

    settings = load_settings()
    if settings.get(key) is not None:
        return _coerce(key, settings[key])

    if DEFAULT_SETTINGS.get(key) is not None:
        return DEFAULT_SETTINGS[key]
    return default


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Args:
        key: Setting key (must be one of DEFAULT_SETTINGS)
        value: Value to set; validated against the key's type

    Returns:
        Path to the saved settings file

    Raises:
        SettingsError: If the key is unknown or the value is invalid
    """
    if key not in DEFAULT_SETTINGS:
        known = ", ".join(sorted(DEFAULT_SETTINGS))
        raise SettingsError(f"Unknown setting '{key}'. Known settings: {known}")

    settings = load_settings()
    settings[key] = _coerce(key, value)
    return save_settings(settings)


def unset_setting(key: str) -> Path:
    """Remove a setting from settings.json, reverting it to its default."""
    settings = load_settings()
    settings.pop(key, None)
    return save_settings(settings)


def get_effective_settings() -> dict:
    """Get every known setting with its effective value."""
    return {key: get_setting(key) for key in DEFAULT_SETTINGS}


def get_tax_tables_dir() -> Optional[Path]:
    """Get a custom tax tables directory, or None to use the bundled tables."""
    value = get_setting("tax_tables_dir")
    return Path(value).expanduser() if value else None
