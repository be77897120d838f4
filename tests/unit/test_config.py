"""Tests for settings.json handling and environment overrides.

The autouse isolated_config fixture points PAYROLL_CALC_CONFIG_PATH at a
temporary directory, so these tests never see real user settings.
"""

import json

import pytest

from payrollcalc.sdk import (
    DEFAULT_SETTINGS,
    SettingsError,
    get_effective_settings,
    get_setting,
    get_settings_path,
    get_tax_tables_dir,
    load_settings,
    set_setting,
    unset_setting,
)


def test_settings_path_uses_env(isolated_config):
    assert get_settings_path() == isolated_config / "settings.json"


def test_load_missing_settings():
    assert load_settings() == {}


def test_defaults():
    assert get_setting("batch_threshold") == 50
    assert get_setting("remote_timeout_seconds") == 30
    assert get_setting("remote_base_url") is None
    assert get_setting("remote_base_url", "fallback") == "fallback"


def test_set_and_get(isolated_config):
    set_setting("remote_base_url", "https://payroll.example.com")
    assert get_setting("remote_base_url") == "https://payroll.example.com"
    saved = json.loads((isolated_config / "settings.json").read_text())
    assert saved == {"remote_base_url": "https://payroll.example.com"}


def test_numeric_settings_coerced():
    set_setting("batch_threshold", "75")
    set_setting("remote_timeout_seconds", "2.5")
    assert get_setting("batch_threshold") == 75
    assert isinstance(get_setting("batch_threshold"), int)
    assert get_setting("remote_timeout_seconds") == 2.5


@pytest.mark.parametrize("value", ["zero", "0", "-5"])
def test_invalid_numeric_rejected(value):
    with pytest.raises(SettingsError):
        set_setting("batch_threshold", value)


def test_unknown_key_rejected():
    with pytest.raises(SettingsError, match="Unknown setting"):
        set_setting("data_dir", "/tmp")


def test_invalid_value_in_file_rejected(isolated_config):
    (isolated_config / "settings.json").write_text(json.dumps({"batch_threshold": "lots"}))
    with pytest.raises(SettingsError):
        get_setting("batch_threshold")


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_malformed_settings_file_rejected(isolated_config, content):
    (isolated_config / "settings.json").write_text(content)
    with pytest.raises(SettingsError, match="Invalid settings file"):
        load_settings()


def test_env_override_wins(monkeypatch):
    set_setting("remote_base_url", "https://file.example.com")
    monkeypatch.setenv("PAYROLL_CALC_REMOTE_URL", "https://env.example.com")
    assert get_setting("remote_base_url") == "https://env.example.com"


def test_unset_reverts_to_default():
    set_setting("batch_threshold", 10)
    unset_setting("batch_threshold")
    assert get_setting("batch_threshold") == 50
    assert "batch_threshold" not in load_settings()


def test_effective_settings_cover_all_keys():
    assert set(get_effective_settings()) == set(DEFAULT_SETTINGS)


def test_tax_tables_dir(tmp_path):
    assert get_tax_tables_dir() is None
    set_setting("tax_tables_dir", str(tmp_path))
    assert get_tax_tables_dir() == tmp_path
