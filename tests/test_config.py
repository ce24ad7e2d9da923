"""Tests for integration settings."""

import pytest

from commtrack.config import DEFAULT_SCAN_MODEL, DEFAULT_SHEET_RANGE, Settings
from commtrack.domain.errors import ConfigurationError


def test_defaults():
    settings = Settings.from_env({})

    assert settings.spreadsheet_id is None
    assert settings.sheet_range == DEFAULT_SHEET_RANGE
    assert settings.scan_model == DEFAULT_SCAN_MODEL


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("COMMTRACK_SPREADSHEET_ID", "sheet-id")
    monkeypatch.setenv("COMMTRACK_SHEETS_TOKEN", "token")
    monkeypatch.setenv("COMMTRACK_SHEET_RANGE", "Deals!A2:Z")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("COMMTRACK_SCAN_BASE_URL", "https://openrouter.ai/api/v1")

    settings = Settings.from_env()

    assert settings.require_sheets() == ("sheet-id", "token")
    assert settings.sheet_range == "Deals!A2:Z"
    assert settings.require_openai_key() == "sk-test"
    assert settings.scan_base_url == "https://openrouter.ai/api/v1"


def test_blank_values_count_as_unset():
    settings = Settings.from_env({"COMMTRACK_SPREADSHEET_ID": "  ", "COMMTRACK_SCAN_MODEL": ""})

    assert settings.spreadsheet_id is None
    assert settings.scan_model == DEFAULT_SCAN_MODEL


def test_missing_sheet_settings():
    with pytest.raises(ConfigurationError, match="COMMTRACK_SPREADSHEET_ID"):
        Settings().require_sheets()
    with pytest.raises(ConfigurationError, match="COMMTRACK_SHEETS_TOKEN"):
        Settings(spreadsheet_id="sheet-id").require_sheets()


def test_missing_openai_key():
    with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
        Settings().require_openai_key()
