"""Tests for environment-driven settings."""

from __future__ import annotations

from zoneinfo import ZoneInfo

import pytest

from src.config.settings import DEFAULT_LOGS_ENDPOINT, load_settings

_ENV_VARS = (
    "SQL_TO_LOGSQL_API_URL",
    "LOGS_ENDPOINT",
    "LOGS_BEARER_TOKEN",
    "EXEC_MODE",
    "DISPLAY_TIMEZONE",
    "HTTP_TIMEOUT_S",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's local `.env` out of the tests.
    monkeypatch.chdir(tmp_path)


def test_defaults() -> None:
    settings = load_settings()

    assert settings.api_url == "http://localhost:8080"
    assert settings.logs_endpoint == DEFAULT_LOGS_ENDPOINT
    assert settings.logs_bearer_token == ""
    assert settings.exec_mode == "query"
    assert settings.http_timeout_s is None
    assert settings.tz == ZoneInfo("UTC")


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SQL_TO_LOGSQL_API_URL", "https://sql.example/")
    monkeypatch.setenv("EXEC_MODE", "translate")
    monkeypatch.setenv("DISPLAY_TIMEZONE", "Etc/GMT-2")
    monkeypatch.setenv("HTTP_TIMEOUT_S", "2.5")

    settings = load_settings()

    assert settings.api_url == "https://sql.example"
    assert settings.exec_mode == "translate"
    assert settings.tz == ZoneInfo("Etc/GMT-2")
    assert settings.http_timeout_s == 2.5


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("SQL_TO_LOGSQL_API_URL", "localhost:8080"),
        ("DISPLAY_TIMEZONE", "Mars/Olympus_Mons"),
        ("DISPLAY_TIMEZONE", "America/New_York"),
        ("EXEC_MODE", "explain"),
        ("HTTP_TIMEOUT_S", "0"),
    ],
)
def test_invalid_settings_raise_runtime_error(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(RuntimeError, match="Invalid environment configuration"):
        load_settings()
