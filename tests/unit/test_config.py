from pathlib import Path

import pytest

from ops_console.app.config import DEFAULT_BASE_URL, ConsoleSettings


def test_defaults(monkeypatch) -> None:
    for name in ("OPS_BASE_URL", "OPS_PAGE_SIZE", "OPS_PREFERENCES_BACKEND", "OPS_CURRENCY_SYMBOL"):
        monkeypatch.delenv(name, raising=False)

    settings = ConsoleSettings(_env_file=None)

    assert settings.OPS_BASE_URL == DEFAULT_BASE_URL
    assert settings.OPS_PAGE_SIZE == 50
    assert settings.OPS_CURRENCY_SYMBOL == "₱"
    assert settings.OPS_PREFERENCES_BACKEND == "file"
    assert settings.OPS_ACCESS_TOKEN is None


def test_environment_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("OPS_BASE_URL", "https://ops.example.com/api/")
    monkeypatch.setenv("OPS_PAGE_SIZE", "25")
    monkeypatch.setenv("OPS_PREFERENCES_BACKEND", "remote")
    monkeypatch.setenv("OPS_PREFERENCES_PATH", str(tmp_path / "prefs.json"))

    settings = ConsoleSettings(_env_file=None)

    assert settings.OPS_BASE_URL == "https://ops.example.com/api"
    assert settings.OPS_PAGE_SIZE == 25
    assert settings.OPS_PREFERENCES_BACKEND == "remote"
    assert settings.preferences_path == Path(tmp_path / "prefs.json")


@pytest.mark.parametrize(
    "overrides",
    [
        {"OPS_BASE_URL": "  "},
        {"OPS_TIMEOUT_SECONDS": 0},
        {"OPS_RETRY_MAX_ATTEMPTS": 0},
        {"OPS_RETRY_BACKOFF_MS": -1},
        {"OPS_PAGE_SIZE": 0},
        {"OPS_PREFERENCES_BACKEND": "redis"},
        {"OPS_LOG_LEVEL": "chatty"},
    ],
)
def test_invalid_settings_raise_value_error(overrides) -> None:
    with pytest.raises(ValueError):
        ConsoleSettings(_env_file=None, **overrides)


def test_log_level_is_case_insensitive(monkeypatch) -> None:
    monkeypatch.setenv("OPS_LOG_LEVEL", " debug ")

    assert ConsoleSettings(_env_file=None).OPS_LOG_LEVEL == "DEBUG"
