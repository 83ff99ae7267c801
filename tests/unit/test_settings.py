from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from folio.exceptions import SettingsError
from folio.settings import Settings, get_settings


def test_settings_load_from_env_file(tmp_path: Path, monkeypatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "APP_ENV=test\nLOG_LEVEL=debug\nLOG_JSON=true\nFOLIO_CONFIG=docs/folio.yaml\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    for name in ("APP_ENV", "LOG_LEVEL", "LOG_JSON", "FOLIO_CONFIG"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()

    assert settings.app_env == "test"
    assert settings.log_level == "DEBUG"
    assert settings.log_json is True
    assert settings.config_path == Path("docs/folio.yaml")


def test_settings_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("APP_ENV", "LOG_LEVEL", "LOG_JSON", "LOG_FILE", "FOLIO_CONFIG"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()

    assert settings.log_level == "WARNING"
    assert settings.log_json is False
    assert settings.config_path is None


def test_settings_rejects_unknown_log_level(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError, match="LOG_LEVEL must be one of"):
        Settings()


def test_get_settings_uses_environment(monkeypatch) -> None:
    get_settings.cache_clear()
    monkeypatch.setenv("APP_ENV", "ci")

    settings = get_settings()
    assert settings.app_env == "ci"

    get_settings.cache_clear()


def test_get_settings_wraps_validation_errors(monkeypatch) -> None:
    get_settings.cache_clear()
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    with pytest.raises(SettingsError, match="LOG_LEVEL must be one of"):
        get_settings()

    get_settings.cache_clear()
