from __future__ import annotations

from pathlib import Path

import pytest

from callback_service.core.config import (
    AppSettings,
    ConfigurationError,
    DatabaseSettings,
    OAuthSettings,
)

MYSQL_KEYS = ["MYSQLHOST", "MYSQLUSER", "MYSQLPASSWORD", "MYSQLDATABASE", "MYSQLPORT"]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in MYSQL_KEYS + ["PORT", "DEBUG", "FILE_FALLBACK", "FILE_FALLBACK_PATH"]:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults_follow_documented_values(clean_env: pytest.MonkeyPatch) -> None:
    settings = AppSettings()

    assert settings.port == 3000
    assert settings.debug is False
    assert settings.file_fallback is False
    assert settings.file_fallback_path == Path("tokens.log")
    assert settings.database.port == 3306
    assert settings.database.url() is None


def test_flags_are_read_from_environment(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("DEBUG", "true")
    clean_env.setenv("FILE_FALLBACK", "true")

    settings = AppSettings()

    assert settings.port == 8080
    assert settings.debug is True
    assert settings.file_fallback is True


def test_database_url_requires_every_connection_field(
    clean_env: pytest.MonkeyPatch,
) -> None:
    clean_env.setenv("MYSQLHOST", "db.internal")
    clean_env.setenv("MYSQLUSER", "bot")
    clean_env.setenv("MYSQLDATABASE", "railway")

    assert DatabaseSettings().url() is None

    clean_env.setenv("MYSQLPASSWORD", "p@ss")
    url = DatabaseSettings().url()

    assert url is not None
    assert url.drivername == "mysql+aiomysql"
    assert url.host == "db.internal"
    assert url.port == 3306
    assert url.username == "bot"
    assert url.password == "p@ss"
    assert url.database == "railway"


def test_require_credentials_lists_missing_values(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    for key in ("CLIENT_ID", "CLIENT_SECRET", "REDIRECT_URI"):
        monkeypatch.delenv(key, raising=False)

    with pytest.raises(ConfigurationError) as excinfo:
        OAuthSettings(CLIENT_ID="client").require_credentials()

    assert "REDIRECT_URI" in str(excinfo.value)
    assert "CLIENT_SECRET" in str(excinfo.value)
    assert "CLIENT_ID" not in str(excinfo.value)


def test_require_credentials_returns_configured_values() -> None:
    credentials = OAuthSettings(
        CLIENT_ID="client",
        CLIENT_SECRET="secret",
        REDIRECT_URI="https://example.com/callback",
    ).require_credentials()

    assert credentials.client_id == "client"
    assert credentials.client_secret == "secret"
    assert credentials.redirect_uri == "https://example.com/callback"


@pytest.mark.parametrize("value", ["yes", "1", "on", "express:*", "off-please"])
def test_opt_in_flags_only_accept_true(clean_env: pytest.MonkeyPatch, value: str) -> None:
    clean_env.setenv("DEBUG", value)
    clean_env.setenv("FILE_FALLBACK", value)

    settings = AppSettings()

    assert settings.debug is False
    assert settings.file_fallback is False


def test_opt_in_flags_ignore_case_and_whitespace(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("DEBUG", " TRUE ")
    clean_env.setenv("FILE_FALLBACK", "True")

    settings = AppSettings()

    assert settings.debug is True
    assert settings.file_fallback is True
