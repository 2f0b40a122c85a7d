"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI routes, the storage adapter
and the diagnostic scripts share a consistent configuration surface.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class ConfigurationError(Exception):
    """Raised when configuration required by an operation is absent."""


@dataclass(frozen=True)
class OAuthCredentials:
    """Client credentials required to redeem an authorization code."""

    client_id: str
    client_secret: str
    redirect_uri: str


class OAuthSettings(BaseSettings):
    """Configuration for the identity provider's OAuth endpoints."""

    model_config = SettingsConfigDict(env_ignore_empty=True, populate_by_name=True)

    client_id: Optional[str] = Field(None, validation_alias="CLIENT_ID")
    client_secret: Optional[str] = Field(None, validation_alias="CLIENT_SECRET")
    redirect_uri: Optional[str] = Field(None, validation_alias="REDIRECT_URI")
    token_url: str = Field(
        "https://discord.com/api/oauth2/token",
        validation_alias="OAUTH_TOKEN_URL",
    )
    profile_url: str = Field(
        "https://discord.com/api/users/@me",
        validation_alias="OAUTH_PROFILE_URL",
    )
    timeout_seconds: float = Field(10.0, validation_alias="OAUTH_TIMEOUT_SECONDS")

    def require_credentials(self) -> OAuthCredentials:
        """Return the callback credentials or raise when any is missing."""
        missing = [
            name
            for name, value in (
                ("REDIRECT_URI", self.redirect_uri),
                ("CLIENT_ID", self.client_id),
                ("CLIENT_SECRET", self.client_secret),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Missing OAuth configuration: {', '.join(missing)}"
            )
        return OAuthCredentials(
            client_id=self.client_id,  # type: ignore[arg-type]
            client_secret=self.client_secret,  # type: ignore[arg-type]
            redirect_uri=self.redirect_uri,  # type: ignore[arg-type]
        )


class DatabaseSettings(BaseSettings):
    """Connection settings for the MySQL token table."""

    model_config = SettingsConfigDict(env_ignore_empty=True, populate_by_name=True)

    host: Optional[str] = Field(None, validation_alias="MYSQLHOST")
    user: Optional[str] = Field(None, validation_alias="MYSQLUSER")
    password: Optional[str] = Field(None, validation_alias="MYSQLPASSWORD")
    database: Optional[str] = Field(None, validation_alias="MYSQLDATABASE")
    port: int = Field(3306, validation_alias="MYSQLPORT")
    driver: str = Field("mysql+aiomysql", validation_alias="MYSQL_DRIVER")
    pool_size: int = Field(3, validation_alias="MYSQL_POOL_SIZE")
    pool_timeout_seconds: float = Field(10.0, validation_alias="MYSQL_POOL_TIMEOUT")
    connect_timeout_seconds: float = Field(
        10.0, validation_alias="MYSQL_CONNECT_TIMEOUT"
    )

    @property
    def is_configured(self) -> bool:
        return all((self.host, self.user, self.password, self.database))

    def url(self) -> URL | None:
        """Build the SQLAlchemy URL, or ``None`` when persistence is not configured."""
        if not self.is_configured:
            return None
        return URL.create(
            self.driver,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(env_ignore_empty=True, populate_by_name=True)

    host: str = Field("0.0.0.0", validation_alias="HOST")
    port: int = Field(3000, validation_alias="PORT")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    debug: bool = Field(
        False,
        validation_alias="DEBUG",
        description="Include provider error bodies in 500 responses. Local use only.",
    )
    file_fallback: bool = Field(
        False,
        validation_alias="FILE_FALLBACK",
        description="Append tokens to a local file when MySQL is not configured.",
    )
    file_fallback_path: Path = Field(
        Path("tokens.log"), validation_alias="FILE_FALLBACK_PATH"
    )
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)

    @field_validator("debug", "file_fallback", mode="before")
    @classmethod
    def _parse_opt_in_flag(cls, value: object) -> bool:
        """Only the literal ``true`` opts in; any other value leaves the flag off."""
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() == "true"


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()


__all__ = [
    "AppSettings",
    "ConfigurationError",
    "DatabaseSettings",
    "OAuthCredentials",
    "OAuthSettings",
    "get_settings",
]
