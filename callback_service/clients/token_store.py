"""
Relational storage for OAuth tokens keyed by provider user id.

The store owns a small async SQLAlchemy connection pool. It starts
``UNINITIALIZED`` and settles into ``ENABLED`` or ``DISABLED`` during
``initialize``; every operation checks the state first. Write and lookup
failures are logged and reported, never raised to the caller.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from callback_service.core.config import DatabaseSettings
from callback_service.models.oauth import Base, StoredToken
from callback_service.models.results import PersistenceResult

logger = logging.getLogger(__name__)


class StoreState(str, Enum):
    UNINITIALIZED = "uninitialized"
    ENABLED = "enabled"
    DISABLED = "disabled"


class PersistenceError(Exception):
    """Raised internally when a storage operation cannot be performed."""


class TokenStore:
    """Upsert and look up OAuth tokens in the ``Tokens`` table."""

    def __init__(
        self,
        *,
        pool_size: int = 3,
        pool_timeout: float = 10.0,
        connect_timeout: float = 10.0,
    ) -> None:
        self._pool_size = pool_size
        self._pool_timeout = pool_timeout
        self._connect_timeout = connect_timeout
        self._engine: Optional[AsyncEngine] = None
        self._state = StoreState.UNINITIALIZED

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> "TokenStore":
        return cls(
            pool_size=settings.pool_size,
            pool_timeout=settings.pool_timeout_seconds,
            connect_timeout=settings.connect_timeout_seconds,
        )

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def enabled(self) -> bool:
        return self._state is StoreState.ENABLED

    def _engine_options(self, url: URL) -> dict[str, Any]:
        # SQLite has no server connection to bound or time out.
        if url.get_backend_name() == "sqlite":
            return {}
        options: dict[str, Any] = {
            "pool_size": self._pool_size,
            "max_overflow": 0,
            "pool_timeout": self._pool_timeout,
            "pool_pre_ping": True,
        }
        if url.get_backend_name() == "mysql":
            options["connect_args"] = {"connect_timeout": self._connect_timeout}
        else:
            options["connect_args"] = {"timeout": self._connect_timeout}
        return options

    async def initialize(self, database_url: str | URL | None) -> StoreState:
        """Open the pool and confirm the schema, or settle into ``DISABLED``."""
        if self._state is not StoreState.UNINITIALIZED:
            return self._state

        if database_url is None:
            logger.warning(
                "Database configuration missing; token persistence disabled. "
                "Set MYSQLHOST, MYSQLUSER, MYSQLPASSWORD and MYSQLDATABASE to enable it."
            )
            self._state = StoreState.DISABLED
            return self._state

        url = make_url(database_url)
        try:
            self._engine = create_async_engine(url, **self._engine_options(url))
            await self.ensure_schema()
        except (SQLAlchemyError, OSError, ImportError, PersistenceError):
            logger.exception("Failed to initialize the Tokens table; disabling persistence.")
            await self.dispose()
            self._state = StoreState.DISABLED
            return self._state

        logger.info("Tokens table ready (%s).", url.render_as_string(hide_password=True))
        self._state = StoreState.ENABLED
        return self._state

    async def ensure_schema(self) -> None:
        if self._engine is None:
            raise PersistenceError("No database engine available.")
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    def _upsert_statement(self, values: dict[str, Any]):
        if self._engine is None:
            raise PersistenceError("No database engine available.")
        dialect = self._engine.dialect.name
        if dialect == "mysql":
            stmt = mysql_insert(StoredToken).values(**values)
            return stmt.on_duplicate_key_update(
                access_token=stmt.inserted.access_token,
                refresh_token=stmt.inserted.refresh_token,
                updated_at=func.now(),
            )
        if dialect in ("sqlite", "postgresql"):
            insert = sqlite_insert if dialect == "sqlite" else pg_insert
            stmt = insert(StoredToken).values(**values)
            return stmt.on_conflict_do_update(
                index_elements=["user_id"],
                set_={
                    "access_token": stmt.excluded.access_token,
                    "refresh_token": stmt.excluded.refresh_token,
                    "updated_at": func.now(),
                },
            )
        raise PersistenceError(f"Upsert is not supported for dialect {dialect!r}.")

    async def upsert_token(
        self, user_id: str, access_token: str, refresh_token: Optional[str]
    ) -> PersistenceResult:
        """Insert or overwrite the token pair stored for ``user_id``."""
        if not self.enabled:
            return PersistenceResult.skipped()
        if not user_id or not access_token:
            error = PersistenceError("user_id and access_token are required.")
            logger.error("Refusing to store token: %s", error)
            return PersistenceResult.failed(error)

        values = {
            "user_id": user_id,
            "access_token": access_token,
            "refresh_token": refresh_token or "",
        }
        try:
            stmt = self._upsert_statement(values)
            async with self._engine.begin() as conn:  # type: ignore[union-attr]
                await conn.execute(stmt)
        except (SQLAlchemyError, OSError, PersistenceError) as exc:
            logger.exception("Failed to store token for user %s", user_id)
            return PersistenceResult.failed(exc)

        logger.info("Token stored for user %s", user_id)
        return PersistenceResult.stored()

    async def has_token(self, user_id: Optional[str]) -> bool:
        """Return True iff a token row exists for ``user_id``."""
        if not user_id or not self.enabled or self._engine is None:
            return False

        stmt = select(StoredToken.id).where(StoredToken.user_id == user_id).limit(1)
        try:
            async with self._engine.connect() as conn:  # type: ignore[union-attr]
                row = (await conn.execute(stmt)).first()
        except (SQLAlchemyError, OSError):
            logger.exception("Token lookup failed for user %s", user_id)
            return False
        return row is not None

    async def dispose(self) -> None:
        if self._engine is None:
            return
        try:
            await self._engine.dispose()
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("Failed to close the database pool: %s", exc)
        finally:
            self._engine = None


__all__ = ["PersistenceError", "StoreState", "TokenStore"]
