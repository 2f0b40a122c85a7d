"""
Route exchanged tokens to the database or the local fallback log.
"""

from __future__ import annotations

import logging
from typing import Optional

from callback_service.clients import FileFallbackWriter, TokenStore
from callback_service.models.results import PersistenceResult
from callback_service.schemas import FallbackRecord, TokenPair

logger = logging.getLogger(__name__)


class TokenPersistenceService:
    """Best-effort persistence for tokens obtained by the callback."""

    def __init__(
        self,
        store: TokenStore,
        fallback_writer: Optional[FileFallbackWriter] = None,
    ) -> None:
        self._store = store
        self._fallback = fallback_writer

    async def save(self, user_id: str, tokens: TokenPair) -> PersistenceResult:
        """Persist ``tokens`` for ``user_id``; the outcome never raises."""
        if self._store.enabled:
            return await self._store.upsert_token(
                user_id, tokens.access_token, tokens.refresh_token
            )

        logger.warning("Database not configured; token for user %s was not persisted.", user_id)
        if self._fallback is None:
            return PersistenceResult.skipped()

        record = FallbackRecord(
            user_id=user_id,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
        )
        return await self._fallback.append_record(record)


__all__ = ["TokenPersistenceService"]
