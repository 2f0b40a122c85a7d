"""Append-only JSON-lines token log used when MySQL is not configured."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from callback_service.models.results import PersistenceResult
from callback_service.schemas import FallbackRecord

logger = logging.getLogger(__name__)


class FallbackWriteError(Exception):
    """Raised internally when a record cannot be appended to the log file."""


class FileFallbackWriter:
    """Write one JSON object per line to a local file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _append_line(self, line: str) -> None:
        if not self._path.parent.exists():
            self._path.parent.mkdir(parents=True, exist_ok=True)
        # One write per record so concurrent appends never split a line.
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(line)

    async def append_record(self, record: FallbackRecord) -> PersistenceResult:
        line = json.dumps(record.model_dump(mode="json")) + "\n"
        try:
            await asyncio.to_thread(self._append_line, line)
        except OSError as exc:
            error = FallbackWriteError(f"Failed to append to {self._path}: {exc}")
            logger.warning("%s", error)
            return PersistenceResult.failed(error)

        logger.info("Token for user %s recorded in %s", record.user_id, self._path)
        return PersistenceResult.stored()


__all__ = ["FallbackWriteError", "FileFallbackWriter"]
