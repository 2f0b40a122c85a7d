from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from callback_service.clients.file_fallback import FallbackWriteError, FileFallbackWriter
from callback_service.models.results import PersistenceStatus
from callback_service.schemas import FallbackRecord


@pytest.mark.anyio
async def test_append_record_writes_one_json_line_per_call(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "tokens.log"
    writer = FileFallbackWriter(log_path)
    created_at = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

    first = await writer.append_record(
        FallbackRecord(
            created_at=created_at, user_id="U1", access_token="T1", refresh_token="R1"
        )
    )
    second = await writer.append_record(FallbackRecord(user_id="U2", access_token="T2"))

    assert first.ok and second.ok
    lines = log_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert json.loads(lines[0]) == {
        "created_at": "2024-05-01T12:30:00Z",
        "user_id": "U1",
        "access_token": "T1",
        "refresh_token": "R1",
    }
    second_record = json.loads(lines[1])
    assert list(second_record) == ["created_at", "user_id", "access_token", "refresh_token"]
    assert second_record["refresh_token"] is None


@pytest.mark.anyio
async def test_append_record_failure_is_reported(tmp_path: Path) -> None:
    writer = FileFallbackWriter(tmp_path)

    result = await writer.append_record(FallbackRecord(user_id="U1", access_token="T1"))

    assert result.status is PersistenceStatus.FAILED
    assert isinstance(result.error, FallbackWriteError)
