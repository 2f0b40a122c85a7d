"""
Outcome types for best-effort persistence steps.

Persistence and fallback writes never interrupt the OAuth callback: their
failures are reported through ``PersistenceResult`` instead of exceptions.
Errors that must stop a request (bad input, missing configuration, provider
failures) are raised as exceptions by their owners.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PersistenceStatus(str, Enum):
    STORED = "stored"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class PersistenceResult:
    status: PersistenceStatus
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.status is PersistenceStatus.STORED

    @classmethod
    def stored(cls) -> "PersistenceResult":
        return cls(PersistenceStatus.STORED)

    @classmethod
    def skipped(cls) -> "PersistenceResult":
        return cls(PersistenceStatus.SKIPPED)

    @classmethod
    def failed(cls, error: BaseException) -> "PersistenceResult":
        return cls(PersistenceStatus.FAILED, error)


__all__ = ["PersistenceResult", "PersistenceStatus"]
