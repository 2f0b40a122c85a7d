"""Service layer exports."""

from .token_persistence import TokenPersistenceService

__all__ = ["TokenPersistenceService"]
