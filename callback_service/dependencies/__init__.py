"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_fallback_writer,
    get_oauth_client,
    get_token_persistence_service,
    get_token_store,
)
from .config import get_app_settings

__all__ = [
    "get_app_settings",
    "get_fallback_writer",
    "get_oauth_client",
    "get_token_persistence_service",
    "get_token_store",
]
