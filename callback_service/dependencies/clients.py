"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request

from callback_service.clients import FileFallbackWriter, OAuthProviderClient, TokenStore
from callback_service.core.config import AppSettings
from callback_service.services import TokenPersistenceService

from .config import get_app_settings


def get_token_store(request: Request) -> TokenStore:
    """Return the store constructed by the application factory."""
    return request.app.state.token_store


def get_oauth_client(
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> OAuthProviderClient:
    """Provide a provider client bound to the configured endpoints."""
    return OAuthProviderClient(settings.oauth)


def get_fallback_writer(
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> Optional[FileFallbackWriter]:
    """Provide the file fallback writer when FILE_FALLBACK is enabled."""
    if not settings.file_fallback:
        return None
    return FileFallbackWriter(settings.file_fallback_path)


def get_token_persistence_service(
    store: Annotated[TokenStore, Depends(get_token_store)],
    fallback_writer: Annotated[
        Optional[FileFallbackWriter], Depends(get_fallback_writer)
    ],
) -> TokenPersistenceService:
    """Build the persistence policy around the shared store."""
    return TokenPersistenceService(store=store, fallback_writer=fallback_writer)


__all__ = [
    "get_fallback_writer",
    "get_oauth_client",
    "get_token_persistence_service",
    "get_token_store",
]
