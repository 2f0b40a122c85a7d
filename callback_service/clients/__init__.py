"""Expose constructed client wrappers."""

from .file_fallback import FileFallbackWriter
from .oauth_provider import (
    ExchangeError,
    OAuthProviderClient,
    ProfileFetchError,
    ProviderError,
)
from .token_store import StoreState, TokenStore

__all__ = [
    "ExchangeError",
    "FileFallbackWriter",
    "OAuthProviderClient",
    "ProfileFetchError",
    "ProviderError",
    "StoreState",
    "TokenStore",
]
