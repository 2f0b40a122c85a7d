"""Public schema exports."""

from .auth import FallbackRecord, ProviderProfile, TokenCheckResponse, TokenPair

__all__ = [
    "FallbackRecord",
    "ProviderProfile",
    "TokenCheckResponse",
    "TokenPair",
]
