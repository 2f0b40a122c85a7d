"""Schemas related to OAuth flows."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenPair(BaseModel):
    """Credentials returned by the provider's token endpoint."""

    access_token: str = Field(..., min_length=1)
    refresh_token: Optional[str] = None


class ProviderProfile(BaseModel):
    """Subset of the provider's identity payload used to key stored tokens."""

    user_id: str = Field(..., min_length=1)


class FallbackRecord(BaseModel):
    """Line written to the local token log when MySQL is unavailable."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str
    access_token: str
    refresh_token: Optional[str] = None


class TokenCheckResponse(BaseModel):
    """Answer to ``GET /check``."""

    model_config = ConfigDict(populate_by_name=True)

    has_token: bool = Field(False, alias="hasToken")


__all__ = ["FallbackRecord", "ProviderProfile", "TokenCheckResponse", "TokenPair"]
