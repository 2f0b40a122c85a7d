"""
OAuth provider utilities.

These helpers redeem authorization codes and resolve the authenticated user.
Authorization codes are single-use, so every call is attempted exactly once.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from callback_service.core.config import OAuthSettings
from callback_service.schemas import ProviderProfile, TokenPair


class ProviderError(Exception):
    """Raised when the identity provider rejects or fails a request."""

    def __init__(self, payload: Any) -> None:
        super().__init__(payload)
        self.payload = payload

    @property
    def is_invalid_grant(self) -> bool:
        """True when the provider reports the code as invalid or expired."""
        return isinstance(self.payload, dict) and self.payload.get("error") == "invalid_grant"


class ExchangeError(ProviderError):
    """Raised when the token endpoint returns an error."""


class ProfileFetchError(ProviderError):
    """Raised when the profile endpoint returns an error."""


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class OAuthProviderClient:
    """Exchange authorization codes and fetch the authorizing user's profile."""

    def __init__(
        self,
        settings: OAuthSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._settings.timeout_seconds, transport=self._transport
        )

    async def exchange_code(
        self,
        code: str,
        *,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
    ) -> TokenPair:
        """Exchange an authorization code for an access/refresh token pair."""
        payload = {
            "client_id": client_id,
            "client_secret": client_secret,
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
        }

        try:
            async with self._client() as client:
                response = await client.post(self._settings.token_url, data=payload)
        except httpx.HTTPError as exc:
            raise ExchangeError(str(exc)) from exc

        if not response.is_success:
            raise ExchangeError(_decode_body(response))

        token_payload = _decode_body(response)
        if not isinstance(token_payload, dict) or not token_payload.get("access_token"):
            raise ExchangeError("Token payload returned without an access_token.")

        return TokenPair(
            access_token=token_payload["access_token"],
            refresh_token=token_payload.get("refresh_token") or None,
        )

    async def fetch_profile(self, access_token: str) -> ProviderProfile:
        """Resolve the user identifier that owns ``access_token``."""
        headers = {"Authorization": f"Bearer {access_token}"}

        try:
            async with self._client() as client:
                response = await client.get(self._settings.profile_url, headers=headers)
        except httpx.HTTPError as exc:
            raise ProfileFetchError(str(exc)) from exc

        if not response.is_success:
            raise ProfileFetchError(_decode_body(response))

        profile_payload = _decode_body(response)
        user_id = profile_payload.get("id") if isinstance(profile_payload, dict) else None
        if not user_id:
            raise ProfileFetchError("Profile payload returned without an id.")

        return ProviderProfile(user_id=str(user_id))


__all__ = [
    "ExchangeError",
    "OAuthProviderClient",
    "ProfileFetchError",
    "ProviderError",
]
