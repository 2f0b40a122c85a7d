"""
FastAPI routes for the OAuth callback service.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse, PlainTextResponse

from callback_service.clients import OAuthProviderClient, ProviderError, TokenStore
from callback_service.core.config import AppSettings, ConfigurationError
from callback_service.dependencies import (
    get_app_settings,
    get_oauth_client,
    get_token_persistence_service,
    get_token_store,
)
from callback_service.schemas import TokenCheckResponse
from callback_service.services import TokenPersistenceService

router = APIRouter()
logger = logging.getLogger(__name__)


MISSING_CODE_MESSAGE = "Missing authorization code."
MISSING_CONFIG_MESSAGE = "Server OAuth configuration is incomplete."
INVALID_GRANT_MESSAGE = (
    "Invalid or expired authorization code. "
    "Restart the authorization flow and try again."
)
AUTHORIZATION_FAILED_MESSAGE = "Authorization failed. Please try again."

AUTHORIZED_PAGE = """
<html>
  <body style="font-family: sans-serif; text-align: center; padding: 60px; background: #2f3136; color: white;">
    <h2>Authorized!</h2>
    <p>You can now return to Discord and click <strong>"I've authorized, continue"</strong>.</p>
  </body>
</html>
"""


@router.get("/", response_class=PlainTextResponse)
async def liveness() -> str:
    """Simple liveness endpoint for monitoring."""
    return "Callback service online!"


@router.get("/callback", response_class=HTMLResponse, status_code=HTTPStatus.OK)
async def oauth_callback(
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    oauth_client: Annotated[OAuthProviderClient, Depends(get_oauth_client)],
    persistence: Annotated[
        TokenPersistenceService, Depends(get_token_persistence_service)
    ],
    code: str | None = Query(
        default=None, description="Authorization code returned by the provider."
    ),
) -> HTMLResponse:
    """Redeem the authorization code and store the resulting tokens."""
    if not code or not code.strip():
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=MISSING_CODE_MESSAGE)

    try:
        credentials = settings.oauth.require_credentials()
    except ConfigurationError as exc:
        logger.error("OAuth callback unavailable: %s", exc)
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR, detail=MISSING_CONFIG_MESSAGE
        ) from exc

    try:
        tokens = await oauth_client.exchange_code(
            code.strip(),
            client_id=credentials.client_id,
            client_secret=credentials.client_secret,
            redirect_uri=credentials.redirect_uri,
        )
        profile = await oauth_client.fetch_profile(tokens.access_token)
    except ProviderError as exc:
        logger.error("OAuth callback failed (%s): %s", type(exc).__name__, exc.payload)
        if exc.is_invalid_grant:
            raise HTTPException(
                status_code=HTTPStatus.BAD_REQUEST, detail=INVALID_GRANT_MESSAGE
            ) from exc
        detail: Any = AUTHORIZATION_FAILED_MESSAGE
        if settings.debug:
            detail = {"message": AUTHORIZATION_FAILED_MESSAGE, "error": exc.payload}
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR, detail=detail
        ) from exc

    # Storage outcomes are logged by their owners and never change the response.
    await persistence.save(profile.user_id, tokens)

    return HTMLResponse(content=AUTHORIZED_PAGE)


@router.get("/check", response_model=TokenCheckResponse, response_model_by_alias=True)
async def check_token(
    store: Annotated[TokenStore, Depends(get_token_store)],
    user_id: str | None = Query(default=None, description="Provider user identifier."),
) -> TokenCheckResponse:
    """Report whether a token is stored for ``user_id``."""
    if not user_id:
        return TokenCheckResponse(has_token=False)
    try:
        has_token = await store.has_token(user_id)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Token check failed for user %s", user_id)
        has_token = False
    return TokenCheckResponse(has_token=has_token)
