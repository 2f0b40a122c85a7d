"""
FastAPI application entrypoint for the OAuth callback service.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI

from callback_service.api.routes import router
from callback_service.clients import TokenStore
from callback_service.core.config import AppSettings, get_settings
from callback_service.core.logging import configure_logging


def create_app(
    settings: Optional[AppSettings] = None,
    token_store: Optional[TokenStore] = None,
) -> FastAPI:
    """Factory for the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    store = token_store or TokenStore.from_settings(settings.database)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await store.initialize(settings.database.url())
        try:
            yield
        finally:
            await store.dispose()

    app = FastAPI(
        title="OAuth Callback Service",
        version="0.1.0",
        description="Redeems OAuth authorization codes and stores the resulting tokens.",
        lifespan=lifespan,
    )
    app.state.token_store = store
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on the configured port."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":  # pragma: no cover - script entry point
    run()


__all__ = ["app", "create_app", "run"]
