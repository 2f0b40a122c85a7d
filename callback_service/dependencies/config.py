"""
Settings provider shared by the FastAPI routes.

Routes resolve settings through ``get_app_settings`` so tests can swap in an
explicit ``AppSettings`` via ``app.dependency_overrides``.
"""

from callback_service.core.config import AppSettings, get_settings


def get_app_settings() -> AppSettings:
    """Return the process-wide (cached) settings for the callback routes."""
    return get_settings()


__all__ = ["get_app_settings"]
