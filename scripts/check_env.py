"""Utility for verifying the callback service's environment configuration.

The tool loads the supplied ``.env`` file, instantiates ``AppSettings`` to
surface malformed values, and reports which features the service will run
with: the OAuth callback itself, MySQL persistence, the file fallback and
debug error bodies.

Example usage::

    python -m scripts.check_env --env-file /srv/callback/.env
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from callback_service.core.config import AppSettings, ConfigurationError, _load_env_file

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_CALLBACK_NOT_CONFIGURED = 4
EXIT_RUNTIME_ERROR = 5


def _load_settings(env_file: Path) -> AppSettings:
    """Load ``env_file`` into the process environment and build settings."""
    _load_env_file(str(env_file))
    return AppSettings()


def _ensure_env_file(env_file: Path) -> None:
    if not env_file.exists():
        raise FileNotFoundError(
            f"Environment file {env_file} does not exist. "
            "Ensure the path is correct or create it before running this tool."
        )


def _report(settings: AppSettings) -> int:
    """Print the feature summary and return the matching exit code."""
    exit_code = EXIT_OK
    try:
        settings.oauth.require_credentials()
        print("OAuth callback:     ready")
    except ConfigurationError as exc:
        print(f"OAuth callback:     NOT READY ({exc})")
        exit_code = EXIT_CALLBACK_NOT_CONFIGURED

    database_url = settings.database.url()
    if database_url is None:
        print("MySQL persistence:  disabled (MYSQLHOST/USER/PASSWORD/DATABASE unset)")
    else:
        print(
            "MySQL persistence:  configured "
            f"({database_url.render_as_string(hide_password=True)})"
        )

    if settings.file_fallback and database_url is None:
        print(f"File fallback:      enabled ({settings.file_fallback_path})")
    elif settings.file_fallback:
        print("File fallback:      enabled but unused while MySQL is configured")
    else:
        print("File fallback:      disabled")

    if settings.debug:
        print("Debug mode:         ON - provider errors are returned to clients")
    return exit_code


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate callback service settings and summarize enabled features."
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        type=Path,
        help="Path to the environment file (default: .env in the repo root).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    env_file: Path = args.env_file

    try:
        _ensure_env_file(env_file)
        settings = _load_settings(env_file)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Unexpected error during validation: {exc}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    return _report(settings)


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
