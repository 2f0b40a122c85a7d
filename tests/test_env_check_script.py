"""Tests for the environment readiness script."""

from __future__ import annotations

from pathlib import Path

import pytest

from scripts import check_env

MANAGED_ENV_KEYS = [
    "CLIENT_ID",
    "CLIENT_SECRET",
    "REDIRECT_URI",
    "MYSQLHOST",
    "MYSQLUSER",
    "MYSQLPASSWORD",
    "MYSQLDATABASE",
    "MYSQLPORT",
    "FILE_FALLBACK",
    "DEBUG",
    "PORT",
]


def _write_env(env_path: Path, **values: str) -> None:
    contents = "\n".join(f"{key}={value}" for key, value in values.items())
    env_path.write_text(contents + "\n", encoding="utf-8")


@pytest.fixture(autouse=True)
def _clear_managed_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in MANAGED_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
        # The script writes into os.environ; register the key so it is removed afterwards.
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


def test_main_requires_existing_env_file(tmp_path: Path) -> None:
    exit_code = check_env.main(["--env-file", str(tmp_path / ".missing-env")])

    assert exit_code == check_env.EXIT_RUNTIME_ERROR


def test_main_reports_ready_callback(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = tmp_path / ".env"
    _write_env(
        env_file,
        CLIENT_ID="abc",
        CLIENT_SECRET="secret",
        REDIRECT_URI="https://example.com/callback",
        FILE_FALLBACK="true",
    )

    exit_code = check_env.main(["--env-file", str(env_file)])

    assert exit_code == check_env.EXIT_OK
    output = capsys.readouterr().out
    assert "OAuth callback:     ready" in output
    assert "MySQL persistence:  disabled" in output
    assert "File fallback:      enabled" in output


def test_main_hides_database_password(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = tmp_path / ".env"
    _write_env(
        env_file,
        CLIENT_ID="abc",
        CLIENT_SECRET="secret",
        REDIRECT_URI="https://example.com/callback",
        MYSQLHOST="db.internal",
        MYSQLUSER="bot",
        MYSQLPASSWORD="hunter2",
        MYSQLDATABASE="railway",
    )

    exit_code = check_env.main(["--env-file", str(env_file)])

    assert exit_code == check_env.EXIT_OK
    output = capsys.readouterr().out
    assert "MySQL persistence:  configured" in output
    assert "hunter2" not in output


def test_main_flags_incomplete_callback_configuration(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = tmp_path / ".env"
    _write_env(env_file, CLIENT_ID="abc")

    exit_code = check_env.main(["--env-file", str(env_file)])

    assert exit_code == check_env.EXIT_CALLBACK_NOT_CONFIGURED
    assert "NOT READY" in capsys.readouterr().out


def test_main_reports_invalid_values(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    _write_env(env_file, PORT="not-a-port")

    exit_code = check_env.main(["--env-file", str(env_file)])

    assert exit_code == check_env.EXIT_VALIDATION_ERROR
