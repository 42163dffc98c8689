"""Tests for the environment verification script."""

from __future__ import annotations

from pathlib import Path

import pytest

from scripts import check_env

MANAGED_ENV_KEYS = [
    "APP_ENV",
    "APP_LOG_LEVEL",
    "SESSION_COOKIE_SECURE",
    "SESSION_COOKIE_SAMESITE",
    "SESSION_COOKIE_PATH",
    "SESSION_SWEEP_ON_LOGIN",
    "TEACHER_EMAIL",
    "TEACHER_PASSWORD",
    "TEACHER_NAME",
]


def _write_env(env_path: Path, **values: str) -> None:
    contents = "\n".join(f"{key}={value}" for key, value in values.items())
    env_path.write_text(contents + "\n", encoding="utf-8")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so monkeypatch removes whatever the loader writes later.
    for key in MANAGED_ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


@pytest.mark.parametrize("command", ["record", "verify", "check"])
def test_main_requires_existing_env_file(tmp_path: Path, command: str) -> None:
    env_file = tmp_path / ".missing-env"
    argv = [command, "--env-file", str(env_file)]
    if command != "check":
        argv.extend(["--hash-file", str(tmp_path / ".env.sha256")])

    assert check_env.main(argv) == check_env.EXIT_RUNTIME_ERROR


def test_check_accepts_development_defaults(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    _write_env(env_file, APP_ENV="development")

    assert check_env.main(["check", "--env-file", str(env_file)]) == check_env.EXIT_OK


def test_record_and_verify_detects_mismatched_checksum(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"
    hash_file = tmp_path / ".env.sha256"
    _write_env(env_file, APP_ENV="development", TEACHER_NAME="Ms Frizzle")

    argv = ["--env-file", str(env_file), "--hash-file", str(hash_file)]
    assert check_env.main(["record", *argv]) == check_env.EXIT_OK
    assert hash_file.read_text(encoding="utf-8").strip()
    assert check_env.main(["verify", *argv]) == check_env.EXIT_OK

    _write_env(env_file, APP_ENV="development", TEACHER_NAME="Mr Keating")
    assert check_env.main(["verify", *argv]) == check_env.EXIT_CHECKSUM_ERROR


def test_verify_without_baseline(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    _write_env(env_file, APP_ENV="development")

    exit_code = check_env.main(
        ["verify", "--env-file", str(env_file), "--hash-file", str(tmp_path / "nope")]
    )
    assert exit_code == check_env.EXIT_RUNTIME_ERROR


@pytest.mark.parametrize(
    "values",
    [
        {"APP_LOG_LEVEL": "CHATTY"},
        {"SESSION_COOKIE_SAMESITE": "sideways"},
    ],
)
def test_validation_failure_for_invalid_values(tmp_path: Path, values: dict) -> None:
    env_file = tmp_path / ".env"
    _write_env(env_file, **values)

    exit_code = check_env.main(["check", "--env-file", str(env_file)])
    assert exit_code == check_env.EXIT_VALIDATION_ERROR


def test_production_rejects_default_password(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    _write_env(env_file, APP_ENV="production")

    exit_code = check_env.main(["check", "--env-file", str(env_file)])
    assert exit_code == check_env.EXIT_INSECURE_CONFIG


def test_production_rejects_insecure_cookies(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    _write_env(
        env_file,
        APP_ENV="production",
        TEACHER_PASSWORD="a-much-better-secret!",
        SESSION_COOKIE_SECURE="false",
    )

    exit_code = check_env.main(["check", "--env-file", str(env_file)])
    assert exit_code == check_env.EXIT_INSECURE_CONFIG


def test_production_with_overrides_passes(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    _write_env(env_file, APP_ENV="production", TEACHER_PASSWORD="a-much-better-secret!")

    assert check_env.main(["check", "--env-file", str(env_file)]) == check_env.EXIT_OK


def test_samesite_none_without_secure_is_reported_once(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = tmp_path / ".env"
    _write_env(
        env_file,
        APP_ENV="production",
        TEACHER_PASSWORD="a-much-better-secret!",
        SESSION_COOKIE_SECURE="false",
        SESSION_COOKIE_SAMESITE="none",
    )

    exit_code = check_env.main(["check", "--env-file", str(env_file)])

    assert exit_code == check_env.EXIT_INSECURE_CONFIG
    err = capsys.readouterr().err
    assert "SameSite=None cookies require the Secure flag." in err
    assert "SESSION_COOKIE_SECURE is disabled" not in err


def test_insecure_cookie_flag_reported_for_strict_samesite(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = tmp_path / ".env"
    _write_env(
        env_file,
        APP_ENV="production",
        TEACHER_PASSWORD="a-much-better-secret!",
        SESSION_COOKIE_SECURE="false",
    )

    assert check_env.main(["check", "--env-file", str(env_file)]) == check_env.EXIT_INSECURE_CONFIG
    err = capsys.readouterr().err
    assert "SESSION_COOKIE_SECURE is disabled in production." in err
    assert "SameSite=None" not in err
