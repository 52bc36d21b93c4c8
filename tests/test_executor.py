from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pytest

from container_secrets.executor import ScriptExecutor, classify_error


@pytest.mark.parametrize(
    ("message", "fragment"),
    [
        ("ERROR: Please run 'az login' to setup account.", "az login"),
        ("bash: az: command not found", "Установите Azure CLI"),
        ("(ResourceNotFound) The Resource 'app' could not be found.", "Проверьте имя Container App"),
        ("(AuthorizationFailed) The client does not have authorization", "назначение ролей"),
    ],
)
def test_classify_error(message: str, fragment: str) -> None:
    hint = classify_error(message)

    assert hint is not None
    assert fragment in hint


def test_classify_unknown_error() -> None:
    assert classify_error("boom") is None


def write_script(path: Path, body: str) -> Path:
    path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    return path


def test_execute_success_marks_executable(tmp_path: Path) -> None:
    script = write_script(tmp_path / "ok.sh", "echo done")

    result = ScriptExecutor().execute(script)

    assert result.success
    assert os.access(script, os.X_OK)


def test_execute_failure_captures_stderr_and_hint(tmp_path: Path) -> None:
    script = write_script(tmp_path / "fail.sh", "echo \"Please run 'az login' to setup account.\" >&2\nexit 1")

    result = ScriptExecutor().execute(script)

    assert not result.success
    assert result.error == "Please run 'az login' to setup account."
    assert result.hint is not None and "az login" in result.hint


def test_execute_uses_injected_runner(tmp_path: Path) -> None:
    script = write_script(tmp_path / "x.sh", "exit 0")
    calls: list[list[str]] = []

    def fake_run(args, **kwargs):  # noqa: ANN001, ANN003
        calls.append(args)
        raise subprocess.CalledProcessError(2, args, output="", stderr="")

    result = ScriptExecutor(run=fake_run).execute(script)

    assert calls == [[str(script.resolve())]]
    assert not result.success
    assert result.error


def test_execute_missing_script(tmp_path: Path) -> None:
    result = ScriptExecutor().execute(tmp_path / "missing.sh")

    assert not result.success
    assert result.error
