"""Запуск сгенерированных скриптов."""

from __future__ import annotations

import logging
import stat
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

logger = logging.getLogger(__name__)

_HINTS: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("az login", "not logged in", "please run 'az login'"),
        "Выполните вход в Azure CLI: az login",
    ),
    (
        ("command not found", "no such file or directory"),
        "Установите Azure CLI и убедитесь, что он доступен в PATH",
    ),
    (
        ("resourcenotfound", "could not be found", "was not found"),
        "Проверьте имя Container App и группы ресурсов",
    ),
    (
        ("authorizationfailed", "does not have authorization"),
        "Проверьте назначение ролей для текущей учетной записи",
    ),
)


@dataclass
class ExecutionResult:
    """Результат запуска одного скрипта."""

    script: Path
    success: bool
    error: str | None = None
    hint: str | None = None


def classify_error(message: str) -> str | None:
    """Подбирает подсказку по тексту ошибки."""
    lowered = message.lower()
    for markers, hint in _HINTS:
        if any(marker in lowered for marker in markers):
            return hint
    return None


def make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


class ScriptExecutor:
    """Делает скрипт исполняемым и запускает его без повторных попыток."""

    def __init__(self, run: Callable[..., subprocess.CompletedProcess[str]] | None = None) -> None:
        self._run = run or subprocess.run

    def execute(self, script: Path) -> ExecutionResult:
        """Запускает скрипт и возвращает результат вместо исключения."""
        try:
            make_executable(script)
            completed = self._run(
                [str(script.resolve())],
                check=True,
                capture_output=True,
                text=True,
                cwd=script.parent,
            )
        except subprocess.CalledProcessError as exc:
            error = (exc.stderr or "").strip() or (exc.stdout or "").strip() or str(exc)
            return self._failure(script, error)
        except OSError as exc:
            return self._failure(script, str(exc))
        if completed.stdout:
            logger.debug("Вывод %s: %s", script.name, completed.stdout.strip())
        logger.info("Скрипт %s выполнен", script.name)
        return ExecutionResult(script=script, success=True)

    def _failure(self, script: Path, error: str) -> ExecutionResult:
        logger.debug("Ошибка выполнения %s: %s", script.name, error)
        return ExecutionResult(script=script, success=False, error=error, hint=classify_error(error))


__all__: Sequence[str] = ("ExecutionResult", "ScriptExecutor", "classify_error", "make_executable")
