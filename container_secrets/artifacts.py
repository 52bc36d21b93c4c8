"""Генерация команд Azure CLI и JSON-копий для секретов и переменных окружения."""

from __future__ import annotations

import json
import logging
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from .models import NormalizedEntry

logger = logging.getLogger(__name__)

SECRETS_COMMAND_FILE = "secrets-command.sh"
SECRETS_JSON_FILE = "secrets.json"
ENVVARS_COMMAND_FILE = "envvars-command.sh"
ENVVARS_JSON_FILE = "envvars.json"

SECRETREF_PREFIX = "secretref:"


class ArtifactWriteError(RuntimeError):
    """Не удалось записать выходные файлы."""

    def __init__(self, path: Path, written: Sequence[Path], reason: OSError) -> None:
        self.path = path
        self.written = list(written)
        message = f"Не удалось записать {path}: {reason}"
        if self.written:
            message += ". Уже записаны: " + ", ".join(item.name for item in self.written)
        super().__init__(message)


def bash_single_quote(value: str) -> str:
    """Оборачивает значение в одинарные кавычки с экранированием вложенных."""
    return "'" + value.replace("'", "'\"'\"'") + "'"


def build_secrets(entries: Iterable[NormalizedEntry]) -> dict[str, str]:
    """Секреты: целевое имя -> значение."""
    return {entry.target_name: entry.value for entry in entries}


def build_env_vars(entries: Iterable[NormalizedEntry], env_mode: str) -> dict[str, str]:
    """Переменные окружения: исходный ключ -> значение или ссылка secretref."""
    if env_mode == "secretref":
        return {entry.key: f"{SECRETREF_PREFIX}{entry.target_name}" for entry in entries}
    return {entry.key: entry.value for entry in entries}


def render_command(
    cli_binary: str,
    operation: Sequence[str],
    app_name: str,
    resource_group: str,
    values_flag: str,
    pairs: Mapping[str, str],
) -> str:
    """Формирует shell-скрипт с вызовом CLI, по одной паре на строку."""
    lines = [
        f"{cli_binary} {' '.join(operation)}",
        f"  --name {shlex.quote(app_name)}",
        f"  --resource-group {shlex.quote(resource_group)}",
        f"  {values_flag}",
    ]
    lines.extend(f"    {key}={bash_single_quote(value)}" for key, value in pairs.items())
    return "#!/usr/bin/env bash\n" + " \\\n".join(lines) + "\n"


def render_json(pairs: Mapping[str, str]) -> str:
    return json.dumps(pairs, ensure_ascii=False, indent=2)


@dataclass
class ArtifactBundle:
    """Содержимое выходных файлов; None означает, что группа не формируется."""

    secrets: dict[str, str] | None = None
    env_vars: dict[str, str] | None = None

    @classmethod
    def build(
        cls,
        entries: Sequence[NormalizedEntry],
        env_mode: str,
        include_secrets: bool = True,
        include_env_vars: bool = True,
    ) -> ArtifactBundle:
        return cls(
            secrets=build_secrets(entries) if include_secrets else None,
            env_vars=build_env_vars(entries, env_mode) if include_env_vars else None,
        )


class ArtifactWriter:
    """Записывает скрипты и JSON в выходной каталог, перезаписывая старые файлы."""

    def __init__(self, output_dir: Path, cli_binary: str = "az") -> None:
        self._output_dir = output_dir
        self._cli_binary = cli_binary

    def write(self, bundle: ArtifactBundle, app_name: str, resource_group: str) -> list[Path]:
        """Записывает файлы и возвращает их пути в порядке записи."""
        written: list[Path] = []
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ArtifactWriteError(self._output_dir, written, exc) from exc
        if bundle.secrets is not None:
            command = render_command(
                self._cli_binary,
                ("containerapp", "secret", "set"),
                app_name,
                resource_group,
                "--secrets",
                bundle.secrets,
            )
            self._write(SECRETS_COMMAND_FILE, command, written)
            self._write(SECRETS_JSON_FILE, render_json(bundle.secrets), written)
        if bundle.env_vars is not None:
            command = render_command(
                self._cli_binary,
                ("containerapp", "update"),
                app_name,
                resource_group,
                "--set-env-vars",
                bundle.env_vars,
            )
            self._write(ENVVARS_COMMAND_FILE, command, written)
            self._write(ENVVARS_JSON_FILE, render_json(bundle.env_vars), written)
        return written

    def _write(self, filename: str, content: str, written: list[Path]) -> None:
        path = self._output_dir / filename
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise ArtifactWriteError(path, written, exc) from exc
        logger.info("Записан файл %s", path)
        written.append(path)


__all__: Sequence[str] = (
    "ArtifactBundle",
    "ArtifactWriteError",
    "ArtifactWriter",
    "ENVVARS_COMMAND_FILE",
    "ENVVARS_JSON_FILE",
    "SECRETREF_PREFIX",
    "SECRETS_COMMAND_FILE",
    "SECRETS_JSON_FILE",
    "bash_single_quote",
    "build_env_vars",
    "build_secrets",
    "render_command",
    "render_json",
)
