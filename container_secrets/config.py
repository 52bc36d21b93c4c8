"""Загрузка настроек инструмента и параметров запуска."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv

SECRET_NAME_STYLES: tuple[str, ...] = ("kebab-lower", "lower", "preserve")
ENV_MODES: tuple[str, ...] = ("secretref", "plain")
DEFAULT_EXCLUDE_PREFIX = "TF_VAR_"
DEFAULT_HOME = "~/.azure-container-secrets"


class ConfigurationError(ValueError):
    """Некорректная комбинация параметров запуска."""


@dataclass(frozen=True)
class ToolSettings:
    """Настройки инструмента, не зависящие от конкретного запуска."""

    home_dir: Path
    cli_binary: str = "az"
    output_dir: Path = Path(".")
    log_level: str = "WARNING"

    @property
    def preferences_path(self) -> Path:
        return self.home_dir / "config.json"


@dataclass(frozen=True)
class RunOptions:
    """Параметры одного запуска (флаги CLI и ответы на вопросы)."""

    file: str | None = None
    name: str | None = None
    resource_group: str | None = None
    yes: bool = False
    new: bool = False
    include_prefixes: tuple[str, ...] = ()
    exclude_prefixes: tuple[str, ...] = field(default=(DEFAULT_EXCLUDE_PREFIX,))
    secret_name_style: str = "kebab-lower"
    secret_prefix: str | None = None
    secrets_only: bool = False
    env_only: bool = False
    env_mode: str = "secretref"

    @property
    def generate_secrets(self) -> bool:
        return not self.env_only

    @property
    def generate_env_vars(self) -> bool:
        return not self.secrets_only

    def validate(self) -> None:
        """Проверяет значения перечислений и взаимоисключающие флаги."""
        if self.secret_name_style not in SECRET_NAME_STYLES:
            raise ConfigurationError(
                f"Недопустимый --secret-name-style '{self.secret_name_style}'. "
                f"Используйте: {', '.join(SECRET_NAME_STYLES)}"
            )
        if self.env_mode not in ENV_MODES:
            raise ConfigurationError(
                f"Недопустимый --env-mode '{self.env_mode}'. Используйте: {', '.join(ENV_MODES)}"
            )
        if self.secrets_only and self.env_only:
            raise ConfigurationError("Нельзя использовать --secrets-only и --env-only одновременно")

    def resolve_env_mode(self) -> tuple[RunOptions, bool]:
        """Переводит env-only + secretref в plain: ссылаться будет не на что.

        Возвращает итоговые параметры и признак того, что режим был изменен.
        """
        if self.env_only and self.env_mode == "secretref":
            return replace(self, env_mode="plain"), True
        return self, False


def _home_dir() -> Path:
    """Каталог инструмента с учетом переопределения через окружение."""
    return Path(os.getenv("CONTAINER_SECRETS_HOME", DEFAULT_HOME)).expanduser()


def load_settings(dotenv_path: str | os.PathLike[str] | None = None) -> ToolSettings:
    """Загружает настройки из окружения и settings.env в каталоге инструмента.

    Значения из входного .env пользователя в окружение процесса не попадают.
    """
    home_dir = _home_dir()
    load_dotenv(dotenv_path or home_dir / "settings.env", override=False)

    return ToolSettings(
        home_dir=home_dir,
        cli_binary=os.getenv("CONTAINER_SECRETS_CLI", "az"),
        output_dir=Path(os.getenv("CONTAINER_SECRETS_OUTPUT_DIR", ".")).expanduser(),
        log_level=os.getenv("CONTAINER_SECRETS_LOG_LEVEL", "WARNING"),
    )


__all__: Sequence[str] = (
    "ConfigurationError",
    "DEFAULT_EXCLUDE_PREFIX",
    "ENV_MODES",
    "RunOptions",
    "SECRET_NAME_STYLES",
    "ToolSettings",
    "load_settings",
)
