"""Точка входа CLI container-secrets."""

from __future__ import annotations

import argparse
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from . import __version__
from .artifacts import ArtifactWriteError
from .config import DEFAULT_EXCLUDE_PREFIX, ENV_MODES, SECRET_NAME_STYLES, ConfigurationError, RunOptions, load_settings
from .logging_utils import setup_logging
from .naming import NameCollisionError
from .orchestrator import ProcessingRunner
from .parser import InputFileError


def build_parser() -> argparse.ArgumentParser:
    """Описывает флаги командной строки."""
    parser = argparse.ArgumentParser(
        prog="container-secrets",
        description="Обработка .env файлов для секретов и переменных окружения Azure Container Apps",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-f", "--file", help="Путь к .env файлу")
    parser.add_argument("-n", "--name", help="Имя Container App")
    parser.add_argument("-g", "--resource-group", help="Имя группы ресурсов")
    parser.add_argument("-y", "--yes", action="store_true", help="Не задавать подтверждений и выполнить команды")
    parser.add_argument("--new", action="store_true", help="Игнорировать сохраненные значения и спросить новые")
    parser.add_argument(
        "--include-prefix",
        action="append",
        default=[],
        metavar="PREFIX",
        help="Брать только ключи с этим префиксом (можно повторять)",
    )
    parser.add_argument(
        "--exclude-prefix",
        action="append",
        default=[],
        metavar="PREFIX",
        help=f"Исключить ключи с этим префиксом (можно повторять, {DEFAULT_EXCLUDE_PREFIX} исключается всегда)",
    )
    parser.add_argument(
        "--secret-name-style",
        choices=SECRET_NAME_STYLES,
        default="kebab-lower",
        help="Стиль имен секретов",
    )
    parser.add_argument("--secret-prefix", help="Префикс для всех имен секретов")
    only = parser.add_mutually_exclusive_group()
    only.add_argument("--secrets-only", action="store_true", help="Только секреты (без переменных окружения)")
    only.add_argument("--env-only", action="store_true", help="Только переменные окружения (без секретов)")
    parser.add_argument(
        "--env-mode",
        choices=ENV_MODES,
        default="secretref",
        help="Значения переменных окружения: ссылка на секрет или открытый текст",
    )
    return parser


def options_from_args(args: argparse.Namespace) -> RunOptions:
    """Преобразует результат argparse в параметры запуска."""
    excludes = [DEFAULT_EXCLUDE_PREFIX]
    excludes.extend(prefix for prefix in args.exclude_prefix if prefix not in excludes)
    return RunOptions(
        file=args.file,
        name=args.name,
        resource_group=args.resource_group,
        yes=args.yes,
        new=args.new,
        include_prefixes=tuple(args.include_prefix),
        exclude_prefixes=tuple(excludes),
        secret_name_style=args.secret_name_style,
        secret_prefix=args.secret_prefix,
        secrets_only=args.secrets_only,
        env_only=args.env_only,
        env_mode=args.env_mode,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Запускает обработку и возвращает код завершения."""
    args = build_parser().parse_args(argv)
    settings = load_settings()
    setup_logging(settings.log_level)

    console = Console()
    console.print(Panel.fit("[blue]Azure Container Apps: секреты и переменные окружения[/blue]", border_style="blue"))

    try:
        stats = ProcessingRunner(options_from_args(args), settings, console=console).run()
    except (ConfigurationError, InputFileError, ArtifactWriteError) as exc:
        console.print(f"[red]❌ {escape(str(exc))}[/red]")
        return 1
    except NameCollisionError as exc:
        console.print("[red]Обнаружены коллизии имен секретов:[/red]")
        for line in exc.report.describe():
            console.print(f"[red]  {escape(line)}[/red]")
        console.print(
            "\n[yellow]👉 Используйте --secret-prefix или --secret-name-style preserve, чтобы устранить коллизии.[/yellow]"
        )
        return 1
    except KeyboardInterrupt:
        console.print("\n[cyan]Прервано.[/cyan]")
        return 130
    return stats.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
