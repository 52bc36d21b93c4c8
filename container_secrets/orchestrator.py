"""Основной сценарий обработки .env-файла."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape

from .artifacts import ENVVARS_COMMAND_FILE, SECRETS_COMMAND_FILE, ArtifactBundle, ArtifactWriter
from .config import RunOptions, ToolSettings
from .executor import ExecutionResult, ScriptExecutor
from .models import SKIP_EMPTY, SKIP_EXCLUDED_PREFIX, SKIP_NOT_INCLUDED_PREFIX, NormalizationResult
from .naming import ensure_unique_names
from .parser import process_env_text, read_env_file
from .preferences import Preferences, PreferencesStore
from .prompts import InteractiveShell

logger = logging.getLogger(__name__)


@dataclass
class RunStats:
    """Статистика выполнения запуска."""

    processed: int = 0
    skipped: int = 0
    written: list[Path] = field(default_factory=list)
    executed: int = 0
    failed: int = 0
    cancelled: bool = False

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0


class ProcessingRunner:
    """Проводит .env через разбор, проверку имен, запись файлов и запуск."""

    def __init__(
        self,
        options: RunOptions,
        settings: ToolSettings,
        console: Console | None = None,
        shell: InteractiveShell | None = None,
        store: PreferencesStore | None = None,
        writer: ArtifactWriter | None = None,
        executor: ScriptExecutor | None = None,
    ) -> None:
        self._options = options
        self._settings = settings
        self._console = console or Console()
        self._shell = shell or InteractiveShell(self._console)
        self._store = store or PreferencesStore(settings.preferences_path)
        self._writer = writer or ArtifactWriter(settings.output_dir, settings.cli_binary)
        self._executor = executor or ScriptExecutor()

    def run(self) -> RunStats:
        """Запускает полный цикл обработки."""
        stats = RunStats()
        options = self._prepare_options()

        text = read_env_file(options.file or ".env")
        result = process_env_text(
            text,
            include_prefixes=options.include_prefixes,
            exclude_prefixes=options.exclude_prefixes,
            style=options.secret_name_style,
            secret_prefix=options.secret_prefix,
        )
        ensure_unique_names(result.report)
        stats.processed = len(result.entries)
        stats.skipped = len(result.skipped)

        if options.generate_env_vars and options.env_mode == "plain" and not options.yes:
            if not self._shell.confirm_plaintext():
                self._console.print("[cyan]Отменено.[/cyan]")
                stats.cancelled = True
                return stats

        bundle = ArtifactBundle.build(
            result.entries,
            options.env_mode,
            include_secrets=options.generate_secrets,
            include_env_vars=options.generate_env_vars,
        )
        app_name = options.name or ""
        resource_group = options.resource_group or ""
        stats.written = self._writer.write(bundle, app_name, resource_group)
        self._store.update(app_name, resource_group)

        self._report(result, stats.written)
        if result.has_multiline_values:
            logger.warning(
                "Обнаружены многострочные значения. Если shell-команда не сработает, "
                "используйте JSON-файлы или задайте эти секреты вручную.",
            )

        if not result.entries:
            self._console.print("\n[yellow]Нет обработанных ключей. Делать нечего.[/yellow]")
            return stats

        scripts = [path for path in stats.written if path.suffix == ".sh"]
        if options.yes or self._shell.confirm_execution():
            self._execute(scripts, stats)
        else:
            self._console.print("\n[cyan]📝 Команды можно выполнить позже:[/cyan]")
            for script in scripts:
                self._console.print(f"[grey50]$[/grey50] [green]chmod +x {script.name} && ./{script.name}[/green]")
        return stats

    def _prepare_options(self) -> RunOptions:
        """Проверяет флаги, задает недостающие вопросы и согласует режим env."""
        options = self._options
        options.validate()
        if self._shell.needs_input(options):
            history = self._store.load() if not options.new else Preferences()
            options = self._shell.collect_missing(options, history)
        options, coerced = options.resolve_env_mode()
        if coerced:
            logger.warning("--env-only с --env-mode secretref не сработает без секретов. Используется env-mode plain.")
        return options

    def _execute(self, scripts: Sequence[Path], stats: RunStats) -> None:
        """Выполняет скрипты по очереди; сбой одного не отменяет следующий."""
        for script in scripts:
            outcome = self._executor.execute(script)
            stats.executed += 1
            if outcome.success:
                self._console.print(f"[green]✅ {self._describe(script)}: готово[/green]")
                continue
            stats.failed += 1
            self._report_failure(outcome)
        if not stats.failed:
            self._console.print("\n[green]✅ Azure Container App успешно обновлен[/green]")

    def _report_failure(self, outcome: ExecutionResult) -> None:
        error = escape(outcome.error or "")
        self._console.print(f"\n[red]❌ Не удалось обновить {self._describe(outcome.script)}:[/red] {error}")
        if outcome.hint:
            self._console.print(f"[yellow]👉 {outcome.hint}[/yellow]")

    def _describe(self, script: Path) -> str:
        """Читабельное название группы по имени скрипта."""
        mapping = {
            SECRETS_COMMAND_FILE: "секреты",
            ENVVARS_COMMAND_FILE: "переменные окружения",
        }
        return mapping.get(script.name, script.name)

    def _report(self, result: NormalizationResult, written: Sequence[Path]) -> None:
        """Печатает обработанные и пропущенные ключи и список файлов."""
        self._console.print("\n[cyan]📊 Обработанные ключи:[/cyan]")
        for key in result.processed_keys:
            self._console.print(f"[grey50]•[/grey50] [yellow]{escape(key)}[/yellow]")

        if result.skipped:
            self._console.print("\n[yellow]⚠️  Пропущенные ключи:[/yellow]")
            for key in result.skipped_keys:
                self._console.print(f"[grey50]•[/grey50] [yellow]{escape(key)}[/yellow]")
            counts = result.skip_counts
            self._console.print(
                f"\n[grey50]Пропущено: пустые={counts[SKIP_EMPTY]}, "
                f"исключенные={counts[SKIP_EXCLUDED_PREFIX]}, "
                f"не включенные={counts[SKIP_NOT_INCLUDED_PREFIX]}[/grey50]"
            )

        self._console.print("\n[cyan]📂 Созданные файлы:[/cyan]")
        for path in written:
            kind = "команда Azure CLI" if path.suffix == ".sh" else "формат JSON"
            self._console.print(f"[grey50]•[/grey50] {path.name} [grey50]({kind})[/grey50]")


__all__: Sequence[str] = ("ProcessingRunner", "RunStats")
