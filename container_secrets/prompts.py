"""Интерактивные вопросы для недостающих параметров и подтверждений."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Sequence

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from .config import RunOptions
from .preferences import Preferences

logger = logging.getLogger(__name__)

NEW_VALUE_CHOICE = "_new_"


class InteractiveShell:
    """Запрашивает у пользователя то, что не передано флагами."""

    def __init__(
        self,
        console: Console | None = None,
        ask: Callable[..., str] | None = None,
        confirm: Callable[..., bool] | None = None,
    ) -> None:
        self._console = console or Console()
        self._ask = ask or Prompt.ask
        self._confirm = confirm or Confirm.ask

    @staticmethod
    def needs_input(options: RunOptions) -> bool:
        return not (options.file and options.name and options.resource_group)

    def collect_missing(self, options: RunOptions, history: Preferences | None = None) -> RunOptions:
        """Дополняет параметры ответами пользователя."""
        history = history or Preferences()
        use_history = not options.new
        file = options.file or self._ask("📁 Путь к .env файлу", default=".env", console=self._console)
        name = options.name or self._ask_with_history(
            "🔷 Имя Container App",
            history.last_used_app if use_history else [],
            "Ввести новое имя приложения",
        )
        resource_group = options.resource_group or self._ask_with_history(
            "📦 Имя группы ресурсов",
            history.last_used_resource_group if use_history else [],
            "Ввести новую группу ресурсов",
        )
        return replace(options, file=file, name=name, resource_group=resource_group)

    def confirm_plaintext(self) -> bool:
        return self._confirm(
            "⚠️  Переменные окружения будут записаны открытым текстом. Продолжить?",
            default=False,
            console=self._console,
        )

    def confirm_execution(self) -> bool:
        return self._confirm("🚀 Выполнить сгенерированные команды сейчас?", default=False, console=self._console)

    def _ask_with_history(self, message: str, history: Sequence[str], new_label: str) -> str:
        """Предлагает выбрать ранее использованное значение или ввести новое."""
        if not history:
            return self._ask_required(message)
        choices = {str(index): value for index, value in enumerate(history, start=1)}
        new_index = str(len(history) + 1)
        choices[new_index] = NEW_VALUE_CHOICE
        for index, value in choices.items():
            label = new_label if value == NEW_VALUE_CHOICE else f"{escape(value)} [grey50](ранее использовалось)[/grey50]"
            self._console.print(f"  {index}) {label}")
        selected = self._ask(message, choices=list(choices), default="1", console=self._console)
        value = choices.get(selected, NEW_VALUE_CHOICE)
        if value == NEW_VALUE_CHOICE:
            return self._ask_required(message)
        logger.debug("Выбрано ранее использованное значение: %s", value)
        return value

    def _ask_required(self, message: str) -> str:
        """Повторяет вопрос, пока не получен непустой ответ."""
        while True:
            answer = (self._ask(message, console=self._console) or "").strip()
            if answer:
                return answer
            self._console.print("[red]Значение обязательно[/red]")


__all__: Sequence[str] = ("InteractiveShell", "NEW_VALUE_CHOICE")
