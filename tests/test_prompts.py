from __future__ import annotations

import io
from typing import Any

from rich.console import Console

from container_secrets.config import RunOptions
from container_secrets.preferences import Preferences
from container_secrets.prompts import InteractiveShell


class ScriptedAnswers:
    def __init__(self, answers: list[str]) -> None:
        self._answers = list(answers)
        self.questions: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, message: str, **kwargs: Any) -> str:
        self.questions.append((message, kwargs))
        return self._answers.pop(0)


def make_shell(answers: list[str], confirm: bool = True) -> tuple[InteractiveShell, ScriptedAnswers]:
    ask = ScriptedAnswers(answers)
    console = Console(file=io.StringIO())
    return InteractiveShell(console, ask=ask, confirm=lambda *args, **kwargs: confirm), ask


def test_no_questions_when_flags_given() -> None:
    options = RunOptions(file=".env", name="app", resource_group="rg")
    shell, ask = make_shell([])

    assert not shell.needs_input(options)
    assert shell.collect_missing(options) == options
    assert ask.questions == []


def test_free_text_without_history() -> None:
    shell, ask = make_shell(["custom.env", "", "my-app", "my-rg"])

    options = shell.collect_missing(RunOptions())

    assert (options.file, options.name, options.resource_group) == ("custom.env", "my-app", "my-rg")
    assert ask.questions[0][1]["default"] == ".env"
    assert len(ask.questions) == 4


def test_history_selection_and_new_value() -> None:
    history = Preferences(last_used_app=["app1", "app2"], last_used_resource_group=["rg1"])
    shell, ask = make_shell(["2", "2", "rg-new"])

    options = shell.collect_missing(RunOptions(file=".env"), history)

    assert options.name == "app2"
    assert options.resource_group == "rg-new"
    assert ask.questions[0][1]["choices"] == ["1", "2", "3"]
    assert ask.questions[1][1]["choices"] == ["1", "2"]


def test_new_flag_ignores_history() -> None:
    history = Preferences(last_used_app=["app1"], last_used_resource_group=["rg1"])
    shell, ask = make_shell(["fresh-app", "fresh-rg"])

    options = shell.collect_missing(RunOptions(file=".env", new=True), history)

    assert (options.name, options.resource_group) == ("fresh-app", "fresh-rg")
    assert all("choices" not in kwargs for _, kwargs in ask.questions)


def test_confirmations_delegate_to_confirm() -> None:
    shell, _ = make_shell([], confirm=False)

    assert not shell.confirm_plaintext()
    assert not shell.confirm_execution()


def test_history_values_are_shown_literally() -> None:
    output = io.StringIO()
    ask = ScriptedAnswers(["1"])
    shell = InteractiveShell(Console(file=output, width=120), ask=ask, confirm=lambda *args, **kwargs: True)
    history = Preferences(last_used_app=["team[prod]"], last_used_resource_group=[])

    name = shell._ask_with_history("App", history.last_used_app, "new")

    assert name == "team[prod]"
    assert "team[prod]" in output.getvalue()
