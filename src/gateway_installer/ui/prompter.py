"""Interactive terminal implementation of ``WizardIO``.

File: src/gateway_installer/ui/prompter.py

Purpose
- Render ``PromptSpec`` values with ``questionary`` and messages with ``rich``.
- Translate questionary's ``None`` (Ctrl-C / Esc) into ``Dismissed``.

Only constructed when ``is_interactive_terminal`` reports a real TTY on both
stdin and stdout; everything else falls back to plain output in the CLI.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import IO, Any, Final

import questionary
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from gateway_installer.wizard.prompts import (
    Answered,
    Dismissed,
    PromptKind,
    PromptOutcome,
    PromptSpec,
)

PROMPT_STYLE: Final[questionary.Style] = questionary.Style(
    [
        ("qmark", "fg:#00afaf bold"),
        ("question", "bold"),
        ("answer", "fg:#00af87 bold"),
        ("pointer", "fg:#00afaf bold"),
        ("highlighted", "fg:#00afaf bold"),
        ("selected", "fg:#00af87"),
        ("instruction", "fg:#808080 italic"),
    ]
)


def is_interactive_terminal(stdin: IO[str] | None = None, stdout: IO[str] | None = None) -> bool:
    """True when both ``stdin`` and ``stdout`` are attached to a TTY."""

    streams = (
        stdin if stdin is not None else sys.stdin,
        stdout if stdout is not None else sys.stdout,
    )
    for stream in streams:
        isatty = getattr(stream, "isatty", None)
        if not callable(isatty) or not isatty():
            return False
    return True


class ConsoleIO:
    """``WizardIO`` backed by questionary prompts and a rich console."""

    def __init__(self, console: Console | None = None, *, no_color: bool = False) -> None:
        self._console = console if console is not None else Console(no_color=no_color)
        self._style: questionary.Style | None = None if no_color else PROMPT_STYLE

    @property
    def console(self) -> Console:
        return self._console

    def ask(self, spec: PromptSpec) -> PromptOutcome:
        question = self._build_question(spec)
        answer = question.ask()
        if answer is None:
            return Dismissed()
        return Answered(answer)

    def intro(self, title: str) -> None:
        self._console.print()
        self._console.rule(Text(title, style="bold cyan"))

    def outro(self, message: str) -> None:
        self._console.print(Text(f"└ {message}", style="bold green"))
        self._console.print()

    def cancel(self, message: str) -> None:
        self._console.print(Text(f"■ {message}", style="bold red"))

    def note(self, body: str, title: str | None = None) -> None:
        self._console.print(
            Panel(Text(body), title=title, title_align="left", border_style="cyan", expand=False)
        )

    def message(self, text: str) -> None:
        self._console.print(Text(text))

    def success(self, text: str) -> None:
        self._console.print(Text(f"✔ {text}", style="green"))

    def warning(self, text: str) -> None:
        self._console.print(Text(f"▲ {text}", style="yellow"))

    def _build_question(self, spec: PromptSpec) -> questionary.Question:
        builders: dict[PromptKind, Callable[[PromptSpec], questionary.Question]] = {
            PromptKind.TEXT: self._text,
            PromptKind.SELECT: self._select,
            PromptKind.MULTISELECT: self._checkbox,
            PromptKind.CONFIRM: self._confirm,
        }
        return builders[spec.kind](spec)

    def _text(self, spec: PromptSpec) -> questionary.Question:
        def _validate(raw: str) -> bool | str:
            error = spec.check(raw)
            return True if error is None else error

        default = spec.default if isinstance(spec.default, str) else ""
        kwargs: dict[str, Any] = {}
        if spec.placeholder:
            kwargs["instruction"] = f"(e.g. {spec.placeholder})"
        return questionary.text(
            spec.message,
            default=default,
            validate=_validate,
            style=self._style,
            **kwargs,
        )

    def _select(self, spec: PromptSpec) -> questionary.Question:
        return questionary.select(
            spec.message,
            choices=[
                questionary.Choice(choice.label, value=choice.value) for choice in spec.choices
            ],
            default=spec.default if isinstance(spec.default, str) else None,
            style=self._style,
        )

    def _checkbox(self, spec: PromptSpec) -> questionary.Question:
        selected = set(spec.default) if isinstance(spec.default, tuple) else set()
        return questionary.checkbox(
            spec.message,
            choices=[
                questionary.Choice(
                    choice.label, value=choice.value, checked=choice.value in selected
                )
                for choice in spec.choices
            ],
            style=self._style,
        )

    def _confirm(self, spec: PromptSpec) -> questionary.Question:
        return questionary.confirm(
            spec.message,
            default=bool(spec.default),
            style=self._style,
        )


__all__ = ["PROMPT_STYLE", "ConsoleIO", "is_interactive_terminal"]
