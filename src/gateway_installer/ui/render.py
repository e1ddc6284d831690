"""Output rendering for the non-interactive CLI commands.

File: src/gateway_installer/ui/render.py

Purpose
- Thin rendering layer over a ``rich`` console for ``preflight``, ``config``
  and the plain welcome shown on non-interactive terminals.
- Respect the ``NO_COLOR`` environment variable, ``--no-color`` and
  ``[ui] no_color``.

User-supplied text is always wrapped in ``rich.text.Text`` so square brackets
in paths or versions are never parsed as markup.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import IO

from rich.console import Console
from rich.text import Text

from gateway_installer.constants import WELCOME_BODY, WELCOME_TITLE


def _color_allowed(no_color_flag: bool, environ: Mapping[str, str] | None = None) -> bool:
    if no_color_flag:
        return False
    env = os.environ if environ is None else environ
    return not env.get("NO_COLOR", "")


class CLIRenderer:
    """Deterministic line-oriented output for scripted and piped use."""

    def __init__(
        self,
        *,
        no_color: bool = False,
        verbose: bool = False,
        file: IO[str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.verbose = verbose
        self.color = _color_allowed(no_color, environ)
        self._console = Console(
            file=file,
            no_color=not self.color,
            highlight=False,
            soft_wrap=True,
        )

    @property
    def console(self) -> Console:
        return self._console

    def heading(self, text: str) -> None:
        self._console.print(Text(text, style="bold"))

    def kv(self, key: str, value: object) -> None:
        self._console.print(Text(f"{key}: {value}"))

    def text(self, line: str) -> None:
        self._console.print(Text(line))

    def blank(self) -> None:
        self._console.print()

    def ok(self, label: str) -> None:
        self._console.print(Text.assemble(("  OK    ", "green"), label))

    def fail(self, label: str) -> None:
        self._console.print(Text.assemble(("  FAIL  ", "red"), label))

    def welcome(self) -> None:
        """Plain welcome banner; the same text the interactive flow opens with."""

        self.heading(WELCOME_TITLE)
        self.blank()
        self.text(WELCOME_BODY)


def create_renderer(
    *,
    no_color: bool = False,
    verbose: bool = False,
    file: IO[str] | None = None,
) -> CLIRenderer:
    return CLIRenderer(no_color=no_color, verbose=verbose, file=file)


__all__ = ["CLIRenderer", "create_renderer"]
