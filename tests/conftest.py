"""Shared fixtures: a scripted ``WizardIO`` and a fixed clock."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable, Iterator
from datetime import UTC, datetime

import pytest

from gateway_installer.observability import shutdown_logging
from gateway_installer.wizard.prompts import Answered, Dismissed, PromptOutcome, PromptSpec

FIXED_NOW = datetime(2026, 3, 14, 15, 9, 26, 535000, tzinfo=UTC)


class ScriptedIO:
    """``WizardIO`` that replays canned answers and records everything shown.

    Script entries are raw prompt answers (strings, choice values, lists of
    checked values, booleans) or a ``Dismissed()`` instance.
    """

    def __init__(self, answers: Iterable[object]) -> None:
        self._answers: deque[object] = deque(answers)
        self.asked: list[PromptSpec] = []
        self.events: list[tuple[str, str]] = []
        self.notes: list[tuple[str | None, str]] = []

    @property
    def remaining(self) -> int:
        return len(self._answers)

    @property
    def warnings(self) -> list[str]:
        return [text for kind, text in self.events if kind == "warning"]

    def messages_of(self, kind: str) -> list[str]:
        return [text for event_kind, text in self.events if event_kind == kind]

    def ask(self, spec: PromptSpec) -> PromptOutcome:
        self.asked.append(spec)
        if not self._answers:
            raise AssertionError(f"unexpected prompt: {spec.message}")
        answer = self._answers.popleft()
        if isinstance(answer, Dismissed):
            return answer
        return Answered(answer)

    def intro(self, title: str) -> None:
        self.events.append(("intro", title))

    def outro(self, message: str) -> None:
        self.events.append(("outro", message))

    def cancel(self, message: str) -> None:
        self.events.append(("cancel", message))

    def note(self, body: str, title: str | None = None) -> None:
        self.notes.append((title, body))
        self.events.append(("note", body))

    def message(self, text: str) -> None:
        self.events.append(("message", text))

    def success(self, text: str) -> None:
        self.events.append(("success", text))

    def warning(self, text: str) -> None:
        self.events.append(("warning", text))


@pytest.fixture
def scripted_io() -> Callable[..., ScriptedIO]:
    def _factory(*answers: object) -> ScriptedIO:
        return ScriptedIO(answers)

    return _factory


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture(autouse=True)
def _cleanup_logging() -> Iterator[None]:
    yield
    shutdown_logging()


@pytest.fixture(autouse=True)
def _plain_terminal(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("FORCE_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE"):
        monkeypatch.delenv(name, raising=False)
