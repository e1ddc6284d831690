"""Terminal capability the wizard and wallet walkthrough are driven through."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from gateway_installer.wizard.prompts import Answered, Dismissed, PromptOutcome, PromptSpec


@runtime_checkable
class WizardIO(Protocol):
    """Prompt and message surface injected into interactive flows.

    ``ask`` returns the raw answer wrapped in ``Answered`` or ``Dismissed``
    when the operator aborts the prompt. Implementations may validate eagerly
    with ``spec.check`` but callers re-validate through ``ask_valid``.
    """

    def ask(self, spec: PromptSpec) -> PromptOutcome: ...

    def intro(self, title: str) -> None: ...

    def outro(self, message: str) -> None: ...

    def cancel(self, message: str) -> None: ...

    def note(self, body: str, title: str | None = None) -> None: ...

    def message(self, text: str) -> None: ...

    def success(self, text: str) -> None: ...

    def warning(self, text: str) -> None: ...


def ask_valid(io: WizardIO, spec: PromptSpec) -> PromptOutcome:
    """Ask ``spec`` until its parser accepts the answer or the prompt is dismissed.

    The returned ``Answered`` carries the parsed, normalized value.
    """

    while True:
        outcome = io.ask(spec)
        if isinstance(outcome, Dismissed):
            return outcome
        result = spec.parse(outcome.value)
        if result.error is None:
            return Answered(result.value)
        io.warning(result.error)


__all__ = ["WizardIO", "ask_valid"]
