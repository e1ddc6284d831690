"""Interactive configuration state machine.

File: src/gateway_installer/wizard/session.py

Purpose
- ``PromptSession``: one full collection pass in fixed field order.
- ``ReviewLoop``: summary + {confirm, edit, start-over, cancel} with a
  re-entrant single-field edit sub-state.
- ``SessionController``: alternate the two until a terminal outcome.

Cancellation semantics
- Dismissing any prompt of the initial pass aborts the whole pass.
- Dismissing the field picker or a field prompt during an edit only abandons
  that edit and returns to review.
- Dismissing the review prompt itself counts as cancel.

The core never touches the filesystem or network; all terminal interaction
goes through the injected ``WizardIO``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Final

import structlog

from gateway_installer.domain.models import DeploymentType, ProjectMetadata
from gateway_installer.wizard.io import WizardIO, ask_valid
from gateway_installer.wizard.normalizer import HOSTING_FIELDS, normalize
from gateway_installer.wizard.prompts import (
    Choice,
    ConfigField,
    Dismissed,
    PromptSpec,
    describe,
    select_prompt,
)
from gateway_installer.wizard.summary import SUMMARY_TITLE, format_summary
from gateway_installer.wizard.validators import parse_choice

Clock = Callable[[], datetime]

INTRO_TEXT: Final[str] = "Let's grab a few details for your gateway setup."
CONTROLS_TEXT: Final[str] = (
    "Use ↑/↓ to move, Enter to confirm. For checkboxes, Space toggles items."
)
CONFIRMED_TEXT: Final[str] = "Configuration captured in memory."
CANCELLED_TEXT: Final[str] = "Setup cancelled."


class ReviewAction(StrEnum):
    CONFIRM = "confirm"
    EDIT = "edit"
    START_OVER = "start-over"
    CANCEL = "cancel"


REVIEW_LABELS: Final[dict[ReviewAction, str]] = {
    ReviewAction.CONFIRM: "Confirm & continue",
    ReviewAction.EDIT: "Edit a field",
    ReviewAction.START_OVER: "Start over",
    ReviewAction.CANCEL: "Cancel setup",
}


@dataclass(frozen=True, slots=True)
class Confirm:
    config: ProjectMetadata


@dataclass(frozen=True, slots=True)
class StartOver:
    pass


@dataclass(frozen=True, slots=True)
class Cancel:
    pass


ReviewOutcome = Confirm | StartOver | Cancel


def review_prompt() -> PromptSpec:
    return select_prompt(
        "What would you like to do?",
        [Choice(action.value, REVIEW_LABELS[action]) for action in ReviewAction],
        default=ReviewAction.CONFIRM.value,
        parse=lambda raw: parse_choice(ReviewAction, raw),
    )


def field_picker_prompt() -> PromptSpec:
    return select_prompt(
        "Pick a field to edit",
        [Choice(field.value, field.label) for field in ConfigField],
        parse=lambda raw: parse_choice(ConfigField, raw),
    )


def _utcnow() -> datetime:
    return datetime.now(UTC)


class PromptSession:
    """Collect every field once, in order, from defaults."""

    def __init__(
        self,
        io: WizardIO,
        *,
        clock: Clock | None = None,
        logger: Any | None = None,
    ) -> None:
        self._io = io
        self._clock = clock if clock is not None else _utcnow
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    def collect_all(self) -> ProjectMetadata | None:
        answers: dict[ConfigField, Any] = {}
        deployment = DeploymentType.HOSTED
        for field in ConfigField:
            outcome = ask_valid(self._io, describe(field, deployment_type=deployment))
            if isinstance(outcome, Dismissed):
                self._logger.info("wizard_pass_cancelled", field=field.value)
                return None
            answers[field] = outcome.value
            if field is ConfigField.DEPLOYMENT_TYPE:
                deployment = outcome.value

        config = ProjectMetadata(
            project_name=answers[ConfigField.PROJECT_NAME],
            network=answers[ConfigField.NETWORK],
            deployment_type=answers[ConfigField.DEPLOYMENT_TYPE],
            frontend_hosting=answers[ConfigField.FRONTEND_HOSTING],
            domain=answers[ConfigField.DOMAIN],
            integrations=answers[ConfigField.INTEGRATIONS],
            created_at=self._clock(),
        )
        normalized = normalize(config)
        self._logger.info(
            "wizard_pass_completed",
            normalized=normalized is not config,
            network=normalized.network.value,
            deployment_type=normalized.deployment_type.value,
        )
        return normalized


class ReviewLoop:
    """Show the summary and apply single-field edits until a terminal action."""

    def __init__(self, io: WizardIO, *, logger: Any | None = None) -> None:
        self._io = io
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    def run(self, config: ProjectMetadata) -> ReviewOutcome:
        current = config
        while True:
            self._io.note(format_summary(current), SUMMARY_TITLE)
            outcome = ask_valid(self._io, review_prompt())
            if isinstance(outcome, Dismissed):
                self._logger.info("wizard_review_action", action="dismissed")
                return Cancel()

            action: ReviewAction = outcome.value
            self._logger.info("wizard_review_action", action=action.value)
            if action is ReviewAction.CONFIRM:
                return Confirm(current)
            if action is ReviewAction.START_OVER:
                return StartOver()
            if action is ReviewAction.CANCEL:
                return Cancel()
            current = self.edit(current)

    def edit(self, config: ProjectMetadata) -> ProjectMetadata:
        """Re-prompt one field; any dismissal returns ``config`` untouched."""

        picked = ask_valid(self._io, field_picker_prompt())
        if isinstance(picked, Dismissed):
            return config
        field: ConfigField = picked.value

        spec = describe(
            field,
            getattr(config, field.value),
            deployment_type=config.deployment_type,
        )
        outcome = ask_valid(self._io, spec)
        if isinstance(outcome, Dismissed):
            self._logger.info("wizard_edit_abandoned", field=field.value)
            return config

        edited = dataclasses.replace(config, **{field.value: outcome.value})
        updated = normalize(edited) if field.value in HOSTING_FIELDS else edited
        self._logger.info(
            "wizard_field_edited",
            field=field.value,
            hosting_corrected=updated is not edited,
        )
        return updated


class SessionController:
    """Drive ``PromptSession`` and ``ReviewLoop`` until confirm or cancel."""

    def __init__(
        self,
        io: WizardIO,
        *,
        clock: Clock | None = None,
        logger: Any | None = None,
    ) -> None:
        self._io = io
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        self._prompts = PromptSession(io, clock=clock, logger=self._logger)
        self._review = ReviewLoop(io, logger=self._logger)

    def run(self) -> ProjectMetadata | None:
        self._io.intro(INTRO_TEXT)
        self._io.note(CONTROLS_TEXT, "Controls")

        passes = 0
        while True:
            passes += 1
            draft = self._prompts.collect_all()
            if draft is None:
                self._io.cancel(CANCELLED_TEXT)
                return None

            outcome = self._review.run(draft)
            if isinstance(outcome, Confirm):
                self._logger.info("wizard_confirmed", passes=passes)
                self._io.outro(CONFIRMED_TEXT)
                return outcome.config
            if isinstance(outcome, Cancel):
                self._logger.info("wizard_cancelled", passes=passes)
                self._io.cancel(CANCELLED_TEXT)
                return None
            self._logger.info("wizard_start_over", passes=passes)


def collect_configuration(
    io: WizardIO,
    *,
    clock: Clock | None = None,
    logger: Any | None = None,
) -> ProjectMetadata | None:
    """Run the configuration wizard; ``None`` when the operator cancels."""

    return SessionController(io, clock=clock, logger=logger).run()


__all__ = [
    "CANCELLED_TEXT",
    "CONFIRMED_TEXT",
    "CONTROLS_TEXT",
    "INTRO_TEXT",
    "REVIEW_LABELS",
    "Cancel",
    "Clock",
    "Confirm",
    "PromptSession",
    "ReviewAction",
    "ReviewLoop",
    "ReviewOutcome",
    "SessionController",
    "StartOver",
    "collect_configuration",
    "field_picker_prompt",
    "review_prompt",
]
