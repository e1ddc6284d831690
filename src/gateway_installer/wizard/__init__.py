"""Interactive configuration wizard."""

from gateway_installer.wizard.io import WizardIO, ask_valid
from gateway_installer.wizard.normalizer import normalize
from gateway_installer.wizard.prompts import (
    Answered,
    Choice,
    ConfigField,
    Dismissed,
    PromptKind,
    PromptOutcome,
    PromptSpec,
    describe,
)
from gateway_installer.wizard.session import (
    Cancel,
    Confirm,
    PromptSession,
    ReviewLoop,
    ReviewOutcome,
    SessionController,
    StartOver,
    collect_configuration,
)

__all__ = [
    "Answered",
    "Cancel",
    "Choice",
    "ConfigField",
    "Confirm",
    "Dismissed",
    "PromptKind",
    "PromptOutcome",
    "PromptSession",
    "PromptSpec",
    "ReviewLoop",
    "ReviewOutcome",
    "SessionController",
    "StartOver",
    "WizardIO",
    "ask_valid",
    "collect_configuration",
    "describe",
    "normalize",
]
