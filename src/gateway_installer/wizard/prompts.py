"""Prompt descriptions shared by the initial pass and the edit pass.

File: src/gateway_installer/wizard/prompts.py

Purpose
- Describe each prompt as plain data (``PromptSpec``) so the same description,
  choices and validator serve both first entry and later edits.
- Define the explicit prompt outcome variants (``Answered`` / ``Dismissed``).

No terminal or prompt-library imports here; rendering a ``PromptSpec`` is the
job of a ``WizardIO`` implementation (see ``gateway_installer.ui.prompter``).
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Final

from gateway_installer.constants import PROJECT_NAME_PLACEHOLDER
from gateway_installer.domain.models import (
    DeploymentType,
    FrontendHosting,
    Integration,
    Network,
    ordered_integrations,
)
from gateway_installer.wizard.normalizer import default_hosting, hosting_options
from gateway_installer.wizard.validators import (
    FieldResult,
    TEnum,
    parse_choice,
    parse_domain,
    parse_integrations,
    parse_project_name,
)

Parser = Callable[[object], FieldResult[Any]]


class PromptKind(StrEnum):
    TEXT = "text"
    SELECT = "select"
    MULTISELECT = "multiselect"
    CONFIRM = "confirm"


class ConfigField(StrEnum):
    """Editable configuration fields, in collection order."""

    PROJECT_NAME = "project_name"
    NETWORK = "network"
    DEPLOYMENT_TYPE = "deployment_type"
    FRONTEND_HOSTING = "frontend_hosting"
    DOMAIN = "domain"
    INTEGRATIONS = "integrations"

    @property
    def label(self) -> str:
        return FIELD_LABELS[self]


FIELD_LABELS: Final[dict[ConfigField, str]] = {
    ConfigField.PROJECT_NAME: "Project name",
    ConfigField.NETWORK: "Network",
    ConfigField.DEPLOYMENT_TYPE: "Deployment type",
    ConfigField.FRONTEND_HOSTING: "Frontend hosting",
    ConfigField.DOMAIN: "Domain",
    ConfigField.INTEGRATIONS: "Integrations",
}

DEPLOYMENT_LABELS: Final[dict[DeploymentType, str]] = {
    DeploymentType.HOSTED: "Hosted VPS (DigitalOcean)",
    DeploymentType.LOCAL_ONLY: "Local only (dev/test)",
}

HOSTING_LABELS: Final[dict[FrontendHosting, str]] = {
    FrontendHosting.SAME_HOST: "Deploy to same VPS",
    FrontendHosting.EXTERNAL_PLATFORM: "Deploy separately to Vercel",
    FrontendHosting.SKIP: "Skip for now",
}

INTEGRATION_LABELS: Final[dict[Integration, str]] = {
    Integration.STRIPE: "Stripe billing",
    Integration.AUTH: "Auth modules",
}

MULTISELECT_HINT: Final[str] = "Use ↑/↓ to move, Space to toggle, Enter to confirm"


@dataclass(frozen=True, slots=True)
class Choice:
    value: str
    label: str


@dataclass(frozen=True, slots=True)
class PromptSpec:
    """Renderer-independent description of one prompt.

    ``default`` is a string for text prompts, a choice value for selects, a
    tuple of choice values for multiselects and a bool for confirms.
    ``parse`` is the single source of truth for what the answer means.
    """

    kind: PromptKind
    message: str
    parse: Parser
    choices: tuple[Choice, ...] = ()
    default: object = None
    placeholder: str | None = None

    def check(self, raw: object) -> str | None:
        """Return the rejection message for ``raw``, or ``None`` if acceptable."""

        return self.parse(raw).error


@dataclass(frozen=True, slots=True)
class Answered:
    value: object


@dataclass(frozen=True, slots=True)
class Dismissed:
    """The operator dismissed the prompt (Ctrl-C / Esc)."""


PromptOutcome = Answered | Dismissed


def _accept_any(raw: object) -> FieldResult[Any]:
    return FieldResult.accept(raw)


def _parse_bool(raw: object) -> FieldResult[bool]:
    if isinstance(raw, bool):
        return FieldResult.accept(raw)
    return FieldResult.reject("Please answer yes or no.")


def text_prompt(
    message: str,
    parse: Parser = _accept_any,
    *,
    default: str = "",
    placeholder: str | None = None,
) -> PromptSpec:
    return PromptSpec(
        kind=PromptKind.TEXT,
        message=message,
        parse=parse,
        default=default,
        placeholder=placeholder,
    )


def select_prompt(
    message: str,
    choices: Iterable[Choice],
    *,
    default: str | None = None,
    parse: Parser | None = None,
) -> PromptSpec:
    options = tuple(choices)
    allowed = frozenset(choice.value for choice in options)

    def _parse_member(raw: object) -> FieldResult[Any]:
        value = raw.value if isinstance(raw, StrEnum) else raw
        if value not in allowed:
            return FieldResult.reject(f"Unknown option: {raw!r}")
        return FieldResult.accept(value)

    return PromptSpec(
        kind=PromptKind.SELECT,
        message=message,
        parse=parse or _parse_member,
        choices=options,
        default=default,
    )


def confirm_prompt(message: str, *, default: bool) -> PromptSpec:
    return PromptSpec(kind=PromptKind.CONFIRM, message=message, parse=_parse_bool, default=default)


def _seed(
    enum_type: type[TEnum],
    current: object,
    fallback: TEnum,
    allowed: Collection[TEnum] | None = None,
) -> TEnum:
    """Coerce ``current`` to a member of ``enum_type``, else ``fallback``."""

    seeded = parse_choice(enum_type, current, allowed)
    return seeded.value if seeded.value is not None else fallback


def describe(
    field: ConfigField,
    current: object = None,
    *,
    deployment_type: DeploymentType = DeploymentType.HOSTED,
) -> PromptSpec:
    """Describe the prompt for ``field`` seeded with ``current`` (or its default).

    ``deployment_type`` is the value already chosen in the same pass (or the
    configuration's current value when editing); it restricts the frontend
    hosting options.
    """

    if field is ConfigField.PROJECT_NAME:
        return text_prompt(
            "Project name",
            parse_project_name,
            default=current if isinstance(current, str) else "",
            placeholder=PROJECT_NAME_PLACEHOLDER,
        )

    if field is ConfigField.NETWORK:
        network = _seed(Network, current, Network.TESTNET)
        return select_prompt(
            "Network",
            [Choice(member.value, member.value) for member in (Network.MAINNET, Network.TESTNET)],
            default=network.value,
            parse=lambda raw: parse_choice(Network, raw),
        )

    if field is ConfigField.DEPLOYMENT_TYPE:
        deployment = _seed(DeploymentType, current, DeploymentType.HOSTED)
        return select_prompt(
            "Deployment type",
            [Choice(member.value, DEPLOYMENT_LABELS[member]) for member in DeploymentType],
            default=deployment.value,
            parse=lambda raw: parse_choice(DeploymentType, raw),
        )

    if field is ConfigField.FRONTEND_HOSTING:
        options = hosting_options(deployment_type)
        hosting = _seed(FrontendHosting, current, default_hosting(deployment_type), options)
        return select_prompt(
            "Frontend hosting",
            [Choice(member.value, HOSTING_LABELS[member]) for member in options],
            default=hosting.value,
            parse=lambda raw: parse_choice(FrontendHosting, raw, options),
        )

    if field is ConfigField.DOMAIN:
        return text_prompt(
            "Domain name (optional, for HTTPS setup; blank to clear)",
            parse_domain,
            default=current if isinstance(current, str) else "",
            placeholder="api.example.com (or leave blank)",
        )

    if field is ConfigField.INTEGRATIONS:
        selected = current if isinstance(current, (set, frozenset)) else frozenset()
        return PromptSpec(
            kind=PromptKind.MULTISELECT,
            message=f"Optional integrations ({MULTISELECT_HINT})",
            parse=parse_integrations,
            choices=tuple(
                Choice(member.value, INTEGRATION_LABELS[member]) for member in Integration
            ),
            default=tuple(member.value for member in ordered_integrations(selected)),
        )

    raise ValueError(f"unknown configuration field: {field!r}")


__all__ = [
    "DEPLOYMENT_LABELS",
    "FIELD_LABELS",
    "HOSTING_LABELS",
    "INTEGRATION_LABELS",
    "Answered",
    "Choice",
    "ConfigField",
    "Dismissed",
    "PromptKind",
    "PromptOutcome",
    "PromptSpec",
    "confirm_prompt",
    "describe",
    "select_prompt",
    "text_prompt",
]
