"""Field validators for wizard input.

File: src/gateway_installer/wizard/validators.py

Every validator takes the raw value a prompt produced (a string, a selected
choice value, or a list of checked values) and returns a ``FieldResult``:
either a normalized value or a human-readable rejection reason. Validators
never raise on bad input; rejection is an ordinary return value that the
caller turns into a re-prompt.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Final, Generic, TypeVar

from gateway_installer.constants import PROJECT_NAME_MAX_LEN
from gateway_installer.domain.models import Integration, is_pokt_address, is_well_formed_domain

T = TypeVar("T")
TEnum = TypeVar("TEnum", bound=Enum)

_SCHEME_PREFIX: Final[re.Pattern[str]] = re.compile(r"^\s*https?://", re.IGNORECASE)

MSG_NAME_REQUIRED: Final[str] = "Please enter a project name."
MSG_NAME_TOO_LONG: Final[str] = f"Keep it under {PROJECT_NAME_MAX_LEN} characters."
MSG_DOMAIN_INVALID: Final[str] = (
    "Please enter a valid domain (e.g., api.example.com) or leave blank."
)
MSG_ADDRESS_REQUIRED: Final[str] = "Please paste the address from pocketd."
MSG_ADDRESS_INVALID: Final[str] = "That doesn't look like a valid pokt1… address."
MSG_ADDRESS_DUPLICATE: Final[str] = "Application and Gateway addresses must be different."


@dataclass(frozen=True, slots=True)
class FieldResult(Generic[T]):
    """Normalized value or rejection reason for a single field."""

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def accept(cls, value: T | None) -> FieldResult[T]:
        return cls(value=value, error=None)

    @classmethod
    def reject(cls, message: str) -> FieldResult[T]:
        return cls(value=None, error=message)


def _as_text(raw: object) -> str:
    if raw is None:
        return ""
    return raw if isinstance(raw, str) else str(raw)


def parse_project_name(raw: object) -> FieldResult[str]:
    name = _as_text(raw).strip()
    if not name:
        return FieldResult.reject(MSG_NAME_REQUIRED)
    if len(name) > PROJECT_NAME_MAX_LEN:
        return FieldResult.reject(MSG_NAME_TOO_LONG)
    return FieldResult.accept(name)


def normalize_domain(raw: object) -> str | None:
    """Strip scheme and trailing slashes and lower-case; ``None`` when blank."""

    text = _as_text(raw).strip().lower()
    text = _SCHEME_PREFIX.sub("", text).rstrip("/")
    return text or None


def parse_domain(raw: object) -> FieldResult[str]:
    """Validate an optional domain. Blank input is accepted and clears the field."""

    normalized = normalize_domain(raw)
    if normalized is None:
        return FieldResult.accept(None)
    if not is_well_formed_domain(normalized):
        return FieldResult.reject(MSG_DOMAIN_INVALID)
    return FieldResult.accept(normalized)


def parse_choice(
    enum_type: type[TEnum],
    raw: object,
    allowed: Collection[TEnum] | None = None,
) -> FieldResult[TEnum]:
    """Accept ``raw`` if it names a member of ``enum_type`` within ``allowed``."""

    try:
        member = raw if isinstance(raw, enum_type) else enum_type(raw)
    except ValueError:
        return FieldResult.reject(f"Unknown option: {raw!r}")
    if allowed is not None and member not in allowed:
        return FieldResult.reject(f"{member.value} is not available here.")
    return FieldResult.accept(member)


def parse_integrations(raw: object) -> FieldResult[frozenset[Integration]]:
    if raw is None:
        return FieldResult.accept(frozenset())
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Iterable):
        return FieldResult.reject("Select zero or more integrations.")
    chosen: set[Integration] = set()
    for item in raw:
        parsed = parse_choice(Integration, item)
        if parsed.value is None:
            return FieldResult.reject(parsed.error or "Unknown integration.")
        chosen.add(parsed.value)
    return FieldResult.accept(frozenset(chosen))


def parse_account_name(raw: object, *, example: str) -> FieldResult[str]:
    name = _as_text(raw).strip()
    if not name:
        return FieldResult.reject(f"Please enter an account name (e.g., {example})")
    return FieldResult.accept(name)


def parse_pokt_address(raw: object, *, distinct_from: str | None = None) -> FieldResult[str]:
    address = _as_text(raw).strip()
    if not address:
        return FieldResult.reject(MSG_ADDRESS_REQUIRED)
    if not is_pokt_address(address):
        return FieldResult.reject(MSG_ADDRESS_INVALID)
    if distinct_from is not None and address == distinct_from.strip():
        return FieldResult.reject(MSG_ADDRESS_DUPLICATE)
    return FieldResult.accept(address)


__all__ = [
    "MSG_ADDRESS_DUPLICATE",
    "MSG_ADDRESS_INVALID",
    "MSG_ADDRESS_REQUIRED",
    "MSG_DOMAIN_INVALID",
    "MSG_NAME_REQUIRED",
    "MSG_NAME_TOO_LONG",
    "FieldResult",
    "normalize_domain",
    "parse_account_name",
    "parse_choice",
    "parse_domain",
    "parse_integrations",
    "parse_pokt_address",
    "parse_project_name",
]
