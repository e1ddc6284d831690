"""Dataclass domain models with strict validation and canonical serialization."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, StrEnum
from typing import Final, NoReturn, TypeVar

from gateway_installer.constants import PROJECT_NAME_MAX_LEN

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]

TEnum = TypeVar("TEnum", bound=Enum)

# Dot-separated labels, none hyphen-leading, top label letters only.
FQDN_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:(?!-)[a-z0-9-]{1,63}\.)+[a-z]{2,}$", re.IGNORECASE | re.ASCII
)
LOCALHOST_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^localhost(?::[0-9]{1,5})?$", re.IGNORECASE | re.ASCII
)
POKT_ADDRESS_PATTERN: Final[re.Pattern[str]] = re.compile(r"^pokt1[0-9a-z]{20,90}$")


class Network(StrEnum):
    MAINNET = "mainnet"
    TESTNET = "testnet"


class DeploymentType(StrEnum):
    HOSTED = "hosted"
    LOCAL_ONLY = "local-only"


class FrontendHosting(StrEnum):
    SAME_HOST = "same-host"
    EXTERNAL_PLATFORM = "external-platform"
    SKIP = "skip"


class Integration(StrEnum):
    STRIPE = "stripe"
    AUTH = "auth"


def is_well_formed_domain(value: str) -> bool:
    """Return whether ``value`` is an FQDN or ``localhost[:port]``."""

    return bool(FQDN_PATTERN.match(value) or LOCALHOST_PATTERN.match(value))


def is_pokt_address(value: str) -> bool:
    return bool(POKT_ADDRESS_PATTERN.match(value.strip()))


def _fail(path: str, message: str) -> NoReturn:
    raise ValueError(f"{path}: {message}")


def _as_enum(enum_type: type[TEnum], value: object, path: str) -> TEnum:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(str(member.value) for member in enum_type)
        _fail(path, f"expected one of [{allowed}], got {value!r}")


def _as_utc(value: object, path: str) -> datetime:
    if not isinstance(value, datetime):
        _fail(path, f"expected datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        _fail(path, "datetime must be timezone-aware")
    return value.astimezone(UTC)


def iso8601z(value: datetime) -> str:
    """Render an aware datetime the way browsers render ``toISOString()``."""

    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _canonical_json(value: JSONValue) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def ordered_integrations(values: Iterable[Integration]) -> list[Integration]:
    """Return integrations in declaration order for stable display and export."""

    chosen = set(values)
    return [member for member in Integration if member in chosen]


@dataclass(frozen=True, slots=True)
class ProjectMetadata:
    """Validated project configuration collected by the wizard.

    Instances are immutable; edits produce a replacement via
    ``dataclasses.replace`` which re-runs validation. The hosting/deployment
    combination is intentionally not checked here, see
    ``gateway_installer.wizard.normalizer``.
    """

    project_name: str
    network: Network
    deployment_type: DeploymentType
    frontend_hosting: FrontendHosting
    created_at: datetime
    domain: str | None = None
    integrations: frozenset[Integration] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.project_name, str):
            _fail("ProjectMetadata.project_name", "expected string")
        name = self.project_name.strip()
        if not name:
            _fail("ProjectMetadata.project_name", "must not be empty")
        if len(name) > PROJECT_NAME_MAX_LEN:
            _fail(
                "ProjectMetadata.project_name",
                f"must be at most {PROJECT_NAME_MAX_LEN} characters",
            )
        object.__setattr__(self, "project_name", name)
        object.__setattr__(
            self, "network", _as_enum(Network, self.network, "ProjectMetadata.network")
        )
        object.__setattr__(
            self,
            "deployment_type",
            _as_enum(DeploymentType, self.deployment_type, "ProjectMetadata.deployment_type"),
        )
        object.__setattr__(
            self,
            "frontend_hosting",
            _as_enum(FrontendHosting, self.frontend_hosting, "ProjectMetadata.frontend_hosting"),
        )
        object.__setattr__(
            self, "created_at", _as_utc(self.created_at, "ProjectMetadata.created_at")
        )

        if self.domain is not None:
            if not isinstance(self.domain, str) or not is_well_formed_domain(self.domain):
                _fail("ProjectMetadata.domain", f"not a valid domain: {self.domain!r}")
            object.__setattr__(self, "domain", self.domain.lower())

        object.__setattr__(
            self,
            "integrations",
            frozenset(
                _as_enum(Integration, item, "ProjectMetadata.integrations")
                for item in self.integrations
            ),
        )

    @property
    def created_at_iso(self) -> str:
        return iso8601z(self.created_at)

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "projectName": self.project_name,
            "network": self.network.value,
            "deploymentType": self.deployment_type.value,
            "frontendHosting": self.frontend_hosting.value,
            "domain": self.domain,
            "integrations": [item.value for item in ordered_integrations(self.integrations)],
            "createdAtIso": self.created_at_iso,
        }

    def to_json(self) -> str:
        return _canonical_json(self.to_dict())


@dataclass(frozen=True, slots=True)
class AccountRef:
    """A labelled on-chain account. Never carries key material."""

    name: str
    address: str

    def __post_init__(self) -> None:
        name = self.name.strip() if isinstance(self.name, str) else ""
        if not name:
            _fail("AccountRef.name", "must not be empty")
        address = self.address.strip() if isinstance(self.address, str) else ""
        if not is_pokt_address(address):
            _fail("AccountRef.address", f"not a pokt1 address: {self.address!r}")
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "address", address)

    def to_dict(self) -> dict[str, JSONValue]:
        return {"name": self.name, "address": self.address}


@dataclass(frozen=True, slots=True)
class WalletSetupResult:
    """Outcome of a completed wallet and staking walkthrough."""

    network: Network
    gateway: AccountRef
    application: AccountRef
    export_path: str
    funded: bool = True
    funded_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "network", _as_enum(Network, self.network, "WalletSetupResult.network")
        )
        if self.gateway.address == self.application.address:
            _fail("WalletSetupResult.application", "must differ from the gateway address")
        if self.funded_at is not None:
            object.__setattr__(
                self, "funded_at", _as_utc(self.funded_at, "WalletSetupResult.funded_at")
            )

    def to_dict(self) -> dict[str, JSONValue]:
        payload: dict[str, JSONValue] = {
            "network": self.network.value,
            "gateway": self.gateway.to_dict(),
            "application": self.application.to_dict(),
            "exportPath": self.export_path,
            "funded": self.funded,
        }
        if self.funded_at is not None:
            payload["fundedAtIso"] = iso8601z(self.funded_at)
        return payload


__all__ = [
    "FQDN_PATTERN",
    "LOCALHOST_PATTERN",
    "POKT_ADDRESS_PATTERN",
    "AccountRef",
    "DeploymentType",
    "FrontendHosting",
    "Integration",
    "JSONScalar",
    "JSONValue",
    "Network",
    "ProjectMetadata",
    "WalletSetupResult",
    "is_pokt_address",
    "is_well_formed_domain",
    "iso8601z",
    "ordered_integrations",
]
