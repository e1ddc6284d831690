"""
gateway-installer — settings schema and validation.

File: src/gateway_installer/config/schema.py

Purpose
- Define authoritative installer defaults and strict validation rules.

What should be included in this file
- Schema versioning and migration guidance.
- Validation rules for required fields, types, enums, and numeric constraints.
- Deterministic deep-merge helpers used by the loader.

Functional requirements
- Validate settings payloads and return structured errors (field path + message).
- Refuse wallet key material (mnemonics, private keys) in any section.

Non-functional requirements
- Keep rules deterministic and easy to audit.
"""

from __future__ import annotations

import copy
import math
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Literal, TypedDict

from gateway_installer.constants import (
    CONFIG_SCHEMA_VERSION,
    DEFAULT_APPLICATION_STAKE_UPOKT,
    DEFAULT_EXPORT_PATH,
    DEFAULT_FAUCET_URL,
    DEFAULT_GAS_ADJUSTMENT,
    DEFAULT_GAS_PRICES,
    DEFAULT_GATEWAY_STAKE_UPOKT,
    DEFAULT_LOG_DIR,
    DEFAULT_MIN_PYTHON,
    DEFAULT_PROBE_TIMEOUT_SECONDS,
    DEFAULT_SERVICE_ID,
)

ConfigSchemaVersion: Final[int] = CONFIG_SCHEMA_VERSION
LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")

_VERSION_PATTERN = re.compile(r"^\d+(?:\.\d+){0,3}$")
_GAS_PRICES_PATTERN = re.compile(r"^\d+(?:\.\d+)?upokt$")
_SERVICE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")

_KEY_MATERIAL_TOKENS: Final[frozenset[str]] = frozenset(
    {"mnemonic", "seed", "secret", "password", "passphrase", "private", "privkey"}
)

# Settings paths that are normalized relative to the config file location.
PATH_FIELDS: Final[tuple[tuple[str, ...], ...]] = (
    ("logging", "log_dir"),
    ("wallet", "export_path"),
)


class MetaConfig(TypedDict):
    schema_version: int


class UIConfig(TypedDict):
    no_color: bool


class LoggingSettings(TypedDict):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"]
    log_dir: str
    redact_addresses: bool


class PreflightConfig(TypedDict):
    min_python: str
    docker_required: bool
    probe_timeout_seconds: float


class WalletConfig(TypedDict):
    export_path: str
    faucet_url: str
    gateway_stake_upokt: int
    application_stake_upokt: int
    service_id: str
    gas_prices: str
    gas_adjustment: float


class InstallerConfig(TypedDict):
    meta: MetaConfig
    ui: UIConfig
    logging: LoggingSettings
    preflight: PreflightConfig
    wallet: WalletConfig


DEFAULT_CONFIG: Final[InstallerConfig] = {
    "meta": {
        "schema_version": ConfigSchemaVersion,
    },
    "ui": {
        "no_color": False,
    },
    "logging": {
        "log_level": "INFO",
        "log_dir": DEFAULT_LOG_DIR.as_posix(),
        "redact_addresses": True,
    },
    "preflight": {
        "min_python": DEFAULT_MIN_PYTHON,
        "docker_required": False,
        "probe_timeout_seconds": DEFAULT_PROBE_TIMEOUT_SECONDS,
    },
    "wallet": {
        "export_path": DEFAULT_EXPORT_PATH.as_posix(),
        "faucet_url": DEFAULT_FAUCET_URL,
        "gateway_stake_upokt": DEFAULT_GATEWAY_STAKE_UPOKT,
        "application_stake_upokt": DEFAULT_APPLICATION_STAKE_UPOKT,
        "service_id": DEFAULT_SERVICE_ID,
        "gas_prices": DEFAULT_GAS_PRICES,
        "gas_adjustment": DEFAULT_GAS_ADJUSTMENT,
    },
}

SECTIONS: Final[tuple[str, ...]] = ("meta", "ui", "logging", "preflight", "wallet")


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class ConfigValidationResult:
    config: dict[str, Any] | None
    issues: tuple[ConfigValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.config is not None and not self.issues


class ConfigValidationError(ValueError):
    """Raised when strict settings validation fails."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid config:\n{rendered}")


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[ConfigValidationIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(ConfigValidationIssue(path=path, message=message))

    def items(self) -> tuple[ConfigValidationIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def default_config() -> InstallerConfig:
    """Return a deep copy of the built-in defaults."""

    return copy.deepcopy(DEFAULT_CONFIG)


def migration_guidance(found_version: int) -> str:
    if found_version < ConfigSchemaVersion:
        return (
            f"schema version {found_version} is older than supported {ConfigSchemaVersion}; "
            "upgrade gateway_installer.toml to the current schema"
        )
    if found_version > ConfigSchemaVersion:
        return (
            f"schema version {found_version} is newer than supported {ConfigSchemaVersion}; "
            "upgrade gateway-installer"
        )
    return "schema version is current"


def merge_config(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deterministically deep-merge ``overlay`` onto ``base``."""

    merged = _deep_copy_mapping(base)
    _merge_into(merged, overlay)
    return merged


def validate_config(config: Mapping[str, object] | object) -> ConfigValidationResult:
    """Validate settings and return structured issues with deterministic paths."""

    issues = _IssueCollector()
    root = _as_object(config, "<root>", issues)
    if root is None:
        return ConfigValidationResult(config=None, issues=issues.items())

    _reject_unknown_keys(root, set(SECTIONS), "", issues)
    _require_keys(root, set(SECTIONS), "", issues)

    validators: dict[str, Callable[[dict[str, object], str, _IssueCollector], dict[str, Any]]] = {
        "meta": _validate_meta,
        "ui": _validate_ui,
        "logging": _validate_logging,
        "preflight": _validate_preflight,
        "wallet": _validate_wallet,
    }
    out: dict[str, Any] = {}
    for key in SECTIONS:
        raw = root.get(key)
        if raw is None:
            continue
        section = _as_object(raw, key, issues)
        if section is None:
            continue
        out[key] = validators[key](section, key, issues)

    if issues.has_issues:
        return ConfigValidationResult(config=None, issues=issues.items())
    return ConfigValidationResult(config=out, issues=())


def assert_valid_config(config: Mapping[str, object] | object) -> dict[str, Any]:
    """Validate settings and raise ``ConfigValidationError`` on failure."""

    result = validate_config(config)
    if result.config is None:
        raise ConfigValidationError(result.issues)
    return result.config


def _validate_meta(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    _reject_unknown_keys(payload, {"schema_version"}, path, issues)
    _require_keys(payload, {"schema_version"}, path, issues)

    out: dict[str, Any] = {}
    if "schema_version" in payload:
        parsed = _as_int(
            payload["schema_version"], _join(path, "schema_version"), issues, minimum=1
        )
        if parsed is not None:
            out["schema_version"] = parsed
            if parsed != ConfigSchemaVersion:
                issues.add(_join(path, "schema_version"), migration_guidance(parsed))
    return out


def _validate_ui(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    _reject_unknown_keys(payload, {"no_color"}, path, issues)
    _require_keys(payload, {"no_color"}, path, issues)

    out: dict[str, Any] = {}
    if "no_color" in payload:
        parsed = _as_bool(payload["no_color"], _join(path, "no_color"), issues)
        if parsed is not None:
            out["no_color"] = parsed
    return out


def _validate_logging(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    allowed = {"log_level", "log_dir", "redact_addresses"}
    _reject_unknown_keys(payload, allowed, path, issues)
    _require_keys(payload, allowed, path, issues)

    out: dict[str, Any] = {}
    if "log_level" in payload:
        level = payload["log_level"]
        parsed_level = _as_enum(
            level.upper() if isinstance(level, str) else level,
            _join(path, "log_level"),
            issues,
            allowed_values=LOG_LEVELS,
        )
        if parsed_level is not None:
            out["log_level"] = parsed_level

    if "log_dir" in payload:
        parsed_dir = _as_path_text(payload["log_dir"], _join(path, "log_dir"), issues)
        if parsed_dir is not None:
            out["log_dir"] = parsed_dir

    if "redact_addresses" in payload:
        parsed_redact = _as_bool(
            payload["redact_addresses"], _join(path, "redact_addresses"), issues
        )
        if parsed_redact is not None:
            out["redact_addresses"] = parsed_redact
    return out


def _validate_preflight(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    allowed = {"min_python", "docker_required", "probe_timeout_seconds"}
    _reject_unknown_keys(payload, allowed, path, issues)
    _require_keys(payload, allowed, path, issues)

    out: dict[str, Any] = {}
    if "min_python" in payload:
        parsed_version = _as_str(payload["min_python"], _join(path, "min_python"), issues)
        if parsed_version is not None:
            if _VERSION_PATTERN.fullmatch(parsed_version):
                out["min_python"] = parsed_version
            else:
                issues.add(_join(path, "min_python"), "must be a dotted version like 3.11.0")

    if "docker_required" in payload:
        parsed_docker = _as_bool(payload["docker_required"], _join(path, "docker_required"), issues)
        if parsed_docker is not None:
            out["docker_required"] = parsed_docker

    if "probe_timeout_seconds" in payload:
        parsed_timeout = _as_float(
            payload["probe_timeout_seconds"],
            _join(path, "probe_timeout_seconds"),
            issues,
            exclusive_minimum=0.0,
        )
        if parsed_timeout is not None:
            out["probe_timeout_seconds"] = parsed_timeout
    return out


def _validate_wallet(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    allowed = {
        "export_path",
        "faucet_url",
        "gateway_stake_upokt",
        "application_stake_upokt",
        "service_id",
        "gas_prices",
        "gas_adjustment",
    }
    _reject_unknown_keys(payload, allowed, path, issues)
    _require_keys(payload, allowed, path, issues)

    out: dict[str, Any] = {}
    if "export_path" in payload:
        parsed_export = _as_path_text(payload["export_path"], _join(path, "export_path"), issues)
        if parsed_export is not None:
            out["export_path"] = parsed_export

    if "faucet_url" in payload:
        parsed_url = _as_str(payload["faucet_url"], _join(path, "faucet_url"), issues)
        if parsed_url is not None:
            if parsed_url.lower().startswith("https://"):
                out["faucet_url"] = parsed_url
            else:
                issues.add(_join(path, "faucet_url"), "must be an https:// URL")

    for key in ("gateway_stake_upokt", "application_stake_upokt"):
        if key in payload:
            parsed_stake = _as_int(payload[key], _join(path, key), issues, minimum=1)
            if parsed_stake is not None:
                out[key] = parsed_stake

    if "service_id" in payload:
        parsed_service = _as_str(payload["service_id"], _join(path, "service_id"), issues)
        if parsed_service is not None:
            if _SERVICE_ID_PATTERN.fullmatch(parsed_service):
                out["service_id"] = parsed_service
            else:
                issues.add(
                    _join(path, "service_id"),
                    "may only contain letters, digits, '-' and '_'",
                )

    if "gas_prices" in payload:
        parsed_gas = _as_str(payload["gas_prices"], _join(path, "gas_prices"), issues)
        if parsed_gas is not None:
            if _GAS_PRICES_PATTERN.fullmatch(parsed_gas):
                out["gas_prices"] = parsed_gas
            else:
                issues.add(_join(path, "gas_prices"), "must look like 10upokt")

    if "gas_adjustment" in payload:
        parsed_adjustment = _as_float(
            payload["gas_adjustment"],
            _join(path, "gas_adjustment"),
            issues,
            exclusive_minimum=0.0,
        )
        if parsed_adjustment is not None:
            out["gas_adjustment"] = parsed_adjustment
    return out


def _as_object(value: object, path: str, issues: _IssueCollector) -> dict[str, object] | None:
    if not isinstance(value, Mapping):
        issues.add(path, f"expected object, got {type(value).__name__}")
        return None
    out: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            issues.add(path, f"object key must be string, got {type(key).__name__}")
            continue
        out[key] = item
    return out


def _as_str(value: object, path: str, issues: _IssueCollector) -> str | None:
    if not isinstance(value, str):
        issues.add(path, f"expected string, got {type(value).__name__}")
        return None
    parsed = value.strip()
    if not parsed:
        issues.add(path, "must not be empty")
        return None
    return parsed


def _as_path_text(value: object, path: str, issues: _IssueCollector) -> str | None:
    parsed = _as_str(value, path, issues)
    if parsed is None:
        return None
    if "\x00" in parsed:
        issues.add(path, "must not contain NUL bytes")
        return None
    return parsed


def _as_bool(value: object, path: str, issues: _IssueCollector) -> bool | None:
    if isinstance(value, bool):
        return value
    issues.add(path, f"expected boolean, got {type(value).__name__}")
    return None


def _as_int(
    value: object,
    path: str,
    issues: _IssueCollector,
    *,
    minimum: int | None = None,
) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        issues.add(path, f"expected integer, got {type(value).__name__}")
        return None
    if minimum is not None and value < minimum:
        issues.add(path, f"must be >= {minimum}")
        return None
    return value


def _as_float(
    value: object,
    path: str,
    issues: _IssueCollector,
    *,
    exclusive_minimum: float | None = None,
) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        issues.add(path, f"expected number, got {type(value).__name__}")
        return None
    parsed = float(value)
    if not math.isfinite(parsed):
        issues.add(path, "must be finite")
        return None
    if exclusive_minimum is not None and parsed <= exclusive_minimum:
        issues.add(path, f"must be > {exclusive_minimum:g}")
        return None
    return parsed


def _as_enum(
    value: object,
    path: str,
    issues: _IssueCollector,
    *,
    allowed_values: tuple[str, ...],
) -> str | None:
    parsed = _as_str(value, path, issues)
    if parsed is None:
        return None
    if parsed not in allowed_values:
        expected = ", ".join(sorted(allowed_values))
        issues.add(path, f"invalid value {parsed!r}; expected one of: {expected}")
        return None
    return parsed


def _reject_unknown_keys(
    payload: Mapping[str, object],
    allowed: set[str],
    path: str,
    issues: _IssueCollector,
) -> None:
    for key in sorted(payload):
        if key in allowed:
            continue
        key_path = _join(path, key)
        if _looks_like_key_material(key):
            issues.add(key_path, "wallet key material must never be stored in config")
        else:
            issues.add(key_path, "unknown field")


def _require_keys(
    payload: Mapping[str, object],
    required: set[str],
    path: str,
    issues: _IssueCollector,
) -> None:
    for key in sorted(required):
        if key not in payload:
            issues.add(_join(path, key), "missing required field")


def _looks_like_key_material(key: str) -> bool:
    tokens = _NON_ALNUM.sub("_", key.strip().lower()).split("_")
    return any(token in _KEY_MATERIAL_TOKENS for token in tokens if token)


def _join(path: str, key: str) -> str:
    if not path:
        return key
    return f"{path}.{key}"


def _merge_into(target: dict[str, Any], overlay: Mapping[str, object]) -> None:
    for key in sorted(overlay):
        value = overlay[key]
        if isinstance(value, Mapping):
            existing = target.get(key)
            if isinstance(existing, dict):
                _merge_into(existing, value)
            else:
                nested: dict[str, Any] = {}
                _merge_into(nested, value)
                target[key] = nested
        else:
            target[key] = copy.deepcopy(value)


def _deep_copy_mapping(value: Mapping[str, object]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key in sorted(value):
        item = value[key]
        out[key] = _deep_copy_mapping(item) if isinstance(item, Mapping) else copy.deepcopy(item)
    return out


__all__ = [
    "DEFAULT_CONFIG",
    "LOG_LEVELS",
    "PATH_FIELDS",
    "SECTIONS",
    "ConfigSchemaVersion",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "InstallerConfig",
    "LoggingSettings",
    "MetaConfig",
    "PreflightConfig",
    "UIConfig",
    "WalletConfig",
    "assert_valid_config",
    "default_config",
    "merge_config",
    "migration_guidance",
    "validate_config",
]
