"""
gateway-installer — unit tests for settings loader

File: tests/unit/config/test_loader.py

Purpose
- Validate deterministic settings loading from defaults, TOML, env overrides, and CLI overrides.

What this test file should cover
- Precedence: CLI > env > file > defaults.
- Deterministic env var path mapping and type coercion.
- Path normalization relative to the config file.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from gateway_installer.config.loader import (
    ConfigLoadError,
    dump_effective_config,
    env_bindings,
    load_config,
)
from gateway_installer.config.schema import ConfigValidationError


def _write_config(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@pytest.mark.unit
def test_loader_precedence_default_file_env_cli(tmp_path: Path) -> None:
    config_path = tmp_path / "gateway_installer.toml"
    default_path = tmp_path / "default.toml"
    _write_config(default_path, "")
    _write_config(
        config_path,
        """
[wallet]
gas_adjustment = 1.8
""".strip(),
    )
    env = {"GATEWAY_INSTALLER_WALLET_GAS_ADJUSTMENT": "2.0"}

    default_loaded = load_config(default_path, environ={})
    file_loaded = load_config(config_path, environ={})
    env_loaded = load_config(config_path, environ=env)
    cli_loaded = load_config(
        config_path,
        environ=env,
        cli_overrides={"wallet.gas_adjustment": 2.5},
    )

    assert default_loaded["wallet"]["gas_adjustment"] == 1.5
    assert file_loaded["wallet"]["gas_adjustment"] == 1.8
    assert env_loaded["wallet"]["gas_adjustment"] == 2.0
    assert cli_loaded["wallet"]["gas_adjustment"] == 2.5


@pytest.mark.unit
def test_missing_default_file_falls_back_to_defaults(tmp_path: Path) -> None:
    loaded = load_config(cwd=tmp_path, environ={})

    assert loaded["wallet"]["service_id"] == "anvil"
    assert loaded["logging"]["log_dir"] == (tmp_path / ".gateway-installer/logs").as_posix()


@pytest.mark.unit
def test_explicit_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="config file not found"):
        load_config(tmp_path / "absent.toml", environ={})


@pytest.mark.unit
def test_invalid_toml_raises_load_error(tmp_path: Path) -> None:
    config_path = tmp_path / "gateway_installer.toml"
    _write_config(config_path, "[wallet\nservice_id = 'anvil'")

    with pytest.raises(ConfigLoadError, match="invalid TOML"):
        load_config(config_path, environ={})


@pytest.mark.unit
def test_env_values_are_coerced_by_default_type(tmp_path: Path) -> None:
    loaded = load_config(
        cwd=tmp_path,
        environ={
            "GATEWAY_INSTALLER_UI_NO_COLOR": "yes",
            "GATEWAY_INSTALLER_PREFLIGHT_DOCKER_REQUIRED": "1",
            "GATEWAY_INSTALLER_PREFLIGHT_PROBE_TIMEOUT_SECONDS": "2.5",
            "GATEWAY_INSTALLER_WALLET_GATEWAY_STAKE_UPOKT": "7000000000",
            "GATEWAY_INSTALLER_LOGGING_LOG_LEVEL": "warning",
        },
    )

    assert loaded["ui"]["no_color"] is True
    assert loaded["preflight"]["docker_required"] is True
    assert loaded["preflight"]["probe_timeout_seconds"] == 2.5
    assert loaded["wallet"]["gateway_stake_upokt"] == 7_000_000_000
    assert loaded["logging"]["log_level"] == "WARNING"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        ("GATEWAY_INSTALLER_UI_NO_COLOR", "maybe", "must be a boolean"),
        ("GATEWAY_INSTALLER_WALLET_GATEWAY_STAKE_UPOKT", "lots", "must be an integer"),
        ("GATEWAY_INSTALLER_WALLET_GAS_ADJUSTMENT", "high", "must be a number"),
    ],
)
def test_bad_env_values_raise_load_error(
    tmp_path: Path, name: str, value: str, message: str
) -> None:
    with pytest.raises(ConfigLoadError, match=message):
        load_config(cwd=tmp_path, environ={name: value})


@pytest.mark.unit
def test_env_overrides_are_validated(tmp_path: Path) -> None:
    with pytest.raises(ConfigValidationError, match="wallet.faucet_url"):
        load_config(
            cwd=tmp_path,
            environ={"GATEWAY_INSTALLER_WALLET_FAUCET_URL": "http://insecure.example"},
        )


@pytest.mark.unit
def test_env_bindings_cover_every_setting() -> None:
    bindings = env_bindings()

    assert bindings["GATEWAY_INSTALLER_LOGGING_LOG_DIR"] == ("logging", "log_dir")
    assert bindings["GATEWAY_INSTALLER_WALLET_EXPORT_PATH"] == ("wallet", "export_path")
    assert bindings["GATEWAY_INSTALLER_META_SCHEMA_VERSION"] == ("meta", "schema_version")
    assert len(bindings) == 15


@pytest.mark.unit
def test_paths_are_normalized_relative_to_config_file(tmp_path: Path) -> None:
    config_dir = tmp_path / "settings"
    config_path = config_dir / "gateway_installer.toml"
    _write_config(
        config_path,
        """
[logging]
log_dir = "../logs"

[wallet]
export_path = "exports/keys.json"
""".strip(),
    )

    loaded = load_config(config_path, environ={})

    assert loaded["logging"]["log_dir"] == (tmp_path / "logs").as_posix()
    assert loaded["wallet"]["export_path"] == (config_dir / "exports/keys.json").as_posix()


@pytest.mark.unit
def test_none_cli_overrides_are_ignored(tmp_path: Path) -> None:
    loaded = load_config(
        cwd=tmp_path,
        environ={},
        cli_overrides={"ui.no_color": None, "logging.log_dir": None},
    )

    assert loaded["ui"]["no_color"] is False


@pytest.mark.unit
def test_cli_override_keys_need_a_section(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="invalid CLI override key"):
        load_config(cwd=tmp_path, environ={}, cli_overrides={"no_color": True})


@pytest.mark.unit
def test_dump_effective_config_is_deterministic(tmp_path: Path) -> None:
    first = dump_effective_config(load_config(cwd=tmp_path, environ={}))
    second = dump_effective_config(load_config(cwd=tmp_path, environ={}))

    assert first == second
    assert list(json.loads(first)) == ["logging", "meta", "preflight", "ui", "wallet"]
