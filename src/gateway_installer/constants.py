"""Stable constants shared across the installer."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Final

# Schema version for gateway_installer.toml.
CONFIG_SCHEMA_VERSION: Final[int] = 1

# Project metadata limits.
PROJECT_NAME_MAX_LEN: Final[int] = 64
PROJECT_NAME_PLACEHOLDER: Final[str] = "my-pokt-gateway"

# Wallet walkthrough defaults.
DEFAULT_EXPORT_PATH: Final[PurePosixPath] = PurePosixPath(".tmp/keys.json")
DEFAULT_FAUCET_URL: Final[str] = "https://faucet.beta.testnet.pokt.network/"
DEFAULT_GATEWAY_STAKE_UPOKT: Final[int] = 5_000_000_000
DEFAULT_APPLICATION_STAKE_UPOKT: Final[int] = 1_000_000_000
DEFAULT_SERVICE_ID: Final[str] = "anvil"
DEFAULT_GAS_PRICES: Final[str] = "10upokt"
DEFAULT_GAS_ADJUSTMENT: Final[float] = 1.5
GATEWAY_STAKE_CONFIG_PATH: Final[PurePosixPath] = PurePosixPath("/tmp/stake_gateway_config.yaml")
APP_STAKE_CONFIG_PATH: Final[PurePosixPath] = PurePosixPath("/tmp/stake_app_config.yaml")

# Preflight defaults.
DEFAULT_MIN_PYTHON: Final[str] = "3.11.0"
DEFAULT_PROBE_TIMEOUT_SECONDS: Final[float] = 5.0

# Log sink defaults (relative to the working directory unless overridden).
DEFAULT_LOG_DIR: Final[PurePosixPath] = PurePosixPath(".gateway-installer/logs")

WELCOME_TITLE: Final[str] = "Welcome to the Pocket Gateway Installer (Shannon Protocol)"
WELCOME_BODY: Final[str] = (
    "This CLI will guide you through creating your Gateway and Application wallets,\n"
    "staking them, and deploying both the PATH backend and the Portal frontend."
)

__all__ = [
    "APP_STAKE_CONFIG_PATH",
    "CONFIG_SCHEMA_VERSION",
    "DEFAULT_APPLICATION_STAKE_UPOKT",
    "DEFAULT_EXPORT_PATH",
    "DEFAULT_FAUCET_URL",
    "DEFAULT_GAS_ADJUSTMENT",
    "DEFAULT_GAS_PRICES",
    "DEFAULT_GATEWAY_STAKE_UPOKT",
    "DEFAULT_LOG_DIR",
    "DEFAULT_MIN_PYTHON",
    "DEFAULT_PROBE_TIMEOUT_SECONDS",
    "DEFAULT_SERVICE_ID",
    "GATEWAY_STAKE_CONFIG_PATH",
    "PROJECT_NAME_MAX_LEN",
    "PROJECT_NAME_PLACEHOLDER",
    "WELCOME_BODY",
    "WELCOME_TITLE",
]
