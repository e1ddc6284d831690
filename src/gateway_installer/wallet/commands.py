"""Pure builders for the pocketd commands and staking config snippets.

Nothing here executes anything; the walkthrough prints these strings for the
operator to run in another terminal.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import PurePosixPath
from typing import Any, Final

import yaml

from gateway_installer.constants import (
    APP_STAKE_CONFIG_PATH,
    DEFAULT_APPLICATION_STAKE_UPOKT,
    DEFAULT_EXPORT_PATH,
    DEFAULT_FAUCET_URL,
    DEFAULT_GAS_ADJUSTMENT,
    DEFAULT_GAS_PRICES,
    DEFAULT_GATEWAY_STAKE_UPOKT,
    DEFAULT_SERVICE_ID,
    GATEWAY_STAKE_CONFIG_PATH,
)
from gateway_installer.domain.models import Network

LINE_CONTINUATION: Final[str] = " \\\n"
_FISH_PATTERN: Final[re.Pattern[str]] = re.compile(r"fish", re.IGNORECASE)

NETWORK_FLAGS: Final[dict[Network, str]] = {
    Network.TESTNET: "beta",
    Network.MAINNET: "main",
}


class SnippetStyle(StrEnum):
    HEREDOC = "heredoc"
    PRINTF = "printf"


SNIPPET_LABELS: Final[dict[SnippetStyle, str]] = {
    SnippetStyle.HEREDOC: "Heredoc (bash/zsh/sh)",
    SnippetStyle.PRINTF: "printf (compatible with fish/bash/zsh/sh)",
}


@dataclass(frozen=True, slots=True)
class StakeSettings:
    """Wallet-section settings that shape the printed commands."""

    gateway_stake_upokt: int = DEFAULT_GATEWAY_STAKE_UPOKT
    application_stake_upokt: int = DEFAULT_APPLICATION_STAKE_UPOKT
    service_id: str = DEFAULT_SERVICE_ID
    gas_prices: str = DEFAULT_GAS_PRICES
    gas_adjustment: float = DEFAULT_GAS_ADJUSTMENT
    faucet_url: str = DEFAULT_FAUCET_URL
    export_path: str = DEFAULT_EXPORT_PATH.as_posix()

    @classmethod
    def from_settings(cls, wallet_settings: Mapping[str, object] | None) -> StakeSettings:
        """Build from an already-validated ``[wallet]`` section; missing keys default."""

        cfg = dict(wallet_settings or {})
        known: dict[str, Any] = {
            item.name: cfg[item.name] for item in dataclasses.fields(cls) if item.name in cfg
        }
        return cls(**known)


def network_flag(network: Network) -> str:
    return NETWORK_FLAGS[network]


def looks_like_fish(environ: Mapping[str, str]) -> bool:
    return bool(_FISH_PATTERN.search(environ.get("SHELL", "")))


def format_multiline(lines: Sequence[str]) -> str:
    """Join command lines with ``" \\"`` continuations, trimming trailing spaces."""

    return LINE_CONTINUATION.join(line.rstrip() for line in lines)


def gateway_stake_yaml(settings: StakeSettings) -> str:
    return yaml.safe_dump(
        {"stake_amount": f"{settings.gateway_stake_upokt}upokt"},
        sort_keys=False,
        default_flow_style=False,
    )


def application_stake_yaml(settings: StakeSettings) -> str:
    return yaml.safe_dump(
        {
            "stake_amount": f"{settings.application_stake_upokt}upokt",
            "service_ids": [settings.service_id],
        },
        sort_keys=False,
        default_flow_style=False,
    )


def _heredoc(path: PurePosixPath, body: str) -> str:
    return f"cat <<EOF > {path}\n{body}EOF"


def _printf(path: PurePosixPath, body: str) -> str:
    escaped = body.replace("'", "'\\''").replace("%", "%%").replace("\n", "\\n")
    return f"printf '{escaped}' > {path}"


def config_file_snippets(style: SnippetStyle, settings: StakeSettings) -> tuple[str, str]:
    """Return ``(gateway, application)`` shell snippets writing the stake configs."""

    render = _printf if style is SnippetStyle.PRINTF else _heredoc
    return (
        render(GATEWAY_STAKE_CONFIG_PATH, gateway_stake_yaml(settings)),
        render(APP_STAKE_CONFIG_PATH, application_stake_yaml(settings)),
    )


def _tx_flags(network: Network, settings: StakeSettings) -> list[str]:
    return [
        f"--network={network_flag(network)}",
        "--gas=auto",
        f"--gas-prices={settings.gas_prices}",
        f"--gas-adjustment={settings.gas_adjustment:g}",
        "--yes",
    ]


def balance_command(address: str, network: Network) -> str:
    return f"pocketd query bank balances {address} --network={network_flag(network)}"


def stake_gateway_command(address: str, network: Network, settings: StakeSettings) -> str:
    return format_multiline(
        [
            "pocketd tx gateway stake-gateway",
            f"--config={GATEWAY_STAKE_CONFIG_PATH}",
            f"--from={address}",
            *_tx_flags(network, settings),
        ]
    )


def stake_application_command(address: str, network: Network, settings: StakeSettings) -> str:
    return format_multiline(
        [
            "pocketd tx application stake-application",
            f"--config={APP_STAKE_CONFIG_PATH}",
            f"--from={address}",
            *_tx_flags(network, settings),
        ]
    )


def delegate_command(
    gateway_address: str,
    application_address: str,
    network: Network,
    settings: StakeSettings,
) -> str:
    return format_multiline(
        [
            f"pocketd tx application delegate-to-gateway {gateway_address}",
            f"--from={application_address}",
            *_tx_flags(network, settings),
        ]
    )


__all__ = [
    "LINE_CONTINUATION",
    "NETWORK_FLAGS",
    "SNIPPET_LABELS",
    "SnippetStyle",
    "StakeSettings",
    "application_stake_yaml",
    "balance_command",
    "config_file_snippets",
    "delegate_command",
    "format_multiline",
    "gateway_stake_yaml",
    "looks_like_fish",
    "network_flag",
    "stake_application_command",
    "stake_gateway_command",
]
