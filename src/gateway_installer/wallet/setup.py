"""Guided wallet creation, funding and staking walkthrough.

File: src/gateway_installer/wallet/setup.py

Purpose
- Walk the operator through creating Gateway and Application keys with
  ``pocketd``, funding, staking and delegation, one confirmation at a time.
- Export the resulting addresses and labels (never key material) to a
  user-only JSON file.

Every "no" answer or dismissal aborts with a step-specific message and the
walkthrough returns ``None``; nothing is written in that case.
"""

from __future__ import annotations

import os
import socket
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any, Final

import structlog

from gateway_installer.domain.models import (
    AccountRef,
    JSONValue,
    Network,
    WalletSetupResult,
    iso8601z,
)
from gateway_installer.ui.clipboard import copy_to_clipboard
from gateway_installer.utils.fs import write_secure_json
from gateway_installer.wallet.commands import (
    SNIPPET_LABELS,
    SnippetStyle,
    StakeSettings,
    balance_command,
    config_file_snippets,
    delegate_command,
    looks_like_fish,
    stake_application_command,
    stake_gateway_command,
)
from gateway_installer.wizard.io import WizardIO, ask_valid
from gateway_installer.wizard.prompts import (
    Answered,
    Choice,
    PromptSpec,
    confirm_prompt,
    select_prompt,
    text_prompt,
)
from gateway_installer.wizard.validators import parse_account_name, parse_pokt_address

ClipboardWriter = Callable[[str], bool]

WALLET_INTRO: Final[str] = "Wallet Setup · Create Gateway & Application wallets"
WALLET_CANCELLED: Final[str] = "Wallet setup cancelled."
WALLET_DONE: Final[str] = "Wallet setup complete."


class _Aborted(Exception):
    """Internal control flow: the operator declined or dismissed a step."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class WalletWalkthrough:
    """Interactive, strictly linear wallet and staking walkthrough."""

    def __init__(
        self,
        io: WizardIO,
        settings: StakeSettings | None = None,
        *,
        clipboard: ClipboardWriter = copy_to_clipboard,
        environ: Mapping[str, str] | None = None,
        clock: Callable[[], datetime] | None = None,
        hostname: Callable[[], str] = socket.gethostname,
        logger: Any | None = None,
    ) -> None:
        self._io = io
        self._settings = settings if settings is not None else StakeSettings()
        self._clipboard = clipboard
        self._environ = dict(os.environ if environ is None else environ)
        self._clock = clock if clock is not None else (lambda: datetime.now(UTC))
        self._hostname = hostname
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    def run(self, network: Network) -> WalletSetupResult | None:
        try:
            return self._run(network)
        except _Aborted as aborted:
            self._logger.info("wallet_aborted", reason=aborted.message)
            self._io.cancel(aborted.message)
            return None

    def _run(self, network: Network) -> WalletSetupResult:
        io = self._io
        io.intro(WALLET_INTRO)
        io.note(
            f"Using previously selected network: {network.value}\n"
            "(You can change this by re-running the metadata step.)",
            "Network",
        )

        gateway = self._collect_account(
            intro=[
                "🔑 Let's create your Gateway wallet.",
                "",
                "Run this in another terminal:",
                "pocketd keys add gateway",
                "",
                "You will paste the resulting address below (looks like pokt1...):",
            ],
            name_message="Gateway account name (for your reference only):",
            default_name="my-gateway",
            address_message="Gateway address (pokt1…):",
            placeholder="pokt1abc…",
        )
        application = self._collect_account(
            intro=[
                "🔑 Now create your Application wallet.",
                "",
                "Run:",
                "pocketd keys add application",
                "",
                "You will paste the resulting address below:",
            ],
            name_message="Application account name:",
            default_name="my-app",
            address_message="Application address (pokt1…):",
            placeholder="pokt1def…",
            distinct_from=gateway.address,
        )
        self._logger.info(
            "wallet_accounts_collected",
            gateway=gateway.address,
            application=application.address,
        )

        addresses = (
            f"Gateway ({gateway.name}): {gateway.address}\n"
            f"Application ({application.name}): {application.address}"
        )
        self._offer_copy(
            "Copy both addresses to clipboard for safekeeping?",
            addresses,
            default=False,
            copied="Addresses copied to clipboard.",
        )

        self._funding_step(network, gateway, application)
        funded_at = self._clock()
        self._balance_step(network, gateway, application)
        self._config_file_step()
        self._staking_steps(network, gateway, application)

        written = self._export(network, gateway, application, funded_at)
        result = WalletSetupResult(
            network=network,
            gateway=gateway,
            application=application,
            export_path=str(written),
            funded=True,
            funded_at=funded_at,
        )
        self._logger.info("wallet_setup_completed", network=network.value, export=str(written))
        io.outro(WALLET_DONE)
        return result

    def _collect_account(
        self,
        *,
        intro: list[str],
        name_message: str,
        default_name: str,
        address_message: str,
        placeholder: str,
        distinct_from: str | None = None,
    ) -> AccountRef:
        self._io.message("\n".join(intro))
        name = self._answer(
            text_prompt(
                name_message,
                lambda raw: parse_account_name(raw, example=default_name),
                default=default_name,
            )
        )
        address = self._answer(
            text_prompt(
                address_message,
                lambda raw: parse_pokt_address(raw, distinct_from=distinct_from),
                placeholder=placeholder,
            )
        )
        return AccountRef(name=str(name), address=str(address))

    def _funding_step(
        self, network: Network, gateway: AccountRef, application: AccountRef
    ) -> None:
        targets = [
            f"• Gateway:     {gateway.address}",
            f"• Application: {application.address}",
        ]
        if network is Network.TESTNET:
            self._io.message(
                "\n".join(
                    [
                        "🚰 Fund your testnet accounts via the faucet before staking.",
                        "",
                        "Faucet:",
                        self._settings.faucet_url,
                        "",
                        "Addresses to fund:",
                        *targets,
                        "",
                        "Tip: request enough to cover staking amounts and transaction fees.",
                    ]
                )
            )
            self._confirm(
                "Have you funded BOTH addresses via the faucet?",
                abort="Please fund your testnet accounts, then re-run this step.",
            )
            return

        self._io.message(
            "\n".join(
                [
                    "💰 Mainnet requires real POKT.",
                    "",
                    "Make sure BOTH accounts are funded with sufficient POKT to cover your",
                    "planned stake amounts plus transaction fees before proceeding.",
                    "",
                    "Addresses:",
                    *targets,
                ]
            )
        )
        self._confirm(
            "Are BOTH mainnet addresses funded with sufficient POKT?",
            abort="Please fund your mainnet accounts, then re-run this step.",
        )

    def _balance_step(
        self, network: Network, gateway: AccountRef, application: AccountRef
    ) -> None:
        commands = (
            balance_command(gateway.address, network),
            balance_command(application.address, network),
        )
        self._io.message(
            "\n".join(
                [
                    "🧮 Verify funding by querying on-chain balances for both wallets.",
                    "",
                    "Run these in another terminal:",
                    *commands,
                    "",
                    "Proceed once both balances show a non-zero amount.",
                ]
            )
        )
        self._offer_copy(
            "Copy both balance commands to clipboard?",
            "\n".join(commands),
            default=False,
            copied="Balance commands copied to clipboard.",
        )
        self._confirm(
            "Did BOTH balances show > 0?",
            abort="Fund the accounts until both balances are > 0, then re-run this step.",
        )

    def _config_file_step(self) -> None:
        is_fish = looks_like_fish(self._environ)
        style_raw = self._answer(
            select_prompt(
                "Detected fish shell. Use fish-safe commands to create config files?"
                if is_fish
                else "Choose how to create the staking config files:",
                [Choice(style.value, SNIPPET_LABELS[style]) for style in SnippetStyle],
                default=(SnippetStyle.PRINTF if is_fish else SnippetStyle.HEREDOC).value,
            )
        )
        style = SnippetStyle(style_raw)
        gateway_cfg, application_cfg = config_file_snippets(style, self._settings)

        self._io.message(
            "\n".join(
                [
                    "🛠 Create the Gateway staking config file:",
                    "",
                    gateway_cfg,
                    "",
                    "Then create the Application staking config file:",
                    "",
                    application_cfg,
                ]
            )
        )
        self._offer_copy(
            "Copy BOTH config-file commands to clipboard?",
            f"{gateway_cfg}\n\n{application_cfg}",
            default=True,
            copied="Config-file commands copied to clipboard.",
        )
        self._confirm(
            "Did you create BOTH config files in /tmp?",
            abort="Create the config files first, then re-run this step.",
        )

    def _staking_steps(
        self, network: Network, gateway: AccountRef, application: AccountRef
    ) -> None:
        stake_gateway = stake_gateway_command(gateway.address, network, self._settings)
        self._io.message(f"💸 Stake the Gateway first:\n\n{stake_gateway}")
        self._offer_copy(
            "Copy Gateway staking command to clipboard?",
            stake_gateway,
            default=True,
            copied="Gateway staking command copied.",
        )
        self._confirm(
            "Did the Gateway stake transaction succeed?",
            abort="Complete the Gateway staking, then re-run this step.",
        )

        stake_app = stake_application_command(application.address, network, self._settings)
        self._io.message(f"Now stake the Application:\n\n{stake_app}")
        self._offer_copy(
            "Copy Application staking command to clipboard?",
            stake_app,
            default=True,
            copied="Application staking command copied.",
        )
        self._confirm(
            "Did the Application stake transaction succeed?",
            abort="Complete the Application staking, then re-run this step.",
        )

        delegate = delegate_command(
            gateway.address, application.address, network, self._settings
        )
        self._io.message(f"🔗 Delegate the Application to your Gateway:\n\n{delegate}")
        self._offer_copy(
            "Copy delegation command to clipboard?",
            delegate,
            default=True,
            copied="Delegation command copied.",
        )
        self._confirm(
            "Did the delegation transaction succeed?",
            abort="Complete delegation, then re-run this step.",
        )

    def _export(
        self,
        network: Network,
        gateway: AccountRef,
        application: AccountRef,
        funded_at: datetime,
    ) -> str:
        payload: dict[str, JSONValue] = {
            "network": network.value,
            "gateway": gateway.to_dict(),
            "application": application.to_dict(),
            "funded": True,
            "fundedAtIso": iso8601z(funded_at),
        }
        if network is Network.TESTNET:
            payload["faucetUrl"] = self._settings.faucet_url
        payload["createdAtIso"] = iso8601z(self._clock())
        payload["hostname"] = self._hostname()

        written = write_secure_json(self._settings.export_path, payload)
        self._io.note(
            "\n".join(
                [
                    f"Path: {written}",
                    "",
                    "This file contains ONLY addresses and labels (no private keys).",
                    "Ensure its directory is in your .gitignore. "
                    "Permissions are restricted to the current user.",
                ]
            ),
            "Export",
        )
        return str(written)

    def _answer(self, spec: PromptSpec) -> object:
        outcome = ask_valid(self._io, spec)
        if not isinstance(outcome, Answered):
            raise _Aborted(WALLET_CANCELLED)
        return outcome.value

    def _confirm(self, message: str, *, abort: str) -> None:
        outcome = ask_valid(self._io, confirm_prompt(message, default=True))
        if not isinstance(outcome, Answered) or outcome.value is not True:
            raise _Aborted(abort)

    def _offer_copy(self, message: str, text: str, *, default: bool, copied: str) -> None:
        """Optional copy step; declining or dismissing simply moves on."""

        outcome = ask_valid(self._io, confirm_prompt(message, default=default))
        if not isinstance(outcome, Answered) or outcome.value is not True:
            return
        if self._clipboard(text):
            self._io.note(copied, "Copied")
        else:
            self._io.note(
                "Could not access clipboard automatically.\nYou can copy this instead:\n\n"
                + text,
                "Copy manually",
            )


def run_wallet_setup(
    io: WizardIO,
    network: Network,
    settings: StakeSettings | None = None,
    **kwargs: Any,
) -> WalletSetupResult | None:
    return WalletWalkthrough(io, settings, **kwargs).run(network)


__all__ = ["WALLET_CANCELLED", "WALLET_DONE", "WalletWalkthrough", "run_wallet_setup"]
