"""
gateway-installer — unit tests for the wallet walkthrough

File: tests/unit/wallet/test_walkthrough.py

Purpose
- Drive ``WalletWalkthrough`` end to end with a scripted ``WizardIO``.
- Verify the owner-only export, step-specific aborts and clipboard fallbacks.
"""

from __future__ import annotations

import json
import os
import stat
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from gateway_installer.domain.models import Network
from gateway_installer.wallet import StakeSettings, WalletWalkthrough
from gateway_installer.wizard.prompts import Dismissed, PromptKind
from gateway_installer.wizard.validators import MSG_ADDRESS_DUPLICATE

GATEWAY = "pokt1" + "g" * 38
APPLICATION = "pokt1" + "a" * 38

ACCOUNTS = ("my-gateway", GATEWAY, "my-app", APPLICATION)


def _full_script(*, style: str = "heredoc", funded_answer: bool = True) -> tuple[object, ...]:
    return (
        *ACCOUNTS,
        False,  # copy addresses
        funded_answer,
        False,  # copy balance commands
        True,  # balances > 0
        style,
        False,  # copy config-file commands
        True,  # config files created
        False,  # copy gateway stake
        True,
        False,  # copy application stake
        True,
        False,  # copy delegation
        True,
    )


def _walkthrough(
    io: Any,
    export_path: Path,
    clock: Callable[[], datetime],
    *,
    clipboard: Callable[[str], bool] = lambda text: True,
    environ: dict[str, str] | None = None,
) -> WalletWalkthrough:
    return WalletWalkthrough(
        io,
        StakeSettings(export_path=str(export_path)),
        clipboard=clipboard,
        environ=environ if environ is not None else {},
        clock=clock,
        hostname=lambda: "test-host",
    )


@pytest.mark.unit
def test_testnet_walkthrough_exports_addresses_only(
    scripted_io: Any, fixed_clock: Callable[[], datetime], tmp_path: Path
) -> None:
    export_path = tmp_path / "exports" / "keys.json"
    io = scripted_io(*_full_script())

    result = _walkthrough(io, export_path, fixed_clock).run(Network.TESTNET)

    assert result is not None
    assert io.remaining == 0
    assert len(io.asked) == 17
    assert result.export_path == str(export_path)
    assert result.funded
    assert result.funded_at == fixed_clock()
    assert result.gateway.name == "my-gateway"
    assert result.application.address == APPLICATION

    payload = json.loads(export_path.read_text(encoding="utf-8"))
    assert payload == {
        "network": "testnet",
        "gateway": {"name": "my-gateway", "address": GATEWAY},
        "application": {"name": "my-app", "address": APPLICATION},
        "funded": True,
        "fundedAtIso": "2026-03-14T15:09:26.535Z",
        "faucetUrl": "https://faucet.beta.testnet.pokt.network/",
        "createdAtIso": "2026-03-14T15:09:26.535Z",
        "hostname": "test-host",
    }
    assert io.messages_of("outro") == ["Wallet setup complete."]
    assert ("Export", f"Path: {export_path}") in [
        (title, body.splitlines()[0]) for title, body in io.notes
    ]


@pytest.mark.unit
@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_export_is_restricted_to_current_user(
    scripted_io: Any, fixed_clock: Callable[[], datetime], tmp_path: Path
) -> None:
    export_path = tmp_path / "exports" / "keys.json"

    _walkthrough(scripted_io(*_full_script()), export_path, fixed_clock).run(Network.TESTNET)

    assert stat.S_IMODE(export_path.stat().st_mode) == 0o600
    assert stat.S_IMODE(export_path.parent.stat().st_mode) == 0o700


@pytest.mark.unit
def test_mainnet_confirms_funding_without_faucet(
    scripted_io: Any, fixed_clock: Callable[[], datetime], tmp_path: Path
) -> None:
    export_path = tmp_path / "keys.json"
    io = scripted_io(*_full_script())

    result = _walkthrough(io, export_path, fixed_clock).run(Network.MAINNET)

    assert result is not None
    assert io.asked[5].message == "Are BOTH mainnet addresses funded with sufficient POKT?"
    payload = json.loads(export_path.read_text(encoding="utf-8"))
    assert payload["network"] == "mainnet"
    assert "faucetUrl" not in payload
    assert any("--network=main" in text for text in io.messages_of("message"))


@pytest.mark.unit
def test_prompt_sequence_and_defaults(
    scripted_io: Any, fixed_clock: Callable[[], datetime], tmp_path: Path
) -> None:
    io = scripted_io(*_full_script())

    _walkthrough(io, tmp_path / "keys.json", fixed_clock).run(Network.TESTNET)

    asked = io.asked
    assert asked[0].default == "my-gateway"
    assert asked[2].default == "my-app"
    assert asked[5].message == "Have you funded BOTH addresses via the faucet?"
    assert asked[7].message == "Did BOTH balances show > 0?"
    assert asked[8].kind is PromptKind.SELECT
    assert asked[8].default == "heredoc"
    assert [asked[i].default for i in (4, 6, 9, 11, 13, 15)] == [
        False,
        False,
        True,
        True,
        True,
        True,
    ]
    assert asked[16].message == "Did the delegation transaction succeed?"


@pytest.mark.unit
def test_fish_shell_defaults_to_printf(
    scripted_io: Any, fixed_clock: Callable[[], datetime], tmp_path: Path
) -> None:
    io = scripted_io(*_full_script(style="printf"))

    result = _walkthrough(
        io, tmp_path / "keys.json", fixed_clock, environ={"SHELL": "/usr/bin/fish"}
    ).run(Network.TESTNET)

    assert result is not None
    assert io.asked[8].default == "printf"
    assert io.asked[8].message.startswith("Detected fish shell")
    assert any("printf 'stake_amount:" in text for text in io.messages_of("message"))


@pytest.mark.unit
def test_declining_funding_aborts_without_export(
    scripted_io: Any, fixed_clock: Callable[[], datetime], tmp_path: Path
) -> None:
    export_path = tmp_path / "keys.json"
    io = scripted_io(*ACCOUNTS, False, False)

    result = _walkthrough(io, export_path, fixed_clock).run(Network.TESTNET)

    assert result is None
    assert io.messages_of("cancel") == [
        "Please fund your testnet accounts, then re-run this step."
    ]
    assert not export_path.exists()


@pytest.mark.unit
def test_dismissed_confirmation_aborts_with_step_message(
    scripted_io: Any, fixed_clock: Callable[[], datetime], tmp_path: Path
) -> None:
    io = scripted_io(*ACCOUNTS, False, True, False, Dismissed())

    result = _walkthrough(io, tmp_path / "keys.json", fixed_clock).run(Network.TESTNET)

    assert result is None
    assert io.messages_of("cancel") == [
        "Fund the accounts until both balances are > 0, then re-run this step."
    ]


@pytest.mark.unit
def test_dismissed_account_name_cancels_setup(
    scripted_io: Any, fixed_clock: Callable[[], datetime], tmp_path: Path
) -> None:
    io = scripted_io(Dismissed())

    result = _walkthrough(io, tmp_path / "keys.json", fixed_clock).run(Network.TESTNET)

    assert result is None
    assert len(io.asked) == 1
    assert io.messages_of("cancel") == ["Wallet setup cancelled."]


@pytest.mark.unit
def test_application_address_must_differ_from_gateway(
    scripted_io: Any, fixed_clock: Callable[[], datetime], tmp_path: Path
) -> None:
    io = scripted_io("my-gateway", GATEWAY, "my-app", GATEWAY, APPLICATION, False, False)

    _walkthrough(io, tmp_path / "keys.json", fixed_clock).run(Network.TESTNET)

    assert io.warnings == [MSG_ADDRESS_DUPLICATE]
    assert io.asked[3].message == io.asked[4].message


@pytest.mark.unit
@pytest.mark.parametrize(("copied", "title"), [(True, "Copied"), (False, "Copy manually")])
def test_copy_offer_reports_clipboard_outcome(
    scripted_io: Any,
    fixed_clock: Callable[[], datetime],
    tmp_path: Path,
    copied: bool,
    title: str,
) -> None:
    clipboard_calls: list[str] = []

    def _clipboard(text: str) -> bool:
        clipboard_calls.append(text)
        return copied

    io = scripted_io(*ACCOUNTS, True, False)

    _walkthrough(io, tmp_path / "keys.json", fixed_clock, clipboard=_clipboard).run(
        Network.TESTNET
    )

    assert clipboard_calls == [
        f"Gateway (my-gateway): {GATEWAY}\nApplication (my-app): {APPLICATION}"
    ]
    assert title in [note_title for note_title, _ in io.notes]
