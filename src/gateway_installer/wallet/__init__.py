"""Wallet creation and staking walkthrough."""

from gateway_installer.wallet.commands import SnippetStyle, StakeSettings
from gateway_installer.wallet.setup import WalletWalkthrough, run_wallet_setup

__all__ = ["SnippetStyle", "StakeSettings", "WalletWalkthrough", "run_wallet_setup"]
