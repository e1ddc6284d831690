"""
gateway-installer — package root

File: src/gateway_installer/__init__.py

Purpose
- Interactive installer for Pocket Network gateway deployments: tool preflight,
  project configuration wizard, and the wallet/staking walkthrough.

Import boundary
- Must not have side effects at import time (no config loading, no logging init).
- Heavy UI dependencies (questionary, rich) are only imported by ``ui`` modules.
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
