"""Module entrypoint for ``python -m gateway_installer``."""

from __future__ import annotations

from gateway_installer.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
