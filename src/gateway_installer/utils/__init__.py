"""Shared filesystem helpers."""

from gateway_installer.utils.fs import atomic_write, write_secure_json

__all__ = ["atomic_write", "write_secure_json"]
