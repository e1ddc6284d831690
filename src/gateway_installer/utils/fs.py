"""
gateway-installer — filesystem utilities

File: src/gateway_installer/utils/fs.py

Purpose
- Atomic writes and owner-only JSON export for wallet summaries and confirmed
  configuration.

Functional requirements
- Atomic writes use temp files in the destination directory and replace in a
  single step.
- Secure exports create the parent directory 0700 and leave the file 0600.
"""

from __future__ import annotations

import contextlib
import json
import os
import stat
import tempfile
from collections.abc import Mapping
from pathlib import Path

PathLike = str | os.PathLike[str]

SECURE_DIR_MODE = 0o700
SECURE_FILE_MODE = 0o600

__all__ = [
    "SECURE_DIR_MODE",
    "SECURE_FILE_MODE",
    "atomic_write",
    "write_secure_json",
]


def atomic_write(
    path: PathLike,
    data: bytes | str,
    *,
    encoding: str = "utf-8",
    mode: int | None = None,
) -> None:
    """
    Atomically write ``data`` to ``path``.

    The write strategy is:
    1. create temp file in the same directory (``mkstemp`` creates it 0600),
    2. write + flush + fsync file data,
    3. apply ``mode`` when given,
    4. replace target via ``os.replace``.
    """

    target = Path(path)
    target_parent = target.parent.resolve(strict=True)
    if not target_parent.is_dir():
        raise NotADirectoryError(f"{target_parent!s} is not a directory")

    fd, temp_name = tempfile.mkstemp(
        prefix=f".{target.name}.",
        suffix=".tmp",
        dir=str(target_parent),
    )
    temp_path = Path(temp_name)

    try:
        if isinstance(data, bytes):
            with os.fdopen(fd, "wb") as file_handle:
                file_handle.write(data)
                file_handle.flush()
                os.fsync(file_handle.fileno())
        else:
            with os.fdopen(fd, "w", encoding=encoding) as file_handle:
                file_handle.write(data)
                file_handle.flush()
                os.fsync(file_handle.fileno())

        if mode is not None:
            os.chmod(temp_path, mode)
        os.replace(temp_path, target)
        _fsync_directory(target_parent)
    except Exception:
        with contextlib.suppress(OSError):
            temp_path.unlink(missing_ok=True)
        raise


def write_secure_json(path: PathLike, payload: Mapping[str, object]) -> Path:
    """Write ``payload`` as pretty JSON readable only by the current user.

    Returns the absolute path written.
    """

    target = Path(path).expanduser().absolute()
    target.parent.mkdir(parents=True, exist_ok=True, mode=SECURE_DIR_MODE)
    _restrict_directory(target.parent)

    body = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
    atomic_write(target, body, mode=SECURE_FILE_MODE)
    return target


def _restrict_directory(path: Path) -> None:
    if os.name == "nt":
        return
    current = stat.S_IMODE(path.stat().st_mode)
    if current != SECURE_DIR_MODE:
        with contextlib.suppress(PermissionError):
            os.chmod(path, SECURE_DIR_MODE)


def _fsync_directory(path: Path) -> None:
    """
    Best-effort directory fsync for metadata durability after ``os.replace``.

    Some platforms/filesystems do not support fsync on directories.
    """

    if os.name == "nt":
        return

    flags = os.O_RDONLY
    if hasattr(os, "O_DIRECTORY"):
        flags |= os.O_DIRECTORY

    try:
        dir_fd = os.open(path, flags)
    except OSError:
        return

    try:
        os.fsync(dir_fd)
    except OSError:
        return
    finally:
        os.close(dir_fd)
