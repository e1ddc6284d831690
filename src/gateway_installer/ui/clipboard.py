"""Best-effort system clipboard access through platform helper binaries."""

from __future__ import annotations

import shutil
import subprocess
from typing import Final

# Tried in order: pbcopy (macOS), wl-copy (Wayland), xclip, xsel
CLIPBOARD_COMMANDS: Final[tuple[tuple[str, ...], ...]] = (
    ("pbcopy",),
    ("wl-copy",),
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
)


def copy_to_clipboard(text: str, *, timeout_seconds: float = 5.0) -> bool:
    """Copy ``text`` to the system clipboard. Returns True on success, never raises."""

    for cmd in CLIPBOARD_COMMANDS:
        if shutil.which(cmd[0]) is None:
            continue
        try:
            proc = subprocess.run(
                list(cmd),
                input=text.encode("utf-8"),
                timeout=timeout_seconds,
                check=False,
                capture_output=True,
            )
        except (OSError, subprocess.TimeoutExpired):
            continue
        if proc.returncode == 0:
            return True
    return False


__all__ = ["CLIPBOARD_COMMANDS", "copy_to_clipboard"]
