from __future__ import annotations

import subprocess
from collections.abc import Sequence
from typing import Any

import pytest

from gateway_installer.ui import clipboard


def _completed(argv: Sequence[str], returncode: int) -> subprocess.CompletedProcess[bytes]:
    return subprocess.CompletedProcess(list(argv), returncode, stdout=b"", stderr=b"")


@pytest.mark.unit
def test_copies_with_first_available_helper(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[list[str], bytes]] = []

    def _run(argv: list[str], **kwargs: Any) -> subprocess.CompletedProcess[bytes]:
        calls.append((argv, kwargs["input"]))
        return _completed(argv, 0)

    monkeypatch.setattr(
        clipboard.shutil, "which", lambda name: f"/usr/bin/{name}" if name == "xclip" else None
    )
    monkeypatch.setattr(clipboard.subprocess, "run", _run)

    assert clipboard.copy_to_clipboard("pokt1abc")
    assert calls == [(["xclip", "-selection", "clipboard"], b"pokt1abc")]


@pytest.mark.unit
def test_falls_through_failing_helpers(monkeypatch: pytest.MonkeyPatch) -> None:
    tried: list[str] = []

    def _run(argv: list[str], **kwargs: Any) -> subprocess.CompletedProcess[bytes]:
        tried.append(argv[0])
        if argv[0] == "pbcopy":
            raise subprocess.TimeoutExpired(argv, kwargs["timeout"])
        if argv[0] == "wl-copy":
            return _completed(argv, 1)
        return _completed(argv, 0)

    monkeypatch.setattr(clipboard.shutil, "which", lambda name: f"/bin/{name}")
    monkeypatch.setattr(clipboard.subprocess, "run", _run)

    assert clipboard.copy_to_clipboard("text")
    assert tried == ["pbcopy", "wl-copy", "xclip"]


@pytest.mark.unit
def test_returns_false_without_helpers(monkeypatch: pytest.MonkeyPatch) -> None:
    def _run(argv: list[str], **kwargs: Any) -> subprocess.CompletedProcess[bytes]:
        raise AssertionError("no helper should run")

    monkeypatch.setattr(clipboard.shutil, "which", lambda name: None)
    monkeypatch.setattr(clipboard.subprocess, "run", _run)

    assert clipboard.copy_to_clipboard("text") is False


@pytest.mark.unit
def test_os_errors_are_not_raised(monkeypatch: pytest.MonkeyPatch) -> None:
    def _run(argv: list[str], **kwargs: Any) -> subprocess.CompletedProcess[bytes]:
        raise PermissionError(argv[0])

    monkeypatch.setattr(clipboard.shutil, "which", lambda name: f"/bin/{name}")
    monkeypatch.setattr(clipboard.subprocess, "run", _run)

    assert clipboard.copy_to_clipboard("text") is False
