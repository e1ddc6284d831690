"""Atomic and owner-only file writes."""

from __future__ import annotations

import json
import os
import stat
from pathlib import Path

import pytest

from gateway_installer.utils.fs import atomic_write, write_secure_json


@pytest.mark.unit
def test_atomic_write_replaces_content_without_leftovers(tmp_path: Path) -> None:
    target = tmp_path / "config.json"
    target.write_text("old", encoding="utf-8")

    atomic_write(target, "new")
    atomic_write(target, b"bytes")

    assert target.read_bytes() == b"bytes"
    assert [entry.name for entry in tmp_path.iterdir()] == ["config.json"]


@pytest.mark.unit
def test_atomic_write_requires_existing_parent(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        atomic_write(tmp_path / "missing" / "file.txt", "data")


@pytest.mark.unit
def test_write_secure_json_creates_parents_and_pretty_prints(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "dir" / "keys.json"

    written = write_secure_json(target, {"network": "testnet", "label": "gatewaý"})

    assert written == target
    assert written.is_absolute()
    text = target.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    assert '  "network": "testnet"' in text
    assert "gatewaý" in text
    assert json.loads(text) == {"network": "testnet", "label": "gatewaý"}


@pytest.mark.unit
def test_write_secure_json_resolves_relative_paths(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    written = write_secure_json(".tmp/keys.json", {"ok": True})

    assert written == tmp_path / ".tmp" / "keys.json"


@pytest.mark.unit
@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_write_secure_json_tightens_existing_directory(tmp_path: Path) -> None:
    export_dir = tmp_path / "exports"
    export_dir.mkdir(mode=0o755)
    os.chmod(export_dir, 0o755)

    write_secure_json(export_dir / "keys.json", {"ok": True})

    assert stat.S_IMODE(export_dir.stat().st_mode) == 0o700
    assert stat.S_IMODE((export_dir / "keys.json").stat().st_mode) == 0o600
