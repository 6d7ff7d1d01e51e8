from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A small bencode writer used to build torrent fixtures.
3. Shared directory layouts for reconciliation tests.
"""

import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Sequence

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Bencode Fixture Writer
# -----------------------------------------------------------------------------
def bencode(value: Any) -> bytes:
    """Serialize a Python value for test fixtures (str keys/values become UTF-8)."""
    if isinstance(value, int):
        return b"i%de" % value
    if isinstance(value, str):
        value = value.encode("utf-8")
    if isinstance(value, bytes):
        return b"%d:%s" % (len(value), value)
    if isinstance(value, list):
        return b"l" + b"".join(bencode(v) for v in value) + b"e"
    if isinstance(value, dict):
        items = sorted(
            (k.encode("utf-8") if isinstance(k, str) else k, v) for k, v in value.items()
        )
        return b"d" + b"".join(bencode(k) + bencode(v) for k, v in items) + b"e"
    raise TypeError(f"Cannot bencode {type(value).__name__}")


def multi_file_torrent(paths: Sequence[Sequence[str]], name: str = "MyTorrent") -> bytes:
    """Build multi-file torrent metadata from lists of path components."""
    files: List[Dict[str, Any]] = [
        {"length": 100 * (i + 1), "path": list(components)}
        for i, components in enumerate(paths)
    ]
    return bencode({
        "announce": "http://tracker.example/announce",
        "info": {"files": files, "name": name, "piece length": 16384, "pieces": b"\x00" * 20},
    })


def single_file_torrent(name: str) -> bytes:
    return bencode({"info": {"length": 42, "name": name, "piece length": 16384}})


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def example_torrent() -> bytes:
    """Torrent declaring ``file1.txt`` and ``SubDir/file2.txt``."""
    return multi_file_torrent([["file1.txt"], ["SubDir", "file2.txt"]])


@pytest.fixture
def make_tree() -> Callable[[Path, Sequence[str]], Path]:
    """Return a helper that creates files (POSIX-style relative paths) under a root."""
    def _make(root: Path, files: Sequence[str]) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        for rel in files:
            target = root.joinpath(*rel.split("/"))
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(b"data")
        return root
    return _make


@pytest.fixture
def example_tree(tmp_path: Path, make_tree) -> Path:
    """
    Directory for the canonical reconciliation example:

    /MyTorrent
      file1.txt
      /SubDir
        file2.txt
        junk.bin
      /EmptyAfter
        stray.tmp
    """
    return make_tree(
        tmp_path / "downloads" / "MyTorrent",
        ["file1.txt", "SubDir/file2.txt", "SubDir/junk.bin", "EmptyAfter/stray.tmp"],
    )
