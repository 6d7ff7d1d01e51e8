from __future__ import annotations

"""
Unit tests for the Path Depth Safety Guard.

Verifies segment counting for drive, UNC and POSIX paths, canonical
resolution of existing paths and the raw fallback for missing ones.
"""

import os
from pathlib import Path

import pytest

from dircomp.core.safety import count_path_segments, ensure_safe, is_safe
from dircomp.domain.errors import SafetyError


@pytest.mark.parametrize("path, expected", [
    ("E:\\", 1),
    ("E:\\Online", 2),
    ("E:\\Online\\MyTorrent", 3),
    ("E:\\Online\\Category\\MyTorrent", 4),
    ("\\\\server\\share\\Online", 2),
    ("\\\\server\\share\\Online\\MyTorrent", 3),
])
def test_windows_style_segments(path: str, expected: int) -> None:
    assert count_path_segments(path) == expected


def test_windows_style_depth_policy() -> None:
    assert not is_safe("E:\\", 3)
    assert not is_safe("E:\\Online", 3)
    assert is_safe("E:\\Online\\MyTorrent", 3)
    assert is_safe("E:\\Online\\Category\\MyTorrent", 3)


@pytest.mark.skipif(os.name == "nt", reason="POSIX root semantics")
def test_posix_root_is_not_counted() -> None:
    missing = "/nonexistent-dircomp-root/a/b"
    assert count_path_segments(missing) == 3
    assert count_path_segments("/") == 0


@pytest.mark.skipif(os.name == "nt", reason="POSIX double-slash semantics")
def test_posix_double_slash_is_not_a_share() -> None:
    assert count_path_segments("//nonexistent-dircomp-srv/torrents/MyTorrent") == 3
    assert is_safe("//nonexistent-dircomp-srv/torrents/MyTorrent", 3)


def test_raw_fallback_ignores_dot_segments() -> None:
    assert count_path_segments("/nonexistent-dircomp-root/./x/../y") == 3


def test_existing_path_is_canonicalized(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b"
    target.mkdir(parents=True)

    dotted = tmp_path / "a" / "b" / ".." / ".." / "a"
    assert count_path_segments(str(dotted)) == len(tmp_path.resolve().parts[1:]) + 1


def test_symlink_is_resolved(tmp_path: Path) -> None:
    deep = tmp_path / "x" / "y" / "z"
    deep.mkdir(parents=True)
    link = tmp_path / "shortcut"
    try:
        link.symlink_to(deep, target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("Symlinks not supported on this platform")

    assert count_path_segments(str(link)) == count_path_segments(str(deep))


def test_empty_path_has_no_segments() -> None:
    assert count_path_segments("") == 0
    assert not is_safe("", 1)


def test_ensure_safe_raises_with_details() -> None:
    with pytest.raises(SafetyError, match="too shallow"):
        ensure_safe("E:\\Online", 3)

    ensure_safe("E:\\Online\\MyTorrent", 3)
