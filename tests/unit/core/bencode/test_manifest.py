from __future__ import annotations

"""
Unit tests for Torrent Manifest Extraction.

Verifies multi-file and single-file manifest shapes, ordering, lossy
decoding of legacy names and rejection of malformed file lists.
"""

import os
from pathlib import Path

import pytest

from conftest import bencode, multi_file_torrent, single_file_torrent
from dircomp.core.bencode.decoder import decode
from dircomp.core.bencode.manifest import (
    extract_manifest,
    load_torrent_manifest,
    manifest_from_bytes,
    read_torrent_file,
)
from dircomp.domain.errors import DecodeError, ExtractError, TorrentReadError


def test_multi_file_paths_in_declared_order() -> None:
    data = b"d4:infod5:filesld6:lengthi100e4:pathl9:file1.txteed6:lengthi200e4:pathl6:SubDir9:file2.txteeeee"
    manifest = manifest_from_bytes(data)

    assert manifest.paths == ("file1.txt", os.path.join("SubDir", "file2.txt"))


def test_multi_file_keeps_nesting_and_repeated_segments() -> None:
    data = multi_file_torrent([
        ["z.txt"],
        ["a", "a", "a.txt"],
        ["Season 1", "Extras", "Season 1", "notes.nfo"],
    ])
    manifest = manifest_from_bytes(data)

    assert list(manifest) == [
        "z.txt",
        os.path.join("a", "a", "a.txt"),
        os.path.join("Season 1", "Extras", "Season 1", "notes.nfo"),
    ]


def test_single_file_uses_info_name() -> None:
    manifest = manifest_from_bytes(single_file_torrent("movie.mkv"))
    assert manifest.paths == ("movie.mkv",)


def test_files_take_precedence_over_name() -> None:
    root = decode(multi_file_torrent([["inner.bin"]], name="Outer"))
    assert extract_manifest(root).paths == ("inner.bin",)


def test_invalid_utf8_is_replaced_not_rejected() -> None:
    data = bencode({"info": {"files": [{"path": [b"caf\xe9.txt"]}]}})
    manifest = manifest_from_bytes(data)

    assert manifest.paths == ("caf\ufffd.txt",)


def test_manifest_containment() -> None:
    manifest = manifest_from_bytes(multi_file_torrent([["a.txt"], ["d", "b.txt"]]))

    assert "a.txt" in manifest
    assert os.path.join("d", "b.txt") in manifest
    assert "d" not in manifest
    assert len(manifest) == 2


def test_trailing_bytes_after_metadata_are_ignored() -> None:
    manifest = manifest_from_bytes(single_file_torrent("a.iso") + b"garbage")
    assert manifest.paths == ("a.iso",)

# -----------------------------------------------------------------------------
# MALFORMED STRUCTURES
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("value, message", [
    ({"announce": "x"}, "Missing 'info'"),
    ({"info": "not-a-dict"}, "Missing 'info'"),
    ({"info": {"length": 1}}, "No 'files' or 'name'"),
    ({"info": {"files": "oops"}}, "'files' is not a list"),
    ({"info": {"files": [{"length": 1}]}}, "missing 'path' list"),
    ({"info": {"files": [{"path": []}]}}, "missing 'path' list"),
    ({"info": {"files": [{"path": [1]}]}}, "not a string"),
    ({"info": {"files": ["entry"]}}, "missing 'path' list"),
    ({"info": {"files": [{"path": ["..", "etc"]}]}}, "invalid path component"),
    ({"info": {"files": [{"path": ["a/b"]}]}}, "contains a separator"),
    ({"info": {"name": ""}}, "invalid path component"),
])
def test_malformed_manifests(value, message: str) -> None:
    with pytest.raises(ExtractError, match=message):
        manifest_from_bytes(bencode(value))


def test_root_that_is_not_a_dictionary() -> None:
    with pytest.raises(ExtractError):
        extract_manifest([b"info"])


def test_malformed_bencode_propagates_decode_error() -> None:
    with pytest.raises(DecodeError):
        manifest_from_bytes(b"d4:info")

# -----------------------------------------------------------------------------
# FILE LOADING
# -----------------------------------------------------------------------------

def test_load_torrent_manifest_from_disk(tmp_path: Path) -> None:
    torrent = tmp_path / "a.torrent"
    torrent.write_bytes(single_file_torrent("disk.img"))

    assert load_torrent_manifest(str(torrent)).paths == ("disk.img",)


def test_load_torrent_manifest_missing_file(tmp_path: Path) -> None:
    with pytest.raises(TorrentReadError, match="Cannot read torrent file"):
        load_torrent_manifest(str(tmp_path / "missing.torrent"))


def test_read_torrent_file_returns_raw_bytes(tmp_path: Path) -> None:
    torrent = tmp_path / "raw.torrent"
    torrent.write_bytes(b"d4:infodee")

    assert read_torrent_file(str(torrent)) == b"d4:infodee"


def test_read_torrent_file_on_directory(tmp_path: Path) -> None:
    with pytest.raises(TorrentReadError):
        read_torrent_file(str(tmp_path))
