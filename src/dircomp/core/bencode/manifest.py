from __future__ import annotations

"""
Torrent Manifest Extraction.

Navigates a decoded metadata tree to produce the list of relative file paths
the torrent declares. Supports the two manifest shapes:

- multi-file: ``info.files[].path`` lists of path components;
- single-file: ``info.name``.
"""

import logging
import os
from typing import List

from dircomp.core.bencode.decoder import BytesLike, parse
from dircomp.domain.bencode_models import (
    BValue,
    as_dict,
    as_list,
    as_text_lossy,
    field,
)
from dircomp.domain.constants import KEY_FILES, KEY_INFO, KEY_NAME, KEY_PATH
from dircomp.domain.errors import ExtractError, TorrentReadError
from dircomp.domain.manifest import Manifest

logger = logging.getLogger(__name__)

_FORBIDDEN_COMPONENTS = frozenset({"", ".", ".."})


# ==============================================================================
# PUBLIC API
# ==============================================================================

def extract_manifest(root: BValue) -> Manifest:
    """
    Build the Manifest declared by a decoded torrent.

    Args:
        root: Decoded metadata (the top-level dictionary).

    Returns:
        Manifest: Relative paths in metadata order.

    Raises:
        ExtractError: If no usable file list can be found.
    """
    info = as_dict(field(root, KEY_INFO))
    if info is None:
        raise ExtractError("Missing 'info' dictionary")

    files = info.get(KEY_FILES)
    if files is not None:
        return Manifest.from_paths(_multi_file_paths(files))

    name = as_text_lossy(info.get(KEY_NAME))
    if name is not None:
        _check_component(name, "'name'")
        return Manifest.from_paths([name])

    raise ExtractError("No 'files' or 'name' found in torrent info")


def manifest_from_bytes(data: BytesLike) -> Manifest:
    """
    Decode raw torrent metadata and extract its Manifest.

    Raises:
        DecodeError: On malformed bencode.
        ExtractError: On a missing or malformed file list.
    """
    root, rest = parse(data)
    if rest:
        logger.debug(f"Ignoring {len(rest)} trailing bytes after torrent metadata")
    return extract_manifest(root)


def read_torrent_file(torrent_path: str) -> bytes:
    """
    Read raw ``.torrent`` metadata from disk.

    Raises:
        TorrentReadError: If the file cannot be read.
    """
    try:
        with open(torrent_path, "rb") as f:
            return f.read()
    except OSError as e:
        raise TorrentReadError(f"Cannot read torrent file: {e}") from e


def load_torrent_manifest(torrent_path: str) -> Manifest:
    """Read a ``.torrent`` file from disk and extract its Manifest."""
    return manifest_from_bytes(read_torrent_file(torrent_path))


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _multi_file_paths(files: BValue) -> List[str]:
    """Join each ``files[].path`` component list into a native relative path."""
    entries = as_list(files)
    if entries is None:
        raise ExtractError("'files' is not a list")

    paths: List[str] = []
    for idx, entry in enumerate(entries):
        components = as_list(field(entry, KEY_PATH))
        if not components:
            raise ExtractError(f"File entry {idx} missing 'path' list")

        names: List[str] = []
        for component in components:
            name = as_text_lossy(component)
            if name is None:
                raise ExtractError(f"File entry {idx}: path component is not a string")
            _check_component(name, f"File entry {idx}")
            names.append(name)

        paths.append(os.path.join(*names))
    return paths


def _check_component(name: str, where: str) -> None:
    """Reject components that would escape or collapse the relative path."""
    if name in _FORBIDDEN_COMPONENTS:
        raise ExtractError(f"{where}: invalid path component {name!r}")
    if "/" in name or os.sep in name or (os.altsep and os.altsep in name):
        raise ExtractError(f"{where}: path component {name!r} contains a separator")
