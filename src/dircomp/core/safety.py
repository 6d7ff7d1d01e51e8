from __future__ import annotations

"""
Path Depth Safety Guard.

Prevents destructive operations on directories that are too shallow, such as
a drive root or a first-level folder shared by several torrents. For a path
like ``E:\\Online\\MyTorrent`` the counted segments are:

    1. ``E:\\``   (drive or share prefix, always one segment)
    2. ``Online``
    3. ``MyTorrent``

A POSIX root ``/`` is not counted, so ``/srv/torrents/MyTorrent`` also has
three segments.
"""

import logging
import os
import re
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath
from typing import Union

from dircomp.domain.constants import MIN_SAFE_DEPTH
from dircomp.domain.errors import SafetyError

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

# Drive letter ("E:") or backslash UNC share. A POSIX "//host" prefix is not a share.
_WINDOWS_STYLE_RX = re.compile(r"^(?:[A-Za-z]:|\\\\)")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def count_path_segments(path: PathLike) -> int:
    """
    Count the meaningful segments of ``path``.

    Canonicalizes the path first (resolving ``.``, ``..`` and symbolic links)
    and falls back to the path as given when it cannot be resolved, for
    example because it does not exist yet.

    Args:
        path: Filesystem path to inspect.

    Returns:
        int: Number of segments, counting a drive/share prefix as one.
    """
    raw = os.fspath(path)
    if not raw:
        return 0

    canonical = raw
    if os.name == "nt" or not _is_windows_style(raw):
        try:
            canonical = str(Path(raw).resolve(strict=True))
        except (OSError, RuntimeError):
            logger.debug(f"Cannot canonicalize '{raw}'. Counting raw segments.")

    return _count_segments(_pure_path(canonical))


def is_safe(path: PathLike, min_depth: int = MIN_SAFE_DEPTH) -> bool:
    """Return True if ``path`` has at least ``min_depth`` segments."""
    return count_path_segments(path) >= min_depth


def ensure_safe(path: PathLike, min_depth: int = MIN_SAFE_DEPTH) -> None:
    """
    Raise if ``path`` is too shallow for destructive operations.

    Raises:
        SafetyError: If the depth check fails.
    """
    depth = count_path_segments(path)
    if depth < min_depth:
        raise SafetyError(
            f"Path '{os.fspath(path)}' is too shallow "
            f"({depth} segments, at least {min_depth} required)"
        )


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _is_windows_style(raw: str) -> bool:
    """Drive-letter or backslash UNC path, recognized on every platform."""
    return bool(_WINDOWS_STYLE_RX.match(raw))


def _pure_path(raw: str) -> PurePath:
    """Pick Windows semantics for drive/UNC paths on every platform."""
    if os.name == "nt" or _is_windows_style(raw):
        return PureWindowsPath(raw)
    return PurePosixPath(raw)


def _count_segments(path: PurePath) -> int:
    count = 1 if path.drive else 0
    for part in path.parts:
        if part == path.anchor or part in (".", ".."):
            continue
        count += 1
    return count
