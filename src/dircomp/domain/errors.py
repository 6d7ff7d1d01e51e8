from __future__ import annotations

"""
Domain Error Taxonomy.

Defines the fatal exceptions raised by the decoding, extraction and
reconciliation layers, and the per-entry failure record collected while a
reconciliation pass keeps going.
"""

from dataclasses import dataclass
from typing import Optional

# -----------------------------------------------------------------------------
# FATAL ERRORS
# -----------------------------------------------------------------------------


class DirCompError(Exception):
    """Base class for every fatal error of a sync or unlock run."""

    kind: str = "error"


class DecodeError(DirCompError):
    """
    Malformed or truncated bencode input.

    Attributes:
        offset: Byte offset in the input where the problem was detected.
    """

    kind = "decode"

    def __init__(self, message: str, offset: Optional[int] = None):
        self.offset = offset
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(f"Bencode parse error: {message}")


class StringLengthError(DecodeError):
    """A byte string declares more bytes than the input still holds."""

    def __init__(self, needed: int, available: int, offset: Optional[int] = None):
        self.needed = needed
        self.available = available
        super().__init__(
            f"String: expected {needed} bytes but only {available} available",
            offset,
        )


class ExtractError(DirCompError):
    """The decoded metadata lacks a usable file manifest."""

    kind = "extract"


class TorrentReadError(DirCompError):
    """The torrent metadata file could not be read from disk."""

    kind = "read"


class SafetyError(DirCompError):
    """The target directory is too shallow for destructive operations."""

    kind = "safety"


class PreconditionError(DirCompError):
    """The target directory does not exist or is not a directory."""

    kind = "precondition"

# -----------------------------------------------------------------------------
# PER-ENTRY FAILURES
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class DeletionError:
    """
    Encapsulates a filesystem entry that could not be removed or listed.

    Attributes:
        rel_path: Entry path relative to the reconciliation root.
        error: Descriptive exception message.
    """
    rel_path: str
    error: str
