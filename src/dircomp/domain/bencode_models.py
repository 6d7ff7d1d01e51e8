from __future__ import annotations

"""
Bencode Value Data Model.

The four wire variants map onto native Python types: integers are ``int``,
byte strings are ``bytes``, lists are ``list`` and dictionaries are ``dict``
keyed by ``bytes``. The accessors below give typed, ``None``-on-mismatch
navigation over a decoded tree.
"""

from typing import Dict, List, Optional, Union

BValue = Union[int, bytes, List["BValue"], Dict[bytes, "BValue"]]


def field(value: BValue, key: bytes) -> Optional[BValue]:
    """Return ``value[key]`` when ``value`` is a dictionary holding ``key``."""
    if isinstance(value, dict):
        return value.get(key)
    return None


def as_list(value: Optional[BValue]) -> Optional[List[BValue]]:
    if isinstance(value, list):
        return value
    return None


def as_dict(value: Optional[BValue]) -> Optional[Dict[bytes, BValue]]:
    if isinstance(value, dict):
        return value
    return None


def as_bytes(value: Optional[BValue]) -> Optional[bytes]:
    if isinstance(value, bytes):
        return value
    return None


def as_text_lossy(value: Optional[BValue]) -> Optional[str]:
    """
    Decode a byte string as UTF-8, replacing invalid sequences.

    Legacy torrents often carry names in local code pages; those bytes are
    replaced rather than rejected.
    """
    raw = as_bytes(value)
    if raw is None:
        return None
    return raw.decode("utf-8", errors="replace")
