from __future__ import annotations

"""
Bencode Decoder.

Parses the length-prefixed serialization used by torrent metadata into
native Python values. Containers are tracked on an explicit work stack, so
nesting is bounded by ``max_depth`` instead of the interpreter recursion
limit, and every malformed input ends in a ``DecodeError`` rather than an
index error.

Grammar:
    integer     i<decimal>e          (optional leading '-')
    byte string <length>:<bytes>
    list        l<values>e
    dictionary  d<byte string key><value>...e
"""

import re
from typing import List, Optional, Tuple, Union

from dircomp.domain.bencode_models import BValue
from dircomp.domain.constants import INT64_MAX, INT64_MIN, MAX_NESTING_DEPTH
from dircomp.domain.errors import DecodeError, StringLengthError

BytesLike = Union[bytes, bytearray, memoryview]

_INT = ord("i")
_LIST = ord("l")
_DICT = ord("d")
_END = ord("e")
_COLON = ord(":")
_DIGITS = frozenset(b"0123456789")

# Canonical integer body: no leading zeros, no '-0'
_INT_BODY_RX = re.compile(rb"-?(?:0|[1-9][0-9]*)")


# ==============================================================================
# PUBLIC API
# ==============================================================================

def parse(data: BytesLike, max_depth: int = MAX_NESTING_DEPTH) -> Tuple[BValue, bytes]:
    """
    Decode a single value from the start of ``data``.

    Args:
        data: Raw bencoded bytes.
        max_depth: Maximum number of nested lists/dictionaries accepted.

    Returns:
        Tuple[BValue, bytes]: The decoded value and the unconsumed bytes.

    Raises:
        DecodeError: On any syntax error, truncation or excessive nesting.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"Input data must be bytes, received {type(data).__name__}.")

    buf = bytes(data)
    size = len(buf)
    pos = 0
    stack: List[_Frame] = []

    while True:
        if pos >= size:
            if stack:
                raise DecodeError(stack[-1].eof_message(), pos)
            raise DecodeError("Unexpected end of data", pos)

        lead = buf[pos]
        value: BValue

        if lead == _END and stack:
            frame = stack.pop()
            if frame.pending_key is not None:
                raise DecodeError("Dictionary: missing value", pos)
            value = frame.container
            pos += 1
        elif lead == _LIST or lead == _DICT:
            if len(stack) >= max_depth:
                raise DecodeError(f"Nesting deeper than {max_depth} levels", pos)
            stack.append(_Frame(lead == _DICT, pos))
            pos += 1
            continue
        elif lead == _INT:
            value, pos = _read_integer(buf, pos)
        elif lead in _DIGITS:
            value, pos = _read_string(buf, pos)
        else:
            raise DecodeError(f"Unexpected byte {chr(lead)!r} (0x{lead:02x})", pos)

        if not stack:
            return value, buf[pos:]
        stack[-1].add(value)


def decode(data: BytesLike, max_depth: int = MAX_NESTING_DEPTH) -> BValue:
    """
    Decode ``data`` as exactly one value.

    Raises:
        DecodeError: On malformed input or bytes left after the value.
    """
    value, rest = parse(data, max_depth)
    if rest:
        raise DecodeError(
            f"{len(rest)} trailing bytes after root value",
            len(data) - len(rest),
        )
    return value


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

class _Frame:
    """An open list or dictionary waiting for its terminator."""

    __slots__ = ("is_dict", "offset", "container", "pending_key")

    def __init__(self, is_dict: bool, offset: int):
        self.is_dict = is_dict
        self.offset = offset
        self.container: BValue = {} if is_dict else []
        self.pending_key: Optional[bytes] = None

    def add(self, value: BValue) -> None:
        if not self.is_dict:
            self.container.append(value)  # type: ignore[union-attr]
            return

        if self.pending_key is None:
            if not isinstance(value, bytes):
                raise DecodeError(
                    f"Dictionary: key must be byte string, got {_type_name(value)}",
                    self.offset,
                )
            self.pending_key = value
        else:
            # Later duplicates overwrite earlier entries
            self.container[self.pending_key] = value  # type: ignore[index]
            self.pending_key = None

    def eof_message(self) -> str:
        if not self.is_dict:
            return "List: missing 'e'"
        if self.pending_key is not None:
            return "Dictionary: missing value"
        return "Dictionary: missing 'e'"


def _read_integer(buf: bytes, pos: int) -> Tuple[int, int]:
    """Read ``i<decimal>e`` starting at ``pos``; return (value, next offset)."""
    start = pos + 1
    end = buf.find(b"e", start)
    if end == -1:
        raise DecodeError("Integer: missing 'e'", pos)

    body = buf[start:end]
    if not _INT_BODY_RX.fullmatch(body) or body == b"-0":
        raise DecodeError(f"Integer: bad format {body.decode('ascii', 'replace')!r}", pos)

    number = int(body)
    if number < INT64_MIN or number > INT64_MAX:
        raise DecodeError(f"Integer: {body.decode('ascii')} out of 64-bit range", pos)
    return number, end + 1


def _read_string(buf: bytes, pos: int) -> Tuple[bytes, int]:
    """Read ``<length>:<bytes>`` starting at ``pos``; return (value, next offset)."""
    colon = pos
    size = len(buf)
    while colon < size and buf[colon] in _DIGITS:
        colon += 1

    if colon >= size or buf[colon] != _COLON:
        raise DecodeError("String: missing ':'", pos)

    digits = buf[pos:colon]
    if len(digits) > 1 and digits.startswith(b"0"):
        raise DecodeError(f"String: bad length {digits.decode('ascii')!r}", pos)

    length = int(digits)
    start = colon + 1
    available = size - start
    if length > available:
        raise StringLengthError(length, available, pos)
    return buf[start:start + length], start + length


def _type_name(value: BValue) -> str:
    if isinstance(value, int):
        return "integer"
    if isinstance(value, list):
        return "list"
    if isinstance(value, dict):
        return "dictionary"
    return "byte string"
