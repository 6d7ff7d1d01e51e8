from __future__ import annotations

"""
Domain Constants.

Provides centralized access to the policy values shared by the decoder,
the safety guard, the reconciliation engine and the CLI.
"""

CURRENT_CONFIG_VERSION = "1.0.0"

# Minimum number of path segments a target directory must have before any
# destructive operation is allowed (drive/root + two directory levels).
MIN_SAFE_DEPTH = 3

# Maximum container nesting accepted by the bencode decoder.
MAX_NESTING_DEPTH = 512

# Largest and smallest values representable by a signed 64-bit integer.
INT64_MAX = 2 ** 63 - 1
INT64_MIN = -(2 ** 63)

# Seconds to wait before a sync so the torrent client can release handles.
DEFAULT_SYNC_DELAY = 3.0

# Seconds granted to locking processes to exit before they are killed.
DEFAULT_UNLOCK_TIMEOUT = 5.0

# Torrent metadata keys
KEY_INFO = b"info"
KEY_FILES = b"files"
KEY_PATH = b"path"
KEY_NAME = b"name"
