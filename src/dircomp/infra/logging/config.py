from __future__ import annotations

"""
Logging Configuration Models.

Describes the two sinks of a run: the stderr console and the append-only
run log, where every sync and unlock leaves one timestamped line per
decision (``[2024-05-01 12:00:00] INFO | SYNC '...' - clean, nothing to
remove``). The run log may keep a more verbose level than the console.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

_LEVEL_NAMES: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def parse_level(level: Optional[str], fallback: int = logging.INFO) -> int:
    """Map a level name (case-insensitive) to its numeric value."""
    if not level:
        return fallback
    return _LEVEL_NAMES.get(str(level).strip().upper(), fallback)


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings for the console and run log sinks.

    Attributes:
        level: Console severity threshold.
        console: Write records to stderr.
        log_file: Run log path; None disables the run log.
        file_level: Run log threshold; defaults to ``level``.
        max_bytes: Run log size before it rolls over.
        backup_count: Rolled-over run logs kept next to the live one.
        console_fmt: Terminal line format.
        file_fmt: Run log line format.
        datefmt: Timestamp format of run log lines.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None
    file_level: Optional[str] = None

    # Runs are a handful of lines each; 1 MB holds months of history
    max_bytes: int = 1024 * 1024
    backup_count: int = 5

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "[%(asctime)s] %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @property
    def console_level(self) -> int:
        return parse_level(self.level)

    @property
    def run_log_level(self) -> int:
        return parse_level(self.file_level, self.console_level)

    @property
    def root_level(self) -> int:
        """Lowest threshold among the enabled sinks."""
        levels = []
        if self.console:
            levels.append(self.console_level)
        if self.log_file:
            levels.append(self.run_log_level)
        return min(levels) if levels else self.console_level
