from __future__ import annotations

"""
Sync and Unlock Domain Data Models.

Defines the reports produced by the reconciliation engine and the lock
releaser, and the result objects used to communicate run outcomes between
the engines and the interface layer.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from dircomp.domain.errors import DeletionError

# -----------------------------------------------------------------------------
# REPORTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ReconciliationReport:
    """
    Outcome of one reconciliation pass.

    Attributes:
        files_deleted: Number of files removed (or that would be removed).
        dirs_deleted: Number of empty directories removed.
        deleted_files: Relative paths of removed files, in deletion order.
        deleted_dirs: Relative paths of removed directories, in deletion order.
        failures: Entries that could not be removed or listed.
        dry_run: True when nothing was actually deleted.
    """
    files_deleted: int = 0
    dirs_deleted: int = 0
    deleted_files: List[str] = field(default_factory=list)
    deleted_dirs: List[str] = field(default_factory=list)
    failures: List[DeletionError] = field(default_factory=list)
    dry_run: bool = False

    @property
    def is_clean(self) -> bool:
        return self.files_deleted == 0 and self.dirs_deleted == 0


@dataclass(frozen=True)
class UnlockReport:
    """
    Outcome of a lock-release pass.

    Attributes:
        files_scanned: Number of files found under the directory.
        processes_found: Processes holding at least one of those files open.
        processes_terminated: Processes that exited after being signalled.
        failures: Human-readable descriptions of processes that survived.
    """
    files_scanned: int = 0
    processes_found: int = 0
    processes_terminated: int = 0
    failures: List[str] = field(default_factory=list)

# -----------------------------------------------------------------------------
# RUN RESULTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SyncResult:
    """
    Unified result of a sync run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        error_kind: Fatal error category (safety, decode, extract, read,
                    precondition) or empty on success.
        torrent_path: Metadata file used, when loaded from disk.
        target_dir: Directory that was reconciled.
        manifest_size: Number of paths declared by the torrent.
        report: Reconciliation counts, present on success.
    """
    ok: bool
    error: str
    error_kind: str
    target_dir: str
    torrent_path: str = ""
    manifest_size: int = 0
    report: Optional[ReconciliationReport] = None
    unlock: Optional[UnlockReport] = None


@dataclass(frozen=True)
class UnlockResult:
    """
    Unified result of an unlock run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        error_kind: Fatal error category or empty on success.
        target_dir: Directory whose files were released.
        skipped: Reason the run did nothing, if any.
        report: Process counts, present when a release pass ran.
    """
    ok: bool
    error: str
    error_kind: str
    target_dir: str
    skipped: str = ""
    report: Optional[UnlockReport] = None

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_sync_error(
        error: str,
        error_kind: str,
        target_dir: str,
        torrent_path: str = "",
) -> SyncResult:
    """
    Create a failed sync result instance.

    Args:
        error: Detailed error description.
        error_kind: Category of the fatal error.
        target_dir: The directory the run targeted.
        torrent_path: The metadata file, if any.

    Returns:
        SyncResult: An immutable error result object.
    """
    return SyncResult(
        ok=False,
        error=error,
        error_kind=error_kind,
        target_dir=target_dir,
        torrent_path=torrent_path,
    )


def create_sync_success(
        target_dir: str,
        report: ReconciliationReport,
        manifest_size: int,
        torrent_path: str = "",
        unlock: Optional[UnlockReport] = None,
) -> SyncResult:
    """
    Create a successful sync result instance.

    Args:
        target_dir: Reconciled directory.
        report: Reconciliation counts.
        manifest_size: Number of declared paths.
        torrent_path: The metadata file, if any.
        unlock: Lock-release report when an unlock pass preceded the sync.

    Returns:
        SyncResult: An immutable success result object.
    """
    return SyncResult(
        ok=True,
        error="",
        error_kind="",
        target_dir=target_dir,
        torrent_path=torrent_path,
        manifest_size=manifest_size,
        report=report,
        unlock=unlock,
    )
