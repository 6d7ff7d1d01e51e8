from __future__ import annotations

"""
Core orchestration engines.

This module coordinates the two run modes of the tool:

sync:
    1. Optional pre-flight delay (lets the torrent client release handles).
    2. Path depth safety guard.
    3. Torrent decoding and manifest extraction.
    4. Optional lock release.
    5. Post-order reconciliation of the target directory.

unlock:
    1. Path depth safety guard.
    2. Release of file locks held by other processes.

Fatal errors are converted into failed result objects; the interface layer
never has to catch domain exceptions.
"""

import logging
import os
import time
from typing import Optional

from dircomp.core.bencode.decoder import BytesLike
from dircomp.core.bencode.manifest import manifest_from_bytes, read_torrent_file
from dircomp.core.safety import ensure_safe
from dircomp.core.services.reconciler import reconcile
from dircomp.core.services.unlocker import release_locks
from dircomp.domain.constants import (
    DEFAULT_UNLOCK_TIMEOUT,
    MIN_SAFE_DEPTH,
)
from dircomp.domain.errors import DirCompError
from dircomp.domain.sync_models import (
    SyncResult,
    UnlockReport,
    UnlockResult,
    create_sync_error,
    create_sync_success,
)

logger = logging.getLogger(__name__)


# ==============================================================================
# SYNC
# ==============================================================================

def run_sync(
        torrent_data: BytesLike,
        target_dir: str,
        *,
        dry_run: bool = False,
        min_depth: int = MIN_SAFE_DEPTH,
        delay_seconds: float = 0.0,
        unlock_first: bool = False,
        unlock_timeout: float = DEFAULT_UNLOCK_TIMEOUT,
        torrent_path: str = "",
) -> SyncResult:
    """
    Reconcile ``target_dir`` against the manifest of ``torrent_data``.

    Args:
        torrent_data: Raw bencoded torrent metadata.
        target_dir: Directory to clean up.
        dry_run: If True, report deletions without performing them.
        min_depth: Minimum path depth required by the safety guard.
        delay_seconds: Pre-flight sleep before touching the directory.
        unlock_first: Release file locks under the directory before syncing.
        unlock_timeout: Grace period for locking processes to exit.
        torrent_path: Metadata file name, used for reporting only.

    Returns:
        SyncResult: Run outcome with the reconciliation report on success.
    """
    if delay_seconds > 0:
        logger.debug(f"Waiting {delay_seconds:g}s before sync")
        time.sleep(delay_seconds)

    unlock: Optional[UnlockReport] = None
    try:
        ensure_safe(target_dir, min_depth)
        manifest = manifest_from_bytes(torrent_data)
        logger.debug(f"Torrent declares {len(manifest)} files")

        if unlock_first and not dry_run and os.path.isdir(target_dir):
            unlock = release_locks(target_dir, timeout=unlock_timeout)

        report = reconcile(manifest, target_dir, min_depth=min_depth, dry_run=dry_run)
    except DirCompError as e:
        logger.error(f"SYNC '{target_dir}' - {e}, aborted")
        return create_sync_error(str(e), e.kind, target_dir, torrent_path)

    prefix = "DRY RUN " if dry_run else ""
    if report.is_clean:
        logger.info(f"{prefix}SYNC '{target_dir}' - clean, nothing to remove")
    else:
        logger.info(
            f"{prefix}SYNC '{target_dir}' - deleted {report.files_deleted} files, "
            f"{report.dirs_deleted} empty dirs"
        )
    if report.failures:
        logger.warning(f"SYNC '{target_dir}' - {len(report.failures)} entries could not be removed")

    return create_sync_success(
        target_dir,
        report,
        manifest_size=len(manifest),
        torrent_path=torrent_path,
        unlock=unlock,
    )


def run_sync_file(
        torrent_path: str,
        target_dir: str,
        *,
        min_depth: int = MIN_SAFE_DEPTH,
        **kwargs,
) -> SyncResult:
    """
    Read a ``.torrent`` file and delegate to :func:`run_sync`.

    The target is checked by the safety guard before the metadata file is
    opened. A missing or unreadable metadata file yields a failed result of
    kind ``read``.
    """
    try:
        ensure_safe(target_dir, min_depth)
        data = read_torrent_file(torrent_path)
    except DirCompError as e:
        logger.error(f"SYNC '{target_dir}' - {e}, aborted")
        return create_sync_error(str(e), e.kind, target_dir, torrent_path)

    return run_sync(data, target_dir, min_depth=min_depth, torrent_path=torrent_path, **kwargs)


# ==============================================================================
# UNLOCK
# ==============================================================================

def run_unlock(
        target_dir: str,
        *,
        min_depth: int = MIN_SAFE_DEPTH,
        timeout: float = DEFAULT_UNLOCK_TIMEOUT,
) -> UnlockResult:
    """
    Terminate processes holding files open under ``target_dir``.

    A missing or empty directory is not an error: there is nothing to release.

    Returns:
        UnlockResult: Run outcome with process counts when a pass ran.
    """
    try:
        ensure_safe(target_dir, min_depth)
    except DirCompError as e:
        logger.error(f"UNLOCK '{target_dir}' - {e}, aborted")
        return UnlockResult(ok=False, error=str(e), error_kind=e.kind, target_dir=target_dir)

    if not os.path.isdir(target_dir):
        logger.info(f"UNLOCK '{target_dir}' - directory does not exist, skipped")
        return UnlockResult(
            ok=True, error="", error_kind="", target_dir=target_dir,
            skipped="directory does not exist",
        )

    report = release_locks(target_dir, timeout=timeout)
    if report.files_scanned == 0:
        logger.info(f"UNLOCK '{target_dir}' - no files found, skipped")
        return UnlockResult(
            ok=True, error="", error_kind="", target_dir=target_dir,
            skipped="no files found", report=report,
        )

    if report.processes_found == 0:
        logger.info(f"UNLOCK '{target_dir}' - no locking processes")
    else:
        logger.info(
            f"UNLOCK '{target_dir}' - terminated {report.processes_terminated} "
            f"of {report.processes_found} processes"
        )
    return UnlockResult(ok=True, error="", error_kind="", target_dir=target_dir, report=report)
