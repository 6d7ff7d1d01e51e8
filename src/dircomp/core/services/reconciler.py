from __future__ import annotations

"""
Directory Reconciliation Service.

Walks a live directory tree, compares every file against the torrent
Manifest and removes what the torrent does not declare. The walk is
depth-first and post-order: a directory is only considered for removal once
all of its children have been handled, so folders emptied by the cleanup are
pruned in the same pass. The reconciliation root itself is never removed.

Only path identity and the file/directory discriminator are consulted; file
contents are never read. Symbolic links are not followed: a link is kept when
its path is declared or leads to declared files, and removed otherwise.
"""

import errno
import logging
import os
from dataclasses import dataclass, field
from typing import List, Set

from dircomp.core.safety import ensure_safe
from dircomp.domain.constants import MIN_SAFE_DEPTH
from dircomp.domain.errors import DeletionError, PreconditionError
from dircomp.domain.manifest import Manifest
from dircomp.domain.sync_models import ReconciliationReport

logger = logging.getLogger(__name__)

# rmdir failures that simply mean "still has content"
_NOT_EMPTY_ERRNOS = frozenset({errno.ENOTEMPTY, errno.EEXIST})


# ==============================================================================
# PUBLIC API
# ==============================================================================

def reconcile(
        manifest: Manifest,
        root: str,
        *,
        min_depth: int = MIN_SAFE_DEPTH,
        dry_run: bool = False,
) -> ReconciliationReport:
    """
    Delete every file under ``root`` that the Manifest does not declare,
    then every directory left empty.

    Preconditions are checked before anything is listed or removed:
    the path must pass the depth guard, then it must be an existing directory.
    Individual deletion failures are recorded in the report and never abort
    the run.

    Args:
        manifest: Relative paths declared by the torrent.
        root: Directory to reconcile.
        min_depth: Minimum path depth required by the safety guard.
        dry_run: If True, report what would be deleted without touching disk.

    Returns:
        ReconciliationReport: Counts, deleted paths and recorded failures.

    Raises:
        SafetyError: If ``root`` is too shallow.
        PreconditionError: If ``root`` is not an existing directory.
    """
    ensure_safe(root, min_depth)
    if not os.path.isdir(root):
        raise PreconditionError(f"Directory '{root}' does not exist")

    root_abs = os.path.abspath(root)
    state = _WalkState(manifest=manifest, root=root_abs, dry_run=dry_run)

    # Explicit stack: a frame is scanned on first visit and finalized on the
    # second, after every subdirectory pushed above it has been finalized.
    stack: List[_DirFrame] = [_DirFrame(root_abs)]
    while stack:
        frame = stack[-1]
        if not frame.scanned:
            frame.scanned = True
            if _scan(frame, state):
                stack.extend(_DirFrame(d) for d in reversed(frame.subdirs))
            continue

        stack.pop()
        _finalize(frame, state)

    report = ReconciliationReport(
        files_deleted=len(state.deleted_files),
        dirs_deleted=len(state.deleted_dirs),
        deleted_files=state.deleted_files,
        deleted_dirs=state.deleted_dirs,
        failures=state.failures,
        dry_run=dry_run,
    )
    logger.debug(
        f"Reconciled '{root_abs}': {report.files_deleted} files, "
        f"{report.dirs_deleted} dirs, {len(report.failures)} failures"
    )
    return report


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

@dataclass
class _DirFrame:
    """A directory on the traversal stack."""
    path: str
    scanned: bool = False
    listed: bool = False
    subdirs: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)


@dataclass
class _WalkState:
    """Accumulators shared by every frame of one reconciliation pass."""
    manifest: Manifest
    root: str
    dry_run: bool
    deleted_files: List[str] = field(default_factory=list)
    deleted_dirs: List[str] = field(default_factory=list)
    failures: List[DeletionError] = field(default_factory=list)
    # Directories that are (or would be) gone; used to simulate emptiness.
    removed: Set[str] = field(default_factory=set)


def _scan(frame: _DirFrame, state: _WalkState) -> bool:
    """Split a directory's entries into subdirectories and files."""
    try:
        with os.scandir(frame.path) as it:
            for entry in it:
                # Symlinks are never followed; they are handled like files.
                if entry.is_dir(follow_symlinks=False):
                    frame.subdirs.append(entry.path)
                else:
                    frame.files.append(entry.path)
    except OSError as e:
        rel = _relative(frame.path, state.root)
        logger.warning(f"Cannot list '{rel}': {e}")
        state.failures.append(DeletionError(rel_path=rel, error=str(e)))
        return False

    frame.subdirs.sort()
    frame.files.sort()
    frame.listed = True
    return True


def _finalize(frame: _DirFrame, state: _WalkState) -> None:
    """Handle a directory's files, then try to remove the directory itself."""
    remaining = 0

    for file_path in frame.files:
        rel = _relative(file_path, state.root)
        if rel in state.manifest:
            remaining += 1
            continue
        if state.manifest.is_ancestor(rel):
            # A link standing in for a declared folder; kept, never followed
            logger.debug(f"Keeping '{rel}': declared files lie beneath it")
            remaining += 1
            continue
        if _remove_file(file_path, rel, state):
            state.deleted_files.append(rel)
        else:
            remaining += 1

    if frame.path == state.root:
        return

    remaining += sum(1 for d in frame.subdirs if d not in state.removed)
    rel_dir = _relative(frame.path, state.root)

    if not frame.listed or remaining > 0:
        logger.debug(f"Keeping non-empty directory '{rel_dir}'")
        return

    if state.dry_run:
        state.removed.add(frame.path)
        state.deleted_dirs.append(rel_dir)
        return

    try:
        os.rmdir(frame.path)
    except OSError as e:
        if e.errno in _NOT_EMPTY_ERRNOS:
            logger.debug(f"Keeping non-empty directory '{rel_dir}'")
        else:
            logger.warning(f"Failed to delete directory '{rel_dir}': {e}")
            state.failures.append(DeletionError(rel_path=rel_dir, error=str(e)))
        return

    state.removed.add(frame.path)
    state.deleted_dirs.append(rel_dir)


def _remove_file(path: str, rel: str, state: _WalkState) -> bool:
    if state.dry_run:
        return True
    try:
        os.remove(path)
        return True
    except OSError as e:
        logger.warning(f"Failed to delete '{rel}': {e}")
        state.failures.append(DeletionError(rel_path=rel, error=str(e)))
        return False


def _relative(path: str, root: str) -> str:
    return os.path.relpath(path, root)
