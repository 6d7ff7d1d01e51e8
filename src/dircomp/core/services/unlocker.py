from __future__ import annotations

"""
File Lock Release Service.

Finds processes holding open handles to files under a directory and
terminates them so the files can be removed. Kept independent from the
reconciliation engine: callers run it before a sync when a torrent client
or media player may still be holding files.
"""

import logging
import os
from typing import List, Set

import psutil

from dircomp.domain.constants import DEFAULT_UNLOCK_TIMEOUT
from dircomp.domain.sync_models import UnlockReport

logger = logging.getLogger(__name__)

# Errors that mean "this process is gone or not ours to inspect"
_SKIPPABLE = (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def collect_files(directory: str) -> List[str]:
    """Return the absolute paths of every file below ``directory``."""
    files: List[str] = []
    for root, _dirs, names in os.walk(directory):
        for name in names:
            files.append(os.path.join(root, name))
    return files


def find_locking_processes(directory: str) -> List[psutil.Process]:
    """
    List the processes with at least one open file under ``directory``.

    The current process is never included. Processes that vanish or deny
    access while being inspected are skipped.
    """
    prefix = os.path.join(os.path.realpath(directory), "")
    own_pid = os.getpid()
    found: List[psutil.Process] = []

    for proc in psutil.process_iter(["pid", "name"]):
        if proc.info["pid"] == own_pid:
            continue
        try:
            open_files = proc.open_files()
        except _SKIPPABLE:
            continue

        if any(os.path.realpath(f.path).startswith(prefix) for f in open_files):
            logger.debug(f"Process {proc.info['name']} ({proc.info['pid']}) holds files")
            found.append(proc)

    return found


def release_locks(directory: str, *, timeout: float = DEFAULT_UNLOCK_TIMEOUT) -> UnlockReport:
    """
    Terminate every process holding files open under ``directory``.

    Processes get ``timeout`` seconds to exit after a terminate signal; the
    survivors are killed.

    Args:
        directory: Directory whose files should be released.
        timeout: Grace period before escalating to a kill.

    Returns:
        UnlockReport: Scan and termination counts.
    """
    files = collect_files(directory)
    if not files:
        return UnlockReport()

    procs = find_locking_processes(directory)
    if not procs:
        return UnlockReport(files_scanned=len(files))

    signalled: List[psutil.Process] = []
    failures: List[str] = []
    for proc in procs:
        try:
            proc.terminate()
            signalled.append(proc)
        except psutil.NoSuchProcess:
            signalled.append(proc)
        except (psutil.AccessDenied, psutil.ZombieProcess) as e:
            failures.append(f"{proc.pid}: {e}")

    gone, alive = psutil.wait_procs(signalled, timeout=timeout)
    terminated: Set[int] = {p.pid for p in gone}

    for proc in alive:
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            terminated.add(proc.pid)
            continue
        except psutil.AccessDenied as e:
            failures.append(f"{proc.pid}: {e}")
            continue
        terminated.add(proc.pid)

    for failure in failures:
        logger.warning(f"Could not stop process {failure}")

    return UnlockReport(
        files_scanned=len(files),
        processes_found=len(procs),
        processes_terminated=len(terminated),
        failures=failures,
    )
