from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: argument parsing, configuration resolution
(defaults, persistent storage and CLI overrides), logging bootstrap, engine
execution, result rendering and exit-code selection.

Exit codes:
    0   run completed (including runs with some undeletable entries)
    1   fatal run error (unsafe path, bad torrent, missing directory)
    2   usage error (reported by argparse)
    130 interrupted
"""

import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Union

from dircomp.core.pipeline.engine import run_sync_file, run_unlock
from dircomp.core.pipeline.validator import validate_config
from dircomp.domain.config import get_config_path, get_default_config, load_config, save_config
from dircomp.domain.sync_models import SyncResult, UnlockResult
from dircomp.infra.fs import normalize_path
from dircomp.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    get_logger,
)
from dircomp.interface.cli import args as cli_args
from dircomp.utils.i18n import i18n

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Resolve configuration (Default vs Persistent state, then overrides)
    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    conf, warnings = validate_config(raw_conf, strict=False)

    # 3. Logging bootstrap (stderr console plus best-effort run log)
    configure_logging(_logging_config(conf))
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.save_config and save_config(conf):
        logger.info(i18n.t("cli.status.config_saved", path=get_config_path()))

    target_dir = normalize_path(args.directory)

    # 4. Engine execution phase
    result: Union[SyncResult, UnlockResult]
    try:
        if args.command == "sync":
            result = run_sync_file(
                normalize_path(args.torrent_file),
                target_dir,
                dry_run=conf["dry_run"],
                min_depth=conf["min_depth"],
                delay_seconds=conf["delay_seconds"],
                unlock_first=conf["unlock_before_sync"],
                unlock_timeout=conf["unlock_timeout"],
            )
        else:
            result = run_unlock(
                target_dir,
                min_depth=conf["min_depth"],
                timeout=conf["unlock_timeout"],
            )
    except KeyboardInterrupt:
        msg = i18n.t("cli.status.interrupted")
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        msg = i18n.t("cli.errors.unexpected", error=str(e))
        logger.critical(msg, exc_info=True)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_FAILURE

    # 5. Output rendering phase
    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    elif isinstance(result, SyncResult):
        _print_sync_summary(result)
    else:
        _print_unlock_summary(result)

    return EXIT_OK if result.ok else EXIT_FAILURE

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Perform a shallow merge of override values into the base configuration.

    Only known keys are merged, preventing schema pollution.
    """
    out = dict(base)
    for k in get_default_config():
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out


def _logging_config(conf: Dict[str, Any]) -> LoggingConfig:
    """The run log records every sync decision, whatever the console level."""
    log_file: Optional[str] = None
    if conf["log_to_file"]:
        log_file = normalize_path(conf["log_file"]) or get_default_log_path()
    file_level = "DEBUG" if conf["log_level"] == "DEBUG" else "INFO"
    return LoggingConfig(
        level=conf["log_level"],
        console=True,
        log_file=log_file,
        file_level=file_level,
    )

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_error(kind: str, error: str) -> None:
    msg = i18n.t(f"cli.errors.{kind}", default="{error}", error=error)
    print(f"ERROR: {msg}", file=sys.stderr)


def _print_sync_summary(result: SyncResult) -> None:
    """Render a SyncResult as a short terminal report."""
    if not result.ok or result.report is None:
        _print_error(result.error_kind, result.error)
        return

    report = result.report
    if report.dry_run:
        key = "cli.status.dry_run"
    elif report.is_clean:
        key = "cli.status.clean"
    else:
        key = "cli.status.synced"
    print(i18n.t(key, path=result.target_dir, files=report.files_deleted, dirs=report.dirs_deleted))

    if report.dry_run:
        for rel in report.deleted_files + report.deleted_dirs:
            print(f"  - {rel}")

    if report.failures:
        print(i18n.t("cli.status.failures", count=len(report.failures)))
        for failure in report.failures:
            print(f"  - {failure.rel_path}: {failure.error}")


def _print_unlock_summary(result: UnlockResult) -> None:
    """Render an UnlockResult as a short terminal report."""
    if not result.ok:
        _print_error(result.error_kind, result.error)
        return

    if result.skipped or result.report is None:
        print(i18n.t("cli.status.unlock_skipped", path=result.target_dir, reason=result.skipped))
        return

    print(i18n.t(
        "cli.status.unlocked",
        path=result.target_dir,
        terminated=result.report.processes_terminated,
        found=result.report.processes_found,
    ))

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
