from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema (``sync`` and ``unlock`` commands, shared
diagnostic options) and translates the parsed namespace into configuration
overrides.
"""

import argparse
from typing import Any, Dict

from dircomp.utils.i18n import i18n

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the dircomp CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    common = _build_common_parser()

    p = argparse.ArgumentParser(
        prog="dircomp",
        description=i18n.t("app.description"),
    )
    sub = p.add_subparsers(dest="command", metavar="{sync,unlock}")
    sub.required = True

    # --- sync <torrent_file> <directory> ---
    sync = sub.add_parser("sync", parents=[common], help=i18n.t("cli.args.sync"))
    sync.add_argument("torrent_file", help=i18n.t("cli.args.torrent"))
    sync.add_argument("directory", help=i18n.t("cli.args.directory"))
    sync.add_argument(
        "--dry-run",
        action="store_true",
        help=i18n.t("cli.args.dry_run"),
    )
    sync.add_argument(
        "--delay",
        dest="delay_seconds",
        type=float,
        default=None,
        help=i18n.t("cli.args.delay"),
    )
    sync.add_argument(
        "--unlock",
        dest="unlock_first",
        action="store_true",
        help=i18n.t("cli.args.unlock_first"),
    )

    # --- unlock <directory> ---
    unlock = sub.add_parser("unlock", parents=[common], help=i18n.t("cli.args.unlock"))
    unlock.add_argument("directory", help=i18n.t("cli.args.directory"))

    return p


def _build_common_parser() -> argparse.ArgumentParser:
    """Options shared by every command."""
    c = argparse.ArgumentParser(add_help=False)

    # --- Safety ---
    c.add_argument(
        "--min-depth",
        dest="min_depth",
        type=int,
        default=None,
        help=i18n.t("cli.args.min_depth"),
    )
    c.add_argument(
        "--timeout",
        dest="unlock_timeout",
        type=float,
        default=None,
        help=i18n.t("cli.args.timeout"),
    )

    # --- Configuration and Diagnostic Tools ---
    c.add_argument(
        "--use-defaults",
        action="store_true",
        help=i18n.t("cli.args.defaults"),
    )
    c.add_argument(
        "--save-config",
        dest="save_config",
        action="store_true",
        help=i18n.t("cli.args.save_config"),
    )
    c.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help=i18n.t("cli.args.log_file"),
    )
    c.add_argument(
        "--no-log-file",
        action="store_true",
        help=i18n.t("cli.args.no_log_file"),
    )
    c.add_argument(
        "--debug",
        action="store_true",
        help=i18n.t("cli.args.debug"),
    )

    # --- Format Selection ---
    c.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help=i18n.t("cli.args.json"),
    )
    return c

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a configuration dictionary.

    Only options the user actually passed are included, so saved
    configuration values survive for everything else.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    if args.min_depth is not None:
        overrides["min_depth"] = args.min_depth
    if args.unlock_timeout is not None:
        overrides["unlock_timeout"] = args.unlock_timeout

    # Sync-only options
    if getattr(args, "dry_run", False):
        overrides["dry_run"] = True
    if getattr(args, "delay_seconds", None) is not None:
        overrides["delay_seconds"] = args.delay_seconds
    if getattr(args, "unlock_first", False):
        overrides["unlock_before_sync"] = True

    # Diagnostics
    if args.debug:
        overrides["log_level"] = "DEBUG"
    if args.log_file:
        overrides["log_file"] = args.log_file
    if args.no_log_file:
        overrides["log_to_file"] = False

    return overrides
