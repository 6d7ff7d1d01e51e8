from __future__ import annotations

"""
Unit tests for CLI Argument Parsing.

Verifies:
1. The sync and unlock command schemas.
2. Mapping of CLI flags to configuration keys.
3. That options the user did not pass produce no overrides.
"""

import pytest

from dircomp.interface.cli.args import args_to_overrides, build_parser


def parse_args(arg_list):
    """Helper to simulate CLI argument parsing."""
    parser = build_parser()
    return parser.parse_args(arg_list)


def test_sync_positionals() -> None:
    args = parse_args(["sync", "a.torrent", "/data/dl/A"])

    assert args.command == "sync"
    assert args.torrent_file == "a.torrent"
    assert args.directory == "/data/dl/A"


def test_sync_flags_mapping() -> None:
    args = parse_args([
        "sync", "a.torrent", "/data/dl/A",
        "--dry-run",
        "--delay", "0",
        "--unlock",
        "--min-depth", "4",
        "--timeout", "2",
        "--debug",
        "--no-log-file",
    ])

    overrides = args_to_overrides(args)

    assert overrides == {
        "dry_run": True,
        "delay_seconds": 0.0,
        "unlock_before_sync": True,
        "min_depth": 4,
        "unlock_timeout": 2.0,
        "log_level": "DEBUG",
        "log_to_file": False,
    }


def test_unset_options_produce_no_overrides() -> None:
    args = parse_args(["sync", "a.torrent", "/data/dl/A"])
    assert args_to_overrides(args) == {}


def test_unlock_command() -> None:
    args = parse_args(["unlock", "/data/dl/A", "--timeout", "1.5", "--log-file", "run.log"])
    overrides = args_to_overrides(args)

    assert args.command == "unlock"
    assert overrides == {"unlock_timeout": 1.5, "log_file": "run.log"}


def test_json_and_defaults_flags_are_not_config() -> None:
    args = parse_args(["unlock", "/data/dl/A", "--json", "--use-defaults"])

    assert args.json_output is True
    assert args.use_defaults is True
    assert args_to_overrides(args) == {}


def test_save_config_flag_is_not_config() -> None:
    args = parse_args(["sync", "a.torrent", "/data/dl/A", "--min-depth", "5", "--save-config"])

    assert args.save_config is True
    assert args_to_overrides(args) == {"min_depth": 5}
    assert parse_args(["unlock", "/data/dl/A"]).save_config is False


@pytest.mark.parametrize("argv", [
    [],
    ["sync", "only-one-arg"],
    ["unlock"],
    ["sync", "a.torrent", "/x", "--delay", "soon"],
])
def test_usage_errors_exit_with_code_2(argv) -> None:
    with pytest.raises(SystemExit) as exc_info:
        parse_args(argv)
    assert exc_info.value.code == 2
