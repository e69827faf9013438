"""Command-line interface entry points for the Wavelog bridge."""

from __future__ import annotations

import argparse
import sys
from argparse import Namespace
from typing import Protocol

from wavelog_bridge import __version__
from wavelog_bridge.commands import (
    run_bridge,
    run_save_profile,
    run_set_default_profile,
    run_show,
)
from wavelog_bridge.logsetup import configure_logging

DEFAULT_COMMAND = "run"


class CommandHandler(Protocol):
    """Callable signature for CLI subcommands."""

    def __call__(self, args: Namespace) -> int:  # pragma: no cover - typing hook
        ...


def _add_config_flag(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--config",
        help="Path to configuration file (overrides default location)",
    )


def _add_setting_flags(p: argparse.ArgumentParser) -> None:
    """Settings that override the selected profile for this invocation only."""
    p.add_argument(
        "--profile",
        help="Select a named configuration profile (overrides the stored default)",
    )
    p.add_argument("--wavelog-url", help="Wavelog base URL, e.g. https://host/index.php")
    p.add_argument("--wavelog-key", help="Wavelog API key")
    p.add_argument("--radio-name", help="Name of the radio shown in Wavelog (e.g. FT-891)")
    p.add_argument("--flrig-host", help="flrig XML-RPC host address")
    p.add_argument("--flrig-port", type=int, help="flrig XML-RPC port")
    p.add_argument("--hamlib-host", help="Hamlib rigctld host address")
    p.add_argument("--hamlib-port", type=int, help="Hamlib rigctld port")
    p.add_argument("--interval", help="Polling interval (e.g. 1s, 1500ms)")
    p.add_argument("--data-source", help="Data source: 'flrig' or 'hamlib'")
    p.add_argument(
        "--log-level",
        help="Logging level: 'debug', 'info', 'warn' or 'error'",
    )


def build_parser(handlers: dict[str, CommandHandler] | None = None) -> argparse.ArgumentParser:
    """Construct the top-level argument parser."""

    handlers = handlers or _command_handlers()

    parser = argparse.ArgumentParser(
        prog="wavelog-bridge",
        description="Forward flrig/Hamlib radio status to Wavelog.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Environment overrides:\n"
            "  WAVELOG_BRIDGE_LOG_LEVEL    Logging level when the profile leaves it blank.\n"
            "  WAVELOG_BRIDGE_CONFIG_PATH  Path to config.toml holding stored profiles."
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"wavelog-bridge {__version__}",
        help="Show package version and exit",
    )
    parser.set_defaults(command=DEFAULT_COMMAND, handler=handlers[DEFAULT_COMMAND])

    subparsers = parser.add_subparsers(dest="command", required=False)

    run_parser = subparsers.add_parser("run", help="Poll the radio and update Wavelog")
    run_parser.set_defaults(command="run", handler=handlers["run"])
    _add_config_flag(run_parser)
    _add_setting_flags(run_parser)

    save_parser = subparsers.add_parser(
        "save-profile",
        help="Save the current settings (profile + flags) under a profile name",
    )
    save_parser.set_defaults(command="save-profile", handler=handlers["save-profile"])
    save_parser.add_argument("name", help="Profile name to write")
    save_parser.add_argument(
        "--key-in-keyring",
        action="store_true",
        help="Store the API key in the system keyring instead of the file",
    )
    _add_config_flag(save_parser)
    _add_setting_flags(save_parser)

    default_parser = subparsers.add_parser(
        "set-default-profile", help="Set the profile used when --profile is omitted"
    )
    default_parser.set_defaults(
        command="set-default-profile", handler=handlers["set-default-profile"]
    )
    default_parser.add_argument("name", help="Existing profile name")
    _add_config_flag(default_parser)

    show_parser = subparsers.add_parser("show", help="Print the merged configuration")
    show_parser.set_defaults(command="show", handler=handlers["show"])
    _add_config_flag(show_parser)
    _add_setting_flags(show_parser)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Process CLI arguments and dispatch to the requested command."""

    handlers = _command_handlers()
    parser = build_parser(handlers)

    argv_list = list(sys.argv[1:] if argv is None else argv)
    normalized = _normalize_argv(argv_list, handlers)
    args = parser.parse_args(normalized)

    configure_logging(getattr(args, "log_level", None))

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 0

    return handler(args)


def _command_handlers() -> dict[str, CommandHandler]:
    """Return the mapping of subcommand names to handler callables."""

    return {
        "run": run_bridge,
        "save-profile": run_save_profile,
        "set-default-profile": run_set_default_profile,
        "show": run_show,
    }


def _normalize_argv(argv: list[str], handlers: dict[str, CommandHandler]) -> list[str]:
    """Inject the default subcommand when the user only passes flags."""

    if not argv:
        return [DEFAULT_COMMAND]

    first = argv[0]
    if first in ("-h", "--help", "--version"):
        return argv

    if first.startswith("-"):
        return [DEFAULT_COMMAND, *argv]

    return argv


if __name__ == "__main__":  # pragma: no cover - direct CLI execution path
    raise SystemExit(main())
