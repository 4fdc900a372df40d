"""
CLI Parser - Argument parser for the ycmd-client command.
"""

import argparse

from ..protocol import EventKind

__all__ = ["create_parser"]


def _add_location(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Source file path")
    parser.add_argument("filetype", help="Filetype, e.g. python")
    parser.add_argument("line", type=int, help="1-based line number")
    parser.add_argument("column", type=int, help="1-based column number")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ycmd-client",
        description="Start a ycmd daemon and send it one signed request",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: YCMD_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--ready-timeout",
        type=float,
        default=10.0,
        help="Seconds to wait for the daemon to answer (default: 10)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # ready
    ready_parser = subparsers.add_parser("ready", help="Check daemon readiness")
    ready_parser.add_argument(
        "--no-subservers",
        action="store_true",
        help="Don't ask about language subservers",
    )

    # complete
    complete_parser = subparsers.add_parser("complete", help="Request code completions")
    _add_location(complete_parser)

    # goto
    goto_parser = subparsers.add_parser("goto", help="Go to definition")
    _add_location(goto_parser)

    # subcommands
    subcommands_parser = subparsers.add_parser("subcommands", help="List completer subcommands")
    subcommands_parser.add_argument("target", help="Completer target, e.g. python")

    # event
    event_parser = subparsers.add_parser("event", help="Send an event notification")
    event_parser.add_argument(
        "kind",
        type=EventKind.parse,
        help="One of: " + ", ".join(k.name.lower() for k in EventKind),
    )
    _add_location(event_parser)

    # extra-conf
    extra_parser = subparsers.add_parser("extra-conf", help="Load an extra conf file")
    extra_parser.add_argument("path", help="Path to the extra conf file")

    return parser
