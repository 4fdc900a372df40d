"""
CLI Main - Entry point for the `ycmd-client` command.
"""

import argparse
import asyncio
import json
import sys
from typing import Any

import httpx

from ..client import DaemonClient
from ..config import ClientConfig
from ..errors import YcmdError
from ..logging import configure_logging
from ..supervisor import ProcessSupervisor
from .parser import create_parser

__all__ = ["main", "run_command"]


async def run_command(
    args: argparse.Namespace,
    config: ClientConfig,
    supervisor: ProcessSupervisor | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """Start a daemon, run the parsed command against it, shut it down.

    Args:
        args: Parsed arguments
        config: Client configuration
        supervisor: Process supervisor (default: one built from config)
        transport: HTTP transport override for the daemon connection

    Returns:
        The daemon's JSON response
    """
    async with await DaemonClient.start(config, supervisor=supervisor, transport=transport) as client:
        await client.wait_until_ready(timeout=args.ready_timeout)

        if args.command == "ready":
            return await client.is_ready(include_subservers=not args.no_subservers)
        elif args.command == "complete":
            return await client.code_completion(args.file, args.filetype, args.line, args.column)
        elif args.command == "goto":
            return await client.go_to(args.file, args.filetype, args.line, args.column)
        elif args.command == "subcommands":
            return await client.list_subcommands(args.target)
        elif args.command == "event":
            return await client.send_event(
                args.kind, args.file, args.filetype, args.line, args.column
            )
        elif args.command == "extra-conf":
            return await client.load_extra_config(args.path)

    raise ValueError(f"Unknown command: {args.command}")


def main(args: list[str] | None = None) -> int:
    """Main entry point for the ycmd-client CLI.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.command is None:
        parser.print_help()
        return 0

    configure_logging(parsed.log_level)
    config = ClientConfig()

    try:
        result = asyncio.run(run_command(parsed, config))
    except KeyboardInterrupt:
        return 130
    except YcmdError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
