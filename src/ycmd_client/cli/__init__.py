"""
CLI - Command-line interface for the ycmd client.

Each invocation starts a private daemon, waits until it answers, runs one
request, prints the JSON response and shuts the daemon down.

Commands:
    ycmd-client ready                          Start a daemon and check readiness
    ycmd-client complete FILE TYPE LINE COL    Code completions
    ycmd-client goto FILE TYPE LINE COL        GoTo definition
    ycmd-client subcommands TARGET             Subcommands of a completer
    ycmd-client event KIND FILE TYPE LINE COL  Send an editor event
    ycmd-client extra-conf PATH                Load an extra conf file

Example:
    $ YCMD_SERVER_COMMAND="python3 /opt/ycmd/ycmd" ycmd-client complete app.py python 10 4
"""

from .main import main

__all__ = ["main"]
