"""
Request payloads for the ycmd daemon.

A payload describes where the cursor is and what the buffer holds:

    {
        "line_num": 10,
        "column_num": 4,
        "filepath": "/tmp/a.py",
        "file_data": {
            "test_path": {"filetypes": ["python"], "contents": "print(1)"}
        },
    }

``command_arguments`` and ``completer_target`` are added only when given.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from .errors import FileReadFailure
from .protocol import FILE_DATA_KEY

__all__ = ["RequestBuilder", "RequestContext", "read_file"]

logger = structlog.get_logger(__name__)

FileReader = Callable[[str], bytes]


def read_file(path: str) -> bytes:
    """Default byte provider: read the whole file from disk."""
    return Path(path).read_bytes()


@dataclass(frozen=True)
class RequestContext:
    """Caller intent for one request.

    Every field is optional; operations fill in only what applies to
    them (subcommand discovery, for instance, has no location).
    """

    filepath: str | None = None
    filetype: str | None = None
    line_num: int | None = None
    column_num: int | None = None
    command_arguments: list[str] = field(default_factory=list)
    completer_target: str | None = None
    extra_data: dict[str, Any] = field(default_factory=dict)


class RequestBuilder:
    """Builds payload dicts from a RequestContext.

    Example:
        builder = RequestBuilder()
        payload = builder.build(RequestContext(
            filepath="/tmp/a.py",
            filetype="python",
            line_num=10,
            column_num=4,
        ))
    """

    def __init__(self, reader: FileReader = read_file, encoding: str = "utf-8") -> None:
        self.reader = reader
        self.encoding = encoding

    def build(self, context: RequestContext) -> dict[str, Any]:
        """Assemble a fresh payload.

        Raises:
            FileReadFailure: If the file is missing, unreadable or not text
        """
        file_data: dict[str, Any] = {}
        if context.filepath is not None:
            file_data[FILE_DATA_KEY] = {
                "filetypes": [context.filetype],
                "contents": self._read(context.filepath),
            }

        data: dict[str, Any] = {
            "line_num": context.line_num,
            "column_num": context.column_num,
            "filepath": context.filepath,
            "file_data": file_data,
        }
        if context.command_arguments:
            data["command_arguments"] = list(context.command_arguments)
        if context.completer_target is not None:
            data["completer_target"] = context.completer_target
        data.update(context.extra_data)

        return data

    def _read(self, path: str) -> str:
        try:
            raw = self.reader(path)
        except OSError as e:
            logger.warning("file_read_failed", path=path, error=str(e))
            raise FileReadFailure(path, e.strerror or str(e)) from e

        try:
            return raw.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise FileReadFailure(path, f"not valid {self.encoding}") from e
