"""Line source over a binary script resource.

Reads fixed-size chunks into a buffer and hands out one UTF-8 line at a
time. A script must end with a newline: running out of bytes in the
middle of a line is an error, never a silently accepted final line.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from tasrecord.errors import ScriptResourceError, ScriptSyntaxError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 256
DEFAULT_MAX_LINE_LENGTH = 256


class LineSource:
    """Newline-delimited reader with a 1-based line counter.

    The line-length limit is soft by default: an over-long line is
    logged and still returned. With ``strict_line_length`` it becomes a
    decode error.
    """

    def __init__(
        self,
        stream: BinaryIO,
        path: str | Path,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
        strict_line_length: bool = False,
    ):
        self.stream = stream
        self.path = str(path)
        self.chunk_size = chunk_size
        self.max_line_length = max_line_length
        self.strict_line_length = strict_line_length
        # Number of the last line returned
        self.line_number = 0
        self._buffer = bytearray()
        self._scanned = 0

    @property
    def pending(self) -> int:
        """Bytes read from the resource but not yet returned as lines."""
        return len(self._buffer)

    def next_line(self) -> str | None:
        """Return the next line without its newline, or None at end of resource.

        Raises:
            ScriptSyntaxError: On invalid UTF-8, a missing final newline,
                or an over-long line in strict mode
            ScriptResourceError: If the resource cannot be read
        """
        while True:
            newline = self._buffer.find(b"\n", self._scanned)
            if newline >= 0:
                return self._take_line(newline)
            self._scanned = len(self._buffer)

            chunk = self._read_chunk()
            if not chunk:
                if self._buffer:
                    raise ScriptSyntaxError(
                        self.path,
                        self.line_number + 1,
                        len(self._buffer) + 1,
                        "expected newline at end of file",
                    )
                return None
            self._buffer.extend(chunk)

    def _read_chunk(self) -> bytes:
        try:
            return self.stream.read(self.chunk_size)
        except OSError as e:
            raise ScriptResourceError(self.path, "IO error when reading from file") from e

    def _take_line(self, newline: int) -> str:
        self.line_number += 1
        raw = bytes(self._buffer[:newline])
        del self._buffer[: newline + 1]
        self._scanned = 0

        try:
            line = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            # the prefix before the bad sequence is valid, so count its characters
            column = len(raw[: e.start].decode("utf-8")) + 1
            raise ScriptSyntaxError(
                self.path, self.line_number, column, "unable to decode line as UTF-8"
            ) from e

        if len(raw) > self.max_line_length:
            if self.strict_line_length:
                raise ScriptSyntaxError(
                    self.path, self.line_number, self.max_line_length + 1, "line length too long"
                )
            logger.warning(
                "%s:%d: line length too long (%d > %d bytes)",
                self.path,
                self.line_number,
                len(raw),
                self.max_line_length,
            )
        return line
