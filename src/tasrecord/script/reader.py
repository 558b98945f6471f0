"""Script reader and writer.

ScriptReader walks a script one meaningful line at a time (blank and
comment-only lines are skipped but still counted) and decodes it with
the line codecs, attaching path and line number to any decode error.
ScriptWriter appends encoded lines and flushes after every one, so a
recording is durable up to the last decision or draw.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import BinaryIO, TypeVar

from tasrecord.actions import Action
from tasrecord.errors import DecodeError, ScriptResourceError, ScriptSyntaxError
from tasrecord.script.codec import (
    RNG_DIRECTIVE,
    Header,
    RngDraw,
    decode_action,
    decode_header,
    decode_rng,
    decode_rng_draw,
    encode_action,
    encode_header,
    encode_rng,
)
from tasrecord.script.lines import LineSource
from tasrecord.script.tokens import Token, tokenize

T = TypeVar("T")


class ScriptReader:
    """Decodes header, decisions and RNG draws from a LineSource."""

    def __init__(self, lines: LineSource):
        self.lines = lines

    @property
    def path(self) -> str:
        return self.lines.path

    @property
    def line_number(self) -> int:
        return self.lines.line_number

    def next_tokens(self) -> list[Token] | None:
        """Tokens of the next non-blank line, or None at end of script."""
        while True:
            line = self.lines.next_line()
            if line is None:
                return None
            tokens = tokenize(line)
            if tokens:
                return tokens

    def _decode(self, decoder: Callable[..., T], tokens: list[Token], *args) -> T:
        try:
            return decoder(tokens, *args)
        except DecodeError as e:
            raise ScriptSyntaxError(self.path, self.line_number, e.column, e.message) from e

    def unexpected_eof(self) -> ScriptSyntaxError:
        return ScriptSyntaxError(self.path, self.line_number + 1, 1, "unexpected EOF")

    def read_header(self) -> Header:
        """Decode the header line.

        Raises:
            ScriptSyntaxError: If the script is empty or the first line
                is not a header
        """
        tokens = self.next_tokens()
        if tokens is None:
            raise self.unexpected_eof()
        return self._decode(decode_header, tokens)

    def read_action(self) -> Action:
        """Decode the next decision; UNDECIDED at a clean end of script."""
        tokens = self.next_tokens()
        if tokens is None:
            return Action.undecided()
        return self._decode(decode_action, tokens)

    def read_rng(self, tag: str) -> int | None:
        """Decode the next RNG draw recorded for ``tag``; None at end of script."""
        tokens = self.next_tokens()
        if tokens is None:
            return None
        return self._decode(decode_rng, tokens, tag)

    def read_entry(self) -> Action | RngDraw | None:
        """Decode the next body line, whichever kind it is."""
        tokens = self.next_tokens()
        if tokens is None:
            return None
        if tokens[0].text == RNG_DIRECTIVE:
            return self._decode(decode_rng_draw, tokens)
        return self._decode(decode_action, tokens)

    def __iter__(self) -> Iterator[Action | RngDraw]:
        while True:
            entry = self.read_entry()
            if entry is None:
                return
            yield entry


class ScriptWriter:
    """Appends encoded lines to a script resource."""

    def __init__(self, stream: BinaryIO, path: str | Path, fsync: bool = False):
        self.stream = stream
        self.path = str(path)
        self.fsync = fsync

    def write_line(self, line: str) -> None:
        try:
            self.stream.write(line.encode("utf-8"))
            self.stream.flush()
            if self.fsync:
                os.fsync(self.stream.fileno())
        except OSError as e:
            raise ScriptResourceError(self.path, "IO error when writing to file") from e

    def write_header(self, header: Header) -> None:
        self.write_line(encode_header(header))

    def write_action(self, action: Action) -> None:
        self.write_line(encode_action(action))

    def write_rng(self, tag: str, value: int) -> None:
        self.write_line(encode_rng(tag, value))
