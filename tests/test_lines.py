"""Tests for the line source."""

from __future__ import annotations

import io
import logging

import pytest

from tasrecord.errors import ScriptResourceError, ScriptSyntaxError
from tasrecord.script.lines import LineSource


def source(data: bytes, **kwargs) -> LineSource:
    return LineSource(io.BytesIO(data), "run.tas", **kwargs)


class BrokenStream(io.RawIOBase):
    def readable(self):
        return True

    def read(self, size=-1):
        raise OSError("disk on fire")


class TestNextLine:
    """Tests for LineSource.next_line()."""

    def test_lines_and_counter(self):
        """Lines come out in order with a running counter."""
        lines = source(b"@test\nwait\n\nmove 1 2\n")
        assert lines.next_line() == "@test"
        assert lines.next_line() == "wait"
        assert lines.next_line() == ""
        assert lines.next_line() == "move 1 2"
        assert lines.line_number == 4
        assert lines.next_line() is None
        assert lines.next_line() is None
        assert lines.line_number == 4

    def test_empty_resource(self):
        """An empty resource has no lines."""
        assert source(b"").next_line() is None

    @pytest.mark.parametrize("chunk_size", [1, 2, 3, 7, 256])
    def test_chunk_size_does_not_matter(self, chunk_size):
        """Chunk boundaries do not affect the lines."""
        data = b"first line\nsecond\nthird one here\n"
        lines = source(data, chunk_size=chunk_size)
        assert [lines.next_line() for _ in range(4)] == ["first line", "second", "third one here", None]

    def test_utf8_text(self):
        """Test multibyte UTF-8 text."""
        assert source("!wish potion healing # é\n".encode()).next_line().endswith("é")

    def test_missing_final_newline(self):
        """A truncated last line is an error, not a short script."""
        lines = source(b"@test\nwai")
        assert lines.next_line() == "@test"
        with pytest.raises(ScriptSyntaxError) as exc_info:
            lines.next_line()
        error = exc_info.value
        assert error.message == "expected newline at end of file"
        assert error.line == 2
        assert str(error) == "run.tas:2:4: error: expected newline at end of file"

    def test_invalid_utf8(self):
        """Invalid UTF-8 is reported at its character column."""
        lines = source(b"ab\xffcd\n")
        with pytest.raises(ScriptSyntaxError) as exc_info:
            lines.next_line()
        assert exc_info.value.message == "unable to decode line as UTF-8"
        assert (exc_info.value.line, exc_info.value.column) == (1, 3)

    def test_read_failure(self):
        """Read errors become resource errors."""
        lines = LineSource(BrokenStream(), "run.tas")
        with pytest.raises(ScriptResourceError, match="run.tas"):
            lines.next_line()

    def test_pending_bytes(self):
        """Bytes past the current line stay buffered until asked for."""
        lines = source(b"@test\nwait\n")
        assert lines.pending == 0
        assert lines.next_line() == "@test"
        assert lines.pending == len(b"wait\n")
        assert lines.next_line() == "wait"
        assert lines.pending == 0

    def test_pending_bytes_with_small_chunks(self):
        """Small chunks never read past the current line."""
        lines = source(b"@test\nwait\n", chunk_size=1)
        assert lines.next_line() == "@test"
        assert lines.pending == 0


class TestLineLength:
    """The line-length limit warns by default and fails when strict."""

    def test_long_line_warns_and_continues(self, caplog):
        """An over-long line is logged and still returned."""
        lines = source(b"abcdefg\nok\n", max_line_length=4)
        with caplog.at_level(logging.WARNING, logger="tasrecord.script.lines"):
            assert lines.next_line() == "abcdefg"
        assert "line length too long" in caplog.text
        assert lines.next_line() == "ok"

    def test_long_line_strict(self):
        """In strict mode an over-long line is an error."""
        lines = source(b"abcdefg\n", max_line_length=4, strict_line_length=True)
        with pytest.raises(ScriptSyntaxError) as exc_info:
            lines.next_line()
        assert exc_info.value.message == "line length too long"
        assert exc_info.value.column == 5

    def test_limit_is_inclusive(self):
        """A line exactly at the limit is accepted."""
        lines = source(b"abcd\n", max_line_length=4, strict_line_length=True)
        assert lines.next_line() == "abcd"
