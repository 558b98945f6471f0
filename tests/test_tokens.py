"""Tests for the line tokenizer."""

from __future__ import annotations

from tasrecord.script.tokens import Token, tokenize


class TestTokenize:
    """Tests for tokenize()."""

    def test_records_columns(self):
        """Each token remembers the 1-based column it starts at."""
        tokens = tokenize("move  3 -1")
        assert tokens == [Token("move", 1), Token("3", 7), Token("-1", 9)]

    def test_leading_whitespace(self):
        """Leading spaces shift the first column."""
        assert tokenize("   wait") == [Token("wait", 4)]

    def test_comment_is_dropped(self):
        """Everything from # onwards is ignored."""
        tokens = tokenize("move 1 2  # step north")
        assert [t.text for t in tokens] == ["move", "1", "2"]

    def test_comment_ends_token(self):
        """A # directly after a token ends it."""
        assert tokenize("wait#now") == [Token("wait", 1)]

    def test_empty_and_comment_only_lines(self):
        """Blank and comment-only lines have no tokens."""
        assert tokenize("") == []
        assert tokenize("     ") == []
        assert tokenize("# header comment") == []
        assert tokenize("   # indented comment") == []

    def test_tabs_and_carriage_return_are_whitespace(self):
        """Any whitespace separates tokens."""
        assert [t.text for t in tokenize("move\t1 2\r")] == ["move", "1", "2"]

    def test_column_at(self):
        """column_at offsets into the token."""
        token = Token("deadbeef", 7)
        assert token.column_at(0) == 7
        assert token.column_at(3) == 10
