"""Line tokenizer.

Splits a script line into whitespace-delimited tokens, dropping any
trailing ``#`` comment, and remembers the 1-based column of each token.
"""

from __future__ import annotations

from dataclasses import dataclass

COMMENT_MARKER = "#"


@dataclass(frozen=True)
class Token:
    """A run of non-whitespace characters and the column it starts at."""

    text: str
    # starts at 1
    column: int

    def column_at(self, offset: int) -> int:
        """Column of the character ``offset`` places into this token."""
        return self.column + offset


def tokenize(line: str) -> list[Token]:
    """Split a line into tokens.

    Args:
        line: One script line without its newline

    Returns:
        Tokens in source order; empty for blank or comment-only lines

    Example:
        >>> [t.text for t in tokenize("move  3 -1  # north")]
        ['move', '3', '-1']
    """
    tokens: list[Token] = []
    start = -1
    index = 0
    for index, char in enumerate(line):
        if char == COMMENT_MARKER:
            break
        if start < 0:
            if not char.isspace():
                start = index
        elif char.isspace():
            tokens.append(Token(line[start:index], start + 1))
            start = -1
    else:
        index = len(line)
    if start >= 0:
        tokens.append(Token(line[start:index], start + 1))
    return tokens
