"""Error taxonomy for the script engine.

Decode errors carry the exact source position so that a malformed script
can be fixed by hand. Resource errors carry the script path. Vocabulary
errors are programmer errors and are never expected at runtime.
"""

from __future__ import annotations

from pathlib import Path


class TasError(Exception):
    """Base class for all script engine errors."""
    pass


class ScriptSyntaxError(TasError):
    """A script line could not be decoded.

    Attributes:
        path: Script resource path
        line: 1-based line number
        column: 1-based column of the offending character
        message: Human-readable reason
    """

    def __init__(self, path: str | Path, line: int, column: int, message: str):
        self.path = str(path)
        self.line = line
        self.column = column
        self.message = message
        super().__init__(f"{self.path}:{line}:{column}: error: {message}")


class DecodeError(TasError):
    """A token sequence could not be decoded.

    Raised by the pure codecs, which know columns but not lines or paths.
    ScriptReader turns it into a ScriptSyntaxError.
    """

    def __init__(self, column: int, message: str):
        self.column = column
        self.message = message
        super().__init__(f"{column}: {message}")


class ScriptResourceError(TasError):
    """The script resource could not be opened, read, written or removed."""

    def __init__(self, path: str | Path, message: str):
        self.path = str(path)
        self.message = message
        super().__init__(f"{message}: {self.path}")


class VocabularyError(TasError):
    """A vocabulary table is missing a name or has a duplicate."""
    pass
