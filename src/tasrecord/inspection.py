"""Whole-script inspection for tooling.

Walks a script without a simulation: every body line is decoded as a
decision or, when it starts with ``@rng``, as a draw with whatever tag
it carries.
"""

from __future__ import annotations

import contextlib
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from tasrecord.config import ScriptConfig
from tasrecord.errors import ScriptResourceError
from tasrecord.script.codec import Header, RngDraw, encode_action, encode_header, encode_rng
from tasrecord.script.lines import LineSource
from tasrecord.script.reader import ScriptReader
from tasrecord.vocabulary import ACTION_NAMES

if TYPE_CHECKING:
    from collections.abc import Generator


@contextlib.contextmanager
def open_reader(path: Path, config: ScriptConfig | None = None) -> Generator[ScriptReader, None, None]:
    """Open a script for reading with the configured line-source limits."""
    config = config or ScriptConfig()
    try:
        stream = open(path, "rb")
    except OSError as e:
        raise ScriptResourceError(path, "could not read file") from e
    with stream:
        yield ScriptReader(LineSource(
            stream,
            path,
            chunk_size=config.read_chunk_size,
            max_line_length=config.max_line_length,
            strict_line_length=config.strict_line_length,
        ))


@dataclass
class ScriptSummary:
    """What a script contains."""
    path: Path
    header: Header
    decisions: int = 0
    rng_draws: int = 0
    lines: int = 0
    decision_counts: Counter[str] = field(default_factory=Counter)
    rng_tags: Counter[str] = field(default_factory=Counter)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "path": str(self.path),
            "seed": None if self.header.test_mode else f"{self.header.seed:08x}",
            "test_mode": self.header.test_mode,
            "lines": self.lines,
            "decisions": self.decisions,
            "rng_draws": self.rng_draws,
            "decision_counts": dict(sorted(self.decision_counts.items())),
            "rng_tags": dict(sorted(self.rng_tags.items())),
        }


def summarize(path: Path, config: ScriptConfig | None = None) -> ScriptSummary:
    """Decode a whole script and count what it holds.

    Raises:
        ScriptSyntaxError: On the first malformed line
        ScriptResourceError: If the script cannot be read
    """
    with open_reader(path, config) as reader:
        summary = ScriptSummary(path=path, header=reader.read_header())
        for entry in reader:
            if isinstance(entry, RngDraw):
                summary.rng_draws += 1
                summary.rng_tags[entry.tag] += 1
            else:
                summary.decisions += 1
                summary.decision_counts[ACTION_NAMES.name_of(entry.kind)] += 1
        summary.lines = reader.line_number
    return summary


def canonical_lines(path: Path, config: ScriptConfig | None = None) -> list[str]:
    """Re-encode every line of a script in canonical form.

    Comments and blank lines are dropped and spacing is normalized to
    single spaces.
    """
    with open_reader(path, config) as reader:
        lines = [encode_header(reader.read_header())]
        for entry in reader:
            if isinstance(entry, RngDraw):
                lines.append(encode_rng(entry.tag, entry.value))
            else:
                lines.append(encode_action(entry))
    return lines

