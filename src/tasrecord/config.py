"""
Configuration for a script session.

Supports:
- Environment variable configuration
- YAML file configuration
- Runtime overrides
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from tasrecord.script.lines import DEFAULT_CHUNK_SIZE, DEFAULT_MAX_LINE_LENGTH


class ScriptMode(Enum):
    """Requested script mode."""
    WRITE = "write"            # Record a fresh script
    READ = "read"              # Replay, then stop consulting the script
    READ_WRITE = "read_write"  # Replay, then keep recording into the same file
    IGNORE = "ignore"          # No script at all

    @classmethod
    def parse(cls, value: str | ScriptMode) -> ScriptMode:
        """Accept enum members, values, names and the dashed CLI spelling."""
        if isinstance(value, ScriptMode):
            return value
        normalized = value.strip().lower().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"Invalid script mode {value!r} (expected one of: {choices})") from None


_TRUE_STRINGS = ("1", "true", "yes", "on")


def _as_bool(value: Any) -> bool:
    """Read a flag from YAML or the environment; strings must spell a true value."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


@dataclass(frozen=True)
class ScriptConfig:
    """
    Configuration for one script session.

    Defaults describe an unscripted session:
    - mode: IGNORE (no resource, live randomness)
    - playback pacing off
    - soft line-length limit (warn, do not fail)
    """

    path: Path | None = None
    mode: ScriptMode = ScriptMode.IGNORE

    # Write the @test header instead of a seed
    test_mode: bool = False

    # Playback pacing
    playback_delay: int = 0
    pace_playback: bool = False

    # Line source limits
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
    strict_line_length: bool = False
    read_chunk_size: int = DEFAULT_CHUNK_SIZE

    # Durability
    fsync: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not isinstance(self.mode, ScriptMode):
            object.__setattr__(self, "mode", ScriptMode.parse(self.mode))
        if self.path is not None and not isinstance(self.path, Path):
            object.__setattr__(self, "path", Path(self.path))

        if self.mode is not ScriptMode.IGNORE and self.path is None:
            raise ValueError(f"path is required in {self.mode.value} mode")

        if self.playback_delay < 0:
            raise ValueError(f"playback_delay must be >= 0, got {self.playback_delay}")

        if self.max_line_length < 1:
            raise ValueError(f"max_line_length must be >= 1, got {self.max_line_length}")

        if self.read_chunk_size < 1:
            raise ValueError(f"read_chunk_size must be >= 1, got {self.read_chunk_size}")

    @property
    def effective_delay(self) -> int:
        """Delay actually applied to get_decision."""
        return self.playback_delay if self.pace_playback else 0

    def with_overrides(self, **overrides: Any) -> ScriptConfig:
        """Return a copy with some fields replaced (None values are ignored)."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_env(cls) -> ScriptConfig:
        """
        Create configuration from environment variables.

        Environment variables:
            TAS_SCRIPT: Script path
            TAS_MODE: write/read/read_write/ignore (default: read_write if
                TAS_SCRIPT is set, ignore otherwise)
            TAS_DELAY: Playback delay in get_decision calls
            TAS_PACE: Enable playback pacing (true/false)
            TAS_TEST_MODE: Write the @test header (true/false)
        """
        path = os.getenv("TAS_SCRIPT") or None
        default_mode = ScriptMode.READ_WRITE if path else ScriptMode.IGNORE
        mode_str = os.getenv("TAS_MODE")
        mode = ScriptMode.parse(mode_str) if mode_str else default_mode

        return cls(
            path=Path(path) if path else None,
            mode=mode,
            test_mode=_as_bool(os.getenv("TAS_TEST_MODE", "false")),
            playback_delay=int(os.getenv("TAS_DELAY", "0")),
            pace_playback=_as_bool(os.getenv("TAS_PACE", "false")),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScriptConfig:
        """Create configuration from dictionary (e.g., YAML)."""
        path = data.get("path")
        return cls(
            path=Path(path) if path else None,
            mode=ScriptMode.parse(data.get("mode", "ignore")),
            test_mode=_as_bool(data.get("test_mode", False)),
            playback_delay=int(data.get("playback_delay", 0)),
            pace_playback=_as_bool(data.get("pace_playback", False)),
            max_line_length=int(data.get("max_line_length", DEFAULT_MAX_LINE_LENGTH)),
            strict_line_length=_as_bool(data.get("strict_line_length", False)),
            read_chunk_size=int(data.get("read_chunk_size", DEFAULT_CHUNK_SIZE)),
            fsync=_as_bool(data.get("fsync", False)),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> ScriptConfig:
        """Load configuration from a YAML file.

        A relative script path is resolved against the YAML file's directory.
        """
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping in {path}, got {type(data).__name__}")

        script = data.get("path")
        if script and not Path(script).is_absolute():
            data = {**data, "path": str(Path(path).parent / script)}
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "path": str(self.path) if self.path is not None else None,
            "mode": self.mode.value,
            "test_mode": self.test_mode,
            "playback_delay": self.playback_delay,
            "pace_playback": self.pace_playback,
            "max_line_length": self.max_line_length,
            "strict_line_length": self.strict_line_length,
            "read_chunk_size": self.read_chunk_size,
            "fsync": self.fsync,
        }
