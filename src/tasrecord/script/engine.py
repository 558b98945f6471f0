"""Script engine: the record/replay state machine.

One engine owns one script resource for the lifetime of a session. The
simulation asks it for the next decision, reports the decisions it
actually took, and routes every random draw through it:

- WRITE records a fresh script (header, then decisions and draws)
- READ replays a script, then closes it and becomes IGNORE
- READ_WRITE replays a script, then keeps recording at its end
- IGNORE neither reads nor writes

There is no way out of IGNORE.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO

from tasrecord.actions import Action
from tasrecord.config import ScriptConfig, ScriptMode
from tasrecord.determinism import (
    FIXED_SEED,
    ConsoleRandomSource,
    RandomSource,
    is_test_mode,
    random_seed,
)
from tasrecord.errors import ScriptResourceError
from tasrecord.script.codec import Header, check_tag
from tasrecord.script.lines import LineSource
from tasrecord.script.numeric import INT32_MAX, INT32_MIN
from tasrecord.script.reader import ScriptReader, ScriptWriter

logger = logging.getLogger(__name__)

_READING_MODES = (ScriptMode.READ, ScriptMode.READ_WRITE)


class ScriptEngine:
    """Record/replay engine for one session.

    Attributes:
        config: Session configuration
        mode: Current mode; the only field that drives behavior
        seed: Seed recovered from the header or freshly drawn
        test_mode: Whether the script carries the @test header
        frame_counter: get_decision calls swallowed by playback pacing
        random_source: Live source used when not replaying
    """

    def __init__(
        self,
        config: ScriptConfig,
        source_factory: Callable[[int], RandomSource] | None = None,
    ):
        """Open the script resource and handle its header.

        Args:
            config: Session configuration
            source_factory: Builds the live random source from the
                session seed. Without one, every live draw is prompted
                for on the console.

        Raises:
            ScriptResourceError: If the resource cannot be opened
            ScriptSyntaxError: If a replayed script has a bad header
        """
        self.config = config
        self.mode = ScriptMode.IGNORE
        self.seed = 0
        self.test_mode = config.test_mode or is_test_mode()
        self.frame_counter = 0

        self._file: BinaryIO | None = None
        self._reader: ScriptReader | None = None
        self._writer: ScriptWriter | None = None

        try:
            self._start()
            self.random_source: RandomSource = (
                source_factory(self.seed) if source_factory is not None else ConsoleRandomSource()
            )
        except Exception:
            self.close()
            raise

        logger.info(
            "Script %s opened in %s mode (%s)",
            config.path,
            self.mode.value,
            "test" if self.test_mode else f"seed {self.seed:08x}",
        )

    @classmethod
    def open(
        cls,
        config: ScriptConfig,
        source_factory: Callable[[int], RandomSource] | None = None,
    ) -> ScriptEngine:
        """Open a session engine; see ``ScriptEngine.__init__``."""
        return cls(config, source_factory)

    @property
    def path(self) -> Path | None:
        return self.config.path

    @property
    def line_number(self) -> int:
        """Number of the last script line consumed (0 before any)."""
        return self._reader.line_number if self._reader is not None else 0

    @property
    def is_open(self) -> bool:
        return self._file is not None

    # -- setup -----------------------------------------------------------------

    def _start(self) -> None:
        requested = self.config.mode
        if requested is ScriptMode.WRITE:
            self._file = self._open_file("wb", "could not create file")
            self.mode = ScriptMode.WRITE
        elif requested is ScriptMode.READ:
            self._file = self._open_file("rb", "could not read file")
            self.mode = ScriptMode.READ
        elif requested is ScriptMode.READ_WRITE:
            try:
                self._file = open(self.config.path, "r+b")
                self.mode = ScriptMode.READ_WRITE
            except FileNotFoundError:
                # nothing to resume yet
                self._file = self._open_file("wb", "could not create file")
                self.mode = ScriptMode.WRITE
            except OSError as e:
                raise ScriptResourceError(self.config.path, "could not read/create file") from e

        if self.mode in _READING_MODES:
            self._reader = ScriptReader(LineSource(
                self._file,
                self.config.path,
                chunk_size=self.config.read_chunk_size,
                max_line_length=self.config.max_line_length,
                strict_line_length=self.config.strict_line_length,
            ))
            header = self._reader.read_header()
            self.seed = header.seed
            self.test_mode = header.test_mode
        elif self.mode is ScriptMode.WRITE:
            self._writer = ScriptWriter(self._file, self.config.path, fsync=self.config.fsync)
            self.seed = FIXED_SEED if self.test_mode else random_seed()
            self._writer.write_header(Header(seed=self.seed, test_mode=self.test_mode))
        else:
            self.seed = random_seed()

    def _open_file(self, file_mode: str, failure: str) -> BinaryIO:
        try:
            return open(self.config.path, file_mode)
        except OSError as e:
            raise ScriptResourceError(self.config.path, failure) from e

    # -- transitions -----------------------------------------------------------

    def _finish_reading(self) -> None:
        """End of script reached while replaying."""
        if self.mode is ScriptMode.READ:
            self.close()
            logger.debug("Script %s fully replayed; ignoring from now on", self.config.path)
            return

        # READ_WRITE: continue the same file as a fresh recording
        try:
            self._file.seek(0, os.SEEK_END)
        except OSError as e:
            raise ScriptResourceError(self.config.path, "could not seek to end of file") from e
        self._reader = None
        self._writer = ScriptWriter(self._file, self.config.path, fsync=self.config.fsync)
        self.mode = ScriptMode.WRITE
        logger.debug(
            "Script %s fully replayed; recording from here on", self.config.path
        )

    # -- operations ------------------------------------------------------------

    def get_decision(self) -> Action:
        """Next scripted decision, or UNDECIDED when the caller must decide.

        With playback pacing enabled, UNDECIDED is returned for
        ``playback_delay`` calls before each real consultation.
        """
        delay = self.config.effective_delay
        if delay > 0:
            if self.frame_counter < delay:
                self.frame_counter += 1
                return Action.undecided()
            self.frame_counter = 0

        if self.mode not in _READING_MODES:
            return Action.undecided()

        action = self._reader.read_action()
        if action.is_undecided:
            self._finish_reading()
        return action

    def record_decision(self, action: Action) -> None:
        """Persist a decision the simulation took; only WRITE records."""
        if self.mode is ScriptMode.WRITE:
            self._writer.write_action(action)

    def get_rng_input(self, tag: str) -> int:
        """Random draw for the call site ``tag``.

        Replays the recorded draw while reading; otherwise asks the live
        source, and records the draw in WRITE mode.

        Raises:
            ScriptSyntaxError: If the next line is not a draw for ``tag``,
                or a READ script ends before the draw
        """
        check_tag(tag)

        if self.mode in _READING_MODES:
            value = self._reader.read_rng(tag)
            if value is not None:
                return value
            if self.mode is ScriptMode.READ:
                raise self._reader.unexpected_eof()
            self._finish_reading()

        value = self.random_source(tag)
        if not INT32_MIN <= value <= INT32_MAX:
            raise ValueError(f"random source returned a value out of int32 range: {value}")
        if self.mode is ScriptMode.WRITE:
            self._writer.write_rng(tag, value)
        return value

    def delete_in_progress_recording(self) -> None:
        """Discard a recording still being written; nothing else is ever deleted."""
        if self.mode is not ScriptMode.WRITE:
            return
        self.close()
        try:
            os.remove(self.config.path)
        except OSError as e:
            raise ScriptResourceError(self.config.path, "could not delete file") from e
        logger.info("Deleted in-progress recording %s", self.config.path)

    def close(self) -> None:
        """Release the resource; safe to call more than once."""
        if self._file is not None:
            try:
                self._file.close()
            finally:
                self._file = None
                self._reader = None
                self._writer = None
        self.mode = ScriptMode.IGNORE

    def __enter__(self) -> ScriptEngine:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ScriptEngine(path={self.config.path!s}, mode={self.mode.value})"
