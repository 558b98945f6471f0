"""Test mode and live random sources.

Provides a thread-local test-mode flag and the live sources that feed
the RNG tap when a script is not being replayed.

Usage in tests:
    with in_test_mode():
        # Fresh recordings get the @test header and a fixed seed
        engine = ScriptEngine.open(config)

Usage as a flag:
    set_test_mode(True)
    assert is_test_mode()
"""

from __future__ import annotations

import contextlib
import random
import secrets
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

import click

from tasrecord.script.numeric import INT32_MAX

if TYPE_CHECKING:
    from collections.abc import Generator

# Thread-local state for test mode
_state = threading.local()

# Seed handed out in test mode
FIXED_SEED = 0

# A live source receives the call-site tag and returns a signed 32-bit draw
RandomSource = Callable[[str], int]


def is_test_mode() -> bool:
    """Check if test mode is active."""
    return getattr(_state, "test_mode", False)


def set_test_mode(enabled: bool = True) -> None:
    """Set test mode (thread-local).

    Args:
        enabled: Whether to enable test mode
    """
    _state.test_mode = enabled


@contextlib.contextmanager
def in_test_mode() -> Generator[None, None, None]:
    """Context manager to enable test mode."""
    prev = getattr(_state, "test_mode", False)
    _state.test_mode = True
    try:
        yield
    finally:
        _state.test_mode = prev


def random_seed() -> int:
    """Return a fresh 32-bit session seed, fixed in test mode."""
    if is_test_mode():
        return FIXED_SEED
    return secrets.randbits(32)


class SeededRandomSource:
    """Live source backed by a Mersenne Twister seeded with the session seed.

    Draws are non-negative signed 32-bit integers; the tag only labels
    the call site and does not influence the value.
    """

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def __call__(self, tag: str) -> int:
        return self._rng.randint(0, INT32_MAX)

    def __repr__(self) -> str:
        return f"SeededRandomSource(seed={self._seed})"


class ConsoleRandomSource:
    """Live source that asks a person for every draw.

    Prints the call-site tag and blocks until an integer is entered.
    """

    def __call__(self, tag: str) -> int:
        return click.prompt(tag, type=click.IntRange(-(INT32_MAX + 1), INT32_MAX), err=True)
