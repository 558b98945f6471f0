"""Deterministic record-and-replay of turn-based simulation sessions.

A script captures every decision and every random draw of a session so
it can be replayed exactly, or replayed and then continued.
"""

from tasrecord.actions import (
    Action,
    ActionKind,
    Coord,
    DecisionMaker,
    GenerateMonster,
    Layout,
    PotionId,
    SpeciesId,
    ThingType,
    WandId,
    Wish,
)
from tasrecord.config import ScriptConfig, ScriptMode
from tasrecord.determinism import (
    ConsoleRandomSource,
    SeededRandomSource,
    in_test_mode,
    is_test_mode,
    set_test_mode,
)
from tasrecord.errors import (
    DecodeError,
    ScriptResourceError,
    ScriptSyntaxError,
    TasError,
    VocabularyError,
)
from tasrecord.script.codec import Header, RngDraw, decode_action, encode_action
from tasrecord.script.engine import ScriptEngine
from tasrecord.script.reader import ScriptReader, ScriptWriter
from tasrecord.script.tokens import Token, tokenize

__version__ = "0.3.0"

__all__ = [
    # Data model
    "Action",
    "ActionKind",
    "Coord",
    "DecisionMaker",
    "GenerateMonster",
    "Layout",
    "PotionId",
    "SpeciesId",
    "ThingType",
    "WandId",
    "Wish",
    # Configuration
    "ScriptConfig",
    "ScriptMode",
    # Randomness
    "ConsoleRandomSource",
    "SeededRandomSource",
    "in_test_mode",
    "is_test_mode",
    "set_test_mode",
    # Errors
    "TasError",
    "DecodeError",
    "ScriptSyntaxError",
    "ScriptResourceError",
    "VocabularyError",
    # Script format
    "Header",
    "RngDraw",
    "Token",
    "tokenize",
    "decode_action",
    "encode_action",
    "ScriptReader",
    "ScriptWriter",
    "ScriptEngine",
]
