"""Line codecs: script header, decisions and RNG draws.

Decoders take the tokens of one line and either return a complete value
or raise DecodeError with the column of the offending token. Encoders
are the exact inverse and return one newline-terminated line with
single spaces between fields.
"""

from __future__ import annotations

from dataclasses import dataclass

from tasrecord.actions import Action, ActionKind, Coord, GenerateMonster, Layout, ThingType, Wish
from tasrecord.errors import DecodeError
from tasrecord.script.numeric import (
    format_int,
    format_uint32,
    format_uint256,
    parse_int,
    parse_uint32,
    parse_uint256,
)
from tasrecord.script.tokens import COMMENT_MARKER, Token
from tasrecord.vocabulary import (
    ACTION_NAMES,
    DECISION_MAKER_NAMES,
    SPECIES_NAMES,
    THING_TYPE_NAMES,
    WISH_IDENTITY_NAMES,
)

SEED_DIRECTIVE = "@seed"
TEST_MODE_DIRECTIVE = "@test"
RNG_DIRECTIVE = "@rng"

# Token count per layout, including the decision name
_TOKEN_COUNTS: dict[Layout, int] = {
    Layout.VOID: 1,
    Layout.COORD: 3,
    Layout.ITEM: 2,
    Layout.COORD_AND_ITEM: 4,
    Layout.WISH: 3,
    Layout.GENERATE_MONSTER: 5,
}


@dataclass(frozen=True)
class Header:
    """First line of every script: a seed, or the test-mode marker."""

    seed: int = 0
    test_mode: bool = False


@dataclass(frozen=True)
class RngDraw:
    """One recorded random-number draw."""

    value: int
    tag: str


def _argument_count_message(count: int) -> str:
    if count == 0:
        return "expected no arguments"
    if count == 1:
        return "expected 1 argument"
    return f"expected {count} arguments"


def _require_count(tokens: list[Token], count: int) -> None:
    if len(tokens) != count:
        raise DecodeError(tokens[0].column, _argument_count_message(count - 1))


def _parse_coord(x: Token, y: Token) -> Coord:
    return Coord(parse_int(x), parse_int(y))


def _format_coord(coord: Coord) -> str:
    return f"{format_int(coord.x)} {format_int(coord.y)}"


def check_tag(tag: str) -> None:
    """Reject RNG tags that could not be read back as a single token."""
    if not tag or any(c.isspace() or c == COMMENT_MARKER for c in tag):
        raise ValueError(f"rng tag must be one token without '#': {tag!r}")


# -- header ------------------------------------------------------------------


def decode_header(tokens: list[Token]) -> Header:
    """Decode a ``@seed <hex>`` or ``@test`` line."""
    directive = tokens[0]
    if directive.text == SEED_DIRECTIVE:
        _require_count(tokens, 2)
        return Header(seed=parse_uint32(tokens[1]))
    if directive.text == TEST_MODE_DIRECTIVE:
        _require_count(tokens, 1)
        return Header(test_mode=True)
    raise DecodeError(directive.column, "expected script header")


def encode_header(header: Header) -> str:
    if header.test_mode:
        return f"{TEST_MODE_DIRECTIVE}\n"
    return f"{SEED_DIRECTIVE} {format_uint32(header.seed)}\n"


# -- decisions ---------------------------------------------------------------


def decode_action(tokens: list[Token]) -> Action:
    """Decode one decision line.

    Args:
        tokens: Non-empty tokens of the line

    Returns:
        The decoded Action

    Raises:
        DecodeError: On an unknown name, a wrong argument count or a
            malformed argument
    """
    kind = ACTION_NAMES.parse(tokens[0])
    layout = kind.layout
    _require_count(tokens, _TOKEN_COUNTS[layout])

    if layout is Layout.VOID:
        return Action(kind)
    if layout is Layout.COORD:
        return Action(kind, coord=_parse_coord(tokens[1], tokens[2]))
    if layout is Layout.ITEM:
        return Action(kind, item=parse_uint256(tokens[1]))
    if layout is Layout.COORD_AND_ITEM:
        coord = _parse_coord(tokens[1], tokens[2])
        return Action(kind, coord=coord, item=parse_uint256(tokens[3]))
    if layout is Layout.WISH:
        thing_type = THING_TYPE_NAMES.parse(tokens[1])
        identities = WISH_IDENTITY_NAMES.get(thing_type)
        if identities is None:
            raise DecodeError(tokens[1].column, f"can't wish for an {THING_TYPE_NAMES.name_of(thing_type)}")
        return Action(kind, wish=Wish(thing_type, identities.parse(tokens[2])))
    if layout is Layout.GENERATE_MONSTER:
        monster = GenerateMonster(
            species=SPECIES_NAMES.parse(tokens[1]),
            decision_maker=DECISION_MAKER_NAMES.parse(tokens[2]),
            location=_parse_coord(tokens[3], tokens[4]),
        )
        return Action(kind, monster=monster)
    raise AssertionError(f"unhandled layout: {layout}")


def encode_action(action: Action) -> str:
    """Encode a decision as one script line.

    Raises:
        ValueError: For the UNDECIDED sentinel, which is never persisted
    """
    if action.kind is ActionKind.UNDECIDED:
        raise ValueError("the undecided sentinel cannot be recorded")
    fields = [ACTION_NAMES.name_of(action.kind)]
    layout = action.layout

    if layout is Layout.COORD:
        fields.append(_format_coord(action.coord))
    elif layout is Layout.ITEM:
        fields.append(format_uint256(action.item))
    elif layout is Layout.COORD_AND_ITEM:
        fields.append(_format_coord(action.coord))
        fields.append(format_uint256(action.item))
    elif layout is Layout.WISH:
        wish = action.wish
        fields.append(THING_TYPE_NAMES.name_of(wish.thing_type))
        fields.append(WISH_IDENTITY_NAMES[wish.thing_type].name_of(wish.identity))
    elif layout is Layout.GENERATE_MONSTER:
        monster = action.monster
        fields.append(SPECIES_NAMES.name_of(monster.species))
        fields.append(DECISION_MAKER_NAMES.name_of(monster.decision_maker))
        fields.append(_format_coord(monster.location))

    return " ".join(fields) + "\n"


# -- rng tap -----------------------------------------------------------------


def decode_rng(tokens: list[Token], tag: str) -> int:
    """Decode an ``@rng <value> <tag>`` line recorded for ``tag``.

    Raises:
        DecodeError: On a non-RNG line, a wrong argument count, a tag
            recorded at a different call site, or a malformed value
    """
    if tokens[0].text != RNG_DIRECTIVE:
        raise DecodeError(tokens[0].column, f"expected rng directive with tag: {tag}")
    _require_count(tokens, 3)
    if tokens[2].text != tag:
        raise DecodeError(tokens[2].column, f"rng tag mismatch. expected: {tag}")
    return parse_int(tokens[1])


def decode_rng_draw(tokens: list[Token]) -> RngDraw:
    """Decode an RNG line without checking its tag."""
    if tokens[0].text != RNG_DIRECTIVE:
        raise DecodeError(tokens[0].column, "expected rng directive")
    _require_count(tokens, 3)
    return RngDraw(value=parse_int(tokens[1]), tag=tokens[2].text)


def encode_rng(tag: str, value: int) -> str:
    check_tag(tag)
    return f"{RNG_DIRECTIVE} {format_int(value)} {tag}\n"
