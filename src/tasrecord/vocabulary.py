"""Vocabulary tables.

Each table is a fixed bidirectional mapping between the members of one
enumeration and their canonical lowercase script names. Tables are
built once at import time and checked eagerly: every member must have
exactly one name and names must be unique, otherwise reverse lookup
would be ambiguous. A broken table is a programmer error.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Generic, TypeVar

from tasrecord.actions import (
    ActionKind,
    DecisionMaker,
    PotionId,
    SpeciesId,
    ThingType,
    WandId,
)
from tasrecord.errors import DecodeError, VocabularyError
from tasrecord.script.tokens import Token

E = TypeVar("E", bound=Enum)


class VocabularyTable(Generic[E]):
    """Bidirectional enum <-> name table for one domain."""

    def __init__(
        self,
        domain: str,
        enum_type: type[E],
        names: Mapping[E, str],
        exclude: Iterable[E] = (),
    ):
        """Build and validate a table.

        Args:
            domain: Noun used in "undefined <domain>" decode errors
            enum_type: Enumeration the table covers
            names: Canonical name per member
            exclude: Members that deliberately have no name

        Raises:
            VocabularyError: If a member is unnamed or a name repeats
        """
        self.domain = domain
        self.enum_type = enum_type
        excluded = set(exclude)

        missing = [m.name for m in enum_type if m not in names and m not in excluded]
        if missing:
            raise VocabularyError(f"{enum_type.__name__} has no name for: {', '.join(missing)}")

        self._names: dict[E, str] = {}
        self._members: dict[str, E] = {}
        for member in enum_type:
            if member in excluded:
                continue
            name = names[member]
            if not name or any(c.isspace() or c == "#" for c in name):
                raise VocabularyError(f"{enum_type.__name__}.{member.name} has unusable name {name!r}")
            if name in self._members:
                raise VocabularyError(
                    f"{enum_type.__name__} name {name!r} used by both "
                    f"{self._members[name].name} and {member.name}"
                )
            self._names[member] = name
            self._members[name] = member

    def name_of(self, member: E) -> str:
        """Canonical name of a member."""
        try:
            return self._names[member]
        except KeyError:
            raise VocabularyError(f"{self.enum_type.__name__}.{member.name} has no name") from None

    def parse(self, token: Token) -> E:
        """Look up the member a token names.

        Raises:
            DecodeError: If the token is not a name in this table
        """
        member = self._members.get(token.text)
        if member is None:
            raise DecodeError(token.column, f"undefined {self.domain}")
        return member

    def names(self) -> list[str]:
        """All names in enumeration order."""
        return list(self._names.values())

    def __contains__(self, name: object) -> bool:
        return name in self._members

    def __len__(self) -> int:
        return len(self._names)


ACTION_NAMES: VocabularyTable[ActionKind] = VocabularyTable(
    "action name",
    ActionKind,
    {
        ActionKind.MOVE: "move",
        ActionKind.WAIT: "wait",
        ActionKind.ATTACK: "attack",
        ActionKind.ZAP: "zap",
        ActionKind.PICKUP: "pickup",
        ActionKind.DROP: "drop",
        ActionKind.QUAFF: "quaff",
        ActionKind.THROW: "throw",
        ActionKind.GO_DOWN: "down",
        ActionKind.CHEATCODE_HEALTH_BOOST: "!health",
        ActionKind.CHEATCODE_KILL_EVERYBODY: "!kill",
        ActionKind.CHEATCODE_POLYMORPH: "!polymorph",
        ActionKind.CHEATCODE_GENERATE_MONSTER: "!monster",
        ActionKind.CHEATCODE_WISH: "!wish",
        ActionKind.CHEATCODE_IDENTIFY: "!identify",
        ActionKind.CHEATCODE_GO_DOWN: "!down",
        ActionKind.CHEATCODE_GAIN_LEVEL: "!levelup",
    },
    exclude=(ActionKind.UNDECIDED,),
)

SPECIES_NAMES: VocabularyTable[SpeciesId] = VocabularyTable(
    "species id",
    SpeciesId,
    {
        SpeciesId.HUMAN: "human",
        SpeciesId.OGRE: "ogre",
        SpeciesId.LICH: "lich",
        SpeciesId.PINK_BLOB: "pink_blob",
        SpeciesId.AIR_ELEMENTAL: "air_elemental",
        SpeciesId.DOG: "dog",
        SpeciesId.ANT: "ant",
        SpeciesId.BEE: "bee",
        SpeciesId.BEETLE: "beetle",
        SpeciesId.SCORPION: "scorpion",
        SpeciesId.SNAKE: "snake",
    },
)

DECISION_MAKER_NAMES: VocabularyTable[DecisionMaker] = VocabularyTable(
    "decision maker",
    DecisionMaker,
    {
        DecisionMaker.PLAYER: "player",
        DecisionMaker.AI: "ai",
    },
)

THING_TYPE_NAMES: VocabularyTable[ThingType] = VocabularyTable(
    "thing type",
    ThingType,
    {
        ThingType.INDIVIDUAL: "individual",
        ThingType.WAND: "wand",
        ThingType.POTION: "potion",
    },
)

WAND_NAMES: VocabularyTable[WandId] = VocabularyTable(
    "wand id",
    WandId,
    {
        WandId.CONFUSION: "confusion",
        WandId.DIGGING: "digging",
        WandId.STRIKING: "striking",
        WandId.SPEED: "speed",
        WandId.REMEDY: "remedy",
    },
)

POTION_NAMES: VocabularyTable[PotionId] = VocabularyTable(
    "potion id",
    PotionId,
    {
        PotionId.HEALING: "healing",
        PotionId.POISON: "poison",
        PotionId.ETHEREAL_VISION: "ethereal_vision",
        PotionId.COGNISCOPY: "cogniscopy",
        PotionId.BLINDNESS: "blindness",
        PotionId.INVISIBILITY: "invisibility",
    },
)

# Identity table per wishable category
WISH_IDENTITY_NAMES: dict[ThingType, VocabularyTable] = {
    ThingType.WAND: WAND_NAMES,
    ThingType.POTION: POTION_NAMES,
}
