"""Decision data model.

An Action is one discrete choice made during a simulation step. Every
kind has a fixed argument layout, and an Action only carries the
payload its layout demands. Actions are immutable and compare
structurally.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from tasrecord.script.numeric import INT32_MAX, INT32_MIN, UINT256_MAX


class Layout(Enum):
    """Argument shape of a decision kind."""

    VOID = auto()
    COORD = auto()
    ITEM = auto()
    COORD_AND_ITEM = auto()
    WISH = auto()
    GENERATE_MONSTER = auto()


class ActionKind(Enum):
    """Every decision kind the simulation understands."""

    MOVE = auto()
    WAIT = auto()
    ATTACK = auto()
    ZAP = auto()
    PICKUP = auto()
    DROP = auto()
    QUAFF = auto()
    THROW = auto()
    GO_DOWN = auto()

    CHEATCODE_HEALTH_BOOST = auto()
    CHEATCODE_KILL_EVERYBODY = auto()
    CHEATCODE_POLYMORPH = auto()
    CHEATCODE_GENERATE_MONSTER = auto()
    CHEATCODE_WISH = auto()
    CHEATCODE_IDENTIFY = auto()
    CHEATCODE_GO_DOWN = auto()
    CHEATCODE_GAIN_LEVEL = auto()

    # return value only, never persisted
    UNDECIDED = auto()

    @property
    def layout(self) -> Layout:
        return LAYOUTS[self]


LAYOUTS: dict[ActionKind, Layout] = {
    ActionKind.MOVE: Layout.COORD,
    ActionKind.WAIT: Layout.VOID,
    ActionKind.ATTACK: Layout.COORD,
    ActionKind.ZAP: Layout.COORD_AND_ITEM,
    ActionKind.PICKUP: Layout.ITEM,
    ActionKind.DROP: Layout.ITEM,
    ActionKind.QUAFF: Layout.ITEM,
    ActionKind.THROW: Layout.COORD_AND_ITEM,
    ActionKind.GO_DOWN: Layout.VOID,
    ActionKind.CHEATCODE_HEALTH_BOOST: Layout.VOID,
    ActionKind.CHEATCODE_KILL_EVERYBODY: Layout.VOID,
    ActionKind.CHEATCODE_POLYMORPH: Layout.VOID,
    ActionKind.CHEATCODE_GENERATE_MONSTER: Layout.GENERATE_MONSTER,
    ActionKind.CHEATCODE_WISH: Layout.WISH,
    ActionKind.CHEATCODE_IDENTIFY: Layout.VOID,
    ActionKind.CHEATCODE_GO_DOWN: Layout.VOID,
    ActionKind.CHEATCODE_GAIN_LEVEL: Layout.VOID,
    ActionKind.UNDECIDED: Layout.VOID,
}


class SpeciesId(Enum):
    HUMAN = auto()
    OGRE = auto()
    LICH = auto()
    PINK_BLOB = auto()
    AIR_ELEMENTAL = auto()
    DOG = auto()
    ANT = auto()
    BEE = auto()
    BEETLE = auto()
    SCORPION = auto()
    SNAKE = auto()


class DecisionMaker(Enum):
    """Who decides for a spawned individual."""

    PLAYER = auto()
    AI = auto()


class ThingType(Enum):
    """Item category."""

    INDIVIDUAL = auto()
    WAND = auto()
    POTION = auto()


class WandId(Enum):
    CONFUSION = auto()
    DIGGING = auto()
    STRIKING = auto()
    SPEED = auto()
    REMEDY = auto()


class PotionId(Enum):
    HEALING = auto()
    POISON = auto()
    ETHEREAL_VISION = auto()
    COGNISCOPY = auto()
    BLINDNESS = auto()
    INVISIBILITY = auto()


@dataclass(frozen=True)
class Coord:
    x: int
    y: int

    def __post_init__(self):
        for value in (self.x, self.y):
            if not INT32_MIN <= value <= INT32_MAX:
                raise ValueError(f"coordinate out of int32 range: {value}")


@dataclass(frozen=True)
class Wish:
    """Payload of a wish: an item category and an identity within it."""

    thing_type: ThingType
    identity: WandId | PotionId

    def __post_init__(self):
        expected = {ThingType.WAND: WandId, ThingType.POTION: PotionId}.get(self.thing_type)
        if expected is None:
            raise ValueError(f"can't wish for {self.thing_type.name.lower()}")
        if not isinstance(self.identity, expected):
            raise ValueError(
                f"{self.thing_type.name.lower()} wish needs a {expected.__name__}, "
                f"got {self.identity!r}"
            )


@dataclass(frozen=True)
class GenerateMonster:
    """Payload of a spawn-monster cheat."""

    species: SpeciesId
    decision_maker: DecisionMaker
    location: Coord


_PAYLOAD_FIELDS: dict[Layout, tuple[str, ...]] = {
    Layout.VOID: (),
    Layout.COORD: ("coord",),
    Layout.ITEM: ("item",),
    Layout.COORD_AND_ITEM: ("coord", "item"),
    Layout.WISH: ("wish",),
    Layout.GENERATE_MONSTER: ("monster",),
}


@dataclass(frozen=True)
class Action:
    """One decision.

    Only the payload fields named by the kind's layout may be set; the
    rest stay None. Use the named constructors rather than building one
    by hand.
    """

    kind: ActionKind
    coord: Coord | None = None
    item: int | None = None
    wish: Wish | None = None
    monster: GenerateMonster | None = None

    def __post_init__(self):
        required = _PAYLOAD_FIELDS[self.kind.layout]
        for name in ("coord", "item", "wish", "monster"):
            present = getattr(self, name) is not None
            if present != (name in required):
                state = "requires" if name in required else "does not take"
                raise ValueError(f"{self.kind.name} {state} a {name} argument")
        if self.item is not None and not 0 <= self.item <= UINT256_MAX:
            raise ValueError(f"item id out of uint256 range: {self.item}")

    @property
    def layout(self) -> Layout:
        return self.kind.layout

    @property
    def is_undecided(self) -> bool:
        return self.kind is ActionKind.UNDECIDED

    @classmethod
    def undecided(cls) -> Action:
        return cls(ActionKind.UNDECIDED)

    @classmethod
    def wait(cls) -> Action:
        return cls(ActionKind.WAIT)

    @classmethod
    def go_down(cls) -> Action:
        return cls(ActionKind.GO_DOWN)

    @classmethod
    def move(cls, coord: Coord) -> Action:
        return cls(ActionKind.MOVE, coord=coord)

    @classmethod
    def attack(cls, coord: Coord) -> Action:
        return cls(ActionKind.ATTACK, coord=coord)

    @classmethod
    def zap(cls, item: int, direction: Coord) -> Action:
        return cls(ActionKind.ZAP, coord=direction, item=item)

    @classmethod
    def throw(cls, item: int, direction: Coord) -> Action:
        return cls(ActionKind.THROW, coord=direction, item=item)

    @classmethod
    def pickup(cls, item: int) -> Action:
        return cls(ActionKind.PICKUP, item=item)

    @classmethod
    def drop(cls, item: int) -> Action:
        return cls(ActionKind.DROP, item=item)

    @classmethod
    def quaff(cls, item: int) -> Action:
        return cls(ActionKind.QUAFF, item=item)

    @classmethod
    def cheatcode(cls, kind: ActionKind) -> Action:
        """Build one of the argument-free cheat codes."""
        if not kind.name.startswith("CHEATCODE_") or kind.layout is not Layout.VOID:
            raise ValueError(f"{kind.name} is not an argument-free cheat code")
        return cls(kind)

    @classmethod
    def cheatcode_wish(cls, wish: Wish) -> Action:
        return cls(ActionKind.CHEATCODE_WISH, wish=wish)

    @classmethod
    def cheatcode_generate_monster(cls, monster: GenerateMonster) -> Action:
        return cls(ActionKind.CHEATCODE_GENERATE_MONSTER, monster=monster)
