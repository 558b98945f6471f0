"""Tests for the decision data model."""

from __future__ import annotations

import pytest

from tasrecord.actions import (
    LAYOUTS,
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


class TestAction:
    """Tests for Action construction and equality."""

    def test_every_kind_has_a_layout(self):
        """Every decision kind declares its argument layout."""
        assert set(LAYOUTS) == set(ActionKind)

    def test_structural_equality(self):
        """Same kind and arguments compare equal; anything else does not."""
        assert Action.move(Coord(1, 2)) == Action.move(Coord(1, 2))
        assert Action.move(Coord(1, 2)) != Action.move(Coord(2, 1))
        assert Action.move(Coord(1, 2)) != Action.attack(Coord(1, 2))
        assert Action.wait() != Action.undecided()

    def test_actions_are_hashable(self):
        """Equal actions hash equally."""
        assert len({Action.wait(), Action.wait(), Action.go_down()}) == 2

    def test_actions_are_immutable(self):
        """Actions cannot be mutated after construction."""
        action = Action.move(Coord(0, 1))
        with pytest.raises(AttributeError):
            action.coord = Coord(1, 1)

    def test_missing_payload_rejected(self):
        """A kind without its required argument is rejected."""
        with pytest.raises(ValueError, match="requires a coord"):
            Action(ActionKind.MOVE)

    def test_extra_payload_rejected(self):
        """A kind given an argument it does not take is rejected."""
        with pytest.raises(ValueError, match="does not take a item"):
            Action(ActionKind.WAIT, item=3)

    def test_item_range(self):
        """Item ids outside the uint256 range are rejected."""
        with pytest.raises(ValueError, match="uint256"):
            Action.drop(-1)

    def test_zap_carries_item_and_direction(self):
        """Test zap holds both the wand item and the direction."""
        action = Action.zap(7, Coord(-1, 0))
        assert action.layout is Layout.COORD_AND_ITEM
        assert action.item == 7
        assert action.coord == Coord(-1, 0)

    def test_cheatcode_constructor(self):
        """Test cheatcode() only builds argument-free cheat codes."""
        assert Action.cheatcode(ActionKind.CHEATCODE_IDENTIFY).kind is ActionKind.CHEATCODE_IDENTIFY
        with pytest.raises(ValueError):
            Action.cheatcode(ActionKind.MOVE)
        with pytest.raises(ValueError):
            Action.cheatcode(ActionKind.CHEATCODE_WISH)

    def test_undecided(self):
        """Test the undecided placeholder."""
        assert Action.undecided().is_undecided
        assert not Action.wait().is_undecided


class TestPayloads:
    """Tests for coordinate, wish and monster payloads."""

    def test_coord_range(self):
        """Coordinates must fit in int32."""
        Coord(-(2**31), 2**31 - 1)
        with pytest.raises(ValueError):
            Coord(2**31, 0)

    def test_wish_matches_category(self):
        """A wish identity must belong to its thing type."""
        Wish(ThingType.WAND, WandId.DIGGING)
        Wish(ThingType.POTION, PotionId.HEALING)
        with pytest.raises(ValueError, match="PotionId"):
            Wish(ThingType.POTION, WandId.DIGGING)

    def test_cannot_wish_for_individual(self):
        """Individuals cannot be wished for."""
        with pytest.raises(ValueError, match="can't wish for individual"):
            Wish(ThingType.INDIVIDUAL, WandId.SPEED)

    def test_generate_monster(self):
        """Test the spawn-monster payload."""
        monster = GenerateMonster(SpeciesId.OGRE, DecisionMaker.AI, Coord(3, 4))
        action = Action.cheatcode_generate_monster(monster)
        assert action.kind is ActionKind.CHEATCODE_GENERATE_MONSTER
        assert action.monster.location == Coord(3, 4)
