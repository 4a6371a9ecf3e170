"""Tests for the round builder and finalized rounds."""

import pytest

from no_repeats.errors import MissingOutcome, MissingPlayerHero
from no_repeats.models.battletag import BattleTag
from no_repeats.models.hero import Hero
from no_repeats.models.player import PlayerSlot
from no_repeats.models.round import CompBuilder, Round


@pytest.fixture
def builder(roster):
    return CompBuilder(roster)


def _fill(builder, heroes=(Hero.MERCY, Hero.PHARAH, Hero.SOLDIER76)):
    for slot, hero in zip(PlayerSlot.iter(), heroes):
        builder.set_player(slot, hero)


class TestCompBuilder:
    def test_new_builder_is_empty(self, builder):
        assert builder.get_win() is None
        for slot in PlayerSlot.iter():
            assert builder.get_hero(slot) is None
        assert builder.get_battletag(PlayerSlot.ONE) == BattleTag("player1")

    def test_validate_requires_heroes_and_outcome(self, builder):
        assert builder.validate() is False
        _fill(builder)
        assert builder.validate() is False
        builder.set_win(False)
        assert builder.validate() is True
        builder.clear_hero(PlayerSlot.TWO)
        assert builder.validate() is False

    def test_clear_win(self, builder):
        _fill(builder)
        builder.set_win(True)
        builder.clear_win()
        assert builder.get_win() is None
        assert builder.validate() is False

    def test_finalize_complete_round(self, builder):
        _fill(builder)
        builder.set_win(True)
        r = builder.finalize()

        assert r.win is True
        assert list(r.heroes()) == [Hero.MERCY, Hero.PHARAH, Hero.SOLDIER76]
        assert r.get_player(PlayerSlot.THREE) == (BattleTag("player3"), Hero.SOLDIER76)

    def test_missing_outcome_checked_before_players(self, builder):
        """An empty builder reports the outcome first."""
        with pytest.raises(MissingOutcome):
            builder.finalize()

    def test_missing_outcome_with_all_heroes(self, builder):
        _fill(builder)
        with pytest.raises(MissingOutcome):
            builder.finalize()

    def test_missing_player_hero_names_first_empty_slot(self, builder):
        builder.set_player(PlayerSlot.ONE, Hero.ANA)
        builder.set_win(False)

        with pytest.raises(MissingPlayerHero) as exc_info:
            builder.finalize()

        assert exc_info.value.slot == PlayerSlot.TWO
        assert exc_info.value.battletag == BattleTag("player2")

    def test_missing_last_player(self, builder):
        builder.set_player(PlayerSlot.ONE, Hero.ANA)
        builder.set_player(PlayerSlot.TWO, Hero.MEI)
        builder.set_win(True)

        with pytest.raises(MissingPlayerHero) as exc_info:
            builder.finalize()
        assert exc_info.value.slot == PlayerSlot.THREE

    def test_from_round_round_trip(self, builder):
        _fill(builder)
        builder.set_win(False)
        r = builder.finalize()

        reopened = CompBuilder.from_round(r)
        assert reopened.validate() is True
        assert reopened.get_hero(PlayerSlot.TWO) == Hero.PHARAH
        assert reopened.get_win() is False
        assert reopened.finalize() == r

    def test_picked_heroes(self, builder):
        builder.set_player(PlayerSlot.THREE, Hero.ZARYA)
        assert builder.picked_heroes() == {Hero.ZARYA}


class TestRound:
    def test_round_iter(self):
        r = Round(
            (BattleTag("a"), Hero.ROADHOG),
            (BattleTag("a"), Hero.BRIGITTE),
            (BattleTag("a"), Hero.MEI),
            win=False,
        )
        assert list(r.heroes()) == [Hero.ROADHOG, Hero.BRIGITTE, Hero.MEI]
        assert r.battletags == [BattleTag("a")] * 3

    def test_incomplete_pick_rejected(self):
        with pytest.raises(ValueError):
            Round(
                (BattleTag("a"), Hero.ROADHOG),
                (BattleTag("b"), None),
                (BattleTag("c"), Hero.MEI),
                win=True,
            )

    def test_outcome_required(self):
        with pytest.raises(ValueError):
            Round(
                (BattleTag("a"), Hero.ROADHOG),
                (BattleTag("b"), Hero.BRIGITTE),
                (BattleTag("c"), Hero.MEI),
                win=None,
            )
