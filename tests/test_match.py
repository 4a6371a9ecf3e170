"""Tests for match history and hero reuse rules."""

import pytest

from no_repeats.errors import DuplicateHero, TooManyRounds
from no_repeats.models.battletag import BattleTag
from no_repeats.models.hero import Hero
from no_repeats.models.match import MAX_ROUNDS, Match
from no_repeats.models.round import Round


@pytest.fixture
def match():
    return Match()


def _round(heroes, win):
    return Round(
        (BattleTag("a"), heroes[0]),
        (BattleTag("b"), heroes[1]),
        (BattleTag("c"), heroes[2]),
        win=win,
    )


class TestInsertRound:
    def test_no_duplicate_two_winning_rounds(self, match, make_round):
        match.insert_round(make_round((Hero.MERCY, Hero.PHARAH, Hero.SOLDIER76), True))
        match.insert_round(make_round((Hero.ROADHOG, Hero.MEI, Hero.BRIGITTE), True))
        assert len(match) == 2

    @pytest.mark.parametrize("win", [True, False])
    def test_duplicate_in_single_round(self, match, make_round, win):
        """Three distinct heroes are required whatever the outcome."""
        with pytest.raises(DuplicateHero) as exc_info:
            match.insert_round(make_round((Hero.MERCY, Hero.PHARAH, Hero.PHARAH), win))

        assert exc_info.value.hero == Hero.PHARAH
        assert len(match) == 0

    def test_no_duplicate_in_two_losing_rounds(self, match, make_round):
        """Heroes from lost rounds can be reused."""
        heroes = (Hero.MERCY, Hero.PHARAH, Hero.SOLDIER76)
        match.insert_round(make_round(heroes, False))
        match.insert_round(make_round(heroes, False))
        assert len(match) == 2

    def test_lost_round_heroes_reusable_in_win(self, match, make_round):
        heroes = (Hero.ANA, Hero.ZENYATTA, Hero.SIGMA)
        match.insert_round(make_round(heroes, False))
        match.insert_round(make_round(heroes, True))
        assert match.score == (1, 1)

    @pytest.mark.parametrize("later_win", [True, False])
    def test_won_round_hero_retired(self, match, make_round, later_win):
        """A hero from a won round cannot come back, win or loss."""
        match.insert_round(make_round((Hero.MERCY, Hero.PHARAH, Hero.SOLDIER76), True))

        with pytest.raises(DuplicateHero) as exc_info:
            match.insert_round(make_round((Hero.ANA, Hero.MEI, Hero.MERCY), later_win))

        assert exc_info.value.hero == Hero.MERCY
        assert len(match) == 1

    def test_first_repeated_hero_reported(self, match, make_round):
        match.insert_round(make_round((Hero.MERCY, Hero.PHARAH, Hero.SOLDIER76), True))

        with pytest.raises(DuplicateHero) as exc_info:
            match.insert_round(make_round((Hero.SOLDIER76, Hero.PHARAH, Hero.ANA), False))
        assert exc_info.value.hero == Hero.SOLDIER76

    def test_sixth_round_rejected(self, match):
        for _ in range(MAX_ROUNDS):
            # Lost rounds may repeat heroes freely
            match.insert_round(_round((Hero.ANA, Hero.MEI, Hero.SIGMA), win=False))
        assert len(match) == MAX_ROUNDS

        with pytest.raises(TooManyRounds):
            match.insert_round(_round((Hero.TRACER, Hero.GENJI, Hero.DVA), False))
        assert len(match) == MAX_ROUNDS


class TestUsedHeroes:
    def test_only_winning_rounds(self):
        m = Match(
            rounds=[
                _round((Hero.ANA, Hero.ZENYATTA, Hero.SIGMA), False),
                _round((Hero.ROADHOG, Hero.BRIGITTE, Hero.MEI), True),
                _round((Hero.PHARAH, Hero.SOLDIER76, Hero.MERCY), True),
            ]
        )
        assert m.used_heroes() == {
            Hero.ROADHOG,
            Hero.BRIGITTE,
            Hero.MEI,
            Hero.PHARAH,
            Hero.SOLDIER76,
            Hero.MERCY,
        }

    def test_empty_match(self, match):
        assert match.used_heroes() == set()

    def test_grows_after_insert(self, match, make_round):
        match.insert_round(make_round((Hero.ANA, Hero.ZENYATTA, Hero.SIGMA), False))
        assert match.used_heroes() == set()
        match.insert_round(make_round((Hero.ROADHOG, Hero.BRIGITTE, Hero.MEI), True))
        assert match.used_heroes() == {Hero.ROADHOG, Hero.BRIGITTE, Hero.MEI}


class TestMatchOutcome:
    def test_undecided(self, match):
        assert match.match_outcome() is None
        match.insert_round(_round((Hero.ANA, Hero.MEI, Hero.SIGMA), False))
        match.insert_round(_round((Hero.ANA, Hero.MEI, Hero.SIGMA), False))
        assert match.match_outcome() is None
        assert match.is_decided is False

    def test_three_wins(self):
        m = Match(
            rounds=[
                _round((Hero.ANA, Hero.MEI, Hero.SIGMA), True),
                _round((Hero.TRACER, Hero.GENJI, Hero.DVA), False),
                _round((Hero.LUCIO, Hero.HANZO, Hero.ORISA), True),
                _round((Hero.MOIRA, Hero.REAPER, Hero.ZARYA), True),
            ]
        )
        assert m.match_outcome() is True
        assert m.score == (3, 1)

    def test_three_losses(self):
        m = Match(rounds=[_round((Hero.ANA, Hero.MEI, Hero.SIGMA), False)] * 3)
        assert m.match_outcome() is False

    def test_first_threshold_decides(self):
        """Rounds are folded in order; later rounds do not change the result."""
        m = Match(
            rounds=[_round((Hero.ANA, Hero.MEI, Hero.SIGMA), False)] * 3
            + [_round((Hero.TRACER, Hero.GENJI, Hero.DVA), True)] * 3
        )
        assert m.match_outcome() is False

    def test_decided_at_fifth_round(self):
        m = Match(
            rounds=[
                _round((Hero.ANA, Hero.MEI, Hero.SIGMA), True),
                _round((Hero.TRACER, Hero.GENJI, Hero.DVA), False),
                _round((Hero.LUCIO, Hero.HANZO, Hero.ORISA), True),
                _round((Hero.TRACER, Hero.GENJI, Hero.DVA), False),
            ]
        )
        assert m.match_outcome() is None
        m.insert_round(_round((Hero.TRACER, Hero.GENJI, Hero.DVA), False))
        assert m.match_outcome() is False
