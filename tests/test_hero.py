"""Tests for the hero catalog."""

import pytest

from no_repeats.models.hero import HERO_POOL, NUM_HEROES, Hero, ParseHeroError, Role


def test_hero_pool():
    assert Hero.MERCY in HERO_POOL
    assert len(HERO_POOL) == NUM_HEROES


def test_parse_all_heroes():
    """Every stable encoding parses back to its hero."""
    for hero in Hero:
        assert Hero.parse(hero.value) is hero


def test_parse_hero_failure():
    with pytest.raises(ParseHeroError) as exc_info:
        Hero.parse("pharmacy")
    assert exc_info.value.text == "pharmacy"
    assert isinstance(exc_info.value, ValueError)


def test_stable_encodings():
    """Persisted names must never change."""
    assert Hero.SOLDIER76.value == "soldier-76"
    assert Hero.WRECKING_BALL.value == "wrecking-ball"
    assert Hero.DVA.value == "dva"
    assert str(Hero.TORBJORN) == "torbjorn"


def test_roles():
    assert Hero.ANA.role == Role.SUPPORT
    assert Hero.WINSTON.role == Role.TANK
    assert Hero.PHARAH.role == Role.DPS


def test_role_heroes_partition_catalog():
    """Each hero belongs to exactly one role."""
    by_role = [Role.TANK.heroes(), Role.DPS.heroes(), Role.SUPPORT.heroes()]
    assert sum(len(heroes) for heroes in by_role) == NUM_HEROES
    assert set().union(*by_role) == set(HERO_POOL)
    assert Role.SUPPORT.heroes()[0] == Hero.ANA


def test_display_name():
    assert Hero.SOLDIER76.display_name == "Soldier76"
    assert Hero.MERCY.display_name == "Mercy"
