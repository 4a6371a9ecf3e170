"""Shared fixtures for match tracking tests."""

import pytest

from no_repeats.models.hero import Hero
from no_repeats.models.player import PlayerSlot
from no_repeats.models.roster import Roster
from no_repeats.models.round import CompBuilder, Round
from no_repeats.repositories.match_repository import MatchDb


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def roster():
    return Roster.from_names("Player1", "Player2", "Player3")


@pytest.fixture
def make_round(roster):
    """Factory building a finalized round for the default roster."""

    def _make(heroes: tuple[Hero, Hero, Hero], win: bool) -> Round:
        builder = CompBuilder(roster)
        for slot, hero in zip(PlayerSlot.iter(), heroes):
            builder.set_player(slot, hero)
        builder.set_win(win)
        return builder.finalize()

    return _make


@pytest.fixture
def db():
    store = MatchDb.in_memory()
    yield store
    store.close()
