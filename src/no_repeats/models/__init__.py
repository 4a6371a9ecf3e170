"""Data models for match tracking."""

from no_repeats.models.battletag import BattleTag
from no_repeats.models.hero import HERO_POOL, Hero, ParseHeroError, Role
from no_repeats.models.match import MAX_ROUNDS, WINS_NEEDED, Match
from no_repeats.models.player import PlayerSlot
from no_repeats.models.roster import Roster
from no_repeats.models.round import CompBuilder, Round

__all__ = [
    "BattleTag",
    "HERO_POOL",
    "Hero",
    "ParseHeroError",
    "Role",
    "MAX_ROUNDS",
    "WINS_NEEDED",
    "Match",
    "PlayerSlot",
    "Roster",
    "CompBuilder",
    "Round",
]
