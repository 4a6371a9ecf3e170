"""Roster model."""

from dataclasses import dataclass

from no_repeats.errors import DuplicateRosterBattletag
from no_repeats.models.battletag import BattleTag
from no_repeats.models.player import PlayerSlot


@dataclass(frozen=True)
class Roster:
    """The three players of a match, ordered by slot."""

    player1: BattleTag
    player2: BattleTag
    player3: BattleTag

    def __post_init__(self):
        seen: set[BattleTag] = set()
        for battletag in self.battletags:
            if battletag in seen:
                raise DuplicateRosterBattletag(battletag)
            seen.add(battletag)

    @classmethod
    def from_names(cls, p1: str, p2: str, p3: str) -> "Roster":
        return cls(BattleTag(p1), BattleTag(p2), BattleTag(p3))

    @property
    def battletags(self) -> tuple[BattleTag, BattleTag, BattleTag]:
        return (self.player1, self.player2, self.player3)

    def get_battletag(self, slot: PlayerSlot) -> BattleTag:
        return self.battletags[slot.index]
