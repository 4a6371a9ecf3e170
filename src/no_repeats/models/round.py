"""Round models: the in-progress builder and the finalized round."""

from dataclasses import dataclass
from typing import Iterator, Optional

from no_repeats.errors import MissingOutcome, MissingPlayerHero
from no_repeats.models.battletag import BattleTag
from no_repeats.models.hero import Hero
from no_repeats.models.player import PlayerSlot
from no_repeats.models.roster import Roster

Pick = tuple[BattleTag, Hero]


@dataclass(frozen=True)
class Round:
    """One finalized round: a hero for every player plus the outcome."""

    player1: Pick
    player2: Pick
    player3: Pick
    win: bool

    def __post_init__(self):
        for pick in self.picks:
            if (
                len(pick) != 2
                or not isinstance(pick[0], BattleTag)
                or not isinstance(pick[1], Hero)
            ):
                raise ValueError(f"incomplete pick in round: {pick!r}")
        if not isinstance(self.win, bool):
            raise ValueError("round outcome must be a bool")

    @property
    def picks(self) -> tuple[Pick, Pick, Pick]:
        return (self.player1, self.player2, self.player3)

    @property
    def battletags(self) -> list[BattleTag]:
        return [battletag for battletag, _ in self.picks]

    def heroes(self) -> Iterator[Hero]:
        """Heroes in player order."""
        for _, hero in self.picks:
            yield hero

    def get_player(self, slot: PlayerSlot) -> Pick:
        return self.picks[slot.index]

    def get_hero(self, slot: PlayerSlot) -> Hero:
        return self.get_player(slot)[1]


class CompBuilder:
    """Accumulates one round's hero picks and outcome."""

    def __init__(self, roster: Roster):
        self._battletags = list(roster.battletags)
        self._heroes: list[Optional[Hero]] = [None, None, None]
        self._win: Optional[bool] = None

    @classmethod
    def from_round(cls, round_: Round) -> "CompBuilder":
        """Reopen a finalized round for editing."""
        builder = cls(Roster(*round_.battletags))
        for slot in PlayerSlot.iter():
            builder.set_player(slot, round_.get_hero(slot))
        builder.set_win(round_.win)
        return builder

    def roster(self) -> Roster:
        return Roster(*self._battletags)

    def set_player(self, slot: PlayerSlot, hero: Hero) -> None:
        self._heroes[slot.index] = hero

    def get_hero(self, slot: PlayerSlot) -> Optional[Hero]:
        return self._heroes[slot.index]

    def clear_hero(self, slot: PlayerSlot) -> None:
        self._heroes[slot.index] = None

    def get_battletag(self, slot: PlayerSlot) -> BattleTag:
        return self._battletags[slot.index]

    def set_win(self, win: bool) -> None:
        self._win = win

    def clear_win(self) -> None:
        self._win = None

    def get_win(self) -> Optional[bool]:
        return self._win

    def picked_heroes(self) -> set[Hero]:
        """Heroes currently assigned to any slot."""
        return {hero for hero in self._heroes if hero is not None}

    def validate(self) -> bool:
        """True when every slot has a hero and the outcome is known."""
        if any(hero is None for hero in self._heroes):
            return False
        return self._win is not None

    def finalize(self) -> Round:
        """Build the immutable round.

        The outcome is checked before any player so error reporting is
        deterministic.

        Raises:
            MissingOutcome: If no outcome has been set
            MissingPlayerHero: For the first slot without a hero
        """
        if self._win is None:
            raise MissingOutcome()

        picks = []
        for slot in PlayerSlot.iter():
            hero = self._heroes[slot.index]
            battletag = self._battletags[slot.index]
            if hero is None:
                raise MissingPlayerHero(battletag, slot)
            picks.append((battletag, hero))

        return Round(*picks, win=self._win)

    def __repr__(self) -> str:
        return (
            f"CompBuilder(battletags={self._battletags!r}, "
            f"heroes={self._heroes!r}, win={self._win!r})"
        )
