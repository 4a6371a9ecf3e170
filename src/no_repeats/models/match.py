"""Match history model: a best-of-five sequence of rounds."""

from dataclasses import dataclass, field
from typing import Iterator, Optional

from no_repeats.errors import DuplicateHero, TooManyRounds
from no_repeats.models.hero import Hero
from no_repeats.models.round import Round

MAX_ROUNDS = 5
WINS_NEEDED = 3


@dataclass
class Match:
    """Rounds of a single best-of-five, in insertion order.

    A hero that appeared in a won round is retired for the rest of the match,
    whatever the outcome of later rounds. Heroes from lost rounds can be
    picked again. Every round still needs three distinct heroes.
    """

    rounds: list[Round] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rounds)

    def __iter__(self) -> Iterator[Round]:
        return iter(self.rounds)

    def used_heroes(self) -> set[Hero]:
        """Heroes from winning rounds; unavailable for new picks."""
        return {hero for r in self.rounds if r.win for hero in r.heroes()}

    def insert_round(self, round_: Round) -> None:
        """Append a round after checking the round limit and hero reuse.

        Raises:
            TooManyRounds: If MAX_ROUNDS rounds are already recorded
            DuplicateHero: For the first hero repeated across the winning
                rounds so far plus the candidate round
        """
        if len(self.rounds) >= MAX_ROUNDS:
            raise TooManyRounds()

        duplicate = self._find_duplicate(round_)
        if duplicate is not None:
            raise DuplicateHero(duplicate)

        self.rounds.append(round_)

    def _find_duplicate(self, round_: Round) -> Optional[Hero]:
        seen: set[Hero] = set()
        winning = [hero for r in self.rounds if r.win for hero in r.heroes()]
        for hero in winning + list(round_.heroes()):
            if hero in seen:
                return hero
            seen.add(hero)
        return None

    @property
    def score(self) -> tuple[int, int]:
        """(wins, losses) over all recorded rounds."""
        wins = sum(1 for r in self.rounds if r.win)
        return wins, len(self.rounds) - wins

    def match_outcome(self) -> Optional[bool]:
        """True once 3 wins accumulate, False once 3 losses do, else None.

        Rounds are folded in order and the first side to reach the threshold
        decides. Callers must stop inserting once this is not None.
        """
        wins = 0
        losses = 0
        for r in self.rounds:
            if r.win:
                wins += 1
            else:
                losses += 1
            if wins >= WINS_NEEDED:
                return True
            if losses >= WINS_NEEDED:
                return False
        return None

    @property
    def is_decided(self) -> bool:
        return self.match_outcome() is not None
