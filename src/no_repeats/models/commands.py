"""User-intent commands consumed by the match lifecycle controller."""

from dataclasses import dataclass
from typing import Union

from no_repeats.models.hero import Hero
from no_repeats.models.player import PlayerSlot


@dataclass(frozen=True)
class OpenDatabase:
    path: str


@dataclass(frozen=True)
class RecordBattletag:
    """Replace the roster-entry input buffer."""

    text: str


@dataclass(frozen=True)
class EnterBattleTag:
    """Move the input buffer into the roster list."""


@dataclass(frozen=True)
class RemoveFromRoster:
    slot: PlayerSlot


@dataclass(frozen=True)
class RosterPlay:
    """Start a match with the three entered battletags."""


@dataclass(frozen=True)
class RoundSelectPlayer:
    slot: PlayerSlot


@dataclass(frozen=True)
class RoundSelectHero:
    hero: Hero


@dataclass(frozen=True)
class RoundToggleOutcome:
    pass


@dataclass(frozen=True)
class RoundRecord:
    """Finalize the in-progress round and add it to the match."""


@dataclass(frozen=True)
class Exit:
    pass


Command = Union[
    OpenDatabase,
    RecordBattletag,
    EnterBattleTag,
    RemoveFromRoster,
    RosterPlay,
    RoundSelectPlayer,
    RoundSelectHero,
    RoundToggleOutcome,
    RoundRecord,
    Exit,
]
