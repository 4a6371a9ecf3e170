"""Match lifecycle state machine.

Lifecycle: loading database -> roster selection -> match -> roster selection
-> ... -> exit. The controller owns exactly one state at a time plus the open
store, and applies user-intent commands strictly one after another.

Invariants:
    - A command illegal for the current state raises InvalidStateError before
      any mutation happens.
    - Transitions take the previous state out and install the next one inside
      the same call; the empty slot is never visible to readers.
    - MatchState's used-hero cache equals Match.used_heroes() after every
      successful round insertion.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Optional

from no_repeats.errors import (
    DuplicateRosterBattletag,
    InvalidStateError,
    MatchDbError,
    NoRepeatsError,
)
from no_repeats.models.battletag import BattleTag
from no_repeats.models.commands import (
    Command,
    EnterBattleTag,
    Exit,
    OpenDatabase,
    RecordBattletag,
    RemoveFromRoster,
    RosterPlay,
    RoundRecord,
    RoundSelectHero,
    RoundSelectPlayer,
    RoundToggleOutcome,
)
from no_repeats.models.hero import Hero
from no_repeats.models.match import Match
from no_repeats.models.player import PlayerSlot
from no_repeats.models.roster import Roster
from no_repeats.models.round import CompBuilder, Round
from no_repeats.repositories.match_repository import MatchDb, open_match_db

logger = logging.getLogger(__name__)

ROSTER_SIZE = 3


class LifecyclePhase(str, Enum):
    """Which state the controller is in."""

    LOAD_DATABASE = "load_database"
    ROSTER_SELECT = "roster_select"
    MATCH = "match"
    EXIT = "exit"


class LoadStatus(str, Enum):
    """Progress of opening the store."""

    NOT_READY = "not_ready"
    READY = "ready"
    FAILURE = "failure"


@dataclass
class RosterSelectState:
    """Pre-match roster entry: an input buffer and up to 3 battletags."""

    battletag: str = ""
    roster: list[BattleTag] = field(default_factory=list)

    def get_battletag(self, slot: PlayerSlot) -> Optional[BattleTag]:
        if slot.index < len(self.roster):
            return self.roster[slot.index]
        return None

    @property
    def ready_to_play(self) -> bool:
        return len(self.roster) == ROSTER_SIZE

    def enter_battletag(self) -> None:
        """Move the input buffer into the roster list if there is room."""
        if len(self.roster) >= ROSTER_SIZE:
            return
        if not self.battletag.strip():
            return
        battletag = BattleTag(self.battletag)
        if battletag in self.roster:
            raise DuplicateRosterBattletag(battletag)
        self.roster.append(battletag)
        self.battletag = ""

    def remove(self, slot: PlayerSlot) -> None:
        if slot.index < len(self.roster):
            del self.roster[slot.index]

    def to_roster(self) -> Roster:
        return Roster(*self.roster)


class MatchState:
    """Active match: the selected player, the round builder and the history."""

    def __init__(self, roster: Roster):
        self.selected_player = PlayerSlot.ONE
        self.builder = CompBuilder(roster)
        self.history = Match()
        self._used_heroes: frozenset[Hero] = frozenset()

    @property
    def roster(self) -> Roster:
        return self.builder.roster()

    @property
    def rounds(self) -> list[Round]:
        return list(self.history)

    @property
    def match_len(self) -> int:
        return len(self.history)

    @property
    def used_heroes(self) -> frozenset[Hero]:
        """Heroes retired by won rounds of this match."""
        return self._used_heroes

    def is_used(self, hero: Hero) -> bool:
        return hero in self._used_heroes

    def is_available(self, hero: Hero) -> bool:
        """Whether hero can be picked for the selected player right now."""
        if self.is_used(hero):
            return False
        if hero == self.builder.get_hero(self.selected_player):
            return True
        return hero not in self.builder.picked_heroes()

    def get_battletag(self, slot: PlayerSlot) -> BattleTag:
        return self.builder.get_battletag(slot)

    def get_hero(self, slot: PlayerSlot) -> Optional[Hero]:
        return self.builder.get_hero(slot)

    def get_win(self) -> Optional[bool]:
        return self.builder.get_win()

    def validate(self) -> bool:
        return self.builder.validate()

    def select_player(self, slot: PlayerSlot) -> None:
        self.selected_player = slot
        self.builder.clear_hero(slot)

    def select_hero(self, hero: Hero) -> None:
        """Assign hero to the selected player and move to the next slot."""
        if not self.is_available(hero):
            logger.debug("Ignoring unavailable hero %s for %s", hero, self.selected_player)
            return
        self.builder.set_player(self.selected_player, hero)
        self.selected_player = self.selected_player.cycle_next()

    def toggle_outcome(self) -> None:
        self.builder.set_win(self.builder.get_win() is not True)

    def record_round(self) -> Optional[bool]:
        """Finalize the builder into the history.

        The builder is only replaced once the round is accepted, so picks are
        kept for correction after a validation error.

        Returns:
            The match outcome after the insert (None while undecided)
        """
        round_ = self.builder.finalize()
        self.history.insert_round(round_)
        self.builder = CompBuilder(self.builder.roster())
        self._used_heroes = frozenset(self.history.used_heroes())
        self.selected_player = PlayerSlot.ONE
        return self.history.match_outcome()


# === Lifecycle states ===


@dataclass
class LoadingDatabase:
    status: LoadStatus = LoadStatus.NOT_READY
    store: Optional[MatchDb] = None
    error: Optional[MatchDbError] = None


@dataclass
class SelectingRoster:
    roster_state: RosterSelectState
    store: MatchDb


@dataclass
class PlayingMatch:
    match_state: MatchState
    store: MatchDb


@dataclass
class Exited:
    pass


LifecycleState = LoadingDatabase | SelectingRoster | PlayingMatch | Exited

_PHASES: dict[type, LifecyclePhase] = {
    LoadingDatabase: LifecyclePhase.LOAD_DATABASE,
    SelectingRoster: LifecyclePhase.ROSTER_SELECT,
    PlayingMatch: LifecyclePhase.MATCH,
    Exited: LifecyclePhase.EXIT,
}


class MatchController:
    """Top-level controller applying user commands to the lifecycle state."""

    def __init__(self, record_matches: bool = True):
        self._state: Optional[LifecycleState] = LoadingDatabase()
        self.record_matches = record_matches
        self.last_match: Optional[Match] = None
        self.last_match_id: Optional[int] = None

        self._handlers: dict[type, Callable] = {
            OpenDatabase: self._open_database,
            RecordBattletag: self._record_battletag,
            EnterBattleTag: self._enter_battletag,
            RemoveFromRoster: self._remove_from_roster,
            RosterPlay: self._roster_play,
            RoundSelectPlayer: self._round_select_player,
            RoundSelectHero: self._round_select_hero,
            RoundToggleOutcome: self._round_toggle_outcome,
            RoundRecord: self._round_record,
            Exit: self._exit,
        }

    # === Read accessors ===

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def phase(self) -> LifecyclePhase:
        return _PHASES[type(self._state)]

    @property
    def load_status(self) -> Optional[LoadStatus]:
        if isinstance(self._state, LoadingDatabase):
            return self._state.status
        return None

    @property
    def load_error(self) -> Optional[MatchDbError]:
        if isinstance(self._state, LoadingDatabase):
            return self._state.error
        return None

    @property
    def roster_state(self) -> Optional[RosterSelectState]:
        if isinstance(self._state, SelectingRoster):
            return self._state.roster_state
        return None

    @property
    def match_state(self) -> Optional[MatchState]:
        if isinstance(self._state, PlayingMatch):
            return self._state.match_state
        return None

    @property
    def store(self) -> Optional[MatchDb]:
        if isinstance(self._state, (SelectingRoster, PlayingMatch, LoadingDatabase)):
            return self._state.store
        return None

    def search_battletags(self, search: str) -> list[BattleTag]:
        """Registered battletags matching search; empty when no store is open."""
        store = self.store
        if store is None:
            return []
        return store.search_battletags(search)

    # === Command application ===

    def apply(self, command: Command) -> None:
        """Apply a single command.

        Raises:
            NoRepeatsError: For validation and store errors (state unchanged
                unless documented otherwise)
            InvalidStateError: If the command is illegal in the current state
        """
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unknown command: {command!r}")
        logger.debug("Applying %r in %s", command, self.phase.value)
        handler(command)

    def apply_all(self, commands: Iterable[Command]) -> list[NoRepeatsError]:
        """Drain a batch of commands in order.

        Domain errors are collected and returned; each later command still
        sees the state left by the previous one. InvalidStateError propagates
        and stops the batch, carrying the number of commands applied before it
        and the domain errors collected so far.
        """
        errors: list[NoRepeatsError] = []
        for index, command in enumerate(commands):
            try:
                self.apply(command)
            except NoRepeatsError as e:
                logger.info("Command %r failed: %s", command, e)
                errors.append(e)
            except InvalidStateError as e:
                e.applied = index
                e.errors = errors
                raise
        return errors

    def _require(self, state_type: type, command: Command):
        if not isinstance(self._state, state_type):
            raise InvalidStateError(
                f"{type(command).__name__} is not valid in state {self.phase.value}"
            )
        return self._state

    def _take(self, state_type: type, command: Command):
        """Move the current state out; the caller must install the next one."""
        state = self._require(state_type, command)
        self._state = None
        return state

    # === Database loading ===

    def _open_database(self, command: OpenDatabase) -> None:
        self._require(LoadingDatabase, command)
        try:
            store = open_match_db(command.path)
        except MatchDbError as e:
            logger.warning("Could not open database %s: %s", command.path, e)
            self._take(LoadingDatabase, command)
            self._state = LoadingDatabase(status=LoadStatus.FAILURE, error=e)
            raise

        self._take(LoadingDatabase, command)
        self._state = LoadingDatabase(status=LoadStatus.READY, store=store)
        self._advance_from_loaded(command)

    def _advance_from_loaded(self, command: Command) -> None:
        loaded = self._take(LoadingDatabase, command)
        self._state = SelectingRoster(roster_state=RosterSelectState(), store=loaded.store)
        logger.info("Database ready, entering roster selection")

    # === Roster selection ===

    def _record_battletag(self, command: RecordBattletag) -> None:
        state = self._require(SelectingRoster, command)
        state.roster_state.battletag = command.text

    def _enter_battletag(self, command: EnterBattleTag) -> None:
        state = self._require(SelectingRoster, command)
        state.roster_state.enter_battletag()

    def _remove_from_roster(self, command: RemoveFromRoster) -> None:
        state = self._require(SelectingRoster, command)
        state.roster_state.remove(command.slot)

    def _roster_play(self, command: RosterPlay) -> None:
        state = self._require(SelectingRoster, command)
        if not state.roster_state.ready_to_play:
            raise InvalidStateError(
                f"RosterPlay requires {ROSTER_SIZE} battletags, "
                f"got {len(state.roster_state.roster)}"
            )
        roster = state.roster_state.to_roster()
        for battletag in roster.battletags:
            state.store.get_or_insert_battletag_id(battletag)

        state = self._take(SelectingRoster, command)
        self._state = PlayingMatch(match_state=MatchState(roster), store=state.store)
        logger.info("Match started: %s", ", ".join(str(b) for b in roster.battletags))

    # === Match ===

    def _round_select_player(self, command: RoundSelectPlayer) -> None:
        state = self._require(PlayingMatch, command)
        state.match_state.select_player(command.slot)

    def _round_select_hero(self, command: RoundSelectHero) -> None:
        state = self._require(PlayingMatch, command)
        state.match_state.select_hero(command.hero)

    def _round_toggle_outcome(self, command: RoundToggleOutcome) -> None:
        state = self._require(PlayingMatch, command)
        state.match_state.toggle_outcome()

    def _round_record(self, command: RoundRecord) -> None:
        state = self._require(PlayingMatch, command)
        outcome = state.match_state.record_round()
        if outcome is None:
            return

        finished = self._take(PlayingMatch, command)
        match_state = finished.match_state
        self._state = SelectingRoster(
            roster_state=RosterSelectState(roster=list(match_state.roster.battletags)),
            store=finished.store,
        )
        wins, losses = match_state.history.score
        logger.info("Match decided (%s, %d-%d)", "win" if outcome else "loss", wins, losses)

        self.last_match = match_state.history
        self.last_match_id = None
        if self.record_matches:
            self.last_match_id = finished.store.record_match(match_state.history)

    # === Shutdown ===

    def _exit(self, command: Exit) -> None:
        if isinstance(self._state, Exited):
            raise InvalidStateError("Exit is not valid in state exit")
        state = self._take(type(self._state), command)
        if state.store is not None:
            state.store.close()
        self._state = Exited()
        logger.info("Controller exited")
