"""Error hierarchy for match tracking.

Domain errors (subclasses of NoRepeatsError) are recoverable and meant to be
shown to the user. InvalidStateError is not part of that hierarchy: it marks a
command issued against a lifecycle state that cannot accept it, which is a
caller defect.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from no_repeats.models.battletag import BattleTag
    from no_repeats.models.hero import Hero
    from no_repeats.models.player import PlayerSlot


class NoRepeatsError(Exception):
    """Base exception for all recoverable domain errors."""

    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Serialize for API responses."""
        return {"code": self.code, "message": self.message}


# === Round / match validation ===


class MatchHistoryError(NoRepeatsError):
    """A round could not be finalized or added to the match."""

    code = "match_history"


class MissingOutcome(MatchHistoryError):
    code = "missing_outcome"

    def __init__(self):
        super().__init__("Unknown outcome for round")


class MissingPlayerHero(MatchHistoryError):
    code = "missing_player_hero"

    def __init__(self, battletag: BattleTag, slot: PlayerSlot):
        super().__init__(f"Incomplete round information for {slot} ({battletag})")
        self.battletag = battletag
        self.slot = slot


class DuplicateHero(MatchHistoryError):
    code = "duplicate_hero"

    def __init__(self, hero: Hero):
        super().__init__(f"Duplicate hero in match: {hero.display_name}")
        self.hero = hero


class TooManyRounds(MatchHistoryError):
    code = "too_many_rounds"

    def __init__(self):
        super().__init__("Matches can not last longer than 5 rounds")


# === Roster entry ===


class RosterError(NoRepeatsError):
    code = "roster"


class DuplicateRosterBattletag(RosterError):
    code = "duplicate_roster_battletag"

    def __init__(self, battletag: BattleTag):
        super().__init__(f"Battletag '{battletag}' is already in the roster")
        self.battletag = battletag


# === Persistence ===


class MatchDbError(NoRepeatsError):
    code = "match_db"


class BattletagAlreadyExists(MatchDbError):
    code = "battletag_already_exists"

    def __init__(self, battletag: BattleTag):
        super().__init__(f"Battletag '{battletag}' already exists")
        self.battletag = battletag


class BattletagDoesNotExist(MatchDbError):
    code = "battletag_does_not_exist"

    def __init__(self, battletag: BattleTag):
        super().__init__(f"Battletag '{battletag}' does not exist")
        self.battletag = battletag


class MatchNotFound(MatchDbError):
    code = "match_not_found"

    def __init__(self, match_id: int):
        super().__init__(f"Match {match_id} not found")
        self.match_id = match_id


class StoreError(MatchDbError):
    """Any underlying SQLite failure that has no domain meaning."""

    code = "store_error"

    def __init__(self, message: str = "Database error"):
        super().__init__(message)


# === Fatal ===


class InvalidStateError(RuntimeError):
    """A command was applied to a lifecycle state that cannot accept it."""

    def __init__(self, message: str):
        super().__init__(message)
        # Set by MatchController.apply_all when a batch stops part way
        self.applied = 0
        self.errors: list[NoRepeatsError] = []
