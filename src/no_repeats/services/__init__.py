"""Business logic services."""

from no_repeats.services.match_controller import (
    LifecyclePhase,
    LoadStatus,
    MatchController,
    MatchState,
    RosterSelectState,
)

__all__ = [
    "LifecyclePhase",
    "LoadStatus",
    "MatchController",
    "MatchState",
    "RosterSelectState",
]
