"""Persistence for recorded matches."""

from no_repeats.repositories.match_repository import (
    MatchDb,
    MatchSummary,
    create_schema,
    open_match_db,
)

__all__ = [
    "MatchDb",
    "MatchSummary",
    "create_schema",
    "open_match_db",
]
