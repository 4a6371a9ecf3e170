"""SQLite-based storage for finished matches."""

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from no_repeats.errors import (
    BattletagAlreadyExists,
    BattletagDoesNotExist,
    MatchNotFound,
    StoreError,
)
from no_repeats.models.battletag import BattleTag
from no_repeats.models.hero import Hero
from no_repeats.models.match import Match
from no_repeats.models.player import PlayerSlot
from no_repeats.models.round import Round

logger = logging.getLogger(__name__)

SCHEMA_TABLE_BATTLETAGS = "battletags"
SCHEMA_TABLE_MATCHES = "matches"
SCHEMA_TABLE_ROUNDS = "rounds"
SCHEMA_TABLE_PLAYS = "plays"

IN_MEMORY = ":memory:"


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the four tables if they do not exist yet."""
    conn.executescript(f"""
        CREATE TABLE IF NOT EXISTS {SCHEMA_TABLE_BATTLETAGS} (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL UNIQUE
        );

        CREATE TABLE IF NOT EXISTS {SCHEMA_TABLE_MATCHES} (
            id INTEGER PRIMARY KEY,
            timestamp DATETIME DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS {SCHEMA_TABLE_ROUNDS} (
            id INTEGER PRIMARY KEY,
            match_id INTEGER NOT NULL REFERENCES {SCHEMA_TABLE_MATCHES}(id),
            is_win BOOLEAN NOT NULL
        );

        CREATE TABLE IF NOT EXISTS {SCHEMA_TABLE_PLAYS} (
            id INTEGER PRIMARY KEY,
            round_id INTEGER NOT NULL REFERENCES {SCHEMA_TABLE_ROUNDS}(id),
            battletag_id INTEGER NOT NULL REFERENCES {SCHEMA_TABLE_BATTLETAGS}(id),
            hero TEXT NOT NULL
        );
    """)


def open_match_db(path: str | Path) -> "MatchDb":
    """Open (or create) the database file and ensure the schema exists.

    Raises:
        StoreError: If the file cannot be opened or the schema created
    """
    try:
        conn = sqlite3.connect(
            str(path),
            isolation_level=None,  # transactions are managed explicitly
            check_same_thread=False,
        )
    except sqlite3.Error as e:
        raise StoreError(f"Could not open database '{path}': {e}") from e

    try:
        conn.execute("PRAGMA foreign_keys = ON")
        create_schema(conn)
    except sqlite3.Error as e:
        conn.close()
        raise StoreError(f"Could not initialize database '{path}': {e}") from e

    logger.info("MatchDb: Using %s", path)
    return MatchDb(conn)


@dataclass
class MatchSummary:
    """Brief information about a recorded match."""

    id: int
    timestamp: datetime | None
    wins: int
    losses: int
    battletags: list[BattleTag]


class MatchDb:
    """Data access layer for battletags and recorded matches.

    Owns a single connection. The connection runs in autocommit mode and
    record_match is the only multi-statement transaction.
    """

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    @classmethod
    def in_memory(cls) -> "MatchDb":
        return open_match_db(IN_MEMORY)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "MatchDb":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            return self._conn.execute(sql, params)
        except sqlite3.IntegrityError:
            raise
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

    # === Battletags ===

    def get_battletag_id(self, battletag: BattleTag) -> int | None:
        row = self._execute(
            f"SELECT id FROM {SCHEMA_TABLE_BATTLETAGS} WHERE name = ?",
            (battletag.name,),
        ).fetchone()
        return row[0] if row else None

    def record_battletag(self, battletag: BattleTag) -> int:
        """Register a battletag and return its id.

        Raises:
            BattletagAlreadyExists: If the name is already registered
        """
        try:
            cursor = self._execute(
                f"INSERT INTO {SCHEMA_TABLE_BATTLETAGS} (name) VALUES (?)",
                (battletag.name,),
            )
        except sqlite3.IntegrityError as e:
            raise BattletagAlreadyExists(battletag) from e
        return cursor.lastrowid

    def get_or_insert_battletag_id(self, battletag: BattleTag) -> int:
        existing_id = self.get_battletag_id(battletag)
        if existing_id is not None:
            return existing_id
        return self.record_battletag(battletag)

    def search_battletags(self, search: str) -> list[BattleTag]:
        """Registered battletags containing search, case-insensitively (ASCII).

        Results are in registration order.
        """
        escaped = (
            search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        )
        rows = self._execute(
            f"SELECT name FROM {SCHEMA_TABLE_BATTLETAGS} "
            "WHERE name LIKE ? ESCAPE '\\' ORDER BY id",
            (f"%{escaped}%",),
        ).fetchall()
        return [BattleTag(name) for (name,) in rows]

    # === Matches ===

    def record_match(self, match: Match) -> int:
        """Insert the match, its rounds and plays in one transaction.

        Any failure rolls back the whole match, so a partial match is never
        stored.

        Returns:
            The new match id

        Raises:
            BattletagDoesNotExist: If a play references an unregistered battletag
            StoreError: For any other database failure
        """
        try:
            self._conn.execute("BEGIN")
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

        try:
            cursor = self._execute(f"INSERT INTO {SCHEMA_TABLE_MATCHES} DEFAULT VALUES")
            match_id = cursor.lastrowid
            for round_ in match:
                self._record_round(match_id, round_)
        except sqlite3.IntegrityError as e:
            self._rollback()
            raise StoreError(str(e)) from e
        except Exception:
            self._rollback()
            raise

        try:
            self._conn.execute("COMMIT")
        except sqlite3.Error as e:
            self._rollback()
            raise StoreError(str(e)) from e

        logger.info("Recorded match %d (%d rounds)", match_id, len(match))
        return match_id

    def _rollback(self) -> None:
        try:
            self._conn.execute("ROLLBACK")
        except sqlite3.Error:
            logger.exception("Rollback failed")

    def _record_round(self, match_id: int, round_: Round) -> None:
        cursor = self._execute(
            f"INSERT INTO {SCHEMA_TABLE_ROUNDS} (match_id, is_win) VALUES (?, ?)",
            (match_id, int(round_.win)),
        )
        round_id = cursor.lastrowid
        for slot in PlayerSlot.iter():
            battletag, hero = round_.get_player(slot)
            self._record_play(round_id, battletag, hero)

    def _record_play(self, round_id: int, battletag: BattleTag, hero: Hero) -> None:
        # An unknown name yields NULL from the subquery, which violates NOT NULL
        try:
            self._execute(
                f"""
                INSERT INTO {SCHEMA_TABLE_PLAYS} (round_id, battletag_id, hero)
                VALUES (
                    ?,
                    (SELECT id FROM {SCHEMA_TABLE_BATTLETAGS} WHERE name = ?),
                    ?
                )
                """,
                (round_id, battletag.name, hero.value),
            )
        except sqlite3.IntegrityError as e:
            raise BattletagDoesNotExist(battletag) from e

    def load_match(self, match_id: int) -> Match:
        """Read a recorded match back.

        Raises:
            MatchNotFound: If no match has this id
        """
        row = self._execute(
            f"SELECT id FROM {SCHEMA_TABLE_MATCHES} WHERE id = ?", (match_id,)
        ).fetchone()
        if row is None:
            raise MatchNotFound(match_id)

        rows = self._execute(
            f"""
            SELECT r.id, r.is_win, b.name, p.hero
            FROM {SCHEMA_TABLE_ROUNDS} r
            JOIN {SCHEMA_TABLE_PLAYS} p ON p.round_id = r.id
            JOIN {SCHEMA_TABLE_BATTLETAGS} b ON p.battletag_id = b.id
            WHERE r.match_id = ?
            ORDER BY r.id, p.id
            """,
            (match_id,),
        ).fetchall()

        # Group plays by round, preserving insertion order
        grouped: dict[int, tuple[bool, list]] = {}
        for round_id, is_win, name, hero in rows:
            entry = grouped.setdefault(round_id, (bool(is_win), []))
            entry[1].append((BattleTag(name), Hero.parse(hero)))

        rounds = [Round(*picks, win=win) for win, picks in grouped.values()]
        return Match(rounds=rounds)

    def list_matches(self, limit: int = 50) -> list[MatchSummary]:
        """Recorded matches, newest first."""
        rows = self._execute(
            f"""
            SELECT
                m.id,
                m.timestamp,
                COALESCE(SUM(r.is_win), 0) AS wins,
                COUNT(r.id) - COALESCE(SUM(r.is_win), 0) AS losses
            FROM {SCHEMA_TABLE_MATCHES} m
            LEFT JOIN {SCHEMA_TABLE_ROUNDS} r ON r.match_id = m.id
            GROUP BY m.id
            ORDER BY m.id DESC
            LIMIT ?
            """,
            (limit,),
        ).fetchall()

        summaries = []
        for match_id, timestamp, wins, losses in rows:
            summaries.append(
                MatchSummary(
                    id=match_id,
                    timestamp=datetime.fromisoformat(timestamp) if timestamp else None,
                    wins=wins,
                    losses=losses,
                    battletags=self._match_battletags(match_id),
                )
            )
        return summaries

    def _match_battletags(self, match_id: int) -> list[BattleTag]:
        rows = self._execute(
            f"""
            SELECT b.name
            FROM {SCHEMA_TABLE_PLAYS} p
            JOIN {SCHEMA_TABLE_BATTLETAGS} b ON p.battletag_id = b.id
            WHERE p.round_id = (
                SELECT MIN(id) FROM {SCHEMA_TABLE_ROUNDS} WHERE match_id = ?
            )
            ORDER BY p.id
            """,
            (match_id,),
        ).fetchall()
        return [BattleTag(name) for (name,) in rows]
