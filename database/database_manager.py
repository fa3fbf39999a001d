"""
Core database management for the Tourna system.

DatabaseManager is the entity store: it owns the single SQLite connection,
the schema, and the unvalidated create/read/update primitives for
tournaments, players, matches and rounds. Every statement runs under one
lock, so a manager instance can be shared between threads.
"""

import sqlite3
import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, List, Optional, Sequence

from config.config_manager import ConfigManager
from models.tournament import Tournament, TournamentStatus
from models.player import Player
from models.match import Match, MatchStatus, Round
from .errors import ConflictError, ConstraintViolationError, StorageUnavailableError

logger = logging.getLogger(__name__)


TABLES_SQL = [
    """
    CREATE TABLE IF NOT EXISTS tournaments (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        tournament_id TEXT UNIQUE NOT NULL,
        tournament_name TEXT NOT NULL,
        status TEXT DEFAULT 'open',
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS players (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        tournament_id TEXT NOT NULL,
        discord_user_id TEXT NOT NULL,
        discord_username TEXT NOT NULL,
        invite_link TEXT NOT NULL,
        seed_number INTEGER,
        is_eliminated BOOLEAN DEFAULT 0,
        registered_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (tournament_id) REFERENCES tournaments(tournament_id),
        UNIQUE(tournament_id, discord_user_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS matches (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        tournament_id TEXT NOT NULL,
        match_number INTEGER NOT NULL,
        player1_id TEXT NOT NULL,
        player2_id TEXT NOT NULL,
        winner_id TEXT,
        match_status TEXT DEFAULT 'pending',
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (tournament_id) REFERENCES tournaments(tournament_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS rounds (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        match_id INTEGER NOT NULL,
        round_number INTEGER NOT NULL,
        winner_id TEXT NOT NULL,
        recorded_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (match_id) REFERENCES matches(id)
    )
    """,
]

INDEXES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_players_tournament ON players (tournament_id)",
    "CREATE INDEX IF NOT EXISTS idx_matches_tournament ON matches (tournament_id)",
    "CREATE INDEX IF NOT EXISTS idx_rounds_match ON rounds (match_id)",
]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _text(value) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class DatabaseManager:
    """Manages core database operations and initialization."""

    def __init__(self, db_path: Optional[str] = None, config_file: str = "config.yaml"):
        self.config = ConfigManager.load_config(config_file)
        db_config = self.config.get('database', {})
        self.db_path = db_path or db_config.get('path', 'tourna.db')
        self.lock_timeout = db_config.get('lock_timeout')
        busy_timeout = float(db_config.get('busy_timeout', 5.0))

        self._lock = threading.RLock()
        self._transaction_depth = 0
        try:
            self._conn = sqlite3.connect(self.db_path, timeout=busy_timeout, check_same_thread=False)
        except sqlite3.Error as e:
            logger.error(f"Database connection failed: {e}")
            raise StorageUnavailableError(f"Could not open database '{self.db_path}': {e}") from e

        self._conn.row_factory = sqlite3.Row
        try:
            try:
                self._conn.execute("PRAGMA foreign_keys = ON")
            except sqlite3.Error as e:
                raise self._translate_error(e, "enabling foreign keys") from e
            self.init_database()
        except Exception:
            self._conn.close()
            raise

    def init_database(self) -> None:
        """Initialize the database with required tables."""
        with self._locked():
            try:
                with self._conn:
                    for statement in TABLES_SQL + INDEXES_SQL:
                        self._conn.execute(statement)
            except sqlite3.Error as e:
                raise self._translate_error(e, "initializing database") from e
        logger.info(f"Database initialized successfully at {self.db_path}")

    # ------------------------------------------------------------------
    # Connection handling
    # ------------------------------------------------------------------

    @contextmanager
    def _locked(self):
        timeout = -1 if self.lock_timeout is None else float(self.lock_timeout)
        if not self._lock.acquire(timeout=timeout):
            logger.error(f"Timed out after {timeout}s waiting for the database lock")
            raise StorageUnavailableError("Timed out waiting for the database lock")
        try:
            yield self._conn
        finally:
            self._lock.release()

    @contextmanager
    def transaction(self):
        """
        Run several statements as one atomic unit.

        The lock is held for the whole block. Statements issued inside the
        block are committed together on exit, or rolled back if it raises.
        """
        with self._locked():
            self._transaction_depth += 1
            try:
                yield self
            except BaseException:
                self._transaction_depth -= 1
                if self._transaction_depth == 0:
                    self._rollback_quietly()
                raise
            self._transaction_depth -= 1
            if self._transaction_depth == 0:
                try:
                    self._conn.commit()
                except sqlite3.Error as e:
                    self._rollback_quietly()
                    raise self._translate_error(e, "committing transaction") from e

    def _rollback_quietly(self) -> None:
        try:
            self._conn.rollback()
        except sqlite3.Error:
            logger.debug("Rollback failed after statement error", exc_info=True)

    def _translate_error(self, error: sqlite3.Error, action: str) -> Exception:
        message = f"Error {action}: {error}"
        if isinstance(error, sqlite3.IntegrityError):
            logger.warning(message)
            if "UNIQUE" in str(error).upper():
                return ConflictError(message)
            return ConstraintViolationError(message)
        logger.error(message)
        return StorageUnavailableError(message)

    def _execute(self, sql: str, params: Sequence[Any] = (), action: str = "executing statement") -> sqlite3.Cursor:
        """Execute one parameterized write statement and commit it unless inside a transaction."""
        with self._locked():
            try:
                cursor = self._conn.execute(sql, tuple(params))
                if self._transaction_depth == 0:
                    self._conn.commit()
                return cursor
            except sqlite3.Error as e:
                if self._transaction_depth == 0:
                    self._rollback_quietly()
                raise self._translate_error(e, action) from e

    def _fetch_one(self, sql: str, params: Sequence[Any] = (), action: str = "fetching row") -> Optional[sqlite3.Row]:
        with self._locked():
            try:
                return self._conn.execute(sql, tuple(params)).fetchone()
            except sqlite3.Error as e:
                raise self._translate_error(e, action) from e

    def _fetch_all(self, sql: str, params: Sequence[Any] = (), action: str = "fetching rows") -> List[sqlite3.Row]:
        with self._locked():
            try:
                return self._conn.execute(sql, tuple(params)).fetchall()
            except sqlite3.Error as e:
                raise self._translate_error(e, action) from e

    def close(self) -> None:
        """Close the database connection."""
        with self._locked():
            self._conn.close()
        logger.info("Database connection closed.")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------------
    # Tournaments
    # ------------------------------------------------------------------

    def create_tournament(self, tournament_id: str, tournament_name: str) -> Tournament:
        """Insert a tournament with status 'open'. Raises ConflictError if the id exists."""
        created_at = _now()
        self._execute(
            "INSERT INTO tournaments (tournament_id, tournament_name, status, created_at) VALUES (?, ?, ?, ?)",
            (tournament_id, tournament_name, TournamentStatus.OPEN.value, created_at),
            action="creating tournament",
        )
        return self.get_tournament(tournament_id)

    def get_tournament(self, tournament_id: str) -> Optional[Tournament]:
        row = self._fetch_one(
            "SELECT * FROM tournaments WHERE tournament_id = ?", (tournament_id,),
            action="fetching tournament",
        )
        return Tournament.from_row(row) if row else None

    def list_tournaments(self) -> List[Tournament]:
        """Get all tournaments, most recently created first."""
        rows = self._fetch_all(
            "SELECT * FROM tournaments ORDER BY created_at DESC, id DESC",
            action="fetching tournaments",
        )
        return [Tournament.from_row(row) for row in rows]

    def update_tournament_status(self, tournament_id: str, status) -> bool:
        """Set a tournament's status without validation. Returns True if a row matched."""
        cursor = self._execute(
            "UPDATE tournaments SET status = ? WHERE tournament_id = ?",
            (_text(status), tournament_id),
            action="updating tournament status",
        )
        return cursor.rowcount > 0

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    def register_player(self, tournament_id: str, discord_user_id: str,
                        discord_username: str, invite_link: str) -> Player:
        """Insert a player. Raises ConflictError if already registered in the tournament."""
        self._execute(
            "INSERT INTO players (tournament_id, discord_user_id, discord_username, invite_link, registered_at) "
            "VALUES (?, ?, ?, ?, ?)",
            (tournament_id, discord_user_id, discord_username, invite_link, _now()),
            action="registering player",
        )
        return self.get_player(tournament_id, discord_user_id)

    def is_player_registered(self, tournament_id: str, discord_user_id: str) -> bool:
        row = self._fetch_one(
            "SELECT COUNT(*) FROM players WHERE tournament_id = ? AND discord_user_id = ?",
            (tournament_id, discord_user_id),
            action="checking player registration",
        )
        return row is not None and row[0] > 0

    def list_players(self, tournament_id: str) -> List[Player]:
        """
        Get the players of a tournament ordered by seed.

        Unseeded players have a NULL seed, which SQLite sorts before any
        number, so they come first. Equal seeds keep registration order.
        """
        rows = self._fetch_all(
            "SELECT * FROM players WHERE tournament_id = ? ORDER BY seed_number ASC, id ASC",
            (tournament_id,),
            action="fetching players",
        )
        return [Player.from_row(row) for row in rows]

    def count_players(self, tournament_id: str) -> int:
        row = self._fetch_one(
            "SELECT COUNT(*) FROM players WHERE tournament_id = ?", (tournament_id,),
            action="counting players",
        )
        return row[0]

    def set_seed(self, tournament_id: str, discord_user_id: str, seed_number: int) -> bool:
        cursor = self._execute(
            "UPDATE players SET seed_number = ? WHERE tournament_id = ? AND discord_user_id = ?",
            (seed_number, tournament_id, discord_user_id),
            action="setting seed number",
        )
        return cursor.rowcount > 0

    def eliminate_player(self, tournament_id: str, discord_user_id: str) -> bool:
        """Mark a player eliminated. Re-eliminating still matches the row and returns True."""
        cursor = self._execute(
            "UPDATE players SET is_eliminated = 1 WHERE tournament_id = ? AND discord_user_id = ?",
            (tournament_id, discord_user_id),
            action="eliminating player",
        )
        return cursor.rowcount > 0

    def get_player(self, tournament_id: str, discord_user_id: str) -> Optional[Player]:
        row = self._fetch_one(
            "SELECT * FROM players WHERE tournament_id = ? AND discord_user_id = ?",
            (tournament_id, discord_user_id),
            action="fetching player",
        )
        return Player.from_row(row) if row else None

    # ------------------------------------------------------------------
    # Matches and rounds
    # ------------------------------------------------------------------

    def create_match(self, tournament_id: str, match_number: int,
                     player1_id: str, player2_id: str) -> int:
        """Insert a pending match and return its generated id."""
        cursor = self._execute(
            "INSERT INTO matches (tournament_id, match_number, player1_id, player2_id, match_status, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (tournament_id, match_number, player1_id, player2_id, MatchStatus.PENDING.value, _now()),
            action="creating match",
        )
        return int(cursor.lastrowid)

    def get_match(self, match_id: int) -> Optional[Match]:
        row = self._fetch_one(
            "SELECT * FROM matches WHERE id = ?", (match_id,),
            action="fetching match",
        )
        return Match.from_row(row) if row else None

    def list_matches(self, tournament_id: str) -> List[Match]:
        rows = self._fetch_all(
            "SELECT * FROM matches WHERE tournament_id = ? ORDER BY match_number ASC, id ASC",
            (tournament_id,),
            action="fetching matches",
        )
        return [Match.from_row(row) for row in rows]

    def set_match_winner(self, match_id: int, winner_id: str) -> bool:
        """Set the winner and mark the match completed. Does not check the winner or prior state."""
        cursor = self._execute(
            "UPDATE matches SET winner_id = ?, match_status = ? WHERE id = ?",
            (winner_id, MatchStatus.COMPLETED.value, match_id),
            action="setting match winner",
        )
        return cursor.rowcount > 0

    def record_round(self, match_id: int, round_number: int, winner_id: str) -> Round:
        """Append a round. Duplicate round numbers are accepted at this layer."""
        recorded_at = _now()
        cursor = self._execute(
            "INSERT INTO rounds (match_id, round_number, winner_id, recorded_at) VALUES (?, ?, ?, ?)",
            (match_id, round_number, winner_id, recorded_at),
            action="recording round",
        )
        return Round(
            id=int(cursor.lastrowid),
            match_id=match_id,
            round_number=round_number,
            winner_id=winner_id,
            recorded_at=datetime.fromisoformat(recorded_at),
        )

    def list_rounds(self, match_id: int) -> List[Round]:
        rows = self._fetch_all(
            "SELECT * FROM rounds WHERE match_id = ? ORDER BY round_number ASC, id ASC",
            (match_id,),
            action="fetching rounds",
        )
        return [Round.from_row(row) for row in rows]

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_database_stats(self) -> Dict[str, int]:
        """Get basic database statistics."""
        stats = {}
        for table in ('tournaments', 'players', 'matches', 'rounds'):
            row = self._fetch_one(f"SELECT COUNT(*) FROM {table}", action=f"counting {table}")
            stats[table] = row[0]
        return stats
