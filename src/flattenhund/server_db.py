"""
server_db.py: SQLite store for leaderboard scores and game sessions.
Works on its own when offline and backs up the remote leaderboard.
"""

import logging
import sqlite3
import threading
from datetime import datetime, timezone
from typing import List

from .constants import DB_FILE, NAME_MAX_LENGTH, NIGHT_MODE
from .data_models import ScoreEntry, SessionHandle
from .errors import PersistenceError

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class Database:
    """Handles all interaction with the SQLite database."""

    name = "local"

    def __init__(self, db_file: str = DB_FILE):
        # check_same_thread=False lets the reporter's worker threads share the connection
        self.conn = sqlite3.connect(db_file, check_same_thread=False)
        self.lock = threading.Lock()
        self.setup()
        logger.debug("Local leaderboard opened at %s", db_file)

    def setup(self):
        """Creates tables if they don't exist."""
        with self.lock:
            self.conn.executescript("""
                CREATE TABLE IF NOT EXISTS leaderboard (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    score INTEGER NOT NULL,
                    character_used TEXT,
                    created_at TEXT
                );
                CREATE TABLE IF NOT EXISTS game_sessions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    character_used TEXT,
                    is_night_mode INTEGER DEFAULT 0,
                    started_at TEXT,
                    ended_at TEXT,
                    score INTEGER DEFAULT 0,
                    boost_used_count INTEGER DEFAULT 0
                );
            """)
            self.conn.commit()

    def _query(self, sql: str, params: tuple = ()) -> list:
        try:
            with self.lock:
                return self.conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"SQLite query failed: {e}") from e

    def _write(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            with self.lock:
                cur = self.conn.execute(sql, params)
                self.conn.commit()
                return cur
        except sqlite3.Error as e:
            raise PersistenceError(f"SQLite write failed: {e}") from e

    def fetch_top_scores(self, limit: int) -> List[ScoreEntry]:
        """Fetches the top scores, highest first; ties keep insertion order."""
        rows = self._query(
            "SELECT name, score FROM leaderboard ORDER BY score DESC, id ASC LIMIT ?",
            (limit,))
        return [ScoreEntry(name=name, score=score) for name, score in rows]

    def save_score(self, name: str, score: int, character: str) -> bool:
        self._write(
            "INSERT INTO leaderboard (name, score, character_used, created_at) VALUES (?, ?, ?, ?)",
            (name[:NAME_MAX_LENGTH], score, character, _now()))
        return True

    def create_session(self, character: str, mode: str) -> SessionHandle:
        cur = self._write(
            "INSERT INTO game_sessions (character_used, is_night_mode, started_at) VALUES (?, ?, ?)",
            (character, int(mode == NIGHT_MODE), _now()))
        return SessionHandle(store=self.name, id=cur.lastrowid)

    def update_session(self, handle: SessionHandle, score: int, boost_count: int) -> bool:
        """Closes a session with its final score. False if the session is unknown."""
        cur = self._write(
            "UPDATE game_sessions SET ended_at = ?, score = ?, boost_used_count = ? WHERE id = ?",
            (_now(), score, boost_count, handle.id))
        return cur.rowcount == 1

    def get_session(self, session_id: int):
        """Returns (score, boost_used_count, ended_at) for a session, or None."""
        rows = self._query(
            "SELECT score, boost_used_count, ended_at FROM game_sessions WHERE id = ?",
            (session_id,))
        return rows[0] if rows else None

    def close(self):
        with self.lock:
            self.conn.close()
