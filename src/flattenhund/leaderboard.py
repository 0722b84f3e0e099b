"""
leaderboard.py: One persistence front for the game, remote first with the
local database as backup.
"""

import logging
from typing import List, Optional, Sequence

from .constants import DEFAULT_PLAYER_NAME, LEADERBOARD_LIMIT, NAME_MAX_LENGTH
from .data_models import ScoreEntry, SessionHandle
from .errors import PersistenceError
from .server_db import Database

logger = logging.getLogger(__name__)


def normalize_name(name: Optional[str]) -> str:
    """Upper-cased, trimmed to the board's width, PLAYER when blank."""
    cleaned = (name or "").strip().upper()[:NAME_MAX_LENGTH]
    return cleaned or DEFAULT_PLAYER_NAME


def qualifies(score: int, entries: Sequence[ScoreEntry], limit: int = LEADERBOARD_LIMIT) -> bool:
    """True if the score would make it onto a board of `limit` rows."""
    ranked = sorted(entries, key=lambda e: e.score, reverse=True)[:limit]
    if len(ranked) < limit:
        return True
    return score > ranked[-1].score


class Leaderboard:
    """
    Implements the persistence contract on top of an optional remote store
    and a local Database. Remote errors are logged and fall back to local.
    """

    def __init__(self, local: Database, remote=None):
        self.local = local
        self.remote = remote

    def fetch_top_scores(self, limit: int = LEADERBOARD_LIMIT) -> List[ScoreEntry]:
        if self.remote is not None:
            try:
                entries = self.remote.fetch_top_scores(limit)
                if entries:
                    return entries
            except PersistenceError as e:
                logger.warning("Remote leaderboard unavailable, using local scores: %s", e)
        return self.local.fetch_top_scores(limit)

    def save_score(self, name: str, score: int, character: str) -> bool:
        """Saves remotely when possible and always locally. True if any store took it."""
        name = normalize_name(name)
        saved = False
        if self.remote is not None:
            try:
                saved = self.remote.save_score(name, score, character)
            except PersistenceError as e:
                logger.warning("Could not save score remotely: %s", e)

        try:
            saved = self.local.save_score(name, score, character) or saved
        except PersistenceError as e:
            logger.warning("Could not save score locally: %s", e)
        return saved

    def create_session(self, character: str, mode: str) -> Optional[SessionHandle]:
        stores = [self.remote, self.local] if self.remote is not None else [self.local]
        for store in stores:
            try:
                return store.create_session(character, mode)
            except PersistenceError as e:
                logger.warning("Could not create %s session: %s", store.name, e)
        return None

    def update_session(self, handle: SessionHandle, score: int, boost_count: int) -> bool:
        """Routes the update to the store that created the session."""
        store = self.remote if handle.store == getattr(self.remote, "name", None) else self.local
        try:
            return store.update_session(handle, score, boost_count)
        except PersistenceError as e:
            logger.warning("Could not update session %s: %s", handle.id, e)
            return False
