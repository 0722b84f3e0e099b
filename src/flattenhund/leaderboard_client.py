"""
leaderboard_client.py: Remote leaderboard and session store on a Supabase
(PostgREST) backend.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

import requests

from .constants import NAME_MAX_LENGTH, NIGHT_MODE, REQUEST_TIMEOUT, SUPABASE_KEY, SUPABASE_URL
from .data_models import ScoreEntry, SessionHandle
from .errors import PersistenceError

logger = logging.getLogger(__name__)


class SupabaseLeaderboard:
    """
    Talks to the `leaderboard` and `game_sessions` tables over HTTP.
    Every failure, network or HTTP, surfaces as PersistenceError.
    """

    name = "remote"

    def __init__(self, url: str, key: str, timeout: float = REQUEST_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = url.rstrip("/") + "/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        })

    @classmethod
    def from_env(cls) -> Optional["SupabaseLeaderboard"]:
        """Client configured from the environment, or None when unconfigured."""
        if not SUPABASE_URL or not SUPABASE_KEY:
            logger.info("No remote leaderboard configured; scores stay local")
            return None
        return cls(SUPABASE_URL, SUPABASE_KEY)

    def _request(self, method: str, table: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}/{table}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise PersistenceError(f"{method} {table} failed: {e}") from e

        if response.status_code >= 400:
            raise PersistenceError(
                f"{method} {table} returned {response.status_code}: {response.text[:200]}")
        return response

    def fetch_top_scores(self, limit: int) -> List[ScoreEntry]:
        response = self._request("GET", "leaderboard", params={
            "select": "name,score",
            "order": "score.desc",
            "limit": str(limit),
        })
        try:
            rows = response.json()
            return [ScoreEntry(name=str(row["name"]), score=int(row["score"])) for row in rows]
        except (ValueError, KeyError, TypeError) as e:
            raise PersistenceError(f"Malformed leaderboard response: {e}") from e

    def save_score(self, name: str, score: int, character: str) -> bool:
        self._request("POST", "leaderboard", json=[{
            "name": name[:NAME_MAX_LENGTH],
            "score": score,
            "character_used": character,
        }])
        return True

    def create_session(self, character: str, mode: str) -> SessionHandle:
        response = self._request(
            "POST", "game_sessions",
            headers={"Prefer": "return=representation"},
            json=[{"character_used": character, "is_night_mode": mode == NIGHT_MODE}],
        )
        try:
            return SessionHandle(store=self.name, id=response.json()[0]["id"])
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise PersistenceError(f"Malformed session response: {e}") from e

    def update_session(self, handle: SessionHandle, score: int, boost_count: int) -> bool:
        self._request(
            "PATCH", "game_sessions",
            params={"id": f"eq.{handle.id}"},
            json={
                "ended_at": datetime.now(timezone.utc).isoformat(),
                "score": score,
                "boost_used_count": boost_count or 0,
            },
        )
        return True
