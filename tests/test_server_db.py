"""Tests for the SQLite leaderboard and session store."""

import pytest

from flattenhund.data_models import ScoreEntry, SessionHandle
from flattenhund.errors import PersistenceError
from flattenhund.server_db import Database


@pytest.fixture
def db():
    database = Database(":memory:")
    yield database
    database.close()


class TestScores:
    def test_empty_board(self, db):
        assert db.fetch_top_scores(10) == []

    def test_highest_first_ties_in_insertion_order(self, db):
        db.save_score("AMY", 5, "taz")
        db.save_score("BEN", 9, "chloe")
        db.save_score("CAL", 5, "taz")

        assert db.fetch_top_scores(10) == [
            ScoreEntry("BEN", 9), ScoreEntry("AMY", 5), ScoreEntry("CAL", 5),
        ]

    def test_limit(self, db):
        for score in range(15):
            db.save_score("P", score, "taz")

        top = db.fetch_top_scores(10)
        assert len(top) == 10
        assert top[0].score == 14

    def test_long_names_are_truncated(self, db):
        db.save_score("ABCDEFGHIJKLMNOP", 1, "taz")
        assert db.fetch_top_scores(1)[0].name == "ABCDEFGHIJ"

    def test_file_backed_database_persists(self, tmp_path):
        path = str(tmp_path / "scores.db")
        first = Database(path)
        first.save_score("AMY", 3, "taz")
        first.close()

        second = Database(path)
        assert second.fetch_top_scores(10) == [ScoreEntry("AMY", 3)]
        second.close()


class TestSessions:
    def test_create_and_close(self, db):
        handle = db.create_session("chloe", "night")

        assert handle.store == "local"
        assert db.get_session(handle.id) == (0, 0, None)

        assert db.update_session(handle, 17, 2) is True
        score, boosts, ended_at = db.get_session(handle.id)
        assert (score, boosts) == (17, 2)
        assert ended_at is not None

    def test_unknown_session(self, db):
        assert db.update_session(SessionHandle("local", 999), 1, 0) is False
        assert db.get_session(999) is None

    def test_closed_connection_raises_persistence_error(self):
        database = Database(":memory:")
        database.close()
        with pytest.raises(PersistenceError):
            database.fetch_top_scores(10)
