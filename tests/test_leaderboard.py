"""Tests for the combined remote/local leaderboard."""

import pytest

from flattenhund.data_models import ScoreEntry, SessionHandle
from flattenhund.leaderboard import Leaderboard, normalize_name, qualifies
from flattenhund.server_db import Database

from conftest import FakeStore


@pytest.fixture
def local():
    database = Database(":memory:")
    yield database
    database.close()


class TestNames:
    @pytest.mark.parametrize("raw, expected", [
        ("ana", "ANA"),
        ("  bo  ", "BO"),
        ("abcdefghijklmno", "ABCDEFGHIJ"),
        ("", "PLAYER"),
        ("   ", "PLAYER"),
        (None, "PLAYER"),
    ])
    def test_normalize_name(self, raw, expected):
        assert normalize_name(raw) == expected


class TestQualifies:
    def test_short_board_always_qualifies(self):
        assert qualifies(0, [ScoreEntry("A", 50)]) is True

    def test_full_board_needs_to_beat_the_last_row(self):
        board = [ScoreEntry("P", s) for s in range(10, 20)]

        assert qualifies(11, board) is True
        assert qualifies(10, board) is False

    def test_only_top_rows_count(self):
        board = [ScoreEntry("P", s) for s in range(30)]
        assert qualifies(20, board) is False
        assert qualifies(21, board) is True


class TestFallback:
    def test_remote_scores_preferred(self, local):
        remote = FakeStore()
        remote.scores = [ScoreEntry("REM", 40)]
        local.save_score("LOC", 10, "taz")

        assert Leaderboard(local, remote).fetch_top_scores() == [ScoreEntry("REM", 40)]

    def test_failing_remote_falls_back_to_local(self, local):
        local.save_score("LOC", 10, "taz")
        board = Leaderboard(local, FakeStore(fail=True))

        assert board.fetch_top_scores() == [ScoreEntry("LOC", 10)]

    def test_empty_remote_falls_back_to_local(self, local):
        local.save_score("LOC", 10, "taz")
        assert Leaderboard(local, FakeStore()).fetch_top_scores() == [ScoreEntry("LOC", 10)]

    def test_save_writes_both_with_normalized_name(self, local):
        remote = FakeStore()
        board = Leaderboard(local, remote)

        assert board.save_score(" ana ", 12, "chloe") is True
        assert remote.calls == [("save_score", "ANA", 12, "chloe")]
        assert local.fetch_top_scores(10) == [ScoreEntry("ANA", 12)]

    def test_save_survives_remote_failure(self, local):
        board = Leaderboard(local, FakeStore(fail=True))

        assert board.save_score("ana", 12, "taz") is True
        assert local.fetch_top_scores(10) == [ScoreEntry("ANA", 12)]

    def test_offline_board(self, local):
        board = Leaderboard(local)
        board.save_score("x", 1, "taz")
        assert board.fetch_top_scores() == [ScoreEntry("X", 1)]


class TestSessionRouting:
    def test_remote_session_updates_remote(self, local):
        remote = FakeStore()
        remote.name = "remote"
        board = Leaderboard(local, remote)

        handle = board.create_session("taz", "day")
        assert handle.store == "remote"
        assert board.update_session(handle, 5, 1) is True
        assert remote.calls[-1] == ("update_session", handle.id, 5, 1)

    def test_failing_remote_session_opens_locally(self, local):
        remote = FakeStore(fail=True)
        remote.name = "remote"
        board = Leaderboard(local, remote)

        handle = board.create_session("taz", "night")
        assert handle.store == "local"
        assert board.update_session(handle, 8, 0) is True
        assert local.get_session(handle.id)[0] == 8

    def test_update_failure_is_reported_not_raised(self, local):
        remote = FakeStore(fail=True)
        remote.name = "remote"
        board = Leaderboard(local, remote)

        assert board.update_session(SessionHandle("remote", 3), 1, 0) is False
