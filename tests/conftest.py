"""Pytest configuration and fixtures for the flattenhund tests."""

import random

import pytest

from flattenhund.data_models import SessionHandle, WorldBounds
from flattenhund.errors import PersistenceError
from flattenhund.physics_engine import GameEngine


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class RecordingAudio:
    def __init__(self):
        self.cues = []

    def on_flap(self):
        self.cues.append("flap")

    def on_boost(self):
        self.cues.append("boost")

    def on_score(self):
        self.cues.append("score")

    def on_collision(self):
        self.cues.append("collision")

    def on_game_over(self):
        self.cues.append("game_over")


class MemoryBestCache:
    def __init__(self, best=0):
        self.best = best
        self.writes = []

    def get_best(self):
        return self.best

    def set_best(self, score):
        self.writes.append(score)
        self.best = score


class FakeStore:
    """In-memory persistence contract that records every call."""

    name = "fake"

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []
        self.scores = []
        self.next_id = 1

    def _maybe_fail(self, op):
        if self.fail:
            raise PersistenceError(f"{op} unavailable")

    def fetch_top_scores(self, limit):
        self.calls.append(("fetch_top_scores", limit))
        self._maybe_fail("fetch")
        return sorted(self.scores, key=lambda e: e.score, reverse=True)[:limit]

    def save_score(self, name, score, character):
        self.calls.append(("save_score", name, score, character))
        self._maybe_fail("save")
        return True

    def create_session(self, character, mode):
        self.calls.append(("create_session", character, mode))
        self._maybe_fail("create")
        handle = SessionHandle(store=self.name, id=self.next_id)
        self.next_id += 1
        return handle

    def update_session(self, handle, score, boost_count):
        self.calls.append(("update_session", handle.id, score, boost_count))
        self._maybe_fail("update")
        return True


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def bounds():
    return WorldBounds()


@pytest.fixture
def engine(bounds, seeded_rng):
    return GameEngine(bounds=bounds, rng=seeded_rng)


@pytest.fixture
def sim(engine):
    """A simulation already in the RUNNING state."""
    simulation = engine.create()
    engine.start(simulation)
    return simulation


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def audio():
    return RecordingAudio()


@pytest.fixture
def best_cache():
    return MemoryBestCache()


@pytest.fixture
def store():
    return FakeStore()
