"""Tests for the clock-driven loop."""

import pytest

from flattenhund.constants import MAX_STEP
from flattenhund.data_models import GameState, SimEvent
from flattenhund.events import EventDispatcher
from flattenhund.game_loop import LoopDriver
from flattenhund.particles import ParticleSystem
from flattenhund.physics_engine import GameEngine
from flattenhund.reporter import OutcomeReporter


class RecordingEngine(GameEngine):
    """Remembers the step lengths it was driven with."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.steps = []

    def step(self, sim, dt, now_ms):
        self.steps.append(dt)
        return super().step(sim, dt, now_ms)


@pytest.fixture
def recording_engine(bounds, seeded_rng):
    return RecordingEngine(bounds=bounds, rng=seeded_rng)


@pytest.fixture
def driver(recording_engine, clock, best_cache, audio):
    sim = recording_engine.create()
    return LoopDriver(
        recording_engine, sim,
        dispatcher=EventDispatcher(audio, ParticleSystem()),
        reporter=OutcomeReporter(best_cache, background=False),
        clock=clock,
    )


def crash(driver):
    driver.sim.actor.y = 590.0


class TestStepLength:
    def test_step_is_clock_delta(self, driver, clock):
        driver.start()
        clock.advance(1 / 60)
        driver.tick()

        assert driver.engine.steps == [pytest.approx(1 / 60)]

    def test_long_stall_is_clamped(self, driver, clock):
        driver.start()
        clock.advance(5.0)
        driver.tick()

        assert driver.engine.steps == [MAX_STEP]

    def test_clock_going_backwards_is_a_zero_step(self, driver, clock):
        driver.start()
        clock.advance(-1.0)
        driver.tick()

        assert driver.engine.steps == [0.0]

    def test_first_tick_without_start_is_zero(self, driver):
        driver.tick()
        assert driver.engine.steps == [0.0]


class TestLifecycle:
    def test_start_only_once(self, driver):
        assert driver.start() is True
        assert driver.start() is False
        assert driver.sim.state is GameState.RUNNING

    def test_game_over_stops_the_loop(self, driver, clock, best_cache):
        driver.start()
        crash(driver)
        clock.advance(1 / 60)

        events = driver.tick()

        assert SimEvent.GAME_OVER in events
        assert driver.active is False
        assert driver.reporter.last_outcome.score == 0
        assert driver.tick() == []
        assert len(driver.engine.steps) == 1

    def test_restart_ignores_idle_time(self, driver, clock):
        driver.start()
        crash(driver)
        clock.advance(1 / 60)
        driver.tick()

        clock.advance(30.0)
        assert driver.restart() is True
        clock.advance(1 / 60)
        driver.tick()

        assert driver.active is True
        assert driver.sim.run_id == 2
        assert driver.engine.steps[-1] == pytest.approx(1 / 60)

    def test_restart_refused_while_running(self, driver):
        driver.start()
        assert driver.restart() is False

    def test_restart_clears_particles(self, driver, clock):
        driver.start()
        driver.engine.press(driver.sim)
        clock.advance(1 / 60)
        driver.tick()
        assert driver.dispatcher.particles.particles

        crash(driver)
        clock.advance(1 / 60)
        driver.tick()
        driver.restart()

        assert driver.dispatcher.particles.particles == []


class TestFrame:
    def test_render_sees_the_stepped_state(self, driver, clock):
        seen = []
        driver.render = lambda sim: seen.append(sim.actor.y)
        driver.start()
        start_y = driver.sim.actor.y
        clock.advance(1 / 60)
        driver.tick()

        assert seen == [driver.sim.actor.y]
        assert seen[0] != start_y

    def test_events_reach_audio(self, driver, clock, audio):
        driver.start()
        driver.engine.press(driver.sim)
        clock.advance(1 / 60)
        driver.tick()

        assert audio.cues == ["flap"]

    def test_run_until_keep_going_stops(self, driver, clock):
        driver.start()
        ticks = []
        sleeps = []

        def keep_going():
            ticks.append(None)
            clock.advance(1 / 60)
            return len(ticks) <= 3

        driver.run(keep_going=keep_going, sleep=sleeps.append)

        assert len(driver.engine.steps) == 3
        assert len(sleeps) == 3
