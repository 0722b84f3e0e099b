"""
game_loop.py: Drives the simulation from a monotonic clock.
"""

import logging
import time
from typing import Callable, List, Optional

from .constants import FPS, MAX_STEP
from .data_models import GameState, SimEvent
from .physics_engine import GameEngine, Simulation

logger = logging.getLogger(__name__)


class LoopDriver:
    """
    One step-then-render cycle per tick. The step length is the clock delta,
    clamped to max_step so a stalled frame (minimised window, debugger)
    cannot carry the actor through the ground or a pipe.
    """

    def __init__(self, engine: GameEngine, sim: Simulation,
                 render: Optional[Callable[[Simulation], None]] = None,
                 dispatcher=None, reporter=None,
                 clock: Callable[[], float] = time.monotonic,
                 max_step: float = MAX_STEP):
        self.engine = engine
        self.sim = sim
        self.render = render
        self.dispatcher = dispatcher
        self.reporter = reporter
        self.clock = clock
        self.max_step = max_step
        self.last_time: Optional[float] = None
        self.active = True             # Cleared once the run is over

    def _arm(self):
        self.last_time = self.clock()
        self.active = True

    def start(self) -> bool:
        """NOT_STARTED -> RUNNING."""
        if self.sim.state is not GameState.NOT_STARTED:
            return False
        return self._begin()

    def restart(self) -> bool:
        """OVER -> RUNNING with a fresh clock reading, so idle time is not simulated."""
        if self.sim.state is not GameState.OVER:
            return False
        return self._begin()

    def _begin(self) -> bool:
        self.engine.start(self.sim)
        if self.reporter is not None:
            self.reporter.begin_run(self.sim)
        if self.dispatcher is not None and self.dispatcher.particles is not None:
            self.dispatcher.particles.clear()
        self._arm()
        return True

    def tick(self) -> List[SimEvent]:
        """Runs one frame. Returns the events the step emitted."""
        if not self.active:
            return []

        now = self.clock()
        if self.last_time is None:
            self.last_time = now
        dt = min(self.max_step, max(0.0, now - self.last_time))
        self.last_time = now

        events = self.engine.step(self.sim, dt, now * 1000.0)
        if self.dispatcher is not None:
            self.dispatcher.dispatch(self.sim, events)
            self.dispatcher.update(dt)
        if self.render is not None:
            self.render(self.sim)

        if self.sim.state is GameState.OVER:
            self.active = False
            if self.reporter is not None:
                outcome = self.reporter.report(self.sim)
                logger.info("Final score %d (best %d)", outcome.score, outcome.best)
        return events

    def run(self, keep_going: Callable[[], bool] = lambda: True,
            sleep: Callable[[float], None] = time.sleep, fps: int = FPS):
        """Headless loop: ticks at roughly `fps` until the run ends or keep_going() says stop."""
        frame = 1.0 / fps
        while self.active and keep_going():
            started = self.clock()
            self.tick()
            remaining = frame - (self.clock() - started)
            if remaining > 0:
                sleep(remaining)
