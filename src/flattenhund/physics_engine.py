"""
physics_engine.py: The simulation context and the per-step game logic.

All run state lives in an explicit Simulation object. GameEngine advances it
one step at a time and returns the events the step produced, so sounds and
particles are triggered by the caller rather than from inside the physics.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List

from .collision import resolve
from .constants import BOOST_COOLDOWN, DAY_MODE, DEFAULT_CHARACTER
from .data_models import Actor, GameState, SimEvent, WorldBounds
from .errors import SimulationInvariantError
from .obstacle_manager import ObstacleManager
from .physics_core import PhysicsCore

logger = logging.getLogger(__name__)


@dataclass
class Simulation:
    """Everything that changes during a run. Owned by the loop driver."""
    bounds: WorldBounds
    actor: Actor
    obstacles: ObstacleManager
    state: GameState = GameState.NOT_STARTED
    score: int = 0
    run_id: int = 0                # Bumped on every (re)start
    character: str = DEFAULT_CHARACTER
    mode: str = DAY_MODE
    pending_flap: bool = False     # Flap input waiting for the next step
    boost_count: int = 0
    elapsed: float = 0.0           # Simulated seconds in this run

    @property
    def running(self) -> bool:
        return self.state is GameState.RUNNING

    def boost_fraction(self) -> float:
        """Boost readiness for the meter: 0.0 just used, 1.0 available."""
        cooldown = self.actor.boost_cooldown
        if cooldown <= 0:
            return 1.0
        return max(0.0, 1.0 - cooldown / BOOST_COOLDOWN)


@dataclass
class GameEngine(PhysicsCore):
    """
    Runs the game rules on top of the shared physics core.
    Holds no run state of its own besides the random source for pipe gaps.
    """
    bounds: WorldBounds = field(default_factory=WorldBounds)
    rng: random.Random = field(default_factory=random.Random)

    def create(self, character: str = DEFAULT_CHARACTER, mode: str = DAY_MODE) -> Simulation:
        """A fresh simulation waiting for the start input."""
        return Simulation(
            bounds=self.bounds,
            actor=Actor.at_start(),
            obstacles=ObstacleManager(bounds=self.bounds, rng=self.rng),
            character=character,
            mode=mode,
        )

    # ----------------- State machine -----------------

    def start(self, sim: Simulation) -> bool:
        """Moves NOT_STARTED or OVER to RUNNING with a clean actor, pipes and score."""
        if sim.running:
            return False

        sim.actor = Actor.at_start()
        sim.obstacles.reset()
        sim.score = 0
        sim.boost_count = 0
        sim.pending_flap = False
        sim.elapsed = 0.0
        sim.run_id += 1
        sim.state = GameState.RUNNING
        logger.info("Run %d started (%s, %s)", sim.run_id, sim.character, sim.mode)
        return True

    def restart(self, sim: Simulation) -> bool:
        if sim.state is not GameState.OVER:
            return False
        return self.start(sim)

    def _end(self, sim: Simulation) -> List[SimEvent]:
        sim.state = GameState.OVER
        sim.pending_flap = False
        logger.info("Run %d over with score %d", sim.run_id, sim.score)
        return [SimEvent.GAME_OVER]

    def _recover(self, sim: Simulation) -> List[SimEvent]:
        """Puts the actor back somewhere sane and ends the run."""
        sim.actor = Actor.at_start()
        return [SimEvent.INVARIANT] + self._end(sim)

    # ----------------- Input -----------------

    def press(self, sim: Simulation) -> bool:
        """
        Edge-triggered flap. Key repeat while the input is held is ignored,
        and several presses before the next step count as one flap.
        """
        if not sim.running or sim.actor.holding:
            return False
        sim.pending_flap = True
        sim.actor.holding = True
        sim.actor.hold_timer = 0.0
        return True

    def release(self, sim: Simulation):
        sim.actor.holding = False
        sim.actor.hold_timer = 0.0

    # ----------------- Step -----------------

    def step(self, sim: Simulation, dt: float, now_ms: float) -> List[SimEvent]:
        """
        Advances the run by dt seconds. now_ms is the wall clock used for
        pipe spawning. No-op unless the run is RUNNING.
        """
        if not sim.running:
            return []
        if dt < 0:
            dt = 0.0

        actor = sim.actor
        flap = sim.pending_flap
        sim.pending_flap = False

        try:
            moved = self.step_actor(actor, dt, sim.bounds, flap)
        except SimulationInvariantError as e:
            logger.error("Run %d aborted: %s", sim.run_id, e)
            return self._recover(sim)

        events = []
        if actor.is_flapping:
            actor.is_flapping = False
            events.append(SimEvent.FLAP)
        if moved.boosted:
            sim.boost_count += 1
            events.append(SimEvent.BOOST)
        sim.elapsed += dt

        if moved.grounded:
            events.append(SimEvent.COLLISION)
            return events + self._end(sim)

        sim.obstacles.maybe_spawn(now_ms)
        sim.obstacles.advance(dt)

        contacts = resolve(actor, sim.obstacles.obstacles)
        events.extend(contacts)
        sim.score += contacts.count(SimEvent.SCORE)
        if SimEvent.COLLISION in contacts:
            events.extend(self._end(sim))
        return events
