"""
data_models.py: Data structures for the game state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .constants import (
    SCREEN_WIDTH, SCREEN_HEIGHT, GROUND_HEIGHT, MIN_X, MAX_X_FRACTION,
    BOOST_MAX_X_FRACTION, ACTOR_WIDTH, ACTOR_HEIGHT, START_X, START_Y,
    START_VELOCITY_X, START_VELOCITY_Y, START_FLOAT_TIME, DEFAULT_CHARACTER,
    DAY_MODE, PARTICLE_FADE_RATE
)


class GameState(Enum):
    """Run state machine: NOT_STARTED -> RUNNING -> OVER -> RUNNING ..."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    OVER = "over"


class SimEvent(Enum):
    """Side effects emitted by a simulation step, consumed by the dispatch layer."""
    FLAP = "flap"
    BOOST = "boost"
    SCORE = "score"
    COLLISION = "collision"
    GAME_OVER = "game_over"
    INVARIANT = "invariant"


@dataclass(frozen=True)
class WorldBounds:
    """Screen geometry handed to the simulation instead of reading the window."""
    screen_width: float = SCREEN_WIDTH
    screen_height: float = SCREEN_HEIGHT
    ground_height: float = GROUND_HEIGHT
    min_x: float = MIN_X

    @property
    def ground_y(self) -> float:
        return self.screen_height - self.ground_height

    def max_x(self, boosting: bool = False) -> float:
        """Rightmost actor position; the boost lets the actor push further."""
        fraction = BOOST_MAX_X_FRACTION if boosting else MAX_X_FRACTION
        return self.screen_width * fraction


@dataclass
class Box:
    """Axis-aligned rectangle with its origin at the top-left corner."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass
class Actor:
    """The player character. Mutated by the physics core every step."""
    x: float = START_X
    y: float = START_Y
    velocity_x: float = 0.0
    velocity_y: float = 0.0
    width: float = ACTOR_WIDTH
    height: float = ACTOR_HEIGHT
    float_timer: float = 0.0       # Seconds of reduced gravity left
    is_flapping: bool = False      # Set by a flap, consumed once by the step
    rotation: float = 0.0          # Cosmetic tilt, never read by physics

    # Boost state
    holding: bool = False          # Input currently held down
    hold_timer: float = 0.0
    boosting: bool = False
    boost_timer: float = 0.0
    boost_cooldown: float = 0.0

    @classmethod
    def at_start(cls) -> "Actor":
        """The actor as it appears at the beginning of every run."""
        return cls(
            x=START_X,
            y=START_Y,
            velocity_x=START_VELOCITY_X,
            velocity_y=START_VELOCITY_Y,
            float_timer=START_FLOAT_TIME,
        )

    def box(self) -> Box:
        return Box(self.x, self.y, self.width, self.height)


@dataclass
class Obstacle:
    """A top/bottom pipe pair with a passable gap between them."""
    x: float
    width: float
    top_height: float
    bottom_y: float
    screen_height: float
    passed: bool = False

    @property
    def top(self) -> Box:
        return Box(self.x, 0.0, self.width, self.top_height)

    @property
    def bottom(self) -> Box:
        return Box(self.x, self.bottom_y, self.width, self.screen_height - self.bottom_y)

    @property
    def right(self) -> float:
        return self.x + self.width


@dataclass
class Particle:
    """A cosmetic smoke or boost particle."""
    x: float
    y: float
    size: float
    speed_x: float
    speed_y: float
    color: tuple
    life: float = 1.0

    def update(self, dt: float) -> bool:
        """Moves and fades the particle. Returns False once it is gone."""
        self.x += self.speed_x * dt
        self.y += self.speed_y * dt
        self.life -= PARTICLE_FADE_RATE * dt
        return self.life > 0


@dataclass(frozen=True)
class ScoreEntry:
    """One leaderboard row."""
    name: str
    score: int


@dataclass(frozen=True)
class SessionHandle:
    """Identifies a game session in the store that created it."""
    store: str
    id: Any


@dataclass(frozen=True)
class RunOutcome:
    """The frozen result of a finished run."""
    run_id: int
    score: int
    best: int
    new_best: bool
    character: str = DEFAULT_CHARACTER
    mode: str = DAY_MODE
    boost_count: int = 0
    duration: float = 0.0          # Simulated seconds survived
