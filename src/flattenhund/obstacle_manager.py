"""
obstacle_manager.py: Spawns, scrolls and retires the pipe pairs.
"""

import random
from dataclasses import dataclass, field
from typing import List, Optional

from .constants import (
    PIPE_GAP, PIPE_MIN_HEIGHT, PIPE_SPEED, PIPE_SPAWN_INTERVAL_MS, PIPE_WIDTH
)
from .data_models import Obstacle, WorldBounds


@dataclass
class ObstacleManager:
    """
    Sole owner of the active obstacle collection.
    Spawning follows wall-clock time; scrolling follows the step length.
    """
    bounds: WorldBounds = field(default_factory=WorldBounds)
    rng: random.Random = field(default_factory=random.Random)
    gap: float = PIPE_GAP
    width: float = PIPE_WIDTH
    min_height: float = PIPE_MIN_HEIGHT
    speed: float = PIPE_SPEED
    spawn_interval_ms: float = PIPE_SPAWN_INTERVAL_MS
    obstacles: List[Obstacle] = field(default_factory=list)
    last_spawn_ms: Optional[float] = None   # None spawns on the next check

    def reset(self):
        self.obstacles = []
        self.last_spawn_ms = None

    def height_range(self):
        """Inclusive range the top pipe height is drawn from."""
        max_height = (self.bounds.screen_height - self.gap - self.min_height
                      - self.bounds.ground_height)
        return int(self.min_height), int(max(self.min_height, max_height))

    def build(self, top_height: float) -> Obstacle:
        """Creates a pipe pair at the right edge of the screen."""
        bottom_y = top_height + self.gap
        return Obstacle(
            x=float(self.bounds.screen_width),
            width=self.width,
            top_height=top_height,
            bottom_y=bottom_y,
            screen_height=self.bounds.screen_height,
        )

    def spawn(self, now_ms: float) -> Obstacle:
        low, high = self.height_range()
        obstacle = self.build(self.rng.randint(low, high))
        self.obstacles.append(obstacle)
        self.last_spawn_ms = now_ms
        return obstacle

    def maybe_spawn(self, now_ms: float) -> Optional[Obstacle]:
        """Spawns a pipe pair if the spawn interval has elapsed."""
        if self.last_spawn_ms is None or now_ms - self.last_spawn_ms > self.spawn_interval_ms:
            return self.spawn(now_ms)
        return None

    def advance(self, dt: float):
        """Scrolls every pipe left and drops the ones that left the screen."""
        delta_x = self.speed * dt
        for obstacle in self.obstacles:
            obstacle.x -= delta_x

        self.obstacles = [o for o in self.obstacles if o.right >= 0]
