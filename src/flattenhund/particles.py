"""
particles.py: Cosmetic smoke trail and boost burst. Never read by the physics.
"""

import math
import random
from typing import List, Optional

from .constants import (
    BOOST_BURST_PARTICLES, REFERENCE_RATE, SMOKE_PARTICLES_MAX, SMOKE_PARTICLES_MIN
)
from .data_models import Actor, Particle

SMOKE_COLORS = ((255, 255, 255), (238, 238, 238))
BOOST_COLORS = ((255, 0, 0), (255, 119, 0), (255, 255, 0))


class ParticleSystem:
    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.particles: List[Particle] = []

    def clear(self):
        self.particles = []

    def spawn_smoke(self, actor: Actor):
        """A few pixel puffs drifting left from behind the actor."""
        rng = self.rng
        for _ in range(rng.randint(SMOKE_PARTICLES_MIN, SMOKE_PARTICLES_MAX)):
            self.particles.append(Particle(
                x=actor.x,
                y=actor.y + actor.height / 2 + rng.uniform(-5, 5),
                size=rng.uniform(4, 10),
                speed_x=-rng.uniform(1, 3) * REFERENCE_RATE,
                speed_y=rng.uniform(-1, 1) * REFERENCE_RATE,
                color=rng.choice(SMOKE_COLORS),
            ))

    def spawn_burst(self, actor: Actor):
        """A ring of hot particles when the boost kicks in."""
        rng = self.rng
        cx = actor.x + actor.width / 2
        cy = actor.y + actor.height / 2
        for i in range(BOOST_BURST_PARTICLES):
            angle = i / BOOST_BURST_PARTICLES * math.tau
            speed = rng.uniform(2, 4) * REFERENCE_RATE
            self.particles.append(Particle(
                x=cx,
                y=cy,
                size=rng.uniform(6, 10),
                speed_x=math.cos(angle) * speed,
                speed_y=math.sin(angle) * speed,
                color=rng.choice(BOOST_COLORS),
            ))

    def update(self, dt: float):
        self.particles = [p for p in self.particles if p.update(dt)]
