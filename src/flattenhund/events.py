"""
events.py: Fans simulation events out to audio and particles.
"""

import logging
from typing import Iterable, Optional, Protocol

from .data_models import SimEvent
from .particles import ParticleSystem

logger = logging.getLogger(__name__)


class AudioCues(Protocol):
    """Fire-and-forget sound effects. Implementations must not block."""

    def on_flap(self) -> None: ...

    def on_boost(self) -> None: ...

    def on_score(self) -> None: ...

    def on_collision(self) -> None: ...

    def on_game_over(self) -> None: ...


class SilentAudio:
    """Used when no mixer is available."""

    def on_flap(self):
        pass

    def on_boost(self):
        pass

    def on_score(self):
        pass

    def on_collision(self):
        pass

    def on_game_over(self):
        pass


class EventDispatcher:
    def __init__(self, audio: Optional[AudioCues] = None,
                 particles: Optional[ParticleSystem] = None):
        self.audio = audio or SilentAudio()
        self.particles = particles

    def dispatch(self, sim, events: Iterable[SimEvent]):
        for event in events:
            if event is SimEvent.FLAP:
                self.audio.on_flap()
                if self.particles is not None:
                    self.particles.spawn_smoke(sim.actor)
            elif event is SimEvent.BOOST:
                self.audio.on_boost()
                if self.particles is not None:
                    self.particles.spawn_burst(sim.actor)
            elif event is SimEvent.SCORE:
                self.audio.on_score()
            elif event is SimEvent.COLLISION:
                self.audio.on_collision()
            elif event is SimEvent.GAME_OVER:
                self.audio.on_game_over()
            elif event is SimEvent.INVARIANT:
                logger.debug("Run %d ended by an invariant violation", sim.run_id)

    def update(self, dt: float):
        """Advances the cosmetic effects by one frame."""
        if self.particles is not None:
            self.particles.update(dt)
