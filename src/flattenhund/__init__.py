"""
Flattenhund: a flappy arcade game with a step-size independent physics core.
"""

from .data_models import Actor, GameState, Obstacle, SimEvent, WorldBounds
from .physics_engine import GameEngine, Simulation

__version__ = "1.0.0"

__all__ = [
    "Actor",
    "GameEngine",
    "GameState",
    "Obstacle",
    "SimEvent",
    "Simulation",
    "WorldBounds",
]
