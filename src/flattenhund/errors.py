"""
errors.py: Exception types shared across the simulation and persistence layers.
"""


class FlattenhundError(Exception):
    """Base class for all errors raised by this package."""


class PersistenceError(FlattenhundError):
    """A leaderboard or session store could not complete a request."""


class SimulationInvariantError(FlattenhundError):
    """The actor's kinematic state is no longer usable (NaN, infinity)."""
