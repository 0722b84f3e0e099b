"""
physics_core.py: The deterministic kinematic functions for the actor.

All rates are per second and every decay is an exponential of the step
length, so one step of 2t and two steps of t leave the velocities equal.
"""

import math
from typing import NamedTuple

from .constants import (
    BASE_GRAVITY, FLOAT_MULTIPLIER, FLOAT_DURATION, FLAP_VELOCITY,
    FORWARD_IMPULSE, MAX_FORWARD_SPEED, DRAG_PER_REFERENCE_FRAME, REFERENCE_RATE,
    ROTATION_VELOCITY_SCALE, ROTATION_LIMIT, ROTATION_SMOOTHING,
    BOOST_HOLD_THRESHOLD, BOOST_DURATION, BOOST_COOLDOWN, BOOST_FLAP_VELOCITY,
    BOOST_FORWARD_IMPULSE, BOOST_GRAVITY_MULTIPLIER, BOOST_THRUST, BOOST_SPEED_FACTOR
)
from .data_models import Actor, WorldBounds
from .errors import SimulationInvariantError


class ActorStep(NamedTuple):
    """What happened to the actor during one step."""
    flapped: bool
    boosted: bool
    grounded: bool


class PhysicsCore:
    """
    Shared deterministic physics used by the game engine.
    """

    GRAVITY = BASE_GRAVITY

    def max_speed(self, actor: Actor) -> float:
        return MAX_FORWARD_SPEED * BOOST_SPEED_FACTOR if actor.boosting else MAX_FORWARD_SPEED

    @staticmethod
    def drag_factor(dt: float) -> float:
        """Horizontal velocity retained after dt seconds."""
        return DRAG_PER_REFERENCE_FRAME ** (REFERENCE_RATE * dt)

    def update_boost(self, actor: Actor, dt: float) -> bool:
        """
        Advances the hold, boost and cooldown timers.
        Returns True when holding the input armed a new boost this step.
        """
        activated = False
        if actor.holding:
            actor.hold_timer += dt
            if (actor.hold_timer >= BOOST_HOLD_THRESHOLD and not actor.boosting
                    and actor.boost_cooldown <= 0):
                actor.boosting = True
                actor.boost_timer = BOOST_DURATION
                actor.boost_cooldown = BOOST_COOLDOWN
                activated = True

        if actor.boosting:
            actor.boost_timer = max(0.0, actor.boost_timer - dt)
            if actor.boost_timer == 0.0:
                actor.boosting = False

        if actor.boost_cooldown > 0:
            actor.boost_cooldown = max(0.0, actor.boost_cooldown - dt)
        return activated

    def apply_gravity(self, actor: Actor, dt: float):
        """
        Accelerates the actor downwards. The float window is honoured for
        exactly its remaining time, even when it runs out mid-step.
        """
        if actor.boosting:
            actor.velocity_y += self.GRAVITY * BOOST_GRAVITY_MULTIPLIER * dt
        else:
            floating = min(actor.float_timer, dt)
            actor.velocity_y += self.GRAVITY * (FLOAT_MULTIPLIER * floating + (dt - floating))
        actor.float_timer = max(0.0, actor.float_timer - dt)

    def flap(self, actor: Actor):
        """Sets (never adds to) the upward velocity and nudges the actor forward."""
        actor.velocity_y = BOOST_FLAP_VELOCITY if actor.boosting else FLAP_VELOCITY
        actor.float_timer = FLOAT_DURATION
        actor.velocity_x += BOOST_FORWARD_IMPULSE if actor.boosting else FORWARD_IMPULSE
        cap = self.max_speed(actor)
        actor.velocity_x = max(-cap, min(actor.velocity_x, cap))
        actor.is_flapping = True

    def apply_movement(self, actor: Actor, dt: float):
        actor.y += actor.velocity_y * dt

        if actor.boosting:
            actor.velocity_x += BOOST_THRUST * dt
            cap = self.max_speed(actor)
            actor.velocity_x = max(-cap, min(actor.velocity_x, cap))

        actor.x += actor.velocity_x * dt
        actor.velocity_x *= self.drag_factor(dt)

    def clamp_to_bounds(self, actor: Actor, bounds: WorldBounds) -> bool:
        """Keeps the actor on screen. Returns True if it touched the ground."""
        max_x = bounds.max_x(actor.boosting)
        if actor.x < bounds.min_x:
            actor.x = bounds.min_x
            actor.velocity_x = 0.0
        elif actor.x > max_x:
            actor.x = max_x
            actor.velocity_x = 0.0

        if actor.y < 0:
            actor.y = 0.0
            actor.velocity_y = 0.0

        if actor.y + actor.height > bounds.ground_y:
            actor.y = bounds.ground_y - actor.height
            return True
        return False

    def smooth_rotation(self, actor: Actor, dt: float):
        target = max(-ROTATION_LIMIT, min(ROTATION_LIMIT, actor.velocity_y / ROTATION_VELOCITY_SCALE))
        keep = ROTATION_SMOOTHING ** (REFERENCE_RATE * dt)
        actor.rotation = actor.rotation * keep + target * (1.0 - keep)

    def check_invariants(self, actor: Actor):
        for name in ("x", "y", "velocity_x", "velocity_y"):
            value = getattr(actor, name)
            if not math.isfinite(value):
                raise SimulationInvariantError(f"actor.{name} is {value!r}")

    def step_actor(self, actor: Actor, dt: float, bounds: WorldBounds, flap: bool) -> ActorStep:
        """
        Advances the actor by dt seconds. Mutates the actor.
        Raises SimulationInvariantError if the kinematics become unusable.
        """
        if not math.isfinite(dt):
            raise SimulationInvariantError(f"step length is {dt!r}")

        boosted = self.update_boost(actor, dt)
        self.apply_gravity(actor, dt)
        if flap:
            self.flap(actor)
        self.apply_movement(actor, dt)
        self.check_invariants(actor)

        grounded = self.clamp_to_bounds(actor, bounds)
        self.smooth_rotation(actor, dt)
        return ActorStep(flapped=flap, boosted=boosted, grounded=grounded)
