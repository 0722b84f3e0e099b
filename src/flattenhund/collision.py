"""
collision.py: Box intersection, gap threading and scoring.
"""

from typing import Iterable, List

from .data_models import Actor, Box, Obstacle, SimEvent


def check_collision(a: Box, b: Box) -> bool:
    """Strict axis-aligned overlap; touching edges do not collide."""
    return (
        a.x < b.right and
        a.right > b.x and
        a.y < b.bottom and
        a.bottom > b.y
    )


def overlaps_horizontally(a: Box, obstacle: Obstacle) -> bool:
    return a.right > obstacle.x and a.x < obstacle.right


def outside_gap(a: Box, obstacle: Obstacle) -> bool:
    """
    True when the actor shares the pipe's column but is not fully inside the
    gap, i.e. it is trying to slip over or under the pipe pair.
    """
    if not overlaps_horizontally(a, obstacle):
        return False
    return a.y < obstacle.top.bottom or a.bottom > obstacle.bottom.y


def hits_obstacle(actor: Actor, obstacle: Obstacle) -> bool:
    box = actor.box()
    return (
        check_collision(box, obstacle.top) or
        check_collision(box, obstacle.bottom) or
        outside_gap(box, obstacle)
    )


def resolve(actor: Actor, obstacles: Iterable[Obstacle]) -> List[SimEvent]:
    """
    Checks the actor against every active obstacle, oldest first.
    Marks passed obstacles and returns one SCORE per newly passed pipe; stops
    at the first collision, which is reported as a single COLLISION.
    """
    events = []
    for obstacle in obstacles:
        if hits_obstacle(actor, obstacle):
            events.append(SimEvent.COLLISION)
            break

        if not obstacle.passed and actor.x > obstacle.right:
            obstacle.passed = True
            events.append(SimEvent.SCORE)
    return events
