"""Tests for collision detection and scoring."""

from flattenhund.collision import check_collision, hits_obstacle, resolve
from flattenhund.data_models import Actor, Box, Obstacle, SimEvent


def pipe(x=100.0, top_height=200.0, gap=170.0, width=90.0, screen_height=720.0):
    return Obstacle(x=x, width=width, top_height=top_height,
                    bottom_y=top_height + gap, screen_height=screen_height)


class TestCheckCollision:
    def test_overlap(self):
        assert check_collision(Box(0, 0, 10, 10), Box(5, 5, 10, 10))

    def test_touching_edges_do_not_collide(self):
        assert not check_collision(Box(0, 0, 10, 10), Box(10, 0, 10, 10))
        assert not check_collision(Box(0, 0, 10, 10), Box(0, 10, 10, 10))

    def test_apart(self):
        assert not check_collision(Box(0, 0, 10, 10), Box(50, 50, 10, 10))


class TestHitsObstacle:
    def test_inside_gap_is_safe(self):
        actor = Actor(x=120.0, y=260.0)
        assert not hits_obstacle(actor, pipe())

    def test_clipping_top_pipe(self):
        actor = Actor(x=120.0, y=190.0)
        assert hits_obstacle(actor, pipe())

    def test_clipping_bottom_pipe(self):
        actor = Actor(x=120.0, y=340.0)
        assert hits_obstacle(actor, pipe())

    def test_slipping_under_a_short_barrier(self):
        """Below the drawn bottom pipe, but still in its column: a collision."""
        short = pipe(top_height=100.0, gap=70.0, screen_height=180.0)
        actor = Actor(x=120.0, y=185.0)

        assert not check_collision(actor.box(), short.top)
        assert not check_collision(actor.box(), short.bottom)
        assert hits_obstacle(actor, short)

    def test_clear_of_the_column(self):
        actor = Actor(x=0.0, y=0.0)
        assert not hits_obstacle(actor, pipe())


class TestResolve:
    def test_score_fires_once_per_pipe(self):
        actor = Actor(x=80.0, y=260.0)
        passed = pipe(x=-20.0)

        assert resolve(actor, [passed]) == [SimEvent.SCORE]
        assert passed.passed is True
        assert resolve(actor, [passed]) == []

    def test_touching_right_edge_does_not_score(self):
        actor = Actor(x=70.0, y=260.0)
        assert resolve(actor, [pipe(x=-20.0)]) == []

    def test_several_pipes_score_together(self):
        actor = Actor(x=150.0, y=260.0)
        assert resolve(actor, [pipe(x=-100.0), pipe(x=-50.0)]) == [SimEvent.SCORE] * 2

    def test_collision_stops_resolution(self):
        actor = Actor(x=120.0, y=0.0)
        behind = pipe(x=-100.0)

        events = resolve(actor, [pipe(), behind])

        assert events == [SimEvent.COLLISION]
        assert behind.passed is False
