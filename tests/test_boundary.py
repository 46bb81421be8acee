"""Tests for wall containment."""

import numpy as np
import pytest

from boundary import BoundaryResolver
from config import SimulationConfig
from vector import Vector2D


@pytest.fixture
def resolver():
    return BoundaryResolver(SimulationConfig(width=100.0, height=50.0, restitution=0.5))


def test_left_wall(resolver):
    positions, velocities = resolver.resolve(
        np.array([[2.0, 25.0]]), np.array([[-8.0, 1.0]]), np.array([5.0])
    )
    np.testing.assert_array_equal(positions, [[5.0, 25.0]])
    np.testing.assert_array_equal(velocities, [[4.0, 1.0]])


def test_right_and_top_walls(resolver):
    positions, velocities = resolver.resolve(
        np.array([[99.0, 60.0]]), np.array([[6.0, 10.0]]), np.array([5.0])
    )
    np.testing.assert_array_equal(positions, [[95.0, 45.0]])
    np.testing.assert_array_equal(velocities, [[-3.0, -5.0]])


def test_corner_resolves_each_axis(resolver):
    positions, velocities = resolver.resolve(
        np.array([[-1.0, -1.0]]), np.array([[-2.0, -4.0]]), np.array([1.0])
    )
    np.testing.assert_array_equal(positions, [[1.0, 1.0]])
    np.testing.assert_array_equal(velocities, [[1.0, 2.0]])


def test_inside_untouched(resolver):
    positions = np.array([[50.0, 25.0], [5.0, 5.0]])
    velocities = np.array([[-1.0, 3.0], [-2.0, -2.0]])
    new_p, new_v = resolver.resolve(positions, velocities, np.array([5.0, 5.0]))
    np.testing.assert_array_equal(new_p, positions)
    np.testing.assert_array_equal(new_v, velocities)


def test_inputs_untouched(resolver):
    positions = np.array([[-10.0, 25.0]])
    velocities = np.array([[-1.0, 0.0]])
    resolver.resolve(positions, velocities, np.array([1.0]))
    np.testing.assert_array_equal(positions, [[-10.0, 25.0]])


def test_origin_offsets_the_domain():
    resolver = BoundaryResolver(SimulationConfig(width=100.0, height=100.0, origin=Vector2D(-50, -50)))
    positions, _ = resolver.resolve(np.array([[-60.0, 60.0]]), np.zeros((1, 2)), np.array([5.0]))
    np.testing.assert_array_equal(positions, [[-45.0, 45.0]])


def test_narrow_domain_centres_the_particle():
    resolver = BoundaryResolver(SimulationConfig(width=4.0, height=100.0))
    positions, _ = resolver.resolve(np.array([[0.0, 50.0]]), np.zeros((1, 2)), np.array([5.0]))
    np.testing.assert_array_equal(positions, [[2.0, 50.0]])


class TestSoftEdge:

    def test_disabled_by_default(self):
        resolver = BoundaryResolver(SimulationConfig(width=100.0, height=100.0))
        accel = resolver.soft_edge_acceleration(np.array([[5.5, 50.0]]), np.array([5.0]))
        np.testing.assert_array_equal(accel, 0.0)

    def test_pushes_inward_inside_margin(self):
        resolver = BoundaryResolver(SimulationConfig(
            width=100.0, height=100.0, edge_margin=10.0, edge_strength=2.0
        ))
        positions = np.array([[8.0, 50.0], [50.0, 91.0], [50.0, 50.0]])
        accel = resolver.soft_edge_acceleration(positions, np.array([5.0, 5.0, 5.0]))
        # 3 from the left clamp bound at x=5, 4 from the top bound at y=95
        np.testing.assert_allclose(accel, [[2.0 * 7.0, 0.0], [0.0, -2.0 * 6.0], [0.0, 0.0]])

    def test_grows_towards_the_wall(self):
        resolver = BoundaryResolver(SimulationConfig(
            width=100.0, height=100.0, edge_margin=10.0, edge_strength=1.0
        ))
        radii = np.array([1.0, 1.0, 1.0])
        accel = resolver.soft_edge_acceleration(np.array([[9.0, 50.0], [5.0, 50.0], [1.5, 50.0]]), radii)
        assert 0.0 < accel[0, 0] < accel[1, 0] < accel[2, 0]
