"""Tests for Particle records and the ParticleSystem arena."""

import numpy as np
import pytest

from config import ConfigurationError, SimulationConfig
from particle import Particle, ParticleSystem
from vector import Vector2D


def make_system():
    return ParticleSystem.from_particles([
        Particle(Vector2D(0, 0), Vector2D(1, 0), mass=1.0, radius=1.0),
        Particle(Vector2D(10, 0), Vector2D(0, 2), mass=2.0, radius=2.0),
        Particle(Vector2D(20, 0), Vector2D(0, 0), mass=3.0, radius=3.0),
        Particle(Vector2D(30, 0), Vector2D(-3, 4), mass=4.0, radius=4.0),
    ])


@pytest.mark.parametrize("kwargs", [
    {"mass": 0.0},
    {"mass": -1.0},
    {"radius": 0.0},
    {"radius": -2.0},
    {"mass": float("nan")},
])
def test_particle_rejects_non_positive_values(kwargs):
    with pytest.raises(ConfigurationError):
        Particle(Vector2D(0, 0), **kwargs)


def test_particle_rejects_non_finite_position():
    with pytest.raises(ConfigurationError):
        Particle(Vector2D(float("inf"), 0))


def test_particle_speed():
    assert Particle(Vector2D(0, 0), Vector2D(3, 4)).speed == 5.0


def test_round_trip_through_arrays():
    system = make_system()
    assert len(system) == 4
    assert system.particle(1) == Particle(Vector2D(10, 0), Vector2D(0, 2), mass=2.0, radius=2.0)
    assert system.positions.shape == (4, 2)


def test_arrays_are_read_only():
    system = make_system()
    with pytest.raises(ValueError):
        system.positions[0, 0] = 5.0
    with pytest.raises(ValueError):
        system.velocities[0] = (1.0, 1.0)


def test_array_constructor_validates_mass_and_radius():
    with pytest.raises(ConfigurationError):
        ParticleSystem(np.zeros((1, 2)), np.zeros((1, 2)), [0.0], [1.0])
    with pytest.raises(ConfigurationError):
        ParticleSystem(np.zeros((1, 2)), np.zeros((1, 2)), [1.0], [-1.0])


def test_array_constructor_checks_sizes():
    with pytest.raises(ValueError):
        ParticleSystem(np.zeros((2, 2)), np.zeros((1, 2)), [1.0, 1.0], [1.0, 1.0])


def test_without_uses_original_indices():
    system = make_system().without([1, 3])
    assert len(system) == 2
    np.testing.assert_array_equal(system.positions[:, 0], [0.0, 20.0])
    np.testing.assert_array_equal(system.masses, [1.0, 3.0])


def test_without_ignores_duplicates():
    assert len(make_system().without([2, 2, 2])) == 3


def test_extended_appends_in_order():
    system = make_system().extended([
        Particle(Vector2D(40, 0)),
        Particle(Vector2D(50, 0)),
    ])
    np.testing.assert_array_equal(system.positions[:, 0], [0, 10, 20, 30, 40, 50])


def test_replace_keeps_masses_and_radii():
    system = make_system()
    moved = system.replace(positions=system.positions + 1.0)
    np.testing.assert_array_equal(moved.masses, system.masses)
    np.testing.assert_array_equal(moved.positions, system.positions + 1.0)
    np.testing.assert_array_equal(moved.velocities, system.velocities)


def test_speeds_and_kinetic_energy():
    system = make_system()
    np.testing.assert_allclose(system.speeds(), [1.0, 2.0, 0.0, 5.0])
    # 0.5 * (1*1 + 2*4 + 0 + 4*25)
    assert system.kinetic_energy() == pytest.approx(54.5)


def test_empty_system():
    system = ParticleSystem.from_particles([])
    assert len(system) == 0
    assert system.kinetic_energy() == 0.0
    assert system.particles() == ()


def test_random_placement_respects_walls():
    config = SimulationConfig(
        width=100.0, height=50.0, origin=Vector2D(-50, 10),
        particle_count=500, particle_radius=4.0, particle_mass=0.2, seed=11,
    )
    system = ParticleSystem.random(config)
    assert len(system) == 500
    assert np.all(system.positions[:, 0] >= -46.0)
    assert np.all(system.positions[:, 0] <= 46.0)
    assert np.all(system.positions[:, 1] >= 14.0)
    assert np.all(system.positions[:, 1] <= 56.0)
    assert np.all(system.velocities == 0.0)
    assert np.all(system.masses == 0.2)


def test_random_placement_is_seeded():
    config = SimulationConfig(particle_count=20, seed=5)
    a = ParticleSystem.random(config)
    b = ParticleSystem.random(config)
    np.testing.assert_array_equal(a.positions, b.positions)
