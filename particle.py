# particle.py
"""
Particle records and the population arena.

This module defines the Particle record used at the API boundary and the
ParticleSystem class, which stores a whole population in NumPy arrays. A
ParticleSystem is immutable: its arrays are flagged read-only, and every
mutation returns a new instance. The Simulation commits a new
ParticleSystem once per tick, so a reference obtained by a renderer never
changes underneath it.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from config import SimulationConfig, fail
from vector import Vector2D

# --- Data Contracts ---
#
# class Particle:
#   - Fields: position: Vector2D, velocity: Vector2D, mass: float > 0,
#     radius: float > 0.
#   - Invariants: finite position and velocity; invalid values raise
#     ConfigurationError.
#
# class ParticleSystem:
#   - positions: (N, 2) float64, read-only.
#   - velocities: (N, 2) float64, read-only.
#   - masses: (N,) float64, read-only, all > 0.
#   - radii: (N,) float64, read-only, all > 0.
#   - Identity of a particle is its row index within one ParticleSystem.


@dataclass(frozen=True)
class Particle:
    """A single point mass."""
    position: Vector2D
    velocity: Vector2D = field(default_factory=Vector2D.zero)
    mass: float = 1.0
    radius: float = 1.0

    def __post_init__(self):
        validate_particle(self.position, self.velocity, self.mass, self.radius)

    @property
    def speed(self) -> float:
        return self.velocity.magnitude()


def validate_particle(position: Vector2D, velocity: Vector2D, mass: float, radius: float) -> None:
    if not (math.isfinite(mass) and mass > 0):
        fail(f"Configuration error: particle mass must be a finite value > 0, got {mass}.")
    if not (math.isfinite(radius) and radius > 0):
        fail(f"Configuration error: particle radius must be a finite value > 0, got {radius}.")
    if not position.is_finite():
        fail(f"Configuration error: particle position must be finite, got {position}.")
    if not velocity.is_finite():
        fail(f"Configuration error: particle velocity must be finite, got {velocity}.")


def _frozen(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=np.float64)
    array.flags.writeable = False
    return array


class ParticleSystem:
    """
    An immutable snapshot of a particle population.
    """
    def __init__(self, positions, velocities, masses, radii):
        """
        Wraps copies of the given arrays.

        Args:
            positions: (N, 2) array-like of particle centres.
            velocities: (N, 2) array-like of particle velocities.
            masses: (N,) array-like of masses.
            radii: (N,) array-like of radii.
        """
        self.positions = _frozen(np.reshape(positions, (-1, 2)))
        self.velocities = _frozen(np.reshape(velocities, (-1, 2)))
        self.masses = _frozen(np.reshape(masses, (-1,)))
        self.radii = _frozen(np.reshape(radii, (-1,)))

        n = self.positions.shape[0]
        shapes = (self.velocities.shape[0], self.masses.shape[0], self.radii.shape[0])
        if any(count != n for count in shapes):
            raise ValueError(
                f"Particle arrays disagree on population size: positions {n}, "
                f"velocities/masses/radii {shapes}."
            )
        if not np.all(np.isfinite(self.masses) & (self.masses > 0)):
            fail("Configuration error: every particle mass must be a finite value > 0.")
        if not np.all(np.isfinite(self.radii) & (self.radii > 0)):
            fail("Configuration error: every particle radius must be a finite value > 0.")

    @classmethod
    def empty(cls) -> "ParticleSystem":
        return cls(np.zeros((0, 2)), np.zeros((0, 2)), np.zeros(0), np.zeros(0))

    @classmethod
    def from_particles(cls, particles: Iterable[Particle]) -> "ParticleSystem":
        particles = list(particles)
        if not particles:
            return cls.empty()
        return cls(
            [p.position.as_tuple() for p in particles],
            [p.velocity.as_tuple() for p in particles],
            [p.mass for p in particles],
            [p.radius for p in particles],
        )

    @classmethod
    def random(cls, config: SimulationConfig, rng: Optional[np.random.Generator] = None) -> "ParticleSystem":
        """
        Places config.particle_count resting particles uniformly at random.

        Each centre lies within [origin + radius, origin + dimension - radius]
        on both axes, so no particle starts out penetrating a wall.
        """
        if rng is None:
            rng = np.random.default_rng(config.seed)
        count = config.particle_count
        r = config.particle_radius
        low = [config.origin.x + r, config.origin.y + r]
        high = [config.origin.x + config.width - r, config.origin.y + config.height - r]
        positions = rng.uniform(low=low, high=high, size=(count, 2))

        logging.info(
            f"ParticleSystem initialized with {count} particles "
            f"(mass {config.particle_mass}, radius {r})."
        )
        logging.debug(f"Particle positions shape: {positions.shape}")
        return cls(
            positions,
            np.zeros((count, 2)),
            np.full(count, config.particle_mass),
            np.full(count, r),
        )

    def __len__(self) -> int:
        return self.positions.shape[0]

    def particle(self, index: int) -> Particle:
        x, y = self.positions[index]
        vx, vy = self.velocities[index]
        return Particle(
            Vector2D(x, y), Vector2D(vx, vy),
            float(self.masses[index]), float(self.radii[index])
        )

    def particles(self) -> Tuple[Particle, ...]:
        return tuple(self.particle(i) for i in range(len(self)))

    def speeds(self) -> np.ndarray:
        """Per-particle speed, e.g. for colour-by-speed rendering."""
        return np.hypot(self.velocities[:, 0], self.velocities[:, 1])

    def kinetic_energy(self) -> float:
        return float(0.5 * np.sum(self.masses * np.sum(self.velocities ** 2, axis=1)))

    def replace(self, positions=None, velocities=None) -> "ParticleSystem":
        """Returns a copy with new positions and/or velocities, same masses and radii."""
        return ParticleSystem(
            self.positions if positions is None else positions,
            self.velocities if velocities is None else velocities,
            self.masses,
            self.radii,
        )

    def without(self, indices: Iterable[int]) -> "ParticleSystem":
        """
        Returns a copy without the given rows.

        All indices refer to this population, so removing several particles
        at once never shifts the meaning of a later index in the batch.
        """
        keep = np.ones(len(self), dtype=bool)
        doomed: List[int] = sorted(set(indices))
        if doomed:
            keep[doomed] = False
        return ParticleSystem(
            self.positions[keep], self.velocities[keep],
            self.masses[keep], self.radii[keep]
        )

    def extended(self, particles: Sequence[Particle]) -> "ParticleSystem":
        """Returns a copy with the given particles appended in order."""
        if not particles:
            return self
        extra = ParticleSystem.from_particles(particles)
        return ParticleSystem(
            np.concatenate((self.positions, extra.positions)),
            np.concatenate((self.velocities, extra.velocities)),
            np.concatenate((self.masses, extra.masses)),
            np.concatenate((self.radii, extra.radii)),
        )

    def __repr__(self):
        return f"ParticleSystem(n={len(self)})"
