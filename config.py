# config.py
"""
Simulation configuration.

All tuning values of the kernel (gravity, drag, repulsion, restitution,
pointer interaction, soft edges and the domain) live in a single immutable
SimulationConfig handed to the Simulation at construction time. Nothing in
the kernel reads module-level tuning state.
"""
import dataclasses
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from constants import (
    DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_GRAVITY, DEFAULT_DRAG_COEFFICIENT,
    DEFAULT_REPULSION_RADIUS, DEFAULT_REPULSION_STRENGTH, DEFAULT_RESTITUTION,
    DEFAULT_POINTER_RADIUS, DEFAULT_POINTER_STRENGTH, DEFAULT_EDGE_MARGIN,
    DEFAULT_EDGE_STRENGTH, DEFAULT_PARTICLE_COUNT, DEFAULT_PARTICLE_MASS,
    DEFAULT_PARTICLE_RADIUS
)
from utils import load_config
from vector import Vector2D

# --- Data Contracts ---
#
# class SimulationConfig:
#   - Fields (all floats unless noted):
#     - width, height: domain size, >= 0.
#     - origin: Vector2D, lower-left corner of the domain.
#     - gravity: gravitational acceleration per unit mass.
#     - drag_coefficient: >= 0.
#     - repulsion_radius: pairwise interaction radius, >= 0 (0 disables).
#     - repulsion_strength: >= 0.
#     - restitution: wall bounce coefficient in [0, 1].
#     - pointer_radius, pointer_strength: >= 0.
#     - edge_margin: soft edge zone width, >= 0 (0 disables).
#     - edge_strength: >= 0.
#     - max_speed: Optional[float], > 0 when set.
#     - particle_count: int >= 0, size of the random initial population.
#     - particle_mass, particle_radius: > 0, defaults for new particles.
#     - seed: Optional[int], master seed for the initial placement.
#     - use_spatial_grid: bool, grid-accelerated pairwise scan.
#   - Invariants: validated in __post_init__; an invalid value raises
#     ConfigurationError and is never silently corrected.


class ConfigurationError(ValueError):
    """Raised when a configuration or particle parameter is invalid."""


def fail(msg: str) -> None:
    """Logs a configuration error at CRITICAL level and raises it."""
    logging.critical(msg)
    raise ConfigurationError(msg)


@dataclass(frozen=True)
class SimulationConfig:
    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    origin: Vector2D = field(default_factory=Vector2D.zero)
    gravity: float = DEFAULT_GRAVITY
    drag_coefficient: float = DEFAULT_DRAG_COEFFICIENT
    repulsion_radius: float = DEFAULT_REPULSION_RADIUS
    repulsion_strength: float = DEFAULT_REPULSION_STRENGTH
    restitution: float = DEFAULT_RESTITUTION
    pointer_radius: float = DEFAULT_POINTER_RADIUS
    pointer_strength: float = DEFAULT_POINTER_STRENGTH
    edge_margin: float = DEFAULT_EDGE_MARGIN
    edge_strength: float = DEFAULT_EDGE_STRENGTH
    max_speed: Optional[float] = None
    particle_count: int = DEFAULT_PARTICLE_COUNT
    particle_mass: float = DEFAULT_PARTICLE_MASS
    particle_radius: float = DEFAULT_PARTICLE_RADIUS
    seed: Optional[int] = None
    use_spatial_grid: bool = True

    def __post_init__(self):
        if not isinstance(self.origin, Vector2D):
            object.__setattr__(self, 'origin', Vector2D.from_sequence(self.origin))
        self.validate()

    def validate(self) -> None:
        """Checks every field, raising ConfigurationError on the first bad one."""
        if not self.origin.is_finite():
            fail(f"Configuration error: origin must be finite, got {self.origin}.")

        non_negative = (
            'width', 'height', 'drag_coefficient', 'repulsion_radius',
            'repulsion_strength', 'pointer_radius', 'pointer_strength',
            'edge_margin', 'edge_strength'
        )
        for name in non_negative:
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                fail(f"Configuration error: {name} must be a finite value >= 0, got {value}.")

        if not math.isfinite(self.gravity):
            fail(f"Configuration error: gravity must be finite, got {self.gravity}.")

        if not 0.0 <= self.restitution <= 1.0:
            fail(f"Configuration error: restitution must lie in [0, 1], got {self.restitution}.")

        for name in ('particle_mass', 'particle_radius'):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                fail(f"Configuration error: {name} must be a finite value > 0, got {value}.")

        if self.max_speed is not None and (not math.isfinite(self.max_speed) or self.max_speed <= 0):
            fail(f"Configuration error: max_speed must be > 0 or None, got {self.max_speed}.")

        if isinstance(self.particle_count, bool) or not isinstance(self.particle_count, int) \
                or self.particle_count < 0:
            fail(f"Configuration error: particle_count must be an int >= 0, got {self.particle_count!r}.")

        if self.particle_count > 0:
            diameter = 2.0 * self.particle_radius
            if self.width < diameter or self.height < diameter:
                fail(
                    f"Configuration error: a {self.width}x{self.height} domain cannot hold "
                    f"particles of radius {self.particle_radius}."
                )

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> "SimulationConfig":
        """
        Builds a config from the "simulation_parameters" section of a JSON file.

        Missing keys take their defaults. Unknown keys are rejected so that a
        typo in a config file does not silently fall back to a default.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(params) - known)
        if unknown:
            fail(f"Configuration error: unknown simulation parameters {unknown}.")

        kwargs = dict(params)
        if 'origin' in kwargs:
            try:
                kwargs['origin'] = Vector2D.from_sequence(kwargs['origin'])
            except (TypeError, ValueError):
                fail(f"Configuration error: origin must be a pair of numbers, got {params['origin']!r}.")
        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: str) -> "SimulationConfig":
        """Loads the "simulation_parameters" section of a JSON config file."""
        config = load_config(path)
        return cls.from_dict(config.get('simulation_parameters', {}))
