# boundary.py
"""
Containment of particles inside the rectangular domain.

The BoundaryResolver contributes two things to a tick: a soft repulsive
acceleration inside a margin along each wall, which is summed with the
other forces before integration, and a hard clamp with restitution that
runs on the integrated state.
"""
import logging
from typing import Tuple

import numpy as np

from config import SimulationConfig

# --- Data Contracts ---
#
# class BoundaryResolver:
#   - __init__(self, config: SimulationConfig)
#   - bounds(self, radii) -> (low, high):
#     - (N, 2) arrays of the clamp range per particle and axis:
#       low = origin + radius, high = origin + dimension - radius. Where a
#       particle is wider than the domain on an axis, both collapse to the
#       axis midpoint.
#   - soft_edge_acceleration(self, positions, radii) -> (N, 2):
#     - edge_strength * (edge_margin - distanceToEdge), directed inward, for
#       particles closer than edge_margin to a clamp bound. Zero when
#       edge_margin is 0.
#   - resolve(self, positions, velocities, radii) -> (positions, velocities):
#     - Per axis: a position outside [low, high] is clamped onto the bound
#       and that axis's velocity becomes -restitution * velocity.
#     - Axes are handled independently, so a corner hit resolves the same
#       way whichever axis is processed first.
#     - Inputs are not modified.


class BoundaryResolver:
    """Soft edge forces and hard wall clamping for one domain."""
    def __init__(self, config: SimulationConfig):
        self.origin = np.array([config.origin.x, config.origin.y], dtype=np.float64)
        self.extent = np.array([config.width, config.height], dtype=np.float64)
        self.restitution = float(config.restitution)
        self.edge_margin = float(config.edge_margin)
        self.edge_strength = float(config.edge_strength)

        logging.debug(
            f"BoundaryResolver: origin {tuple(self.origin)}, extent {tuple(self.extent)}, "
            f"restitution {self.restitution}, edge margin {self.edge_margin}."
        )

    def bounds(self, radii: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        r = radii[:, np.newaxis]
        low = self.origin + r
        high = self.origin + self.extent - r
        too_narrow = low > high
        if np.any(too_narrow):
            middle = np.broadcast_to(self.origin + self.extent / 2.0, low.shape)
            low = np.where(too_narrow, middle, low)
            high = np.where(too_narrow, middle, high)
        return low, high

    def soft_edge_acceleration(self, positions: np.ndarray, radii: np.ndarray) -> np.ndarray:
        accel = np.zeros_like(positions, dtype=np.float64)
        if self.edge_margin <= 0 or self.edge_strength == 0 or positions.shape[0] == 0:
            return accel

        low, high = self.bounds(radii)
        margin = self.edge_margin
        from_low = positions - low
        from_high = high - positions
        # Push away from the low wall (+) and the high wall (-)
        accel += np.where(from_low < margin, self.edge_strength * (margin - from_low), 0.0)
        accel -= np.where(from_high < margin, self.edge_strength * (margin - from_high), 0.0)
        return accel

    def resolve(
        self, positions: np.ndarray, velocities: np.ndarray, radii: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        positions = np.array(positions, dtype=np.float64)
        velocities = np.array(velocities, dtype=np.float64)
        if positions.shape[0] == 0:
            return positions, velocities

        low, high = self.bounds(radii)
        below = positions < low
        above = positions > high
        positions = np.where(below, low, positions)
        positions = np.where(above, high, positions)
        velocities = np.where(below | above, -self.restitution * velocities, velocities)
        return positions, velocities
