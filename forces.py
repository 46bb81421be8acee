# forces.py
"""
Force models.

Every function here is pure: it reads arrays describing the pre-tick
snapshot and returns a new (N, 2) array of accelerations. The integrator
multiplies the summed accelerations by dt exactly once, so an "impulse of
magnitude m * dt" in the model description is an acceleration of magnitude m
here.

The pairwise repulsion kernels are compiled with Numba and kept outside any
class, operating only on NumPy arrays and scalars as nopython mode requires.
"""
import math

import numpy as np
from numba import jit, prange

from constants import MAX_GRID_CELLS_PER_AXIS
from vector import Vector2D

# --- Data Contracts ---
#
# gravity(masses, g) -> (N, 2):
#   - Acceleration (0, -g * mass) per particle.
#
# drag(velocities, masses, coefficient, dt) -> (N, 2):
#   - Acceleration -v * min(mass * coefficient, 1 / dt). The resulting
#     impulse never exceeds |v|, so drag can stop a particle but never
#     reverse it within one tick.
#
# pairwise_repulsion(positions, radius, strength, ...) -> (N, 2):
#   - For every ordered pair (i, j), i != j, with distance d <= radius,
#     particle i receives strength * (radius - d) directed away from j.
#   - Each particle accumulates only its own acceleration against the
#     snapshot (independent scan); no write ever targets another particle.
#   - Coincident pair: the offset from j to i is taken as (+1, 0) when i > j
#     and (-1, 0) when i < j.
#
# pointer_interaction(positions, point, attract, radius, strength) -> (N, 2):
#   - Particles with distance d <= radius from the point receive
#     strength * (radius - d) / radius towards (attract) or away from
#     (repel) the point.
#   - A particle exactly on the point is pushed along (1, 0) when repelling
#     and left alone when attracting.


def gravity(masses: np.ndarray, g: float) -> np.ndarray:
    accel = np.zeros((masses.shape[0], 2))
    accel[:, 1] = -g * masses
    return accel


def drag(velocities: np.ndarray, masses: np.ndarray, coefficient: float, dt: float) -> np.ndarray:
    """
    Velocity drag, scaled by mass and capped so it cannot overshoot.

    Args:
        velocities (np.ndarray): (N, 2) pre-tick velocities.
        masses (np.ndarray): (N,) masses.
        coefficient (float): Drag coefficient.
        dt (float): Timestep the acceleration will be integrated over.

    Returns:
        np.ndarray: (N, 2) accelerations opposing the velocities.
    """
    factor = masses * coefficient
    if dt > 0:
        factor = np.minimum(factor, 1.0 / dt)
    return -velocities * factor[:, np.newaxis]


@jit(nopython=True)
def _pair_repulsion(xi, yi, xj, yj, i, j, radius, radius_sq, strength):
    """Acceleration on particle i caused by particle j."""
    dx = xi - xj
    dy = yi - yj
    distance_sq = dx * dx + dy * dy
    if distance_sq > radius_sq:
        return 0.0, 0.0

    distance = math.sqrt(distance_sq)
    if distance > 0.0:
        nx = dx / distance
        ny = dy / distance
    else:
        # Coincident particles: split them along x by index order
        nx = 1.0 if i > j else -1.0
        ny = 0.0

    magnitude = strength * (radius - distance)
    return nx * magnitude, ny * magnitude


@jit(nopython=True, parallel=True)
def _repulsion_brute_force_numba(positions, radius, strength):
    """
    All-pairs scan. Each particle i reads the shared positions array and
    writes only row i of the result, so the outer loop runs in parallel.
    """
    particle_count = positions.shape[0]
    accel = np.zeros((particle_count, 2))
    radius_sq = radius * radius

    for i in prange(particle_count):
        xi = positions[i, 0]
        yi = positions[i, 1]
        ax = 0.0
        ay = 0.0
        for j in range(particle_count):
            if i == j:
                continue
            fx, fy = _pair_repulsion(
                xi, yi, positions[j, 0], positions[j, 1], i, j, radius, radius_sq, strength
            )
            ax += fx
            ay += fy
        accel[i, 0] = ax
        accel[i, 1] = ay
    return accel


@jit(nopython=True)
def _cell_of(x, y, origin_x, origin_y, cell_size, grid_width, grid_height):
    """
    Grid cell of a point. Points outside the domain are binned into the
    nearest edge cell; clamping never increases the cell distance between
    two points, so the 3x3 neighbourhood search stays exact.
    """
    fx = (x - origin_x) / cell_size
    fy = (y - origin_y) / cell_size
    if fx < 0.0:
        cx = 0
    elif fx >= grid_width:
        cx = grid_width - 1
    else:
        cx = int(fx)
    if fy < 0.0:
        cy = 0
    elif fy >= grid_height:
        cy = grid_height - 1
    else:
        cy = int(fy)
    return cx, cy


@jit(nopython=True)
def _build_cell_index_numba(positions, origin_x, origin_y, cell_size, grid_width, grid_height):
    """
    Counting sort of particle indices by grid cell.

    Returns (cell_start, order): the particles of cell c are
    order[cell_start[c]:cell_start[c + 1]], in ascending index order.
    """
    particle_count = positions.shape[0]
    cell_total = grid_width * grid_height
    cell_of = np.empty(particle_count, dtype=np.int64)
    cell_start = np.zeros(cell_total + 1, dtype=np.int64)

    for i in range(particle_count):
        cx, cy = _cell_of(
            positions[i, 0], positions[i, 1], origin_x, origin_y,
            cell_size, grid_width, grid_height
        )
        c = cx + cy * grid_width
        cell_of[i] = c
        cell_start[c + 1] += 1

    for c in range(cell_total):
        cell_start[c + 1] += cell_start[c]

    fill = cell_start[:cell_total].copy()
    order = np.empty(particle_count, dtype=np.int64)
    for i in range(particle_count):
        c = cell_of[i]
        order[fill[c]] = i
        fill[c] += 1
    return cell_start, order


@jit(nopython=True, parallel=True)
def _repulsion_grid_numba(
    positions, cell_start, order, origin_x, origin_y, cell_size,
    grid_width, grid_height, radius, strength
):
    """
    Grid-accelerated scan. Cells are at least `radius` wide, so every
    neighbour within range lies in the 3x3 block around a particle's cell.
    """
    particle_count = positions.shape[0]
    accel = np.zeros((particle_count, 2))
    radius_sq = radius * radius

    for i in prange(particle_count):
        xi = positions[i, 0]
        yi = positions[i, 1]
        cx, cy = _cell_of(xi, yi, origin_x, origin_y, cell_size, grid_width, grid_height)
        ax = 0.0
        ay = 0.0
        for gy in range(max(cy - 1, 0), min(cy + 2, grid_height)):
            for gx in range(max(cx - 1, 0), min(cx + 2, grid_width)):
                c = gx + gy * grid_width
                for k in range(cell_start[c], cell_start[c + 1]):
                    j = order[k]
                    if i == j:
                        continue
                    fx, fy = _pair_repulsion(
                        xi, yi, positions[j, 0], positions[j, 1], i, j, radius, radius_sq, strength
                    )
                    ax += fx
                    ay += fy
        accel[i, 0] = ax
        accel[i, 1] = ay
    return accel


def grid_shape(radius: float, width: float, height: float):
    """
    Cell size and grid dimensions for the given interaction radius.

    Cells are never narrower than the radius; they widen instead when the
    grid would exceed MAX_GRID_CELLS_PER_AXIS cells on an axis.
    """
    cell_size = max(radius, width / MAX_GRID_CELLS_PER_AXIS, height / MAX_GRID_CELLS_PER_AXIS)
    grid_width = max(1, int(math.ceil(width / cell_size)))
    grid_height = max(1, int(math.ceil(height / cell_size)))
    return cell_size, grid_width, grid_height


def pairwise_repulsion(
    positions: np.ndarray,
    radius: float,
    strength: float,
    use_grid: bool = False,
    origin: Vector2D = Vector2D(0.0, 0.0),
    width: float = 0.0,
    height: float = 0.0,
) -> np.ndarray:
    """
    Short-range repulsion with linear fall-off.

    Args:
        positions (np.ndarray): (N, 2) snapshot positions.
        radius (float): Interaction radius; 0 disables the force.
        strength (float): Strength coefficient.
        use_grid (bool): Bin particles into a spatial grid over the domain
            described by origin/width/height instead of scanning all pairs.

    Returns:
        np.ndarray: (N, 2) accelerations.
    """
    particle_count = positions.shape[0]
    if particle_count < 2 or radius <= 0 or strength == 0:
        return np.zeros((particle_count, 2))

    # Private writeable copy for the kernels; the snapshot itself is read-only
    positions = np.array(positions, dtype=np.float64)

    if not use_grid:
        return _repulsion_brute_force_numba(positions, float(radius), float(strength))

    cell_size, grid_width, grid_height = grid_shape(radius, width, height)
    cell_start, order = _build_cell_index_numba(
        positions, origin.x, origin.y, cell_size, grid_width, grid_height
    )
    return _repulsion_grid_numba(
        positions, cell_start, order, origin.x, origin.y, cell_size,
        grid_width, grid_height, float(radius), float(strength)
    )


def pointer_interaction(
    positions: np.ndarray, point: Vector2D, attract: bool, radius: float, strength: float
) -> np.ndarray:
    particle_count = positions.shape[0]
    if particle_count == 0 or radius <= 0 or strength == 0:
        return np.zeros((particle_count, 2))

    # From each particle towards the pointer
    offset = np.array([point.x, point.y]) - positions
    distance = np.hypot(offset[:, 0], offset[:, 1])
    magnitude = np.where(distance <= radius, strength * (radius - distance) / radius, 0.0)

    direction = np.zeros_like(offset)
    nonzero = distance > 0.0
    direction[nonzero] = offset[nonzero] / distance[nonzero, np.newaxis]
    if not attract:
        direction = -direction
        direction[~nonzero] = (1.0, 0.0)
    return direction * magnitude[:, np.newaxis]
