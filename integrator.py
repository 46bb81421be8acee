# integrator.py
"""
Semi-implicit (symplectic) Euler integration.

Forces for a tick are summed first and integrated once: velocities are
updated from the accumulated acceleration, then positions from the new
velocities. Both functions return new arrays and leave their inputs alone.
"""
from typing import Optional, Tuple

import numpy as np


def limit_speed(velocities: np.ndarray, max_speed: Optional[float]) -> np.ndarray:
    """
    Rescales velocities faster than max_speed down to max_speed, keeping
    their direction. None leaves velocities untouched.
    """
    if max_speed is None:
        return velocities
    speed = np.hypot(velocities[:, 0], velocities[:, 1])
    # Identify particles moving too fast
    over_speed_mask = speed > max_speed
    if not np.any(over_speed_mask):
        return velocities
    limited = np.array(velocities, dtype=np.float64)
    limited[over_speed_mask] = (
        limited[over_speed_mask] / speed[over_speed_mask, np.newaxis]
    ) * max_speed
    return limited


def semi_implicit_euler(
    positions: np.ndarray,
    velocities: np.ndarray,
    accelerations: np.ndarray,
    dt: float,
    max_speed: Optional[float] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Advances one tick.

    Args:
        positions (np.ndarray): (N, 2) positions at the start of the tick.
        velocities (np.ndarray): (N, 2) velocities at the start of the tick.
        accelerations (np.ndarray): (N, 2) sum of all force contributions.
        dt (float): Timestep in seconds.
        max_speed (Optional[float]): Speed cap applied to the new velocities
            before they move the particles. A zero timestep skips it.

    Returns:
        Tuple[np.ndarray, np.ndarray]: (new_positions, new_velocities) where
        new_velocities = velocities + accelerations * dt (capped) and
        new_positions = positions + new_velocities * dt.
    """
    new_velocities = velocities + accelerations * dt
    if dt > 0:
        new_velocities = limit_speed(new_velocities, max_speed)
    new_positions = positions + new_velocities * dt
    return new_positions, new_velocities
