# simulation.py
"""
Handles the per-tick orchestration of the particle kernel.

This module defines the Simulation class, which owns the particle population
and advances it by one tick at a time: it takes a read-only snapshot,
accumulates every force against that snapshot, integrates, resolves the
walls and commits the result in a single reference swap. Spawn and remove
requests are buffered and applied only between ticks.
"""
import logging
import math
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

import numpy as np

from boundary import BoundaryResolver
from config import SimulationConfig, fail
from constants import LOG_THROTTLE_STEPS
from forces import drag, gravity, pairwise_repulsion, pointer_interaction
from integrator import semi_implicit_euler
from particle import Particle, ParticleSystem
from vector import Vector2D

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, config: SimulationConfig,
#              particles: Optional[Iterable[Particle]] = None,
#              log_throttle_steps: int = LOG_THROTTLE_STEPS):
#     - Inputs:
#       - config: validated SimulationConfig.
#       - particles: explicit initial population. When None, the population
#         is config.particle_count particles placed at random from
#         config.seed.
#     - Side Effects: logs the initial population size.
#
#   - step(self, dt: float, events: Iterable[PointerEvent] = ()) -> ParticleSystem:
#     - Inputs: dt >= 0 and finite; pointer events for this tick.
#     - Outputs: the newly committed ParticleSystem.
#     - Invariants:
#       - Pending spawns/removals are applied before the snapshot is taken.
#       - Every force reads only the snapshot, so the output is a function
#         of the previous committed state, dt and events, independent of
#         iteration order over the particles.
#       - The committed state changes by one reference assignment; a reader
#         of `state` sees either the old or the new population, never a mix.
#       - step(0) leaves positions and velocities of in-bounds particles
#         unchanged.
#
#   - spawn(...) / remove(index): validated immediately, buffered, and
#     applied at the next tick boundary.


class PointerMode(Enum):
    ATTRACT = 'attract'
    REPEL = 'repel'
    SPAWN = 'spawn'
    REMOVE = 'remove'


class TickPhase(Enum):
    IDLE = 'idle'
    SNAPSHOT_TAKEN = 'snapshot_taken'
    FORCES_ACCUMULATED = 'forces_accumulated'
    INTEGRATED = 'integrated'
    BOUNDARY_RESOLVED = 'boundary_resolved'


@dataclass(frozen=True)
class PointerEvent:
    """External pointer input for one tick."""
    position: Vector2D
    mode: PointerMode
    active: bool = True

    def __post_init__(self):
        if not isinstance(self.position, Vector2D):
            object.__setattr__(self, 'position', Vector2D.from_sequence(self.position))
        if not isinstance(self.mode, PointerMode):
            try:
                object.__setattr__(self, 'mode', PointerMode(self.mode))
            except ValueError:
                raise ValueError(f"Unknown pointer mode {self.mode!r}.") from None
        if not self.position.is_finite():
            raise ValueError(f"Pointer position must be finite, got {self.position}.")


class Simulation:
    """
    Owns the particle population and advances it tick by tick.
    """
    def __init__(
        self,
        config: SimulationConfig,
        particles: Optional[Iterable[Particle]] = None,
        log_throttle_steps: int = LOG_THROTTLE_STEPS,
    ):
        """
        Initializes the simulation.

        Args:
            config (SimulationConfig): Kernel configuration, read-only for the
                lifetime of the simulation.
            particles (Optional[Iterable[Particle]]): Initial population. If
                omitted, a random population is generated from the config.
            log_throttle_steps (int): Ticks between progress log lines.
        """
        if not isinstance(config, SimulationConfig):
            fail(f"Configuration error: expected a SimulationConfig, got {type(config).__name__}.")
        if log_throttle_steps < 1:
            fail(f"Configuration error: log_throttle_steps must be >= 1, got {log_throttle_steps}.")

        self.config = config
        self.boundary = BoundaryResolver(config)
        self.log_throttle_steps = log_throttle_steps

        if particles is None:
            self._state = ParticleSystem.random(config)
        else:
            self._state = ParticleSystem.from_particles(particles)

        # Single writer lock: held for a whole tick and for every queue access
        self._lock = threading.Lock()
        self._pending_spawns: List[Particle] = []
        self._pending_removals: Set[int] = set()
        self._phase = TickPhase.IDLE
        self._step_count = 0

        logging.info(f"Simulation initialized with {len(self._state)} particles.")
        logging.info(
            f"Domain {config.width}x{config.height} at {config.origin.as_tuple()}, "
            f"gravity {config.gravity}, drag {config.drag_coefficient}, "
            f"repulsion radius {config.repulsion_radius} "
            f"({'spatial grid' if config.use_spatial_grid else 'all pairs'})."
        )

    # --- Read-only view ---

    @property
    def state(self) -> ParticleSystem:
        """The last committed population; its arrays are read-only."""
        return self._state

    @property
    def particles(self) -> Tuple[Particle, ...]:
        return self._state.particles()

    @property
    def phase(self) -> TickPhase:
        """Tick phase as seen from outside; waits for an in-flight tick to commit."""
        with self._lock:
            return self._phase

    @property
    def step_count(self) -> int:
        return self._step_count

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending_spawns) + len(self._pending_removals)

    def __len__(self) -> int:
        return len(self._state)

    def stats(self) -> Dict[str, float]:
        state = self._state
        speeds = state.speeds()
        return {
            'count': len(state),
            'mean_speed': float(np.mean(speeds)) if len(state) else 0.0,
            'max_speed': float(np.max(speeds)) if len(state) else 0.0,
            'kinetic_energy': state.kinetic_energy(),
        }

    # --- Population mutation ---

    def spawn(
        self,
        position: Vector2D,
        velocity: Optional[Vector2D] = None,
        mass: Optional[float] = None,
        radius: Optional[float] = None,
    ) -> None:
        """
        Queues a new particle. It joins the population at the next tick
        boundary. Mass and radius default to the configured particle values.
        """
        particle = Particle(
            position,
            Vector2D.zero() if velocity is None else velocity,
            self.config.particle_mass if mass is None else mass,
            self.config.particle_radius if radius is None else radius,
        )
        with self._lock:
            self._pending_spawns.append(particle)
        logging.debug(f"Queued spawn at {position.as_tuple()}.")

    def remove(self, index: int) -> None:
        """
        Queues removal of the particle at `index` in the committed population.

        Indices of a batch all refer to the population as committed when they
        were requested, so queuing 1 and then 3 removes the original
        particles 1 and 3.
        """
        with self._lock:
            count = len(self._state)
            if not 0 <= index < count:
                raise IndexError(f"Particle index {index} out of range for {count} particles.")
            self._pending_removals.add(index)
        logging.debug(f"Queued removal of particle {index}.")

    def apply_pending(self) -> None:
        """Applies queued spawns and removals now. Must be called between ticks."""
        with self._lock:
            self._apply_pending_locked()

    def _apply_pending_locked(self) -> None:
        if not self._pending_spawns and not self._pending_removals:
            return
        state = self._state
        removed = len(self._pending_removals)
        added = len(self._pending_spawns)
        if self._pending_removals:
            state = state.without(self._pending_removals)
        state = state.extended(self._pending_spawns)
        self._pending_removals = set()
        self._pending_spawns = []
        self._state = state
        logging.debug(f"Applied pending mutations: +{added} -{removed}, population now {len(state)}.")

    # --- Tick ---

    def step(self, dt: float, events: Iterable[PointerEvent] = ()) -> ParticleSystem:
        """
        Executes one tick of the simulation.

        Args:
            dt (float): Timestep in seconds, finite and >= 0.
            events (Iterable[PointerEvent]): Pointer events for this tick.
                Active ATTRACT/REPEL events act during this tick; SPAWN and
                REMOVE events are queued for the next tick boundary.

        Returns:
            ParticleSystem: The committed population after the tick.
        """
        if not math.isfinite(dt) or dt < 0:
            raise ValueError(f"dt must be finite and >= 0, got {dt}.")
        events = [event for event in events if event.active]

        with self._lock:
            self._apply_pending_locked()

            # 1. Snapshot
            snapshot = self._state
            self._phase = TickPhase.SNAPSHOT_TAKEN

            # 2. Accumulate every force against the snapshot
            accel = self._accumulate(snapshot, dt, events)
            self._phase = TickPhase.FORCES_ACCUMULATED

            # 3. Integrate once
            positions, velocities = semi_implicit_euler(
                snapshot.positions, snapshot.velocities, accel, dt, self.config.max_speed
            )
            self._phase = TickPhase.INTEGRATED

            # 4. Walls
            positions, velocities = self.boundary.resolve(positions, velocities, snapshot.radii)
            self._phase = TickPhase.BOUNDARY_RESOLVED

            # 5. Commit
            committed = snapshot.replace(positions, velocities)
            self._state = committed
            self._phase = TickPhase.IDLE
            self._step_count += 1

            self._queue_events_locked(committed, events)

        if self._step_count % self.log_throttle_steps == 0:
            logging.info(f"Simulation step {self._step_count}, {len(committed)} particles.")
            logging.debug(f"Step {self._step_count} | Mean speed: {self.stats()['mean_speed']:.4f}")
        return committed

    def _accumulate(self, snapshot: ParticleSystem, dt: float, events: Sequence[PointerEvent]) -> np.ndarray:
        config = self.config
        accel = gravity(snapshot.masses, config.gravity)
        if config.drag_coefficient > 0:
            accel += drag(snapshot.velocities, snapshot.masses, config.drag_coefficient, dt)
        accel += pairwise_repulsion(
            snapshot.positions,
            config.repulsion_radius,
            config.repulsion_strength,
            use_grid=config.use_spatial_grid,
            origin=config.origin,
            width=config.width,
            height=config.height,
        )
        accel += self.boundary.soft_edge_acceleration(snapshot.positions, snapshot.radii)
        for event in events:
            if event.mode in (PointerMode.ATTRACT, PointerMode.REPEL):
                accel += pointer_interaction(
                    snapshot.positions,
                    event.position,
                    event.mode is PointerMode.ATTRACT,
                    config.pointer_radius,
                    config.pointer_strength,
                )
        return accel

    def _queue_events_locked(self, committed: ParticleSystem, events: Sequence[PointerEvent]) -> None:
        for event in events:
            if event.mode is PointerMode.SPAWN:
                self._pending_spawns.append(Particle(
                    event.position, Vector2D.zero(),
                    self.config.particle_mass, self.config.particle_radius
                ))
            elif event.mode is PointerMode.REMOVE:
                point = np.array([event.position.x, event.position.y])
                distance = np.hypot(*(committed.positions - point).T)
                hits = np.nonzero(distance <= self.config.pointer_radius)[0]
                self._pending_removals.update(int(i) for i in hits)
