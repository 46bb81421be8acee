# constants.py
"""
Kernel-level constants.

These values are the defaults a SimulationConfig falls back to when a field
is not supplied, plus a few numeric guards used by the force kernels. None of
them is read as ambient state during a tick: every tuning value reaches the
kernel through the SimulationConfig passed to the Simulation.
"""

# --- Domain ---
DEFAULT_WIDTH = 800.0
DEFAULT_HEIGHT = 600.0

# --- Force model defaults ---
# Gravitational acceleration per unit mass. y points up, so gravity pulls
# towards negative y.
DEFAULT_GRAVITY = 9.81
# Drag is off unless configured.
DEFAULT_DRAG_COEFFICIENT = 0.0
# Interaction radius of the pairwise repulsion. Twice the default radius, so
# particles start pushing each other apart as soon as they overlap.
DEFAULT_REPULSION_RADIUS = 10.0
DEFAULT_REPULSION_STRENGTH = 0.49
# Fraction of the normal velocity kept (sign-reversed) after a wall bounce.
DEFAULT_RESTITUTION = 0.6

# --- Pointer interaction ---
DEFAULT_POINTER_RADIUS = 100.0
DEFAULT_POINTER_STRENGTH = 500.0

# --- Soft edge repulsion ---
# A margin of 0 disables the soft edge zone.
DEFAULT_EDGE_MARGIN = 0.0
DEFAULT_EDGE_STRENGTH = 50.0

# --- Particles ---
DEFAULT_PARTICLE_COUNT = 0
DEFAULT_PARTICLE_MASS = 0.05
DEFAULT_PARTICLE_RADIUS = 5.0

# --- Spatial grid ---
# Upper bound on grid cells per axis; cells grow beyond the interaction
# radius instead of the grid growing without limit.
MAX_GRID_CELLS_PER_AXIS = 1024

# --- Logging ---
# Hot loops must throttle logs: one info line every N ticks.
LOG_THROTTLE_STEPS = 100
