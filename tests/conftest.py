"""Pytest configuration and shared fixtures."""

import logging
import logging.handlers

import pytest

from config import SimulationConfig
from vector import Vector2D


@pytest.fixture
def open_config():
    """
    A large centred domain with gravity off, so pairwise forces can be
    observed around the origin without touching a wall.
    """
    return SimulationConfig(
        width=1000.0,
        height=1000.0,
        origin=Vector2D(-500.0, -500.0),
        gravity=0.0,
        drag_coefficient=0.0,
        repulsion_radius=10.0,
        repulsion_strength=0.49,
    )


@pytest.fixture
def restore_root_logger():
    """Removes the handlers setup_logging() installs and restores the root level."""
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.handlers.RotatingFileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
