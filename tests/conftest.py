"""
Pytest configuration and shared fixtures.

This file is automatically discovered by pytest and provides fixtures
available to all test modules.
"""

import numpy as np
import pytest

from correlation_mining.utils.logging_config import setup_logging


@pytest.fixture
def rng():
    """Seeded random generator so tests are reproducible."""
    return np.random.default_rng(42)


@pytest.fixture
def line_points():
    """
    13 points on the line y = 2x through the origin.

    Includes the origin itself, whose parameterization function is the
    constant 0, so the distance bucket around 0 is strictly the densest.
    """
    t = np.arange(-6, 7) * 0.5
    return t[:, None] * np.array([1.0, 2.0])


@pytest.fixture
def plane_points(rng):
    """40 points on the plane z = 0.5 x + 0.25 y through the origin."""
    xy = rng.uniform(-1.0, 1.0, size=(40, 2))
    z = 0.5 * xy[:, 0] + 0.25 * xy[:, 1]
    return np.column_stack([xy, z])


@pytest.fixture
def uniform_points(rng):
    """60 uniformly distributed 2-D points."""
    return rng.uniform(0.0, 1.0, size=(60, 2))


@pytest.fixture
def reset_logging():
    """Restore the package logger after a test reconfigures it."""
    yield
    setup_logging("INFO")
