"""
Shared pytest fixtures for the ray tracing tests.
"""

from __future__ import annotations

import numpy as np
import pytest

from raytracing import build_model


def gradient_leg(p: float, v_start: float, v_end: float, gradient: float):
    """
    Horizontal distance and time of a non-turning arc between two velocities.

    dx = (cos(a) - cos(b)) / (p g), dt = ln(tan(b/2) / tan(a/2)) / g with
    sin(a) = p v_start and sin(b) = p v_end.
    """

    a = np.arcsin(p * v_start)
    b = np.arcsin(p * v_end)
    dx = (np.cos(a) - np.cos(b)) / (p * gradient)
    dt = np.log(np.tan(b / 2.0) / np.tan(a / 2.0)) / gradient
    return float(dx), float(dt)


@pytest.fixture(scope="session")
def isovelocity():
    """Single homogeneous layer, 1500 m/s down to 1000 m."""
    return build_model([(0.0, 1500.0), (1000.0, 1500.0)])


@pytest.fixture(scope="session")
def single_gradient():
    """Single gradient layer, g = 0.02 1/s."""
    return build_model([(0.0, 1500.0), (1000.0, 1520.0)])


@pytest.fixture(scope="session")
def negative_gradient():
    """Single layer with velocity decreasing with depth, g = -0.04 1/s."""
    return build_model([(0.0, 1520.0), (1000.0, 1480.0)])


@pytest.fixture(scope="session")
def two_gradient():
    """Negative gradient over positive gradient."""
    return build_model([(0.0, 1500.0), (100.0, 1480.0), (1000.0, 1520.0)])
