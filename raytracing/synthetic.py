from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import numpy as np

from .model import VelocityModel, build_model


@dataclass
class SyntheticProfile:
    """
    A sampled sound-velocity profile together with a short description.
    """

    model: VelocityModel
    metadata: Dict[str, object] | None = None


def _profile(depth: np.ndarray, velocity: np.ndarray) -> VelocityModel:
    return build_model(np.column_stack([depth, velocity]))


def isovelocity_profile(velocity: float = 1500.0, max_depth: float = 1000.0) -> SyntheticProfile:
    """
    Constant sound speed: every ray is a straight line.
    """

    depth = np.array([0.0, max_depth])
    return SyntheticProfile(
        model=_profile(depth, np.full_like(depth, velocity)),
        metadata={"description": "Isovelocity water column.", "v0": float(velocity)},
    )


def linear_gradient_profile(
    v0: float = 1500.0,
    gz: float = 0.017,
    max_depth: float = 1000.0,
    n_nodes: int = 2,
) -> SyntheticProfile:
    """
    Velocity increasing linearly with depth: v(z) = v0 + gz*z.

    Parameters
    ----------
    v0 : float
        Velocity at the surface (m/s).
    gz : float
        Vertical gradient (m/s per metre, positive increases with depth).
        0.017 is the pressure-driven gradient of an isothermal ocean.
    n_nodes : int
        Number of nodes the line is sampled at; all layers share one gradient.
    """

    depth = np.linspace(0.0, max_depth, max(n_nodes, 2))
    return SyntheticProfile(
        model=_profile(depth, v0 + gz * depth),
        metadata={"description": "Linear gradient.", "v0": float(v0), "gz": float(gz)},
    )


def thermocline_profile(
    surface_velocity: float = 1520.0,
    mixed_layer_depth: float = 50.0,
    thermocline_depth: float = 400.0,
    minimum_velocity: float = 1485.0,
    max_depth: float = 2000.0,
    deep_gradient: float = 0.017,
) -> SyntheticProfile:
    """
    Mixed layer over a thermocline over the pressure-dominated deep ocean.

    The mixed layer is isovelocity, the thermocline loses speed down to
    ``minimum_velocity`` and below it velocity climbs again with
    ``deep_gradient``.  Rays launched steeply pass straight through while
    shallow rays bend back toward the surface in the deep layer.
    """

    if not 0.0 < mixed_layer_depth < thermocline_depth < max_depth:
        raise ValueError("depths must satisfy 0 < mixed layer < thermocline < max depth.")
    depth = np.array([0.0, mixed_layer_depth, thermocline_depth, max_depth])
    velocity = np.array(
        [
            surface_velocity,
            surface_velocity,
            minimum_velocity,
            minimum_velocity + deep_gradient * (max_depth - thermocline_depth),
        ]
    )
    return SyntheticProfile(
        model=_profile(depth, velocity),
        metadata={
            "description": "Mixed layer, thermocline and deep gradient.",
            "mixed_layer_depth": float(mixed_layer_depth),
            "thermocline_depth": float(thermocline_depth),
        },
    )


def munk_profile(
    axis_depth: float = 1300.0,
    axis_velocity: float = 1500.0,
    epsilon: float = 0.00737,
    max_depth: float = 5000.0,
    n_nodes: int = 101,
) -> SyntheticProfile:
    """
    Munk's canonical deep-water sound channel, sampled at ``n_nodes`` depths.

    c(z) = c1 * (1 + eps * (eta - 1 + exp(-eta))), eta = 2 (z - z1) / B,
    with the scale depth B equal to the axis depth.
    """

    depth = np.linspace(0.0, max_depth, max(n_nodes, 2))
    eta = 2.0 * (depth - axis_depth) / axis_depth
    velocity = axis_velocity * (1.0 + epsilon * (eta - 1.0 + np.exp(-eta)))
    return SyntheticProfile(
        model=_profile(depth, velocity),
        metadata={
            "description": "Munk sound channel.",
            "axis_depth": float(axis_depth),
            "axis_velocity": float(axis_velocity),
        },
    )


def create_profile(kind: str = "thermocline", **kwargs) -> SyntheticProfile:
    """
    Dispatch factory for the synthetic profiles.

    Parameters
    ----------
    kind:
        One of "isovelocity", "gradient", "thermocline" or "munk".
    """

    kind = kind.lower()
    if kind == "isovelocity":
        return isovelocity_profile(**kwargs)
    if kind == "gradient":
        return linear_gradient_profile(**kwargs)
    if kind == "thermocline":
        return thermocline_profile(**kwargs)
    if kind == "munk":
        return munk_profile(**kwargs)
    raise ValueError(
        "Unknown profile kind. Use 'isovelocity', 'gradient', 'thermocline' or 'munk'."
    )
