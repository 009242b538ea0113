"""
Gradient-layer acoustic ray tracing for swath sonar.

This package turns the launch angle and travel time of a sonar beam into
horizontal range and depth by tracing the ray through a sound-velocity
profile made of layers with a constant velocity gradient.  Rays follow
circular arcs through gradient layers and straight lines through
homogeneous ones.  A Streamlit explorer in ``app.py`` draws ray fans for
the synthetic profiles shipped here.
"""

from .exceptions import (
    AllocationError,
    InvalidProfileError,
    InvalidTraceParameterError,
    ModelError,
    NotEnoughNodesError,
    RayTracingError,
    SourceDepthOutOfRangeError,
    TraceError,
)
from .geometry import ArcGeometry, BeamFan, correct_takeoff_angle, safe_sqrt
from .logging_config import setup_logging
from .model import Layer, LayerMode, VelocityModel, build_model
from .plotting import PlotConfig, PlotMode, PlotRecorder, PlotSamples
from .ray_tracing import SwathSoundings, TraceResult, trace, trace_swath
from .solvers import LayerSolver, Quadrant
from .state import RayState, RayStatus, SSVMode
from .synthetic import (
    SyntheticProfile,
    create_profile,
    isovelocity_profile,
    linear_gradient_profile,
    munk_profile,
    thermocline_profile,
)

__all__ = [
    "AllocationError",
    "InvalidProfileError",
    "InvalidTraceParameterError",
    "ModelError",
    "NotEnoughNodesError",
    "RayTracingError",
    "SourceDepthOutOfRangeError",
    "TraceError",
    "ArcGeometry",
    "BeamFan",
    "correct_takeoff_angle",
    "safe_sqrt",
    "setup_logging",
    "Layer",
    "LayerMode",
    "VelocityModel",
    "build_model",
    "PlotConfig",
    "PlotMode",
    "PlotRecorder",
    "PlotSamples",
    "SwathSoundings",
    "TraceResult",
    "trace",
    "trace_swath",
    "LayerSolver",
    "Quadrant",
    "RayState",
    "RayStatus",
    "SSVMode",
    "SyntheticProfile",
    "create_profile",
    "isovelocity_profile",
    "linear_gradient_profile",
    "munk_profile",
    "thermocline_profile",
]
