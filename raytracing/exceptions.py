"""
Exceptions raised by the ray tracer.

Only bad input is an error. Rays that turn, leave the profile or run out of
travel time are reported through :class:`~raytracing.state.RayStatus`.
"""
from __future__ import annotations


class RayTracingError(ValueError):
    """Base class for every error raised by the package."""


class ModelError(RayTracingError):
    """A velocity profile could not be turned into a model."""


class NotEnoughNodesError(ModelError):
    def __init__(self, n_nodes: int) -> None:
        super().__init__(
            f"a velocity model needs at least 2 depth/velocity nodes, got {n_nodes}."
        )
        self.n_nodes = n_nodes


class InvalidProfileError(ModelError):
    """Nodes are malformed: wrong shape, non-finite, unsorted or non-positive."""


class AllocationError(ModelError, MemoryError):
    """Storage for the node and layer arrays could not be allocated."""


class TraceError(RayTracingError):
    """A ray could not be launched."""


class SourceDepthOutOfRangeError(TraceError):
    def __init__(self, source_depth: float, top: float, bottom: float) -> None:
        super().__init__(
            f"ray source depth {source_depth} m is not within the model "
            f"[{top}, {bottom}] m."
        )
        self.source_depth = source_depth
        self.top = top
        self.bottom = bottom


class InvalidTraceParameterError(TraceError):
    """Launch angle, travel time or plot capacity is unusable."""
