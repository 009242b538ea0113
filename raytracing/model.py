from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Sequence, Tuple

import numpy as np

from .config import GRADIENT_TOLERANCE
from .exceptions import AllocationError, InvalidProfileError, NotEnoughNodesError

logger = logging.getLogger(__name__)

Node = Tuple[float, float]


class LayerMode(Enum):
    HOMOGENEOUS = 0
    GRADIENT = 1


@dataclass(frozen=True)
class Layer:
    """
    Read-only view of one layer between two adjacent profile nodes.
    """

    index: int
    depth_top: float
    depth_bottom: float
    vel_top: float
    vel_bottom: float
    gradient: float
    mode: LayerMode
    depth_center: float

    @property
    def thickness(self) -> float:
        return self.depth_bottom - self.depth_top

    def velocity_at(self, depth: float) -> float:
        return self.vel_top + (depth - self.depth_top) * self.gradient

    def contains(self, depth: float) -> bool:
        return self.depth_top <= depth <= self.depth_bottom


def _readonly(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class VelocityModel:
    """
    Horizontally stratified sound-velocity profile.

    The profile is given as depth/velocity nodes; consecutive nodes bound a
    layer in which velocity varies linearly with depth.  Depth is positive
    downward, expressed in metres, and velocity in m/s.  All arrays are
    read-only so that one model can be shared by any number of traces.

    Parameters
    ----------
    depth : sequence of floats
        Node depths, strictly increasing.
    velocity : sequence of floats
        Sound velocity at each node, strictly positive.
    """

    depth: np.ndarray
    velocity: np.ndarray
    gradient: np.ndarray = field(init=False, repr=False)
    mode: Tuple[LayerMode, ...] = field(init=False, repr=False)
    depth_center: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        try:
            depth = np.array(self.depth, dtype=float)
            velocity = np.array(self.velocity, dtype=float)
        except MemoryError as exc:
            raise AllocationError("could not allocate the velocity model nodes.") from exc
        except (TypeError, ValueError) as exc:
            raise InvalidProfileError(f"velocity profile is not numeric: {exc}") from exc

        if depth.ndim != 1 or velocity.ndim != 1:
            raise InvalidProfileError("depth and velocity must be 1-D.")
        if depth.size != velocity.size:
            raise InvalidProfileError("depth and velocity must have equal length.")
        if depth.size < 2:
            raise NotEnoughNodesError(int(depth.size))
        if not (np.all(np.isfinite(depth)) and np.all(np.isfinite(velocity))):
            raise InvalidProfileError("depth and velocity must be finite.")
        if np.any(np.diff(depth) <= 0.0):
            raise InvalidProfileError("node depths must be strictly increasing.")
        if np.any(velocity <= 0.0):
            raise InvalidProfileError("velocities must be strictly positive.")

        try:
            gradient = np.diff(velocity) / np.diff(depth)
            gradient_layer = np.abs(gradient) > GRADIENT_TOLERANCE
            depth_center = np.zeros_like(gradient)
        except MemoryError as exc:
            raise AllocationError("could not allocate the velocity model layers.") from exc
        depth_center[gradient_layer] = (
            depth[:-1][gradient_layer] - velocity[:-1][gradient_layer] / gradient[gradient_layer]
        )
        mode = tuple(
            LayerMode.GRADIENT if flag else LayerMode.HOMOGENEOUS for flag in gradient_layer
        )

        object.__setattr__(self, "depth", _readonly(depth))
        object.__setattr__(self, "velocity", _readonly(velocity))
        object.__setattr__(self, "gradient", _readonly(gradient))
        object.__setattr__(self, "mode", mode)
        object.__setattr__(self, "depth_center", _readonly(depth_center))

    @classmethod
    def from_nodes(cls, nodes: Sequence[Node]) -> "VelocityModel":
        try:
            array = np.array(nodes, dtype=float)
        except MemoryError as exc:
            raise AllocationError("could not allocate the velocity model nodes.") from exc
        except (TypeError, ValueError) as exc:
            raise InvalidProfileError(f"nodes must be (depth, velocity) pairs: {exc}") from exc
        if array.size == 0:
            raise NotEnoughNodesError(0)
        if array.ndim != 2 or array.shape[1] != 2:
            raise InvalidProfileError("nodes must be shaped (N, 2).")
        return cls(depth=array[:, 0], velocity=array[:, 1])

    @property
    def n_nodes(self) -> int:
        return int(self.depth.size)

    @property
    def n_layers(self) -> int:
        return int(self.depth.size - 1)

    @property
    def n_homogeneous(self) -> int:
        return sum(1 for mode in self.mode if mode is LayerMode.HOMOGENEOUS)

    @property
    def top(self) -> float:
        return float(self.depth[0])

    @property
    def bottom(self) -> float:
        return float(self.depth[-1])

    @property
    def depth_top(self) -> np.ndarray:
        return self.depth[:-1]

    @property
    def depth_bottom(self) -> np.ndarray:
        return self.depth[1:]

    @property
    def vel_top(self) -> np.ndarray:
        return self.velocity[:-1]

    @property
    def vel_bottom(self) -> np.ndarray:
        return self.velocity[1:]

    @property
    def nodes(self) -> np.ndarray:
        return np.column_stack([self.depth, self.velocity])

    def layer(self, index: int) -> Layer:
        """
        Return the view of layer ``index``.
        """

        if index < 0 or index >= self.n_layers:
            raise IndexError(f"layer index {index} out of range for {self.n_layers} layers.")
        return Layer(
            index=index,
            depth_top=float(self.depth[index]),
            depth_bottom=float(self.depth[index + 1]),
            vel_top=float(self.velocity[index]),
            vel_bottom=float(self.velocity[index + 1]),
            gradient=float(self.gradient[index]),
            mode=self.mode[index],
            depth_center=float(self.depth_center[index]),
        )

    @property
    def layers(self) -> Tuple[Layer, ...]:
        return tuple(self.layer(i) for i in range(self.n_layers))

    def __iter__(self) -> Iterator[Layer]:
        return iter(self.layers)

    def __len__(self) -> int:
        return self.n_layers

    def layer_index(self, depth: float) -> int:
        """
        Find the layer containing ``depth``, or -1 if it lies outside the model.

        Layers are scanned from the top and the last match is kept, so a
        depth on a node selects the layer for which that node is the top.
        """

        found = -1
        for i in range(self.n_layers):
            if self.depth[i] <= depth <= self.depth[i + 1]:
                found = i
        return found

    def velocity_at(self, depth):
        """
        Linearly interpolated velocity at the given depth(s).

        Depths outside the model are clamped to the nearest node velocity.
        """

        return np.interp(depth, self.depth, self.velocity)

    def depth_profile(self, sampling: int = 200) -> Tuple[np.ndarray, np.ndarray]:
        """
        Return sampled depth/velocity profile for plotting.
        """

        z = np.linspace(self.top, self.bottom, sampling)
        return z, self.velocity_at(z)


def build_model(nodes: Sequence[Node]) -> VelocityModel:
    """
    Build a velocity model from ordered ``(depth, velocity)`` nodes.

    Each pair of adjacent nodes becomes a layer with a constant velocity
    gradient.  Layers whose gradient magnitude does not exceed
    :data:`~raytracing.config.GRADIENT_TOLERANCE` are homogeneous and are
    traversed by straight lines; the others are gradient layers, for which
    the depth where the extrapolated velocity reaches zero is stored as the
    centre of ray curvature.

    Raises
    ------
    NotEnoughNodesError
        Fewer than two nodes were given.
    InvalidProfileError
        Nodes are malformed, unsorted or carry non-positive velocities.
    AllocationError
        The node or layer arrays could not be allocated.
    """

    model = VelocityModel.from_nodes(nodes)
    logger.debug(
        "Built velocity model: %d layers (%d homogeneous) between %.2f and %.2f m",
        model.n_layers,
        model.n_homogeneous,
        model.top,
        model.bottom,
    )
    return model
