"""
Raypath recording for plots and tables.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from .exceptions import InvalidTraceParameterError


class PlotMode(Enum):
    OFF = 0
    DENSE = 1
    TABLE = 2


@dataclass(frozen=True)
class PlotConfig:
    """
    Requested raypath recording.

    ``DENSE`` samples every circular arc in several segments; ``TABLE``
    keeps a single point per layer step.  At most ``capacity`` samples are
    stored, including the source point.
    """

    mode: PlotMode = PlotMode.DENSE
    capacity: int = 100

    def __post_init__(self) -> None:
        if self.mode is not PlotMode.OFF and self.capacity < 1:
            raise InvalidTraceParameterError("plot capacity must be at least 1.")

    @classmethod
    def from_capacity(cls, nplot_max: int) -> "PlotConfig":
        """
        Decode a signed capacity: positive for dense, negative for table,
        zero for no recording.
        """

        if nplot_max > 0:
            return cls(PlotMode.DENSE, nplot_max)
        if nplot_max < 0:
            return cls(PlotMode.TABLE, -nplot_max)
        return cls(PlotMode.OFF, 0)


@dataclass(frozen=True)
class PlotSamples:
    x: np.ndarray
    z: np.ndarray
    t: np.ndarray

    def __len__(self) -> int:
        return int(self.x.size)

    def as_array(self) -> np.ndarray:
        """Return samples as an ``(N, 3)`` array of ``x, z, t``."""
        return np.column_stack([self.x, self.z, self.t])


class PlotRecorder:
    """
    Fixed-capacity buffer of ``(x, z, t)`` raypath samples.

    Samples past the capacity are dropped without complaint so that a short
    buffer still yields the beginning of the path.
    """

    def __init__(self, config: PlotConfig | None = None) -> None:
        self.config = config if config is not None else PlotConfig(PlotMode.OFF, 0)
        capacity = self.capacity
        self._x = np.empty(capacity, dtype=float)
        self._z = np.empty(capacity, dtype=float)
        self._t = np.empty(capacity, dtype=float)
        self.count = 0

    @property
    def mode(self) -> PlotMode:
        return self.config.mode

    @property
    def capacity(self) -> int:
        return 0 if self.config.mode is PlotMode.OFF else self.config.capacity

    @property
    def enabled(self) -> bool:
        return self.capacity > 0

    @property
    def dense(self) -> bool:
        return self.mode is PlotMode.DENSE

    @property
    def full(self) -> bool:
        return self.count >= self.capacity

    def record(self, x: float, z: float, t: float) -> bool:
        if self.full:
            return False
        self._x[self.count] = x
        self._z[self.count] = z
        self._t[self.count] = t
        self.count += 1
        return True

    def record_many(self, xs: np.ndarray, zs: np.ndarray, ts: np.ndarray) -> int:
        n = min(len(xs), self.capacity - self.count)
        if n <= 0:
            return 0
        self._x[self.count:self.count + n] = xs[:n]
        self._z[self.count:self.count + n] = zs[:n]
        self._t[self.count:self.count + n] = ts[:n]
        self.count += n
        return n

    def samples(self) -> PlotSamples | None:
        if not self.enabled:
            return None
        return PlotSamples(
            x=self._x[:self.count].copy(),
            z=self._z[:self.count].copy(),
            t=self._t[:self.count].copy(),
        )
