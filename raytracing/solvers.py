"""
Per-layer ray propagation.

A ray of constant parameter ``p`` crossing a layer whose velocity varies
linearly with depth follows an arc of a circle centred at the depth where
the velocity extrapolates to zero.  Which part of the circle the ray is on
depends on its vertical direction and on the sign of the gradient; the four
combinations are the quadrants of :class:`Quadrant`.  Homogeneous layers
are crossed along straight lines, and vertical rays through gradient layers
are handled separately since their circle degenerates.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import NamedTuple

import numpy as np

from .config import (
    HORIZONTAL_RAY_TIME_FACTOR,
    NUMBER_SEGMENTS,
    RAY_PARAMETER_TOLERANCE,
    TRAPPED_RAY_TIME_TOLERANCE,
)
from .geometry import ArcGeometry, hyperbolic_angle
from .model import Layer, LayerMode, VelocityModel
from .plotting import PlotRecorder
from .state import RayState

logger = logging.getLogger(__name__)


class Quadrant(Enum):
    """
    Arc cases for a gradient layer.

    ====  ========  ========  ==========================================
    case  heading   gradient  behaviour
    ====  ========  ========  ==========================================
    1     down      > 0       may turn up before the layer bottom
    2     up        > 0       leaves through the layer top
    3     down      < 0       leaves through the layer bottom
    4     up        < 0       may turn down before the layer top
    ====  ========  ========  ==========================================
    """

    DOWN_INCREASING = 1
    UP_INCREASING = 2
    DOWN_DECREASING = 3
    UP_DECREASING = 4

    @classmethod
    def select(cls, turned: bool, gradient: float) -> "Quadrant":
        match (turned, gradient > 0.0):
            case (False, True):
                return cls.DOWN_INCREASING
            case (True, True):
                return cls.UP_INCREASING
            case (False, False):
                return cls.DOWN_DECREASING
            case (True, False):
                return cls.UP_DECREASING

    @property
    def heading_down(self) -> bool:
        return self in (Quadrant.DOWN_INCREASING, Quadrant.DOWN_DECREASING)

    @property
    def can_turn(self) -> bool:
        """Velocity increases along the ray, so it travels toward its apex."""
        return self in (Quadrant.DOWN_INCREASING, Quadrant.UP_DECREASING)


class Step(NamedTuple):
    xf: float
    zf: float
    dt: float


class LayerSolver:
    """
    Advance a ray through the layer it currently occupies.

    Each :meth:`step` moves the ray either to the boundary of its layer or
    to the point where its travel time runs out, updating the layer index,
    the remaining time and the direction flags of ``state`` as it goes.
    The caller commits the returned end point and accumulates the time.
    """

    def __init__(
        self,
        model: VelocityModel,
        state: RayState,
        recorder: PlotRecorder | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.model = model
        self.state = state
        self.recorder = recorder if recorder is not None else PlotRecorder()
        self.log = log if log is not None else logger

    def step(self) -> Step:
        layer = self.model.layer(self.state.layer)
        if layer.mode is LayerMode.GRADIENT and self.state.p > RAY_PARAMETER_TOLERANCE:
            return self.circular(layer)
        if layer.mode is LayerMode.GRADIENT:
            return self.vertical(layer)
        return self.line(layer)

    def get_depth(self, layer: Layer, beta: float, dir_sign: int, turn_sign: int) -> float:
        """
        Depth reached when the remaining travel time is spent on the arc.

        ``beta`` is the hyperbolic angle of the current position;
        ``dir_sign`` says whether the time moves the ray away from (+1) or
        toward (-1) its apex and ``turn_sign`` is -1 when the apex is passed
        on the way.
        """

        p = self.state.p
        alpha = p * np.exp(dir_sign * self.state.tt_left * abs(layer.gradient) + turn_sign * beta)
        velf = 2.0 * alpha / (alpha * alpha + p * p)
        return float(layer.depth_top + (velf - layer.vel_top) / layer.gradient)

    def circular(self, layer: Layer) -> Step:
        state = self.state
        quadrant = Quadrant.select(state.turned, layer.gradient)
        heading_down = quadrant.heading_down
        arc = ArcGeometry.through(state.x, state.z, state.p, layer, quadrant.can_turn)
        beta = hyperbolic_angle(state.p, layer.velocity_at(state.z))
        grad = abs(layer.gradient)

        if heading_down:
            far_depth, far_vel = layer.depth_bottom, layer.vel_bottom
            near_depth, near_vel = layer.depth_top, layer.vel_top
        else:
            far_depth, far_vel = layer.depth_top, layer.vel_top
            near_depth, near_vel = layer.depth_bottom, layer.vel_bottom

        # the apex is ahead of the ray; it turns here only if it reaches the apex first
        turns_in_layer = quadrant.can_turn and (
            arc.apex < far_depth if heading_down else arc.apex > far_depth
        )

        if turns_in_layer:
            dt = abs(beta / layer.gradient)
            if dt >= state.tt_left:
                zf = self.get_depth(layer, beta, -1, 1)
                xf = arc.x_before_apex(zf)
                dt = self._exhaust(layer)
            else:
                dt = abs((hyperbolic_angle(state.p, near_vel) + beta) / grad)
                if dt <= state.tt_left and self._trapped(layer, near_depth, dt):
                    return self.guided(layer)
                state.turn()
                self.log.debug(
                    "Ray turned in layer %d at depth %.3f m, now %s",
                    layer.index, arc.apex, state.status.name,
                )
                if dt <= state.tt_left:
                    zf = near_depth
                    xf = arc.x_after_apex(zf)
                    self._cross(layer, dt)
                else:
                    zf = self.get_depth(layer, beta, 1, -1)
                    xf = arc.x_after_apex(zf)
                    dt = self._exhaust(layer)
        else:
            dt = abs((hyperbolic_angle(state.p, far_vel) - beta) / grad)
            x_at = arc.x_before_apex if quadrant.can_turn else arc.x_after_apex
            if dt <= state.tt_left:
                zf = far_depth
                xf = x_at(zf)
                self._cross(layer, dt)
            else:
                if quadrant.can_turn:
                    zf = self.get_depth(layer, beta, -1, 1)
                else:
                    zf = self.get_depth(layer, beta, 1, 1)
                xf = x_at(zf)
                dt = self._exhaust(layer)

        self._record_arc(arc, xf, zf, dt)
        return Step(xf, zf, dt)

    def guided(self, layer: Layer) -> Step:
        """
        Horizontal travel along a node at a velocity minimum.

        A ray lying flat on such a node is turned back by the layers on
        both sides within a vanishing time, so it is carried along the node
        at the local velocity for the rest of its travel time.
        """

        state = self.state
        velocity = layer.velocity_at(state.z)
        xf = float(state.x + velocity * state.tt_left)
        zf = state.z
        self.log.debug(
            "Ray trapped at the velocity minimum at %.3f m (layer %d, v=%.3f m/s)",
            zf, layer.index, velocity,
        )
        dt = self._exhaust(layer)
        self._record_point(xf, zf, dt)
        return Step(xf, zf, dt)

    def vertical(self, layer: Layer) -> Step:
        """
        Straight up or down through a gradient layer.

        Velocity along a vertical ray grows or decays exponentially with
        time, so ``dt = |ln(vf / vi) / g|``.
        """

        state = self.state
        vi = layer.velocity_at(state.z)
        if state.heading_down:
            zf, vf = layer.depth_bottom, layer.vel_bottom
        else:
            zf, vf = layer.depth_top, layer.vel_top
        dt = abs(np.log(vf / vi) / layer.gradient)

        if dt >= state.tt_left:
            ratio = np.exp(state.tt_left * layer.gradient)
            vf = vi * ratio if state.heading_down else vi / ratio
            zf = float((vf - layer.vel_top) / layer.gradient + layer.depth_top)
            dt = self._exhaust(layer)
        else:
            self._cross(layer, float(dt))

        xf = state.x
        self._record_point(xf, zf, float(dt))
        return Step(xf, zf, float(dt))

    def line(self, layer: Layer) -> Step:
        """
        Straight line through a homogeneous layer.

        The ray keeps the angle fixed by ``p`` and the layer velocity; an
        up-going ray mirrors it about the horizontal.
        """

        state = self.state
        theta = np.arcsin(min(state.p * layer.vel_top, 1.0))
        xvel = layer.vel_top * np.sin(theta)
        if state.heading_down:
            zf = layer.depth_bottom
            zvel = layer.vel_top * np.cos(theta)
        else:
            zf = layer.depth_top
            zvel = -layer.vel_top * np.cos(theta)
        if zvel != 0.0:
            dt = float((zf - state.z) / zvel)
        else:
            dt = HORIZONTAL_RAY_TIME_FACTOR * state.tt_left

        if dt >= state.tt_left:
            dt = state.tt_left
            xf = float(state.x + xvel * dt)
            zf = float(state.z + zvel * dt)
            self._exhaust(layer)
        else:
            xf = float(state.x + xvel * dt)
            self._cross(layer, dt)

        self._record_point(xf, zf, dt)
        return Step(xf, zf, dt)

    def _trapped(self, layer: Layer, near_depth: float, dt: float) -> bool:
        state = self.state
        if dt > TRAPPED_RAY_TIME_TOLERANCE or state.z != near_depth:
            return False
        # after the turn the ray enters the neighbour across the near boundary
        neighbour = layer.index - 1 if state.heading_down else layer.index + 1
        if not 0 <= neighbour < self.model.n_layers:
            return False
        other = self.model.layer(neighbour)
        if other.mode is not LayerMode.GRADIENT:
            return False
        # it is sent back only if velocity grows away from the boundary there too
        return other.gradient < 0.0 if state.heading_down else other.gradient > 0.0

    def _cross(self, layer: Layer, dt: float) -> None:
        state = self.state
        state.tt_left -= dt
        state.layer += -1 if state.turned else 1
        self.log.debug(
            "Ray left layer %d through its %s after %.6f s",
            layer.index, "top" if state.turned else "bottom", dt,
        )

    def _exhaust(self, layer: Layer) -> float:
        state = self.state
        dt = state.tt_left
        state.tt_left = 0.0
        self.log.debug("Ray travel time exhausted in layer %d", layer.index)
        return dt

    def _record_arc(self, arc: ArcGeometry, xf: float, zf: float, dt: float) -> None:
        recorder = self.recorder
        if not recorder.enabled or recorder.full:
            return
        if recorder.dense:
            xs, zs, ts = arc.sample(self.state.x, self.state.z, xf, zf, NUMBER_SEGMENTS)
            ts = self.state.tt + ts
            ts[-1] = self.state.tt + dt
            recorder.record_many(self.state.sign_x * xs, zs, ts)
        else:
            self._record_point(xf, zf, dt)

    def _record_point(self, xf: float, zf: float, dt: float) -> None:
        if self.recorder.enabled:
            self.recorder.record(self.state.sign_x * xf, zf, self.state.tt + dt)
