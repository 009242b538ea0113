from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


class RayStatus(Enum):
    """
    Where a ray is heading, or how it left the model.

    ``DOWN_TURN`` and ``UP_TURN`` mean the ray has reversed its vertical
    direction at least once and is now heading down or up respectively.
    """

    DOWN = 1
    UP = 2
    DOWN_TURN = 3
    UP_TURN = 4
    OUT_BOTTOM = 5
    OUT_TOP = 6

    @property
    def out_of_bounds(self) -> bool:
        return self in (RayStatus.OUT_BOTTOM, RayStatus.OUT_TOP)


class SSVMode(Enum):
    """
    How the surface sound velocity adjusts the takeoff angle.

    ``NONE``
        Use the takeoff angle as given.
    ``CORRECT``
        The angle was measured with the correct surface sound velocity;
        carry it to the profile velocity at the source with Snell's law.
    ``INCORRECT``
        The surface sound velocity was wrong; apply Snell's law in a frame
        rotated by the receive array's null angle.
    """

    NONE = 0
    CORRECT = 1
    INCORRECT = 2


@dataclass
class RayState:
    """
    Mutable bookkeeping for a single ray trace.

    ``x`` is tracked unsigned, in the direction of the launch azimuth;
    ``sign_x`` is applied only when positions are reported.
    """

    x: float
    z: float
    layer: int
    p: float
    turned: bool
    tt_left: float
    sign_x: int = 1
    tt: float = 0.0
    status: RayStatus = RayStatus.DOWN
    done: bool = False
    out_of_bounds: bool = False

    @classmethod
    def launch(
        cls,
        source_depth: float,
        layer: int,
        angle_deg: float,
        velocity: float,
        end_time: float,
        sign_x: int = 1,
    ) -> "RayState":
        """
        Start a ray at ``source_depth`` with an unsigned takeoff angle in degrees.

        Angles of 90 degrees or more start the ray heading up.
        """

        turned = bool(angle_deg >= 90.0)
        return cls(
            x=0.0,
            z=float(source_depth),
            layer=layer,
            p=float(np.sin(np.radians(angle_deg)) / velocity),
            turned=turned,
            tt_left=float(end_time),
            sign_x=sign_x,
            status=RayStatus.UP if turned else RayStatus.DOWN,
        )

    @property
    def active(self) -> bool:
        return not (self.done or self.out_of_bounds)

    @property
    def heading_down(self) -> bool:
        return not self.turned

    def turn(self) -> None:
        """Reverse the vertical direction of travel."""
        self.turned = not self.turned
        self.status = RayStatus.UP_TURN if self.turned else RayStatus.DOWN_TURN

    def check_bounds(self, n_layers: int) -> None:
        if self.layer < 0:
            self.out_of_bounds = True
            self.status = RayStatus.OUT_TOP
        elif self.layer >= n_layers:
            self.out_of_bounds = True
            self.status = RayStatus.OUT_BOTTOM
        if self.tt_left <= 0.0:
            self.done = True
