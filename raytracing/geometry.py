from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, Tuple

import numpy as np

from .model import Layer
from .state import SSVMode


def safe_sqrt(value: float) -> float:
    """
    Square root clamped at zero.

    Rounding leaves tiny negative arguments when a ray sits exactly on its
    turning depth; those must map to zero rather than NaN.
    """

    return float(np.sqrt(max(0.0, value)))


def hyperbolic_angle(p: float, velocity: float) -> float:
    """
    Hyperbolic angle between a ray's turning point and the depth where the
    velocity is ``velocity``.

    With ``u = 1 / (p * velocity)`` this is ``ln(u + sqrt(u**2 - 1))``, an
    inverse hyperbolic cosine that stays accurate close to the turning point
    where ``acos`` loses precision.  Travel time along a circular arc in a
    layer of gradient ``g`` is the difference of two such angles over ``|g|``.
    """

    ipv = 1.0 / (p * velocity)
    return float(np.log(ipv + safe_sqrt(ipv * ipv - 1.0)))


@dataclass(frozen=True)
class ArcGeometry:
    """
    Circle followed by a ray of parameter ``p`` through a gradient layer.

    The centre lies at the depth where the layer's velocity extrapolates to
    zero; its horizontal position is fixed by the point where the ray enters
    the layer.  ``gradient_sign`` orients the arc: the centre is above the
    layer when velocity increases with depth and below it otherwise.
    """

    radius: float
    xc: float
    zc: float
    gradient: float
    p: float
    depth_top: float
    vel_top: float

    @classmethod
    def through(
        cls, x: float, z: float, p: float, layer: Layer, approaching: bool
    ) -> "ArcGeometry":
        """
        Circle of a ray with parameter ``p`` through ``(x, z)`` in ``layer``.

        ``approaching`` is true while the ray travels toward the apex of the
        circle, in which case the centre is ahead of the ray.
        """

        arc = cls(
            radius=abs(1.0 / (p * layer.gradient)),
            xc=x,
            zc=layer.depth_center,
            gradient=layer.gradient,
            p=p,
            depth_top=layer.depth_top,
            vel_top=layer.vel_top,
        )
        offset = arc.offset(z)
        return replace(arc, xc=x + offset if approaching else x - offset)

    @property
    def gradient_sign(self) -> float:
        return 1.0 if self.gradient > 0.0 else -1.0

    @property
    def apex(self) -> float:
        """Depth where the ray is horizontal."""
        return self.zc + self.gradient_sign * self.radius

    def offset(self, z: float) -> float:
        """
        Horizontal distance from the apex at depth ``z``, ``cos(theta) / |p g|``.

        Near the apex the radius and the distance to the centre are almost
        equal, so the offset is taken from the ray angle at the layer velocity.
        """

        pv = self.p * (self.vel_top + self.gradient * (z - self.depth_top))
        return safe_sqrt((1.0 - pv) * (1.0 + pv)) / abs(self.p * self.gradient)

    def x_before_apex(self, z: float) -> float:
        return self.xc - self.offset(z)

    def x_after_apex(self, z: float) -> float:
        return self.xc + self.offset(z)

    def polar_angle(self, x: float, z: float) -> float:
        """
        Angle of ``(x, z)`` about the centre, zero at the apex.

        The angle grows in the direction of travel and stays within
        ``(-pi/2, pi/2)`` for any point inside the layer.
        """

        return float(np.arctan2(x - self.xc, self.gradient_sign * (z - self.zc)))

    def point_at(self, angle: float) -> Tuple[float, float]:
        return (
            self.xc + self.radius * float(np.sin(angle)),
            self.zc + self.gradient_sign * self.radius * float(np.cos(angle)),
        )

    def time_between(self, angle_start: float, angle_end: float) -> float:
        """
        Travel time along the arc between two polar angles.

        ``atanh(sin(angle))`` is the signed hyperbolic angle of the point
        (see :func:`hyperbolic_angle`), so the time is their difference over
        the gradient magnitude.
        """

        return float(
            abs(np.arctanh(np.sin(angle_end)) - np.arctanh(np.sin(angle_start)))
            / abs(self.gradient)
        )

    def sample(
        self, x0: float, z0: float, x1: float, z1: float, n_segments: int
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Split the arc from ``(x0, z0)`` to ``(x1, z1)`` into ``n_segments``.

        Returns the ``n_segments`` end points of the segments and the travel
        time from ``(x0, z0)`` to each.  The last point is ``(x1, z1)``.
        """

        a0 = self.polar_angle(x0, z0)
        a1 = self.polar_angle(x1, z1)
        angles = a0 + (a1 - a0) * np.arange(1, n_segments + 1) / n_segments
        xs = self.xc + self.radius * np.sin(angles)
        zs = self.zc + self.gradient_sign * self.radius * np.cos(angles)
        times = np.abs(np.arctanh(np.sin(angles)) - np.arctanh(np.sin(a0))) / abs(self.gradient)
        xs[-1] = x1
        zs[-1] = z1
        return xs, zs, times


def correct_takeoff_angle(
    angle: float,
    source_velocity: float,
    ssv_mode: SSVMode,
    surface_vel: float,
    null_angle: float = 0.0,
) -> float:
    """
    Adjust a takeoff angle (degrees) for the surface sound velocity.

    With ``SSVMode.CORRECT`` the angle is taken to have been measured where
    the sound speed was ``surface_vel`` and Snell's law carries it to
    ``source_velocity``; the null angle is ignored.  With
    ``SSVMode.INCORRECT`` the same correction is made relative to the
    receive array's null angle, which is subtracted before and added back
    after.  Nothing changes when ``surface_vel`` is not positive.
    """

    if surface_vel <= 0.0 or ssv_mode is SSVMode.NONE:
        return angle
    reference = null_angle if ssv_mode is SSVMode.INCORRECT else 0.0
    p = np.sin(np.radians(angle - reference)) / surface_vel
    ratio = np.clip(p * source_velocity, -1.0, 1.0)
    return float(reference + np.degrees(np.arcsin(ratio)))


@dataclass(frozen=True)
class BeamFan:
    """
    Launch angles and travel times of one multibeam ping.

    Angles are in degrees from vertical, positive to starboard.  Travel times
    are two-way by default, as recorded by the sonar.
    """

    angles: np.ndarray
    travel_times: np.ndarray
    null_angles: np.ndarray | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "angles", np.atleast_1d(np.asarray(self.angles, dtype=float)))
        object.__setattr__(
            self, "travel_times", np.atleast_1d(np.asarray(self.travel_times, dtype=float))
        )
        if self.angles.ndim != 1:
            raise ValueError("angles must be 1-D")
        if self.travel_times.shape != self.angles.shape:
            raise ValueError("travel_times must match angles in shape")
        if self.null_angles is not None:
            nulls = np.atleast_1d(np.asarray(self.null_angles, dtype=float))
            if nulls.shape != self.angles.shape:
                raise ValueError("null_angles must match angles in shape")
            object.__setattr__(self, "null_angles", nulls)

    @property
    def n_beams(self) -> int:
        return int(self.angles.size)

    def beams(self) -> Iterator[Tuple[float, float, float]]:
        """Yield ``(angle, travel_time, null_angle)`` for every beam."""
        nulls = self.null_angles if self.null_angles is not None else np.zeros_like(self.angles)
        for angle, travel_time, null_angle in zip(
            self.angles, self.travel_times, nulls, strict=True
        ):
            yield float(angle), float(travel_time), float(null_angle)

    @classmethod
    def equiangular(
        cls,
        n_beams: int,
        swath_angle: float,
        travel_time: float,
        null_angles: np.ndarray | None = None,
    ) -> "BeamFan":
        """
        Build a symmetric fan of ``n_beams`` spanning ``swath_angle`` degrees.

        Every beam gets the same travel time, which is convenient for drawing
        wavefronts.
        """

        if n_beams < 1:
            raise ValueError("n_beams must be at least 1.")
        half = 0.5 * swath_angle
        angles = np.linspace(-half, half, n_beams)
        return cls(
            angles=angles,
            travel_times=np.full_like(angles, travel_time),
            null_angles=null_angles,
        )
