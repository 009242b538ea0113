from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .exceptions import InvalidTraceParameterError, SourceDepthOutOfRangeError
from .geometry import BeamFan, correct_takeoff_angle
from .model import VelocityModel
from .plotting import PlotConfig, PlotRecorder, PlotSamples
from .solvers import LayerSolver
from .state import RayState, RayStatus, SSVMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraceResult:
    """
    End point of a traced ray.

    ``x`` is signed like the launch angle; ``z`` is depth, positive down.
    ``travel_time`` is the one-way time actually spent, which is shorter
    than the requested time only when the ray left the model.
    """

    x: float
    z: float
    travel_time: float
    status: RayStatus
    plot: PlotSamples | None = None

    @property
    def out_of_bounds(self) -> bool:
        return self.status.out_of_bounds


def trace(
    model: VelocityModel,
    source_depth: float,
    source_angle: float,
    end_time: float,
    ssv_mode: SSVMode = SSVMode.NONE,
    surface_vel: float = 0.0,
    null_angle: float = 0.0,
    plot: PlotConfig | None = None,
    log: logging.Logger | None = None,
) -> TraceResult:
    """
    Trace a ray through a layered velocity model.

    The ray leaves ``source_depth`` at ``source_angle`` degrees from
    vertical (negative angles go to negative ``x``) and is followed until
    ``end_time`` seconds have elapsed or it leaves the top or bottom of the
    model.

    Parameters
    ----------
    model:
        Velocity model; it is only read.
    source_depth:
        Depth of the source, within the model.
    source_angle:
        Takeoff angle in degrees; 90 or more starts the ray heading up.
    end_time:
        One-way travel time budget in seconds.
    ssv_mode, surface_vel, null_angle:
        Surface sound velocity correction of the takeoff angle, see
        :func:`~raytracing.geometry.correct_takeoff_angle`.
    plot:
        Optional raypath recording.
    log:
        Logger receiving per-step debug records; defaults to this module's.

    Raises
    ------
    SourceDepthOutOfRangeError
        ``source_depth`` is not within the model.
    InvalidTraceParameterError
        The angle is not within [-180, 180] degrees or the travel time is
        not a usable number.
    """

    log = log if log is not None else logger
    if not np.isfinite(source_angle) or abs(source_angle) > 180.0:
        raise InvalidTraceParameterError(
            f"source angle must be finite and within [-180, 180] degrees, got {source_angle}."
        )
    if not np.isfinite(end_time) or end_time < 0.0:
        raise InvalidTraceParameterError(
            f"end time must be finite and non-negative, got {end_time}."
        )

    layer_index = model.layer_index(source_depth)
    if layer_index == -1:
        log.error("Ray source depth %s not within model", source_depth)
        raise SourceDepthOutOfRangeError(source_depth, model.top, model.bottom)
    v_source = model.layer(layer_index).velocity_at(source_depth)

    angle = correct_takeoff_angle(source_angle, v_source, ssv_mode, surface_vel, null_angle)
    sign_x = 1 if angle >= 0.0 else -1
    state = RayState.launch(
        source_depth, layer_index, abs(angle), v_source, end_time, sign_x=sign_x
    )

    recorder = PlotRecorder(plot)
    if recorder.enabled:
        recorder.record(0.0, state.z, 0.0)

    log.debug(
        "Tracing ray from %.3f m at %.4f deg (layer %d, v=%.3f m/s, p=%.6e s/m) for %.6f s",
        source_depth, angle, layer_index, v_source, state.p, end_time,
    )

    solver = LayerSolver(model, state, recorder, log)
    while state.active:
        step = solver.step()
        state.tt += step.dt
        state.check_bounds(model.n_layers)
        state.x, state.z = step.xf, step.zf

    log.debug(
        "Ray finished %s at x=%.3f m, z=%.3f m after %.6f s",
        state.status.name, sign_x * state.x, state.z, state.tt,
    )
    return TraceResult(
        x=float(sign_x * state.x),
        z=float(state.z),
        travel_time=float(state.tt),
        status=state.status,
        plot=recorder.samples(),
    )


@dataclass(frozen=True)
class SwathSoundings:
    """
    Soundings computed for every beam of a fan.

    Beams without a usable travel time carry NaN and a ``None`` status.
    """

    acrosstrack: np.ndarray
    depth: np.ndarray
    travel_time: np.ndarray
    status: Tuple[RayStatus | None, ...]
    paths: Tuple[PlotSamples | None, ...]
    static_shift: float = 0.0

    @property
    def n_beams(self) -> int:
        return int(self.acrosstrack.size)

    @property
    def valid(self) -> np.ndarray:
        return np.isfinite(self.depth)


def trace_swath(
    model: VelocityModel,
    source_depth: float,
    fan: BeamFan,
    ssv_mode: SSVMode = SSVMode.NONE,
    surface_vel: float = 0.0,
    two_way: bool = True,
    plot: PlotConfig | None = None,
    log: logging.Logger | None = None,
) -> SwathSoundings:
    """
    Trace every beam of a fan and collect acrosstrack distance and depth.

    Travel times are halved when ``two_way`` is set.  Beams without a
    usable angle or travel time are skipped.  If the sonar sits
    above the top of the profile the rays start at the top and the depth
    difference is added back to every sounding as a static shift.
    """

    log = log if log is not None else logger
    static_shift = 0.0
    trace_depth = source_depth
    if source_depth < model.top:
        static_shift = source_depth - model.top
        trace_depth = model.top
        log.warning(
            "Sonar depth %.3f m is shallower than the top of the profile (%.3f m); "
            "raytracing from the top followed by a static shift of %.3f m",
            source_depth, model.top, static_shift,
        )

    n_beams = fan.n_beams
    acrosstrack = np.full(n_beams, np.nan)
    depth = np.full(n_beams, np.nan)
    travel_time = np.full(n_beams, np.nan)
    status: List[RayStatus | None] = []
    paths: List[PlotSamples | None] = []

    for i, (angle, beam_time, null_angle) in enumerate(fan.beams()):
        if not np.isfinite(beam_time) or beam_time <= 0.0 or not abs(angle) <= 180.0:
            log.debug("Skipping beam %d without usable angle or travel time", i)
            status.append(None)
            paths.append(None)
            continue
        result = trace(
            model,
            trace_depth,
            angle,
            0.5 * beam_time if two_way else beam_time,
            ssv_mode=ssv_mode,
            surface_vel=surface_vel,
            null_angle=null_angle,
            plot=plot,
            log=log,
        )
        acrosstrack[i] = result.x
        depth[i] = result.z + static_shift
        travel_time[i] = result.travel_time
        status.append(result.status)
        if result.plot is not None and static_shift != 0.0:
            paths.append(PlotSamples(result.plot.x, result.plot.z + static_shift, result.plot.t))
        else:
            paths.append(result.plot)

    return SwathSoundings(
        acrosstrack=acrosstrack,
        depth=depth,
        travel_time=travel_time,
        status=tuple(status),
        paths=tuple(paths),
        static_shift=static_shift,
    )
