# -*- coding: utf-8 -*-
import numpy as np
import pytest

from raytracing import LayerSolver, PlotConfig, PlotRecorder, Quadrant, RayState, RayStatus
from raytracing.geometry import hyperbolic_angle


class TestQuadrant:
    @pytest.mark.parametrize(
        "turned,gradient,quadrant,heading_down,can_turn",
        [
            (False, 0.02, Quadrant.DOWN_INCREASING, True, True),
            (True, 0.02, Quadrant.UP_INCREASING, False, False),
            (False, -0.02, Quadrant.DOWN_DECREASING, True, False),
            (True, -0.02, Quadrant.UP_DECREASING, False, True),
        ],
    )
    def test_select(self, turned, gradient, quadrant, heading_down, can_turn):
        selected = Quadrant.select(turned, gradient)
        assert selected is quadrant
        assert selected.heading_down is heading_down
        assert selected.can_turn is can_turn


class TestRayState:
    def test_launch_down(self):
        state = RayState.launch(10.0, 0, 30.0, 1500.0, 1.0)
        assert not state.turned
        assert state.heading_down
        assert state.status is RayStatus.DOWN
        assert state.p == pytest.approx(0.5 / 1500.0)
        assert (state.x, state.z, state.tt, state.tt_left) == (0.0, 10.0, 0.0, 1.0)
        assert state.active

    @pytest.mark.parametrize("angle", [90.0, 135.0, 180.0])
    def test_launch_up(self, angle):
        state = RayState.launch(10.0, 0, angle, 1500.0, 1.0)
        assert state.turned
        assert state.status is RayStatus.UP

    def test_turn_toggles_direction(self):
        state = RayState.launch(10.0, 0, 30.0, 1500.0, 1.0)
        state.turn()
        assert state.status is RayStatus.UP_TURN
        state.turn()
        assert state.status is RayStatus.DOWN_TURN
        assert state.heading_down

    @pytest.mark.parametrize(
        "layer,status", [(-1, RayStatus.OUT_TOP), (3, RayStatus.OUT_BOTTOM)]
    )
    def test_check_bounds(self, layer, status):
        state = RayState.launch(10.0, 0, 30.0, 1500.0, 1.0)
        state.layer = layer
        state.check_bounds(3)
        assert state.status is status
        assert state.out_of_bounds
        assert status.out_of_bounds
        assert not state.active

    def test_time_exhausted(self):
        state = RayState.launch(10.0, 0, 30.0, 1500.0, 1.0)
        state.tt_left = 0.0
        state.check_bounds(3)
        assert state.done
        assert not state.out_of_bounds
        assert state.status is RayStatus.DOWN


class TestLayerSolver:
    def test_line_step_crosses_layer(self, isovelocity):
        state = RayState.launch(0.0, 0, 0.0, 1500.0, 1.0)
        step = LayerSolver(isovelocity, state).step()
        assert (step.xf, step.zf) == (0.0, 1000.0)
        assert step.dt == pytest.approx(1000.0 / 1500.0)
        assert state.layer == 1
        assert state.tt_left == pytest.approx(1.0 - 1000.0 / 1500.0)

    def test_step_does_not_commit_position(self, single_gradient):
        state = RayState.launch(0.0, 0, 30.0, 1500.0, 0.1)
        step = LayerSolver(single_gradient, state).step()
        assert (state.x, state.z) == (0.0, 0.0)
        assert step.dt == 0.1
        assert state.tt_left == 0.0
        assert state.layer == 0

    def test_get_depth_without_time_returns_current_depth(self, single_gradient):
        state = RayState.launch(400.0, 0, 40.0, 1508.0, 0.0)
        layer = single_gradient.layer(0)
        beta = hyperbolic_angle(state.p, 1508.0)
        solver = LayerSolver(single_gradient, state)
        assert solver.get_depth(layer, beta, -1, 1) == pytest.approx(400.0, abs=1e-6)
        assert solver.get_depth(layer, beta, 1, 1) == pytest.approx(400.0, abs=1e-6)

    def test_get_depth_mirrors_about_apex(self, single_gradient):
        state = RayState.launch(400.0, 0, 80.0, 1508.0, 0.0)
        layer = single_gradient.layer(0)
        beta = hyperbolic_angle(state.p, 1508.0)
        state.tt_left = 2.0 * beta / 0.02
        solver = LayerSolver(single_gradient, state)
        # spending twice the time to the apex brings the ray back to its depth
        assert solver.get_depth(layer, beta, 1, -1) == pytest.approx(400.0, abs=1e-6)

    def test_records_into_recorder(self, single_gradient):
        recorder = PlotRecorder(PlotConfig(capacity=10))
        state = RayState.launch(0.0, 0, 30.0, 1500.0, 10.0)
        step = LayerSolver(single_gradient, state, recorder).step()
        samples = recorder.samples()
        assert len(samples) == 5
        assert samples.x[-1] == step.xf
        assert samples.z[-1] == step.zf
        assert np.all(np.diff(samples.z) > 0.0)
