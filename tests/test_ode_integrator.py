# tests/test_ode_integrator.py
import math

import numpy as np
import pytest

from ode_compiler import compile_equation
from ode_config import IntegrationConfig
from ode_integrator import (
    integrate,
    integrate_box,
    integrate_interval,
    reference_trajectory,
    rk4_step,
)


def test_rk4_step_matches_taylor_series_for_exponential():
    h = 0.1
    y_next, k1, k2, k3, k4 = rk4_step(lambda x, y: y, 0.0, 1.0, h)
    assert k1 == pytest.approx(h)
    assert y_next == pytest.approx(1 + h + h**2 / 2 + h**3 / 6 + h**4 / 24)


class TestIntervalMode:

    def test_parabola_scenario(self):
        f = compile_equation("dy/dx = -x")
        points = integrate_interval(f, 0.0, 1.0, 1.0, 0.1)
        assert points[0] == (0.0, 1.0)
        assert len(points) == 11
        assert points[-1].x == pytest.approx(1.0)
        assert points[-1].y == pytest.approx(0.5, abs=1e-4)

    def test_x_increases_by_h(self):
        f = compile_equation("dy/dx = sin(x*y)")
        h = 0.05
        points = integrate_interval(f, -1.0, 0.5, 2.0, h)
        dx = np.diff([p.x for p in points])
        assert np.all(dx > 0)
        assert dx == pytest.approx(np.full_like(dx, h))
        assert points[-2].x < 2.0 <= points[-1].x + 1e-12

    def test_fourth_order_convergence(self):
        f = compile_equation("dy/dx = y")
        errors = []
        for h in (0.2, 0.1):
            y_end = integrate_interval(f, 0.0, 1.0, 1.0, h)[-1].y
            errors.append(abs(y_end - math.e))
        # halving h should cut the error by about 2**4
        assert errors[0] / errors[1] == pytest.approx(16.0, rel=0.15)

    def test_empty_interval_returns_seed(self):
        points = integrate_interval(lambda x, y: 1.0, 2.0, 3.0, 2.0, 0.1)
        assert points == [(2.0, 3.0)]

    @pytest.mark.parametrize("h", [0.0, -0.1])
    def test_non_positive_step_rejected(self, h):
        with pytest.raises(ValueError):
            integrate_interval(lambda x, y: 0.0, 0.0, 0.0, 1.0, h)

    def test_step_ceiling(self):
        points = integrate_interval(lambda x, y: 0.0, 0.0, 0.0, 100.0, 0.1, max_steps=5)
        assert len(points) == 6


class TestBoxMode:

    def test_growth_scenario_leaves_the_box(self, growth_function, box_config):
        points = integrate_box(growth_function, 0.0, 1.0, box_config.h, box_config)
        steps = len(points) - 1
        assert 0 < steps < box_config.max_steps
        assert all(box_config.contains(x, y) for x, y in points)
        # the next step would cross y = 3
        x_last, y_last = points[-1]
        y_next, *_ = rk4_step(growth_function, x_last, y_last, box_config.h)
        assert y_next > box_config.y_max
        assert y_last == pytest.approx(box_config.y_max, abs=0.5)

    def test_backward_direction(self):
        config = IntegrationConfig(-5, 5, -5, 5, h=0.5, max_steps=100)
        points = integrate_box(lambda x, y: 1.0, 0.0, 0.0, 0.5, config, direction=-1)
        assert points[1] == pytest.approx((-0.5, -0.5))
        assert all(b.x < a.x for a, b in zip(points, points[1:]))

    def test_seed_on_edge_moving_outward(self):
        config = IntegrationConfig(-1, 1, -1, 1, h=0.1, max_steps=50)
        assert integrate_box(lambda x, y: 0.0, 1.0, 0.0, 0.1, config, direction=1) == [(1.0, 0.0)]
        assert integrate_box(lambda x, y: 1.0, 0.0, 1.0, 0.1, config, direction=1) == [(0.0, 1.0)]

    def test_max_steps_ceiling(self):
        config = IntegrationConfig(-1e6, 1e6, -1e6, 1e6, h=0.1, max_steps=10)
        points = integrate_box(lambda x, y: 0.0, 0.0, 0.0, 0.1, config)
        assert len(points) == config.max_steps + 1

    def test_non_finite_stage_stops(self):
        config = IntegrationConfig()
        points = integrate_box(lambda x, y: float("inf"), 0.0, 0.0, 0.1, config)
        assert points == [(0.0, 0.0)]

    def test_nan_after_a_few_steps_stops(self):
        config = IntegrationConfig()
        f = lambda x, y: float("nan") if x > 0.25 else 1.0
        points = integrate_box(f, 0.0, 0.0, 0.1, config)
        assert all(math.isfinite(p.y) for p in points)
        assert len(points) < 5

    def test_invalid_direction(self):
        with pytest.raises(ValueError):
            integrate_box(lambda x, y: 0.0, 0.0, 0.0, 0.1, IntegrationConfig(), direction=2)

    def test_deterministic(self, growth_function, box_config):
        a = integrate_box(growth_function, 0.3, -0.2, box_config.h, box_config)
        b = integrate_box(growth_function, 0.3, -0.2, box_config.h, box_config)
        assert a == b


class TestDispatch:

    def test_number_selects_interval_mode(self):
        points = integrate(lambda x, y: 1.0, 0.0, 0.0, 0.5, 2.0)
        assert len(points) == 5
        assert points[-1].y == pytest.approx(2.0)

    def test_config_selects_box_mode(self):
        config = IntegrationConfig(-1, 1, -1, 1, h=0.5, max_steps=10)
        points = integrate(lambda x, y: 0.0, 0.0, 0.0, 0.5, config)
        assert [p.x for p in points] == pytest.approx([0.0, 0.5, 1.0])

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            integrate(lambda x, y: 0.0, 0.0, 0.0, 0.5, "1.0")


def test_reference_trajectory_tracks_exact_solution():
    f = compile_equation("dy/dx = -x")
    rk4 = integrate_interval(f, 0.0, 1.0, 2.0, 0.1)
    ref = reference_trajectory(f, 0.0, 1.0, [p.x for p in rk4])
    assert len(ref) == len(rk4)
    for x, y in ref:
        assert y == pytest.approx(1 - x**2 / 2, abs=1e-8)


def test_reference_trajectory_needs_two_points():
    assert reference_trajectory(lambda x, y: 0.0, 0.0, 1.0, [0.0]) == []
