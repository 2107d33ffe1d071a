"""
Fixed-step classical Runge-Kutta (RK4) integration of dy/dx = f(x, y).

Two modes are provided:

- interval mode (``integrate_interval``): march from x0 while x < x_end,
  keeping every step. Used by the solver page.
- box mode (``integrate_box``): march at most ``max_steps`` times, stopping
  before the first point that leaves the configured rectangle or the first
  non-finite stage. Used by the slope-field page, once per direction.

Both are deterministic and always terminate.
"""

import logging
from numbers import Real
from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np
from scipy.integrate import solve_ivp

from ode_config import DEFAULT_INTERVAL_CEILING, IntegrationConfig
from ode_models import Point, Trajectory

logger = logging.getLogger(__name__)

SlopeFunction = Callable[[float, float], float]


def rk4_step(f: SlopeFunction, x: float, y: float, h: float) -> Tuple[float, float, float, float, float]:
    """
    Take one RK4 step from (x, y).

    Returns (y_next, k1, k2, k3, k4) so callers can inspect the stages.
    """
    k1 = h * f(x, y)
    k2 = h * f(x + h / 2, y + k1 / 2)
    k3 = h * f(x + h / 2, y + k2 / 2)
    k4 = h * f(x + h, y + k3)
    y_next = y + (k1 + 2 * k2 + 2 * k3 + k4) / 6
    return y_next, k1, k2, k3, k4


def integrate_interval(
    f: SlopeFunction,
    x0: float,
    y0: float,
    x_end: float,
    h: float,
    max_steps: int = DEFAULT_INTERVAL_CEILING,
) -> Trajectory:
    if not h > 0:
        raise ValueError(f"Step size must be positive, got {h}.")

    x0, y0, x_end, h = float(x0), float(y0), float(x_end), float(h)
    points = [Point(x0, y0)]
    x, y = x0, y0
    n = 0
    while x < x_end:
        if n >= max_steps:
            logger.warning("Interval integration stopped at the %d-step ceiling (x=%g).", max_steps, x)
            break
        y, *_ = rk4_step(f, x, y, h)
        n += 1
        # x from the step count, not by repeated addition, to avoid drift
        x = x0 + n * h
        points.append(Point(x, y))
    return points


def integrate_box(
    f: SlopeFunction,
    x0: float,
    y0: float,
    h: float,
    config: IntegrationConfig,
    direction: int = 1,
    max_steps: Optional[int] = None,
) -> Trajectory:
    if direction not in (1, -1):
        raise ValueError(f"direction must be +1 or -1, got {direction}.")
    max_steps = config.max_steps if max_steps is None else int(max_steps)

    x0, y0 = float(x0), float(y0)
    step = direction * abs(float(h))
    points = [Point(x0, y0)]
    x, y = x0, y0
    for n in range(1, max_steps + 1):
        y_next, k1, k2, k3, k4 = rk4_step(f, x, y, step)
        x_next = x0 + n * step
        if not np.all(np.isfinite([k1, k2, k3, k4, x_next, y_next])):
            logger.debug("Non-finite RK4 stage after %d steps from (%g, %g).", n - 1, x0, y0)
            break
        if not config.contains(x_next, y_next):
            logger.debug("Left the domain after %d steps from (%g, %g).", n - 1, x0, y0)
            break
        x, y = x_next, y_next
        points.append(Point(x, y))
    return points


def integrate(
    f: SlopeFunction,
    x0: float,
    y0: float,
    h: float,
    bounds_or_x_end: Union[float, IntegrationConfig],
    max_steps: Optional[int] = None,
) -> Trajectory:
    """Dispatch to interval mode (number) or forward box mode (config)."""
    if isinstance(bounds_or_x_end, IntegrationConfig):
        return integrate_box(f, x0, y0, h, bounds_or_x_end, direction=1, max_steps=max_steps)
    if isinstance(bounds_or_x_end, Real):
        ceiling = DEFAULT_INTERVAL_CEILING if max_steps is None else max_steps
        return integrate_interval(f, x0, y0, bounds_or_x_end, h, max_steps=ceiling)
    raise TypeError(f"Expected an x_end number or an IntegrationConfig, got {type(bounds_or_x_end).__name__}.")


def reference_trajectory(f: SlopeFunction, x0: float, y0: float, xs: Sequence[float]) -> Trajectory:
    """
    High-accuracy comparison solution at the abscissae ``xs`` (DOP853).

    Returns whatever prefix the solver managed to cover; an empty list when
    there is nothing to evaluate.
    """
    xs = np.asarray(xs, dtype=float)
    if xs.size < 2 or xs[-1] <= x0:
        return []

    def rhs(x, yvec):
        return [f(x, yvec[0])]

    t_eval = xs[(xs >= x0) & (xs <= xs[-1])]
    sol = solve_ivp(rhs, (float(x0), float(xs[-1])), [float(y0)],
                    method="DOP853", t_eval=t_eval, rtol=1e-10, atol=1e-12)
    if not sol.success:
        logger.info("Reference solve stopped early: %s", sol.message)
    return [Point(float(t), float(v)) for t, v in zip(sol.t, sol.y[0])]
