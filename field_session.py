import logging
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from ode_compiler import CompiledSlopeFunction, compile_or_zero
from ode_config import DEFAULT_GRID_DENSITY, PALETTE, IntegrationConfig
from ode_integrator import integrate_box
from ode_models import FieldSample, Point, SessionState, SolutionCurve

logger = logging.getLogger(__name__)


def sample_field(
    f: CompiledSlopeFunction,
    bounds: Sequence[float],
    grid_density: int = DEFAULT_GRID_DENSITY,
) -> Iterator[FieldSample]:
    """
    Yield (x, y, slope) on an evenly spaced ``grid_density`` x ``grid_density``
    grid spanning ``bounds`` = (x_min, x_max, y_min, y_max).

    Points where the raw slope is not finite are skipped.
    """
    n = int(grid_density)
    if n < 1:
        return
    x_min, x_max, y_min, y_max = (float(b) for b in bounds)
    if n == 1:
        xs = np.array([(x_min + x_max) / 2])
        ys = np.array([(y_min + y_max) / 2])
    else:
        xs = np.linspace(x_min, x_max, n)
        ys = np.linspace(y_min, y_max, n)

    for x in xs:
        for y in ys:
            slope = f.evaluate(float(x), float(y))
            if np.isfinite(slope):
                yield FieldSample(float(x), float(y), slope)


class FieldSession:
    """
    Visualization-mode orchestration.

    Holds the compiled equation, the integration settings and the growing list
    of user-seeded solution curves. A failed compile degrades to a zero slope
    instead of raising; ``compile_error`` carries the message for display.
    """

    def __init__(self, config: Optional[IntegrationConfig] = None, palette_size: int = len(PALETTE)):
        if palette_size < 1:
            raise ValueError("palette_size must be at least 1")
        self.config = config or IntegrationConfig()
        self.palette_size = palette_size
        self.state = SessionState.IDLE
        self.equation = ""
        self.function: Optional[CompiledSlopeFunction] = None
        self._curves: List[SolutionCurve] = []
        self._next_id = 1

    # ---------- equation ----------
    def set_equation(self, raw: str) -> CompiledSlopeFunction:
        self.state = SessionState.COMPILING
        self.equation = raw or ""
        self.function = compile_or_zero(self.equation)
        self.state = SessionState.COMPILE_ERROR if self.function.is_fallback else SessionState.READY
        logger.info("Equation set to %r (%s)", self.equation, self.state.name)
        return self.function

    @property
    def compile_error(self) -> Optional[str]:
        if self.function is None or not self.function.is_fallback:
            return None
        return self.function.error

    def _ensure_compiled(self) -> CompiledSlopeFunction:
        if self.function is None:
            self.set_equation(self.equation)
        return self.function

    # ---------- settings ----------
    def set_config(self, config: IntegrationConfig) -> None:
        """Replace bounds/step settings. Stored curves are kept as they are."""
        self.config = config

    # ---------- curves ----------
    @property
    def curves(self) -> Tuple[SolutionCurve, ...]:
        return tuple(self._curves)

    def add_curve_at(self, x0: float, y0: float) -> SolutionCurve:
        f = self._ensure_compiled()
        cfg = self.config

        forward = integrate_box(f, x0, y0, cfg.h, cfg, direction=1)
        backward = integrate_box(f, x0, y0, cfg.h, cfg, direction=-1)
        # backward run reversed, seed dropped so it appears once
        head = list(reversed(backward[1:]))
        points = tuple(head + forward)

        curve = SolutionCurve(
            id=self._next_id,
            seed=Point(float(x0), float(y0)),
            points=points,
            color_index=len(self._curves) % self.palette_size,
            seed_index=len(head),
        )
        self._next_id += 1
        self._curves.append(curve)
        logger.debug("Added curve %d at (%g, %g) with %d points", curve.id, x0, y0, curve.point_count)
        return curve

    def remove_curve(self, curve_id: int) -> bool:
        for i, curve in enumerate(self._curves):
            if curve.id == curve_id:
                del self._curves[i]
                return True
        return False

    def clear_curves(self) -> None:
        self._curves.clear()

    def curve_summaries(self) -> List[Dict]:
        return [
            {"id": c.id, "points": c.point_count, "color_index": c.color_index, "seed": c.seed}
            for c in self._curves
        ]

    # ---------- field ----------
    def sample_field(self, bounds: Optional[Sequence[float]] = None,
                     grid_density: int = DEFAULT_GRID_DENSITY) -> Iterator[FieldSample]:
        f = self._ensure_compiled()
        return sample_field(f, bounds if bounds is not None else self.config.bounds, grid_density)
