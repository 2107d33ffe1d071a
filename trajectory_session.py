import logging
from typing import List, Optional

from ode_compiler import CompiledSlopeFunction, EquationCompileError, compile_equation, split_equation
from ode_config import DEFAULT_INTERVAL_CEILING
from ode_integrator import integrate_interval
from ode_models import SessionState, SolutionStep, SolveResult, Trajectory

logger = logging.getLogger(__name__)


def fmt_num(x, nd: int = 6) -> str:
    """Compact number formatting for the explanation panel."""
    try:
        xf = float(x)
        s = f"{xf:.{nd}g}"
        if s.endswith("."):
            s = s[:-1]
        if s == "-0":
            s = "0"
        return s
    except (TypeError, ValueError):
        return str(x)


class TrajectorySession:
    """
    Solver-mode orchestration: one forward RK4 run over [x0, x_end].

    The session keeps the last successful or failed ``SolveResult``; an empty
    equation leaves it untouched.
    """

    def __init__(self, max_steps: int = DEFAULT_INTERVAL_CEILING):
        self.max_steps = max_steps
        self.state = SessionState.IDLE
        self.function: Optional[CompiledSlopeFunction] = None
        self.result: Optional[SolveResult] = None

    @property
    def trajectory(self) -> Trajectory:
        return self.result.trajectory if self.result else []

    @property
    def steps(self) -> List[SolutionStep]:
        return self.result.steps if self.result else []

    def _fail(self, message: str, state: SessionState) -> SolveResult:
        self.state = state
        self.result = SolveResult(
            trajectory=[],
            steps=[SolutionStep(1, "Error", message, kind="error")],
            error=message,
        )
        return self.result

    def solve(self, equation: str, x0: float, y0: float, x_end: float, h: float) -> Optional[SolveResult]:
        if not equation or not equation.strip():
            logger.debug("Empty equation; keeping the previous result.")
            return None

        self.state = SessionState.COMPILING
        try:
            f = compile_equation(equation)
        except EquationCompileError as e:
            logger.warning("Solver compile failed: %s", e)
            self.function = None
            return self._fail(str(e), SessionState.COMPILE_ERROR)
        self.function = f
        self.state = SessionState.READY

        x0, y0, x_end, h = float(x0), float(y0), float(x_end), float(h)
        if not h > 0:
            return self._fail(f"Step size must be positive, got {fmt_num(h)}.", SessionState.READY)

        trajectory = integrate_interval(f, x0, y0, x_end, h, max_steps=self.max_steps)
        n_steps = len(trajectory) - 1
        steps = [
            SolutionStep(1, "Parse the equation", f"dy/dx = {split_equation(equation)}"),
            SolutionStep(2, "Apply the initial condition", f"y({fmt_num(x0)}) = {fmt_num(y0)}"),
            SolutionStep(
                3,
                "Integrate with classical Runge-Kutta (RK4)",
                f"h = {fmt_num(h)} on [{fmt_num(x0)}, {fmt_num(x_end)}]",
            ),
            SolutionStep(
                4,
                "Done",
                f"{n_steps} steps, {len(trajectory)} points; "
                f"y({fmt_num(trajectory[-1].x)}) ≈ {fmt_num(trajectory[-1].y)}",
            ),
        ]
        logger.info("Solved %r from (%g, %g) to x=%g with h=%g: %d points",
                    equation, x0, y0, x_end, h, len(trajectory))
        self.result = SolveResult(trajectory=trajectory, steps=steps)
        return self.result
