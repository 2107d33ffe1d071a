import logging
import re
from typing import Optional

import numpy as np
import sympy as sp
from sympy.core.function import AppliedUndef
from sympy.parsing.sympy_parser import parse_expr

from ode_config import FALLBACK_SLOPE, SINGULARITY_EPS

logger = logging.getLogger(__name__)


X, Y = sp.symbols("x y", real=True)

COMMON_FUNCS = {
    # trig + hyperbolic
    "sin": sp.sin, "cos": sp.cos, "tan": sp.tan,
    "asin": sp.asin, "acos": sp.acos, "atan": sp.atan,
    "sinh": sp.sinh, "cosh": sp.cosh, "tanh": sp.tanh,
    # exp/log/sqrt/abs
    "exp": sp.exp, "log": sp.log, "ln": sp.log, "sqrt": sp.sqrt,
    "abs": sp.Abs, "Abs": sp.Abs,
    # constants
    "pi": sp.pi, "E": sp.E, "e": sp.E,
}

# Optional "dy/dx =" marker in front of the right-hand side.
_PREFIX_RE = re.compile(r"^\s*dy\s*/\s*dx\s*=\s*")


class EquationCompileError(ValueError):
    """The equation text cannot be turned into a slope function."""

    def __init__(self, expression: str, message: str):
        self.expression = expression
        self.message = message
        super().__init__(f"Cannot parse '{expression}': {message}")


def _normalize_ops(s: str) -> str:
    """Map non-ASCII operator look-alikes to ASCII so parsing is consistent."""
    return (s
        # minus
        .replace("−", "-")
        .replace("–", "-")
        .replace("﹣", "-")
        .replace("－", "-")
        # times
        .replace("×", "*")
        .replace("⋅", "*")
        .replace("·", "*")
        .replace("∙", "*")
        .replace("＊", "*")
        # divide
        .replace("÷", "/")
        .replace("／", "/")
        # power
        .replace("＾", "^")
        # plus
        .replace("＋", "+")
        # parentheses
        .replace("（", "(")
        .replace("）", ")")
    )


def split_equation(raw: str) -> str:
    """
    Return the right-hand side of ``dy/dx = <expr>``.

    Text without the marker is taken as the expression body itself.
    """
    return _PREFIX_RE.sub("", raw or "", count=1).strip()


def normalize_expression(expr: str) -> str:
    return _normalize_ops(expr).replace("^", "**")


def _to_float(value) -> float:
    arr = np.asarray(value)
    if np.iscomplexobj(arr):
        if arr.size != 1 or abs(arr.imag.item()) > 0:
            return float("nan")
        arr = arr.real
    return float(arr)


class CompiledSlopeFunction:
    """
    Numeric slope f(x, y) built from one equation string.

    Calling the object never raises: evaluation failures and non-finite values
    come back as ``FALLBACK_SLOPE``. ``evaluate`` returns the raw value instead
    (NaN on failure) for callers that want to skip gaps rather than flatten them.
    """

    def __init__(self, source: str, body: str, expression: str, func, error: Optional[str] = None):
        self.source = source
        self.body = body
        self.expression = expression
        self.error = error
        self._func = func
        # textual pole markers, checked against the unprocessed body
        self._guard_y = "/y" in body
        self._guard_x = "/x" in body

    @property
    def is_fallback(self) -> bool:
        return self.error is not None

    def evaluate(self, x: float, y: float) -> float:
        try:
            with np.errstate(all="ignore"):
                return _to_float(self._func(x, y))
        except Exception as e:
            logger.debug("Evaluation of %r failed at (%g, %g): %s", self.expression, x, y, e)
            return float("nan")

    def __call__(self, x: float, y: float) -> float:
        if self._guard_y and abs(y) < SINGULARITY_EPS:
            return FALLBACK_SLOPE
        if self._guard_x and abs(x) < SINGULARITY_EPS:
            return FALLBACK_SLOPE
        value = self.evaluate(x, y)
        if not np.isfinite(value):
            return FALLBACK_SLOPE
        return value

    def __repr__(self):
        return f"CompiledSlopeFunction({self.expression!r})"


def compile_equation(raw: str) -> CompiledSlopeFunction:
    """
    Compile ``raw`` into a slope function of (x, y).

    Raises EquationCompileError for empty input, malformed syntax, unknown
    identifiers and calls to undefined functions.
    """
    body = split_equation(raw)
    if not body:
        raise EquationCompileError(raw or "", "the expression is empty")
    expression = normalize_expression(body)

    try:
        expr = parse_expr(expression, local_dict={"x": X, "y": Y, **COMMON_FUNCS})
    except Exception as e:
        raise EquationCompileError(body, f"{type(e).__name__}: {e}") from e

    if not isinstance(expr, sp.Expr):
        raise EquationCompileError(body, "the right-hand side is not an algebraic expression")

    undefined = sorted(str(f.func) for f in expr.atoms(AppliedUndef))
    if undefined:
        raise EquationCompileError(body, "unknown function(s): " + ", ".join(undefined))

    unknown = sorted(s.name for s in expr.free_symbols if s not in (X, Y))
    if unknown:
        raise EquationCompileError(body, "unknown identifier(s): " + ", ".join(unknown))

    func = sp.lambdify((X, Y), expr, "numpy")
    logger.debug("Compiled %r -> %s", raw, expr)
    return CompiledSlopeFunction(raw, body, expression, func)


def zero_function(raw: str = "", error: Optional[str] = None) -> CompiledSlopeFunction:
    """Constant-zero slope used when an equation does not compile."""
    body = split_equation(raw)
    return CompiledSlopeFunction(raw, body, "0", lambda x, y: FALLBACK_SLOPE, error=error or "")


def compile_or_zero(raw: str) -> CompiledSlopeFunction:
    try:
        return compile_equation(raw)
    except EquationCompileError as e:
        logger.warning("Falling back to a zero slope: %s", e)
        return zero_function(raw, error=str(e))
