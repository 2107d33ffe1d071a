# tests/test_ode_compiler.py
import math

import pytest

from ode_compiler import (
    EquationCompileError,
    compile_equation,
    compile_or_zero,
    normalize_expression,
    split_equation,
)


class TestSplitAndNormalize:

    @pytest.mark.parametrize("raw, body", [
        ("dy/dx = x + y", "x + y"),
        ("  dy / dx=  -x", "-x"),
        ("dy/dx=sin(x)", "sin(x)"),
        ("x*y", "x*y"),
        ("", ""),
    ])
    def test_split_equation(self, raw, body):
        assert split_equation(raw) == body

    def test_prefix_is_case_sensitive(self):
        assert split_equation("DY/DX = x") == "DY/DX = x"

    def test_power_and_unicode_operators(self):
        assert normalize_expression("x^2 − y × 3") == "x**2 - y * 3"


class TestCompileEquation:

    def test_basic_evaluation(self):
        f = compile_equation("dy/dx = x + y")
        assert f(1.0, 2.0) == pytest.approx(3.0)

    def test_without_prefix(self):
        f = compile_equation("x*y")
        assert f(2.0, 3.0) == pytest.approx(6.0)

    def test_caret_is_power(self):
        f = compile_equation("dy/dx = x^2 + y^2")
        assert f(3.0, 4.0) == pytest.approx(25.0)

    def test_named_functions(self):
        f = compile_equation("dy/dx = sin(x) + cos(y) + exp(0) + log(1) + sqrt(4) + tan(0)")
        assert f(0.0, 0.0) == pytest.approx(0.0 + 1.0 + 1.0 + 0.0 + 2.0 + 0.0)

    def test_constant_expression(self):
        f = compile_equation("dy/dx = 2")
        assert f(10.0, -3.0) == pytest.approx(2.0)

    def test_deterministic_across_compiles(self):
        f1 = compile_equation("dy/dx = x*sin(y) - y^2/3")
        f2 = compile_equation("dy/dx = x*sin(y) - y^2/3")
        for x, y in [(0.0, 0.0), (1.5, -2.0), (-3.2, 0.7)]:
            assert f1(x, y) == f2(x, y)

    @pytest.mark.parametrize("raw", ["dy/dx = x +", "dy/dx = (x", "dy/dx = x + z", "dy/dx = foo(x)", "", "dy/dx ="])
    def test_compile_errors(self, raw):
        with pytest.raises(EquationCompileError):
            compile_equation(raw)

    def test_compile_error_is_value_error(self):
        with pytest.raises(ValueError) as excinfo:
            compile_equation("dy/dx = x + q")
        assert "q" in str(excinfo.value)


class TestSlopeGuards:

    def test_division_by_x_near_zero(self):
        f = compile_equation("dy/dx = y/x")
        assert f(0.0, 1.0) == 0.0
        assert f(5e-11, 1.0) == 0.0
        assert f(2.0, 4.0) == pytest.approx(2.0)

    def test_division_by_y_near_zero(self):
        f = compile_equation("dy/dx = 1/y")
        assert f(3.0, 0.0) == 0.0
        assert f(3.0, 0.5) == pytest.approx(2.0)

    def test_runtime_failure_maps_to_zero(self):
        f = compile_equation("dy/dx = 1/(x - 1)")
        assert f(1.0, 0.0) == 0.0
        assert math.isnan(f.evaluate(1.0, 0.0))

    def test_non_finite_maps_to_zero(self):
        f = compile_equation("dy/dx = sqrt(x)")
        assert f(-1.0, 0.0) == 0.0
        assert math.isnan(f.evaluate(-1.0, 0.0))

    def test_infinite_maps_to_zero(self):
        f = compile_equation("dy/dx = log(x)")
        assert f(0.0, 0.0) == 0.0
        assert f(1.0, 0.0) == pytest.approx(0.0)


class TestCompileOrZero:

    def test_fallback_on_malformed(self):
        f = compile_or_zero("dy/dx = x +")
        assert f.is_fallback
        assert f.error
        assert f(1.0, 2.0) == 0.0
        assert f.evaluate(-3.0, 7.0) == 0.0

    def test_valid_equation_is_not_fallback(self):
        f = compile_or_zero("dy/dx = -x")
        assert not f.is_fallback
        assert f(2.0, 0.0) == pytest.approx(-2.0)
