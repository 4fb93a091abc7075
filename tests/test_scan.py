import math

import pytest

from graphcalc import (
    bisect_sign_change, compile_expression, derivative, find_extrema, find_roots, refine_extremum,
)
from graphcalc.finite_diff import derivative_many, scan_step


def test_central_difference():
    f = compile_expression("x^3")
    assert derivative(f, 2.0) == pytest.approx(12.0, rel=1e-6)
    assert derivative(compile_expression("sqrt(x)"), 0.0) is None
    ds = derivative_many(f, [0.0, 1.0, 2.0])
    assert ds[1] == pytest.approx(3.0, rel=1e-6)


def test_scan_step_scales_with_interval():
    assert scan_step(-10, 10, 500) == pytest.approx(20 / 500 * 0.001)


def test_roots_of_quadratic():
    roots = find_roots(compile_expression("x^2 - 4"), -5, 5)
    assert len(roots) == 2
    assert roots[0] == pytest.approx(-2, abs=1e-9)
    assert roots[1] == pytest.approx(2, abs=1e-9)


def test_roots_of_sine_are_ordered_and_distinct():
    roots = find_roots(compile_expression("sin(x)"), -10, 10)
    expected = [k * math.pi for k in range(-3, 4)]
    assert roots == pytest.approx(expected, abs=1e-9)
    assert all(b - a > 1e-8 for a, b in zip(roots, roots[1:]))


def test_root_on_grid_point_is_reported_once():
    # 0 is an exact grid point of linspace(-1, 1, 501)
    roots = find_roots(compile_expression("x"), -1, 1)
    assert roots == pytest.approx([0.0], abs=1e-12)


def test_no_bracket_across_undefined_region():
    # negative for x < -1, positive for x > 1, undefined in between
    roots = find_roots(compile_expression("x*sqrt(x^2 - 1)"), -2, 2)
    assert all(abs(abs(r) - 1) < 1e-2 for r in roots)


def test_pole_without_usable_sample_is_not_a_root():
    roots = find_roots(compile_expression("1/x"), -1, 1)
    assert roots == []


@pytest.mark.parametrize("a, b", [(1, 1), (3, -3)])
def test_empty_or_inverted_interval(a, b):
    f = compile_expression("x")
    assert find_roots(f, a, b) == []
    assert find_extrema(f, a, b) == []


def test_extremum_of_parabola():
    ext = find_extrema(compile_expression("x^2"), -10, 10)
    assert len(ext) == 1
    assert ext[0].kind == "min"
    assert ext[0].x == pytest.approx(0, abs=1e-6)
    assert ext[0].y == pytest.approx(0, abs=1e-9)


def test_extrema_of_sine_alternate():
    ext = find_extrema(compile_expression("sin(x)"), 0, 2 * math.pi)
    assert [e.kind for e in ext] == ["max", "min"]
    assert ext[0].x == pytest.approx(math.pi / 2, abs=1e-6)
    assert ext[0].y == pytest.approx(1.0, abs=1e-9)
    assert ext[1].x == pytest.approx(3 * math.pi / 2, abs=1e-6)
    assert ext[1].y == pytest.approx(-1.0, abs=1e-9)


def test_cubic_extrema():
    ext = find_extrema(compile_expression("x^3 - 3x"), -3, 3)
    assert [(e.kind, round(e.x, 6)) for e in ext] == [("max", -1.0), ("min", 1.0)]


def test_everywhere_undefined_function_scans_empty():
    f = compile_expression("sqrt(-1-x^2)")
    assert find_roots(f, -10, 10) == []
    assert find_extrema(f, -10, 10) == []


def test_bisect_returns_value_inside_narrow_bracket():
    f = compile_expression("x - 0.3")
    a, b = 0.3 - 1e-14, 0.3 + 1e-14
    r = bisect_sign_change(f.sample, a, b)
    assert a <= r <= b


def test_bisect_converges():
    f = compile_expression("x^2 - 2")
    assert bisect_sign_change(f.sample, 1, 2) == pytest.approx(math.sqrt(2), abs=1e-12)


def test_refine_extremum_aborts_on_unusable_samples():
    f = compile_expression("sqrt(x)")
    assert refine_extremum(f, -2, -1, 1e-6) is None
    x, y = refine_extremum(compile_expression("-(x - 1)^2"), 0, 3, 1e-6)
    assert x == pytest.approx(1, abs=1e-6)
