"""Tests for function property analysis."""

import math

import pytest

from function_analyzer import (
    ALL_REAL_NUMBERS,
    ANALYSIS_ERROR,
    RANGE_UNKNOWN,
    AnalysisOptions,
    FiniteDifferenceStrategy,
    FunctionAnalyzer,
    analyze_function,
)
from interval import Interval


def only(*names, **kwargs):
    return AnalysisOptions(analyses=names, **kwargs)


class TestOptions:
    """Validation of requested analyses and the sampling window."""

    def test_defaults(self):
        opts = AnalysisOptions()
        assert opts.window == (-10.0, 10.0)
        assert opts.wants("domain")
        assert opts.wants("periodicity")

    def test_invalid(self):
        with pytest.raises(ValueError):
            AnalysisOptions(analyses={"bogus"})
        with pytest.raises(ValueError):
            AnalysisOptions(window=(5, 1))
        with pytest.raises(ValueError):
            AnalysisOptions(samples=2)

    def test_unrequested_fields_stay_unset(self):
        res = analyze_function("x^2", only("symmetry"))
        assert res.symmetry == "even"
        assert res.domain is None
        assert res.intercepts is None
        assert res.extrema == []


class TestDomain:
    """Rule-table restrictions."""

    def test_unrestricted(self):
        assert analyze_function("x^2 + 1", only("domain")).domain == ALL_REAL_NUMBERS
        assert analyze_function("sqrt(4) * x", only("domain")).domain == ALL_REAL_NUMBERS

    def test_sqrt(self):
        res = analyze_function("sqrt(x - 1)", only("domain"))
        assert res.domain == "x ∈ ℝ such that x - 1 ≥ 0"

    def test_denominator(self):
        res = analyze_function("1/(x - 2)", only("domain"))
        assert res.domain == "x ∈ ℝ such that x - 2 ≠ 0"

    def test_several_rules(self):
        domain = analyze_function("log(x) + sqrt(x + 3)", only("domain")).domain
        assert "x > 0" in domain
        assert "x + 3 ≥ 0" in domain

    def test_tan_and_powers(self):
        assert analyze_function("tan(x)", only("domain")).domain == "x ∈ ℝ such that cos(x) ≠ 0"
        assert analyze_function("x^0.5", only("domain")).domain == "x ∈ ℝ such that x ≥ 0"
        assert analyze_function("x^-2", only("domain")).domain == "x ∈ ℝ such that x ≠ 0"


class TestRangeAndIntercepts:
    """Sampled range and axis crossings."""

    def test_range(self):
        assert analyze_function("x^2", only("range")).range == "[0.00, 100.00]"
        assert analyze_function("sin(x)", only("range")).range == "[-1.00, 1.00]"
        assert analyze_function("sqrt(-1 - x^2)", only("range")).range == RANGE_UNKNOWN

    def test_window(self):
        res = analyze_function("x^2", only("range", window=(0, 5)))
        assert res.range == "[0.00, 25.00]"

    def test_quadratic_closed_form(self):
        res = analyze_function("x^2 - 4", only("intercepts"))
        assert res.intercepts.x == [-2.0, 2.0]
        assert res.intercepts.y == -4.0
        assert analyze_function("x^2 + 1", only("intercepts")).intercepts.x == []
        assert analyze_function("2x + 4", only("intercepts")).intercepts.x == [-2.0]

    def test_sampled_roots(self):
        res = analyze_function("sin(x)", only("intercepts"))
        assert len(res.intercepts.x) == 7
        for k, x in zip(range(-3, 4), res.intercepts.x):
            assert x == pytest.approx(k * math.pi, abs=1e-6)
        assert res.intercepts.y == 0.0

    def test_decay_is_not_a_root(self):
        assert analyze_function("exp(-x^2)", only("intercepts")).intercepts.x == []
        assert analyze_function("exp(-x^2)", only("intercepts", window=(-40, 40))).intercepts.x == []
        assert analyze_function("exp(x)", only("intercepts", window=(-50, 5))).intercepts.x == []

    def test_touching_root_on_grid(self):
        assert analyze_function("x^4", only("intercepts")).intercepts.x == [0.0]
        assert analyze_function("sqrt(x)", only("intercepts")).intercepts.x == [0.0]

    def test_pole_is_not_a_root(self):
        res = analyze_function("1/x", only("intercepts"))
        assert res.intercepts.x == []
        assert res.intercepts.y is None
        res = analyze_function("1/(x - 0.005)", only("intercepts"))
        assert res.intercepts.x == []


class TestDerivatives:
    """Extrema, monotonicity and concavity from finite differences."""

    def test_parabola(self):
        res = analyze_function("x^2")
        assert [(e.x, e.y, e.type) for e in res.extrema] == [(0.0, 0.0, "min")]
        assert [(r.interval, r.direction) for r in res.monotonicity] == [
            (Interval.closed(-10, 0), "decreasing"),
            (Interval.closed(0, 10), "increasing"),
        ]
        assert [(r.interval, r.direction) for r in res.concavity] == [(Interval.closed(-10, 10), "up")]
        assert res.inflection_points == []

    def test_cubic(self):
        res = analyze_function("x^3 - 3x")
        assert [e.type for e in res.extrema] == ["max", "min"]
        assert res.extrema[0].x == pytest.approx(-1.0, abs=1e-6)
        assert res.extrema[0].y == pytest.approx(2.0, abs=1e-6)
        assert res.extrema[1].x == pytest.approx(1.0, abs=1e-6)
        assert [r.direction for r in res.monotonicity] == ["increasing", "decreasing", "increasing"]
        assert [r.direction for r in res.concavity] == ["down", "up"]
        (point,) = res.inflection_points
        assert (point.x, point.y) == (0.0, 0.0)

    def test_monotone_cubic_is_one_run(self):
        res = analyze_function("x^3", only("monotonicity", "extrema"))
        assert [(r.interval, r.direction) for r in res.monotonicity] == [
            (Interval.closed(-10, 10), "increasing")
        ]
        assert res.extrema == []

    def test_line_and_constant(self):
        res = analyze_function("2x + 1", only("monotonicity", "concavity"))
        assert [r.direction for r in res.monotonicity] == ["increasing"]
        assert res.concavity == []
        res = analyze_function("5", only("monotonicity", "extrema"))
        assert [(r.interval, r.direction) for r in res.monotonicity] == [
            (Interval.closed(-10, 10), "constant")
        ]
        assert res.extrema == []

    def test_small_magnitude_tails(self):
        res = analyze_function("exp(-x^2)", only("monotonicity", "concavity", "inflection_points"))
        assert [(r.interval, r.direction) for r in res.monotonicity] == [
            (Interval.closed(-10, 0), "increasing"),
            (Interval.closed(0, 10), "decreasing"),
        ]
        assert [r.direction for r in res.concavity] == ["up", "down", "up"]
        assert res.concavity[0].interval.start == -10.0
        assert res.concavity[-1].interval.end == 10.0
        xs = [p.x for p in res.inflection_points]
        assert xs == pytest.approx([-math.sqrt(0.5), math.sqrt(0.5)], abs=1e-6)

    def test_kink_leaves_no_concavity(self):
        res = analyze_function("abs(x)", only("concavity", "inflection_points"))
        assert res.concavity == []
        assert res.inflection_points == []

    def test_undefined_samples_split_runs(self):
        res = analyze_function("1/x", only("monotonicity", "extrema"))
        assert [r.direction for r in res.monotonicity] == ["decreasing", "decreasing"]
        assert res.monotonicity[0].interval.end < 0 < res.monotonicity[1].interval.start
        assert res.extrema == []


class TestAsymptotes:
    """Vertical and horizontal asymptotes."""

    def test_reciprocal(self):
        res = analyze_function("1/x", only("asymptotes"))
        kinds = {(a.type, a.equation) for a in res.asymptotes}
        assert kinds == {("vertical", "x = 0"), ("horizontal", "y = 0")}

    def test_rational_function(self):
        res = analyze_function("(2x + 1)/(x - 1)", only("asymptotes"))
        equations = {a.equation for a in res.asymptotes}
        assert "x = 1" in equations
        assert "y = 2" in equations

    def test_tangent_poles(self):
        res = analyze_function("tan(x)", only("asymptotes"))
        vertical = [a.value for a in res.asymptotes if a.type == "vertical"]
        assert any(v == pytest.approx(math.pi / 2, abs=1e-5) for v in vertical)
        assert any(v == pytest.approx(-math.pi / 2, abs=1e-5) for v in vertical)

    def test_polynomial_has_none(self):
        assert analyze_function("x^2", only("asymptotes")).asymptotes == []
        assert analyze_function("sqrt(x)", only("asymptotes")).asymptotes == []


class TestContinuity:
    """Breaks inside the sampling window."""

    def test_continuous(self):
        cont = analyze_function("x^2 + 1", only("continuity")).continuity
        assert cont.is_continuous
        assert cont.interval == Interval.closed(-10, 10)
        assert cont.discontinuities == []

    def test_domain_edge_is_not_a_break(self):
        assert analyze_function("sqrt(x)", only("continuity")).continuity.is_continuous
        assert analyze_function("ln(x)", only("continuity")).continuity.is_continuous

    def test_pole(self):
        cont = analyze_function("1/x", only("continuity")).continuity
        assert not cont.is_continuous
        assert [(d.x, d.y, d.type) for d in cont.discontinuities] == [(0.0, None, "infinite")]

    def test_jump_and_hole(self):
        (jump,) = analyze_function("abs(x)/x", only("continuity")).continuity.discontinuities
        assert (jump.x, jump.y, jump.type) == (0.0, None, "jump")
        (hole,) = analyze_function("(x^2 + x)/x", only("continuity")).continuity.discontinuities
        assert (hole.x, hole.y, hole.type) == (0.0, None, "removable")

    def test_steps_of_floor(self):
        cont = analyze_function("floor(x)", only("continuity", window=(-2.5, 2.5))).continuity
        assert [(d.x, d.y, d.type) for d in cont.discontinuities] == [
            (-2.0, -2.0, "jump"),
            (-1.0, -1.0, "jump"),
            (0.0, 0.0, "jump"),
            (1.0, 1.0, "jump"),
            (2.0, 2.0, "jump"),
        ]
        assert analyze_function("x^3", only("continuity")).continuity.is_continuous

    def test_off_grid_poles(self):
        cont = analyze_function("tan(x)", only("continuity")).continuity
        assert not cont.is_continuous
        assert all(d.type == "infinite" for d in cont.discontinuities)
        xs = [d.x for d in cont.discontinuities]
        assert any(x == pytest.approx(math.pi / 2, abs=1e-5) for x in xs)
        assert any(x == pytest.approx(-math.pi / 2, abs=1e-5) for x in xs)


class TestSymmetryAndPeriodicity:
    """Paired samples and trig argument detection."""

    @pytest.mark.parametrize(
        "expr,expected",
        [
            ("x^2", "even"),
            ("x^3", "odd"),
            ("sin(x)", "odd"),
            ("cos(x)", "even"),
            ("abs(x)", "even"),
            ("x^2 + x", "none"),
            ("sqrt(x)", "none"),
        ],
    )
    def test_symmetry(self, expr, expected):
        assert analyze_function(expr, only("symmetry")).symmetry == expected

    @pytest.mark.parametrize(
        "expr,period",
        [
            ("sin(x)", 2 * math.pi),
            ("cos(2x)", math.pi),
            ("tan(x)", math.pi),
            ("sin(x/2)", 4 * math.pi),
            ("sin(x) + cos(2x)", 2 * math.pi),
            ("3sin(pi*x)", 2.0),
        ],
    )
    def test_periodic(self, expr, period):
        res = analyze_function(expr, only("periodicity"))
        assert res.periodicity.is_periodic
        assert res.periodicity.period == pytest.approx(period)

    @pytest.mark.parametrize("expr", ["x^2", "sin(x) + x", "sin(x^2)", "5"])
    def test_not_periodic(self, expr):
        res = analyze_function(expr, only("periodicity"))
        assert not res.periodicity.is_periodic
        assert res.periodicity.period is None


class TestDegradation:
    """Malformed input and failing analyses."""

    @pytest.mark.parametrize("expr", ["", "   ", "foo(x)", "x +", "(x"])
    def test_malformed(self, expr):
        res = analyze_function(expr)
        assert res.domain == ANALYSIS_ERROR
        assert res.range == ANALYSIS_ERROR
        assert res.intercepts.x == []
        assert res.extrema == []
        assert res.monotonicity == []
        assert res.concavity == []

    def test_missing_expression_raises(self):
        with pytest.raises(ValueError):
            analyze_function(None)
        with pytest.raises(ValueError):
            analyze_function(42)

    def test_failures_stay_local(self):
        class BrokenSlopes(FiniteDifferenceStrategy):
            def first_derivative(self, f, xs):
                raise RuntimeError("boom")

        res = FunctionAnalyzer(BrokenSlopes()).analyze("x^2")
        assert "extrema" in res.failed
        assert "monotonicity" in res.failed
        assert res.extrema == []
        assert res.monotonicity == []
        assert res.domain == ALL_REAL_NUMBERS
        assert res.symmetry == "even"
        assert res.range == "[0.00, 100.00]"
