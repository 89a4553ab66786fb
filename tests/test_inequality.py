"""Tests for inequality parsing."""

import math

import pytest

from interval import EMPTY_SET, REAL_LINE, Interval
from inequality import InequalityResult, parse_inequality


class TestSimple:
    """x op c and c op x."""

    def test_greater_than(self):
        res = parse_inequality("x > 2")
        assert res.type == "simple"
        assert res.operator is None
        assert len(res.intervals) == 1
        iv = res.intervals[0]
        assert iv.start == 2
        assert iv.start_type == "open"
        assert iv.end == math.inf
        assert "(2, +∞)" in res.interval_notation
        assert res.set_notation == "{x | x > 2}"

    def test_inclusive_and_reversed(self):
        assert parse_inequality("x <= -1").interval_notation == "(-∞, -1]"
        assert parse_inequality("3 < x").interval_notation == "(3, +∞)"
        assert parse_inequality("3 >= x").interval_notation == "(-∞, 3]"

    def test_unicode_operators(self):
        assert parse_inequality("x ≥ 2").interval_notation == "[2, +∞)"
        assert parse_inequality("x ≤ 2.5").interval_notation == "(-∞, 2.5]"

    def test_equality_is_a_point(self):
        res = parse_inequality("x = 3")
        assert res.intervals == (Interval.point(3),)
        assert res.interval_notation == "[3, 3]"


class TestChained:
    """a < x < b forms."""

    @pytest.mark.parametrize("a,b", [(2, 5), (-3, 0), (1.5, 7.25)])
    def test_open_bounds_in_notation(self, a, b):
        res = parse_inequality(f"{a} < x < {b}")
        assert res.type == "compound"
        assert res.operator == "and"
        assert res.interval_notation.startswith("(")
        assert res.interval_notation.endswith(")")
        assert str(a) in res.interval_notation
        assert str(b) in res.interval_notation

    def test_mixed_inclusivity(self):
        assert parse_inequality("-1 <= x < 4").interval_notation == "[-1, 4)"

    def test_descending(self):
        assert parse_inequality("5 > x >= 2").interval_notation == "[2, 5)"

    def test_contradiction_is_empty(self):
        res = parse_inequality("5 < x < 2")
        assert res.intervals == ()
        assert res.interval_notation == EMPTY_SET


class TestLogical:
    """Clauses joined by and/or."""

    def test_or(self):
        res = parse_inequality("x < -1 or x > 3")
        assert res.type == "compound"
        assert res.operator == "or"
        assert res.interval_notation == "(-∞, -1) ∪ (3, +∞)"

    def test_and(self):
        res = parse_inequality("x > 1 and x < 10")
        assert res.operator == "and"
        assert res.interval_notation == "(1, 10)"

    def test_disjoint_and_is_empty(self):
        res = parse_inequality("x > 5 and x < 1")
        assert res.type == "compound"
        assert res.interval_notation == EMPTY_SET

    def test_overlapping_or_merges(self):
        assert parse_inequality("x < 1 or x > 0").interval_notation == REAL_LINE
        assert parse_inequality("x <= 1 or x >= 1").interval_notation == REAL_LINE
        assert parse_inequality("x < 1 or x > 1").interval_notation == "(-∞, 1) ∪ (1, +∞)"

    def test_three_clauses(self):
        res = parse_inequality("x < -5 or x > 10 or x = 0")
        assert res.interval_notation == "(-∞, -5) ∪ [0, 0] ∪ (10, +∞)"

    def test_and_binds_tighter_than_or(self):
        res = parse_inequality("x > 1 and x < 10 or x > 20 and x < 30")
        assert res.interval_notation == "(1, 10) ∪ (20, 30)"

    def test_set_symbols(self):
        assert parse_inequality("x < 0 ∪ x > 4").interval_notation == "(-∞, 0) ∪ (4, +∞)"

    def test_bad_clause_spoils_everything(self):
        res = parse_inequality("x > 1 and nonsense")
        assert res.type is None
        assert res.intervals == ()


class TestAbsolute:
    """|x - h| op k."""

    def test_always_true(self):
        res = parse_inequality("|x| > -2")
        assert res.type == "absolute"
        assert res.interval_notation == REAL_LINE

    def test_never_true(self):
        res = parse_inequality("|x| < -1")
        assert res.type == "absolute"
        assert res.intervals == ()
        assert res.interval_notation == EMPTY_SET

    def test_less_than(self):
        assert parse_inequality("|x - 2| <= 3").interval_notation == "[-1, 5]"
        res = parse_inequality("|x + 1| < 2")
        assert res.operator == "and"
        assert res.interval_notation == "(-3, 1)"

    def test_greater_than(self):
        res = parse_inequality("|x - 1| > 2")
        assert res.operator == "or"
        assert res.interval_notation == "(-∞, -1) ∪ (3, +∞)"
        assert parse_inequality("|x| >= 1").interval_notation == "(-∞, -1] ∪ [1, +∞)"

    def test_zero_radius(self):
        assert parse_inequality("|x - 3| <= 0").interval_notation == "[3, 3]"
        assert parse_inequality("|x| < 0").interval_notation == EMPTY_SET
        assert parse_inequality("|x| >= 0").interval_notation == REAL_LINE


class TestUnparseable:
    """Inputs that degrade to the empty set."""

    @pytest.mark.parametrize("text", ["", "   ", "invalid expression", "x != 3", "x >> 2", "y > 1"])
    def test_degrades_to_empty(self, text):
        res = parse_inequality(text)
        assert res.type is None
        assert res.intervals == ()
        assert res.interval_notation == EMPTY_SET
        assert res.set_notation == EMPTY_SET
        assert res.is_empty()

    def test_unparsed_keeps_text(self):
        assert InequalityResult.unparsed("abc").text == "abc"

    def test_non_string_raises(self):
        with pytest.raises(TypeError):
            parse_inequality(None)
