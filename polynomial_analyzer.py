"""
Polynomial Analysis Module

Exact analysis of univariate polynomials given as coefficient lists (highest
degree first) or as polynomial expression strings: rational root test,
synthetic division, factorization, root multiplicity and end behavior.
Irrational roots of a leftover factor are located numerically.
"""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from interval import format_number
from polynomial import Polynomial, poly_gcd
from rational import NumberLike, Rational
from parser import try_parse_polynomial

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 1e-10
NEWTON_STEPS = 3
ANALYSIS_ERROR = "Error in analysis"


@dataclass
class Root:
    """A real root of a polynomial."""
    value: float
    multiplicity: int = 1
    exact: Optional[Rational] = None

    @property
    def behavior(self) -> str:
        if self.multiplicity == 1:
            return "crosses"
        if self.multiplicity % 2 == 0:
            return "touches"
        return "bounces"

    def __str__(self) -> str:
        value_str = self.exact.to_string() if self.exact is not None else format_number(self.value)
        if self.multiplicity > 1:
            return f"x = {value_str} (multiplicity {self.multiplicity}, {self.behavior})"
        return f"x = {value_str} ({self.behavior})"


@dataclass
class SyntheticDivisionTrace:
    divisor: Rational
    quotient: Polynomial
    remainder: Rational
    steps: List[str] = field(default_factory=list)

    def is_root(self) -> bool:
        return self.remainder.is_zero()


@dataclass
class Factorization:
    constant: Rational
    roots: List[Tuple[Union[Rational, float], int]] = field(default_factory=list)
    remaining: Optional[Polynomial] = None
    complete: bool = True
    steps: List[str] = field(default_factory=list)
    note: Optional[str] = None

    @property
    def factors(self) -> List[str]:
        out = [_linear_factor_string(r, m) for r, m in self.roots]
        if self.remaining is not None:
            out.append(f"({self.remaining})")
        return out

    @property
    def factored(self) -> str:
        factors = self.factors
        if not factors:
            return self.constant.to_string()
        if self.constant == 1:
            prefix = ""
        elif self.constant == -1:
            prefix = "-"
        elif self.constant.is_int():
            prefix = self.constant.to_string()
        else:
            prefix = f"({self.constant})"
        return prefix + "".join(factors)

    def __str__(self) -> str:
        return self.factored


@dataclass
class EndBehavior:
    left: str
    right: str
    description: str

    @property
    def left_end(self) -> str:
        return {"+∞": "up", "-∞": "down"}.get(self.left, "constant")

    @property
    def right_end(self) -> str:
        return {"+∞": "up", "-∞": "down"}.get(self.right, "constant")


@dataclass
class TurningPoint:
    x: float
    y: float
    type: str  # 'maximum', 'minimum' or 'inflection'


@dataclass
class PolynomialAnalysis:
    source: str
    polynomial: Optional[Polynomial] = None
    degree: int = -1
    leading_coefficient: Optional[float] = None
    coefficients: List[float] = field(default_factory=list)
    expanded: str = ""
    rational_candidates: List[Rational] = field(default_factory=list)
    rational_roots: List[Root] = field(default_factory=list)
    roots: List[Root] = field(default_factory=list)
    factorization: Optional[Factorization] = None
    end_behavior: Optional[EndBehavior] = None
    y_intercept: Optional[float] = None
    turning_points: List[TurningPoint] = field(default_factory=list)
    synthetic_divisions: List[SyntheticDivisionTrace] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @staticmethod
    def failed(source: str) -> "PolynomialAnalysis":
        return PolynomialAnalysis(source=source, error=ANALYSIS_ERROR)


def _linear_factor_string(root: Union[Rational, float], multiplicity: int) -> str:
    if isinstance(root, Rational):
        mag = abs(root).to_string()
        negative = root < 0
        zero = root.is_zero()
    else:
        mag = format_number(abs(root))
        negative = root < 0
        zero = root == 0
    if zero:
        base = "x"
        return base if multiplicity == 1 else f"x^{multiplicity}"
    base = f"(x + {mag})" if negative else f"(x - {mag})"
    return base if multiplicity == 1 else f"{base}^{multiplicity}"


def divisors(n: int) -> List[int]:
    """Positive divisors of |n|, ascending; empty for 0."""
    n = abs(n)
    if n == 0:
        return []
    small: List[int] = []
    large: List[int] = []
    for i in range(1, math.isqrt(n) + 1):
        if n % i == 0:
            small.append(i)
            if i != n // i:
                large.append(n // i)
    return small + large[::-1]


def _rational_sqrt(r: Rational) -> Optional[Rational]:
    if r < 0:
        return None
    num, den = r.numerator(), r.denominator()
    sn, sd = math.isqrt(num), math.isqrt(den)
    if sn * sn == num and sd * sd == den:
        return Rational(sn, sd)
    return None


def square_free_parts(p: Polynomial) -> List[Tuple[Polynomial, int]]:
    """
    Yun's decomposition of p into monic square-free parts.

    Returns (q, m) pairs with p == c * prod(q ** m); every root of q has
    multiplicity exactly m in p. Parts of degree zero are omitted.
    """
    if p.degree() < 1:
        return []
    d = p.derivative()
    g = poly_gcd(p, d)
    b = p.divmod(g)[0]
    w = d.divmod(g)[0] - b.derivative()
    parts: List[Tuple[Polynomial, int]] = []
    m = 1
    while b.degree() >= 1:
        g = poly_gcd(b, w)
        if g.degree() >= 1:
            parts.append((g, m))
        b = b.divmod(g)[0]
        w = w.divmod(g)[0] - b.derivative()
        m += 1
    return parts


class PolynomialAnalyzer:
    """Exact polynomial analysis over the rationals."""

    def __init__(self, tol: float = DEFAULT_TOLERANCE) -> None:
        self.tol = tol

    # ------------------------------------------------------------------
    # Rational root test
    # ------------------------------------------------------------------
    def rational_root_candidates(self, p: Polynomial) -> List[Rational]:
        """
        Candidates ±(p/q) with p | constant term and q | leading coefficient.

        Denominators are cleared first; a zero constant term contributes the
        candidate 0 and the remaining candidates come from p / x^k.
        """
        if p.degree() < 1:
            return []
        k, reduced = p.strip_zero_roots()
        candidates = set()
        if k > 0:
            candidates.add(Rational(0, 1))
        if reduced.degree() >= 1:
            _, prim = reduced.integer_form()
            for num in divisors(prim.constant_term().to_int()):
                for den in divisors(prim.leading().to_int()):
                    candidates.add(Rational(num, den))
                    candidates.add(Rational(-num, den))
        return sorted(candidates)

    def find_rational_roots(self, p: Polynomial) -> List[Rational]:
        return [c for c in self.rational_root_candidates(p) if p.evaluate(c).is_zero()]

    # ------------------------------------------------------------------
    # Synthetic division
    # ------------------------------------------------------------------
    def synthetic_division(self, p: Polynomial, divisor: NumberLike) -> SyntheticDivisionTrace:
        """Divide p by (x - divisor) using Horner's scheme, recording each step."""
        r = Rational.from_number(divisor)
        if p.degree() < 1:
            raise ValueError("cannot divide a constant polynomial by (x - r)")
        coeffs = p.coeffs
        carry = coeffs[0]
        row = [carry]
        steps = [f"Bring down {carry}"]
        for c in coeffs[1:]:
            prod = carry * r
            nxt = c + prod
            steps.append(f"{carry} × {r} = {prod}; {c} + {prod} = {nxt}")
            carry = nxt
            row.append(carry)
        remainder = row.pop()
        quotient = Polynomial(tuple(row))
        steps.append(f"Quotient: {quotient}; remainder: {remainder}")
        return SyntheticDivisionTrace(r, quotient, remainder, steps)

    def multiplicity(self, p: Polynomial, root: Rational) -> Tuple[int, Polynomial]:
        """Divide by (x - root) while the remainder stays zero."""
        count = 0
        current = p
        while current.degree() >= 1:
            trace = self.synthetic_division(current, root)
            if not trace.is_root():
                break
            count += 1
            current = trace.quotient
        return count, current

    def root_multiplicities(self, p: Polynomial) -> List[Root]:
        roots = []
        for r in self.find_rational_roots(p):
            m, _ = self.multiplicity(p, r)
            if m > 0:
                roots.append(Root(float(r), m, exact=r))
        return roots

    # ------------------------------------------------------------------
    # Factorization
    # ------------------------------------------------------------------
    def factorize(self, p: Polynomial) -> Factorization:
        if p.degree() < 1:
            return Factorization(constant=p.leading())
        scale, current = p.integer_form()
        steps: List[str] = []
        if scale != 1:
            steps.append(f"Factor out the common factor {scale}: {scale}·({current})")
        found: Dict[Rational, int] = {}
        order: List[Union[Rational, float]] = []

        def record(r, m: int = 1) -> None:
            if r not in found:
                found[r] = 0
                order.append(r)
            found[r] += m

        while current.degree() > 2:
            roots = self.find_rational_roots(current)
            if not roots:
                steps.append(f"No rational root for {current}")
                break
            r = roots[0]
            trace = self.synthetic_division(current, r)
            steps.append(f"x = {r} is a rational root: {current} = (x - {r})({trace.quotient})")
            record(r)
            current = trace.quotient

        remaining: Optional[Polynomial] = None
        complete = True
        note = None
        if current.degree() == 2:
            a, b, c = current.coeffs
            disc = b * b - Rational(4, 1) * a * c
            two_a = Rational(2, 1) * a
            if disc < 0:
                steps.append(f"Discriminant of {current} is {disc} < 0: not factorable over the reals")
                note = "not factorable over the reals"
                remaining = current
                complete = False
            else:
                sq = _rational_sqrt(disc)
                if sq is not None:
                    r1, r2 = (-b - sq) / two_a, (-b + sq) / two_a
                    steps.append(f"Quadratic formula on {current}: x = {r1}, x = {r2}")
                    record(r1)
                    record(r2)
                else:
                    s = math.sqrt(float(disc))
                    r1 = (-float(b) - s) / float(two_a)
                    r2 = (-float(b) + s) / float(two_a)
                    steps.append(
                        f"Quadratic formula on {current}: x = {format_number(r1)}, x = {format_number(r2)}"
                    )
                    record(min(r1, r2))
                    record(max(r1, r2))
                scale = scale * a
        elif current.degree() == 1:
            a, b = current.coeffs
            record(-b / a)
            scale = scale * a
        elif current.degree() == 0:
            scale = scale * current.leading()
        else:
            remaining = current
            complete = False
            note = "no rational root"

        roots = [(r, found[r]) for r in order]
        return Factorization(
            constant=scale,
            roots=roots,
            remaining=remaining,
            complete=complete,
            steps=steps,
            note=note,
        )

    # ------------------------------------------------------------------
    # Real roots and derived features
    # ------------------------------------------------------------------
    def real_roots(self, p: Polynomial) -> List[Root]:
        """
        Rational roots exactly, the rest numerically; sorted ascending.

        What is left after dividing out the rational roots is split into
        square-free parts, so each numeric root carries its multiplicity and
        the eigenvalue solver only ever sees simple roots.
        """
        if p.degree() < 1:
            return []
        roots = self.root_multiplicities(p)
        remaining = p
        for root in roots:
            for _ in range(root.multiplicity):
                remaining = self.synthetic_division(remaining, root.exact).quotient
        for part, m in square_free_parts(remaining):
            roots.extend(Root(x, m) for x in self._numeric_roots(part))
        return sorted(roots, key=lambda r: r.value)

    def _numeric_roots(self, q: Polynomial) -> List[float]:
        """Real companion-matrix roots of a square-free q, polished by Newton steps."""
        dq = q.derivative()
        out: List[float] = []
        for z in np.roots(q.to_floats()):
            if abs(z.imag) > self.tol * (1 + abs(z.real)):
                continue
            x = float(z.real)
            for _ in range(NEWTON_STEPS):
                slope = dq.evaluate_float(x)
                if slope == 0:
                    break
                step = q.evaluate_float(x) / slope
                if not math.isfinite(step):
                    break
                x -= step
            out.append(x)
        return sorted(out)

    def turning_points(self, p: Polynomial) -> List[TurningPoint]:
        d = p.derivative()
        if d.degree() < 1:
            return []
        points = []
        for root in self.real_roots(d):
            x = root.value
            if root.exact is not None:
                m, rest = self.multiplicity(d, root.exact)
                y = float(p.evaluate(root.exact))
                s = rest.evaluate(root.exact).sign()
            else:
                # the first derivative of d that survives at x sets its sign change
                m = root.multiplicity
                y = p.evaluate_float(x)
                higher = d
                for _ in range(m):
                    higher = higher.derivative()
                v = higher.evaluate_float(x)
                s = (v > 0) - (v < 0)
            if m % 2 == 0 or s == 0:
                kind = "inflection"
            else:
                kind = "minimum" if s > 0 else "maximum"
            points.append(TurningPoint(x, y, kind))
        return points

    def end_behavior(self, p: Polynomial) -> EndBehavior:
        n = p.degree()
        if n == 0:
            c = p.leading().to_string()
            return EndBehavior(c, c, f"f(x) = {c} for all x")
        if p.leading() > 0:
            left, right = ("+∞", "+∞") if n % 2 == 0 else ("-∞", "+∞")
        else:
            left, right = ("-∞", "-∞") if n % 2 == 0 else ("+∞", "-∞")
        return EndBehavior(left, right, f"As x → -∞, f(x) → {left}; as x → +∞, f(x) → {right}")

    # ------------------------------------------------------------------
    # Combined summary
    # ------------------------------------------------------------------
    def analyze(
        self,
        source: Union[str, Sequence[NumberLike], Polynomial],
        divisors: Sequence[NumberLike] = (),
    ) -> PolynomialAnalysis:
        if source is None:
            raise ValueError("polynomial coefficients or expression are required")
        if isinstance(source, Polynomial):
            p = source
            label = str(p)
        elif isinstance(source, str):
            label = source
            p = try_parse_polynomial(source)
            if p is None:
                logger.debug("not a polynomial expression: %r", source)
                return PolynomialAnalysis.failed(source)
        else:
            values = list(source)
            if not values:
                raise ValueError("polynomial coefficients are required")
            p = Polynomial.from_numbers(values)
            label = str(p)
        if p.is_zero():
            logger.debug("zero polynomial has no degree: %r", label)
            return PolynomialAnalysis.failed(label)

        result = PolynomialAnalysis(
            source=label,
            polynomial=p,
            degree=p.degree(),
            leading_coefficient=float(p.leading()),
            coefficients=p.to_floats(),
            expanded=str(p),
            y_intercept=float(p.constant_term()),
        )
        result.rational_candidates = self.rational_root_candidates(p)
        result.rational_roots = self.root_multiplicities(p)
        result.roots = self.real_roots(p)
        result.factorization = self.factorize(p)
        result.end_behavior = self.end_behavior(p)
        result.turning_points = self.turning_points(p)
        if p.degree() >= 1:
            for d in divisors:
                result.synthetic_divisions.append(self.synthetic_division(p, d))
            if not result.rational_roots:
                result.notes.append("no rational root")
            if not result.roots:
                result.notes.append("no real root found")
        if result.factorization.note and result.factorization.note not in result.notes:
            result.notes.append(result.factorization.note)
        return result


# Default instance and module-level wrappers
_default_analyzer = PolynomialAnalyzer()

def rational_root_candidates(p: Polynomial) -> List[Rational]:
    return _default_analyzer.rational_root_candidates(p)

def find_rational_roots(p: Polynomial) -> List[Rational]:
    return _default_analyzer.find_rational_roots(p)

def synthetic_division(p: Polynomial, divisor: NumberLike) -> SyntheticDivisionTrace:
    return _default_analyzer.synthetic_division(p, divisor)

def factorize(p: Polynomial) -> Factorization:
    return _default_analyzer.factorize(p)

def root_multiplicities(p: Polynomial) -> List[Root]:
    return _default_analyzer.root_multiplicities(p)

def real_roots(p: Polynomial) -> List[Root]:
    return _default_analyzer.real_roots(p)

def end_behavior(p: Polynomial) -> EndBehavior:
    return _default_analyzer.end_behavior(p)

def analyze_polynomial(source, divisors: Sequence[NumberLike] = ()) -> PolynomialAnalysis:
    return _default_analyzer.analyze(source, divisors)
