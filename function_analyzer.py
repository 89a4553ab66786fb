"""
Function property analysis for single-variable real functions.

Domain restrictions and periodicity come from the structure of the expression
DAG; everything else (range, intercepts, extrema, monotonicity, concavity,
asymptotes, symmetry, continuity) from sampling the compiled expression on a
grid and finite differences. Each analysis runs independently: a failure
degrades its own field and the others still complete.
"""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from fractions import Fraction
from functools import cached_property, reduce
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from edag import EDAG
from evaluator import Evaluator, compile_expression
from interval import Interval, format_number
from parser import try_parse_polynomial
from rational import lcm

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = (-10.0, 10.0)
DEFAULT_SAMPLES = 2001
DIFF_STEP = 1e-5
SECOND_DIFF_STEP = 1e-4
CURVATURE_EPS = 1e-6
# rounding floor of a difference quotient, in units of machine epsilon
ROUNDING_ULPS = 16
ROOT_TOLERANCE = 1e-12
ZERO_TOLERANCE = 1e-10
INTERCEPT_TOLERANCE = 1e-6
POLE_THRESHOLD = 1e3
POLE_OFFSET = 1e-6
HORIZONTAL_POINTS = (1e4, 1e5)
HORIZONTAL_TOLERANCE = 1e-3
JUMP_TOLERANCE = 1e-3
JUMP_ITERATIONS = 60
SYMMETRY_POINTS = (0.3, 0.7, 1.1, 1.9, 2.6, 3.7, 5.3)
SYMMETRY_TOLERANCE = 1e-9
PERIOD_CHECK_POINTS = (0.1, 0.37, 1.3, 2.9)
PERIOD_TOLERANCE = 1e-6
DECIMALS = 6

ANALYSIS_ERROR = "Error in analysis"
ALL_REAL_NUMBERS = "All real numbers"
RANGE_UNKNOWN = "Unable to determine range"

ANALYSES: FrozenSet[str] = frozenset({
    "domain",
    "range",
    "intercepts",
    "extrema",
    "monotonicity",
    "concavity",
    "inflection_points",
    "asymptotes",
    "symmetry",
    "periodicity",
    "continuity",
})

# period of the bare function, in units of pi
TRIG_PERIODS = {"sin": 2, "cos": 2, "tan": 1}


# =====================
# Options and results
# =====================

@dataclass
class AnalysisOptions:
    """Which analyses to run and where to sample."""
    analyses: Iterable[str] = ANALYSES
    window: Tuple[float, float] = DEFAULT_WINDOW
    samples: int = DEFAULT_SAMPLES

    def __post_init__(self):
        self.analyses = frozenset(self.analyses)
        unknown = self.analyses - ANALYSES
        if unknown:
            raise ValueError(f"unknown analyses: {', '.join(sorted(unknown))}")
        lo, hi = (float(v) for v in self.window)
        if not (math.isfinite(lo) and math.isfinite(hi)) or lo >= hi:
            raise ValueError(f"invalid sampling window {self.window}")
        self.window = (lo, hi)
        if self.samples < 3:
            raise ValueError("at least 3 samples are required")

    def wants(self, name: str) -> bool:
        return name in self.analyses


@dataclass
class Intercepts:
    x: List[float] = field(default_factory=list)
    y: Optional[float] = None


@dataclass
class Extremum:
    x: float
    y: float
    type: str  # 'max' or 'min'


@dataclass
class MonotonicRun:
    interval: Interval
    direction: str  # 'increasing', 'decreasing' or 'constant'


@dataclass
class ConcavityRun:
    interval: Interval
    direction: str  # 'up' or 'down'


@dataclass
class InflectionPoint:
    x: float
    y: float


@dataclass
class Asymptote:
    type: str  # 'vertical' or 'horizontal'
    value: float
    equation: str


@dataclass
class Periodicity:
    is_periodic: bool = False
    period: Optional[float] = None


@dataclass
class Discontinuity:
    x: float
    y: Optional[float]  # None where f is undefined at x
    type: str  # 'infinite', 'jump' or 'removable'


@dataclass
class Continuity:
    interval: Optional[Interval] = None
    is_continuous: bool = False
    discontinuities: List[Discontinuity] = field(default_factory=list)


@dataclass
class AnalysisResult:
    expression: str
    domain: Optional[str] = None
    range: Optional[str] = None
    intercepts: Optional[Intercepts] = None
    extrema: List[Extremum] = field(default_factory=list)
    monotonicity: List[MonotonicRun] = field(default_factory=list)
    concavity: List[ConcavityRun] = field(default_factory=list)
    inflection_points: List[InflectionPoint] = field(default_factory=list)
    asymptotes: List[Asymptote] = field(default_factory=list)
    symmetry: Optional[str] = None
    periodicity: Optional[Periodicity] = None
    continuity: Optional[Continuity] = None
    failed: List[str] = field(default_factory=list)

    @staticmethod
    def error(expression: str) -> "AnalysisResult":
        return AnalysisResult(
            expression=expression,
            domain=ANALYSIS_ERROR,
            range=ANALYSIS_ERROR,
            intercepts=Intercepts(),
            failed=sorted(ANALYSES),
        )


# value each field takes when its analysis raises
_SENTINELS: Dict[str, Callable[[], object]] = {
    "domain": lambda: ANALYSIS_ERROR,
    "range": lambda: ANALYSIS_ERROR,
    "intercepts": Intercepts,
    "extrema": list,
    "monotonicity": list,
    "concavity": list,
    "inflection_points": list,
    "asymptotes": list,
    "symmetry": lambda: "none",
    "periodicity": Periodicity,
    "continuity": Continuity,
}


# =====================
# Sampling strategies
# =====================

class SamplingStrategy:
    """Sampling grid plus first and second derivative estimates."""

    def grid(self, window: Tuple[float, float], samples: int) -> np.ndarray:
        return np.linspace(window[0], window[1], samples)

    def first_derivative(self, f: Evaluator, xs: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def second_derivative(self, f: Evaluator, xs: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def slope_noise(self, f: Evaluator, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Magnitude below which a first derivative estimate is indistinguishable from 0."""
        return np.zeros_like(ys)

    def curvature_noise(self, f: Evaluator, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        return np.zeros_like(ys)


class FiniteDifferenceStrategy(SamplingStrategy):
    """Central differences."""

    def __init__(self, h: float = DIFF_STEP, h2: float = SECOND_DIFF_STEP) -> None:
        self.h = h
        self.h2 = h2

    def first_derivative(self, f: Evaluator, xs: np.ndarray) -> np.ndarray:
        xs = np.asarray(xs, dtype=float)
        with np.errstate(all="ignore"):
            return (f.sample(xs + self.h) - f.sample(xs - self.h)) / (2 * self.h)

    def second_derivative(self, f: Evaluator, xs: np.ndarray) -> np.ndarray:
        xs = np.asarray(xs, dtype=float)
        with np.errstate(all="ignore"):
            return (
                f.sample(xs + self.h2) - 2 * f.sample(xs) + f.sample(xs - self.h2)
            ) / (self.h2 * self.h2)

    def _rounding(self, f: Evaluator, xs: np.ndarray, ys: np.ndarray, h: float) -> np.ndarray:
        """Error in f(x ± h) from rounding both f and its argument."""
        xs = np.asarray(xs, dtype=float)
        with np.errstate(all="ignore"):
            spread = np.abs(f.sample(xs + h) - f.sample(xs - h)) / (2 * h)
            return ROUNDING_ULPS * np.finfo(float).eps * (np.abs(ys) + np.abs(xs) * spread)

    def slope_noise(self, f: Evaluator, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        return self._rounding(f, xs, ys, self.h) / self.h

    def curvature_noise(self, f: Evaluator, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        return self._rounding(f, xs, ys, self.h2) / (self.h2 * self.h2)


class _Samples:
    """Grid values of f and its derivatives, computed on first use."""

    def __init__(self, f: Evaluator, strategy: SamplingStrategy, options: AnalysisOptions) -> None:
        self.f = f
        self.strategy = strategy
        self.xs = strategy.grid(options.window, options.samples)
        self.ys = f.sample(self.xs)

    @cached_property
    def d1(self) -> np.ndarray:
        return self.strategy.first_derivative(self.f, self.xs)

    @cached_property
    def d2(self) -> np.ndarray:
        return self.strategy.second_derivative(self.f, self.xs)

    @cached_property
    def slope_signs(self) -> np.ndarray:
        return _signs(self.d1, self.strategy.slope_noise(self.f, self.xs, self.ys))

    @cached_property
    def curvature_signs(self) -> np.ndarray:
        return _signs(self.d2, self.strategy.curvature_noise(self.f, self.xs, self.ys))

    def slope(self, x: float) -> float:
        return float(self.strategy.first_derivative(self.f, np.array([x]))[0])

    def curvature(self, x: float) -> float:
        return float(self.strategy.second_derivative(self.f, np.array([x]))[0])


# =====================
# Numeric helpers
# =====================

def _clean(v: float) -> float:
    """Round for reporting; folds -0.0 into 0.0."""
    return round(float(v), DECIMALS) + 0.0


def _signs(values: np.ndarray, noise: np.ndarray) -> np.ndarray:
    """-1/0/1 per sample, 0 within the rounding noise; nan where undefined."""
    with np.errstate(all="ignore"):
        out = np.sign(values)
        out[np.abs(values) <= noise] = 0.0
    out[~np.isfinite(values) | ~np.isfinite(noise)] = np.nan
    return out


def _bisect(g: Callable[[float], float], lo: float, hi: float, tol: float = ROOT_TOLERANCE) -> float:
    """Locate a sign change of g in [lo, hi]; returns the point where g turns undefined, if any."""
    glo = g(lo)
    if glo == 0:
        return lo
    if g(hi) == 0:
        return hi
    for _ in range(200):
        if hi - lo <= tol:
            break
        mid = 0.5 * (lo + hi)
        gm = g(mid)
        if gm == 0 or not math.isfinite(gm):
            return mid
        if (gm < 0) == (glo < 0):
            lo, glo = mid, gm
        else:
            hi = mid
    return 0.5 * (lo + hi)


def _definedness_edge(f: Evaluator, defined: float, undefined: float) -> float:
    """Bisect towards the point where f stops being defined."""
    for _ in range(200):
        if abs(undefined - defined) <= ROOT_TOLERANCE:
            break
        mid = 0.5 * (defined + undefined)
        if f.is_defined(mid):
            defined = mid
        else:
            undefined = mid
    return defined


def _jumps(f: Evaluator, xs: np.ndarray, ys: np.ndarray) -> List[float]:
    """
    Points where f leaps by more than JUMP_TOLERANCE between defined samples.

    Every gap wider than the tolerance is bisected towards its larger half at
    once; the gap of a continuous function shrinks away while a jump keeps it.
    """
    with np.errstate(all="ignore"):
        idx = np.nonzero(np.abs(np.diff(ys)) > JUMP_TOLERANCE)[0]
        if idx.size == 0:
            return []
        lo, hi = xs[idx].astype(float), xs[idx + 1].astype(float)
        flo, fhi = ys[idx].astype(float), ys[idx + 1].astype(float)
        for _ in range(JUMP_ITERATIONS):
            mid = 0.5 * (lo + hi)
            fm = f.sample(mid)
            left = np.abs(fm - flo) >= np.abs(fhi - fm)
            hi, fhi = np.where(left, mid, hi), np.where(left, fm, fhi)
            lo, flo = np.where(left, lo, mid), np.where(left, flo, fm)
        keep = np.abs(fhi - flo) > JUMP_TOLERANCE
    return [float(x) for x in 0.5 * (lo[keep] + hi[keep])]


def _sign_flips(signs: np.ndarray) -> List[Tuple[int, int]]:
    """Index pairs (j, i) of consecutive nonzero signs that differ with no undefined sample between."""
    flips = []
    last: Optional[int] = None
    for i, s in enumerate(signs):
        if np.isnan(s):
            last = None
            continue
        if s == 0:
            continue
        if last is not None and signs[last] != s:
            flips.append((last, i))
        last = i
    return flips


def _partition(
    xs: np.ndarray, signs: np.ndarray, refine: Callable[[float, float], float]
) -> List[Tuple[float, float, int]]:
    """
    Split the grid into maximal runs of equal sign as (start, end, sign).

    Runs no wider than two grid steps are dropped; a kink such as abs(x) at 0
    leaves one such run behind.

    Undefined samples end a run. A lone zero sample between opposite signs is
    the shared boundary of the two runs around it; between equal signs it is
    ignored. Where the sign flips between two samples the boundary is refined.
    """
    runs: List[Tuple[float, float, int]] = []
    n = len(xs)
    start: Optional[float] = None
    end: Optional[float] = None
    sign: Optional[int] = None
    for i in range(n):
        s = signs[i]
        x = float(xs[i])
        if np.isnan(s):
            if sign is not None and end > start:
                runs.append((start, end, sign))
            start = end = sign = None
            continue
        s = int(s)
        if s == 0:
            before = signs[i - 1] if i > 0 else np.nan
            after = signs[i + 1] if i < n - 1 else np.nan
            if before != 0 and after != 0:
                if before == after:
                    continue
                if sign is not None:
                    runs.append((start, x, sign))
                start, end, sign = x, x, None
                continue
        if sign is None:
            if start is None:
                start = x
            sign, end = s, x
        elif s == sign:
            end = x
        else:
            if sign == 0:
                b = float(xs[i - 1])
            elif s == 0:
                b = x
            else:
                b = refine(float(xs[i - 1]), x)
            if b > start:
                runs.append((start, b, sign))
            start, end, sign = b, x, s
    if sign is not None and end > start:
        runs.append((start, end, sign))
    min_width = 2 * (float(xs[-1]) - float(xs[0])) / (n - 1)
    return [(_clean(a), _clean(b), s) for a, b, s in runs if b - a > min_width * (1 + 1e-9)]


def _grid_zeros(xs: np.ndarray, ys: np.ndarray) -> List[float]:
    """
    Samples where f vanishes without a bracketing sign change.

    A sample within ZERO_TOLERANCE of 0 counts when each neighbour is
    undefined or strictly larger in magnitude, so a curve that only decays
    towards the axis yields nothing. An exact zero also counts between
    neighbours of opposite sign, and at a window end.
    """
    n = len(ys)
    mag = np.abs(ys)
    with np.errstate(invalid="ignore"):
        near = np.nonzero(mag <= ZERO_TOLERANCE)[0]
    out: List[float] = []
    for i in near:
        nbrs = [j for j in (i - 1, i + 1) if 0 <= j < n]
        if len(nbrs) < 2 and ys[i] != 0:
            continue
        if all(np.isnan(ys[j]) or mag[j] > mag[i] for j in nbrs):
            out.append(float(xs[i]))
        elif ys[i] == 0 and len(nbrs) == 2 and ys[nbrs[0]] * ys[nbrs[1]] < 0:
            out.append(float(xs[i]))
    return out


def _closed_form_roots(coeffs: Sequence[float]) -> List[float]:
    if len(coeffs) == 2:
        a, b = coeffs
        return [-b / a]
    a, b, c = coeffs
    disc = b * b - 4 * a * c
    if disc < 0:
        return []
    if disc == 0:
        return [-b / (2 * a)]
    s = math.sqrt(disc)
    return sorted([(-b - s) / (2 * a), (-b + s) / (2 * a)])


def _fraction_lcm(values: Sequence[Fraction]) -> Fraction:
    num = reduce(lcm, (v.numerator for v in values))
    den = reduce(math.gcd, (v.denominator for v in values))
    return Fraction(num, den)


# =====================
# Domain rule table
# =====================

def _const_value(dag: EDAG, nid: str) -> Optional[float]:
    node = dag.node(nid)
    if node.type == "CONST":
        return float(node.value)
    if node.type == "OP" and node.is_unary and node.op == "-":
        inner = _const_value(dag, node.children[0])
        return None if inner is None else -inner
    return None


def _power_restriction(dag: EDAG, nid: str) -> Optional[str]:
    exp = _const_value(dag, dag.node(nid).children[1])
    if exp is None:
        return None
    if not float(exp).is_integer():
        return "{} > 0" if exp < 0 else "{} ≥ 0"
    if exp < 0:
        return "{} ≠ 0"
    return None


@dataclass(frozen=True)
class DomainRule:
    """Restriction an operator puts on one of its arguments."""
    op: str
    template: Optional[str]
    arg: int = 0
    template_for: Optional[Callable[[EDAG, str], Optional[str]]] = None

    def condition(self, dag: EDAG, nid: str) -> Optional[str]:
        child = dag.node(nid).children[self.arg]
        if not dag.depends_on_var(child):
            return None
        template = self.template_for(dag, nid) if self.template_for else self.template
        if template is None:
            return None
        return template.format(dag.subexpression(child))


DOMAIN_RULES: Tuple[DomainRule, ...] = (
    DomainRule("sqrt", "{} ≥ 0"),
    DomainRule("log", "{} > 0"),
    DomainRule("ln", "{} > 0"),
    DomainRule("/", "{} ≠ 0", arg=1),
    DomainRule("tan", "cos({}) ≠ 0"),
    DomainRule("asin", "-1 ≤ {} ≤ 1"),
    DomainRule("acos", "-1 ≤ {} ≤ 1"),
    DomainRule("^", None, template_for=_power_restriction),
)


def domain_conditions(dag: EDAG, rules: Sequence[DomainRule] = DOMAIN_RULES) -> List[str]:
    by_op: Dict[str, List[DomainRule]] = {}
    for rule in rules:
        by_op.setdefault(rule.op, []).append(rule)
    conditions: List[str] = []
    for nid in dag.op_nodes():
        node = dag.node(nid)
        if node.is_unary and node.op == "-":
            continue
        for rule in by_op.get(node.op, ()):
            cond = rule.condition(dag, nid)
            if cond is not None and cond not in conditions:
                conditions.append(cond)
    return conditions


# =====================
# Analyzer
# =====================

class FunctionAnalyzer:
    """Property analysis of f(x) given as an expression string."""

    def __init__(self, strategy: Optional[SamplingStrategy] = None) -> None:
        self.strategy = strategy or FiniteDifferenceStrategy()

    def analyze(self, expression: str, options: Optional[AnalysisOptions] = None) -> AnalysisResult:
        if not isinstance(expression, str):
            raise ValueError("expression is required and must be a string")
        options = options or AnalysisOptions()
        try:
            f = compile_expression(expression)
        except (ValueError, ZeroDivisionError) as exc:
            logger.debug("cannot analyze %r: %s", expression, exc)
            return AnalysisResult.error(expression)

        samples = _Samples(f, self.strategy, options)
        result = AnalysisResult(expression=expression)
        steps = (
            ("domain", lambda: self.domain(f.dag)),
            ("range", lambda: self.range(samples)),
            ("intercepts", lambda: self.intercepts(expression, samples, options)),
            ("extrema", lambda: self.extrema(samples)),
            ("monotonicity", lambda: self.monotonicity(samples)),
            ("concavity", lambda: self.concavity(samples)),
            ("inflection_points", lambda: self.inflection_points(samples)),
            ("asymptotes", lambda: self.asymptotes(samples)),
            ("symmetry", lambda: self.symmetry(f)),
            ("periodicity", lambda: self.periodicity(f)),
            ("continuity", lambda: self.continuity(samples, options)),
        )
        for name, step in steps:
            if not options.wants(name):
                continue
            try:
                value = step()
            except Exception as exc:  # each analysis degrades on its own
                logger.warning("%s analysis failed for %r: %s", name, expression, exc)
                value = _SENTINELS[name]()
                result.failed.append(name)
            setattr(result, name, value)
        return result

    # -----------------
    # Structural
    # -----------------
    def domain(self, dag: EDAG) -> str:
        conditions = domain_conditions(dag)
        if not conditions:
            return ALL_REAL_NUMBERS
        return "x ∈ ℝ such that " + ", ".join(conditions)

    def periodicity(self, f: Evaluator) -> Periodicity:
        """
        Periodic when every occurrence of x sits inside a sin/cos/tan call whose
        argument is linear in x. Periods of several calls combine by their
        least common multiple; the result is checked numerically.
        """
        dag = f.dag
        var_ids = list(dag.var_nodes())
        if not var_ids:
            return Periodicity(False)
        calls = set()
        for vid in var_ids:
            trig = [o for o in dag.enclosing_ops(vid) if dag.node(o).op in TRIG_PERIODS]
            if not trig:
                return Periodicity(False)
            calls.add(min(trig, key=lambda o: len(dag.subtree(o))))
        periods = []
        for nid in calls:
            node = dag.node(nid)
            arg = try_parse_polynomial(dag.subexpression(node.children[0]))
            if arg is None or arg.degree() != 1:
                return Periodicity(False)
            periods.append(TRIG_PERIODS[node.op] * math.pi / abs(float(arg.leading())))
        period = self._common_period(periods)
        if period is None or not self._repeats(f, period):
            return Periodicity(False)
        return Periodicity(True, period)

    def _common_period(self, periods: List[float]) -> Optional[float]:
        if len(set(periods)) == 1:
            return periods[0]
        for unit in (math.pi, 1.0):
            fracs = [Fraction(p / unit).limit_denominator(1000) for p in periods]
            if all(abs(float(q) * unit - p) < 1e-9 for q, p in zip(fracs, periods)):
                return float(_fraction_lcm(fracs)) * unit
        return None

    def _repeats(self, f: Evaluator, period: float) -> bool:
        pts = np.array(PERIOD_CHECK_POINTS)
        a, b = f.sample(pts), f.sample(pts + period)
        mask = np.isfinite(a) & np.isfinite(b)
        if not mask.any():
            return False
        return bool(np.allclose(a[mask], b[mask], rtol=PERIOD_TOLERANCE, atol=PERIOD_TOLERANCE))

    # -----------------
    # Sampled
    # -----------------
    def range(self, samples: _Samples) -> str:
        finite = samples.ys[np.isfinite(samples.ys)]
        if finite.size == 0:
            return RANGE_UNKNOWN
        return f"[{finite.min():.2f}, {finite.max():.2f}]"

    def intercepts(self, expression: str, samples: _Samples, options: AnalysisOptions) -> Intercepts:
        f = samples.f
        y0 = f(0.0)
        y = _clean(y0) if math.isfinite(y0) else None
        window = Interval.closed(*options.window)
        poly = try_parse_polynomial(expression)
        if poly is not None and poly.degree() < 1:
            return Intercepts([], y)
        if poly is not None and poly.degree() <= 2:
            roots = _closed_form_roots(poly.to_floats())
            xs = sorted({_clean(r) for r in roots if window.contains(r)})
            return Intercepts(xs, y)
        found = {_clean(x) for x in _grid_zeros(samples.xs, samples.ys)}
        for c in self._sign_changes(samples):
            if abs(f(c)) <= INTERCEPT_TOLERANCE:
                found.add(_clean(c))
        return Intercepts(sorted(found), y)

    def _sign_changes(self, samples: _Samples) -> List[float]:
        """Bisected sign changes of f between consecutive defined samples."""
        xs, ys = samples.xs, samples.ys
        with np.errstate(all="ignore"):
            idx = np.nonzero(ys[:-1] * ys[1:] < 0)[0]
        return [_bisect(samples.f, float(xs[i]), float(xs[i + 1])) for i in idx]

    def extrema(self, samples: _Samples) -> List[Extremum]:
        f = samples.f
        out: List[Extremum] = []
        signs = samples.slope_signs
        for j, i in _sign_flips(signs):
            x = _bisect(samples.slope, float(samples.xs[j]), float(samples.xs[i]))
            fx = f(x)
            if not math.isfinite(fx):
                continue
            if not abs(samples.slope(x)) <= 1e-3 * (1 + abs(fx)):
                continue
            curv = samples.curvature(x)
            if curv < -CURVATURE_EPS * (1 + abs(fx)):
                kind = "max"
            elif curv > CURVATURE_EPS * (1 + abs(fx)):
                kind = "min"
            else:
                kind = "max" if signs[j] > 0 else "min"
            out.append(Extremum(_clean(x), _clean(fx), kind))
        return out

    def monotonicity(self, samples: _Samples) -> List[MonotonicRun]:
        names = {1: "increasing", -1: "decreasing", 0: "constant"}
        refine = lambda a, b: _bisect(samples.slope, a, b)
        return [
            MonotonicRun(Interval.closed(a, b), names[s])
            for a, b, s in _partition(samples.xs, samples.slope_signs, refine)
        ]

    def concavity(self, samples: _Samples) -> List[ConcavityRun]:
        refine = lambda a, b: _bisect(samples.curvature, a, b)
        return [
            ConcavityRun(Interval.closed(a, b), "up" if s > 0 else "down")
            for a, b, s in _partition(samples.xs, samples.curvature_signs, refine)
            if s != 0
        ]

    def inflection_points(self, samples: _Samples) -> List[InflectionPoint]:
        f = samples.f
        out: List[InflectionPoint] = []
        for j, i in _sign_flips(samples.curvature_signs):
            x = _bisect(samples.curvature, float(samples.xs[j]), float(samples.xs[i]))
            fx = f(x)
            if math.isfinite(fx) and math.isfinite(samples.slope(x)):
                out.append(InflectionPoint(_clean(x), _clean(fx)))
        return out

    def _breaks(self, samples: _Samples) -> List[float]:
        """
        Rounded points where f may fail to be continuous: edges of undefined
        stretches of the grid, sign changes of f that are not roots, and leaps
        between defined samples.
        """
        f = samples.f
        candidates: List[float] = []
        defined = np.isfinite(samples.ys)
        xs = samples.xs
        for i in range(len(xs) - 1):
            if defined[i] and not defined[i + 1]:
                candidates.append(_definedness_edge(f, float(xs[i]), float(xs[i + 1])))
            elif not defined[i] and defined[i + 1]:
                candidates.append(_definedness_edge(f, float(xs[i + 1]), float(xs[i])))
        for c in self._sign_changes(samples):
            if not abs(f(c)) <= INTERCEPT_TOLERANCE:
                candidates.append(c)
        candidates.extend(_jumps(f, xs, samples.ys))
        out: List[float] = []
        for c in candidates:
            value = _clean(c)
            if value not in out:
                out.append(value)
        return out

    def asymptotes(self, samples: _Samples) -> List[Asymptote]:
        f = samples.f
        out: List[Asymptote] = []
        for value in self._breaks(samples):
            near = [f(value - POLE_OFFSET), f(value + POLE_OFFSET)]
            if any(math.isfinite(v) and abs(v) > POLE_THRESHOLD for v in near):
                out.append(Asymptote("vertical", value, f"x = {format_number(value)}"))

        if any(True for _ in f.dag.var_nodes()):
            levels = []
            for side in (-1, 1):
                near, far = (f(side * p) for p in HORIZONTAL_POINTS)
                if math.isfinite(near) and math.isfinite(far) and abs(near - far) < HORIZONTAL_TOLERANCE:
                    level = round(far, 3) + 0.0
                    if level not in levels:
                        levels.append(level)
            for level in levels:
                out.append(Asymptote("horizontal", level, f"y = {format_number(level)}"))
        return out

    def continuity(self, samples: _Samples, options: AnalysisOptions) -> Continuity:
        """
        Discontinuities inside the window, classified by probing either side
        of each break. A point where f is undefined on one side is the edge of
        its domain and not a discontinuity.
        """
        f = samples.f
        window = Interval.closed(*options.window)
        found: List[Discontinuity] = []
        for x in sorted(self._breaks(samples)):
            if not window.contains(x):
                continue
            left, right = f(x - POLE_OFFSET), f(x + POLE_OFFSET)
            if not (math.isfinite(left) and math.isfinite(right)):
                continue
            fx = f(x)
            y = _clean(fx) if math.isfinite(fx) else None
            if max(abs(left), abs(right)) > POLE_THRESHOLD:
                kind = "infinite"
            elif abs(left - right) > JUMP_TOLERANCE:
                kind = "jump"
            elif y is None:
                kind = "removable"
            else:
                continue
            found.append(Discontinuity(x, y, kind))
        return Continuity(window, not found, found)

    def symmetry(self, f: Evaluator) -> str:
        pts = np.array(SYMMETRY_POINTS)
        a, b = f.sample(pts), f.sample(-pts)
        mask = np.isfinite(a) & np.isfinite(b)
        if not mask.any():
            return "none"
        a, b = a[mask], b[mask]
        if np.allclose(a, b, rtol=SYMMETRY_TOLERANCE, atol=SYMMETRY_TOLERANCE):
            return "even"
        if np.allclose(a, -b, rtol=SYMMETRY_TOLERANCE, atol=SYMMETRY_TOLERANCE):
            return "odd"
        return "none"


_default_analyzer = FunctionAnalyzer()

def analyze_function(expression: str, options: Optional[AnalysisOptions] = None) -> AnalysisResult:
    return _default_analyzer.analyze(expression, options)
