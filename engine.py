"""
Entry points of the analysis engine.

Three pure operations: inequality parsing, function property analysis and
polynomial analysis. MathEngine holds no mutable state, so one instance can
serve concurrent callers.
"""
from __future__ import annotations
import logging
from typing import Iterable, Optional, Sequence, Tuple, Union

from function_analyzer import (
    AnalysisOptions,
    AnalysisResult,
    FunctionAnalyzer,
    SamplingStrategy,
)
from inequality import InequalityResult
from inequality import parse_inequality as _parse_inequality
from polynomial import Polynomial
from polynomial_analyzer import PolynomialAnalysis, PolynomialAnalyzer
from rational import NumberLike

logger = logging.getLogger(__name__)

PolynomialSource = Union[str, Sequence[NumberLike], Polynomial]


class MathEngine:
    def __init__(
        self,
        strategy: Optional[SamplingStrategy] = None,
        tol: Optional[float] = None,
    ) -> None:
        self.functions = FunctionAnalyzer(strategy)
        self.polynomials = PolynomialAnalyzer() if tol is None else PolynomialAnalyzer(tol)

    def parse_inequality(self, text: str) -> InequalityResult:
        result = _parse_inequality(text)
        logger.debug("inequality %r -> %s", text, result.interval_notation)
        return result

    def analyze_function_properties(
        self,
        expression: str,
        options: Optional[AnalysisOptions] = None,
        analyses: Optional[Iterable[str]] = None,
        domain: Optional[Tuple[float, float]] = None,
    ) -> AnalysisResult:
        """
        Analyze f(x). Either pass a full AnalysisOptions, or the requested
        analyses and/or sampling window directly.
        """
        if options is None:
            kwargs = {}
            if analyses is not None:
                kwargs["analyses"] = analyses
            if domain is not None:
                kwargs["window"] = domain
            options = AnalysisOptions(**kwargs)
        elif analyses is not None or domain is not None:
            raise ValueError("pass either options or analyses/domain, not both")
        result = self.functions.analyze(expression, options)
        if result.failed:
            logger.debug("analysis of %r degraded: %s", expression, ", ".join(result.failed))
        return result

    def analyze_polynomial(
        self, source: PolynomialSource, divisors: Sequence[NumberLike] = ()
    ) -> PolynomialAnalysis:
        result = self.polynomials.analyze(source, divisors)
        if result.error:
            logger.debug("polynomial analysis of %r failed: %s", source, result.error)
        return result


_default_engine = MathEngine()

def parse_inequality(text: str) -> InequalityResult:
    return _default_engine.parse_inequality(text)

def analyze_function_properties(
    expression: str,
    options: Optional[AnalysisOptions] = None,
    analyses: Optional[Iterable[str]] = None,
    domain: Optional[Tuple[float, float]] = None,
) -> AnalysisResult:
    return _default_engine.analyze_function_properties(expression, options, analyses, domain)

def analyze_polynomial(source: PolynomialSource, divisors: Sequence[NumberLike] = ()) -> PolynomialAnalysis:
    return _default_engine.analyze_polynomial(source, divisors)
