"""Numeric evaluation: compile an expression in x once, then sample it anywhere."""
from __future__ import annotations
import math
from typing import Iterable, Union

import numpy as np

from edag import EDAG
from parser import parse_expression_edag

ArrayLike = Union[float, Iterable[float], np.ndarray]


class Evaluator:
    """Callable wrapper over a compiled expression DAG.

    Calls never raise for numerically undefined inputs (negative sqrt, log of
    a non-positive number, division by zero, overflow); they return nan.
    """

    def __init__(self, text: str, dag: EDAG, var: str = "x") -> None:
        self.text = text
        self.dag = dag
        self.var = var

    def __call__(self, x: float) -> float:
        return float(self.dag.eval_array({self.var: x}))

    def sample(self, xs: ArrayLike) -> np.ndarray:
        return self.dag.eval_array({self.var: np.asarray(xs, dtype=float)})

    def is_defined(self, x: float) -> bool:
        return math.isfinite(self(x))

    def __repr__(self) -> str:
        return f"Evaluator({self.text!r})"


def compile_expression(text: str, var: str = "x") -> Evaluator:
    """Raises ValueError for malformed text or unknown identifiers."""
    return Evaluator(text, parse_expression_edag(text, (var,)), var)


def evaluate(text: str, x: float) -> float:
    return compile_expression(text)(x)
