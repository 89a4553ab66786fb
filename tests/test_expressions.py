"""Tests for tokenizing, the expression DAG and numeric evaluation."""

import math

import numpy as np
import pytest

from evaluator import compile_expression, evaluate
from parser import (
    normalize_expression,
    parse_expression_edag,
    parse_polynomial,
    tokenize,
    try_parse_polynomial,
)
from polynomial import Polynomial


class TestTokenizer:
    """Lexing and normalization."""

    def test_implicit_multiplication(self):
        assert [t.kind for t in tokenize("2x")] == ["NUM", "*", "ID"]
        assert [t.kind for t in tokenize("3(x+1)")] == ["NUM", "*", "(", "ID", "+", "NUM", ")"]
        assert [t.kind for t in tokenize("x sin(x)")] == ["ID", "*", "FUNC", "(", "ID", ")"]

    def test_unary_minus(self):
        assert [t.kind for t in tokenize("-x")] == ["NEG", "ID"]
        assert [t.kind for t in tokenize("+x")] == ["ID"]

    def test_normalize(self):
        assert normalize_expression("Math.sqrt(x)") == "sqrt(x)"
        assert normalize_expression("x**2") == "x^2"
        assert normalize_expression("x² + x³") == "x^2 + x^3"
        assert normalize_expression("√x") == "sqrt(x)"

    def test_unknown_function(self):
        with pytest.raises(ValueError):
            tokenize("foo(x)")


class TestEvaluation:
    """Values and undefined points."""

    def test_arithmetic(self):
        assert evaluate("x^2", 3) == 9
        assert evaluate("x**2", 3) == 9
        assert evaluate("3(x+1)", 1) == 6
        assert evaluate("2^-1", 0) == 0.5
        assert evaluate("-x^2", 3) == -9
        assert evaluate("2^3^2", 0) == 512

    def test_functions_and_constants(self):
        assert evaluate("log(x)", 100) == pytest.approx(2)
        assert evaluate("ln(e)", 0) == pytest.approx(1)
        assert evaluate("Math.sqrt(x)", 4) == pytest.approx(2)
        assert evaluate("sin(pi/2)", 0) == pytest.approx(1)
        assert evaluate("abs(x)", -3) == 3

    def test_undefined_is_nan(self):
        assert math.isnan(evaluate("sqrt(x)", -1))
        assert math.isnan(evaluate("1/x", 0))
        assert math.isnan(evaluate("log(x)", 0))
        assert math.isnan(evaluate("ln(x)", -2))
        assert math.isnan(evaluate("exp(x)", 1e6))

    def test_sample(self):
        f = compile_expression("sqrt(x)")
        ys = f.sample(np.array([-1.0, 0.0, 4.0]))
        assert math.isnan(ys[0])
        assert ys[1] == 0
        assert ys[2] == 2
        assert f.is_defined(1.0)
        assert not f.is_defined(-1.0)

    @pytest.mark.parametrize("text", ["", "   ", "(x+1", "x +", "y + 1", "foo(x)", "x $ 2"])
    def test_malformed_raises(self, text):
        with pytest.raises(ValueError):
            compile_expression(text)


class TestExpressionDag:
    """Structure and printing of the DAG."""

    def test_to_string(self):
        assert str(parse_expression_edag("x^2 - 2x + 1")) == "x^2 - 2*x + 1"
        assert str(parse_expression_edag("sqrt(x - 1)")) == "sqrt(x - 1)"
        assert str(parse_expression_edag("1/(x - 2)")) == "1/(x - 2)"

    def test_structure_queries(self):
        dag = parse_expression_edag("sin(2x) + 3")
        ops = [dag.node(n).op for n in dag.op_nodes()]
        assert sorted(ops) == ["*", "+", "sin"]
        (var,) = list(dag.var_nodes())
        enclosing = sorted(dag.node(n).op for n in dag.enclosing_ops(var))
        assert enclosing == ["*", "+", "sin"]
        assert dag.depends_on_var(dag.root)


class TestPolynomialParsing:
    """Folding expressions onto coefficients."""

    def test_expanded(self):
        p = parse_polynomial("x^3 - 6x^2 + 11x - 6")
        assert p.coeffs == Polynomial.from_numbers([1, -6, 11, -6]).coeffs

    def test_products_and_constants(self):
        assert parse_polynomial("(x-1)(x+1)").coeffs == Polynomial.from_numbers([1, 0, -1]).coeffs
        assert parse_polynomial("x/2").coeffs == Polynomial.from_numbers([0.5, 0]).coeffs
        assert parse_polynomial("(x+1)^2").coeffs == Polynomial.from_numbers([1, 2, 1]).coeffs

    @pytest.mark.parametrize("text", ["sin(x)", "1/x", "x^-1", "x^0.5", "y + 1", "x^x"])
    def test_not_polynomial(self, text):
        with pytest.raises(ValueError):
            parse_polynomial(text)
        assert try_parse_polynomial(text) is None

    def test_degree_cap(self):
        assert parse_polynomial("x^100").degree() == 100
        with pytest.raises(ValueError):
            parse_polynomial("x^2500")
        with pytest.raises(ValueError):
            parse_polynomial("x^60 * x^60")
        assert try_parse_polynomial("(x + 1)^101") is None
