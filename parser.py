from __future__ import annotations
import math
import re
from fractions import Fraction
from typing import Callable, List, Optional, Sequence, TypeVar

from rational import Rational
from polynomial import Polynomial
from edag import EDAG, FUNCTIONS

# larger expansions are left to numeric evaluation
MAX_POLYNOMIAL_DEGREE = 100

# =====================
# Tokenizer
# =====================

_CONSTANTS = {"pi": math.pi, "e": math.e}


class Tok:
    def __init__(self, kind: str, lex: str = "", num: Rational | float | None = None):
        self.kind, self.lex, self.num = kind, lex, num

    def __repr__(self) -> str:
        return f"Tok({self.kind!r}, {self.lex!r})"


def normalize_expression(expr: str) -> str:
    """Map common alternative spellings onto the core syntax."""
    s = expr.strip()
    s = s.replace("Math.", "")
    s = s.replace("**", "^")
    s = s.replace("²", "^2").replace("³", "^3")
    s = s.replace("÷", "/").replace("×", "*").replace("·", "*")
    s = re.sub(r"√\s*([A-Za-z0-9_.]+)", r"sqrt(\1)", s)
    s = s.replace("√", "sqrt")
    return s


def _operand_before(prev: Optional[Tok]) -> bool:
    return prev is not None and prev.kind in ("ID", "NUM", ")")


def tokenize(expr: str) -> List[Tok]:
    s = normalize_expression(expr)
    i, n = 0, len(s)
    toks: List[Tok] = []
    prev: Optional[Tok] = None
    while i < n:
        c = s[i]
        if c.isspace():
            i += 1
            continue
        if c in "+-*/^()":
            k = c
            i += 1
            unary = prev is None or prev.kind in ("+", "-", "*", "/", "^", "(", "NEG")
            if k == "+" and unary:
                continue
            if k == "-" and unary:
                k = "NEG"
            # implicit multiplication when an opening parenthesis follows an operand, e.g. "2(x+1)"
            if k == "(" and _operand_before(prev):
                toks.append(Tok("*", "*"))
            t = Tok(k, k)
            toks.append(t)
            prev = t
            continue
        if c.isdigit() or (c == "." and i + 1 < n and s[i + 1].isdigit()):
            j = i
            has_dot = False
            while j < n and (s[j].isdigit() or (s[j] == "." and not has_dot)):
                has_dot = has_dot or s[j] == "."
                j += 1
            num_str = s[i:j]
            if _operand_before(prev):
                toks.append(Tok("*", "*"))
            toks.append(Tok("NUM", num_str, Rational(Fraction(num_str))))
            i = j
            prev = toks[-1]
            continue
        if c.isalpha() or c == "_":
            j = i + 1
            while j < n and (s[j].isalnum() or s[j] == "_"):
                j += 1
            name = s[i:j]
            lname = name.lower()
            k = j
            while k < n and s[k].isspace():
                k += 1
            is_call = k < n and s[k] == "("
            if _operand_before(prev):
                toks.append(Tok("*", "*"))
            if is_call and lname in FUNCTIONS:
                toks.append(Tok("FUNC", lname))
            elif lname in _CONSTANTS:
                toks.append(Tok("NUM", lname, _CONSTANTS[lname]))
            elif is_call and name != "x":
                raise ValueError(f"Unknown function {name}")
            else:
                toks.append(Tok("ID", name))
            i = j
            prev = toks[-1]
            continue
        raise ValueError(f"Unexpected char {c}")
    return toks


# =====================
# Shunting-yard
# =====================

_prec = {"NEG": 4, "^": 5, "*": 3, "/": 3, "+": 2, "-": 2}
_right_assoc = {"NEG", "^"}


def to_rpn(toks: Sequence[Tok]) -> List[Tok]:
    out: List[Tok] = []
    op: List[Tok] = []
    for t in toks:
        if t.kind in ("NUM", "ID"):
            out.append(t)
        elif t.kind in ("FUNC", "NEG"):
            # prefix operators never pop
            op.append(t)
        elif t.kind in _prec:
            while (
                op
                and op[-1].kind not in ("(", "FUNC")
                and (
                    (t.kind in _right_assoc and _prec[t.kind] < _prec[op[-1].kind])
                    or (t.kind not in _right_assoc and _prec[t.kind] <= _prec[op[-1].kind])
                )
            ):
                out.append(op.pop())
            op.append(t)
        elif t.kind == "(":
            op.append(t)
        elif t.kind == ")":
            while op and op[-1].kind != "(":
                out.append(op.pop())
            if not op:
                raise ValueError("Mismatched parens")
            op.pop()
            if op and op[-1].kind == "FUNC":
                out.append(op.pop())
        else:
            raise ValueError("Unknown token kind")
    while op:
        if op[-1].kind in ("(", "FUNC"):
            raise ValueError("Mismatched parens")
        out.append(op.pop())
    return out


# =====================
# RPN folding
# =====================

_BINARY_KINDS = ("+", "-", "*", "/", "^")
T = TypeVar("T")


def _fold(
    rpn: Sequence[Tok],
    num: Callable[[Tok], T],
    ident: Callable[[Tok], T],
    unary: Callable[[Tok, T], T],
    binary: Callable[[str, T, T], T],
) -> T:
    """Reduce an RPN stream bottom-up with the given builders."""
    stack: List[T] = []
    for t in rpn:
        if t.kind == "NUM":
            stack.append(num(t))
        elif t.kind == "ID":
            stack.append(ident(t))
        elif t.kind in ("NEG", "FUNC"):
            if not stack:
                raise ValueError(f"{t.lex} is missing its operand")
            stack.append(unary(t, stack.pop()))
        elif t.kind in _BINARY_KINDS:
            if len(stack) < 2:
                raise ValueError(f"operator {t.kind} is missing operands")
            rhs = stack.pop()
            stack.append(binary(t.kind, stack.pop(), rhs))
        else:
            raise ValueError(f"unexpected token {t!r}")
    if len(stack) != 1:
        raise ValueError("malformed expression")
    return stack[0]


def rpn_to_edag(rpn: Sequence[Tok], variables: Sequence[str] = ("x",)) -> EDAG:
    dag = EDAG()

    def ident(t: Tok) -> str:
        if t.lex not in variables:
            raise ValueError(f"Unknown variable '{t.lex}'")
        return dag.add_var(t.lex)

    def unary(t: Tok, arg: str) -> str:
        return dag.add_op("-" if t.kind == "NEG" else t.lex, [arg], is_unary=True)

    dag.root = _fold(
        rpn,
        lambda t: dag.add_const(t.num, t.lex),
        ident,
        unary,
        lambda op, a, b: dag.add_op(op, [a, b]),
    )
    return dag


def parse_expression_edag(expr: str, variables: Sequence[str] = ("x",)) -> EDAG:
    if not expr or not expr.strip():
        raise ValueError("empty expression")
    return rpn_to_edag(to_rpn(tokenize(expr)), variables)


def _polynomial_op(op: str, a: Polynomial, b: Polynomial) -> Polynomial:
    if op == "+":
        return a + b
    if op == "-":
        return a - b
    if op == "*":
        if a.degree() + b.degree() > MAX_POLYNOMIAL_DEGREE:
            raise ValueError(f"Degree exceeds {MAX_POLYNOMIAL_DEGREE}")
        return a * b
    if not b.is_constant():
        raise ValueError("Division by non-constant is not polynomial" if op == "/" else "Exponent must be constant")
    c = b.leading()
    if op == "/":
        if c.is_zero():
            raise ValueError("Division by zero")
        return a.scalar_mul(Rational(1, 1) / c)
    if not c.is_int() or c.numerator() < 0:
        raise ValueError("Exponent must be a non-negative integer")
    exp = c.to_int()
    if exp > MAX_POLYNOMIAL_DEGREE or a.degree() * exp > MAX_POLYNOMIAL_DEGREE:
        raise ValueError(f"Degree exceeds {MAX_POLYNOMIAL_DEGREE}")
    return a.pow(exp)


def rpn_to_polynomial(rpn: Sequence[Tok], var: str = "x") -> Polynomial:
    def ident(t: Tok) -> Polynomial:
        if t.lex != var:
            raise ValueError(f"Unknown variable '{t.lex}'")
        return Polynomial.variable()

    def unary(t: Tok, arg: Polynomial) -> Polynomial:
        if t.kind == "FUNC":
            raise ValueError(f"Function {t.lex} is not polynomial")
        return arg.scalar_mul(Rational(-1, 1))

    return _fold(rpn, lambda t: Polynomial.constant(t.num), ident, unary, _polynomial_op)


def parse_polynomial(expr: str, var: str = "x") -> Polynomial:
    if not expr or not expr.strip():
        raise ValueError("empty expression")
    return rpn_to_polynomial(to_rpn(tokenize(expr)), var)


def try_parse_polynomial(expr: str, var: str = "x") -> Optional[Polynomial]:
    try:
        return parse_polynomial(expr, var)
    except (ValueError, ZeroDivisionError):
        return None
