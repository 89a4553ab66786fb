from __future__ import annotations
from dataclasses import dataclass
from functools import reduce
from math import gcd
from typing import Iterable, List, Tuple

from rational import NumberLike, Rational, lcm


@dataclass(frozen=True)
class Polynomial:
    """Univariate polynomial, coefficients ordered from the highest degree down.

    Leading zeros are stripped on construction; the zero polynomial keeps a
    single zero coefficient.
    """

    coeffs: Tuple[Rational, ...] = (Rational(0, 1),)

    def __post_init__(self):
        cs = tuple(Rational.from_number(c) for c in self.coeffs)
        i = 0
        while i < len(cs) - 1 and cs[i].is_zero():
            i += 1
        object.__setattr__(self, "coeffs", cs[i:] if cs else (Rational(0, 1),))

    @staticmethod
    def from_numbers(values: Iterable[NumberLike]) -> "Polynomial":
        return Polynomial(tuple(Rational.from_number(v) for v in values))

    @staticmethod
    def constant(c: NumberLike) -> "Polynomial":
        return Polynomial((Rational.from_number(c),))

    @staticmethod
    def variable() -> "Polynomial":
        return Polynomial((Rational(1, 1), Rational(0, 1)))

    def degree(self) -> int:
        return len(self.coeffs) - 1

    def leading(self) -> Rational:
        return self.coeffs[0]

    def constant_term(self) -> Rational:
        return self.coeffs[-1]

    def is_zero(self) -> bool:
        return len(self.coeffs) == 1 and self.coeffs[0].is_zero()

    def is_constant(self) -> bool:
        return len(self.coeffs) == 1

    def is_integral(self) -> bool:
        return all(c.is_int() for c in self.coeffs)

    def to_floats(self) -> List[float]:
        return [float(c) for c in self.coeffs]

    def evaluate(self, x: NumberLike) -> Rational:
        """Horner's method, exact."""
        xr = Rational.from_number(x)
        result = Rational(0, 1)
        for c in self.coeffs:
            result = result * xr + c
        return result

    def evaluate_float(self, x: float) -> float:
        result = 0.0
        for c in self.to_floats():
            result = result * x + c
        return result

    def _padded(self, n: int) -> List[Rational]:
        return [Rational(0, 1)] * (n - len(self.coeffs)) + list(self.coeffs)

    def __add__(self, rhs: "Polynomial") -> "Polynomial":
        n = max(len(self.coeffs), len(rhs.coeffs))
        return Polynomial(tuple(a + b for a, b in zip(self._padded(n), rhs._padded(n))))

    def __sub__(self, rhs: "Polynomial") -> "Polynomial":
        return self + rhs.scalar_mul(Rational(-1, 1))

    def __mul__(self, rhs: "Polynomial") -> "Polynomial":
        out = [Rational(0, 1)] * (len(self.coeffs) + len(rhs.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            for j, b in enumerate(rhs.coeffs):
                out[i + j] = out[i + j] + a * b
        return Polynomial(tuple(out))

    def scalar_mul(self, r: Rational) -> "Polynomial":
        return Polynomial(tuple(c * r for c in self.coeffs))

    def pow(self, exp: int) -> "Polynomial":
        if exp < 0:
            raise ValueError("negative exponent")
        res = Polynomial.constant(1)
        base = self
        while exp:
            if exp & 1:
                res = res * base
            exp >>= 1
            if exp:
                base = base * base
        return res

    def divmod(self, rhs: "Polynomial") -> Tuple["Polynomial", "Polynomial"]:
        """Long division: (q, r) with self == q * rhs + r and deg r < deg rhs."""
        if rhs.is_zero():
            raise ZeroDivisionError("polynomial division by zero")
        rem = list(self.coeffs)
        lead = rhs.leading()
        n = rhs.degree()
        quot: List[Rational] = []
        while len(rem) > n:
            q = rem[0] / lead
            quot.append(q)
            for i, c in enumerate(rhs.coeffs):
                rem[i] = rem[i] - q * c
            rem.pop(0)
        return Polynomial(tuple(quot) or (Rational(0, 1),)), Polynomial(tuple(rem) or (Rational(0, 1),))

    def monic(self) -> "Polynomial":
        if self.is_zero():
            return self
        return self.scalar_mul(Rational(1, 1) / self.leading())

    def derivative(self) -> "Polynomial":
        n = self.degree()
        if n == 0:
            return Polynomial.constant(0)
        return Polynomial(tuple(c * (n - i) for i, c in enumerate(self.coeffs[:-1])))

    def integer_form(self) -> Tuple[Rational, "Polynomial"]:
        """Split into (scale, P) with P integral and primitive, self == scale * P.

        The sign is chosen so that P has a positive leading coefficient.
        """
        if self.is_zero():
            return Rational(1, 1), self
        den = reduce(lcm, (c.denominator() for c in self.coeffs), 1)
        ints = [(c * den).to_int() for c in self.coeffs]
        g = reduce(gcd, (abs(v) for v in ints), 0) or 1
        if ints[0] < 0:
            g = -g
        prim = Polynomial(tuple(Rational(v // g, 1) for v in ints))
        return Rational(g, den), prim

    def strip_zero_roots(self) -> Tuple[int, "Polynomial"]:
        """Factor out x^k; returns (k, quotient)."""
        k = 0
        cs = self.coeffs
        while len(cs) > 1 and cs[-1].is_zero():
            cs = cs[:-1]
            k += 1
        return k, Polynomial(cs)

    def to_string(self, var: str = "x") -> str:
        if self.is_zero():
            return "0"
        parts: List[str] = []
        n = self.degree()
        for i, c in enumerate(self.coeffs):
            if c.is_zero():
                continue
            power = n - i
            mag = abs(c)
            if power == 0:
                body = mag.to_string()
            else:
                coeff = "" if mag == Rational(1, 1) else mag.to_string()
                if coeff and not mag.is_int():
                    coeff = f"({coeff})"
                body = coeff + (var if power == 1 else f"{var}^{power}")
            if not parts:
                parts.append(f"-{body}" if c.sign() < 0 else body)
            else:
                parts.append(f" - {body}" if c.sign() < 0 else f" + {body}")
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_string()


def poly_gcd(a: Polynomial, b: Polynomial) -> Polynomial:
    """Monic greatest common divisor by the Euclidean algorithm."""
    while not b.is_zero():
        a, b = b, a.divmod(b)[1]
    return a.monic()
