from __future__ import annotations
from fractions import Fraction
from math import gcd
from typing import Union

NumberLike = Union[int, float, Fraction, "Rational"]

class Rational:
	__slots__ = ("_f",)
	def __init__(self, num: int | Fraction, den: int | None = None) -> None:
		if isinstance(num, Fraction):
			self._f = num
		else:
			self._f = Fraction(num, 1 if den is None else den)
	@staticmethod
	def from_number(value: NumberLike) -> Rational:
		"""Exact conversion; floats go through their shortest decimal repr."""
		if isinstance(value, Rational):
			return value
		if isinstance(value, bool):
			raise TypeError("bool is not a coefficient")
		if isinstance(value, (int, Fraction)):
			return Rational(Fraction(value))
		if isinstance(value, float):
			if value != value or value in (float("inf"), float("-inf")):
				raise ValueError(f"non-finite value {value}")
			return Rational(Fraction(repr(value)))
		raise TypeError(f"cannot convert {type(value).__name__} to Rational")
	@staticmethod
	def _coerce(other: object) -> Fraction | None:
		if isinstance(other, Rational):
			return other._f
		if isinstance(other, (int, Fraction)) and not isinstance(other, bool):
			return Fraction(other)
		return None
	def __add__(self, other: Rational | int) -> Rational:
		return Rational(self._f + self._coerce(other))
	def __sub__(self, other: Rational | int) -> Rational:
		return Rational(self._f - self._coerce(other))
	def __mul__(self, other: Rational | int) -> Rational:
		return Rational(self._f * self._coerce(other))
	def __truediv__(self, other: Rational | int) -> Rational:
		o = self._coerce(other)
		if o == 0:
			raise ZeroDivisionError("division by zero")
		return Rational(self._f / o)
	def __neg__(self) -> Rational:
		return Rational(-self._f)
	def __abs__(self) -> Rational:
		return Rational(abs(self._f))
	def __eq__(self, other: object) -> bool:
		o = self._coerce(other)
		if o is None:
			return False
		return self._f == o
	def __hash__(self) -> int:
		return hash(self._f)
	def __lt__(self, other: Rational) -> bool:
		return self._f < self._coerce(other)
	def __le__(self, other: Rational) -> bool:
		return self._f <= self._coerce(other)
	def __gt__(self, other: Rational) -> bool:
		return self._f > self._coerce(other)
	def __ge__(self, other: Rational) -> bool:
		return self._f >= self._coerce(other)
	def __float__(self) -> float:
		return self._f.numerator / self._f.denominator
	def __repr__(self) -> str:
		return f"Rational({self.to_string()})"
	def is_zero(self) -> bool:
		return self._f == 0
	def is_int(self) -> bool:
		return self._f.denominator == 1
	def to_int(self) -> int:
		return self._f.numerator // self._f.denominator
	def numerator(self) -> int:
		return self._f.numerator
	def denominator(self) -> int:
		return self._f.denominator
	def sign(self) -> int:
		return (self._f > 0) - (self._f < 0)
	def to_string(self) -> str:
		if self._f.denominator == 1:
			return str(self._f.numerator)
		return f"{self._f.numerator}/{self._f.denominator}"
	def __str__(self) -> str:
		return self.to_string()

def lcm(a: int, b: int) -> int:
	if a == 0 or b == 0:
		return 0
	return abs(a * b) // gcd(a, b)
