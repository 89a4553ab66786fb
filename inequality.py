"""
Inequality parsing.

Turns textual single-variable inequalities into unions of intervals together
with set-builder and interval notation. Supported shapes, tried in order:

    2 < x <= 5            chained (also 5 > x > 2)
    x < -1 or x > 3       logical, any number of clauses; "and" binds tighter
    |x - 1| < 2           absolute value, operators < <= > >=
    x >= 4, 4 < x         simple
    x = 3                 a single point

Anything else degrades to the empty set instead of raising.
"""
from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from interval import (
    EMPTY_SET,
    Interval,
    intersect_all,
    to_interval_notation,
    to_set_notation,
    union,
)

logger = logging.getLogger(__name__)

Number = Union[int, float]

_NUM = r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)"
_UNUM = r"(?:\d+(?:\.\d*)?|\.\d+)"
_OP = r"<=|>=|<|>"

_CHAINED = re.compile(rf"^({_NUM})\s*({_OP})\s*x\s*({_OP})\s*({_NUM})$")
_ABSOLUTE = re.compile(
    rf"^\|\s*x\s*(?:([+-])\s*({_UNUM}))?\s*\|\s*({_OP})\s*({_NUM})$"
)
_VAR_FIRST = re.compile(rf"^x\s*({_OP})\s*({_NUM})$")
_NUM_FIRST = re.compile(rf"^({_NUM})\s*({_OP})\s*x$")
_VAR_EQ = re.compile(rf"^x\s*=\s*({_NUM})$")
_EQ_VAR = re.compile(rf"^({_NUM})\s*=\s*x$")
_OR_SPLIT = re.compile(r"\s+or\s+", re.IGNORECASE)
_AND_SPLIT = re.compile(r"\s+and\s+", re.IGNORECASE)


@dataclass(frozen=True)
class InequalityResult:
    text: str
    type: Optional[str]
    operator: Optional[str]
    intervals: Tuple[Interval, ...]
    set_notation: str
    interval_notation: str

    @staticmethod
    def unparsed(text: str) -> "InequalityResult":
        return InequalityResult(text, None, None, (), EMPTY_SET, EMPTY_SET)

    def is_empty(self) -> bool:
        return len(self.intervals) == 0


def _num(s: str) -> Number:
    v = float(s)
    return int(v) if v.is_integer() else v


def _normalize(text: str) -> str:
    s = text.strip()
    s = s.replace("≤", "<=").replace("≥", ">=")
    s = s.replace("∪", " or ").replace("∩", " and ")
    s = s.replace("X", "x")
    return s


def _ray(op: str, c: Number, var_on_left: bool) -> Interval:
    # "c < x" reads as "x > c"
    if not var_on_left:
        op = {"<": ">", "<=": ">=", ">": "<", ">=": "<="}[op]
    if op.startswith(">"):
        return Interval.above(c, inclusive=op.endswith("="))
    return Interval.below(c, inclusive=op.endswith("="))


def _parse_chained(s: str) -> Optional[List[Interval]]:
    m = _CHAINED.match(s)
    if m is None:
        return None
    a, op1, op2, b = _num(m.group(1)), m.group(2), m.group(3), _num(m.group(4))
    if op1[0] != op2[0]:
        return None
    if op1[0] == ">":
        # 5 > x > 2  is  2 < x < 5
        a, b, op1, op2 = b, a, op2, op1
    iv = Interval(a, b, not op1.endswith("="), not op2.endswith("="))
    return union([iv])


def _parse_absolute(s: str) -> Optional[Tuple[str, List[Interval]]]:
    m = _ABSOLUTE.match(s)
    if m is None:
        return None
    sign, offset, op, k = m.group(1), m.group(2), m.group(3), _num(m.group(4))
    h: Number = 0
    if offset is not None:
        h = _num(offset) if sign == "-" else -_num(offset)
    inclusive = op.endswith("=")
    if op.startswith("<"):
        # |x - h| < k  <=>  h - k < x < h + k
        if k < 0 or (k == 0 and not inclusive):
            return "and", []
        return "and", union([Interval(h - k, h + k, not inclusive, not inclusive)])
    # |x - h| > k  <=>  x < h - k  or  x > h + k
    if k < 0 or (k == 0 and inclusive):
        return "or", [Interval.reals()]
    return "or", union(
        [Interval.below(h - k, inclusive), Interval.above(h + k, inclusive)]
    )


def _parse_simple(s: str) -> Optional[List[Interval]]:
    m = _VAR_FIRST.match(s)
    if m is not None:
        return [_ray(m.group(1), _num(m.group(2)), var_on_left=True)]
    m = _NUM_FIRST.match(s)
    if m is not None:
        return [_ray(m.group(2), _num(m.group(1)), var_on_left=False)]
    m = _VAR_EQ.match(s) or _EQ_VAR.match(s)
    if m is not None:
        return [Interval.point(_num(m.group(1)))]
    return None


def _parse_clause(s: str) -> Optional[Tuple[str, Optional[str], List[Interval]]]:
    """Parse one clause; returns (type, operator, intervals) or None."""
    s = s.strip()
    chained = _parse_chained(s)
    if chained is not None:
        return "compound", "and", chained
    absolute = _parse_absolute(s)
    if absolute is not None:
        return "absolute", absolute[0], absolute[1]
    simple = _parse_simple(s)
    if simple is not None:
        return "simple", None, simple
    return None


def _parse_logical(s: str) -> Optional[Tuple[str, List[Interval]]]:
    if not (_OR_SPLIT.search(s) or _AND_SPLIT.search(s)):
        return None
    or_groups = _OR_SPLIT.split(s)
    groups: List[List[Interval]] = []
    for group in or_groups:
        clauses = _AND_SPLIT.split(group)
        parsed: List[List[Interval]] = []
        for clause in clauses:
            res = _parse_clause(clause)
            if res is None:
                logger.debug("unparseable clause %r in %r", clause, s)
                return None
            parsed.append(res[2])
        groups.append(intersect_all(parsed))
    operator = "or" if len(or_groups) > 1 else "and"
    return operator, union(iv for g in groups for iv in g)


def parse_inequality(text: str) -> InequalityResult:
    """Parse an inequality in x; never raises for malformed text."""
    if not isinstance(text, str):
        raise TypeError(f"inequality text must be a string, got {type(text).__name__}")
    s = _normalize(text)
    if not s:
        return InequalityResult.unparsed(text)

    if _CHAINED.match(s):
        intervals = _parse_chained(s)
        if intervals is not None:
            return _result(text, s, "compound", "and", intervals)

    logical = _parse_logical(s)
    if logical is not None:
        return _result(text, s, "compound", logical[0], logical[1])

    clause = _parse_clause(s)
    if clause is None:
        logger.debug("no inequality shape matched %r", text)
        return InequalityResult.unparsed(text)
    return _result(text, s, clause[0], clause[1], clause[2])


def _result(
    text: str, predicate: str, kind: str, operator: Optional[str], intervals: List[Interval]
) -> InequalityResult:
    merged = union(intervals)
    return InequalityResult(
        text=text,
        type=kind,
        operator=operator,
        intervals=tuple(merged),
        set_notation=to_set_notation(predicate),
        interval_notation=to_interval_notation(merged),
    )
