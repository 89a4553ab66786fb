from __future__ import annotations
from dataclasses import dataclass
from math import inf
from typing import Iterable, List, Optional, Sequence, Union

Number = Union[int, float]

EMPTY_SET = "∅"
REAL_LINE = "ℝ"


def format_number(v: Number) -> str:
    """Render a bound without float noise: 2 -> "2", 2.5 -> "2.5"."""
    if v == inf:
        return "+∞"
    if v == -inf:
        return "-∞"
    s = f"{float(v):.6f}".rstrip("0").rstrip(".")
    return "0" if s == "-0" else s


@dataclass(frozen=True)
class Interval:
    start: Number
    end: Number
    left_open: bool = False
    right_open: bool = True

    def __post_init__(self):
        # infinite bounds are never attained
        if self.start == -inf and not self.left_open:
            object.__setattr__(self, "left_open", True)
        if self.end == inf and not self.right_open:
            object.__setattr__(self, "right_open", True)

    @staticmethod
    def empty() -> "Interval":
        return Interval(0, 0, True, True)

    @staticmethod
    def point(p: Number) -> "Interval":
        return Interval(p, p, False, False)

    @staticmethod
    def open(l: Number, r: Number) -> "Interval":
        return Interval(l, r, True, True)

    @staticmethod
    def closed(l: Number, r: Number) -> "Interval":
        return Interval(l, r, False, False)

    @staticmethod
    def reals() -> "Interval":
        return Interval(-inf, inf, True, True)

    @staticmethod
    def above(c: Number, inclusive: bool = False) -> "Interval":
        return Interval(c, inf, not inclusive, True)

    @staticmethod
    def below(c: Number, inclusive: bool = False) -> "Interval":
        return Interval(-inf, c, True, not inclusive)

    @property
    def start_type(self) -> str:
        return "open" if self.left_open else "closed"

    @property
    def end_type(self) -> str:
        return "open" if self.right_open else "closed"

    def is_empty(self) -> bool:
        return self.start > self.end or (
            self.start == self.end and (self.left_open or self.right_open)
        )

    def is_reals(self) -> bool:
        return self.start == -inf and self.end == inf

    def contains(self, x: Number) -> bool:
        if self.is_empty():
            return False
        if x < self.start or (x == self.start and self.left_open):
            return False
        if x > self.end or (x == self.end and self.right_open):
            return False
        return True

    def __str__(self) -> str:
        if self.is_empty():
            return EMPTY_SET
        if self.is_reals():
            return "(-∞, +∞)"
        s = "(" if self.left_open else "["
        s += format_number(self.start) + ", " + format_number(self.end)
        s += ")" if self.right_open else "]"
        return s


def _joins(a: Interval, b: Interval) -> bool:
    """True if b (starting at or after a) overlaps or touches a closed side of a."""
    if b.start < a.end:
        return True
    if b.start == a.end:
        return not (a.right_open and b.left_open)
    return False


def union(intervals: Iterable[Interval]) -> List[Interval]:
    """Merge overlapping/adjacent intervals into a sorted disjoint list."""
    items = sorted(
        (iv for iv in intervals if not iv.is_empty()),
        key=lambda iv: (iv.start, iv.left_open),
    )
    merged: List[Interval] = []
    for iv in items:
        if not merged or not _joins(merged[-1], iv):
            merged.append(iv)
            continue
        cur = merged[-1]
        if iv.end > cur.end:
            end, right_open = iv.end, iv.right_open
        elif iv.end == cur.end:
            end, right_open = cur.end, cur.right_open and iv.right_open
        else:
            end, right_open = cur.end, cur.right_open
        merged[-1] = Interval(cur.start, end, cur.left_open, right_open)
    return merged


def intersect(a: Interval, b: Interval) -> Optional[Interval]:
    if a.start > b.start:
        start, left_open = a.start, a.left_open
    elif b.start > a.start:
        start, left_open = b.start, b.left_open
    else:
        start, left_open = a.start, a.left_open or b.left_open
    if a.end < b.end:
        end, right_open = a.end, a.right_open
    elif b.end < a.end:
        end, right_open = b.end, b.right_open
    else:
        end, right_open = a.end, a.right_open or b.right_open
    res = Interval(start, end, left_open, right_open)
    return None if res.is_empty() else res


def intersect_all(sets: Sequence[Sequence[Interval]]) -> List[Interval]:
    """Intersection of several unions of intervals."""
    if not sets:
        return []
    acc = union(sets[0])
    for other in sets[1:]:
        nxt: List[Interval] = []
        for a in acc:
            for b in union(other):
                c = intersect(a, b)
                if c is not None:
                    nxt.append(c)
        acc = union(nxt)
    return acc


def to_interval_notation(intervals: Sequence[Interval]) -> str:
    merged = union(intervals)
    if not merged:
        return EMPTY_SET
    if len(merged) == 1 and merged[0].is_reals():
        return REAL_LINE
    return " ∪ ".join(str(iv) for iv in merged)


def to_set_notation(predicate: str, var: str = "x") -> str:
    return f"{{{var} | {predicate}}}"
