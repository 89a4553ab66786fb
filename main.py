#!/usr/bin/env python3
import logging
import sys

from engine import analyze_function_properties, analyze_polynomial, parse_inequality


def show_inequality(text):
    res = parse_inequality(text)
    print(f"{text}: {res.interval_notation}  {res.set_notation}")


def show_function(expr):
    res = analyze_function_properties(expr)
    print(f"f(x) = {expr}")
    print(f"  domain: {res.domain}")
    print(f"  range on window: {res.range}")
    if res.intercepts is not None:
        print(f"  x-intercepts: {res.intercepts.x}  y-intercept: {res.intercepts.y}")
    for e in res.extrema:
        print(f"  local {e.type} at ({e.x}, {e.y})")
    for run in res.monotonicity:
        print(f"  {run.direction} on {run.interval}")
    for a in res.asymptotes:
        print(f"  {a.type} asymptote {a.equation}")
    print(f"  symmetry: {res.symmetry}")
    if res.periodicity is not None and res.periodicity.is_periodic:
        print(f"  period: {res.periodicity.period:.6f}")
    if res.continuity is not None:
        for d in res.continuity.discontinuities:
            print(f"  {d.type} discontinuity at x = {d.x}")


def show_polynomial(source):
    res = analyze_polynomial(source)
    if res.error:
        print(f"{source}: {res.error}")
        return
    print(f"p(x) = {res.expanded}")
    print(f"  factored: {res.factorization.factored}")
    for root in res.roots:
        print(f"  {root}")
    print(f"  {res.end_behavior.description}")


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = sys.argv[1:] if argv is None else argv
    if args:
        for expr in args:
            show_function(expr)
        return
    for text in ("x > 2", "-1 <= x < 4", "x < -1 or x > 3", "|x - 2| <= 3", "|x| < -1"):
        show_inequality(text)
    for expr in ("x^2 - 4", "1/x", "sin(2x)"):
        show_function(expr)
    for coeffs in ([1, -6, 11, -6], [1, -6, 9], [1, 0, 1]):
        show_polynomial(coeffs)


if __name__ == "__main__":
    main()
