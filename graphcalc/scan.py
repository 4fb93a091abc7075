"""
Sign-change scanners over a sampled interval.

Both scanners sample ``samples + 1`` evenly spaced points across
``[x_min, x_max]``. An unusable sample (nan) breaks continuity, so no bracket
ever spans an undefined region. Brackets are sharpened by plain bisection
with a fixed iteration count, so every call is bounded.
"""
import logging
from dataclasses import dataclass

import numpy as np

from . import config
from .finite_diff import derivative, derivative_many, scan_step

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Extremum:
    x: float
    y: float
    kind: str  # "max" | "min"

    def to_dict(self):
        return {"x": self.x, "y": self.y, "kind": self.kind}


def dedupe_sorted(vals, tol=config.ROOT_DEDUPE_TOL):
    """Sort and dedupe a list of floats without forcing rounding, using tolerance."""
    vs = sorted(float(v) for v in vals)
    out = []
    for v in vs:
        if not out or abs(v - out[-1]) > tol:
            out.append(v)
    return out


def _grid(x_min, x_max, samples):
    a, b = float(x_min), float(x_max)
    if not (np.isfinite(a) and np.isfinite(b)) or b <= a or samples < 1:
        return None
    return np.linspace(a, b, int(samples) + 1)


def bisect_sign_change(func, a, b, iterations=config.BISECTION_ITERATIONS):
    """
    Refine a sign change of func in [a, b] by bisection.
    func returns a float or None (unusable); an unusable midpoint stops the
    refinement early. The result always lies inside [a, b].
    """
    a, b = float(a), float(b)
    fa = func(a)
    if fa is None:
        return (a + b) / 2
    if fa == 0:
        return a
    for _ in range(iterations):
        mid = (a + b) / 2
        fm = func(mid)
        if fm is None:
            break
        if fm == 0:
            return mid
        if (fa < 0) != (fm < 0):
            b = mid
        else:
            a, fa = mid, fm
    return (a + b) / 2


def refine_extremum(expr, a, b, h, iterations=config.BISECTION_ITERATIONS):
    """
    Bisect [a, b] on the sign of the central-difference derivative, keeping the
    half whose far end disagrees with f'(a). Returns (x, f(x)), or None when any
    evaluation along the way is unusable.
    """
    a, b = float(a), float(b)
    da = derivative(expr, a, h)
    if da is None:
        return None
    if da != 0:
        for _ in range(iterations):
            mid = (a + b) / 2
            dm = derivative(expr, mid, h)
            if dm is None:
                return None
            if dm == 0:
                a = b = mid
                break
            if (dm > 0) == (da > 0):
                a = mid
            else:
                b = mid
    x = (a + b) / 2
    y = expr.sample(x)
    if y is None:
        return None
    return x, y


def find_roots(expr, x_min, x_max, samples=config.SAMPLES):
    """Zero-crossings of expr over [x_min, x_max], ascending and deduplicated."""
    xs = _grid(x_min, x_max, samples)
    if xs is None:
        return []
    ys = expr.sample_many(xs)
    found = []
    prev = None
    for i, y in enumerate(ys):
        if not np.isfinite(y):
            prev = None
            continue
        if prev is not None and prev * y < 0:
            found.append(bisect_sign_change(expr.sample, xs[i - 1], xs[i]))
        if abs(y) < config.ZERO_TOL:
            found.append(xs[i])  # exact / touching zero on the grid
        prev = y
    roots = dedupe_sorted(found)
    logger.debug("find_roots(%s, %g, %g): %d root(s)", expr.text, x_min, x_max, len(roots))
    return roots


def find_extrema(expr, x_min, x_max, samples=config.SAMPLES):
    """
    Local extrema of expr over [x_min, x_max], classified by the sign change of
    the estimated derivative (+ to - is a max, - to + is a min).
    """
    xs = _grid(x_min, x_max, samples)
    if xs is None:
        return []
    h = scan_step(x_min, x_max, samples)
    ds = derivative_many(expr, xs, h)
    out = []
    prev_sign, prev_i = 0, None
    for i, d in enumerate(ds):
        if not np.isfinite(d):
            prev_sign = 0
            continue
        s = np.sign(d)
        if s == 0:
            continue  # a flat sample sits inside the bracket; keep the last signed one
        kind = None
        if prev_sign > 0 and s < 0:
            kind = "max"
        elif prev_sign < 0 and s > 0:
            kind = "min"
        if kind:
            refined = refine_extremum(expr, xs[prev_i], xs[i], h)
            if refined is not None:
                out.append(Extremum(x=refined[0], y=refined[1], kind=kind))
        prev_sign, prev_i = s, i
    logger.debug("find_extrema(%s, %g, %g): %d extrema", expr.text, x_min, x_max, len(out))
    return out
