"""
Numeric antiderivative anchored at x = 0.

F is rebuilt on a dense, evenly spaced grid by trapezoidal accumulation,
walking right and left from the sample nearest the origin. The result is a
*relative* antiderivative: F(origin) == 0 and nothing is said about the
additive constant.
"""
import logging

import numpy as np
from scipy.integrate import cumulative_trapezoid

from . import config

logger = logging.getLogger(__name__)

CAN_INTEGRATE_PROBES = (0, 0.001, -0.001, 0.5, -0.5, 1, -1, 2, -2, 5, -5)
ORIGIN_PROBES = (0, 0.001, -0.001)


def pixel_grid(x_min, x_max, width, step=config.PIXEL_STEP):
    """World x for every `step`-th pixel across a view `width` pixels wide."""
    count = int(np.ceil(float(width) / step))
    return np.linspace(float(x_min), float(x_max), max(count, 1) + 1)


def origin_index(xs):
    """Index of the sample nearest x = 0 (an edge when 0 is off-grid)."""
    xs = np.asarray(xs, dtype=float)
    if xs.size == 0:
        return None
    return int(np.argmin(np.abs(xs)))


def can_integrate(expr):
    """
    Whether an origin-anchored antiderivative makes sense: f must be defined
    around 0 and at enough probe points.
    """
    usable = sum(1 for x in CAN_INTEGRATE_PROBES if expr.sample(x) is not None)
    if usable < 3:
        return False
    return all(expr.sample(x) is not None for x in ORIGIN_PROBES)


def _walk(xs, ys, order, out):
    """Accumulate along `order`; each usable run restarts at 0 after a gap."""
    run = []
    for idx in list(order) + [None]:
        if idx is not None and np.isfinite(ys[idx]):
            run.append(idx)
            continue
        if run:
            if len(run) == 1:
                acc = np.zeros(1)
            else:
                acc = cumulative_trapezoid(ys[run], xs[run], initial=0)
            for i, v in zip(run, acc):
                out[i] = float(v)
            run = []


def build_antiderivative(expr, xs, origin=None, domain=None):
    """
    Values of F aligned with xs (None where f is unusable or outside domain).
    origin defaults to origin_index(xs); out-of-range origins clamp to an edge.
    """
    xs = np.asarray(xs, dtype=float)
    n = xs.size
    out = [None] * n
    if n == 0:
        return out
    if origin is None:
        origin = origin_index(xs)
    start = min(max(int(origin), 0), n - 1)

    ys = expr.sample_many(xs)
    if domain is not None:
        ys[~domain.mask(xs)] = np.nan

    _walk(xs, ys, range(start, n), out)
    _walk(xs, ys, range(start, -1, -1), out)
    logger.debug("antiderivative(%s): %d/%d usable samples", expr.text,
                 sum(v is not None for v in out), n)
    return out
