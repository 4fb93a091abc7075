import logging

import numpy as np

from . import config
from .errors import DivergentIteration

logger = logging.getLogger(__name__)


def _snap(x, tol):
    return 0.0 if abs(x) < tol else x


def _value_and_slope(expr, x, h):
    """f(x) and the forward-difference slope (f(x+h) - f(x)) / h."""
    fx = expr.sample(x)
    fxh = expr.sample(x + h)
    if fx is None or fxh is None:
        raise DivergentIteration(f"f undefined near x={x!r}")
    return fx, (fxh - fx) / h


def newton(expr, x0, max_iter=config.NEWTON_MAX_ITER, tol=config.NEWTON_TOL, h=config.NEWTON_H):
    """
    Find a single root of expr starting from x0. Returns the root, or None if
    this seed diverges or fails the loose final residual check.
    """
    x = float(x0)
    try:
        for _ in range(max_iter):
            fx, dfx = _value_and_slope(expr, x, h)
            if abs(fx) < tol:
                return _snap(x, tol)
            if abs(dfx) < config.NEWTON_FLAT:
                raise DivergentIteration(f"flat derivative at x={x!r}")
            x1 = x - fx / dfx
            if not np.isfinite(x1):
                raise DivergentIteration(f"non-finite step from x={x!r}")
            if abs(x1 - x) < tol:
                return _snap(x1, tol)
            x = x1
    except DivergentIteration as e:
        logger.debug("newton(%s, x0=%r) diverged: %s", expr.text, x0, e)
        return None

    fx = expr.sample(x)
    if fx is not None and abs(fx) < config.NEWTON_LOOSE_TOL:
        return x
    return None
