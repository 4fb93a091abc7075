import numpy as np

from . import config


def derivative(expr, x, h=config.TANGENT_H):
    """Central difference (f(x+h) - f(x-h)) / 2h; None when either side is unusable."""
    fl = expr.sample(x - h)
    fr = expr.sample(x + h)
    if fl is None or fr is None:
        return None
    d = (fr - fl) / (2 * h)
    return d if np.isfinite(d) else None


def derivative_many(expr, xs, h=config.TANGENT_H):
    """Vectorized central difference over xs; nan where unusable."""
    xs = np.asarray(xs, dtype=float)
    with np.errstate(all='ignore'):
        d = (expr.sample_many(xs + h) - expr.sample_many(xs - h)) / (2 * h)
    d[~np.isfinite(d)] = np.nan
    return d


def scan_step(x_min, x_max, samples=config.SAMPLES):
    """Derivative step used by the extremum scanner: a fraction of the grid spacing."""
    return (float(x_max) - float(x_min)) / samples * config.EXTREMUM_H_FACTOR
