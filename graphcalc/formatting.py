"""Display formatting for roots, labels and calculator results."""
from math import gcd

from . import config


def js_number(v):
    """Shortest repr of a float, with integral values printed without '.0'."""
    v = float(v)
    if v.is_integer() and abs(v) < 1e21:
        return str(int(v))
    return repr(v)


def to_precision(v, digits):
    """Round to `digits` significant digits, dropping trailing zeros."""
    return js_number(float(f"{float(v):.{digits}g}"))


def to_fraction(value, max_denominator=config.MAX_DENOMINATOR, tol=1e-9):
    """
    Smallest-denominator p/q within tol of value, as "p/q".
    None for integers or when no denominator up to max_denominator fits.
    """
    for d in range(1, max_denominator + 1):
        n = round(value * d)
        if abs(n / d - value) < tol:
            if d == 1:
                return None
            g = gcd(abs(n), d)
            num, den = n // g, d // g
            if den == 1:
                return None
            return f"{num}/{den}"
    return None


def format_root(r):
    if abs(r) < 1e-10:
        return "0"
    if float(r).is_integer():
        return js_number(r)
    frac = to_fraction(r)
    if frac:
        return f"{frac} (≈ {to_precision(r, 8)})"
    return to_precision(r, 10)


def format_label(n):
    """Short coordinate label: 4 significant digits at or above 1, else 2."""
    if float(n).is_integer():
        return js_number(n)
    if abs(n) >= 1:
        return to_precision(n, 4)
    return to_precision(n, 2)


def format_result(v):
    """Calculator result: integers as-is, otherwise 12 significant digits."""
    if float(v).is_integer():
        return js_number(v)
    return to_precision(v, 12)
