"""
Per-frame graph analysis.

Combines the scanners for each plotted function over the visible range:
the sampled curve, root and extremum markers, and optionally the derivative
curve and the origin-anchored antiderivative. A function whose text cannot be
compiled gets an error entry and the rest of the frame is still analysed.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from . import config
from .antiderivative import build_antiderivative, can_integrate, origin_index, pixel_grid
from .domain import Domain
from .errors import ParseError
from .evaluator import compile_function
from .finite_diff import derivative_many
from .formatting import format_label
from .scan import find_extrema, find_roots
from .tangent import SnapTarget

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphView:
    """Visible world x-range plus the pixel width it is drawn into."""
    x_min: float
    x_max: float
    width: int = config.VIEW_WIDTH
    scale: Optional[float] = None  # pixels per world unit

    @classmethod
    def from_dict(cls, d):
        width = int(d.get('width') or config.VIEW_WIDTH)
        scale = d.get('scale')
        return cls(x_min=float(d['x_min']), x_max=float(d['x_max']), width=width,
                   scale=None if scale is None else float(scale))

    @property
    def pixels_per_unit(self):
        if self.scale:
            return self.scale
        return self.width / (self.x_max - self.x_min)

    def grid(self):
        return pixel_grid(self.x_min, self.x_max, self.width)

    def snap_target(self):
        return SnapTarget(self.x_min, self.x_max, self.pixels_per_unit)

    def to_dict(self):
        return {"x_min": self.x_min, "x_max": self.x_max, "width": self.width,
                "scale": self.pixels_per_unit}


@dataclass(frozen=True)
class FunctionEntry:
    expression: str
    domain: Optional[Domain] = None
    show_derivative: bool = False
    show_integral: bool = False
    variable: Optional[str] = None

    @classmethod
    def from_dict(cls, d):
        return cls(
            expression=d.get('expression', ''),
            domain=Domain.from_dict(d.get('domain')),
            show_derivative=bool(d.get('show_derivative', False)),
            show_integral=bool(d.get('show_integral', False)),
            variable=d.get('variable'),
        )

    def compile(self):
        return compile_function(self.expression, self.variable)

    def in_domain(self, x):
        return self.domain is None or self.domain.contains(x)


def _points(xs, ys):
    return [{"x": float(x), "y": float(y) if np.isfinite(y) else None} for x, y in zip(xs, ys)]


def analyze_function(entry, view, samples=config.SAMPLES):
    try:
        expr = entry.compile()
    except ParseError as e:
        return {"expression": entry.expression, "error": str(e)}

    lo, hi = view.x_min, view.x_max
    if entry.domain is not None:
        lo, hi = entry.domain.narrow(lo, hi)

    xs = view.grid()
    ys = expr.sample_many(xs)
    if entry.domain is not None:
        ys[~entry.domain.mask(xs)] = np.nan

    roots = [r for r in find_roots(expr, lo, hi, samples) if entry.in_domain(r)]
    extrema = [e for e in find_extrema(expr, lo, hi, samples) if entry.in_domain(e.x)]

    result = {
        "expression": entry.expression,
        "variable": expr.variable,
        "curve": _points(xs, ys),
        "roots": [
            {"x": r, "y": 0.0, "label": f"root ({format_label(r)}, 0)"} for r in roots
        ],
        "extrema": [
            dict(e.to_dict(), label=f"{e.kind} ({format_label(e.x)}, {format_label(e.y)})")
            for e in extrema
        ],
    }

    if entry.show_derivative:
        ds = derivative_many(expr, xs, config.TANGENT_H)
        if entry.domain is not None:
            ds[~entry.domain.mask(xs)] = np.nan
        result["derivative"] = _points(xs, ds)

    if entry.show_integral:
        integrable = can_integrate(expr)
        origin = origin_index(xs)
        if integrable:
            values = build_antiderivative(expr, xs, origin, entry.domain)
        else:
            values = [None] * len(xs)
        result["antiderivative"] = {
            "integrable": integrable,
            "origin_index": origin,
            "points": [{"x": float(x), "y": v} for x, v in zip(xs, values)],
        }
    return result


def update_tangents(board, entries, view, index, x, snap=False, pin=False):
    """
    Move the live tangent of `board` to function `index` at world x, optionally
    snapping and pinning it. An uncompilable function clears the preview.
    """
    try:
        expr = entries[index].compile()
    except ParseError:
        board.live = None
        return board
    board.preview(expr, x, snap=view.snap_target() if snap else None)
    if pin:
        board.pin()
    return board


def analyze_graph(entries, view, tangents=None, samples=config.SAMPLES):
    functions = [analyze_function(e, view, samples) for e in entries]
    failed = sum(1 for f in functions if "error" in f)
    if failed:
        logger.info("analyze_graph: %d of %d function(s) skipped", failed, len(functions))
    out = {"view": view.to_dict(), "functions": functions}
    if tangents is not None:
        out["tangents"] = tangents.to_dict()
    return out
