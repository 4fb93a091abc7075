"""
Tangent lines: point + central-difference slope, with optional magnet snap to
the nearest root or extremum, and a caller-owned board of live/pinned tangents.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from . import config
from .finite_diff import derivative
from .formatting import format_label
from .scan import find_extrema, find_roots


@dataclass(frozen=True)
class Tangent:
    x: float
    y: float
    slope: float

    @property
    def intercept(self):
        return self.y - self.slope * self.x

    def equation(self):
        m, b = self.slope, self.intercept
        if abs(m) < 1e-10:
            return f"y = {format_label(b)}"
        if abs(b) < 1e-10:
            return f"y = {format_label(m)}𝑥"
        if b > 0:
            return f"y = {format_label(m)}𝑥 + {format_label(b)}"
        return f"y = {format_label(m)}𝑥 − {format_label(abs(b))}"

    def to_dict(self):
        return {"x": self.x, "y": self.y, "slope": self.slope,
                "intercept": self.intercept, "equation": self.equation()}

    @classmethod
    def from_dict(cls, d):
        return cls(x=float(d['x']), y=float(d['y']), slope=float(d['slope']))


@dataclass(frozen=True)
class SnapTarget:
    """Visible range and zoom (pixels per world unit) used for magnet snapping."""
    x_min: float
    x_max: float
    scale: float

    @property
    def threshold(self):
        return config.SNAP_PIXELS / self.scale


def snap_x(expr, x, target):
    """x moved to the nearest root/extremum within the snap threshold, else x."""
    candidates = [e.x for e in find_extrema(expr, target.x_min, target.x_max)]
    candidates += find_roots(expr, target.x_min, target.x_max)
    if not candidates:
        return x
    nearest = min(candidates, key=lambda c: abs(c - x))
    if abs(nearest - x) < target.threshold:
        return nearest
    return x


def tangent_at(expr, x, h=config.TANGENT_H, snap=None):
    """Tangent of expr at x (after optional snapping); None when unusable."""
    x = float(x)
    if snap is not None:
        x = snap_x(expr, x, snap)
    y = expr.sample(x)
    slope = derivative(expr, x, h)
    if y is None or slope is None:
        return None
    return Tangent(x=x, y=y, slope=slope)


@dataclass
class TangentBoard:
    """
    Interaction state for tangents: at most one live preview plus the list the
    user has pinned. Owned by the caller and passed in; never module-global.
    """
    live: Optional[Tangent] = None
    pinned: List[Tangent] = field(default_factory=list)

    def preview(self, expr, x, snap=None):
        self.live = tangent_at(expr, x, snap=snap)
        return self.live

    def pin(self):
        if self.live is None:
            return None
        self.pinned.append(self.live)
        return self.live

    def unpin(self, index):
        return self.pinned.pop(index)

    def clear(self):
        self.pinned.clear()

    def to_dict(self):
        return {
            "live": self.live.to_dict() if self.live else None,
            "pinned": [t.to_dict() for t in self.pinned],
        }

    @classmethod
    def from_dict(cls, d):
        d = d or {}
        live = d.get('live')
        return cls(
            live=Tangent.from_dict(live) if live else None,
            pinned=[Tangent.from_dict(t) for t in d.get('pinned', [])],
        )
