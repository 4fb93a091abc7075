from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class Domain:
    """Declared x-bounds of a plotted function; either side may be open or absent."""
    min: Optional[float] = None
    max: Optional[float] = None
    min_open: bool = False
    max_open: bool = False

    @classmethod
    def from_dict(cls, d):
        if not d:
            return None
        lo, hi = d.get('min'), d.get('max')
        return cls(
            min=None if lo is None else float(lo),
            max=None if hi is None else float(hi),
            min_open=bool(d.get('min_open', False)),
            max_open=bool(d.get('max_open', False)),
        )

    def contains(self, x):
        if self.min is not None:
            if x < self.min or (self.min_open and x == self.min):
                return False
        if self.max is not None:
            if x > self.max or (self.max_open and x == self.max):
                return False
        return True

    def mask(self, xs):
        xs = np.asarray(xs, dtype=float)
        m = np.ones(xs.shape, dtype=bool)
        if self.min is not None:
            m &= (xs > self.min) if self.min_open else (xs >= self.min)
        if self.max is not None:
            m &= (xs < self.max) if self.max_open else (xs <= self.max)
        return m

    def narrow(self, x_min, x_max):
        """Intersect a scan interval with the declared bounds."""
        lo = x_min if self.min is None else max(x_min, self.min)
        hi = x_max if self.max is None else min(x_max, self.max)
        return lo, hi
