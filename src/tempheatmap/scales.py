# d3-style band/linear scales and a sequential color scale backed by plotly colorscales

from __future__ import annotations
from typing import Optional, Sequence, Tuple
from plotly.colors import sample_colorscale
from .models import is_missing


class BandScale:
    # discrete domain -> evenly spaced bands; padding applies inside and outside, centered
    def __init__(self, domain: Sequence, range_: Tuple[float, float], padding: float = 0.2):
        self.domain = list(domain)
        self._index = {v: i for i, v in enumerate(self.domain)}
        start, stop = range_
        n = len(self.domain)
        self.step = (stop - start) / max(1, n - padding + padding * 2)
        self.start = start + (stop - start - self.step * (n - padding)) * 0.5
        self.bandwidth = self.step * (1 - padding)

    def __call__(self, value) -> float:
        return self.start + self.step * self._index[value]

    def center(self, value) -> float:
        return self(value) + self.bandwidth / 2


class LinearScale:
    def __init__(self, domain: Tuple[float, float], range_: Tuple[float, float]):
        self.domain = domain
        self.range = range_

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        span = d1 - d0
        # a single-valued domain lands everything on the middle of the range
        t = (value - d0) / span if span else 0.5
        return r0 + (r1 - r0) * t


class ColorScale:
    def __init__(self, colorscale: str, domain: Tuple[float, float], reverse: bool = False):
        self.colorscale = colorscale
        self.domain = domain
        self.reverse = reverse

    def normalize(self, value: float) -> float:
        lo, hi = self.domain
        span = hi - lo
        t = (value - lo) / span if span else 0.5
        t = min(1.0, max(0.0, t))
        return 1.0 - t if self.reverse else t

    def __call__(self, value: Optional[float]) -> Optional[str]:
        if is_missing(value) or any(is_missing(d) for d in self.domain):
            return None
        return sample_colorscale(self.colorscale, [self.normalize(value)])[0]
