"""Layout rectangles and pixel scales for the upset plot.

All coordinates are pixels local to a band, origin at the band's top-left
corner, y growing downwards.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

import numpy as np

from ..models import Margin, MarginalCode, Pattern

SET_SIZE_BARS_UNITS = 1.0
RR_PLOT_UNITS = 1.0
MATRIX_PLOT_UNITS = 0.7
MARGINAL_COUNT_PROP = 0.3
BAND_PADDING = 0.05


@dataclass(frozen=True)
class LinearScale:
    """Continuous linear map from ``domain`` to ``range``."""

    domain: Tuple[float, float]
    range: Tuple[float, float]

    @property
    def is_degenerate(self) -> bool:
        return self.domain[0] == self.domain[1]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if self.is_degenerate:
            return r0
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r0 == r1:
            return d0
        return d0 + (pixel - r0) / (r1 - r0) * (d1 - d0)

    def ticks(self, count: int = 10) -> List[float]:
        """Round tick values inside the domain, roughly ``count`` of them."""
        lo, hi = sorted(self.domain)
        if lo == hi or count <= 0:
            return [lo]
        step = tick_step(lo, hi, count)
        start = math.ceil(lo / step)
        stop = math.floor(hi / step)
        return np.round(np.arange(start, stop + 1) * step, 10).tolist()


def tick_step(start: float, stop: float, count: int) -> float:
    """Tick spacing of the form 1, 2 or 5 times a power of ten."""
    raw = abs(stop - start) / count
    power = 10 ** math.floor(math.log10(raw))
    error = raw / power
    if error >= math.sqrt(50):
        power *= 10
    elif error >= math.sqrt(10):
        power *= 5
    elif error >= math.sqrt(2):
        power *= 2
    return power


@dataclass(frozen=True)
class BandScale:
    """Ordinal scale splitting ``range`` into equal, rounded bands."""

    domain: Tuple[str, ...]
    range: Tuple[float, float]
    padding: float = BAND_PADDING
    step: float = field(init=False)
    bandwidth: float = field(init=False)
    start: float = field(init=False)

    def __post_init__(self) -> None:
        r0, r1 = self.range
        n = len(self.domain)
        step = (r1 - r0) / max(1.0, n - self.padding + self.padding * 2)
        step = math.floor(step)
        start = r0 + (r1 - r0 - step * (n - self.padding)) * 0.5
        object.__setattr__(self, "step", step)
        object.__setattr__(self, "start", float(round(start)))
        object.__setattr__(self, "bandwidth", float(round(step * (1 - self.padding))))

    def __call__(self, value: str) -> float:
        return self.start + self.step * self.domain.index(value)

    def center(self, value: str) -> float:
        return self(value) + self.bandwidth / 2


@dataclass(frozen=True)
class Sizes:
    """Pixel sizes of the four chart bands inside the margins."""

    width: float
    height: float
    set_size_bars_w: float
    rr_plot_w: float
    matrix_plot_w: float
    margin_count_h: float
    matrix_plot_h: float
    w: float
    h: float
    margin: Margin
    matrix_padding: float = 10
    padding: float = 10


@dataclass(frozen=True)
class Scales:
    matrix_width_scale: BandScale
    set_size_x: LinearScale
    rr_x: LinearScale
    pattern_y: LinearScale
    marginal_y: LinearScale
    set_size_bar_height: float
    matrix_row_height: float
    matrix_column_width: float
    matrix_dot_size: float
    code_to_color: Dict[str, str]


def compute_sizes(
    width: float,
    height: float,
    margin: Margin | None = None,
    has_risk_data: bool = True,
) -> Sizes:
    """Split the viewport into count-bar, matrix, risk and marginal bands."""
    margin = margin or Margin()
    rr_units = RR_PLOT_UNITS if has_risk_data else 0.0
    total_units = SET_SIZE_BARS_UNITS + rr_units + MATRIX_PLOT_UNITS

    h = height - margin.top - margin.bottom
    w = width - margin.left - margin.right

    return Sizes(
        width=width,
        height=height,
        set_size_bars_w=w * (SET_SIZE_BARS_UNITS / total_units),
        rr_plot_w=w * (rr_units / total_units),
        matrix_plot_w=w * (MATRIX_PLOT_UNITS / total_units),
        margin_count_h=h * MARGINAL_COUNT_PROP,
        matrix_plot_h=h * (1 - MARGINAL_COUNT_PROP),
        w=w,
        h=h,
        margin=margin,
    )


def _finite_max(values) -> float | None:
    finite = [v for v in values if v is not None and math.isfinite(v)]
    return max(finite) if finite else None


def count_scale(patterns: Sequence[Pattern], sizes: Sizes) -> LinearScale:
    """Count axis of the pattern bars; larger counts extend further left."""
    max_count = _finite_max(p.count for p in patterns) or 0
    return LinearScale(domain=(0, max_count), range=(sizes.set_size_bars_w, 0))


def compute_scales(
    patterns: Sequence[Pattern],
    marginals: Sequence[MarginalCode],
    sizes: Sizes,
    set_size_x: LinearScale,
    code_to_color: Dict[str, str] | None = None,
) -> Scales:
    """Build every scale for one render pass."""
    matrix_width_scale = BandScale(
        domain=tuple(m.code for m in marginals),
        range=(sizes.matrix_padding, sizes.matrix_plot_w - sizes.matrix_padding),
    )
    matrix_column_width = matrix_width_scale.bandwidth

    max_upper = _finite_max(p.upper for p in patterns)
    rr_x = LinearScale(
        domain=(0, max_upper if max_upper is not None else 0),
        range=(0, sizes.rr_plot_w),
    )

    pattern_y = LinearScale(domain=(0, len(patterns)), range=(0, sizes.matrix_plot_h))
    matrix_row_height = pattern_y(1) - pattern_y(0)

    marginal_y = LinearScale(
        domain=(0, _finite_max(m.count for m in marginals) or 0),
        range=(sizes.margin_count_h, 0),
    )

    return Scales(
        matrix_width_scale=matrix_width_scale,
        set_size_x=set_size_x,
        rr_x=rr_x,
        pattern_y=pattern_y,
        marginal_y=marginal_y,
        set_size_bar_height=matrix_row_height * 0.9,
        matrix_row_height=matrix_row_height,
        matrix_column_width=matrix_column_width,
        matrix_dot_size=min(matrix_column_width, matrix_row_height) * 0.9 / 2,
        code_to_color=dict(code_to_color or {}),
    )


def row_center(scales: Scales, index: int) -> float:
    """Vertical pixel centre of matrix row ``index``."""
    return scales.pattern_y(index) + scales.matrix_row_height / 2
