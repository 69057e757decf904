"""Colour roles and persistent code colours."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Tuple

import plotly.express as px
from matplotlib import colors as mcolors

from . import theme


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert a colour string (e.g. ``'#1f77b4'`` or ``'grey'``) to ``(R, G, B)``."""
    try:
        rgb_float = mcolors.to_rgb(hex_color)
        return tuple(int(round(c * 255)) for c in rgb_float)
    except ValueError:
        return (0, 0, 0)


def rgba(color: str, alpha: float) -> str:
    """CSS ``rgba()`` string for ``color`` at opacity ``alpha``."""
    r, g, b = hex_to_rgb(color)
    return f"rgba({r},{g},{b},{alpha})"


@dataclass(frozen=True)
class ChartColors:
    """Colours of the chart elements, resolved from the host colour roles."""

    pattern_count_bars: str
    rr_interval: str
    null_rr_interval: str
    code_missing: str
    pattern_bar: str
    interaction_box_border: str
    slider_handle: str

    @classmethod
    def from_roles(cls, roles: Mapping[str, str] | None = None) -> "ChartColors":
        merged = {**theme.DEFAULT_COLOR_ROLES, **(roles or {})}
        return cls(
            pattern_count_bars=merged["light_blue"],
            rr_interval=merged["dark_red"],
            null_rr_interval=theme.NULL_RR_INTERVAL,
            code_missing=merged["dark_grey"],
            pattern_bar=theme.PATTERN_BAR,
            interaction_box_border=merged["med_grey"],
            slider_handle=merged["green"],
        )


class PersistentColorMap:
    """Assigns stable colours to codes across repeated calls.

    Colours given up front (the host's ``code_to_color``) are kept; new codes
    get the next colour of the Plotly qualitative palette.
    """

    _PALETTE = px.colors.qualitative.Plotly + px.colors.qualitative.Safe

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._map: dict[str, str] = dict(initial or {})
        self._n_assigned = 0

    @property
    def mapping(self) -> dict[str, str]:
        """Return a copy of the current code -> colour mapping."""
        return dict(self._map)

    def __call__(self, codes: Iterable[str]) -> dict[str, str]:
        """Make sure every code has a colour and return the full mapping."""
        for code in codes:
            if code not in self._map:
                self._map[code] = self._PALETTE[self._n_assigned % len(self._PALETTE)]
                self._n_assigned += 1
        return dict(self._map)
