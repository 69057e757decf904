"""The four chart components: pattern matrix, count bars, RR intervals, marginal bars.

Every ``draw_*`` function re-synchronises its own layer of the surface with
the data it is given. Traces are keyed by pattern or code so reordering rows
updates positions instead of replacing traces.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple

import plotly.graph_objects as go

from ..models import MarginalCode, Pattern
from ..utils import count_format, format_val
from .colors import ChartColors, rgba
from .scales import Scales, Sizes, row_center
from .surface import (
    axis_refs,
    clear_layer,
    hide_axis,
    remove_annotations,
    set_annotation,
    show_axis,
    sync_layer,
)

logger = logging.getLogger(__name__)

MATRIX_LAYER = "matrix_chart"
COUNT_BARS_LAYER = "pattern_size_bars"
RR_LAYER = "rr_intervals"
MARGINAL_LAYER = "code_marginal_bars"
CHART_LAYERS = (MATRIX_LAYER, COUNT_BARS_LAYER, RR_LAYER, MARGINAL_LAYER)

WARNING_NAME = "threshold_warning_message"
COUNT_TITLE_NAME = "pattern_size_bars_title"
RR_TITLE_NAME = "rr_intervals_title"

_OVERLAY = dict(xref="x5", yref="y5")
_NO_HOVER = dict(hoverinfo="skip", showlegend=False)


def get_pattern_info(pattern: Pattern, scales: Scales) -> Tuple[List[Tuple[str, float]], Tuple[float, float]]:
    """Pixel position of each code in ``pattern`` and the extent they span."""
    positions = [(code, scales.matrix_width_scale.center(code)) for code in pattern.codes]
    xs = [pos for _, pos in positions]
    return positions, (min(xs), max(xs))


def _title_y(sizes: Sizes) -> float:
    return sizes.h + sizes.margin.bottom - sizes.padding * 2.5


# ------------------------------------------------------------------ #
#  Pattern matrix
# ------------------------------------------------------------------ #

def draw_pattern_matrix(
    fig: go.Figure,
    patterns: Sequence[Pattern],
    marginals: Sequence[MarginalCode],
    scales: Scales,
    sizes: Sizes,
    colors: ChartColors,
) -> None:
    """Dot matrix showing which codes make up each pattern."""
    band = axis_refs("matrix")
    all_codes = [m.code for m in marginals]
    all_xs = [scales.matrix_width_scale.center(code) for code in all_codes]
    dot_diameter = scales.matrix_dot_size * 2

    traces: Dict[str, go.Scatter] = {}
    for i, p in enumerate(patterns):
        y = row_center(scales, i)
        positions, (x_min, x_max) = get_pattern_info(p, scales)

        # Light grey dots in the background to show possible codes
        traces[f"{p.pattern}:background"] = go.Scatter(
            x=all_xs,
            y=[y] * len(all_xs),
            mode="markers",
            marker=dict(size=dot_diameter, color=rgba(colors.code_missing, 0.5)),
            **band, **_NO_HOVER,
        )
        traces[f"{p.pattern}:extent"] = go.Scatter(
            x=[x_min, x_max],
            y=[y, y],
            mode="lines",
            line=dict(color=colors.pattern_bar, width=max(scales.matrix_dot_size / 2, 0.5)),
            **band, **_NO_HOVER,
        )
        traces[f"{p.pattern}:present"] = go.Scatter(
            x=[pos for _, pos in positions],
            y=[y] * len(positions),
            mode="markers",
            marker=dict(
                size=dot_diameter,
                color=[scales.code_to_color.get(code, colors.code_missing) for code, _ in positions],
                opacity=1,
            ),
            **band, **_NO_HOVER,
        )

    sync_layer(fig, MATRIX_LAYER, traces)

    show_axis(
        fig, band["xaxis"],
        side="bottom",
        tickmode="array",
        tickvals=all_xs,
        ticktext=all_codes,
        tickangle=-75,
        tickfont=dict(size=12),
        ticks="",
    )


# ------------------------------------------------------------------ #
#  Pattern count bars
# ------------------------------------------------------------------ #

def draw_pattern_count_bars(
    fig: go.Figure,
    patterns: Sequence[Pattern],
    scales: Scales,
    sizes: Sizes,
    colors: ChartColors,
) -> None:
    """Left-hand bars showing how many subjects have each pattern."""
    band = axis_refs("bars")
    set_size_x = scales.set_size_x
    zero_x = set_size_x(0)

    traces: Dict[str, go.Bar] = {}
    for i, p in enumerate(patterns):
        traces[p.pattern] = go.Bar(
            orientation="h",
            base=[set_size_x(p.count)],
            x=[zero_x - set_size_x(p.count)],
            y=[row_center(scales, i)],
            width=[scales.set_size_bar_height],
            marker=dict(color=colors.pattern_count_bars, line=dict(width=0)),
            **band, **_NO_HOVER,
        )
    sync_layer(fig, COUNT_BARS_LAYER, traces)

    tick_values = set_size_x.ticks(5)
    show_axis(
        fig, band["xaxis"],
        side="bottom",
        tickmode="array",
        tickvals=[set_size_x(t) for t in tick_values],
        ticktext=[count_format(t) for t in tick_values],
    )

    set_annotation(
        fig, COUNT_TITLE_NAME,
        text=(
            "Pattern frequency<br>"
            "<span style='font-size:13px'>(drag handle to change threshold)</span>"
        ),
        x=sizes.set_size_bars_w / 2,
        y=_title_y(sizes),
        xanchor="center",
        yanchor="middle",
        showarrow=False,
        **_OVERLAY,
    )


# ------------------------------------------------------------------ #
#  Relative-risk intervals
# ------------------------------------------------------------------ #

def draw_rr_intervals(
    fig: go.Figure,
    patterns: Sequence[Pattern],
    scales: Scales,
    sizes: Sizes,
    colors: ChartColors,
) -> None:
    """Right-hand point estimates and confidence intervals."""
    band = axis_refs("rr")
    rr_x = scales.rr_x
    size_of_pe = min(scales.matrix_row_height / 2, 7)
    size_of_interval_line = max(1, size_of_pe / 2)

    traces: Dict[str, go.Scatter] = {}

    # Guide line at RR = 1 for reference of 'null', pinned to the band edge
    # when every upper bound is below 1
    guide_x = rr_x(min(1.0, rr_x.domain[1]))
    traces["guide"] = go.Scatter(
        x=[guide_x, guide_x],
        y=[0, sizes.matrix_plot_h],
        mode="lines",
        line=dict(color=colors.interaction_box_border, width=1),
        **band, **_NO_HOVER,
    )

    for i, p in enumerate(patterns):
        y = row_center(scales, i)
        if not p.has_null_interval:
            traces[f"{p.pattern}:interval"] = go.Scatter(
                x=[rr_x(p.lower), rr_x(p.upper)],
                y=[y, y],
                mode="lines",
                line=dict(color=colors.rr_interval, width=size_of_interval_line),
                **band, **_NO_HOVER,
            )
            marker = dict(
                size=size_of_pe * 2,
                color=colors.rr_interval,
                opacity=1,
                line=dict(width=0, color=colors.rr_interval),
            )
        else:
            marker = dict(
                size=size_of_pe * 2,
                color=rgba(colors.null_rr_interval, 0.1),
                opacity=0.5,
                line=dict(width=1.5, color=colors.null_rr_interval),
            )
        traces[f"{p.pattern}:estimate"] = go.Scatter(
            x=[rr_x(p.point_est)],
            y=[y],
            mode="markers",
            marker=marker,
            **band, **_NO_HOVER,
        )
    sync_layer(fig, RR_LAYER, traces)

    tick_values = rr_x.ticks(5)
    show_axis(
        fig, band["xaxis"],
        side="bottom",
        tickmode="array",
        tickvals=[rr_x(t) for t in tick_values],
        ticktext=[format_val(t) for t in tick_values],
    )

    set_annotation(
        fig, RR_TITLE_NAME,
        text="Relative risk",
        x=sizes.set_size_bars_w + sizes.matrix_plot_w + sizes.rr_plot_w / 2,
        y=_title_y(sizes),
        xanchor="center",
        yanchor="middle",
        showarrow=False,
        **_OVERLAY,
    )


def remove_rr_intervals(fig: go.Figure) -> None:
    """Drop any lingering risk band, e.g. for SNP-only data."""
    clear_layer(fig, RR_LAYER)
    hide_axis(fig, axis_refs("rr")["xaxis"])
    remove_annotations(fig, RR_TITLE_NAME)


# ------------------------------------------------------------------ #
#  Code marginal bars
# ------------------------------------------------------------------ #

def draw_code_marginal_bars(
    fig: go.Figure,
    marginals: Sequence[MarginalCode],
    scales: Scales,
    sizes: Sizes,
    colors: ChartColors,
) -> None:
    """Top bars with the overall count of every code."""
    band = axis_refs("marginal")
    marginal_y = scales.marginal_y

    traces: Dict[str, go.Bar] = {}
    for m in marginals:
        top = marginal_y(m.count)
        traces[m.code] = go.Bar(
            x=[scales.matrix_width_scale.center(m.code)],
            y=[sizes.margin_count_h - top],
            base=[top],
            width=[scales.matrix_column_width],
            marker=dict(
                color=scales.code_to_color.get(m.code, colors.code_missing),
                line=dict(width=0),
            ),
            **band, **_NO_HOVER,
        )
    sync_layer(fig, MARGINAL_LAYER, traces)

    # Zero tick dropped for cleanliness
    tick_values = [t for t in marginal_y.ticks(5) if t != 0]
    show_axis(
        fig, band["yaxis"],
        side="left",
        tickmode="array",
        tickvals=[marginal_y(t) for t in tick_values],
        ticktext=[count_format(t) for t in tick_values],
    )


# ------------------------------------------------------------------ #
#  Empty state
# ------------------------------------------------------------------ #

def clear_chart(fig: go.Figure) -> None:
    """Remove every chart component and its axes from the surface."""
    for layer in CHART_LAYERS:
        clear_layer(fig, layer)
    for ref in ("x", "x2", "x3", "y4"):
        hide_axis(fig, ref)
    remove_annotations(fig, COUNT_TITLE_NAME, RR_TITLE_NAME)


def draw_threshold_warning(fig: go.Figure, sizes: Sizes, lead_message: str = "No groups meet") -> None:
    logger.debug("showing threshold warning: %s", lead_message)
    set_annotation(
        fig, WARNING_NAME,
        text=f"{lead_message} filter size threshold<br>Adjust threshold down to see groups.",
        x=sizes.width / 2 - sizes.margin.left,
        y=sizes.height / 2 - sizes.margin.top,
        xanchor="center",
        yanchor="middle",
        showarrow=False,
        bgcolor="white",
        font=dict(size=16),
        **_OVERLAY,
    )


def remove_threshold_warning(fig: go.Figure) -> None:
    remove_annotations(fig, WARNING_NAME)
