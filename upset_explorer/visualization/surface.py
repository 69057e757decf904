"""Pixel-space Plotly figure used as the drawing surface.

The figure has no Plotly margins. Each chart band gets its own axis pair
whose domain is the band's rectangle and whose range is the band's size in
pixels, so one data unit is one screen pixel and y grows downwards. An
``overlay`` axis pair spans the whole figure with its origin at the inner
(margin-padded) top-left corner.

Traces belong to named layers and are matched across renders by key; the
trace ``uid`` is derived from the key so the browser keeps object constancy.
"""

from __future__ import annotations

from typing import Dict, Mapping, Tuple

import plotly.graph_objects as go
import plotly.io as pio

from . import theme
from .scales import Sizes

# band name -> (xaxis ref, yaxis ref)
BAND_AXES: Dict[str, Tuple[str, str]] = {
    "bars": ("x", "y"),
    "matrix": ("x2", "y2"),
    "rr": ("x3", "y3"),
    "marginal": ("x4", "y4"),
    "overlay": ("x5", "y5"),
}


def _layout_key(ref: str) -> str:
    """``'x2'`` -> ``'xaxis2'``."""
    return ref[0] + "axis" + ref[1:]


def new_surface() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        margin=dict(l=0, r=0, t=0, b=0),
        paper_bgcolor="white",
        plot_bgcolor="rgba(0,0,0,0)",
        showlegend=False,
        hovermode="closest",
        dragmode=False,
        barmode="overlay",
        font=dict(family=theme.FONT_STACK, size=11, color=theme.BASE01),
    )
    return fig


def _band_rect(sizes: Sizes, band: str) -> Tuple[float, float, float, float]:
    """Return ``(left, top, width, height)`` of a band relative to the inner area."""
    if band == "bars":
        return 0, sizes.margin_count_h, sizes.set_size_bars_w, sizes.matrix_plot_h
    if band == "matrix":
        return sizes.set_size_bars_w, sizes.margin_count_h, sizes.matrix_plot_w, sizes.matrix_plot_h
    if band == "rr":
        return (
            sizes.set_size_bars_w + sizes.matrix_plot_w, sizes.margin_count_h,
            sizes.rr_plot_w, sizes.matrix_plot_h,
        )
    if band == "marginal":
        return sizes.set_size_bars_w, 0, sizes.matrix_plot_w, sizes.margin_count_h
    raise KeyError(band)


def _clip(value: float) -> float:
    return min(1.0, max(0.0, value))


def layout_surface(fig: go.Figure, sizes: Sizes, show_risk: bool = True) -> None:
    """Size the figure to the viewport and place every band's axes."""
    m = sizes.margin
    fig.update_layout(width=sizes.width, height=sizes.height)

    hidden = dict(
        visible=False, fixedrange=True, showgrid=False, zeroline=False,
        automargin=False,
    )
    for band in ("bars", "matrix", "rr", "marginal"):
        left, top, width, height = _band_rect(sizes, band)
        xref, yref = BAND_AXES[band]
        x0 = (m.left + left) / sizes.width
        x1 = (m.left + left + width) / sizes.width
        y_top = 1 - (m.top + top) / sizes.height
        y_bottom = 1 - (m.top + top + height) / sizes.height
        fig.update_layout({
            _layout_key(xref): dict(
                hidden, domain=[_clip(x0), _clip(x1)], range=[0, max(width, 1)],
                anchor=yref,
            ),
            _layout_key(yref): dict(
                hidden, domain=[_clip(y_bottom), _clip(y_top)], range=[height, 0],
                anchor=xref,
            ),
        })

    xref, yref = BAND_AXES["overlay"]
    fig.update_layout({
        _layout_key(xref): dict(
            hidden, domain=[0, 1], range=[-m.left, sizes.w + m.right], anchor=yref,
        ),
        _layout_key(yref): dict(
            hidden, domain=[0, 1], range=[sizes.h + m.bottom, -m.top], anchor=xref,
        ),
    })
    if not show_risk:
        fig.update_layout(xaxis3=dict(visible=False), yaxis3=dict(visible=False))


def show_axis(fig: go.Figure, ref: str, **props) -> None:
    """Turn on tick rendering for axis ``ref`` (e.g. ``'x'``, ``'y4'``)."""
    props.setdefault("showline", False)
    props.setdefault("ticks", "outside")
    props.setdefault("tickfont", dict(size=11, color=theme.BASE01))
    fig.update_layout({_layout_key(ref): dict(visible=True, **props)})


def hide_axis(fig: go.Figure, ref: str) -> None:
    fig.update_layout({_layout_key(ref): dict(visible=False)})


def axis_refs(band: str) -> Dict[str, str]:
    xref, yref = BAND_AXES[band]
    return {"xaxis": xref, "yaxis": yref}


# ------------------------------------------------------------------ #
#  Keyed trace layers
# ------------------------------------------------------------------ #

def _layer_of(trace) -> str | None:
    meta = trace.meta
    if isinstance(meta, dict):
        return meta.get("layer")
    return None


def _key_of(trace) -> str | None:
    return trace.meta.get("key") if isinstance(trace.meta, dict) else None


def layer_uid(layer: str, key: str) -> str:
    return f"{layer}/{key}"


def layer_traces(fig: go.Figure, layer: str) -> Dict[str, object]:
    """Traces currently in ``layer`` keyed by identity."""
    return {_key_of(t): t for t in fig.data if _layer_of(t) == layer}


def sync_layer(
    fig: go.Figure,
    layer: str,
    traces: Mapping[str, object],
    uid_from_key: bool = False,
) -> None:
    """Make ``layer`` hold exactly ``traces``, matched to existing traces by key.

    Stale keys are removed, existing keys are updated in place and missing
    keys are appended. ``uid_from_key`` uses the bare key as the trace uid
    instead of ``layer/key``.
    """
    kept = [t for t in fig.data if _layer_of(t) != layer or _key_of(t) in traces]
    if len(kept) != len(fig.data):
        fig.data = kept

    existing = layer_traces(fig, layer)
    added = []
    for key, trace in traces.items():
        trace.meta = {"layer": layer, "key": key}
        trace.uid = key if uid_from_key else layer_uid(layer, key)
        current = existing.get(key)
        if current is None:
            added.append(trace)
            continue
        props = trace.to_plotly_json()
        props.pop("type", None)
        current.update(props)

    if added:
        fig.add_traces(added)


def clear_layer(fig: go.Figure, layer: str) -> None:
    sync_layer(fig, layer, {})


# ------------------------------------------------------------------ #
#  Named annotations
# ------------------------------------------------------------------ #

def set_annotation(fig: go.Figure, name: str, **props) -> None:
    """Update the annotation called ``name``, adding it if absent."""
    for annotation in fig.layout.annotations:
        if annotation.name == name:
            annotation.update(props)
            return
    fig.add_annotation(name=name, **props)


def get_annotation(fig: go.Figure, name: str):
    for annotation in fig.layout.annotations:
        if annotation.name == name:
            return annotation
    return None


def remove_annotations(fig: go.Figure, *names: str) -> None:
    fig.layout.annotations = [a for a in fig.layout.annotations if a.name not in names]


# ------------------------------------------------------------------ #
#  Export
# ------------------------------------------------------------------ #

def figure_to_svg(fig: go.Figure) -> bytes:
    """Standalone SVG document of the surface as currently drawn."""
    return pio.to_image(fig, format="svg", width=fig.layout.width, height=fig.layout.height)
