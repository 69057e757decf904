"""Invisible hit regions over patterns and codes, and the hover info panels."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Sequence, Union

import plotly.graph_objects as go

from ..models import MarginalCode, Pattern
from ..utils import make_id_string
from .colors import rgba
from .scales import Scales, Sizes
from .surface import axis_refs, get_annotation, layer_traces, set_annotation, sync_layer

logger = logging.getLogger(__name__)

PATTERN_LAYER = "pattern_interaction_layer"
CODE_LAYER = "code_interaction_layer"
INTERACTION_LAYERS = (PATTERN_LAYER, CODE_LAYER)

EVENTS = ("mouseover", "mouseout", "click")
HOVER_STROKE_WIDTH = 0.8

Item = Union[Pattern, MarginalCode]
Handler = Callable[[Any], None]

_TRANSPARENT = "rgba(0,0,0,0)"

INTERACTION_BOX_STYLE = dict(
    opacity=0.8,
    marker=dict(color=_TRANSPARENT, line=dict(color="grey", width=0)),
)
SELECTED_INTERACTION_BOX = dict(marker=dict(color=rgba("grey", 0.5)))


class InteractionLayer:
    """Hit regions of one kind (patterns or codes) and their event handlers."""

    def __init__(self, kind: str, layer: str) -> None:
        self.kind = kind
        self.layer = layer
        self._items: Dict[str, Item] = {}
        self._callbacks: Dict[str, Handler] = {}

    def __contains__(self, region_id: str) -> bool:
        return region_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    @property
    def region_ids(self) -> List[str]:
        return list(self._items)

    def item(self, region_id: str) -> Item | None:
        return self._items.get(region_id)

    def bind(self, items: Mapping[str, Item], callbacks: Mapping[str, Handler]) -> None:
        unknown = set(callbacks) - set(EVENTS)
        if unknown:
            raise ValueError(f"Unsupported interaction events: {sorted(unknown)}")
        self._items = dict(items)
        self._callbacks = dict(callbacks)

    def dispatch(self, event: str, region_id: str) -> bool:
        """Run the ``event`` handler for ``region_id``; False if nothing handled it."""
        item = self._items.get(region_id)
        handler = self._callbacks.get(event)
        if item is None or handler is None:
            return False
        handler(item)
        return True


def create_pattern_interaction_layer(
    fig: go.Figure,
    patterns: Sequence[Pattern],
    scales: Scales,
    sizes: Sizes,
    callbacks: Mapping[str, Handler],
) -> InteractionLayer:
    """Draw an invisible bar across every pattern row, including the margins."""
    overlay = axis_refs("overlay")
    traces: Dict[str, go.Bar] = {}
    items: Dict[str, Pattern] = {}
    for i, p in enumerate(patterns):
        region_id = make_id_string(p, "pattern")
        items[region_id] = p
        traces[region_id] = go.Bar(
            orientation="h",
            base=[-sizes.padding],
            x=[sizes.w + 2 * sizes.padding],
            y=[sizes.margin_count_h + scales.pattern_y(i) + scales.matrix_row_height / 2],
            width=[scales.matrix_row_height],
            customdata=[region_id],
            hoverinfo="none",
            showlegend=False,
            **INTERACTION_BOX_STYLE,
            **overlay,
        )
    sync_layer(fig, PATTERN_LAYER, traces, uid_from_key=True)

    layer = InteractionLayer("pattern", PATTERN_LAYER)
    layer.bind(items, callbacks)
    return layer


def create_code_interaction_layer(
    fig: go.Figure,
    marginals: Sequence[MarginalCode],
    scales: Scales,
    sizes: Sizes,
    callbacks: Mapping[str, Handler],
) -> InteractionLayer:
    """Draw an invisible bar down every code column, down into the axis labels."""
    overlay = axis_refs("overlay")
    traces: Dict[str, go.Bar] = {}
    items: Dict[str, MarginalCode] = {}
    for m in marginals:
        region_id = make_id_string(m, "code")
        items[region_id] = m
        traces[region_id] = go.Bar(
            x=[sizes.set_size_bars_w + scales.matrix_width_scale.center(m.code)],
            base=[-sizes.padding],
            y=[sizes.h + sizes.margin.bottom + sizes.padding],
            width=[scales.matrix_column_width],
            customdata=[region_id],
            hoverinfo="none",
            showlegend=False,
            **INTERACTION_BOX_STYLE,
            **overlay,
        )
    sync_layer(fig, CODE_LAYER, traces, uid_from_key=True)

    layer = InteractionLayer("code", CODE_LAYER)
    layer.bind(items, callbacks)
    return layer


# ------------------------------------------------------------------ #
#  Region styling
# ------------------------------------------------------------------ #

def _regions(fig: go.Figure):
    for layer in INTERACTION_LAYERS:
        yield from layer_traces(fig, layer).values()


def reset_region_styles(fig: go.Figure) -> None:
    for trace in _regions(fig):
        trace.update(INTERACTION_BOX_STYLE)


def find_region(fig: go.Figure, region_id: str):
    for trace in _regions(fig):
        if trace.uid == region_id:
            return trace
    return None


def select_region(fig: go.Figure, region_id: str) -> bool:
    """Give ``region_id`` the selected style; False if it is not on the surface."""
    trace = find_region(fig, region_id)
    if trace is None:
        return False
    trace.update(SELECTED_INTERACTION_BOX)
    return True


def set_region_stroke(fig: go.Figure, region_id: str, width: float) -> None:
    trace = find_region(fig, region_id)
    if trace is not None:
        trace.marker.line.width = width


# ------------------------------------------------------------------ #
#  Info panels
# ------------------------------------------------------------------ #

def panel_text_style(width: float, side: str = "left") -> tuple[float, int, str]:
    """Return ``(text_x, font_size, anchor)`` so text fits a panel ``width`` wide."""
    edge_x = 0 if side == "left" else width
    edge_anchor = "left" if side == "left" else "right"
    if width > 300:
        return width / 2, 24, "center"
    if width > 200:
        return width / 2, 22, "center"
    if width > 150:
        return width / 2, 20, "center"
    if width > 100:
        return edge_x, 18, edge_anchor
    return edge_x, 15, edge_anchor


class InfoPanel:
    """Text panel drawn as a named annotation on the overlay axes."""

    def __init__(
        self,
        fig: go.Figure,
        name: str,
        origin: tuple[float, float],
        panel_size: tuple[float, float],
        side: str = "left",
    ) -> None:
        self.fig = fig
        self.name = name
        text_x, font_size, anchor = panel_text_style(panel_size[0], side)
        overlay = axis_refs("overlay")
        set_annotation(
            fig, name,
            text="",
            x=origin[0] + text_x,
            y=origin[1] + panel_size[1] / 2,
            xref=overlay["xaxis"],
            yref=overlay["yaxis"],
            xanchor=anchor,
            yanchor="middle",
            align=anchor if anchor != "center" else "center",
            showarrow=False,
            font=dict(size=font_size),
        )
        self.hide()

    @property
    def visible(self) -> bool:
        annotation = get_annotation(self.fig, self.name)
        return bool(annotation is not None and annotation.visible)

    @property
    def text(self) -> str:
        annotation = get_annotation(self.fig, self.name)
        return annotation.text if annotation is not None else ""

    def update(self, lines: Union[str, Sequence[str]]) -> "InfoPanel":
        text = lines if isinstance(lines, str) else "<br>".join(lines)
        set_annotation(self.fig, self.name, text=text)
        return self

    def show(self) -> "InfoPanel":
        set_annotation(self.fig, self.name, visible=True)
        return self

    def hide(self) -> "InfoPanel":
        set_annotation(self.fig, self.name, visible=False)
        return self
