"""Draggable threshold handle under the pattern count bars."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

import plotly.graph_objects as go

from ..utils import count_format
from .colors import ChartColors, rgba
from .scales import LinearScale, Sizes
from .surface import set_annotation

logger = logging.getLogger(__name__)

HANDLE_NAME = "set_size_handle"
POINTER_NAME = "set_size_pointer"
READOUT_NAME = "set_size_readout"

HANDLE_W = 20
HANDLE_H = 17
PADDING_TOP = 15

DEFAULT_HANDLE_STYLE = dict(width=1, color="rgba(0,0,0,0.5)")
SELECTED_HANDLE_STYLE = dict(width=2, color="rgba(0,0,0,1)")


class DragSlider:
    """Turns horizontal drag positions into a minimum set size.

    Positions are pixels on the count-bar axis. Inside the scale's domain
    the handle follows the pointer; outside it the handle stays put and the
    candidate threshold is clamped to the nearest domain bound.

    Parameters
    ----------
    scale : LinearScale
        Count scale of the pattern bars.
    starting_min_size : float
        Threshold the handle starts at.
    on_release : callable
        Called with the committed threshold when a drag ends.
    """

    def __init__(
        self,
        scale: LinearScale,
        starting_min_size: float,
        on_release: Callable[[float], Any],
    ) -> None:
        self.scale = scale
        self.range_min, self.range_max = scale.domain
        self.desired_size = starting_min_size
        self.handle_x = scale(starting_min_size)
        self.on_release = on_release
        self.dragging = False
        self.readout = ""

    @property
    def readout_visible(self) -> bool:
        return self.dragging

    def start(self) -> None:
        self.dragging = True

    def drag(self, x: float) -> float:
        """Move to pixel ``x``; return the current candidate threshold."""
        if not self.dragging:
            self.start()
        desired = self.scale.invert(x)
        below_max = desired < self.range_max
        above_min = desired > self.range_min

        if below_max and above_min:
            self.handle_x = x
            self.readout = f"size > {count_format(desired)}"
        else:
            desired = self.range_min if not above_min else self.range_max
        self.desired_size = desired
        return desired

    def end(self) -> float:
        """Finish the drag and commit the candidate threshold."""
        self.dragging = False
        self.handle_x = self.scale(self.desired_size)
        self.readout = f"size > {count_format(self.desired_size)}"
        logger.info("slider released at min size %s", self.desired_size)
        self.on_release(self.desired_size)
        return self.desired_size

    def draw(self, fig: go.Figure, sizes: Sizes, colors: ChartColors) -> None:
        """Place the handle, its pointer line and the readout on the surface."""
        top = sizes.h + PADDING_TOP
        line = SELECTED_HANDLE_STYLE if self.dragging else DEFAULT_HANDLE_STYLE
        shapes = [
            s for s in fig.layout.shapes if s.name not in (HANDLE_NAME, POINTER_NAME)
        ]
        shapes.append(go.layout.Shape(
            name=HANDLE_NAME,
            type="rect",
            editable=True,
            xref="x5", yref="y5",
            x0=self.handle_x - HANDLE_W / 2,
            x1=self.handle_x + HANDLE_W / 2,
            y0=top,
            y1=top + HANDLE_H,
            fillcolor=rgba(colors.slider_handle, 0.6),
            line=line,
        ))
        shapes.append(go.layout.Shape(
            name=POINTER_NAME,
            type="line",
            xref="x5", yref="y5",
            x0=self.handle_x, x1=self.handle_x,
            y0=top - PADDING_TOP, y1=top,
            line=line,
        ))
        fig.layout.shapes = shapes

        set_annotation(
            fig, READOUT_NAME,
            text=self.readout,
            visible=self.readout_visible,
            xref="x5", yref="y5",
            x=self.handle_x - HANDLE_W / 2 - 2,
            y=top + HANDLE_H / 2,
            xanchor="right",
            yanchor="middle",
            showarrow=False,
        )


def handle_index(fig: go.Figure) -> Optional[int]:
    for i, shape in enumerate(fig.layout.shapes):
        if shape.name == HANDLE_NAME:
            return i
    return None


def handle_x_from_relayout(relayout: Mapping[str, Any] | None, index: Optional[int]) -> Optional[float]:
    """Centre x of the dragged handle from Plotly ``relayoutData``, if it moved."""
    if not relayout or index is None:
        return None
    x0 = relayout.get(f"shapes[{index}].x0")
    x1 = relayout.get(f"shapes[{index}].x1")
    if x0 is None or x1 is None:
        return None
    return (float(x0) + float(x1)) / 2
