"""UpsetExplorer: owns the view state and redraws the chart when it changes.

This is the chart orchestrator. Filtering, scales, drawing and interaction
live in the library modules (``filtering``, ``visualization``); this class
wires them to one figure and one ViewState.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence, Union

import plotly.graph_objects as go

from ..filtering import FilterResult, complete_marginals, filter_set_size, initial_min_size
from ..models import Margin, Pattern, UpsetOptions, has_risk_data
from ..utils import ci_format, codes_equal, count_format, make_id_string
from ..visualization.colors import ChartColors, PersistentColorMap
from ..visualization.components import (
    clear_chart,
    draw_code_marginal_bars,
    draw_pattern_count_bars,
    draw_pattern_matrix,
    draw_rr_intervals,
    draw_threshold_warning,
    remove_rr_intervals,
    remove_threshold_warning,
)
from ..visualization.interaction import (
    CODE_LAYER,
    HOVER_STROKE_WIDTH,
    PATTERN_LAYER,
    InfoPanel,
    InteractionLayer,
    create_code_interaction_layer,
    create_pattern_interaction_layer,
    set_region_stroke,
)
from ..visualization.scales import Scales, Sizes, compute_scales, compute_sizes, count_scale
from ..visualization.slider import DragSlider, HANDLE_NAME, POINTER_NAME, READOUT_NAME
from ..visualization.surface import (
    clear_layer,
    figure_to_svg,
    layout_surface,
    new_surface,
    remove_annotations,
)
from .highlight import HighlightMachine, HostNotifier, Sink
from .state import ViewState

logger = logging.getLogger(__name__)

LEFT_PANEL_NAME = "left_info_panel"
RIGHT_PANEL_NAME = "right_info_panel"


class UpsetExplorer:
    """Interactive upset plot bound to one Plotly figure.

    Parameters
    ----------
    patterns : sequence of Pattern or mapping
        Pattern records; mappings are converted with ``Pattern.from_record``.
    options : UpsetOptions or mapping
        Host options (colours, starting threshold, marginal data, channel).
    width, height : float
        Viewport size in pixels.
    sink : callable, optional
        ``sink(channel, message)`` receiving highlight notifications.
    """

    def __init__(
        self,
        patterns: Sequence[Union[Pattern, Mapping[str, Any]]],
        options: Union[UpsetOptions, Mapping[str, Any], None] = None,
        width: float = 900,
        height: float = 600,
        sink: Optional[Sink] = None,
        margin: Optional[Margin] = None,
    ) -> None:
        self.fig: go.Figure = new_surface()
        self.width = width
        self.height = height
        self.margin = margin or Margin()
        self.sink = sink

        self.state: Optional[ViewState] = None
        self.highlight: Optional[HighlightMachine] = None
        self.sizes: Optional[Sizes] = None
        self.scales: Optional[Scales] = None
        self.filtered: Optional[FilterResult] = None
        self.slider: Optional[DragSlider] = None
        self.pattern_layer: Optional[InteractionLayer] = None
        self.code_layer: Optional[InteractionLayer] = None
        self.left_panel: Optional[InfoPanel] = None
        self.right_panel: Optional[InfoPanel] = None
        self._hovered: Optional[str] = None

        self.set_data(patterns, options)

    # ------------------------------------------------------------------ #
    #  Host entry points
    # ------------------------------------------------------------------ #

    def set_data(
        self,
        patterns: Sequence[Union[Pattern, Mapping[str, Any]]],
        options: Union[UpsetOptions, Mapping[str, Any], None] = None,
    ) -> go.Figure:
        """Replace the dataset and render from fresh view state."""
        if not isinstance(options, UpsetOptions):
            options = UpsetOptions.from_dict(options)
        self.options = options
        self.patterns = [p if isinstance(p, Pattern) else Pattern.from_record(p) for p in patterns]
        self.marginals = complete_marginals(self.patterns, options.marginal_data)
        self.colors = ChartColors.from_roles(options.colors)
        self.color_map = PersistentColorMap(options.code_to_color)
        self.notifier = HostNotifier(self.sink, options.msg_loc)
        self.has_risk_data = has_risk_data(self.patterns)

        if self.highlight is not None:
            self.highlight.clear()
        self.state = None
        self.highlight = None
        logger.info(
            "loaded %d patterns over %d codes (risk data: %s)",
            len(self.patterns), len(self.marginals), self.has_risk_data,
        )
        return self.draw_upset()

    def resize(self, width: float, height: float) -> go.Figure:
        """Re-layout for a new viewport; view state is kept."""
        if (width, height) == (self.width, self.height):
            return self.fig
        self.width = width
        self.height = height
        return self.draw_upset()

    def set_min_size(self, new_size: float) -> go.Figure:
        """Commit a new threshold (slider release)."""
        if self.state is None:
            return self.fig
        logger.info("min set size %s -> %s", self.state.current_min_size, new_size)
        self.state.current_min_size = new_size
        return self.draw_with_set_size()

    def toggle_singletons(self) -> bool:
        """Flip the singleton filter and redraw; return the new flag."""
        if self.state is None:
            return False
        self.state.filtering_singletons = not self.state.filtering_singletons
        logger.info("filtering singletons: %s", self.state.filtering_singletons)
        self.draw_with_set_size()
        return self.state.filtering_singletons

    def set_singleton_filter(self, enabled: bool) -> None:
        if self.state is not None and self.state.filtering_singletons != enabled:
            self.toggle_singletons()

    def drag_handle_to(self, x: float) -> float:
        """Run a whole drag gesture ending at pixel ``x`` and commit it."""
        if self.slider is None:
            raise ValueError("no threshold slider on the current chart")
        self.slider.start()
        self.slider.drag(x)
        return self.slider.end()

    def export_svg(self) -> bytes:
        return figure_to_svg(self.fig)

    # ------------------------------------------------------------------ #
    #  Pointer events from hit regions
    # ------------------------------------------------------------------ #

    def _layer_for(self, region_id: str) -> Optional[InteractionLayer]:
        for layer in (self.pattern_layer, self.code_layer):
            if layer is not None and region_id in layer:
                return layer
        return None

    def dispatch(self, event: str, region_id: str) -> bool:
        layer = self._layer_for(region_id)
        if layer is None:
            return False
        return layer.dispatch(event, region_id)

    def hover(self, region_id: Optional[str]) -> None:
        """Pointer moved onto ``region_id`` (``None`` means it left the chart)."""
        if region_id == self._hovered:
            return
        if self._hovered is not None:
            self.dispatch("mouseout", self._hovered)
        self._hovered = region_id
        if region_id is not None:
            self.dispatch("mouseover", region_id)

    def click(self, region_id: str) -> bool:
        return self.dispatch("click", region_id)

    # ------------------------------------------------------------------ #
    #  Rendering
    # ------------------------------------------------------------------ #

    def draw_upset(self) -> go.Figure:
        """Lay out the chart for the current data and viewport, then draw it."""
        self.sizes = compute_sizes(self.width, self.height, self.margin, self.has_risk_data)
        self.set_size_x = count_scale(self.patterns, self.sizes)
        layout_surface(self.fig, self.sizes, show_risk=self.has_risk_data)

        # Check if we have enough data to make a meaningful upset chart
        if len(self.patterns) < 2:
            lead_message = "Only one group meets" if len(self.patterns) == 1 else "No groups meet"
            self._clear_interactive()
            self._remove_slider()
            draw_threshold_warning(self.fig, self.sizes, lead_message)
            return self.fig

        remove_threshold_warning(self.fig)

        if self.state is None:
            self.state = ViewState(
                current_min_size=initial_min_size(self.patterns, self.options.min_set_size),
            )
            self.highlight = HighlightMachine(self.state, self.notifier)

        self.slider = DragSlider(self.set_size_x, self.state.current_min_size, self.set_min_size)
        return self.draw_with_set_size()

    def draw_with_set_size(self) -> go.Figure:
        """Filter at the current threshold and re-synchronise every component."""
        state, sizes = self.state, self.sizes
        previous = self.filtered
        self.filtered = filter_set_size(
            self.patterns, self.marginals,
            state.current_min_size, state.filtering_singletons,
        )
        patterns, marginals = self.filtered.patterns, self.filtered.marginals
        if previous is not None and not codes_equal(previous.codes, self.filtered.codes):
            logger.debug("visible codes changed: %s", self.filtered.codes)

        if self.filtered.is_empty:
            self._clear_interactive()
            draw_threshold_warning(self.fig, sizes, "No groups meet")
            self.slider.draw(self.fig, sizes, self.colors)
            self.highlight.refresh(self.fig)
            return self.fig

        remove_threshold_warning(self.fig)

        code_to_color = self.color_map(m.code for m in marginals)
        self.scales = scales = compute_scales(patterns, marginals, sizes, self.set_size_x, code_to_color)

        draw_pattern_matrix(self.fig, patterns, marginals, scales, sizes, self.colors)
        draw_pattern_count_bars(self.fig, patterns, scales, sizes, self.colors)
        if self.has_risk_data:
            draw_rr_intervals(self.fig, patterns, scales, sizes, self.colors)
        else:
            remove_rr_intervals(self.fig)
        draw_code_marginal_bars(self.fig, marginals, scales, sizes, self.colors)

        self._setup_interaction(patterns, marginals, scales, sizes)
        self.slider.draw(self.fig, sizes, self.colors)

        # Redo old highlight if it's there
        self.highlight.refresh(self.fig)
        return self.fig

    def _setup_interaction(self, patterns, marginals, scales: Scales, sizes: Sizes) -> None:
        panel_size = (sizes.set_size_bars_w, sizes.margin_count_h - sizes.padding * 2)
        self.left_panel = InfoPanel(self.fig, LEFT_PANEL_NAME, (0, 0), panel_size, "left")
        self.right_panel = InfoPanel(
            self.fig, RIGHT_PANEL_NAME,
            (sizes.set_size_bars_w + sizes.matrix_plot_w, 0), panel_size, "right",
        )
        self._hovered = None

        self.code_layer = create_code_interaction_layer(
            self.fig, marginals, scales, sizes, self._code_callbacks(),
        )
        self.pattern_layer = create_pattern_interaction_layer(
            self.fig, patterns, scales, sizes, self._pattern_callbacks(),
        )

    def _pattern_callbacks(self):
        def mouseover(d: Pattern) -> None:
            self.right_panel.update([
                f"RR: {ci_format(d.point_est)}",
                f"({ci_format(d.lower)}, {ci_format(d.upper)})",
            ]).show()
            self.left_panel.update(["Appears in", f"{count_format(d.count)} subjects"]).show()
            set_region_stroke(self.fig, make_id_string(d, "pattern"), HOVER_STROKE_WIDTH)

        def mouseout(d: Pattern) -> None:
            self.right_panel.hide()
            self.left_panel.hide()
            set_region_stroke(self.fig, make_id_string(d, "pattern"), 0)

        def click(d: Pattern) -> None:
            self.highlight.click(self.fig, d, "pattern")

        return {"mouseover": mouseover, "mouseout": mouseout, "click": click}

    def _code_callbacks(self):
        def mouseover(d) -> None:
            self.left_panel.update(f"Code: {d.code}").show()
            self.right_panel.update(["Appears", f"{count_format(d.count)} times"]).show()
            set_region_stroke(self.fig, make_id_string(d, "code"), HOVER_STROKE_WIDTH)

        def mouseout(d) -> None:
            self.left_panel.hide()
            self.right_panel.hide()
            set_region_stroke(self.fig, make_id_string(d, "code"), 0)

        def click(d) -> None:
            self.highlight.click(self.fig, d, "code")

        return {"mouseover": mouseover, "mouseout": mouseout, "click": click}

    def _clear_interactive(self) -> None:
        clear_chart(self.fig)
        clear_layer(self.fig, PATTERN_LAYER)
        clear_layer(self.fig, CODE_LAYER)
        remove_annotations(self.fig, LEFT_PANEL_NAME, RIGHT_PANEL_NAME)
        self.pattern_layer = None
        self.code_layer = None
        self._hovered = None

    def _remove_slider(self) -> None:
        self.slider = None
        self.fig.layout.shapes = [
            s for s in self.fig.layout.shapes if s.name not in (HANDLE_NAME, POINTER_NAME)
        ]
        remove_annotations(self.fig, READOUT_NAME)
