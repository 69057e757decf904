"""Scales, drawing surface and chart components for the upset plot."""

from .colors import ChartColors, PersistentColorMap, hex_to_rgb, rgba
from .components import (
    draw_code_marginal_bars,
    draw_pattern_count_bars,
    draw_pattern_matrix,
    draw_rr_intervals,
)
from .interaction import (
    InfoPanel,
    InteractionLayer,
    create_code_interaction_layer,
    create_pattern_interaction_layer,
)
from .scales import BandScale, LinearScale, Scales, Sizes, compute_scales, compute_sizes, count_scale
from .slider import DragSlider
from .surface import figure_to_svg, layout_surface, new_surface, sync_layer

__all__ = [
    "ChartColors",
    "PersistentColorMap",
    "hex_to_rgb",
    "rgba",
    "draw_pattern_matrix",
    "draw_pattern_count_bars",
    "draw_rr_intervals",
    "draw_code_marginal_bars",
    "InfoPanel",
    "InteractionLayer",
    "create_pattern_interaction_layer",
    "create_code_interaction_layer",
    "LinearScale",
    "BandScale",
    "Sizes",
    "Scales",
    "compute_sizes",
    "compute_scales",
    "count_scale",
    "DragSlider",
    "new_surface",
    "layout_surface",
    "sync_layer",
    "figure_to_svg",
]
