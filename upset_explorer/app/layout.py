"""Dash layout: control bar, upset chart, status line and host stores."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dash import dcc, html

from ..visualization import theme

if TYPE_CHECKING:
    from .app import ServerState

GRAPH_CONFIG = {
    "displayModeBar": True,
    "displaylogo": False,
    "scrollZoom": False,
    "doubleClick": False,
    "modeBarButtonsToRemove": ["zoom2d", "pan2d", "select2d", "lasso2d", "autoScale2d", "resetScale2d"],
    "toImageButtonOptions": {"format": "svg", "filename": "upset_plot"},
}


def build_layout(state: ServerState) -> html.Div:
    """Return the complete app layout."""
    explorer = state.explorer
    filtering = bool(explorer.state and explorer.state.filtering_singletons)

    return html.Div(
        className="app-container",
        children=[
            html.Div(
                className="control-bar",
                children=[
                    html.Div("Upset Explorer", className="app-header"),
                    dcc.Checklist(
                        id="singleton-toggle",
                        className="singleton-toggle",
                        options=[{"label": "Hide single code patterns", "value": "on"}],
                        value=["on"] if filtering else [],
                        inline=True,
                    ),
                    html.Button("Download SVG", id="export-btn", className="btn-primary"),
                    dcc.Download(id="export-download"),
                ],
            ),
            html.Div(
                className="main-area",
                children=[
                    dcc.Graph(
                        id="upset-graph",
                        figure=explorer.fig,
                        config=GRAPH_CONFIG,
                        clear_on_unhover=True,
                    ),
                ],
            ),
            html.Div(
                id="status-bar",
                className="status-bar",
                style={"color": theme.BASE00, "fontFamily": theme.FONT_STACK},
                children=status_text(state),
            ),
            # ── Hidden stores ──
            dcc.Store(id="viewport-store"),
            dcc.Store(id=explorer.options.msg_loc),
        ],
    )


def status_text(state: ServerState) -> str:
    """One-line summary of what the chart currently shows."""
    explorer = state.explorer
    n_total = len(explorer.patterns)
    if explorer.state is None or explorer.filtered is None:
        return f"{n_total:,} patterns loaded"
    n_shown = len(explorer.filtered.patterns)
    text = (
        f"{n_shown:,} / {n_total:,} patterns"
        f" | min size {explorer.state.current_min_size:,.0f}"
    )
    # the handle readout is hidden once a drag is committed
    if explorer.slider is not None and explorer.slider.readout:
        text += f" | last drag: {explorer.slider.readout}"
    return text
