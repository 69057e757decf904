"""All Dash callbacks for the upset explorer app."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from dash import Input, Output, callback_context, dcc, no_update
from dash.exceptions import PreventUpdate

from ..visualization.slider import handle_index, handle_x_from_relayout
from .layout import status_text

logger = logging.getLogger(__name__)

MIN_VIEWPORT = (400, 300)

# Reports the browser size once, then again on every window resize.
_VIEWPORT_JS = """
function(graph_id) {
    const measure = () => ({
        width: Math.max(window.innerWidth - 40, %d),
        height: Math.max(window.innerHeight - 110, %d),
    });
    if (!window._upsetResizeBound) {
        window._upsetResizeBound = true;
        window.addEventListener('resize', () => {
            dash_clientside.set_props('viewport-store', {data: measure()});
        });
    }
    return measure();
}
""" % MIN_VIEWPORT


def region_from_event(event_data: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Hit-region id carried by Plotly hover/click data, if any."""
    if not event_data:
        return None
    points = event_data.get("points") or []
    if not points:
        return None
    region_id = points[0].get("customdata")
    if isinstance(region_id, list):
        region_id = region_id[0] if region_id else None
    return region_id if isinstance(region_id, str) else None


def _triggered_id() -> Optional[str]:
    ctx = callback_context
    if not ctx.triggered:
        return None
    return ctx.triggered[0]["prop_id"]


def route_chart_event(state, prop_id, viewport, singleton_value, hover_data, click_data, relayout_data):
    """Apply one chart event to the explorer held by ``state``.

    Returns
    -------
    tuple
        ``(figure, host message, status text, clickData, relayoutData)``.
        Handled clicks and handle drags reset their event prop to ``None`` so
        an identical follow-up event still reaches the server.
    """
    if state is None or state.explorer is None or prop_id is None:
        raise PreventUpdate

    explorer = state.explorer
    logger.debug("chart event %s", prop_id)
    click_reset = relayout_reset = no_update

    if prop_id == "viewport-store.data":
        if not viewport:
            raise PreventUpdate
        explorer.resize(viewport["width"], viewport["height"])

    elif prop_id == "singleton-toggle.value":
        explorer.set_singleton_filter("on" in (singleton_value or []))

    elif prop_id == "upset-graph.hoverData":
        explorer.hover(region_from_event(hover_data))

    elif prop_id == "upset-graph.clickData":
        region_id = region_from_event(click_data)
        if region_id is None or not explorer.click(region_id):
            raise PreventUpdate
        click_reset = None

    elif prop_id == "upset-graph.relayoutData":
        x = handle_x_from_relayout(relayout_data, handle_index(explorer.fig))
        if x is None or explorer.slider is None:
            raise PreventUpdate
        explorer.drag_handle_to(x)
        relayout_reset = None

    else:
        raise PreventUpdate

    message = state.take_message()
    return (
        explorer.fig,
        message if message is not None else no_update,
        status_text(state),
        click_reset,
        relayout_reset,
    )


def register(app, msg_loc: str):
    """Register all callbacks on the Dash app instance."""

    # ------------------------------------------------------------------ #
    #  Viewport size
    # ------------------------------------------------------------------ #

    app.clientside_callback(
        _VIEWPORT_JS,
        Output("viewport-store", "data"),
        Input("upset-graph", "id"),
    )

    # ------------------------------------------------------------------ #
    #  Chart events → explorer → figure
    # ------------------------------------------------------------------ #

    @app.callback(
        Output("upset-graph", "figure"),
        Output(msg_loc, "data"),
        Output("status-bar", "children"),
        Output("upset-graph", "clickData"),
        Output("upset-graph", "relayoutData"),
        Input("viewport-store", "data"),
        Input("singleton-toggle", "value"),
        Input("upset-graph", "hoverData"),
        Input("upset-graph", "clickData"),
        Input("upset-graph", "relayoutData"),
        prevent_initial_call=True,
    )
    def update_chart(viewport, singleton_value, hover_data, click_data, relayout_data):
        from .app import state
        return route_chart_event(
            state, _triggered_id(),
            viewport, singleton_value, hover_data, click_data, relayout_data,
        )

    # ------------------------------------------------------------------ #
    #  Export
    # ------------------------------------------------------------------ #

    @app.callback(
        Output("export-download", "data"),
        Input("export-btn", "n_clicks"),
        prevent_initial_call=True,
    )
    def export_svg(n_clicks):
        from .app import state
        if state is None or state.explorer is None or not n_clicks:
            raise PreventUpdate
        return dcc.send_bytes(state.explorer.export_svg(), "upset_plot.svg")
