"""Tests for the Dash host glue."""

import pytest
from dash import no_update
from dash.exceptions import PreventUpdate

from upset_explorer.app.app import ServerState
from upset_explorer.app.callbacks import region_from_event, route_chart_event
from upset_explorer.app.layout import build_layout, status_text
from upset_explorer.explorer import UpsetExplorer
from upset_explorer.visualization.slider import handle_index


@pytest.fixture
def served(patterns):
    state = ServerState()
    state.explorer = UpsetExplorer(patterns, {"msg_loc": "chan"}, sink=state.receive)
    return state


def _route(state, prop_id, **events):
    args = dict(viewport=None, singleton_value=None, hover_data=None, click_data=None, relayout_data=None)
    args.update(events)
    return route_chart_event(state, prop_id, **args)


class TestRegionFromEvent:

    def test_customdata_list(self):
        event = {"points": [{"curveNumber": 3, "customdata": ["pattern_A-B"]}]}
        assert region_from_event(event) == "pattern_A-B"

    def test_customdata_scalar(self):
        assert region_from_event({"points": [{"customdata": "code_2501"}]}) == "code_2501"

    def test_no_region(self):
        assert region_from_event(None) is None
        assert region_from_event({"points": []}) is None
        assert region_from_event({"points": [{"x": 1, "y": 2}]}) is None


class TestServerState:

    def test_take_newest_message(self):
        state = ServerState()
        state.receive("chan", {"payload": ["1"]})
        state.receive("chan", {"payload": ["2", "A"]})
        assert state.take_message() == {"payload": ["2", "A"]}
        assert state.take_message() is None

    def test_explorer_notifications_reach_outbox(self, patterns):
        state = ServerState()
        state.explorer = UpsetExplorer(patterns, {"msg_loc": "chan"}, sink=state.receive)
        state.explorer.click("pattern_A")
        assert state.take_message()["payload"][1:] == ["A"]


def test_status_text(patterns):
    state = ServerState(explorer=UpsetExplorer(patterns))
    assert status_text(state) == "2 / 4 patterns | min size 100"


def test_layout_has_host_store(patterns):
    state = ServerState(explorer=UpsetExplorer(patterns, {"msg_loc": "highlight_store"}))
    layout = build_layout(state)
    ids = {getattr(child, "id", None) for child in layout.children}
    assert {"viewport-store", "highlight_store", "status-bar"} <= ids


class TestRouteChartEvent:

    CLICK = {"points": [{"curveNumber": 9, "pointNumber": 0, "customdata": ["pattern_A-B"]}]}

    def test_same_click_twice_clears_highlight(self, served):
        first = _route(served, "upset-graph.clickData", click_data=self.CLICK)
        second = _route(served, "upset-graph.clickData", click_data=self.CLICK)

        assert first[1]["payload"][1:] == ["A", "B"]
        assert second[1]["payload"][1:] == []
        assert served.explorer.state.highlighted_id is None

    def test_handled_click_resets_click_data(self, served):
        figure, _, _, click_data, relayout_data = _route(
            served, "upset-graph.clickData", click_data=self.CLICK,
        )
        assert figure is served.explorer.fig
        assert click_data is None
        assert relayout_data is no_update

    def test_click_outside_regions_is_ignored(self, served):
        with pytest.raises(PreventUpdate):
            _route(served, "upset-graph.clickData", click_data={"points": [{"x": 1}]})

    def test_handle_drag_commits_and_resets_relayout(self, served):
        explorer = served.explorer
        x = explorer.slider.scale(130)
        index = handle_index(explorer.fig)
        relayout = {f"shapes[{index}].x0": x - 10, f"shapes[{index}].x1": x + 10}

        _, message, status, click_data, relayout_data = _route(
            served, "upset-graph.relayoutData", relayout_data=relayout,
        )
        assert explorer.state.current_min_size == pytest.approx(130)
        assert [p.pattern for p in explorer.filtered.patterns] == ["A-B"]
        assert "last drag: size > 130" in status
        assert relayout_data is None
        assert click_data is no_update
        assert message is no_update

    def test_unrelated_relayout_is_ignored(self, served):
        with pytest.raises(PreventUpdate):
            _route(served, "upset-graph.relayoutData", relayout_data={"autosize": True})

    def test_toggle_and_resize(self, served):
        _route(served, "singleton-toggle.value", singleton_value=["on"])
        assert served.explorer.state.filtering_singletons
        _route(served, "viewport-store.data", viewport={"width": 800, "height": 500})
        assert served.explorer.fig.layout.width == 800

    def test_no_state(self):
        with pytest.raises(PreventUpdate):
            _route(ServerState(), "upset-graph.clickData", click_data=self.CLICK)


def test_status_text_after_drag(patterns):
    state = ServerState(explorer=UpsetExplorer(patterns))
    explorer = state.explorer
    explorer.drag_handle_to(explorer.slider.scale(75))
    text = status_text(state)
    assert "min size 75" in text
    assert text.endswith("| last drag: size > 75")
