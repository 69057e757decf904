"""Tests for the highlight state machine and host notifications."""

import pytest

from upset_explorer.explorer.highlight import HighlightMachine, HostNotifier, build_message
from upset_explorer.explorer.state import ViewState
from upset_explorer.filtering import filter_set_size
from upset_explorer.visualization.interaction import (
    create_code_interaction_layer,
    create_pattern_interaction_layer,
    find_region,
)
from upset_explorer.visualization.scales import compute_scales, compute_sizes, count_scale
from upset_explorer.visualization.surface import layout_surface, new_surface

SELECTED = "rgba(128,128,128,0.5)"


@pytest.fixture
def machine(patterns, marginals, messages):
    sizes = compute_sizes(1100, 700)
    fig = new_surface()
    layout_surface(fig, sizes)
    filtered = filter_set_size(patterns, marginals, 60)
    scales = compute_scales(filtered.patterns, filtered.marginals, sizes, count_scale(patterns, sizes))
    create_pattern_interaction_layer(fig, filtered.patterns, scales, sizes, {})
    create_code_interaction_layer(fig, filtered.marginals, scales, sizes, {})

    state = ViewState(current_min_size=60)
    notifier = HostNotifier(messages, "upset_channel", clock=lambda: 1.5)
    return fig, HighlightMachine(state, notifier), filtered


def _payloads(sink):
    return [message["payload"] for _, message in sink.received]


def test_build_message_leads_with_millisecond_timestamp():
    assert build_message("pattern_highlight", ["A", "B"], now=2.0) == {
        "type": "pattern_highlight",
        "payload": ["2000", "A", "B"],
    }


class TestHighlightMachine:

    def test_click_highlights_and_notifies(self, machine, messages):
        fig, highlight, filtered = machine
        highlight.click(fig, filtered.patterns[0], "pattern")
        assert highlight.highlighted_id == "pattern_A-B"
        assert find_region(fig, "pattern_A-B").marker.color == SELECTED
        assert messages.received == [
            ("upset_channel", {"type": "pattern_highlight", "payload": ["1500", "A", "B"]}),
        ]

    def test_second_click_clears_with_one_empty_message(self, machine, messages):
        fig, highlight, filtered = machine
        highlight.click(fig, filtered.patterns[0], "pattern")
        highlight.click(fig, filtered.patterns[0], "pattern")
        assert highlight.highlighted_id is None
        assert find_region(fig, "pattern_A-B").marker.color == "rgba(0,0,0,0)"
        assert _payloads(messages) == [["1500", "A", "B"], ["1500"]]

    def test_click_other_item_replaces(self, machine, messages):
        fig, highlight, filtered = machine
        highlight.click(fig, filtered.patterns[0], "pattern")
        highlight.click(fig, filtered.marginals[2], "code")
        assert highlight.highlighted_id == "code_C"
        assert find_region(fig, "pattern_A-B").marker.color == "rgba(0,0,0,0)"
        assert find_region(fig, "code_C").marker.color == SELECTED
        assert _payloads(messages) == [["1500", "A", "B"], ["1500", "C"]]

    def test_refresh_keeps_visible_highlight(self, machine, messages):
        fig, highlight, filtered = machine
        highlight.click(fig, filtered.patterns[1], "pattern")
        highlight.refresh(fig)
        assert highlight.highlighted_id == "pattern_A"
        assert len(messages.received) == 1

    def test_refresh_clears_filtered_out_highlight(self, machine, messages, patterns, marginals):
        fig, highlight, filtered = machine
        highlight.click(fig, filtered.patterns[2], "pattern")
        sizes = compute_sizes(1100, 700)
        smaller = filter_set_size(patterns, marginals, 100)
        scales = compute_scales(smaller.patterns, smaller.marginals, sizes, count_scale(patterns, sizes))
        create_pattern_interaction_layer(fig, smaller.patterns, scales, sizes, {})

        highlight.refresh(fig)
        assert highlight.highlighted_id is None
        assert _payloads(messages)[-1] == ["1500"]

    def test_clear_without_highlight_is_silent(self, machine, messages):
        fig, highlight, _ = machine
        highlight.clear(fig)
        assert messages.received == []


class TestHostNotifier:

    def test_missing_sink_is_fine(self):
        HostNotifier(None, "upset_channel").send(["A"])

    def test_failing_sink_is_ignored(self):
        def broken(channel, message):
            raise RuntimeError("host gone")

        HostNotifier(broken, "upset_channel").send(["A"])
