"""Tests for the threshold drag slider."""

import pytest

from upset_explorer.visualization.colors import ChartColors
from upset_explorer.visualization.scales import LinearScale, compute_sizes
from upset_explorer.visualization.slider import (
    HANDLE_NAME,
    HANDLE_W,
    READOUT_NAME,
    DragSlider,
    handle_index,
    handle_x_from_relayout,
)
from upset_explorer.visualization.surface import get_annotation, layout_surface, new_surface


@pytest.fixture
def slider():
    released = []
    s = DragSlider(LinearScale(domain=(0, 150), range=(300, 0)), 100, released.append)
    s.released = released
    return s


class TestDragSlider:

    def test_starts_at_threshold(self, slider):
        assert slider.handle_x == pytest.approx(100)
        assert not slider.readout_visible

    def test_drag_inside_domain_follows_pointer(self, slider):
        slider.start()
        assert slider.drag(150) == pytest.approx(75)
        assert slider.handle_x == 150
        assert slider.readout == "size > 75"
        assert slider.readout_visible

    def test_drag_past_max_clamps_to_max(self, slider):
        slider.start()
        slider.drag(150)
        assert slider.drag(-20) == 150
        # handle stays where it last was valid
        assert slider.handle_x == 150
        assert slider.end() == 150
        assert slider.released == [150]
        assert slider.handle_x == 0
        assert slider.readout == "size > 150"

    def test_drag_past_min_clamps_to_min(self, slider):
        slider.start()
        assert slider.drag(400) == 0
        slider.end()
        assert slider.released == [0]
        assert slider.handle_x == 300

    def test_release_hides_readout(self, slider):
        slider.start()
        slider.drag(150)
        slider.end()
        assert not slider.readout_visible
        assert slider.released == [pytest.approx(75)]

    def test_draw_places_handle_and_readout(self, slider):
        sizes = compute_sizes(1100, 700)
        fig = new_surface()
        layout_surface(fig, sizes)
        slider.start()
        slider.drag(150)
        slider.draw(fig, sizes, ChartColors.from_roles())

        handle = fig.layout.shapes[handle_index(fig)]
        assert handle.name == HANDLE_NAME
        assert handle.editable
        assert (handle.x0 + handle.x1) / 2 == pytest.approx(150)
        assert handle.x1 - handle.x0 == HANDLE_W
        readout = get_annotation(fig, READOUT_NAME)
        assert readout.visible
        assert readout.text == "size > 75"

    def test_redraw_does_not_duplicate_shapes(self, slider):
        sizes = compute_sizes(1100, 700)
        fig = new_surface()
        layout_surface(fig, sizes)
        colors = ChartColors.from_roles()
        slider.draw(fig, sizes, colors)
        slider.draw(fig, sizes, colors)
        assert len(fig.layout.shapes) == 2


class TestRelayout:

    def test_handle_centre(self):
        relayout = {"shapes[0].x0": 90, "shapes[0].x1": 110, "shapes[0].y0": 5, "shapes[0].y1": 22}
        assert handle_x_from_relayout(relayout, 0) == 100

    def test_other_shape_ignored(self):
        assert handle_x_from_relayout({"shapes[1].x0": 90, "shapes[1].x1": 110}, 0) is None

    def test_unrelated_relayout(self):
        assert handle_x_from_relayout({"autosize": True}, 0) is None
        assert handle_x_from_relayout(None, 0) is None
        assert handle_x_from_relayout({"shapes[0].x0": 1, "shapes[0].x1": 2}, None) is None
