"""Tests for band sizes and pixel scales."""

import pytest

from upset_explorer.filtering import filter_set_size
from upset_explorer.models import Margin
from upset_explorer.visualization.scales import (
    BandScale,
    LinearScale,
    compute_scales,
    compute_sizes,
    count_scale,
    row_center,
)

from conftest import make_pattern


class TestComputeSizes:

    def test_band_widths_follow_unit_ratios(self):
        sizes = compute_sizes(1100, 700, Margin())
        assert sizes.w == 1000
        assert sizes.h == 610
        assert sizes.set_size_bars_w == pytest.approx(1000 / 2.7)
        assert sizes.rr_plot_w == pytest.approx(1000 / 2.7)
        assert sizes.matrix_plot_w == pytest.approx(700 / 2.7)
        assert sizes.set_size_bars_w + sizes.rr_plot_w + sizes.matrix_plot_w == pytest.approx(sizes.w)

    def test_heights_split_marginal_and_matrix(self):
        sizes = compute_sizes(1100, 700, Margin())
        assert sizes.margin_count_h == pytest.approx(183)
        assert sizes.matrix_plot_h == pytest.approx(427)

    def test_no_risk_band_without_risk_data(self):
        sizes = compute_sizes(1100, 700, Margin(), has_risk_data=False)
        assert sizes.rr_plot_w == 0
        assert sizes.set_size_bars_w == pytest.approx(1000 / 1.7)


class TestLinearScale:

    def test_maps_and_inverts(self):
        scale = LinearScale(domain=(0, 150), range=(300, 0))
        assert scale(0) == 300
        assert scale(150) == 0
        assert scale.invert(150) == pytest.approx(75)

    def test_degenerate_domain_maps_to_range_start(self):
        scale = LinearScale(domain=(0, 0), range=(0, 200))
        assert scale.is_degenerate
        assert scale(1.5) == 0

    def test_ticks_use_round_steps(self):
        assert LinearScale((0, 150), (0, 1)).ticks(5) == [0, 20, 40, 60, 80, 100, 120, 140]
        assert LinearScale((0, 1.6), (0, 1)).ticks(5) == [0, 0.5, 1.0, 1.5]


class TestBandScale:

    def test_positions_are_rounded_bands(self):
        scale = BandScale(domain=("A", "B", "C"), range=(10, 110))
        assert scale.step == 32
        assert scale("A") == 13
        assert scale("B") == 45
        assert scale("C") == 77
        assert scale.bandwidth == 30
        assert scale.center("B") == 60

    def test_unknown_code_raises(self):
        with pytest.raises(ValueError):
            BandScale(domain=("A",), range=(0, 100))("Z")


class TestComputeScales:

    def _scales(self, patterns, marginals):
        sizes = compute_sizes(1100, 700)
        filtered = filter_set_size(patterns, marginals, 60)
        return compute_scales(filtered.patterns, filtered.marginals, sizes, count_scale(patterns, sizes))

    def test_rows_divide_matrix_height(self, patterns, marginals):
        scales = self._scales(patterns, marginals)
        assert scales.matrix_row_height == pytest.approx(427 / 3)
        assert row_center(scales, 0) == pytest.approx(427 / 6)
        assert scales.set_size_bar_height == pytest.approx(scales.matrix_row_height * 0.9)

    def test_rr_domain_is_max_upper(self, patterns, marginals):
        assert self._scales(patterns, marginals).rr_x.domain == (0, 2.2)

    def test_rr_domain_degenerate_when_no_intervals(self, marginals):
        data = [make_pattern("A", 150, 1.1), make_pattern("B", 120, 0.9)]
        scales = self._scales(data, marginals)
        assert scales.rr_x.domain == (0, 0)
        assert scales.rr_x(0.9) == 0

    def test_count_scale_spans_bar_band(self, patterns):
        sizes = compute_sizes(1100, 700)
        scale = count_scale(patterns, sizes)
        assert scale.domain == (0, 150)
        assert scale.range == (sizes.set_size_bars_w, 0)

    def test_scales_are_deterministic(self, patterns, marginals):
        assert self._scales(patterns, marginals) == self._scales(patterns, marginals)
