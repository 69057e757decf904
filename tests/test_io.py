"""Tests for table loading and record conversion."""

import json
import math

import pandas as pd
import pytest

from upset_explorer.io import (
    load_marginals,
    load_patterns,
    marginals_from_frame,
    marginals_from_patterns,
    patterns_from_frame,
    read_table,
)
from upset_explorer.models import MarginalCode, Pattern, UpsetOptions

from conftest import make_pattern


class TestPatternsFromFrame:

    def test_missing_bounds_become_none(self):
        df = pd.DataFrame([
            {"pattern": "A-B", "size": 2, "count": 150, "pointEst": 1.2, "lower": 0.9, "upper": 1.6},
            {"pattern": "C", "size": 1, "count": 50, "pointEst": 2.0, "lower": None, "upper": None},
        ])
        patterns = patterns_from_frame(df)
        assert patterns[0] == Pattern("A-B", 2, 150, 1.2, 0.9, 1.6)
        assert patterns[1].has_null_interval
        assert patterns[1].lower is None

    def test_invalid_rows_skipped(self, caplog):
        df = pd.DataFrame([
            {"pattern": "A-B", "size": 3, "count": 150},
            {"pattern": "A", "size": 1, "count": 40},
        ])
        with caplog.at_level("WARNING"):
            patterns = patterns_from_frame(df)
        assert [p.pattern for p in patterns] == ["A"]
        assert "skipped 1 of 2 pattern rows" in caplog.text

    def test_size_inferred_when_absent(self):
        patterns = patterns_from_frame(pd.DataFrame([{"pattern": "A-B-C", "count": 7}]))
        assert patterns[0].size == 3
        assert math.isnan(patterns[0].point_est)

    def test_required_columns(self):
        with pytest.raises(ValueError, match="count"):
            patterns_from_frame(pd.DataFrame([{"pattern": "A"}]))


def test_marginals_from_frame_drops_duplicates():
    df = pd.DataFrame([
        {"code": "A", "count": 3},
        {"code": "A", "count": 9},
        {"code": "B", "count": None},
    ])
    assert marginals_from_frame(df) == [MarginalCode("A", 3)]


def test_marginals_from_patterns(patterns):
    assert marginals_from_patterns(patterns) == [
        MarginalCode("A", 270),
        MarginalCode("B", 230),
        MarginalCode("C", 130),
    ]


def test_marginals_from_no_patterns():
    assert marginals_from_patterns([]) == []


class TestFiles:

    def test_jsonl_round_trip(self, tmp_path, patterns):
        path = tmp_path / "patterns.jsonl"
        path.write_text("\n".join(json.dumps(p.to_record()) for p in patterns[:1]))
        assert load_patterns(str(path)) == [make_pattern("A-B", 150, 1.2, 0.9, 1.6)]

    def test_csv_marginals(self, tmp_path):
        path = tmp_path / "marginals.csv"
        path.write_text("code,count\nE11.9,12\nI10,8\n")
        assert load_marginals(str(path)) == [MarginalCode("E11.9", 12), MarginalCode("I10", 8)]

    def test_json_marginals_keep_code_text(self, tmp_path):
        path = tmp_path / "marginals.json"
        path.write_text(json.dumps([{"code": "250.10", "count": 3}, {"code": "0401", "count": 2}]))
        assert load_marginals(str(path)) == [MarginalCode("250.10", 3), MarginalCode("0401", 2)]

    def test_jsonl_patterns_keep_code_text(self, tmp_path):
        path = tmp_path / "patterns.jsonl"
        path.write_text(json.dumps({"pattern": "0401-250.10", "size": 2, "count": 5}) + "\n")
        (pattern,) = load_patterns(str(path))
        assert pattern.pattern == "0401-250.10"
        assert pattern.codes == ["0401", "250.10"]

    def test_unknown_extension(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported"):
            read_table(str(tmp_path / "data.parquet"))


class TestOptions:

    def test_from_dict_accepts_host_keys(self):
        options = UpsetOptions.from_dict({
            "marginalData": [{"code": "A", "count": 3}],
            "colors": {"green": "#00ff00"},
            "min_set_size": 25,
        })
        assert options.marginal_data == [MarginalCode("A", 3)]
        assert options.min_set_size == 25
        assert options.msg_loc == "no_host_channel"

    def test_pattern_requires_both_bounds(self):
        with pytest.raises(ValueError):
            Pattern("A", 1, 5, 1.0, lower=0.5)
