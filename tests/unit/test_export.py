"""Unit tests for simpower.utils.export."""

import json

import pandas as pd
import pytest

from simpower.utils.export import _results_to_frame, _save_results


def _sample_size_result():
    table_a = pd.DataFrame({"sample_size": [10, 20], "power": [0.4, 0.85], "mc_standard_error": [0.02, 0.01]})
    table_b = pd.DataFrame({"sample_size": [10, 20], "power": [0.1, 0.2], "mc_standard_error": [0.01, 0.01]})
    return {
        "model": {"sample_size_range": {"from_size": 10, "to_size": 20, "by": 10}},
        "results": {
            "a": {"power_table": table_a, "minimum_sample_size": 20},
            "b": {"power_table": table_b, "minimum_sample_size": None},
        },
    }


def _power_result():
    return {
        "model": {"sample_size": 30},
        "results": {"a": {"power": 0.9, "mc_standard_error": 0.01, "n_significant": 900, "n_simulations": 1000}},
    }


class TestResultsToFrame:
    def test_sample_size_result(self):
        frame = _results_to_frame(_sample_size_result())
        assert list(frame.columns[:3]) == ["scenario", "sample_size", "power"]
        assert frame["scenario"].tolist() == ["a", "a", "b", "b"]
        assert frame.loc[0, "minimum_sample_size"] == 20

    def test_power_result(self):
        frame = _results_to_frame(_power_result())
        assert frame.loc[0, "sample_size"] == 30
        assert frame.loc[0, "n_significant"] == 900

    def test_does_not_mutate_table(self):
        result = _sample_size_result()
        _results_to_frame(result)
        assert "scenario" not in result["results"]["a"]["power_table"].columns

    def test_unknown_result(self):
        with pytest.raises(ValueError):
            _results_to_frame({"model": {}, "results": {"a": {"p": 1}}})


class TestSaveResults:
    def test_csv(self, tmp_path):
        path = _save_results(_sample_size_result(), tmp_path / "out" / "power.csv")
        frame = pd.read_csv(path)
        assert len(frame) == 4
        assert frame["power"].tolist() == [0.4, 0.85, 0.1, 0.2]

    def test_json(self, tmp_path):
        path = _save_results(_power_result(), tmp_path / "power.json")
        records = json.loads(path.read_text())
        assert records[0]["scenario"] == "a"
        assert records[0]["power"] == 0.9

    def test_explicit_format(self, tmp_path):
        path = _save_results(_power_result(), tmp_path / "power.txt", file_format="csv")
        assert pd.read_csv(path).loc[0, "power"] == 0.9

    def test_unknown_suffix(self, tmp_path):
        with pytest.raises(ValueError, match="infer"):
            _save_results(_power_result(), tmp_path / "power.xlsx")

    def test_bad_format(self, tmp_path):
        with pytest.raises(ValueError):
            _save_results(_power_result(), tmp_path / "power.csv", file_format="parquet")
