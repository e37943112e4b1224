"""
Tests for result formatting utilities.
"""

import pandas as pd
import pytest

from simpower.utils.formatters import _format_results, _get_significance_code, _ResultFormatter, _TableFormatter


class TestTableFormatter:
    """Test _TableFormatter utility methods."""

    def setup_method(self):
        self.tf = _TableFormatter()

    def test_create_table_basic(self):
        table = self.tf._create_table(["Name", "Value"], [["alpha", "0.05"], ["beta", "0.20"]])
        lines = table.split("\n")
        assert len(lines) == 4  # header + separator + 2 rows
        assert "Name" in lines[0]
        assert "-" in lines[1]
        assert "alpha" in lines[2]

    def test_create_table_custom_col_widths(self):
        table = self.tf._create_table(["A", "B"], [["x", "y"]], col_widths=[10, 10])
        assert len(table.split("\n")[0]) == 21

    def test_format_value_float_small(self):
        assert self.tf._format_value(0.00001) == "0.000010"

    def test_format_value_float_normal(self):
        assert self.tf._format_value(3.14159) == "3.1416"

    def test_format_value_non_float(self):
        assert self.tf._format_value(42) == "42"


class TestGetSignificanceCode:
    @pytest.mark.parametrize(
        "p, code",
        [(0.0001, "***"), (0.005, "**"), (0.03, "*"), (0.10, ""), (0.05, "")],
    )
    def test_codes(self, p, code):
        assert _get_significance_code(p) == code


def _model(**extra):
    model = {
        "test": "Welch t-test",
        "alpha": 0.05,
        "target_power": 0.8,
        "n_simulations": 1000,
        "seed": 2137,
        "scenarios": [
            {"name": "big", "control_mean": 0.0, "treatment_mean": 1.0, "sd": 1.0, "cohens_d": 1.0},
            {"name": "small", "control_mean": 0.0, "treatment_mean": 0.1, "sd": 1.0, "cohens_d": 0.1},
        ],
    }
    model.update(extra)
    return model


class TestFormatPower:
    def setup_method(self):
        self.formatter = _ResultFormatter()
        self.data = {
            "model": _model(sample_size=30),
            "results": {
                "big": {"power": 0.97, "mc_standard_error": 0.005},
                "small": {"power": 0.07, "mc_standard_error": 0.008},
            },
        }

    def test_short(self):
        out = self.formatter._format_short_power(self.data)
        assert "Power Analysis Results" in out
        assert "N=30" in out
        assert "0.970" in out
        assert "1/2 scenarios achieved" in out

    def test_long(self):
        out = self.formatter._format_long_power(self.data)
        assert "Scenario Details" in out
        assert "Cohen's d" in out

    def test_dispatch(self):
        assert "Power Analysis" in _format_results("power", self.data, "short")


class TestFormatSampleSize:
    def setup_method(self):
        self.formatter = _ResultFormatter()
        table = pd.DataFrame({"sample_size": [10, 20], "power": [0.5, 0.9]})
        self.data = {
            "model": _model(sample_size_range={"from_size": 10, "to_size": 20, "by": 10}),
            "results": {
                "big": {"power_table": table, "sample_sizes_tested": [10, 20], "powers": [0.5, 0.9], "minimum_sample_size": 20},
                "small": {"power_table": table, "sample_sizes_tested": [10, 20], "powers": [0.05, 0.06], "minimum_sample_size": None},
            },
        }

    def test_short(self):
        out = self.formatter._format_short_sample_size(self.data)
        assert "Sample Size Requirements" in out
        assert ">20" in out
        assert "Widen" in out

    def test_long_includes_power_grid(self):
        out = self.formatter._format_long_sample_size(self.data)
        assert "Power by Sample Size" in out
        assert "0.900" in out

    def test_dispatch(self):
        assert "Sample Size" in _format_results("sample_size", self.data)


class TestFormatTrial:
    def test_trial(self):
        data = {
            "model": _model(sample_size=30, confidence_level=0.95),
            "results": {
                "big": {
                    "control_sample_mean": 0.01,
                    "treatment_sample_mean": 1.02,
                    "statistic": -4.1,
                    "df": 57.3,
                    "p_value": 0.0001,
                    "confidence_interval": (-1.5, -0.5),
                }
            },
        }
        out = _format_results("trial", data)
        assert "Single Trial Results" in out
        assert "95% CI" in out
        assert "***" in out


def test_unknown_kind():
    with pytest.raises(ValueError):
        _format_results("nope", {})
