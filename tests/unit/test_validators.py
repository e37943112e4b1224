"""
Tests for validation utilities.
"""

import numpy as np
import pytest

from simpower.exceptions import InvalidParameterError


class TestValidateAlpha:
    """Test _validate_alpha function."""

    def test_valid_alpha(self):
        from simpower.utils.validators import _validate_alpha

        assert _validate_alpha(0.05).is_valid

    def test_alpha_at_zero(self):
        from simpower.utils.validators import _validate_alpha

        assert not _validate_alpha(0).is_valid

    def test_alpha_at_one(self):
        from simpower.utils.validators import _validate_alpha

        assert not _validate_alpha(1).is_valid

    def test_alpha_negative(self):
        from simpower.utils.validators import _validate_alpha

        assert not _validate_alpha(-0.05).is_valid

    def test_alpha_wrong_type(self):
        from simpower.utils.validators import _validate_alpha

        result = _validate_alpha("0.05")
        assert not result.is_valid
        assert "number" in result.errors[0]

    def test_alpha_nan(self):
        from simpower.utils.validators import _validate_alpha

        assert not _validate_alpha(float("nan")).is_valid


class TestValidatePower:
    """Test _validate_power function."""

    def test_valid_power(self):
        from simpower.utils.validators import _validate_power

        assert _validate_power(0.8).is_valid

    def test_power_at_one(self):
        from simpower.utils.validators import _validate_power

        assert _validate_power(1).is_valid

    def test_power_at_zero(self):
        from simpower.utils.validators import _validate_power

        assert not _validate_power(0).is_valid

    def test_power_as_percentage(self):
        from simpower.utils.validators import _validate_power

        assert not _validate_power(80).is_valid


class TestValidateSampleSize:
    """Test _validate_sample_size function."""

    @pytest.mark.parametrize("n", [2, 30, 100000])
    def test_valid(self, n):
        from simpower.utils.validators import _validate_sample_size

        assert _validate_sample_size(n).is_valid

    def test_numpy_integer(self):
        from simpower.utils.validators import _validate_sample_size

        assert _validate_sample_size(np.int64(10)).is_valid

    @pytest.mark.parametrize("n", [1, 0, -5])
    def test_too_small(self, n):
        from simpower.utils.validators import _validate_sample_size

        result = _validate_sample_size(n)
        assert not result.is_valid
        assert ">= 2" in result.errors[0]

    @pytest.mark.parametrize("n", [10.0, "10", True, None])
    def test_not_integer(self, n):
        from simpower.utils.validators import _validate_sample_size

        assert not _validate_sample_size(n).is_valid


class TestValidateSd:
    """Test _validate_sd function."""

    def test_positive(self):
        from simpower.utils.validators import _validate_sd

        assert _validate_sd(0.25).is_valid

    @pytest.mark.parametrize("sd", [0, -1.0])
    def test_non_positive(self, sd):
        from simpower.utils.validators import _validate_sd

        result = _validate_sd(sd, "sd")
        assert not result.is_valid
        assert "sd must be > 0" in result.errors[0]

    def test_infinite(self):
        from simpower.utils.validators import _validate_sd

        assert not _validate_sd(float("inf")).is_valid


class TestValidateSimulations:
    """Test _validate_simulations function."""

    def test_valid(self):
        from simpower.utils.validators import _validate_simulations

        n, result = _validate_simulations(1000)
        assert n == 1000
        assert result.is_valid
        assert result.warnings == []

    def test_low_count_warns(self):
        from simpower.utils.validators import _validate_simulations

        n, result = _validate_simulations(100)
        assert n == 100
        assert result.is_valid
        assert any("Low simulation count" in w for w in result.warnings)

    def test_zero_invalid(self):
        from simpower.utils.validators import _validate_simulations

        n, result = _validate_simulations(0)
        assert n == 0
        assert not result.is_valid

    def test_float_invalid(self):
        from simpower.utils.validators import _validate_simulations

        _, result = _validate_simulations(100.5)
        assert not result.is_valid


class TestValidateSampleSizeRange:
    """Test _validate_sample_size_range function."""

    def test_valid_range(self):
        from simpower.utils.validators import _validate_sample_size_range

        assert _validate_sample_size_range(2, 100, 1).is_valid

    def test_single_size(self):
        from simpower.utils.validators import _validate_sample_size_range

        assert _validate_sample_size_range(30, 30, 1).is_valid

    def test_from_below_two(self):
        from simpower.utils.validators import _validate_sample_size_range

        result = _validate_sample_size_range(1, 100, 1)
        assert not result.is_valid
        assert "at least 2" in result.errors[0]

    def test_reversed(self):
        from simpower.utils.validators import _validate_sample_size_range

        assert not _validate_sample_size_range(50, 10, 1).is_valid

    def test_non_positive_step(self):
        from simpower.utils.validators import _validate_sample_size_range

        assert not _validate_sample_size_range(2, 100, 0).is_valid

    def test_many_sizes_warns(self):
        from simpower.utils.validators import _validate_sample_size_range

        result = _validate_sample_size_range(2, 1000, 1)
        assert result.is_valid
        assert result.warnings


class TestValidateSeed:
    def test_none(self):
        from simpower.utils.validators import _validate_seed

        assert _validate_seed(None).is_valid

    def test_negative(self):
        from simpower.utils.validators import _validate_seed

        assert not _validate_seed(-1).is_valid

    def test_float(self):
        from simpower.utils.validators import _validate_seed

        assert not _validate_seed(1.5).is_valid


class TestValidateFlag:
    @pytest.mark.parametrize("value", [True, False, np.bool_(True)])
    def test_valid(self, value):
        from simpower.utils.validators import _validate_flag

        assert _validate_flag(value, "equal_var").is_valid

    @pytest.mark.parametrize("value", [1, 0, "yes", None])
    def test_invalid(self, value):
        from simpower.utils.validators import _validate_flag

        with pytest.raises(InvalidParameterError, match="equal_var must be True or False"):
            _validate_flag(value, "equal_var").raise_if_invalid()


class TestValidateTrialParameters:
    """All problems are reported together."""

    def test_collects_every_error(self):
        from simpower.utils.validators import _validate_trial_parameters

        result = _validate_trial_parameters(0.0, 1.0, -1.0, 1, 0, 2.0)
        assert not result.is_valid
        assert len(result.errors) == 4

    def test_raise_if_invalid(self):
        from simpower.utils.validators import _validate_trial_parameters

        with pytest.raises(InvalidParameterError, match="Validation failed"):
            _validate_trial_parameters(0.0, 1.0, 0.0, 10, 100, 0.05).raise_if_invalid()

    def test_invalid_parameter_is_value_error(self):
        assert issubclass(InvalidParameterError, ValueError)
