"""
Validation utilities for SimPower.

This module provides fail-fast validation for analysis parameters. Each
validator returns a ``_ValidationResult``; callers decide whether to
raise (``raise_if_invalid``) or to surface warnings first.
"""

import math
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

import numpy as np

from ..exceptions import InvalidParameterError

__all__ = []

_NUMERIC_TYPES = (int, float, np.integer, np.floating)
_INTEGER_TYPES = (int, np.integer)


@dataclass
class _ValidationResult:
    """Outcome of a validation check, carrying errors and warnings.

    Attributes:
        is_valid: ``True`` if no errors were found.
        errors: List of error messages (empty when valid).
        warnings: List of non-fatal warning messages.
    """

    is_valid: bool
    errors: List[str]
    warnings: List[str]

    def raise_if_invalid(self):
        """Raise ``InvalidParameterError`` if the validation failed."""
        if not self.is_valid:
            error_msg = "Validation failed:\n" + "\n".join(f"• {err}" for err in self.errors)
            raise InvalidParameterError(error_msg)

    def merge(self, other: "_ValidationResult") -> "_ValidationResult":
        """Combine two results into one (errors and warnings concatenated)."""
        return _ValidationResult(
            self.is_valid and other.is_valid,
            self.errors + other.errors,
            self.warnings + other.warnings,
        )


class _Validator:
    """Static helpers for type and range checks used by all validators."""

    @staticmethod
    def _check_type(value: Any, expected_types: tuple, name: str) -> Optional[str]:
        """Check if value has expected type (``bool`` is never numeric)."""
        if isinstance(value, bool) or not isinstance(value, expected_types):
            actual_type = type(value).__name__
            expected = "an integer" if expected_types is _INTEGER_TYPES else "a number"
            return f"{name} must be {expected}, got {actual_type}"
        return None

    @staticmethod
    def _check_finite(value: Union[int, float], name: str) -> Optional[str]:
        if not math.isfinite(value):
            return f"{name} must be finite, got {value}"
        return None

    @staticmethod
    def _check_range(
        value: Union[int, float],
        min_val: Optional[float],
        max_val: Optional[float],
        name: str,
        min_inclusive: bool = True,
        max_inclusive: bool = True,
    ) -> Optional[str]:
        """Check if value is within range."""
        if min_val is not None:
            if min_inclusive and value < min_val:
                return f"{name} must be >= {min_val}, got {value}"
            if not min_inclusive and value <= min_val:
                return f"{name} must be > {min_val}, got {value}"
        if max_val is not None:
            if max_inclusive and value > max_val:
                return f"{name} must be <= {max_val}, got {value}"
            if not max_inclusive and value >= max_val:
                return f"{name} must be < {max_val}, got {value}"
        return None


_validator = _Validator()


def _validate_numeric_parameter(
    value: Any,
    name: str,
    expected_types: tuple = _NUMERIC_TYPES,
    min_val: Optional[float] = None,
    max_val: Optional[float] = None,
    min_inclusive: bool = True,
    max_inclusive: bool = True,
) -> _ValidationResult:
    """Generic validation for numeric parameters."""
    errors: List[str] = []
    warnings: List[str] = []

    # Type check
    type_error = _validator._check_type(value, expected_types, name)
    if type_error:
        errors.append(type_error)
        return _ValidationResult(False, errors, warnings)

    finite_error = _validator._check_finite(value, name)
    if finite_error:
        errors.append(finite_error)
        return _ValidationResult(False, errors, warnings)

    # Range check
    range_error = _validator._check_range(value, min_val, max_val, name, min_inclusive, max_inclusive)
    if range_error:
        errors.append(range_error)

    return _ValidationResult(len(errors) == 0, errors, warnings)


def _validate_alpha(alpha: Any) -> _ValidationResult:
    """Validate alpha level parameter (open interval 0-1)."""
    return _validate_numeric_parameter(alpha, "Alpha", min_val=0, max_val=1, min_inclusive=False, max_inclusive=False)


def _validate_power(power: Any) -> _ValidationResult:
    """Validate target power (0 < power <= 1)."""
    return _validate_numeric_parameter(power, "Power", min_val=0, max_val=1, min_inclusive=False)


def _validate_confidence_level(level: Any) -> _ValidationResult:
    """Validate confidence level of the t-test interval (open interval 0-1)."""
    return _validate_numeric_parameter(
        level, "Confidence level", min_val=0, max_val=1, min_inclusive=False, max_inclusive=False
    )


def _validate_mean(mean: Any, name: str = "Mean") -> _ValidationResult:
    """Validate a group mean (any finite number)."""
    return _validate_numeric_parameter(mean, name)


def _validate_sd(sd: Any, name: str = "Standard deviation") -> _ValidationResult:
    """Validate a standard deviation (strictly positive)."""
    return _validate_numeric_parameter(sd, name, min_val=0, min_inclusive=False)


def _validate_simulations(n_simulations: Any) -> Tuple[int, _ValidationResult]:
    """Validate the number of replicate simulations.

    Returns the value as ``int`` together with the validation result; a
    count below 1000 is accepted with a warning.
    """
    result = _validate_numeric_parameter(n_simulations, "Number of simulations", _INTEGER_TYPES, min_val=1)

    if result.is_valid:
        n_simulations = int(n_simulations)
        if n_simulations < 1000:
            result.warnings.append(
                f"Low simulation count ({n_simulations}). Consider using at least 1000 for reliable results."
            )
        return n_simulations, result

    return 0, result


def _validate_sample_size(sample_size: Any) -> _ValidationResult:
    """Validate a per-group sample size.

    Requires an integer >= 2 (a t-test needs at least two observations
    per group to estimate variance).
    """
    return _validate_numeric_parameter(sample_size, "sample_size", _INTEGER_TYPES, min_val=2)


def _validate_sample_size_range(from_size: Any, to_size: Any, by: Any) -> _ValidationResult:
    """Validate sample size range parameters."""
    errors: List[str] = []
    warnings: List[str] = []

    # Type checks
    for param, name in [(from_size, "from_size"), (to_size, "to_size"), (by, "by")]:
        if isinstance(param, bool) or not isinstance(param, _INTEGER_TYPES) or param <= 0:
            errors.append(f"{name} must be a positive integer, got {param}")

    if errors:
        return _ValidationResult(False, errors, warnings)

    # Logic checks
    if from_size < 2:
        errors.append(f"from_size must be at least 2, got {from_size}")

    if from_size > to_size:
        errors.append(f"from_size ({from_size}) must not exceed to_size ({to_size})")

    if errors:
        return _ValidationResult(False, errors, warnings)

    # Warning for many tests
    n_tests = len(range(from_size, to_size + 1, by))
    if n_tests > 200:
        warnings.append(f"Large number of sample sizes to test ({n_tests}). This may take significant time.")

    return _ValidationResult(len(errors) == 0, errors, warnings)


def _validate_seed(seed: Any) -> _ValidationResult:
    """Validate a random seed (non-negative integer or ``None``)."""
    if seed is None:
        return _ValidationResult(True, [], [])
    return _validate_numeric_parameter(seed, "seed", _INTEGER_TYPES, min_val=0)


def _validate_flag(value: Any, name: str) -> _ValidationResult:
    """Validate a boolean switch (``True`` or ``False`` only)."""
    if not isinstance(value, (bool, np.bool_)):
        return _ValidationResult(False, [f"{name} must be True or False, got {value!r}"], [])
    return _ValidationResult(True, [], [])


def _validate_parallel_settings(enable: Any, n_cores: Optional[int]) -> Tuple[Tuple[bool, int], _ValidationResult]:
    """Validate parallel processing settings.

    Returns the resolved ``(enable, n_cores)`` pair; ``n_cores`` defaults
    to half the available CPUs and is capped at the CPU count.
    """
    import multiprocessing as mp

    errors: List[str] = []
    warnings: List[str] = []

    if not isinstance(enable, bool):
        errors.append(f"enable must be True or False, got {enable!r}")
        return (False, 1), _ValidationResult(False, errors, warnings)

    max_cores = mp.cpu_count() or 1
    if n_cores is None:
        n_cores = max(1, max_cores // 2)
    elif isinstance(n_cores, bool) or not isinstance(n_cores, _INTEGER_TYPES) or n_cores < 1:
        errors.append(f"n_cores must be a positive integer, got {n_cores}")
        return (False, 1), _ValidationResult(False, errors, warnings)
    elif n_cores > max_cores:
        warnings.append(f"n_cores ({n_cores}) exceeds available CPUs ({max_cores}); using {max_cores}")
        n_cores = max_cores

    return (enable, int(n_cores)), _ValidationResult(True, errors, warnings)


def _validate_trial_parameters(
    control_mean: Any,
    treatment_mean: Any,
    sd: Any,
    sample_size: Any,
    n_simulations: Any,
    alpha: Any,
    treatment_sd: Any = None,
) -> _ValidationResult:
    """Validate every input of one power estimate at once.

    All problems are collected so a single error lists them together.
    """
    result = _validate_mean(control_mean, "control_mean")
    result = result.merge(_validate_mean(treatment_mean, "treatment_mean"))
    result = result.merge(_validate_sd(sd, "sd"))
    if treatment_sd is not None:
        result = result.merge(_validate_sd(treatment_sd, "treatment_sd"))
    result = result.merge(_validate_sample_size(sample_size))
    result = result.merge(_validate_simulations(n_simulations)[1])
    result = result.merge(_validate_alpha(alpha))
    return result
