"""
Exceptions raised by SimPower.

Validation problems are reported as ``InvalidParameterError`` (a
``ValueError``), so callers that already catch ``ValueError`` keep
working. A sweep that never reaches the target power raises
``SampleSizeNotFoundError`` from the minimum-N lookup.
"""

from typing import Optional


class InvalidParameterError(ValueError):
    """Raised when an analysis parameter fails validation."""

    pass


class SampleSizeNotFoundError(LookupError):
    """Raised when no swept sample size reaches the target power.

    Attributes:
        target_power: Power target that was not reached (0-1).
        max_sample_size: Largest sample size in the swept table, or
            ``None`` if the table was empty.
        best_power: Highest power observed in the table.
    """

    def __init__(self, target_power: float, max_sample_size: Optional[int] = None, best_power: Optional[float] = None):
        self.target_power = target_power
        self.max_sample_size = max_sample_size
        self.best_power = best_power
        if max_sample_size is None:
            msg = f"No sample sizes were swept; cannot reach target power {target_power:.2f}"
        else:
            msg = (
                f"Target power {target_power:.2f} not reached for sample sizes up to {max_sample_size} "
                f"(best power {best_power:.3f}). Widen the sample size range."
            )
        super().__init__(msg)
