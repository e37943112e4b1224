"""
Simulation execution for SimPower.

This module contains the Monte Carlo power estimator: draw control and
treatment samples, run a two-sample t-test, repeat, and report the
fraction of replicates that reject the null hypothesis.
"""

from typing import Any, Callable, Dict, Optional

import numpy as np
from scipy import stats

from ..progress import SimulationCancelled
from ..utils.validators import _validate_confidence_level, _validate_trial_parameters
from .results import ResultsProcessor

# Replicates drawn per vectorised block. Fixed so that results for a
# given seed do not depend on anything but the inputs.
BLOCK_SIZE = 500


class SimulationRunner:
    """Executes Monte Carlo simulations for two-group power analysis.

    Replicates are generated in blocks: each block draws a
    ``(block, N)`` matrix per group and tests every row with a single
    vectorised ``scipy.stats.ttest_ind`` call. Every row is a fresh
    stretch of the random stream, so no sample is ever reused across
    replicates.

    The random stream for a sample size ``N`` is seeded from
    ``SeedSequence(seed, spawn_key=(N,))``. An estimate for ``N``
    therefore depends only on the seed and its own inputs, not on the
    other sample sizes in a sweep or the order they run in.
    """

    def __init__(
        self,
        n_simulations: int,
        seed: Optional[int] = None,
        alpha: float = 0.05,
        equal_var: bool = False,
    ):
        """Initialise the simulation runner.

        Args:
            n_simulations: Number of Monte Carlo replicates per estimate.
            seed: Base random seed; ``None`` draws fresh OS entropy for
                every estimate.
            alpha: Significance level of the t-test.
            equal_var: ``True`` for Student's pooled-variance t-test,
                ``False`` for Welch's unequal-variance test.
        """
        self.n_simulations = n_simulations
        self.seed = seed
        self.alpha = alpha
        self.equal_var = equal_var

    def _rng_for(self, sample_size: int) -> np.random.Generator:
        """Return the generator dedicated to *sample_size*."""
        if self.seed is None:
            return np.random.default_rng()
        return np.random.default_rng(np.random.SeedSequence(self.seed, spawn_key=(int(sample_size),)))

    def simulate_p_values(
        self,
        control_mean: float,
        treatment_mean: float,
        sd: float,
        sample_size: int,
        treatment_sd: Optional[float] = None,
        progress=None,
        cancel_check: Optional[Callable[[], bool]] = None,
    ) -> np.ndarray:
        """Run every replicate and return the array of t-test p-values.

        Args:
            control_mean: Mean of the control population.
            treatment_mean: Mean of the treatment population.
            sd: Control SD (and treatment SD unless *treatment_sd* given).
            sample_size: Observations per group.
            treatment_sd: Optional separate treatment SD.
            progress: Optional ``ProgressReporter`` (advanced per block).
            cancel_check: Optional callable returning ``True`` to abort.

        Returns:
            1-D array of ``n_simulations`` p-values.

        Raises:
            InvalidParameterError: On degenerate input (checked before
                any sampling).
            SimulationCancelled: If *cancel_check* returns ``True``.
        """
        _validate_trial_parameters(
            control_mean, treatment_mean, sd, sample_size, self.n_simulations, self.alpha, treatment_sd
        ).raise_if_invalid()

        treatment_sd = sd if treatment_sd is None else treatment_sd
        rng = self._rng_for(sample_size)
        p_values = np.empty(self.n_simulations, dtype=np.float64)

        done = 0
        while done < self.n_simulations:
            if cancel_check is not None and cancel_check():
                raise SimulationCancelled("Simulation cancelled by user")

            block = min(BLOCK_SIZE, self.n_simulations - done)
            control = rng.normal(control_mean, sd, size=(block, sample_size))
            treatment = rng.normal(treatment_mean, treatment_sd, size=(block, sample_size))
            p_values[done : done + block] = stats.ttest_ind(control, treatment, axis=1, equal_var=self.equal_var).pvalue
            done += block

            if progress is not None:
                progress.advance(block)

        return p_values

    def estimate_power(
        self,
        control_mean: float,
        treatment_mean: float,
        sd: float,
        sample_size: int,
        treatment_sd: Optional[float] = None,
        progress=None,
        cancel_check: Optional[Callable[[], bool]] = None,
        keep_p_values: bool = False,
    ) -> Dict[str, Any]:
        """Estimate power as the rejection rate over all replicates.

        Power is a binomial proportion, so the estimator variance is
        ``p * (1 - p) / n_simulations``, i.e. ``O(1 / n_simulations)``;
        its square root is returned as ``mc_standard_error``.

        Returns:
            Dict with ``power`` (0-1), ``n_significant``,
            ``n_simulations``, ``mc_standard_error`` and, when
            *keep_p_values* is set, ``p_values``.
        """
        p_values = self.simulate_p_values(
            control_mean,
            treatment_mean,
            sd,
            sample_size,
            treatment_sd=treatment_sd,
            progress=progress,
            cancel_check=cancel_check,
        )

        result = ResultsProcessor.calculate_power(p_values, self.alpha)
        if keep_p_values:
            result["p_values"] = p_values
        return result

    def run_trial(
        self,
        control_mean: float,
        treatment_mean: float,
        sd: float,
        sample_size: int,
        treatment_sd: Optional[float] = None,
        confidence_level: float = 0.95,
        rng: Optional[np.random.Generator] = None,
    ) -> Dict[str, Any]:
        """Simulate and test one experiment, returning the full t-test summary.

        Args:
            confidence_level: Level of the interval for the difference
                in means (control minus treatment).
            rng: Generator to draw from; defaults to the stream for
                *sample_size*.

        Returns:
            Dict with group means, ``statistic``, ``df``, ``p_value``,
            ``significant``, ``confidence_interval`` and the raw samples.
        """
        _validate_trial_parameters(
            control_mean, treatment_mean, sd, sample_size, 1, self.alpha, treatment_sd
        ).raise_if_invalid()
        _validate_confidence_level(confidence_level).raise_if_invalid()

        treatment_sd = sd if treatment_sd is None else treatment_sd
        rng = rng if rng is not None else self._rng_for(sample_size)
        control = rng.normal(control_mean, sd, size=sample_size)
        treatment = rng.normal(treatment_mean, treatment_sd, size=sample_size)

        test = stats.ttest_ind(control, treatment, equal_var=self.equal_var)
        ci = test.confidence_interval(confidence_level=confidence_level)

        return {
            "sample_size": sample_size,
            "control_sample_mean": float(np.mean(control)),
            "treatment_sample_mean": float(np.mean(treatment)),
            "statistic": float(test.statistic),
            "df": float(test.df),
            "p_value": float(test.pvalue),
            "significant": bool(test.pvalue < self.alpha),
            "confidence_level": confidence_level,
            "confidence_interval": (float(ci.low), float(ci.high)),
            "control": control,
            "treatment": treatment,
        }


def simulate_power(
    control_mean: float,
    treatment_mean: float,
    sd: float,
    sample_size: int,
    n_simulations: int = 1000,
    alpha: float = 0.05,
    seed: Optional[int] = None,
    equal_var: bool = False,
    treatment_sd: Optional[float] = None,
) -> float:
    """Estimate the power of a two-sample t-test by simulation.

    Convenience wrapper around ``SimulationRunner.estimate_power`` that
    returns just the power fraction.

    Example:
        >>> simulate_power(0.0, 0.5, 1.0, sample_size=64, seed=1)  # doctest: +SKIP
        0.807
    """
    runner = SimulationRunner(n_simulations=n_simulations, seed=seed, alpha=alpha, equal_var=equal_var)
    return runner.estimate_power(control_mean, treatment_mean, sd, sample_size, treatment_sd=treatment_sd)["power"]
