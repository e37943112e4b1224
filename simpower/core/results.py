"""
Results processing for SimPower.

This module turns simulated p-values into power estimates, assembles the
sample-size sweep into a power table, finds the minimum sample size that
reaches the target power, and builds the result dictionaries returned by
``PowerAnalysis``.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from ..exceptions import SampleSizeNotFoundError

TABLE_COLUMNS = ["sample_size", "power"]


class ResultsProcessor:
    """Converts raw simulation output into power estimates and tables.

    Computes the rejection rate for a single sample size and aggregates
    sweep results to find the first sample size that achieves the target
    power.
    """

    def __init__(self, target_power: float = 0.8):
        """Initialise the results processor.

        Args:
            target_power: Target power as a fraction (0-1).
        """
        self.target_power = target_power

    @staticmethod
    def calculate_power(p_values: np.ndarray, alpha: float) -> Dict[str, Any]:
        """Calculate the power estimate from replicate p-values.

        Args:
            p_values: 1-D array of p-values, one per replicate.
            alpha: Significance level; a replicate rejects when ``p < alpha``.

        Returns:
            Dict with ``power``, ``n_significant``, ``n_simulations`` and
            ``mc_standard_error`` (binomial standard error of ``power``).
        """
        p_values = np.asarray(p_values, dtype=np.float64)
        n_sims = len(p_values)
        if n_sims == 0:
            return {"power": float("nan"), "n_significant": 0, "n_simulations": 0, "mc_standard_error": float("nan")}

        n_significant = int(np.sum(p_values < alpha))
        power = n_significant / n_sims

        return {
            "power": power,
            "n_significant": n_significant,
            "n_simulations": n_sims,
            "mc_standard_error": float(np.sqrt(power * (1 - power) / n_sims)),
        }

    @staticmethod
    def build_power_table(results: Iterable[Tuple[int, Dict[str, Any]]]) -> pd.DataFrame:
        """Build the ``(sample_size, power)`` table from sweep results.

        Args:
            results: ``(sample_size, power_result)`` pairs in any order.
                Entries whose power result is ``None`` are skipped.

        Returns:
            DataFrame with columns ``sample_size``, ``power``,
            ``mc_standard_error``; sorted by sample size ascending.
        """
        rows = [
            {
                "sample_size": int(sample_size),
                "power": float(power_result["power"]),
                "mc_standard_error": float(power_result.get("mc_standard_error", np.nan)),
            }
            for sample_size, power_result in results
            if power_result is not None
        ]
        table = pd.DataFrame(rows, columns=TABLE_COLUMNS + ["mc_standard_error"])
        table["sample_size"] = table["sample_size"].astype(int)
        return table.sort_values("sample_size", kind="stable").reset_index(drop=True)

    @staticmethod
    def find_minimum_sample_size(
        table: Union[pd.DataFrame, Sequence[Tuple[int, float]]],
        target_power: float = 0.8,
    ) -> int:
        """Return the smallest sample size whose power reaches *target_power*.

        Rows are scanned in increasing sample-size order and the first
        row with ``power >= target_power`` wins, so a later dip below the
        target does not matter.

        Args:
            table: Power table (DataFrame with ``sample_size`` and
                ``power`` columns) or a sequence of ``(N, power)`` pairs.
            target_power: Power target as a fraction (0-1).

        Raises:
            SampleSizeNotFoundError: If no row reaches the target; the
                caller should widen the swept range.
        """
        if not isinstance(table, pd.DataFrame):
            table = pd.DataFrame(list(table), columns=TABLE_COLUMNS)

        if table.empty:
            raise SampleSizeNotFoundError(target_power)

        ordered = table.sort_values("sample_size", kind="stable")
        reached = ordered[ordered["power"] >= target_power]
        if reached.empty:
            raise SampleSizeNotFoundError(
                target_power,
                max_sample_size=int(ordered["sample_size"].iloc[-1]),
                best_power=float(ordered["power"].max()),
            )
        return int(reached["sample_size"].iloc[0])

    def process_sample_size_results(
        self,
        results: List[Tuple[int, Dict[str, Any]]],
        strict: bool = False,
    ) -> Dict[str, Any]:
        """
        Process power results from a sample size sweep for one scenario.

        Args:
            results: List of ``(sample_size, power_result)`` tuples.
            strict: Re-raise ``SampleSizeNotFoundError`` instead of
                reporting ``minimum_sample_size=None``.

        Returns:
            Dictionary with the power table, the tested sizes, the power
            list and the minimum sample size (``None`` when not reached).
        """
        table = self.build_power_table(results)

        try:
            minimum = self.find_minimum_sample_size(table, self.target_power)
        except SampleSizeNotFoundError:
            if strict:
                raise
            minimum = None

        return {
            "power_table": table,
            "sample_sizes_tested": table["sample_size"].tolist(),
            "powers": table["power"].tolist(),
            "minimum_sample_size": minimum,
        }


def _model_section(
    scenarios: List[Dict[str, Any]],
    alpha: float,
    n_simulations: int,
    target_power: float,
    equal_var: bool,
    seed: Optional[int],
    parallel: bool,
) -> Dict[str, Any]:
    return {
        "test": "Student t-test" if equal_var else "Welch t-test",
        "scenarios": scenarios,
        "alpha": alpha,
        "n_simulations": n_simulations,
        "target_power": target_power,
        "equal_var": equal_var,
        "seed": seed,
        "parallel": parallel,
    }


def build_power_result(
    scenarios: List[Dict[str, Any]],
    sample_size: int,
    alpha: float,
    n_simulations: int,
    target_power: float,
    equal_var: bool,
    seed: Optional[int],
    parallel: bool,
    power_results: Dict[str, Dict[str, Any]],
) -> Dict[str, Any]:
    """
    Build complete power analysis result dictionary.

    Args:
        scenarios: Scenario descriptions (``EffectScenario.to_dict()``)
        sample_size: Sample size per group
        alpha: Significance level
        n_simulations: Number of replicates
        target_power: Target power level
        equal_var: Whether the pooled-variance t-test was used
        seed: Base random seed
        parallel: Whether parallel processing was enabled
        power_results: Power result per scenario name

    Returns:
        Complete result dictionary
    """
    model = _model_section(scenarios, alpha, n_simulations, target_power, equal_var, seed, parallel)
    model["sample_size"] = sample_size
    return {"model": model, "results": power_results}


def build_sample_size_result(
    scenarios: List[Dict[str, Any]],
    sample_sizes: List[int],
    alpha: float,
    n_simulations: int,
    target_power: float,
    equal_var: bool,
    seed: Optional[int],
    parallel: bool,
    analysis_results: Dict[str, Dict[str, Any]],
) -> Dict[str, Any]:
    """
    Build complete sample size analysis result dictionary.

    Args:
        scenarios: Scenario descriptions (``EffectScenario.to_dict()``)
        sample_sizes: Sample sizes tested
        alpha: Significance level
        n_simulations: Number of replicates per sample size
        target_power: Target power level
        equal_var: Whether the pooled-variance t-test was used
        seed: Base random seed
        parallel: Whether parallel processing was enabled
        analysis_results: Sweep results per scenario name

    Returns:
        Complete result dictionary
    """
    model = _model_section(scenarios, alpha, n_simulations, target_power, equal_var, seed, parallel)
    model["sample_size_range"] = {
        "from_size": sample_sizes[0],
        "to_size": sample_sizes[-1],
        "by": sample_sizes[1] - sample_sizes[0] if len(sample_sizes) > 1 else 1,
    }
    return {"model": model, "results": analysis_results}
