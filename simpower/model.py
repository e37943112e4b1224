"""
SimPower - Monte Carlo Power Analysis for two-group experiments.

This module provides the main PowerAnalysis class for planning a
control-vs-treatment experiment using Monte Carlo simulations.
"""

import warnings
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .core import (
    DEFAULT_SCENARIOS,
    EffectScenario,
    ResultsProcessor,
    SimulationRunner,
    build_power_result,
    build_sample_size_result,
)
from .core.scenarios import _normalize_scenarios
from .progress import PrintReporter, ProgressReporter, SimulationCancelled, compute_total_simulations
from .utils.export import _save_results
from .utils.formatters import _format_results
from .utils.validators import (
    _validate_alpha,
    _validate_confidence_level,
    _validate_flag,
    _validate_parallel_settings,
    _validate_power,
    _validate_sample_size,
    _validate_sample_size_range,
    _validate_seed,
    _validate_simulations,
)
from .utils.visualization import _create_power_plot, _create_pvalue_histogram


class PowerAnalysis:
    """Monte Carlo Power Analysis for a two-group experiment.

    Simulates control and treatment samples from Normal distributions,
    tests them with a two-sample t-test and estimates power as the share
    of replicates that reject the null hypothesis. Every analysis runs
    once per effect-size scenario.

    All ``set_*`` methods validate immediately and return ``self`` for
    method chaining.

    Attributes:
        seed: Random seed for reproducibility (default: 2137).
        power: Target power as a fraction (default: 0.8).
        alpha: Significance level (default: 0.05).
        n_simulations: Replicates per power estimate (default: 1000).
        confidence_level: Confidence level of single-trial intervals
            (default: 0.95).
        equal_var: Use Student's pooled t-test instead of Welch's
            (default: ``False``).
        parallel: Run the sample-size sweep with joblib (default: ``False``).
        n_cores: Number of CPU cores for parallel execution.

    Example:
        >>> analysis = PowerAnalysis()
        >>> analysis.find_power(sample_size=30)
        >>> analysis.find_sample_size(from_size=2, to_size=100)

        >>> analysis = PowerAnalysis().set_scenarios(
        ...     [EffectScenario("drug", control_mean=0.0, treatment_mean=0.5, sd=1.0)]
        ... )
    """

    def __init__(self, scenarios: Optional[Union[EffectScenario, Dict, Iterable]] = None):
        """Initialize the analysis.

        Args:
            scenarios: Effect-size scenarios to analyse: an
                ``EffectScenario``, an iterable of them (or of keyword
                dicts), or a mapping ``{name: {control_mean: ..., ...}}``.
                Defaults to ``DEFAULT_SCENARIOS``.
        """
        self.seed: Optional[int] = 2137
        self.power = 0.8
        self.alpha = 0.05
        self.n_simulations = 1000
        self.confidence_level = 0.95
        self.equal_var = False

        # Parallel processing
        self.parallel = False
        self.n_cores = 1

        self._scenarios: List[EffectScenario] = _normalize_scenarios(
            scenarios if scenarios is not None else DEFAULT_SCENARIOS
        )

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def scenarios(self) -> List[EffectScenario]:
        """Effect-size scenarios, in analysis order."""
        return list(self._scenarios)

    @property
    def test_name(self) -> str:
        return "Student t-test" if self.equal_var else "Welch t-test"

    # =========================================================================
    # Configuration methods
    # =========================================================================

    def set_scenarios(self, scenarios: Union[EffectScenario, Dict, Iterable]):
        """Replace the effect-size scenarios.

        Returns:
            self: For method chaining.

        Raises:
            InvalidParameterError: If a scenario is invalid or names repeat.
        """
        self._scenarios = _normalize_scenarios(scenarios)
        return self

    def add_scenario(
        self,
        name: str,
        control_mean: float,
        treatment_mean: float,
        sd: float,
        treatment_sd: Optional[float] = None,
        description: str = "",
    ):
        """Append one effect-size scenario.

        Returns:
            self: For method chaining.
        """
        scenario = EffectScenario(name, control_mean, treatment_mean, sd, treatment_sd, description)
        self._scenarios = _normalize_scenarios(self._scenarios + [scenario])
        return self

    def set_seed(self, seed: Optional[int] = None):
        """Set random seed for reproducibility.

        Args:
            seed: Non-negative integer. Pass ``None`` to enable fully
                random seeding.

        Returns:
            self: For method chaining.
        """
        _validate_seed(seed).raise_if_invalid()
        self.seed = None if seed is None else int(seed)
        if seed is not None:
            print(f"Seed set to: {seed}")
        else:
            print("Random seeding enabled")
        return self

    def set_power(self, power: float):
        """Set the target power used by ``find_sample_size``.

        Args:
            power: Target power as a fraction (0 < power <= 1). Default 0.8.

        Returns:
            self: For method chaining.
        """
        _validate_power(power).raise_if_invalid()
        self.power = float(power)
        return self

    def set_alpha(self, alpha: float):
        """Set the significance level for hypothesis testing.

        Args:
            alpha: Type-I error rate, strictly between 0 and 1. Default 0.05.

        Returns:
            self: For method chaining.
        """
        _validate_alpha(alpha).raise_if_invalid()
        self.alpha = float(alpha)
        return self

    def set_simulations(self, n_simulations: int):
        """Set the number of Monte Carlo replicates per power estimate.

        The estimator variance shrinks as ``1 / n_simulations``.

        Returns:
            self: For method chaining.
        """
        n_sims, result = _validate_simulations(n_simulations)
        result.raise_if_invalid()
        for warning in result.warnings:
            warnings.warn(warning, UserWarning, stacklevel=2)
        self.n_simulations = n_sims
        return self

    def set_confidence_level(self, level: float):
        """Set the confidence level for single-trial intervals (default 0.95).

        Returns:
            self: For method chaining.
        """
        _validate_confidence_level(level).raise_if_invalid()
        self.confidence_level = float(level)
        return self

    def set_equal_variance(self, equal_var: bool = True):
        """Choose Student's pooled-variance t-test (``True``) or Welch's (``False``).

        Returns:
            self: For method chaining.
        """
        _validate_flag(equal_var, "equal_var").raise_if_invalid()
        self.equal_var = bool(equal_var)
        return self

    def set_parallel(self, enable: bool = True, n_cores: Optional[int] = None):
        """Enable or disable parallel processing of the sample-size sweep.

        Requires ``joblib``. Falls back to sequential processing with a
        warning if ``joblib`` is unavailable. Results are identical either
        way because every sample size owns its random stream.

        Args:
            enable: ``True`` for parallel, ``False`` for sequential.
            n_cores: Number of CPU cores to use. Defaults to
                ``cpu_count // 2``.

        Returns:
            self: For method chaining.
        """
        if enable is False:
            self.parallel, self.n_cores = False, 1
            return self

        try:
            import joblib  # noqa: F401 - availability check only
        except ImportError:
            warnings.warn(
                "joblib not available (pip install joblib). Continuing with sequential processing.",
                UserWarning,
                stacklevel=2,
            )
            self.parallel, self.n_cores = False, 1
            return self

        settings, result = _validate_parallel_settings(enable, n_cores)
        result.raise_if_invalid()
        for warning in result.warnings:
            warnings.warn(warning, UserWarning, stacklevel=2)
        self.parallel, self.n_cores = settings
        return self

    # =========================================================================
    # Analyses
    # =========================================================================

    def run_trial(self, sample_size: int = 30, print_results: bool = True, return_results: bool = False):
        """Simulate and test a single experiment for every scenario.

        Scenarios draw from one random stream in order, so each gets its
        own control and treatment samples.

        Args:
            sample_size: Observations per group.
            print_results: Whether to print the t-test summary.
            return_results: Return the results dict.

        Returns:
            dict or None: ``{"model": ..., "results": {scenario: trial}}``
            when *return_results* is ``True``.
        """
        _validate_sample_size(sample_size).raise_if_invalid()
        runner = self._runner(n_simulations=1)
        rng = runner._rng_for(sample_size)

        trials: Dict[str, Dict[str, Any]] = {}
        for scenario in self._scenarios:
            control_sd, treatment_sd = scenario.group_sds
            trials[scenario.name] = runner.run_trial(
                scenario.control_mean,
                scenario.treatment_mean,
                control_sd,
                sample_size,
                treatment_sd=treatment_sd,
                confidence_level=self.confidence_level,
                rng=rng,
            )

        result = {
            "model": {
                "test": self.test_name,
                "sample_size": sample_size,
                "alpha": self.alpha,
                "confidence_level": self.confidence_level,
                "seed": self.seed,
                "scenarios": [s.to_dict() for s in self._scenarios],
            },
            "results": trials,
        }

        if print_results:
            print(f"\n{'=' * 80}")
            print("SINGLE TRIAL")
            print(f"{'=' * 80}")
            print(_format_results("trial", result))

        return result if return_results else None

    def find_power(
        self,
        sample_size: int,
        print_results: bool = True,
        summary: str = "short",
        return_results: bool = False,
        plot_p_values: bool = False,
        plot_path: Optional[str] = None,
        progress_callback=None,
        cancel_check=None,
    ):
        """
        Estimate statistical power at one sample size for every scenario.

        Args:
            sample_size: Observations per group
            print_results: Whether to print results
            summary: Output detail level ("short" or "long")
            return_results: Return results dict
            plot_p_values: Draw a histogram of the replicate p-values
            plot_path: Save the histogram here instead of showing it
            progress_callback: Progress reporting control:
                - ``None`` (default): auto-use ``PrintReporter`` when
                  *print_results* is ``True``.
                - ``False``: explicitly disable progress.
                - callable ``(current, total)``: custom callback.
            cancel_check: Optional callable returning ``True`` to abort.

        Returns:
            dict or None: If *return_results* is ``True``, returns a
            results dictionary with keys ``"model"`` (settings) and
            ``"results"`` (power estimate per scenario).
        """
        _validate_sample_size(sample_size).raise_if_invalid()

        reporter = self._make_reporter(progress_callback, print_results, n_sample_sizes=1)
        if reporter is not None:
            reporter.start()

        runner = self._runner()
        power_results: Dict[str, Dict[str, Any]] = {}
        for scenario in self._scenarios:
            power_results[scenario.name] = self._run_find_power(
                runner,
                scenario,
                sample_size,
                progress=reporter,
                cancel_check=cancel_check,
                keep_p_values=plot_p_values,
            )

        if reporter is not None:
            reporter.finish()

        if plot_p_values:
            _create_pvalue_histogram(
                {name: res.pop("p_values") for name, res in power_results.items()},
                alpha=self.alpha,
                title=f"Simulated p-values (N={sample_size} per group)",
                save_path=plot_path,
            )

        result = build_power_result(
            scenarios=[s.to_dict() for s in self._scenarios],
            sample_size=sample_size,
            alpha=self.alpha,
            n_simulations=self.n_simulations,
            target_power=self.power,
            equal_var=self.equal_var,
            seed=self.seed,
            parallel=self.parallel,
            power_results=power_results,
        )

        if print_results:
            print(f"\n{'=' * 80}")
            print("MONTE CARLO POWER ANALYSIS RESULTS")
            print(f"{'=' * 80}")
            print(_format_results("power", result, summary))

        return result if return_results else None

    def find_sample_size(
        self,
        from_size: int = 2,
        to_size: int = 100,
        by: int = 1,
        print_results: bool = True,
        summary: str = "short",
        return_results: bool = False,
        strict: bool = False,
        plot_path: Optional[str] = None,
        progress_callback=None,
        cancel_check=None,
    ):
        """
        Find the minimum sample size per group reaching the target power.

        Power is estimated independently at every size in
        ``range(from_size, to_size + 1, by)``; the minimum is the first
        size, in increasing order, with power >= ``self.power``.

        Args:
            from_size: Smallest sample size to test (>= 2)
            to_size: Largest sample size to test
            by: Step size between sample sizes
            print_results: Whether to print results
            summary: Output detail level; ``"long"`` also draws the power curve
            return_results: Return results dict
            strict: Raise ``SampleSizeNotFoundError`` when a scenario never
                reaches the target instead of reporting ``None``
            plot_path: Save the power curve here (implies plotting)
            progress_callback: Progress reporting control (see ``find_power``).
            cancel_check: Optional callable returning ``True`` to abort.

        Returns:
            dict or None: If *return_results* is ``True``, returns a
            results dictionary with keys ``"model"`` (settings) and
            ``"results"`` (per-scenario power table and minimum sample size).

        Raises:
            SampleSizeNotFoundError: With ``strict=True``, if the target is
                not reached within the range.
        """
        validation_result = _validate_sample_size_range(from_size, to_size, by)
        validation_result.raise_if_invalid()
        for warning in validation_result.warnings:
            warnings.warn(warning, UserWarning, stacklevel=2)

        sample_sizes = list(range(from_size, to_size + 1, by))

        reporter = self._make_reporter(progress_callback, print_results, n_sample_sizes=len(sample_sizes))
        if reporter is not None:
            reporter.start()

        processor = ResultsProcessor(target_power=self.power)
        analysis_results: Dict[str, Dict[str, Any]] = {}
        for scenario in self._scenarios:
            sweep = self._run_sample_size_analysis(sample_sizes, scenario, progress=reporter, cancel_check=cancel_check)
            analysis_results[scenario.name] = processor.process_sample_size_results(sweep, strict=strict)

        if reporter is not None:
            reporter.finish()

        result = build_sample_size_result(
            scenarios=[s.to_dict() for s in self._scenarios],
            sample_sizes=sample_sizes,
            alpha=self.alpha,
            n_simulations=self.n_simulations,
            target_power=self.power,
            equal_var=self.equal_var,
            seed=self.seed,
            parallel=self.parallel,
            analysis_results=analysis_results,
        )

        missing = [name for name, res in analysis_results.items() if res["minimum_sample_size"] is None]
        if missing:
            warnings.warn(
                f"Target power {self.power:g} not reached up to N={to_size} for: {', '.join(missing)}. "
                "Widen the sample size range.",
                UserWarning,
                stacklevel=2,
            )

        if print_results:
            print(f"\n{'=' * 80}")
            print("SAMPLE SIZE ANALYSIS RESULTS")
            print(f"{'=' * 80}")
            print(_format_results("sample_size", result, summary))

        if plot_path is not None or (print_results and summary == "long"):
            self.plot_power_curve(result, save_path=plot_path)

        return result if return_results else None

    # =========================================================================
    # Output helpers
    # =========================================================================

    def plot_power_curve(self, result: Dict[str, Any], save_path: Optional[str] = None):
        """Plot power against sample size from a ``find_sample_size`` result.

        Args:
            result: Result dict returned by ``find_sample_size``.
            save_path: Save the figure here instead of showing it.

        Returns:
            The matplotlib figure.
        """
        results = result["results"]
        return _create_power_plot(
            power_tables={name: res["power_table"] for name, res in results.items()},
            minimum_sizes={name: res["minimum_sample_size"] for name, res in results.items()},
            target_power=result["model"]["target_power"],
            title=f"Power Analysis ({result['model']['test']}, alpha={result['model']['alpha']:g})",
            save_path=save_path,
        )

    def save_results(self, result: Dict[str, Any], path, file_format: Optional[str] = None):
        """Save a ``find_power`` or ``find_sample_size`` result as CSV or JSON.

        Returns:
            pathlib.Path: The file written.
        """
        return _save_results(result, path, file_format)

    # =========================================================================
    # Internal methods
    # =========================================================================

    def _runner(self, n_simulations: Optional[int] = None) -> SimulationRunner:
        return SimulationRunner(
            n_simulations=self.n_simulations if n_simulations is None else n_simulations,
            seed=self.seed,
            alpha=self.alpha,
            equal_var=self.equal_var,
        )

    def _make_reporter(self, progress_callback, print_results: bool, n_sample_sizes: int) -> Optional[ProgressReporter]:
        """Resolve the progress callback into a ``ProgressReporter`` (or ``None``)."""
        if progress_callback is None:
            effective_cb = PrintReporter() if print_results else None
        elif progress_callback is False:
            effective_cb = None
        else:
            effective_cb = progress_callback

        if effective_cb is None:
            return None
        total = compute_total_simulations(self.n_simulations, n_sample_sizes, len(self._scenarios))
        return ProgressReporter(total, effective_cb)

    @staticmethod
    def _run_find_power(
        runner: SimulationRunner,
        scenario: EffectScenario,
        sample_size: int,
        progress=None,
        cancel_check=None,
        keep_p_values: bool = False,
    ) -> Dict[str, Any]:
        """Estimate power for one scenario at one sample size."""
        control_sd, treatment_sd = scenario.group_sds
        return runner.estimate_power(
            scenario.control_mean,
            scenario.treatment_mean,
            control_sd,
            sample_size,
            treatment_sd=treatment_sd,
            progress=progress,
            cancel_check=cancel_check,
            keep_p_values=keep_p_values,
        )

    def _run_sample_size_analysis(
        self,
        sample_sizes: List[int],
        scenario: EffectScenario,
        progress=None,
        cancel_check=None,
    ) -> List[Tuple[int, Dict[str, Any]]]:
        """Iterate over sample sizes, estimating power for each."""
        runner = self._runner()

        if self.parallel:
            from joblib import Parallel, delayed

            start_position = progress.current if progress is not None else 0
            try:
                power_results = Parallel(
                    n_jobs=self.n_cores,
                    backend="loky",
                    verbose=0,
                    return_as="generator",
                )(delayed(self._run_find_power)(runner, scenario, ss) for ss in sample_sizes)
                results = []
                for ss, result in zip(sample_sizes, power_results):
                    if cancel_check is not None and cancel_check():
                        raise SimulationCancelled("Simulation cancelled by user")
                    results.append((ss, result))
                    if progress is not None:
                        progress.advance(self.n_simulations)
                return results
            except SimulationCancelled:
                raise
            except Exception as e:
                warnings.warn(f"Parallel execution failed ({e}). Falling back to sequential.", UserWarning, stacklevel=2)
                if progress is not None:
                    progress.rewind(start_position)

        results = []
        for sample_size in sample_sizes:
            if cancel_check is not None and cancel_check():
                raise SimulationCancelled("Simulation cancelled by user")
            power_result = self._run_find_power(
                runner,
                scenario,
                sample_size,
                progress=progress,
                cancel_check=cancel_check,
            )
            results.append((sample_size, power_result))
        return results

    def __repr__(self):
        names = ", ".join(s.name for s in self._scenarios)
        return f"PowerAnalysis(scenarios=[{names}])"
