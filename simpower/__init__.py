"""SimPower - Monte Carlo Power Analysis for two-group experiments.

Estimates the power of a two-sample t-test by simulation, sweeps it over
candidate sample sizes and finds the minimum sample size per group that
reaches a target power. Also ships a selection (collider) bias
simulation for teaching.

Example:
    >>> from simpower import PowerAnalysis
    >>>
    >>> analysis = PowerAnalysis()
    >>> analysis.add_scenario("drug", control_mean=0.12, treatment_mean=-0.01, sd=0.25)
    >>> analysis.find_power(sample_size=30)
    >>>
    >>> analysis.find_sample_size(from_size=2, to_size=100)
"""

from importlib.metadata import version as _get_version

from .core import (
    DEFAULT_SCENARIOS,
    EffectScenario,
    ResultsProcessor,
    SimulationRunner,
    plot_selection_bias,
    selection_slopes,
    simulate_power,
    simulate_selection_bias,
)
from .exceptions import InvalidParameterError, SampleSizeNotFoundError
from .model import PowerAnalysis
from .progress import PrintReporter, ProgressReporter, SimulationCancelled, TqdmReporter

__version__ = _get_version("SimPower")

__all__ = [
    "PowerAnalysis",
    "EffectScenario",
    "DEFAULT_SCENARIOS",
    "SimulationRunner",
    "ResultsProcessor",
    "simulate_power",
    "simulate_selection_bias",
    "selection_slopes",
    "plot_selection_bias",
    "InvalidParameterError",
    "SampleSizeNotFoundError",
    "SimulationCancelled",
    "ProgressReporter",
    "PrintReporter",
    "TqdmReporter",
]
