"""Core components for the SimPower framework.

Re-exports the foundational building blocks:

- ``EffectScenario``, ``DEFAULT_SCENARIOS`` - named effect-size scenarios.
- ``SimulationRunner``, ``simulate_power`` - Monte Carlo power estimation.
- ``ResultsProcessor``, ``build_power_result``, ``build_sample_size_result``:
  power tables, minimum sample size lookup and result formatting.
- ``simulate_selection_bias``, ``selection_slopes``, ``plot_selection_bias``:
  collider bias demo.
"""

from .collider import plot_selection_bias, selection_slopes, simulate_selection_bias
from .results import ResultsProcessor, build_power_result, build_sample_size_result
from .scenarios import DEFAULT_SCENARIOS, EffectScenario
from .simulation import SimulationRunner, simulate_power

__all__ = [
    # Scenarios
    "EffectScenario",
    "DEFAULT_SCENARIOS",
    # Simulation
    "SimulationRunner",
    "simulate_power",
    # Results
    "ResultsProcessor",
    "build_power_result",
    "build_sample_size_result",
    # Selection bias
    "simulate_selection_bias",
    "selection_slopes",
    "plot_selection_bias",
]
