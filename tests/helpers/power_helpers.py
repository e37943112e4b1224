"""
Power analysis helpers for tests.

Shared utilities for analysis creation and power extraction.
"""

import warnings

from tests.config import DEFAULT_ALPHA, N_SIMS_ORDERING, SEED


def make_analysis(effect=0.5, sd=1.0, n_sims=N_SIMS_ORDERING, alpha=DEFAULT_ALPHA, seed=SEED, equal_var=False):
    """Create a single-scenario analysis with control mean 0."""
    from simpower import EffectScenario, PowerAnalysis

    analysis = PowerAnalysis(EffectScenario("effect", control_mean=0.0, treatment_mean=effect, sd=sd))
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        analysis.set_simulations(n_sims)
    analysis.set_seed(seed)
    analysis.set_alpha(alpha)
    analysis.set_equal_variance(equal_var)
    return analysis


def get_power(result, scenario="effect"):
    """Extract power for a scenario from a find_power result dict."""
    return result["results"][scenario]["power"]


def get_minimum(result, scenario="effect"):
    """Extract the minimum sample size for a scenario from a find_sample_size result."""
    return result["results"][scenario]["minimum_sample_size"]
