"""
Shared pytest fixtures for SimPower tests.
"""

import contextlib
import io

import pytest

from tests.config import N_SIMS_CHECK, SEED


@pytest.fixture
def suppress_output():
    """Silence stdout/stderr printed by analyses."""
    with contextlib.redirect_stdout(io.StringIO()), contextlib.redirect_stderr(io.StringIO()):
        yield


@pytest.fixture
def medium_scenario():
    """Medium standardised effect (d = 0.5)."""
    from simpower import EffectScenario

    return EffectScenario("medium", control_mean=0.0, treatment_mean=0.5, sd=1.0)


@pytest.fixture
def quick_analysis(medium_scenario, suppress_output):
    """PowerAnalysis with one scenario and a small replicate count."""
    import warnings

    from simpower import PowerAnalysis

    analysis = PowerAnalysis(scenarios=[medium_scenario])
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        analysis.set_simulations(N_SIMS_CHECK)
    analysis.set_seed(SEED)
    return analysis


@pytest.fixture
def power_table():
    """Hand-built power table with a known crossing at N=21."""
    import pandas as pd

    return pd.DataFrame({"sample_size": [10, 20, 21, 30], "power": [0.5, 0.79, 0.81, 0.95]})
