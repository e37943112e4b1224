"""
Power accuracy against the analytical non-central t power.
"""

import pytest

from simpower.core.simulation import SimulationRunner
from tests.config import EFFECT_HUGE, EFFECT_LARGE, EFFECT_MEDIUM, EFFECT_SMALL, N_SIMS_STANDARD, SEED
from tests.helpers.analytical import analytical_two_sample_power
from tests.helpers.mc_margins import mc_margin


class TestPowerAccuracy:
    """Monte Carlo power matches the closed form for the pooled t-test."""

    @pytest.mark.parametrize(
        "effect, n",
        [
            (EFFECT_SMALL, 100),
            (EFFECT_MEDIUM, 20),
            (EFFECT_MEDIUM, 64),
            (EFFECT_LARGE, 15),
            (EFFECT_LARGE, 26),
        ],
    )
    def test_matches_analytical(self, effect, n):
        runner = SimulationRunner(n_simulations=N_SIMS_STANDARD, seed=SEED, equal_var=True)
        power = runner.estimate_power(0.0, effect, 1.0, n)["power"]
        expected = analytical_two_sample_power(effect, 1.0, n)
        margin = mc_margin(expected, N_SIMS_STANDARD)
        assert abs(power - expected) < margin, f"MC {power:.4f} vs analytical {expected:.4f} (margin {margin:.4f})"

    def test_welch_close_to_student_for_equal_sd(self):
        student = SimulationRunner(n_simulations=N_SIMS_STANDARD, seed=SEED, equal_var=True)
        welch = SimulationRunner(n_simulations=N_SIMS_STANDARD, seed=SEED, equal_var=False)
        a = student.estimate_power(0.0, EFFECT_MEDIUM, 1.0, 40)["power"]
        b = welch.estimate_power(0.0, EFFECT_MEDIUM, 1.0, 40)["power"]
        # Same random stream, near-identical tests
        assert abs(a - b) < 0.02

    def test_scale_invariance(self):
        """Only the standardised effect matters: (0.12 vs -0.01, sd 0.25) ≡ d = 0.52."""
        runner = SimulationRunner(n_simulations=N_SIMS_STANDARD, seed=SEED, equal_var=True)
        power = runner.estimate_power(0.12, -0.01, 0.25, 30)["power"]
        expected = analytical_two_sample_power(0.13, 0.25, 30)
        assert abs(power - expected) < mc_margin(expected, N_SIMS_STANDARD)


class TestLargeEffect:
    def test_five_sd_apart(self):
        runner = SimulationRunner(n_simulations=N_SIMS_STANDARD, seed=SEED)
        power = runner.estimate_power(0.0, EFFECT_HUGE, 1.0, 30)["power"]
        assert power >= 0.99
