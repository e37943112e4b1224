"""
Sample Size Calculation Example
===============================

This example sweeps N from 2 to 100 per group and finds the smallest
sample size that reaches 80% power.
"""

from simpower import EffectScenario, PowerAnalysis

print("=" * 60)
print("SAMPLE SIZE CALCULATION EXAMPLE")
print("=" * 60)

# 1. Define the expected effect
analysis = PowerAnalysis(
    [
        EffectScenario("biologically_important", control_mean=0.12, treatment_mean=-0.01, sd=0.25),
        EffectScenario("pilot_estimate", control_mean=0.12, treatment_mean=0.02, sd=0.25),
    ]
)

# 2. Settings (each validated immediately, chainable)
analysis.set_seed(2137).set_power(0.8).set_alpha(0.05).set_simulations(1000)

# 3. Sweep N = 2..100 and draw the power curve
print("\n1. SWEEP 2..100:")
result = analysis.find_sample_size(from_size=2, to_size=100, by=1, summary="long", return_results=True)

# 4. Save the power table
path = analysis.save_results(result, "power_table.csv")
print(f"\nPower table written to {path}")

# 5. Faster sweep on several cores (identical results)
print("\n2. PARALLEL SWEEP:")
analysis.set_parallel(True)
analysis.find_sample_size(from_size=2, to_size=100, by=1, summary="short")
