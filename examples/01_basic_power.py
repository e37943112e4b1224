"""
Basic Power Analysis Example
============================

This example checks whether a planned number of patients per group gives
enough power to detect a slower skin-cancer growth rate under treatment.
"""

import simpower

# Example: skin-cancer growth (mm/month) under a new drug vs. placebo
# Research question: With 30 patients per group, how often would we detect the effect?

print("=" * 60)
print("BASIC POWER ANALYSIS EXAMPLE")
print("=" * 60)

# 1. The default analysis carries two scenarios:
#    biologically_important: 0.12 -> -0.01 mm/month (sd 0.25)
#    smallest_detectable:    0.12 ->  0.11 mm/month (sd 0.25)
analysis = simpower.PowerAnalysis()
print(f"\nScenarios: {[s.name for s in analysis.scenarios]}")

# 2. One simulated experiment, printed like a t-test summary
print("\n1. A SINGLE TRIAL:")
analysis.run_trial(sample_size=30)

# 3. Monte Carlo power at N = 30 per group
print("\n2. POWER AT N = 30:")
analysis.find_power(sample_size=30, summary="short")

# 4. Same question with the p-value distribution drawn
print("\n3. DETAILED ANALYSIS:")
analysis.find_power(sample_size=30, summary="long", plot_p_values=True)

print("\n" + "=" * 60)
print("INTERPRETATION GUIDE")
print("=" * 60)
print("""
Key takeaways:
- Power is the share of simulated experiments with p < alpha
- The MC SE column shows how precise the estimate is
- Under no effect, about 5% of p-values still fall below 0.05

Next steps:
- If power is too low, search for the sample size (02_sample_size.py)
- Use set_equal_variance(True) for Student's pooled t-test
""")
