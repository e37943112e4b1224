"""
Selection (Collider) Bias Example
=================================

Height and scoring ability are related in the population. Selecting the
few best players on a mix of both hides that relationship among them.
"""

from simpower import plot_selection_bias, selection_slopes, simulate_selection_bias

print("=" * 60)
print("SELECTION BIAS EXAMPLE")
print("=" * 60)

data = simulate_selection_bias(population=300_000, seed=2137)
print(f"\nSimulated {len(data):,} people, {int(data['selected'].sum())} selected")

slopes = selection_slopes(data)
print("\nSlope of scoring on height:")
for group, slope in slopes.items():
    print(f"  {group:<14} {slope:6.2f}")

plot_selection_bias(data, seed=2137)
