"""
Visualization utilities for SimPower.

This module provides plotting functions for power analysis results and
for the selection-bias illustration.
"""

from typing import Any, Dict, Optional

import numpy as np

__all__ = []

_FOOTER = "made with SimPower - Monte Carlo power analysis for two-group experiments"


def _import_pyplot():
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError("matplotlib required for plotting: pip install matplotlib") from None
    return plt


def _finish(plt, fig, save_path: Optional[str]):
    """Add the footer, then save and close the figure or show it."""
    fig.text(0.5, 0.01, _FOOTER, ha="center", fontsize=9, color="#888888")
    plt.tight_layout(rect=(0, 0.03, 1, 1))
    if save_path is not None:
        fig.savefig(save_path, dpi=150)
        plt.close(fig)
    else:
        plt.show()
    return fig


def _create_power_plot(
    power_tables: Dict[str, Any],
    minimum_sizes: Dict[str, Optional[int]],
    target_power: float,
    title: str = "Power Analysis",
    save_path: Optional[str] = None,
):
    """Create a sample-size vs. power line plot with minimum-N markers.

    Draws one line per scenario, a dashed horizontal line at the target
    power labelled ``power = <target>``, and for each scenario that
    reaches the target a dashed vertical segment from 0 up to the target
    at the minimum sample size, labelled ``n = <N>``.

    Args:
        power_tables: Mapping of scenario name to its power table
            (DataFrame with ``sample_size`` and ``power`` columns).
        minimum_sizes: Mapping of scenario name to its minimum sample
            size (``None`` if the target was not reached).
        target_power: Target power fraction (drawn as reference line).
        title: Plot title.
        save_path: Write the figure to this path instead of showing it.

    Returns:
        The matplotlib figure.

    Raises:
        ImportError: If ``matplotlib`` is not installed.
    """
    plt = _import_pyplot()

    fig, ax = plt.subplots(figsize=(10, 6))
    names = list(power_tables.keys())
    colors = plt.get_cmap("Set1")(np.linspace(0, 1, max(len(names), 1)))

    max_n = 0
    for i, name in enumerate(names):
        table = power_tables[name]
        sizes = table["sample_size"].to_numpy()
        max_n = max(max_n, int(sizes.max()) if len(sizes) else 0)
        ax.plot(sizes, table["power"].to_numpy(), "-", color=colors[i], label=name, linewidth=2)

    # Target power line
    ax.axhline(y=target_power, color="red", linestyle="--", linewidth=1.5)
    ax.text(max_n, min(target_power + 0.05, 1.02), f"power = {target_power:g}", color="red", ha="right")

    for i, name in enumerate(names):
        minimum = minimum_sizes.get(name)
        if minimum is None:
            continue
        ax.vlines(minimum, 0, target_power, colors=colors[i], linestyles="dashed", linewidth=1.5)
        ax.text(minimum + 2, 0.05 + 0.06 * i, f"n = {minimum}", color=colors[i], ha="left")

    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.set_xlabel("Sample size per group (N)", fontsize=12)
    ax.set_ylabel("Power", fontsize=12)
    ax.set_ylim(0, 1.05)
    ax.grid(True, alpha=0.3)
    if len(names) > 1:
        ax.legend(loc="lower right")

    return _finish(plt, fig, save_path)


def _create_pvalue_histogram(
    p_values: Dict[str, np.ndarray],
    alpha: float,
    title: str = "Simulated p-values",
    save_path: Optional[str] = None,
):
    """Histogram of replicate p-values per scenario with the alpha cut-off.

    Args:
        p_values: Mapping of scenario name to its p-value array.
        alpha: Significance level, drawn as a vertical line.
        title: Plot title.
        save_path: Write the figure to this path instead of showing it.
    """
    plt = _import_pyplot()

    names = list(p_values.keys())
    fig, axes = plt.subplots(1, len(names), figsize=(6 * len(names), 5), squeeze=False)
    bins = np.linspace(0, 1, 41)

    for ax, name in zip(axes[0], names):
        values = np.asarray(p_values[name])
        ax.hist(values, bins=bins, color="#4C72B0", edgecolor="white")
        ax.axvline(alpha, color="red", linestyle="--", linewidth=1.5)
        share = float(np.mean(values < alpha)) if len(values) else float("nan")
        ax.set_title(f"{name} (p < {alpha:g}: {share:.1%})")
        ax.set_xlabel("p-value")
        ax.set_ylabel("Count")

    fig.suptitle(title, fontsize=14, fontweight="bold")
    return _finish(plt, fig, save_path)


def _create_selection_plot(
    data,
    title: str = "Selection bias",
    save_path: Optional[str] = None,
    max_points: Optional[int] = 20000,
    seed: Optional[int] = None,
):
    """Scatter of scoring vs. height with population and per-group fits.

    Args:
        data: DataFrame from ``simulate_selection_bias``.
        title: Plot title.
        save_path: Write the figure to this path instead of showing it.
        max_points: Subsample unselected points to at most this many for
            drawing (fits always use every point); ``None`` draws all.
        seed: Seed for the drawing subsample.
    """
    plt = _import_pyplot()

    chosen = data[data["selected"]]
    rest = data[~data["selected"]]
    drawn_rest = rest
    if max_points is not None and len(rest) > max_points:
        drawn_rest = rest.sample(n=max_points, random_state=seed)

    fig, ax = plt.subplots(figsize=(10, 7))
    ax.scatter(drawn_rest["height"], drawn_rest["scoring"], s=4, color="grey", alpha=0.1, label="not selected")
    ax.scatter(chosen["height"], chosen["scoring"], s=10, color="black", alpha=0.4, label="selected")

    grid = np.linspace(data["height"].min(), data["height"].max(), 100)
    for subset, color, label in [
        (data, "#4C72B0", "population fit"),
        (rest, "grey", "not selected fit"),
        (chosen, "black", "selected fit"),
    ]:
        if len(subset) < 2:
            continue
        slope, intercept = np.polyfit(subset["height"].to_numpy(), subset["scoring"].to_numpy(), 1)
        if subset is chosen:
            x = np.linspace(chosen["height"].min(), chosen["height"].max(), 50)
        else:
            x = grid
        ax.plot(x, intercept + slope * x, color=color, linewidth=2, label=f"{label} (slope {slope:.2f})")

    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.set_xlabel("Height (SD units)", fontsize=12)
    ax.set_ylabel("Scoring (SD units)", fontsize=12)
    ax.legend(loc="upper left")

    return _finish(plt, fig, save_path)
