"""
Selection (collider) bias simulation.

Height and scoring ability are positively related in the population.
Professional selection depends on both, so among the selected few a
short player must score exceptionally well to be picked. Fitting a line
inside the selected group alone badly understates the population slope.
"""

from typing import Dict, Optional

import numpy as np
import pandas as pd

from ..utils.validators import _INTEGER_TYPES, _validate_numeric_parameter, _validate_seed
from ..utils.visualization import _create_selection_plot

# Roughly 300 million people and 450 professional players, scaled down
# so the whole population can be plotted.
DEFAULT_POPULATION = 300_000
SELECTION_RATIO = 450


def simulate_selection_bias(
    population: int = DEFAULT_POPULATION,
    n_selected: Optional[int] = None,
    seed: Optional[int] = None,
) -> pd.DataFrame:
    """Simulate a population and select its top units on a latent propensity.

    Model::

        height     ~ N(0, 1)
        scoring    ~ N(height, 1)
        propensity ~ N(height + scoring, 1)

    The *n_selected* units with the highest propensity are flagged as
    ``selected``.

    Args:
        population: Number of simulated individuals.
        n_selected: Size of the selected group. Defaults to the size of
            the top bin when the population is cut into
            ``round(population / 450)`` equal-count bins (about 450), using
            at least two bins.
        seed: Random seed (``None`` for fresh entropy).

    Returns:
        DataFrame with columns ``height``, ``scoring``, ``propensity``,
        ``selected``.
    """
    result = _validate_numeric_parameter(population, "population", _INTEGER_TYPES, min_val=3)
    result.raise_if_invalid()
    if n_selected is None:
        n_bins = max(2, int(round(population / SELECTION_RATIO)))
        n_selected = min(max(2, int(round(population / n_bins))), population - 1)
    _validate_numeric_parameter(
        n_selected, "n_selected", _INTEGER_TYPES, min_val=2, max_val=population - 1
    ).raise_if_invalid()
    _validate_seed(seed).raise_if_invalid()

    rng = np.random.default_rng(seed)
    height = rng.normal(size=population)
    scoring = rng.normal(loc=height)
    propensity = rng.normal(loc=height + scoring)

    selected = np.zeros(population, dtype=bool)
    selected[np.argsort(propensity)[-n_selected:]] = True

    return pd.DataFrame(
        {
            "height": height,
            "scoring": scoring,
            "propensity": propensity,
            "selected": selected,
        }
    )


def _slope(x: np.ndarray, y: np.ndarray) -> float:
    if len(x) < 2:
        return float("nan")
    return float(np.polyfit(x, y, 1)[0])


def selection_slopes(data: pd.DataFrame) -> Dict[str, float]:
    """Least-squares slope of scoring on height per group.

    A group with fewer than two points has slope ``nan``.

    Returns:
        Dict with keys ``population``, ``selected`` and ``not_selected``.
    """
    chosen = data[data["selected"]]
    rest = data[~data["selected"]]
    return {
        "population": _slope(data["height"].to_numpy(), data["scoring"].to_numpy()),
        "selected": _slope(chosen["height"].to_numpy(), chosen["scoring"].to_numpy()),
        "not_selected": _slope(rest["height"].to_numpy(), rest["scoring"].to_numpy()),
    }


def plot_selection_bias(data: pd.DataFrame, save_path: Optional[str] = None, seed: Optional[int] = None):
    """Scatter of scoring vs. height with fitted lines per group.

    Args:
        data: DataFrame from ``simulate_selection_bias``.
        save_path: Save the figure here instead of showing it.
        seed: Seed for subsampling the unselected points drawn.

    Returns:
        The matplotlib figure.
    """
    return _create_selection_plot(data, save_path=save_path, seed=seed)
