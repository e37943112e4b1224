"""
Progress reporting for SimPower simulations.

Provides a callback-based progress system: progress is reported via a
simple ``(current, total)`` callback counted in replicate simulations.
"""

import sys
from typing import Callable, Optional


class SimulationCancelled(Exception):
    """Raised when a simulation is cancelled by the user."""

    pass


class ProgressReporter:
    """Wraps a ``(current, total)`` callback with counting and throttling.

    Tracks the number of completed replicates and fires the callback at
    most once every *update_every* replicates, so vectorised blocks that
    finish very quickly do not flood the output.

    Args:
        total: Total number of replicate simulations.
        callback: Function called as ``callback(current, total)`` on each
            (throttled) update.
        update_every: Fire the callback at most once per this many
            replicates. Defaults to ``max(1, total // 200)``.
    """

    def __init__(
        self,
        total: int,
        callback: Callable[[int, int], None],
        update_every: Optional[int] = None,
    ):
        self.total = total
        self._callback = callback
        self._current = 0
        self._last_fired = 0
        self.update_every = update_every if update_every is not None else max(1, total // 200)

    @property
    def current(self) -> int:
        return self._current

    def start(self):
        """Signal the beginning of the run (fires an initial 0/total update)."""
        self._current = 0
        self._last_fired = 0
        self._callback(0, self.total)

    def advance(self, n: int = 1):
        """Advance the counter by *n* replicates, firing the callback when due."""
        self._current = min(self._current + n, self.total)
        if self._current >= self.total or self._current - self._last_fired >= self.update_every:
            self._last_fired = self._current
            self._callback(self._current, self.total)

    def rewind(self, position: int):
        """Move the counter back to *position* (e.g. before re-running work)."""
        self._current = max(0, min(position, self._current))
        self._last_fired = min(self._last_fired, self._current)
        self._callback(self._current, self.total)

    def finish(self):
        """Signal completion (fires a final total/total update if not already there)."""
        if self._current < self.total:
            self._current = self.total
            self._callback(self.total, self.total)


class PrintReporter:
    """Console progress reporter, prints ``\\rProgress:  45.2% (723/1600 simulations)``."""

    def __call__(self, current: int, total: int):
        if total <= 0:
            return
        pct = 100.0 * current / total
        sys.stderr.write(f"\rProgress: {pct:5.1f}% ({current}/{total} simulations)")
        sys.stderr.flush()
        if current >= total:
            sys.stderr.write("\n")
            sys.stderr.flush()


class TqdmReporter:
    """Optional tqdm-based progress reporter (lazy import).

    Usage::

        from simpower.progress import TqdmReporter
        analysis.find_sample_size(progress_callback=TqdmReporter())
    """

    def __init__(self, **tqdm_kwargs):
        self._tqdm_kwargs = tqdm_kwargs
        self._bar = None

    def __call__(self, current: int, total: int):
        from tqdm import tqdm

        if self._bar is None:
            self._bar = tqdm(total=total, unit="sim", **self._tqdm_kwargs)

        delta = current - self._bar.n
        if delta > 0:
            self._bar.update(delta)

        if current >= total:
            self._bar.close()
            self._bar = None


def compute_total_simulations(
    n_simulations: int,
    n_sample_sizes: int = 1,
    n_scenarios: int = 1,
) -> int:
    """Return the total number of replicate simulations in a run.

    Used to initialise ``ProgressReporter`` with an accurate total.

    Args:
        n_simulations: Replicates per sample size per scenario.
        n_sample_sizes: Number of sample sizes being tested (1 for
            ``find_power``, several for ``find_sample_size``).
        n_scenarios: Number of effect-size scenarios analysed.

    Returns:
        The product ``n_simulations * n_sample_sizes * n_scenarios``.
    """
    return n_simulations * n_sample_sizes * n_scenarios
