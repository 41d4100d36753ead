"""
TimeHistogram: squared displacement binned by elapsed time.

Bin k collects every contribution whose elapsed time Δt satisfies
    k·binsize ≤ Δt < (k+1)·binsize,   binsize = t_max / n_bins

Each bin holds running sums of (dx², dy², dz²), the number of contributions,
and the second moments of the contributions (for standard errors downstream).
Turning sums into an MSD curve is the analysis layer's job, not this one.

Contributions with Δt ≥ t_max fall outside the window. They are DROPPED
and counted in n_dropped; no bin is touched.
"""

from __future__ import annotations
import logging
import math

import numpy as np

from latticemsd.core.coordinate import Coordinate

logger = logging.getLogger(__name__)


def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


class TimeHistogram:
    """Fixed-size array of per-bin squared-displacement accumulators."""

    def __init__(self, n_bins: int, t_max: float):
        if n_bins < 1:
            raise ValueError(f"n_bins must be >= 1, got {n_bins}")
        if not t_max > 0.0:
            raise ValueError(f"t_max must be > 0, got {t_max}")

        self.n_bins = n_bins
        self.t_max = float(t_max)
        self.binsize = self.t_max / n_bins

        # [n_bins, 3]: Σdx², Σdy², Σdz²
        self._sums = np.zeros((n_bins, 3), dtype=np.float64)
        # [n_bins, 3, 3]: Σ dxi²·dxj², so the variance of any combination
        # of components (x+y, x+y+z, ...) can be formed downstream
        self._moments = np.zeros((n_bins, 3, 3), dtype=np.float64)
        self._counts = np.zeros(n_bins, dtype=np.int64)

        self.n_dropped = 0

    def bin_index(self, delta_t: float) -> int:
        """floor(Δt / binsize); may be ≥ n_bins for out-of-window times."""
        if delta_t < 0.0:
            raise ValueError(f"Elapsed time must be non-negative, got {delta_t}")
        return int(math.floor(delta_t / self.binsize))

    def accumulate(self, delta_t: float, displacement: Coordinate) -> bool:
        """
        Deposit one squared-displacement contribution.

        Args:
            delta_t: Elapsed time between the two samples (≥ 0)
            displacement: r(t) - r(t - Δt)

        Returns:
            True if deposited, False if dropped as out of window
        """
        b = self.bin_index(delta_t)
        if b >= self.n_bins:
            self.n_dropped += 1
            logger.debug("Dropped contribution at dt=%g (t_max=%g)", delta_t, self.t_max)
            return False

        sq = displacement.squared().to_array()
        self._sums[b] += sq
        self._moments[b] += np.outer(sq, sq)
        self._counts[b] += 1
        return True

    def bins(self) -> np.ndarray:
        """Read-only [n_bins, 3] view of (Σdx², Σdy², Σdz²) per bin."""
        return _read_only(self._sums)

    def second_moments(self) -> np.ndarray:
        """Read-only [n_bins, 3, 3] view of Σ dxi²·dxj² per bin."""
        return _read_only(self._moments)

    def counts(self) -> np.ndarray:
        """Read-only [n_bins] view of contributions deposited per bin."""
        return _read_only(self._counts)

    def bin_edges(self) -> np.ndarray:
        """n_bins + 1 elapsed-time edges from 0 to t_max."""
        return np.arange(self.n_bins + 1, dtype=np.float64) * self.binsize

    def bin_centers(self) -> np.ndarray:
        return (np.arange(self.n_bins, dtype=np.float64) + 0.5) * self.binsize

    @property
    def total_counts(self) -> int:
        return int(self._counts.sum())

    def reset(self):
        """Zero every accumulator (for starting a new measurement window)."""
        self._sums.fill(0.0)
        self._moments.fill(0.0)
        self._counts.fill(0)
        self.n_dropped = 0
