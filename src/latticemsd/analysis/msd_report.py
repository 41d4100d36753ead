"""
Turn accumulated histogram sums into an MSD curve.

The core estimator only stores per-bin sums. Here we divide by the number of
contributions in each bin to get ⟨Δr²⟩(Δt) for the single components, the
plane combinations and the full 3D displacement:

    MSD_c(Δt) = Σ_{i ∈ c} Σ dxi² / N(Δt),   c ∈ {x, y, z, xy, xz, yz, xyz}

Standard errors come from the per-bin second moments, so combined components
get the correct cross terms.

NOTE: No fitting happens here. Extracting D from the slope is left to the
caller.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union
import logging

import numpy as np
from scipy import stats

if TYPE_CHECKING:
    from latticemsd.core.histogram import TimeHistogram
    from latticemsd.core.tracker import MSDTracker

logger = logging.getLogger(__name__)


# Weight vectors over (x, y, z) for every reported combination
COMPONENTS = {
    "x": (1.0, 0.0, 0.0),
    "y": (0.0, 1.0, 0.0),
    "z": (0.0, 0.0, 1.0),
    "xy": (1.0, 1.0, 0.0),
    "xz": (1.0, 0.0, 1.0),
    "yz": (0.0, 1.0, 1.0),
    "xyz": (1.0, 1.0, 1.0),
}


@dataclass
class MSDReport:
    """Mean squared displacement per elapsed-time bin."""

    time: np.ndarray  # Bin centres
    binsize: float
    counts: np.ndarray  # Contributions per bin
    valid: np.ndarray  # Bins with at least min_counts contributions
    msd: dict[str, np.ndarray] = field(default_factory=dict)
    std_error: dict[str, np.ndarray] = field(default_factory=dict)
    n_dropped: int = 0  # Contributions beyond t_max

    def __getitem__(self, component: str) -> np.ndarray:
        return self.msd[_check_component(component)]

    @property
    def n_valid(self) -> int:
        return int(self.valid.sum())

    def confidence_interval(
        self, component: str = "xyz", level: float = 0.95
    ) -> tuple[np.ndarray, np.ndarray]:
        """
        Student-t confidence interval on the per-bin mean.

        Bins with fewer than two contributions have no spread estimate and
        come back as NaN.

        Args:
            component: One of COMPONENTS
            level: Confidence level in (0, 1)

        Returns:
            (lower, upper) arrays, same length as time
        """
        component = _check_component(component)
        if not 0.0 < level < 1.0:
            raise ValueError(f"level must be in (0, 1), got {level}")

        dof = np.maximum(self.counts - 1, 1)
        t_crit = stats.t.ppf(0.5 + level / 2.0, dof)
        half_width = np.where(self.counts > 1, t_crit * self.std_error[component], np.nan)

        mean = self.msd[component]
        return mean - half_width, mean + half_width

    def summary(self, components: tuple[str, ...] = ("x", "y", "z", "xyz")) -> str:
        """Plain-text table of the valid bins."""
        header = f"{'dt':>12} {'N':>8} " + " ".join(f"{c:>12}" for c in components)
        lines = [header, "-" * len(header)]
        for b in np.flatnonzero(self.valid):
            row = f"{self.time[b]:12.5g} {int(self.counts[b]):8d} "
            row += " ".join(f"{self.msd[c][b]:12.5g}" for c in components)
            lines.append(row)
        lines.append(f"{self.n_valid} of {len(self.time)} bins populated, {self.n_dropped} dropped")
        return "\n".join(lines)


def _check_component(component: str) -> str:
    if component not in COMPONENTS:
        raise ValueError(f"Unknown component {component!r}, expected one of {list(COMPONENTS)}")
    return component


def compute_msd_report(
    source: Union["MSDTracker", "TimeHistogram"],
    min_counts: int = 1,
) -> MSDReport:
    """
    Normalize histogram sums into mean squared displacements.

    Args:
        source: MSDTracker or its TimeHistogram
        min_counts: Bins with fewer contributions are reported as NaN

    Returns:
        MSDReport for every component combination
    """
    histogram = getattr(source, "histogram", source)
    if min_counts < 1:
        raise ValueError(f"min_counts must be >= 1, got {min_counts}")

    sums = np.asarray(histogram.bins())
    moments = np.asarray(histogram.second_moments())
    counts = np.asarray(histogram.counts()).copy()
    valid = counts >= min_counts

    n = np.where(valid, counts, 1).astype(np.float64)

    msd = {}
    std_error = {}
    for name, weights in COMPONENTS.items():
        w = np.asarray(weights)
        mean = sums @ w / n
        second = np.einsum("bij,i,j->b", moments, w, w) / n

        # Population variance, clipped against round-off, then the SEM
        var = np.maximum(second - mean ** 2, 0.0)
        with np.errstate(divide="ignore", invalid="ignore"):
            sem = np.where(counts > 1, np.sqrt(var / np.maximum(n - 1, 1)), np.nan)

        msd[name] = np.where(valid, mean, np.nan)
        std_error[name] = np.where(valid, sem, np.nan)

    logger.debug(
        "MSD report: %d of %d bins with >= %d contributions",
        int(valid.sum()), len(counts), min_counts,
    )

    return MSDReport(
        time=histogram.bin_centers(),
        binsize=histogram.binsize,
        counts=counts,
        valid=valid,
        msd=msd,
        std_error=std_error,
        n_dropped=histogram.n_dropped,
    )
