"""
Visualization utilities.

- MSD curves with standard-error bands
- Per-bin contribution counts
"""

from latticemsd.viz.msd import (
    COMPONENT_COLORS,
    plot_msd,
    plot_bin_counts,
)

__all__ = [
    "COMPONENT_COLORS",
    "plot_msd",
    "plot_bin_counts",
]
