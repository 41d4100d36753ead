"""
MSD curve plots.

Plots ⟨Δr²⟩ against elapsed time from an MSDReport, with optional
standard-error bands, plus the per-bin sample counts that show how well
each part of the curve is supported.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.axes import Axes

if TYPE_CHECKING:
    from latticemsd.analysis.msd_report import MSDReport


COMPONENT_COLORS = {
    "x": "tab:red",
    "y": "tab:green",
    "z": "tab:blue",
    "xy": "tab:orange",
    "xz": "tab:purple",
    "yz": "tab:cyan",
    "xyz": "black",
}


def plot_msd(
    report: "MSDReport",
    components: Sequence[str] = ("x", "y", "z", "xyz"),
    title: str = "Mean Squared Displacement",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (8, 6),
    show_errors: bool = True,
    loglog: bool = False,
) -> tuple[Figure, Axes]:
    """
    Plot MSD components against elapsed time.

    Args:
        report: MSDReport from compute_msd_report
        components: Which combinations to draw
        title: Plot title
        ax: Existing axes (creates new if None)
        show_errors: Shade ± one standard error around each curve
        loglog: Use logarithmic axes

    Returns:
        (fig, ax) tuple
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    t = report.time[report.valid]

    for component in components:
        msd = report[component][report.valid]
        color = COMPONENT_COLORS.get(component)
        ax.plot(t, msd, color=color, linewidth=2, label=component)

        if show_errors:
            err = report.std_error[component][report.valid]
            # Single-sample bins carry no error estimate
            err = np.nan_to_num(err, nan=0.0)
            ax.fill_between(t, msd - err, msd + err, color=color, alpha=0.2, linewidth=0)

    if loglog:
        ax.set_xscale("log")
        ax.set_yscale("log")

    ax.set_title(title)
    ax.set_xlabel("Elapsed time Δt")
    ax.set_ylabel("MSD")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)

    return fig, ax


def plot_bin_counts(
    report: "MSDReport",
    title: str = "Contributions per Bin",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (8, 4),
) -> tuple[Figure, Axes]:
    """Bar chart of the number of contributions in each elapsed-time bin."""
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    ax.bar(report.time, report.counts, width=report.binsize, color="gray", edgecolor="none")

    ax.set_title(title)
    ax.set_xlabel("Elapsed time Δt")
    ax.set_ylabel("Contributions")
    ax.grid(True, alpha=0.3, axis="y")

    return fig, ax
