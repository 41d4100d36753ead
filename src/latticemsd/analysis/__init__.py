"""
Analysis layer: derived quantities for reporting and plotting.

IMPORTANT: This is NOT seen by the estimator. One-way derivation only.

- compute_msd_report: normalize histogram sums into ⟨Δr²⟩(Δt)
- MSDReport: per-component curves, standard errors, confidence intervals
"""

from latticemsd.analysis.msd_report import COMPONENTS, MSDReport, compute_msd_report

__all__ = [
    "COMPONENTS",
    "MSDReport",
    "compute_msd_report",
]
