"""
latticemsd: on-the-fly mean squared displacement for lattice KMC

An incremental MSD estimator that runs inside an event-driven lattice
simulation without storing full trajectories.

Core concepts:
- Each executed event moves a few particles
- Tracked particles keep a short window of (position, time) samples
- Every move is compared against the whole window
- (Δr)² is binned by elapsed time Δt

Layers:
- core: the estimator itself (sees events, never reports)
- analysis: one-way derivation of MSD curves from the accumulated bins
- viz: matplotlib plots of those curves
"""

__version__ = "0.1.0"
