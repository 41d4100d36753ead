"""
Core estimator primitives.

This layer knows NOTHING about lattices, processes or rates.
It only knows:
- Particle ids with unwrapped 3D positions (Coordinate)
- A bounded window of recent (position, time) samples per tracked id
- Elapsed-time bins accumulating squared displacement

The surrounding simulation feeds it (time, moved id → displacement) once per
executed event via MSDTracker.register_step().
"""

from latticemsd.core.coordinate import Coordinate
from latticemsd.core.history import HistoryEntry, HistoryStore
from latticemsd.core.histogram import TimeHistogram
from latticemsd.core.tracker import MSDConfig, MSDTracker

__all__ = [
    "Coordinate",
    "HistoryEntry",
    "HistoryStore",
    "TimeHistogram",
    "MSDConfig",
    "MSDTracker",
]
