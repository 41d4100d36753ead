"""
MSDTracker: on-the-fly mean squared displacement for one particle species.

The surrounding simulation calls register_step() once per executed event
with the event time and the displacement applied to each moved particle.
For every moved TRACKED particle the tracker:

1. Advances its absolute position: new = last known position + displacement
2. Compares new against EVERY sample still in its history window, depositing
   (new - old)² into the histogram bin for Δt = time - old.time
3. Appends (new, time) to the window, evicting the oldest if full

Step 2 always runs against the pre-update window. Over a long run this
approximates the all-pairs MSD sum while only ever holding history_steps
samples per particle.

Tracking is by IDENTITY: the tracked set is fixed at construction from the
species labels at t0 and is never re-derived from live species. A vacancy
keeps being followed even when exchanges relabel the sites around it.
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Iterable, Sequence, Union
import logging
import math
import operator

import numpy as np

from latticemsd.core.coordinate import Coordinate
from latticemsd.core.history import HistoryEntry, HistoryStore
from latticemsd.core.histogram import TimeHistogram

logger = logging.getLogger(__name__)

Displacement = Union[Coordinate, Sequence[float], np.ndarray]
MovedParticles = Union[Mapping[int, Displacement], Iterable[tuple[int, Displacement]]]


@dataclass
class MSDConfig:
    """Configuration for the on-the-fly MSD estimator."""

    track_species: str  # Species label selecting the tracked set at t0
    history_steps: int = 100  # Samples retained per tracked particle
    n_bins: int = 100  # Number of elapsed-time bins
    t_max: float = 100.0  # Upper edge of the last bin
    t0: float = 0.0  # Simulation time of the starting configuration

    @property
    def binsize(self) -> float:
        return self.t_max / self.n_bins


class MSDTracker:
    """
    Incremental MSD estimator owning one HistoryStore and one TimeHistogram.

    Usage:
        tracker = MSDTracker(positions, species, MSDConfig(track_species="V"))
        for time, moved in simulation:
            tracker.register_step(time, moved)
        sums = tracker.histogram_buffer()
    """

    def __init__(
        self,
        positions: np.ndarray | Sequence[Sequence[float]],
        species: Sequence[str],
        config: MSDConfig,
    ):
        """
        Seed the estimator from the starting configuration.

        Args:
            positions: [n_particles, 3] initial absolute positions, indexed by id
            species: Species label per particle id at t0
            config: Estimator parameters
        """
        self.config = config

        positions = np.asarray(positions, dtype=np.float64)
        if positions.ndim != 2 or positions.shape[1] != 3:
            raise ValueError(f"positions must have shape (n, 3), got {positions.shape}")
        if len(species) != positions.shape[0]:
            raise ValueError(
                f"Got {positions.shape[0]} positions but {len(species)} species labels"
            )

        self.history = HistoryStore(positions.shape[0], config.history_steps)
        self.histogram = TimeHistogram(config.n_bins, config.t_max)

        self.tracked_ids: frozenset[int] = frozenset(
            i for i, label in enumerate(species) if label == config.track_species
        )
        for i in sorted(self.tracked_ids):
            self.history.seed(i, Coordinate.from_sequence(positions[i]), config.t0)

        self._last_time = float(config.t0)
        self.n_steps = 0

        logger.debug(
            "MSDTracker tracking %d of %d particles of species %r "
            "(history_steps=%d, n_bins=%d, binsize=%g)",
            len(self.tracked_ids), len(self.history), config.track_species,
            config.history_steps, config.n_bins, self.histogram.binsize,
        )

    @property
    def n_particles(self) -> int:
        return len(self.history)

    @property
    def last_time(self) -> float:
        """Most recently registered event time (t0 before any step)."""
        return self._last_time

    def _normalize_moved(self, moved: MovedParticles) -> list[tuple[int, Coordinate]]:
        pairs = moved.items() if isinstance(moved, Mapping) else moved

        result = []
        seen: set[int] = set()
        for particle_id, displacement in pairs:
            try:
                particle_id = operator.index(particle_id)
            except TypeError:
                raise ValueError(f"Particle id must be an integer, got {particle_id!r}") from None
            if not 0 <= particle_id < self.n_particles:
                raise ValueError(
                    f"Unknown particle id {particle_id} "
                    f"(universe has {self.n_particles} particles)"
                )
            if particle_id in seen:
                raise ValueError(f"Particle {particle_id} moved more than once in one step")
            seen.add(particle_id)
            result.append((particle_id, Coordinate.from_sequence(displacement)))
        return result

    def register_step(self, time: float, moved: MovedParticles) -> int:
        """
        Register one executed event.

        Args:
            time: Event time, not earlier than any previously registered time
            moved: Particle id → displacement applied by this event, as a
                   mapping or an ordered iterable of (id, displacement) pairs.
                   Displacements must be true (unwrapped) move vectors.

        Returns:
            Number of histogram contributions produced (dropped ones included)

        Raises:
            ValueError: on non-finite or decreasing time, unknown or non-integer
                        ids, or ids repeated in one call. Nothing is modified when this is raised.
        """
        time = float(time)
        if not math.isfinite(time):
            raise ValueError(f"Event time must be finite, got {time}")
        if time < self._last_time:
            raise ValueError(
                f"Event time {time} is earlier than the last registered time {self._last_time}"
            )
        pairs = self._normalize_moved(moved)

        n_contributions = 0
        for particle_id, displacement in pairs:
            if particle_id not in self.tracked_ids:
                continue

            window = self.history.entries(particle_id)
            new_position = window[0].position + displacement

            for entry in window:
                self.histogram.accumulate(time - entry.time, new_position - entry.position)
            n_contributions += len(window)

            self.history.append(particle_id, new_position, time)

        self._last_time = time
        self.n_steps += 1
        return n_contributions

    def history_buffer(self) -> list[tuple[HistoryEntry, ...]]:
        """Retained samples for every particle id, each newest first."""
        return [self.history.entries(i) for i in range(self.n_particles)]

    def histogram_buffer(self) -> np.ndarray:
        """Read-only [n_bins, 3] array of (Σdx², Σdy², Σdz²) per time bin."""
        return self.histogram.bins()

    def current_position(self, particle_id: int) -> Coordinate:
        """Last known absolute position of a tracked particle."""
        return self.history.latest(particle_id).position
