"""
HistoryStore: bounded per-particle record of (position, time) samples.

Each particle id owns a fixed-capacity window holding its most recent
samples, newest first. Once the window is full, inserting a new sample
evicts the oldest one, so memory and work per update are O(history_steps)
regardless of how long the simulation runs.

Only tracked particles are ever seeded; every other id keeps an empty window.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
import logging

from latticemsd.core.coordinate import Coordinate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """One retained sample: absolute (unwrapped) position at a given time."""

    position: Coordinate
    time: float


class HistoryStore:
    """
    Per-particle sliding windows, indexed by stable integer particle id.

    Windows are deques with maxlen=history_steps: appendleft() puts the new
    sample at index 0 and the deque drops the entry at the far end.
    """

    def __init__(self, n_particles: int, history_steps: int):
        if history_steps < 1:
            raise ValueError(f"history_steps must be >= 1, got {history_steps}")
        if n_particles < 0:
            raise ValueError(f"n_particles must be >= 0, got {n_particles}")

        self.history_steps = history_steps
        self._windows: list[deque[HistoryEntry]] = [
            deque(maxlen=history_steps) for _ in range(n_particles)
        ]
        self._seeded: set[int] = set()

    def __len__(self) -> int:
        """Number of particle ids in the universe (tracked or not)."""
        return len(self._windows)

    @property
    def capacity(self) -> int:
        return self.history_steps

    def _check_id(self, particle_id: int):
        if not 0 <= particle_id < len(self._windows):
            raise ValueError(
                f"Unknown particle id {particle_id} "
                f"(universe has {len(self._windows)} particles)"
            )

    def is_tracked(self, particle_id: int) -> bool:
        """True if the id has been seeded."""
        return particle_id in self._seeded

    def seed(self, particle_id: int, position: Coordinate, time: float):
        """Give a tracked id its first sample. Seeding an id twice is an error."""
        self._check_id(particle_id)
        if particle_id in self._seeded:
            raise ValueError(f"Particle {particle_id} has already been seeded")
        self._seeded.add(particle_id)
        self._windows[particle_id].appendleft(HistoryEntry(position, float(time)))

    def append(self, particle_id: int, position: Coordinate, time: float):
        """
        Insert a new newest sample, evicting the oldest if the window is full.

        Args:
            particle_id: A previously seeded id
            position: Absolute position after the move
            time: Simulation time of the move
        """
        self._check_id(particle_id)
        if particle_id not in self._seeded:
            raise ValueError(f"Particle {particle_id} is not tracked")
        window = self._windows[particle_id]
        if len(window) == self.history_steps:
            logger.debug(
                "Evicting sample at t=%g for particle %d", window[-1].time, particle_id
            )
        window.appendleft(HistoryEntry(position, float(time)))

    def entries(self, particle_id: int) -> tuple[HistoryEntry, ...]:
        """Retained samples for an id, newest first."""
        self._check_id(particle_id)
        return tuple(self._windows[particle_id])

    def latest(self, particle_id: int) -> HistoryEntry:
        """Newest sample for a tracked id: its last known position."""
        self._check_id(particle_id)
        window = self._windows[particle_id]
        if not window:
            raise ValueError(f"Particle {particle_id} is not tracked")
        return window[0]

    def sizes(self) -> list[int]:
        """Window occupancy for every id, in id order."""
        return [len(w) for w in self._windows]
