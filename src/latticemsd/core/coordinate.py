"""
Coordinate: a point or displacement in 3D space.

Positions handled by the estimator are UNWRAPPED: they are never folded back
into the periodic simulation cell, so a particle that crossed the boundary
many times sits far outside the nominal box.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence
import math

import numpy as np


@dataclass(frozen=True)
class Coordinate:
    """Immutable 3-component real vector with componentwise arithmetic."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_sequence(cls, values: Sequence[float] | np.ndarray | Coordinate) -> Coordinate:
        """Build from any length-3 sequence (list, tuple, numpy array)."""
        if isinstance(values, Coordinate):
            return values
        if len(values) != 3:
            raise ValueError(f"Coordinate needs 3 components, got {len(values)}")
        x, y, z = float(values[0]), float(values[1]), float(values[2])
        if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(z)):
            raise ValueError(f"Coordinate components must be finite, got ({x}, {y}, {z})")
        return cls(x, y, z)

    def __add__(self, other: Coordinate) -> Coordinate:
        return Coordinate(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Coordinate) -> Coordinate:
        return Coordinate(self.x - other.x, self.y - other.y, self.z - other.z)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def squared(self) -> Coordinate:
        """Componentwise square (dx², dy², dz²)."""
        return Coordinate(self.x * self.x, self.y * self.y, self.z * self.z)

    def norm_squared(self) -> float:
        """|r|² = x² + y² + z²."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)
