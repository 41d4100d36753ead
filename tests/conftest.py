"""
Pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def line_positions():
    """Factory: n sites at unit spacing along one axis."""
    def make(axis: int, n: int = 6) -> np.ndarray:
        positions = np.zeros((n, 3), dtype=np.float64)
        positions[:, axis] = np.arange(n, dtype=np.float64)
        return positions
    return make


@pytest.fixture
def line_species():
    """V on even sites, A on odd sites: V A V A V A."""
    return ["V", "A", "V", "A", "V", "A"]


@pytest.fixture
def line_config():
    """Parameters of the six-site exchange scenario."""
    from latticemsd.core import MSDConfig
    return MSDConfig(
        track_species="V",
        history_steps=5,
        n_bins=200,
        t_max=10.0,
        t0=1.2,
    )


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)
