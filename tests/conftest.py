"""Shared fixtures for the impulse_filters test suite."""

import numpy as np
import pytest


@pytest.fixture
def rng():
    """Deterministic random generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def echo_signal():
    """Smooth decaying echo with a handful of isolated impulses.

    Returns:
        Tuple of (clean, noisy, spike_indices)
    """
    t = np.arange(400)
    clean = np.exp(-((t - 120) / 25.0) ** 2) + 0.6 * np.exp(-((t - 260) / 25.0) ** 2)
    noisy = clean.copy()
    spikes = np.array([40, 95, 180, 230, 310, 370])
    noisy[spikes] += np.array([3.0, -2.5, 2.0, 3.5, -3.0, 2.5])
    return clean, noisy, spikes
