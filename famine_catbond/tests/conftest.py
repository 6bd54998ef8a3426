"""Pytest configuration and shared fixtures."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from famine_catbond.config import RateParameters


@pytest.fixture
def small_losses():
    """Four simulated years with losses 1 to 4."""
    return np.array([1.0, 2.0, 3.0, 4.0])


@pytest.fixture
def normal_losses():
    """Reference famine scenario: 1000 normal losses around a 1b policy amount."""
    rng = np.random.default_rng(42)
    return rng.normal(1_000_000_000, 100_000_000, 1000)


@pytest.fixture
def rate_parameters():
    """Reference rate parameters."""
    return RateParameters()
