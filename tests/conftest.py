"""Test configuration for the star population test suite."""

import numpy as np
import pytest

from star_population.tracks.store import load_track_store
from synthetic_tracks import write_synthetic_source_dir


@pytest.fixture(scope="session")
def session_data_dir(tmp_path_factory):
    """Data directory holding unpacked synthetic tracks (and, once built, the cache)."""
    data_dir = tmp_path_factory.mktemp("star_population_data")
    write_synthetic_source_dir(data_dir / "Z0.01")
    return data_dir


@pytest.fixture(scope="session")
def track_store(session_data_dir):
    """Track store built from the synthetic tracks."""
    return load_track_store(session_data_dir, verbose=False)


@pytest.fixture
def fresh_data_dir(tmp_path):
    """Per-test data directory with synthetic tracks and no cache."""
    write_synthetic_source_dir(tmp_path / "Z0.01")
    return tmp_path


@pytest.fixture
def rng():
    return np.random.default_rng(12345)
