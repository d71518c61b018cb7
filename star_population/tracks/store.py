"""The evolutionary track store and its build-once handle."""

import threading
from pathlib import Path
from typing import Callable, Optional, Sequence

import numpy as np

from ..config import DATA_DIRECTORY, METALLICITY
from ..errors import DataNotAvailableError, TrackStoreUnavailableError
from ..state.persistence import cache_path, load_track_cache, save_track_cache
from ..stars.star import Star
from .acquisition import ensure_source_files
from .grid import SORTED_MASSES, closest_mass_index
from .parsing import parse_source_directory
from .trajectory import Trajectory


class TrackStore:
    """
    One trajectory per grid mass, indexed like the mass grid.

    Immutable after construction and safe to share between threads and
    worker processes.
    """

    def __init__(
        self,
        trajectories: Sequence[Trajectory],
        masses: Sequence[float] = SORTED_MASSES,
        metallicity: str = METALLICITY,
    ):
        if len(trajectories) != len(masses):
            raise DataNotAvailableError(
                f"Expected {len(masses)} trajectories, got {len(trajectories)}"
            )
        self._trajectories = tuple(trajectories)
        self._masses = tuple(masses)
        self.metallicity = metallicity

        self.lifetimes = np.array([t.lifetime for t in self._trajectories])
        self.peak_luminous_intensities = np.array(
            [t.peak_lifetime_luminous_intensity for t in self._trajectories]
        )
        self.lifetimes.flags.writeable = False
        self.peak_luminous_intensities.flags.writeable = False

    def __len__(self) -> int:
        return len(self._trajectories)

    def __repr__(self) -> str:
        return f"TrackStore(metallicity={self.metallicity!r}, trajectories={len(self)})"

    @property
    def trajectories(self) -> tuple:
        return self._trajectories

    def get_masses(self) -> tuple:
        return self._masses

    def get_trajectory(self, mass_index: int) -> Trajectory:
        if not 0 <= mass_index < len(self._trajectories):
            raise DataNotAvailableError(f"No trajectory for mass index {mass_index}")
        return self._trajectories[mass_index]

    def is_filled(self) -> bool:
        return len(self._trajectories) == len(self._masses) and all(
            len(t) > 0 for t in self._trajectories
        )

    def closest_mass_index(self, mass: float) -> int:
        return closest_mass_index(mass, self._masses)

    def star_for_mass_and_age(
        self, mass: float, age: float, position: Optional[np.ndarray] = None
    ) -> Star:
        """Star on the track closest to ``mass`` at ``age``."""
        return self.get_trajectory(self.closest_mass_index(mass)).to_star(age, position)


def load_track_store(
    data_dir: Optional[Path] = None,
    metallicity: str = METALLICITY,
    url: Optional[str] = None,
    verbose: bool = True,
) -> TrackStore:
    """
    Load the track store from the binary cache, building it on a cache miss.

    On a miss the source tracks are downloaded if needed, parsed, and written
    to the cache before returning. Nothing is retried.

    Args:
        data_dir: Private data directory (defaults to ``DATA_DIRECTORY``)
        metallicity: Name of the track set
        url: Archive URL override
        verbose: Print progress

    Returns:
        The filled track store

    Raises:
        TrackIOError, DownloadError, CacheSerializationError,
        CacheDeserializationError, DataNotAvailableError
    """
    data_dir = Path(data_dir) if data_dir is not None else DATA_DIRECTORY
    cache_file = cache_path(data_dir, metallicity)

    if cache_file.exists():
        if verbose:
            print(f"\tReading PARSEC data from {cache_file}")
        trajectories, cached_metallicity = load_track_cache(cache_file)
        store = TrackStore(trajectories, metallicity=cached_metallicity)
        if not store.is_filled():
            raise DataNotAvailableError(f"Track cache {cache_file} is incomplete")
        return store

    source_dir = ensure_source_files(data_dir, metallicity, url=url, verbose=verbose)
    if verbose:
        print(f"\tParsing PARSEC tracks in {source_dir}")
    store = TrackStore(parse_source_directory(source_dir), metallicity=metallicity)

    if verbose:
        print(f"\tWriting PARSEC data to {cache_file}")
    save_track_cache(cache_file, store.trajectories, metallicity)
    return store


class TrackStoreHandle:
    """
    Build-once access to a shared track store.

    The first ``get()`` builds the store; concurrent first callers wait for
    that build instead of starting their own. If the build fails, the error
    reaches the caller that triggered it and every later ``get()`` raises
    :class:`TrackStoreUnavailableError` chained to it.
    """

    def __init__(self, loader: Optional[Callable[[], TrackStore]] = None, **loader_kwargs):
        if loader is None:
            loader = load_track_store
        self._loader = loader
        self._loader_kwargs = loader_kwargs
        self._lock = threading.Lock()
        self._store: Optional[TrackStore] = None
        self._error: Optional[BaseException] = None

    @property
    def is_ready(self) -> bool:
        return self._store is not None

    def get(self) -> TrackStore:
        store = self._store
        if store is not None:
            return store
        with self._lock:
            if self._store is not None:
                return self._store
            if self._error is not None:
                raise TrackStoreUnavailableError(
                    f"Track store construction failed earlier: {self._error}"
                ) from self._error
            try:
                self._store = self._loader(**self._loader_kwargs)
            except Exception as e:
                self._error = e
                raise
            return self._store
