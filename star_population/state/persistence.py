"""HDF5 persistence: the private track cache and saved populations."""

import h5py
import numpy as np
from pathlib import Path
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from ..config import CACHE_SUFFIX, SAVE_DIRECTORY
from ..errors import CacheDeserializationError, CacheSerializationError
from ..stars.evolution import Evolution, LifestageRates
from ..stars.fate import Fate
from ..stars.snapshot import StarSnapshot
from ..stars.star import Star
from ..tracks.trajectory import Trajectory

CACHE_VERSION = "1"
_TRACK_COLUMNS = ("ages", "masses", "luminous_intensities", "temperatures", "radii")
_FATE_CODES = {Fate.WHITE_DWARF: 0, Fate.TYPE_II_SUPERNOVA: 1}
_FATES_BY_CODE = {code: fate for fate, code in _FATE_CODES.items()}


def cache_path(data_dir: Path, metallicity: str) -> Path:
    return Path(data_dir) / f"{metallicity}{CACHE_SUFFIX}"


def save_track_cache(
    filepath: Path, trajectories: Sequence[Trajectory], metallicity: str
) -> str:
    """
    Write trajectories to the binary track cache.

    Every column is stored as one flat dataset with all trajectories
    concatenated; ``offsets`` marks where each trajectory starts. Datasets
    carry no timestamps, so the same trajectories always give the same
    dataset contents.

    Args:
        filepath: Cache file to create (overwritten if present)
        trajectories: One trajectory per grid mass
        metallicity: Name of the track set

    Returns:
        Path to the saved file as a string

    Raises:
        CacheSerializationError: If the file cannot be written
    """
    lengths = np.array([len(t) for t in trajectories], dtype=np.int64)
    offsets = np.concatenate([[0], np.cumsum(lengths)]).astype(np.int64)

    try:
        with h5py.File(filepath, "w", track_order=False) as f:
            for column in _TRACK_COLUMNS:
                data = np.concatenate([getattr(t, column) for t in trajectories])
                f.create_dataset(column, data=data, dtype="float64", track_times=False)
            f.create_dataset("offsets", data=offsets, dtype="int64", track_times=False)
            f.attrs["metallicity"] = metallicity
            f.attrs["version"] = CACHE_VERSION
    except (OSError, ValueError, TypeError) as e:
        raise CacheSerializationError(f"Could not write track cache {filepath}: {e}") from e

    return str(filepath)


def load_track_cache(filepath: Path) -> Tuple[List[Trajectory], str]:
    """
    Read trajectories back from the binary track cache.

    Returns:
        Tuple of (trajectories, metallicity)

    Raises:
        CacheDeserializationError: If the file is unreadable or malformed
    """
    try:
        with h5py.File(filepath, "r") as f:
            columns = {column: f[column][:] for column in _TRACK_COLUMNS}
            offsets = f["offsets"][:]
            metallicity = str(f.attrs["metallicity"])
    except (OSError, KeyError, ValueError) as e:
        raise CacheDeserializationError(f"Could not read track cache {filepath}: {e}") from e

    total = offsets[-1] if len(offsets) else 0
    if len(offsets) < 2 or any(len(data) != total for data in columns.values()):
        raise CacheDeserializationError(f"Track cache {filepath} has inconsistent lengths")

    trajectories = []
    for start, end in zip(offsets[:-1], offsets[1:]):
        trajectories.append(
            Trajectory(**{column: data[start:end] for column, data in columns.items()})
        )
    return trajectories, metallicity


def generate_save_filename() -> str:
    """Generate a save filename with timestamp in YYYYMMDD-HHMMSS format."""
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    return f"population_{timestamp}.h5"


def ensure_save_directory(base_path: Optional[Path] = None) -> Path:
    """Ensure the save directory exists and return its path."""
    if base_path is None:
        save_dir = Path(SAVE_DIRECTORY)
    else:
        save_dir = base_path / SAVE_DIRECTORY

    save_dir.mkdir(parents=True, exist_ok=True)
    return save_dir


def _optional(values) -> np.ndarray:
    return np.array([np.nan if v is None else v for v in values], dtype="float64")


def _from_optional(value: float) -> Optional[float]:
    return None if np.isnan(value) else float(value)


def save_population(filepath: Path, stars: Sequence[Star]) -> str:
    """
    Save a generated population to an HDF5 file.

    Missing values (unknown mass, radius or age) are stored as NaN.

    Args:
        filepath: Path to save the file
        stars: Stars to save

    Returns:
        Path to the saved file as a string
    """
    snapshots = [s.snapshot for s in stars]
    evolutions = [s.evolution for s in stars]
    num_stars = len(stars)
    rates = np.zeros((num_stars, 4), dtype="float64")
    has_rates = np.zeros(num_stars, dtype=bool)
    for i, evolution in enumerate(evolutions):
        if evolution.lifestage_rates is not None:
            has_rates[i] = True
            r = evolution.lifestage_rates
            rates[i] = (
                r.mass_per_year,
                r.radius_per_year,
                r.luminous_intensity_per_year,
                r.temperature_per_year,
            )
    string_dtype = h5py.string_dtype()

    with h5py.File(filepath, "w") as f:
        stars_grp = f.create_group("stars")
        evolution_grp = f.create_group("evolution")

        stars_grp.create_dataset(
            "positions", data=np.reshape([s.position for s in snapshots], (num_stars, 3)),
            dtype="float64",
        )
        stars_grp.create_dataset("masses", data=_optional(s.mass for s in snapshots))
        stars_grp.create_dataset("radii", data=_optional(s.radius for s in snapshots))
        stars_grp.create_dataset(
            "luminous_intensities",
            data=np.array([s.luminous_intensity for s in snapshots], dtype="float64"),
        )
        stars_grp.create_dataset(
            "temperatures", data=np.array([s.temperature for s in snapshots], dtype="float64")
        )
        stars_grp.create_dataset("ages", data=_optional(s.age for s in snapshots))
        stars_grp.create_dataset(
            "names", data=np.array([s.name for s in snapshots], dtype=object), dtype=string_dtype
        )
        stars_grp.create_dataset(
            "constellations",
            data=np.array([s.constellation or "" for s in snapshots], dtype=object),
            dtype=string_dtype,
        )

        evolution_grp.create_dataset("has_rates", data=has_rates)
        evolution_grp.create_dataset("rates", data=rates)
        evolution_grp.create_dataset(
            "ages_at_epoch", data=_optional(e.age_at_epoch for e in evolutions)
        )
        evolution_grp.create_dataset(
            "lifetimes", data=np.array([e.lifetime for e in evolutions], dtype="float64")
        )
        evolution_grp.create_dataset(
            "fates", data=np.array([_FATE_CODES[e.fate] for e in evolutions], dtype="int8")
        )

        f.attrs["version"] = "1.0"
        f.attrs["created"] = datetime.now().isoformat()
        f.attrs["num_stars"] = num_stars

    return str(filepath)


def load_population(filepath: Path) -> List[Star]:
    """
    Load a population saved with :func:`save_population`.

    Args:
        filepath: Path to the HDF5 file

    Returns:
        List of stars in the order they were saved
    """
    with h5py.File(filepath, "r") as f:
        positions = f["stars/positions"][:]
        masses = f["stars/masses"][:]
        radii = f["stars/radii"][:]
        luminous_intensities = f["stars/luminous_intensities"][:]
        temperatures = f["stars/temperatures"][:]
        ages = f["stars/ages"][:]
        names = f["stars/names"].asstr()[:]
        constellations = f["stars/constellations"].asstr()[:]

        has_rates = f["evolution/has_rates"][:]
        rates = f["evolution/rates"][:]
        ages_at_epoch = f["evolution/ages_at_epoch"][:]
        lifetimes = f["evolution/lifetimes"][:]
        fates = f["evolution/fates"][:]

    stars = []
    for i in range(len(luminous_intensities)):
        snapshot = StarSnapshot(
            mass=_from_optional(masses[i]),
            radius=_from_optional(radii[i]),
            luminous_intensity=float(luminous_intensities[i]),
            temperature=float(temperatures[i]),
            position=positions[i].copy(),
            age=_from_optional(ages[i]),
            name=str(names[i]),
            constellation=str(constellations[i]) or None,
        )
        lifestage_rates = LifestageRates(*map(float, rates[i])) if has_rates[i] else None
        evolution = Evolution(
            lifestage_rates=lifestage_rates,
            age_at_epoch=_from_optional(ages_at_epoch[i]),
            lifetime=float(lifetimes[i]),
            fate=_FATES_BY_CODE[int(fates[i])],
        )
        stars.append(Star(snapshot, evolution))
    return stars
