"""Parsing of PARSEC evolutionary track files."""

from pathlib import Path
from typing import List, Sequence, Tuple

import numpy as np

from ..config import AGE_COLUMN, LOG_L_COLUMN, LOG_R_COLUMN, LOG_TE_COLUMN, MASS_COLUMN
from ..errors import DataNotAvailableError, TrackIOError
from ..units import cm_to_solar_radii
from .grid import SORTED_MASSES, closest_mass_index
from .trajectory import Trajectory

# One parsed row: (age, mass, log L, log Te, log R)
Row = Tuple[float, float, float, float, float]

_REQUIRED_COLUMNS = max(MASS_COLUMN, AGE_COLUMN, LOG_L_COLUMN, LOG_TE_COLUMN, LOG_R_COLUMN) + 1


def _parse_row(entries: List[str], path: Path, line_number: int) -> Row:
    if len(entries) < _REQUIRED_COLUMNS:
        raise DataNotAvailableError(
            f"{path.name}:{line_number}: expected at least {_REQUIRED_COLUMNS} columns, "
            f"got {len(entries)}"
        )
    try:
        return (
            float(entries[AGE_COLUMN]),
            float(entries[MASS_COLUMN]),
            float(entries[LOG_L_COLUMN]),
            float(entries[LOG_TE_COLUMN]),
            float(entries[LOG_R_COLUMN]),
        )
    except ValueError as e:
        raise DataNotAvailableError(f"{path.name}:{line_number}: {e}") from e


def _is_number(text: str) -> bool:
    try:
        float(text)
    except ValueError:
        return False
    return True


def parse_track_file(
    path: Path, slots: List[List[Row]], masses: Sequence[float] = SORTED_MASSES
) -> None:
    """
    Append the rows of one track file to the grid slot of its nominal mass.

    Lines before the first row with a numeric mass column are header lines.
    The mass of that first row picks the slot for the whole file. Rows whose
    age does not increase past the slot's last row are dropped.

    Args:
        path: Track file
        slots: One list of rows per grid mass, modified in place
        masses: Sorted grid of masses

    Raises:
        TrackIOError: If the file cannot be read
        DataNotAvailableError: If a data row is malformed
    """
    slot = None
    try:
        with open(path, "r") as f:
            for line_number, line in enumerate(f, start=1):
                entries = line.split()
                if not entries:
                    continue
                if slot is None:
                    if len(entries) <= MASS_COLUMN or not _is_number(entries[MASS_COLUMN]):
                        continue
                    slot = slots[closest_mass_index(float(entries[MASS_COLUMN]), masses)]
                row = _parse_row(entries, path, line_number)
                if slot and row[0] <= slot[-1][0]:
                    continue
                slot.append(row)
    except OSError as e:
        raise TrackIOError(f"Could not read track file {path}: {e}") from e


def rows_to_trajectory(rows: Sequence[Row]) -> Trajectory:
    """Convert parsed rows (log quantities) into a trajectory in package units."""
    table = np.asarray(rows, dtype=np.float64)
    return Trajectory.from_solar_units(
        ages=table[:, 0],
        masses=table[:, 1],
        luminosities=10.0 ** table[:, 2],
        temperatures=10.0 ** table[:, 3],
        radii=cm_to_solar_radii(10.0 ** table[:, 4]),
    )


def parse_source_directory(
    folder: Path, masses: Sequence[float] = SORTED_MASSES
) -> List[Trajectory]:
    """
    Parse every track file in a directory into one trajectory per grid mass.

    Files are read in sorted name order so the result does not depend on the
    directory listing order.

    Raises:
        TrackIOError: If the directory or a file cannot be read
        DataNotAvailableError: If a row is malformed or a grid slot stays empty
    """
    folder = Path(folder)
    try:
        paths = sorted(p for p in folder.iterdir() if p.is_file())
    except OSError as e:
        raise TrackIOError(f"Could not list track directory {folder}: {e}") from e

    slots: List[List[Row]] = [[] for _ in masses]
    for path in paths:
        parse_track_file(path, slots, masses)

    for index, rows in enumerate(slots):
        if not rows:
            raise DataNotAvailableError(
                f"No track rows for grid mass {masses[index]} (slot {index}) in {folder}"
            )
    return [rows_to_trajectory(rows) for rows in slots]
