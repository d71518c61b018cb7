"""One evolutionary track: a star of fixed initial mass, sampled over its life."""

from typing import Optional

import numpy as np

from ..errors import DataNotAvailableError
from ..geometry import ORIGIN, as_position
from ..stars.evolution import Evolution, LifestageRates
from ..stars.fate import (
    SUPERNOVA_PEAK_LUMINOUS_INTENSITY,
    WHITE_DWARF_LUMINOUS_INTENSITY,
    Fate,
)
from ..stars.snapshot import StarSnapshot
from ..stars.star import Star
from ..units import SOLAR_LUMINOUS_INTENSITY


def _this_or_next(ages: np.ndarray, index: int, age: float) -> int:
    if age - ages[index] <= ages[index + 1] - age:
        return index
    return index + 1


def closest_age_index(ages: np.ndarray, age: float) -> int:
    """
    Index of the tabulated age closest to ``age``.

    Exponential search from the start of the track: stars spend most of
    their life early in the table, and late ages are sparse. Ties go to the
    earlier index. Ages outside the table map to the first or last index.

    Args:
        ages: Strictly increasing ages in years
        age: Query age in years

    Returns:
        Index into ``ages``
    """
    n = len(ages)
    if n == 1:
        return 0
    if age < ages[0]:
        return _this_or_next(ages, 0, age)

    index = 1
    while ages[index] < age:
        index *= 2
        if index >= n - 1:
            break
    index = min(index, n - 2)
    while ages[index] > age:
        index -= 1
    return _this_or_next(ages, index, age)


class Trajectory:
    """
    Tabulated life of a star of one initial mass.

    Columns are parallel float64 arrays ordered by strictly increasing age.
    """

    def __init__(
        self,
        ages: np.ndarray,
        masses: np.ndarray,
        luminous_intensities: np.ndarray,
        temperatures: np.ndarray,
        radii: np.ndarray,
    ):
        self.ages = np.asarray(ages, dtype=np.float64)
        self.masses = np.asarray(masses, dtype=np.float64)
        self.luminous_intensities = np.asarray(luminous_intensities, dtype=np.float64)
        self.temperatures = np.asarray(temperatures, dtype=np.float64)
        self.radii = np.asarray(radii, dtype=np.float64)

        if len(self.ages) == 0:
            raise DataNotAvailableError("Evolutionary track has no rows")
        lengths = {
            len(column)
            for column in (
                self.masses,
                self.luminous_intensities,
                self.temperatures,
                self.radii,
            )
        }
        if lengths != {len(self.ages)}:
            raise DataNotAvailableError("Evolutionary track columns differ in length")
        if np.any(np.diff(self.ages) <= 0):
            raise DataNotAvailableError("Evolutionary track ages are not strictly increasing")

        self.initial_mass = float(self.masses[0])
        self.lifetime = float(self.ages[-1])
        self.fate = Fate.from_initial_mass(self.initial_mass)
        self.peak_lifetime_luminous_intensity = self._peak_luminous_intensity()

    @classmethod
    def from_solar_units(cls, ages, masses, luminosities, temperatures, radii) -> "Trajectory":
        """Build a trajectory from luminosities in solar units."""
        return cls(
            ages,
            masses,
            np.asarray(luminosities, dtype=np.float64) * SOLAR_LUMINOUS_INTENSITY,
            temperatures,
            radii,
        )

    def _peak_luminous_intensity(self) -> float:
        # Upper bound on the luminous intensity over the whole life, remnant included
        brightest_alive = float(self.luminous_intensities.max())
        if self.fate is Fate.TYPE_II_SUPERNOVA:
            return max(brightest_alive, SUPERNOVA_PEAK_LUMINOUS_INTENSITY)
        return max(brightest_alive, WHITE_DWARF_LUMINOUS_INTENSITY)

    def __len__(self) -> int:
        return len(self.ages)

    def __repr__(self) -> str:
        return (
            f"Trajectory(initial_mass={self.initial_mass}, rows={len(self)}, "
            f"lifetime={self.lifetime:.4g})"
        )

    def closest_age_index(self, age: float) -> int:
        return closest_age_index(self.ages, age)

    def snapshot_at_index(self, index: int, position: np.ndarray) -> StarSnapshot:
        return StarSnapshot(
            mass=float(self.masses[index]),
            radius=float(self.radii[index]),
            luminous_intensity=float(self.luminous_intensities[index]),
            temperature=float(self.temperatures[index]),
            position=position,
            age=float(self.ages[index]),
        )

    def to_star(self, age: float, position: Optional[np.ndarray] = None) -> Star:
        """
        Star of this track at a given age and position.

        The base snapshot is the tabulated row closest to ``age``. The
        lifestage rates come from that row and its neighbour: the next row
        for the first row, the previous row otherwise.

        Args:
            age: Age in years
            position: Position in light years (defaults to the origin)

        Returns:
            Star whose evolution starts at ``age``
        """
        position = ORIGIN.copy() if position is None else as_position(position)
        index = self.closest_age_index(age)
        now = self.snapshot_at_index(index, position)

        if len(self) == 1:
            rates = None
        else:
            other_index = index + 1 if index == 0 else index - 1
            then = self.snapshot_at_index(other_index, position)
            rates = LifestageRates.between(now, then, now.age - then.age)

        evolution = Evolution(rates, age, self.lifetime, self.fate)
        return Star(now.replace(age=age), evolution)
