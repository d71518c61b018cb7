"""Star generation regions: the old field population and star nurseries."""

from dataclasses import dataclass

import numpy as np

from ..config import (
    AGE_OF_MILKY_WAY_THIN_DISK,
    DEATH_VISIBILITY_WINDOW,
    DIMMEST_ILLUMINANCE,
    NUMBER_OF_STARS_FORMED_IN_NURSERY,
    NURSERY_LIFETIME,
    STARS_PER_LY_CUBED,
    STELLAR_VELOCITY,
)
from ..geometry import as_position
from ..stars.fate import SUPERNOVA_PEAK_LUMINOUS_INTENSITY, WHITE_DWARF_LUMINOUS_INTENSITY, Fate
from ..units import meters_per_second_to_ly_per_year, visibility_distance
from .imf import AliasSampler
from .sampling import random_points_in_sphere


def number_in_sphere(density: float, radius: float) -> float:
    """Expected number of objects in a sphere of ``radius`` light years."""
    return density * 4.0 / 3.0 * np.pi * radius**3


def most_luminous_intensity_possible(store, max_age: float, min_age: float) -> float:
    """
    Brightest luminous intensity any star with an age in [min_age, max_age] can have.

    Stars that die within the age window count with their remnant: a
    supernova for massive progenitors, a white dwarf otherwise.

    Args:
        store: Track store
        max_age: Oldest age in years
        min_age: Youngest age in years (negative ages are unborn)

    Returns:
        Luminous intensity in candela (0 if no star can be alive or freshly dead)
    """
    youngest = max(min_age, 0.0)
    brightest = 0.0
    if max_age < youngest:
        return brightest
    for trajectory in store.trajectories:
        if youngest > trajectory.lifetime + DEATH_VISIBILITY_WINDOW:
            continue
        if youngest <= trajectory.lifetime:
            first = trajectory.closest_age_index(youngest)
            last = trajectory.closest_age_index(min(max_age, trajectory.lifetime))
            alive = trajectory.luminous_intensities[first : last + 1].max()
            brightest = max(brightest, float(alive))
        if max_age > trajectory.lifetime:
            if trajectory.fate is Fate.TYPE_II_SUPERNOVA:
                # The light curve starts from the progenitor's last row
                remnant = max(
                    SUPERNOVA_PEAK_LUMINOUS_INTENSITY,
                    float(trajectory.luminous_intensities[-1]),
                )
            else:
                remnant = WHITE_DWARF_LUMINOUS_INTENSITY
            brightest = max(brightest, remnant)
    return brightest


@dataclass
class CandidatePlan:
    """
    Per mass index sampling parameters of a region.

    Mass index ``i`` is sampled uniformly in a sphere of ``radii[i]`` around
    ``center`` with ages uniform in ``[min_age, max_ages[i]]``. Parts of the
    region where a star of that mass could never be visible are left out,
    and ``expected`` is reduced by the same fraction, so the density of
    potentially visible stars is unchanged.
    """

    center: np.ndarray
    expected: np.ndarray
    radii: np.ndarray
    min_age: float
    max_ages: np.ndarray

    @property
    def expected_count(self) -> float:
        return float(self.expected.sum())

    def draw_count(self, rng: np.random.Generator) -> int:
        """Expected count rounded up or down at random, keeping its mean."""
        total = self.expected_count
        whole = int(np.floor(total))
        return whole + int(rng.random() < total - whole)

    def sample(self, rng: np.random.Generator, count: int):
        """
        Draw candidate stars.

        Returns:
            Tuple of (mass indices, ages, positions of shape (count, 3))
        """
        if count == 0 or self.expected_count <= 0:
            return np.zeros(0, dtype=int), np.zeros(0), np.zeros((0, 3))
        indices = AliasSampler(self.expected).sample(rng, count)
        ages = self.min_age + rng.random(count) * (self.max_ages[indices] - self.min_age)
        positions = random_points_in_sphere(rng, count, self.radii[indices], self.center)
        return indices, ages, positions


class GenerationRegion:
    """
    A sphere in which stars of a common age range are born.

    Attributes:
        center: Center in light years
        radius: Radius in light years
        min_age: Youngest star age in years (negative ages are not yet born)
        max_age: Oldest star age in years
        number: Expected number of stars in the sphere
    """

    def __init__(
        self,
        center,
        radius: float,
        min_age: float,
        max_age: float,
        number: float,
        kind: str,
    ):
        self.center = as_position(center)
        self.radius = float(radius)
        self.min_age = float(min_age)
        self.max_age = float(max_age)
        self.number = float(number)
        self.kind = kind

    @classmethod
    def old_stars(cls, max_distance: float) -> "GenerationRegion":
        """Field stars around the origin with ages spread over the whole disk age."""
        return cls(
            center=np.zeros(3),
            radius=max_distance,
            min_age=0.0,
            max_age=AGE_OF_MILKY_WAY_THIN_DISK,
            number=number_in_sphere(STARS_PER_LY_CUBED, max_distance),
            kind="old",
        )

    @classmethod
    def nursery(cls, center, max_age: float) -> "GenerationRegion":
        """
        Stars formed in one star forming region.

        Star formation started ``max_age`` years ago and lasted
        ``NURSERY_LIFETIME`` years; since then the stars have dispersed at
        ``STELLAR_VELOCITY``.
        """
        return cls(
            center=center,
            radius=meters_per_second_to_ly_per_year(STELLAR_VELOCITY) * max_age,
            min_age=max_age - NURSERY_LIFETIME,
            max_age=max_age,
            number=NUMBER_OF_STARS_FORMED_IN_NURSERY,
            kind="nursery",
        )

    def __repr__(self) -> str:
        return (
            f"GenerationRegion(kind={self.kind!r}, center={self.center.tolist()}, "
            f"radius={self.radius:.4g}, ages=[{self.min_age:.4g}, {self.max_age:.4g}], "
            f"number={self.number:.4g})"
        )

    @property
    def distance_to_origin(self) -> float:
        return float(np.linalg.norm(self.center))

    def adjust_radius_for_performance(
        self, store, dimmest_illuminance: float = DIMMEST_ILLUMINANCE
    ) -> None:
        """
        Shrink the region to the part where its brightest possible star is visible.

        The star count shrinks with the volume, keeping the density.
        """
        brightest = most_luminous_intensity_possible(store, self.max_age, self.min_age)
        required_distance = float(visibility_distance(brightest, dimmest_illuminance))
        original_radius = self.radius
        if self.distance_to_origin - self.radius > required_distance:
            self.radius = 0.0
        else:
            self.radius = min(self.radius, self.distance_to_origin + required_distance)

        if self.radius < original_radius:
            self.number *= (self.radius / original_radius) ** 3

    def candidate_plan(
        self,
        store,
        weights: np.ndarray,
        max_distance: float,
        dimmest_illuminance: float = DIMMEST_ILLUMINANCE,
    ) -> CandidatePlan:
        """
        Thin the region per mass index to the candidates that can be visible.

        For mass index ``i`` only stars within the distance at which its peak
        lifetime luminous intensity is visible (and within ``max_distance``)
        of the origin, and only ages before it has been dead for the death
        visibility window, can ever pass the visibility check.

        Args:
            store: Track store
            weights: Birth probability of each mass index
            max_distance: Radius of the requested sphere around the origin
            dimmest_illuminance: Visibility threshold in lux

        Returns:
            The sampling plan
        """
        weights = np.asarray(weights, dtype=np.float64)
        probabilities = weights / weights.sum()
        num_masses = len(probabilities)

        if self.radius <= 0 or self.number <= 0:
            zeros = np.zeros(num_masses)
            return CandidatePlan(self.center, zeros, zeros, 0.0, zeros)

        reach = np.minimum(
            visibility_distance(store.peak_luminous_intensities, dimmest_illuminance),
            max_distance,
        )
        d0 = self.distance_to_origin
        radii = np.minimum(self.radius, d0 + reach)
        radii[d0 - self.radius > reach] = 0.0

        youngest = max(self.min_age, 0.0)
        oldest = np.minimum(self.max_age, store.lifetimes + DEATH_VISIBILITY_WINDOW)
        age_span = self.max_age - self.min_age
        if age_span > 0:
            age_fraction = np.clip(oldest - youngest, 0.0, None) / age_span
        else:
            age_fraction = (oldest >= youngest).astype(np.float64)

        volume_fraction = (radii / self.radius) ** 3
        expected = self.number * probabilities * age_fraction * volume_fraction
        max_ages = np.maximum(oldest, youngest)
        return CandidatePlan(self.center, expected, radii, youngest, max_ages)
