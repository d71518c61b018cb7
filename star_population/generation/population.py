"""Generation of visible random star populations."""

import multiprocessing
from typing import List, Optional

import numpy as np

from ..config import (
    AGE_OF_MILKY_WAY_THIN_DISK,
    DEATH_VISIBILITY_WINDOW,
    DIMMEST_ILLUMINANCE,
    NUM_WORKERS,
    NURSERIES_PER_LY_CUBED,
)
from ..geometry import ORIGIN, as_position
from ..stars.star import Star
from ..units import METERS_PER_LIGHT_YEAR, min_visible_luminous_intensity
from .imf import kroupa_weights, mass_index_distribution
from .regions import GenerationRegion, number_in_sphere
from .sampling import random_point_in_sphere, random_points_in_sphere

# Upper bound on candidates held in memory at once
CANDIDATE_BATCH_SIZE = 1_000_000
ONE_METER_IN_LY = 1.0 / METERS_PER_LIGHT_YEAR


def star_if_visible(
    store,
    mass_index: int,
    age: float,
    position,
    dimmest_illuminance: float = DIMMEST_ILLUMINANCE,
) -> Optional[Star]:
    """
    The star of a given mass index, age and position, if it is visible.

    Unborn stars and stars dead for longer than the death visibility window
    are excluded, as are stars whose brightest possible state cannot reach
    the threshold at their distance. The rest are materialized and kept if
    their illuminance at the epoch reaches ``dimmest_illuminance``.

    Args:
        store: Track store
        mass_index: Index into the mass grid
        age: Age in years
        position: Position in light years

    Returns:
        The star, or None if it is not visible
    """
    if age < 0:
        return None
    trajectory = store.get_trajectory(mass_index)
    if age > trajectory.lifetime + DEATH_VISIBILITY_WINDOW:
        return None
    position = as_position(position)
    distance = float(np.linalg.norm(position))
    threshold = min_visible_luminous_intensity(distance, dimmest_illuminance)
    if trajectory.peak_lifetime_luminous_intensity < threshold:
        return None

    star = trajectory.to_star(age, position)
    if not star.is_visible(0.0, dimmest_illuminance):
        return None
    return star


def _possibly_visible(store, indices, ages, positions, max_distance, dimmest_illuminance):
    # Vectorized version of the cheap rejections in star_if_visible
    distances = np.linalg.norm(positions, axis=1)
    keep = (ages >= 0) & (ages <= store.lifetimes[indices] + DEATH_VISIBILITY_WINDOW)
    keep &= store.peak_luminous_intensities[indices] >= min_visible_luminous_intensity(
        distances, dimmest_illuminance
    )
    if max_distance is not None:
        keep &= distances <= max_distance
    return np.flatnonzero(keep)


def _visible_stars(store, indices, ages, positions, max_distance, dimmest_illuminance) -> List[Star]:
    stars = []
    for i in _possibly_visible(store, indices, ages, positions, max_distance, dimmest_illuminance):
        star = star_if_visible(
            store, int(indices[i]), float(ages[i]), positions[i], dimmest_illuminance
        )
        if star is not None:
            stars.append(star)
    return stars


def generate_stars_in_region(
    store,
    region: GenerationRegion,
    weights: np.ndarray,
    max_distance: float,
    rng: Optional[np.random.Generator] = None,
    dimmest_illuminance: float = DIMMEST_ILLUMINANCE,
) -> List[Star]:
    """
    Visible stars of one generation region.

    Args:
        store: Track store
        region: Region to populate
        weights: Birth probability of each mass index
        max_distance: Stars farther from the origin are discarded
        rng: Random number generator (created if None)
        dimmest_illuminance: Visibility threshold in lux

    Returns:
        List of visible stars
    """
    if rng is None:
        rng = np.random.default_rng()

    region.adjust_radius_for_performance(store, dimmest_illuminance)
    plan = region.candidate_plan(store, weights, max_distance, dimmest_illuminance)
    remaining = plan.draw_count(rng)

    stars = []
    while remaining > 0:
        batch = min(remaining, CANDIDATE_BATCH_SIZE)
        indices, ages, positions = plan.sample(rng, batch)
        stars.extend(
            _visible_stars(store, indices, ages, positions, max_distance, dimmest_illuminance)
        )
        remaining -= batch
    return stars


def generation_regions(
    max_distance: float, rng: Optional[np.random.Generator] = None
) -> List[GenerationRegion]:
    """
    The old field population plus the nurseries within ``max_distance``.

    Nursery centers are uniform in the requested sphere, and their ages
    uniform over the age of the disk.
    """
    if rng is None:
        rng = np.random.default_rng()

    num_nurseries = int(number_in_sphere(NURSERIES_PER_LY_CUBED, max_distance))
    regions = [GenerationRegion.old_stars(max_distance)]
    for _ in range(num_nurseries):
        center = random_point_in_sphere(rng, max_distance)
        max_age = rng.uniform(0.0, AGE_OF_MILKY_WAY_THIN_DISK)
        regions.append(GenerationRegion.nursery(center, max_age))
    return regions


# Per-process state for pool workers, set once by _init_worker
_worker_store = None
_worker_weights = None


def _init_worker(store, weights) -> None:
    global _worker_store, _worker_weights
    _worker_store = store
    _worker_weights = weights


def _generate_in_worker(region, seed, max_distance, dimmest_illuminance) -> List[Star]:
    return generate_stars_in_region(
        _worker_store,
        region,
        _worker_weights,
        max_distance,
        np.random.default_rng(seed),
        dimmest_illuminance,
    )


def generate_population(
    store,
    max_distance: float,
    rng: Optional[np.random.Generator] = None,
    workers: int = NUM_WORKERS,
    dimmest_illuminance: float = DIMMEST_ILLUMINANCE,
    verbose: bool = True,
) -> List[Star]:
    """
    Generate every star visible from the origin within ``max_distance``.

    The population is the old field population plus one region per star
    nursery. Regions are independent and are generated in parallel when
    ``workers`` > 1, each with its own child seed, so a seeded run gives the
    same multiset of stars for any worker count.

    Args:
        store: Track store
        max_distance: Radius of the volume in light years
        rng: Random number generator (created if None)
        workers: Number of worker processes
        dimmest_illuminance: Visibility threshold in lux
        verbose: Print progress

    Returns:
        List of visible stars (unordered)
    """
    if max_distance < 0:
        raise ValueError(f"max_distance must be non-negative, got {max_distance}")
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")
    if rng is None:
        rng = np.random.default_rng()

    weights = kroupa_weights(store.get_masses())
    regions = generation_regions(max_distance, rng)
    seeds = np.random.SeedSequence(int(rng.integers(2**63))).spawn(len(regions))
    if verbose:
        print(f"\tGenerating stars within {max_distance:g} ly")
        print(f"\tNumber of star forming regions: {len(regions) - 1}")

    tasks = [(region, seed, max_distance, dimmest_illuminance) for region, seed in zip(regions, seeds)]
    if workers > 1 and len(regions) > 1:
        with multiprocessing.Pool(
            processes=workers, initializer=_init_worker, initargs=(store, weights)
        ) as pool:
            results = pool.starmap(_generate_in_worker, tasks)
    else:
        results = [
            generate_stars_in_region(
                store, region, weights, max_distance, np.random.default_rng(seed), dimmest
            )
            for region, seed, _, dimmest in tasks
        ]

    stars = [star for region_stars in results for star in region_stars]
    if verbose:
        print(f"\tGenerated {len(stars)} visible stars")
    return stars


def generate_one_star(
    store,
    max_distance: Optional[float] = None,
    rng: Optional[np.random.Generator] = None,
    dimmest_illuminance: float = DIMMEST_ILLUMINANCE,
    batch_size: int = 1024,
) -> Star:
    """
    Draw random stars until one is visible.

    Masses follow the Kroupa IMF, ages are uniform over the age of the disk
    and positions uniform within ``max_distance``. Without ``max_distance``
    the star is drawn within one meter and then placed at the origin.

    Args:
        store: Track store
        max_distance: Radius of the volume in light years
        rng: Random number generator (created if None)
        dimmest_illuminance: Visibility threshold in lux
        batch_size: Candidates drawn per round

    Returns:
        A visible star
    """
    if rng is None:
        rng = np.random.default_rng()
    radius = ONE_METER_IN_LY if max_distance is None else max_distance
    sampler = mass_index_distribution(store.get_masses())

    while True:
        indices = sampler.sample(rng, batch_size)
        ages = rng.uniform(0.0, AGE_OF_MILKY_WAY_THIN_DISK, batch_size)
        positions = random_points_in_sphere(rng, batch_size, radius)
        stars = _visible_stars(store, indices, ages, positions, radius, dimmest_illuminance)
        if stars:
            star = stars[0]
            if max_distance is None:
                star = Star(star.snapshot.replace(position=ORIGIN.copy()), star.evolution)
            return star
