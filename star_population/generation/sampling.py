"""Uniform sampling of positions and directions."""

import numpy as np
from typing import Optional

from ..errors import NormalizingZeroVectorError
from ..geometry import unit_vector


def random_points_in_unit_ball(rng: np.random.Generator, num_points: int) -> np.ndarray:
    """
    Uniform points inside the unit ball by rejection from the enclosing cube.

    Roughly 52% of cube samples land in the ball, so each round draws about
    twice the number still missing.

    Returns:
        Array of shape (num_points, 3)
    """
    points = np.empty((num_points, 3), dtype=np.float64)
    filled = 0
    while filled < num_points:
        missing = num_points - filled
        candidates = rng.uniform(-1.0, 1.0, size=(2 * missing + 16, 3))
        inside = candidates[np.sum(candidates**2, axis=1) <= 1.0][:missing]
        points[filled : filled + len(inside)] = inside
        filled += len(inside)
    return points


def random_points_in_sphere(
    rng: np.random.Generator,
    num_points: int,
    radius,
    center: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Uniform points inside a sphere.

    Args:
        rng: Random number generator
        num_points: Number of points
        radius: Sphere radius, or one radius per point
        center: Sphere center (origin if None)

    Returns:
        Array of shape (num_points, 3)
    """
    points = random_points_in_unit_ball(rng, num_points)
    points *= np.reshape(np.asarray(radius, dtype=np.float64), (-1, 1))
    if center is not None:
        points += center
    return points


def random_point_in_sphere(
    rng: np.random.Generator, radius: float, center: Optional[np.ndarray] = None
) -> np.ndarray:
    return random_points_in_sphere(rng, 1, radius, center)[0]


def random_direction(rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Uniformly distributed unit vector."""
    if rng is None:
        rng = np.random.default_rng()
    while True:
        try:
            return unit_vector(random_point_in_sphere(rng, 1.0))
        except NormalizingZeroVectorError:
            continue
