"""Kroupa initial mass function over the track mass grid."""

import numpy as np
from typing import Optional, Sequence

from ..config import (
    IMF_INTEGRATION_STEP,
    IMF_UPPER_MASS_BOUND,
    KROUPA_NORMALIZATION,
    MIN_MASS_FOR_HYDROGEN_FUSION,
)


def kroupa_mass_distribution(masses) -> np.ndarray:
    """
    Kroupa (2001) initial mass function, normalized to unit integral.

    https://en.wikipedia.org/wiki/Initial_mass_function

    Broken power law ξ(M) ∝ M^(-α) with
        α = 1.3 for 0.08 <= M <= 0.5 M☉
        α = 2.3 for 0.5 < M <= 1 M☉
        α = 2.7 for 1 < M <= 20 M☉
        α = 5.0 for M > 20 M☉ (steepened high-mass tail)
    Prefactors keep the function continuous at every break. Brown dwarfs
    (M < 0.08) have zero density.

    Args:
        masses: Mass(es) in solar masses

    Returns:
        Probability density per solar mass
    """
    m = np.asarray(masses, dtype=np.float64)
    safe_m = np.maximum(m, MIN_MASS_FOR_HYDROGEN_FUSION)

    alpha = np.select([m <= 0.5, m <= 1.0, m <= 20.0], [1.3, 2.3, 2.7], default=5.0)
    prefactor = np.select(
        [m <= 0.5, m <= 20.0],
        [0.5**-2.3 / 0.5**-1.3, 1.0],
        default=20.0**-2.7 / 20.0**-5.0,
    )
    density = prefactor * safe_m**-alpha * KROUPA_NORMALIZATION
    return np.where(m < MIN_MASS_FOR_HYDROGEN_FUSION, 0.0, density)


def integrate_kroupa(lower: float, upper: float, step: float = IMF_INTEGRATION_STEP) -> float:
    """
    Integrate the Kroupa IMF with the left rectangle rule.

    Args:
        lower: Lower mass bound (solar masses)
        upper: Upper mass bound (solar masses)
        step: Rectangle width; the last rectangle is cut at ``upper``

    Returns:
        Fraction of stars born with a mass in [lower, upper)
    """
    if upper <= lower:
        return 0.0
    num_full = int(np.floor((upper - lower) / step))
    x = lower + step * np.arange(num_full)
    integral = float(np.sum(kroupa_mass_distribution(x)) * step)
    last_x = lower + step * num_full
    remainder = upper - last_x
    if remainder > 0:
        integral += float(kroupa_mass_distribution(last_x)) * remainder
    return integral


def geometric_mean(a: float, b: float) -> float:
    return float(np.sqrt(a * b))


def kroupa_weights(masses: Sequence[float]) -> np.ndarray:
    """
    Birth probability of each grid mass.

    Each grid mass stands for the masses between the geometric means with
    its neighbours. The first slot starts at zero, the last ends at
    ``IMF_UPPER_MASS_BOUND``.

    Args:
        masses: Sorted grid of masses

    Returns:
        Array of weights, one per grid mass
    """
    weights = np.empty(len(masses), dtype=np.float64)
    for i in range(len(masses)):
        lower = 0.0 if i == 0 else geometric_mean(masses[i - 1], masses[i])
        if i == len(masses) - 1:
            upper = IMF_UPPER_MASS_BOUND
        else:
            upper = geometric_mean(masses[i], masses[i + 1])
        weights[i] = integrate_kroupa(lower, upper)
    return weights


class AliasSampler:
    """
    Discrete distribution sampled with Vose's alias method.

    https://en.wikipedia.org/wiki/Alias_method

    Building the tables is O(n); every draw afterwards is O(1).
    """

    def __init__(self, weights):
        weights = np.asarray(weights, dtype=np.float64)
        if weights.ndim != 1 or len(weights) == 0:
            raise ValueError("Weights must be a non-empty 1-d sequence")
        if not np.all(np.isfinite(weights)) or np.any(weights < 0):
            raise ValueError("Weights must be finite and non-negative")
        total = weights.sum()
        if total <= 0:
            raise ValueError("Weights must not all be zero")

        n = len(weights)
        self.weights = weights
        self.probabilities = weights / total
        scaled = self.probabilities * n
        self._accept = np.ones(n, dtype=np.float64)
        self._alias = np.arange(n)

        small = [i for i in range(n) if scaled[i] < 1.0]
        large = [i for i in range(n) if scaled[i] >= 1.0]
        while small and large:
            s = small.pop()
            l = large.pop()
            self._accept[s] = scaled[s]
            self._alias[s] = l
            scaled[l] = scaled[l] + scaled[s] - 1.0
            if scaled[l] < 1.0:
                small.append(l)
            else:
                large.append(l)
        # Leftovers are 1 up to rounding and keep their own column

    def __len__(self) -> int:
        return len(self._accept)

    def sample(self, rng: np.random.Generator, size: Optional[int] = None):
        """
        Draw indices.

        Args:
            rng: Random number generator
            size: Number of draws, or None for a single int

        Returns:
            An int if ``size`` is None, else an int array of shape (size,)
        """
        if size is None:
            column = int(rng.integers(len(self)))
            if rng.random() < self._accept[column]:
                return column
            return int(self._alias[column])

        columns = rng.integers(len(self), size=size)
        accept = rng.random(size) < self._accept[columns]
        return np.where(accept, columns, self._alias[columns])


def mass_index_distribution(masses: Sequence[float]) -> AliasSampler:
    """Alias sampler drawing grid mass indices with Kroupa birth probabilities."""
    return AliasSampler(kroupa_weights(masses))
