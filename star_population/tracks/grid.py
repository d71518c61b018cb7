"""Initial mass grid of the PARSEC evolutionary tracks."""

from typing import Sequence

# Solar masses, one evolutionary track per entry
SORTED_MASSES = (
    0.09, 0.10, 0.12, 0.14, 0.16, 0.20, 0.25, 0.30, 0.35, 0.40,
    0.45, 0.50, 0.55, 0.60, 0.65, 0.70, 0.75, 0.80, 0.85, 0.90,
    0.95, 1.00, 1.05, 1.10, 1.15, 1.20, 1.25, 1.30, 1.35, 1.40,
    1.45, 1.50, 1.55, 1.60, 1.65, 1.70, 1.75, 1.80, 1.85, 1.90,
    1.95, 2.00, 2.05, 2.10, 2.15, 2.20, 2.25, 2.30, 2.40, 2.60,
    2.80, 3.00, 3.20, 3.40, 3.60, 3.80, 4.00, 4.20, 4.40, 4.60,
    4.80, 5.00, 5.20, 5.40, 5.60, 5.80, 6.00, 6.20, 6.40, 7.00,
    8.00, 9.00, 10.0, 12.0, 14.0, 16.0, 18.0, 20.0, 24.0, 28.0,
    30.0, 35.0, 40.0, 45.0, 50.0, 55.0, 60.0, 65.0, 70.0, 75.0,
    80.0, 90.0, 95.0, 100.0, 120.0, 130.0, 200.0, 250.0, 300.0, 350.0,
)


def closest_mass_index(mass: float, masses: Sequence[float] = SORTED_MASSES) -> int:
    """
    Map a mass onto the index of the nearest grid mass.

    Binary search for the two grid masses bracketing ``mass``, then pick
    the numerically closer one. Ties go to the lower index. Masses outside
    the grid map to the first or last index.

    Args:
        mass: Mass in solar masses
        masses: Sorted grid of masses

    Returns:
        Index into ``masses``
    """
    min_index = 0
    max_index = len(masses) - 1
    while max_index - min_index > 1:
        mid_index = (max_index + min_index) // 2
        if mass > masses[mid_index]:
            min_index = mid_index
        else:
            max_index = mid_index

    if abs(mass - masses[min_index]) <= abs(mass - masses[max_index]):
        return min_index
    return max_index
