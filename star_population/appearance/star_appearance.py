"""How a star looks from the origin."""

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

# Stars closer than this on the sky are treated as one point
SAME_DIRECTION_TOLERANCE = np.radians(0.03)
SAME_ILLUMINANCE_FACTOR = 10.0


@dataclass(frozen=True)
class StarAppearance:
    """
    Observable appearance of a star at a given time.

    Attributes:
        name: Display name
        illuminance: Lux at the origin
        color: sRGB in 0-1 range
        direction: Unit vector from the origin toward the star
        time_since_epoch: Years
    """

    name: str
    illuminance: float
    color: Tuple[float, float, float]
    direction: np.ndarray = field(compare=False)
    time_since_epoch: float = 0.0

    def apparently_the_same(self, other: "StarAppearance") -> bool:
        """Whether two appearances are indistinguishable to a casual observer."""
        if self.name != other.name:
            return False
        cos_angle = np.clip(np.dot(self.direction, other.direction), -1.0, 1.0)
        if np.arccos(cos_angle) > SAME_DIRECTION_TOLERANCE:
            return False
        if other.illuminance <= 0 or self.illuminance <= 0:
            return self.illuminance == other.illuminance
        ratio = self.illuminance / other.illuminance
        return 1.0 / SAME_ILLUMINANCE_FACTOR <= ratio <= SAME_ILLUMINANCE_FACTOR
