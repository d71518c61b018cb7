"""Physical state of a star at one instant."""

import dataclasses
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from ..units import luminous_intensity_to_illuminance


@dataclass(frozen=True)
class StarSnapshot:
    """
    Instantaneous state of a star.

    Attributes:
        mass: Solar masses, ``None`` when unknown
        radius: Solar radii, ``None`` when unknown
        luminous_intensity: Candela
        temperature: Kelvin
        position: Heliocentric position in light years, shape (3,)
        age: Years, ``None`` when unknown
        name: Display name, empty for generated stars
        constellation: Constellation name, if any
    """

    mass: Optional[float]
    radius: Optional[float]
    luminous_intensity: float
    temperature: float
    position: np.ndarray = field(compare=False)
    age: Optional[float] = None
    name: str = ""
    constellation: Optional[str] = None

    @property
    def distance(self) -> float:
        return float(np.linalg.norm(self.position))

    @property
    def illuminance(self) -> float:
        """Illuminance at the origin in lux."""
        return float(luminous_intensity_to_illuminance(self.luminous_intensity, self.distance))

    def replace(self, **changes) -> "StarSnapshot":
        return dataclasses.replace(self, **changes)
