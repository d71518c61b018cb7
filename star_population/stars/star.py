"""A star: a base snapshot plus how it evolves."""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..appearance.colors import temperature_to_color
from ..appearance.star_appearance import StarAppearance
from ..config import DIMMEST_ILLUMINANCE
from ..errors import NormalizingZeroVectorError
from ..geometry import X_DIRECTION, as_position, unit_vector
from ..units import luminous_intensity_to_illuminance
from .evolution import Evolution
from .fate import Fate
from .snapshot import StarSnapshot


@dataclass(frozen=True)
class Star:
    """
    A star as observed at the epoch, together with its evolution.

    Times passed to the methods are years since the epoch. Every query is
    pure: the base snapshot is never modified.
    """

    snapshot: StarSnapshot
    evolution: Evolution

    @classmethod
    def hand_authored(
        cls,
        mass: float,
        radius: Optional[float],
        luminous_intensity: float,
        temperature: float,
        position,
        age: Optional[float] = None,
        name: str = "",
        constellation: Optional[str] = None,
    ) -> "Star":
        """Build a star from catalogue values instead of an evolutionary track."""
        snapshot = StarSnapshot(
            mass=mass,
            radius=radius,
            luminous_intensity=luminous_intensity,
            temperature=temperature,
            position=as_position(position),
            age=age,
            name=name,
            constellation=constellation,
        )
        if age is None:
            evolution = Evolution.none()
        else:
            evolution = Evolution.from_age_and_mass(age, mass)
        return cls(snapshot, evolution)

    @property
    def position(self) -> np.ndarray:
        return self.snapshot.position

    @property
    def distance(self) -> float:
        return self.snapshot.distance

    @property
    def lifetime(self) -> float:
        return self.evolution.lifetime

    def get_fate(self) -> Fate:
        return self.evolution.fate

    def time_until_death(self, time_since_epoch: float) -> Optional[float]:
        return self.evolution.time_until_death(time_since_epoch)

    def has_changed(self, then: float, now: float) -> bool:
        return self.evolution.has_changed(then, now)

    def state_at(self, time_since_epoch: float) -> StarSnapshot:
        """
        Snapshot of the star at a time since the epoch.

        Alive stars follow their lifestage rates; dead stars take the values
        their fate prescribes. ``state_at(0)`` of a live star is the base
        snapshot.
        """
        base = self.snapshot
        evolution = self.evolution
        return base.replace(
            mass=evolution.apply_to_mass(base.mass, time_since_epoch),
            radius=evolution.apply_to_radius(base.radius, time_since_epoch),
            luminous_intensity=evolution.apply_to_luminous_intensity(
                base.luminous_intensity, time_since_epoch
            ),
            temperature=evolution.apply_to_temperature(base.temperature, time_since_epoch),
            age=evolution.age_at(time_since_epoch),
        )

    def illuminance_at(self, time_since_epoch: float = 0.0) -> float:
        state = self.state_at(time_since_epoch)
        return float(luminous_intensity_to_illuminance(state.luminous_intensity, self.distance))

    def is_visible(
        self, time_since_epoch: float = 0.0, dimmest_illuminance: float = DIMMEST_ILLUMINANCE
    ) -> bool:
        return self.illuminance_at(time_since_epoch) >= dimmest_illuminance

    def to_appearance(self, time_since_epoch: float = 0.0) -> StarAppearance:
        state = self.state_at(time_since_epoch)
        try:
            direction = unit_vector(self.position)
        except NormalizingZeroVectorError:
            direction = X_DIRECTION.copy()
        return StarAppearance(
            name=state.name,
            illuminance=float(
                luminous_intensity_to_illuminance(state.luminous_intensity, self.distance)
            ),
            color=temperature_to_color(state.temperature),
            direction=direction,
            time_since_epoch=time_since_epoch,
        )
