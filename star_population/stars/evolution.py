"""Linear lifestage evolution and the fate state machine."""

from dataclasses import dataclass
from typing import Optional

from ..config import EVOLUTION_TIMESCALE, POST_DEATH_WINDOW
from .fate import Fate
from .snapshot import StarSnapshot


def _rate(now: Optional[float], then: Optional[float], years: float) -> float:
    if now is None or then is None or years == 0:
        return 0.0
    return (now - then) / years


@dataclass(frozen=True)
class LifestageRates:
    """Per-year rates of change of a star during its current lifestage."""

    mass_per_year: float = 0.0
    radius_per_year: float = 0.0
    luminous_intensity_per_year: float = 0.0
    temperature_per_year: float = 0.0

    @classmethod
    def between(cls, now: StarSnapshot, then: StarSnapshot, years: float) -> "LifestageRates":
        """
        Rates that take ``then`` to ``now`` over ``years``.

        A rate is zero when either side is missing the value or ``years`` is zero.
        ``years`` may be negative when ``then`` lies in the future.
        """
        return cls(
            mass_per_year=_rate(now.mass, then.mass, years),
            radius_per_year=_rate(now.radius, then.radius, years),
            luminous_intensity_per_year=_rate(
                now.luminous_intensity, then.luminous_intensity, years
            ),
            temperature_per_year=_rate(now.temperature, then.temperature, years),
        )


@dataclass(frozen=True)
class Evolution:
    """
    How a star's properties change with time since the epoch.

    Attributes:
        lifestage_rates: Linear rates while alive, ``None`` for a static star
        age_at_epoch: Age in years at the epoch, ``None`` when unknown
        lifetime: Age in years at death
        fate: What happens at death
    """

    lifestage_rates: Optional[LifestageRates]
    age_at_epoch: Optional[float]
    lifetime: float
    fate: Fate

    @classmethod
    def none(cls) -> "Evolution":
        """Evolution of a star about which nothing is known: it never changes."""
        return cls(None, None, float("inf"), Fate.WHITE_DWARF)

    @classmethod
    def from_age_and_mass(cls, age: float, mass: float) -> "Evolution":
        """
        Evolution for a hand-authored star with a known age and mass.

        The lifetime follows the main-sequence scaling 1e10 yr * m^-2.5.
        """
        lifetime = 1e10 * mass**-2.5
        return cls(None, age, lifetime, Fate.from_initial_mass(mass))

    def time_until_death(self, time_since_epoch: float) -> Optional[float]:
        if self.age_at_epoch is None:
            return None
        return self.lifetime - self.age_at_epoch - time_since_epoch

    def is_dead(self, time_since_epoch: float) -> bool:
        until_death = self.time_until_death(time_since_epoch)
        return until_death is not None and until_death < 0

    def age_at(self, time_since_epoch: float) -> Optional[float]:
        if self.age_at_epoch is None:
            return None
        return self.age_at_epoch + time_since_epoch

    def _years_alive(self, time_since_epoch: float) -> float:
        # Years since the epoch over which the lifestage rates act, capped at death
        death = self.time_until_death(0.0)
        if death is None:
            return time_since_epoch
        return max(0.0, min(time_since_epoch, death))

    def _evolve(self, value: Optional[float], rate_name: str, years: float) -> Optional[float]:
        if value is None or self.lifestage_rates is None:
            return value
        return value + getattr(self.lifestage_rates, rate_name) * years

    def apply_to_mass(self, mass: Optional[float], time_since_epoch: float) -> Optional[float]:
        if self.is_dead(time_since_epoch):
            if mass is None:
                return None
            return self.fate.apply_to_mass(mass)
        return self._evolve(mass, "mass_per_year", time_since_epoch)

    def apply_to_radius(self, radius: Optional[float], time_since_epoch: float) -> Optional[float]:
        if self.is_dead(time_since_epoch):
            return self.fate.apply_to_radius()
        return self._evolve(radius, "radius_per_year", time_since_epoch)

    def apply_to_luminous_intensity(self, luminous_intensity: float, time_since_epoch: float) -> float:
        if self.is_dead(time_since_epoch):
            progenitor = self._evolve(
                luminous_intensity,
                "luminous_intensity_per_year",
                self._years_alive(time_since_epoch),
            )
            return self.fate.apply_to_luminous_intensity(
                progenitor, -self.time_until_death(time_since_epoch)
            )
        return self._evolve(luminous_intensity, "luminous_intensity_per_year", time_since_epoch)

    def apply_to_temperature(self, temperature: float, time_since_epoch: float) -> float:
        if self.is_dead(time_since_epoch):
            progenitor = self._evolve(
                temperature, "temperature_per_year", self._years_alive(time_since_epoch)
            )
            return self.fate.apply_to_temperature(
                max(0.0, progenitor), -self.time_until_death(time_since_epoch)
            )
        return self._evolve(temperature, "temperature_per_year", time_since_epoch)

    def has_changed(self, then: float, now: float) -> bool:
        """
        Whether the star changed noticeably between two times since the epoch.

        True when death lies between the two times, when either time falls in
        the first years after death, or when the star is evolving and the
        times are further apart than the evolution timescale. Symmetric in
        ``then`` and ``now``.
        """
        until_death_then = self.time_until_death(then)
        until_death_now = self.time_until_death(now)
        if until_death_then is not None and until_death_now is not None:
            has_crossed_death = (until_death_then < 0) != (until_death_now < 0)
            then_shortly_after = -POST_DEATH_WINDOW <= until_death_then < 0
            now_shortly_after = -POST_DEATH_WINDOW <= until_death_now < 0
            if has_crossed_death or then_shortly_after or now_shortly_after:
                return True

        if self.lifestage_rates is not None and abs(then - now) > EVOLUTION_TIMESCALE:
            return True
        return False
