"""Stellar fates and the post-death transforms they apply."""

from enum import Enum

from ..config import (
    BLACK_HOLE_MASS,
    BLACK_HOLE_MIN_MASS,
    NEUTRON_STAR_MASS,
    REMNANT_RADIUS,
    SUPERNOVA_COOLING_PER_DAY,
    SUPERNOVA_DECAY_END_DAY,
    SUPERNOVA_DECLINE_PER_DAY,
    SUPERNOVA_MIN_MASS,
    SUPERNOVA_PEAK_MAGNITUDE,
    SUPERNOVA_PEAK_TEMPERATURE,
    SUPERNOVA_PLATEAU_END_DAY,
    SUPERNOVA_PLATEAU_MAGNITUDE,
    SUPERNOVA_PLATEAU_TEMPERATURE,
    SUPERNOVA_RISE_END_DAY,
    WHITE_DWARF_LUMINOSITY,
    WHITE_DWARF_MASS_FRACTION,
    WHITE_DWARF_RADIUS,
    WHITE_DWARF_TEMPERATURE,
)
from ..units import (
    SOLAR_LUMINOUS_INTENSITY,
    absolute_magnitude_to_luminous_intensity,
    luminous_intensity_to_absolute_magnitude,
    meters_to_solar_radii,
    years_to_days,
)

WHITE_DWARF_LUMINOUS_INTENSITY = WHITE_DWARF_LUMINOSITY * SOLAR_LUMINOUS_INTENSITY
SUPERNOVA_PEAK_LUMINOUS_INTENSITY = float(
    absolute_magnitude_to_luminous_intensity(SUPERNOVA_PEAK_MAGNITUDE)
)
REMNANT_RADIUS_SOLAR = float(meters_to_solar_radii(REMNANT_RADIUS))

# Magnitude assigned to a progenitor with no light at all
_DARK_MAGNITUDE = 100.0


class Fate(Enum):
    """Terminal remnant category, fixed by the initial mass."""

    WHITE_DWARF = "white_dwarf"
    TYPE_II_SUPERNOVA = "type_ii_supernova"

    @classmethod
    def from_initial_mass(cls, initial_mass: float) -> "Fate":
        if initial_mass < SUPERNOVA_MIN_MASS:
            return cls.WHITE_DWARF
        return cls.TYPE_II_SUPERNOVA

    def apply_to_mass(self, mass: float) -> float:
        if self is Fate.WHITE_DWARF:
            return WHITE_DWARF_MASS_FRACTION * mass
        if mass < BLACK_HOLE_MIN_MASS:
            return NEUTRON_STAR_MASS
        return BLACK_HOLE_MASS

    def apply_to_radius(self) -> float:
        if self is Fate.WHITE_DWARF:
            return WHITE_DWARF_RADIUS
        return REMNANT_RADIUS_SOLAR

    def apply_to_luminous_intensity(
        self, luminous_intensity: float, time_since_death: float
    ) -> float:
        """
        Luminous intensity of the remnant.

        Args:
            luminous_intensity: Progenitor's last live luminous intensity (cd)
            time_since_death: Years since death

        Returns:
            Luminous intensity in candela
        """
        if self is Fate.WHITE_DWARF:
            return WHITE_DWARF_LUMINOUS_INTENSITY
        return supernova_luminous_intensity(years_to_days(time_since_death), luminous_intensity)

    def apply_to_temperature(self, temperature: float, time_since_death: float) -> float:
        """
        Temperature of the remnant.

        Args:
            temperature: Progenitor's last live temperature (K)
            time_since_death: Years since death

        Returns:
            Temperature in Kelvin
        """
        if self is Fate.WHITE_DWARF:
            return WHITE_DWARF_TEMPERATURE
        return supernova_temperature(years_to_days(time_since_death), temperature)


def _magnitude_of(luminous_intensity: float) -> float:
    if luminous_intensity <= 0:
        return _DARK_MAGNITUDE
    return float(luminous_intensity_to_absolute_magnitude(luminous_intensity))


def supernova_absolute_magnitude(days: float, progenitor_magnitude: float) -> float:
    """
    Absolute magnitude of a Type II-P supernova as a function of time.

    https://en.wikipedia.org/wiki/Type_II_supernova#Light_curves_for_Type_II-L_and_Type_II-P_supernovae

    Four phases, continuous at every boundary:
        [0, 10) days:   linear rise from the progenitor to the peak
        [10, 20) days:  linear decay to the plateau
        [20, 110) days: plateau
        >= 110 days:    slow linear decline, indefinitely

    Args:
        days: Days since death (negative means not yet dead)
        progenitor_magnitude: Absolute magnitude right before death

    Returns:
        Absolute magnitude
    """
    if days < 0:
        return progenitor_magnitude
    peak = min(SUPERNOVA_PEAK_MAGNITUDE, progenitor_magnitude)
    if days < SUPERNOVA_RISE_END_DAY:
        fraction = days / SUPERNOVA_RISE_END_DAY
        return progenitor_magnitude + (peak - progenitor_magnitude) * fraction
    if days < SUPERNOVA_DECAY_END_DAY:
        fraction = (days - SUPERNOVA_RISE_END_DAY) / (
            SUPERNOVA_DECAY_END_DAY - SUPERNOVA_RISE_END_DAY
        )
        return peak + (SUPERNOVA_PLATEAU_MAGNITUDE - peak) * fraction
    if days < SUPERNOVA_PLATEAU_END_DAY:
        return SUPERNOVA_PLATEAU_MAGNITUDE
    return SUPERNOVA_PLATEAU_MAGNITUDE + SUPERNOVA_DECLINE_PER_DAY * (
        days - SUPERNOVA_PLATEAU_END_DAY
    )


def supernova_temperature(days: float, progenitor_temperature: float) -> float:
    """
    Photospheric temperature of a Type II-P supernova as a function of time.

    Same phases as :func:`supernova_absolute_magnitude`; after the plateau the
    temperature drops linearly and is clamped at absolute zero.

    Args:
        days: Days since death (negative means not yet dead)
        progenitor_temperature: Temperature right before death (K)

    Returns:
        Temperature in Kelvin
    """
    if days < 0:
        return progenitor_temperature
    peak = max(SUPERNOVA_PEAK_TEMPERATURE, progenitor_temperature)
    if days < SUPERNOVA_RISE_END_DAY:
        fraction = days / SUPERNOVA_RISE_END_DAY
        return progenitor_temperature + (peak - progenitor_temperature) * fraction
    if days < SUPERNOVA_DECAY_END_DAY:
        fraction = (days - SUPERNOVA_RISE_END_DAY) / (
            SUPERNOVA_DECAY_END_DAY - SUPERNOVA_RISE_END_DAY
        )
        return peak + (SUPERNOVA_PLATEAU_TEMPERATURE - peak) * fraction
    if days < SUPERNOVA_PLATEAU_END_DAY:
        return SUPERNOVA_PLATEAU_TEMPERATURE
    cooled = SUPERNOVA_PLATEAU_TEMPERATURE - SUPERNOVA_COOLING_PER_DAY * (
        days - SUPERNOVA_PLATEAU_END_DAY
    )
    return max(0.0, cooled)


def supernova_luminous_intensity(days: float, progenitor_luminous_intensity: float) -> float:
    """Luminous intensity (cd) of a Type II-P supernova ``days`` after death."""
    if days < 0:
        return progenitor_luminous_intensity
    magnitude = supernova_absolute_magnitude(days, _magnitude_of(progenitor_luminous_intensity))
    return float(absolute_magnitude_to_luminous_intensity(magnitude))
