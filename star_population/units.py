"""Unit constants and photometric conversions.

All quantities in the package are plain floats (or numpy arrays) in fixed
units: solar masses, solar radii, candela, kelvin, light years and years.
"""

import numpy as np

from .config import SOLAR_MAGNITUDE

METERS_PER_LIGHT_YEAR = 9.4607304725808e15
METERS_PER_PARSEC = 3.0856775814913673e16
CM_PER_SOLAR_RADIUS = 6.957e10
METERS_PER_SOLAR_RADIUS = 6.957e8
DAYS_PER_YEAR = 365.25

# Illuminance of an apparent magnitude 0 source
# https://en.wikipedia.org/wiki/Apparent_magnitude
ILLUMINANCE_AT_MAGNITUDE_ZERO = 2.6e-6  # lux
ABSOLUTE_MAGNITUDE_DISTANCE = 10.0 * METERS_PER_PARSEC


def absolute_magnitude_to_luminous_intensity(magnitude):
    """
    Convert an absolute visual magnitude to a luminous intensity.

    The luminous intensity is the one that produces the apparent magnitude
    ``magnitude`` when observed from 10 parsecs.

    Args:
        magnitude: Absolute magnitude (scalar or array)

    Returns:
        Luminous intensity in candela
    """
    illuminance = ILLUMINANCE_AT_MAGNITUDE_ZERO * 10.0 ** (-np.asarray(magnitude) / 2.5)
    return illuminance * ABSOLUTE_MAGNITUDE_DISTANCE**2


def luminous_intensity_to_absolute_magnitude(luminous_intensity):
    """Inverse of :func:`absolute_magnitude_to_luminous_intensity`."""
    illuminance = np.asarray(luminous_intensity) / ABSOLUTE_MAGNITUDE_DISTANCE**2
    return -2.5 * np.log10(illuminance / ILLUMINANCE_AT_MAGNITUDE_ZERO)


SOLAR_LUMINOUS_INTENSITY = float(absolute_magnitude_to_luminous_intensity(SOLAR_MAGNITUDE))


def luminous_intensity_to_illuminance(luminous_intensity, distance_ly):
    """
    Illuminance at the observer produced by a point source.

    E = I / d^2, with the distance converted from light years to meters.

    Args:
        luminous_intensity: Luminous intensity in candela
        distance_ly: Distance in light years

    Returns:
        Illuminance in lux (inf for a source at zero distance)
    """
    distance_m = np.asarray(distance_ly, dtype=np.float64) * METERS_PER_LIGHT_YEAR
    with np.errstate(divide="ignore"):
        return np.asarray(luminous_intensity) / distance_m**2


def illuminance_to_apparent_magnitude(illuminance):
    """Convert an illuminance in lux to an apparent magnitude."""
    return -2.5 * np.log10(np.asarray(illuminance) / ILLUMINANCE_AT_MAGNITUDE_ZERO)


def apparent_magnitude_to_illuminance(magnitude):
    """Convert an apparent magnitude to an illuminance in lux."""
    return ILLUMINANCE_AT_MAGNITUDE_ZERO * 10.0 ** (-np.asarray(magnitude) / 2.5)


def min_visible_luminous_intensity(distance_ly, dimmest_illuminance):
    """Luminous intensity needed to reach ``dimmest_illuminance`` at a distance."""
    distance_m = np.asarray(distance_ly, dtype=np.float64) * METERS_PER_LIGHT_YEAR
    return dimmest_illuminance * distance_m**2


def visibility_distance(luminous_intensity, dimmest_illuminance):
    """Largest distance in light years at which a source is still visible."""
    return np.sqrt(luminous_intensity / dimmest_illuminance) / METERS_PER_LIGHT_YEAR


def cm_to_solar_radii(cm):
    return np.asarray(cm) / CM_PER_SOLAR_RADIUS


def meters_to_solar_radii(meters):
    return np.asarray(meters) / METERS_PER_SOLAR_RADIUS


def years_to_days(years):
    return years * DAYS_PER_YEAR


def meters_per_second_to_ly_per_year(speed):
    return speed * DAYS_PER_YEAR * 86_400.0 / METERS_PER_LIGHT_YEAR
