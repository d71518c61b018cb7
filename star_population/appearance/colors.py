"""Blackbody colors for stellar temperatures."""

import numpy as np
from typing import Tuple


def kelvin_to_rgb(temperatures) -> np.ndarray:
    """
    Convert color temperatures to sRGB using Tanner Helland's fit.

    https://tannerhelland.com/2012/09/18/convert-temperature-rgb-algorithm-code.html
    Valid range: ~1000K to ~40000K, values outside are clamped.

    Args:
        temperatures: Temperature(s) in Kelvin

    Returns:
        Array of shape (..., 3) with RGB values in 0-1 range
    """
    t = np.clip(np.asarray(temperatures, dtype=np.float64), 1000.0, 40000.0) / 100.0
    hot = t > 66

    red = np.where(hot, 329.698727446 * np.maximum(t - 60, 1e-9) ** -0.1332047592, 255.0)
    green = np.where(
        hot,
        288.1221695283 * np.maximum(t - 60, 1e-9) ** -0.0755148492,
        99.4708025861 * np.log(t) - 161.1195681661,
    )
    blue = np.where(
        t >= 66,
        255.0,
        np.where(t <= 19, 0.0, 138.5177312231 * np.log(np.maximum(t - 10, 1e-9)) - 305.0447927307),
    )

    rgb = np.stack([red, green, blue], axis=-1)
    return np.clip(rgb, 0.0, 255.0) / 255.0


def generate_blackbody_lut(
    temp_min: float = 1000, temp_max: float = 40000, step: float = 100
) -> Tuple[np.ndarray, float, float, float]:
    """
    Generate a lookup table for blackbody colors.

    Returns:
        Tuple of (lut, temp_min, temp_max, step) where lut is shape (N, 3)
    """
    num_entries = int((temp_max - temp_min) / step) + 1
    temps = temp_min + step * np.arange(num_entries)
    lut = kelvin_to_rgb(temps).astype(np.float32)
    return lut, temp_min, temp_max, step


_DEFAULT_LUT, _LUT_TEMP_MIN, _LUT_TEMP_MAX, _LUT_STEP = generate_blackbody_lut()


def temperatures_to_rgb(temperatures) -> np.ndarray:
    """
    Look up RGB colors for an array of temperatures.

    A body at or below absolute zero emits nothing and is black.

    Args:
        temperatures: Array of temperatures in Kelvin

    Returns:
        Array of shape (N, 3) with RGB values in 0-1 range
    """
    temperatures = np.atleast_1d(np.asarray(temperatures, dtype=np.float64))
    indices = np.rint((temperatures - _LUT_TEMP_MIN) / _LUT_STEP)
    indices = np.clip(indices, 0, len(_DEFAULT_LUT) - 1).astype(int)
    rgb = _DEFAULT_LUT[indices].astype(np.float64)
    rgb[temperatures <= 0] = 0.0
    return rgb


def temperature_to_color(temperature: float) -> Tuple[float, float, float]:
    """RGB color of a single temperature."""
    r, g, b = temperatures_to_rgb([temperature])[0]
    return (float(r), float(g), float(b))
