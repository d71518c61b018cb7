"""Synthetic PARSEC-like track files for tests."""

import numpy as np

from star_population.tracks.grid import SORTED_MASSES
from star_population.units import CM_PER_SOLAR_RADIUS

ROWS_PER_TRACK = 40


def synthetic_lifetime(mass):
    """Main-sequence lifetime scaling used by the synthetic tracks."""
    return 1e10 * mass**-2.5


def write_synthetic_track(path, mass, rows=ROWS_PER_TRACK):
    """
    Write a PARSEC-like track file for one initial mass.

    Luminosity and radius grow linearly over the life, the star loses 10% of
    its mass, and the temperature stays constant.
    """
    lifetime = synthetic_lifetime(mass)
    ages = np.linspace(0.0, lifetime, rows)
    fraction = ages / lifetime
    masses = mass * (1.0 - 0.1 * fraction)
    log_l = np.log10(mass**3.5 * (1.0 + fraction))
    log_te = np.full(rows, np.log10(5778.0 * mass**0.5))
    log_r = np.log10(mass**0.8 * (1.0 + fraction) * CM_PER_SOLAR_RADIUS)

    with open(path, "w") as f:
        f.write(f"# synthetic PARSEC track, M={mass}\n")
        f.write("MODELL MASS AGE LOG_L LOG_TE LOG_R\n")
        f.write("\n")
        for i in range(rows):
            f.write(
                f"{i} {masses[i]:.8f} {ages[i]:.10e} {log_l[i]:.8f} "
                f"{log_te[i]:.8f} {log_r[i]:.8f}\n"
            )


def write_synthetic_source_dir(folder, masses=SORTED_MASSES):
    folder.mkdir(parents=True, exist_ok=True)
    for mass in masses:
        write_synthetic_track(folder / f"Z0.01Y0.267OUTA1.77_F7_M{mass:07.3f}.DAT", mass)
    return folder
