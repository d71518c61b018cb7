"""Configuration constants for the star population generator."""

import os
from pathlib import Path

# Evolutionary track source (PARSEC CAF09_V1.2S_M36_LT, no phase column)
METALLICITY = "Z0.01"
ARCHIVE_BASE_URL = "https://people.sissa.it/~sbressan/CAF09_V1.2S_M36_LT/no_phase/"
DOWNLOAD_TIMEOUT = 60.0  # seconds per request
DOWNLOAD_CHUNK_SIZE = 1024 * 1024

# Private data directory for the unpacked tracks and the binary cache
DATA_DIRECTORY = Path(
    os.environ.get(
        "STAR_POPULATION_DATA_DIR",
        Path.home() / ".local" / "share" / "star_population",
    )
)
CACHE_SUFFIX = ".h5"

# Column positions in the whitespace-delimited track files
MASS_COLUMN = 1
AGE_COLUMN = 2
LOG_L_COLUMN = 3
LOG_TE_COLUMN = 4
LOG_R_COLUMN = 5

# Stellar population (densities are tunable, not load-bearing physics)
# https://en.wikipedia.org/wiki/Stellar_density, adjusted to reproduce Gaia counts
STARS_PER_LY_CUBED = 3e-3
# ~6000 star forming regions in the Milky Way disk
NURSERIES_PER_LY_CUBED = 6_000.0 / 8e12 * 10.0
NURSERY_LIFETIME = 5e7  # years
AGE_OF_MILKY_WAY_THIN_DISK = 8.8e9  # years
NUMBER_OF_STARS_FORMED_IN_NURSERY = 20_000
STELLAR_VELOCITY = 20_000.0  # m/s, dispersal speed of nursery stars
DEATH_VISIBILITY_WINDOW = 1e4  # years a dead star stays a candidate

# Initial mass function
MIN_MASS_FOR_HYDROGEN_FUSION = 0.08  # Solar masses
IMF_UPPER_MASS_BOUND = 1000.0  # Upper integration bound of the last grid slot
IMF_INTEGRATION_STEP = 0.01  # Solar masses
KROUPA_NORMALIZATION = 0.12499960249873866

# Visibility: apparent magnitude 6.5
DIMMEST_ILLUMINANCE = 6.5309e-9  # lux

# Stellar fates
SUPERNOVA_MIN_MASS = 8.0  # Solar masses
BLACK_HOLE_MIN_MASS = 25.0  # Solar masses
NEUTRON_STAR_MASS = 1.4  # Solar masses
BLACK_HOLE_MASS = 7.0  # Solar masses
REMNANT_RADIUS = 1e4  # m
WHITE_DWARF_MASS_FRACTION = 0.3
WHITE_DWARF_RADIUS = 0.0084  # Solar radii (Sirius B)
WHITE_DWARF_LUMINOSITY = 0.056  # Solar luminous intensities (Sirius B)
WHITE_DWARF_TEMPERATURE = 25_000.0  # Kelvin (Sirius B)

# Type II-P supernova light curve
SUPERNOVA_PEAK_MAGNITUDE = -18.5  # Absolute magnitude
SUPERNOVA_PLATEAU_MAGNITUDE = -16.5
SUPERNOVA_DECLINE_PER_DAY = 0.01  # mag/day after the plateau
SUPERNOVA_PEAK_TEMPERATURE = 100_000.0  # Kelvin
SUPERNOVA_PLATEAU_TEMPERATURE = 6_000.0  # Kelvin
SUPERNOVA_COOLING_PER_DAY = 20.0  # Kelvin/day after the plateau
SUPERNOVA_RISE_END_DAY = 10.0
SUPERNOVA_DECAY_END_DAY = 20.0
SUPERNOVA_PLATEAU_END_DAY = 110.0

# Evolution bookkeeping
POST_DEATH_WINDOW = 10.0  # years of rapid change after death
EVOLUTION_TIMESCALE = 1_000.0  # years

# Solar reference values
SOLAR_MAGNITUDE = 4.83  # Absolute visual magnitude

# Parallel generation
NUM_WORKERS = 1

# File paths
SAVE_DIRECTORY = "saved_populations"

# Help text for the CLI
HELP_CONTENT = (
    "--- Notes ---\n"
    "The first run downloads and parses the PARSEC tracks (~100 MB) and\n"
    "writes a binary cache; later runs read the cache.\n"
    "Set STAR_POPULATION_DATA_DIR to relocate the data directory.\n"
)
