#!/usr/bin/env python3
"""
Star Population Generator

Generates the stars visible to the naked eye from a random vantage point,
using PARSEC stellar evolution tracks and a Kroupa initial mass function.

Usage:
    python main.py                          # Stars visible within 1000 ly
    python main.py --max-distance 500       # Stars visible within 500 ly
    python main.py --seed 42 --save         # Reproducible run, saved as HDF5
    python main.py --load FILE.h5           # Summarize a saved population
"""

import argparse
import sys
from collections import Counter
from pathlib import Path

import numpy as np

from star_population.config import (
    DATA_DIRECTORY,
    DIMMEST_ILLUMINANCE,
    HELP_CONTENT,
    NUM_WORKERS,
)
from star_population.errors import StarPopulationError
from star_population.generation.population import generate_one_star, generate_population
from star_population.state.persistence import (
    ensure_save_directory,
    generate_save_filename,
    load_population,
    save_population,
)
from star_population.tracks.store import TrackStoreHandle
from star_population.units import illuminance_to_apparent_magnitude

DEFAULT_MAX_DISTANCE = 1000.0  # light years


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Star Population Generator - naked-eye stars from stellar evolution tracks',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=HELP_CONTENT,
    )
    parser.add_argument(
        '--max-distance',
        '-d',
        type=float,
        default=DEFAULT_MAX_DISTANCE,
        metavar='LY',
        help=f'Radius of the generated volume in light years (default: {DEFAULT_MAX_DISTANCE:g})',
    )
    parser.add_argument(
        '--seed',
        '-s',
        type=int,
        default=None,
        metavar='SEED',
        help='Random seed for reproducibility',
    )
    parser.add_argument(
        '--workers',
        '-w',
        type=int,
        default=NUM_WORKERS,
        metavar='N',
        help=f'Worker processes for generation (default: {NUM_WORKERS})',
    )
    parser.add_argument(
        '--data-dir',
        type=Path,
        default=DATA_DIRECTORY,
        metavar='DIR',
        help=f'Directory for the PARSEC tracks and their cache (default: {DATA_DIRECTORY})',
    )
    parser.add_argument(
        '--save',
        nargs='?',
        const='',
        default=None,
        metavar='FILE',
        help='Save the population as HDF5 (default name in saved_populations/)',
    )
    parser.add_argument(
        '--load',
        '-l',
        type=Path,
        metavar='FILE',
        help='Summarize a saved population instead of generating one',
    )
    parser.add_argument(
        '--one-star',
        action='store_true',
        help='Generate a single visible star instead of a population',
    )
    parser.add_argument(
        '--quiet',
        '-q',
        action='store_true',
        help='Only print the summary',
    )
    return parser.parse_args(argv)


def summarize(stars):
    """Print count, fates and the brightest star of a population."""
    print(f"Stars: {len(stars)}")
    if not stars:
        return
    fates = Counter(star.get_fate().name for star in stars)
    for fate, count in sorted(fates.items()):
        print(f"\t{fate}: {count}")
    illuminances = np.array([star.illuminance_at(0.0) for star in stars])
    finite = illuminances[np.isfinite(illuminances)]
    if len(finite) > 0:
        brightest = illuminance_to_apparent_magnitude(finite.max())
        print(f"Brightest apparent magnitude: {brightest:.2f}")
    dead = sum(1 for star in stars if star.evolution.is_dead(0.0))
    print(f"Stellar remnants: {dead}")


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    verbose = not args.quiet

    if args.load:
        if not args.load.exists():
            print(f"Error: File not found: {args.load}")
            sys.exit(1)
        if verbose:
            print(f"Loading population from: {args.load}")
        summarize(load_population(args.load))
        return

    if args.max_distance < 0:
        print("Error: --max-distance must be non-negative")
        sys.exit(1)

    rng = np.random.default_rng(args.seed)
    handle = TrackStoreHandle(data_dir=args.data_dir, verbose=verbose)
    try:
        if verbose:
            print("Loading evolutionary tracks...")
        store = handle.get()
        if args.one_star:
            stars = [generate_one_star(store, args.max_distance, rng, DIMMEST_ILLUMINANCE)]
        else:
            stars = generate_population(
                store, args.max_distance, rng, workers=args.workers, verbose=verbose
            )
    except StarPopulationError as e:
        print(f"Error: {e}")
        sys.exit(1)

    summarize(stars)

    if args.save is not None:
        if args.save:
            save_path = Path(args.save)
        else:
            save_path = ensure_save_directory() / generate_save_filename()
        saved = save_population(save_path, stars)
        print(f"Saved to: {saved}")


if __name__ == '__main__':
    main()
