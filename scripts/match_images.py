#!/usr/bin/env python3
"""
Script to find corresponding points between two overlapping images
"""

import argparse
import logging
import os
import sys
import time

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from simplesurf.models.matching import compute_matching_points
from simplesurf.utils.raster_io import read_rgb_bands


def parse_args():
    parser = argparse.ArgumentParser(description='Match SURF feature points between two images')
    parser.add_argument('first_image', help='Path to the first image')
    parser.add_argument('second_image', help='Path to the second image')
    parser.add_argument('--config', default='configs/surf/default.py',
                       help='Configuration file')
    parser.add_argument('--octave_start', type=int, default=None,
                       help='First octave to search (overrides config)')
    parser.add_argument('--octave_end', type=int, default=None,
                       help='Last octave to search (overrides config)')
    parser.add_argument('--surf_threshold', type=float, default=None,
                       help='Minimum Hessian determinant of a feature point')
    parser.add_argument('--matching_threshold', type=float, default=None,
                       help='Maximum normalized descriptor distance of a match')
    parser.add_argument('--verbose', action='store_true',
                       help='Print debug logging')

    return parser.parse_args()


def load_config(config_path):
    """Load configuration from Python file"""
    if os.path.exists(config_path):
        import importlib.util
        spec = importlib.util.spec_from_file_location("config", config_path)
        config_module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(config_module)
        return config_module.config
    else:
        # Default configuration
        return {
            "model": {"octave_start": 2, "octave_end": 2, "ratio_threshold": 0.8},
            "feature_detector": {"surf_threshold": 0.001},
            "matching": {"matching_threshold": 0.015},
        }


def override(value, default):
    return default if value is None else value


def main():
    args = parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    config = load_config(args.config)
    model_config = config.get('model', {})

    options = {
        'octave_start': override(args.octave_start, model_config.get('octave_start', 2)),
        'octave_end': override(args.octave_end, model_config.get('octave_end', 2)),
        'ratio_threshold': model_config.get('ratio_threshold', 0.8),
        'surf_threshold': override(args.surf_threshold,
                                   config.get('feature_detector', {}).get('surf_threshold', 0.001)),
        'matching_threshold': override(args.matching_threshold,
                                       config.get('matching', {}).get('matching_threshold', 0.015)),
    }

    start_time = time.time()

    matched = compute_matching_points(read_rgb_bands(args.first_image),
                                      read_rgb_bands(args.second_image), options)

    elapsed = time.time() - start_time

    print(f"# {len(matched)} matches between {args.first_image} and {args.second_image} "
          f"in {elapsed:.2f}s", file=sys.stderr)

    for x1, y1, x2, y2 in matched.to_array():
        print(f"{x1} {y1} {x2} {y2}")


if __name__ == "__main__":
    main()
