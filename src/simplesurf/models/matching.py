import logging
import numpy as np
from typing import Dict, Optional, Sequence

from .simple_surf import SimpleSURF
from .components.integral_image import IntegralImage
from .components.feature_points import MatchedPointsCollection
from ..errors import InvalidArgumentError

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = {
    "octave_start": 2,
    "octave_end": 2,
    "ratio_threshold": 0.8,
    "surf_threshold": 0.001,
    "matching_threshold": 0.015,
}


def bands_to_integral_image(bands: Sequence[np.ndarray], name: str = "Input") -> IntegralImage:
    """Luminosity integral image of a full (red, green, blue) raster"""
    if bands is None or len(bands) != 3 or any(band is None for band in bands):
        raise InvalidArgumentError(f"{name} image needs exactly three bands (R, G, B)")

    red, green, blue = bands
    height, width = np.shape(red)[:2]

    luminosity = np.empty((height, width), dtype=np.float64)
    SimpleSURF.convert_rgb_to_luminosity(red, green, blue, width, height, luminosity)

    return IntegralImage(luminosity)


def compute_matching_points(first_bands: Sequence[np.ndarray],
                            second_bands: Sequence[np.ndarray],
                            options: Optional[Dict] = None) -> MatchedPointsCollection:
    """
    Find corresponding points between two RGB rasters

    Args:
        first_bands: (red, green, blue) arrays of the first image
        second_bands: (red, green, blue) arrays of the second image
        options: Overrides for DEFAULT_OPTIONS (octave_start, octave_end,
            ratio_threshold, surf_threshold, matching_threshold)

    Returns:
        Matched pairs (first image point, second image point)
    """
    settings = dict(DEFAULT_OPTIONS)
    if options:
        unknown = set(options) - set(DEFAULT_OPTIONS)
        if unknown:
            raise InvalidArgumentError(f"Unknown matching options: {sorted(unknown)}")
        settings.update(options)

    first_image = bands_to_integral_image(first_bands, "First")
    second_image = bands_to_integral_image(second_bands, "Second")

    surf = SimpleSURF(settings["octave_start"], settings["octave_end"],
                      ratio_threshold=settings["ratio_threshold"])

    first_points = surf.extract_feature_points(first_image, settings["surf_threshold"])
    second_points = surf.extract_feature_points(second_image, settings["surf_threshold"])

    logger.info("Feature points: %d in first image, %d in second image",
                len(first_points), len(second_points))

    matched = surf.match_feature_points(first_points, second_points,
                                        settings["matching_threshold"])

    logger.info("Found %d matching points", len(matched))

    return matched
