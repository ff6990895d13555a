import logging
import numpy as np
from typing import Optional, Union

from .components.integral_image import IntegralImage
from .components.octave_map import OctaveMap
from .components.feature_points import (FeaturePoint, FeaturePointsCollection,
                                        MatchedPointsCollection)
from .components.surf_descriptor import SURFDescriptor
from .components.point_matcher import PointMatcher, euclidean_distance
from .components.luminosity import convert_rgb_to_luminosity
from ..errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class SimpleSURF:
    """
    Simplified SURF feature detector and matcher

    Orchestrates the pipeline:
    1. Hessian-determinant pyramid over the configured octaves
    2. Maximum search across consecutive interval triplets
    3. Upright 64-value SURF descriptors
    4. Greedy ratio-test matching with normalized distance threshold

    The octave map is owned by the instance and holds the pyramid of the
    last image passed to extract_feature_points.
    """

    def __init__(self, octave_start: int, octave_end: int, ratio_threshold: float = 0.8):
        """
        Initialize the detector

        Args:
            octave_start: First octave to search (>= 1)
            octave_end: Last octave to search, inclusive (>= octave_start)
            ratio_threshold: Nearest / second-nearest bound used while matching
        """
        if octave_start < 1 or octave_end < octave_start:
            raise InvalidArgumentError(
                f"Invalid octave range [{octave_start}, {octave_end}]: "
                "start must be >= 1 and end >= start")

        self.octave_start = octave_start
        self.octave_end = octave_end

        # Initialize components
        self.octave_map = OctaveMap(octave_start, octave_end)
        self.descriptor = SURFDescriptor()
        self.matcher = PointMatcher(ratio_threshold)

    @staticmethod
    def convert_rgb_to_luminosity(red: np.ndarray, green: np.ndarray, blue: np.ndarray,
                                  x_size: int, y_size: int, out: np.ndarray) -> np.ndarray:
        """Fill out with the luminosity of three colour bands (see luminosity module)"""
        return convert_rgb_to_luminosity(red, green, blue, x_size, y_size, out)

    def extract_feature_points(self, image: Union[IntegralImage, np.ndarray], threshold: float,
                               collection: Optional[FeaturePointsCollection] = None
                               ) -> FeaturePointsCollection:
        """
        Find feature points and attach their descriptors

        Points are emitted octave by octave, interval triplet by interval
        triplet, row-major inside a layer. The same physical point may be
        reported by several triplets or octaves.

        Args:
            image: Integral image (a 2-D array is wrapped automatically)
            threshold: Minimum Hessian determinant of a feature point (exclusive)
            collection: Collection to append to (a new one is created if omitted)

        Returns:
            Collection holding the new points after any existing ones
        """
        if not isinstance(image, IntegralImage):
            image = IntegralImage(image)

        if collection is None:
            collection = FeaturePointsCollection()

        initial_size = len(collection)

        self.octave_map.compute_map(image)

        for octave in range(self.octave_start, self.octave_end + 1):
            for k in range(1, OctaveMap.INTERVALS - 1):
                bot = self.octave_map.get_layer(octave, k)
                mid = self.octave_map.get_layer(octave, k + 1)
                top = self.octave_map.get_layer(octave, k + 2)

                for row, col in self.octave_map.find_extrema(bot, mid, top, threshold):
                    point = FeaturePoint(col, row, mid.scale, mid.radius, mid.signs[row, col])
                    self.descriptor.build_descriptor(point, image)
                    collection.add_point(point)

        logger.debug("Extracted %d feature points (octaves %d-%d, threshold %g)",
                     len(collection) - initial_size, self.octave_start,
                     self.octave_end, threshold)

        return collection

    def match_feature_points(self, first: FeaturePointsCollection,
                             second: FeaturePointsCollection, threshold: float,
                             matched: Optional[MatchedPointsCollection] = None
                             ) -> MatchedPointsCollection:
        """
        Match two feature point collections

        Args:
            first: Points of the first image
            second: Points of the second image
            threshold: Maximum normalized descriptor distance (0..1)
            matched: Collection to append to (a new one is created if omitted)

        Returns:
            Pairs (first point, second point), copies of the input points
        """
        return self.matcher.match(first, second, threshold, matched)

    @staticmethod
    def get_euclidean_distance(first: FeaturePoint, second: FeaturePoint) -> float:
        """Euclidean distance between two descriptors"""
        return euclidean_distance(first, second)
