"""SimpleSURF - SURF-style feature point detection and matching"""

__version__ = "1.0.0"
__author__ = "SimpleSURF Team"

from .errors import SimpleSURFError, InvalidArgumentError
from .models.simple_surf import SimpleSURF
from .models.matching import compute_matching_points
from .models.components.integral_image import IntegralImage
from .models.components.octave_map import OctaveMap, OctaveLayer
from .models.components.feature_points import (FeaturePoint, FeaturePointsCollection,
                                               MatchedPointsCollection)
from .models.components.point_matcher import euclidean_distance

__all__ = ['SimpleSURF', 'compute_matching_points', 'IntegralImage', 'OctaveMap',
           'OctaveLayer', 'FeaturePoint', 'FeaturePointsCollection',
           'MatchedPointsCollection', 'euclidean_distance', 'SimpleSURFError',
           'InvalidArgumentError']
