import logging
import numpy as np
from scipy.spatial.distance import cdist
from typing import List, NamedTuple, Optional

from .feature_points import FeaturePoint, FeaturePointsCollection, MatchedPointsCollection
from ...errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class MatchedPointPairInfo(NamedTuple):
    """Tentative match: indices into the outer and inner collections and their distance"""
    outer_index: int
    inner_index: int
    distance: float


def euclidean_distance(first: FeaturePoint, second: FeaturePoint) -> float:
    """Euclidean distance between the descriptors of two feature points"""
    if not first.has_descriptor() or not second.has_descriptor():
        raise InvalidArgumentError("Both feature points need descriptors")
    return float(np.linalg.norm(first.descriptor - second.descriptor))


def normalize_distances(pairs: List[MatchedPointPairInfo]) -> List[MatchedPointPairInfo]:
    """
    Divide every pair distance by the largest one

    Distances are left unchanged when the largest distance is zero.
    """
    max_distance = max((pair.distance for pair in pairs), default=0.0)
    if max_distance == 0:
        return list(pairs)

    return [pair._replace(distance=pair.distance / max_distance) for pair in pairs]


class PointMatcher:
    """
    Greedy descriptor matcher with ratio and distance pruning

    The smaller collection is scanned point by point (outer); for each
    point the nearest and second-nearest unclaimed inner points of the same
    Laplacian sign are found. A pair is kept when the nearest/second ratio
    is below ratio_threshold, and the inner point is claimed at once, so
    later outer points can no longer use it. Surviving distances are then
    normalized by their maximum and compared with the caller's threshold.
    """

    def __init__(self, ratio_threshold: float = 0.8):
        """
        Args:
            ratio_threshold: Upper bound (exclusive) for best / second-best distance
        """
        self.ratio_threshold = ratio_threshold

    def match(self, first: FeaturePointsCollection, second: FeaturePointsCollection,
              threshold: float,
              matched: Optional[MatchedPointsCollection] = None) -> MatchedPointsCollection:
        """
        Match two collections of feature points

        Args:
            first: Points of the first image
            second: Points of the second image
            threshold: Maximum normalized distance (in [0, 1]) of a kept pair
            matched: Collection to append to (a new one is created if omitted)

        Returns:
            Matched pairs, each labelled (first point, second point)
        """
        if first is None or second is None:
            raise InvalidArgumentError("Feature point collections are not specified")

        if matched is None:
            matched = MatchedPointsCollection()

        if len(first) == 0 or len(second) == 0:
            return matched

        # Outer collection is the smaller one; the second wins a tie
        is_swap = len(second) <= len(first)
        outer, inner = (second, first) if is_swap else (first, second)

        pairs = self._find_tentative_pairs(outer.descriptors(), inner.descriptors(),
                                           outer.signs(), inner.signs())
        pairs = normalize_distances(pairs)

        for pair in pairs:
            if pair.distance > threshold:
                continue

            outer_point = outer.get_point(pair.outer_index).copy()
            inner_point = inner.get_point(pair.inner_index).copy()

            if is_swap:
                matched.add_points(inner_point, outer_point)
            else:
                matched.add_points(outer_point, inner_point)

        logger.debug("Matched %d of %d tentative pairs (%d x %d points, threshold %.4f)",
                     len(matched), len(pairs), len(outer), len(inner), threshold)

        return matched

    def _find_tentative_pairs(self, outer_descriptors: np.ndarray, inner_descriptors: np.ndarray,
                              outer_signs: np.ndarray,
                              inner_signs: np.ndarray) -> List[MatchedPointPairInfo]:
        """
        Greedy nearest-neighbour search with ratio pruning, in outer scan order

        Distances are computed one outer row at a time against the still
        unclaimed candidates, so extra memory stays O(len(inner)).
        """
        already_matched = np.zeros(len(inner_signs), dtype=bool)
        pairs = []

        for i in range(outer_descriptors.shape[0]):
            candidates = np.flatnonzero(~already_matched & (inner_signs == outer_signs[i]))

            # Ratio test needs a second-nearest point
            if len(candidates) < 2:
                continue

            candidate_distances = cdist(outer_descriptors[i:i + 1], inner_descriptors[candidates],
                                        'euclidean')[0]
            order = np.argsort(candidate_distances, kind='stable')
            best_distance = candidate_distances[order[0]]
            second_distance = candidate_distances[order[1]]

            if second_distance > 0 and best_distance / second_distance < self.ratio_threshold:
                best_index = int(candidates[order[0]])
                pairs.append(MatchedPointPairInfo(i, best_index, float(best_distance)))
                already_matched[best_index] = True

        return pairs
