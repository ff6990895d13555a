import numpy as np
from typing import Iterator, List, Optional, Sequence, Tuple

from ...errors import InvalidArgumentError

DESCRIPTOR_SIZE = 64


class FeaturePoint:
    """
    Interest point found by the SURF extractor

    Coordinates are pixel positions at working resolution (x is the
    column, y the row). The descriptor is unset until assigned once; after
    that it is a read-only array of DESCRIPTOR_SIZE values.
    """

    def __init__(self, x: int, y: int, scale: float, radius: int, sign: bool,
                 descriptor: Optional[Sequence[float]] = None):
        self.x = int(x)
        self.y = int(y)
        self.scale = scale
        self.radius = int(radius)
        self.sign = bool(sign)
        self._descriptor = None

        if descriptor is not None:
            self.set_descriptor(descriptor)

    @property
    def descriptor(self) -> Optional[np.ndarray]:
        return self._descriptor

    def set_descriptor(self, values: Sequence[float]):
        """
        Attach the descriptor

        Raises:
            InvalidArgumentError: if the descriptor is already set or does
                not hold exactly DESCRIPTOR_SIZE values
        """
        if self._descriptor is not None:
            raise InvalidArgumentError("Feature point descriptor is already set")

        values = np.array(values, dtype=np.float64).ravel()
        if values.shape[0] != DESCRIPTOR_SIZE:
            raise InvalidArgumentError(
                f"Descriptor must have {DESCRIPTOR_SIZE} values, got {values.shape[0]}")

        values.flags.writeable = False
        self._descriptor = values

    def has_descriptor(self) -> bool:
        return self._descriptor is not None

    def copy(self) -> 'FeaturePoint':
        return FeaturePoint(self.x, self.y, self.scale, self.radius, self.sign,
                            self._descriptor)

    def __getitem__(self, index):
        if self._descriptor is None:
            raise IndexError("Feature point has no descriptor")
        return self._descriptor[index]

    def __repr__(self):
        return (f"FeaturePoint(x={self.x}, y={self.y}, scale={self.scale}, "
                f"radius={self.radius}, sign={self.sign})")


class FeaturePointsCollection:
    """Append-only ordered sequence of feature points"""

    def __init__(self, points: Optional[Sequence[FeaturePoint]] = None):
        self._points: List[FeaturePoint] = []
        for point in points or []:
            self.add_point(point)

    def add_point(self, point: FeaturePoint):
        if point is None:
            raise InvalidArgumentError("Feature point isn't specified")
        self._points.append(point)

    def get_point(self, index: int) -> FeaturePoint:
        return self._points[index]

    def __getitem__(self, index: int) -> FeaturePoint:
        return self._points[index]

    def __len__(self):
        return len(self._points)

    def __iter__(self) -> Iterator[FeaturePoint]:
        return iter(self._points)

    def descriptors(self) -> np.ndarray:
        """
        Stack the descriptors of all points

        Returns:
            Array [N, DESCRIPTOR_SIZE]

        Raises:
            InvalidArgumentError: if a point has no descriptor
        """
        if not self._points:
            return np.empty((0, DESCRIPTOR_SIZE))

        for index, point in enumerate(self._points):
            if not point.has_descriptor():
                raise InvalidArgumentError(f"Feature point {index} has no descriptor")

        return np.vstack([point.descriptor for point in self._points])

    def coordinates(self) -> np.ndarray:
        """Point coordinates as an array [N, 2] of (x, y)"""
        if not self._points:
            return np.empty((0, 2), dtype=int)
        return np.array([[point.x, point.y] for point in self._points])

    def signs(self) -> np.ndarray:
        return np.array([point.sign for point in self._points], dtype=bool)


class MatchedPointsCollection:
    """
    Ordered pairs of matched feature points

    Each pair is (point from the first collection, point from the second
    collection); the points are copies owned by this collection.
    """

    def __init__(self):
        self._pairs: List[Tuple[FeaturePoint, FeaturePoint]] = []

    def add_points(self, first: FeaturePoint, second: FeaturePoint):
        self._pairs.append((first, second))

    def get_points(self, index: int) -> Tuple[FeaturePoint, FeaturePoint]:
        return self._pairs[index]

    def __getitem__(self, index: int) -> Tuple[FeaturePoint, FeaturePoint]:
        return self._pairs[index]

    def __len__(self):
        return len(self._pairs)

    def __iter__(self) -> Iterator[Tuple[FeaturePoint, FeaturePoint]]:
        return iter(self._pairs)

    def to_array(self) -> np.ndarray:
        """Matches as an array [N, 4] of (x1, y1, x2, y2)"""
        if not self._pairs:
            return np.empty((0, 4), dtype=int)
        return np.array([[first.x, first.y, second.x, second.y]
                         for first, second in self._pairs])
