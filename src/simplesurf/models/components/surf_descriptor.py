import numpy as np
from typing import Union

from .feature_points import FeaturePoint, FeaturePointsCollection, DESCRIPTOR_SIZE
from .integral_image import IntegralImage
from ...errors import InvalidArgumentError


class SURFDescriptor:
    """
    Upright SURF descriptor built from Haar wavelet responses

    A square window of side 20 * scale centred on the point is split into
    a 4x4 grid of quadrants. Each quadrant is sampled on a regular 5x5
    grid; at every sample the horizontal and vertical Haar responses of
    size 2 * scale are taken from the integral image. A quadrant
    contributes (sum dx, sum dy, sum |dx|, sum |dy|), giving 64 values.

    Reference: Bay, H., Ess, A., Tuytelaars, T., & Van Gool, L. (2008).
    Speeded-Up Robust Features (SURF).
    """

    HAAR_SCALE = 2
    WINDOW_SCALE = 20
    QUADRANTS = 4
    SAMPLES = 5

    def __init__(self):
        # Sample grids broadcast to [quad_row, quad_col, sample_row, sample_col]
        self._quadrant_index = np.arange(self.QUADRANTS)
        self._sample_index = np.arange(self.SAMPLES)

    def compute_descriptor(self, x: int, y: int, scale: float,
                           image: IntegralImage) -> np.ndarray:
        """
        Compute the descriptor values for a position and scale

        Args:
            x, y: Point column and row
            scale: Detection scale (must be positive)
            image: Integral image of the working raster

        Returns:
            Descriptor vector [64]
        """
        if not scale > 0:
            raise InvalidArgumentError(f"Feature point scale must be positive, got {scale}")

        haar_size = int(self.HAAR_SCALE * scale)
        window_side = int(self.WINDOW_SCALE * scale)
        quad_step = window_side // self.QUADRANTS
        sub_step = quad_step // self.SAMPLES

        top = int(y) - window_side // 2
        left = int(x) - window_side // 2

        # Haar window top-left of every sample, relative to its quadrant origin
        sample_offset = self._sample_index * sub_step + sub_step // 2 - haar_size // 2
        quad_offset = self._quadrant_index * quad_step

        rows = (top + quad_offset)[:, np.newaxis, np.newaxis, np.newaxis] + \
            sample_offset[np.newaxis, np.newaxis, :, np.newaxis]
        cols = (left + quad_offset)[np.newaxis, :, np.newaxis, np.newaxis] + \
            sample_offset[np.newaxis, np.newaxis, np.newaxis, :]

        dx = image.haar_wavelet_x(rows, cols, haar_size)
        dy = image.haar_wavelet_y(rows, cols, haar_size)

        descriptor = np.stack([
            dx.sum(axis=(2, 3)),
            dy.sum(axis=(2, 3)),
            np.abs(dx).sum(axis=(2, 3)),
            np.abs(dy).sum(axis=(2, 3)),
        ], axis=-1)

        return descriptor.reshape(DESCRIPTOR_SIZE).astype(np.float64)

    def build_descriptor(self, point: FeaturePoint, image: Union[IntegralImage, np.ndarray]):
        """Compute and attach the descriptor of a feature point"""
        if not isinstance(image, IntegralImage):
            image = IntegralImage(image)

        point.set_descriptor(self.compute_descriptor(point.x, point.y, point.scale, image))

    def describe(self, image: Union[IntegralImage, np.ndarray],
                 points: FeaturePointsCollection) -> np.ndarray:
        """
        Attach descriptors to every point of a collection

        Returns:
            Array of descriptors [N, 64]
        """
        if not isinstance(image, IntegralImage):
            image = IntegralImage(image)

        for point in points:
            self.build_descriptor(point, image)

        return points.descriptors()

    def get_descriptor_size(self) -> int:
        return DESCRIPTOR_SIZE
