import logging
import numpy as np
from scipy.ndimage import maximum_filter
from typing import Dict, Tuple

from .integral_image import IntegralImage

logger = logging.getLogger(__name__)

# Weight of Dxy in the determinant approximation (0.9 squared)
HESSIAN_DXY_WEIGHT = 0.81


class OctaveLayer:
    """
    One (octave, interval) layer of the Hessian-determinant pyramid

    Layers are computed at the full resolution of the integral image, so
    row/column indices of every layer are image pixel coordinates.
    """

    def __init__(self, octave: int, interval: int):
        """
        Args:
            octave: Octave number (1-based)
            interval: Interval number inside the octave (1-based)
        """
        self.octave = octave
        self.interval = interval

        self.filter_size = 3 * (2 ** octave * interval + 1)
        self.radius = (self.filter_size - 1) // 2
        self.scale = int(round(0.1333 * self.filter_size))

        self.width = 0
        self.height = 0
        self.det_hessians = np.empty((0, 0), dtype=np.float64)
        self.signs = np.empty((0, 0), dtype=bool)
        self.computed = False

    def compute_layer(self, image: IntegralImage):
        """
        Fill the determinant and sign grids with box-filter Hessian responses

        Args:
            image: Integral image of the working raster
        """
        self.height, self.width = image.height, image.width

        rows = np.arange(self.height)[:, np.newaxis]
        cols = np.arange(self.width)[np.newaxis, :]

        size = self.filter_size
        lobe = size // 3
        border = self.radius
        long_part = 2 * lobe - 1
        box = image.get_rectangle_sum

        dxx = (box(rows - lobe + 1, cols - border, size, long_part)
               - 3 * box(rows - lobe + 1, cols - lobe // 2, lobe, long_part))
        dyy = (box(rows - border, cols - lobe + 1, long_part, size)
               - 3 * box(rows - lobe // 2, cols - lobe + 1, long_part, lobe))
        dxy = (box(rows - lobe, cols + 1, lobe, lobe)
               + box(rows + 1, cols - lobe, lobe, lobe)
               - box(rows - lobe, cols - lobe, lobe, lobe)
               - box(rows + 1, cols + 1, lobe, lobe))

        normalization = float(size * size)
        dxx = dxx / normalization
        dyy = dyy / normalization
        dxy = dxy / normalization

        self.det_hessians = np.asarray(dxx * dyy - HESSIAN_DXY_WEIGHT * dxy * dxy,
                                       dtype=np.float64).reshape(self.height, self.width)
        self.signs = np.asarray(dxx + dyy >= 0).reshape(self.height, self.width)
        self.computed = True

    def __repr__(self):
        return (f"OctaveLayer(octave={self.octave}, interval={self.interval}, "
                f"filter_size={self.filter_size}, scale={self.scale}, "
                f"size={self.width}x{self.height})")


class OctaveMap:
    """
    Multiscale Hessian-determinant pyramid

    Holds one OctaveLayer per (octave, interval) for the configured
    inclusive octave range and INTERVALS intervals per octave.
    """

    INTERVALS = 4

    def __init__(self, octave_start: int, octave_end: int):
        self.octave_start = octave_start
        self.octave_end = octave_end

        self.layers: Dict[Tuple[int, int], OctaveLayer] = {
            (octave, interval): OctaveLayer(octave, interval)
            for octave in range(octave_start, octave_end + 1)
            for interval in range(1, self.INTERVALS + 1)
        }

    def compute_map(self, image: IntegralImage):
        """(Re)compute every layer of the pyramid from an integral image"""
        for layer in self.layers.values():
            layer.compute_layer(image)

        logger.debug("Computed %d Hessian layers for octaves %d-%d on a %dx%d image",
                     len(self.layers), self.octave_start, self.octave_end,
                     image.width, image.height)

    def get_layer(self, octave: int, interval: int) -> OctaveLayer:
        return self.layers[(octave, interval)]

    @staticmethod
    def is_extremum(row: int, col: int, bot: OctaveLayer, mid: OctaveLayer,
                    top: OctaveLayer, threshold: float) -> bool:
        """
        Check whether (row, col) of the mid layer is a local maximum

        The point must lie farther than the top layer's radius from every
        border, its determinant must exceed the threshold, and it must be
        strictly greater than all 26 neighbours of the 3x3x3 block.
        """
        radius = top.radius
        if (row <= radius or col <= radius or
                row + radius >= top.height or col + radius >= top.width):
            return False

        value = mid.det_hessians[row, col]
        if value <= threshold:
            return False

        for i in range(-1, 2):
            for j in range(-1, 2):
                if top.det_hessians[row + i, col + j] >= value:
                    return False
                if bot.det_hessians[row + i, col + j] >= value:
                    return False
                if (i != 0 or j != 0) and mid.det_hessians[row + i, col + j] >= value:
                    return False

        return True

    @staticmethod
    def find_extrema(bot: OctaveLayer, mid: OctaveLayer, top: OctaveLayer,
                     threshold: float) -> np.ndarray:
        """
        Vectorized is_extremum over the whole mid layer

        Returns:
            Integer array [N, 2] of (row, col) positions in row-major order
        """
        height, width = mid.height, mid.width
        radius = top.radius
        if height <= 2 * radius + 1 or width <= 2 * radius + 1:
            return np.empty((0, 2), dtype=int)

        inside = np.zeros((height, width), dtype=bool)
        inside[radius + 1:height - radius, radius + 1:width - radius] = True

        ring = np.ones((3, 3), dtype=bool)
        ring[1, 1] = False

        values = mid.det_hessians
        mid_max = maximum_filter(values, footprint=ring, mode='nearest')
        bot_max = maximum_filter(bot.det_hessians, size=3, mode='nearest')
        top_max = maximum_filter(top.det_hessians, size=3, mode='nearest')

        mask = (inside & (values > threshold) &
                (values > mid_max) & (values > bot_max) & (values > top_max))

        return np.argwhere(mask)
