import numpy as np
import cv2
from typing import Union

ArrayOrInt = Union[int, np.ndarray]


class IntegralImage:
    """
    Summed-area table of a grayscale image

    Supports constant-time rectangle sums and the two Haar wavelet
    responses used by the SURF descriptor. Every query accepts either
    scalars or numpy arrays of equal shape, so a whole sampling grid can
    be evaluated in one call.

    Windows that fall partly or completely outside the image are clipped;
    the outside part contributes zero.
    """

    def __init__(self, image: np.ndarray):
        """
        Build the integral image

        Args:
            image: 2-D image (typically luminosity in [0, 1])
        """
        image = np.ascontiguousarray(image, dtype=np.float64)
        if image.ndim != 2:
            raise ValueError(f"Integral image needs a 2-D array, got shape {image.shape}")

        self.height, self.width = image.shape

        if image.size == 0:
            self.matrix = np.zeros((self.height + 1, self.width + 1), dtype=np.float64)
        else:
            # Row 0 and column 0 are zero padding
            self.matrix = cv2.integral(image, sdepth=cv2.CV_64F)

    @property
    def shape(self):
        return self.height, self.width

    def get_value(self, row: ArrayOrInt, col: ArrayOrInt):
        """Inclusive prefix sum up to (row, col), zero outside the image"""
        row = np.asarray(row)
        col = np.asarray(col)
        inside = (row >= 0) & (col >= 0) & (row < self.height) & (col < self.width)

        r = np.clip(row, -1, self.height - 1) + 1
        c = np.clip(col, -1, self.width - 1) + 1
        values = np.where(inside, self.matrix[r, c], 0.0)
        return values if values.ndim else float(values)

    def get_rectangle_sum(self, row: ArrayOrInt, col: ArrayOrInt,
                          width: ArrayOrInt, height: ArrayOrInt):
        """
        Sum of the pixels in rows [row, row + height) and columns [col, col + width)

        Args:
            row, col: Top-left corner of the window
            width, height: Window size in pixels

        Returns:
            Window sum (scalar or array following the inputs)
        """
        r0 = np.clip(row, 0, self.height)
        r1 = np.clip(np.asarray(row) + height, 0, self.height)
        c0 = np.clip(col, 0, self.width)
        c1 = np.clip(np.asarray(col) + width, 0, self.width)

        m = self.matrix
        return m[r1, c1] - m[r0, c1] - m[r1, c0] + m[r0, c0]

    def haar_wavelet_x(self, row: ArrayOrInt, col: ArrayOrInt, size: int):
        """Horizontal Haar response: right half minus left half of a size x size window"""
        half = size // 2
        return (self.get_rectangle_sum(row, np.asarray(col) + half, half, size)
                - self.get_rectangle_sum(row, col, half, size))

    def haar_wavelet_y(self, row: ArrayOrInt, col: ArrayOrInt, size: int):
        """Vertical Haar response: bottom half minus top half of a size x size window"""
        half = size // 2
        return (self.get_rectangle_sum(np.asarray(row) + half, col, size, half)
                - self.get_rectangle_sum(row, col, size, half))
