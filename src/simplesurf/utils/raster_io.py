import numpy as np
from skimage import io
from typing import Tuple

Bands = Tuple[np.ndarray, np.ndarray, np.ndarray]


def split_rgb_bands(image: np.ndarray) -> Bands:
    """
    Split an image array into red, green and blue bands

    Grayscale images give the same band three times; an alpha channel is
    ignored.

    Args:
        image: Array [H, W] or [H, W, C] with C >= 3

    Returns:
        (red, green, blue) arrays [H, W]
    """
    image = np.asarray(image)

    if image.ndim == 2:
        return image, image, image

    if image.ndim == 3 and image.shape[2] >= 3:
        return image[:, :, 0], image[:, :, 1], image[:, :, 2]

    raise ValueError(f"Unsupported image shape {image.shape}, expected [H, W] or [H, W, 3+]")


def read_rgb_bands(path: str) -> Bands:
    """Load an image file and return its (red, green, blue) bands"""
    image = io.imread(str(path))
    return split_rgb_bands(image)
