import os
import sys

import numpy as np
import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

# (row, col, sigma, amplitude) of the synthetic blobs
BLOBS = [
    (50, 50, 2.0, 200),
    (55, 110, 3.0, 160),
    (105, 60, 2.5, 230),
    (110, 105, 1.6, 180),
    (80, 80, 3.5, 120),
]


def render_blobs(shape=(160, 160), blobs=BLOBS) -> np.ndarray:
    """Bright Gaussian blobs on an exactly zero background, as uint8"""
    rows, cols = np.mgrid[:shape[0], :shape[1]]
    image = np.zeros(shape, dtype=np.float64)
    for row, col, sigma, amplitude in blobs:
        image += amplitude * np.exp(-((rows - row) ** 2 + (cols - col) ** 2) / (2 * sigma ** 2))
    return np.clip(np.round(image), 0, 255).astype(np.uint8)


@pytest.fixture
def blob_image():
    """Grayscale blob image in [0, 1); multiples of 1/256 keep every box sum exact"""
    return render_blobs().astype(np.float64) / 256.0


@pytest.fixture
def blob_image_uint8():
    return render_blobs()
