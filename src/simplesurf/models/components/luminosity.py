import numpy as np
import cv2

from ...errors import InvalidArgumentError

RED_WEIGHT = 0.21
GREEN_WEIGHT = 0.72
BLUE_WEIGHT = 0.07
MAX_VALUE = 255.0


def _read_band(band: np.ndarray, x_size: int, y_size: int, out_shape) -> np.ndarray:
    """Read the [0:y_size, 0:x_size] window of a band, resampled to out_shape"""
    window = np.asarray(band, dtype=np.float64)[:y_size, :x_size]
    if window.shape != tuple(out_shape):
        # Nearest neighbour, as a raster read into a differently sized buffer
        window = cv2.resize(window, (out_shape[1], out_shape[0]),
                            interpolation=cv2.INTER_NEAREST)
    return window


def convert_rgb_to_luminosity(red: np.ndarray, green: np.ndarray, blue: np.ndarray,
                              x_size: int, y_size: int, out: np.ndarray) -> np.ndarray:
    """
    Convert three colour bands into a normalized luminosity image

    Only the red band's extent is checked against the requested window;
    green and blue are read as they are.

    Args:
        red, green, blue: 2-D band arrays (rows x columns), values in [0, 255]
        x_size: Width of the window to read from each band
        y_size: Height of the window to read from each band
        out: Float buffer [height, width] receiving 0.21 R + 0.72 G + 0.07 B over 255

    Returns:
        The filled output buffer
    """
    if red is None or green is None or blue is None:
        raise InvalidArgumentError("Raster bands are not specified")

    if x_size < 1 or y_size < 1:
        raise InvalidArgumentError(f"Invalid window size {x_size}x{y_size}")

    red_height, red_width = np.shape(red)[:2]
    if x_size > red_width or y_size > red_height:
        raise InvalidArgumentError("Red band has less size than has been requested")

    if out is None:
        raise InvalidArgumentError("Buffer isn't specified")

    out_shape = np.shape(out)
    red_values = _read_band(red, x_size, y_size, out_shape)
    green_values = _read_band(green, x_size, y_size, out_shape)
    blue_values = _read_band(blue, x_size, y_size, out_shape)

    out[...] = (red_values * RED_WEIGHT +
                green_values * GREEN_WEIGHT +
                blue_values * BLUE_WEIGHT) / MAX_VALUE
    return out
