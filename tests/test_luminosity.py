import pytest
import numpy as np

from simplesurf.errors import InvalidArgumentError
from simplesurf.models.components.luminosity import convert_rgb_to_luminosity


def band(value, shape=(4, 5), dtype=np.uint8):
    return np.full(shape, value, dtype=dtype)


class TestLuminosity:
    """Test cases for RGB to luminosity conversion"""

    def test_white_and_black(self):
        out = np.empty((4, 5))
        convert_rgb_to_luminosity(band(255), band(255), band(255), 5, 4, out)
        assert np.allclose(out, 1.0)

        convert_rgb_to_luminosity(band(0), band(0), band(0), 5, 4, out)
        assert np.all(out == 0.0)

    @pytest.mark.parametrize("channel, weight", [(0, 0.21), (1, 0.72), (2, 0.07)])
    def test_channel_weights(self, channel, weight):
        bands = [band(0), band(0), band(0)]
        bands[channel] = band(255)
        out = np.empty((4, 5))

        convert_rgb_to_luminosity(*bands, 5, 4, out)

        assert np.allclose(out, weight)

    def test_per_pixel_values(self):
        red = np.array([[0, 100], [200, 255]], dtype=np.uint16)
        green = np.array([[10, 20], [30, 40]], dtype=np.uint16)
        blue = np.array([[255, 0], [128, 64]], dtype=np.uint16)
        out = np.empty((2, 2))

        result = convert_rgb_to_luminosity(red, green, blue, 2, 2, out)

        expected = (0.21 * red + 0.72 * green + 0.07 * blue) / 255.0
        assert result is out
        assert np.allclose(out, expected)

    def test_reads_top_left_window(self):
        red = np.zeros((6, 6))
        red[:2, :3] = 255
        out = np.empty((2, 3))

        convert_rgb_to_luminosity(red, band(0, (6, 6)), band(0, (6, 6)), 3, 2, out)

        assert np.allclose(out, 0.21)

    def test_resamples_into_buffer_size(self):
        out = np.empty((2, 2))
        convert_rgb_to_luminosity(band(255, (4, 4)), band(255, (4, 4)), band(255, (4, 4)),
                                  4, 4, out)
        assert np.allclose(out, 1.0)

    @pytest.mark.parametrize("missing", [0, 1, 2])
    def test_missing_band(self, missing):
        bands = [band(10), band(10), band(10)]
        bands[missing] = None
        with pytest.raises(InvalidArgumentError):
            convert_rgb_to_luminosity(*bands, 5, 4, np.empty((4, 5)))

    def test_missing_buffer(self):
        with pytest.raises(InvalidArgumentError):
            convert_rgb_to_luminosity(band(10), band(10), band(10), 5, 4, None)

    @pytest.mark.parametrize("x_size, y_size", [(6, 4), (5, 5), (9, 9)])
    def test_extent_larger_than_red_band(self, x_size, y_size):
        out = np.full((4, 5), -1.0)
        with pytest.raises(InvalidArgumentError):
            convert_rgb_to_luminosity(band(255), band(255), band(255), x_size, y_size, out)
        # Validation happens before anything is written
        assert np.all(out == -1.0)

    @pytest.mark.parametrize("x_size, y_size", [(0, 4), (5, 0), (-3, -2), (-1, 4)])
    def test_empty_or_negative_window(self, x_size, y_size):
        out = np.full((4, 5), -1.0)
        with pytest.raises(InvalidArgumentError):
            convert_rgb_to_luminosity(band(255), band(255), band(255), x_size, y_size, out)
        assert np.all(out == -1.0)

    def test_green_and_blue_extents_are_not_checked(self):
        # Only the red band is validated against the requested window
        out = np.empty((4, 5))
        convert_rgb_to_luminosity(band(0), band(255, (2, 2)), band(0, (3, 1)), 5, 4, out)
        assert np.allclose(out, 0.72)

    def test_invalid_red_leaves_previous_result(self):
        out = np.empty((4, 5))
        convert_rgb_to_luminosity(band(255), band(255), band(255), 5, 4, out)
        with pytest.raises(InvalidArgumentError):
            convert_rgb_to_luminosity(band(0, (2, 2)), band(0), band(0), 5, 4, out)
        assert np.allclose(out, 1.0)
