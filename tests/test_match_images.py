import importlib.util
import os
import sys

import pytest
import numpy as np
from skimage import io

from simplesurf.errors import InvalidArgumentError

ROOT = os.path.join(os.path.dirname(__file__), '..')
SCRIPT = os.path.join(ROOT, 'scripts', 'match_images.py')
CONFIG = os.path.join(ROOT, 'configs', 'surf', 'default.py')


def load_script():
    spec = importlib.util.spec_from_file_location("match_images", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestMatchImagesScript:
    """Test cases for the command line matcher"""

    @pytest.fixture
    def image_pair(self, tmp_path, blob_image_uint8):
        first = tmp_path / "first.png"
        second = tmp_path / "second.png"
        io.imsave(str(first), blob_image_uint8, check_contrast=False)
        io.imsave(str(second), np.roll(blob_image_uint8, (3, 5), axis=(0, 1)),
                  check_contrast=False)
        return str(first), str(second)

    def run(self, monkeypatch, argv):
        script = load_script()
        calls = []
        pipeline = script.compute_matching_points

        def recording_pipeline(first_bands, second_bands, options=None):
            calls.append(options)
            return pipeline(first_bands, second_bands, options)

        monkeypatch.setattr(script, "compute_matching_points", recording_pipeline)
        monkeypatch.setattr(sys, "argv", ["match_images.py"] + argv)
        script.main()
        return calls

    def test_prints_shifted_pairs(self, monkeypatch, capsys, image_pair):
        calls = self.run(monkeypatch, list(image_pair) + [
            '--config', CONFIG, '--octave_start', '1', '--octave_end', '1',
            '--surf_threshold', '1e-4', '--matching_threshold', '1.0'])

        assert calls == [{
            'octave_start': 1,
            'octave_end': 1,
            'ratio_threshold': 0.8,
            'surf_threshold': 1e-4,
            'matching_threshold': 1.0,
        }]

        lines = capsys.readouterr().out.split('\n')
        pairs = [list(map(int, line.split())) for line in lines if line]
        assert len(pairs) > 0
        for x1, y1, x2, y2 in pairs:
            assert (x2 - x1, y2 - y1) == (5, 3)

    def test_invalid_octave_range_is_rejected(self, monkeypatch, image_pair):
        with pytest.raises(InvalidArgumentError):
            self.run(monkeypatch, list(image_pair) + [
                '--config', CONFIG, '--octave_start', '3', '--octave_end', '1'])
