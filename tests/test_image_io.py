"""Tests for resampling and image output."""

import pytest
import numpy as np
from PIL import Image

from solotracer.image_io import downscale, write_ppm, pixels_to_array, save_image


def gradient(width, height):
    """Buffer where each pixel encodes its own (x, y) position."""
    return [(x, y, 0) for y in range(height) for x in range(width)]


class TestDownscale:
    """Test nearest-neighbour resampling."""

    def test_halving_takes_even_pixels(self):
        result = downscale(gradient(4, 4), 4, 4, 2, 2)
        assert result == [(0, 0, 0), (2, 0, 0), (0, 2, 0), (2, 2, 0)]

    def test_same_size_is_identity(self):
        pixels = gradient(3, 2)
        assert downscale(pixels, 3, 2, 3, 2) == pixels

    def test_non_integer_ratio(self):
        result = downscale(gradient(5, 1), 5, 1, 2, 1)
        # x ratio 2.5: destination columns 0, 1 read source columns 0, 2
        assert result == [(0, 0, 0), (2, 0, 0)]

    def test_upscale_repeats(self):
        result = downscale(gradient(2, 1), 2, 1, 4, 1)
        assert [p[0] for p in result] == [0, 0, 1, 1]

    def test_wrong_buffer_size(self):
        with pytest.raises(ValueError):
            downscale(gradient(2, 2), 3, 3, 1, 1)


class TestWritePPM:
    """Test plain-text PPM output."""

    def test_contents(self, tmp_path):
        path = tmp_path / "out.ppm"
        write_ppm(path, 2, 1, [(255, 0, 0), (1, 2, 3)])
        assert path.read_text() == "P3\n2 1\n255\n255 0 0\n1 2 3\n"

    def test_custom_max_value(self, tmp_path):
        path = tmp_path / "dim.ppm"
        write_ppm(path, 1, 1, [(10, 20, 30)], max_value=500)
        assert path.read_text().splitlines()[2] == "500"

    def test_accepts_str_path(self, tmp_path):
        path = str(tmp_path / "out.ppm")
        write_ppm(path, 1, 1, [(0, 0, 0)])
        assert open(path).read().startswith("P3")


class TestPixelsToArray:
    """Test conversion to numpy."""

    def test_shape(self):
        arr = pixels_to_array(gradient(3, 2), 3, 2)
        assert arr.shape == (2, 3, 3)
        assert arr.dtype == np.uint8
        assert tuple(arr[1, 2]) == (2, 1, 0)

    def test_rescales_max_value(self):
        arr = pixels_to_array([(250, 100, 0)], 1, 1, max_value=500)
        assert tuple(arr[0, 0]) == (127, 51, 0)


class TestSaveImage:
    """Test format dispatch."""

    def test_ppm_extension(self, tmp_path):
        path = tmp_path / "out.PPM"
        save_image(path, 1, 1, [(1, 2, 3)])
        assert path.read_text().startswith("P3\n1 1\n255\n")

    def test_png_through_pillow(self, tmp_path):
        path = tmp_path / "out.png"
        save_image(path, 2, 1, [(255, 0, 0), (0, 255, 0)])
        with Image.open(path) as img:
            assert img.size == (2, 1)
            assert img.getpixel((0, 0)) == (255, 0, 0)
            assert img.getpixel((1, 0)) == (0, 255, 0)
