from __future__ import annotations

import numpy as np
import pytest

from color_reference.extract import extract_clustered_colors, extract_dominant_colors


def _solid(height: int, width: int, rgba) -> np.ndarray:
    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[:, :] = rgba
    return image


def test_single_color_image_returns_that_color():
    image = _solid(10, 10, [30, 120, 210, 255])
    assert extract_dominant_colors(image, max_colors=8) == ["#1E78D2"]


def test_fully_transparent_image_returns_nothing():
    image = _solid(10, 10, [30, 120, 210, 0])
    assert extract_dominant_colors(image) == []


def test_accepts_flat_bytes():
    buffer = bytes([255, 0, 0, 255] * 40)
    assert extract_dominant_colors(buffer) == ["#FF0000"]


def test_orders_by_frequency_then_first_encounter():
    a = [10, 10, 10, 255]
    b = [200, 0, 0, 255]
    c = [0, 0, 200, 255]
    pixels = np.array([a, b, b, c, c], dtype=np.uint8)

    assert extract_dominant_colors(pixels, stride=1) == ["#C80000", "#0000C8", "#0A0A0A"]


def test_only_every_tenth_pixel_is_sampled():
    pixels = np.zeros((20, 4), dtype=np.uint8)
    pixels[:] = [0, 0, 255, 255]
    pixels[0] = [255, 0, 0, 255]
    pixels[10] = [255, 0, 0, 255]

    assert extract_dominant_colors(pixels) == ["#FF0000"]


def test_alpha_threshold_boundary():
    pixels = np.array([[0, 255, 0, 127], [0, 0, 255, 128]], dtype=np.uint8)
    assert extract_dominant_colors(pixels, stride=1) == ["#0000FF"]


def test_max_colors_caps_output():
    pixels = np.array([[idx, 0, 0, 255] for idx in range(20)], dtype=np.uint8)
    assert len(extract_dominant_colors(pixels, max_colors=4, stride=1)) == 4
    assert extract_dominant_colors(pixels, max_colors=0, stride=1) == []


def test_buffer_length_must_be_rgba():
    with pytest.raises(ValueError):
        extract_dominant_colors(bytes([1, 2, 3, 4, 5]))


def test_clustered_colors_orders_by_cluster_size():
    image = _solid(10, 10, [200, 30, 30, 255])
    image[:, 7:] = [30, 60, 200, 255]

    colors = extract_clustered_colors(image, max_colors=4)

    assert colors == ["#C81E1E", "#1E3CC8"]


def test_clustered_colors_skip_transparent_pixels():
    assert extract_clustered_colors(_solid(4, 4, [1, 2, 3, 0])) == []


def test_rgb_array_without_alpha_is_rejected():
    image = np.zeros((4, 4, 3), dtype=np.uint8)
    image[:, :] = [10, 200, 30]

    with pytest.raises(ValueError, match="RGBA"):
        extract_dominant_colors(image, stride=1)
    with pytest.raises(ValueError, match="RGBA"):
        extract_clustered_colors(image)
