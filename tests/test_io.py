from unittest.mock import MagicMock, patch
import io

import numpy as np
from PIL import Image
import pytest
import requests

from color_reference.io import crop_region, read_image_rgba, write_result_json


def _png_bytes(color) -> bytes:
    img = Image.new("RGB", (10, 10), color=color)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def test_read_image_rgba_url_success():
    with patch("requests.get") as mock_get:
        mock_response = MagicMock()
        mock_response.content = _png_bytes("red")
        mock_response.raise_for_status.return_value = None
        mock_get.return_value = mock_response

        url = "http://example.com/image.png"
        result = read_image_rgba(url)

        mock_get.assert_called_once_with(url, timeout=10)
        assert result.shape == (10, 10, 4)
        assert np.all(result[0, 0] == [255, 0, 0, 255])


def test_read_image_rgba_url_failure():
    with patch("requests.get") as mock_get:
        mock_response = MagicMock()
        mock_response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            "404 Client Error"
        )
        mock_get.return_value = mock_response

        with pytest.raises(requests.exceptions.HTTPError):
            read_image_rgba("http://example.com/nonexistent.png")


def test_read_image_rgba_keeps_transparency(tmp_path):
    img = Image.new("RGBA", (6, 4), color=(0, 0, 255, 0))
    img_path = tmp_path / "transparent.png"
    img.save(img_path)

    result = read_image_rgba(str(img_path))

    assert result.shape == (4, 6, 4)
    assert np.all(result[..., 3] == 0)


def test_crop_region_clips_to_image():
    image = np.zeros((20, 30, 4), dtype=np.uint8)
    image[5:10, 10:20] = [255, 0, 0, 255]

    assert crop_region(image, (10, 5, 10, 5)).shape == (5, 10, 4)
    assert crop_region(image, (25, 15, 100, 100)).shape == (5, 5, 4)


@pytest.mark.parametrize("region", [(0, 0, 0, 5), (40, 40, 5, 5)])
def test_crop_region_rejects_empty_selection(region):
    with pytest.raises(ValueError):
        crop_region(np.zeros((10, 10, 4), dtype=np.uint8), region)


def test_write_result_json_creates_parents(tmp_path):
    out_path = tmp_path / "nested" / "result.json"
    write_result_json({"colors": ["#FF0000"]}, out_path)
    assert out_path.read_text(encoding="utf-8") == '{\n  "colors": [\n    "#FF0000"\n  ]\n}\n'
