from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any

import numpy as np
import requests
from PIL import Image

Region = tuple[int, int, int, int]


def read_image_rgba(image_path: str | Path) -> np.ndarray:
    path_str = str(image_path)
    if path_str.startswith(("http://", "https://")):
        response = requests.get(path_str, timeout=10)
        response.raise_for_status()
        image_data = io.BytesIO(response.content)
        with Image.open(image_data) as image:
            rgba = image.convert("RGBA")
            return np.asarray(rgba, dtype=np.uint8)

    path = Path(image_path)
    with Image.open(path) as image:
        rgba = image.convert("RGBA")
        return np.asarray(rgba, dtype=np.uint8)


def crop_region(image_rgba: np.ndarray, region: Region) -> np.ndarray:
    """Cut an ``(x, y, width, height)`` selection, clipped to the image."""
    if image_rgba.ndim != 3 or image_rgba.shape[2] != 4:
        raise ValueError("image_rgba must have shape (H, W, 4)")

    x, y, width, height = region
    if width <= 0 or height <= 0:
        raise ValueError("selection width and height must be positive")

    image_h, image_w = image_rgba.shape[:2]
    left, top = max(0, x), max(0, y)
    right, bottom = min(image_w, x + width), min(image_h, y + height)
    if left >= right or top >= bottom:
        raise ValueError(f"selection {region} lies outside the {image_w}x{image_h} image")

    return image_rgba[top:bottom, left:right]


def write_result_json(payload: Any, output_path: str | Path) -> None:
    if hasattr(payload, "to_dict"):
        payload = payload.to_dict()
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
