from __future__ import annotations

import logging
from typing import Union

import numpy as np
from sklearn.cluster import KMeans

from .convert import rgb_array_to_lab, rgb_to_hex

log = logging.getLogger(__name__)

PixelBuffer = Union[bytes, bytearray, memoryview, list, np.ndarray]

DEFAULT_MAX_COLORS = 8
DEFAULT_STRIDE = 10
ALPHA_THRESHOLD = 128


def extract_dominant_colors(
    pixels: PixelBuffer,
    max_colors: int = DEFAULT_MAX_COLORS,
    stride: int = DEFAULT_STRIDE,
    alpha_threshold: int = ALPHA_THRESHOLD,
) -> list[str]:
    """Most frequent colors of an RGBA buffer, as ``#RRGGBB`` strings.

    Every ``stride``-th pixel is sampled and pixels with alpha below
    ``alpha_threshold`` are skipped. Colors with equal counts keep the order
    in which they were first encountered.
    """
    if stride < 1:
        raise ValueError("stride must be at least 1")
    if max_colors <= 0:
        return []

    sampled = _visible_pixels(pixels, alpha_threshold, stride)
    if sampled.shape[0] == 0:
        return []

    packed = (
        sampled[:, 0].astype(np.uint32) << 16
        | sampled[:, 1].astype(np.uint32) << 8
        | sampled[:, 2].astype(np.uint32)
    )
    values, first_seen, counts = np.unique(
        packed, return_index=True, return_counts=True
    )
    ordered = np.lexsort((first_seen, -counts))[:max_colors]

    return [
        rgb_to_hex(
            int(values[idx] >> 16) & 0xFF,
            int(values[idx] >> 8) & 0xFF,
            int(values[idx]) & 0xFF,
        )
        for idx in ordered
    ]


def extract_clustered_colors(
    pixels: PixelBuffer,
    max_colors: int = DEFAULT_MAX_COLORS,
    stride: int = 1,
    alpha_threshold: int = ALPHA_THRESHOLD,
    random_state: int = 42,
) -> list[str]:
    """K-means centers in Lab space, largest cluster first.

    Coarser than frequency counting; useful for photographs where gradients
    spread one perceived color over many exact values.
    """
    if max_colors <= 0:
        return []

    sampled = _visible_pixels(pixels, alpha_threshold, stride)
    if sampled.shape[0] == 0:
        return []

    rgb = sampled[:, :3].astype(np.float64)
    unique_count = np.unique(sampled[:, :3], axis=0).shape[0]
    n_clusters = max(1, min(int(max_colors), unique_count))

    kmeans = KMeans(n_clusters=n_clusters, n_init=10, random_state=random_state)
    labels = kmeans.fit_predict(rgb_array_to_lab(rgb))
    counts = np.bincount(labels, minlength=n_clusters)

    colors: list[str] = []
    for cluster in np.argsort(-counts, kind="stable"):
        members = rgb[labels == cluster]
        if members.shape[0] == 0:
            continue
        # mean of the member pixels avoids an inverse Lab round trip
        mean = np.clip(members.mean(axis=0), 0.0, 255.0)
        hex_value = rgb_to_hex(float(mean[0]), float(mean[1]), float(mean[2]))
        if hex_value not in colors:
            colors.append(hex_value)

    log.debug("k-means extracted %d colors from %d pixels", len(colors), rgb.shape[0])
    return colors


def _visible_pixels(pixels: PixelBuffer, alpha_threshold: int, stride: int) -> np.ndarray:
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        flat = np.frombuffer(pixels, dtype=np.uint8)
    else:
        flat = np.asarray(pixels)
        if flat.dtype != np.uint8:
            if flat.size and (flat.min() < 0 or flat.max() > 255):
                raise ValueError("pixel values must be within 0-255")
            flat = flat.astype(np.uint8)

    if flat.ndim > 1 and flat.shape[-1] != 4:
        raise ValueError(
            f"pixel array must have 4 (RGBA) channels on its last axis, got shape {flat.shape}"
        )
    if flat.size % 4 != 0:
        raise ValueError("pixel buffer length must be a multiple of 4 (RGBA)")

    rgba = flat.reshape(-1, 4)[::stride]
    return rgba[rgba[:, 3] >= alpha_threshold]
