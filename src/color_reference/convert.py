"""Conversions between HEX, RGB, HSL, HSV and CIE-Lab.

Public convention for the cylindrical models: hue in degrees [0, 360),
saturation / lightness / value as percentages [0, 100]. The math below runs
on fractions in [0, 1]; the ``*_to_fraction`` / ``fraction_to_*`` helpers
are the only place the two conventions meet.
"""

from __future__ import annotations

import math
import re

import numpy as np
from skimage import color as skcolor

from .models import LAB, RGB, ColorInput, NamedColor

_HEX_PATTERN = re.compile(r"^#?[0-9A-Fa-f]{6}$")

# sRGB primaries, D65 reference white (Xn, Yn, Zn on the 0-100 scale).
_XYZ_FROM_RGB = np.array(
    [
        [0.4124, 0.3576, 0.1805],
        [0.2126, 0.7152, 0.0722],
        [0.0193, 0.1192, 0.9505],
    ],
    dtype=np.float64,
)
_REFERENCE_WHITE = np.array([95.047, 100.0, 108.883], dtype=np.float64)
_LAB_EPSILON = 0.008856


class InvalidColorFormat(ValueError):
    pass


def normalize_hex(value: str) -> str:
    if not isinstance(value, str) or not _HEX_PATTERN.match(value.strip()):
        raise InvalidColorFormat(f"invalid hex color {value!r}, expected #RRGGBB")
    digits = value.strip().lstrip("#")
    return f"#{digits.upper()}"


def to_hex(color: ColorInput) -> str:
    if isinstance(color, NamedColor):
        return normalize_hex(color.hex)
    return normalize_hex(color)


def hex_to_rgb(value: str) -> RGB:
    digits = normalize_hex(value)[1:]
    return (
        int(digits[0:2], 16),
        int(digits[2:4], 16),
        int(digits[4:6], 16),
    )


def round_channel(value: float) -> int:
    # half-up, so 127.5 -> 128 regardless of parity
    return int(math.floor(value + 0.5))


def rgb_to_hex(r: float, g: float, b: float) -> str:
    channels = []
    for value in (r, g, b):
        if not math.isfinite(value):
            raise InvalidColorFormat(f"rgb channel must be finite, got {value!r}")
        rounded = round_channel(value)
        if not 0 <= rounded <= 255:
            raise InvalidColorFormat(f"rgb channel out of range 0-255: {value!r}")
        channels.append(rounded)
    return f"#{channels[0]:02X}{channels[1]:02X}{channels[2]:02X}"


def hue_to_fraction(degrees: float) -> float:
    return (degrees % 360.0) / 360.0


def fraction_to_hue(fraction: float) -> float:
    return (fraction * 360.0) % 360.0


def percent_to_fraction(percent: float) -> float:
    if not 0.0 <= percent <= 100.0:
        raise InvalidColorFormat(f"percentage out of range 0-100: {percent!r}")
    return percent / 100.0


def fraction_to_percent(fraction: float) -> float:
    return fraction * 100.0


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[float, float, float]:
    red, green, blue = r / 255.0, g / 255.0, b / 255.0
    high = max(red, green, blue)
    low = min(red, green, blue)
    lightness = (high + low) / 2.0

    if high == low:
        return 0.0, 0.0, fraction_to_percent(lightness)

    delta = high - low
    if lightness > 0.5:
        saturation = delta / (2.0 - high - low)
    else:
        saturation = delta / (high + low)

    if high == red:
        hue = (green - blue) / delta + (6.0 if green < blue else 0.0)
    elif high == green:
        hue = (blue - red) / delta + 2.0
    else:
        hue = (red - green) / delta + 4.0

    return (
        fraction_to_hue(hue / 6.0),
        fraction_to_percent(saturation),
        fraction_to_percent(lightness),
    )


def hsl_to_rgb(h: float, s: float, l: float) -> RGB:
    hue = hue_to_fraction(h) * 6.0
    saturation = percent_to_fraction(s)
    lightness = percent_to_fraction(l)

    chroma = (1.0 - abs(2.0 * lightness - 1.0)) * saturation
    second = chroma * (1.0 - abs(hue % 2.0 - 1.0))
    offset = lightness - chroma / 2.0

    sector = int(hue) % 6
    red, green, blue = (
        (chroma, second, 0.0),
        (second, chroma, 0.0),
        (0.0, chroma, second),
        (0.0, second, chroma),
        (second, 0.0, chroma),
        (chroma, 0.0, second),
    )[sector]
    return (
        round_channel((red + offset) * 255.0),
        round_channel((green + offset) * 255.0),
        round_channel((blue + offset) * 255.0),
    )


def rgb_to_hsv(r: int, g: int, b: int) -> tuple[float, float, float]:
    rgb_arr = np.array((r, g, b), dtype=np.float64).reshape(1, 1, 3) / 255.0
    hue, saturation, value = skcolor.rgb2hsv(rgb_arr).reshape(3)
    return (
        fraction_to_hue(float(hue)),
        fraction_to_percent(float(saturation)),
        fraction_to_percent(float(value)),
    )


def hsv_to_rgb(h: float, s: float, v: float) -> RGB:
    hsv_arr = np.array(
        (hue_to_fraction(h), percent_to_fraction(s), percent_to_fraction(v)),
        dtype=np.float64,
    ).reshape(1, 1, 3)
    rgb = skcolor.hsv2rgb(hsv_arr).reshape(3) * 255.0
    return (
        round_channel(float(rgb[0])),
        round_channel(float(rgb[1])),
        round_channel(float(rgb[2])),
    )


def hex_to_hsl(value: str) -> tuple[float, float, float]:
    return rgb_to_hsl(*hex_to_rgb(value))


def hsl_to_hex(h: float, s: float, l: float) -> str:
    return rgb_to_hex(*hsl_to_rgb(h, s, l))


def hex_to_hsv(value: str) -> tuple[float, float, float]:
    return rgb_to_hsv(*hex_to_rgb(value))


def hsv_to_hex(h: float, s: float, v: float) -> str:
    return rgb_to_hex(*hsv_to_rgb(h, s, v))


def rgb_array_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert sRGB values (0-255) of shape (..., 3) to CIE-Lab.

    The XYZ step is a matrix product over the original linear triple, so each
    of X, Y and Z is computed from the same untouched input.
    """
    values = np.asarray(rgb, dtype=np.float64) / 255.0
    linear = np.where(
        values > 0.04045,
        np.power((values + 0.055) / 1.055, 2.4),
        values / 12.92,
    )
    xyz = (linear * 100.0) @ _XYZ_FROM_RGB.T
    scaled = xyz / _REFERENCE_WHITE
    f = np.where(
        scaled > _LAB_EPSILON,
        np.cbrt(scaled),
        7.787 * scaled + 16.0 / 116.0,
    )
    l_star = 116.0 * f[..., 1] - 16.0
    a_star = 500.0 * (f[..., 0] - f[..., 1])
    b_star = 200.0 * (f[..., 1] - f[..., 2])
    return np.stack([l_star, a_star, b_star], axis=-1)


def rgb_to_lab(r: int, g: int, b: int) -> LAB:
    lab = rgb_array_to_lab(np.array((r, g, b), dtype=np.float64))
    return float(lab[0]), float(lab[1]), float(lab[2])


def hex_to_lab(value: str) -> LAB:
    return rgb_to_lab(*hex_to_rgb(value))


def lab_to_rgb(lab: LAB) -> RGB:
    lab_arr = np.array(lab, dtype=np.float64).reshape(1, 1, 3)
    rgb = skcolor.lab2rgb(lab_arr).reshape(3)
    clipped = np.clip(np.round(rgb * 255.0), 0, 255).astype(np.uint8)
    return int(clipped[0]), int(clipped[1]), int(clipped[2])
