from __future__ import annotations

import math

import numpy as np

from .convert import hex_to_rgb, rgb_array_to_lab, to_hex
from .models import ColorInput

# Graphic-arts weighting.
K_L = 1.0
K_C = 1.0
K_H = 1.0
K_1 = 0.045
K_2 = 0.015


def delta_e_cie94(
    lab1: np.ndarray,
    lab2: np.ndarray,
    symmetric: bool = True,
) -> np.ndarray:
    """CIE94 difference between Lab values of shape (..., 3).

    The textbook form weights chroma and hue by the chroma of ``lab1`` and is
    therefore order dependent. With ``symmetric`` the weights use the
    geometric mean chroma of both colors instead.

    The two forms can rank near neighbours differently. Against the bundled
    catalog, ``#FF0000`` ranks Poppy Red before Vermillion when symmetric and
    Vermillion first otherwise. Pass ``symmetric=False`` to reproduce
    rankings computed with the textbook formula.
    """
    lab1 = np.asarray(lab1, dtype=np.float64)
    lab2 = np.asarray(lab2, dtype=np.float64)

    delta_l = lab1[..., 0] - lab2[..., 0]
    delta_a = lab1[..., 1] - lab2[..., 1]
    delta_b = lab1[..., 2] - lab2[..., 2]
    c1 = np.hypot(lab1[..., 1], lab1[..., 2])
    c2 = np.hypot(lab2[..., 1], lab2[..., 2])
    delta_c = c1 - c2

    # floating point can push this slightly below zero
    delta_h = np.sqrt(
        np.maximum(delta_a * delta_a + delta_b * delta_b - delta_c * delta_c, 0.0)
    )

    weight_chroma = np.sqrt(c1 * c2) if symmetric else c1
    s_l = 1.0
    s_c = 1.0 + K_1 * weight_chroma
    s_h = 1.0 + K_2 * weight_chroma

    term_l = delta_l / (K_L * s_l)
    term_c = delta_c / (K_C * s_c)
    term_h = delta_h / (K_H * s_h)
    return np.sqrt(term_l * term_l + term_c * term_c + term_h * term_h)


def color_distance(color_a: ColorInput, color_b: ColorInput) -> float:
    lab_a = rgb_array_to_lab(np.array(hex_to_rgb(to_hex(color_a)), dtype=np.float64))
    lab_b = rgb_array_to_lab(np.array(hex_to_rgb(to_hex(color_b)), dtype=np.float64))
    return float(delta_e_cie94(lab_a, lab_b))


def accuracy_from_distance(distance: float) -> float:
    if math.isnan(distance):
        raise ValueError("distance must not be NaN")
    return max(0.0, min(100.0, 100.0 - distance / 4.0))
