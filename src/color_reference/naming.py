from __future__ import annotations

from .convert import hex_to_hsl, to_hex
from .models import ColorInput

# Hue in degrees where each name starts; a name runs up to the next start.
# Red wraps through 0 (355 up to 11).
_HUE_STARTS: tuple[tuple[float, str], ...] = (
    (11.0, "Orange"),
    (41.0, "Yellow"),
    (71.0, "Green"),
    (151.0, "Cyan"),
    (191.0, "Blue"),
    (261.0, "Purple"),
    (306.0, "Magenta"),
    (355.0, "Red"),
)


def describe_color(color: ColorInput) -> str:
    """Approximate human name such as "Dark Grayish Blue"."""
    hue, saturation, lightness = hex_to_hsl(to_hex(color))

    if saturation < 10.0:
        if lightness < 20.0:
            return "Black"
        if lightness > 80.0:
            return "White"
        return "Gray"

    prefix = "Grayish " if saturation < 30.0 else ""
    if lightness < 25.0:
        prefix = "Dark " + prefix
    elif lightness > 75.0:
        prefix = "Light " + prefix

    return prefix + hue_name(hue)


def hue_name(hue: float) -> str:
    name = "Red"
    for start, candidate in _HUE_STARTS:
        if hue >= start:
            name = candidate
    return name
