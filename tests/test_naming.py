from __future__ import annotations

import pytest

from color_reference.models import NamedColor
from color_reference.naming import describe_color, hue_name


@pytest.mark.parametrize(
    ("hex_value", "expected"),
    [
        ("#FF0000", "Red"),
        ("#000000", "Black"),
        ("#FFFFFF", "White"),
        ("#808080", "Gray"),
        ("#000080", "Blue"),
        ("#00004D", "Dark Blue"),
        ("#FFB6C1", "Light Magenta"),
        ("#997366", "Grayish Orange"),
        ("#00FF00", "Green"),
    ],
)
def test_describe_color(hex_value, expected):
    assert describe_color(hex_value) == expected


def test_describe_named_color():
    assert describe_color(NamedColor("#FFFF00", "Lemon")) == "Yellow"


def test_red_wraps_through_zero():
    assert hue_name(358.0) == "Red"
    assert hue_name(5.0) == "Red"
    assert hue_name(10.5) == "Red"
    assert hue_name(11.0) == "Orange"
