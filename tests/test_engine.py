from __future__ import annotations

import numpy as np
from PIL import Image
import pytest

from color_reference.engine import ColorReferenceEngine, UnknownMediumError
from color_reference.models import CatalogEntry, Pigment

CATALOG = [
    CatalogEntry(id=1, brand="Alpha", name="Alpha Red", code="A1", hex="#FF0000"),
    CatalogEntry(id=2, brand="Alpha", name="Alpha Blue", code="A2", hex="#0000FF"),
    CatalogEntry(id=1, brand="Beta", name="Beta Red", code="B1", hex="#F00000"),
    CatalogEntry(id=2, brand="Beta", name="Beta Azure", code="B2", hex="#1E78D2"),
]
PIGMENTS = {
    "basic": [
        Pigment(name="White", hex="#FFFFFF"),
        Pigment(name="Black", hex="#000000"),
    ]
}


def _engine() -> ColorReferenceEngine:
    return ColorReferenceEngine(catalog=CATALOG, pigment_sets=PIGMENTS)


def test_match_uses_injected_catalog():
    matches = _engine().match("#FF0000", k=2)
    assert [match.entry.name for match in matches] == ["Alpha Red", "Beta Red"]


def test_match_can_be_limited_to_a_brand():
    matches = _engine().match("#FF0000", k=1, brand="Beta")
    assert matches[0].entry.name == "Beta Red"


def test_mix_with_known_medium():
    mixes = _engine().mix("#808080", "basic")
    assert mixes[0].hex == "#808080"


def test_unknown_medium_raises_key_error():
    with pytest.raises(UnknownMediumError) as exc_info:
        _engine().mix("#808080", "gouache")
    assert isinstance(exc_info.value, KeyError)
    assert "gouache" in str(exc_info.value)


def test_injected_data_is_read_only():
    engine = _engine()
    assert isinstance(engine.catalog, tuple)
    with pytest.raises(TypeError):
        engine.pigment_sets["other"] = ()


def test_extract_from_rgb_array_with_region():
    image = np.zeros((40, 40, 3), dtype=np.uint8)
    image[:, :] = [0, 0, 255]
    image[10:20, 10:20] = [30, 120, 210]

    result = _engine().extract(image, region=(10, 10, 10, 10))

    assert result.colors == ["#1E78D2"]
    assert result.matches[0].entry.name == "Beta Azure"
    assert result.matches[0].accuracy == 100.0
    assert result.region == (10, 10, 10, 10)
    assert result.warnings == []


def test_extract_from_image_file(tmp_path):
    image = np.zeros((30, 30, 3), dtype=np.uint8)
    image[:, :] = [255, 0, 0]
    image_path = tmp_path / "solid.png"
    Image.fromarray(image, mode="RGB").save(image_path)

    result = _engine().extract(str(image_path), method="kmeans")

    assert result.colors == ["#FF0000"]
    assert [match.entry.name for match in result.matches] == ["Alpha Red", "Beta Red"]


def test_extract_transparent_image_warns():
    image = np.zeros((10, 10, 4), dtype=np.uint8)

    result = _engine().extract(image)

    assert result.colors == []
    assert result.matches == []
    assert result.warnings == ["no_visible_pixels"]


def test_extract_rejects_unknown_method():
    with pytest.raises(ValueError):
        _engine().extract(np.zeros((4, 4, 4), dtype=np.uint8), method="median-cut")


def test_default_engine_uses_bundled_data():
    engine = ColorReferenceEngine()
    assert len(engine.catalog) == 63
    assert "oil_palette" in engine.mediums
    assert engine.match("#C41E3A")[0].entry.code == "PC924"


def test_extract_scales_float_images():
    image = np.zeros((10, 10, 3), dtype=np.float64)
    image[:, :] = [0.2, 0.4, 0.6]

    result = _engine().extract(image)

    assert result.colors == ["#336699"]


def test_extract_rejects_float_images_outside_unit_range():
    image = np.full((10, 10, 3), 128.0)

    with pytest.raises(ValueError):
        _engine().extract(image)
