from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from pathlib import Path
from types import MappingProxyType

import numpy as np
from skimage.util import img_as_ubyte

from .catalog import (
    available_pigment_sets,
    filter_catalog,
    load_all_bundled_catalogs,
    load_pigment_set,
)
from .extract import DEFAULT_MAX_COLORS, extract_clustered_colors, extract_dominant_colors
from .io import Region, crop_region, read_image_rgba
from .matching import DEFAULT_TOP_K, find_closest_matches, match_palette
from .mixing import find_mixes
from .models import (
    CatalogEntry,
    ColorInput,
    ExtractionResult,
    MatchResult,
    MixCandidate,
    Pigment,
)

log = logging.getLogger(__name__)

EXTRACTION_METHODS = ("frequency", "kmeans")


class UnknownMediumError(KeyError):
    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class ColorReferenceEngine:
    """Matching, mixing and extraction over injected, read-only data.

    Omitted catalogs and pigment sets fall back to the bundled data. Nothing
    held here is mutated after construction, so one engine can serve
    concurrent callers.
    """

    def __init__(
        self,
        catalog: Sequence[CatalogEntry] | None = None,
        pigment_sets: Mapping[str, Sequence[Pigment]] | None = None,
        random_state: int = 42,
    ) -> None:
        if catalog is None:
            catalog = load_all_bundled_catalogs()
        if pigment_sets is None:
            pigment_sets = {name: load_pigment_set(name) for name in available_pigment_sets()}

        self.catalog: tuple[CatalogEntry, ...] = tuple(catalog)
        self.pigment_sets: Mapping[str, tuple[Pigment, ...]] = MappingProxyType(
            {name: tuple(pigments) for name, pigments in pigment_sets.items()}
        )
        self.random_state = random_state

    @property
    def mediums(self) -> list[str]:
        return list(self.pigment_sets)

    def match(
        self,
        color: ColorInput,
        k: int = DEFAULT_TOP_K,
        brand: str | None = None,
    ) -> list[MatchResult]:
        catalog = self.catalog if brand is None else filter_catalog(self.catalog, brand=brand)
        return find_closest_matches(color, catalog, k=k)

    def mix(self, color: ColorInput, medium: str) -> list[MixCandidate]:
        try:
            pigments = self.pigment_sets[medium]
        except KeyError as exc:
            raise UnknownMediumError(
                f"unknown medium '{medium}'. Available: {', '.join(self.mediums)}"
            ) from exc
        return find_mixes(color, pigments)

    def extract(
        self,
        image: str | Path | np.ndarray,
        region: Region | None = None,
        max_colors: int = DEFAULT_MAX_COLORS,
        method: str = "frequency",
        brand: str | None = None,
    ) -> ExtractionResult:
        if method not in EXTRACTION_METHODS:
            raise ValueError(
                f"unknown extraction method '{method}'. "
                f"Use one of {', '.join(EXTRACTION_METHODS)}"
            )

        image_rgba = image if isinstance(image, np.ndarray) else read_image_rgba(image)
        if image_rgba.dtype.kind == "f":
            # float images follow the 0-1 intensity convention
            image_rgba = img_as_ubyte(image_rgba)
        if image_rgba.ndim == 3 and image_rgba.shape[2] == 3:
            opaque = np.full(image_rgba.shape[:2] + (1,), 255, dtype=np.uint8)
            image_rgba = np.concatenate([image_rgba.astype(np.uint8), opaque], axis=2)
        if region is not None:
            image_rgba = crop_region(image_rgba, region)

        if method == "kmeans":
            colors = extract_clustered_colors(
                image_rgba, max_colors=max_colors, random_state=self.random_state
            )
        else:
            colors = extract_dominant_colors(image_rgba, max_colors=max_colors)

        warnings: list[str] = []
        if not colors:
            warnings.append("no_visible_pixels")

        catalog = self.catalog if brand is None else filter_catalog(self.catalog, brand=brand)
        matches = match_palette(colors, catalog)
        log.debug("extracted %d colors, %d palette matches", len(colors), len(matches))

        return ExtractionResult(
            colors=colors,
            matches=matches,
            region=region,
            warnings=warnings,
        )
