from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging

import numpy as np

from .convert import hex_to_rgb, rgb_array_to_lab, to_hex
from .distance import accuracy_from_distance, delta_e_cie94
from .models import CatalogEntry, ColorInput, MatchResult

log = logging.getLogger(__name__)

DEFAULT_TOP_K = 8
PALETTE_MATCHES_PER_COLOR = 2
PALETTE_MATCH_LIMIT = 12


def find_closest_matches(
    target: ColorInput,
    catalog: Sequence[CatalogEntry],
    k: int = DEFAULT_TOP_K,
) -> list[MatchResult]:
    target_hex = to_hex(target)
    if not catalog or k <= 0:
        return []

    target_lab = rgb_array_to_lab(np.array(hex_to_rgb(target_hex), dtype=np.float64))
    catalog_lab = rgb_array_to_lab(
        np.array([hex_to_rgb(entry.hex) for entry in catalog], dtype=np.float64)
    )
    distances = delta_e_cie94(target_lab[np.newaxis, :], catalog_lab)

    # stable, so equal distances keep catalog order
    ordered = np.argsort(distances, kind="stable")[:k]

    results = [
        MatchResult(
            entry=catalog[int(idx)],
            distance=float(distances[int(idx)]),
            accuracy=accuracy_from_distance(float(distances[int(idx)])),
        )
        for idx in ordered
    ]
    log.debug(
        "matched %s against %d entries, best distance %.3f",
        target_hex,
        len(catalog),
        results[0].distance,
    )
    return results


def match_palette(
    colors: Iterable[ColorInput],
    catalog: Sequence[CatalogEntry],
    per_color: int = PALETTE_MATCHES_PER_COLOR,
    limit: int = PALETTE_MATCH_LIMIT,
) -> list[MatchResult]:
    seen: set[tuple[str, int]] = set()
    aggregated: list[MatchResult] = []

    for color in colors:
        for match in find_closest_matches(color, catalog, k=per_color):
            if match.entry.key in seen:
                continue
            seen.add(match.entry.key)
            aggregated.append(match)

    return aggregated[: max(0, limit)]
