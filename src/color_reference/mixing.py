"""Pigment mixing simulation.

Mixes are modelled as a weighted linear average of sRGB channels. This is not
gamma corrected and not physically accurate pigment mixing; it is a quick
approximation for suggesting recipes.
"""

from __future__ import annotations

from collections.abc import Sequence
from itertools import combinations
import logging
import math
from typing import Union

from .convert import hex_to_rgb, rgb_to_hex, round_channel, to_hex
from .distance import accuracy_from_distance, color_distance
from .models import CatalogEntry, ColorInput, MixCandidate, MixComponent, Pigment

log = logging.getLogger(__name__)

PigmentLike = Union[Pigment, CatalogEntry]

SINGLE_THRESHOLD = 50.0
PAIR_THRESHOLD = 60.0
TRIAD_THRESHOLD = 65.0
MAX_MIX_RESULTS = 10

PAIR_RATIOS: tuple[tuple[int, int], ...] = (
    (3, 1),
    (2, 1),
    (1, 1),
    (1, 2),
    (1, 3),
    (4, 1),
    (3, 2),
    (2, 3),
    (1, 4),
)
TRIAD_RATIOS: tuple[tuple[int, int, int], ...] = (
    (2, 1, 1),
    (1, 2, 1),
    (1, 1, 2),
    (1, 1, 1),
)

BLEND_MODES = ("additive", "average", "subtractive")


def mix_colors(parts: Sequence[tuple[ColorInput, float]]) -> str | None:
    """Weighted average of ``(color, ratio)`` pairs.

    Returns ``None`` when the ratios sum to zero.
    """
    total = float(sum(ratio for _, ratio in parts))
    if total <= 0.0:
        return None

    red = green = blue = 0.0
    for color, ratio in parts:
        r, g, b = hex_to_rgb(to_hex(color))
        weight = ratio / total
        red += r * weight
        green += g * weight
        blue += b * weight
    return rgb_to_hex(red, green, blue)


def blend_colors(color_a: ColorInput, color_b: ColorInput, mode: str = "average") -> str:
    r1, g1, b1 = hex_to_rgb(to_hex(color_a))
    r2, g2, b2 = hex_to_rgb(to_hex(color_b))

    if mode == "additive":
        return rgb_to_hex(min(r1 + r2, 255), min(g1 + g2, 255), min(b1 + b2, 255))
    if mode == "average":
        return rgb_to_hex((r1 + r2) / 2, (g1 + g2) / 2, (b1 + b2) / 2)
    if mode == "subtractive":
        return rgb_to_hex(
            round_channel(math.sqrt((r1 * r1 + r2 * r2) / 2)),
            round_channel(math.sqrt((g1 * g1 + g2 * g2) / 2)),
            round_channel(math.sqrt((b1 * b1 + b2 * b2) / 2)),
        )
    raise ValueError(f"unknown blend mode '{mode}'. Use one of {', '.join(BLEND_MODES)}")


def is_triad_candidate(pigment: PigmentLike) -> bool:
    lowered = pigment.name.lower()
    return pigment.is_primary or "white" in lowered or "black" in lowered


def find_mixes(
    target: ColorInput,
    pigments: Sequence[PigmentLike],
    limit: int = MAX_MIX_RESULTS,
) -> list[MixCandidate]:
    target_hex = to_hex(target)
    if not pigments:
        return []

    candidates: list[MixCandidate] = []
    candidates.extend(_single_pigments(target_hex, pigments))
    candidates.extend(_pair_mixes(target_hex, pigments))
    candidates.extend(_triad_mixes(target_hex, [p for p in pigments if is_triad_candidate(p)]))

    log.debug("mix search for %s kept %d candidates", target_hex, len(candidates))
    candidates.sort(key=lambda candidate: candidate.accuracy, reverse=True)
    return candidates[: max(0, limit)]


def _candidate(
    target_hex: str,
    mixed_hex: str,
    components: tuple[MixComponent, ...],
) -> MixCandidate:
    distance = color_distance(target_hex, mixed_hex)
    return MixCandidate(
        components=components,
        hex=mixed_hex,
        distance=distance,
        accuracy=accuracy_from_distance(distance),
    )


def _single_pigments(target_hex: str, pigments: Sequence[PigmentLike]) -> list[MixCandidate]:
    kept = []
    for pigment in pigments:
        pigment_hex = to_hex(pigment.hex)
        candidate = _candidate(
            target_hex, pigment_hex, (MixComponent(pigment.name, pigment_hex, 1),)
        )
        if candidate.accuracy > SINGLE_THRESHOLD:
            kept.append(candidate)
    return kept


def _pair_mixes(target_hex: str, pigments: Sequence[PigmentLike]) -> list[MixCandidate]:
    kept = []
    for first, second in combinations(pigments, 2):
        for ratio1, ratio2 in PAIR_RATIOS:
            mixed = mix_colors([(first.hex, ratio1), (second.hex, ratio2)])
            if mixed is None:
                log.debug("skipping zero-ratio mix %s/%s", first.name, second.name)
                continue
            candidate = _candidate(
                target_hex,
                mixed,
                (
                    MixComponent(first.name, to_hex(first.hex), ratio1),
                    MixComponent(second.name, to_hex(second.hex), ratio2),
                ),
            )
            if candidate.accuracy > PAIR_THRESHOLD:
                kept.append(candidate)
    return kept


def _triad_mixes(target_hex: str, primaries: Sequence[PigmentLike]) -> list[MixCandidate]:
    kept = []
    for first, second, third in combinations(primaries, 3):
        for ratio1, ratio2, ratio3 in TRIAD_RATIOS:
            # first two are mixed, then the intermediate meets the third
            intermediate = mix_colors([(first.hex, ratio1), (second.hex, ratio2)])
            if intermediate is None:
                continue
            mixed = mix_colors([(intermediate, ratio1 + ratio2), (third.hex, ratio3)])
            if mixed is None:
                continue
            candidate = _candidate(
                target_hex,
                mixed,
                (
                    MixComponent(first.name, to_hex(first.hex), ratio1),
                    MixComponent(second.name, to_hex(second.hex), ratio2),
                    MixComponent(third.name, to_hex(third.hex), ratio3),
                ),
            )
            if candidate.accuracy > TRIAD_THRESHOLD:
                kept.append(candidate)
    return kept
