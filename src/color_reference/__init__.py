from .catalog import (
    CatalogValidationError,
    filter_catalog,
    load_bundled_catalog,
    load_catalog,
    load_pigment_set,
)
from .convert import InvalidColorFormat, hex_to_rgb, normalize_hex, rgb_to_hex, rgb_to_lab
from .distance import accuracy_from_distance, color_distance
from .engine import ColorReferenceEngine, UnknownMediumError
from .extract import extract_clustered_colors, extract_dominant_colors
from .matching import find_closest_matches, match_palette
from .mixing import blend_colors, find_mixes, mix_colors
from .models import (
    CatalogEntry,
    ExtractionResult,
    MatchResult,
    MixCandidate,
    MixComponent,
    NamedColor,
    Pigment,
)
from .naming import describe_color

__all__ = [
    "CatalogEntry",
    "CatalogValidationError",
    "ColorReferenceEngine",
    "ExtractionResult",
    "InvalidColorFormat",
    "MatchResult",
    "MixCandidate",
    "MixComponent",
    "NamedColor",
    "Pigment",
    "UnknownMediumError",
    "accuracy_from_distance",
    "blend_colors",
    "color_distance",
    "describe_color",
    "extract_clustered_colors",
    "extract_dominant_colors",
    "filter_catalog",
    "find_closest_matches",
    "find_mixes",
    "hex_to_rgb",
    "load_bundled_catalog",
    "load_catalog",
    "load_pigment_set",
    "match_palette",
    "mix_colors",
    "normalize_hex",
    "rgb_to_hex",
    "rgb_to_lab",
]
