from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from .catalog import (
    available_catalogs,
    brands,
    filter_catalog,
    load_all_bundled_catalogs,
    load_bundled_catalog,
    load_catalog,
    load_pigment_file,
)
from .convert import normalize_hex
from .engine import EXTRACTION_METHODS, ColorReferenceEngine, UnknownMediumError
from .io import write_result_json
from .naming import describe_color


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="color-reference",
        description="Match colors to pencil/paint catalogs and suggest pigment mixes.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    parser.add_argument(
        "--catalog",
        default=None,
        help="Catalog to search: a bundled name "
        f"({', '.join(available_catalogs())}) or a .csv/.json path. "
        "Defaults to all bundled catalogs.",
    )
    parser.add_argument(
        "--out",
        default=None,
        help="Optional JSON output path. If omitted, prints JSON to stdout.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    match = subparsers.add_parser("match", help="Rank catalog entries by closeness to a color.")
    match.add_argument("color", help="Target color as #RRGGBB.")
    match.add_argument("--top-k", type=int, default=8, help="Number of matches to return.")
    match.add_argument("--brand", default=None, help="Only consider this brand.")

    mix = subparsers.add_parser("mix", help="Suggest pigment blends for a color.")
    mix.add_argument("color", help="Target color as #RRGGBB.")
    mix.add_argument(
        "--medium",
        default="oil_palette",
        help="Bundled pigment set to mix from.",
    )
    mix.add_argument(
        "--pigments",
        default=None,
        help="Path to a .csv/.json pigment list, overrides --medium.",
    )

    extract = subparsers.add_parser(
        "extract",
        help="Extract dominant colors from an image and match them to the catalog.",
    )
    extract.add_argument("--image", required=True, help="Path or URL to the input image.")
    extract.add_argument(
        "--region",
        type=int,
        nargs=4,
        metavar=("X", "Y", "WIDTH", "HEIGHT"),
        default=None,
        help="Optional selection rectangle in pixels.",
    )
    extract.add_argument(
        "--max-colors", type=int, default=8, help="Maximum number of colors to extract."
    )
    extract.add_argument(
        "--method",
        choices=EXTRACTION_METHODS,
        default="frequency",
        help="Exact-color frequency counting or k-means clustering.",
    )
    extract.add_argument("--brand", default=None, help="Only match against this brand.")

    browse = subparsers.add_parser("catalog", help="List catalog entries.")
    browse.add_argument("--search", default="", help="Substring of name or code.")
    browse.add_argument("--brand", default=None, help="Only list this brand.")
    browse.add_argument("--set", dest="set_name", default=None, help="Only list this set size.")
    browse.add_argument(
        "--brands", action="store_true", help="List the brand names instead of entries."
    )

    describe = subparsers.add_parser("describe", help="Print an approximate color name.")
    describe.add_argument("color", help="Color as #RRGGBB.")

    return parser


def _resolve_catalog(value: str | None):
    if value is None:
        return load_all_bundled_catalogs()
    if value in available_catalogs():
        return load_bundled_catalog(value)
    return load_catalog(value)


def _run(args: argparse.Namespace, parser: argparse.ArgumentParser) -> object:
    catalog = _resolve_catalog(args.catalog)

    if args.command == "match":
        engine = ColorReferenceEngine(catalog=catalog)
        matches = engine.match(args.color, k=args.top_k, brand=args.brand)
        return {
            "target": normalize_hex(args.color),
            "matches": [match.to_dict() for match in matches],
        }

    if args.command == "mix":
        if args.pigments:
            engine = ColorReferenceEngine(
                catalog=catalog, pigment_sets={"custom": load_pigment_file(args.pigments)}
            )
            medium = "custom"
        else:
            engine = ColorReferenceEngine(catalog=catalog)
            medium = args.medium
        mixes = engine.mix(args.color, medium)
        return {
            "target": normalize_hex(args.color),
            "medium": medium,
            "mixes": [candidate.to_dict() for candidate in mixes],
        }

    if args.command == "extract":
        engine = ColorReferenceEngine(catalog=catalog)
        region = tuple(args.region) if args.region else None
        return engine.extract(
            args.image,
            region=region,
            max_colors=args.max_colors,
            method=args.method,
            brand=args.brand,
        ).to_dict()

    if args.command == "catalog":
        if args.brands:
            return {"brands": brands(catalog)}
        entries = filter_catalog(
            catalog, search=args.search, brand=args.brand, set_name=args.set_name
        )
        return {"entries": [entry.to_dict() for entry in entries]}

    if args.command == "describe":
        return {"hex": normalize_hex(args.color), "name": describe_color(args.color)}

    parser.error("unknown command")


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        payload = _run(args, parser)
    except (ValueError, UnknownMediumError) as exc:
        parser.error(str(exc))

    if args.out:
        write_result_json(payload, Path(args.out))
    else:
        print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
