from __future__ import annotations

import csv
from collections.abc import Iterable, Sequence
from functools import lru_cache
import json
import logging
from pathlib import Path
from typing import Any

from .convert import InvalidColorFormat, lab_to_rgb, normalize_hex, rgb_to_hex
from .models import CatalogEntry, Pigment

log = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"

BUNDLED_CATALOGS = {
    "pencils": "pencils.csv",
    "watercolors": "watercolors.csv",
    "oil_paints": "oil_paints.csv",
}
MIXING_SETS_FILE = "mixing_sets.json"
# Pigment sets backed by a whole catalog instead of mixing_sets.json.
CATALOG_PIGMENT_SETS = {"oil_palette": "oil_paints"}

_TRUE_VALUES = {"1", "true", "yes", "y"}
_FALSE_VALUES = {"", "0", "false", "no", "n"}


class CatalogValidationError(ValueError):
    pass


def load_catalog(path_like: str | Path) -> tuple[CatalogEntry, ...]:
    path = Path(path_like)
    if not path.exists():
        raise CatalogValidationError(f"catalog file does not exist: {path}")

    if path.suffix.lower() == ".csv":
        entries = _load_csv(path)
    elif path.suffix.lower() == ".json":
        entries = _load_json(path)
    else:
        raise CatalogValidationError(
            f"unsupported catalog format '{path.suffix}'. Use .csv or .json"
        )

    if not entries:
        raise CatalogValidationError(f"catalog has no usable entries: {path}")

    _check_unique_keys(entries, path)
    log.debug("loaded %d catalog entries from %s", len(entries), path)
    return tuple(entries)


@lru_cache(maxsize=None)
def load_bundled_catalog(name: str) -> tuple[CatalogEntry, ...]:
    try:
        filename = BUNDLED_CATALOGS[name]
    except KeyError as exc:
        raise KeyError(
            f"unknown catalog '{name}'. Available: {', '.join(available_catalogs())}"
        ) from exc
    return load_catalog(DATA_DIR / filename)


def load_all_bundled_catalogs() -> tuple[CatalogEntry, ...]:
    combined: list[CatalogEntry] = []
    for name in available_catalogs():
        combined.extend(load_bundled_catalog(name))
    return tuple(combined)


def available_catalogs() -> list[str]:
    return list(BUNDLED_CATALOGS)


@lru_cache(maxsize=None)
def load_pigment_set(name: str) -> tuple[Pigment, ...]:
    if name in CATALOG_PIGMENT_SETS:
        catalog = load_bundled_catalog(CATALOG_PIGMENT_SETS[name])
        return tuple(Pigment.from_entry(entry) for entry in catalog)

    sets = _load_pigment_sets(DATA_DIR / MIXING_SETS_FILE)
    if name not in sets:
        raise KeyError(
            f"unknown pigment set '{name}'. "
            f"Available: {', '.join(available_pigment_sets())}"
        )
    return sets[name]


def available_pigment_sets() -> list[str]:
    return list(_load_pigment_sets(DATA_DIR / MIXING_SETS_FILE)) + list(
        CATALOG_PIGMENT_SETS
    )


def load_pigment_file(path_like: str | Path) -> tuple[Pigment, ...]:
    """Read a user pigment list: JSON list of objects or CSV with name,hex."""
    path = Path(path_like)
    if not path.exists():
        raise CatalogValidationError(f"pigment file does not exist: {path}")

    if path.suffix.lower() == ".csv":
        with path.open("r", encoding="utf-8", newline="") as handle:
            records = [
                (f"{path}:{idx}", row)
                for idx, row in enumerate(csv.DictReader(handle), start=2)
            ]
    elif path.suffix.lower() == ".json":
        payload = _read_json(path)
        if not isinstance(payload, list):
            raise CatalogValidationError(f"pigment file {path} must hold a list")
        records = [(f"{path}:{idx}", item) for idx, item in enumerate(payload, start=1)]
    else:
        raise CatalogValidationError(
            f"unsupported pigment format '{path.suffix}'. Use .csv or .json"
        )

    pigments = tuple(_parse_pigment(record, location) for location, record in records)
    if not pigments:
        raise CatalogValidationError(f"pigment file has no usable entries: {path}")
    return pigments


def filter_catalog(
    catalog: Iterable[CatalogEntry],
    search: str = "",
    brand: str | None = None,
    set_name: str | None = None,
) -> list[CatalogEntry]:
    needle = search.strip().lower()
    filtered = []
    for entry in catalog:
        if needle and needle not in entry.name.lower() and needle not in entry.code.lower():
            continue
        if brand is not None and entry.brand != brand:
            continue
        if set_name is not None and set_name not in entry.sets:
            continue
        filtered.append(entry)
    return filtered


def brands(catalog: Iterable[CatalogEntry]) -> list[str]:
    ordered: dict[str, None] = {}
    for entry in catalog:
        ordered.setdefault(entry.brand, None)
    return list(ordered)


@lru_cache(maxsize=None)
def _load_pigment_sets(path: Path) -> dict[str, tuple[Pigment, ...]]:
    payload = _read_json(path)
    raw_sets = payload.get("sets") if isinstance(payload, dict) else None
    if not isinstance(raw_sets, dict):
        raise CatalogValidationError(f"{path} must include a 'sets' object")

    sets: dict[str, tuple[Pigment, ...]] = {}
    for set_name, records in raw_sets.items():
        if not isinstance(records, list):
            raise CatalogValidationError(f"{path}: set '{set_name}' must be a list")
        sets[set_name] = tuple(
            _parse_pigment(record, f"{path}:{set_name}[{idx}]")
            for idx, record in enumerate(records)
        )
    return sets


def _load_csv(path: Path) -> list[CatalogEntry]:
    with path.open("r", encoding="utf-8", newline="") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            raise CatalogValidationError(f"catalog csv has no header: {path}")

        entries: list[CatalogEntry] = []
        for idx, row in enumerate(reader, start=2):
            entries.append(_parse_entry(row, f"{path}:{idx}"))
        return entries


def _load_json(path: Path) -> list[CatalogEntry]:
    payload = _read_json(path)

    if isinstance(payload, dict):
        if "entries" not in payload or not isinstance(payload["entries"], list):
            raise CatalogValidationError(
                f"json catalog at {path} must be a list or include an 'entries' list"
            )
        records = payload["entries"]
    elif isinstance(payload, list):
        records = payload
    else:
        raise CatalogValidationError(
            f"json catalog at {path} must be a list or object with 'entries'"
        )

    entries: list[CatalogEntry] = []
    for idx, record in enumerate(records, start=1):
        if not isinstance(record, dict):
            raise CatalogValidationError(
                f"invalid catalog entry at {path}:{idx} (expected object)"
            )
        entries.append(_parse_entry(record, f"{path}:{idx}"))
    return entries


def _parse_entry(raw_entry: dict[str, object], location: str) -> CatalogEntry:
    normalized = _normalize_keys(raw_entry)

    for field_name in ("id", "brand", "name", "code"):
        if not _as_clean_str(normalized.get(field_name)):
            raise CatalogValidationError(
                f"{location}: missing required field '{field_name}'"
            )

    try:
        entry_id = int(str(normalized["id"]).strip())
    except ValueError as exc:
        raise CatalogValidationError(f"{location}: id must be an integer") from exc

    return CatalogEntry(
        id=entry_id,
        brand=_as_clean_str(normalized["brand"]),
        name=_as_clean_str(normalized["name"]),
        code=_as_clean_str(normalized["code"]),
        hex=_resolve_hex(normalized, location),
        sets=_parse_sets(normalized.get("sets")),
        is_primary=_parse_bool(normalized.get("is_primary"), location),
    )


def _parse_pigment(raw_entry: object, location: str) -> Pigment:
    if not isinstance(raw_entry, dict):
        raise CatalogValidationError(f"{location}: expected an object")
    normalized = _normalize_keys(raw_entry)
    name = _as_clean_str(normalized.get("name"))
    if not name:
        raise CatalogValidationError(f"{location}: missing required field 'name'")
    return Pigment(
        name=name,
        hex=_resolve_hex(normalized, location),
        is_primary=_parse_bool(normalized.get("is_primary"), location),
    )


def _resolve_hex(normalized: dict[str, object], location: str) -> str:
    hex_value = _as_clean_str(normalized.get("hex")) or _as_clean_str(
        normalized.get("color")
    )
    if hex_value:
        try:
            return normalize_hex(hex_value)
        except InvalidColorFormat as exc:
            raise CatalogValidationError(f"{location}: {exc}") from exc

    l_raw = normalized.get("l")
    a_raw = normalized.get("a")
    b_raw = normalized.get("b")

    if l_raw in (None, "") or a_raw in (None, "") or b_raw in (None, ""):
        raise CatalogValidationError(
            f"{location}: provide either 'hex' or numeric 'l','a','b' values"
        )

    try:
        lab = (float(l_raw), float(a_raw), float(b_raw))
    except (TypeError, ValueError) as exc:
        raise CatalogValidationError(
            f"{location}: invalid Lab values, expected numeric l/a/b"
        ) from exc

    return rgb_to_hex(*lab_to_rgb(lab))


def _check_unique_keys(entries: Sequence[CatalogEntry], path: Path) -> None:
    seen: set[tuple[str, int]] = set()
    for entry in entries:
        if entry.key in seen:
            raise CatalogValidationError(
                f"{path}: duplicate id {entry.id} for brand '{entry.brand}'"
            )
        seen.add(entry.key)


def _normalize_keys(raw_entry: dict[str, object]) -> dict[str, object]:
    return {
        str(key).strip().lower(): value
        for key, value in raw_entry.items()
        if key is not None
    }


def _parse_sets(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        items = [str(item).strip() for item in value]
    else:
        items = [item.strip() for item in str(value).split(";")]
    return tuple(item for item in items if item)


def _parse_bool(value: object, location: str) -> bool:
    if value is None or isinstance(value, bool):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise CatalogValidationError(f"{location}: invalid boolean value {value!r}")


def _as_clean_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CatalogValidationError(f"{path}:{exc.lineno}: invalid json: {exc.msg}") from exc
