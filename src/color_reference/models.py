from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

RGB = tuple[int, int, int]
LAB = tuple[float, float, float]


@dataclass(frozen=True)
class NamedColor:
    hex: str
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"hex": self.hex, "name": self.name}


# A plain hex string or a NamedColor; normalized by convert.to_hex on entry.
ColorInput = Union[str, NamedColor]


@dataclass(frozen=True)
class CatalogEntry:
    id: int
    brand: str
    name: str
    code: str
    hex: str
    sets: tuple[str, ...] = ()
    is_primary: bool = False

    @property
    def key(self) -> tuple[str, int]:
        # ids are only unique within a brand
        return (self.brand, self.id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "brand": self.brand,
            "name": self.name,
            "code": self.code,
            "hex": self.hex,
            "sets": list(self.sets),
            "is_primary": self.is_primary,
        }


@dataclass(frozen=True)
class Pigment:
    name: str
    hex: str
    is_primary: bool = False

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> Pigment:
        return cls(name=entry.name, hex=entry.hex, is_primary=entry.is_primary)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "hex": self.hex, "is_primary": self.is_primary}


@dataclass(frozen=True)
class MatchResult:
    entry: CatalogEntry
    distance: float
    accuracy: float

    def to_dict(self) -> dict[str, Any]:
        payload = self.entry.to_dict()
        payload["distance"] = float(self.distance)
        payload["accuracy"] = float(self.accuracy)
        return payload


@dataclass(frozen=True)
class MixComponent:
    name: str
    hex: str
    ratio: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "hex": self.hex, "ratio": self.ratio}


@dataclass(frozen=True)
class MixCandidate:
    components: tuple[MixComponent, ...]
    hex: str
    distance: float
    accuracy: float

    @property
    def total_parts(self) -> int:
        return sum(component.ratio for component in self.components)

    def recipe(self) -> str:
        parts = []
        for component in self.components:
            unit = "part" if component.ratio == 1 else "parts"
            parts.append(f"{component.ratio} {unit} {component.name}")
        return ", ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "components": [component.to_dict() for component in self.components],
            "hex": self.hex,
            "distance": float(self.distance),
            "accuracy": float(self.accuracy),
            "total_parts": self.total_parts,
            "recipe": self.recipe(),
        }


@dataclass(frozen=True)
class ExtractionResult:
    colors: list[str]
    matches: list[MatchResult]
    region: tuple[int, int, int, int] | None = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "colors": list(self.colors),
            "matches": [match.to_dict() for match in self.matches],
            "region": None if self.region is None else list(self.region),
            "warnings": list(self.warnings),
        }
