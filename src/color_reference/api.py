from __future__ import annotations

from functools import lru_cache
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from .catalog import brands, filter_catalog
from .convert import InvalidColorFormat, normalize_hex
from .engine import EXTRACTION_METHODS, ColorReferenceEngine, UnknownMediumError
from .mixing import BLEND_MODES, blend_colors
from .naming import describe_color


class MatchRequest(BaseModel):
    color: str = Field(..., description="Color as #RRGGBB (case-insensitive)")
    top_k: int = Field(default=8, ge=1, le=50, description="Maximum matches to return")
    brand: str | None = Field(default=None, description="Only match this brand")


class MatchItem(BaseModel):
    id: int
    brand: str
    name: str
    code: str
    hex: str
    distance: float
    accuracy: float


class MatchResponse(BaseModel):
    target: str
    name: str
    matches: list[MatchItem]


class MixRequest(BaseModel):
    color: str = Field(..., description="Color as #RRGGBB (case-insensitive)")
    medium: str = Field(default="oil_palette", description="Pigment set to mix from")


class MixComponentItem(BaseModel):
    name: str
    hex: str
    ratio: int


class MixItem(BaseModel):
    components: list[MixComponentItem]
    hex: str
    accuracy: float
    total_parts: int
    recipe: str


class MixResponse(BaseModel):
    target: str
    medium: str
    mixes: list[MixItem]


class ExtractRequest(BaseModel):
    image_url: str = Field(..., description="HTTP(S) image URL")
    region: tuple[int, int, int, int] | None = Field(
        default=None, description="Selection as x, y, width, height"
    )
    max_colors: int = Field(default=8, ge=1, le=32, description="Maximum colors to extract")
    method: str = Field(default="frequency", description="frequency or kmeans")
    brand: str | None = Field(default=None, description="Only match this brand")


class ExtractResponse(BaseModel):
    colors: list[str]
    matches: list[MatchItem]
    warnings: list[str]


class BlendRequest(BaseModel):
    first: str = Field(..., description="Color as #RRGGBB (case-insensitive)")
    second: str = Field(..., description="Color as #RRGGBB (case-insensitive)")
    mode: str = Field(default="average", description=f"One of {', '.join(BLEND_MODES)}")


app = FastAPI(
    title="Color Reference API",
    version="1.0.0",
    description="Match colors to art-supply catalogs and suggest pigment mixes.",
)


@lru_cache(maxsize=1)
def _get_engine() -> ColorReferenceEngine:
    return ColorReferenceEngine()


def _match_items(matches) -> list[MatchItem]:
    return [
        MatchItem(
            id=match.entry.id,
            brand=match.entry.brand,
            name=match.entry.name,
            code=match.entry.code,
            hex=match.entry.hex,
            distance=float(match.distance),
            accuracy=float(match.accuracy),
        )
        for match in matches
    ]


@app.post("/match", response_model=MatchResponse)
async def match_color(payload: MatchRequest) -> MatchResponse:
    engine = _get_engine()
    try:
        target = normalize_hex(payload.color)
        matches = engine.match(target, k=payload.top_k, brand=payload.brand)
    except InvalidColorFormat as exc:
        raise HTTPException(status_code=400, detail=f"invalid_color: {exc}") from exc

    return MatchResponse(
        target=target, name=describe_color(target), matches=_match_items(matches)
    )


@app.post("/mix", response_model=MixResponse)
async def mix_color(payload: MixRequest) -> MixResponse:
    engine = _get_engine()
    try:
        target = normalize_hex(payload.color)
        mixes = await run_in_threadpool(engine.mix, target, payload.medium)
    except InvalidColorFormat as exc:
        raise HTTPException(status_code=400, detail=f"invalid_color: {exc}") from exc
    except UnknownMediumError as exc:
        raise HTTPException(status_code=404, detail=f"unknown_medium: {exc}") from exc

    return MixResponse(
        target=target,
        medium=payload.medium,
        mixes=[
            MixItem(
                components=[
                    MixComponentItem(name=c.name, hex=c.hex, ratio=c.ratio)
                    for c in candidate.components
                ],
                hex=candidate.hex,
                accuracy=float(candidate.accuracy),
                total_parts=candidate.total_parts,
                recipe=candidate.recipe(),
            )
            for candidate in mixes
        ],
    )


@app.post("/extract", response_model=ExtractResponse)
async def extract_colors(payload: ExtractRequest) -> ExtractResponse:
    if payload.method not in EXTRACTION_METHODS:
        raise HTTPException(status_code=400, detail=f"unknown_method: {payload.method}")

    engine = _get_engine()
    try:
        result = await run_in_threadpool(
            engine.extract,
            payload.image_url,
            payload.region,
            payload.max_colors,
            payload.method,
            payload.brand,
        )
    except Exception as exc:
        raise HTTPException(
            status_code=400, detail=f"failed_to_extract_colors: {exc}"
        ) from exc

    return ExtractResponse(
        colors=result.colors,
        matches=_match_items(result.matches),
        warnings=result.warnings,
    )


@app.post("/blend")
async def blend(payload: BlendRequest) -> dict[str, Any]:
    try:
        mixed = blend_colors(payload.first, payload.second, payload.mode)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"hex": mixed, "name": describe_color(mixed)}


@app.get("/catalog")
async def list_catalog(
    search: str = "", brand: str | None = None, set_name: str | None = None
) -> dict[str, Any]:
    catalog = _get_engine().catalog
    entries = filter_catalog(catalog, search=search, brand=brand, set_name=set_name)
    return {
        "brands": brands(catalog),
        "entries": [entry.to_dict() for entry in entries],
    }


@app.get("/mediums")
async def list_mediums() -> dict[str, Any]:
    engine = _get_engine()
    return {
        "mediums": {
            name: [pigment.to_dict() for pigment in pigments]
            for name, pigments in engine.pigment_sets.items()
        }
    }
