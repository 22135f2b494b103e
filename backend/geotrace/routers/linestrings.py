"""LineString router for stateless parsing, simplification and time lookup."""
from typing import Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from geotrace.config import settings
from geotrace.services.linestring import LineString
from geotrace.services.simplify import simplify
from geotrace.services.temporal import search_epoch
from geotrace.services.track import TrackService

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/linestrings", tags=["linestrings"])


class GeometryInput(BaseModel):
    """A LineString given as WKT (with its kind) or as hex-encoded WKB."""

    kind: Optional[str] = Field(None, description="XY, XYZ, XYM or XYZM (required with wkt)")
    wkt: Optional[str] = Field(None, description="Well-Known Text")
    wkb: Optional[str] = Field(None, description="Well-Known Binary, hex encoded")


class SimplifyInput(GeometryInput):
    tolerance: Optional[float] = Field(None, ge=0, allow_inf_nan=False, description="Max deviation in degrees")


class LocateInput(GeometryInput):
    t: float = Field(..., allow_inf_nan=False, description="Time measure to look up")


def parse_input(body: GeometryInput) -> LineString:
    """
    Decode the request geometry or raise the matching HTTP error.

    Raises HTTPException 400 for unusable input and 422 when the geometry is
    not a LineString of the requested kind.
    """
    if body.wkt is None and body.wkb is None:
        raise HTTPException(status_code=400, detail="Provide either 'wkt' or 'wkb'")

    try:
        kind = TrackService.resolve_kind(body.kind)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if body.wkb is None and kind is None:
        raise HTTPException(status_code=400, detail="'kind' is required with 'wkt'")

    try:
        line = TrackService.load_line(kind, wkt=body.wkt, wkb_hex=body.wkb)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid WKB hex: {str(e)}")

    if line is None:
        raise HTTPException(
            status_code=422,
            detail=f"Input is not a LINESTRING of kind {body.kind or 'any'}"
        )
    return line


@router.post("/parse")
async def parse_linestring(body: GeometryInput):
    """
    Parse a LineString and return it in every supported form.
    """
    return TrackService.describe(parse_input(body))


@router.post("/simplify")
async def simplify_linestring(body: SimplifyInput):
    """
    Simplify a LineString with Douglas-Peucker.

    Uses the configured default tolerance when none is given.
    """
    line = parse_input(body)
    tolerance = body.tolerance if body.tolerance is not None else settings.DEFAULT_TOLERANCE
    simplified = simplify(line, tolerance)

    return {
        "tolerance": tolerance,
        "original_vertex_count": len(line),
        **TrackService.describe(simplified),
    }


@router.post("/locate")
async def locate_on_linestring(body: LocateInput):
    """
    Interpolate the position at time t along a time-measured LineString.
    """
    line = parse_input(body)
    if not line.kind.has_m:
        raise HTTPException(
            status_code=422,
            detail=f"{line.kind.name} LineString has no time measure"
        )

    coordinate = search_epoch(line, body.t)
    return {
        "found": coordinate is not None,
        "coordinate": list(coordinate.values()) if coordinate is not None else None,
    }
