"""Tracks router for storing and querying recorded trajectories."""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import Field
from sqlalchemy.orm import Session

from geotrace.config import settings
from geotrace.database import get_db
from geotrace.models import Track
from geotrace.routers.linestrings import GeometryInput, parse_input
from geotrace.services.simplify import simplify
from geotrace.services.temporal import search_epoch
from geotrace.services.track import TrackService

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/tracks", tags=["tracks"])


class TrackInput(GeometryInput):
    name: str = Field(..., min_length=1, description="Display name for the track")


def _get_track_or_404(track_id: int, db: Session) -> Track:
    track = TrackService.get_track(db, track_id)
    if not track:
        raise HTTPException(
            status_code=404,
            detail=f"Track {track_id} not found"
        )
    return track


@router.post("")
async def create_track(body: TrackInput, db: Session = Depends(get_db)):
    """
    Store a LineString as a named track.

    The geometry is persisted as WKB regardless of the input form.
    """
    line = parse_input(body)
    track = TrackService.create_track(db, body.name, line)
    return TrackService.serialize_track(track, include_geometry=True)


@router.get("")
async def get_tracks(
    kind: Optional[str] = Query(None, description="Filter by coordinate kind (XY, XYZ, XYM, XYZM)"),
    db: Session = Depends(get_db),
):
    """
    List stored tracks, newest first, without their geometry.
    """
    try:
        coordinate_kind = TrackService.resolve_kind(kind)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    tracks = TrackService.get_tracks(db, coordinate_kind)
    return {
        "count": len(tracks),
        "tracks": [TrackService.serialize_track(track) for track in tracks],
    }


@router.get("/{track_id}")
async def get_track(track_id: int, db: Session = Depends(get_db)):
    """
    Get a stored track with its geometry as coordinates, WKT and WKB.
    """
    track = _get_track_or_404(track_id, db)
    return TrackService.serialize_track(track, include_geometry=True)


@router.get("/{track_id}/position")
async def get_track_position(
    track_id: int,
    t: float = Query(..., allow_inf_nan=False, description="Time measure to look up"),
    db: Session = Depends(get_db),
):
    """
    Get the interpolated position of a track at time t.

    Returns 404 when t lies outside the recorded time range.
    """
    track = _get_track_or_404(track_id, db)
    line = TrackService.track_line(track)

    if not line.kind.has_m:
        raise HTTPException(
            status_code=422,
            detail=f"Track {track_id} is {line.kind.name} and has no time measure"
        )

    coordinate = search_epoch(line, t)
    if coordinate is None:
        raise HTTPException(
            status_code=404,
            detail=f"Time {t} is outside the recorded range of track {track_id}"
        )

    return {
        "track_id": track_id,
        "t": t,
        "kind": line.kind.name,
        "coordinate": list(coordinate.values()),
    }


@router.post("/{track_id}/simplify")
async def simplify_track(
    track_id: int,
    tolerance: Optional[float] = Query(None, ge=0, allow_inf_nan=False, description="Max deviation in degrees"),
    save: bool = Query(False, description="Store the result as a new track"),
    db: Session = Depends(get_db),
):
    """
    Simplify a stored track.

    With save=true the simplified line is stored as "<name> (simplified)".
    """
    track = _get_track_or_404(track_id, db)
    line = TrackService.track_line(track)

    if tolerance is None:
        tolerance = settings.DEFAULT_TOLERANCE
    simplified = simplify(line, tolerance)

    result = {
        "track_id": track_id,
        "tolerance": tolerance,
        "original_vertex_count": len(line),
        **TrackService.describe(simplified),
    }

    if save:
        saved = TrackService.create_track(db, f"{track.name} (simplified)", simplified)
        result["saved_track_id"] = saved.id

    return result


@router.delete("/{track_id}")
async def delete_track(track_id: int, db: Session = Depends(get_db)):
    """
    Delete a stored track.
    """
    track = _get_track_or_404(track_id, db)
    TrackService.delete_track(db, track)

    return {
        "success": True,
        "message": f"Deleted track {track_id}"
    }
