"""Track service for parsing, storing and querying LineStrings."""
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from geotrace.config import settings
from geotrace.exceptions import BadGeometryException
from geotrace.models import Track
from geotrace.services.binary import ByteOrder
from geotrace.services.coordinates import CoordinateKind
from geotrace.services.linestring import LineString

logger = logging.getLogger(__name__)


class TrackService:
    """Service gluing the geometry core to HTTP requests and the database."""

    @staticmethod
    def resolve_kind(name: Optional[str]) -> Optional[CoordinateKind]:
        """
        Map a kind name ("XYZM") or WKT suffix ("ZM") to a CoordinateKind.

        Raises:
            ValueError: If the name is not a known kind
        """
        if name is None:
            return None
        kind = CoordinateKind.from_name(name)
        if kind is None:
            raise ValueError(f"Unknown coordinate kind: {name}")
        return kind

    @staticmethod
    def load_line(
        kind: Optional[CoordinateKind],
        wkt: Optional[str] = None,
        wkb_hex: Optional[str] = None,
    ) -> Optional[LineString]:
        """
        Decode a LineString from WKT or hex-encoded WKB.

        WKT needs an expected kind. WKB carries its own; if a kind is given
        as well, a WKB geometry of another kind is rejected.

        Returns:
            LineString, or None if the input is not a LineString of that kind

        Raises:
            ValueError: If wkb_hex is not valid hexadecimal
        """
        if wkb_hex is not None:
            line = LineString.unmarshall_bytes(bytes.fromhex(wkb_hex))
            if line is None or (kind is not None and line.kind is not kind):
                return None
            return line

        return LineString.unmarshall(kind, wkt)

    @staticmethod
    def describe(line: LineString) -> Dict:
        """JSON-serializable view of a LineString."""
        byte_order = ByteOrder.from_name(settings.WKB_BYTE_ORDER)
        return {
            "kind": line.kind.name,
            "vertex_count": len(line),
            "coordinates": [list(coord.values()) for coord in line.coordinate],
            "wkt": line.marshall(),
            "wkb": line.marshall_bytes(byte_order).hex(),
        }

    @staticmethod
    def create_track(db: Session, name: str, line: LineString) -> Track:
        """
        Store a LineString as a new track.

        Args:
            db: Database session
            name: Display name for the track
            line: Geometry to store

        Returns:
            The committed Track
        """
        start_time = None
        end_time = None
        if line.kind.has_m and len(line):
            start_time = line.coordinate[0].m
            end_time = line.coordinate[-1].m

        track = Track(
            name=name,
            kind=line.kind.name,
            vertex_count=len(line),
            start_time=start_time,
            end_time=end_time,
            wkb=line.marshall_bytes(ByteOrder.from_name(settings.WKB_BYTE_ORDER)),
        )
        db.add(track)
        db.commit()
        db.refresh(track)

        logger.info("✓ Stored track %d '%s' (%s, %d vertices)", track.id, name, track.kind, track.vertex_count)
        return track

    @staticmethod
    def get_tracks(db: Session, kind: Optional[CoordinateKind] = None) -> List[Track]:
        """
        Get stored tracks, newest first.

        Args:
            db: Database session
            kind: Only return tracks of this coordinate kind

        Returns:
            List of Track objects
        """
        query = db.query(Track)
        if kind is not None:
            query = query.filter(Track.kind == kind.name)
        return query.order_by(Track.created_at.desc(), Track.id.desc()).all()

    @staticmethod
    def get_track(db: Session, track_id: int) -> Optional[Track]:
        return db.query(Track).filter(Track.id == track_id).first()

    @staticmethod
    def track_line(track: Track) -> LineString:
        """
        Decode the geometry stored on a track.

        Raises:
            BadGeometryException: If the stored WKB is unreadable
        """
        line = LineString.unmarshall_bytes(track.wkb)
        if line is None:
            raise BadGeometryException(f"Track {track.id} holds unreadable WKB")
        return line

    @staticmethod
    def delete_track(db: Session, track: Track) -> None:
        track_id = track.id
        db.delete(track)
        db.commit()
        logger.info("✓ Deleted track %d", track_id)

    @staticmethod
    def serialize_track(track: Track, include_geometry: bool = False) -> Dict:
        data = {
            "id": track.id,
            "name": track.name,
            "kind": track.kind,
            "vertex_count": track.vertex_count,
            "start_time": track.start_time,
            "end_time": track.end_time,
            "created_at": track.created_at.isoformat(),
        }
        if include_geometry:
            data.update(TrackService.describe(TrackService.track_line(track)))
        return data
