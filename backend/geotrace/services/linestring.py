"""
LineString geometry with WKT and WKB marshalling.

Text form:   LINESTRING[Z|M|ZM] (x y [z] [m], ...)
Binary form: byte-order marker, uint32 type code, uint32 count, doubles
"""

import logging
import struct
from typing import Optional

from geotrace.services.binary import BinaryCursor, BinaryWriter, ByteOrder, GeometryType
from geotrace.services.coordinates import CoordinateKind, XY
from geotrace.services.sequence import CoordinateSequence
from geotrace.services.wkt import TextCursor, read_geometry_tag

logger = logging.getLogger(__name__)

TAG = "LINESTRING"


class LineString:
    """An open path over a single CoordinateSequence."""

    def __init__(self, kind: CoordinateKind, coordinate: Optional[CoordinateSequence] = None):
        self.kind = kind
        self.coordinate = coordinate if coordinate is not None else CoordinateSequence(kind, closed=False)

    @classmethod
    def from_coords(cls, kind: CoordinateKind, coords) -> "LineString":
        return cls(kind, CoordinateSequence(kind, closed=False, coords=coords))

    def append(self, coord: XY) -> "LineString":
        self.coordinate.append(coord)
        return self

    def __len__(self) -> int:
        return len(self.coordinate)

    def __eq__(self, other) -> bool:
        if self is other:
            return True
        if not isinstance(other, LineString):
            return NotImplemented
        return self.coordinate == other.coordinate

    def __hash__(self) -> int:
        return hash(self.coordinate)

    def __repr__(self):
        return f"<LineString({self.kind.name}, {len(self.coordinate)} coords)>"

    def marshall(self) -> str:
        """
        Render as WKT.

        Raises:
            BadGeometryException: If the sequence holds coordinates of another kind
        """
        return f"{TAG}{self.kind.suffix} {self.coordinate.marshall()}"

    def marshall_bytes(self, byte_order: ByteOrder = ByteOrder.LITTLE) -> bytes:
        """
        Render as WKB.

        Raises:
            BadGeometryException: If the sequence holds coordinates of another kind
        """
        writer = BinaryWriter(byte_order)
        writer.write_uint32(GeometryType.from_kind(self.kind).code)
        self.coordinate.write(writer)
        return writer.getvalue()

    @staticmethod
    def unmarshall(kind: CoordinateKind, text: Optional[str]) -> Optional["LineString"]:
        """
        Parse WKT as a LineString of the given kind.

        Returns None when the text is not a LineString of that kind, including
        when it is a well-formed LineString of a different dimension.
        """
        if text is None or kind is None:
            return None

        cursor = TextCursor(text)
        parsed_kind = read_geometry_tag(cursor, TAG)
        if parsed_kind is not kind:
            return None

        coordinate = CoordinateSequence.unmarshall(kind, cursor, closed=False)
        if coordinate is None:
            return None

        cursor.skip_blanks()
        if not cursor.at_end():
            logger.debug("Trailing text after %s at offset %d", TAG, cursor.pos)
            return None

        return LineString(kind, coordinate)

    @staticmethod
    def unmarshall_bytes(data: bytes) -> Optional["LineString"]:
        """
        Parse WKB. The coordinate kind comes from the embedded type code.

        Returns None for unknown type codes and truncated or malformed buffers.
        """
        try:
            cursor = BinaryCursor(data)
            geometry_type = GeometryType.from_code(cursor.read_uint32())
            if geometry_type is None:
                return None
            return LineString.read(geometry_type.kind, cursor)
        except (struct.error, ValueError) as e:
            logger.debug("Rejected WKB input: %s", e)
            return None

    @staticmethod
    def read(kind: CoordinateKind, cursor: BinaryCursor) -> "LineString":
        """Read the coordinate list that follows an already consumed type code."""
        return LineString(kind, CoordinateSequence.read(kind, cursor, closed=False))
