"""
Coordinate sequences and their text/binary marshalling.

A CoordinateSequence holds coordinates of a single kind plus an open/closed
flag. It knows how to render itself as a WKT coordinate list, parse one back,
and read or write the count-prefixed coordinate array of a WKB body.
"""

import logging
import struct
from typing import Iterable, Iterator, List, Optional

from geotrace.exceptions import BadGeometryException
from geotrace.services.binary import BinaryCursor, BinaryWriter
from geotrace.services.coordinates import CoordinateKind, XY
from geotrace.services.wkt import TextCursor, format_number

logger = logging.getLogger(__name__)


class CoordinateSequence:
    """Ordered, mutable list of coordinates that all share one kind."""

    def __init__(self, kind: CoordinateKind, closed: bool = False, coords: Optional[Iterable[XY]] = None):
        self.kind = kind
        self._closed = closed
        self.coords: List[XY] = list(coords) if coords is not None else []

    @property
    def closed(self) -> bool:
        return self._closed

    def append(self, coord: XY) -> "CoordinateSequence":
        self.coords.append(coord)
        return self

    def insert(self, index: int, coord: XY) -> None:
        self.coords.insert(index, coord)

    def __len__(self) -> int:
        return len(self.coords)

    def __iter__(self) -> Iterator[XY]:
        return iter(self.coords)

    def __getitem__(self, index):
        return self.coords[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, CoordinateSequence):
            return NotImplemented
        return (
            self.kind is other.kind
            and self._closed == other._closed
            and self.coords == other.coords
        )

    def __hash__(self) -> int:
        return hash((self.kind, self._closed, tuple(self.coords)))

    def __repr__(self):
        state = "closed" if self._closed else "open"
        return f"<CoordinateSequence({self.kind.name}, {state}, {len(self.coords)} coords)>"

    def _check_kind(self) -> None:
        for index, coord in enumerate(self.coords):
            if type(coord) is not self.kind.coord_class:
                raise BadGeometryException(
                    f"Coordinate {index} is {type(coord).__name__}, expected {self.kind.name}"
                )

    # Text

    def marshall(self) -> str:
        """
        Render as a WKT coordinate list: ``(x y [z] [m], ...)``.

        Raises:
            BadGeometryException: If a coordinate does not match the sequence kind
        """
        self._check_kind()
        if not self.coords:
            return "EMPTY"

        vertices = (" ".join(format_number(v) for v in coord.values()) for coord in self.coords)
        return "(" + ", ".join(vertices) + ")"

    @staticmethod
    def unmarshall(kind: CoordinateKind, cursor: TextCursor, closed: bool = False) -> Optional["CoordinateSequence"]:
        """
        Parse a WKT coordinate list for `kind` at the cursor position.

        Returns:
            The parsed sequence, or None if the list is absent or malformed
        """
        sequence = CoordinateSequence(kind, closed)

        mark = cursor.pos
        if cursor.read_word().upper() == "EMPTY":
            return sequence
        cursor.pos = mark

        if not cursor.consume("("):
            logger.debug("Missing '(' at offset %d", cursor.pos)
            return None

        while True:
            values = []
            while True:
                value = cursor.read_number()
                if value is None:
                    break
                values.append(value)

            if len(values) != kind.dimensions:
                logger.debug(
                    "Vertex %d has %d values, %s needs %d",
                    len(sequence), len(values), kind.name, kind.dimensions,
                )
                return None

            coord = kind.create(*values)
            if not coord.is_finite():
                logger.debug("Vertex %d has a non-finite value", len(sequence))
                return None
            sequence.append(coord)

            if cursor.consume(","):
                continue
            if cursor.consume(")"):
                return sequence

            logger.debug("Unexpected character at offset %d", cursor.pos)
            return None

    # Binary

    def write(self, writer: BinaryWriter) -> None:
        """Write the point count followed by the flat coordinate array."""
        self._check_kind()
        writer.write_uint32(len(self.coords))
        for coord in self.coords:
            writer.write_doubles(coord.values())

    @staticmethod
    def read(kind: CoordinateKind, cursor: BinaryCursor, closed: bool = False) -> "CoordinateSequence":
        """
        Read a count-prefixed coordinate array from the cursor.

        Raises:
            struct.error: If the buffer is shorter than the declared count
            ValueError: If a coordinate holds NaN or infinity
        """
        count = cursor.read_uint32()
        dims = kind.dimensions
        if count * dims * 8 > cursor.remaining:
            raise struct.error(f"buffer too short for {count} {kind.name} coordinates")
        values = cursor.read_doubles(count * dims)

        sequence = CoordinateSequence(kind, closed)
        for i in range(0, len(values), dims):
            coord = kind.coord_class(*values[i:i + dims])
            if not coord.is_finite():
                raise ValueError(f"coordinate {i // dims} is not finite")
            sequence.append(coord)
        return sequence
