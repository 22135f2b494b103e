"""
Endianness-aware binary reading and writing for WKB geometries.

A WKB buffer starts with a single byte-order marker (0 = big endian,
1 = little endian); every integer and double that follows uses that order.
"""

import struct
from enum import Enum, IntEnum
from typing import Optional

from geotrace.services.coordinates import CoordinateKind


class ByteOrder(IntEnum):
    BIG = 0
    LITTLE = 1

    @property
    def prefix(self) -> str:
        return ">" if self is ByteOrder.BIG else "<"

    @classmethod
    def from_name(cls, name: str) -> "ByteOrder":
        name = (name or "").strip().lower()
        if name in ("big", "xdr", ">"):
            return cls.BIG
        if name in ("little", "ndr", "<"):
            return cls.LITTLE
        raise ValueError(f"Unsupported byte order: {name}")


class GeometryType(Enum):
    """WKB type codes of the LineString variants."""

    LINESTRING = CoordinateKind.XY
    LINESTRINGZ = CoordinateKind.XYZ
    LINESTRINGM = CoordinateKind.XYM
    LINESTRINGZM = CoordinateKind.XYZM

    @property
    def code(self) -> int:
        return self.value.type_code

    @property
    def kind(self) -> CoordinateKind:
        return self.value

    @classmethod
    def from_code(cls, code: int) -> Optional["GeometryType"]:
        for geometry_type in cls:
            if geometry_type.code == code:
                return geometry_type
        return None

    @classmethod
    def from_kind(cls, kind: CoordinateKind) -> "GeometryType":
        return cls(kind)


class BinaryCursor:
    """Sequential reader over a WKB buffer.

    The byte-order marker is consumed on construction. Reads past the end
    raise struct.error.
    """

    def __init__(self, data: bytes):
        if not data:
            raise struct.error("empty buffer")
        self.data = bytes(data)
        self.byte_order = ByteOrder(self.data[0])
        self.offset = 1

    def _unpack(self, fmt: str, size: int):
        values = struct.unpack_from(self.byte_order.prefix + fmt, self.data, self.offset)
        self.offset += size
        return values

    def read_uint32(self) -> int:
        return self._unpack("I", 4)[0]

    def read_doubles(self, count: int) -> tuple:
        return self._unpack(f"{count}d", 8 * count)

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset


class BinaryWriter:
    """Accumulates WKB output, starting with the byte-order marker."""

    def __init__(self, byte_order: ByteOrder = ByteOrder.LITTLE):
        self.byte_order = byte_order
        self._parts = [bytes([int(byte_order)])]

    def write_uint32(self, value: int) -> None:
        self._parts.append(struct.pack(self.byte_order.prefix + "I", value))

    def write_doubles(self, values) -> None:
        values = tuple(values)
        self._parts.append(struct.pack(f"{self.byte_order.prefix}{len(values)}d", *values))

    def getvalue(self) -> bytes:
        return b"".join(self._parts)
