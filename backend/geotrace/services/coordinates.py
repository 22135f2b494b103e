"""
Coordinate value types for LineString vertices.

Four immutable shapes are supported: XY, XYZ (elevation), XYM (time) and
XYZM. The CoordinateKind enum is the single place that maps a shape to its
text suffix and binary type code.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np


def segment_distances(points: np.ndarray, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Euclidean distance from each row of `points` to the segment a-b, in any dimension."""
    ab = b - a
    length_sq = float(np.dot(ab, ab))
    if length_sq == 0.0:
        return np.linalg.norm(points - a, axis=1)

    t = np.clip((points - a) @ ab / length_sq, 0.0, 1.0)
    projections = a + np.outer(t, ab)
    return np.linalg.norm(points - projections, axis=1)


def distances_to_segment(coords: Sequence["XY"], a: "XY", b: "XY") -> np.ndarray:
    """Batch form of XY.distance_to_segment over coordinates of one kind."""
    dims = len(a.spatial())
    points = np.array([c.spatial() for c in coords], dtype=float).reshape(-1, dims)
    return segment_distances(
        points,
        np.array(a.spatial(), dtype=float),
        np.array(b.spatial(), dtype=float),
    )


@dataclass(frozen=True)
class XY:
    """Planar coordinate (x = longitude, y = latitude in degrees)."""

    x: float
    y: float

    def values(self) -> Tuple[float, ...]:
        """All fields in text/binary order."""
        return tuple(getattr(self, f.name) for f in fields(self))

    def spatial(self) -> Tuple[float, ...]:
        """Fields that take part in distance computations."""
        return (self.x, self.y)

    def distance_to_segment(self, a: "XY", b: "XY") -> float:
        """Perpendicular distance from this point to the segment a-b."""
        return float(distances_to_segment([self], a, b)[0])

    def is_finite(self) -> bool:
        return bool(np.isfinite(self.values()).all())

    @property
    def kind(self) -> "CoordinateKind":
        return CoordinateKind.of(self)


@dataclass(frozen=True)
class XYZ(XY):
    """Coordinate with elevation (kilometers)."""

    z: float

    def spatial(self) -> Tuple[float, ...]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class XYM(XY):
    """Coordinate with a time measure. Time is not a spatial dimension."""

    m: float


@dataclass(frozen=True)
class XYZM(XYZ):
    """Coordinate with elevation and time."""

    m: float


class CoordinateKind(Enum):
    """Closed set of coordinate shapes: (class, WKT suffix, WKB type code)."""

    XY = (XY, "", 2)
    XYZ = (XYZ, "Z", 1002)
    XYM = (XYM, "M", 2002)
    XYZM = (XYZM, "ZM", 3002)

    def __init__(self, coord_class, suffix: str, type_code: int):
        self.coord_class = coord_class
        self.suffix = suffix
        self.type_code = type_code

    @property
    def dimensions(self) -> int:
        return len(fields(self.coord_class))

    @property
    def has_z(self) -> bool:
        return self in (CoordinateKind.XYZ, CoordinateKind.XYZM)

    @property
    def has_m(self) -> bool:
        return self in (CoordinateKind.XYM, CoordinateKind.XYZM)

    def create(self, *values: float) -> XY:
        """Build a coordinate of this kind from its fields in order."""
        if len(values) != self.dimensions:
            raise ValueError(
                f"{self.name} needs {self.dimensions} values, got {len(values)}"
            )
        return self.coord_class(*(float(v) for v in values))

    @classmethod
    def of(cls, coordinate: XY) -> "CoordinateKind":
        for kind in cls:
            if type(coordinate) is kind.coord_class:
                return kind
        raise TypeError(f"Not a coordinate: {coordinate!r}")

    @classmethod
    def from_suffix(cls, suffix: str) -> Optional["CoordinateKind"]:
        suffix = suffix.upper()
        for kind in cls:
            if kind.suffix == suffix:
                return kind
        return None

    @classmethod
    def from_name(cls, name: str) -> Optional["CoordinateKind"]:
        """Look up a kind by its name ("XYZM") or WKT suffix ("ZM")."""
        if not name:
            return None
        try:
            return cls[name.upper()]
        except KeyError:
            return cls.from_suffix(name)
