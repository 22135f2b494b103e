"""Position lookup by timestamp along a time-ordered LineString."""

from typing import List, Optional

from geotrace.exceptions import BadGeometryException
from geotrace.services.coordinates import XY
from geotrace.services.linestring import LineString


def search_epoch(line: LineString, search: float) -> Optional[XY]:
    """
    Find the position at time `search`.

    The line's time measures must be non-decreasing. A sample whose time
    equals `search` is returned unchanged; otherwise the position is linearly
    interpolated between the two samples that bracket it.

    Args:
        line: LineString of kind XYM or XYZM
        search: Timestamp to look up

    Returns:
        Coordinate of the line's kind with m == search, or None if `search`
        is outside the recorded time range

    Raises:
        BadGeometryException: If the line carries no time measure
    """
    if not line.kind.has_m:
        raise BadGeometryException(f"{line.kind.name} LineString has no time measure")

    coords = line.coordinate.coords
    if not coords:
        return None

    first = coords[0]
    last = coords[-1]
    if first.m <= search <= last.m:
        return _binary_search(coords, search)
    return None


def _binary_search(coords: List[XY], search: float) -> Optional[XY]:
    begin = 0
    end = len(coords) - 1

    # mid is strictly inside (begin, end) whenever end - begin >= 2,
    # so each narrowing step shrinks the bracket
    while begin <= end:
        delta = end - begin
        mid = begin + delta // 2
        coord = coords[mid]

        if coord.m == search or delta == 0:
            return coord
        elif delta == 1:
            if coords[end].m == search:
                return coords[end]
            return calculate_along(coords[begin], coords[end], search)
        elif search < coord.m:
            end = mid
        else:
            begin = mid

    return None


def calculate_along(v1: XY, v2: XY, time: float) -> XY:
    """Interpolate between two samples; a zero time span snaps to v1."""
    span = v2.m - v1.m
    proportion = (time - v1.m) / span if span != 0 else 0.0

    x = v1.x + proportion * (v2.x - v1.x)
    y = v1.y + proportion * (v2.y - v1.y)

    kind = v1.kind
    if kind.has_z:
        z = v1.z + proportion * (v2.z - v1.z)
        return kind.create(x, y, z, time)
    return kind.create(x, y, time)
