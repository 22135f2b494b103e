"""
Douglas-Peucker simplification of trajectory LineStrings.

Horizontal positions are in degrees and elevations in kilometers, so
elevation is divided by the length of one equatorial degree before distances
are measured. Time never takes part in the distance.
"""

import math
from dataclasses import replace
from typing import List, Tuple

import numpy as np

from geotrace.services.coordinates import XY, distances_to_segment
from geotrace.services.linestring import LineString
from geotrace.services.sequence import CoordinateSequence

EARTH_RADIUS_KM = 6378137.0
EARTH_EQUATORIAL_PERIMETER_KM = 2.0 * math.pi * EARTH_RADIUS_KM
EARTH_EQUATORIAL_PERIMETER_DEG = EARTH_EQUATORIAL_PERIMETER_KM / 360


def rescale(coord: XY) -> XY:
    """Same coordinate with elevation expressed in equatorial degrees."""
    if coord.kind.has_z:
        return replace(coord, z=coord.z / EARTH_EQUATORIAL_PERIMETER_DEG)
    return coord


def _farthest(rescaled: List[XY], begin: int, end: int) -> Tuple[int, float]:
    """Index and distance of the interior vertex of [begin, end) farthest from the chord."""
    distances = distances_to_segment(rescaled[begin + 1:end - 1], rescaled[begin], rescaled[end - 1])
    offset = int(np.argmax(distances))
    return begin + 1 + offset, float(distances[offset])


def simplify(line: LineString, delta: float) -> LineString:
    """
    Reduce the vertex count of `line` while keeping every dropped vertex
    within `delta` of the retained path.

    Uses an explicit stack of pending ranges instead of recursion. Each entry
    is (begin, end, insert_pos): [begin, end) indexes the input and
    insert_pos is where a pivot found in that range goes in the output.

    Args:
        line: Input path of any coordinate kind
        delta: Tolerance, in degrees (rescaled elevation counts as degrees)

    Returns:
        New LineString of the same kind and openness
    """
    source = line.coordinate
    result = CoordinateSequence(line.kind, closed=source.closed)
    coords = source.coords

    if len(coords) < 2:
        for coord in coords:
            result.append(coord)
        return LineString(line.kind, result)

    rescaled = [rescale(coord) for coord in coords]

    result.append(coords[0])
    result.append(coords[-1])

    stack = [(0, len(coords), 1)]
    while stack:
        begin, end, insert_pos = stack.pop()
        if end - begin < 3:
            continue

        pivot, max_dist = _farthest(rescaled, begin, end)
        # First index wins on ties, and a zero distance never splits
        if max_dist > delta and max_dist > 0.0:
            result.insert(insert_pos, coords[pivot])
            # Left range closes on the pivot so its chord ends on a retained vertex
            stack.append((begin, pivot + 1, insert_pos))
            stack.append((pivot, end, insert_pos + 1))

    return LineString(line.kind, result)
