"""
Rebuild the outer/hole hierarchy of flat clipping output.

The boolean engine returns outer boundaries counter-clockwise and holes
clockwise, so the sign of each contour's area says which role it plays.
Each hole is then attached to the innermost outer boundary containing it.

Assignment is a linear scan: O(holes x outers) point-in-polygon tests. That
is fine for tens of regions; a spatial index over the outer bounding boxes is
the place to optimise if inputs grow to thousands of contours.
"""
from __future__ import annotations

import logging
from typing import List, Sequence

from radarmerge.geo import clipping
from radarmerge.geo.clipping import JoinStyle
from radarmerge.geo.errors import RegionClassificationError
from radarmerge.geo.geometry import (
    Point,
    Polygon,
    PointLike,
    area,
    ensure_orientation,
    point_in_polygon,
    point_on_boundary,
    signed_area,
    to_points,
)
from radarmerge.models.coverage import MultiPolygon, PolygonWithHoles

log = logging.getLogger(__name__)

BOUNDARY_TOLERANCE = 1e-9


def _probe_vertex(hole: Polygon, outers: List[Polygon]) -> Point:
    """First hole vertex not lying on any outer boundary (holes may touch their parent)."""
    for v in hole:
        if not any(point_on_boundary(v, outer, BOUNDARY_TOLERANCE) for outer in outers):
            return v
    return hole[0]


def classify_contours(contours: Sequence[Sequence[PointLike]]) -> MultiPolygon:
    """
    Group flat contours into regions with holes.

    Contours with positive signed area become outer boundaries, negative ones
    holes; zero-area contours are dropped. A hole goes to the smallest outer
    boundary containing it, which is the correct parent when islands sit
    inside other regions' holes.

    Raises:
        RegionClassificationError: if a hole lies inside no outer boundary.
    """
    outers: List[Polygon] = []
    outer_areas: List[float] = []
    holes: List[tuple] = []

    for i, contour in enumerate(contours):
        pts = to_points(contour)
        a = signed_area(pts)
        if a > 0:
            outers.append(pts)
            outer_areas.append(a)
        elif a < 0:
            holes.append((i, pts))
        else:
            log.debug(f"Dropping zero-area contour {i} ({len(pts)} vertices)")

    regions: MultiPolygon = [PolygonWithHoles(outer=o) for o in outers]

    for index, hole in holes:
        probe = _probe_vertex(hole, outers)
        candidates = [k for k, outer in enumerate(outers) if point_in_polygon(probe, outer)]
        if not candidates:
            raise RegionClassificationError(
                f"Hole contour {index} ({len(hole)} vertices, area {area(hole):.3f}) "
                f"is not contained in any outer boundary",
                contour_index=index,
            )
        parent = min(candidates, key=lambda k: outer_areas[k])
        regions[parent].holes.append(ensure_orientation(hole, ccw=False))

    return regions


def union_all(polygons: Sequence[Sequence[PointLike]]) -> MultiPolygon:
    """Merge any number of polygons into disjoint regions with holes."""
    if not polygons:
        return []
    return classify_contours(clipping.union(polygons))


def intersect(subjects, clips) -> MultiPolygon:
    return classify_contours(clipping.intersection(subjects, clips))


def subtract(subjects, clips) -> MultiPolygon:
    return classify_contours(clipping.difference(subjects, clips))


def symmetric_difference(subjects, clips) -> MultiPolygon:
    return classify_contours(clipping.xor(subjects, clips))


def offset_regions(polygon: Sequence[PointLike], delta: float, join_style: JoinStyle = JoinStyle.ROUND) -> MultiPolygon:
    return classify_contours(clipping.offset(polygon, delta, join_style))


__all__ = [
    "classify_contours",
    "union_all",
    "intersect",
    "subtract",
    "symmetric_difference",
    "offset_regions",
]
