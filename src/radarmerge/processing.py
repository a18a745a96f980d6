"""
Post-processing of merged coverage: vertex reduction and corner smoothing.
"""
from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
from shapely.geometry import Polygon as ShapelyPolygon

from radarmerge.geo.geometry import Polygon, PointLike, ensure_orientation, is_counter_clockwise, to_points
from radarmerge.models.coverage import MultiPolygon, PolygonWithHoles

logger = logging.getLogger(__name__)


def simplify(polygon: Sequence[PointLike], epsilon: float) -> Polygon:
    """
    Reduce the vertex count of a closed ring.

    Uses the Douglas-Peucker based topology-preserving simplifier, so no
    removed vertex lies farther than `epsilon` from the simplified boundary
    and the ring does not become self-intersecting. If fewer than 3 vertices
    would remain, the original polygon is returned unchanged.
    """
    points = to_points(polygon)
    if len(points) < 3 or epsilon <= 0:
        return points

    simplified = ShapelyPolygon([(p.x, p.y) for p in points]).simplify(epsilon, preserve_topology=True)
    if simplified.is_empty or simplified.geom_type != "Polygon":
        logger.debug(f"Simplification at epsilon={epsilon} collapsed a {len(points)}-vertex ring; keeping original")
        return points

    result = to_points(simplified.exterior.coords[:-1])
    if len(result) < 3:
        return points
    return ensure_orientation(result, ccw=is_counter_clockwise(points))


def smooth(polygon: Sequence[PointLike], iterations: int = 2) -> Polygon:
    """
    Chaikin corner cutting.

    Every iteration replaces each edge (p0, p1) with the points at 25% and
    75% along it, doubling the vertex count.
    """
    points = to_points(polygon)
    if len(points) < 3 or iterations <= 0:
        return points

    pts = np.array([(p.x, p.y) for p in points], dtype=float)
    for _ in range(iterations):
        nxt = np.roll(pts, -1, axis=0)
        out = np.empty((2 * len(pts), 2), dtype=float)
        out[0::2] = 0.75 * pts + 0.25 * nxt
        out[1::2] = 0.25 * pts + 0.75 * nxt
        pts = out
    return to_points(pts)


def simplify_region(region: PolygonWithHoles, epsilon: float) -> PolygonWithHoles:
    return PolygonWithHoles(
        outer=simplify(region.outer, epsilon),
        holes=[simplify(h, epsilon) for h in region.holes],
    )


def smooth_region(region: PolygonWithHoles, iterations: int) -> PolygonWithHoles:
    return PolygonWithHoles(
        outer=smooth(region.outer, iterations),
        holes=[smooth(h, iterations) for h in region.holes],
    )


def simplify_all(regions: MultiPolygon, epsilon: float) -> MultiPolygon:
    return [simplify_region(r, epsilon) for r in regions]


def smooth_all(regions: MultiPolygon, iterations: int) -> MultiPolygon:
    return [smooth_region(r, iterations) for r in regions]


__all__ = [
    "simplify",
    "smooth",
    "simplify_region",
    "smooth_region",
    "simplify_all",
    "smooth_all",
]
