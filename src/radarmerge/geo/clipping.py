"""
Polygon boolean operations under the nonzero winding fill rule.

The input edges of every subject and clip polygon are noded into a planar
arrangement (GEOS snap-rounding union of the boundary linework), the faces
of that arrangement are enumerated with polygonize, and each face is kept or
discarded by evaluating the winding numbers of the subject set and the clip
set at a point inside it. Kept faces are dissolved into the result.

Because the face test uses winding numbers rather than ring validity, inputs
may be concave, self-intersecting, self-overlapping or mutually nested.
Results are returned as a flat list of simple contours: outer boundaries
counter-clockwise, holes clockwise, with no nesting information (see
radarmerge.geo.regions for the hierarchy).
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np
import shapely
from shapely.errors import GEOSException
from shapely.geometry import LinearRing, LineString
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry.polygon import orient
from shapely.ops import polygonize

from radarmerge.geo.errors import GeometryError
from radarmerge.geo.geometry import Polygon, PointLike, ensure_orientation, to_points, winding_number

log = logging.getLogger(__name__)

# Snap-rounding grid for noding; vertices move by at most half a cell.
DEFAULT_GRID_SIZE = 1e-9
# Twice the triangle area below which a ring is treated as collinear.
DEGENERATE_AREA = 1e-12
DEFAULT_MITRE_LIMIT = 2.0
DEFAULT_QUAD_SEGS = 8


class ClipType(Enum):
    UNION = "union"
    INTERSECTION = "intersection"
    DIFFERENCE = "difference"
    XOR = "xor"


class JoinStyle(Enum):
    ROUND = "round"
    SQUARE = "square"
    MITER = "miter"


_FACE_RULES: Dict[ClipType, Callable[[bool, bool], bool]] = {
    ClipType.UNION: lambda s, c: s or c,
    ClipType.INTERSECTION: lambda s, c: s and c,
    ClipType.DIFFERENCE: lambda s, c: s and not c,
    ClipType.XOR: lambda s, c: s != c,
}


def sanitize_ring(polygon: Sequence[PointLike]) -> Optional[np.ndarray]:
    """
    Clean one input polygon before clipping.

    Removes a repeated closing vertex and consecutive duplicate vertices.
    Returns None for rings that enclose no area (fewer than 3 distinct
    vertices, or all vertices collinear).

    Raises:
        GeometryError: if any coordinate is NaN or infinite.
    """
    if len(polygon) == 0:
        return None
    arr = np.array([(p[0], p[1]) for p in polygon], dtype=float).reshape(-1, 2)
    if not np.all(np.isfinite(arr)):
        raise GeometryError("Polygon contains non-finite coordinates")

    # Compare each vertex with its cyclic predecessor; this also strips the
    # explicit closing vertex some callers include.
    keep = np.any(arr != np.roll(arr, 1, axis=0), axis=1)
    arr = arr[keep]
    if len(arr) < 3:
        return None

    rel = arr - arr[0]
    far = int(np.argmax(np.hypot(rel[:, 0], rel[:, 1])))
    cross = rel[:, 0] * rel[far, 1] - rel[:, 1] * rel[far, 0]
    if np.max(np.abs(cross)) <= DEGENERATE_AREA:
        return None
    return arr


def _sanitize_all(polygons: Sequence[Sequence[PointLike]]) -> List[np.ndarray]:
    rings = []
    for i, poly in enumerate(polygons):
        ring = sanitize_ring(poly)
        if ring is None:
            log.debug(f"Dropping degenerate input polygon {i} ({len(poly)} vertices)")
            continue
        rings.append(ring)
    return rings


def _is_inside(probe, rings: List[np.ndarray]) -> bool:
    return sum(winding_number(probe, ring) for ring in rings) != 0


def _fill_geometry(
    subjects: List[np.ndarray],
    clips: List[np.ndarray],
    clip_type: ClipType,
    grid_size: Optional[float],
):
    """Build the shapely geometry covered by the operation's kept faces."""
    rings = subjects + clips
    if not rings:
        return ShapelyPolygon()

    rule = _FACE_RULES[clip_type]
    try:
        lines = [LineString(np.vstack([r, r[:1]])) for r in rings]
        noded = shapely.union_all(lines, grid_size=grid_size)
        faces = list(polygonize(list(shapely.get_parts(noded))))

        kept = []
        for face in faces:
            if face.is_empty:
                continue
            probe = face.representative_point()
            pt = (probe.x, probe.y)
            if rule(_is_inside(pt, subjects), _is_inside(pt, clips)):
                kept.append(face)

        log.debug(f"{clip_type.value}: {len(rings)} rings, {len(faces)} faces, {len(kept)} kept")
        if not kept:
            return ShapelyPolygon()
        return shapely.union_all(kept, grid_size=grid_size)
    except GEOSException as e:
        raise GeometryError(f"Polygon {clip_type.value} failed: {e}") from e


def _contours(geom) -> List[Polygon]:
    """Flatten polygonal shapely output into CCW outer and CW hole contours."""
    contours: List[Polygon] = []
    for part in shapely.get_parts(geom):
        if part.is_empty or part.geom_type != "Polygon":
            continue
        part = orient(part, sign=1.0)
        contours.append(to_points(part.exterior.coords[:-1]))
        for interior in part.interiors:
            contours.append(to_points(interior.coords[:-1]))
    return contours


def execute(
    clip_type: ClipType,
    subjects: Sequence[Sequence[PointLike]],
    clips: Sequence[Sequence[PointLike]] = (),
    grid_size: Optional[float] = DEFAULT_GRID_SIZE,
) -> List[Polygon]:
    """
    Run one boolean operation on two polygon sets.

    Args:
        clip_type: Operation to perform.
        subjects: Subject polygons; their edges together define the subject fill.
        clips: Clip polygons (ignored sets may be empty).
        grid_size: Snap-rounding precision for noding, or None for floating noding.

    Returns:
        Flat list of contours. Outer boundaries are counter-clockwise, holes
        clockwise.
    """
    subject_rings = _sanitize_all(subjects)
    clip_rings = _sanitize_all(clips)

    # A lone simple polygon is its own union; keep its vertices untouched.
    if clip_type is ClipType.UNION and len(subject_rings) == 1 and not clip_rings:
        ring = subject_rings[0]
        if LinearRing(ring).is_simple:
            return [ensure_orientation(to_points(ring), ccw=True)]

    return _contours(_fill_geometry(subject_rings, clip_rings, clip_type, grid_size))


def union(subjects: Sequence[Sequence[PointLike]], grid_size: Optional[float] = DEFAULT_GRID_SIZE) -> List[Polygon]:
    return execute(ClipType.UNION, subjects, (), grid_size)


def intersection(subjects, clips, grid_size: Optional[float] = DEFAULT_GRID_SIZE) -> List[Polygon]:
    return execute(ClipType.INTERSECTION, subjects, clips, grid_size)


def difference(subjects, clips, grid_size: Optional[float] = DEFAULT_GRID_SIZE) -> List[Polygon]:
    return execute(ClipType.DIFFERENCE, subjects, clips, grid_size)


def xor(subjects, clips, grid_size: Optional[float] = DEFAULT_GRID_SIZE) -> List[Polygon]:
    return execute(ClipType.XOR, subjects, clips, grid_size)


def offset(
    polygon: Sequence[PointLike],
    delta: float,
    join_style: JoinStyle = JoinStyle.ROUND,
    mitre_limit: float = DEFAULT_MITRE_LIMIT,
    quad_segs: int = DEFAULT_QUAD_SEGS,
    grid_size: Optional[float] = DEFAULT_GRID_SIZE,
) -> List[Polygon]:
    """
    Inflate (delta > 0) or erode (delta < 0) the nonzero fill of a polygon.

    JoinStyle.ROUND approximates corners with quad_segs segments per quarter
    circle. JoinStyle.MITER extends edges to a point unless the mitre would
    exceed mitre_limit * |delta|. JoinStyle.SQUARE squares corners off at
    distance |delta| from the original vertex.
    """
    ring = sanitize_ring(polygon)
    if ring is None:
        return []
    region = _fill_geometry([ring], [], ClipType.UNION, grid_size)
    if region.is_empty:
        return []
    if delta == 0:
        return _contours(region)

    if join_style is JoinStyle.ROUND:
        kwargs = {"join_style": "round"}
    elif join_style is JoinStyle.SQUARE:
        kwargs = {"join_style": "mitre", "mitre_limit": 1.0}
    else:
        kwargs = {"join_style": "mitre", "mitre_limit": mitre_limit}

    try:
        buffered = region.buffer(delta, quad_segs=quad_segs, **kwargs)
    except GEOSException as e:
        raise GeometryError(f"Polygon offset by {delta} failed: {e}") from e
    return _contours(buffered)


__all__ = [
    "ClipType",
    "JoinStyle",
    "DEFAULT_GRID_SIZE",
    "sanitize_ring",
    "execute",
    "union",
    "intersection",
    "difference",
    "xor",
    "offset",
]
