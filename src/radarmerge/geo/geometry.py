from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Tuple, Union

import numpy as np


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, s: float) -> "Point":
        return Point(self.x * s, self.y * s)

    __rmul__ = __mul__

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y)[index]

    def dot(self, other: "Point") -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Point") -> float:
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        return math.hypot(self.x, self.y)


# A polygon is an open list of vertices; the closing edge is implicit.
Polygon = List[Point]
PointLike = Union[Point, Tuple[float, float], Sequence[float]]


@dataclass(frozen=True)
class BoundingBox:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)


def as_point(p: PointLike) -> Point:
    if isinstance(p, Point):
        return p
    return Point(float(p[0]), float(p[1]))


def to_points(coords: Iterable[PointLike]) -> Polygon:
    """Normalise a sequence of Points or (x, y) pairs into a Polygon."""
    return [as_point(c) for c in coords]


def _as_array(polygon: Sequence[PointLike]) -> np.ndarray:
    if isinstance(polygon, np.ndarray):
        return polygon.astype(float).reshape(-1, 2)
    return np.array([(p[0], p[1]) for p in polygon], dtype=float).reshape(-1, 2)


def signed_area(polygon: Sequence[PointLike]) -> float:
    """
    Shoelace area of a closed loop.

    Positive for counter-clockwise vertex order, negative for clockwise,
    zero for fewer than 3 vertices.
    """
    if len(polygon) < 3:
        return 0.0
    pts = _as_array(polygon)
    x = pts[:, 0]
    y = pts[:, 1]
    x_next = np.roll(x, -1)
    y_next = np.roll(y, -1)
    return float(np.sum(x * y_next - x_next * y) / 2.0)


def area(polygon: Sequence[PointLike]) -> float:
    return abs(signed_area(polygon))


def perimeter(polygon: Sequence[PointLike]) -> float:
    """Sum of edge lengths including the closing edge; 0 for fewer than 2 vertices."""
    if len(polygon) < 2:
        return 0.0
    pts = _as_array(polygon)
    edges = np.roll(pts, -1, axis=0) - pts
    return float(np.sum(np.hypot(edges[:, 0], edges[:, 1])))


def is_counter_clockwise(polygon: Sequence[PointLike]) -> bool:
    return signed_area(polygon) > 0


def ensure_orientation(polygon: Sequence[PointLike], ccw: bool = True) -> Polygon:
    """
    Return the polygon with the requested orientation.

    The vertex order is reversed only when the current orientation does not
    match. The input is never modified; a new list is always returned.
    """
    points = to_points(polygon)
    if is_counter_clockwise(points) == ccw:
        return points
    return points[::-1]


def point_in_polygon(point: PointLike, polygon: Sequence[PointLike]) -> bool:
    """
    Even-odd ray casting against a horizontal ray towards +x.

    Edges are counted with the half-open rule (yi > py) != (yj > py), so a
    point lying exactly on the boundary is not guaranteed a fixed answer:
    points on left or bottom edges usually report inside, points on right or
    top edges usually outside. Use point_on_boundary when that matters.
    """
    px, py = as_point(point)
    n = len(polygon)
    if n < 3:
        return False
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i][0], polygon[i][1]
        xj, yj = polygon[j][0], polygon[j][1]
        if (yi > py) != (yj > py):
            x_cross = (xj - xi) * (py - yi) / (yj - yi) + xi
            if px < x_cross:
                inside = not inside
        j = i
    return inside


def point_on_boundary(point: PointLike, polygon: Sequence[PointLike], tolerance: float = 1e-9) -> bool:
    """True when the point lies within `tolerance` of any polygon edge."""
    n = len(polygon)
    if n == 0:
        return False
    p = as_point(point)
    pts = to_points(polygon)
    for i in range(n):
        a = pts[i]
        b = pts[(i + 1) % n]
        ab = b - a
        ap = p - a
        seg_len_sq = ab.dot(ab)
        if seg_len_sq == 0.0:
            if ap.length() <= tolerance:
                return True
            continue
        t = max(0.0, min(1.0, ap.dot(ab) / seg_len_sq))
        closest = a + ab * t
        if (p - closest).length() <= tolerance:
            return True
    return False


def winding_number(point: PointLike, polygon: Sequence[PointLike]) -> int:
    """
    Signed number of times the polygon boundary winds around the point.

    Counter-clockwise loops contribute +1, clockwise loops -1. Undefined
    for points lying on the boundary.
    """
    if len(polygon) < 3:
        return 0
    px, py = as_point(point)
    pts = _as_array(polygon)
    ax, ay = pts[:, 0], pts[:, 1]
    nxt = np.roll(pts, -1, axis=0)
    bx, by = nxt[:, 0], nxt[:, 1]
    # > 0 when the point is left of the directed edge a -> b
    left = (bx - ax) * (py - ay) - (px - ax) * (by - ay)
    upward = (ay <= py) & (by > py) & (left > 0)
    downward = (ay > py) & (by <= py) & (left < 0)
    return int(np.count_nonzero(upward) - np.count_nonzero(downward))


def bounding_box(polygon: Sequence[PointLike]) -> BoundingBox:
    if len(polygon) == 0:
        return BoundingBox(math.inf, math.inf, -math.inf, -math.inf)
    pts = _as_array(polygon)
    min_x, min_y = pts.min(axis=0)
    max_x, max_y = pts.max(axis=0)
    return BoundingBox(float(min_x), float(min_y), float(max_x), float(max_y))


__all__ = [
    "Point",
    "Polygon",
    "PointLike",
    "BoundingBox",
    "as_point",
    "to_points",
    "signed_area",
    "area",
    "perimeter",
    "is_counter_clockwise",
    "ensure_orientation",
    "point_in_polygon",
    "point_on_boundary",
    "winding_number",
    "bounding_box",
]
