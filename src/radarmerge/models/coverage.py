from __future__ import annotations
from dataclasses import dataclass, field
from typing import List

from radarmerge.geo.geometry import Polygon, area, perimeter


@dataclass
class PolygonWithHoles:
    """
    One covered region.

    `outer` is counter-clockwise; every hole is clockwise and lies inside
    `outer` without overlapping the other holes.
    """
    outer: Polygon
    holes: List[Polygon] = field(default_factory=list)

    @property
    def net_area(self) -> float:
        return area(self.outer) - sum(area(h) for h in self.holes)

    @property
    def total_perimeter(self) -> float:
        return perimeter(self.outer) + sum(perimeter(h) for h in self.holes)


MultiPolygon = List[PolygonWithHoles]


@dataclass(frozen=True)
class CoverageStats:
    region_count: int = 0
    total_hole_count: int = 0
    total_area: float = 0.0
    total_perimeter: float = 0.0

    @classmethod
    def compute(cls, regions: MultiPolygon) -> "CoverageStats":
        return cls(
            region_count=len(regions),
            total_hole_count=sum(len(r.holes) for r in regions),
            total_area=sum(r.net_area for r in regions),
            total_perimeter=sum(r.total_perimeter for r in regions),
        )


__all__ = ["PolygonWithHoles", "MultiPolygon", "CoverageStats"]
