from __future__ import annotations
import math
from dataclasses import dataclass

from radarmerge.geo.geometry import Point


@dataclass(frozen=True)
class TerrainObstacle:
    center: Point
    rx: float
    ry: float
    height: float  # peak height (m)
    name: str = ""

    def __post_init__(self):
        if not isinstance(self.center, Point):
            object.__setattr__(self, "center", Point(float(self.center[0]), float(self.center[1])))
        if self.rx <= 0 or self.ry <= 0:
            raise ValueError(f"Obstacle radii must be positive, got rx={self.rx}, ry={self.ry}")

    def elevation_at(self, x: float, y: float) -> float:
        """
        Gaussian-like bump: height * exp(-3 d^2) inside the ellipse, 0 outside.

        d^2 is the normalised elliptical distance from the centre, so the
        contribution falls to height * e^-3 at the rim and is cut to zero there.
        """
        dx = (x - self.center.x) / self.rx
        dy = (y - self.center.y) / self.ry
        dist_sq = dx * dx + dy * dy
        if dist_sq >= 1.0:
            return 0.0
        return self.height * math.exp(-3.0 * dist_sq)


__all__ = ["TerrainObstacle"]
