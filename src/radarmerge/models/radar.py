from __future__ import annotations
import math
from dataclasses import dataclass, field

from radarmerge.geo.geometry import Point

FULL_CIRCLE = 2.0 * math.pi
OMNI_TOLERANCE = 0.01  # rad


@dataclass(frozen=True)
class RadarParams:
    id: int
    name: str = "Radar"
    position: Point = field(default_factory=lambda: Point(0.0, 0.0))
    range_m: float = 50_000.0
    height_m: float = 10.0  # antenna height above local ground
    min_elevation: float = -0.01  # rad
    max_elevation: float = 0.7  # rad
    azimuth_start: float = 0.0  # rad, counter-clockwise from +x
    azimuth_end: float = FULL_CIRCLE

    def __post_init__(self):
        if not isinstance(self.position, Point):
            object.__setattr__(self, "position", Point(float(self.position[0]), float(self.position[1])))
        if self.range_m < 0:
            raise ValueError(f"Radar {self.id}: range must be non-negative, got {self.range_m}")
        if self.azimuth_end <= self.azimuth_start:
            raise ValueError(
                f"Radar {self.id}: azimuth_end ({self.azimuth_end}) must exceed azimuth_start ({self.azimuth_start})"
            )
        if self.azimuth_span > FULL_CIRCLE + OMNI_TOLERANCE:
            raise ValueError(f"Radar {self.id}: azimuth span {self.azimuth_span:.4f} exceeds a full circle")
        if self.min_elevation > self.max_elevation:
            raise ValueError(f"Radar {self.id}: min_elevation exceeds max_elevation")

    @property
    def azimuth_span(self) -> float:
        return self.azimuth_end - self.azimuth_start

    @property
    def is_omnidirectional(self) -> bool:
        return abs(self.azimuth_span - FULL_CIRCLE) < OMNI_TOLERANCE


__all__ = ["RadarParams", "FULL_CIRCLE", "OMNI_TOLERANCE"]
