"""
Analytic terrain and line-of-sight model.

Elevation is the maximum of a set of bounded obstacle bumps and an optional
pluggable elevation field. Sight lines are tested by sampling the terrain
between observer and target and comparing against the straight line between
them, lowered by the Earth curvature drop.
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Iterable, List, Optional, Protocol, Tuple, runtime_checkable

import numpy as np

from radarmerge.geo.earth import CURVATURE_COEFFICIENT, EARTH_RADIUS_M, curvature_drop
from radarmerge.geo.geometry import Point, PointLike, as_point
from radarmerge.models.obstacle import TerrainObstacle

log = logging.getLogger(__name__)

DEFAULT_LOS_SAMPLES = 40
DEFAULT_RANGE_TOLERANCE = 0.01  # fraction of max range
MIN_LOS_DISTANCE = 1e-6


@runtime_checkable
class ElevationField(Protocol):
    def elevation_at(self, x: float, y: float) -> float:
        ...


class ConstantElevation:
    """Flat ground at a fixed height."""

    def __init__(self, height: float):
        self.height = float(height)

    def elevation_at(self, x: float, y: float) -> float:
        return self.height

    def __repr__(self) -> str:
        return f"ConstantElevation({self.height})"


class FunctionElevation:
    """Adapts a plain callable f(x, y) -> height to the ElevationField protocol."""

    def __init__(self, func: Callable[[float, float], float]):
        self.func = func

    def elevation_at(self, x: float, y: float) -> float:
        return float(self.func(x, y))


class TerrainModel:
    def __init__(
        self,
        obstacles: Optional[Iterable[TerrainObstacle]] = None,
        elevation_field: Optional[ElevationField] = None,
        earth_radius_m: float = EARTH_RADIUS_M,
        curvature_coefficient: float = CURVATURE_COEFFICIENT,
        los_samples: int = DEFAULT_LOS_SAMPLES,
        range_tolerance: float = DEFAULT_RANGE_TOLERANCE,
    ):
        self._obstacles: List[TerrainObstacle] = list(obstacles or [])
        self._field = elevation_field
        self._version = 0
        self.earth_radius_m = earth_radius_m
        self.curvature_coefficient = curvature_coefficient
        self.los_samples = los_samples
        self.range_tolerance = range_tolerance
        self._version = 0

    # -- configuration -------------------------------------------------

    @property
    def version(self) -> int:
        """Incremented on every mutation; derived caches compare against it."""
        return self._version

    # Line-of-sight parameters. Setters validate and bump the version.

    @property
    def earth_radius_m(self) -> float:
        return self._earth_radius_m

    @earth_radius_m.setter
    def earth_radius_m(self, value: float) -> None:
        if value <= 0:
            raise ValueError("earth_radius_m must be positive")
        self._earth_radius_m = float(value)
        self._version += 1

    @property
    def curvature_coefficient(self) -> float:
        return self._curvature_coefficient

    @curvature_coefficient.setter
    def curvature_coefficient(self, value: float) -> None:
        if value < 0:
            raise ValueError("curvature_coefficient must be non-negative")
        self._curvature_coefficient = float(value)
        self._version += 1

    @property
    def los_samples(self) -> int:
        return self._los_samples

    @los_samples.setter
    def los_samples(self, value: int) -> None:
        if value < 1:
            raise ValueError("los_samples must be at least 1")
        self._los_samples = int(value)
        self._version += 1

    @property
    def range_tolerance(self) -> float:
        return self._range_tolerance

    @range_tolerance.setter
    def range_tolerance(self, value: float) -> None:
        if not 0 < value < 1:
            raise ValueError("range_tolerance must be in (0, 1)")
        self._range_tolerance = float(value)
        self._version += 1

    @property
    def obstacles(self) -> Tuple[TerrainObstacle, ...]:
        return tuple(self._obstacles)

    @property
    def elevation_field(self) -> Optional[ElevationField]:
        return self._field

    def add_obstacle(self, obstacle: TerrainObstacle) -> None:
        self._obstacles.append(obstacle)
        log.debug(f"Added obstacle {obstacle.name or len(self._obstacles)} at ({obstacle.center.x:.1f}, {obstacle.center.y:.1f}), h={obstacle.height:.1f}m")
        self._version += 1

    def clear_obstacles(self) -> None:
        self._obstacles.clear()
        self._version += 1

    def set_elevation_field(self, elevation_field: Optional[ElevationField]) -> None:
        if elevation_field is not None and not isinstance(elevation_field, ElevationField):
            raise TypeError("elevation_field must provide elevation_at(x, y)")
        self._field = elevation_field
        self._version += 1

    # -- elevation -----------------------------------------------------

    def elevation(self, x: float, y: float) -> float:
        h = self._field.elevation_at(x, y) if self._field is not None else 0.0
        for obs in self._obstacles:
            h = max(h, obs.elevation_at(x, y))
        return h

    def elevation_profile(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Vectorised elevation() over matching coordinate arrays."""
        xs = np.asarray(xs, dtype=float)
        ys = np.asarray(ys, dtype=float)
        if self._field is not None:
            h = np.array([self._field.elevation_at(x, y) for x, y in zip(xs.ravel(), ys.ravel())],
                         dtype=float).reshape(xs.shape)
        else:
            h = np.zeros_like(xs)
        for obs in self._obstacles:
            dx = (xs - obs.center.x) / obs.rx
            dy = (ys - obs.center.y) / obs.ry
            dist_sq = dx * dx + dy * dy
            bump = np.where(dist_sq < 1.0, obs.height * np.exp(-3.0 * np.minimum(dist_sq, 1.0)), 0.0)
            h = np.maximum(h, bump)
        return h

    # -- line of sight -------------------------------------------------

    def is_blocked(
        self,
        observer: PointLike,
        observer_height: float,
        target: PointLike,
        target_height: float = 0.0,
        sample_count: Optional[int] = None,
    ) -> bool:
        """
        Test whether terrain obstructs the sight line from observer to target.

        Samples sample_count - 1 interior points at t = i / sample_count,
        endpoints excluded. Heights are above the local datum; the sight
        line is lowered by the curvature drop at each sample distance.
        """
        obs = as_point(observer)
        tgt = as_point(target)
        n = self.los_samples if sample_count is None else sample_count
        delta = tgt - obs
        total = delta.length()
        if total < MIN_LOS_DISTANCE or n < 2:
            return False

        t = np.arange(1, n, dtype=float) / n
        xs = obs.x + delta.x * t
        ys = obs.y + delta.y * t
        los = observer_height * (1.0 - t) + target_height * t
        los = los - curvature_drop(t * total, self.earth_radius_m, self.curvature_coefficient)
        terrain = self.elevation_profile(xs, ys)
        return bool(np.any(terrain > los))

    def max_visible_range(
        self,
        observer: PointLike,
        observer_height: float,
        azimuth: float,
        max_range: float,
        target_height: float = 0.0,
    ) -> float:
        """
        Binary search for the farthest visible range along one azimuth.

        Assumes the observer's own position is visible and that visibility is
        monotonic in range; terrain breaking that assumption yields an
        underestimate. Stops once the bracket is narrower than
        range_tolerance * max_range and returns the last visible bound.
        """
        if max_range <= 0:
            return 0.0
        obs = as_point(observer)
        direction = Point(math.cos(azimuth), math.sin(azimuth))
        lo, hi = 0.0, float(max_range)
        threshold = max_range * self.range_tolerance
        while hi - lo > threshold:
            mid = (lo + hi) / 2.0
            if self.is_blocked(obs, observer_height, obs + direction * mid, target_height):
                hi = mid
            else:
                lo = mid
        return lo

    def __repr__(self) -> str:
        return f"TerrainModel(obstacles={len(self._obstacles)}, field={self._field!r})"


__all__ = [
    "ElevationField",
    "ConstantElevation",
    "FunctionElevation",
    "TerrainModel",
    "DEFAULT_LOS_SAMPLES",
    "DEFAULT_RANGE_TOLERANCE",
]
