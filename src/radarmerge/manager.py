"""
Coverage merge orchestration.

CoverageMergeManager owns the radar list, the terrain model and the pipeline
parameters. Mutations only bump a version counter; the pipeline

    generate per-radar polygons -> union -> classify -> simplify -> smooth

runs lazily on the next read and its result is memoized against the
(manager version, terrain version) pair that produced it.

The manager is not thread-safe. Callers sharing one instance must serialise
mutate-then-read sequences themselves.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from radarmerge.geo.geometry import Point, Polygon
from radarmerge.geo.regions import union_all
from radarmerge.los.coverage import DEFAULT_RAY_COUNT, generate_coverage_polygon
from radarmerge.los.terrain import ConstantElevation, TerrainModel
from radarmerge.models.coverage import CoverageStats, MultiPolygon, PolygonWithHoles
from radarmerge.models.obstacle import TerrainObstacle
from radarmerge.models.radar import RadarParams
from radarmerge.processing import simplify_all, smooth_all

log = logging.getLogger(__name__)

DEFAULT_SIMPLIFY_EPSILON = 5.0
DEFAULT_SMOOTH_ITERATIONS = 1


@dataclass(frozen=True)
class _PipelineResult:
    key: Tuple[int, int]
    coverages: Tuple[Polygon, ...]
    merged: MultiPolygon
    stats: CoverageStats


class CoverageMergeManager:
    def __init__(
        self,
        terrain: Optional[TerrainModel] = None,
        radars: Optional[Iterable[RadarParams]] = None,
        ray_count: int = DEFAULT_RAY_COUNT,
        simplify_epsilon: float = DEFAULT_SIMPLIFY_EPSILON,
        smooth_iterations: int = DEFAULT_SMOOTH_ITERATIONS,
    ):
        self._terrain = terrain if terrain is not None else TerrainModel()
        self._radars: List[RadarParams] = []
        self._ray_count = DEFAULT_RAY_COUNT
        self._simplify_epsilon = DEFAULT_SIMPLIFY_EPSILON
        self._smooth_iterations = DEFAULT_SMOOTH_ITERATIONS
        self._version = 0
        self._result: Optional[_PipelineResult] = None

        self.set_ray_count(ray_count)
        self.set_simplify_epsilon(simplify_epsilon)
        self.set_smooth_iterations(smooth_iterations)
        for radar in radars or []:
            self.add_radar(radar)

    @classmethod
    def from_settings(cls, settings) -> "CoverageMergeManager":
        """Build a manager from a radarmerge.config.settings.Settings instance."""
        tcfg = settings.terrain
        terrain = TerrainModel(
            obstacles=[
                TerrainObstacle(Point(*o.center), o.rx, o.ry, o.height, o.name)
                for o in tcfg.obstacles
            ],
            elevation_field=ConstantElevation(tcfg.base_elevation_m) if tcfg.base_elevation_m is not None else None,
            earth_radius_m=tcfg.earth_radius_m,
            curvature_coefficient=tcfg.curvature_coefficient,
            los_samples=tcfg.los_samples,
            range_tolerance=tcfg.range_tolerance,
        )
        pcfg = settings.pipeline
        return cls(
            terrain=terrain,
            radars=[r.to_params() for r in settings.radars],
            ray_count=pcfg.ray_count,
            simplify_epsilon=pcfg.simplify_epsilon,
            smooth_iterations=pcfg.smooth_iterations,
        )

    # -- state ---------------------------------------------------------

    @property
    def terrain(self) -> TerrainModel:
        return self._terrain

    @property
    def radars(self) -> Tuple[RadarParams, ...]:
        return tuple(self._radars)

    @property
    def ray_count(self) -> int:
        return self._ray_count

    @property
    def simplify_epsilon(self) -> float:
        return self._simplify_epsilon

    @property
    def smooth_iterations(self) -> int:
        return self._smooth_iterations

    @property
    def version(self) -> int:
        return self._version

    @property
    def is_stale(self) -> bool:
        """True when the next read will rerun the pipeline."""
        return self._result is None or self._result.key != self._cache_key()

    def _cache_key(self) -> Tuple[int, int]:
        return (self._version, self._terrain.version)

    def invalidate(self) -> None:
        self._version += 1

    # -- mutators ------------------------------------------------------

    def add_radar(self, radar: RadarParams) -> None:
        if any(r.id == radar.id for r in self._radars):
            raise ValueError(f"Radar id {radar.id} already present")
        self._radars.append(radar)
        self.invalidate()

    def update_radar(self, radar_id: int, params: RadarParams) -> None:
        for i, r in enumerate(self._radars):
            if r.id == radar_id:
                self._radars[i] = params
                self.invalidate()
                return
        raise KeyError(radar_id)

    def remove_radar(self, radar_id: int) -> bool:
        before = len(self._radars)
        self._radars = [r for r in self._radars if r.id != radar_id]
        if len(self._radars) == before:
            return False
        self.invalidate()
        return True

    def clear_radars(self) -> None:
        self._radars.clear()
        self.invalidate()

    def set_ray_count(self, ray_count: int) -> None:
        if ray_count < 3:
            raise ValueError(f"ray_count must be at least 3, got {ray_count}")
        self._ray_count = int(ray_count)
        self.invalidate()

    def set_simplify_epsilon(self, epsilon: float) -> None:
        if epsilon < 0:
            raise ValueError(f"simplify_epsilon must be non-negative, got {epsilon}")
        self._simplify_epsilon = float(epsilon)
        self.invalidate()

    def set_smooth_iterations(self, iterations: int) -> None:
        if iterations < 0:
            raise ValueError(f"smooth_iterations must be non-negative, got {iterations}")
        self._smooth_iterations = int(iterations)
        self.invalidate()

    # -- accessors -----------------------------------------------------
    # Copies are handed out; the memoized result is never exposed.

    @property
    def individual_coverages(self) -> List[Polygon]:
        return [list(poly) for poly in self._ensure_result().coverages]

    @property
    def merged_coverage(self) -> MultiPolygon:
        return [
            PolygonWithHoles(outer=list(r.outer), holes=[list(h) for h in r.holes])
            for r in self._ensure_result().merged
        ]

    @property
    def stats(self) -> CoverageStats:
        return self._ensure_result().stats

    def _ensure_result(self) -> _PipelineResult:
        key = self._cache_key()
        if self._result is not None and self._result.key == key:
            return self._result

        t0 = time.perf_counter()
        # Every footprint must exist before the union step.
        coverages = tuple(
            generate_coverage_polygon(r, self._terrain, self._ray_count) for r in self._radars
        )
        t1 = time.perf_counter()

        merged = union_all(list(coverages))
        if self._simplify_epsilon > 0:
            merged = simplify_all(merged, self._simplify_epsilon)
        if self._smooth_iterations > 0:
            merged = smooth_all(merged, self._smooth_iterations)
        t2 = time.perf_counter()

        stats = CoverageStats.compute(merged)
        log.info(
            f"Coverage recomputed for {len(coverages)} radars: {stats.region_count} regions, "
            f"{stats.total_hole_count} holes (generate {t1 - t0:.3f}s, merge {t2 - t1:.3f}s)"
        )
        self._result = _PipelineResult(key=key, coverages=coverages, merged=merged, stats=stats)
        return self._result


__all__ = ["CoverageMergeManager", "DEFAULT_SIMPLIFY_EPSILON", "DEFAULT_SMOOTH_ITERATIONS"]
