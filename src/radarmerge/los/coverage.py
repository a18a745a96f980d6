"""
Per-sensor coverage polygon generation.

Each sensor is swept in evenly spaced azimuths; along every azimuth the
terrain model finds the farthest visible range, and the resulting end points
form the coverage polygon.
"""
from __future__ import annotations

import logging
import math

from radarmerge.geo.geometry import Point, Polygon
from radarmerge.los.terrain import TerrainModel
from radarmerge.models.radar import RadarParams

log = logging.getLogger(__name__)

DEFAULT_RAY_COUNT = 72


def generate_coverage_polygon(radar: RadarParams, terrain: TerrainModel, ray_count: int = DEFAULT_RAY_COUNT) -> Polygon:
    """
    Compute the visibility footprint of one radar.

    Args:
        radar: Sensor definition.
        terrain: Terrain used for the line-of-sight tests.
        ray_count: Number of azimuths sampled across [azimuth_start, azimuth_end).

    Returns:
        Polygon with one vertex per ray. Sector radars get the radar position
        appended so the footprint closes as a pie slice.
    """
    if ray_count < 3:
        raise ValueError(f"ray_count must be at least 3, got {ray_count}")

    step = radar.azimuth_span / ray_count
    polygon: Polygon = []
    for i in range(ray_count):
        azimuth = radar.azimuth_start + i * step
        rng = terrain.max_visible_range(radar.position, radar.height_m, azimuth, radar.range_m)
        polygon.append(Point(
            radar.position.x + rng * math.cos(azimuth),
            radar.position.y + rng * math.sin(azimuth),
        ))

    if not radar.is_omnidirectional:
        polygon.append(radar.position)

    log.debug(f"Radar {radar.id} ({radar.name}): {len(polygon)} vertices from {ray_count} rays")
    return polygon


__all__ = ["generate_coverage_polygon", "DEFAULT_RAY_COUNT"]
