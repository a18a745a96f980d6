from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
from xml.sax.saxutils import escape

from radarmerge.geo.geometry import Polygon
from radarmerge.models.coverage import MultiPolygon
from radarmerge.models.obstacle import TerrainObstacle
from radarmerge.models.radar import RadarParams

log = logging.getLogger(__name__)

DEFAULT_STYLE: Dict[str, Any] = {
    "width": 800,
    "height": 600,
    "background": "#0a0f1a",
    "merged_color": "#06b6d4",
    "hole_color": "#ef4444",
    "obstacle_color": "#92400e",
    "palette": ["#3b82f6", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6"],
    "precision": 1,
}


def _points_attr(polygon: Polygon, precision: int) -> str:
    """SVG points attribute: 'x1,y1 x2,y2 ...'."""
    return " ".join(f"{p.x:.{precision}f},{p.y:.{precision}f}" for p in polygon)


def _ring_coords(polygon: Polygon) -> List[List[float]]:
    """GeoJSON linear ring: first coordinate repeated at the end."""
    coords = [[p.x, p.y] for p in polygon]
    if coords:
        coords.append(list(coords[0]))
    return coords


def render_svg(
    radars: Sequence[RadarParams],
    coverages: Sequence[Polygon],
    merged: MultiPolygon,
    obstacles: Sequence[TerrainObstacle],
    style: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Render terrain, per-radar footprints and the merged coverage as SVG.

    Layers from bottom to top: obstacles, merged regions (holes painted in the
    background colour with a dashed outline), individual footprints, radar
    markers with labels.
    """
    s = dict(DEFAULT_STYLE)
    s.update(style or {})
    prec = int(s["precision"])
    palette = s["palette"] or DEFAULT_STYLE["palette"]
    width, height = s["width"], s["height"]

    out = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" viewBox="0 0 {width} {height}">',
        '  <defs>',
        '    <linearGradient id="mergedGrad" x1="0%" y1="0%" x2="100%" y2="100%">',
        f'      <stop offset="0%" stop-color="{s["merged_color"]}" stop-opacity="0.3"/>',
        '      <stop offset="100%" stop-color="#8b5cf6" stop-opacity="0.3"/>',
        '    </linearGradient>',
        '  </defs>',
        f'  <rect width="100%" height="100%" fill="{s["background"]}"/>',
    ]

    for obs in obstacles:
        out.append(
            f'  <ellipse cx="{obs.center.x}" cy="{obs.center.y}" rx="{obs.rx}" ry="{obs.ry}" '
            f'fill="{s["obstacle_color"]}" fill-opacity="0.5"/>'
        )

    for region in merged:
        out.append(
            f'  <polygon class="region" points="{_points_attr(region.outer, prec)}" '
            f'fill="url(#mergedGrad)" stroke="{s["merged_color"]}" stroke-width="2.5"/>'
        )
        for hole in region.holes:
            out.append(
                f'  <polygon class="hole" points="{_points_attr(hole, prec)}" fill="{s["background"]}" '
                f'stroke="{s["hole_color"]}" stroke-width="1.5" stroke-dasharray="4,2"/>'
            )

    for i, poly in enumerate(coverages):
        color = palette[i % len(palette)]
        out.append(
            f'  <polygon class="coverage" points="{_points_attr(poly, prec)}" fill="{color}" fill-opacity="0.1" '
            f'stroke="{color}" stroke-opacity="0.5" stroke-width="1" stroke-dasharray="4,2"/>'
        )

    for i, radar in enumerate(radars):
        color = palette[i % len(palette)]
        x, y = radar.position.x, radar.position.y
        out.extend([
            f'  <circle cx="{x}" cy="{y}" r="14" fill="{s["background"]}" stroke="{color}" stroke-width="2"/>',
            f'  <circle cx="{x}" cy="{y}" r="5" fill="{color}"/>',
            f'  <text x="{x}" y="{y - 20}" fill="{color}" font-size="12" text-anchor="middle" '
            f'font-family="sans-serif">{escape(radar.name)}</text>',
        ])

    out.append('</svg>')
    return "\n".join(out) + "\n"


def export_svg(
    output_path: Path,
    radars: Sequence[RadarParams],
    coverages: Sequence[Polygon],
    merged: MultiPolygon,
    obstacles: Sequence[TerrainObstacle],
    style: Optional[Dict[str, Any]] = None,
) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_svg(radars, coverages, merged, obstacles, style), encoding="utf-8")
    log.info(f"Exported SVG: {output_path}")
    return output_path


def coverage_feature_collection(merged: MultiPolygon) -> Dict[str, Any]:
    """One Polygon feature per region; rings are closed by repeating the first coordinate."""
    features = []
    for i, region in enumerate(merged):
        rings = [_ring_coords(region.outer)] + [_ring_coords(h) for h in region.holes]
        features.append({
            "type": "Feature",
            "properties": {
                "type": "radar_coverage",
                "region_id": i,
                "hole_count": len(region.holes),
            },
            "geometry": {
                "type": "Polygon",
                "coordinates": rings,
            },
        })
    return {"type": "FeatureCollection", "features": features}


def export_geojson(output_path: Path, merged: MultiPolygon) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(coverage_feature_collection(merged), f, indent=2)
    log.info(f"Exported GeoJSON: {output_path} ({len(merged)} regions)")
    return output_path


__all__ = [
    "render_svg",
    "export_svg",
    "coverage_feature_collection",
    "export_geojson",
]
