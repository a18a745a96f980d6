import json
import pytest

from radarmerge.geo.geometry import Point
from radarmerge.io.export import coverage_feature_collection, export_geojson, export_svg, render_svg
from radarmerge.models.coverage import PolygonWithHoles
from radarmerge.models.obstacle import TerrainObstacle
from radarmerge.models.radar import RadarParams
from conftest import make_square


@pytest.fixture
def merged():
    return [
        PolygonWithHoles(outer=make_square(0, 0, 4), holes=[make_square(0, 0, 2)[::-1]]),
        PolygonWithHoles(outer=make_square(10, 0, 2)),
    ]


@pytest.fixture
def radars():
    return [
        RadarParams(id=1, name="Alpha & <Bravo>", position=Point(0, 0), range_m=3),
        RadarParams(id=2, name="Charlie", position=Point(10, 0), range_m=1),
    ]


def test_render_svg(radars, merged):
    coverages = [make_square(0, 0, 4), make_square(10, 0, 2)]
    obstacles = [TerrainObstacle(Point(5, 5), 2, 1, 100)]
    svg = render_svg(radars, coverages, merged, obstacles)

    assert svg.startswith('<?xml version="1.0"')
    assert '<svg xmlns="http://www.w3.org/2000/svg" width="800" height="600"' in svg
    assert 'fill="#0a0f1a"' in svg
    assert svg.count("<ellipse") == 1
    assert svg.count('class="region"') == 2
    assert svg.count('class="hole"') == 1
    assert svg.count('class="coverage"') == 2
    assert 'stroke-dasharray="4,2"' in svg
    assert "Alpha &amp; &lt;Bravo&gt;" in svg
    assert "<Bravo>" not in svg
    assert svg.rstrip().endswith("</svg>")


def test_render_svg_style_override(radars, merged):
    svg = render_svg(radars, [], merged, [], {"width": 400, "background": "#ffffff", "precision": 0})
    assert 'width="400"' in svg
    assert 'fill="#ffffff"' in svg
    assert 'points="-2,-2 2,-2 2,2 -2,2"' in svg


def test_palette_cycles():
    radars = [RadarParams(id=i, position=Point(i, 0)) for i in range(6)]
    svg = render_svg(radars, [], [], [])
    # Sixth radar reuses the first palette colour
    assert svg.count('r="5" fill="#3b82f6"') == 2


def test_feature_collection(merged):
    fc = coverage_feature_collection(merged)
    assert fc["type"] == "FeatureCollection"
    assert len(fc["features"]) == 2

    first = fc["features"][0]
    assert first["properties"] == {"type": "radar_coverage", "region_id": 0, "hole_count": 1}
    assert first["geometry"]["type"] == "Polygon"
    rings = first["geometry"]["coordinates"]
    assert len(rings) == 2
    for ring in rings:
        assert ring[0] == ring[-1]
    assert len(rings[0]) == 5
    assert fc["features"][1]["properties"]["hole_count"] == 0


def test_feature_collection_empty():
    assert coverage_feature_collection([]) == {"type": "FeatureCollection", "features": []}


def test_export_files(tmp_path, radars, merged):
    svg_path = export_svg(tmp_path / "out" / "result.svg", radars, [], merged, [])
    assert svg_path.exists()
    assert "<svg" in svg_path.read_text()

    geo_path = export_geojson(tmp_path / "out" / "result.geojson", merged)
    data = json.loads(geo_path.read_text())
    assert len(data["features"]) == 2
