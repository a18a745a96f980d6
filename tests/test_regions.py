import pytest

from radarmerge.geo.clipping import JoinStyle
from radarmerge.geo.errors import GeometryError, RegionClassificationError
from radarmerge.geo.geometry import Point, is_counter_clockwise
from radarmerge.geo.regions import (
    classify_contours, union_all, intersect, subtract, symmetric_difference, offset_regions,
)
from radarmerge.models.coverage import CoverageStats
from conftest import make_square


def test_classify_assigns_hole_to_outer():
    regions = classify_contours([make_square(0, 0, 4), make_square(0, 0, 2)[::-1]])
    assert len(regions) == 1
    assert len(regions[0].holes) == 1
    assert regions[0].net_area == pytest.approx(12.0)


def test_classify_picks_innermost_parent():
    contours = [
        make_square(0, 0, 20),
        make_square(0, 0, 16)[::-1],
        make_square(0, 0, 10),
        make_square(0, 0, 4)[::-1],
    ]
    regions = classify_contours(contours)
    by_size = sorted(regions, key=lambda r: r.net_area)
    island, frame = by_size
    assert len(frame.holes) == 1
    assert len(island.holes) == 1
    assert island.net_area == pytest.approx(100 - 16)
    assert frame.net_area == pytest.approx(400 - 256)


def test_hole_touching_outer_boundary():
    outer = make_square(2, 2, 4)
    hole = [Point(0, 2), Point(2, 3), Point(2, 1)]
    regions = classify_contours([outer, hole])
    assert len(regions[0].holes) == 1


def test_orphan_hole_raises():
    with pytest.raises(RegionClassificationError) as exc:
        classify_contours([make_square(0, 0, 2)[::-1]])
    assert exc.value.contour_index == 0
    assert isinstance(exc.value, GeometryError)


def test_zero_area_contours_dropped():
    regions = classify_contours([make_square(0, 0, 2), [(0, 0), (1, 1), (2, 2)]])
    assert len(regions) == 1


def test_orientation_of_classified_regions():
    regions = subtract([make_square(0, 0, 4)], [make_square(0, 0, 2)])
    assert is_counter_clockwise(regions[0].outer)
    assert not is_counter_clockwise(regions[0].holes[0])


def test_union_all_empty():
    assert union_all([]) == []


def test_union_all_frame():
    frame = [
        [(-3, -3), (3, -3), (3, -1), (-3, -1)],
        [(-3, 1), (3, 1), (3, 3), (-3, 3)],
        [(-3, -3), (-1, -3), (-1, 3), (-3, 3)],
        [(1, -3), (3, -3), (3, 3), (1, 3)],
    ]
    stats = CoverageStats.compute(union_all(frame))
    assert stats.region_count == 1
    assert stats.total_hole_count == 1
    assert stats.total_area == pytest.approx(32.0)
    assert stats.total_perimeter == pytest.approx(24.0 + 8.0)


def test_union_all_disjoint():
    regions = union_all([make_square(0, 0, 2), make_square(10, 0, 2)])
    assert len(regions) == 2
    assert sum(r.net_area for r in regions) == pytest.approx(8.0)


def test_wrappers():
    a = [make_square(0, 0, 2)]
    b = [make_square(1, 0, 2)]
    assert sum(r.net_area for r in intersect(a, b)) == pytest.approx(2.0)
    assert sum(r.net_area for r in subtract(a, b)) == pytest.approx(2.0)
    assert len(symmetric_difference(a, b)) == 2


def test_offset_regions():
    regions = offset_regions(make_square(0, 0, 2), 1.0, JoinStyle.MITER)
    assert len(regions) == 1
    assert regions[0].net_area == pytest.approx(16.0)
