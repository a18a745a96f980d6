import pytest

from radarmerge.geo.geometry import Point, area, is_counter_clockwise
from radarmerge.models.coverage import PolygonWithHoles
from radarmerge.processing import simplify, simplify_all, smooth, smooth_all
from conftest import make_circle, make_square


def test_simplify_circle():
    circle = make_circle(0, 0, 10, n=100)
    result = simplify(circle, 0.1)
    assert 8 <= len(result) < 100
    assert area(result) == pytest.approx(area(circle), rel=0.03)


def test_simplify_keeps_orientation():
    cw = make_circle(0, 0, 10, n=100)[::-1]
    result = simplify(cw, 0.5)
    assert not is_counter_clockwise(result)


def test_simplify_noop_cases(unit_square):
    assert simplify(unit_square, 0) == unit_square
    two = [Point(0, 0), Point(1, 1)]
    assert simplify(two, 1.0) == two


def test_simplify_never_collapses():
    tri = [Point(0, 0), Point(1, 0), Point(0.5, 0.1)]
    assert len(simplify(tri, 100.0)) == 3


def test_smooth_square():
    sq = [Point(-1, -1), Point(1, -1), Point(1, 1), Point(-1, 1)]
    once = smooth(sq, 1)
    assert len(once) == 8
    assert once[0] == Point(-0.5, -1)
    assert once[1] == Point(0.5, -1)
    assert area(once) == pytest.approx(3.5)
    assert len(smooth(sq, 2)) == 16


def test_smooth_noop(unit_square):
    assert smooth(unit_square, 0) == unit_square
    assert smooth([Point(0, 0), Point(1, 0)], 3) == [Point(0, 0), Point(1, 0)]


def test_region_helpers_process_holes():
    region = PolygonWithHoles(outer=make_square(0, 0, 10), holes=[make_square(0, 0, 2)[::-1]])
    smoothed = smooth_all([region], 1)[0]
    assert len(smoothed.outer) == 8
    assert len(smoothed.holes[0]) == 8
    assert not is_counter_clockwise(smoothed.holes[0])

    simplified = simplify_all([region], 0.5)[0]
    assert len(simplified.outer) == 4
    assert len(simplified.holes) == 1
