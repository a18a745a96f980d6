import math
import pytest

from radarmerge.geo.clipping import (
    ClipType, JoinStyle, execute, union, intersection, difference, xor, offset, sanitize_ring,
)
from radarmerge.geo.errors import GeometryError
from radarmerge.geo.geometry import Point, area, signed_area
from conftest import make_square


def _total_signed_area(contours):
    return sum(signed_area(c) for c in contours)


def test_sanitize_ring_drops_duplicates_and_closing_vertex():
    ring = sanitize_ring([(0, 0), (0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])
    assert ring.shape == (4, 2)


def test_sanitize_ring_degenerate():
    assert sanitize_ring([]) is None
    assert sanitize_ring([(0, 0), (1, 1)]) is None
    assert sanitize_ring([(0, 0), (1, 1), (2, 2), (3, 3)]) is None


def test_sanitize_ring_rejects_non_finite():
    with pytest.raises(GeometryError):
        sanitize_ring([(0, 0), (math.nan, 1), (1, 1)])


def test_union_overlapping_squares():
    result = union([make_square(0, 0, 2), make_square(1, 0, 2)])
    assert len(result) == 1
    assert signed_area(result[0]) == pytest.approx(6.0)


def test_union_disjoint_squares():
    result = union([make_square(0, 0, 2), make_square(10, 0, 2)])
    assert len(result) == 2
    assert all(signed_area(c) > 0 for c in result)
    assert _total_signed_area(result) == pytest.approx(8.0)


def test_union_edge_sharing_squares_dissolve():
    result = union([make_square(0, 0, 1), make_square(1, 0, 1)])
    assert len(result) == 1
    assert area(result[0]) == pytest.approx(2.0)


def test_union_single_simple_polygon_keeps_vertices():
    sq = make_square(0, 0, 2)
    result = union([sq[::-1]])
    assert result == [sq]


def test_union_of_duplicated_polygon_is_idempotent():
    sq = make_square(0, 0, 2)
    result = union([sq, list(sq)])
    assert len(result) == 1
    assert signed_area(result[0]) == pytest.approx(4.0)

    again = union(result + result)
    assert len(again) == 1
    assert signed_area(again[0]) == pytest.approx(4.0)


def test_union_ring_of_rectangles_produces_hole():
    frame = [
        [(-3, -3), (3, -3), (3, -1), (-3, -1)],
        [(-3, 1), (3, 1), (3, 3), (-3, 3)],
        [(-3, -3), (-1, -3), (-1, 3), (-3, 3)],
        [(1, -3), (3, -3), (3, 3), (1, 3)],
    ]
    result = union(frame)
    outers = [c for c in result if signed_area(c) > 0]
    holes = [c for c in result if signed_area(c) < 0]
    assert len(outers) == 1
    assert len(holes) == 1
    assert area(outers[0]) == pytest.approx(36.0)
    assert area(holes[0]) == pytest.approx(4.0)


def test_nonzero_fill_keeps_pentagram_centre():
    star = [
        Point(math.cos(math.pi / 2 + k * 4 * math.pi / 5), math.sin(math.pi / 2 + k * 4 * math.pi / 5))
        for k in range(5)
    ]
    result = union([star])
    assert len(result) == 1
    assert signed_area(result[0]) > 0


def test_self_intersecting_figure_eight():
    bowtie = [(0, 0), (2, 2), (2, 0), (0, 2)]
    result = union([bowtie])
    assert all(signed_area(c) > 0 for c in result)
    assert _total_signed_area(result) == pytest.approx(2.0)


def test_opposite_winding_inner_ring_cancels():
    outer = make_square(0, 0, 6)
    inner = make_square(0, 0, 2)[::-1]
    result = union([outer, inner])
    assert _total_signed_area(result) == pytest.approx(32.0)
    assert sum(1 for c in result if signed_area(c) < 0) == 1


def test_intersection():
    result = intersection([make_square(0, 0, 2)], [make_square(1, 0, 2)])
    assert len(result) == 1
    assert area(result[0]) == pytest.approx(2.0)


def test_intersection_disjoint_is_empty():
    assert intersection([make_square(0, 0, 2)], [make_square(10, 0, 2)]) == []


def test_difference_leaves_hole():
    result = difference([make_square(0, 0, 4)], [make_square(0, 0, 2)])
    assert len(result) == 2
    assert sorted(signed_area(c) for c in result) == pytest.approx([-4.0, 16.0])


def test_xor():
    result = xor([make_square(0, 0, 2)], [make_square(1, 0, 2)])
    assert len(result) == 2
    assert _total_signed_area(result) == pytest.approx(4.0)


def test_execute_matches_wrappers():
    a = [make_square(0, 0, 2)]
    b = [make_square(1, 0, 2)]
    assert _total_signed_area(execute(ClipType.DIFFERENCE, a, b)) == pytest.approx(2.0)


def test_degenerate_inputs_are_ignored():
    assert union([[(0, 0), (1, 1), (2, 2)]]) == []
    result = union([[(0, 0), (1, 1)], make_square(0, 0, 2)])
    assert len(result) == 1


def test_non_finite_input_raises():
    with pytest.raises(GeometryError):
        union([[(0, 0), (math.inf, 0), (1, 1)]])


def test_offset_miter():
    result = offset(make_square(0, 0, 2), 1.0, JoinStyle.MITER)
    assert len(result) == 1
    assert area(result[0]) == pytest.approx(16.0)


def test_offset_round():
    result = offset(make_square(0, 0, 2), 1.0, JoinStyle.ROUND)
    assert area(result[0]) == pytest.approx(12.0 + math.pi, abs=0.05)


def test_offset_square():
    result = offset(make_square(0, 0, 2), 1.0, JoinStyle.SQUARE)
    assert 13.9 < area(result[0]) <= 16.0


def test_offset_erode():
    result = offset(make_square(0, 0, 2), -0.5, JoinStyle.MITER)
    assert area(result[0]) == pytest.approx(1.0)
    assert offset(make_square(0, 0, 2), -2.0) == []


def test_offset_zero_and_degenerate():
    result = offset(make_square(0, 0, 2), 0.0)
    assert area(result[0]) == pytest.approx(4.0)
    assert offset([(0, 0), (1, 1)], 1.0) == []
