from __future__ import annotations

import logging
import math

import pytest

from geometry import Point, Polygon, Segment
from weiler_atherton import BoundaryRing, ClipResult, Crossing, _trace, classify, clip


def _area(pieces) -> float:
    return sum(p.area for p in pieces)


def test_classify_entering_and_exiting() -> None:
    up = Segment(Point(10, 0), Point(10, 10))
    mask_bottom = Segment(Point(5, 5), Point(15, 5))
    assert classify(up, mask_bottom) == (Point(10, 5), Crossing.ENTERING)

    left = Segment(Point(10, 10), Point(0, 10))
    mask_left = Segment(Point(5, 15), Point(5, 5))
    assert classify(left, mask_left) == (Point(5, 10), Crossing.EXITING)


def test_classify_no_intersection() -> None:
    a = Segment(Point(0, 0), Point(10, 0))
    assert classify(a, Segment(Point(0, 5), Point(10, 5))) is None
    assert classify(a, Segment(Point(20, -5), Point(20, 5))) is None


def test_boundary_insert_orders_by_distance(square: Polygon) -> None:
    ring = BoundaryRing(square)
    bottom = square.edges[0]
    ring.insert(Point(7, 0), bottom)
    ring.insert(Point(3, 0), bottom)
    assert ring.points[:4] == [Point(0, 0), Point(3, 0), Point(7, 0), Point(10, 0)]


def test_boundary_insert_is_idempotent(square: Polygon) -> None:
    ring = BoundaryRing(square)
    bottom = square.edges[0]
    ring.insert(Point(3, 0), bottom)
    ring.insert(Point(3.001, 0), bottom)
    assert len(ring) == 5


def test_boundary_insert_on_closing_edge(square: Polygon) -> None:
    ring = BoundaryRing(square)
    closing = square.edges[-1]  # (0,10) -> (0,0)
    ring.insert(Point(0, 4), closing)
    ring.insert(Point(0, 8), closing)
    assert ring.points[-3:] == [Point(0, 10), Point(0, 8), Point(0, 4)]


def test_boundary_ring_index_and_step(square: Polygon) -> None:
    ring = BoundaryRing(square)
    ring.insert(Point(5, 0), square.edges[0])
    ring.seal()
    i = ring.index(Point(5, 0))
    assert i == 1
    assert ring[ring.step(i)] == Point(10, 0)
    assert ring[ring.step(i, forward=False)] == Point(0, 0)
    assert ring[ring.step(0, forward=False)] == Point(0, 10)


def test_boundary_ring_does_not_touch_polygon(square: Polygon) -> None:
    ring = BoundaryRing(square)
    ring.insert(Point(5, 0), square.edges[0])
    assert len(square) == 4


def test_overlapping_squares(square: Polygon, offset_square: Polygon, same_ring) -> None:
    res = clip(square, offset_square, True)
    assert isinstance(res, ClipResult)
    external, internal = res
    assert len(external) == 1
    assert same_ring(external[0], [(5, 10), (0, 10), (0, 0), (10, 0), (10, 5), (5, 5)])
    assert len(internal) == 1
    assert same_ring(internal[0], [(5, 5), (10, 5), (10, 10), (5, 10)])


def test_enclosing_mask_gives_only_internal() -> None:
    triangle = Polygon([(0, 0), (10, 0), (5, 10)])
    mask = Polygon([(-5, -5), (20, -5), (20, 20), (-5, 20)])
    external, internal = clip(triangle, mask, True)
    assert external == []
    assert internal == [triangle]
    assert internal[0] is triangle


def test_enclosing_mask_without_internal_is_empty() -> None:
    triangle = Polygon([(0, 0), (10, 0), (5, 10)])
    mask = Polygon([(-5, -5), (20, -5), (20, 20), (-5, 20)])
    assert clip(triangle, mask, False) == ([], [])


def test_corner_touch_is_not_an_intersection(square: Polygon) -> None:
    mask = Polygon([(10, 10), (20, 10), (20, 20), (10, 20)])
    assert clip(square, mask, True) == ([square], [])


def test_disjoint_polygons(square: Polygon) -> None:
    mask = Polygon([(20, 20), (30, 20), (30, 30), (20, 30)])
    assert clip(square, mask, True) == ([square], [])


def test_mask_inside_subject_keeps_subject(square: Polygon) -> None:
    mask = Polygon([(2, 2), (8, 2), (8, 8), (2, 8)])
    assert clip(square, mask, True) == ([square], [])


def test_one_sided_crossings_fall_back_to_subject(square: Polygon) -> None:
    # 裁剪多边形的一个顶点正好落在主多边形的边上，只剩一个出点
    mask = Polygon([(10, 2), (20, 2), (20, 8), (5, 8)])
    assert clip(square, mask, True) == ([square], [])


def test_strip_splits_subject_into_two_external_pieces() -> None:
    subject = Polygon([(0, 0), (10, 0), (10, 4), (0, 4)])
    strip = Polygon([(4, -2), (6, -2), (6, 6), (4, 6)])
    external, internal = clip(subject, strip, True)
    assert external == [
        Polygon([(6, 0), (10, 0), (10, 4), (6, 4)]),
        Polygon([(4, 4), (0, 4), (0, 0), (4, 0)]),
    ]
    assert internal == [Polygon([(4, 0), (6, 0), (6, 4), (4, 4)])]


def test_area_is_conserved() -> None:
    subject = Polygon([(0, 0), (10, 0), (10, 4), (0, 4)])
    strip = Polygon([(4, -2), (6, -2), (6, 6), (4, 6)])
    external, internal = clip(subject, strip, True)
    assert math.isclose(_area(external), 32.0)
    assert math.isclose(_area(internal), 8.0)
    assert math.isclose(_area(external) + _area(internal), subject.area)


def test_area_is_conserved_for_slanted_crossing() -> None:
    subject = Polygon([(0, 0), (10, 0), (10, 10), (0, 10)])
    diamond = Polygon([(12, 5), (19, 12), (12, 19), (5, 12)])
    external, internal = clip(subject, diamond, True)
    assert len(external) == 1
    assert len(internal) == 1
    assert math.isclose(_area(internal), 4.5, abs_tol=0.01)
    assert math.isclose(_area(external) + _area(internal), subject.area, abs_tol=0.01)


def test_pieces_keep_subject_winding(square: Polygon, offset_square: Polygon) -> None:
    external, internal = clip(square, offset_square, True)
    for piece in external + internal:
        assert piece.is_ccw
        assert len(piece) >= 3


def test_skipping_internal_keeps_external(square: Polygon, offset_square: Polygon) -> None:
    with_inner = clip(square, offset_square, True)
    without = clip(square, offset_square, False)
    assert without.internal == []
    assert without.external == with_inner.external


def test_clip_is_deterministic(square: Polygon, offset_square: Polygon) -> None:
    first = clip(square, offset_square, True)
    for _ in range(5):
        again = clip(square, offset_square, True)
        assert [p.points for p in again.external] == [p.points for p in first.external]
        assert [p.points for p in again.internal] == [p.points for p in first.internal]


def test_inputs_are_not_mutated(square: Polygon, offset_square: Polygon) -> None:
    before = (square.points, offset_square.points)
    clip(square, offset_square, True)
    assert (square.points, offset_square.points) == before


def test_tangent_degenerate_input_does_not_raise() -> None:
    line = Polygon([(0, 0), (10, 10)])
    mask = Polygon([(0, 10), (10, 0), (10, 10)])
    external, internal = clip(line, mask, True)
    assert isinstance(external, list)
    assert isinstance(internal, list)
    assert external == [line]
    assert internal == []


U_MASK = Polygon([(1, 0), (9, 0), (9, 10), (7, 10), (7, 2), (3, 2), (3, 10), (1, 10)])


def test_concave_mask_gives_several_internal_pieces() -> None:
    bar = Polygon([(0, 4), (10, 4), (10, 6), (0, 6)])
    external, internal = clip(bar, U_MASK, True)
    assert len(external) == 3
    assert len(internal) == 2
    assert sorted(p.area for p in external) == pytest.approx([2.0, 2.0, 8.0])
    assert sorted(p.area for p in internal) == pytest.approx([4.0, 4.0])
    assert math.isclose(_area(external) + _area(internal), bar.area)


def test_pieces_never_repeat_a_point(square: Polygon, offset_square: Polygon) -> None:
    bar = Polygon([(0, 4), (10, 4), (10, 6), (0, 6)])
    for subject, mask in ((square, offset_square), (bar, U_MASK)):
        external, internal = clip(subject, mask, True)
        for piece in external + internal:
            assert len(set(piece.points)) == len(piece)


def test_unclosed_traversal_is_dropped_with_warning(caplog) -> None:
    # 起点不是交点时遍历永远回不到起点
    subj = BoundaryRing(Polygon([(0, 0), (10, 0), (10, 10), (0, 10)]))
    mask = BoundaryRing(Polygon([(10, 0), (10, 10), (20, 5)]))
    subj.seal()
    mask.seal()
    caplog.set_level(logging.WARNING, logger="weiler_atherton")
    pieces = _trace(subj, mask, [Point(0, 0)], {Point(10, 0), Point(10, 10)},
                    set(), mask_forward=True)
    assert pieces == []
    assert "did not close" in caplog.text
