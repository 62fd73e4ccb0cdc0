"""公共 fixture：常用多边形与环比较工具。"""

from __future__ import annotations

from typing import Callable, Sequence

import pytest

from geometry import Point, Polygon


@pytest.fixture()
def square() -> Polygon:
    return Polygon([(0, 0), (10, 0), (10, 10), (0, 10)])


@pytest.fixture()
def offset_square() -> Polygon:
    return Polygon([(5, 5), (15, 5), (15, 15), (5, 15)])


@pytest.fixture()
def same_ring() -> Callable[[Polygon, Sequence], bool]:
    """两个点序列是否为同一个环（忽略起点不同）"""

    def check(poly: Polygon, expected: Sequence) -> bool:
        pts = list(poly.points)
        exp = [Point.of(p) for p in expected]
        if len(pts) != len(exp):
            return False
        return any(pts[k:] + pts[:k] == exp for k in range(len(pts)))

    return check
