# geometry.py
from dataclasses import dataclass
from functools import cached_property
from typing import Iterable, List, Optional, Sequence, Tuple, Union
import math

# 公共常量：坐标容差
EPS = 0.01


def almost_equal(a: float, b: float, eps: float = EPS) -> bool:
    return abs(a - b) <= eps


def less(a: float, b: float, eps: float = EPS) -> bool:
    """a 明显小于 b（超出容差）"""
    return b - a > eps


def bigger(a: float, b: float, eps: float = EPS) -> bool:
    """a 明显大于 b（超出容差）"""
    return a - b > eps


def _snap(v: float) -> int:
    return int(round(v / EPS))


@dataclass(frozen=True, eq=False)
class Point:
    """
    二维点。
    相等与哈希基于吸附到 EPS 网格后的整数坐标，
    因此可以直接作为 set / dict 的键，结果与插入顺序无关。
    """
    x: float
    y: float

    @property
    def key(self) -> Tuple[int, int]:
        return _snap(self.x), _snap(self.y)

    def __eq__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)

    def __lt__(self, other: "Point") -> bool:
        return self.key < other.key

    def __iter__(self):
        yield self.x
        yield self.y

    def near(self, other: "Point") -> bool:
        """逐坐标比较，误差都不超过 EPS（不依赖网格吸附）"""
        return almost_equal(self.x, other.x) and almost_equal(self.y, other.y)

    def distance(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    @classmethod
    def of(cls, value: Union["Point", Sequence[float]]) -> "Point":
        if isinstance(value, Point):
            return value
        x, y = value
        return cls(float(x), float(y))


PointLike = Union[Point, Tuple[float, float]]


def signed_area(pts: Sequence[PointLike]) -> float:
    """多边形带符号面积（正为逆时针）"""
    a = 0.0
    n = len(pts)
    for i in range(n):
        x1, y1 = pts[i]
        x2, y2 = pts[(i+1) % n]
        a += x1 * y2 - x2 * y1
    return a / 2.0


def is_ccw(pts: Sequence[PointLike]) -> bool:
    return signed_area(pts) > 0


# 叉积
def orient(a: Point, b: Point, c: Point) -> float:
    """叉积 (b-a) x (c-a)"""
    return (b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x)


class Segment:
    """
    有向边 start -> end。
    构造时预先计算直线隐式方程 a*x + b*y = c 的系数，
    与另一条边求交时直接复用。
    """

    def __init__(self, start: Point, end: Point):
        self.start = start
        self.end = end
        self.a = end.y - start.y
        self.b = start.x - end.x
        self.c = self.a * start.x + self.b * start.y

    def __repr__(self):
        return f"Segment({self.start} -> {self.end})"

    def _outside_box(self, x: float, y: float) -> bool:
        s, e = self.start, self.end
        return (less(x, min(s.x, e.x)) or bigger(x, max(s.x, e.x)) or
                less(y, min(s.y, e.y)) or bigger(y, max(s.y, e.y)))

    def intersection(self, other: "Segment") -> Optional[Tuple[Point, float]]:
        """
        克莱姆法则求两条边的交点，返回 (交点, 行列式)。
        平行（含共线重叠）、交点落在任一线段范围之外、
        或交点与任一端点重合时返回 None。
        行列式等于两边方向向量叉积的 z 分量，其符号由调用方解释。
        """
        det = self.a * other.b - other.a * self.b
        if abs(det) < EPS:
            return None
        x = (other.b * self.c - self.b * other.c) / det
        y = (self.a * other.c - other.a * self.c) / det
        if self._outside_box(x, y) or other._outside_box(x, y):
            return None
        pt = Point(x, y)
        if any(pt.near(v) for v in (self.start, self.end, other.start, other.end)):
            return None
        return pt, det


class Polygon:
    """
    简单多边形：有序顶点环，首尾隐式相连。构造后不可变。
    相邻（含首尾）重合的点在构造时去掉。
    """

    def __init__(self, points: Iterable[PointLike]):
        cleaned: List[Point] = []
        for p in map(Point.of, points):
            if not cleaned or cleaned[-1] != p:
                cleaned.append(p)
        while len(cleaned) > 1 and cleaned[0] == cleaned[-1]:
            cleaned.pop()
        self._points: Tuple[Point, ...] = tuple(cleaned)

    @property
    def points(self) -> Tuple[Point, ...]:
        return self._points

    @cached_property
    def edges(self) -> Tuple[Segment, ...]:
        pts = self._points
        n = len(pts)
        return tuple(Segment(pts[i], pts[(i + 1) % n]) for i in range(n))

    def __len__(self):
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def __eq__(self, other):
        if not isinstance(other, Polygon):
            return NotImplemented
        return self._points == other._points

    def __hash__(self):
        return hash(self._points)

    def __repr__(self):
        inner = ", ".join(f"({p.x:g}, {p.y:g})" for p in self._points)
        return f"Polygon([{inner}])"

    @property
    def area(self) -> float:
        return abs(signed_area(self._points))

    @property
    def is_ccw(self) -> bool:
        return is_ccw(self._points)

    def ensure_ccw(self) -> "Polygon":
        """返回逆时针方向的多边形（已是逆时针则返回自身）"""
        if self.is_ccw or len(self) < 3:
            return self
        return Polygon(reversed(self._points))

    def contains(self, point: PointLike) -> bool:
        """
        点是否在多边形内（含边界）。
        要求多边形为逆时针：点位于任一条边的右侧（超出容差）即在外部。
        """
        p = Point.of(point)
        for edge in self.edges:
            if orient(edge.start, edge.end, p) < -EPS:
                return False
        return True

    def contains_polygon(self, other: "Polygon") -> bool:
        return all(self.contains(p) for p in other.points)
