# weiler_atherton.py
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Set, Tuple
import logging

from geometry import Point, Polygon, Segment

logger = logging.getLogger(__name__)


class Crossing(Enum):
    # 沿主多边形（subject）存储顺序前进时，相对裁剪多边形（mask）的进出方向
    ENTERING = "entering"
    EXITING = "exiting"


class ClipResult(NamedTuple):
    external: List[Polygon]
    internal: List[Polygon]


def classify(edge: Segment, mask_edge: Segment) -> Optional[Tuple[Point, Crossing]]:
    """
    求主多边形的边与裁剪多边形的边的交点并标记进出。
    行列式（两边方向叉积）为负 -> 入点，非负 -> 出点。
    仅当两个多边形同为逆时针时标记才有意义。
    """
    found = edge.intersection(mask_edge)
    if found is None:
        return None
    pt, det = found
    return pt, (Crossing.ENTERING if det < 0 else Crossing.EXITING)


class BoundaryRing:
    """
    增广环：多边形顶点序列的可变副本，交点按边界顺序插入。
    插入阶段结束后调用 seal() 建立 点 -> 下标 映射，遍历阶段 O(1) 定位。
    """

    def __init__(self, polygon: Polygon):
        self.points: List[Point] = list(polygon.points)
        self._members: Set[Point] = set(self.points)
        self._index: Dict[Point, int] = {}

    def __len__(self):
        return len(self.points)

    def __getitem__(self, i: int) -> Point:
        return self.points[i]

    def insert(self, point: Point, edge: Segment) -> None:
        """
        把交点插入到 edge 的两个端点之间，
        同一条边上的多个交点按到 edge.start 的距离递增排列。
        点已存在时不做任何事。
        """
        if point in self._members:
            return
        pts = self.points
        begin = pts.index(edge.start)
        end = pts.index(edge.end)
        dist = point.distance(edge.start)
        pos = begin + 1
        # end 在 begin 之前说明是首尾相连的那条边，插到列表末尾即可
        while pos < len(pts) and pos != end:
            if pts[pos].distance(edge.start) >= dist:
                break
            pos += 1
        pts.insert(pos, point)
        self._members.add(point)

    def seal(self) -> None:
        self._index = {p: i for i, p in enumerate(self.points)}

    def index(self, point: Point) -> int:
        return self._index[point]

    def step(self, i: int, forward: bool = True) -> int:
        return (i + (1 if forward else -1)) % len(self.points)


def _trace(subj_ring: BoundaryRing, mask_ring: BoundaryRing,
           starts: List[Point], junctions: Set[Point],
           used: Set[Point], mask_forward: bool) -> List[Polygon]:
    """
    按 Weiler-Atherton 规则交替沿两个环行走，拼出结果多边形。
    每个未用过的起点产生一个结果；回到起点时该结果闭合。
    mask_forward=False 时在裁剪环上反向行走（求差），True 时正向（求交）。
    """
    results: List[Polygon] = []
    # 正常输入下每个结果最多经过两个环各一遍
    budget = 2 * (len(subj_ring) + len(mask_ring)) + 4

    for start in starts:
        if start in used:
            continue
        used.add(start)

        piece: List[Point] = []
        i = subj_ring.index(start)
        steps = 0
        closed = False
        while True:
            # 主多边形上前进，直到下一个交点
            while True:
                piece.append(subj_ring[i])
                i = subj_ring.step(i)
                steps += 1
                if subj_ring[i] in junctions or steps > budget:
                    break
            if steps > budget:
                break
            junction = subj_ring[i]
            used.add(junction)
            if junction == start:
                closed = True
                break

            # 切换到裁剪多边形
            j = mask_ring.index(junction)
            while True:
                piece.append(mask_ring[j])
                j = mask_ring.step(j, mask_forward)
                steps += 1
                if mask_ring[j] in junctions or steps > budget:
                    break
            if steps > budget:
                break
            junction = mask_ring[j]
            used.add(junction)
            if junction == start:
                closed = True
                break
            i = subj_ring.index(junction)

        if not closed:
            logger.warning("traversal from %s did not close after %d steps, piece dropped",
                           start, steps)
            continue
        results.append(Polygon(piece))

    return results


def clip(subject: Polygon, mask: Polygon, include_internal: bool = False) -> ClipResult:
    """
    计算 subject - mask（外部块）以及可选的 subject ∩ mask（内部块）。
    两个多边形须为简单多边形且同为逆时针；输入不会被修改。
    include_internal=False 时不做内部块的遍历。
    """
    subj_ring = BoundaryRing(subject)
    mask_ring = BoundaryRing(mask)
    entering: Dict[Point, None] = {}
    exiting: Dict[Point, None] = {}

    for edge in subject.edges:
        for mask_edge in mask.edges:
            found = classify(edge, mask_edge)
            if found is None:
                continue
            pt, kind = found
            if kind is Crossing.ENTERING:
                entering[pt] = None
            else:
                exiting[pt] = None
            subj_ring.insert(pt, edge)
            mask_ring.insert(pt, mask_edge)

    logger.debug("clip: %d entering, %d exiting crossings", len(entering), len(exiting))

    if not entering and not exiting:
        if mask.contains_polygon(subject):
            logger.debug("clip: subject lies inside mask")
            return ClipResult([], [subject] if include_internal else [])
        logger.debug("clip: no crossings, subject kept whole")
        return ClipResult([subject], [])

    if not entering or not exiting or (
            len(entering) == 1 and len(exiting) == 1 and set(entering) == set(exiting)):
        logger.debug("clip: tangent or one-sided crossings, treated as disjoint")
        return ClipResult([subject], [])

    subj_ring.seal()
    mask_ring.seal()
    junctions = set(entering) | set(exiting)

    # 起点按主多边形环上的顺序取，保证输出确定；两种遍历各用一个 used 集合
    external = _trace(subj_ring, mask_ring,
                      [p for p in subj_ring.points if p in exiting],
                      junctions, set(), mask_forward=False)
    internal: List[Polygon] = []
    if include_internal:
        internal = _trace(subj_ring, mask_ring,
                          [p for p in subj_ring.points if p in entering],
                          junctions, set(), mask_forward=True)

    logger.debug("clip: %d external, %d internal pieces", len(external), len(internal))
    return ClipResult(external, internal)
