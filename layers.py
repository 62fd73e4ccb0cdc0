# layers.py
"""
图层合成：每一层在前面各层的合成结果上叠加。
图层种类固定为三种，用 match 分派。
"""
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Tuple, Union
import logging

from geometry import Polygon
from weiler_atherton import clip

logger = logging.getLogger(__name__)

Rect = Tuple[float, float, float, float]  # x, y, w, h


@dataclass(frozen=True)
class BackgroundLayer:
    color: str = "#000000"


@dataclass(frozen=True)
class ShapesLayer:
    shapes: Tuple[Polygon, ...] = ()


@dataclass
class WindowMaskLayer:
    """随鼠标移动的矩形视窗：只有视窗内的部分保持可见"""
    width: float
    height: float
    pos: Tuple[float, float] = (0.0, 0.0)

    def set_pos(self, x: float, y: float):
        self.pos = (float(x), float(y))


Layer = Union[BackgroundLayer, ShapesLayer, WindowMaskLayer]


@dataclass
class MergeResult:
    background_color: Optional[str] = None
    # None 表示背景铺满整个画布
    background_rect: Optional[Rect] = None
    shapes: List[Polygon] = field(default_factory=list)
    masked_shapes: List[Polygon] = field(default_factory=list)


def window_rect(center: Tuple[float, float], width: float, height: float) -> Polygon:
    """以 center 为中心的轴对齐矩形（逆时针）"""
    cx, cy = center
    hw, hh = width / 2.0, height / 2.0
    return Polygon([(cx - hw, cy - hh), (cx + hw, cy - hh),
                    (cx + hw, cy + hh), (cx - hw, cy + hh)])


def stack_shape(shapes: List[Polygon], upper: Polygon,
                show_masked: bool) -> Tuple[List[Polygon], List[Polygon]]:
    """
    把 upper 叠在 shapes 之上：每个已有图形被 upper 裁剪，
    保留外部块，upper 本身不裁剪地放在最上面。
    返回 (新的图形列表, 被遮挡的内部块)。
    """
    visible: List[Polygon] = []
    hidden: List[Polygon] = []
    for prev in shapes:
        external, internal = clip(prev, upper, show_masked)
        visible.extend(external)
        hidden.extend(internal)
    visible.append(upper)
    return visible, hidden


def merge_layer(layer: Layer, prev: MergeResult, show_masked: bool) -> MergeResult:
    match layer:
        case BackgroundLayer(color=color):
            return replace(prev, background_color=color)

        case ShapesLayer(shapes=shapes):
            current = list(prev.shapes)
            masked: List[Polygon] = []
            for upper in shapes:
                current, hidden = stack_shape(current, upper, show_masked)
                masked.extend(hidden)
            res = replace(prev, shapes=current)
            if show_masked:
                res.masked_shapes = prev.masked_shapes + masked
            return res

        case WindowMaskLayer(width=width, height=height, pos=pos):
            mask = window_rect(pos, width, height)
            inner: List[Polygon] = []
            outer: List[Polygon] = []
            for shape in prev.shapes:
                external, internal = clip(shape, mask, True)
                outer.extend(external)
                inner.extend(internal)
            inner.append(mask)
            res = replace(prev, shapes=inner,
                          background_rect=(pos[0] - width / 2.0, pos[1] - height / 2.0,
                                           width, height))
            if show_masked:
                res.masked_shapes = prev.masked_shapes + outer
            return res

        case _:
            raise TypeError(f"unknown layer kind: {type(layer).__name__}")


def compose(layers: Iterable[Layer], show_masked: bool = True) -> MergeResult:
    """从空结果开始依次合并每一层"""
    res = MergeResult()
    for layer in layers:
        res = merge_layer(layer, res, show_masked)
    logger.debug("compose: %d visible, %d masked shapes",
                 len(res.shapes), len(res.masked_shapes))
    return res
