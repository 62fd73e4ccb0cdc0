# canvas.py
"""
CanvasWidget: 负责绘制图层合成结果、鼠标交互
"""

from PyQt5.QtWidgets import QWidget
from PyQt5.QtCore import pyqtSignal, QPointF, Qt
from PyQt5.QtGui import QPainter, QPen, QBrush, QColor
from geometry import Polygon
from layers import ShapesLayer, WindowMaskLayer, compose
from scene_config import Scene
import logging

logger = logging.getLogger(__name__)


class CanvasWidget(QWidget):
    layers_changed = pyqtSignal()

    def __init__(self, scene: Scene):
        super().__init__()
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.ClickFocus)
        self.setMinimumSize(scene.width, scene.height)
        self.layers = list(scene.layers)
        self.show_masked = scene.show_masked
        self.drawn_layers = []  # 鼠标绘制新增的图层
        self.current_ring_points = []  # 当前未闭合环的点数组

        self.info_text = "移动鼠标：移动视窗；左键：添加点；右键：闭合并加入新图层"

    def mask_layers(self):
        return [layer for layer in self.layers if isinstance(layer, WindowMaskLayer)]

    def mouseMoveEvent(self, event):
        for layer in self.mask_layers():
            layer.set_pos(event.x(), event.y())
        self.update()

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            pt = (event.x(), event.y())
            self.current_ring_points.append(pt)
            self.update()
        elif event.button() == Qt.RightButton:
            self.close_current_ring()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.fillRect(self.rect(), QBrush(QColor(0, 0, 0)))

        res = compose(self.layers, self.show_masked)

        # 背景
        if res.background_color is not None:
            color = QColor(res.background_color)
            if res.background_rect is None:
                painter.fillRect(self.rect(), QBrush(color))
            else:
                x, y, w, h = res.background_rect
                painter.fillRect(int(x), int(y), int(w), int(h), QBrush(color))

        # 被遮挡部分：灰色虚线
        if self.show_masked:
            painter.setPen(QPen(QColor(96, 96, 96), 1, Qt.DashLine))
            painter.setBrush(Qt.NoBrush)
            for poly in res.masked_shapes:
                self._draw_ring(painter, poly)

        # 可见部分：白色实线
        painter.setPen(QPen(QColor(255, 255, 255), 2))
        painter.setBrush(Qt.NoBrush)
        for poly in res.shapes:
            self._draw_ring(painter, poly)

        self._draw_current_ring(painter)

        painter.setPen(QColor(200, 200, 200))
        margin = 10
        rect = self.rect().adjusted(margin, margin, -margin, -margin)
        painter.drawText(rect, Qt.AlignBottom | Qt.AlignLeft, self.info_text)

    def _draw_current_ring(self, painter):
        """绘制当前正在绘制的环（蓝色实线）"""
        r = self.current_ring_points
        painter.setPen(QPen(QColor(80, 80, 220), 2))
        if len(r) >= 2:
            for i in range(len(r)-1):
                painter.drawLine(QPointF(*r[i]), QPointF(*r[i+1]))
        painter.setBrush(QBrush(QColor(80, 80, 220)))
        for x, y in r:
            painter.drawEllipse(QPointF(x, y), 3, 3)

    def _draw_ring(self, painter, poly):
        """绘制一个闭合环"""
        pts = poly.points
        n = len(pts)
        if n < 2:
            return
        for i in range(n):
            a, b = pts[i], pts[(i + 1) % n]
            painter.drawLine(QPointF(a.x, a.y), QPointF(b.x, b.y))

    def close_current_ring(self):
        """闭合当前环，作为新的图形层放在视窗层之下"""
        if len(self.current_ring_points) < 3:
            return False

        poly = Polygon(self.current_ring_points)
        if len(poly) < 3:
            self.current_ring_points = []
            return False
        if not poly.is_ccw:
            logger.debug("clockwise ring reversed")
        layer = ShapesLayer((poly.ensure_ccw(),))

        masks = self.mask_layers()
        if masks:
            self.layers.insert(self.layers.index(masks[0]), layer)
        else:
            self.layers.append(layer)
        self.drawn_layers.append(layer)
        self.current_ring_points = []
        self.layers_changed.emit()
        self.update()
        return True

    def set_show_masked(self, on):
        self.show_masked = bool(on)
        self.update()

    def clear_drawn(self):
        """删除所有手绘的图层"""
        drawn = {id(layer) for layer in self.drawn_layers}
        self.layers = [layer for layer in self.layers if id(layer) not in drawn]
        self.drawn_layers = []
        self.current_ring_points = []
        self.layers_changed.emit()
        self.update()
