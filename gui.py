from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QPushButton, QListWidget, QListWidgetItem,
    QHBoxLayout, QVBoxLayout, QLabel, QMessageBox, QFrame
)
from canvas import CanvasWidget
from layers import BackgroundLayer, ShapesLayer, WindowMaskLayer
from scene_config import Scene


def describe_layer(layer):
    """图层在列表中的显示名"""
    if isinstance(layer, BackgroundLayer):
        return f"背景 {layer.color}"
    if isinstance(layer, ShapesLayer):
        return f"图形层（{len(layer.shapes)} 个多边形）"
    if isinstance(layer, WindowMaskLayer):
        return f"视窗 {layer.width:g}x{layer.height:g}"
    return type(layer).__name__


class MainWindow(QMainWindow):
    def __init__(self, scene: Scene):
        super().__init__()
        self.setWindowTitle(scene.title)

        # 主 widget
        main_widget = QWidget()
        self.setCentralWidget(main_widget)

        # 顶部按钮
        self.btn_show_masked = QPushButton("显示被遮挡部分")
        self.btn_show_masked.setCheckable(True)
        self.btn_show_masked.setChecked(scene.show_masked)
        self.btn_close_ring = QPushButton("闭合轮廓")
        self.btn_clear = QPushButton("清空手绘图形")

        top_layout = QHBoxLayout()
        top_layout.addWidget(self.btn_show_masked)
        top_layout.addWidget(self.btn_close_ring)
        top_layout.addWidget(self.btn_clear)
        top_layout.addStretch()

        # 创建主水平布局：左侧画布，右侧图层列表
        main_h_layout = QHBoxLayout()

        self.canvas = CanvasWidget(scene)

        layer_frame = QFrame()
        layer_frame.setFrameStyle(QFrame.Box)
        layer_layout = QVBoxLayout()
        layer_layout.addWidget(QLabel("图层（自下而上）"))
        self.layer_list = QListWidget()
        layer_layout.addWidget(self.layer_list)
        layer_frame.setLayout(layer_layout)
        layer_frame.setMaximumWidth(300)

        main_h_layout.addWidget(self.canvas, 3)  # 画布占3份
        main_h_layout.addWidget(layer_frame, 1)  # 右侧区域占1份

        # 主垂直布局
        main_layout = QVBoxLayout()
        main_layout.addLayout(top_layout)
        main_layout.addLayout(main_h_layout, 1)

        main_widget.setLayout(main_layout)

        # 信号连接
        self.btn_show_masked.toggled.connect(self.canvas.set_show_masked)
        self.btn_close_ring.clicked.connect(self.on_close_ring)
        self.btn_clear.clicked.connect(self.on_clear)
        self.canvas.layers_changed.connect(self.refresh_layer_list)

        self.refresh_layer_list()

    def on_close_ring(self):
        """闭合当前正在绘制的环，加入为新的图形层"""
        ok = self.canvas.close_current_ring()
        if not ok:
            QMessageBox.information(self, "提示", "当前没有有效的环可以闭合（至少需要三个不同的点）。")

    def on_clear(self):
        self.canvas.clear_drawn()

    def refresh_layer_list(self):
        """根据 canvas 当前图层刷新列表"""
        self.layer_list.clear()
        for idx, layer in enumerate(self.canvas.layers):
            self.layer_list.addItem(QListWidgetItem(f"{idx + 1}. {describe_layer(layer)}"))
