# main.py
"""
入口：python main.py [--scene scenes/demo.json] [--hide-masked] [--log-level DEBUG]
"""
import argparse
import logging
import sys

from scene_config import ConfigError, default_scene, load_scene


def setup_logging(level="INFO"):
    """根日志器还没有 handler 时做一次最小配置"""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_parser():
    parser = argparse.ArgumentParser(description="Weiler-Atherton 图层遮罩演示")
    parser.add_argument("--scene", help="JSON 场景文件，缺省使用内置场景")
    parser.add_argument("--hide-masked", action="store_true",
                        help="不显示被遮挡的部分")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        scene = load_scene(args.scene) if args.scene else default_scene()
    except ConfigError as e:
        parser.error(str(e))
    if args.hide_masked:
        scene.show_masked = False

    from PyQt5.QtWidgets import QApplication
    from gui import MainWindow

    app = QApplication(sys.argv[:1])
    win = MainWindow(scene)
    win.show()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
