# scene_config.py
"""
场景配置：从 JSON 读取窗口参数和图层列表。

格式示例见 scenes/demo.json。多边形统一调整为逆时针方向。
"""
from dataclasses import dataclass, field
from typing import Any, List
import json
import logging

from geometry import Polygon
from layers import BackgroundLayer, Layer, ShapesLayer, WindowMaskLayer

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    pass


@dataclass
class Scene:
    layers: List[Layer] = field(default_factory=list)
    title: str = "Weiler-Atherton 图层遮罩演示"
    width: int = 800
    height: int = 800
    show_masked: bool = True


def _number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{where}: expected a number, got {value!r}")
    return float(value)


def _polygon(raw: Any, where: str) -> Polygon:
    if not isinstance(raw, list):
        raise ConfigError(f"{where}: polygon must be a list of [x, y] points")
    pts = []
    for k, p in enumerate(raw):
        if not isinstance(p, (list, tuple)) or len(p) != 2:
            raise ConfigError(f"{where}[{k}]: point must be [x, y]")
        pts.append((_number(p[0], where), _number(p[1], where)))
    poly = Polygon(pts)
    if len(poly) < 3:
        raise ConfigError(f"{where}: polygon needs at least 3 distinct points")
    if not poly.is_ccw:
        logger.debug("%s: clockwise polygon reversed", where)
    return poly.ensure_ccw()


def parse_layer(raw: Any, idx: int) -> Layer:
    where = f"layers[{idx}]"
    if not isinstance(raw, dict):
        raise ConfigError(f"{where}: layer must be an object")
    kind = raw.get("type")
    if kind == "background":
        color = raw.get("color", "#000000")
        if not isinstance(color, str):
            raise ConfigError(f"{where}.color: expected a colour string")
        return BackgroundLayer(color)
    if kind == "shapes":
        shapes = raw.get("shapes")
        if not isinstance(shapes, list):
            raise ConfigError(f"{where}.shapes: expected a list of polygons")
        return ShapesLayer(tuple(_polygon(s, f"{where}.shapes[{k}]")
                                 for k, s in enumerate(shapes)))
    if kind == "window_mask":
        layer = WindowMaskLayer(_number(raw.get("width"), f"{where}.width"),
                                _number(raw.get("height"), f"{where}.height"))
        if "pos" in raw:
            pos = raw["pos"]
            if not isinstance(pos, (list, tuple)) or len(pos) != 2:
                raise ConfigError(f"{where}.pos: expected [x, y]")
            layer.set_pos(_number(pos[0], f"{where}.pos"), _number(pos[1], f"{where}.pos"))
        return layer
    raise ConfigError(f"{where}: unknown layer type {kind!r}")


def parse_scene(data: Any) -> Scene:
    if not isinstance(data, dict):
        raise ConfigError("scene must be a JSON object")
    layers = data.get("layers")
    if not isinstance(layers, list):
        raise ConfigError("scene.layers: expected a list")
    scene = Scene(layers=[parse_layer(raw, i) for i, raw in enumerate(layers)])
    if "title" in data:
        scene.title = str(data["title"])
    if "width" in data:
        scene.width = int(_number(data["width"], "width"))
    if "height" in data:
        scene.height = int(_number(data["height"], "height"))
    if "show_masked" in data:
        scene.show_masked = bool(data["show_masked"])
    return scene


def load_scene(path: str) -> Scene:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path}: invalid JSON ({e})") from e
    except OSError as e:
        raise ConfigError(f"{path}: {e.strerror or e}") from e
    scene = parse_scene(data)
    logger.info("loaded scene %s with %d layers", path, len(scene.layers))
    return scene


def default_scene() -> Scene:
    """内置演示场景：黑色背景、三角形、方形，以及 200x200 的视窗"""
    triangle = Polygon([(100, 500), (400, 100), (700, 500)])
    square = Polygon([(200, 200), (600, 200), (600, 600), (200, 600)])
    mask = WindowMaskLayer(200, 200)
    mask.set_pos(575, 202)
    return Scene(layers=[
        BackgroundLayer("#000000"),
        ShapesLayer((triangle,)),
        ShapesLayer((square,)),
        mask,
    ])
