from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from .schema import Connection, FlowNode

# Node box size shared with the rendering layer
NODE_WIDTH = 150.0
NODE_HEIGHT = 80.0


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __sub__(self, other: 'Point') -> 'Point':
        return Point(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class CurvePath:
    """Cubic curve between two anchors"""
    start: Point
    control1: Point
    control2: Point
    end: Point

    def to_svg(self) -> str:
        return (
            f"M {_fmt(self.start.x)} {_fmt(self.start.y)} "
            f"C {_fmt(self.control1.x)} {_fmt(self.control1.y)}, "
            f"{_fmt(self.control2.x)} {_fmt(self.control2.y)}, "
            f"{_fmt(self.end.x)} {_fmt(self.end.y)}"
        )


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def node_origin(node: FlowNode) -> Point:
    return Point(node.position.x, node.position.y)


def anchor_out(node: FlowNode, width: float = NODE_WIDTH, height: float = NODE_HEIGHT) -> Point:
    """Right-center edge of the node box"""
    return Point(node.position.x + width, node.position.y + height / 2)


def anchor_in(node: FlowNode, height: float = NODE_HEIGHT) -> Point:
    """Left-center edge of the node box"""
    return Point(node.position.x, node.position.y + height / 2)


def connection_path(source: FlowNode, target: FlowNode,
                    width: float = NODE_WIDTH, height: float = NODE_HEIGHT) -> CurvePath:
    start = anchor_out(source, width, height)
    end = anchor_in(target, height)
    mid_x = (start.x + end.x) / 2
    return CurvePath(
        start=start,
        control1=Point(mid_x, start.y),
        control2=Point(mid_x, end.y),
        end=end,
    )


def connection_paths(nodes: Iterable[FlowNode], connections: Iterable[Connection],
                     width: float = NODE_WIDTH, height: float = NODE_HEIGHT) -> Dict[str, CurvePath]:
    by_id = {n.id: n for n in nodes}
    paths: Dict[str, CurvePath] = {}
    for conn in connections:
        source = by_id.get(conn.source)
        target = by_id.get(conn.target)
        if source is None or target is None:
            continue
        paths[conn.id] = connection_path(source, target, width, height)
    return paths


def clamp_position(point: Point, minimum: float = 0.0) -> Point:
    """Clamp both axes independently; no upper bound"""
    return Point(max(minimum, point.x), max(minimum, point.y))


def drop_position(client: Point, canvas_origin: Optional[Point] = None,
                  width: float = NODE_WIDTH, height: float = NODE_HEIGHT) -> Point:
    """Translate a drop point to canvas coordinates, centering the node under the pointer"""
    origin = canvas_origin or Point(0.0, 0.0)
    return Point(client.x - origin.x - width / 2, client.y - origin.y - height / 2)
