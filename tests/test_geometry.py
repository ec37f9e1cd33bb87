"""Tests for anchor and connection curve geometry."""

from flowgraph.geometry import (
    NODE_HEIGHT,
    NODE_WIDTH,
    Point,
    anchor_in,
    anchor_out,
    clamp_position,
    connection_path,
    connection_paths,
    drop_position,
)
from flowgraph.schema import Connection


class TestAnchors:
    def test_out_anchor_is_right_center(self, graph):
        start = graph.get_node("start-1")
        assert anchor_out(start) == Point(100 + NODE_WIDTH, 100 + NODE_HEIGHT / 2)

    def test_in_anchor_is_left_center(self, graph):
        node = graph.add_node("end", (400, 300))
        assert anchor_in(node) == Point(400, 340)


class TestConnectionPath:
    def test_control_points_share_midpoint_x(self, graph):
        source = graph.get_node("start-1")
        target = graph.add_node("end", (420, 260))
        path = connection_path(source, target)
        mid_x = (path.start.x + path.end.x) / 2
        assert path.control1 == Point(mid_x, path.start.y)
        assert path.control2 == Point(mid_x, path.end.y)

    def test_svg_form(self, graph):
        source = graph.get_node("start-1")
        target = graph.add_node("end", (450, 100))
        assert connection_path(source, target).to_svg() == "M 250 140 C 350 140, 350 140, 450 140"

    def test_paths_skip_missing_endpoints(self, linear_flow):
        graph, message, _ = linear_flow
        connections = graph.connections + [Connection(id="x", source=message.id, target="ghost")]
        paths = connection_paths(graph.nodes, connections)
        assert set(paths) == {c.id for c in graph.connections}


class TestPositions:
    def test_clamp(self):
        assert clamp_position(Point(-50, -50)) == Point(0, 0)
        assert clamp_position(Point(-1, 5000)) == Point(0, 5000)

    def test_drop_position_centers_node(self):
        assert drop_position(Point(200, 100), Point(20, 10)) == Point(105, 50)
