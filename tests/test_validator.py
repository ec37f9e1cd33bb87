"""Tests for flow validation and the directed-path analysis."""

from flowgraph.model import FlowGraph
from flowgraph.validator import analyze_flow, validate_flow


class TestValidateFlow:
    def test_missing_start(self):
        graph = FlowGraph(with_start=False)
        graph.add_node("end", (0, 0))
        result = validate_flow(graph)
        assert result.ok is False
        assert result.message == "Flow must have at least one start node"

    def test_only_start_reports_missing_end(self, graph):
        result = validate_flow(graph)
        assert result.ok is False
        assert result.message == "Flow must have at least one end node"

    def test_start_checked_before_end(self):
        result = validate_flow(FlowGraph(with_start=False))
        assert result.message == "Flow must have at least one start node"

    def test_unconnected_message(self, graph):
        graph.add_node("end", (500, 100))
        graph.add_node("message", (300, 100))
        result = validate_flow(graph)
        assert result.ok is False
        assert result.message == "1 node(s) are not connected to the flow"

    def test_counts_every_unconnected_node(self, graph):
        graph.add_node("end", (0, 0))
        for kind in ("message", "condition", "input", "action"):
            graph.add_node(kind, (0, 0))
        assert validate_flow(graph).message == "4 node(s) are not connected to the flow"

    def test_start_and_end_need_no_connections(self, graph):
        graph.add_node("end", (0, 0))
        assert validate_flow(graph).ok is True

    def test_linear_flow_is_valid(self, linear_flow):
        graph, _, _ = linear_flow
        result = validate_flow(graph)
        assert result.ok is True
        assert result.message == "Flow is valid"

    def test_outgoing_only_counts_as_connected(self, graph):
        """Connectivity, not reachability: a dangling branch still passes."""
        graph.add_node("end", (0, 0))
        a = graph.add_node("message", (0, 0))
        b = graph.add_node("message", (0, 0))
        graph.add_connection(a.id, b.id)
        assert validate_flow(graph).ok is True


class TestAnalyzeFlow:
    def test_linear_flow_report(self, linear_flow):
        graph, message, end = linear_flow
        report = analyze_flow(graph)
        assert report.ok is True
        assert report.is_dag is True
        assert report.start_nodes == ["start-1"]
        assert report.end_nodes == [end.id]
        assert report.unreachable_nodes == []
        assert report.dead_end_nodes == []
        assert report.warnings == []

    def test_unreachable_branch_is_reported(self, graph):
        end = graph.add_node("end", (0, 0))
        a = graph.add_node("message", (0, 0))
        b = graph.add_node("message", (0, 0))
        graph.add_connection(a.id, b.id)
        report = analyze_flow(graph)
        assert set(report.unreachable_nodes) == {a.id, b.id, end.id}
        assert set(report.dead_end_nodes) == {"start-1", a.id, b.id}
        assert end.id in report.isolated_nodes

    def test_cycle_detected(self, linear_flow):
        graph, message, _ = linear_flow
        loop = graph.add_node("condition", (0, 0))
        graph.add_connection(message.id, loop.id)
        graph.add_connection(loop.id, message.id)
        report = analyze_flow(graph)
        assert report.is_dag is False
        assert report.cyclic_nodes == sorted([message.id, loop.id])

    def test_downstream_of_cycle_is_not_cyclic(self, linear_flow):
        graph, message, end = linear_flow
        loop = graph.add_node("condition", (0, 0))
        graph.add_connection(message.id, loop.id)
        graph.add_connection(loop.id, message.id)
        report = analyze_flow(graph)
        assert end.id not in report.cyclic_nodes
        assert "start-1" not in report.cyclic_nodes
        assert report.dead_end_nodes == []

    def test_validation_failure_becomes_error(self, graph):
        report = analyze_flow(graph)
        assert report.ok is False
        assert report.errors == ["Flow must have at least one end node"]
