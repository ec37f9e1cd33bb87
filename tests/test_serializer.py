"""Tests for flow document export and parsing."""

import json
from datetime import datetime, timezone

from flowgraph.schema import FlowDocument, ParseError
from flowgraph.serializer import dump_document, export_document, export_json, parse_document


def _by_id(items):
    return {item.id: item.model_dump() for item in items}


class TestExport:
    def test_document_shape(self, linear_flow):
        graph, message, _ = linear_flow
        raw = json.loads(export_json(graph))

        assert set(raw) == {"nodes", "connections", "metadata"}
        assert raw["metadata"]["name"] == "Untitled Flow"
        assert raw["metadata"]["version"] == "1.0.0"
        datetime.fromisoformat(raw["metadata"]["createdAt"].replace("Z", "+00:00"))

        start = next(n for n in raw["nodes"] if n["id"] == "start-1")
        assert start["type"] == "start"
        assert start["position"] == {"x": 100.0, "y": 100.0}
        assert start["connections"] == [message.id]
        assert start["data"] == {"label": "Start"}
        assert {"id", "source", "target"} == set(raw["connections"][0])

    def test_kind_specific_field_names(self, graph):
        graph.add_node("input", (0, 0))
        graph.add_node("condition", (0, 0))
        raw = json.loads(export_json(graph))
        datas = {n["type"]: n["data"] for n in raw["nodes"]}
        assert datas["input"]["inputType"] == "text"
        assert datas["input"]["variableName"] == "user_input"
        assert datas["condition"]["truePath"] == "Yes"

    def test_custom_metadata(self, graph):
        stamp = datetime(2024, 5, 1, tzinfo=timezone.utc)
        document = export_document(graph, name="Support bot", version="2.0.0", created_at=stamp)
        assert document.metadata.name == "Support bot"
        assert document.metadata.created_at == stamp


class TestParse:
    def test_export_then_parse_preserves_graph(self, linear_flow):
        graph, _, _ = linear_flow
        graph.update_node("start-1", data={"label": "Begin"})
        action = graph.add_node("action", (0, 0))
        graph.update_node(action.id, data={"actions": [{"type": "email", "value": "ops@example.com"}]})

        document = parse_document(export_json(graph))

        assert isinstance(document, FlowDocument)
        assert _by_id(document.nodes) == _by_id(graph.nodes)
        assert _by_id(document.connections) == _by_id(graph.connections)

    def test_invalid_json(self):
        result = parse_document("{not json")
        assert isinstance(result, ParseError)
        assert result.message == "Invalid JSON"

    def test_not_an_object(self):
        assert isinstance(parse_document("[]"), ParseError)

    def test_missing_keys(self):
        result = parse_document(json.dumps({"nodes": []}))
        assert isinstance(result, ParseError)
        assert result.details == ["connections", "metadata"]

    def test_unknown_node_kind(self, graph):
        raw = json.loads(export_json(graph))
        raw["nodes"][0]["type"] = "teleport"
        result = parse_document(json.dumps(raw))
        assert isinstance(result, ParseError)
        assert any("type" in d for d in result.details)

    def test_dangling_connection(self, linear_flow):
        graph, _, _ = linear_flow
        raw = json.loads(export_json(graph))
        raw["connections"].append({"id": "start-1-ghost", "source": "start-1", "target": "ghost"})
        result = parse_document(json.dumps(raw))
        assert isinstance(result, ParseError)
        assert "ghost" in str(result)

    def test_duplicate_node_ids(self, graph):
        raw = json.loads(export_json(graph))
        raw["nodes"].append(raw["nodes"][0])
        assert isinstance(parse_document(json.dumps(raw)), ParseError)

    def test_unknown_data_keys_are_kept(self, graph):
        raw = json.loads(export_json(graph))
        raw["nodes"][0]["data"]["color"] = "green"
        document = parse_document(json.dumps(raw))
        assert json.loads(dump_document(document))["nodes"][0]["data"]["color"] == "green"

    def test_deeply_nested_input(self):
        result = parse_document("[" * 100000 + "]" * 100000)
        assert isinstance(result, ParseError)
        assert result.message == "Invalid JSON"

    def test_duplicate_connection_ids(self, linear_flow):
        graph, _, _ = linear_flow
        raw = json.loads(export_json(graph))
        raw["connections"][1]["id"] = raw["connections"][0]["id"]
        result = parse_document(json.dumps(raw))
        assert isinstance(result, ParseError)
        assert "duplicate connection id" in str(result)
