"""Tests for the .json file surface."""

import pytest

from flowgraph.schema import FlowDocument, ParseError
from flowgraph.serializer import export_document
from loaders.flow_loader import FlowLoader, load_flow, save_flow


class TestFlowLoader:
    def test_save_then_load(self, tmp_path, linear_flow):
        graph, _, _ = linear_flow
        path = save_flow(export_document(graph), str(tmp_path / "flows" / "chatbot-flow.json"))
        document = load_flow(path)
        assert isinstance(document, FlowDocument)
        assert len(document.nodes) == 3
        assert len(document.connections) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FlowLoader().load_from_file(str(tmp_path / "nope.json"))

    def test_rejects_non_json_suffix(self, tmp_path):
        path = tmp_path / "flow.txt"
        path.write_text("{}", encoding="utf-8")
        assert isinstance(load_flow(str(path)), ParseError)

    def test_parse_failure_is_logged(self, tmp_path, caplog):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        with caplog.at_level("ERROR", logger="loaders.flow_loader"):
            result = load_flow(str(path))
        assert isinstance(result, ParseError)
        assert "Failed to load flow" in caplog.text

    def test_non_utf8_file_is_parse_error(self, tmp_path, caplog):
        path = tmp_path / "bad.json"
        path.write_bytes(b'{"nodes": "\xff\xfe"}')
        with caplog.at_level("ERROR", logger="loaders.flow_loader"):
            result = load_flow(str(path))
        assert isinstance(result, ParseError)
        assert result.message == "Flow file could not be read"
        assert "Failed to load flow" in caplog.text

    def test_directory_named_json_is_parse_error(self, tmp_path):
        path = tmp_path / "flow.json"
        path.mkdir()
        result = load_flow(str(path))
        assert isinstance(result, ParseError)
        assert result.message == "Flow file could not be read"
