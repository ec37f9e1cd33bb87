from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from flowgraph.geometry import connection_paths
from flowgraph.model import FlowGraph, PositionLike
from flowgraph.schema import FlowDocument, FlowNode, FlowReport, NodeKind, ParseError, ValidationResult
from flowgraph.serializer import dump_document, export_document, parse_document
from flowgraph.validator import analyze_flow, validate_flow

from .config import EditorSettings
from .interaction import InteractionController, InteractionState

logger = logging.getLogger(__name__)


class EditorSession:
    """One editing session: the live graph plus its interaction controller"""

    def __init__(self, settings: Optional[EditorSettings] = None, on_pointer_capture=None) -> None:
        self.settings = settings or EditorSettings()
        self.graph = FlowGraph(start_position=self.settings.start_position)
        self.controller = InteractionController(self.graph, self.settings, on_pointer_capture=on_pointer_capture)

    # ========================================
    # Editing
    # ========================================

    def dispatch(self, event) -> InteractionState:
        return self.controller.dispatch(event)

    def add_node(self, kind: Union[NodeKind, str], position: PositionLike) -> FlowNode:
        """Programmatic counterpart of a palette drop; the new node becomes the selection"""
        node = self.graph.add_node(kind, position)
        self.controller.select(node.id)
        return node

    def update_node(self, node_id: str, position: Optional[PositionLike] = None,
                    data: Optional[Dict[str, Any]] = None) -> Optional[FlowNode]:
        return self.graph.update_node(node_id, position=position, data=data)

    def delete_node(self, node_id: str) -> bool:
        return self.controller.delete_node(node_id)

    def new_flow(self) -> None:
        self.graph.clear()
        self.controller.reset()
        logger.info("New flow started")

    # ========================================
    # Validation
    # ========================================

    def validate(self) -> ValidationResult:
        result = validate_flow(self.graph)
        logger.info(f"Validation: ok={result.ok} ({result.message})")
        return result

    def analyze(self) -> FlowReport:
        return analyze_flow(self.graph)

    def connection_paths(self):
        return connection_paths(
            self.graph.nodes,
            self.graph.connections,
            self.settings.node_width,
            self.settings.node_height,
        )

    # ========================================
    # Import / Export
    # ========================================

    def export_document(self) -> FlowDocument:
        return export_document(self.graph, name=self.settings.flow_name, version=self.settings.schema_version)

    def export_json(self) -> str:
        document = self.export_document()
        logger.info(f"Flow exported: {len(document.nodes)} nodes, {len(document.connections)} connections")
        return dump_document(document)

    def import_document(self, document: FlowDocument) -> None:
        self.graph.load_document(document)
        self.controller.reset()

    def import_json(self, text: Union[str, bytes]) -> Optional[ParseError]:
        """Parse and apply a document; the live graph is untouched on failure"""
        parsed = parse_document(text)
        if isinstance(parsed, ParseError):
            logger.error(f"Flow import failed: {parsed}")
            return parsed
        self.import_document(parsed)
        return None

    def describe(self) -> Dict[str, Any]:
        state = self.controller.state
        payload: Dict[str, Any] = {
            "state": state.name,
            "selected": self.controller.selected_id,
            "node_count": len(self.graph),
            "connection_count": len(self.graph.connections),
        }
        if state.name == "dragging":
            payload["node_id"] = state.node_id
            payload["offset"] = {"x": state.offset.x, "y": state.offset.y}
        elif state.name == "connecting":
            payload["source_id"] = state.source_id
        return payload
