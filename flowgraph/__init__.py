"""
Graph package for chatbot flow editing: data model, validation, geometry and export
"""

from .schema import (
    NodeKind, InputType, ActionKind, Position, ActionItem, NodeData, FlowNode, Connection,
    FlowMetadata, FlowDocument, ValidationResult, ParseError, FlowReport,
    default_node_data,
)
from .model import FlowGraph
from .validator import validate_flow, analyze_flow
from .builder import build_nx_graph
from .geometry import Point, CurvePath, anchor_in, anchor_out, connection_path, connection_paths
from .serializer import export_document, dump_document, export_json, parse_document

__all__ = [
    'NodeKind', 'InputType', 'ActionKind', 'Position', 'ActionItem', 'NodeData', 'FlowNode',
    'Connection', 'FlowMetadata', 'FlowDocument', 'ValidationResult', 'ParseError',
    'FlowReport', 'default_node_data',
    'FlowGraph',
    'validate_flow', 'analyze_flow',
    'build_nx_graph',
    'Point', 'CurvePath', 'anchor_in', 'anchor_out', 'connection_path', 'connection_paths',
    'export_document', 'dump_document', 'export_json', 'parse_document',
]
