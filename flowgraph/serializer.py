from __future__ import annotations

import json
import logging
from collections import Counter
from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import ValidationError

from .schema import FlowDocument, FlowMetadata, ParseError

logger = logging.getLogger(__name__)

DEFAULT_FLOW_NAME = "Untitled Flow"
SCHEMA_VERSION = "1.0.0"

REQUIRED_KEYS = ("nodes", "connections", "metadata")


def export_document(graph, name: str = DEFAULT_FLOW_NAME, version: str = SCHEMA_VERSION,
                    created_at: Optional[datetime] = None) -> FlowDocument:
    """Wrap the current nodes/connections with metadata"""
    return FlowDocument(
        nodes=graph.nodes,
        connections=graph.connections,
        metadata=FlowMetadata(
            name=name,
            created_at=created_at or datetime.now(timezone.utc),
            version=version,
        ),
    )


def dump_document(document: FlowDocument) -> str:
    return json.dumps(document.to_dict(), indent=2, ensure_ascii=False)


def export_json(graph, name: str = DEFAULT_FLOW_NAME, version: str = SCHEMA_VERSION) -> str:
    return dump_document(export_document(graph, name=name, version=version))


def parse_document(text: Union[str, bytes]) -> Union[FlowDocument, ParseError]:
    """Deserialize and structurally check a flow document.

    Malformed input comes back as a ParseError instead of raising.
    """
    try:
        raw = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        return ParseError(message="Invalid JSON", details=[str(e)])

    if not isinstance(raw, dict):
        return ParseError(message="Flow document must be a JSON object")

    missing = [k for k in REQUIRED_KEYS if k not in raw]
    if missing:
        return ParseError(message="Flow document is missing required keys", details=missing)

    try:
        document = FlowDocument.model_validate(raw)
    except ValidationError as e:
        details = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        return ParseError(message="Flow document has an invalid shape", details=details)

    problems = _integrity_problems(document)
    if problems:
        return ParseError(message="Flow document references are inconsistent", details=problems)

    return document


def _integrity_problems(document: FlowDocument) -> List[str]:
    problems: List[str] = []
    counts = Counter(n.id for n in document.nodes)
    for node_id, count in counts.items():
        if count > 1:
            problems.append(f"duplicate node id '{node_id}'")

    conn_counts = Counter(c.id for c in document.connections)
    for conn_id, count in conn_counts.items():
        if count > 1:
            problems.append(f"duplicate connection id '{conn_id}'")

    for conn in document.connections:
        for endpoint in (conn.source, conn.target):
            if endpoint not in counts:
                problems.append(f"connection '{conn.id}' references unknown node '{endpoint}'")
    return problems
