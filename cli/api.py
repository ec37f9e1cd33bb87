from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, ValidationError

from core.config import EditorSettings, setup_logging
from core.events import parse_event
from core.session import EditorSession
from flowgraph.schema import NodeKind, ParseError, Position
from loaders.flow_loader import FlowLoader

load_dotenv()

settings = EditorSettings.from_env()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Initialize runtime
session = EditorSession(settings)
if settings.document_path:
    loaded = FlowLoader().load_from_file(settings.document_path)
    if isinstance(loaded, ParseError):
        logger.error(f"Initial flow not loaded: {loaded}")
    else:
        session.import_document(loaded)

app = FastAPI(title="Chatbot Flow Builder API")


class AddNodeReq(BaseModel):
    kind: NodeKind
    x: float = 0.0
    y: float = 0.0


class UpdateNodeReq(BaseModel):
    position: Optional[Position] = None
    data: Optional[Dict[str, Any]] = None


class ValidationRes(BaseModel):
    ok: bool
    message: str


def _node_payload(node) -> Dict[str, Any]:
    return node.model_dump(mode="json", by_alias=True, exclude_none=True)


@app.get("/", include_in_schema=False)
def root() -> RedirectResponse:
    return RedirectResponse(url="/docs")


@app.get("/flow")
def get_flow() -> Dict[str, Any]:
    return session.export_document().to_dict()


@app.post("/flow/reset")
def reset_flow() -> Dict[str, Any]:
    session.new_flow()
    return session.describe()


@app.post("/flow/import")
def import_flow(document: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    error = session.import_json(json.dumps(document))
    if error is not None:
        raise HTTPException(status_code=400, detail={"message": error.message, "details": error.details})
    return session.describe()


@app.post("/nodes")
def add_node(body: AddNodeReq) -> Dict[str, Any]:
    node = session.add_node(body.kind, (body.x, body.y))
    return _node_payload(node)


@app.patch("/nodes/{node_id}")
def update_node(node_id: str, body: UpdateNodeReq) -> Dict[str, Any]:
    try:
        node = session.update_node(node_id, position=body.position, data=body.data)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if node is None:
        raise HTTPException(status_code=404, detail=f"Unknown node: {node_id}")
    return _node_payload(node)


@app.delete("/nodes/{node_id}")
def delete_node(node_id: str) -> Dict[str, Any]:
    if not session.graph.has_node(node_id):
        raise HTTPException(status_code=404, detail=f"Unknown node: {node_id}")
    if not session.delete_node(node_id):
        raise HTTPException(status_code=409, detail=f"Node cannot be deleted: {node_id}")
    return session.describe()


@app.post("/events")
def post_event(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    try:
        event = parse_event(payload)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    session.dispatch(event)
    return session.describe()


@app.get("/state")
def get_state() -> Dict[str, Any]:
    return session.describe()


@app.get("/validate", response_model=ValidationRes)
def validate() -> ValidationRes:
    result = session.validate()
    return ValidationRes(ok=result.ok, message=result.message)


@app.get("/analysis")
def analysis() -> Dict[str, Any]:
    report = session.analyze()
    return {
        "ok": report.ok,
        "is_dag": report.is_dag,
        "warnings": report.warnings,
        "errors": report.errors,
        "start_nodes": report.start_nodes,
        "end_nodes": report.end_nodes,
        "isolated_nodes": report.isolated_nodes,
        "unreachable_nodes": report.unreachable_nodes,
        "dead_end_nodes": report.dead_end_nodes,
        "cyclic_nodes": report.cyclic_nodes,
    }


@app.get("/connections/paths")
def connection_paths() -> List[Dict[str, Any]]:
    return [
        {"id": conn_id, "d": path.to_svg()}
        for conn_id, path in session.connection_paths().items()
    ]


@app.get("/health")
def health() -> Dict[str, Any]:
    return {"ok": True}
