from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from flowgraph.geometry import NODE_HEIGHT, NODE_WIDTH
from flowgraph.model import DEFAULT_START_POSITION
from flowgraph.serializer import DEFAULT_FLOW_NAME, SCHEMA_VERSION

DRAG_MEDIA_TYPE = "application/x-chatflow-node"


@dataclass
class EditorSettings:
    """Editor-wide constants shared by the interaction layer and exports"""
    node_width: float = NODE_WIDTH
    node_height: float = NODE_HEIGHT
    flow_name: str = DEFAULT_FLOW_NAME
    schema_version: str = SCHEMA_VERSION
    drag_media_type: str = DRAG_MEDIA_TYPE
    start_position: Tuple[float, float] = DEFAULT_START_POSITION
    log_level: str = "INFO"
    document_path: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'EditorSettings':
        """Read FLOW_* variables; call load_dotenv() beforehand to pick up a .env file"""
        return cls(
            node_width=_float_env("FLOW_NODE_WIDTH", NODE_WIDTH),
            node_height=_float_env("FLOW_NODE_HEIGHT", NODE_HEIGHT),
            flow_name=os.getenv("FLOW_NAME", DEFAULT_FLOW_NAME),
            schema_version=os.getenv("FLOW_SCHEMA_VERSION", SCHEMA_VERSION),
            drag_media_type=os.getenv("FLOW_DRAG_MEDIA_TYPE", DRAG_MEDIA_TYPE),
            log_level=os.getenv("FLOW_LOG_LEVEL", "INFO").upper(),
            document_path=os.getenv("FLOW_DOCUMENT") or None,
        )


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logging.getLogger(__name__).warning(f"Invalid {name} value: {raw}. Using default {default}.")
        return default


def setup_logging(level: str = "INFO", verbose: bool = False) -> None:
    """Setup logging configuration"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    logging.getLogger('httpx').setLevel(logging.WARNING)
