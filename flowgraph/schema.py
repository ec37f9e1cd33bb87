from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Base Configuration
# ============================================================================

class BaseConfig(BaseModel):
    """Base configuration with common settings"""
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        validate_assignment=True,
    )


# ============================================================================
# Node Kinds
# ============================================================================

class NodeKind(str, Enum):
    """Closed set of flow step categories"""
    START = "start"
    MESSAGE = "message"
    CONDITION = "condition"
    INPUT = "input"
    ACTION = "action"
    END = "end"

    @property
    def has_input_handle(self) -> bool:
        return self is not NodeKind.START

    @property
    def has_output_handle(self) -> bool:
        return self is not NodeKind.END

    @property
    def default_label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_string(cls, kind_str: str) -> Optional['NodeKind']:
        """Convert a palette payload to a NodeKind, None when unknown"""
        try:
            return cls(str(kind_str).strip().lower())
        except ValueError:
            return None


class InputType(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    PHONE = "phone"
    DATE = "date"


class ActionKind(str, Enum):
    WEBHOOK = "webhook"
    EMAIL = "email"
    VARIABLE = "variable"


# ============================================================================
# Node / Connection
# ============================================================================

class Position(BaseConfig):
    x: float = 0.0
    y: float = 0.0


class ActionItem(BaseConfig):
    kind: ActionKind = Field(default=ActionKind.WEBHOOK, alias="type")
    value: str = ""


class NodeData(BaseConfig):
    """Per-node parameters; which fields matter depends on the node kind"""
    model_config = ConfigDict(extra="allow", populate_by_name=True, validate_assignment=True)

    label: str = ""
    # message
    message: Optional[str] = None
    # condition
    condition: Optional[str] = None
    true_path: Optional[str] = Field(default=None, alias="truePath")
    false_path: Optional[str] = Field(default=None, alias="falsePath")
    # input
    input_type: Optional[InputType] = Field(default=None, alias="inputType")
    placeholder: Optional[str] = None
    variable_name: Optional[str] = Field(default=None, alias="variableName")
    # action
    actions: Optional[List[ActionItem]] = None


class FlowNode(BaseConfig):
    id: str
    kind: NodeKind = Field(alias="type")
    position: Position = Field(default_factory=Position)
    data: NodeData = Field(default_factory=NodeData)
    # Derived from the graph's connection list, rebuilt by FlowGraph on every mutation
    outgoing: List[str] = Field(default_factory=list, alias="connections")


class Connection(BaseConfig):
    id: str
    source: str
    target: str

    @property
    def pair(self) -> tuple:
        return (self.source, self.target)


def connection_id(source: str, target: str) -> str:
    return f"{source}-{target}"


def default_node_data(kind: NodeKind) -> NodeData:
    """Kind-appropriate starting data for a freshly placed node"""
    data = NodeData(label=kind.default_label)
    if kind is NodeKind.MESSAGE:
        data.message = "Enter your message here"
    elif kind is NodeKind.CONDITION:
        data.condition = "Enter condition"
        data.true_path = "Yes"
        data.false_path = "No"
    elif kind is NodeKind.INPUT:
        data.input_type = InputType.TEXT
        data.placeholder = ""
        data.variable_name = "user_input"
    elif kind is NodeKind.ACTION:
        data.actions = []
    return data


# ============================================================================
# Flow Document
# ============================================================================

class FlowMetadata(BaseConfig):
    name: str = "Untitled Flow"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="createdAt")
    version: str = "1.0.0"


class FlowDocument(BaseConfig):
    """Export/import unit: graph snapshot plus metadata"""
    nodes: List[FlowNode]
    connections: List[Connection]
    metadata: FlowMetadata

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================================================
# Results
# ============================================================================

@dataclass
class ValidationResult:
    ok: bool
    message: str


@dataclass
class ParseError:
    message: str
    details: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message}: " + "; ".join(self.details)


@dataclass
class FlowReport:
    ok: bool
    is_dag: bool = True
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    start_nodes: List[str] = field(default_factory=list)
    end_nodes: List[str] = field(default_factory=list)
    isolated_nodes: List[str] = field(default_factory=list)
    unreachable_nodes: List[str] = field(default_factory=list)
    dead_end_nodes: List[str] = field(default_factory=list)
    cyclic_nodes: List[str] = field(default_factory=list)
