"""
Workflow Data Models — nodes, edges, composites, and flow definitions.

These are the serializable data structures that describe a flow graph
drawn in the visual editor. The JSON shape mirrors what the browser
app writes (camelCase keys), so every model accepts both the camelCase
alias and the snake_case attribute name.

They are persisted by the stores and consumed by the validation
engine; they carry no validation behaviour of their own.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class FlowModel(BaseModel):
    """Base for every persisted model: camelCase JSON, snake_case Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> Dict[str, Any]:
        """Dump with the aliases used by the browser app."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ============================================================================
# Node payloads
# ============================================================================


ConditionalOperator = Literal["equals", "not equals", "greater than", "less than"]


class FilterCondition(FlowModel):
    """A single predicate of a FILTER node.

    Every member except ``id`` may be missing while the user is still
    filling the form in.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4())[:8])
    property_name: Optional[str] = None
    operator: Optional[ConditionalOperator] = None
    value: Optional[Any] = None


class OutputStep(FlowModel):
    """A progress → points step of an OUTPUT node."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4())[:8])
    progress: Optional[float] = None
    point: Optional[float] = None


class NodeData(FlowModel):
    """Type-specific payload carried by a canvas node.

    ``node_type`` is one of the built-in kinds (``event``, ``filter``,
    ``select``, ``output``), ``composite`` for an instance of a composite
    node, or the id of a dynamic node type.
    """

    label: str = ""
    description: str = ""
    icon: str = ""
    node_type: Optional[str] = None
    color: Optional[str] = None

    # Dynamic (user-defined) nodes
    dynamic_node_type_id: Optional[str] = None
    dynamic_field_values: Dict[str, Any] = Field(default_factory=dict)

    # Composite instances
    composite_node_id: Optional[str] = None

    # EVENT
    event_source: Optional[str] = None
    event_type: Optional[str] = None

    # FILTER
    filter_conditions: Optional[List[FilterCondition]] = None

    # SELECT
    select_property: Optional[str] = None

    # OUTPUT
    output_steps: Optional[List[OutputStep]] = None


class FlowNode(FlowModel):
    """A single node placed on the canvas."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4())[:8])
    type: str = "custom"
    position: Dict[str, float] = Field(
        default_factory=lambda: {"x": 0, "y": 0}
    )
    data: NodeData = Field(default_factory=NodeData)

    @property
    def node_type(self) -> Optional[str]:
        return self.data.node_type

    @property
    def display_label(self) -> str:
        """Label shown in messages; falls back to the node id."""
        return self.data.label or self.id


class FlowEdge(FlowModel):
    """A directed edge between two nodes of the same graph."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4())[:8])
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None
    type: Optional[str] = None


# ============================================================================
# Composite nodes
# ============================================================================


class ExposedPort(FlowModel):
    """A port of an internal node surfaced on the composite's boundary."""

    id: str = ""
    name: str = ""
    type: Literal["input", "output"] = "input"
    internal_node_id: str = ""
    internal_port_id: str = ""
    description: Optional[str] = None


class CompositeMetadata(FlowModel):
    author: str = "User"
    version: str = "1.0.0"
    created_at: str = Field(default_factory=_now)
    updated_at: str = Field(default_factory=_now)
    tags: List[str] = Field(default_factory=list)


class CompositeNode(FlowModel):
    """A reusable subgraph with exposed input and output ports."""

    id: str = Field(default_factory=lambda: f"composite-{uuid.uuid4().hex[:12]}")
    name: str = ""
    description: str = ""
    icon: str = "📦"
    color: Optional[str] = None
    internal_nodes: List[FlowNode] = Field(default_factory=list)
    internal_edges: List[FlowEdge] = Field(default_factory=list)
    exposed_inputs: List[ExposedPort] = Field(default_factory=list)
    exposed_outputs: List[ExposedPort] = Field(default_factory=list)
    published: bool = False
    connection_type: str = "input/output"
    metadata: CompositeMetadata = Field(default_factory=CompositeMetadata)

    def touch(self) -> None:
        """Update the ``metadata.updated_at`` timestamp."""
        self.metadata.updated_at = _now()


# ============================================================================
# Flows
# ============================================================================


class FlowDefinition(FlowModel):
    """A complete flow: dashboard metadata plus the canvas graph."""

    id: str = Field(default_factory=lambda: f"flow-{uuid.uuid4().hex[:12]}")
    name: str = "Untitled Flow"
    description: Optional[str] = None
    created_at: str = Field(default_factory=_now)
    updated_at: str = Field(default_factory=_now)
    node_count: int = 0
    edge_count: int = 0
    published: bool = False
    nodes: List[FlowNode] = Field(default_factory=list)
    edges: List[FlowEdge] = Field(default_factory=list)

    def touch(self) -> None:
        """Update the ``updated_at`` timestamp."""
        self.updated_at = _now()
