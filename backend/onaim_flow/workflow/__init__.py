"""
Flow Engine — publish validation for the visual flow editor.

Decides whether a flow (or a composite node's internal graph) is
well-formed enough to publish, and persists flows, composites and
custom node types.

Architecture:
    workflow_model        — Nodes, edges, composites, flow definitions
    nodes/                — Built-in node kinds + dynamic node types
    graph_analysis        — Reachability, connectivity, cycle detection
    flow_validation       — Publish rules for flows
    composite_validation  — Publish / structure rules for composites
    validation_result     — Issue taxonomy and rendered verdicts
    workflow_store        — Flow persistence and publish state
    composite_store       — Composite persistence and publish state
    node_type_store       — Dynamic node type persistence
    templates             — Pre-built flows
"""

from onaim_flow.workflow.workflow_model import (
    CompositeNode,
    ExposedPort,
    FilterCondition,
    FlowDefinition,
    FlowEdge,
    FlowNode,
    NodeData,
    OutputStep,
)
from onaim_flow.workflow.nodes import DynamicNodeType, get_node_registry
from onaim_flow.workflow.graph_analysis import (
    detect_cycles,
    find_cycle,
    find_disconnected_nodes,
    has_path,
)
from onaim_flow.workflow.validation_result import (
    Severity,
    ValidationCode,
    ValidationIssue,
    ValidationResult,
    get_validation_summary,
)
from onaim_flow.workflow.flow_validation import validate_flow
from onaim_flow.workflow.composite_validation import (
    suggest_exposed_ports,
    validate_composite_creation,
    validate_composite_for_publish,
    validate_composite_node,
)
from onaim_flow.workflow.workflow_store import FlowStore, get_flow_store
from onaim_flow.workflow.node_type_store import NodeTypeStore, get_node_type_store
from onaim_flow.workflow.composite_store import CompositeStore, get_composite_store

__all__ = [
    "CompositeNode",
    "ExposedPort",
    "FilterCondition",
    "FlowDefinition",
    "FlowEdge",
    "FlowNode",
    "NodeData",
    "OutputStep",
    "DynamicNodeType",
    "get_node_registry",
    "detect_cycles",
    "find_cycle",
    "find_disconnected_nodes",
    "has_path",
    "Severity",
    "ValidationCode",
    "ValidationIssue",
    "ValidationResult",
    "get_validation_summary",
    "validate_flow",
    "suggest_exposed_ports",
    "validate_composite_creation",
    "validate_composite_for_publish",
    "validate_composite_node",
    "FlowStore",
    "get_flow_store",
    "NodeTypeStore",
    "get_node_type_store",
    "CompositeStore",
    "get_composite_store",
]
