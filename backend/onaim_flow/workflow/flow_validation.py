"""
Flow Validation — decide whether a flow graph may be published.

The publish rules, applied in this order:

    1. The graph has at least one node (otherwise stop here).
    2. At least one EVENT node.
    3. At least one OUTPUT node.
    4. Every node touches an edge (only when there is more than one node).
    5. Some EVENT node reaches some OUTPUT node.
    6. Every node is fully configured for its kind.
    7. Partially configured FILTER / OUTPUT nodes (warning).
    8. Edges pointing at nodes that do not exist (warning).

The same rules apply to the internal graph of a composite node; see
``composite_validation``. Validation is a pure function of its inputs.
"""

from __future__ import annotations

from logging import getLogger
from typing import List, Optional, Sequence

from onaim_flow.workflow.graph_analysis import (
    find_dangling_edges,
    find_disconnected_nodes,
    has_any_path,
)
from onaim_flow.workflow.nodes import (
    DynamicNodeType,
    NodeRegistry,
    check_node_configuration,
    is_partially_configured,
)
from onaim_flow.workflow.validation_result import (
    Severity,
    ValidationCode,
    ValidationIssue,
    ValidationResult,
    ValidationScope,
)
from onaim_flow.workflow.workflow_model import FlowEdge, FlowNode

logger = getLogger(__name__)

_EVENT_TYPE = "event"
_OUTPUT_TYPE = "output"


def validate_flow(
    nodes: Sequence[FlowNode],
    edges: Sequence[FlowEdge],
    dynamic_node_types: Sequence[DynamicNodeType] = (),
    *,
    report_dangling_edges: bool = True,
    registry: Optional[NodeRegistry] = None,
) -> ValidationResult:
    """Validate a flow for publishing.

    Args:
        nodes: Canvas nodes of the flow.
        edges: Canvas edges of the flow.
        dynamic_node_types: Snapshot of the user-defined node types.
        report_dangling_edges: Warn about edges whose endpoints are
            missing from ``nodes``.
        registry: Built-in node kinds; defaults to the global registry.

    Returns:
        A ``ValidationResult``; ``is_valid`` is False when any error was found.
    """
    issues = collect_graph_issues(
        nodes, edges, dynamic_node_types,
        report_dangling_edges=report_dangling_edges,
        registry=registry,
    )
    result = ValidationResult.from_issues(issues, ValidationScope.FLOW)
    logger.debug(
        f"Flow validation: {len(nodes)} nodes, {len(edges)} edges → "
        f"{len(result.errors)} errors, {len(result.warnings)} warnings"
    )
    return result


def collect_graph_issues(
    nodes: Sequence[FlowNode],
    edges: Sequence[FlowEdge],
    dynamic_node_types: Sequence[DynamicNodeType] = (),
    *,
    report_dangling_edges: bool = True,
    registry: Optional[NodeRegistry] = None,
) -> List[ValidationIssue]:
    """Run the publish rules over a node/edge graph, in rule order."""
    issues: List[ValidationIssue] = []

    # ── Rule 1: non-empty ──
    if not nodes:
        issues.append(ValidationIssue(code=ValidationCode.EMPTY_GRAPH))
        return issues

    event_nodes = [n for n in nodes if n.node_type == _EVENT_TYPE]
    output_nodes = [n for n in nodes if n.node_type == _OUTPUT_TYPE]

    # ── Rules 2-3: trigger and result nodes ──
    if not event_nodes:
        issues.append(ValidationIssue(code=ValidationCode.MISSING_EVENT_NODE))
    if not output_nodes:
        issues.append(ValidationIssue(code=ValidationCode.MISSING_OUTPUT_NODE))

    # ── Rule 4: connectivity ──
    disconnected = find_disconnected_nodes(nodes, edges)
    if disconnected and len(nodes) > 1:
        issues.append(ValidationIssue(
            code=ValidationCode.DISCONNECTED_NODES,
            node_ids=[n.id for n in disconnected],
            labels=[n.display_label for n in disconnected],
        ))

    # ── Rule 5: EVENT → OUTPUT reachability ──
    if event_nodes and output_nodes and edges:
        if not has_any_path(
            [n.id for n in event_nodes],
            [n.id for n in output_nodes],
            edges,
        ):
            issues.append(ValidationIssue(code=ValidationCode.NO_PATH_EVENT_TO_OUTPUT))

    # ── Rule 6: configuration completeness ──
    for node in nodes:
        issues.extend(check_node_configuration(node, dynamic_node_types, registry))

    # ── Rule 7: partial configuration ──
    partial = [n for n in nodes if is_partially_configured(n, registry)]
    if partial:
        issues.append(ValidationIssue(
            code=ValidationCode.PARTIAL_CONFIG,
            severity=Severity.WARNING,
            node_ids=[n.id for n in partial],
            labels=[n.display_label for n in partial],
        ))

    # ── Rule 8: dangling edge references ──
    if report_dangling_edges:
        for edge, missing_id in find_dangling_edges(nodes, edges):
            issues.append(ValidationIssue(
                code=ValidationCode.DANGLING_EDGE_REFERENCE,
                severity=Severity.WARNING,
                edge_id=edge.id,
                ref_id=missing_id,
            ))

    return issues
