"""
Composite Validation — rules for reusable composite nodes.

Three entry points:

* ``validate_composite_for_publish`` — the flow publish rules applied to
  the internal graph, plus exposed-port and cycle checks.
* ``validate_composite_node`` — structural sanity of a stored composite
  (names, ids, edge references, exposed ports).
* ``validate_composite_creation`` — checks a canvas selection before it
  is grouped into a new composite.

``suggest_exposed_ports`` proposes a default set of boundary ports for
a selection.
"""

from __future__ import annotations

from logging import getLogger
from typing import List, Optional, Sequence, Set, Tuple

from onaim_flow.workflow.flow_validation import collect_graph_issues
from onaim_flow.workflow.graph_analysis import (
    find_cycle,
    find_disconnected_nodes,
)
from onaim_flow.workflow.nodes import DynamicNodeType, NodeRegistry
from onaim_flow.workflow.validation_result import (
    Severity,
    ValidationCode,
    ValidationIssue,
    ValidationResult,
    ValidationScope,
    get_validation_summary,
)
from onaim_flow.workflow.workflow_model import (
    CompositeNode,
    ExposedPort,
    FlowEdge,
    FlowNode,
)

logger = getLogger(__name__)


# ============================================================================
# Publish validation
# ============================================================================


def validate_composite_for_publish(
    composite: CompositeNode,
    dynamic_node_types: Sequence[DynamicNodeType] = (),
    *,
    report_dangling_edges: bool = True,
    registry: Optional[NodeRegistry] = None,
) -> ValidationResult:
    """Validate a composite for publishing.

    Runs exactly the flow rules over the internal graph, then checks that
    every exposed port points at an internal node, that exposed port ids
    are unique per direction, and warns about cycles.
    """
    nodes = composite.internal_nodes
    edges = composite.internal_edges

    issues = collect_graph_issues(
        nodes, edges, dynamic_node_types,
        report_dangling_edges=report_dangling_edges,
        registry=registry,
    )

    if nodes:
        node_ids = {n.id for n in nodes}
        issues.extend(_check_exposed_ports(composite.exposed_inputs, "input", node_ids))
        issues.extend(_check_exposed_ports(composite.exposed_outputs, "output", node_ids))
        issues.extend(_check_cycles(nodes, edges))

    result = ValidationResult.from_issues(issues, ValidationScope.COMPOSITE)
    logger.debug(
        f"Composite validation ({composite.id}): "
        f"{len(result.errors)} errors, {len(result.warnings)} warnings"
    )
    return result


def get_composite_validation_summary(result: ValidationResult) -> str:
    return get_validation_summary(result, subject="Composite")


# ============================================================================
# Structural validation
# ============================================================================


def validate_composite_node(composite: CompositeNode) -> ValidationResult:
    """Check that a composite definition is internally consistent."""
    issues: List[ValidationIssue] = []

    if not composite.name.strip():
        issues.append(ValidationIssue(code=ValidationCode.MISSING_NAME))
    if not composite.description.strip():
        issues.append(ValidationIssue(
            code=ValidationCode.MISSING_DESCRIPTION,
            severity=Severity.WARNING,
        ))

    nodes = composite.internal_nodes
    edges = composite.internal_edges

    if not nodes:
        issues.append(ValidationIssue(code=ValidationCode.NO_INTERNAL_NODES))

    seen: Set[str] = set()
    for node in nodes:
        if node.id in seen:
            issues.append(ValidationIssue(
                code=ValidationCode.DUPLICATE_NODE_ID,
                node_ids=[node.id],
                ref_id=node.id,
            ))
        seen.add(node.id)

    # One issue per edge; the source is checked before the target.
    for index, edge in enumerate(edges):
        if not edge.source or not edge.target:
            issues.append(ValidationIssue(
                code=ValidationCode.EDGE_MISSING_ENDPOINT,
                edge_id=edge.id,
                index=index,
            ))
        elif edge.source not in seen:
            issues.append(ValidationIssue(
                code=ValidationCode.EDGE_UNKNOWN_ENDPOINT,
                edge_id=edge.id,
                direction="source",
                ref_id=edge.source,
            ))
        elif edge.target not in seen:
            issues.append(ValidationIssue(
                code=ValidationCode.EDGE_UNKNOWN_ENDPOINT,
                edge_id=edge.id,
                direction="target",
                ref_id=edge.target,
            ))

    issues.extend(_check_exposed_ports(
        composite.exposed_inputs, "input", seen, require_id_and_name=True,
    ))
    issues.extend(_check_exposed_ports(
        composite.exposed_outputs, "output", seen, require_id_and_name=True,
    ))

    # Unlike the publish rules, a lone node counts as unconnected here.
    disconnected = find_disconnected_nodes(nodes, edges)
    if disconnected:
        issues.append(ValidationIssue(
            code=ValidationCode.UNCONNECTED_INTERNAL_NODES,
            severity=Severity.WARNING,
            node_ids=[n.id for n in disconnected],
            labels=[n.display_label for n in disconnected],
        ))

    issues.extend(_check_cycles(nodes, edges))

    return ValidationResult.from_issues(issues, ValidationScope.COMPOSITE)


# ============================================================================
# Creation from a selection
# ============================================================================


def validate_composite_creation(
    selected_nodes: Sequence[FlowNode],
    selected_edges: Sequence[FlowEdge],
    exposed_inputs: Sequence[ExposedPort],
    exposed_outputs: Sequence[ExposedPort],
) -> ValidationResult:
    """Check that a selection can be grouped into a composite."""
    issues: List[ValidationIssue] = []

    if not selected_nodes:
        issues.append(ValidationIssue(code=ValidationCode.NO_SELECTION))
    elif len(selected_nodes) == 1:
        issues.append(ValidationIssue(
            code=ValidationCode.SINGLE_NODE_SELECTION,
            severity=Severity.WARNING,
        ))

    selected_ids = {n.id for n in selected_nodes}
    outside = [
        e for e in selected_edges
        if e.source not in selected_ids or e.target not in selected_ids
    ]
    if outside:
        issues.append(ValidationIssue(code=ValidationCode.EDGE_OUTSIDE_SELECTION))

    if not exposed_inputs and not exposed_outputs:
        issues.append(ValidationIssue(code=ValidationCode.NO_EXPOSED_PORTS))

    names: Set[str] = set()
    for port in [*exposed_inputs, *exposed_outputs]:
        if port.name in names:
            issues.append(ValidationIssue(
                code=ValidationCode.DUPLICATE_EXPOSED_PORT_NAME,
                port_id=port.id,
                port_name=port.name,
            ))
        names.add(port.name)

    for direction, ports in (("input", exposed_inputs), ("output", exposed_outputs)):
        for port in ports:
            if port.internal_node_id not in selected_ids:
                issues.append(ValidationIssue(
                    code=ValidationCode.EXPOSED_PORT_NOT_SELECTED,
                    direction=direction,
                    port_id=port.id,
                    port_name=port.name,
                    ref_id=port.internal_node_id,
                ))

    return ValidationResult.from_issues(issues, ValidationScope.COMPOSITE)


def suggest_exposed_ports(
    selected_nodes: Sequence[FlowNode],
) -> Tuple[List[ExposedPort], List[ExposedPort]]:
    """Propose boundary ports for a selection.

    The first node gets an input, the last node an output; EVENT nodes
    always expose an output and OUTPUT nodes always expose an input.
    """
    inputs: List[ExposedPort] = []
    outputs: List[ExposedPort] = []
    last_index = len(selected_nodes) - 1

    for index, node in enumerate(selected_nodes):
        label = node.data.label

        if index == 0:
            inputs.append(ExposedPort(
                id=f"suggested-input-{node.id}",
                name="Input",
                type="input",
                internal_node_id=node.id,
                internal_port_id="default-input",
                description=f"Input from {label or 'first node'}",
            ))

        if index == last_index:
            outputs.append(ExposedPort(
                id=f"suggested-output-{node.id}",
                name="Output",
                type="output",
                internal_node_id=node.id,
                internal_port_id="default-output",
                description=f"Output from {label or 'last node'}",
            ))

        if node.node_type == "event":
            outputs.append(ExposedPort(
                id=f"suggested-event-output-{node.id}",
                name=f"{label or 'Event'} Output",
                type="output",
                internal_node_id=node.id,
                internal_port_id="event-output",
                description=f"Event output from {label or 'event node'}",
            ))

        if node.node_type == "output":
            inputs.append(ExposedPort(
                id=f"suggested-output-input-{node.id}",
                name=f"{label or 'Output'} Input",
                type="input",
                internal_node_id=node.id,
                internal_port_id="output-input",
                description=f"Input to {label or 'output node'}",
            ))

    return inputs, outputs


# ============================================================================
# Helpers
# ============================================================================


def _check_exposed_ports(
    ports: Sequence[ExposedPort],
    direction: str,
    node_ids: Set[str],
    require_id_and_name: bool = False,
) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    seen: Set[str] = set()

    for index, port in enumerate(ports):
        if not port.id:
            if require_id_and_name:
                issues.append(ValidationIssue(
                    code=ValidationCode.EXPOSED_PORT_MISSING_ID,
                    direction=direction,
                    index=index,
                ))
        elif port.id in seen:
            issues.append(ValidationIssue(
                code=ValidationCode.DUPLICATE_EXPOSED_PORT,
                direction=direction,
                port_id=port.id,
            ))
        else:
            seen.add(port.id)

        if require_id_and_name and not port.name.strip():
            issues.append(ValidationIssue(
                code=ValidationCode.EXPOSED_PORT_MISSING_NAME,
                direction=direction,
                port_id=port.id,
            ))

        if port.internal_node_id not in node_ids:
            issues.append(ValidationIssue(
                code=ValidationCode.EXPOSED_PORT_DANGLING,
                direction=direction,
                port_id=port.id,
                port_name=port.name,
                ref_id=port.internal_node_id,
            ))

    return issues


def _check_cycles(
    nodes: Sequence[FlowNode],
    edges: Sequence[FlowEdge],
) -> List[ValidationIssue]:
    if not edges:
        return []
    cycle = find_cycle([n.id for n in nodes], edges)
    if cycle is None:
        return []
    return [ValidationIssue(
        code=ValidationCode.CYCLE,
        severity=Severity.WARNING,
        node_ids=cycle,
    )]
