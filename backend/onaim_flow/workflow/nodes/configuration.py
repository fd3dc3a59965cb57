"""
Node configuration completeness.

Resolves a canvas node to its kind (built-in or dynamic) and asks the
kind whether the node is configured well enough to publish.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from onaim_flow.workflow.nodes.base import NodeRegistry, get_node_registry
from onaim_flow.workflow.nodes.dynamic_nodes import (
    DynamicNodeType,
    find_missing_required_fields,
    resolve_dynamic_node_type,
)
from onaim_flow.workflow.validation_result import ValidationCode, ValidationIssue
from onaim_flow.workflow.workflow_model import FlowNode


def check_node_configuration(
    node: FlowNode,
    dynamic_node_types: Sequence[DynamicNodeType] = (),
    registry: Optional[NodeRegistry] = None,
) -> List[ValidationIssue]:
    """Blocking configuration problems of a single node.

    Nodes that are neither a built-in kind nor linked to a dynamic type
    (composite instances, plain nodes) have no requirements.
    """
    reg = registry or get_node_registry()
    label = node.display_label

    kind = reg.get(node.node_type)
    if kind is not None:
        return [
            ValidationIssue(
                code=ValidationCode.NODE_CONFIG_INCOMPLETE,
                node_ids=[node.id],
                labels=[label],
                detail=detail,
            )
            for detail in kind.check_configuration(node.data)
        ]

    if not node.data.dynamic_node_type_id:
        return []

    node_type = resolve_dynamic_node_type(node.data, dynamic_node_types)
    if node_type is None:
        return [
            ValidationIssue(
                code=ValidationCode.UNKNOWN_DYNAMIC_TYPE,
                node_ids=[node.id],
                labels=[label],
                ref_id=node.data.dynamic_node_type_id,
            )
        ]

    missing = find_missing_required_fields(node_type, node.data.dynamic_field_values)
    if not missing:
        return []

    names = [f.name for f in missing]
    return [
        ValidationIssue(
            code=ValidationCode.NODE_CONFIG_INCOMPLETE,
            node_ids=[node.id],
            labels=[label],
            field_names=names,
            ref_id=node_type.id,
            detail=f"Required fields missing: {', '.join(names)}",
        )
    ]


def is_node_configured(
    node: FlowNode,
    dynamic_node_types: Sequence[DynamicNodeType] = (),
    registry: Optional[NodeRegistry] = None,
) -> bool:
    return not check_node_configuration(node, dynamic_node_types, registry)


def is_partially_configured(
    node: FlowNode,
    registry: Optional[NodeRegistry] = None,
) -> bool:
    """Non-blocking: configuration is present but some entries are incomplete."""
    reg = registry or get_node_registry()
    kind = reg.get(node.node_type)
    if kind is None:
        return False
    return kind.is_partially_configured(node.data)
