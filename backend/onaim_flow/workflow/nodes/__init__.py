"""
Workflow Nodes Package.

Auto-registers the built-in node kinds into the NodeRegistry and
exposes the configuration-completeness predicates used by validation.
"""

from onaim_flow.workflow.nodes.base import (
    BaseNode,
    NodeParameter,
    NodePort,
    NodeRegistry,
    get_node_registry,
    register_node,
)

# Import to trigger registration
from onaim_flow.workflow.nodes import builtin_nodes    # noqa: F401
from onaim_flow.workflow.nodes.builtin_nodes import EVENT_TYPE_OPTIONS
from onaim_flow.workflow.nodes.configuration import (
    check_node_configuration,
    is_node_configured,
    is_partially_configured,
)
from onaim_flow.workflow.nodes.dynamic_nodes import (
    ConfigurableField,
    DynamicNodeType,
    PortDefinition,
    find_missing_required_fields,
)

BUILTIN_NODE_TYPES = ("event", "filter", "select", "output")


__all__ = [
    "BaseNode",
    "NodeParameter",
    "NodePort",
    "NodeRegistry",
    "get_node_registry",
    "register_node",
    "BUILTIN_NODE_TYPES",
    "EVENT_TYPE_OPTIONS",
    "check_node_configuration",
    "is_node_configured",
    "is_partially_configured",
    "ConfigurableField",
    "DynamicNodeType",
    "PortDefinition",
    "find_missing_required_fields",
]
