"""
Built-in Nodes — EVENT, FILTER, SELECT, and OUTPUT.

These four kinds are always available in the palette. EVENT starts a
flow, FILTER and SELECT shape the event payload, and OUTPUT awards
points along progress steps.
"""

from __future__ import annotations

from typing import Dict, List

from onaim_flow.workflow.nodes.base import (
    BaseNode,
    NodeParameter,
    NodePort,
    register_node,
)
from onaim_flow.workflow.workflow_model import NodeData

# Event types offered for each event source.
EVENT_TYPE_OPTIONS: Dict[str, List[str]] = {
    "Hub": ["Bet", "Win"],
    "Leaderboard": ["PositionChange", "TakeWinnigPlace"],
    "External": ["Deposit", "Bet", "Login"],
}

CONDITIONAL_OPERATORS = ["equals", "not equals", "greater than", "less than"]


def _options(values: List[str]) -> List[Dict[str, str]]:
    return [{"value": v, "label": v} for v in values]


# ============================================================================
# EVENT
# ============================================================================


@register_node
class EventNode(BaseNode):
    """Trigger of a flow. Needs both an event source and an event type."""

    node_type = "event"
    label = "EVENT"
    description = "Trigger events and actions"
    icon = "⚡"
    color = "from-blue-500 to-blue-600"
    category = "trigger"

    parameters = [
        NodeParameter(
            name="event_source",
            label="Event Source",
            type="select",
            required=True,
            options=_options(list(EVENT_TYPE_OPTIONS)),
        ),
        NodeParameter(
            name="event_type",
            label="Event Type",
            type="select",
            required=True,
            description="Available values depend on the event source.",
        ),
    ]

    ports = [NodePort(id="event-output", label="Event", direction="output")]

    def check_configuration(self, data: NodeData) -> List[str]:
        problems = []
        if not data.event_source:
            problems.append("Event Source is required")
        if not data.event_type:
            problems.append("Event Type is required")
        return problems


# ============================================================================
# FILTER
# ============================================================================


@register_node
class FilterNode(BaseNode):
    """Pass events through only when all conditions hold."""

    node_type = "filter"
    label = "FILTER"
    description = "Filter and validate data"
    icon = "🔍"
    color = "from-green-500 to-green-600"
    category = "process"

    parameters = [
        NodeParameter(
            name="filter_conditions",
            label="Conditions",
            type="list",
            required=True,
            description="Property / operator / value triples.",
            options=_options(CONDITIONAL_OPERATORS),
        ),
    ]

    def check_configuration(self, data: NodeData) -> List[str]:
        if not data.filter_conditions:
            return ["At least one filter condition is required"]
        return []

    def is_partially_configured(self, data: NodeData) -> bool:
        if not data.filter_conditions:
            return False
        return any(
            not c.property_name
            or not c.operator
            or c.value is None
            or c.value == ""
            for c in data.filter_conditions
        )


# ============================================================================
# SELECT
# ============================================================================


@register_node
class SelectNode(BaseNode):
    """Pick a single property out of the event payload."""

    node_type = "select"
    label = "SELECT"
    description = "Select and transform data"
    icon = "📊"
    color = "from-purple-500 to-purple-600"
    category = "process"

    parameters = [
        NodeParameter(
            name="select_property",
            label="Property Name",
            required=True,
        ),
    ]

    def check_configuration(self, data: NodeData) -> List[str]:
        if not data.select_property or not data.select_property.strip():
            return ["Property Name is required"]
        return []


# ============================================================================
# OUTPUT
# ============================================================================


@register_node
class OutputNode(BaseNode):
    """Terminal node: awards points at progress thresholds."""

    node_type = "output"
    label = "OUTPUT"
    description = "Output and export results"
    icon = "📤"
    color = "from-orange-500 to-orange-600"
    category = "output"

    parameters = [
        NodeParameter(
            name="output_steps",
            label="Steps",
            type="list",
            required=True,
            description="Progress → point pairs.",
        ),
    ]

    ports = [NodePort(id="output-input", label="Input", direction="input")]

    def check_configuration(self, data: NodeData) -> List[str]:
        if not data.output_steps:
            return ["At least one output step is required"]
        return []

    def is_partially_configured(self, data: NodeData) -> bool:
        if not data.output_steps:
            return False
        return any(
            step.progress is None or step.point is None
            for step in data.output_steps
        )
