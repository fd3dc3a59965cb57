"""
Validation Result — issue taxonomy and the rendered verdict.

Validators produce a list of ``ValidationIssue`` records (a closed
``ValidationCode`` plus structured fields). ``ValidationResult.from_issues``
renders them into the human-readable ``errors`` / ``warnings`` lists the
editor shows in its publish dialog.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Severity(str, Enum):
    ERROR = "error"        # Blocks publishing
    WARNING = "warning"    # Informational only


class ValidationScope(str, Enum):
    """Which kind of graph is being validated; only affects wording."""
    FLOW = "flow"
    COMPOSITE = "composite"


class ValidationCode(str, Enum):
    # ── Publish rules (flows and composites) ──
    EMPTY_GRAPH = "empty_graph"
    MISSING_EVENT_NODE = "missing_event_node"
    MISSING_OUTPUT_NODE = "missing_output_node"
    DISCONNECTED_NODES = "disconnected_nodes"
    NO_PATH_EVENT_TO_OUTPUT = "no_path_event_to_output"
    NODE_CONFIG_INCOMPLETE = "node_config_incomplete"
    UNKNOWN_DYNAMIC_TYPE = "unknown_dynamic_type"
    PARTIAL_CONFIG = "partial_config"
    DANGLING_EDGE_REFERENCE = "dangling_edge_reference"

    # ── Composite structure ──
    CYCLE = "cycle"
    EXPOSED_PORT_DANGLING = "exposed_port_dangling"
    DUPLICATE_EXPOSED_PORT = "duplicate_exposed_port"
    EXPOSED_PORT_MISSING_ID = "exposed_port_missing_id"
    EXPOSED_PORT_MISSING_NAME = "exposed_port_missing_name"
    MISSING_NAME = "missing_name"
    MISSING_DESCRIPTION = "missing_description"
    NO_INTERNAL_NODES = "no_internal_nodes"
    DUPLICATE_NODE_ID = "duplicate_node_id"
    EDGE_MISSING_ENDPOINT = "edge_missing_endpoint"
    EDGE_UNKNOWN_ENDPOINT = "edge_unknown_endpoint"
    UNCONNECTED_INTERNAL_NODES = "unconnected_internal_nodes"

    # ── Composite creation from a selection ──
    NO_SELECTION = "no_selection"
    SINGLE_NODE_SELECTION = "single_node_selection"
    EDGE_OUTSIDE_SELECTION = "edge_outside_selection"
    NO_EXPOSED_PORTS = "no_exposed_ports"
    DUPLICATE_EXPOSED_PORT_NAME = "duplicate_exposed_port_name"
    EXPOSED_PORT_NOT_SELECTED = "exposed_port_not_selected"


# Node configuration problems are listed under a shared header line.
CONFIG_CODES = frozenset({
    ValidationCode.NODE_CONFIG_INCOMPLETE,
    ValidationCode.UNKNOWN_DYNAMIC_TYPE,
})

_TEMPLATES: Dict[ValidationCode, str] = {
    ValidationCode.EMPTY_GRAPH: "{subject} must contain at least one node",
    ValidationCode.MISSING_EVENT_NODE:
        "{subject} must contain at least one EVENT node to trigger the workflow",
    ValidationCode.MISSING_OUTPUT_NODE:
        "{subject} must contain at least one OUTPUT node to produce results",
    ValidationCode.DISCONNECTED_NODES:
        "{count} {internal}node(s) are not connected: {names}",
    ValidationCode.NO_PATH_EVENT_TO_OUTPUT:
        "There must be at least one valid path from an EVENT node to an OUTPUT node",
    ValidationCode.NODE_CONFIG_INCOMPLETE: "• {label}: {detail}",
    ValidationCode.UNKNOWN_DYNAMIC_TYPE: "• {label}: Custom node type not found",
    ValidationCode.PARTIAL_CONFIG:
        "{count} {internal}node(s) have incomplete configuration: {names}",
    ValidationCode.DANGLING_EDGE_REFERENCE:
        "Edge {edge_id} references non-existent node: {ref_id}",
    ValidationCode.CYCLE:
        "{subject} contains cycles which may cause infinite loops ({cycle})",
    ValidationCode.EXPOSED_PORT_DANGLING:
        "Exposed {direction} port {port_id} references non-existent internal node: {ref_id}",
    ValidationCode.DUPLICATE_EXPOSED_PORT:
        "Duplicate exposed {direction} port ID: {port_id}",
    ValidationCode.EXPOSED_PORT_MISSING_ID:
        "Exposed {direction} port at index {index} is missing an ID",
    ValidationCode.EXPOSED_PORT_MISSING_NAME:
        "Exposed {direction} port {port_id} is missing a name",
    ValidationCode.MISSING_NAME: "{subject} node must have a name",
    ValidationCode.MISSING_DESCRIPTION: "{subject} node should have a description",
    ValidationCode.NO_INTERNAL_NODES:
        "Composite node must contain at least one internal node",
    ValidationCode.DUPLICATE_NODE_ID: "Duplicate node ID found: {ref_id}",
    ValidationCode.EDGE_MISSING_ENDPOINT:
        "Edge at index {index} is missing source or target",
    ValidationCode.EDGE_UNKNOWN_ENDPOINT:
        "Edge references non-existent {direction} node: {ref_id}",
    ValidationCode.UNCONNECTED_INTERNAL_NODES:
        "{count} internal node(s) are not connected to the composite structure",
    ValidationCode.NO_SELECTION: "At least one node must be selected",
    ValidationCode.SINGLE_NODE_SELECTION:
        "Creating a composite with only one node may not be useful",
    ValidationCode.EDGE_OUTSIDE_SELECTION: "All edges must connect to selected nodes",
    ValidationCode.NO_EXPOSED_PORTS: "At least one port must be exposed",
    ValidationCode.DUPLICATE_EXPOSED_PORT_NAME:
        "Duplicate exposed port name: {port_name}",
    ValidationCode.EXPOSED_PORT_NOT_SELECTED:
        "Exposed {direction} port {port_name} references non-selected node: {ref_id}",
}

_CONFIG_HEADERS = {
    ValidationScope.FLOW: "Node configuration errors:",
    ValidationScope.COMPOSITE: "Internal node configuration errors:",
}


class ValidationIssue(BaseModel):
    """One detected violation, with the facts needed to describe it."""

    code: ValidationCode
    severity: Severity = Severity.ERROR
    node_ids: List[str] = Field(default_factory=list)
    labels: List[str] = Field(default_factory=list)
    field_names: List[str] = Field(default_factory=list)
    detail: str = ""
    edge_id: Optional[str] = None
    port_id: Optional[str] = None
    port_name: Optional[str] = None
    direction: Optional[str] = None
    ref_id: Optional[str] = None
    index: Optional[int] = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def render(self, scope: ValidationScope = ValidationScope.FLOW) -> str:
        """Human-readable text for this issue."""
        composite = scope == ValidationScope.COMPOSITE
        return _TEMPLATES[self.code].format(
            subject="Composite" if composite else "Flow",
            internal="internal " if composite else "",
            count=len(self.labels),
            names=", ".join(self.labels),
            label=self.labels[0] if self.labels else "",
            detail=self.detail,
            edge_id=self.edge_id,
            ref_id=self.ref_id,
            port_id=self.port_id,
            port_name=self.port_name,
            direction=self.direction,
            index=self.index,
            cycle=" → ".join(self.node_ids),
        )


class ValidationResult(BaseModel):
    """Publish verdict. ``is_valid`` is exactly ``not errors``."""

    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    issues: List[ValidationIssue] = Field(default_factory=list)

    @classmethod
    def from_issues(
        cls,
        issues: List[ValidationIssue],
        scope: ValidationScope = ValidationScope.FLOW,
    ) -> "ValidationResult":
        """Render issues in order, inserting the configuration header
        before the first node configuration problem."""
        errors: List[str] = []
        warnings: List[str] = []
        header_added = False

        for issue in issues:
            text = issue.render(scope)
            if not issue.is_error:
                warnings.append(text)
                continue
            if issue.code in CONFIG_CODES and not header_added:
                errors.append(_CONFIG_HEADERS[scope])
                header_added = True
            errors.append(text)

        return cls(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            issues=list(issues),
        )

    @classmethod
    def passed(cls) -> "ValidationResult":
        """A clean verdict (used when unpublishing, which is never validated)."""
        return cls(is_valid=True)

    def has_code(self, code: ValidationCode) -> bool:
        return any(i.code == code for i in self.issues)

    def issues_with_code(self, code: ValidationCode) -> List[ValidationIssue]:
        return [i for i in self.issues if i.code == code]


def get_validation_summary(result: ValidationResult, subject: str = "Flow") -> str:
    """One-line summary for the publish dialog."""
    if result.is_valid:
        return f"✅ {subject} is valid and ready to publish"

    error_count = len(result.errors)
    warning_count = len(result.warnings)

    summary = f"❌ {error_count} error{'s' if error_count != 1 else ''} found"
    if warning_count > 0:
        summary += f", {warning_count} warning{'s' if warning_count != 1 else ''}"
    return summary
