"""
Dynamic Nodes — user-defined node types.

A ``DynamicNodeType`` is created in the type editor and stored by the
``NodeTypeStore``. Nodes on the canvas reference it through
``data.dynamicNodeTypeId`` and keep their answers in
``data.dynamicFieldValues`` (field id → value).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Literal, Optional

from pydantic import Field

from onaim_flow.workflow.workflow_model import FlowModel, NodeData

PortType = Literal["input", "output", "input/output"]
DynamicFieldType = Literal["text", "number", "select", "textarea", "boolean", "date"]


class PortDefinition(FlowModel):
    id: str
    name: str
    type: PortType = "input/output"
    description: Optional[str] = None
    required: bool = False


class SelectOption(FlowModel):
    value: str
    label: str


class FieldValidationRule(FlowModel):
    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[str] = None
    custom: Optional[str] = None


class ConfigurableField(FlowModel):
    """A field the user fills in on nodes of a dynamic type."""

    id: str
    name: str
    type: DynamicFieldType = "text"
    description: Optional[str] = None
    required: bool = False
    default_value: Optional[Any] = None
    options: Optional[List[SelectOption]] = None
    placeholder: Optional[str] = None
    validation: Optional[FieldValidationRule] = None


class DynamicNodeType(FlowModel):
    """Registry entry for one user-defined node type."""

    id: str
    name: str
    description: str = ""
    icon: str = "🔧"
    color: str = "from-gray-500 to-gray-600"
    category: str = "custom"
    ports: List[PortDefinition] = Field(default_factory=list)
    fields: List[ConfigurableField] = Field(default_factory=list)
    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    updated_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    is_custom: bool = True

    @property
    def required_fields(self) -> List[ConfigurableField]:
        return [f for f in self.fields if f.required]


def is_missing_value(value: Any) -> bool:
    """None and the empty string count as "not filled in"; 0 and False do not."""
    return value is None or value == ""


def find_missing_required_fields(
    node_type: DynamicNodeType,
    field_values: Dict[str, Any],
) -> List[ConfigurableField]:
    """Required fields of ``node_type`` without a value in ``field_values``."""
    return [
        f for f in node_type.required_fields
        if is_missing_value(field_values.get(f.id))
    ]


def find_dynamic_node_type(
    type_id: str,
    dynamic_node_types: Iterable[DynamicNodeType],
) -> Optional[DynamicNodeType]:
    for node_type in dynamic_node_types:
        if node_type.id == type_id:
            return node_type
    return None


def resolve_dynamic_node_type(
    data: NodeData,
    dynamic_node_types: Iterable[DynamicNodeType],
) -> Optional[DynamicNodeType]:
    """The definition a node refers to, or None when it cannot be found."""
    if not data.dynamic_node_type_id:
        return None
    return find_dynamic_node_type(data.dynamic_node_type_id, dynamic_node_types)
