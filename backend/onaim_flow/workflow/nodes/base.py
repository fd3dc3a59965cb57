"""
Node Kind Base — the contract every built-in node kind implements.

A node kind describes one entry of the editor palette (``event``,
``filter``, ...): its display metadata, the parameters the user fills
in, its connection ports, and the predicates the validation engine uses
to decide whether a node of that kind is configured well enough to
publish.

Concrete kinds register themselves with ``@register_node``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from logging import getLogger
from typing import Any, Dict, List, Optional, Type

from onaim_flow.workflow.workflow_model import NodeData

logger = getLogger(__name__)


@dataclass
class NodeParameter:
    """A user-editable field on a node's configuration form."""
    name: str
    label: str
    type: str = "string"           # string | select | list
    required: bool = False
    description: str = ""
    options: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "type": self.type,
            "required": self.required,
            "description": self.description,
            "options": self.options,
        }


@dataclass
class NodePort:
    """A connection handle. ``direction`` is input, output or input/output."""
    id: str
    label: str
    direction: str = "input/output"

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label, "direction": self.direction}


class BaseNode(ABC):
    """Abstract base for built-in node kinds.

    Subclasses set the class attributes and implement
    ``check_configuration``.
    """

    node_type: str = ""
    label: str = ""
    description: str = ""
    icon: str = ""
    color: str = ""
    category: str = ""

    parameters: List[NodeParameter] = []
    ports: List[NodePort] = []

    @abstractmethod
    def check_configuration(self, data: NodeData) -> List[str]:
        """Return one message per unmet publishing requirement.

        An empty list means the node is fully configured.
        """

    def is_configured(self, data: NodeData) -> bool:
        return not self.check_configuration(data)

    def is_partially_configured(self, data: NodeData) -> bool:
        """True when configuration exists but some entries are incomplete.

        Kinds without a partial state keep the default.
        """
        return False

    def to_palette_entry(self) -> Dict[str, Any]:
        """Serialize for the node palette."""
        return {
            "id": self.node_type,
            "type": self.node_type,
            "label": self.label,
            "description": self.description,
            "icon": self.icon,
            "color": self.color,
            "category": self.category,
            "parameters": [p.to_dict() for p in self.parameters],
            "ports": [p.to_dict() for p in self.ports],
        }


class NodeRegistry:
    """Lookup table of built-in node kinds, keyed by ``node_type``."""

    def __init__(self) -> None:
        self._nodes: Dict[str, BaseNode] = {}

    def register(self, node_cls: Type[BaseNode]) -> None:
        instance = node_cls()
        if not instance.node_type:
            raise ValueError(f"{node_cls.__name__} does not define node_type")
        if instance.node_type in self._nodes:
            logger.warning(f"Node type '{instance.node_type}' registered twice; replacing")
        self._nodes[instance.node_type] = instance

    def get(self, node_type: Optional[str]) -> Optional[BaseNode]:
        if node_type is None:
            return None
        return self._nodes.get(node_type)

    def list_all(self) -> List[BaseNode]:
        return list(self._nodes.values())

    def __contains__(self, node_type: object) -> bool:
        return node_type in self._nodes


_registry = NodeRegistry()


def get_node_registry() -> NodeRegistry:
    """Return the registry of built-in node kinds."""
    return _registry


def register_node(cls: Type[BaseNode]) -> Type[BaseNode]:
    """Class decorator that adds a node kind to the built-in registry."""
    _registry.register(cls)
    return cls
