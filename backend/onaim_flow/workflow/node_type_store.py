"""
Node Type Store — persistence for user-defined (dynamic) node types.

The store is the registry collaborator of the validation engine: it
hands out snapshots (``list_all``) that callers pass into
``validate_flow`` / ``validate_composite_for_publish``.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from logging import getLogger
from pathlib import Path
from typing import Any, Dict, List, Optional

from onaim_flow.config import StorageConfig
from onaim_flow.workflow.errors import DuplicateNameError, NodeTypeNotFoundError
from onaim_flow.workflow.nodes import DynamicNodeType, get_node_registry
from onaim_flow.workflow.workflow_store import JsonDirectoryStore

logger = getLogger(__name__)


class NodeTypeStore(JsonDirectoryStore[DynamicNodeType]):
    """Persist dynamic node type definitions."""

    model = DynamicNodeType
    kind = "node type"

    def __init__(self, storage_dir: Optional[Path] = None) -> None:
        super().__init__(storage_dir or StorageConfig.get_default_instance().node_types_dir)

    def create_node_type(self, **definition: Any) -> DynamicNodeType:
        """Create a new dynamic node type from its definition fields.

        Raises:
            DuplicateNameError: The name is already used (case-insensitive).
        """
        name = definition.get("name", "")
        self._check_unique_name(name)
        definition.pop("id", None)
        node_type = DynamicNodeType(
            id=f"dynamic-{uuid.uuid4().hex[:12]}",
            **definition,
        )
        self._write(node_type.id, node_type)
        logger.info(f"Node type created: {node_type.name} ({node_type.id})")
        return node_type

    def update_node_type(self, type_id: str, **updates: Any) -> DynamicNodeType:
        current = self.get_node_type(type_id)
        new_name = updates.get("name")
        if new_name is not None and new_name.lower() != current.name.lower():
            self._check_unique_name(new_name, exclude_id=type_id)

        data = current.model_dump()
        data.update(updates)
        data["id"] = type_id
        data["updated_at"] = datetime.now(timezone.utc).isoformat()
        node_type = DynamicNodeType.model_validate(data)
        self._write(type_id, node_type)
        logger.info(f"Node type updated: {node_type.name} ({type_id})")
        return node_type

    def delete_node_type(self, type_id: str) -> bool:
        """Delete a definition. Nodes that still reference it will fail
        validation with "Custom node type not found"."""
        deleted = self._remove(type_id)
        if deleted:
            logger.info(f"Node type deleted: {type_id}")
        return deleted

    def load(self, type_id: str) -> Optional[DynamicNodeType]:
        return self._read(type_id)

    def get_node_type(self, type_id: str) -> DynamicNodeType:
        node_type = self._read(type_id)
        if node_type is None:
            raise NodeTypeNotFoundError(f"Node type with ID {type_id} not found.")
        return node_type

    def list_all(self) -> List[DynamicNodeType]:
        return self._read_all()

    def get_all_node_types(self) -> List[Dict[str, Any]]:
        """Palette entries: built-in kinds first, then dynamic types."""
        entries = [kind.to_palette_entry() for kind in get_node_registry().list_all()]
        entries.extend(t.to_json_dict() for t in self.list_all())
        return entries

    def _check_unique_name(self, name: str, exclude_id: Optional[str] = None) -> None:
        for node_type in self.list_all():
            if node_type.name.lower() == name.lower() and node_type.id != exclude_id:
                raise DuplicateNameError(
                    f'A node type with the name "{name}" already exists. '
                    f"Please choose a different name."
                )


# ── Singleton ──

_store_instance: Optional[NodeTypeStore] = None


def get_node_type_store() -> NodeTypeStore:
    """Return the global NodeTypeStore singleton."""
    global _store_instance
    if _store_instance is None:
        _store_instance = NodeTypeStore()
    return _store_instance
