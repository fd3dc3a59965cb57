"""
Workflow Store — JSON-file persistence for flow definitions.

Stores each flow as an individual JSON file under a configurable
directory and owns the flow's publish flag: a flow only moves from
draft to published after ``validate_flow`` accepts it, while
unpublishing is unconditional.
"""

from __future__ import annotations

import json
from logging import getLogger
from pathlib import Path
from typing import Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from onaim_flow.config import StorageConfig, ValidationConfig
from onaim_flow.workflow.errors import DuplicateNameError, FlowNotFoundError
from onaim_flow.workflow.flow_validation import validate_flow
from onaim_flow.workflow.nodes import DynamicNodeType
from onaim_flow.workflow.validation_result import (
    ValidationResult,
    get_validation_summary,
)
from onaim_flow.workflow.workflow_model import FlowDefinition, FlowEdge, FlowNode

logger = getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class JsonDirectoryStore(Generic[M]):
    """One JSON file per entity, named after the entity id."""

    model: Type[M]
    kind: str = "entity"

    def __init__(self, storage_dir: Path) -> None:
        self._dir = Path(storage_dir)
        self._dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"{type(self).__name__} initialized at {self._dir}")

    @property
    def storage_dir(self) -> Path:
        return self._dir

    def exists(self, entity_id: str) -> bool:
        return self._path_for(entity_id).exists()

    # ── Internals ──

    def _write(self, entity_id: str, entity: M) -> None:
        self._path_for(entity_id).write_text(
            entity.model_dump_json(indent=2, by_alias=True),
            encoding="utf-8",
        )

    def _read(self, entity_id: str) -> Optional[M]:
        path = self._path_for(entity_id)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return self.model.model_validate(data)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            logger.error(f"Failed to load {self.kind} {entity_id}: {e}")
            return None

    def _remove(self, entity_id: str) -> bool:
        path = self._path_for(entity_id)
        if path.exists():
            path.unlink()
            return True
        return False

    def _read_all(self) -> List[M]:
        entities: List[M] = []
        for path in sorted(self._dir.glob("*.json")):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                entities.append(self.model.model_validate(data))
            except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
                logger.warning(f"Skipping malformed {self.kind} file {path.name}: {e}")
        return entities

    def _path_for(self, entity_id: str) -> Path:
        # Sanitize ID for filesystem
        safe_id = "".join(c for c in entity_id if c.isalnum() or c in "-_")
        return self._dir / f"{safe_id}.json"


class FlowStore(JsonDirectoryStore[FlowDefinition]):
    """Persist flows and manage their publish state."""

    model = FlowDefinition
    kind = "flow"

    def __init__(
        self,
        storage_dir: Optional[Path] = None,
        validation_config: Optional[ValidationConfig] = None,
    ) -> None:
        super().__init__(storage_dir or StorageConfig.get_default_instance().flows_dir)
        self._validation = validation_config or ValidationConfig.get_default_instance()

    # ── CRUD ──

    def create_flow(self, name: str, description: Optional[str] = None) -> FlowDefinition:
        """Create an empty draft flow.

        Raises:
            DuplicateNameError: A flow with the same name already exists.
        """
        self._check_unique_name(name)
        flow = FlowDefinition(name=name, description=description)
        self.save(flow)
        return flow

    def save(self, flow: FlowDefinition) -> None:
        """Save (create or update) a flow definition."""
        flow.touch()
        self._write(flow.id, flow)
        logger.info(f"Flow saved: {flow.name} ({flow.id})")

    def load(self, flow_id: str) -> Optional[FlowDefinition]:
        """Load a single flow by ID, or None."""
        return self._read(flow_id)

    def get_flow(self, flow_id: str) -> FlowDefinition:
        """Load a flow, raising ``FlowNotFoundError`` when it does not exist."""
        flow = self._read(flow_id)
        if flow is None:
            raise FlowNotFoundError(f"Flow with ID {flow_id} not found.")
        return flow

    def delete_flow(self, flow_id: str) -> bool:
        deleted = self._remove(flow_id)
        if deleted:
            logger.info(f"Flow deleted: {flow_id}")
        return deleted

    def list_all(self) -> List[FlowDefinition]:
        return self._read_all()

    def list_published(self) -> List[FlowDefinition]:
        return [f for f in self.list_all() if f.published]

    def update_flow(
        self,
        flow_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> FlowDefinition:
        """Rename or re-describe a flow."""
        flow = self.get_flow(flow_id)
        if name is not None and name.lower() != flow.name.lower():
            self._check_unique_name(name, exclude_id=flow_id)
        if name is not None:
            flow.name = name
        if description is not None:
            flow.description = description
        self.save(flow)
        return flow

    def save_graph(
        self,
        flow_id: str,
        nodes: Sequence[FlowNode],
        edges: Sequence[FlowEdge],
    ) -> FlowDefinition:
        """Replace the canvas graph of a flow and refresh its stats."""
        flow = self.get_flow(flow_id)
        flow.nodes = list(nodes)
        flow.edges = list(edges)
        flow.node_count = len(flow.nodes)
        flow.edge_count = len(flow.edges)
        self.save(flow)
        return flow

    def update_flow_stats(self, flow_id: str, node_count: int, edge_count: int) -> None:
        flow = self.get_flow(flow_id)
        flow.node_count = node_count
        flow.edge_count = edge_count
        self.save(flow)

    # ── Publishing ──

    def validate_flow_for_publish(
        self,
        flow_id: str,
        dynamic_node_types: Sequence[DynamicNodeType] = (),
    ) -> ValidationResult:
        """Validate a stored flow without changing its publish state."""
        flow = self.get_flow(flow_id)
        return validate_flow(
            flow.nodes,
            flow.edges,
            dynamic_node_types,
            report_dangling_edges=self._validation.report_dangling_edges,
        )

    def publish_flow(
        self,
        flow_id: str,
        dynamic_node_types: Sequence[DynamicNodeType] = (),
    ) -> ValidationResult:
        """Publish a flow if it passes validation.

        The flag is only written when the result is valid; the result is
        returned either way so the caller can show errors and warnings.
        """
        flow = self.get_flow(flow_id)
        result = validate_flow(
            flow.nodes,
            flow.edges,
            dynamic_node_types,
            report_dangling_edges=self._validation.report_dangling_edges,
        )
        if result.is_valid:
            flow.published = True
            self.save(flow)
            logger.info(f"✅ Flow published: {flow.name} ({flow.id})")
        else:
            logger.warning(
                f"Publish blocked for flow {flow.name} ({flow.id}): "
                f"{get_validation_summary(result)}"
            )
        return result

    def unpublish_flow(self, flow_id: str) -> None:
        """Move a flow back to draft. Never validated."""
        flow = self.get_flow(flow_id)
        flow.published = False
        self.save(flow)
        logger.info(f"Flow unpublished: {flow.name} ({flow.id})")

    def toggle_flow_published(
        self,
        flow_id: str,
        dynamic_node_types: Sequence[DynamicNodeType] = (),
    ) -> ValidationResult:
        """Unpublish a published flow, or try to publish a draft."""
        flow = self.get_flow(flow_id)
        if flow.published:
            self.unpublish_flow(flow_id)
            return ValidationResult.passed()
        return self.publish_flow(flow_id, dynamic_node_types)

    # ── Internals ──

    def _check_unique_name(self, name: str, exclude_id: Optional[str] = None) -> None:
        for flow in self.list_all():
            if flow.name.lower() == name.lower() and flow.id != exclude_id:
                raise DuplicateNameError(
                    f'A flow with the name "{name}" already exists. '
                    f"Please choose a different name."
                )


# ── Singleton ──

_store_instance: Optional[FlowStore] = None


def get_flow_store() -> FlowStore:
    """Return the global FlowStore singleton."""
    global _store_instance
    if _store_instance is None:
        _store_instance = FlowStore()
    return _store_instance
