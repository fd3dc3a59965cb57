"""
Composite Store — persistence and publishing for composite nodes.

Publishing a composite validates its internal graph against the dynamic
node types currently held by the ``NodeTypeStore``.
"""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import Any, List, Optional

from onaim_flow.config import StorageConfig, ValidationConfig
from onaim_flow.workflow.composite_validation import (
    get_composite_validation_summary,
    validate_composite_for_publish,
)
from onaim_flow.workflow.errors import CompositeNotFoundError
from onaim_flow.workflow.node_type_store import NodeTypeStore, get_node_type_store
from onaim_flow.workflow.validation_result import ValidationResult
from onaim_flow.workflow.workflow_model import CompositeMetadata, CompositeNode
from onaim_flow.workflow.workflow_store import JsonDirectoryStore

logger = getLogger(__name__)

# Fields owned by the store; never taken from caller updates.
_PROTECTED_FIELDS = {"id", "published", "metadata"}


class CompositeStore(JsonDirectoryStore[CompositeNode]):
    """Persist composite nodes and manage their publish state."""

    model = CompositeNode
    kind = "composite"

    def __init__(
        self,
        storage_dir: Optional[Path] = None,
        node_type_store: Optional[NodeTypeStore] = None,
        validation_config: Optional[ValidationConfig] = None,
    ) -> None:
        super().__init__(storage_dir or StorageConfig.get_default_instance().composites_dir)
        self._node_types = node_type_store or get_node_type_store()
        self._validation = validation_config or ValidationConfig.get_default_instance()

    # ── CRUD ──

    def create_composite(self, composite: CompositeNode) -> CompositeNode:
        """Store a new composite as an unpublished draft with a fresh id."""
        data = composite.model_dump(exclude=_PROTECTED_FIELDS)
        created = CompositeNode(**data, published=False, metadata=CompositeMetadata())
        self._write(created.id, created)
        logger.info(f"Composite created: {created.name} ({created.id})")
        return created

    def update_composite(self, composite_id: str, **updates: Any) -> CompositeNode:
        current = self.get_composite(composite_id)
        data = current.model_dump()
        data.update({k: v for k, v in updates.items() if k not in _PROTECTED_FIELDS})
        composite = CompositeNode.model_validate(data)
        composite.touch()
        self._write(composite_id, composite)
        logger.info(f"Composite updated: {composite.name} ({composite_id})")
        return composite

    def delete_composite(self, composite_id: str) -> bool:
        deleted = self._remove(composite_id)
        if deleted:
            logger.info(f"Composite deleted: {composite_id}")
        return deleted

    def load(self, composite_id: str) -> Optional[CompositeNode]:
        return self._read(composite_id)

    def get_composite(self, composite_id: str) -> CompositeNode:
        composite = self._read(composite_id)
        if composite is None:
            raise CompositeNotFoundError(f"Composite with ID {composite_id} not found.")
        return composite

    def list_all(self) -> List[CompositeNode]:
        return self._read_all()

    def list_published(self) -> List[CompositeNode]:
        return [c for c in self.list_all() if c.published]

    # ── Publishing ──

    def validate_composite_for_publish(self, composite_id: str) -> ValidationResult:
        composite = self.get_composite(composite_id)
        return self._validate(composite)

    def publish_composite(self, composite_id: str) -> ValidationResult:
        """Publish a composite if its internal graph passes validation."""
        composite = self.get_composite(composite_id)
        result = self._validate(composite)
        if result.is_valid:
            composite.published = True
            self._write(composite_id, composite)
            logger.info(f"✅ Composite published: {composite.name} ({composite_id})")
        else:
            logger.warning(
                f"Publish blocked for composite {composite.name} ({composite_id}): "
                f"{get_composite_validation_summary(result)}"
            )
        return result

    def unpublish_composite(self, composite_id: str) -> None:
        composite = self.get_composite(composite_id)
        composite.published = False
        self._write(composite_id, composite)
        logger.info(f"Composite unpublished: {composite.name} ({composite_id})")

    def toggle_composite_published(self, composite_id: str) -> ValidationResult:
        composite = self.get_composite(composite_id)
        if composite.published:
            self.unpublish_composite(composite_id)
            return ValidationResult.passed()
        return self.publish_composite(composite_id)

    def _validate(self, composite: CompositeNode) -> ValidationResult:
        return validate_composite_for_publish(
            composite,
            self._node_types.list_all(),
            report_dangling_edges=self._validation.report_dangling_edges,
        )


# ── Singleton ──

_store_instance: Optional[CompositeStore] = None


def get_composite_store() -> CompositeStore:
    """Return the global CompositeStore singleton."""
    global _store_instance
    if _store_instance is None:
        _store_instance = CompositeStore()
    return _store_instance
