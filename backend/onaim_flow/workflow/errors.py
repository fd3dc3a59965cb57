"""Store error hierarchy.

Validation problems are never raised; they are returned in a
``ValidationResult``. These exceptions signal caller mistakes.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base for all store errors."""


class NotFoundError(StoreError, KeyError):
    """Entity does not exist."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class FlowNotFoundError(NotFoundError):
    """No flow with the given id."""


class CompositeNotFoundError(NotFoundError):
    """No composite node with the given id."""


class NodeTypeNotFoundError(NotFoundError):
    """No dynamic node type with the given id."""


class DuplicateNameError(StoreError, ValueError):
    """An entity with the same (case-insensitive) name already exists."""
