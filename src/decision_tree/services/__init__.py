"""Service Layer: editor-facing operations on decision trees."""

from __future__ import annotations

from .tree_service import TreeService, ValidationReport

__all__ = [
    "TreeService",
    "ValidationReport",
]
