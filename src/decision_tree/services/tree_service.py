"""Tree Service: editing helpers and validate-before-save persistence."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel

from decision_tree.core.errors import TreeLoadError
from decision_tree.core.models import DecisionNode, DecisionTree, NodeType
from decision_tree.core.validation import validate_tree
from decision_tree.io.loaders.tree_loader import parse_tree, read_tree_file, save_tree_file

logger = logging.getLogger(__name__)


class ValidationReport(BaseModel):
    """Outcome of validating a definition, suitable for showing to an editor user."""

    valid: bool
    error_kind: Optional[str] = None
    message: Optional[str] = None
    tree: Optional[DecisionTree] = None


class TreeService:
    """
    Service backing a tree editor.

    Edits never modify the tree passed in; each returns a new tree. Edits are
    not validated (an editor works through invalid intermediate states);
    validation happens on ``validate_*`` and always before ``save``.
    """

    def new_tree(self) -> DecisionTree:
        """Minimal valid tree: a single End start node."""
        start = DecisionNode(
            id="start",
            type=NodeType.END.value,
            prompt="This is the start node. Change the type to begin building your decision tree.",
        )
        return DecisionTree(id="new-tree", version="1.0.0", start_node_id="start", nodes={"start": start})

    def validate_text(self, text: str) -> ValidationReport:
        try:
            tree = parse_tree(text)
        except TreeLoadError as exc:
            return ValidationReport(valid=False, error_kind=exc.kind, message=str(exc))
        return self.validate_tree(tree)

    def validate_tree(self, tree: DecisionTree) -> ValidationReport:
        try:
            validate_tree(tree)
        except TreeLoadError as exc:
            return ValidationReport(valid=False, error_kind=exc.kind, message=str(exc))
        return ValidationReport(valid=True, tree=tree)

    def load(self, path: str | Path) -> DecisionTree:
        """Read and validate a definition file; load errors propagate."""
        tree = read_tree_file(path)
        try:
            validate_tree(tree)
        except TreeLoadError as exc:
            exc.attach_source(str(path))
            raise
        return tree

    def save(self, tree: DecisionTree, path: str | Path, *, fmt: Optional[str] = None) -> Path:
        """
        Validate ``tree`` and write it to ``path``.

        Raises:
            TreeLoadError: If the tree is invalid; nothing is written
        """
        validate_tree(tree)
        written = save_tree_file(tree, path, fmt=fmt)
        logger.info("Saved decision tree '%s' to: %s", tree.id, written)
        return written

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def upsert_node(self, tree: DecisionTree, node: DecisionNode) -> DecisionTree:
        """Add ``node`` or replace the node with the same id."""
        if not node.id:
            raise ValueError("Node id cannot be empty")
        nodes: Dict[str, DecisionNode] = dict(tree.nodes)
        nodes[node.id] = node
        return tree.model_copy(update={"nodes": nodes})

    def remove_node(self, tree: DecisionTree, node_id: str) -> DecisionTree:
        """Drop a node; references to it are left for validation to report."""
        if node_id not in tree.nodes:
            raise KeyError(f"Unknown node: {node_id}. Available: {', '.join(sorted(tree.nodes))}")
        nodes = {key: node for key, node in tree.nodes.items() if key != node_id}
        return tree.model_copy(update={"nodes": nodes})

    def rename_node(self, tree: DecisionTree, old_id: str, new_id: str) -> DecisionTree:
        """Change a node id and rewrite every edge pointing at it."""
        if old_id not in tree.nodes:
            raise KeyError(f"Unknown node: {old_id}. Available: {', '.join(sorted(tree.nodes))}")
        if not new_id:
            raise ValueError("Node id cannot be empty")
        if new_id != old_id and new_id in tree.nodes:
            raise ValueError(f"Duplicate node id: {new_id}")

        def _retarget(value: Optional[str]) -> Optional[str]:
            return new_id if value == old_id else value

        nodes: Dict[str, DecisionNode] = {}
        for key, node in tree.nodes.items():
            update = {
                "choices": tuple(
                    c.model_copy(update={"next_node_id": _retarget(c.next_node_id)}) for c in node.choices
                )
                if node.choices is not None
                else None,
                "rules": tuple(r.model_copy(update={"next_node_id": _retarget(r.next_node_id)}) for r in node.rules)
                if node.rules is not None
                else None,
                "default_next_node_id": _retarget(node.default_next_node_id),
            }
            if key == old_id:
                update["id"] = new_id
                key = new_id
            nodes[key] = node.model_copy(update=update)
        return tree.model_copy(
            update={"nodes": nodes, "start_node_id": _retarget(tree.start_node_id)},
        )

    def set_start_node(self, tree: DecisionTree, node_id: str) -> DecisionTree:
        if node_id not in tree.nodes:
            raise KeyError(f"Unknown node: {node_id}. Available: {', '.join(sorted(tree.nodes))}")
        return tree.model_copy(update={"start_node_id": node_id})


__all__ = ["TreeService", "ValidationReport"]
