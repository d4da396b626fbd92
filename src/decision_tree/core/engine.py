"""
Decision tree engine.

Owns the single active tree of a process. Loading validates a candidate tree
off to the side and only then publishes it, so a failed reload leaves the
previous tree in effect. Publication is one attribute assignment of a frozen
tree: traversal calls read it without locking and see either the old or the
new tree, never a mix.

Example:
    engine = DecisionTreeEngine()
    engine.load_file("rules.json")
    node = engine.start_node()
    next_id = engine.next_node_id(node, "Yes please")
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import List, Optional

from decision_tree.core.errors import EngineNotLoadedError, TreeLoadError
from decision_tree.core.models import DecisionNode, DecisionTree
from decision_tree.core.resolution import resolve
from decision_tree.core.validation import validate_tree
from decision_tree.io.loaders.tree_loader import parse_tree, read_tree_file
from decision_tree.utils.logging import log_calls

logger = logging.getLogger(__name__)

_LOAD_ERRORS = (TreeLoadError, FileNotFoundError)


class DecisionTreeEngine:
    """Loads, validates and traverses one decision tree at a time."""

    def __init__(self) -> None:
        self._tree: Optional[DecisionTree] = None
        self._lock = threading.Lock()

    # =========================================================================
    # Loading
    # =========================================================================

    @log_calls(__name__, expected=_LOAD_ERRORS)
    def load(self, tree: DecisionTree) -> DecisionTree:
        """Validate ``tree`` and make it the active tree.

        The engine keeps its own copy, so later changes to the caller's object
        cannot reach the active tree. The returned tree is a copy as well.
        """
        with self._lock:
            return self._publish(tree.model_copy(deep=True))

    @log_calls(__name__, expected=_LOAD_ERRORS)
    def load_text(self, text: str, *, source: Optional[str] = None) -> DecisionTree:
        """Parse a JSON/YAML definition, validate it and make it active."""
        with self._lock:
            return self._publish(parse_tree(text, source=source), source=source)

    @log_calls(__name__, expected=_LOAD_ERRORS)
    def load_file(self, path: str | Path) -> DecisionTree:
        """Read a definition file, validate it and make it active."""
        with self._lock:
            return self._publish(read_tree_file(path), source=str(path))

    def ensure_loaded(self, path: str | Path) -> bool:
        """
        Load ``path`` unless a tree is already active.

        Cheap to call on every request: the lock is only taken while no tree
        is active, and the state is checked again once it is held so that
        concurrent first callers load the file exactly once.

        Returns:
            True if this call loaded the tree
        """
        if self._tree is not None:
            return False
        with self._lock:
            if self._tree is not None:
                return False
            logger.info("Loading decision tree from: %s", path)
            self._publish(read_tree_file(path), source=str(path))
            return True

    def _publish(self, tree: DecisionTree, *, source: Optional[str] = None) -> DecisionTree:
        # caller holds self._lock; callers get a copy, never the active tree
        try:
            validate_tree(tree)
        except TreeLoadError as exc:
            if source and not exc.source:
                exc.attach_source(source)
            raise
        previous = self._tree
        self._tree = tree
        if previous is None:
            logger.info("Decision tree '%s' v%s loaded with %d node(s)", tree.id, tree.version, len(tree.nodes))
        else:
            logger.info(
                "Decision tree '%s' v%s replaced '%s' v%s",
                tree.id,
                tree.version,
                previous.id,
                previous.version,
            )
        return tree.model_copy(deep=True)

    # =========================================================================
    # Read access
    # =========================================================================

    def _require_tree(self) -> DecisionTree:
        tree = self._tree
        if tree is None:
            raise EngineNotLoadedError("No decision tree has been loaded")
        return tree

    @property
    def is_loaded(self) -> bool:
        return self._tree is not None

    @property
    def tree_id(self) -> str:
        return self._require_tree().id

    @property
    def version(self) -> str:
        return self._require_tree().version

    @property
    def node_count(self) -> int:
        return len(self._require_tree().nodes)

    def node_ids(self) -> List[str]:
        return list(self._require_tree().nodes)

    def snapshot(self) -> DecisionTree:
        """Deep copy of the active tree, safe to modify or serialize."""
        return self._require_tree().model_copy(deep=True)

    def start_node(self) -> DecisionNode:
        tree = self._require_tree()
        return tree.nodes[tree.start_node_id]

    def get_node(self, node_id: str) -> Optional[DecisionNode]:
        tree = self._tree
        if tree is None or not node_id:
            return None
        return tree.nodes.get(node_id)

    # =========================================================================
    # Traversal
    # =========================================================================

    def next_node_id(self, node: DecisionNode, response: Optional[str]) -> Optional[str]:
        """Id of the node following ``node`` for ``response``; None means stop."""
        return resolve(node, response)

    def next_node(self, node: DecisionNode, response: Optional[str]) -> Optional[DecisionNode]:
        next_id = resolve(node, response)
        if next_id is None:
            return None
        return self.get_node(next_id)


__all__ = ["DecisionTreeEngine"]
