from __future__ import annotations

"""Utilities for resolving the decision tree definition path."""

import os
from pathlib import Path

TREE_PATH_ENV = "DECISION_TREE_PATH"
DEFAULT_TREE_FILENAME = "rules.json"


def default_tree_path() -> str:
    """The configured tree file: $DECISION_TREE_PATH, else ./rules.json."""
    return os.environ.get(TREE_PATH_ENV) or str(Path.cwd() / DEFAULT_TREE_FILENAME)


def tree_path(path: str | None) -> str:
    return path or default_tree_path()


__all__ = ["TREE_PATH_ENV", "DEFAULT_TREE_FILENAME", "default_tree_path", "tree_path"]
