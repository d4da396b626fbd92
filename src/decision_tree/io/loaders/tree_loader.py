"""
Decision Tree Definition Loader

Reads the structured tree definition (JSON, or YAML which is a superset of
it) into a ``DecisionTree`` and writes trees back out. Decoding only checks
the shape of the document; graph soundness is the validator's job.

Expected format:
{
  "id": "call-review",
  "version": "1.0.0",
  "startNodeId": "q1",
  "nodes": {
    "q1": {"id": "q1", "type": "SingleChoice", "prompt": "...",
           "choices": [{"key": "yes", "label": "Yes", "nextNodeId": "end_yes"}]},
    "end_yes": {"id": "end_yes", "type": "End", "prompt": "Approved"}
  }
}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from decision_tree.core.errors import ParseError
from decision_tree.core.models import DecisionTree

YAML_SUFFIXES = (".yaml", ".yml")

# Every tree field is text; these YAML 1.1 types would rewrite `yes`, `1.10` or
# `2024-01-01` into booleans, numbers and dates.
_TEXT_SCALAR_TAGS = {
    "tag:yaml.org,2002:bool",
    "tag:yaml.org,2002:int",
    "tag:yaml.org,2002:float",
    "tag:yaml.org,2002:timestamp",
}


class TreeYamlLoader(yaml.SafeLoader):
    """SafeLoader that keeps plain scalars as written, apart from nulls."""


TreeYamlLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _TEXT_SCALAR_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _decode(text: str) -> Any:
    # json first: tab-indented JSON is not valid YAML
    body = text.lstrip("\ufeff")
    if body.lstrip().startswith("{"):
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            pass  # may still be a YAML flow mapping
    return yaml.load(body, Loader=TreeYamlLoader)


def parse_tree(text: str, *, source: Optional[str] = None) -> DecisionTree:
    """
    Parse a tree definition without validating its graph.

    Args:
        text: JSON or YAML document
        source: Optional file path used in error messages

    Returns:
        The decoded tree

    Raises:
        ParseError: If the text is malformed or does not have the tree shape
    """
    if text is None or not str(text).strip():
        raise ParseError("Tree definition is empty", source=source)
    try:
        data = _decode(text)
    except yaml.YAMLError as exc:
        raise ParseError("Malformed tree definition", source=source, cause=exc) from exc
    if not isinstance(data, dict):
        raise ParseError(
            f"Tree definition must be a mapping, got {type(data).__name__}",
            source=source,
        )
    try:
        return DecisionTree.model_validate(data)
    except ValidationError as exc:
        raise ParseError("Invalid tree definition", source=source, cause=exc) from exc


def read_tree_file(path: str | Path) -> DecisionTree:
    """Read and parse a tree definition file.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ParseError: If the file cannot be read as UTF-8 text or its content is
            not a tree definition
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Decision tree file not found: {file_path}")
    try:
        text = file_path.read_text(encoding="utf-8-sig")
    except (UnicodeDecodeError, OSError) as exc:
        raise ParseError("Unreadable tree definition", source=str(file_path), cause=exc) from exc
    return parse_tree(text, source=str(file_path))


def tree_to_dict(tree: DecisionTree) -> Dict[str, Any]:
    """Wire-form dictionary of a tree; absent optional fields are omitted."""
    return tree.model_dump(mode="json", by_alias=True, exclude_none=True)


def format_for_path(path: str | Path) -> str:
    return "yaml" if Path(path).suffix.lower() in YAML_SUFFIXES else "json"


def dump_tree(tree: DecisionTree, fmt: str = "json") -> str:
    """Encode a tree as JSON (default) or YAML text."""
    if fmt == "json":
        return tree.model_dump_json(indent=2, by_alias=True, exclude_none=True)
    if fmt == "yaml":
        return yaml.safe_dump(tree_to_dict(tree), sort_keys=False, allow_unicode=True)
    raise ValueError(f"Unsupported tree format: {fmt!r} (expected 'json' or 'yaml')")


def save_tree_file(tree: DecisionTree, path: str | Path, *, fmt: Optional[str] = None) -> Path:
    """Write ``tree`` to ``path``; the format follows the file suffix unless given."""
    file_path = Path(path)
    text = dump_tree(tree, fmt or format_for_path(file_path))
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(text if text.endswith("\n") else text + "\n", encoding="utf-8")
    return file_path


__all__ = [
    "TreeYamlLoader",
    "parse_tree",
    "read_tree_file",
    "tree_to_dict",
    "format_for_path",
    "dump_tree",
    "save_tree_file",
]
