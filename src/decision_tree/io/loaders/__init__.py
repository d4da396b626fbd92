from decision_tree.core.errors import (
    CycleError,
    ParseError,
    StructuralError,
    TreeLoadError,
    UnreachableNodesError,
)

from .tree_loader import dump_tree, format_for_path, parse_tree, read_tree_file, save_tree_file, tree_to_dict

__all__ = [
    "parse_tree",
    "read_tree_file",
    "dump_tree",
    "save_tree_file",
    "tree_to_dict",
    "format_for_path",
    "TreeLoadError",
    "ParseError",
    "StructuralError",
    "CycleError",
    "UnreachableNodesError",
]
