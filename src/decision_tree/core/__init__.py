"""
Decision tree core.

Provides the immutable tree model, the load-time validator, next-node
resolution and the engine that owns the active tree.

Components:
- DecisionTree / DecisionNode / Choice / Rule: arena-style graph model
- TreeValidator: start node, reference, cycle and reachability checks
- resolve: pure next-node decision for a node and a free-text answer
- DecisionTreeEngine: guarded load/reload plus read-only traversal
- walk: question/answer loop recording a TraversalResult

Example:
    from decision_tree.core import DecisionTreeEngine, walk

    engine = DecisionTreeEngine()
    engine.load_file("rules.json")
    result = walk(engine, lambda node: ask_oracle(node.prompt))
    print(result.outcome)
"""

from decision_tree.core.engine import DecisionTreeEngine
from decision_tree.core.errors import (
    CycleError,
    EngineNotLoadedError,
    ParseError,
    StructuralError,
    TraversalLimitError,
    TreeLoadError,
    UnreachableNodesError,
)
from decision_tree.core.models import Choice, DecisionNode, DecisionTree, NodeType, Rule, RuleOperator
from decision_tree.core.resolution import resolve
from decision_tree.core.traversal import TraversalResult, TraversalStep, walk
from decision_tree.core.validation import TreeValidator, validate_tree

__all__ = [
    "DecisionTree",
    "DecisionNode",
    "Choice",
    "Rule",
    "NodeType",
    "RuleOperator",
    "TreeValidator",
    "validate_tree",
    "resolve",
    "DecisionTreeEngine",
    "walk",
    "TraversalStep",
    "TraversalResult",
    "TreeLoadError",
    "ParseError",
    "StructuralError",
    "CycleError",
    "UnreachableNodesError",
    "EngineNotLoadedError",
    "TraversalLimitError",
]
