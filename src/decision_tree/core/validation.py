"""Static soundness checks run once when a decision tree is loaded."""

from __future__ import annotations

from collections import deque
from typing import Iterator, List, Set, Tuple

from decision_tree.core.errors import CycleError, StructuralError, UnreachableNodesError
from decision_tree.core.models import DecisionNode, DecisionTree


class TreeValidator:
    """
    Validates a parsed tree, raising on the first defect found.

    Checks run in a fixed order: start node, node references, cycles
    reachable from the start, then reachability of every node. Validation is
    all-or-nothing; there is no partial result.
    """

    def __init__(self, tree: DecisionTree):
        self.tree = tree

    def validate(self) -> None:
        self._check_start_node()
        self._check_references()
        self._check_cycles()
        self._check_reachability()

    def _check_start_node(self) -> None:
        start = self.tree.start_node_id
        if not start:
            raise StructuralError("Decision tree must have a startNodeId", field="startNodeId")
        if start not in self.tree.nodes:
            raise StructuralError(
                f"Start node '{start}' not found in nodes",
                field="startNodeId",
                target=start,
            )

    def _check_references(self) -> None:
        nodes = self.tree.nodes
        for key, node in nodes.items():
            if node.id != key:
                raise StructuralError(
                    f"Node stored under '{key}' declares id '{node.id}'",
                    node_id=key,
                    field="id",
                    target=node.id,
                )
            for choice in node.choices or ():
                if choice.next_node_id and choice.next_node_id not in nodes:
                    raise StructuralError(
                        f"Node '{key}' choice '{choice.key}' references non-existent node '{choice.next_node_id}'",
                        node_id=key,
                        field=f"choice '{choice.key}'",
                        target=choice.next_node_id,
                    )
            for idx, rule in enumerate(node.rules or ()):
                if rule.next_node_id and rule.next_node_id not in nodes:
                    raise StructuralError(
                        f"Node '{key}' rule[{idx}] references non-existent node '{rule.next_node_id}'",
                        node_id=key,
                        field=f"rule[{idx}]",
                        target=rule.next_node_id,
                    )
            default = node.default_next_node_id
            if default and default not in nodes:
                raise StructuralError(
                    f"Node '{key}' defaultNextNodeId references non-existent node '{default}'",
                    node_id=key,
                    field="defaultNextNodeId",
                    target=default,
                )

    def _check_cycles(self) -> None:
        """Depth-first search from the start node with visited and on-path sets.

        End nodes are leaves here whatever edges they declare.
        """
        nodes = self.tree.nodes
        visited: Set[str] = set()
        on_path: Set[str] = set()
        path: List[str] = []
        stack: List[Tuple[str, Iterator[str]]] = []

        def enter(node_id: str) -> None:
            visited.add(node_id)
            node = nodes[node_id]
            if node.is_terminal:
                return
            on_path.add(node_id)
            path.append(node_id)
            stack.append((node_id, iter(node.outgoing_ids())))

        enter(self.tree.start_node_id)
        while stack:
            node_id, successors = stack[-1]
            for next_id in successors:
                if next_id in on_path:
                    raise CycleError(path[path.index(next_id):] + [next_id])
                if next_id not in visited and next_id in nodes:
                    enter(next_id)
                    break
            else:
                stack.pop()
                on_path.discard(node_id)
                path.pop()

    def _check_reachability(self) -> None:
        nodes = self.tree.nodes
        start = self.tree.start_node_id
        reachable: Set[str] = {start}
        queue = deque([start])
        while queue:
            node = nodes.get(queue.popleft())
            if node is None:
                continue
            for next_id in node.outgoing_ids():
                if next_id not in reachable:
                    reachable.add(next_id)
                    queue.append(next_id)

        unreachable = [node_id for node_id in nodes if node_id not in reachable]
        if unreachable:
            raise UnreachableNodesError(unreachable)


def validate_tree(tree: DecisionTree) -> DecisionTree:
    """Validate ``tree`` and return it unchanged."""
    TreeValidator(tree).validate()
    return tree


def terminal_nodes(tree: DecisionTree) -> List[DecisionNode]:
    return [node for node in tree.nodes.values() if node.is_terminal]


__all__ = ["TreeValidator", "validate_tree", "terminal_nodes"]
