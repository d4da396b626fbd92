"""Formatting helpers for CLI presentation."""

from __future__ import annotations

from rich.table import Table

from decision_tree.core.models import DecisionTree
from decision_tree.core.traversal import TraversalResult
from decision_tree.utils.formatting import format_edges


def build_nodes_table(tree: DecisionTree) -> Table:
    """One row per node, start node first, then declaration order."""
    table = Table(title=f"{tree.id or '<unnamed>'} v{tree.version or '?'}")
    table.add_column("Node")
    table.add_column("Type")
    table.add_column("Prompt")
    table.add_column("Edges")

    ordered = sorted(tree.nodes.values(), key=lambda node: node.id != tree.start_node_id)
    for node in ordered:
        node_label = f"[bold]{node.id}[/bold] (start)" if node.id == tree.start_node_id else node.id
        type_label = node.type if node.node_type is not None else f"[yellow]{node.type or '?'}[/yellow]"
        table.add_row(node_label, type_label, node.prompt, "\n".join(format_edges(node)) or "[dim]-[/dim]")
    return table


def build_trail_table(result: TraversalResult) -> Table:
    table = Table(title="Walk")
    table.add_column("#")
    table.add_column("Node")
    table.add_column("Prompt")
    table.add_column("Response")
    table.add_column("Next")

    for step in result.steps:
        table.add_row(
            str(step.number),
            step.node_id,
            step.prompt,
            step.response,
            step.next_node_id or "[red]<none>[/red]",
        )
    return table


__all__ = ["build_nodes_table", "build_trail_table"]
