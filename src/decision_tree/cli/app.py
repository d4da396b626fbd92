"""
Decision tree CLI: validate definitions, inspect nodes, and walk trees.

The tree file defaults to $DECISION_TREE_PATH, or rules.json in the current
directory. Walks are driven by scripted answers; there are no interactive
prompts.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.logging import RichHandler

from decision_tree.cli.formatters import build_nodes_table, build_trail_table
from decision_tree.cli.load_helpers import load_or_exit
from decision_tree.cli.paths import tree_path
from decision_tree.core.engine import DecisionTreeEngine
from decision_tree.core.traversal import scripted_answers, walk as walk_tree
from decision_tree.core.validation import terminal_nodes
from decision_tree.services.tree_service import TreeService

app = typer.Typer(help="Decision tree CLI: validate definitions, inspect nodes, and walk trees.")
console = Console()
err_console = Console(stderr=True)


def _load_engine(path: str | None, *, verbose_load: bool = False) -> DecisionTreeEngine:
    return load_or_exit(DecisionTreeEngine(), tree_path(path), console=console, verbose_errors=verbose_load)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
) -> None:
    """Configure logging for every command."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise typer.BadParameter(f"Unknown log level: {log_level}", param_hint="--log-level")
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.command()
def validate(
    path: str | None = typer.Argument(None, help="Tree definition file (JSON or YAML)"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Validate a decision tree definition."""
    engine = _load_engine(path, verbose_load=verbose)
    tree = engine.snapshot()

    console.print(f"[green]OK[/green] Loaded {engine.node_count} node(s) from '{tree.id}' v{tree.version}")
    console.print(f"[green]OK[/green] {len(terminal_nodes(tree))} end node(s)")
    console.print("[green]All validations passed[/green]")


@app.command()
def show(
    path: str | None = typer.Argument(None, help="Tree definition file (JSON or YAML)"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Show every node with its type, prompt and edges."""
    engine = _load_engine(path, verbose_load=verbose)
    tree = engine.snapshot()

    console.print(f"[bold]{tree.id}[/bold] (Decision Tree)")
    console.print(f"Version: {tree.version}, Start: {tree.start_node_id}, Nodes: {len(tree.nodes)}")
    console.print(build_nodes_table(tree))


@app.command("next")
def next_node(
    node_id: str = typer.Argument(..., help="Current node id"),
    response: str = typer.Argument(..., help="Free-text answer for the node's prompt"),
    path: str | None = typer.Option(None, "--tree", help="Tree definition file (JSON or YAML)"),
) -> None:
    """Resolve the node that follows NODE_ID for RESPONSE."""
    engine = _load_engine(path)
    node = engine.get_node(node_id)
    if node is None:
        console.print(f"[red]Node not found[/red]: {node_id}")
        raise typer.Exit(code=2)

    next_id = engine.next_node_id(node, response)
    console.print(next_id if next_id is not None else "<none>", markup=False, highlight=False)


@app.command()
def walk(
    path: str | None = typer.Argument(None, help="Tree definition file (JSON or YAML)"),
    answers: List[str] = typer.Option([], "--answer", "-a", help="Answers in question order"),
    as_json: bool = typer.Option(False, "--json", help="Print the trail as JSON"),
) -> None:
    """Walk the tree from its start node using scripted answers."""
    engine = _load_engine(path)

    try:
        result = walk_tree(engine, scripted_answers(answers))
    except IndexError as exc:
        console.print(f"[red]Walk incomplete:[/red] {exc}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(data=result.model_dump())
    else:
        if result.steps:
            console.print(build_trail_table(result))
        console.print(result.render(), markup=False, highlight=False)

    if not result.completed:
        console.print(f"[yellow]No next node at[/yellow] {result.stopped_at}")
        raise typer.Exit(code=1)


@app.command()
def new(
    path: str = typer.Argument(..., help="Where to write the template tree (.json, .yaml or .yml)"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a minimal valid tree to start editing from."""
    target = Path(path)
    if target.exists() and not force:
        console.print(f"[red]File exists[/red]: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    service = TreeService()
    written = service.save(service.new_tree(), target)
    console.print(f"[green]Created[/green] {written}")


__all__ = ["app"]
