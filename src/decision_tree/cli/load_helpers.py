from __future__ import annotations

"""Shared helpers for loading decision trees with CLI-friendly errors."""

from pathlib import Path

import typer
from rich.console import Console

from decision_tree.core.engine import DecisionTreeEngine
from decision_tree.core.errors import TreeLoadError


def load_or_exit(
    engine: DecisionTreeEngine,
    path: str,
    *,
    console: Console,
    verbose_errors: bool = False,
) -> DecisionTreeEngine:
    if not Path(path).exists():
        console.print(f"[red]Path not found:[/red] {path}")
        raise typer.Exit(code=1)
    try:
        engine.load_file(path)
    except TreeLoadError as err:
        label = err.kind.capitalize()
        if verbose_errors and err.cause:
            console.print(f"[red]{label} error:[/red] {err.message}\n{err.cause}")
        else:
            console.print(f"[red]{label} error:[/red] {err}")
        raise typer.Exit(code=1)
    return engine


__all__ = ["load_or_exit"]
