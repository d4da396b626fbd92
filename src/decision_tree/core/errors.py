from __future__ import annotations

"""Errors raised while loading, validating and walking decision trees."""

import os
from typing import Iterable, Optional, Sequence

from pydantic import ValidationError


class TreeLoadError(RuntimeError):
    """Base class for every failure that aborts a tree load."""

    kind = "load"

    def __init__(self, message: str, *, source: str | None = None, cause: Exception | None = None):
        self.message = message
        self.source = source
        self.cause = cause
        super().__init__(self._build_message())

    def attach_source(self, source: str) -> "TreeLoadError":
        """Record the file the failing definition came from."""
        self.source = source
        self.args = (self._build_message(),)
        return self

    def _build_message(self) -> str:
        base = self.message
        if self.source:
            base = f"{base} ({self._relative_path(self.source)})"
        if isinstance(self.cause, ValidationError):
            detail = self._format_validation_errors(self.cause.errors())
            return f"{base}: {detail}"
        if self.cause:
            return f"{base}: {self.cause}"
        return base

    @staticmethod
    def _relative_path(path: str) -> str:
        try:
            return os.path.relpath(path)
        except ValueError:  # pragma: no cover - different drive on Windows
            return path

    @staticmethod
    def _format_validation_errors(errors: Iterable[dict]) -> str:
        error_list = list(errors)
        snippets = []
        for err in error_list:
            loc = ".".join(str(entry) for entry in err.get("loc", [])) or "<root>"
            msg = err.get("msg") or err.get("type") or "validation error"
            snippets.append(f"{loc}: {msg}")
            if len(snippets) >= 3:
                break
        remaining = len(error_list) - len(snippets)
        if remaining > 0:
            snippets.append(f"... ({remaining} more)")
        return "; ".join(snippets)

    def __str__(self) -> str:
        return self._build_message()


class ParseError(TreeLoadError):
    """The definition is not well-formed structured data of the tree shape."""

    kind = "parse"


class StructuralError(TreeLoadError):
    """Missing start node, id/key mismatch or a reference to an absent node."""

    kind = "structural"

    def __init__(
        self,
        message: str,
        *,
        node_id: Optional[str] = None,
        field: Optional[str] = None,
        target: Optional[str] = None,
        source: str | None = None,
    ):
        self.node_id = node_id
        self.field = field
        self.target = target
        super().__init__(message, source=source)


class CycleError(TreeLoadError):
    """A cycle is reachable from the start node."""

    kind = "cycle"

    def __init__(self, cycle: Sequence[str], *, source: str | None = None):
        self.cycle = list(cycle)
        super().__init__(f"Decision tree contains a cycle: {' -> '.join(self.cycle)}", source=source)


class UnreachableNodesError(TreeLoadError):
    """One or more nodes cannot be reached from the start node."""

    kind = "unreachable"

    def __init__(self, node_ids: Sequence[str], *, source: str | None = None):
        self.node_ids = list(node_ids)
        super().__init__(
            f"Decision tree contains unreachable nodes: {', '.join(self.node_ids)}",
            source=source,
        )


class EngineNotLoadedError(RuntimeError):
    """The engine was queried before any tree was loaded."""


class TraversalLimitError(RuntimeError):
    """A walk took more steps than its bound allows."""

    def __init__(self, limit: int, node_id: str):
        self.limit = limit
        self.node_id = node_id
        super().__init__(f"Walk exceeded {limit} step(s) at node '{node_id}'")


__all__ = [
    "TreeLoadError",
    "ParseError",
    "StructuralError",
    "CycleError",
    "UnreachableNodesError",
    "EngineNotLoadedError",
    "TraversalLimitError",
]
