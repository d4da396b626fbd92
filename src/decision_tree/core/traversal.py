"""
Walk driver.

Runs the question/answer loop a transcript pipeline performs against an
engine: ask for an answer at each node, resolve the next node, and record the
trail until an End node is reached or the walk cannot proceed. How answers
are obtained (human, language model, fixture) is up to the ``answer``
callable.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

from decision_tree.core.engine import DecisionTreeEngine
from decision_tree.core.errors import TraversalLimitError
from decision_tree.core.models import DecisionNode

logger = logging.getLogger(__name__)

AnswerFn = Callable[[DecisionNode], str]

STEP_SEPARATOR = "\n\n---\n\n"


class TraversalStep(BaseModel):
    """One answered question of a walk."""

    number: int
    node_id: str
    node_type: str
    prompt: str
    response: str
    next_node_id: Optional[str] = None


class TraversalResult(BaseModel):
    """Trail of a completed or abandoned walk."""

    tree_id: str
    steps: List[TraversalStep] = Field(default_factory=list)
    end_node_id: Optional[str] = None
    outcome: Optional[str] = None
    stopped_at: Optional[str] = None

    @property
    def completed(self) -> bool:
        return self.end_node_id is not None

    @property
    def path(self) -> List[str]:
        ids = [step.node_id for step in self.steps]
        if self.end_node_id is not None:
            ids.append(self.end_node_id)
        return ids

    def render(self) -> str:
        """Plain-text audit trail of the walk."""
        blocks = [
            f"Question {step.number} (Node: {step.node_id}): {step.prompt}\nAI Response: {step.response}"
            for step in self.steps
        ]
        if self.completed:
            blocks.append(f"End Node: {self.end_node_id}\nOutcome: {self.outcome}")
        elif self.stopped_at is not None:
            blocks.append(f"Stopped at node: {self.stopped_at}\nOutcome: no next node")
        if not blocks:
            return "No results (decision tree processing failed or incomplete)."
        return STEP_SEPARATOR.join(blocks)


def walk(engine: DecisionTreeEngine, answer: AnswerFn, *, max_steps: Optional[int] = None) -> TraversalResult:
    """
    Walk the active tree from its start node.

    Args:
        engine: Engine holding a loaded tree
        answer: Called with each non-End node; returns the free-text answer
        max_steps: Upper bound on answered questions (defaults to node count)

    Returns:
        TraversalResult with every step and, when an End node was reached,
        its id and prompt as the outcome

    Raises:
        EngineNotLoadedError: If the engine has no tree
        TraversalLimitError: If more than ``max_steps`` questions are asked
    """
    limit = engine.node_count if max_steps is None else max_steps
    result = TraversalResult(tree_id=engine.tree_id)
    node = engine.start_node()

    while True:
        logger.debug("Processing node: %s, Type: %s", node.id, node.type)
        if node.is_terminal:
            result.end_node_id = node.id
            result.outcome = node.prompt
            logger.info("Reached end node: %s", node.id)
            return result

        if len(result.steps) >= limit:
            raise TraversalLimitError(limit, node.id)

        response = answer(node)
        next_id = engine.next_node_id(node, response)
        result.steps.append(
            TraversalStep(
                number=len(result.steps) + 1,
                node_id=node.id,
                node_type=node.type,
                prompt=node.prompt,
                response=response,
                next_node_id=next_id,
            )
        )

        if next_id is None:
            logger.warning("No next node determined at %s for response: %r", node.id, response)
            result.stopped_at = node.id
            return result

        next_node = engine.get_node(next_id)
        if next_node is None:
            # only possible if the tree was replaced mid-walk
            logger.error("Next node not found: %s", next_id)
            result.stopped_at = node.id
            return result
        node = next_node


def scripted_answers(answers: List[str]) -> AnswerFn:
    """Answer function replaying ``answers`` in order; raises IndexError when exhausted."""
    remaining = list(answers)

    def _answer(node: DecisionNode) -> str:
        if not remaining:
            raise IndexError(f"No scripted answer left for node '{node.id}'")
        return remaining.pop(0)

    return _answer


__all__ = [
    "AnswerFn",
    "TraversalStep",
    "TraversalResult",
    "walk",
    "scripted_answers",
]
