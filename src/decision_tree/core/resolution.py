"""
Next-node resolution.

``resolve`` maps a node and a free-text answer to the id of the next node.
It is a pure function: it never touches engine state, never mutates the
tree and never raises because an answer failed to match. An unmatched answer
falls through to the node's default edge, and a missing default yields None,
which callers read as "cannot proceed".
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from decision_tree.core.models import Choice, DecisionNode, NodeType, Rule, RuleOperator

# Equal rules tolerate floating point representation noise
EQUALITY_TOLERANCE = 1e-4

_NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_EDGE_PUNCTUATION = ",.!?;:()[]\"'$%"
_TOKEN_SEPARATORS = re.compile(r"[,.!?;:()\[\]\"'$%]+")


def parse_number(text: Optional[str]) -> Optional[float]:
    """Parse ``text`` as a plain decimal literal, or return None."""
    if text is None:
        return None
    candidate = text.strip()
    if not _NUMBER_PATTERN.fullmatch(candidate):
        return None
    return float(candidate)


def extract_number(response: Optional[str]) -> Optional[float]:
    """
    Find the number a free-text answer refers to.

    The whole trimmed answer is tried first. Failing that, each whitespace
    separated word is tried with surrounding punctuation removed ("$150," is
    150), and finally the pieces of the word split on punctuation. The first
    word yielding a number wins.

    Examples:
        >>> extract_number("42")
        42.0
        >>> extract_number("I think around 150 dollars")
        150.0
        >>> extract_number("no idea") is None
        True
    """
    if not response:
        return None
    value = parse_number(response)
    if value is not None:
        return value
    for word in response.split():
        value = parse_number(word.strip(_EDGE_PUNCTUATION))
        if value is not None:
            return value
        for piece in _TOKEN_SEPARATORS.split(word):
            value = parse_number(piece) if piece else None
            if value is not None:
                return value
    return None


def _normalize(text: Optional[str]) -> str:
    return (text or "").strip().casefold()


def match_choice(choices: Iterable[Choice], response: Optional[str]) -> Optional[Choice]:
    """First choice whose key or label equals, or appears inside, the answer.

    Matching is case-insensitive and ignores surrounding whitespace. Blank keys
    and labels never match.
    """
    answer = _normalize(response)
    for choice in choices:
        for candidate in (_normalize(choice.key), _normalize(choice.label)):
            if candidate and (candidate == answer or candidate in answer):
                return choice
    return None


def evaluate_rule(rule: Rule, number: float) -> bool:
    """Test ``number`` against a rule; unknown operators and bad values never match."""
    threshold = parse_number(rule.value)
    if threshold is None:
        return False
    operator = rule.rule_operator
    if operator is RuleOperator.LESS_THAN:
        return number < threshold
    if operator is RuleOperator.LESS_THAN_OR_EQUAL:
        return number <= threshold
    if operator is RuleOperator.GREATER_THAN:
        return number > threshold
    if operator is RuleOperator.GREATER_OR_EQUAL:
        return number >= threshold
    if operator is RuleOperator.EQUAL:
        return abs(number - threshold) < EQUALITY_TOLERANCE
    return False


def match_rule(rules: Iterable[Rule], number: float) -> Optional[Rule]:
    for rule in rules:
        if evaluate_rule(rule, number):
            return rule
    return None


def resolve(node: DecisionNode, response: Optional[str]) -> Optional[str]:
    """Return the id of the node that follows ``node`` given ``response``."""
    kind = node.node_type

    if kind is NodeType.END:
        return None

    if kind is NodeType.TEXT:
        return node.default_next_node_id

    if kind is NodeType.SINGLE_CHOICE and node.choices:
        choice = match_choice(node.choices, response)
        if choice is not None:
            return choice.next_node_id or None
        return node.default_next_node_id

    if kind is NodeType.NUMBER and node.rules:
        number = extract_number(response)
        if number is not None:
            rule = match_rule(node.rules, number)
            if rule is not None:
                return rule.next_node_id or None
        return node.default_next_node_id

    return node.default_next_node_id


__all__ = [
    "EQUALITY_TOLERANCE",
    "parse_number",
    "extract_number",
    "match_choice",
    "evaluate_rule",
    "match_rule",
    "resolve",
]
