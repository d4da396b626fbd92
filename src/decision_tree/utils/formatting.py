"""Shared text formatting for nodes, choices and rules."""

from typing import List

from decision_tree.core.models import Choice, DecisionNode, Rule, RuleOperator

# Canonical operator symbol mapping - import this instead of duplicating
OPERATOR_SYMBOLS = {
    RuleOperator.LESS_THAN: "<",
    RuleOperator.LESS_THAN_OR_EQUAL: "<=",
    RuleOperator.GREATER_THAN: ">",
    RuleOperator.GREATER_OR_EQUAL: ">=",
    RuleOperator.EQUAL: "==",
}


def get_operator_symbol(operator: str) -> str:
    """Get display symbol for an operator name; unknown names are shown as-is."""
    parsed = RuleOperator.parse(operator)
    return OPERATOR_SYMBOLS[parsed] if parsed is not None else operator


def format_rule(rule: Rule) -> str:
    """
    Format a Number node rule.

    Returns:
        Text like "< 100 -> small_claim"
    """
    return f"{get_operator_symbol(rule.operator)} {rule.value} -> {rule.next_node_id or '<none>'}"


def format_choice(choice: Choice) -> str:
    label = f" ({choice.label})" if choice.label and choice.label != choice.key else ""
    return f"{choice.key}{label} -> {choice.next_node_id or '<none>'}"


def format_edges(node: DecisionNode) -> List[str]:
    """All outgoing edges of a node as display lines, default last."""
    lines = [format_choice(choice) for choice in node.choices or ()]
    lines.extend(format_rule(rule) for rule in node.rules or ())
    if node.default_next_node_id:
        lines.append(f"default -> {node.default_next_node_id}")
    return lines
