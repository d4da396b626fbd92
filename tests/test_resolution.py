"""
Tests for next-node resolution.

Tests cover:
- End and Text nodes
- SingleChoice matching (case, substrings, declaration order, fallback)
- Number extraction and rule evaluation
- unknown node types
"""

from decision_tree.core.models import DecisionNode, Rule
from decision_tree.core.resolution import evaluate_rule, extract_number, parse_number, resolve


def _choice_node(choices, default=None, node_type="SingleChoice") -> DecisionNode:
    return DecisionNode.model_validate(
        {"id": "q", "type": node_type, "choices": choices, "defaultNextNodeId": default}
    )


def _number_node(rules, default=None) -> DecisionNode:
    return DecisionNode.model_validate({"id": "n", "type": "Number", "rules": rules, "defaultNextNodeId": default})


BILLING_CHOICES = [
    {"key": "billing", "label": "Billing Issue", "nextNodeId": "q_billing"},
    {"key": "technical", "label": "Technical Support", "nextNodeId": "q_tech"},
]

THRESHOLD_RULES = [
    {"operator": "LessThan", "value": "100", "nextNodeId": "A"},
    {"operator": "GreaterOrEqual", "value": "100", "nextNodeId": "B"},
]


class TestTerminalAndText:
    def test_end_always_none(self):
        node = DecisionNode(id="e", type="End", prompt="Done", default_next_node_id="elsewhere")

        assert resolve(node, "yes") is None
        assert resolve(node, "") is None
        assert resolve(node, "42") is None

    def test_text_ignores_response(self):
        node = DecisionNode(id="t", type="Text", default_next_node_id="next")

        assert resolve(node, "anything at all") == "next"
        assert resolve(node, "") == "next"

    def test_text_without_default(self):
        assert resolve(DecisionNode(id="t", type="Text"), "hello") is None


class TestSingleChoice:
    def test_case_insensitive_and_substring(self):
        node = _choice_node(BILLING_CHOICES, default="q_other")

        assert resolve(node, "Billing") == "q_billing"
        assert resolve(node, "it's a BILLING issue") == "q_billing"
        assert resolve(node, "billing") == "q_billing"

    def test_label_match(self):
        node = _choice_node(BILLING_CHOICES)

        assert resolve(node, "  technical support  ") == "q_tech"

    def test_first_declared_choice_wins(self):
        node = _choice_node(
            [{"key": "yes", "nextNodeId": "end_yes"}, {"key": "no", "nextNodeId": "end_no"}],
        )

        assert resolve(node, "no, well actually yes") == "end_yes"

    def test_blank_labels_do_not_match_everything(self):
        node = _choice_node(
            [{"key": "yes", "nextNodeId": "end_yes"}, {"key": "no", "nextNodeId": "end_no"}],
        )

        assert resolve(node, "Yes please") == "end_yes"
        assert resolve(node, "No") == "end_no"

    def test_unmatched_falls_back_to_default(self):
        node = _choice_node(BILLING_CHOICES, default="q_other")

        assert resolve(node, "the customer wanted to chat") == "q_other"

    def test_unmatched_without_default(self):
        assert resolve(_choice_node(BILLING_CHOICES), "something else") is None

    def test_no_choices_uses_default(self):
        assert resolve(_choice_node(None, default="d"), "billing") == "d"

    def test_type_is_case_insensitive(self):
        node = _choice_node(BILLING_CHOICES, node_type="singlechoice")

        assert resolve(node, "Billing") == "q_billing"

    def test_resolution_is_deterministic(self):
        node = _choice_node(BILLING_CHOICES, default="q_other")
        before = node.model_dump()

        results = {resolve(node, "Billing Issue") for _ in range(5)}

        assert results == {"q_billing"}
        assert node.model_dump() == before


class TestNumber:
    def test_first_rule_wins(self):
        node = _number_node(THRESHOLD_RULES)

        assert resolve(node, "42") == "A"
        assert resolve(node, "100") == "B"

    def test_number_extracted_from_free_text(self):
        node = _number_node(THRESHOLD_RULES)

        assert resolve(node, "I think around 150 dollars") == "B"
        assert resolve(node, "It was $99.50, roughly.") == "A"

    def test_equal_tolerates_float_noise(self):
        node = _number_node([{"operator": "Equal", "value": "100", "nextNodeId": "exact"}], default="other")

        assert resolve(node, "100.00001") == "exact"
        assert resolve(node, "100.001") == "other"

    def test_no_number_falls_back_to_default(self):
        node = _number_node(THRESHOLD_RULES, default="unknown")

        assert resolve(node, "the customer did not say") == "unknown"

    def test_no_number_without_default(self):
        assert resolve(_number_node(THRESHOLD_RULES), "no idea") is None

    def test_no_rule_matches(self):
        node = _number_node([{"operator": "GreaterThan", "value": "10", "nextNodeId": "big"}], default="small")

        assert resolve(node, "3") == "small"

    def test_bad_rule_value_skipped(self):
        node = _number_node(
            [
                {"operator": "Equal", "value": "abc", "nextNodeId": "never"},
                {"operator": "GreaterThan", "value": "0", "nextNodeId": "positive"},
            ]
        )

        assert resolve(node, "5") == "positive"

    def test_no_rules_uses_default(self):
        assert resolve(_number_node(None, default="d"), "5") == "d"


class TestRuleEvaluation:
    def test_operators(self):
        assert evaluate_rule(Rule(operator="LessThan", value="10"), 9.5)
        assert not evaluate_rule(Rule(operator="LessThan", value="10"), 10)
        assert evaluate_rule(Rule(operator="LessThanOrEqual", value="10"), 10)
        assert evaluate_rule(Rule(operator="GreaterThan", value="10"), 10.5)
        assert not evaluate_rule(Rule(operator="GreaterThan", value="10"), 10)
        assert evaluate_rule(Rule(operator="GreaterOrEqual", value="10"), 10)
        assert evaluate_rule(Rule(operator="Equal", value="-2.5"), -2.5)

    def test_operator_case_insensitive(self):
        assert evaluate_rule(Rule(operator="lessthan", value="1"), 0)

    def test_unknown_operator_never_matches(self):
        assert not evaluate_rule(Rule(operator="Between", value="1"), 1)


class TestNumberExtraction:
    def test_whole_response(self):
        assert extract_number("42") == 42.0
        assert extract_number("  -3.5 ") == -3.5
        assert extract_number("1e3") == 1000.0

    def test_first_numeric_word(self):
        assert extract_number("about 7 or 8 items") == 7.0
        assert extract_number("Total: 12!") == 12.0

    def test_no_number(self):
        assert extract_number("nothing here") is None
        assert extract_number("") is None
        assert extract_number(None) is None

    def test_special_floats_rejected(self):
        assert parse_number("nan") is None
        assert parse_number("inf") is None
        assert parse_number("1_000") is None


class TestUnknownType:
    def test_unknown_type_uses_default(self):
        node = DecisionNode(id="r", type="Rating", default_next_node_id="after")

        assert resolve(node, "5 stars") == "after"

    def test_unknown_type_without_default(self):
        assert resolve(DecisionNode(id="r", type="Rating"), "5") is None
