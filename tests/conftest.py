"""
Shared fixtures for decision tree tests.
"""

import copy
import json

import pytest

YES_NO_TREE = {
    "id": "yes-no",
    "version": "1.0.0",
    "startNodeId": "q1",
    "nodes": {
        "q1": {
            "id": "q1",
            "type": "SingleChoice",
            "prompt": "Did the customer accept the offer?",
            "choices": [
                {"key": "yes", "nextNodeId": "end_yes"},
                {"key": "no", "nextNodeId": "end_no"},
            ],
        },
        "end_yes": {"id": "end_yes", "type": "End", "prompt": "Approved"},
        "end_no": {"id": "end_no", "type": "End", "prompt": "Denied"},
    },
}

CALL_REVIEW_TREE = {
    "id": "call-review",
    "version": "2",
    "startNodeId": "q_reason",
    "nodes": {
        "q_reason": {
            "id": "q_reason",
            "type": "SingleChoice",
            "prompt": "What was the main reason for the call?",
            "choices": [
                {"key": "billing", "label": "Billing Issue", "nextNodeId": "q_amount"},
                {"key": "technical", "label": "Technical Support", "nextNodeId": "q_summary"},
            ],
            "defaultNextNodeId": "q_summary",
        },
        "q_amount": {
            "id": "q_amount",
            "type": "Number",
            "prompt": "What amount was disputed?",
            "rules": [
                {"operator": "LessThan", "value": "100", "nextNodeId": "end_refund"},
                {"operator": "GreaterOrEqual", "value": "100", "nextNodeId": "end_escalate"},
            ],
            "defaultNextNodeId": "end_escalate",
        },
        "q_summary": {
            "id": "q_summary",
            "type": "Text",
            "prompt": "Summarize the problem.",
            "defaultNextNodeId": "end_followup",
        },
        "end_refund": {"id": "end_refund", "type": "End", "prompt": "Refund"},
        "end_escalate": {"id": "end_escalate", "type": "End", "prompt": "Escalate"},
        "end_followup": {"id": "end_followup", "type": "End", "prompt": "Follow up"},
    },
}


@pytest.fixture
def yes_no_data() -> dict:
    return copy.deepcopy(YES_NO_TREE)


@pytest.fixture
def call_review_data() -> dict:
    return copy.deepcopy(CALL_REVIEW_TREE)


@pytest.fixture
def write_tree(tmp_path):
    """Write a tree dict as JSON under tmp_path and return the file path."""

    def _write(data: dict, name: str = "rules.json") -> str:
        path = tmp_path / name
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return str(path)

    return _write
