"""
Decision tree data models.

A tree is stored arena-style: ``DecisionTree.nodes`` maps node ids to
``DecisionNode`` values and every edge (choice, rule, default) is a plain
node id string. Nothing holds a direct reference to another node, which keeps
the models trivially serializable and lets them stay frozen once loaded.

Wire names are camelCase (``startNodeId``, ``defaultNextNodeId``,
``nextNodeId``) and are matched case-insensitively on decode, so
``StartNodeID`` and ``start_node_id`` are accepted as well.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class NodeType(str, Enum):
    """Kinds of node understood by the traversal engine."""

    END = "End"
    SINGLE_CHOICE = "SingleChoice"
    NUMBER = "Number"
    TEXT = "Text"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["NodeType"]:
        """Resolve a raw type string case-insensitively; unknown types give None."""
        if not value:
            return None
        wanted = value.strip().casefold()
        for member in cls:
            if member.value.casefold() == wanted:
                return member
        return None


class RuleOperator(str, Enum):
    """Comparison operators available to Number node rules."""

    LESS_THAN = "LessThan"
    LESS_THAN_OR_EQUAL = "LessThanOrEqual"
    GREATER_THAN = "GreaterThan"
    GREATER_OR_EQUAL = "GreaterOrEqual"
    EQUAL = "Equal"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["RuleOperator"]:
        """Resolve a raw operator name case-insensitively; unknown names give None."""
        if not value:
            return None
        wanted = value.strip().casefold()
        for member in cls:
            if member.value.casefold() == wanted:
                return member
        return None


def _scalar_to_str(value: Any) -> Any:
    # JSON numbers and booleans in text fields
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


class WireModel(BaseModel):
    """Frozen base model that matches field names case-insensitively."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _match_field_names(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        lookup: Dict[str, str] = {}
        for name, info in cls.model_fields.items():
            alias = info.alias or name
            for candidate in (name, alias, name.replace("_", "")):
                lookup[candidate.casefold()] = alias
        return {lookup.get(str(key).casefold(), key): value for key, value in data.items()}


class Choice(WireModel):
    """Labelled outgoing edge of a SingleChoice node."""

    key: str = ""
    label: str = ""
    next_node_id: str = Field(default="", alias="nextNodeId")

    @field_validator("key", "label", "next_node_id", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _scalar_to_str(value)


class Rule(WireModel):
    """Threshold comparison edge of a Number node."""

    operator: str = ""
    value: str = ""
    next_node_id: str = Field(default="", alias="nextNodeId")

    @field_validator("operator", "value", "next_node_id", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _scalar_to_str(value)

    @property
    def rule_operator(self) -> Optional[RuleOperator]:
        return RuleOperator.parse(self.operator)


class DecisionNode(WireModel):
    """A single vertex of the decision graph."""

    id: str = ""
    prompt: str = ""
    type: str = ""
    choices: Optional[Tuple[Choice, ...]] = None
    rules: Optional[Tuple[Rule, ...]] = None
    default_next_node_id: Optional[str] = Field(default=None, alias="defaultNextNodeId")

    @field_validator("id", "prompt", "type", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _scalar_to_str(value)

    @field_validator("default_next_node_id", mode="before")
    @classmethod
    def _blank_default_is_absent(cls, value):
        value = _scalar_to_str(value)
        return value or None

    @property
    def node_type(self) -> Optional[NodeType]:
        return NodeType.parse(self.type)

    @property
    def is_terminal(self) -> bool:
        return self.node_type is NodeType.END

    def outgoing_ids(self) -> List[str]:
        """
        All edge targets of this node: choices, then rules, then the default.

        Empty choice and rule targets are skipped. The node type is not
        consulted here; callers decide whether End nodes contribute edges.
        """
        targets: List[str] = []
        for choice in self.choices or ():
            if choice.next_node_id:
                targets.append(choice.next_node_id)
        for rule in self.rules or ():
            if rule.next_node_id:
                targets.append(rule.next_node_id)
        if self.default_next_node_id:
            targets.append(self.default_next_node_id)
        return targets


class DecisionTree(WireModel):
    """The complete decision graph as loaded from its structured definition."""

    id: str = ""
    version: str = ""
    start_node_id: str = Field(default="", alias="startNodeId")
    nodes: Dict[str, DecisionNode] = Field(default_factory=dict)

    @field_validator("id", "version", "start_node_id", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _scalar_to_str(value)

    @field_validator("nodes", mode="before")
    @classmethod
    def _normalize_nodes(cls, value):
        if value is None:
            return {}
        if isinstance(value, Mapping):
            return {str(key): node for key, node in value.items()}
        return value

    @field_validator("nodes")
    @classmethod
    def _fill_node_ids(cls, value: Dict[str, DecisionNode]) -> Dict[str, DecisionNode]:
        # A node may omit its id; it then takes the key it is stored under
        return {key: node if node.id else node.model_copy(update={"id": key}) for key, node in value.items()}

    @property
    def start_node(self) -> Optional[DecisionNode]:
        return self.nodes.get(self.start_node_id)

    def get_node(self, node_id: str) -> Optional[DecisionNode]:
        return self.nodes.get(node_id)


__all__ = [
    "NodeType",
    "RuleOperator",
    "WireModel",
    "Choice",
    "Rule",
    "DecisionNode",
    "DecisionTree",
]
