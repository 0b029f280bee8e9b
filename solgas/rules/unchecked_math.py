"""
solgas/rules/unchecked_math.py
══════════════════════════════

Loop counters updated with checked arithmetic.

Since Solidity 0.8 every ``++``/``--`` carries an overflow check.  A loop
counter bounded by its condition cannot overflow, so the check can be
skipped with ``unchecked { ++i; }``.  Flagged, inside a loop and outside
any ``unchecked`` block, on a local identifier:

    i++   ++i   i--   --i   i += 1   i -= 1

Registered but disabled in the default registry.

License: MIT — same as solgas.
"""

from __future__ import annotations

from typing import Dict, Optional

from solgas.ast_helper import (
    LOOP_NODE_TYPES,
    Node,
    Visitor,
    exit_tag,
    is_identifier,
    node_name,
    node_type,
)
from solgas.context import RuleContext
from solgas.issues import IssueType, Severity
from solgas.rules.base import Rule

_STEP_OPERATORS = {"++": "++", "--": "--", "+=": "++", "-=": "--"}


class UncheckedMathRule(Rule):
    name = "unchecked-math"
    description = "Suggests using unchecked blocks for loop counter arithmetic"
    issue_types = frozenset({IssueType.UNCHECKED_MATH})

    def __init__(self, context: RuleContext) -> None:
        super().__init__(context)
        self.unchecked_depth = 0
        self.loop_depth = 0

    def setup(self) -> None:
        self.unchecked_depth = 0
        self.loop_depth = 0

    def get_visitors(self) -> Dict[str, Visitor]:
        # Own loop counter so the rule works without storage-read-in-loop
        visitors: Dict[str, Visitor] = {}
        for loop_type in LOOP_NODE_TYPES:
            visitors[loop_type] = self._enter_loop
            visitors[exit_tag(loop_type)] = self._exit_loop
        visitors["UncheckedStatement"] = self._enter_unchecked
        visitors[exit_tag("UncheckedStatement")] = self._exit_unchecked
        visitors["UnaryOperation"] = self._check_unary
        visitors["BinaryOperation"] = self._check_compound_assignment
        return visitors

    def _enter_loop(self, node: Node) -> None:
        self.loop_depth += 1

    def _exit_loop(self, node: Node) -> None:
        self.loop_depth = max(0, self.loop_depth - 1)

    def _enter_unchecked(self, node: Node) -> None:
        self.unchecked_depth += 1

    def _exit_unchecked(self, node: Node) -> None:
        self.unchecked_depth = max(0, self.unchecked_depth - 1)

    def _check_unary(self, node: Node) -> None:
        operator = node.get("operator")
        if operator not in ("++", "--"):
            return
        self._report(node, node.get("subExpression"), operator)

    def _check_compound_assignment(self, node: Node) -> None:
        operator = node.get("operator")
        if operator not in ("+=", "-="):
            return
        right = node.get("right")
        if node_type(right) != "NumberLiteral" or str(right.get("number")) != "1":
            return
        self._report(node, node.get("left"), operator)

    def _report(self, node: Node, target: Optional[Node], operator: str) -> None:
        if self.unchecked_depth or not self.loop_depth:
            return
        if not is_identifier(target):
            return
        name = node_name(target)
        if name not in self.context.local_variables:
            return

        step = _STEP_OPERATORS[operator]
        if operator == step:
            shown = f"{name}{operator}"
        else:
            shown = f"{name} {operator} 1"
        self._emit(
            IssueType.UNCHECKED_MATH,
            Severity.LOW,
            node,
            message=f"Counter update '{shown}' can use an unchecked block",
            suggestion=f"Wrap in unchecked block: 'unchecked {{ {step}{name}; }}'",
            gas_impact="~50 gas per operation",
        )


__all__ = ["UncheckedMathRule"]
