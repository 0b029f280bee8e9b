"""
solgas/rules/public_vs_external.py
══════════════════════════════════

``public`` functions that nothing in the file calls internally.

An ``external`` function reads its arguments straight from calldata, so a
``public`` function that is only ever reached by a message call pays for
nothing.  Reachability comes from the internal-call pre-pass; a bare
``foo()`` or ``this.foo()`` anywhere in the file keeps ``foo`` public.

Severity
────────
  view / pure                        → low
  more than 10 top-level statements  → high
  anything else                      → medium

License: MIT — same as solgas.
"""

from __future__ import annotations

from typing import Dict

from solgas.ast_helper import Node, Visitor, node_list, node_name
from solgas.issues import IssueType, Severity
from solgas.rules.base import Rule

_READ_ONLY_MUTABILITY = frozenset({"view", "pure"})
_LARGE_BODY_STATEMENTS = 10


class PublicVsExternalRule(Rule):
    name = "public-vs-external"
    description = (
        "Suggest changing public functions to external when not called internally"
    )
    issue_types = frozenset({IssueType.PUBLIC_VS_EXTERNAL})

    def get_visitors(self) -> Dict[str, Visitor]:
        return {"FunctionDefinition": self._check_function_visibility}

    def _check_function_visibility(self, node: Node) -> None:
        if node.get("visibility") != "public":
            return
        if node.get("isConstructor") or node.get("isFallback") or node.get("isReceiveEther"):
            return
        name = node_name(node)
        if not name or name in self.context.internal_function_calls:
            return

        body = node.get("body") or {}
        if node.get("stateMutability") in _READ_ONLY_MUTABILITY:
            severity = Severity.LOW
            gas_impact = "Minimal gas savings, but better practice"
        elif len(node_list(body, "statements")) > _LARGE_BODY_STATEMENTS:
            severity = Severity.HIGH
            gas_impact = "Significant savings for complex functions"
        else:
            severity = Severity.MEDIUM
            gas_impact = "~2100 gas per external call"

        self._emit(
            IssueType.PUBLIC_VS_EXTERNAL,
            severity,
            node,
            message=f"Function '{name}' is declared as 'public' but never called internally",
            suggestion=(
                "Change visibility from 'public' to 'external' to save gas on "
                "function calls"
            ),
            gas_impact=gas_impact,
        )


__all__ = ["PublicVsExternalRule"]
