"""
solgas/analyzer.py
══════════════════

The combined-visitor dispatcher: many rules, one tree walk.

    analyze(tree, file_path)
    ────────────────────────
      1. reset the RuleContext
      2. rule.setup() for every rule
      3. pre-pass collectors (contract name, state variables, internal calls)
      4. one depth-first walk with the merged visitor table
      5. rule.cleanup() for every rule
      6. AnalysisResult = issues + summary

Scope bookkeeping wraps the rules' own callbacks:

    FunctionDefinition        scope entered   →  rule callbacks
    FunctionDefinition:exit   rule callbacks  →  scope cleared
    VariableDeclaration       local recorded  →  rule callbacks

so every rule observes fresh locals on function entry and still sees the
function's locals in its own exit callback.

Each ``GasAnalyzer`` owns its context and its rule instances; use one
analyzer per worker to analyze files in parallel.

License: MIT — same as solgas.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from solgas.ast_helper import Node, Visitor, exit_tag, node_list, node_name, visit
from solgas.collectors import (
    collect_contract_name,
    collect_internal_calls,
    collect_state_variables,
)
from solgas.context import RuleContext
from solgas.issues import AnalysisResult
from solgas.rules import RuleRegistry, create_rules
from solgas.rules.base import Rule

_log = logging.getLogger(__name__)

FUNCTION_ENTER = "FunctionDefinition"
FUNCTION_EXIT = exit_tag("FunctionDefinition")
VARIABLE_DECLARATION = "VariableDeclaration"

Collector = Callable[[Any, RuleContext], None]

PRE_PASS: Sequence[Collector] = (
    collect_contract_name,
    collect_state_variables,
    collect_internal_calls,
)


def _function_scope_name(node: Node) -> str:
    name = node_name(node)
    if name:
        return name
    if node.get("isConstructor"):
        return "constructor"
    if node.get("isReceiveEther"):
        return "receive"
    if node.get("isFallback"):
        return "fallback"
    return ""


def _chain(callbacks: List[Visitor]) -> Visitor:
    if len(callbacks) == 1:
        return callbacks[0]

    def run_all(node: Node) -> None:
        for callback in callbacks:
            callback(node)
    return run_all


class GasAnalyzer:
    """
    Runs a set of rules over a Solidity syntax tree.

    Usage
    -----
    >>> analyzer = GasAnalyzer()
    >>> result = analyzer.analyze(tree, "Token.sol")
    >>> result.summary.total_issues

    >>> # Or select specific rules:
    >>> analyzer = GasAnalyzer(rules=["storage-read-in-loop", "unchecked-math"])

    Parameters for constructor
    ─────────────────────────
    registry : RuleRegistry — source of rule classes (default registry)
    rules    : rule names to run (None = all enabled rules)
    """

    def __init__(
        self,
        registry: Optional[RuleRegistry] = None,
        rules: Optional[Iterable[str]] = None,
    ) -> None:
        self.context = RuleContext()
        self.rules: List[Rule] = create_rules(self.context, rules, registry)
        self.stats: Dict[str, float] = {}

    @property
    def rule_names(self) -> List[str]:
        return [rule.name for rule in self.rules]

    def analyze(self, tree: Any, file_path: str) -> AnalysisResult:
        """Analyze one syntax tree; safe to call repeatedly."""
        t0 = time.monotonic()
        ctx = self.context
        ctx.reset()

        for rule in self.rules:
            rule.setup()

        for collector in PRE_PASS:
            collector(tree, ctx)

        visit(tree, self._build_visitors())

        for rule in self.rules:
            rule.cleanup()

        result = AnalysisResult.build(file_path, ctx.issues)
        self.stats["elapsed_ms"] = (time.monotonic() - t0) * 1000.0
        _log.debug(
            "%s: %d issues from %d rules (%.1fms)",
            file_path, result.summary.total_issues, len(self.rules),
            self.stats["elapsed_ms"],
        )
        return result

    # ── dispatch table ───────────────────────────────────────────────

    def _build_visitors(self) -> Dict[str, Visitor]:
        merged: Dict[str, List[Visitor]] = {}
        for rule in self.rules:
            for tag, callback in rule.get_visitors().items():
                merged.setdefault(tag, []).append(callback)

        visitors: Dict[str, Visitor] = {
            tag: _chain(callbacks) for tag, callbacks in merged.items()
        }
        visitors[FUNCTION_ENTER] = self._wrap_function_enter(
            merged.get(FUNCTION_ENTER, [])
        )
        visitors[FUNCTION_EXIT] = self._wrap_function_exit(
            merged.get(FUNCTION_EXIT, [])
        )
        visitors[VARIABLE_DECLARATION] = self._wrap_variable_declaration(
            merged.get(VARIABLE_DECLARATION, [])
        )
        return visitors

    def _wrap_function_enter(self, callbacks: List[Visitor]) -> Visitor:
        ctx = self.context

        def enter(node: Node) -> None:
            ctx.current_function = _function_scope_name(node)
            ctx.local_variables.clear()
            for param in node_list(node, "parameters"):
                name = node_name(param)
                if name:
                    ctx.local_variables.add(name)
            for callback in callbacks:
                callback(node)
        return enter

    def _wrap_function_exit(self, callbacks: List[Visitor]) -> Visitor:
        ctx = self.context

        def leave(node: Node) -> None:
            for callback in callbacks:
                callback(node)
            ctx.current_function = None
            ctx.local_variables.clear()
        return leave

    def _wrap_variable_declaration(self, callbacks: List[Visitor]) -> Visitor:
        ctx = self.context

        def declare(node: Node) -> None:
            if ctx.current_function is not None:
                name = node_name(node)
                if name:
                    ctx.local_variables.add(name)
            for callback in callbacks:
                callback(node)
        return declare


def analyze(
    tree: Any,
    file_path: str,
    rules: Optional[Iterable[str]] = None,
) -> AnalysisResult:
    """One-shot analysis with a fresh analyzer."""
    return GasAnalyzer(rules=rules).analyze(tree, file_path)


__all__ = ["GasAnalyzer", "analyze", "PRE_PASS"]
