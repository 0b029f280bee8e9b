"""
solgas/rules/storage_read_in_loop.py
════════════════════════════════════

Storage reads inside loops.

Every storage read costs a cold/warm SLOAD; inside a loop it is paid once
per iteration.  The rule keeps the shared loop stack up to date and flags:

  • bare identifiers naming a storage variable   (high in the condition,
                                                   medium in the body)
  • ``storageArray.length``                      (always high)
  • ``storageVar[key]``                          (high for arrays,
                                                   medium otherwise)

Cache inference: ``local = storageVar`` and ``local = storageArr.length``
mark the storage name as cached for the rest of the run, suppressing
further reports for that exact name.  The cache is never invalidated by
later writes and is tracked by raw name, not value flow.

License: MIT — same as solgas.
"""

from __future__ import annotations

from typing import Dict, Set

from solgas.ast_helper import (
    Node,
    Visitor,
    exit_tag,
    is_identifier,
    iter_nodes,
    length_access_base,
    node_name,
)
from solgas.context import LoopContext, RuleContext
from solgas.issues import IssueType, Severity
from solgas.rules.base import Rule

_LOOP_KINDS: Dict[str, str] = {
    "ForStatement": "for",
    "WhileStatement": "while",
    "DoWhileStatement": "do-while",
}

# Fallback type in cache suggestions for arrays, mappings and structs
_DEFAULT_CACHE_TYPE = "uint256"


class StorageReadInLoopRule(Rule):
    name = "storage-read-in-loop"
    description = "Detects storage variable reads inside loops"
    issue_types = frozenset({IssueType.STORAGE_READ_IN_LOOP})

    def __init__(self, context: RuleContext) -> None:
        super().__init__(context)
        self.cached_variables: Set[str] = set()
        # ids of identifiers already covered by an ``x.length`` check
        self._length_bases: Set[int] = set()

    def setup(self) -> None:
        self.cached_variables.clear()
        self._length_bases.clear()

    def get_visitors(self) -> Dict[str, Visitor]:
        visitors: Dict[str, Visitor] = {}
        for node_kind, loop_kind in _LOOP_KINDS.items():
            visitors[node_kind] = self._loop_entry(loop_kind)
            visitors[exit_tag(node_kind)] = self._exit_loop
        visitors["Identifier"] = self._check_storage_read
        visitors["MemberAccess"] = self._check_member_access
        visitors["IndexAccess"] = self._check_index_access
        visitors["BinaryOperation"] = self._check_binary_operation
        return visitors

    # ── loop stack ───────────────────────────────────────────────────

    def _loop_entry(self, loop_kind: str) -> Visitor:
        def enter(node: Node) -> None:
            self._enter_loop(node, loop_kind)
        return enter

    def _enter_loop(self, node: Node, loop_kind: str) -> None:
        loop = LoopContext(
            kind=loop_kind,
            depth=len(self.context.loop_stack) + 1,
            node=node,
        )
        # for-loops carry ``conditionExpression``, while/do-while ``condition``
        condition = node.get("conditionExpression") or node.get("condition")
        if condition:
            self._analyze_loop_condition(condition, loop)
        self.context.loop_stack.append(loop)

    def _exit_loop(self, node: Node) -> None:
        if self.context.loop_stack:
            self.context.loop_stack.pop()

    def _analyze_loop_condition(self, condition: Node, loop: LoopContext) -> None:
        """Record storage names read by the condition subtree only."""
        for sub in iter_nodes(condition):
            if is_identifier(sub) and self.context.is_storage_variable(node_name(sub)):
                loop.storage_reads_in_condition.add(node_name(sub))
                continue
            base = length_access_base(sub)
            if base and self.context.is_storage_variable(base):
                loop.storage_reads_in_condition.add(f"{base}.length")

    # ── checks ───────────────────────────────────────────────────────

    def _check_storage_read(self, node: Node) -> None:
        name = node_name(node)
        if not self.context.is_in_loop() or not self.context.is_storage_variable(name):
            return
        if id(node) in self._length_bases:
            # base of a .length read, visited right after it
            self._length_bases.discard(id(node))
            return
        if name in self.cached_variables:
            return

        loop = self.context.get_current_loop()
        in_condition = name in loop.storage_reads_in_condition
        if not in_condition:
            loop.storage_reads_in_body.add(name)

        info = self.context.state_variables[name]
        cache_type = _DEFAULT_CACHE_TYPE
        if not (info.is_array or info.is_mapping) and info.type not in ("complex", "unknown"):
            cache_type = info.type

        self._emit(
            IssueType.STORAGE_READ_IN_LOOP,
            Severity.HIGH if in_condition else Severity.MEDIUM,
            node,
            message=(
                f"Storage variable '{name}' is being read inside a {loop.kind} loop"
                + (" condition" if in_condition else "")
            ),
            suggestion=(
                f"Cache '{name}' in a local variable before the loop: "
                f"'{cache_type} _{name} = {name};'"
            ),
        )

    def _check_member_access(self, node: Node) -> None:
        if not self.context.is_in_loop():
            return
        base = length_access_base(node)
        if not base or not self.context.is_storage_variable(base):
            return
        self._length_bases.add(id(node.get("expression")))

        var_name = f"{base}.length"
        if var_name in self.cached_variables:
            return

        loop = self.context.get_current_loop()
        in_condition = var_name in loop.storage_reads_in_condition
        if not in_condition:
            loop.storage_reads_in_body.add(var_name)

        self._emit(
            IssueType.STORAGE_READ_IN_LOOP,
            Severity.HIGH,
            node,
            message=(
                f"Storage array length '{var_name}' is being read inside a loop"
                + (" condition (very inefficient!)" if in_condition else "")
            ),
            suggestion=(
                f"Cache the array length before the loop: "
                f"'uint256 {base}Length = {var_name};'"
            ),
            gas_impact="~2100 gas per iteration" if in_condition else "~800 gas per read",
        )

    def _check_index_access(self, node: Node) -> None:
        if not self.context.is_in_loop():
            return
        base = node.get("base")
        name = node_name(base) if is_identifier(base) else None
        if not self.context.is_storage_variable(name):
            return

        info = self.context.state_variables[name]
        if info.is_array:
            access_type = "array"
            suggestion = (
                "Consider caching array elements if accessing the same "
                "indices multiple times"
            )
        else:
            access_type = "mapping" if info.is_mapping else "storage"
            suggestion = (
                "Cache mapping values in local variables when accessing the "
                "same keys multiple times"
            )

        self.context.get_current_loop().storage_reads_in_body.add(name)
        self._emit(
            IssueType.STORAGE_READ_IN_LOOP,
            Severity.HIGH if info.is_array else Severity.MEDIUM,
            node,
            message=f"Storage {access_type} '{name}' is being accessed inside a loop",
            suggestion=suggestion,
        )

    # ── cache inference ──────────────────────────────────────────────

    def _check_binary_operation(self, node: Node) -> None:
        if node.get("operator") == "=":
            self._track_assignment(node)

    def _track_assignment(self, node: Node) -> None:
        left = node.get("left")
        if not is_identifier(left):
            return
        if node_name(left) not in self.context.local_variables:
            return

        right = node.get("right")
        if is_identifier(right) and self.context.is_storage_variable(node_name(right)):
            self.cached_variables.add(node_name(right))
            return

        base = length_access_base(right)
        if base and self.context.is_storage_variable(base):
            self.cached_variables.add(f"{base}.length")


__all__ = ["StorageReadInLoopRule"]
