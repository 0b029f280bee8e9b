"""
solgas/context.py
═════════════════

Traversal-scoped state shared by every rule during one file's analysis.

One ``RuleContext`` is owned by one ``GasAnalyzer`` and handed to each rule
instance at construction.  It is reset at the start of every ``analyze``
call and is never shared between files.

License: MIT — same as solgas.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from solgas.issues import GasIssue, IssueType


@dataclass(frozen=True)
class VariableInfo:
    """A contract-level state variable as seen by the pre-pass."""
    name: str
    type: str
    is_array: bool = False
    is_mapping: bool = False
    visibility: str = "internal"


@dataclass
class LoopContext:
    """
    One syntactically enclosing loop.

    ``storage_reads_in_body`` is populated for future use; only the
    condition set drives severity today.
    """
    kind: str
    depth: int
    node: Any
    storage_reads_in_condition: Set[str] = field(default_factory=set)
    storage_reads_in_body: Set[str] = field(default_factory=set)


@dataclass
class RuleContext:
    """
    Shared analysis context.

    Attributes
    ----------
    state_variables         : name → VariableInfo, filled by the pre-pass
    local_variables         : parameters and locals of the current function
    current_function        : name of the function being walked, or None
    loop_stack              : enclosing loops, innermost last
    internal_function_calls : functions invoked without an external call
    contract_name           : name of the analyzed contract
    issues                  : findings in discovery order
    """
    state_variables: Dict[str, VariableInfo] = field(default_factory=dict)
    local_variables: Set[str] = field(default_factory=set)
    current_function: Optional[str] = None
    loop_stack: List[LoopContext] = field(default_factory=list)
    internal_function_calls: Set[str] = field(default_factory=set)
    contract_name: str = ""
    issues: List[GasIssue] = field(default_factory=list)
    _issue_keys: Set[Tuple[int, int, IssueType]] = field(
        default_factory=set, repr=False
    )

    def reset(self) -> None:
        self.state_variables.clear()
        self.local_variables.clear()
        self.current_function = None
        self.loop_stack = []
        self.internal_function_calls.clear()
        self.contract_name = ""
        self.issues = []
        self._issue_keys.clear()

    # ── queries ──────────────────────────────────────────────────────

    def is_storage_variable(self, name: Optional[str]) -> bool:
        """Known state variable not shadowed by a parameter or local."""
        if not name:
            return False
        return name in self.state_variables and name not in self.local_variables

    def is_in_loop(self) -> bool:
        return len(self.loop_stack) > 0

    def get_current_loop(self) -> Optional[LoopContext]:
        if not self.loop_stack:
            return None
        return self.loop_stack[-1]

    # ── mutation ─────────────────────────────────────────────────────

    def add_issue(self, issue: GasIssue) -> bool:
        """
        Append *issue* unless one with the same (line, column, type) was
        already recorded.  Returns True when the issue was inserted.
        """
        if issue.key in self._issue_keys:
            return False
        self._issue_keys.add(issue.key)
        self.issues.append(issue)
        return True


__all__ = ["VariableInfo", "LoopContext", "RuleContext"]
