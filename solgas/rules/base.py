"""
solgas/rules/base.py
════════════════════

The capability contract every detection rule implements.

A rule declares which node types it wants to see by returning a visitor
map from ``get_visitors()``.  The analyzer merges the maps of all rules
into one dispatch table, so many rules share a single tree walk while
observing the same scope state through the shared ``RuleContext``.

Subclass Contract
─────────────────
  - Override ``name``, ``description`` and ``issue_types``
  - Implement ``get_visitors()``
  - Optionally override ``setup()`` (before the walk) and ``cleanup()``
    (after the walk) to manage rule-private caches

License: MIT — same as solgas.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, FrozenSet, Optional

from solgas.ast_helper import Visitor, node_loc
from solgas.context import RuleContext
from solgas.issues import GasIssue, IssueType, Severity


class Rule(ABC):
    """Abstract base class for all rules."""

    # ── Metadata (override in subclasses) ────────────────────────────

    name: ClassVar[str] = "base-rule"
    description: ClassVar[str] = ""
    issue_types: ClassVar[FrozenSet[IssueType]] = frozenset()

    def __init__(self, context: RuleContext) -> None:
        self.context = context

    @abstractmethod
    def get_visitors(self) -> Dict[str, Visitor]:
        """Map of node-type tag (or ``"<Type>:exit"``) to callback."""
        ...

    def setup(self) -> None:
        """Called before the walk.  Default implementation does nothing."""
        pass

    def cleanup(self) -> None:
        """Called after the walk.  Default implementation does nothing."""
        pass

    def _emit(
        self,
        issue_type: IssueType,
        severity: Severity,
        node: Any,
        message: str,
        suggestion: str,
        gas_impact: Optional[str] = None,
        pattern: Optional[str] = None,
    ) -> bool:
        """Create an issue located at *node* and hand it to the context."""
        line, column = node_loc(node)
        return self.context.add_issue(GasIssue(
            type=issue_type,
            severity=severity,
            line=line,
            column=column,
            message=message,
            suggestion=suggestion,
            gas_impact=gas_impact,
            pattern=pattern,
            rule=self.name,
        ))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} '{self.name}'>"


__all__ = ["Rule"]
