"""
solgas/issues.py
════════════════

Finding model shared by the analysis core, the reporter and the CLI.

  GasIssue        — one finding, immutable once created
  AnalysisResult  — ordered findings for one file plus a summary
  AnalysisSummary — totals, per-type / per-severity counts and the
                    heuristic gas-saving estimate

License: MIT — same as solgas.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — ENUMERATIONS
# ═════════════════════════════════════════════════════════════════════════

class Severity(Enum):
    """Issue severity, ordered by ``rank``."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def from_string(cls, s: str) -> Severity:
        """Parse a severity name (case-insensitive)."""
        s_low = s.strip().lower()
        for member in cls:
            if member.value == s_low:
                return member
        raise ValueError(f"unknown severity: {s!r}")


_SEVERITY_RANK: Dict[Severity, int] = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
}


class IssueType(Enum):
    """Closed set of issue tags.  Only the first four are produced by the
    default rule set; the rest are reserved."""
    STORAGE_READ_IN_LOOP = "storage-read-in-loop"
    PUBLIC_VS_EXTERNAL = "public-vs-external"
    STATE_VARIABLE_PACKING = "state-variable-packing"
    USE_CUSTOM_ERRORS = "use-custom-errors"
    ARRAY_LENGTH_CACHING = "array-length-caching"
    STRUCT_CACHING = "struct-caching"
    MAPPING_READ_IN_LOOP = "mapping-read-in-loop"
    UNCHECKED_MATH = "unchecked-math"
    OTHER = "other"


# Heuristic per-issue savings used by the summary
GAS_SAVING_STORAGE_READ_HIGH = 2100
GAS_SAVING_STORAGE_READ_OTHER = 800
GAS_SAVING_FLAT = 100


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — ISSUE
# ═════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class GasIssue:
    """
    A single gas-optimization finding.

    Attributes
    ----------
    type       : IssueType tag
    severity   : Severity
    line       : 1-based line (0 when the node carried no location)
    column     : column as reported by the parser (0 when unknown)
    message    : human-readable description
    suggestion : remediation text, may span several lines
    gas_impact : optional estimate, e.g. ``"~2100 gas per iteration"``
    pattern    : optional sub-pattern name within the type
    rule       : name of the rule that produced the issue
    """
    type: IssueType
    severity: Severity
    line: int
    column: int
    message: str
    suggestion: str
    gas_impact: Optional[str] = None
    pattern: Optional[str] = None
    rule: str = ""

    @property
    def key(self) -> Tuple[int, int, IssueType]:
        """De-duplication key."""
        return (self.line, self.column, self.type)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "type": self.type.value,
            "severity": self.severity.value,
            "line": self.line,
            "column": self.column,
            "message": self.message,
            "suggestion": self.suggestion,
        }
        if self.gas_impact is not None:
            result["gasImpact"] = self.gas_impact
        if self.pattern is not None:
            result["pattern"] = self.pattern
        return result

    def to_gcc_format(self, file: str) -> str:
        """GCC-style one-liner: file:line:col: severity: message [type]."""
        return (
            f"{file}:{self.line}:{self.column}: {self.severity.value}: "
            f"{self.message} [{self.type.value}]"
        )


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — RESULT AND SUMMARY
# ═════════════════════════════════════════════════════════════════════════

def estimate_gas_saving(issue: GasIssue) -> int:
    if issue.type is IssueType.STORAGE_READ_IN_LOOP:
        if issue.severity is Severity.HIGH:
            return GAS_SAVING_STORAGE_READ_HIGH
        return GAS_SAVING_STORAGE_READ_OTHER
    return GAS_SAVING_FLAT


@dataclass
class AnalysisSummary:
    total_issues: int = 0
    by_type: Dict[str, int] = field(default_factory=dict)
    by_severity: Dict[str, int] = field(default_factory=dict)
    estimated_gas_saving: int = 0

    @classmethod
    def from_issues(cls, issues: Iterable[GasIssue]) -> AnalysisSummary:
        """Aggregate counts and the gas-saving estimate over *issues*."""
        summary = cls()
        for issue in issues:
            summary.total_issues += 1
            t = issue.type.value
            s = issue.severity.value
            summary.by_type[t] = summary.by_type.get(t, 0) + 1
            summary.by_severity[s] = summary.by_severity.get(s, 0) + 1
            summary.estimated_gas_saving += estimate_gas_saving(issue)
        return summary

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalIssues": self.total_issues,
            "byType": dict(self.by_type),
            "bySeverity": dict(self.by_severity),
            "estimatedGasSaving": self.estimated_gas_saving,
        }


@dataclass
class AnalysisResult:
    """
    Findings for one file, in discovery order.

    Attributes
    ----------
    file    : path the tree was loaded from (informational only)
    issues  : ordered list of GasIssue
    summary : AnalysisSummary computed from ``issues``
    """
    file: str
    issues: List[GasIssue] = field(default_factory=list)
    summary: AnalysisSummary = field(default_factory=AnalysisSummary)

    @classmethod
    def build(cls, file: str, issues: Iterable[GasIssue]) -> AnalysisResult:
        issue_list = list(issues)
        return cls(
            file=file,
            issues=issue_list,
            summary=AnalysisSummary.from_issues(issue_list),
        )

    def by_severity(self, severity: Severity) -> List[GasIssue]:
        return [i for i in self.issues if i.severity is severity]

    def by_type(self, issue_type: IssueType) -> List[GasIssue]:
        return [i for i in self.issues if i.type is issue_type]

    @property
    def high_count(self) -> int:
        return len(self.by_severity(Severity.HIGH))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "issues": [i.to_dict() for i in self.issues],
            "summary": self.summary.to_dict(),
        }

    def to_json_str(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


__all__ = [
    "Severity",
    "IssueType",
    "GasIssue",
    "AnalysisSummary",
    "AnalysisResult",
    "estimate_gas_saving",
]
