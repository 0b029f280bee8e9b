"""
solgas/reporter.py
══════════════════

Rendering of ``AnalysisResult`` values.

Output formats
──────────────
  • text : colourful Rust-style rendering with a summary report (default)
  • json : ``{"file", "issues", "summary"}`` document
  • gcc  : ``file:line:column: severity: message [type]`` one-liners

Text layout
───────────
    high[storage-read-in-loop]: Storage variable 'count' is being read ...
      --> Vault.sol:12:28
       |
    12 |         for (uint256 i = 0; i < count; i++) {
       |                                 ^
      = help: Cache 'count' in a local variable before the loop: ...
      = gas: ~2100 gas per iteration

The reporter only consumes the plain result value; it never touches the
syntax tree.

License: MIT — same as solgas.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from termcolor import colored

from solgas.config import AnalyzerConfig
from solgas.issues import AnalysisResult, GasIssue, IssueType, Severity

SEVERITY_COLORS: Dict[Severity, str] = {
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "blue",
}

TYPE_DISPLAY_NAMES: Dict[str, str] = {
    IssueType.STORAGE_READ_IN_LOOP.value: "Storage Reads in Loops",
    IssueType.PUBLIC_VS_EXTERNAL.value: "Public vs External",
    IssueType.STATE_VARIABLE_PACKING.value: "State Variable Packing",
    IssueType.USE_CUSTOM_ERRORS.value: "Use Custom Errors",
    IssueType.UNCHECKED_MATH.value: "Unchecked Math",
}

SCORE_PENALTY: Dict[Severity, int] = {
    Severity.HIGH: 10,
    Severity.MEDIUM: 5,
    Severity.LOW: 2,
}

BAR_CHAR = "█"
BAR_MAX = 20
RULE_WIDTH = 50

NO_ISSUES_MESSAGE = "Excellent! No gas optimization issues found!"


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — HELPERS
# ═════════════════════════════════════════════════════════════════════════

class _Painter:
    """``termcolor.colored`` that can be switched off."""

    def __init__(self, enabled: bool) -> None:
        self.enabled = enabled

    def __call__(
        self,
        text: str,
        color: Optional[str] = None,
        attrs: Optional[List[str]] = None,
    ) -> str:
        if not self.enabled:
            return text
        return colored(text, color, attrs=attrs)


def optimization_score(issues: Iterable[GasIssue]) -> int:
    """100 minus a per-severity penalty for every issue, floored at 0."""
    score = 100
    for issue in issues:
        score -= SCORE_PENALTY[issue.severity]
    return max(0, score)


def filter_result(result: AnalysisResult, min_severity: Severity) -> AnalysisResult:
    """Copy of *result* keeping issues at or above *min_severity*."""
    if min_severity is Severity.LOW:
        return result
    kept = [i for i in result.issues if i.severity.rank >= min_severity.rank]
    return AnalysisResult.build(result.file, kept)


def severity_bar(count: int) -> str:
    return BAR_CHAR * min(count * 2, BAR_MAX)


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — TEXT
# ═════════════════════════════════════════════════════════════════════════

def _render_snippet(
    issue: GasIssue,
    source_lines: Sequence[str],
    severity_color: str,
    paint: _Painter,
) -> List[str]:
    if issue.line < 1 or issue.line > len(source_lines):
        return []
    gutter_w = len(str(issue.line)) + 1
    pipe = paint("|", "blue", attrs=["bold"])
    blank = " " * gutter_w
    number = paint(str(issue.line).rjust(gutter_w), "blue", attrs=["bold"])
    marker = paint("^", severity_color, attrs=["bold"])
    return [
        f" {blank} {pipe}",
        f" {number} {pipe} {source_lines[issue.line - 1].rstrip()}",
        f" {blank} {pipe} {' ' * max(issue.column, 0)}{marker}",
    ]


def _render_issue(
    issue: GasIssue,
    file: str,
    source_lines: Optional[Sequence[str]],
    paint: _Painter,
) -> List[str]:
    color = SEVERITY_COLORS[issue.severity]
    header = paint(
        f"{issue.severity.value}[{issue.type.value}]", color, attrs=["bold"]
    )
    lines = [f"{header}: {paint(issue.message, attrs=['bold'])}"]

    arrow = paint("-->", "blue", attrs=["bold"])
    lines.append(f"  {arrow} {file}:{issue.line}:{issue.column}")

    if source_lines:
        lines.extend(_render_snippet(issue, source_lines, color, paint))

    help_prefix = paint("help", "green", attrs=["bold"])
    suggestion = issue.suggestion.replace("\n", "\n          ")
    lines.append(f"  = {help_prefix}: {suggestion}")
    if issue.gas_impact:
        gas_prefix = paint("gas", "cyan", attrs=["bold"])
        lines.append(f"  = {gas_prefix}: {issue.gas_impact}")
    lines.append("")
    return lines


def _render_summary(result: AnalysisResult, paint: _Painter) -> List[str]:
    summary = result.summary
    lines = [
        paint("Summary Report", attrs=["bold"]),
        paint("═" * RULE_WIDTH, attrs=["dark"]),
        "",
        "  Severity Distribution:",
    ]
    for severity in (Severity.HIGH, Severity.MEDIUM, Severity.LOW):
        count = summary.by_severity.get(severity.value, 0)
        if count:
            label = severity.value.capitalize().ljust(7)
            lines.append(paint(
                f"    {label} │ {severity_bar(count)} {count}",
                SEVERITY_COLORS[severity],
            ))

    lines.append("")
    lines.append("  Issue Types:")
    for type_tag, count in summary.by_type.items():
        name = TYPE_DISPLAY_NAMES.get(type_tag, type_tag)
        lines.append(paint(f"    • {name}: {count}", attrs=["dark"]))

    lines.append("")
    lines.append(f"  Estimated gas saving: ~{summary.estimated_gas_saving} gas")
    score = optimization_score(result.issues)
    if score >= 80:
        score_color = "green"
    elif score >= 50:
        score_color = "yellow"
    else:
        score_color = "red"
    lines.append(
        "  Optimization score: " + paint(f"{score}/100", score_color, attrs=["bold"])
    )
    return lines


def format_text(
    result: AnalysisResult,
    source: Optional[str] = None,
    color: bool = True,
    min_severity: Severity = Severity.LOW,
) -> str:
    """Full human-readable report; *source* enables code snippets."""
    paint = _Painter(color)
    result = filter_result(result, min_severity)
    if not result.issues:
        return paint(NO_ISSUES_MESSAGE, "green", attrs=["bold"]) + "\n"

    source_lines = source.splitlines() if source else None
    lines: List[str] = []
    for issue in result.issues:
        lines.extend(_render_issue(issue, result.file, source_lines, paint))
    lines.extend(_render_summary(result, paint))
    return "\n".join(lines) + "\n"


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — MACHINE FORMATS
# ═════════════════════════════════════════════════════════════════════════

def format_json(result: AnalysisResult) -> str:
    return result.to_json_str() + "\n"


def format_gcc(result: AnalysisResult) -> str:
    if not result.issues:
        return ""
    return "\n".join(i.to_gcc_format(result.file) for i in result.issues) + "\n"


def render(
    result: AnalysisResult,
    config: AnalyzerConfig,
    source: Optional[str] = None,
) -> str:
    """Render *result* as ``config`` asks."""
    if config.output_format == "json":
        return format_json(filter_result(result, config.min_severity))
    if config.output_format == "gcc":
        return format_gcc(filter_result(result, config.min_severity))
    return format_text(
        result,
        source=source if config.show_snippets else None,
        color=config.color,
        min_severity=config.min_severity,
    )


__all__ = [
    "NO_ISSUES_MESSAGE",
    "TYPE_DISPLAY_NAMES",
    "optimization_score",
    "filter_result",
    "severity_bar",
    "format_text",
    "format_json",
    "format_gcc",
    "render",
]
