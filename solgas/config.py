"""
solgas/config.py
════════════════

Run configuration shared by the CLI and library callers.

License: MIT — same as solgas.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from solgas.issues import Severity
from solgas.rules import RuleRegistry, default_registry

OUTPUT_FORMATS: Tuple[str, ...] = ("text", "json", "gcc")


def parse_rule_list(text: Optional[str]) -> Optional[List[str]]:
    """``"a, b,,c"`` → ``["a", "b", "c"]``; None or blank → None."""
    if not text:
        return None
    names = [part.strip() for part in text.split(",") if part.strip()]
    return names or None


@dataclass
class AnalyzerConfig:
    """Tuning knobs for one solgas invocation."""
    rules: Optional[Sequence[str]] = None
    min_severity: Severity = Severity.LOW
    output_format: str = "text"
    color: bool = True
    show_snippets: bool = True

    def validate(self, registry: Optional[RuleRegistry] = None) -> List[str]:
        """Return a list of validation warnings (empty if valid)."""
        registry = registry or default_registry()
        warnings: List[str] = []
        if self.output_format not in OUTPUT_FORMATS:
            warnings.append(
                f"output_format must be one of {', '.join(OUTPUT_FORMATS)}"
            )
        if self.rules is not None:
            if not self.rules:
                warnings.append("rules is empty; nothing will be analyzed")
            for name in self.rules:
                if name not in registry:
                    warnings.append(f"unknown rule: {name}")
        if not isinstance(self.min_severity, Severity):
            warnings.append("min_severity must be a Severity")
        return warnings


__all__ = ["OUTPUT_FORMATS", "parse_rule_list", "AnalyzerConfig"]
