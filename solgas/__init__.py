"""
solgas — Gas-optimization analyzer for Solidity syntax trees
============================================================

Walks a pre-parsed Solidity syntax tree (``@solidity-parser/parser`` JSON
shape) once and reports gas-optimization opportunities found by a set of
independently written rules sharing that single walk.

Core modules
------------
issues
    GasIssue, AnalysisResult and the summary / gas-saving estimate.
ast_helper
    Node accessors, the visitor walk and expression rendering.
context
    The per-file RuleContext shared by all rules.
collectors
    Pre-pass collectors: contract name, state variables, internal calls.
analyzer
    GasAnalyzer, the combined-visitor dispatcher.
rules
    The Rule base class, built-in rules and the RuleRegistry.

Quick start
-----------
>>> from solgas import GasAnalyzer, load_tree
>>> result = GasAnalyzer().analyze(load_tree("Vault.json"), "Vault.sol")
>>> result.summary.total_issues
"""

from __future__ import annotations

import logging

__version__ = "0.2.0"
__license__ = "MIT"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from solgas.analyzer import GasAnalyzer, analyze  # noqa: E402
from solgas.config import AnalyzerConfig  # noqa: E402
from solgas.context import LoopContext, RuleContext, VariableInfo  # noqa: E402
from solgas.errors import (  # noqa: E402
    SolgasError,
    SourceFileError,
    TreeLoadError,
    UnknownRuleError,
)
from solgas.issues import (  # noqa: E402
    AnalysisResult,
    AnalysisSummary,
    GasIssue,
    IssueType,
    Severity,
)
from solgas.loader import load_tree  # noqa: E402
from solgas.rules import Rule, RuleRegistry, create_rules  # noqa: E402

__all__ = [
    "__version__",
    "GasAnalyzer",
    "analyze",
    "AnalyzerConfig",
    "LoopContext",
    "RuleContext",
    "VariableInfo",
    "SolgasError",
    "SourceFileError",
    "TreeLoadError",
    "UnknownRuleError",
    "AnalysisResult",
    "AnalysisSummary",
    "GasIssue",
    "IssueType",
    "Severity",
    "load_tree",
    "Rule",
    "RuleRegistry",
    "create_rules",
]
