"""
solgas/rules/use_custom_errors.py
═════════════════════════════════

String revert reasons versus custom errors.

Recognised call shapes:

    require(condition, "literal")
    revert("literal")

Each occurrence is reported with a gas estimate of ``200 + 50 × length``
and a ready-to-paste replacement:

    error InsufficientBalance(uint256 required, uint256 available);
    if (!(balance >= amount)) revert InsufficientBalance(requiredAmount, availableAmount);

Error names come from a phrase table, most specific phrase first, falling
back to PascalCase tokens of the message.  Messages that recur more than
twice inside one contract get an extra high-severity ``duplicate-literal``
finding when the contract is closed.

License: MIT — same as solgas.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from solgas.ast_helper import (
    Node,
    Visitor,
    call_arguments,
    callee_name,
    exit_tag,
    expr_to_string,
    is_string_literal,
    node_name,
)
from solgas.context import RuleContext
from solgas.issues import IssueType, Severity
from solgas.rules.base import Rule

_log = logging.getLogger(__name__)

DUPLICATE_PATTERN = "duplicate-literal"

GAS_BASE = 200
GAS_PER_CHAR = 50
GAS_PER_DUPLICATE = 2000
LONG_MESSAGE = 32
TRUNCATE_AT = 50

# Searched in order; "not paused" must win over "paused"
ERROR_NAME_PHRASES: Tuple[Tuple[str, str], ...] = (
    ("array length mismatch", "ArrayLengthMismatch"),
    ("insufficient balance", "InsufficientBalance"),
    ("insufficient funds", "InsufficientFunds"),
    ("already initialized", "AlreadyInitialized"),
    ("not initialized", "NotInitialized"),
    ("not authorized", "Unauthorized"),
    ("invalid address", "InvalidAddress"),
    ("invalid amount", "InvalidAmount"),
    ("invalid signature", "InvalidSignature"),
    ("amount too large", "AmountTooLarge"),
    ("amount too small", "AmountTooSmall"),
    ("deadline expired", "DeadlineExpired"),
    ("zero address", "ZeroAddress"),
    ("not owner", "NotOwner"),
    ("only owner", "OnlyOwner"),
    ("not paused", "NotPaused"),
    ("paused", "ContractPaused"),
)

_PARAM_VALUES: Tuple[Tuple[str, str], ...] = (
    ("required", "requiredAmount"),
    ("available", "availableAmount"),
    ("account", "msg.sender"),
    ("deadline", "deadline"),
    ("timestamp", "block.timestamp"),
    ("expected", "expectedLength"),
    ("actual", "actualLength"),
)

_TOKEN_SPLIT = re.compile(r"[\s_\-]+")
_NON_WORD = re.compile(r"[^0-9A-Za-z]")


def truncate_message(message: str, limit: int = TRUNCATE_AT) -> str:
    if len(message) > limit:
        return message[:limit] + "..."
    return message


def generate_error_name(message: str) -> str:
    """PascalCase error identifier for a revert reason."""
    lowered = message.lower()
    for phrase, error_name in ERROR_NAME_PHRASES:
        if phrase in lowered:
            return error_name

    words = (_NON_WORD.sub("", token) for token in _TOKEN_SPLIT.split(message))
    name = "".join(w[0].upper() + w[1:].lower() for w in words if w)
    if not name or name[0].isdigit():
        return "CustomError" + name
    return name


def suggest_error_parameters(message: str) -> List[str]:
    """Typed parameter list hinted at by keywords in the message."""
    lowered = message.lower()
    if "balance" in lowered or "amount" in lowered:
        return ["uint256 required", "uint256 available"]
    if "address" in lowered:
        return ["address account"]
    if "deadline" in lowered or "expired" in lowered:
        return ["uint256 deadline", "uint256 timestamp"]
    if "length" in lowered:
        return ["uint256 expected", "uint256 actual"]
    return []


def suggest_parameter_values(params: List[str]) -> str:
    values = []
    for param in params:
        for hint, value in _PARAM_VALUES:
            if hint in param:
                values.append(value)
                break
        else:
            values.append("value")
    return ", ".join(values)


@dataclass(frozen=True)
class ErrorOccurrence:
    message: str
    node: Node
    literal: Node
    condition: Optional[Node] = None


class UseCustomErrorsRule(Rule):
    name = "use-custom-errors"
    description = "Suggests using custom errors instead of string revert messages"
    issue_types = frozenset({IssueType.USE_CUSTOM_ERRORS})

    def __init__(self, context: RuleContext) -> None:
        super().__init__(context)
        self.error_patterns: Dict[str, List[ErrorOccurrence]] = {}
        self.declared_errors: Set[str] = set()

    def setup(self) -> None:
        self.error_patterns.clear()
        self.declared_errors.clear()

    def get_visitors(self) -> Dict[str, Visitor]:
        return {
            "FunctionCall": self._check_revert_pattern,
            "CustomErrorDefinition": self._collect_custom_error,
            "ContractDefinition": self._enter_contract,
            exit_tag("ContractDefinition"): self._report_duplicates,
        }

    # ── collection ───────────────────────────────────────────────────

    def _enter_contract(self, node: Node) -> None:
        self.error_patterns.clear()

    def _collect_custom_error(self, node: Node) -> None:
        name = node_name(node)
        if name:
            self.declared_errors.add(name)

    def _check_revert_pattern(self, node: Node) -> None:
        callee = callee_name(node)
        args = call_arguments(node)
        if callee == "require" and len(args) >= 2 and is_string_literal(args[1]):
            self._record(node, "require", literal=args[1], condition=args[0])
        elif callee == "revert" and len(args) >= 1 and is_string_literal(args[0]):
            self._record(node, "revert", literal=args[0])

    def _record(
        self,
        node: Node,
        kind: str,
        literal: Node,
        condition: Optional[Node] = None,
    ) -> None:
        message = str(literal.get("value", ""))
        self.error_patterns.setdefault(message, []).append(
            ErrorOccurrence(message, node, literal, condition)
        )

        length = len(message)
        self._emit(
            IssueType.USE_CUSTOM_ERRORS,
            Severity.HIGH if length > LONG_MESSAGE else Severity.MEDIUM,
            node,
            message=(
                f'String revert message "{truncate_message(message)}" consumes '
                "unnecessary gas"
            ),
            suggestion=self._suggestion(message, kind, condition),
            gas_impact=(
                f"~{GAS_BASE + length * GAS_PER_CHAR} gas per revert "
                f"({length} character string)"
            ),
        )

    # ── suggestion text ──────────────────────────────────────────────

    def _suggestion(
        self,
        message: str,
        kind: str,
        condition: Optional[Node],
    ) -> str:
        error_name = generate_error_name(message)
        params = suggest_error_parameters(message)
        args = suggest_parameter_values(params) if params else ""

        if error_name in self.declared_errors:
            lines = [f"1. Reuse the custom error already declared: {error_name}"]
        else:
            lines = [
                "1. Define custom error at contract level:",
                f"   error {error_name}({', '.join(params)});",
            ]

        lines.append(f"\n2. Replace {kind} statement:")
        if kind == "require" and condition is not None:
            cond = expr_to_string(condition)
            lines.append(f"   if (!({cond})) revert {error_name}({args});")
        else:
            lines.append(f"   revert {error_name}({args});")
        return "\n".join(lines)

    # ── contract exit ────────────────────────────────────────────────

    def _report_duplicates(self, node: Node) -> None:
        for message, occurrences in self.error_patterns.items():
            count = len(occurrences)
            if count <= 2:
                continue
            error_name = generate_error_name(message)
            saving = count * GAS_PER_DUPLICATE
            _log.debug("revert reason %r repeated %d times", message, count)
            # Anchored on the first literal so it does not collide with the
            # per-call finding at the call site
            self._emit(
                IssueType.USE_CUSTOM_ERRORS,
                Severity.HIGH,
                occurrences[0].literal,
                message=(
                    f'String error "{truncate_message(message)}" is used '
                    f"{count} times"
                ),
                suggestion=(
                    f"Define once as custom error: error {error_name}(); "
                    f"to save {saving} gas"
                ),
                gas_impact=f"~{saving} gas total savings",
                pattern=DUPLICATE_PATTERN,
            )
        self.error_patterns.clear()


__all__ = [
    "DUPLICATE_PATTERN",
    "ERROR_NAME_PHRASES",
    "truncate_message",
    "generate_error_name",
    "suggest_error_parameters",
    "suggest_parameter_values",
    "ErrorOccurrence",
    "UseCustomErrorsRule",
]
