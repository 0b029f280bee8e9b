"""
solgas/collectors.py
════════════════════

Pre-pass collectors.  Each one is a standalone full walk over the tree that
fills one part of the ``RuleContext`` before the main rule walk:

  collect_contract_name    — name of the last ``contract``-kind definition
  collect_state_variables  — VariableInfo for every state variable
  collect_internal_calls   — functions reachable without a message call

License: MIT — same as solgas.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from solgas.ast_helper import (
    Node,
    is_identifier,
    node_list,
    node_name,
    node_type,
    visit,
)
from solgas.context import RuleContext, VariableInfo

_log = logging.getLogger(__name__)

DEFAULT_VISIBILITY = "internal"


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — TYPE NAME HELPERS
# ═════════════════════════════════════════════════════════════════════════

def extract_type(type_name: Optional[Node]) -> str:
    """Human-readable label for a TypeName node."""
    if not type_name:
        return "unknown"
    t = node_type(type_name)
    if t == "ElementaryTypeName":
        return node_name(type_name) or "unknown"
    if t == "UserDefinedTypeName":
        return str(type_name.get("namePath") or "unknown")
    if t == "ArrayTypeName":
        return extract_type(type_name.get("baseTypeName")) + "[]"
    if t == "Mapping":
        return "mapping"
    return "complex"


def is_array_type(type_name: Optional[Node]) -> bool:
    return node_type(type_name) == "ArrayTypeName"


def is_mapping_type(type_name: Optional[Node]) -> bool:
    return node_type(type_name) == "Mapping"


def normalize_visibility(visibility: Any) -> str:
    # The parser reports an omitted specifier as "default"
    if not visibility or visibility == "default":
        return DEFAULT_VISIBILITY
    return str(visibility)


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — COLLECTORS
# ═════════════════════════════════════════════════════════════════════════

def collect_contract_name(tree: Any, ctx: RuleContext) -> None:
    """Record the name of the last ``contract`` (not interface/library)."""
    def on_contract(node: Node) -> None:
        if node.get("kind") == "contract":
            ctx.contract_name = node_name(node) or ""

    visit(tree, {"ContractDefinition": on_contract})


def collect_state_variables(tree: Any, ctx: RuleContext) -> None:
    def on_declaration(node: Node) -> None:
        for variable in node_list(node, "variables"):
            name = node_name(variable)
            if not name:
                continue
            type_name = variable.get("typeName")
            ctx.state_variables[name] = VariableInfo(
                name=name,
                type=extract_type(type_name),
                is_array=is_array_type(type_name),
                is_mapping=is_mapping_type(type_name),
                visibility=normalize_visibility(variable.get("visibility")),
            )

    visit(tree, {"StateVariableDeclaration": on_declaration})
    _log.debug("Collected %d state variables", len(ctx.state_variables))


def collect_internal_calls(tree: Any, ctx: RuleContext) -> None:
    """
    ``foo(...)`` records ``foo``; ``this.foo(...)`` records ``foo``.
    """
    def on_call(node: Node) -> None:
        callee = node.get("expression")
        if is_identifier(callee):
            name = node_name(callee)
            if name:
                ctx.internal_function_calls.add(name)
        elif node_type(callee) == "MemberAccess" and is_identifier(
            callee.get("expression"), "this"
        ):
            member = callee.get("memberName")
            if member:
                ctx.internal_function_calls.add(member)

    visit(tree, {"FunctionCall": on_call})
    _log.debug(
        "Collected %d internally called names", len(ctx.internal_function_calls)
    )


__all__ = [
    "extract_type",
    "is_array_type",
    "is_mapping_type",
    "normalize_visibility",
    "collect_contract_name",
    "collect_state_variables",
    "collect_internal_calls",
]
