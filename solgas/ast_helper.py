#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
solgas/ast_helper.py
════════════════════

Traversal and querying utilities for Solidity syntax trees.

The tree is produced by an ``@solidity-parser/parser``-compatible front end
and consumed here as plain JSON data:

    ┌─────────────────────────────────────────────────────────────────┐
    │  node = {"type": "ForStatement",                                │
    │          "loc": {"start": {"line": 7, "column": 8}, ...},       │
    │          "conditionExpression": {...}, "body": {...}}           │
    └─────────────────────────────────────────────────────────────────┘

Every dict carrying a string ``type`` is a node; its children are the
field values that are nodes or lists of nodes, in field order.

    ┌─────────────────────────────────────────────────────────────────┐
    │  Safe accessors     node_type, node_line, node_column, ...      │
    │  Traversal          iter_children, iter_nodes, visit            │
    │  Predicates         is_identifier, length_access_base, ...      │
    │  Stringification    expr_to_string                              │
    └─────────────────────────────────────────────────────────────────┘

All accessors handle ``None`` and malformed nodes gracefully, returning
defaults (empty string, 0, None) rather than raising.

License: MIT — same as solgas.
"""

from __future__ import annotations

from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
)


# ═══════════════════════════════════════════════════════════════════════════
#  TYPE ALIASES
# ═══════════════════════════════════════════════════════════════════════════

Node = Dict[str, Any]

# A visitor callback may return False to prune the subtree below the node.
Visitor = Callable[[Node], None]
VisitorMap = Mapping[str, Visitor]


# ═══════════════════════════════════════════════════════════════════════════
#  CONSTANTS
# ═══════════════════════════════════════════════════════════════════════════

EXIT_SUFFIX = ":exit"

LOOP_NODE_TYPES: Tuple[str, ...] = (
    "ForStatement",
    "WhileStatement",
    "DoWhileStatement",
)

_MAX_EXPR_DEPTH = 12


def exit_tag(node_type: str) -> str:
    """Visitor key fired after a node's children have been walked."""
    return node_type + EXIT_SUFFIX


# ═══════════════════════════════════════════════════════════════════════════
#  PART 1 — SAFE ACCESSORS
# ═══════════════════════════════════════════════════════════════════════════

def is_node(value: Any) -> bool:
    return isinstance(value, dict) and isinstance(value.get("type"), str)


def node_type(node: Optional[Node]) -> str:
    if not is_node(node):
        return ""
    return node["type"]


def node_name(node: Optional[Node]) -> Optional[str]:
    """The ``name`` field of a node, or None."""
    if not isinstance(node, dict):
        return None
    name = node.get("name")
    return name if isinstance(name, str) else None


def node_loc(node: Optional[Node]) -> Tuple[int, int]:
    """
    Start (line, column) of a node.

    Missing or partial location data degrades to 0 for the missing part.
    """
    if not isinstance(node, dict):
        return (0, 0)
    loc = node.get("loc")
    if not isinstance(loc, dict):
        return (0, 0)
    start = loc.get("start")
    if not isinstance(start, dict):
        return (0, 0)
    return (int(start.get("line") or 0), int(start.get("column") or 0))


def node_line(node: Optional[Node]) -> int:
    return node_loc(node)[0]


def node_column(node: Optional[Node]) -> int:
    return node_loc(node)[1]


def node_list(node: Optional[Node], field_name: str) -> List[Node]:
    """A list-valued field filtered to nodes; [] when absent."""
    if not isinstance(node, dict):
        return []
    value = node.get(field_name)
    if not isinstance(value, list):
        return []
    return [v for v in value if is_node(v)]


# ═══════════════════════════════════════════════════════════════════════════
#  PART 2 — TRAVERSAL
# ═══════════════════════════════════════════════════════════════════════════

def iter_children(node: Optional[Node]) -> Iterator[Node]:
    """Direct child nodes in field order (lists are flattened)."""
    if not isinstance(node, dict):
        return
    for value in node.values():
        if is_node(value):
            yield value
        elif isinstance(value, list):
            for item in value:
                if is_node(item):
                    yield item


def iter_nodes(root: Optional[Node]) -> Iterator[Node]:
    """
    Iterate over a subtree in pre-order, root included.

    Independent of :func:`visit`; used for small ad-hoc scans such as
    loop-condition analysis.
    """
    if not is_node(root):
        return
    stack: List[Node] = [root]
    while stack:
        node = stack.pop()
        yield node
        # Push in reverse so the first field is processed first (LIFO)
        stack.extend(reversed(list(iter_children(node))))


def visit(node: Any, visitors: VisitorMap) -> None:
    """
    Depth-first walk invoking ``visitors[type]`` before a node's children
    and ``visitors[type + ":exit"]`` after them.

    Lists are walked element by element.  Every node is walked in full;
    callback return values are ignored.
    """
    if isinstance(node, list):
        for item in node:
            visit(item, visitors)
        return
    if not is_node(node):
        return

    t = node["type"]
    enter = visitors.get(t)
    if enter is not None:
        enter(node)

    for value in node.values():
        if isinstance(value, (dict, list)):
            visit(value, visitors)

    leave = visitors.get(t + EXIT_SUFFIX)
    if leave is not None:
        leave(node)


# ═══════════════════════════════════════════════════════════════════════════
#  PART 3 — PREDICATES
# ═══════════════════════════════════════════════════════════════════════════

def is_identifier(node: Optional[Node], name: Optional[str] = None) -> bool:
    if node_type(node) != "Identifier":
        return False
    return name is None or node_name(node) == name


def is_string_literal(node: Optional[Node]) -> bool:
    return node_type(node) == "StringLiteral"


def length_access_base(node: Any) -> Optional[str]:
    """
    For ``x.length`` where ``x`` is a bare identifier, return ``"x"``.
    """
    if node_type(node) != "MemberAccess":
        return None
    if node.get("memberName") != "length":
        return None
    base = node.get("expression")
    if not is_identifier(base):
        return None
    return node_name(base)


def callee_name(call: Any) -> Optional[str]:
    """Name of a FunctionCall whose callee is a bare identifier."""
    if node_type(call) != "FunctionCall":
        return None
    callee = call.get("expression")
    if is_identifier(callee):
        return node_name(callee)
    return None


def call_arguments(call: Optional[Node]) -> List[Node]:
    return node_list(call, "arguments")


# ═══════════════════════════════════════════════════════════════════════════
#  PART 4 — STRINGIFICATION
# ═══════════════════════════════════════════════════════════════════════════

def expr_to_string(node: Optional[Node], fallback: str = "condition") -> str:
    """
    Best-effort Solidity source rendering of an expression.

    Unknown constructs render as *fallback*; the result is meant for
    human-readable suggestions, not for re-parsing.
    """
    return _expr(node, fallback, 0)


def _expr(node: Any, fallback: str, depth: int) -> str:
    if depth > _MAX_EXPR_DEPTH or not is_node(node):
        return fallback
    t = node["type"]
    d = depth + 1

    if t == "Identifier":
        return node_name(node) or fallback
    if t == "NumberLiteral":
        number = str(node.get("number", fallback))
        unit = node.get("subdenomination")
        return f"{number} {unit}" if unit else number
    if t == "BooleanLiteral":
        return "true" if node.get("value") else "false"
    if t == "StringLiteral":
        return '"' + str(node.get("value", "")) + '"'
    if t == "HexLiteral":
        return str(node.get("value", fallback))
    if t == "ElementaryTypeName":
        return node_name(node) or fallback
    if t == "MemberAccess":
        base = _expr(node.get("expression"), fallback, d)
        return f"{base}.{node.get('memberName', '')}"
    if t == "IndexAccess":
        base = _expr(node.get("base"), fallback, d)
        index = _expr(node.get("index"), "", d)
        return f"{base}[{index}]"
    if t == "BinaryOperation":
        left = _expr(node.get("left"), fallback, d)
        right = _expr(node.get("right"), fallback, d)
        return f"{left} {node.get('operator', '?')} {right}"
    if t == "UnaryOperation":
        sub = _expr(node.get("subExpression"), fallback, d)
        op = node.get("operator", "")
        if node.get("isPrefix", True):
            return f"{op}{sub}"
        return f"{sub}{op}"
    if t == "FunctionCall":
        callee = _expr(node.get("expression"), fallback, d)
        args = ", ".join(_expr(a, fallback, d) for a in call_arguments(node))
        return f"{callee}({args})"
    if t == "TupleExpression":
        parts = [_expr(c, "", d) for c in node_list(node, "components")]
        return "(" + ", ".join(parts) + ")"
    if t == "Conditional":
        cond = _expr(node.get("condition"), fallback, d)
        yes = _expr(node.get("trueExpression"), fallback, d)
        no = _expr(node.get("falseExpression"), fallback, d)
        return f"{cond} ? {yes} : {no}"
    return fallback


__all__ = [
    "Node",
    "Visitor",
    "VisitorMap",
    "EXIT_SUFFIX",
    "LOOP_NODE_TYPES",
    "exit_tag",
    "is_node",
    "node_type",
    "node_name",
    "node_loc",
    "node_line",
    "node_column",
    "node_list",
    "iter_children",
    "iter_nodes",
    "visit",
    "is_identifier",
    "is_string_literal",
    "length_access_base",
    "callee_name",
    "call_arguments",
    "expr_to_string",
]
