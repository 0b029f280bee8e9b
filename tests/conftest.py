# tests/conftest.py
"""
Shared node builders and fixtures for the solgas test-suite.

Builders produce plain dicts in the ``@solidity-parser/parser`` JSON shape
(``parse(src, {loc: true})``).  Nodes get a fresh, unique source line
unless ``at=(line, column)`` is given, so unrelated nodes never collide on
the (line, column, type) de-duplication key.  Like the real parser,
member and index accesses start at their base expression, and calls and
binary operations at their left-most operand.
"""

import itertools
import json
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import pytest

Node = Dict[str, Any]

_lines = itertools.count(1000)


def _loc(at: Optional[Tuple[int, int]] = None) -> Dict[str, Any]:
    if at is None:
        at = (next(_lines), 0)
    line, column = at
    return {
        "start": {"line": line, "column": column},
        "end": {"line": line, "column": column + 1},
    }


def _start(node: Node) -> Tuple[int, int]:
    start = node["loc"]["start"]
    return (start["line"], start["column"])


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

def make_identifier(name: str, at=None) -> Node:
    return {"type": "Identifier", "name": name, "loc": _loc(at)}


def make_number(number, at=None) -> Node:
    return {
        "type": "NumberLiteral",
        "number": str(number),
        "subdenomination": None,
        "loc": _loc(at),
    }


def make_string(value: str, at=None) -> Node:
    return {
        "type": "StringLiteral",
        "value": value,
        "parts": [value],
        "isUnicode": [False],
        "loc": _loc(at),
    }


def _expr(value) -> Node:
    """Strings become identifiers, ints become number literals."""
    if isinstance(value, str):
        return make_identifier(value)
    if isinstance(value, int):
        return make_number(value)
    return value


def make_binary(op: str, left, right, at=None) -> Node:
    left, right = _expr(left), _expr(right)
    return {
        "type": "BinaryOperation",
        "operator": op,
        "left": left,
        "right": right,
        "loc": _loc(at or _start(left)),
    }


def make_unary(op: str, sub, prefix: bool = False, at=None) -> Node:
    sub = _expr(sub)
    return {
        "type": "UnaryOperation",
        "operator": op,
        "subExpression": sub,
        "isPrefix": prefix,
        "loc": _loc(at or (None if prefix else _start(sub))),
    }


def make_member(expression, member: str) -> Node:
    expression = _expr(expression)
    return {
        "type": "MemberAccess",
        "expression": expression,
        "memberName": member,
        "loc": _loc(_start(expression)),
    }


def make_index(base, index) -> Node:
    base = _expr(base)
    return {
        "type": "IndexAccess",
        "base": base,
        "index": _expr(index),
        "loc": _loc(_start(base)),
    }


def make_call(callee, args: Sequence[Any] = (), at=None) -> Node:
    callee = make_identifier(callee, at) if isinstance(callee, str) else callee
    return {
        "type": "FunctionCall",
        "expression": callee,
        "arguments": [_expr(a) for a in args],
        "names": [],
        "identifiers": [],
        "loc": _loc(_start(callee)),
    }


# ---------------------------------------------------------------------------
# Types and declarations
# ---------------------------------------------------------------------------

def make_elementary(name: str) -> Node:
    return {
        "type": "ElementaryTypeName",
        "name": name,
        "stateMutability": None,
        "loc": _loc(),
    }


def make_user_type(name: str) -> Node:
    return {"type": "UserDefinedTypeName", "namePath": name, "loc": _loc()}


def make_array_type(base) -> Node:
    base = make_elementary(base) if isinstance(base, str) else base
    return {
        "type": "ArrayTypeName",
        "baseTypeName": base,
        "length": None,
        "loc": _loc(),
    }


def make_mapping(key="address", value="uint256") -> Node:
    key = make_elementary(key) if isinstance(key, str) else key
    value = make_elementary(value) if isinstance(value, str) else value
    return {
        "type": "Mapping",
        "keyType": key,
        "valueType": value,
        "loc": _loc(),
    }


def _type(type_name) -> Node:
    return make_elementary(type_name) if isinstance(type_name, str) else type_name


def make_var(
    name: str,
    type_name="uint256",
    state: bool = False,
    const: bool = False,
    immutable: bool = False,
    visibility: str = "default",
    at=None,
) -> Node:
    loc = _loc(at)
    line, column = loc["start"]["line"], loc["start"]["column"]
    node: Node = {
        "type": "VariableDeclaration",
        "typeName": _type(type_name),
        "name": name,
        "identifier": make_identifier(name, (line, column + 8)),
        "expression": None,
        "isStateVar": state,
        "isIndexed": False,
        "storageLocation": None,
        "loc": loc,
    }
    if state:
        node["visibility"] = visibility
        node["isDeclaredConst"] = const
        node["isImmutable"] = immutable
    return node


def make_state_var(name: str, type_name="uint256", **kwargs) -> Node:
    var = make_var(name, type_name, state=True, **kwargs)
    return {
        "type": "StateVariableDeclaration",
        "variables": [var],
        "initialValue": None,
        "loc": var["loc"],
    }


def make_local_decl(name: str, type_name="uint256", init=None) -> Node:
    var = make_var(name, type_name)
    return {
        "type": "VariableDeclarationStatement",
        "variables": [var],
        "initialValue": _expr(init) if init is not None else None,
        "loc": var["loc"],
    }


def make_error_def(name: str, params: Sequence[Node] = ()) -> Node:
    return {
        "type": "CustomErrorDefinition",
        "name": name,
        "parameters": list(params),
        "loc": _loc(),
    }


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

def make_expr_stmt(expression) -> Node:
    expression = _expr(expression)
    return {
        "type": "ExpressionStatement",
        "expression": expression,
        "loc": _loc(_start(expression)),
    }


def _stmt(value) -> Node:
    node = _expr(value)
    if node["type"] in (
        "BinaryOperation", "UnaryOperation", "FunctionCall",
        "Identifier", "MemberAccess", "IndexAccess",
    ):
        return make_expr_stmt(node)
    return node


def make_block(statements: Iterable[Any] = ()) -> Node:
    return {
        "type": "Block",
        "statements": [_stmt(s) for s in statements],
        "loc": _loc(),
    }


def make_unchecked(statements: Iterable[Any] = ()) -> Node:
    return {"type": "UncheckedStatement", "block": make_block(statements), "loc": _loc()}


def make_for(init=None, condition=None, step=None, body: Iterable[Any] = ()) -> Node:
    return {
        "type": "ForStatement",
        "initExpression": init,
        "conditionExpression": _expr(condition) if condition is not None else None,
        "loopExpression": make_expr_stmt(step) if step is not None else None,
        "body": make_block(body),
        "loc": _loc(),
    }


def make_while(condition, body: Iterable[Any] = ()) -> Node:
    return {
        "type": "WhileStatement",
        "condition": _expr(condition),
        "body": make_block(body),
        "loc": _loc(),
    }


def make_do_while(condition, body: Iterable[Any] = ()) -> Node:
    return {
        "type": "DoWhileStatement",
        "condition": _expr(condition),
        "body": make_block(body),
        "loc": _loc(),
    }


def make_counting_loop(bound, body: Iterable[Any] = (), counter: str = "i") -> Node:
    """``for (uint256 i = 0; i < bound; i++) { body }``"""
    return make_for(
        init=make_local_decl(counter, "uint256", 0),
        condition=make_binary("<", counter, bound),
        step=make_unary("++", counter),
        body=body,
    )


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

def make_function(
    name: Optional[str],
    params: Sequence[Any] = (),
    body: Optional[Iterable[Any]] = (),
    visibility: str = "public",
    mutability: Optional[str] = None,
    constructor: bool = False,
    fallback: bool = False,
    receive: bool = False,
    at=None,
) -> Node:
    parameters = [
        make_var(p) if isinstance(p, str) else p
        for p in params
    ]
    return {
        "type": "FunctionDefinition",
        "name": name,
        "parameters": parameters,
        "returnParameters": None,
        "body": make_block(body) if body is not None else None,
        "visibility": visibility,
        "modifiers": [],
        "override": None,
        "isConstructor": constructor,
        "isReceiveEther": receive,
        "isFallback": fallback,
        "isVirtual": False,
        "stateMutability": mutability,
        "loc": _loc(at),
    }


def make_contract(name: str, sub_nodes: Iterable[Node] = (), kind: str = "contract") -> Node:
    return {
        "type": "ContractDefinition",
        "name": name,
        "baseContracts": [],
        "subNodes": list(sub_nodes),
        "kind": kind,
        "loc": _loc(),
    }


def make_source_unit(*children: Node) -> Node:
    return {"type": "SourceUnit", "children": list(children), "loc": _loc((1, 0))}


def make_tree(members: Iterable[Node], name: str = "Vault") -> Node:
    """A source unit holding one contract."""
    return make_source_unit(make_contract(name, members))


# ---------------------------------------------------------------------------
# Result helpers
# ---------------------------------------------------------------------------

def issues_of(result, type_value: str) -> List[Any]:
    return [i for i in result.issues if i.type.value == type_value]


def write_tree(path, tree: Node) -> str:
    path.write_text(json.dumps(tree), encoding="utf-8")
    return str(path)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def loop_tree() -> Node:
    """
    uint256 count; uint256[] data;
    function total() public {
        uint256 sum = 0;
        for (uint256 i = 0; i < count; i++) { sum += data[i]; }
    }
    """
    return make_tree([
        make_state_var("count"),
        make_state_var("data", make_array_type("uint256")),
        make_function("total", body=[
            make_local_decl("sum", "uint256", 0),
            make_counting_loop("count", body=[
                make_binary("+=", "sum", make_index("data", "i")),
            ]),
        ]),
    ])


@pytest.fixture
def clean_tree() -> Node:
    """A contract with nothing to report."""
    return make_tree([
        make_state_var("owner", "address"),
        make_function("_check", visibility="internal", body=[]),
    ])
