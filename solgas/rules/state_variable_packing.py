"""
solgas/rules/state_variable_packing.py
══════════════════════════════════════

Storage-slot packing of state variables.

The EVM stores state in 32-byte slots and packs consecutive variables into
one slot while they fit.  For each contract the rule lays out the storage
variables twice:

    current layout   declaration order, greedy fill
    optimal layout   bucketed by size, same greedy fill, kept only when it
                     beats declaration order

      bucket order:  ┌──────────┬───────────┬──────────┬────────┐
                     │ == 32 B  │ 17 .. 31 B│  9..16 B │ <= 8 B │
                     └──────────┴───────────┴──────────┴────────┘

A variable never straddles two slots.  When the optimal layout needs fewer
slots, every sub-32-byte variable sitting in a partially used slot of the
current layout is reported.  Constants and immutables live in bytecode and
are ignored.

License: MIT — same as solgas.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from solgas.ast_helper import (
    Node,
    Visitor,
    exit_tag,
    node_list,
    node_loc,
    node_name,
    node_type,
)
from solgas.context import RuleContext
from solgas.issues import IssueType, Severity
from solgas.rules.base import Rule

_log = logging.getLogger(__name__)

SLOT_SIZE = 32
GAS_PER_SLOT = 20000


def _build_type_sizes() -> Dict[str, int]:
    sizes: Dict[str, int] = {
        "bool": 1,
        "uint": 32,
        "int": 32,
        "address": 20,
        "address payable": 20,
    }
    for bits in range(8, 257, 8):
        sizes[f"uint{bits}"] = bits // 8
        sizes[f"int{bits}"] = bits // 8
    for length in range(1, 33):
        sizes[f"bytes{length}"] = length
    return sizes


# Elementary types only; anything else occupies a full slot
TYPE_SIZES: Dict[str, int] = _build_type_sizes()


def type_size(type_name: Optional[Node]) -> int:
    """Storage footprint in bytes of a TypeName node."""
    if node_type(type_name) != "ElementaryTypeName":
        return SLOT_SIZE
    return TYPE_SIZES.get(node_name(type_name) or "", SLOT_SIZE)


@dataclass
class PackedVariable:
    name: str
    size: int
    line: int
    column: int
    node: Node = field(repr=False, default_factory=dict)


@dataclass
class StorageSlot:
    variables: List[PackedVariable] = field(default_factory=list)
    used_bytes: int = 0


def layout_slots(variables: Sequence[PackedVariable]) -> List[StorageSlot]:
    """Greedy slot fill in the given order."""
    slots: List[StorageSlot] = []
    current = StorageSlot()
    for var in variables:
        if current.used_bytes + var.size > SLOT_SIZE:
            if current.variables:
                slots.append(current)
            current = StorageSlot()
        current.variables.append(var)
        current.used_bytes += var.size
    if current.variables:
        slots.append(current)
    return slots


def optimize_order(variables: Sequence[PackedVariable]) -> List[PackedVariable]:
    """Stable bucket re-order: full slot, large, medium, small."""
    full: List[PackedVariable] = []
    large: List[PackedVariable] = []
    medium: List[PackedVariable] = []
    small: List[PackedVariable] = []
    for var in variables:
        if var.size == SLOT_SIZE:
            full.append(var)
        elif var.size > 16:
            large.append(var)
        elif var.size > 8:
            medium.append(var)
        else:
            small.append(var)
    return full + large + medium + small


def optimal_layout(variables: Sequence[PackedVariable]) -> List[StorageSlot]:
    """
    Best of the bucketed re-order and the declared order.

    Bucketing is a heuristic: for 20, 12, 20, 12 it needs three slots
    where declaration order needs two.
    """
    current = layout_slots(variables)
    bucketed = layout_slots(optimize_order(variables))
    return min(bucketed, current, key=len)


def find_inefficient(slots: Sequence[StorageSlot]) -> List[PackedVariable]:
    """Sub-slot variables living in slots with unused capacity."""
    found: List[PackedVariable] = []
    for slot in slots:
        if slot.used_bytes >= SLOT_SIZE:
            continue
        found.extend(v for v in slot.variables if v.size < SLOT_SIZE)
    return found


class StateVariablePackingRule(Rule):
    name = "state-variable-packing"
    description = (
        "Detects inefficient state variable ordering that wastes storage slots"
    )
    issue_types = frozenset({IssueType.STATE_VARIABLE_PACKING})

    def __init__(self, context: RuleContext) -> None:
        super().__init__(context)
        self.state_variables: List[PackedVariable] = []
        self.current_contract: str = ""

    def setup(self) -> None:
        self.state_variables = []
        self.current_contract = ""

    def get_visitors(self) -> Dict[str, Visitor]:
        return {
            "ContractDefinition": self._enter_contract,
            exit_tag("ContractDefinition"): self._analyze_storage_layout,
            "StateVariableDeclaration": self._collect_state_variables,
        }

    def _enter_contract(self, node: Node) -> None:
        self.current_contract = node_name(node) or ""
        self.state_variables = []

    def _collect_state_variables(self, node: Node) -> None:
        for variable in node_list(node, "variables"):
            if variable.get("isDeclaredConst") or variable.get("isImmutable"):
                continue
            line, column = node_loc(variable)
            self.state_variables.append(PackedVariable(
                name=node_name(variable) or "",
                size=type_size(variable.get("typeName")),
                line=line,
                column=column,
                node=variable,
            ))

    def _analyze_storage_layout(self, node: Node) -> None:
        if len(self.state_variables) < 2:
            return

        current = layout_slots(self.state_variables)
        optimal = optimal_layout(self.state_variables)
        _log.debug(
            "%s: %d storage slots as declared, %d when packed",
            self.current_contract or "<anonymous>", len(current), len(optimal),
        )
        if len(optimal) < len(current):
            self._report(current, len(current) - len(optimal))

    def _report(self, current: Sequence[StorageSlot], saved: int) -> None:
        severity = Severity.HIGH if saved > 2 else Severity.MEDIUM
        suggestion = self._packing_suggestion(current)
        plural = "s" if saved > 1 else ""
        gas_impact = (
            f"Can save {saved} storage slot{plural} "
            f"(~{saved * GAS_PER_SLOT} gas on deployment)"
        )
        for var in find_inefficient(current):
            self._emit(
                IssueType.STATE_VARIABLE_PACKING,
                severity,
                var.node,
                message=(
                    f"State variable '{var.name}' ({var.size} bytes) is not "
                    "efficiently packed"
                ),
                suggestion=suggestion,
                gas_impact=gas_impact,
            )

    @staticmethod
    def _packing_suggestion(current: Sequence[StorageSlot]) -> str:
        groups: Dict[int, List[str]] = {}
        for slot in current:
            for var in slot.variables:
                groups.setdefault(var.size, []).append(var.name)

        lines = [
            "Reorder state variables to pack them efficiently:",
            "1. Group 32-byte variables together (uint256, bytes32, etc.)",
            "2. Pack smaller variables together:",
        ]
        for size, label in ((1, "bool/uint8/bytes1"), (16, "uint128/bytes16"), (20, "address")):
            if size in groups:
                lines.append(f"   - {label}: {', '.join(groups[size])}")
        return "\n".join(lines)


__all__ = [
    "TYPE_SIZES",
    "type_size",
    "PackedVariable",
    "StorageSlot",
    "layout_slots",
    "optimize_order",
    "optimal_layout",
    "find_inefficient",
    "StateVariablePackingRule",
]
