"""
solgas/rules
════════════

Built-in detection rules and the registry that makes them discoverable.

    ┌─────────────────────────┬──────────┬─────────────────────────────────┐
    │ rule                    │ default  │ looks for                       │
    ├─────────────────────────┼──────────┼─────────────────────────────────┤
    │ storage-read-in-loop    │ enabled  │ SLOADs repeated per iteration   │
    │ public-vs-external      │ enabled  │ public functions never called   │
    │                         │          │ internally                      │
    │ state-variable-packing  │ enabled  │ wasted storage slots            │
    │ use-custom-errors       │ enabled  │ string revert reasons           │
    │ unchecked-math          │ disabled │ checked loop counter updates    │
    └─────────────────────────┴──────────┴─────────────────────────────────┘

Registration order is dispatch order: when two rules listen to the same
node type, the one registered first sees the node first.  storage-read-in-loop
owns the shared loop stack and is therefore registered first.

Adding a rule means subclassing ``Rule`` and registering it below.

License: MIT — same as solgas.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set, Type

from solgas.context import RuleContext
from solgas.errors import UnknownRuleError
from solgas.rules.base import Rule
from solgas.rules.public_vs_external import PublicVsExternalRule
from solgas.rules.state_variable_packing import StateVariablePackingRule
from solgas.rules.storage_read_in_loop import StorageReadInLoopRule
from solgas.rules.unchecked_math import UncheckedMathRule
from solgas.rules.use_custom_errors import UseCustomErrorsRule


class RuleRegistry:
    """
    Registry of available rules, ordered by registration.

    Usage
    -----
    >>> registry = RuleRegistry()
    >>> registry.register(StorageReadInLoopRule)
    >>> registry.register(UncheckedMathRule, enabled=False)
    >>> [cls.name for cls in registry.get_enabled()]
    ['storage-read-in-loop']
    """

    def __init__(self) -> None:
        self._rules: Dict[str, Type[Rule]] = {}
        self._disabled: Set[str] = set()

    def register(self, rule_cls: Type[Rule], enabled: bool = True) -> None:
        """Register a rule class (re-registering keeps its position)."""
        self._rules[rule_cls.name] = rule_cls
        if enabled:
            self._disabled.discard(rule_cls.name)
        else:
            self._disabled.add(rule_cls.name)

    def unregister(self, name: str) -> None:
        self._rules.pop(name, None)
        self._disabled.discard(name)

    def disable(self, name: str) -> None:
        self._require(name)
        self._disabled.add(name)

    def enable(self, name: str) -> None:
        self._require(name)
        self._disabled.discard(name)

    def is_enabled(self, name: str) -> bool:
        return name in self._rules and name not in self._disabled

    def get_all(self) -> List[Type[Rule]]:
        return list(self._rules.values())

    def get_enabled(self) -> List[Type[Rule]]:
        return [
            cls for name, cls in self._rules.items()
            if name not in self._disabled
        ]

    def get_by_name(self, name: str) -> Optional[Type[Rule]]:
        return self._rules.get(name)

    def select(self, names: Iterable[str]) -> List[Type[Rule]]:
        """
        Rule classes for *names* in registration order, enabled or not.

        Raises UnknownRuleError for a name that is not registered.
        """
        wanted = set()
        for name in names:
            self._require(name)
            wanted.add(name)
        return [cls for name, cls in self._rules.items() if name in wanted]

    @property
    def names(self) -> List[str]:
        return sorted(self._rules.keys())

    def _require(self, name: str) -> None:
        if name not in self._rules:
            raise UnknownRuleError(name, self._rules.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)


# Default registry with all built-in rules
_DEFAULT_REGISTRY = RuleRegistry()
_DEFAULT_REGISTRY.register(StorageReadInLoopRule)
_DEFAULT_REGISTRY.register(PublicVsExternalRule)
_DEFAULT_REGISTRY.register(StateVariablePackingRule)
_DEFAULT_REGISTRY.register(UseCustomErrorsRule)
_DEFAULT_REGISTRY.register(UncheckedMathRule, enabled=False)

# Rules run by default, in dispatch order
ALL_RULES: List[Type[Rule]] = _DEFAULT_REGISTRY.get_enabled()


def default_registry() -> RuleRegistry:
    return _DEFAULT_REGISTRY


def create_rules(
    context: RuleContext,
    names: Optional[Iterable[str]] = None,
    registry: Optional[RuleRegistry] = None,
) -> List[Rule]:
    """
    Instantiate rules bound to *context*.

    With ``names=None`` every enabled rule of the registry is created;
    otherwise exactly the named rules, in registration order.
    """
    registry = registry or _DEFAULT_REGISTRY
    if names is None:
        classes = registry.get_enabled()
    else:
        classes = registry.select(names)
    return [cls(context) for cls in classes]


def get_rule_by_name(
    name: str,
    registry: Optional[RuleRegistry] = None,
) -> Optional[Type[Rule]]:
    return (registry or _DEFAULT_REGISTRY).get_by_name(name)


__all__ = [
    "Rule",
    "RuleRegistry",
    "ALL_RULES",
    "default_registry",
    "create_rules",
    "get_rule_by_name",
    "StorageReadInLoopRule",
    "PublicVsExternalRule",
    "StateVariablePackingRule",
    "UseCustomErrorsRule",
    "UncheckedMathRule",
]
