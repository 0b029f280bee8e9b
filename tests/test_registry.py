# tests/test_registry.py
"""
Tests for RuleRegistry, rule creation and AnalyzerConfig validation.
"""

import pytest

from solgas.config import AnalyzerConfig, parse_rule_list
from solgas.context import RuleContext
from solgas.errors import EXIT_INFRA, UnknownRuleError
from solgas.issues import Severity
from solgas.rules import (
    ALL_RULES,
    PublicVsExternalRule,
    RuleRegistry,
    StorageReadInLoopRule,
    UncheckedMathRule,
    create_rules,
    default_registry,
    get_rule_by_name,
)


@pytest.fixture
def registry():
    reg = RuleRegistry()
    reg.register(StorageReadInLoopRule)
    reg.register(PublicVsExternalRule)
    reg.register(UncheckedMathRule, enabled=False)
    return reg


class TestRegistry:

    def test_enabled_in_registration_order(self, registry):
        assert registry.get_enabled() == [StorageReadInLoopRule, PublicVsExternalRule]
        assert len(registry.get_all()) == 3
        assert len(registry) == 3

    def test_enable_and_disable(self, registry):
        registry.enable("unchecked-math")
        registry.disable("storage-read-in-loop")
        assert registry.is_enabled("unchecked-math")
        assert not registry.is_enabled("storage-read-in-loop")
        assert registry.get_enabled() == [PublicVsExternalRule, UncheckedMathRule]

    def test_unknown_names(self, registry):
        with pytest.raises(UnknownRuleError) as info:
            registry.disable("gas-golf")
        assert "gas-golf" in str(info.value)
        assert "storage-read-in-loop" in str(info.value)
        assert info.value.exit_code == EXIT_INFRA
        assert not registry.is_enabled("gas-golf")
        assert registry.get_by_name("gas-golf") is None

    def test_select_keeps_registration_order(self, registry):
        selected = registry.select(["unchecked-math", "storage-read-in-loop"])
        assert selected == [StorageReadInLoopRule, UncheckedMathRule]

    def test_reregister_keeps_position(self, registry):
        registry.register(StorageReadInLoopRule, enabled=False)
        assert registry.get_all()[0] is StorageReadInLoopRule
        assert not registry.is_enabled("storage-read-in-loop")

    def test_unregister(self, registry):
        registry.unregister("public-vs-external")
        assert "public-vs-external" not in registry
        assert registry.names == ["storage-read-in-loop", "unchecked-math"]


class TestDefaults:

    def test_default_rule_set(self):
        assert [cls.name for cls in ALL_RULES] == [
            "storage-read-in-loop",
            "public-vs-external",
            "state-variable-packing",
            "use-custom-errors",
        ]
        assert "unchecked-math" in default_registry()
        assert not default_registry().is_enabled("unchecked-math")

    def test_create_rules_share_context(self):
        ctx = RuleContext()
        rules = create_rules(ctx)
        assert len(rules) == 4
        assert all(rule.context is ctx for rule in rules)

    def test_create_named_rules(self):
        rules = create_rules(RuleContext(), ["unchecked-math"])
        assert [type(r) for r in rules] == [UncheckedMathRule]

    def test_create_unknown_rule(self):
        with pytest.raises(UnknownRuleError):
            create_rules(RuleContext(), ["nope"])

    def test_lookup(self):
        assert get_rule_by_name("public-vs-external") is PublicVsExternalRule
        assert get_rule_by_name("nope") is None

    def test_every_rule_is_described(self):
        for cls in default_registry().get_all():
            assert cls.name
            assert cls.description


class TestConfig:

    def test_parse_rule_list(self):
        assert parse_rule_list(None) is None
        assert parse_rule_list("  ") is None
        assert parse_rule_list(" , ,") is None
        assert parse_rule_list("a, b,,c") == ["a", "b", "c"]

    def test_defaults_are_valid(self):
        assert AnalyzerConfig().validate() == []

    def test_warnings(self):
        config = AnalyzerConfig(
            rules=["storage-read-in-loop", "gas-golf"],
            output_format="xml",
            min_severity="high",
        )
        warnings = config.validate()
        assert "unknown rule: gas-golf" in warnings
        assert any(w.startswith("output_format") for w in warnings)
        assert "min_severity must be a Severity" in warnings

    def test_empty_rule_list(self):
        assert AnalyzerConfig(rules=[]).validate() == [
            "rules is empty; nothing will be analyzed"
        ]

    def test_custom_registry(self, registry):
        config = AnalyzerConfig(rules=["use-custom-errors"], min_severity=Severity.HIGH)
        assert config.validate(registry) == ["unknown rule: use-custom-errors"]
